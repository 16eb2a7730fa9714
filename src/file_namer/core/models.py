"""
Data models for filename resolution and file creation.

This module provides the request/result structures passed through the
naming engine and the exception hierarchy used to report why a
creation request was rejected.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List
from pathlib import Path
from enum import Enum


class FileNamerError(Exception):
    """Base exception for naming and creation failures."""

    code = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingAuthorError(FileNamerError):
    """Raised when no author is configured."""

    code = "MissingAuthor"

    def __init__(self, message: str = "No author is configured. Set one with 'file-namer config set author <name>'."):
        super().__init__(message)


class InvalidDirectoryError(FileNamerError):
    """Raised when the save directory is unsafe or not writable."""

    code = "InvalidDirectory"


class InvalidExtensionError(FileNamerError):
    """Raised when the extension is empty or contains unsafe characters."""

    code = "InvalidExtension"


class MissingRequiredFieldsError(FileNamerError):
    """Raised when user-supplied tokens have no value."""

    code = "MissingRequiredFields"

    def __init__(self, missing_tokens: List[str]):
        super().__init__(f"Required fields are empty: {', '.join(missing_tokens)}")
        self.missing_tokens = list(missing_tokens)


class TemplateParseError(FileNamerError):
    """Raised when a naming template is malformed."""

    code = "TemplateParseError"

    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.position = position


class FileAlreadyExistsError(FileNamerError):
    """Raised when a non-versioned filename is already taken."""

    code = "FileAlreadyExists"

    def __init__(self, filename: str):
        super().__init__(f"File already exists: {filename}")
        self.filename = filename


class VersionOverflowError(FileNamerError):
    """Raised when the next version no longer fits in four digits."""

    code = "VersionOverflow"

    def __init__(self, next_version: int):
        super().__init__(
            f"Version limit reached: v{next_version} does not fit the v#### format"
        )
        self.next_version = next_version


class WriteFailureError(FileNamerError):
    """Raised when the new file cannot be written."""

    code = "WriteFailure"


class TokenClass(Enum):
    """How a template token gets its value."""
    DERIVED = "derived"
    FREE_FORM = "free_form"
    USER_SUPPLIED = "user_supplied"


class ResolveMode(Enum):
    """Evaluation mode for template resolution."""
    COMMIT = "commit"
    PREVIEW = "preview"


@dataclass
class CreateRequest:
    """Input shared by commit and preview operations."""
    save_dir: str
    extension: str
    template: str
    values: Dict[str, Any] = field(default_factory=dict)
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CreateRequest":
        """Build a request from a loosely-typed mapping."""
        return cls(
            save_dir=data.get("save_dir") or "",
            extension=data.get("extension") or "",
            template=data.get("template") or "",
            values=dict(data.get("values") or {}),
            description=data.get("description") or "",
        )


@dataclass
class AssembledName:
    """A fully resolved filename ready to be written."""
    filename: str
    directory: Path
    version: Optional[int] = None
    values: Dict[str, Any] = field(default_factory=dict)

    @property
    def path(self) -> Path:
        """Full target path."""
        return self.directory / self.filename


@dataclass
class CommitResult:
    """Outcome of a commit (create) request."""
    success: bool
    message: str
    path: Optional[Path] = None
    error_code: Optional[str] = None
    warning: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the public ``{success, message}`` shape."""
        return {"success": self.success, "message": self.message}


@dataclass
class PreviewResult:
    """Outcome of a preview request. ``preview`` is always displayable."""
    success: bool
    preview: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the public ``{success, preview}`` shape."""
        return {"success": self.success, "preview": self.preview}
