"""Commit-mode validation gate.

Checks run in a fixed order and stop at the first failure:

1. an author is configured
2. the save directory is absolute, free of ``..`` and writable
3. the extension is non-empty and already filesystem-safe
4. every user-supplied token has a value (all gaps reported together)
5. for templates without ``{version}``, the target name is still free

Check 5 needs the resolved filename, so it is exposed separately and run
by the assembler after resolution. Nothing here mutates the filesystem.
"""

import asyncio
import logging
import os
from pathlib import Path, PurePath
from typing import Dict, Any, List, Union

from .models import (
    MissingAuthorError,
    InvalidDirectoryError,
    InvalidExtensionError,
    MissingRequiredFieldsError,
    FileAlreadyExistsError,
    CreateRequest,
)
from .template import Token, required_tokens
from ..utils.filename import is_safe_component

# Configure logging
logger = logging.getLogger(__name__)


def check_author(author: str) -> str:
    """Ensure an author is configured.

    Raises:
        MissingAuthorError: If the author is empty
    """
    if not isinstance(author, str) or not author.strip():
        raise MissingAuthorError()
    return author


def is_safe_directory(save_dir: str) -> bool:
    """Check that a path is absolute and has no parent-traversal segment.

    Both the raw and the normalized path are inspected, so ``/a/../b`` is
    rejected even though it normalizes cleanly.
    """
    if not isinstance(save_dir, str) or not save_dir:
        return False

    normalized = os.path.normpath(save_dir)
    if ".." in PurePath(save_dir).parts or ".." in PurePath(normalized).parts:
        return False

    return os.path.isabs(normalized)


def is_writable_directory(directory: Union[str, Path]) -> bool:
    """Probe a directory for write access."""
    return os.path.isdir(directory) and os.access(directory, os.W_OK)


def check_directory(save_dir: str) -> Path:
    """Validate the save directory.

    Returns:
        The normalized directory path

    Raises:
        InvalidDirectoryError: If the path is relative, contains ``..``,
            is not a directory or is not writable
    """
    if not is_safe_directory(save_dir):
        raise InvalidDirectoryError(f"Save directory is not a valid absolute path: {save_dir!r}")

    directory = Path(os.path.normpath(save_dir))
    if not is_writable_directory(directory):
        logger.warning(f"Save directory is not writable: {directory}")
        raise InvalidDirectoryError(f"No write permission for the save directory: {directory}")

    return directory


def check_extension(extension: str) -> str:
    """Ensure the extension is non-empty and unchanged by sanitization.

    Raises:
        InvalidExtensionError: If the extension is empty or unsafe
    """
    if not is_safe_component(extension):
        raise InvalidExtensionError(f"Invalid file extension: {extension!r}")
    return extension


def find_missing_fields(template: str, values: Dict[str, Any]) -> List[str]:
    """Return the placeholders of user-supplied tokens without a value.

    Derived tokens (date, datetime, author, version) and free-form tokens
    are exempt.

    Raises:
        TemplateParseError: If the template is malformed
    """
    missing = []
    for name in required_tokens(template):
        value = (values or {}).get(name)
        if not isinstance(value, str) or not value:
            missing.append(Token(name).placeholder)
    return missing


def check_required_fields(template: str, values: Dict[str, Any]) -> None:
    """Raise if any user-supplied token is empty.

    Raises:
        MissingRequiredFieldsError: Listing every missing token
        TemplateParseError: If the template is malformed
    """
    missing = find_missing_fields(template, values)
    if missing:
        raise MissingRequiredFieldsError(missing)


def check_not_exists(directory: Path, filename: str) -> None:
    """Ensure a filename is still free in the target directory.

    Raises:
        FileAlreadyExistsError: If the file is already present
    """
    if os.path.lexists(directory / filename):
        raise FileAlreadyExistsError(filename)


def validate_request(request: CreateRequest, author: str) -> Path:
    """Run gate checks 1-4 for a commit request.

    Args:
        request: Creation request
        author: Configured author

    Returns:
        The validated save directory

    Raises:
        FileNamerError: Subclass describing the first failed check
    """
    check_author(author)
    directory = check_directory(request.save_dir)
    check_extension(request.extension)
    check_required_fields(request.template, request.values)
    return directory


async def validate_request_async(request: CreateRequest, author: str) -> Path:
    """Run :func:`validate_request` in a worker thread."""
    return await asyncio.to_thread(validate_request, request, author)
