"""
Filename resolution and file creation engine.

This module turns a naming template plus a value bag into a validated,
collision-free filename and creates the file.
"""

from .models import (
    FileNamerError, MissingAuthorError, InvalidDirectoryError,
    InvalidExtensionError, MissingRequiredFieldsError, TemplateParseError,
    FileAlreadyExistsError, VersionOverflowError, WriteFailureError,
    TokenClass, ResolveMode, CreateRequest, AssembledName,
    CommitResult, PreviewResult
)
from .template import Literal, Token, parse_template, classify_token
from .resolver import ResolvedBase, resolve_base, derived_values, format_version
from .version import ScanOutcome, ScanResult, scan_directory, next_version
from .assembler import FilenameAssembler
from .audit_log import AuditEntry, AuditLog
from .creator import FileCreator
from .store import SettingsStore, StoreResult, CustomToken, Preset

__all__ = [
    # Errors
    "FileNamerError", "MissingAuthorError", "InvalidDirectoryError",
    "InvalidExtensionError", "MissingRequiredFieldsError", "TemplateParseError",
    "FileAlreadyExistsError", "VersionOverflowError", "WriteFailureError",

    # Models
    "TokenClass", "ResolveMode", "CreateRequest", "AssembledName",
    "CommitResult", "PreviewResult",

    # Template resolution
    "Literal", "Token", "parse_template", "classify_token",
    "ResolvedBase", "resolve_base", "derived_values", "format_version",

    # Version scanning
    "ScanOutcome", "ScanResult", "scan_directory", "next_version",

    # Engine
    "FilenameAssembler", "FileCreator",
    "AuditEntry", "AuditLog",

    # Settings
    "SettingsStore", "StoreResult", "CustomToken", "Preset"
]
