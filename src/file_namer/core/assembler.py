"""Filename assembly in commit and preview modes."""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from .models import (
    AssembledName,
    CreateRequest,
    PreviewResult,
    ResolveMode,
    TemplateParseError,
    VersionOverflowError,
)
from .resolver import (
    VERSION_DIGITS,
    derived_values,
    format_version,
    merge_values,
    resolve_base,
)
from .validation import (
    check_not_exists,
    is_safe_directory,
    is_writable_directory,
    validate_request_async,
)
from .version import next_version
from ..utils.filename import sanitize

# Configure logging
logger = logging.getLogger(__name__)

MAX_VERSION = 10 ** VERSION_DIGITS - 1

PREVIEW_MISSING_AUTHOR = "(Register an author in the settings first)"
PREVIEW_TEMPLATE_ERROR = "(Template parse error)"
PREVIEW_FAILED = "(Preview unavailable)"

VERSION_UNKNOWN = "vXXXX"
VERSION_NO_PERMISSION = "vPERM!"
VERSION_ERROR = "vERR!"


class FilenameAssembler:
    """Resolves a creation request into a final filename.

    The assembler keeps no state between calls; every call reads the
    directory afresh.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """Initialize the assembler.

        Args:
            clock: Source of the current time for ``{date}``/``{datetime}``
        """
        self._clock = clock or datetime.now

    async def assemble(self, request: CreateRequest, author: str) -> AssembledName:
        """Resolve a filename under strict validation.

        Args:
            request: Creation request
            author: Configured author

        Returns:
            AssembledName with the target directory and filename

        Raises:
            FileNamerError: Subclass naming the first failed check
        """
        directory = await validate_request_async(request, author)

        values = merge_values(request.values, derived_values(author, self._clock()))
        base = resolve_base(request.template, values, ResolveMode.COMMIT)
        extension = request.extension

        if not base.has_version:
            filename = base.text + extension
            await asyncio.to_thread(check_not_exists, directory, filename)
            return AssembledName(filename=filename, directory=directory, values=values)

        scan = await next_version(directory, base.match_pattern(extension))
        if scan.next_version > MAX_VERSION:
            raise VersionOverflowError(scan.next_version)

        filename = base.with_version(format_version(scan.next_version)) + extension
        logger.info(f"Allocated {format_version(scan.next_version)} for {base.text}{extension} ({scan.outcome.value})")
        return AssembledName(
            filename=filename,
            directory=directory,
            version=scan.next_version,
            values=values,
        )

    async def preview(self, request: CreateRequest, author: str) -> PreviewResult:
        """Resolve a best-effort display name without touching the disk.

        Never raises: every failure becomes a placeholder string with
        ``success=False`` or a placeholder version such as ``vXXXX``.
        """
        try:
            return await self._preview(request, author)
        except Exception as e:
            logger.error(f"Preview failed: {e}")
            return PreviewResult(success=False, preview=PREVIEW_FAILED)

    async def _preview(self, request: CreateRequest, author: str) -> PreviewResult:
        if not isinstance(author, str) or not author.strip():
            return PreviewResult(success=False, preview=PREVIEW_MISSING_AUTHOR)

        extension = sanitize(request.extension)
        values = merge_values(request.values, derived_values(author, self._clock()))

        try:
            base = resolve_base(request.template, values, ResolveMode.PREVIEW)
        except TemplateParseError as e:
            logger.debug(f"Preview template error: {e}")
            return PreviewResult(success=False, preview=PREVIEW_TEMPLATE_ERROR)

        if not base.has_version:
            return PreviewResult(success=True, preview=base.text + extension)

        version_string = await self._preview_version(request.save_dir, base, extension)
        return PreviewResult(success=True, preview=base.with_version(version_string) + extension)

    async def _preview_version(self, save_dir: str, base, extension: str) -> str:
        """Look up the next version for display, degrading to a marker."""
        if not is_safe_directory(save_dir):
            return VERSION_UNKNOWN

        if not await asyncio.to_thread(is_writable_directory, save_dir):
            return VERSION_NO_PERMISSION

        try:
            scan = await next_version(save_dir, base.match_pattern(extension))
        except Exception as e:
            logger.error(f"Version lookup for preview failed: {e}")
            return VERSION_ERROR

        if scan.next_version > MAX_VERSION:
            return VERSION_ERROR
        return format_version(scan.next_version)
