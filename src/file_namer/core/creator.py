"""File creation: assemble the name, seed the content, log the result."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from .assembler import FilenameAssembler
from .audit_log import AuditEntry, AuditLog
from .content import load_content_template
from .models import (
    CommitResult,
    CreateRequest,
    FileAlreadyExistsError,
    FileNamerError,
    PreviewResult,
    WriteFailureError,
)

# Configure logging
logger = logging.getLogger(__name__)

LOG_WRITE_FAILURE = "LogWriteFailure"


def write_new_file(path: Path, content: bytes) -> None:
    """Create a file that must not exist yet.

    Raises:
        FileExistsError: If another writer created the file first
        OSError: On any other write failure
    """
    with open(path, "xb") as f:
        f.write(content)


class FileCreator:
    """Public entry point for creating and previewing files.

    Both operations return result objects; expected failures never raise.
    """

    def __init__(
        self,
        templates_dir: Path,
        audit_log: AuditLog,
        assembler: Optional[FilenameAssembler] = None,
    ):
        """Initialize the file creator.

        Args:
            templates_dir: Directory of per-category content templates
            audit_log: Log receiving one row per created file
            assembler: Filename assembler (a default one if omitted)
        """
        self.templates_dir = Path(templates_dir)
        self.audit_log = audit_log
        self.assembler = assembler or FilenameAssembler()

    @classmethod
    def from_store(cls, store, assembler: Optional[FilenameAssembler] = None) -> "FileCreator":
        """Build a creator using the store's templates directory and log."""
        return cls(
            templates_dir=store.templates_dir,
            audit_log=AuditLog(store.log_file),
            assembler=assembler,
        )

    async def preview(self, request: CreateRequest, author: str) -> PreviewResult:
        return await self.assembler.preview(request, author)

    async def create(self, request: CreateRequest, author: str) -> CommitResult:
        """Validate the request, write the new file and log it.

        Args:
            request: Creation request
            author: Configured author

        Returns:
            CommitResult; ``success`` stays True when only the log append
            failed, with the problem reported in ``warning``
        """
        try:
            assembled = await self.assembler.assemble(request, author)
        except FileNamerError as e:
            logger.info(f"Creation rejected ({e.code}): {e.message}")
            return CommitResult(success=False, message=e.message, error_code=e.code)

        target = assembled.path
        try:
            content = await asyncio.to_thread(
                load_content_template,
                self.templates_dir,
                request.values.get("category"),
                request.extension,
            )
            await asyncio.to_thread(write_new_file, target, content)
        except FileExistsError:
            error = FileAlreadyExistsError(assembled.filename)
            logger.warning(f"{target} appeared before it could be written")
            return CommitResult(success=False, message=error.message, error_code=error.code)
        except OSError as e:
            error = WriteFailureError(f"Failed to create or write the file: {e}")
            logger.error(error.message)
            return CommitResult(success=False, message=error.message, error_code=error.code)

        logger.info(f"Created {target}")

        entry = AuditEntry(
            author=author,
            category=assembled.values.get("category") or "",
            project=assembled.values.get("project") or "",
            filename=assembled.filename,
            save_path=str(target),
            description=request.description,
        )
        try:
            await asyncio.to_thread(self.audit_log.append, entry)
        except OSError as e:
            logger.error(f"Failed to write audit log: {e}")
            warning = f"The audit log could not be updated: {e}"
            return CommitResult(
                success=True,
                message=f"Created '{target}'. {warning}",
                path=target,
                error_code=LOG_WRITE_FAILURE,
                warning=warning,
            )

        return CommitResult(success=True, message=f"Created '{target}'.", path=target)
