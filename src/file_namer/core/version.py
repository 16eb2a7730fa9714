"""Directory scan for the next free version number."""

import asyncio
import logging
import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

# Configure logging
logger = logging.getLogger(__name__)


class ScanOutcome(Enum):
    """How a version scan concluded."""
    FOUND = "found"
    EMPTY = "empty"
    NO_PRIOR_VERSIONS_FOUND = "no_prior_versions_found"


@dataclass(frozen=True)
class ScanResult:
    """Result of scanning a directory for existing versions."""
    next_version: int
    outcome: ScanOutcome
    highest_version: int = 0
    matched_files: int = 0
    error: Optional[str] = None

    @property
    def directory_readable(self) -> bool:
        return self.outcome is not ScanOutcome.NO_PRIOR_VERSIONS_FOUND


def scan_directory(directory: Union[str, Path], pattern: "re.Pattern[str]") -> ScanResult:
    """Find the next version for files matching ``pattern`` in a directory.

    Entries are listed once, non-recursively. Each name must fully match
    the anchored pattern; the first capture group holds the version digits.
    The next version is the highest one seen plus one, so gaps are never
    refilled.

    A directory that cannot be read is not an error: the scan reports
    ``NO_PRIOR_VERSIONS_FOUND`` and version 1.

    Args:
        directory: Directory to list
        pattern: Compiled, anchored filename pattern with one digit group

    Returns:
        ScanResult with the next version to allocate
    """
    highest = 0
    matched = 0

    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                match = pattern.match(entry.name)
                if not match:
                    continue
                matched += 1
                highest = max(highest, int(match.group(1)))
    except OSError as e:
        logger.warning(f"Could not read directory {directory} for version scan: {e}")
        return ScanResult(
            next_version=1,
            outcome=ScanOutcome.NO_PRIOR_VERSIONS_FOUND,
            error=str(e),
        )

    outcome = ScanOutcome.FOUND if matched else ScanOutcome.EMPTY
    logger.debug(f"Version scan of {directory}: {matched} matching files, highest v{highest}")
    return ScanResult(
        next_version=highest + 1,
        outcome=outcome,
        highest_version=highest,
        matched_files=matched,
    )


async def next_version(directory: Union[str, Path], pattern: "re.Pattern[str]") -> ScanResult:
    """Asynchronous wrapper running the directory scan in a worker thread."""
    return await asyncio.to_thread(scan_directory, directory, pattern)
