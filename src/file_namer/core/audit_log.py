"""CSV audit log of created files."""

import csv
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Any

# Configure logging
logger = logging.getLogger(__name__)

LOG_FILENAME = "creation_log.csv"
LOG_HEADER = ["Timestamp", "Author", "Category", "Project", "Filename", "SavePath", "Description"]
FORMULA_PREFIXES = ("=", "+", "-", "@")


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def neutralize_formula(value: Any) -> str:
    """Prefix a quote to values a spreadsheet would read as a formula.

    Args:
        value: Field value (``None`` becomes an empty string)

    Returns:
        String safe to open in a spreadsheet
    """
    text = "" if value is None else str(value)
    if text.startswith(FORMULA_PREFIXES):
        return f"'{text}"
    return text


@dataclass
class AuditEntry:
    """One row of the creation log."""
    author: str
    category: str
    project: str
    filename: str
    save_path: str
    description: str = ""
    timestamp: str = field(default_factory=_utc_timestamp)

    def to_row(self) -> List[str]:
        """Return the row in header order with formulas neutralized."""
        return [
            neutralize_formula(value)
            for value in (
                self.timestamp,
                self.author,
                self.category,
                self.project,
                self.filename,
                self.save_path,
                self.description,
            )
        ]


class AuditLog:
    """Append-only CSV log shared by every creation."""

    def __init__(self, log_file: Path):
        """Initialize the audit log.

        Args:
            log_file: Path to the CSV file (created on first append)
        """
        self.log_file = Path(log_file)

    def append(self, entry: AuditEntry) -> None:
        """Append one entry, writing the header first for a new file.

        The header is written with a UTF-8 byte order mark so spreadsheet
        applications detect the encoding.

        Raises:
            OSError: If the log cannot be written
        """
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self.log_file, "x", newline="", encoding="utf-8-sig") as f:
                csv.writer(f, lineterminator="\n").writerow(LOG_HEADER)
        except FileExistsError:
            pass

        with open(self.log_file, "a", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, quoting=csv.QUOTE_ALL, lineterminator="\n")
            writer.writerow(entry.to_row())

        logger.debug(f"Logged creation of {entry.filename} to {self.log_file}")

    def read_entries(self, limit: Optional[int] = None) -> List[dict]:
        """Read logged rows, most recent first.

        Args:
            limit: Maximum number of rows to return

        Returns:
            List of row dictionaries keyed by header name
        """
        if not self.log_file.exists():
            return []

        try:
            with open(self.log_file, "r", newline="", encoding="utf-8-sig") as f:
                rows = list(csv.DictReader(f))
        except (OSError, csv.Error) as e:
            logger.error(f"Failed to read audit log: {e}")
            return []

        rows.reverse()
        if limit:
            return rows[:limit]
        return rows
