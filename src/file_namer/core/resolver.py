"""Template resolution: substitute token values, keep the version open."""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Any, Optional, Tuple, Union

from .models import ResolveMode
from .template import Literal, VERSION_TOKEN, parse_template
from ..utils.filename import sanitize


class VersionSlot:
    """Marker for the position of ``{version}`` in a resolved base name."""

    def __repr__(self) -> str:
        return "VersionSlot()"


VERSION_SLOT = VersionSlot()
VERSION_PLACEHOLDER = "{version}"
VERSION_DIGITS = 4


@dataclass(frozen=True)
class ResolvedBase:
    """A base name with every token but ``{version}`` substituted."""
    parts: Tuple[Union[str, VersionSlot], ...]

    @property
    def has_version(self) -> bool:
        return any(part is VERSION_SLOT for part in self.parts)

    @property
    def text(self) -> str:
        """Base name with the literal ``{version}`` placeholder left in."""
        return self.with_version(VERSION_PLACEHOLDER)

    def with_version(self, version_string: str) -> str:
        """Render the base name with every version slot filled."""
        return "".join(
            version_string if part is VERSION_SLOT else part
            for part in self.parts
        )

    def match_pattern(self, extension: str) -> "re.Pattern[str]":
        """Build the anchored pattern used to find existing versions.

        Literal text and the extension are escaped; the first version slot
        becomes a group capturing exactly four digits and later slots must
        repeat the same digits.

        Args:
            extension: Sanitized extension, e.g. ``.txt``

        Returns:
            Compiled pattern matching whole filenames
        """
        pieces = []
        seen_slot = False
        for part in self.parts:
            if part is VERSION_SLOT:
                pieces.append(r"(?P=version)" if seen_slot else rf"v(?P<version>\d{{{VERSION_DIGITS}}})")
                seen_slot = True
            else:
                pieces.append(re.escape(part))
        return re.compile("^" + "".join(pieces) + re.escape(extension) + "$")


def format_version(number: int) -> str:
    """Render a version number as ``v####``."""
    return f"v{number:0{VERSION_DIGITS}d}"


def derived_values(author: str, now: Optional[datetime] = None) -> Dict[str, str]:
    """Compute the engine-owned token values.

    Args:
        author: Configured author name
        now: Clock reading (defaults to the current local time)

    Returns:
        Mapping for ``date``, ``datetime`` and ``author``
    """
    now = now or datetime.now()
    return {
        "date": now.strftime("%Y%m%d"),
        "datetime": now.strftime("%Y%m%d-%H%M%S"),
        "author": author or "",
    }


def merge_values(values: Optional[Dict[str, Any]], derived: Dict[str, str]) -> Dict[str, Any]:
    """Merge caller values with derived ones; derived values win."""
    merged = dict(values or {})
    merged.update(derived)
    return merged


def resolve_base(
    template: str,
    values: Dict[str, Any],
    mode: ResolveMode = ResolveMode.COMMIT,
) -> ResolvedBase:
    """Substitute every non-version token in a template.

    In commit mode a missing value becomes an empty string. In preview mode
    a value that was never set keeps its ``{name}`` text so the user can
    see what is still unfilled (``None`` counts as never set), while a
    value set to ``""`` is dropped.

    Args:
        template: Naming template
        values: Merged value bag (caller values plus derived values)
        mode: Commit or preview evaluation

    Returns:
        Resolved base name

    Raises:
        TemplateParseError: If the template is malformed
    """
    parts = []
    for segment in parse_template(template):
        if isinstance(segment, Literal):
            parts.append(sanitize(segment.text))
        elif segment.name == VERSION_TOKEN:
            parts.append(VERSION_SLOT)
        elif values.get(segment.name) is not None:
            parts.append(sanitize(values[segment.name]))
        elif mode is ResolveMode.PREVIEW:
            parts.append(segment.placeholder)
        else:
            parts.append("")

    return ResolvedBase(parts=tuple(parts))
