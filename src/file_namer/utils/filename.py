"""Filename utilities for template-based file creation."""

import re
from typing import Any

# Traversal sequences first, then lone separators and reserved characters
_UNSAFE_PATTERN = re.compile(r'(\.\.[/\\])|[/\\]|[:*?"<>|]')


def sanitize(value: Any) -> str:
    """Strip characters that are unsafe in a single filename component.

    Removes ``../`` and ``..\\`` sequences, path separators and the
    reserved characters ``: * ? " < > |``. Never fails: unsafe input
    shrinks to a smaller safe string.

    Args:
        value: Raw token value

    Returns:
        Sanitized string (empty for non-string input)
    """
    if not isinstance(value, str):
        return ""

    return _UNSAFE_PATTERN.sub("", value)


def is_safe_component(value: Any) -> bool:
    """Check whether a value survives sanitization unchanged.

    Args:
        value: Candidate filename component

    Returns:
        True if the value is a non-empty string with nothing to strip
    """
    return isinstance(value, str) and bool(value) and sanitize(value) == value
