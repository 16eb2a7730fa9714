"""Terminal user interface helpers."""
