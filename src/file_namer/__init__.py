"""File Namer - template-driven file naming and creation."""

__version__ = "0.1.0"
