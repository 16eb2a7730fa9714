"""Per-category content templates used to seed new files."""

import logging
from pathlib import Path
from typing import Optional

from ..utils.filename import sanitize

# Configure logging
logger = logging.getLogger(__name__)


def find_content_template(templates_dir: Path, category: Optional[str], extension: str) -> Optional[Path]:
    """Locate the content template for a category and extension.

    The template is ``{category}{extension}`` inside ``templates_dir``. A
    path that resolves outside the directory (for example through a
    symlink) is treated as missing and reported as a security warning.

    Args:
        templates_dir: Directory of content templates
        category: Category value from the request
        extension: File extension, e.g. ``.md``

    Returns:
        Resolved template path, or None if there is no usable template
    """
    template_name = f"{sanitize(category or '')}{sanitize(extension)}"
    base = Path(templates_dir).resolve()
    resolved = (base / template_name).resolve()

    try:
        resolved.relative_to(base)
    except ValueError:
        logger.warning(f"Security warning: content template path escapes {base}: {template_name}")
        return None

    if resolved == base or not resolved.is_file():
        logger.info(f"Content template not found: '{template_name}'. Creating an empty file.")
        return None

    return resolved


def load_content_template(templates_dir: Path, category: Optional[str], extension: str) -> bytes:
    """Return the seed content for a new file (empty when no template applies).

    Raises:
        OSError: If a template exists but cannot be read
    """
    template_path = find_content_template(templates_dir, category, extension)
    if template_path is None:
        return b""

    content = template_path.read_bytes()
    logger.info(f"Content template loaded: '{template_path.name}'")
    return content
