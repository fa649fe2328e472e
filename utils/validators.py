"""
Input validators for the HSE inspection client.
Provides validation functions for user inputs and API request parameters.
"""

from pathlib import Path
from typing import Optional, Tuple
import re

# Formats Pillow can decode without plugins
ALLOWED_IMAGE_EXTENSIONS = ["jpg", "jpeg", "png", "webp", "bmp"]
MAX_PAGE_SIZE = 100

_INSPECTION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


def validate_inspection_id(value: Optional[str]) -> Tuple[bool, Optional[str], Optional[str]]:
    """
    Validate an inspection identifier before it is placed in a URL path.

    Args:
        value: Inspection ID string

    Returns:
        Tuple of (is_valid, error_message, normalized_value)
    """
    if not value or not value.strip():
        return False, "No inspection ID provided", None

    normalized = value.strip()
    if not _INSPECTION_ID_PATTERN.match(normalized):
        return False, f"Invalid inspection ID: {normalized!r}", None

    return True, None, normalized


def validate_page_args(page: int, page_size: int) -> Tuple[bool, Optional[str]]:
    """
    Validate pagination arguments for the list endpoint.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if page < 1:
        return False, f"page must be >= 1, got {page}"
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        return False, f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}"
    return True, None


def validate_image_path(path: str) -> Tuple[bool, Optional[str], Optional[Path]]:
    """
    Validate image file path.

    Args:
        path: Path string

    Returns:
        Tuple of (is_valid, error_message, Path object)
    """
    image_path = Path(path).expanduser()

    if not image_path.exists():
        return False, f"File not found: {path}", None

    if not image_path.is_file():
        return False, f"Not a file: {path}", None

    ext = image_path.suffix.lower().lstrip(".")
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        return False, f"Invalid file type: {ext}", None

    if image_path.stat().st_size == 0:
        return False, "File is empty", None

    return True, None, image_path


def sanitize_filename(filename: str) -> str:
    """
    Sanitize an upload filename.

    Args:
        filename: Original filename

    Returns:
        Sanitized filename
    """
    # Remove path separators
    filename = Path(filename).name

    # Replace dangerous characters
    sanitized = re.sub(r'[<>:"/\\|?*\s]', '_', filename)

    # Limit length
    name = Path(sanitized).stem[:50]
    ext = Path(sanitized).suffix[:10]

    return f"{name}{ext}" or "inspection"
