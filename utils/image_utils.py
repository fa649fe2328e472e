"""
Image utilities for the HSE inspection client.
Handles image decoding, resizing, re-encoding and mime detection.
"""

import base64
import io
from typing import Optional, Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from utils.config import config
from utils.logger import setup_logger

logger = setup_logger(__name__, level=config.log_level, component="IMAGE_UTILS")

CANONICAL_MIME = "image/jpeg"

_MIME_BY_SUFFIX = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".heic": "image/heic",
}


def guess_mime_from_uri(uri: Optional[str]) -> Optional[str]:
    """Guess an image mime type from a file URI or path suffix."""
    if not uri:
        return None
    lower = uri.lower()
    for suffix, mime in _MIME_BY_SUFFIX.items():
        if lower.endswith(suffix):
            return mime
    return None


def decode_image(data: bytes) -> Image.Image:
    """
    Decode encoded image bytes into a fully loaded PIL image.

    Raises:
        ValueError: If the bytes are not a readable image
    """
    try:
        img = Image.open(io.BytesIO(data))
        img.load()  # Force load to catch corrupt images
        logger.debug(f"Decoded image: size={img.size}, mode={img.mode}, format={img.format}")
        return img
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Failed to decode image: {e}")


def resize_image(
    img: Image.Image,
    max_dimension: int = None
) -> Image.Image:
    """
    Resize image so its longer side fits within max dimension, preserving
    aspect ratio. Images already within bounds are returned unchanged.

    Args:
        img: PIL Image
        max_dimension: Maximum width or height (defaults to config)

    Returns:
        Resized PIL Image
    """
    max_dimension = max_dimension or config.compress_max_side

    width, height = img.size

    if width <= max_dimension and height <= max_dimension:
        return img

    if width > height:
        new_width = max_dimension
        new_height = max(1, round(height * (max_dimension / width)))
    else:
        new_height = max_dimension
        new_width = max(1, round(width * (max_dimension / height)))

    resized = img.resize((new_width, new_height), Image.Resampling.LANCZOS)
    logger.debug(f"Resized image from {img.size} to {resized.size}")

    return resized


def compress_image(
    data: bytes,
    max_dimension: int = None,
    quality: int = None
) -> Tuple[bytes, str]:
    """
    Re-encode an image for transport: bound the longer side, convert to RGB
    and save as JPEG.

    Args:
        data: Encoded image bytes
        max_dimension: Maximum longer side in pixels (defaults to config)
        quality: JPEG quality 1-95 (defaults to config)

    Returns:
        Tuple of (jpeg_bytes, mime_type)

    Raises:
        ValueError: If the image cannot be decoded or encoded
    """
    quality = quality or config.compress_quality

    img = decode_image(data)
    img = ImageOps.exif_transpose(img)
    img = resize_image(img, max_dimension)

    if img.mode != "RGB":
        img = img.convert("RGB")

    buffer = io.BytesIO()
    try:
        img.save(buffer, format="JPEG", quality=quality, optimize=True)
    except OSError as e:
        raise ValueError(f"Failed to encode image: {e}")

    output = buffer.getvalue()
    logger.debug(f"Compressed image: {len(data)} -> {len(output)} bytes at quality {quality}")
    return output, CANONICAL_MIME


def encode_base64(data: bytes) -> str:
    """Encode bytes to a base64 string."""
    return base64.b64encode(data).decode("utf-8")


def get_image_info(data: bytes) -> dict:
    """
    Get image information.

    Args:
        data: Encoded image bytes

    Returns:
        Dict with image info (size, format, mode, etc.)
    """
    img = decode_image(data)

    return {
        "width": img.size[0],
        "height": img.size[1],
        "mode": img.mode,
        "format": img.format,
        "size_bytes": len(data)
    }
