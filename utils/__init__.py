"""
Utility modules for the HSE inspection client.
"""

from utils.config import config
from utils.logger import setup_logger
from utils.image_utils import (
    compress_image,
    decode_image,
    encode_base64,
    guess_mime_from_uri,
    resize_image,
)
from utils.validators import (
    sanitize_filename,
    validate_image_path,
    validate_inspection_id,
    validate_page_args,
)

__all__ = [
    "config",
    "setup_logger",
    "compress_image",
    "decode_image",
    "encode_base64",
    "guess_mime_from_uri",
    "resize_image",
    "sanitize_filename",
    "validate_image_path",
    "validate_inspection_id",
    "validate_page_args",
]
