"""
Image acquisition module for the HSE inspection client.
"""

from hse_client.acquisition.image_acquisition import (
    FileImageSource,
    ImageAcquisition,
    ImageSource,
    RawImage,
)

__all__ = [
    "FileImageSource",
    "ImageAcquisition",
    "ImageSource",
    "RawImage",
]
