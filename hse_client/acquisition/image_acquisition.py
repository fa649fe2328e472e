"""
Image acquisition from a camera or a local picker, normalized for transport.
"""

import asyncio
from pathlib import Path
from typing import Optional, Protocol

from pydantic import BaseModel

from hse_client.errors import ImageProcessingError, PermissionDenied
from hse_client.schemas.models import AcquiredImage
from utils.config import config
from utils.image_utils import CANONICAL_MIME, compress_image, guess_mime_from_uri
from utils.logger import setup_logger
from utils.validators import validate_image_path

logger = setup_logger(__name__, level=config.log_level, component="ACQUISITION")


class RawImage(BaseModel):
    """Image as returned by a capture device or picker."""
    uri: str
    data: Optional[bytes] = None  # natively encoded payload, if the source returned one
    mime_type: Optional[str] = None


class ImageSource(Protocol):
    """A camera or photo library."""

    name: str

    async def request_permission(self) -> bool:
        """Ask the user for access; False when refused."""
        ...

    async def launch(self) -> Optional[RawImage]:
        """Let the user take or choose a photo; None when cancelled."""
        ...


class FileImageSource:
    """Picker over a local file path."""

    name = "Photo library"

    def __init__(self, path: str):
        self.path = path

    async def request_permission(self) -> bool:
        return True

    async def launch(self) -> Optional[RawImage]:
        is_valid, error, image_path = validate_image_path(self.path)
        if not is_valid:
            logger.warning(f"Cannot pick {self.path}: {error}")
            return None

        data = await asyncio.to_thread(image_path.read_bytes)
        return RawImage(uri=str(image_path), data=data, mime_type=guess_mime_from_uri(str(image_path)))


class ImageAcquisition:
    """
    Obtains images and keeps them under the transport size limit.

    Payloads larger than `max_bytes`, or sources that return no payload,
    are re-encoded: longer side bounded, JPEG at fixed quality.
    """

    def __init__(
        self,
        camera: Optional[ImageSource] = None,
        library: Optional[ImageSource] = None,
        max_bytes: Optional[int] = None,
        max_side: Optional[int] = None,
        quality: Optional[int] = None,
    ):
        self.camera = camera
        self.library = library
        self.max_bytes = max_bytes or config.max_upload_bytes
        self.max_side = max_side or config.compress_max_side
        self.quality = quality or config.compress_quality
        self.logger = logger

    async def capture(self) -> Optional[AcquiredImage]:
        """Take a photo with the camera."""
        return await self._acquire(self.camera)

    async def pick(self) -> Optional[AcquiredImage]:
        """Choose a photo from the library."""
        return await self._acquire(self.library)

    async def _acquire(self, source: Optional[ImageSource]) -> Optional[AcquiredImage]:
        """
        Run one acquisition against a source.

        Returns:
            AcquiredImage, or None if the user cancelled

        Raises:
            PermissionDenied: The user refused access
            ImageProcessingError: The image could not be read or re-encoded
        """
        if source is None:
            self.logger.warning("No image source configured")
            return None

        if not await source.request_permission():
            self.logger.warning(f"{source.name} permission denied")
            raise PermissionDenied(source.name)

        raw = await source.launch()
        if raw is None or not raw.uri:
            self.logger.debug(f"{source.name} cancelled")
            return None

        return await self.normalize(raw)

    async def normalize(self, raw: RawImage) -> AcquiredImage:
        """Re-encode the image if its payload is missing or over the limit."""
        data = raw.data
        mime_type = raw.mime_type or guess_mime_from_uri(raw.uri) or CANONICAL_MIME

        if data is not None and len(data) <= self.max_bytes:
            self.logger.debug(f"Using native payload ({len(data)} bytes, {mime_type})")
            return AcquiredImage(local_uri=raw.uri, data=data, mime_type=mime_type)

        if data is None:
            data = await self._read_uri(raw.uri)

        self.logger.info(
            f"Compressing {len(data)} byte image (limit {self.max_bytes}, "
            f"max side {self.max_side}px, quality {self.quality})"
        )
        try:
            compressed, mime_type = await asyncio.to_thread(
                compress_image, data, self.max_side, self.quality
            )
        except ValueError as e:
            self.logger.error(f"Image compression failed: {e}")
            raise ImageProcessingError(f"Failed to process image: {e}") from e

        if not compressed:
            raise ImageProcessingError("Image compression produced no output.")

        self.logger.info(f"Compressed image to {len(compressed)} bytes")
        return AcquiredImage(local_uri=raw.uri, data=compressed, mime_type=mime_type, compressed=True)

    async def _read_uri(self, uri: str) -> bytes:
        """Read the full-resolution image behind a local URI."""
        path = Path(uri.removeprefix("file://"))
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            self.logger.error(f"Cannot read image at {uri}: {e}")
            raise ImageProcessingError(f"Failed to read image: {e}") from e
