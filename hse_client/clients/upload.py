"""
Upload client: sends an encoded image to storage and returns its URL.
"""

from typing import Optional

from hse_client.clients.base import BaseApiClient
from hse_client.errors import PayloadTooLarge, UnexpectedResponse, truncate_body
from utils.config import config
from utils.image_utils import encode_base64
from utils.validators import sanitize_filename

UPLOAD_PATH = "/api/uploads/base64"
UPLOAD_BODY_LIMIT = 300


class UploadClient(BaseApiClient):
    """Uploads base64-encoded images to the storage endpoint."""

    def __init__(self, auth, **kwargs):
        super().__init__(auth, nickname="uploader", **kwargs)

    async def upload(self, encoded_bytes: bytes, filename: Optional[str] = None) -> str:
        """
        Upload an encoded image.

        Args:
            encoded_bytes: Encoded image bytes (JPEG, PNG, ...)
            filename: Upload filename (defaults to config)

        Returns:
            Durable remote URL of the stored image

        Raises:
            AuthRequired: No session or 401
            PayloadTooLarge: 413
            ServerError: Other non-2xx
            UnexpectedResponse: 2xx without a URL
            NetworkError: Transport failure or timeout
        """
        filename = sanitize_filename(filename or config.upload_filename)
        self.logger.info(f"Uploading {len(encoded_bytes)} bytes as '{filename}'")

        payload = await self._request(
            "POST",
            UPLOAD_PATH,
            operation="Upload",
            json={"base64": encode_base64(encoded_bytes), "filename": filename},
            status_errors={413: PayloadTooLarge},
            body_limit=UPLOAD_BODY_LIMIT,
            required=("url",),
            missing_message="Upload response missing URL.",
        )

        url = payload["url"]
        if not isinstance(url, str):
            raise UnexpectedResponse(
                "Upload response missing URL.", body=truncate_body(str(payload), UPLOAD_BODY_LIMIT)
            )

        self.logger.info(f"Upload stored at {url}")
        return url
