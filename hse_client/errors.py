"""
Error taxonomy surfaced by the inspection client.

Every transport, parsing and imaging failure is mapped onto one of these
classes at the boundary where it happens, so callers never inspect
provider-specific error shapes.
"""

from typing import Optional

DIAGNOSTIC_BODY_LIMIT = 400


def truncate_body(body: Optional[str], limit: int = DIAGNOSTIC_BODY_LIMIT) -> str:
    """Trim a response body for inclusion in an error message."""
    if not body:
        return ""
    return body if len(body) <= limit else body[:limit]


class InspectionError(Exception):
    """Base class for errors surfaced to callers of the pipeline."""

    code = "INSPECTION_ERROR"
    default_message = "Inspection request failed."

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        self.message = message or self.default_message
        self.status_code = status_code
        self.body = body
        super().__init__(self.message)


class AuthRequired(InspectionError):
    """No active session, token retrieval failed, or the server returned 401."""
    code = "AUTH_REQUIRED"
    default_message = "Authentication required. Please sign in again."


class PayloadTooLarge(InspectionError):
    """Upload rejected with 413."""
    code = "PAYLOAD_TOO_LARGE"
    default_message = "Image too large for server. Please try a smaller photo."


class NotFound(InspectionError):
    """Inspection id unknown to the server (404)."""
    code = "NOT_FOUND"
    default_message = "Inspection not found."


class UnexpectedResponse(InspectionError):
    """2xx response missing required fields or failing validation."""
    code = "UNEXPECTED_RESPONSE"
    default_message = "Unexpected response from server."


class NetworkError(InspectionError):
    """Transport failure or request timeout."""
    code = "NETWORK_ERROR"
    default_message = "Network request failed."


class ServerError(InspectionError):
    """Non-2xx response not covered by a more specific class."""
    code = "SERVER_ERROR"
    default_message = "Server request failed."


class ImageProcessingError(InspectionError):
    """Local image decode, resize or encode failure."""
    code = "IMAGE_PROCESSING_ERROR"
    default_message = "Failed to process image."


class NoImage(InspectionError):
    """Analyze invoked with nothing acquired."""
    code = "NO_IMAGE"
    default_message = "Please take or select a photo first."


class PermissionDenied(Exception):
    """Camera or photo library permission was refused by the user."""

    def __init__(self, source: str):
        self.source = source
        super().__init__(f"{source} permission is required.")


class InvalidTransition(Exception):
    """A pipeline state change that the state machine does not allow."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Invalid pipeline transition: {current} -> {target}")


__all__ = [
    "DIAGNOSTIC_BODY_LIMIT",
    "truncate_body",
    "InspectionError",
    "AuthRequired",
    "PayloadTooLarge",
    "NotFound",
    "UnexpectedResponse",
    "NetworkError",
    "ServerError",
    "ImageProcessingError",
    "NoImage",
    "PermissionDenied",
    "InvalidTransition",
]
