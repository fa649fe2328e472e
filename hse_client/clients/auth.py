"""
Bearer-token authentication for the inspection service.
"""

from typing import Dict, Optional, Protocol, runtime_checkable

from hse_client.errors import AuthRequired
from utils.config import config
from utils.logger import setup_logger

logger = setup_logger(__name__, level=config.log_level, component="AUTH")


@runtime_checkable
class IdentitySession(Protocol):
    """Session issued by the external identity provider."""

    async def get_token(self) -> Optional[str]:
        """Return a short-lived bearer token, or None if none is available."""
        ...


class StaticTokenSession:
    """Session backed by a fixed token, e.g. HSE_API_TOKEN for the CLI."""

    def __init__(self, token: str):
        self._token = token

    async def get_token(self) -> Optional[str]:
        return self._token


def session_from_config() -> Optional[StaticTokenSession]:
    """Build a session from configuration, or None when no token is set."""
    if not config.api_token:
        return None
    return StaticTokenSession(config.api_token)


class AuthHeaderBuilder:
    """Composes request headers from an identity session."""

    def __init__(self, session: Optional[IdentitySession]):
        self.session = session
        self.logger = logger

    @property
    def has_session(self) -> bool:
        return self.session is not None

    async def build(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """
        Build authenticated request headers.

        A fresh token is requested on every call, so a token that expires
        between two requests is replaced rather than reused.

        Args:
            extra: Additional headers to merge in

        Returns:
            Header dict with Authorization and Content-Type

        Raises:
            AuthRequired: If there is no session or no token could be obtained
        """
        if self.session is None:
            self.logger.warning("No active session found")
            raise AuthRequired()

        try:
            token = await self.session.get_token()
        except Exception as e:
            self.logger.error(f"Error getting session token: {e}")
            raise AuthRequired() from e

        if not token:
            self.logger.warning("Session returned no token")
            raise AuthRequired()

        headers = {"Content-Type": "application/json"}
        if extra:
            headers.update(extra)
        headers["Authorization"] = f"Bearer {token}"
        return headers
