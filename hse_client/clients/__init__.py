"""
Client factory and exports for the inspection service.
"""

from typing import Optional

from hse_client.clients.analysis import AnalysisClient
from hse_client.clients.auth import (
    AuthHeaderBuilder,
    IdentitySession,
    StaticTokenSession,
    session_from_config,
)
from hse_client.clients.upload import UploadClient


def get_upload_client(auth: AuthHeaderBuilder) -> UploadClient:
    """Get Upload client instance."""
    return UploadClient(auth)


def get_analysis_client(auth: AuthHeaderBuilder) -> AnalysisClient:
    """Get Analysis client instance."""
    return AnalysisClient(auth)


def get_auth(session: Optional[IdentitySession] = None) -> AuthHeaderBuilder:
    """Get a header builder for the given session, or the configured token."""
    return AuthHeaderBuilder(session if session is not None else session_from_config())


__all__ = [
    "AnalysisClient",
    "AuthHeaderBuilder",
    "IdentitySession",
    "StaticTokenSession",
    "UploadClient",
    "get_analysis_client",
    "get_auth",
    "get_upload_client",
    "session_from_config",
]
