"""
Base API client with authenticated requests and status-code mapping.
"""

import asyncio
from typing import Any, Dict, Optional, Sequence, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from hse_client.clients.auth import AuthHeaderBuilder
from hse_client.errors import (
    DIAGNOSTIC_BODY_LIMIT,
    AuthRequired,
    InspectionError,
    NetworkError,
    ServerError,
    UnexpectedResponse,
    truncate_body,
)
from utils.config import config
from utils.logger import setup_logger

ModelT = TypeVar("ModelT", bound=BaseModel)


class BaseApiClient:
    """
    Base class for inspection service clients.

    Makes exactly one attempt per call; retrying is the caller's decision.
    Blocking `requests` calls run in a worker thread so the event loop
    stays free while a request is in flight.
    """

    def __init__(
        self,
        auth: AuthHeaderBuilder,
        nickname: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http: Optional[requests.Session] = None,
    ):
        self.auth = auth
        self.nickname = nickname
        self.base_url = (base_url or config.api_base_url).rstrip("/")
        self.timeout = timeout or config.api_timeout
        self.http = http or requests.Session()
        self.logger = setup_logger(
            f"client.{nickname}",
            level=config.log_level,
            log_file=config.get_log_file(),
            component=nickname.upper()
        )

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        status_errors: Optional[Dict[int, Type[InspectionError]]] = None,
        body_limit: int = DIAGNOSTIC_BODY_LIMIT,
        required: Sequence[str] = (),
        missing_message: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Perform one authenticated request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path below the base URL
            operation: Human-readable operation name for messages
            json: Optional JSON body
            params: Optional query parameters
            status_errors: Extra status code -> error class mappings
            body_limit: Maximum response body length kept for diagnostics
            required: Keys that must be present and non-empty in the body
            missing_message: Error message when a required key is missing

        Returns:
            Decoded JSON object with a truthy `ok` flag

        Raises:
            InspectionError: Mapped failure
        """
        headers = await self.auth.build()
        url = f"{self.base_url}{path}"

        self.logger.debug(f"{method} {url}")

        try:
            response = await asyncio.to_thread(
                self.http.request,
                method,
                url,
                headers=headers,
                json=json,
                params=params,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            self.logger.error(f"{operation} timed out after {self.timeout}s")
            raise NetworkError(f"{operation} timed out after {self.timeout}s.") from e
        except requests.RequestException as e:
            self.logger.error(f"{operation} network failure: {e}")
            raise NetworkError(f"{operation} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise self._map_status(
                response.status_code,
                response.text,
                operation,
                status_errors or {},
                body_limit,
            )

        try:
            payload = response.json()
        except ValueError as e:
            body = truncate_body(response.text, body_limit)
            self.logger.error(f"{operation} returned non-JSON body: {body}")
            raise UnexpectedResponse(
                f"Unexpected {operation.lower()} response.", response.status_code, body
            ) from e

        if not isinstance(payload, dict) or not payload.get("ok"):
            body = truncate_body(response.text, body_limit)
            self.logger.error(f"{operation} response not ok: {body}")
            raise UnexpectedResponse(
                f"Unexpected {operation.lower()} response.", response.status_code, body
            )

        missing = [key for key in required if not payload.get(key)]
        if missing:
            body = truncate_body(response.text, body_limit)
            self.logger.error(f"{operation} response missing {', '.join(missing)}: {body}")
            raise UnexpectedResponse(
                missing_message or f"Unexpected {operation.lower()} response.",
                response.status_code,
                body,
            )

        return payload

    def _map_status(
        self,
        status_code: int,
        text: str,
        operation: str,
        status_errors: Dict[int, Type[InspectionError]],
        body_limit: int,
    ) -> InspectionError:
        """Map a non-2xx response onto the error taxonomy."""
        body = truncate_body(text, body_limit)
        self.logger.error(f"{operation} failed ({status_code}): {body}")

        if status_code == 401:
            return AuthRequired(status_code=status_code, body=body)

        error_cls = status_errors.get(status_code)
        if error_cls is not None:
            return error_cls(status_code=status_code, body=body)

        return ServerError(f"{operation} failed ({status_code}): {body}", status_code, body)

    def _parse(
        self,
        model: Type[ModelT],
        data: Any,
        operation: str,
    ) -> ModelT:
        """Validate a payload fragment, mapping validation errors."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            self.logger.error(f"{operation} payload failed validation: {e.error_count()} errors")
            self.logger.debug(str(e))
            raise UnexpectedResponse(
                f"Unexpected {operation.lower()} response: {model.__name__} invalid.",
                body=truncate_body(str(e)),
            ) from e

    def close(self):
        """Close the underlying HTTP session."""
        self.http.close()
