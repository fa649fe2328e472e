"""
Analysis client: submits images for hazard analysis and reads inspections back.
"""

from datetime import datetime, timedelta
from typing import Optional

from hse_client.clients.base import BaseApiClient
from hse_client.errors import NotFound, UnexpectedResponse, truncate_body
from hse_client.schemas.models import (
    AnalyzeResult,
    Inspection,
    InspectionPage,
    UsageLog,
)
from utils.config import config
from utils.validators import validate_inspection_id, validate_page_args

ANALYZE_PATH = "/api/inspections/analyze"
INSPECTION_PATH = "/api/inspections/{inspection_id}"
LIST_PATH = "/api/inspections/list"
USAGE_LOGS_PATH = "/api/inspections/usage-logs/list"

# Usage logs are matched to an inspection by timestamp proximity
USAGE_LOG_WINDOW = timedelta(minutes=5)


class AnalysisClient(BaseApiClient):
    """Client for the inspection analysis endpoints."""

    def __init__(self, auth, **kwargs):
        super().__init__(auth, nickname="analyzer", **kwargs)

    async def submit(self, remote_url: str) -> AnalyzeResult:
        """
        Submit an uploaded image for analysis.

        The response must carry the analysis itself; a response without an
        `analysis` payload is a protocol violation, not a pending result.

        Args:
            remote_url: URL returned by the upload endpoint

        Returns:
            Inspection record and its analysis

        Raises:
            AuthRequired: No session or 401
            ServerError: Other non-2xx
            UnexpectedResponse: Missing or invalid `inspection`/`analysis`
            NetworkError: Transport failure or timeout
        """
        self.logger.info(f"Submitting {remote_url} for analysis")

        payload = await self._request(
            "POST",
            ANALYZE_PATH,
            operation="Analyze",
            json={"imageUrl": remote_url},
            required=("inspection", "analysis"),
        )

        result = self._parse(AnalyzeResult, payload, "Analyze")

        self.logger.info(
            f"Inspection {result.inspection.id}: {result.analysis.hazard_count} hazards, "
            f"risk score {result.analysis.overall_assessment.risk_score}"
        )
        return result

    async def fetch_by_id(self, inspection_id: str) -> Inspection:
        """
        Fetch the current state of an inspection.

        Raises:
            AuthRequired: No session or 401
            NotFound: 404 or an ID that cannot exist
            ServerError: Other non-2xx
            UnexpectedResponse: Missing or invalid `inspection`
            NetworkError: Transport failure or timeout
        """
        is_valid, error, normalized = validate_inspection_id(inspection_id)
        if not is_valid:
            self.logger.warning(error)
            raise NotFound(error)

        payload = await self._request(
            "GET",
            INSPECTION_PATH.format(inspection_id=normalized),
            operation="Load inspection",
            status_errors={404: NotFound},
            required=("inspection",),
            missing_message="Invalid response format.",
        )

        inspection = self._parse(Inspection, payload["inspection"], "Load inspection")
        self.logger.debug(f"Inspection {inspection.id} is {inspection.processing_status.value}")
        return inspection

    async def list_inspections(self, page: int = 1, page_size: Optional[int] = None) -> InspectionPage:
        """
        Fetch one page of the user's inspections, newest first.

        Raises:
            ValueError: Invalid pagination arguments
            InspectionError: Mapped request failure
        """
        page_size = page_size or config.history_page_size
        is_valid, error = validate_page_args(page, page_size)
        if not is_valid:
            raise ValueError(error)

        payload = await self._request(
            "GET",
            LIST_PATH,
            operation="List inspections",
            params={"page": page, "pageSize": page_size},
        )

        if not isinstance(payload.get("inspections"), list):
            raise UnexpectedResponse("Invalid response format.", body=truncate_body(str(payload)))

        return self._parse(InspectionPage, payload, "List inspections")

    async def fetch_usage_log(self, created_at: datetime) -> Optional[UsageLog]:
        """
        Fetch the usage record of the analyze call that created an inspection.

        Returns:
            The closest usage log, or None when the service has none
        """
        params = {
            "endpoint": ANALYZE_PATH,
            "after": (created_at - USAGE_LOG_WINDOW).isoformat(),
            "before": (created_at + USAGE_LOG_WINDOW).isoformat(),
            "pageSize": 1,
        }

        payload = await self._request(
            "GET",
            USAGE_LOGS_PATH,
            operation="Load usage logs",
            params=params,
        )

        logs = payload.get("usageLogs") or []
        if not logs:
            return None
        return self._parse(UsageLog, logs[0], "Load usage logs")
