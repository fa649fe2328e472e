"""
Tracks individual inspections refreshed by id.
"""

from typing import Dict, Optional

from hse_client.clients.analysis import AnalysisClient
from hse_client.schemas.models import Inspection, UsageLog
from utils.config import config
from utils.logger import setup_logger

logger = setup_logger(__name__, level=config.log_level, component="TRACKER")


class InspectionTracker:
    """
    Holds the latest known state of inspections the user has opened.

    Refresh is manual. Errors propagate to the caller and leave held
    records untouched. A fetched record whose status would move backwards
    is discarded, so a held status never regresses.
    """

    def __init__(self, client: AnalysisClient):
        self.client = client
        self.logger = logger
        self._inspections: Dict[str, Inspection] = {}
        self._usage_logs: Dict[str, UsageLog] = {}

    def get(self, inspection_id: str) -> Optional[Inspection]:
        return self._inspections.get(inspection_id)

    def track(self, inspection: Inspection) -> Inspection:
        """
        Record an inspection obtained elsewhere (e.g. an analyze response).

        Returns:
            The record now held for that id
        """
        return self._apply(inspection)

    async def refresh(self, inspection_id: str) -> Inspection:
        """
        Re-fetch an inspection.

        Returns:
            The record now held for that id

        Raises:
            InspectionError: Mapped fetch failure (NotFound, AuthRequired, ...)
        """
        fetched = await self.client.fetch_by_id(inspection_id)
        return self._apply(fetched)

    async def usage_log(self, inspection_id: str) -> Optional[UsageLog]:
        """
        Usage record for a held inspection. Best-effort: failures return None.
        """
        if inspection_id in self._usage_logs:
            return self._usage_logs[inspection_id]

        inspection = self._inspections.get(inspection_id)
        if inspection is None:
            return None

        try:
            usage = await self.client.fetch_usage_log(inspection.created_at)
        except Exception as e:
            self.logger.warning(f"Failed to fetch usage logs for {inspection_id}: {e}")
            return None

        if usage is not None:
            self._usage_logs[inspection_id] = usage
        return usage

    def _apply(self, fetched: Inspection) -> Inspection:
        current = self._inspections.get(fetched.id)
        if current is not None and not current.processing_status.can_advance_to(fetched.processing_status):
            self.logger.warning(
                f"Ignoring status regression for {fetched.id}: "
                f"{current.processing_status.value} -> {fetched.processing_status.value}"
            )
            return current

        self._inspections[fetched.id] = fetched
        return fetched
