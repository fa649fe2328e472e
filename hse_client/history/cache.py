"""
Cache of the most recent inspections.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from hse_client.clients.analysis import AnalysisClient
from hse_client.schemas.models import Inspection, ProcessingStatus
from utils.config import config
from utils.logger import setup_logger

logger = setup_logger(__name__, level=config.log_level, component="HISTORY")

SORT_KEYS = ("newest", "oldest", "risk-high", "risk-low")


class HistoryCache:
    """
    Holds one page of recent inspections.

    The history panel is supplementary: refresh failures are logged and
    swallowed, leaving the held list as it was.
    """

    def __init__(self, client: AnalysisClient, page_size: Optional[int] = None):
        self.client = client
        self.page_size = page_size or config.history_page_size
        self.logger = logger
        self.inspections: List[Inspection] = []
        self.page = 1
        self.total_count = 0
        self.loading = False
        self.last_refreshed: Optional[datetime] = None

    async def refresh(self, page: int = 1, page_size: Optional[int] = None) -> bool:
        """
        Replace the held list with one page from the service.

        Returns:
            True if the list was replaced, False if the refresh failed
        """
        page_size = page_size or self.page_size
        self.loading = True
        try:
            result = await self.client.list_inspections(page=page, page_size=page_size)
        except Exception as e:
            self.logger.warning(f"Failed to fetch recent inspections: {e}")
            return False
        finally:
            self.loading = False

        self.inspections = list(result.inspections)
        self.page = result.page
        self.page_size = result.page_size
        self.total_count = result.total_count
        self.last_refreshed = datetime.now(timezone.utc)
        self.logger.info(f"Loaded {len(self.inspections)} of {self.total_count} inspections")
        return True

    def filter_by_status(self, status: Optional[ProcessingStatus] = None) -> List[Inspection]:
        """Inspections with the given status; all of them when status is None."""
        if status is None:
            return list(self.inspections)
        return [i for i in self.inspections if i.processing_status == status]

    def sorted_by(self, sort: str = "newest", status: Optional[ProcessingStatus] = None) -> List[Inspection]:
        """
        Filtered inspections in display order.

        Args:
            sort: One of newest, oldest, risk-high, risk-low
            status: Optional status filter
        """
        if sort not in SORT_KEYS:
            raise ValueError(f"sort must be one of {SORT_KEYS}")

        items = self.filter_by_status(status)
        if sort == "newest":
            return sorted(items, key=lambda i: i.created_at, reverse=True)
        if sort == "oldest":
            return sorted(items, key=lambda i: i.created_at)
        # Inspections without a score sort as 0
        if sort == "risk-high":
            return sorted(items, key=lambda i: i.risk_score or 0, reverse=True)
        return sorted(items, key=lambda i: i.risk_score or 0)

    def status_counts(self) -> Dict[str, int]:
        """Count of held inspections per status, plus 'all'."""
        counts = {"all": len(self.inspections)}
        for status in ProcessingStatus:
            counts[status.value] = sum(1 for i in self.inspections if i.processing_status == status)
        return counts
