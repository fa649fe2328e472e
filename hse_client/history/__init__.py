"""
Inspection history module for the HSE inspection client.
"""

from hse_client.history.cache import HistoryCache, SORT_KEYS
from hse_client.history.tracker import InspectionTracker

__all__ = [
    "HistoryCache",
    "InspectionTracker",
    "SORT_KEYS",
]
