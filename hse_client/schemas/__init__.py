"""
Pydantic schemas for the HSE inspection client.
"""

from hse_client.schemas.models import (
    HAZARD_CATEGORIES,
    SAFETY_GRADES,
    AcquiredImage,
    AnalysisMetadata,
    AnalysisResult,
    AnalyzeResult,
    Hazard,
    Inspection,
    InspectionPage,
    OverallAssessment,
    ProcessingStatus,
    UsageLog,
)

__all__ = [
    "HAZARD_CATEGORIES",
    "SAFETY_GRADES",
    "AcquiredImage",
    "AnalysisMetadata",
    "AnalysisResult",
    "AnalyzeResult",
    "Hazard",
    "Inspection",
    "InspectionPage",
    "OverallAssessment",
    "ProcessingStatus",
    "UsageLog",
]
