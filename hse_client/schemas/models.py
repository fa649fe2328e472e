"""
Pydantic schemas for data validation.
Wire models accept the service's camelCase keys as well as snake_case names.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


HazardCategory = Literal[
    "PPE",
    "Fall",
    "Fire",
    "Electrical",
    "Chemical",
    "Machinery",
    "Environmental",
    "Other",
]
HAZARD_CATEGORIES = (
    "PPE", "Fall", "Fire", "Electrical", "Chemical", "Machinery", "Environmental", "Other",
)

Severity = Literal["Critical", "High", "Medium", "Low"]
SAFETY_GRADES = ("A", "B", "C", "D", "F")


class ProcessingStatus(str, Enum):
    """Server-side processing status of an inspection."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def rank(self) -> int:
        return _STATUS_RANK[self]

    @property
    def is_terminal(self) -> bool:
        return self in (ProcessingStatus.COMPLETED, ProcessingStatus.FAILED)

    def can_advance_to(self, other: "ProcessingStatus") -> bool:
        """
        Check whether moving from this status to `other` keeps the
        pending -> processing -> {completed, failed} order.
        Staying on the same status is always allowed.
        """
        if other == self:
            return True
        if self.is_terminal:
            return False
        return other.rank > self.rank


_STATUS_RANK = {
    ProcessingStatus.PENDING: 0,
    ProcessingStatus.PROCESSING: 1,
    ProcessingStatus.COMPLETED: 2,
    ProcessingStatus.FAILED: 2,
}


class CamelModel(BaseModel):
    """Base model for service payloads."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Hazard(CamelModel):
    """One detected safety issue."""
    id: str
    description: str
    location: str = Field(default="", description="Free-text location in the photo")
    category: HazardCategory = Field(..., description="Hazard category")
    severity: Severity = Field(..., description="Severity level")
    immediate_solutions: List[str] = Field(default_factory=list)
    long_term_solutions: List[str] = Field(default_factory=list)
    estimated_cost: Optional[str] = None
    time_to_implement: Optional[str] = None
    priority: int = Field(..., ge=1, le=10, description="Priority 1-10")

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v: Any) -> str:
        """Map case variants onto the closed set; anything else is 'Other'."""
        if isinstance(v, str):
            for category in HAZARD_CATEGORIES:
                if v.strip().lower() == category.lower():
                    return category
        return "Other"

    @property
    def is_critical(self) -> bool:
        return self.severity == "Critical"


class OverallAssessment(CamelModel):
    """Overall assessment of a completed inspection."""
    risk_score: int = Field(..., ge=0, le=100)
    # Server is authoritative on grades; unknown values are rendered neutrally
    safety_grade: str
    top_priorities: List[str] = Field(default_factory=list)
    compliance_standards: Optional[List[str]] = None


class AnalysisMetadata(CamelModel):
    """Informational analysis metadata."""
    analysis_time: float = 0
    tokens_used: int = 0
    confidence: float = Field(default=0, ge=0, le=100)


class AnalysisResult(CamelModel):
    """Structured result of a hazard analysis."""
    hazards: List[Hazard] = Field(default_factory=list)
    overall_assessment: OverallAssessment
    metadata: AnalysisMetadata = Field(default_factory=AnalysisMetadata)

    @property
    def hazard_count(self) -> int:
        return len(self.hazards)

    @property
    def critical_hazard_count(self) -> int:
        return sum(1 for h in self.hazards if h.is_critical)


class Inspection(CamelModel):
    """One completed or in-flight analysis request."""
    id: str
    created_at: datetime
    updated_at: datetime
    user_id: Optional[str] = None
    image_url: Optional[str] = None
    original_image_url: Optional[str] = None
    hazard_count: Optional[int] = Field(default=None, ge=0)
    risk_score: Optional[int] = Field(default=None, ge=0, le=100)
    safety_grade: Optional[str] = None
    analysis_results: Optional[AnalysisResult] = None
    processing_status: ProcessingStatus

    @model_validator(mode="after")
    def check_result_fields(self):
        """Result fields are present if and only if the inspection is completed."""
        result_fields = {
            "hazardCount": self.hazard_count,
            "riskScore": self.risk_score,
            "safetyGrade": self.safety_grade,
            "analysisResults": self.analysis_results,
        }
        if self.processing_status == ProcessingStatus.COMPLETED:
            missing = [name for name, value in result_fields.items() if value is None]
            if missing:
                raise ValueError(f"Completed inspection missing: {', '.join(missing)}")
        else:
            present = [name for name, value in result_fields.items() if value is not None]
            if present:
                raise ValueError(
                    f"Inspection in status '{self.processing_status.value}' "
                    f"must not carry: {', '.join(present)}"
                )
        return self

    @property
    def is_completed(self) -> bool:
        return self.processing_status == ProcessingStatus.COMPLETED


class AnalyzeResult(CamelModel):
    """Immediate response of an analyze submission."""
    inspection: Inspection
    analysis: AnalysisResult
    usage: Optional[Dict[str, Any]] = None


class InspectionPage(CamelModel):
    """One page of the inspection list."""
    inspections: List[Inspection] = Field(default_factory=list)
    page: int = 1
    page_size: int = 10
    total_count: int = 0


class UsageLog(CamelModel):
    """API usage record for an analyze call."""
    id: str
    endpoint: str
    tokens_used: Optional[int] = None
    api_cost: Optional[str] = None
    response_time: Optional[float] = None
    success: bool
    created_at: datetime


class AcquiredImage(BaseModel):
    """An image ready for upload."""
    model_config = ConfigDict(frozen=True)

    local_uri: str
    data: bytes
    mime_type: str = "image/jpeg"
    compressed: bool = False

    @property
    def approx_size_bytes(self) -> int:
        return len(self.data)


__all__ = [
    "HazardCategory",
    "HAZARD_CATEGORIES",
    "Severity",
    "SAFETY_GRADES",
    "ProcessingStatus",
    "Hazard",
    "OverallAssessment",
    "AnalysisMetadata",
    "AnalysisResult",
    "Inspection",
    "AnalyzeResult",
    "InspectionPage",
    "UsageLog",
    "AcquiredImage",
]
