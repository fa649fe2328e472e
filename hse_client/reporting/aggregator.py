"""
Hazard aggregation and presentation-level derivations.

All functions here are pure: the same input always yields the same output.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from hse_client.schemas.models import (
    AnalysisResult,
    Hazard,
    ProcessingStatus,
    SAFETY_GRADES,
)
from utils.config import config
from utils.logger import setup_logger

logger = setup_logger(__name__, level=config.log_level, component="AGGREGATOR")

# Risk score thresholds (lower bounds)
RISK_MODERATE_THRESHOLD = 40
RISK_ELEVATED_THRESHOLD = 60
RISK_SEVERE_THRESHOLD = 80

SEVERITY_ORDER = ("Critical", "High", "Medium", "Low")


class RiskBand(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    ELEVATED = "elevated"
    SEVERE = "severe"


class ColorKey(str, Enum):
    """Theme-independent color keys; the view maps them onto its palette."""
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    CAUTION = "caution"
    DANGER = "danger"
    CRITICAL = "critical"
    NEUTRAL = "neutral"


class GradeColor(str, Enum):
    """Color key per safety grade."""
    A = ColorKey.SUCCESS.value
    B = ColorKey.INFO.value
    C = ColorKey.WARNING.value
    D = ColorKey.CAUTION.value
    F = ColorKey.DANGER.value
    UNKNOWN_GRADE = ColorKey.NEUTRAL.value


class PriorityLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


_SEVERITY_COLORS = {
    "Critical": ColorKey.CRITICAL,
    "High": ColorKey.DANGER,
    "Medium": ColorKey.WARNING,
    "Low": ColorKey.SUCCESS,
}

_PRIORITY_COLORS = {
    PriorityLevel.HIGH: ColorKey.DANGER,
    PriorityLevel.MEDIUM: ColorKey.WARNING,
    PriorityLevel.LOW: ColorKey.SUCCESS,
}

_RISK_BAND_COLORS = {
    RiskBand.SEVERE: ColorKey.DANGER,
    RiskBand.ELEVATED: ColorKey.CAUTION,
    RiskBand.MODERATE: ColorKey.WARNING,
    RiskBand.LOW: ColorKey.SUCCESS,
}


class HazardSection(BaseModel):
    """Hazards of one category, in source order."""
    title: str
    data: List[Hazard] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.data)


class StatusDisplay(BaseModel):
    """Presentation of a processing status."""
    label: str
    subtitle: str
    color: ColorKey
    refreshable: bool = False


_STATUS_DISPLAY = {
    ProcessingStatus.COMPLETED: StatusDisplay(
        label="Analysis Complete", subtitle="Safety assessment ready", color=ColorKey.SUCCESS
    ),
    ProcessingStatus.PROCESSING: StatusDisplay(
        label="Processing...", subtitle="AI analyzing image", color=ColorKey.WARNING, refreshable=True
    ),
    ProcessingStatus.PENDING: StatusDisplay(
        label="Pending Analysis", subtitle="Waiting in queue", color=ColorKey.NEUTRAL, refreshable=True
    ),
    ProcessingStatus.FAILED: StatusDisplay(
        label="Analysis Failed", subtitle="Unable to process", color=ColorKey.DANGER
    ),
}


class HazardReport(BaseModel):
    """Presentation model of a completed analysis."""
    risk_score: int
    risk_band: RiskBand
    risk_color: ColorKey
    safety_grade: str
    grade_color: GradeColor
    hazard_count: int
    critical_count: int
    severity_counts: Dict[str, int]
    top_priorities: List[str]
    compliance_standards: List[str]
    sections: List[HazardSection]
    confidence: float


def group(hazards: List[Hazard]) -> List[HazardSection]:
    """
    Group hazards into category sections.

    Sections are ordered by category name; within a section, hazards keep
    their order from the source list.

    Args:
        hazards: Flat hazard list

    Returns:
        Ordered list of sections
    """
    by_category: Dict[str, List[Hazard]] = {}
    for hazard in hazards:
        by_category.setdefault(hazard.category, []).append(hazard)

    return [
        HazardSection(title=category, data=by_category[category])
        for category in sorted(by_category)
    ]


def risk_band(score: int) -> RiskBand:
    """Band a 0-100 risk score using the 40/60/80 thresholds."""
    if score >= RISK_SEVERE_THRESHOLD:
        return RiskBand.SEVERE
    if score >= RISK_ELEVATED_THRESHOLD:
        return RiskBand.ELEVATED
    if score >= RISK_MODERATE_THRESHOLD:
        return RiskBand.MODERATE
    return RiskBand.LOW


def risk_color_key(score: Optional[int]) -> ColorKey:
    """Color key for a risk score; neutral when there is no score."""
    if score is None:
        return ColorKey.NEUTRAL
    return _RISK_BAND_COLORS[risk_band(score)]


def grade_color_key(grade: Optional[str]) -> GradeColor:
    """
    Color key for a safety grade.

    Values outside A-F (including None) map to UNKNOWN_GRADE, which
    renders neutrally.
    """
    if grade in SAFETY_GRADES:
        return GradeColor[grade]
    logger.debug(f"Unknown safety grade: {grade!r}")
    return GradeColor.UNKNOWN_GRADE


def severity_color_key(severity: str) -> ColorKey:
    """Color key for a hazard severity."""
    return _SEVERITY_COLORS.get(severity, ColorKey.NEUTRAL)


def priority_level(priority: int) -> PriorityLevel:
    """Bucket a 1-10 priority for the priority indicator."""
    if priority > 7:
        return PriorityLevel.HIGH
    if priority > 4:
        return PriorityLevel.MEDIUM
    return PriorityLevel.LOW


def priority_color_key(priority: int) -> ColorKey:
    return _PRIORITY_COLORS[priority_level(priority)]


def priority_fill_percent(priority: int) -> int:
    """Width of the priority indicator, 10% per priority point."""
    return max(0, min(priority, 10)) * 10


def status_display(status: ProcessingStatus) -> StatusDisplay:
    return _STATUS_DISPLAY[status]


def severity_counts(hazards: List[Hazard]) -> Dict[str, int]:
    """Hazard count per severity, in severity order."""
    counts = {severity: 0 for severity in SEVERITY_ORDER}
    for hazard in hazards:
        counts[hazard.severity] += 1
    return counts


def build_report(analysis: AnalysisResult) -> HazardReport:
    """
    Derive the presentation model of an analysis.

    Args:
        analysis: Analysis returned by the service

    Returns:
        HazardReport
    """
    assessment = analysis.overall_assessment
    report = HazardReport(
        risk_score=assessment.risk_score,
        risk_band=risk_band(assessment.risk_score),
        risk_color=risk_color_key(assessment.risk_score),
        safety_grade=assessment.safety_grade,
        grade_color=grade_color_key(assessment.safety_grade),
        hazard_count=analysis.hazard_count,
        critical_count=analysis.critical_hazard_count,
        severity_counts=severity_counts(analysis.hazards),
        top_priorities=list(assessment.top_priorities),
        compliance_standards=list(assessment.compliance_standards or []),
        sections=group(analysis.hazards),
        confidence=analysis.metadata.confidence,
    )
    logger.debug(
        f"Built report: {report.hazard_count} hazards in {len(report.sections)} sections, "
        f"band {report.risk_band.value}"
    )
    return report
