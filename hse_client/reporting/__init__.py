"""
Reporting module for the HSE inspection client.
"""

from hse_client.reporting.aggregator import (
    ColorKey,
    GradeColor,
    HazardReport,
    HazardSection,
    PriorityLevel,
    RiskBand,
    build_report,
    grade_color_key,
    group,
    priority_fill_percent,
    priority_color_key,
    priority_level,
    risk_band,
    risk_color_key,
    severity_color_key,
    status_display,
)
from hse_client.reporting.summary import summarize_inspection

__all__ = [
    "ColorKey",
    "GradeColor",
    "HazardReport",
    "HazardSection",
    "PriorityLevel",
    "RiskBand",
    "build_report",
    "grade_color_key",
    "group",
    "priority_fill_percent",
    "priority_color_key",
    "priority_level",
    "risk_band",
    "risk_color_key",
    "severity_color_key",
    "status_display",
    "summarize_inspection",
]
