"""
Plain-text inspection summary for sharing.
"""

from hse_client.schemas.models import Inspection

TOP_ISSUE_COUNT = 3


def summarize_inspection(inspection: Inspection) -> str:
    """
    Build a shareable plain-text summary of an inspection.

    Args:
        inspection: Inspection record

    Returns:
        Multi-line summary text
    """
    risk = f"{inspection.risk_score}/100" if inspection.risk_score is not None else "N/A"
    lines = [
        "HSE Inspection Report",
        f"Date: {inspection.created_at.date().isoformat()}",
        f"Risk Score: {risk}",
        f"Safety Grade: {inspection.safety_grade or 'N/A'}",
        f"Hazards Found: {inspection.hazard_count or 0}",
        f"Status: {inspection.processing_status.value}",
        "",
    ]

    analysis = inspection.analysis_results
    if analysis and analysis.hazards:
        lines.append("Top Issues:")
        lines.extend(f"• {h.description}" for h in analysis.hazards[:TOP_ISSUE_COUNT])
    else:
        lines.append("No detailed analysis available")

    lines.append("Generated by HSE Safety App")
    return "\n".join(lines)
