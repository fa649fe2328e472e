"""
Unit tests for the wire schemas.
"""

import pytest
from pydantic import ValidationError

from hse_client.schemas.models import (
    AcquiredImage,
    AnalysisResult,
    AnalyzeResult,
    Hazard,
    Inspection,
    InspectionPage,
    ProcessingStatus,
)


class TestHazard:
    """Tests for Hazard parsing."""

    def test_parses_camel_case_payload(self, hazard_payload):
        hazard = Hazard.model_validate(hazard_payload("h1", "Fall", "Critical", 9))

        assert hazard.category == "Fall"
        assert hazard.immediate_solutions == ["Stop work"]
        assert hazard.long_term_solutions == ["Train staff"]
        assert hazard.is_critical is True

    def test_category_case_variant_normalized(self, hazard_payload):
        hazard = Hazard.model_validate(hazard_payload(category="ppe"))
        assert hazard.category == "PPE"

    def test_unknown_category_becomes_other(self, hazard_payload):
        hazard = Hazard.model_validate(hazard_payload(category="Ergonomic"))
        assert hazard.category == "Other"

    @pytest.mark.parametrize("priority", [0, 11])
    def test_priority_out_of_range_rejected(self, hazard_payload, priority):
        with pytest.raises(ValidationError):
            Hazard.model_validate(hazard_payload(priority=priority))

    def test_unknown_severity_rejected(self, hazard_payload):
        with pytest.raises(ValidationError):
            Hazard.model_validate(hazard_payload(severity="Severe"))


class TestAnalysisResult:
    """Tests for AnalysisResult."""

    def test_counts(self, analysis_payload):
        analysis = AnalysisResult.model_validate(analysis_payload())

        assert analysis.hazard_count == 3
        assert analysis.critical_hazard_count == 1
        assert analysis.overall_assessment.risk_score == 72
        assert analysis.metadata.tokens_used == 4200

    def test_risk_score_out_of_range_rejected(self, analysis_payload):
        with pytest.raises(ValidationError):
            AnalysisResult.model_validate(analysis_payload(risk_score=101))

    def test_unknown_grade_accepted(self, analysis_payload):
        analysis = AnalysisResult.model_validate(analysis_payload(grade="E"))
        assert analysis.overall_assessment.safety_grade == "E"


class TestInspection:
    """Tests for Inspection result-field consistency."""

    def test_completed_inspection(self, inspection_payload):
        inspection = Inspection.model_validate(inspection_payload())

        assert inspection.is_completed
        assert inspection.hazard_count == 3
        assert inspection.analysis_results.hazard_count == 3

    def test_processing_inspection_has_no_results(self, inspection_payload):
        inspection = Inspection.model_validate(inspection_payload(status="processing"))

        assert inspection.processing_status == ProcessingStatus.PROCESSING
        assert inspection.analysis_results is None
        assert inspection.risk_score is None

    def test_completed_without_results_rejected(self, inspection_payload):
        payload = inspection_payload()
        payload["analysisResults"] = None

        with pytest.raises(ValidationError, match="analysisResults"):
            Inspection.model_validate(payload)

    def test_pending_with_results_rejected(self, inspection_payload):
        payload = inspection_payload(status="pending")
        payload["riskScore"] = 50

        with pytest.raises(ValidationError, match="riskScore"):
            Inspection.model_validate(payload)

    def test_analyze_result_and_page(self, inspection_payload, analysis_payload):
        result = AnalyzeResult.model_validate({
            "ok": True,
            "inspection": inspection_payload(),
            "analysis": analysis_payload(),
        })
        page = InspectionPage.model_validate({
            "inspections": [inspection_payload("a"), inspection_payload("b", status="failed")],
            "page": 1,
            "pageSize": 10,
            "totalCount": 2,
        })

        assert result.inspection.id == "insp_1"
        assert page.total_count == 2
        assert page.inspections[1].processing_status == ProcessingStatus.FAILED


class TestProcessingStatus:
    """Tests for status ordering."""

    def test_forward_moves_allowed(self):
        assert ProcessingStatus.PENDING.can_advance_to(ProcessingStatus.PROCESSING)
        assert ProcessingStatus.PROCESSING.can_advance_to(ProcessingStatus.COMPLETED)
        assert ProcessingStatus.PENDING.can_advance_to(ProcessingStatus.FAILED)

    def test_backward_moves_rejected(self):
        assert not ProcessingStatus.PROCESSING.can_advance_to(ProcessingStatus.PENDING)
        assert not ProcessingStatus.COMPLETED.can_advance_to(ProcessingStatus.PROCESSING)

    def test_terminal_statuses_are_final(self):
        assert not ProcessingStatus.COMPLETED.can_advance_to(ProcessingStatus.FAILED)
        assert not ProcessingStatus.FAILED.can_advance_to(ProcessingStatus.COMPLETED)
        assert ProcessingStatus.COMPLETED.can_advance_to(ProcessingStatus.COMPLETED)


def test_acquired_image_properties():
    image = AcquiredImage(local_uri="/tmp/a.jpg", data=b"abc")

    assert image.approx_size_bytes == 3
    assert image.mime_type == "image/jpeg"
    assert image.compressed is False
