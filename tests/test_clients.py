"""
Unit tests for the upload and analysis clients.
"""

import asyncio
from datetime import datetime, timezone

import pytest
import requests

from hse_client.clients import UploadClient
from hse_client.errors import (
    AuthRequired,
    NetworkError,
    NotFound,
    PayloadTooLarge,
    ServerError,
    UnexpectedResponse,
)

UPLOAD = "/api/uploads/base64"
ANALYZE = "/api/inspections/analyze"


class TestUploadClient:
    """Tests for UploadClient."""

    def test_upload_returns_url(self, uploader, fake_http):
        fake_http.add("POST", UPLOAD, body={"ok": True, "url": "https://x/y.jpg"})

        url = asyncio.run(uploader.upload(b"abc"))

        assert url == "https://x/y.jpg"
        call = fake_http.calls[0]
        assert call.url == f"https://api.test{UPLOAD}"
        assert call.json == {"base64": "YWJj", "filename": "inspection"}
        assert call.headers["Authorization"] == "Bearer test-token"

    def test_filename_sanitized(self, uploader, fake_http):
        fake_http.add("POST", UPLOAD, body={"ok": True, "url": "https://x/y.jpg"})

        asyncio.run(uploader.upload(b"abc", filename="../site photo.jpg"))

        assert fake_http.calls[0].json["filename"] == "site_photo.jpg"

    def test_413_maps_to_payload_too_large(self, uploader, fake_http):
        fake_http.add("POST", UPLOAD, status=413, body="Request Entity Too Large")

        with pytest.raises(PayloadTooLarge) as exc_info:
            asyncio.run(uploader.upload(b"abc"))
        assert exc_info.value.status_code == 413

    def test_401_maps_to_auth_required(self, uploader, fake_http):
        fake_http.add("POST", UPLOAD, status=401, body={"error": "expired"})

        with pytest.raises(AuthRequired):
            asyncio.run(uploader.upload(b"abc"))

    def test_other_status_carries_truncated_body(self, uploader, fake_http):
        fake_http.add("POST", UPLOAD, status=500, body="x" * 1000)

        with pytest.raises(ServerError) as exc_info:
            asyncio.run(uploader.upload(b"abc"))

        assert exc_info.value.status_code == 500
        assert len(exc_info.value.body) == 300
        assert "Upload failed (500)" in exc_info.value.message

    def test_missing_url(self, uploader, fake_http):
        fake_http.add("POST", UPLOAD, body={"ok": True, "fileId": "f1"})

        with pytest.raises(UnexpectedResponse, match="missing URL") as exc_info:
            asyncio.run(uploader.upload(b"abc"))

        assert exc_info.value.status_code == 200
        assert exc_info.value.body == '{"ok": true, "fileId": "f1"}'

    def test_ok_false(self, uploader, fake_http):
        fake_http.add("POST", UPLOAD, body={"ok": False, "url": "https://x/y.jpg"})

        with pytest.raises(UnexpectedResponse):
            asyncio.run(uploader.upload(b"abc"))

    def test_non_json_body(self, uploader, fake_http):
        fake_http.add("POST", UPLOAD, body="<html>gateway</html>")

        with pytest.raises(UnexpectedResponse):
            asyncio.run(uploader.upload(b"abc"))

    def test_timeout_maps_to_network_error(self, uploader, fake_http):
        fake_http.add("POST", UPLOAD, exc=requests.Timeout("read timed out"))

        with pytest.raises(NetworkError, match="timed out"):
            asyncio.run(uploader.upload(b"abc"))

    def test_connection_error_maps_to_network_error(self, uploader, fake_http):
        fake_http.add("POST", UPLOAD, exc=requests.ConnectionError("refused"))

        with pytest.raises(NetworkError):
            asyncio.run(uploader.upload(b"abc"))

    def test_no_session_makes_no_request(self, no_auth, fake_http):
        client = UploadClient(no_auth, base_url="https://api.test", http=fake_http)

        with pytest.raises(AuthRequired):
            asyncio.run(client.upload(b"abc"))
        assert fake_http.calls == []


class TestAnalysisClient:
    """Tests for AnalysisClient."""

    def test_submit(self, analyzer, fake_http, inspection_payload, analysis_payload):
        fake_http.add("POST", ANALYZE, body={
            "ok": True,
            "inspection": inspection_payload(),
            "analysis": analysis_payload(),
            "usage": {"tokensUsed": 4200},
        })

        result = asyncio.run(analyzer.submit("https://x/y.jpg"))

        assert fake_http.calls[0].json == {"imageUrl": "https://x/y.jpg"}
        assert result.inspection.id == "insp_1"
        assert result.analysis.hazard_count == 3

    def test_submit_without_analysis(self, analyzer, fake_http, inspection_payload):
        fake_http.add("POST", ANALYZE, body={"ok": True, "inspection": inspection_payload()})

        with pytest.raises(UnexpectedResponse) as exc_info:
            asyncio.run(analyzer.submit("https://x/y.jpg"))

        assert exc_info.value.status_code == 200
        assert exc_info.value.body.startswith('{"ok": true, "inspection": {"id": "insp_1"')
        assert len(exc_info.value.body) <= 400

    def test_submit_invalid_analysis(self, analyzer, fake_http, inspection_payload, analysis_payload):
        analysis = analysis_payload()
        del analysis["overallAssessment"]
        fake_http.add("POST", ANALYZE, body={
            "ok": True, "inspection": inspection_payload(), "analysis": analysis,
        })

        with pytest.raises(UnexpectedResponse):
            asyncio.run(analyzer.submit("https://x/y.jpg"))

    def test_submit_server_error(self, analyzer, fake_http):
        fake_http.add("POST", ANALYZE, status=502, body="bad gateway")

        with pytest.raises(ServerError, match="Analyze failed \\(502\\)"):
            asyncio.run(analyzer.submit("https://x/y.jpg"))

    def test_fetch_by_id(self, analyzer, fake_http, inspection_payload):
        fake_http.add("GET", "/api/inspections/abc", body={
            "ok": True, "inspection": inspection_payload("abc", status="processing"),
        })

        inspection = asyncio.run(analyzer.fetch_by_id("abc"))

        assert inspection.id == "abc"
        assert inspection.analysis_results is None

    def test_fetch_by_id_404(self, analyzer, fake_http):
        fake_http.add("GET", "/api/inspections/abc", status=404, body={"ok": False})

        with pytest.raises(NotFound):
            asyncio.run(analyzer.fetch_by_id("abc"))

    def test_fetch_invalid_id_makes_no_request(self, analyzer, fake_http):
        with pytest.raises(NotFound):
            asyncio.run(analyzer.fetch_by_id("../users"))
        assert fake_http.calls == []

    def test_list_inspections(self, analyzer, fake_http, inspection_payload):
        fake_http.add("GET", "/api/inspections/list", body={
            "ok": True,
            "inspections": [inspection_payload("a"), inspection_payload("b", status="pending")],
            "page": 2,
            "pageSize": 5,
            "totalCount": 7,
        })

        page = asyncio.run(analyzer.list_inspections(page=2, page_size=5))

        assert fake_http.calls[0].params == {"page": 2, "pageSize": 5}
        assert [i.id for i in page.inspections] == ["a", "b"]
        assert page.total_count == 7

    def test_list_invalid_page_size(self, analyzer, fake_http):
        with pytest.raises(ValueError):
            asyncio.run(analyzer.list_inspections(page_size=500))
        assert fake_http.calls == []

    def test_fetch_usage_log(self, analyzer, fake_http):
        fake_http.add("GET", "/api/inspections/usage-logs/list", body={
            "ok": True,
            "usageLogs": [{
                "id": "log_1",
                "endpoint": ANALYZE,
                "tokensUsed": 4200,
                "responseTime": 14200,
                "success": True,
                "createdAt": "2026-10-01T12:00:03Z",
            }],
        })
        created_at = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)

        usage = asyncio.run(analyzer.fetch_usage_log(created_at))

        params = fake_http.calls[0].params
        assert params["endpoint"] == ANALYZE
        assert params["after"] == "2026-10-01T11:55:00+00:00"
        assert params["before"] == "2026-10-01T12:05:00+00:00"
        assert usage.tokens_used == 4200

    def test_fetch_usage_log_empty(self, analyzer, fake_http):
        fake_http.add("GET", "/api/inspections/usage-logs/list", body={"ok": True, "usageLogs": []})

        created_at = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)
        assert asyncio.run(analyzer.fetch_usage_log(created_at)) is None


def test_close_closes_session(uploader, fake_http):
    uploader.close()
    assert fake_http.closed is True
