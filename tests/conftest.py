"""
Shared fixtures for the HSE inspection client tests.
"""

import json
import tempfile
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import pytest

from hse_client.clients import AnalysisClient, UploadClient
from hse_client.clients.auth import AuthHeaderBuilder, StaticTokenSession

BASE_URL = "https://api.test"


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, body: Any = None):
        self.status_code = status_code
        if isinstance(body, (dict, list)):
            self.text = json.dumps(body)
        else:
            self.text = body or ""

    def json(self):
        return json.loads(self.text)


class FakeHttp:
    """Routes requests by (method, path) and records every call."""

    def __init__(self):
        self.routes: Dict[tuple, Any] = {}
        self.calls: List[SimpleNamespace] = []
        self.closed = False

    def add(self, method: str, path: str, status: int = 200, body: Any = None, exc: Optional[Exception] = None):
        self.routes[(method, path)] = exc if exc is not None else FakeResponse(status, body)

    def paths(self) -> List[str]:
        return [call.path for call in self.calls]

    def request(self, method, url, headers=None, json=None, params=None, timeout=None):
        path = urlparse(url).path
        self.calls.append(SimpleNamespace(
            method=method, url=url, path=path, headers=headers, json=json, params=params, timeout=timeout
        ))
        route = self.routes.get((method, path))
        if route is None:
            return FakeResponse(500, "no route")
        if isinstance(route, Exception):
            raise route
        return route

    def close(self):
        self.closed = True


@pytest.fixture
def temp_dir():
    """Temporary directory removed after the test."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp)


@pytest.fixture
def fake_http():
    return FakeHttp()


@pytest.fixture
def auth():
    """Header builder with an active session."""
    return AuthHeaderBuilder(StaticTokenSession("test-token"))


@pytest.fixture
def no_auth():
    """Header builder without a session."""
    return AuthHeaderBuilder(None)


@pytest.fixture
def hazard_payload():
    """Factory for hazard payloads in the service's camelCase shape."""
    def _make(hazard_id: str = "h1", category: str = "PPE", severity: str = "High", priority: int = 5, **extra):
        payload = {
            "id": hazard_id,
            "description": f"Hazard {hazard_id}",
            "location": "Loading dock",
            "category": category,
            "severity": severity,
            "immediateSolutions": ["Stop work"],
            "longTermSolutions": ["Train staff"],
            "priority": priority,
        }
        payload.update(extra)
        return payload
    return _make


@pytest.fixture
def analysis_payload(hazard_payload):
    """Factory for analysis payloads."""
    def _make(hazards: Optional[list] = None, risk_score: int = 72, grade: str = "C"):
        if hazards is None:
            hazards = [
                hazard_payload("h1", "PPE", "High", 8),
                hazard_payload("h2", "Fall", "Critical", 9),
                hazard_payload("h3", "PPE", "Low", 3),
            ]
        return {
            "hazards": hazards,
            "overallAssessment": {
                "riskScore": risk_score,
                "safetyGrade": grade,
                "topPriorities": ["Provide hard hats", "Install guard rails"],
                "complianceStandards": ["OSHA 1926.501"],
            },
            "metadata": {"analysisTime": 14.2, "tokensUsed": 4200, "confidence": 87},
        }
    return _make


@pytest.fixture
def inspection_payload(analysis_payload):
    """Factory for inspection payloads consistent with their status."""
    def _make(inspection_id: str = "insp_1", status: str = "completed", analysis: Optional[dict] = None,
              created_at: str = "2026-10-01T12:00:00Z"):
        payload = {
            "id": inspection_id,
            "createdAt": created_at,
            "updatedAt": created_at,
            "userId": "user_1",
            "imageUrl": "https://x/y.jpg",
            "processingStatus": status,
            "hazardCount": None,
            "riskScore": None,
            "safetyGrade": None,
            "analysisResults": None,
        }
        if status == "completed":
            analysis = analysis or analysis_payload()
            payload.update(
                hazardCount=len(analysis["hazards"]),
                riskScore=analysis["overallAssessment"]["riskScore"],
                safetyGrade=analysis["overallAssessment"]["safetyGrade"],
                analysisResults=analysis,
            )
        return payload
    return _make


@pytest.fixture
def uploader(auth, fake_http):
    return UploadClient(auth, base_url=BASE_URL, http=fake_http)


@pytest.fixture
def analyzer(auth, fake_http):
    return AnalysisClient(auth, base_url=BASE_URL, http=fake_http)
