"""
Shared pytest fixtures for the incident report service test suite.

Provides a stub report client, tmp-dir evidence storage and ready-made
incident data so unit tests never hit the network.
"""

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from incident_report_service.core.errors import ReportGenerationError
from incident_report_service.core.incident_session import IncidentSession
from incident_report_service.infrastructure.llm.client import ReportClient
from incident_report_service.infrastructure.storage import LocalStorage
from incident_report_service.models.incident import IncidentData
from incident_report_service.models.report import ReportRequest


def make_report_payload(**overrides) -> Dict[str, Any]:
    payload = {
        "title": "Missed exchange at agreed location",
        "category": "Schedule Violations",
        "severity": "Medium",
        "severityJustification": "The exchange was missed without notice.",
        "professionalSummary": "On the stated date the other parent did not attend the exchange.",
        "observedImpact": "The child waited for an extended period and was visibly upset.",
        "legalInsights": "Parenting schedules in court orders are binding on both parents.",
        "sources": ["ontario.ca", "justice.gc.ca", "familylaw.ca"],
        "aiNotes": "Keep a log of all missed exchanges.",
    }
    payload.update(overrides)
    return payload


class StubReportClient(ReportClient):
    """Records requests; returns a payload, raises, or waits on a gate"""

    def __init__(
        self,
        payload: Optional[Dict[str, Any]] = None,
        error: Optional[Exception] = None,
        gate: Optional[asyncio.Event] = None
    ):
        self.payload = payload if payload is not None else make_report_payload()
        self.error = error
        self.gate = gate
        self.requests: List[ReportRequest] = []
        self.closed = False

    async def generate(self, request: ReportRequest) -> Dict[str, Any]:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.payload

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def report_client() -> StubReportClient:
    return StubReportClient()


@pytest.fixture
def failing_client() -> StubReportClient:
    return StubReportClient(error=ReportGenerationError("service unavailable"))


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(base_path=str(tmp_path / "evidence"))


@pytest.fixture
def session(report_client, storage) -> IncidentSession:
    return IncidentSession(client=report_client, storage=storage)


@pytest.fixture
def complete_incident() -> IncidentData:
    return IncidentData(
        date="2024-01-15",
        time="14:30",
        narrative="A" * 20,
        parties=("Co-parent",),
        children=(),
        jurisdiction="Ontario, Canada",
        evidence=(),
    )


def _fill_session(session: IncidentSession, data: IncidentData) -> None:
    for field in ("date", "time", "narrative", "jurisdiction"):
        session.set_field(field, getattr(data, field))
    for party in data.parties:
        session.toggle_item("parties", party)
    for child in data.children:
        session.toggle_item("children", child)


@pytest.fixture
def fill_session():
    """Enter incident data into a session through its public edit operations"""
    return _fill_session


@pytest.fixture
def report_payload():
    """Factory for a valid model response, with optional field overrides"""
    return make_report_payload


@pytest.fixture
def make_client():
    """Factory for StubReportClient instances"""
    return StubReportClient
