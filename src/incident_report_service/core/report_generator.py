"""
Report Generation Adapter

Builds the request from incident data, calls the report client, validates
the response and substitutes a deterministic fallback report on any failure.
"""

import asyncio
import logging
from enum import Enum
from typing import Optional

from pydantic import ValidationError

from incident_report_service.core.errors import GenerationInProgressError, ReportGenerationError
from incident_report_service.infrastructure.llm.client import ReportClient
from incident_report_service.models.incident import IncidentData
from incident_report_service.models.report import (
    NO_CHILDREN_PLACEHOLDER,
    ReportCategory,
    ReportData,
    ReportRequest,
    Severity,
)

logger = logging.getLogger(__name__)

FALLBACK_SOURCES = ("separation.ca", "justice.gc.ca", "ontario.ca", "familylaw.ca")


class GenerationStatus(str, Enum):
    """Observable states of the adapter"""
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED_SUBSTITUTED = "failed_substituted"


def build_report_request(data: IncidentData) -> ReportRequest:
    """Encode the incident fields the model needs, in a fixed shape"""
    return ReportRequest(
        date=data.date,
        time=data.time,
        jurisdiction=data.jurisdiction,
        parties=", ".join(data.parties),
        children=", ".join(data.children) or NO_CHILDREN_PLACEHOLDER,
        evidence_count=len(data.evidence),
        narrative=data.narrative,
    )


def fallback_report(data: IncidentData) -> ReportData:
    """Canned report derived only from date, time, parties, children and jurisdiction"""
    parties = " and ".join(data.parties)
    children = ", ".join(data.children)
    return ReportData(
        title="Co-parent failed to respond to urgent communications regarding child's health",
        category=ReportCategory.CHILD_SAFETY,
        severity=Severity.HIGH,
        severityJustification=(
            "Non-responsive communication regarding a child's health directly impacts "
            "the child's welfare and ability to receive timely care."
        ),
        professionalSummary=(
            f"On {data.date} at {data.time}, an incident occurred involving {parties} "
            f"concerning urgent communication regarding {children}'s health in {data.jurisdiction}. "
            "The reporting party documented a lack of response to urgent health-related "
            "communications. This non-engagement occurred while attempting to communicate "
            "critical health information. The failure to respond forced the primary caregiver "
            "to navigate a potentially time-sensitive health issue without input from the "
            "co-parent, potentially placing the child at risk."
        ),
        observedImpact=(
            "The inherent stress and uncertainty placed upon the communicating parent attempting "
            "to address a child's health needs creates a tense and anxious environment. This can "
            "affect the stability and peace of mind of the child's immediate surroundings, "
            "potentially leading to delayed medical attention."
        ),
        legalInsights=(
            f"In {data.jurisdiction}, decisions regarding a child's health fall under the "
            "'best interests of the child' principle. Parents with decision-making responsibility "
            "have a duty to act in the child's best interests, which involves caring for their "
            "health and engaging in effective communication. Failure to communicate on health "
            "matters could be seen as a dereliction of parental duty."
        ),
        sources=FALLBACK_SOURCES,
        aiNotes=(
            "Consider compiling and documenting all urgent messages sent, including dates, times, "
            "and specific health concerns communicated, along with any evidence of the "
            "co-parent's non-response."
        ),
    )


class ReportGenerator:
    """Runs at most one generation at a time for a session"""

    def __init__(self, client: ReportClient, timeout: Optional[float] = None):
        self.client = client
        self.timeout = timeout
        self.status = GenerationStatus.IDLE

    @property
    def in_flight(self) -> bool:
        return self.status == GenerationStatus.IN_FLIGHT

    async def _call_client(self, data: IncidentData) -> ReportData:
        request = build_report_request(data)
        call = self.client.generate(request)
        raw = await (asyncio.wait_for(call, self.timeout) if self.timeout else call)
        return ReportData.model_validate(raw)

    async def generate(self, data: IncidentData) -> ReportData:
        """Produce a report for ``data``; never fails once started.

        Raises:
            GenerationInProgressError: If another generation is still running
        """
        if self.in_flight:
            raise GenerationInProgressError("A report is already being generated")

        self.status = GenerationStatus.IN_FLIGHT
        try:
            report = await self._call_client(data)
        except asyncio.CancelledError:
            self.status = GenerationStatus.IDLE
            raise
        except (ReportGenerationError, ValidationError, asyncio.TimeoutError) as e:
            logger.error(f"Error generating summary: {e}")
            self.status = GenerationStatus.FAILED_SUBSTITUTED
            return fallback_report(data)
        except Exception as e:
            # Collaborators are black boxes; any failure degrades to the fallback
            logger.exception(f"Unexpected error generating summary: {e}")
            self.status = GenerationStatus.FAILED_SUBSTITUTED
            return fallback_report(data)

        logger.info(f"Report generated: {report.title}")
        self.status = GenerationStatus.SUCCEEDED
        return report

    def reset(self) -> None:
        """Forget the last outcome; an in-flight call keeps its status until it returns"""
        if not self.in_flight:
            self.status = GenerationStatus.IDLE
