"""Report Client Interface

Abstract base class for the external collaborator that turns an incident
summary into structured report data.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from incident_report_service.models.report import ReportRequest


class ReportClient(ABC):
    """Black-box report generator. One call, all or nothing, no retries."""

    @abstractmethod
    async def generate(self, request: ReportRequest) -> Dict[str, Any]:
        """Generate structured report data for an incident.

        Args:
            request: Incident summary built from the session's data

        Returns:
            Decoded JSON object expected to match the report schema

        Raises:
            ReportGenerationError: If the call fails or the response is not JSON
        """
        pass

    async def close(self) -> None:
        """Release any underlying connections"""
        return None
