"""Report generation collaborators."""

from incident_report_service.infrastructure.llm.client import ReportClient
from incident_report_service.infrastructure.llm.gemini_client import GeminiReportClient

__all__ = [
    "ReportClient",
    "GeminiReportClient",
]
