"""Incident Session Factory

Builds the process-wide session with its collaborators taken from settings.
"""

import logging
from typing import Optional

from incident_report_service.config.settings import settings
from incident_report_service.core.incident_session import IncidentSession
from incident_report_service.infrastructure.llm import GeminiReportClient
from incident_report_service.infrastructure.storage import LocalStorage

logger = logging.getLogger(__name__)

# Single session per process: one user, no persistence
_session_instance: Optional[IncidentSession] = None


def build_incident_session() -> IncidentSession:
    """Construct a session wired to the Gemini client and local evidence storage"""
    client = GeminiReportClient(
        api_key=settings.gemini_api_key,
        endpoint_url=settings.generate_content_url,
        timeout=settings.generation_timeout_seconds,
    )
    storage = LocalStorage(base_path=settings.storage_local_path)
    logger.info(f"Incident session initialized: model={settings.gemini_model}")
    return IncidentSession(
        client=client,
        storage=storage,
        generation_timeout=settings.generation_timeout_seconds,
    )


def get_incident_session() -> IncidentSession:
    """Get or create the global session instance"""
    global _session_instance

    if _session_instance is None:
        _session_instance = build_incident_session()

    return _session_instance


async def close_incident_session() -> None:
    """Release evidence and close the report client of the global session"""
    global _session_instance

    if _session_instance is None:
        return

    await _session_instance.restart()
    await _session_instance.generator.client.close()
    _session_instance = None
    logger.info("Incident session closed")
