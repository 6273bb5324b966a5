"""Gemini Report Client

Calls the Generative Language REST API with a JSON response schema.
"""

import json
import logging
from typing import Any, Dict, Optional

import httpx

from incident_report_service.core.errors import ReportGenerationError
from incident_report_service.infrastructure.llm.client import ReportClient
from incident_report_service.models.report import REPORT_RESPONSE_SCHEMA, ReportRequest

logger = logging.getLogger(__name__)


class GeminiReportClient(ReportClient):
    """Report client backed by Gemini ``generateContent``.

    The API key is bound at construction; a missing key is logged once and
    every call then fails, which sends the session down the fallback path.
    """

    def __init__(
        self,
        api_key: Optional[str],
        endpoint_url: str,
        timeout: Optional[float] = 60.0,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        if not api_key:
            logger.warning(
                "GEMINI_API_KEY not set; report generation will use the fallback report"
            )
        self.api_key = api_key
        self.endpoint_url = endpoint_url
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    def _build_payload(self, request: ReportRequest) -> Dict[str, Any]:
        return {
            "contents": [{
                "parts": [{"text": request.to_prompt()}]
            }],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": REPORT_RESPONSE_SCHEMA,
            },
        }

    async def generate(self, request: ReportRequest) -> Dict[str, Any]:
        """Request a report and decode the JSON text of the first candidate"""
        if not self.api_key:
            raise ReportGenerationError("No Gemini API key configured")

        try:
            resp = await self._client.post(
                self.endpoint_url,
                headers={
                    "x-goog-api-key": self.api_key,
                    "Content-Type": "application/json"
                },
                json=self._build_payload(request),
            )
        except httpx.HTTPError as e:
            raise ReportGenerationError(f"Gemini request failed: {e}") from e

        if resp.status_code != 200:
            raise ReportGenerationError(
                f"Gemini returned {resp.status_code}: {resp.text[:300]}"
            )

        try:
            data = resp.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ReportGenerationError(f"Unexpected Gemini response shape: {e}") from e

        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            raise ReportGenerationError(f"Gemini returned non-JSON text: {text[:200]}") from e

        if not isinstance(parsed, dict):
            raise ReportGenerationError("Gemini response is not a JSON object")

        logger.info("Gemini report generated")
        return parsed

    async def close(self) -> None:
        await self._client.aclose()
