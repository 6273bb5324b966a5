"""Unit tests for the Gemini report client

The HTTP layer is replaced with httpx.MockTransport.
"""

import json

import httpx
import pytest

from incident_report_service.core.errors import ReportGenerationError
from incident_report_service.core.report_generator import build_report_request
from incident_report_service.infrastructure.llm import GeminiReportClient

ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-flash:generateContent"


def _client(handler, api_key="test-key") -> GeminiReportClient:
    transport = httpx.MockTransport(handler)
    return GeminiReportClient(
        api_key=api_key,
        endpoint_url=ENDPOINT,
        http_client=httpx.AsyncClient(transport=transport),
    )


def _candidate(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.mark.unit
class TestGeminiReportClient:

    async def test_sends_prompt_and_schema(self, complete_incident, report_payload):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["key"] = request.headers["x-goog-api-key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_candidate(json.dumps(report_payload())))

        client = _client(handler)
        result = await client.generate(build_report_request(complete_incident))
        await client.close()

        assert result["title"] == "Missed exchange at agreed location"
        assert seen["url"] == ENDPOINT
        assert seen["key"] == "test-key"
        config = seen["body"]["generationConfig"]
        assert config["responseMimeType"] == "application/json"
        assert "aiNotes" in config["responseSchema"]["required"]
        prompt = seen["body"]["contents"][0]["parts"][0]["text"]
        assert "- Jurisdiction: Ontario, Canada" in prompt

    async def test_missing_key_fails_without_request(self, complete_incident):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200)

        client = _client(handler, api_key=None)
        with pytest.raises(ReportGenerationError):
            await client.generate(build_report_request(complete_incident))
        assert calls == []

    async def test_http_error_status(self, complete_incident):
        client = _client(lambda request: httpx.Response(503, text="overloaded"))
        with pytest.raises(ReportGenerationError):
            await client.generate(build_report_request(complete_incident))

    async def test_non_json_text(self, complete_incident):
        client = _client(lambda request: httpx.Response(200, json=_candidate("Sorry, I can't help")))
        with pytest.raises(ReportGenerationError):
            await client.generate(build_report_request(complete_incident))

    async def test_unexpected_shape(self, complete_incident):
        client = _client(lambda request: httpx.Response(200, json={"candidates": []}))
        with pytest.raises(ReportGenerationError):
            await client.generate(build_report_request(complete_incident))

    async def test_json_array_rejected(self, complete_incident):
        client = _client(lambda request: httpx.Response(200, json=_candidate("[1, 2]")))
        with pytest.raises(ReportGenerationError):
            await client.generate(build_report_request(complete_incident))

    async def test_transport_error(self, complete_incident):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = _client(handler)
        with pytest.raises(ReportGenerationError):
            await client.generate(build_report_request(complete_incident))
