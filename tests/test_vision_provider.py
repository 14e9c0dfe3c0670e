"""Gemini vision provider tests with the HTTP layer stubbed out."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest
import requests

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.validation import VisionAnalysis
from models.seasons import ColorSeason
from tools import vision_provider
from tools.vision_provider import GeminiVisionProvider, MockVisionProvider, VisionAnalysisError

VALID_REPLY = {
    "skinUndertone": "Cool",
    "skinUndertoneConfidence": 0.8,
    "contrastLevel": "high",
    "hairTone": "cool",
    "eyeColor": "gray blue",
    "recommendedSeason": "cool_winter",
    "confidence": 0.85,
    "reasoning": "Pink undertones with high contrast.",
    "agreesWithQuiz": False,
}


class _FakeResponse:
    def __init__(self, payload: Dict[str, Any], status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"status {self.status_code}")

    def json(self) -> Dict[str, Any]:
        return self._payload


def _gemini_payload(text: str) -> Dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class _FakeHttp:
    """Stands in for ``requests.post``: records requests and replays queued replies."""

    def __init__(self) -> None:
        self.requests: List[Dict[str, Any]] = []
        self.replies: List[Any] = []

    def queue(self, reply: Any) -> None:
        self.replies.append(reply)

    def post(self, url: str, **kwargs: Any) -> _FakeResponse:
        self.requests.append({"url": url, **kwargs})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture()
def http(monkeypatch: pytest.MonkeyPatch) -> _FakeHttp:
    fake = _FakeHttp()
    monkeypatch.setattr(vision_provider.requests, "post", fake.post)
    return fake


def test_successful_analysis_is_validated(http: _FakeHttp) -> None:
    http.queue(_FakeResponse(_gemini_payload("```json\n" + json.dumps(VALID_REPLY) + "\n```")))
    provider = GeminiVisionProvider(api_key="secret", model="gemini-test", timeout_seconds=3.0)

    analysis = provider.analyze(b"\xff\xd8jpeg", ColorSeason.WARM_SPRING, 70)

    assert analysis.skin_undertone == "cool"
    assert analysis.recommended_season is ColorSeason.COOL_WINTER
    assert analysis.confidence == pytest.approx(0.85)

    request = http.requests[0]
    assert request["url"].endswith("/models/gemini-test:generateContent")
    assert request["params"] == {"key": "secret"}
    assert request["timeout"] == 3.0
    parts = request["json"]["contents"][0]["parts"]
    assert "warm_spring" in parts[0]["text"]
    assert "Quiz confidence: 70%" in parts[0]["text"]
    assert parts[1]["inline_data"]["mime_type"] == "image/jpeg"


def test_data_url_keeps_its_mime_type(http: _FakeHttp) -> None:
    http.queue(_FakeResponse(_gemini_payload(json.dumps(VALID_REPLY))))
    provider = GeminiVisionProvider(api_key="secret")

    provider.analyze("data:image/png;base64,iVBORw0KGgo=", ColorSeason.COOL_SUMMER, 40)

    inline = http.requests[0]["json"]["contents"][0]["parts"][1]["inline_data"]
    assert inline == {"mime_type": "image/png", "data": "iVBORw0KGgo="}


def test_schema_violation_raises(http: _FakeHttp) -> None:
    broken = dict(VALID_REPLY, recommendedSeason="deep_winter")
    http.queue(_FakeResponse(_gemini_payload(json.dumps(broken))))

    with pytest.raises(VisionAnalysisError, match="schema_validation"):
        GeminiVisionProvider(api_key="secret").analyze(b"img", ColorSeason.WARM_SPRING, 50)


def test_prose_reply_raises(http: _FakeHttp) -> None:
    http.queue(_FakeResponse(_gemini_payload("I cannot see a face in this photo.")))

    with pytest.raises(VisionAnalysisError, match="unparseable_reply"):
        GeminiVisionProvider(api_key="secret").analyze(b"img", ColorSeason.WARM_SPRING, 50)


def test_transport_errors_raise(http: _FakeHttp) -> None:
    http.queue(requests.Timeout("too slow"))
    with pytest.raises(VisionAnalysisError, match="request_error"):
        GeminiVisionProvider(api_key="secret").analyze(b"img", ColorSeason.WARM_SPRING, 50)

    http.queue(_FakeResponse({}, status_code=503))
    with pytest.raises(VisionAnalysisError, match="request_error"):
        GeminiVisionProvider(api_key="secret").analyze(b"img", ColorSeason.WARM_SPRING, 50)


def test_missing_key_or_image_never_calls_the_service(http: _FakeHttp) -> None:
    with pytest.raises(VisionAnalysisError, match="missing_api_key"):
        GeminiVisionProvider(api_key=None).analyze(b"img", ColorSeason.WARM_SPRING, 50)
    with pytest.raises(VisionAnalysisError, match="missing_image"):
        GeminiVisionProvider(api_key="secret").analyze(b"", ColorSeason.WARM_SPRING, 50)
    assert http.requests == []


def test_mock_provider_records_calls_and_validates() -> None:
    provider = MockVisionProvider(analysis=VALID_REPLY)
    analysis = provider.analyze(b"img", ColorSeason.COOL_SUMMER, 55)

    assert isinstance(analysis, VisionAnalysis)
    assert provider.calls == [{"quiz_season": ColorSeason.COOL_SUMMER, "quiz_confidence": 55}]

    failing = MockVisionProvider(error=VisionAnalysisError("offline"))
    with pytest.raises(VisionAnalysisError):
        failing.analyze(b"img", ColorSeason.COOL_SUMMER, 55)
