"""Selfie color analysis providers."""

from __future__ import annotations

import base64
import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Tuple

import requests
from pydantic import ValidationError

from logic.validation import VisionAnalysis, describe_validation_error
from models.seasons import ColorSeason

LOGGER = logging.getLogger(__name__)

GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

_PROMPT_TEMPLATE = """You are an expert in Personal Color Analysis. Analyze this selfie to determine the person's color season.

QUIZ RESULTS (for hybrid validation):
The person's quiz suggested they are: {quiz_season}
Quiz confidence: {quiz_confidence}%

OUTPUT FORMAT (JSON only, no markdown):
{{
  "skinUndertone": "warm" or "cool",
  "skinUndertoneConfidence": 0.0 to 1.0,
  "contrastLevel": "high", "medium", or "low",
  "hairTone": "warm", "cool", or "neutral",
  "eyeColor": "description",
  "recommendedSeason": "warm_spring", "cool_summer", "warm_autumn", or "cool_winter",
  "confidence": 0.0 to 1.0,
  "reasoning": "brief explanation",
  "agreesWithQuiz": true or false
}}

ANALYSIS GUIDELINES:
- Skin undertone: Golden/peachy = warm, Pink/bluish = cool
- Contrast: High contrast = bright season, Low = muted
- Hair tone: Golden/red = warm, Ash/gray = cool
- Eye color: Warm browns/hazels = warm, Gray/cool blue = cool

SEASONS:
- warm_spring: warm undertones + bright/clear coloring
- cool_summer: cool undertones + soft/muted coloring
- warm_autumn: warm undertones + rich/muted coloring
- cool_winter: cool undertones + bright/clear coloring

Return ONLY valid JSON, no markdown formatting."""


class VisionAnalysisError(RuntimeError):
    """Raised when the vision service cannot produce a usable analysis."""


class VisionProvider(ABC):
    """Abstract selfie analysis interface."""

    @abstractmethod
    def analyze(
        self, selfie_image: bytes | str, quiz_season: ColorSeason, quiz_confidence: int
    ) -> VisionAnalysis:
        """Classify the selfie, using the quiz result as a hint."""


def _encode_image(selfie_image: bytes | str) -> Tuple[str, str]:
    """Return ``(mime_type, base64_data)`` for raw bytes or a data URL."""

    if isinstance(selfie_image, (bytes, bytearray)):
        return "image/jpeg", base64.b64encode(bytes(selfie_image)).decode("ascii")
    if selfie_image.startswith("data:") and "," in selfie_image:
        header, data = selfie_image.split(",", 1)
        mime_type = header[len("data:"):].split(";", 1)[0] or "image/jpeg"
        return mime_type, data
    return "image/jpeg", selfie_image


def _extract_text(payload: Dict[str, Any]) -> str:
    candidates: List[Dict[str, Any]] = payload.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return str(parts[0].get("text", "")) if parts else ""


class GeminiVisionProvider(VisionProvider):
    """Gemini ``generateContent`` client with schema validation.

    One bounded request per analysis; no retries.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gemini-2.5-flash",
        timeout_seconds: float = 15.0,
        endpoint: str = GEMINI_ENDPOINT,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.endpoint = endpoint

    def build_prompt(self, quiz_season: ColorSeason, quiz_confidence: int) -> str:
        return _PROMPT_TEMPLATE.format(quiz_season=ColorSeason(quiz_season).value, quiz_confidence=quiz_confidence)

    def analyze(
        self, selfie_image: bytes | str, quiz_season: ColorSeason, quiz_confidence: int
    ) -> VisionAnalysis:
        if not self.api_key:
            raise VisionAnalysisError("missing_api_key")
        if not selfie_image:
            raise VisionAnalysisError("missing_image")

        mime_type, data = _encode_image(selfie_image)
        body = {
            "contents": [
                {
                    "parts": [
                        {"text": self.build_prompt(quiz_season, quiz_confidence)},
                        {"inline_data": {"mime_type": mime_type, "data": data}},
                    ]
                }
            ]
        }
        url = self.endpoint.format(model=self.model)
        LOGGER.info("Requesting selfie color analysis", extra={"model": self.model})

        try:
            response = requests.post(
                url, params={"key": self.api_key}, json=body, timeout=self.timeout_seconds
            )
            response.raise_for_status()
            text = _extract_text(response.json())
        except requests.RequestException as exc:
            LOGGER.error("Vision API unreachable", exc_info=exc)
            raise VisionAnalysisError("request_error") from exc
        except ValueError as exc:
            LOGGER.error("Vision API returned a non-JSON body", exc_info=exc)
            raise VisionAnalysisError("invalid_response_body") from exc

        return self.parse_analysis(text)

    @staticmethod
    def parse_analysis(text: str) -> VisionAnalysis:
        """Pull the JSON object out of the model's reply and validate it."""

        match = _JSON_OBJECT.search(text or "")
        raw = match.group(0) if match else text
        try:
            return VisionAnalysis.model_validate(json.loads(raw))
        except ValidationError as exc:
            LOGGER.error(
                "Vision payload schema validation failed",
                extra={"errors": describe_validation_error(exc)},
            )
            raise VisionAnalysisError("schema_validation") from exc
        except (TypeError, ValueError) as exc:
            LOGGER.error("Vision reply did not contain JSON", exc_info=exc)
            raise VisionAnalysisError("unparseable_reply") from exc


class MockVisionProvider(VisionProvider):
    """Offline deterministic provider for tests and local runs."""

    def __init__(
        self,
        analysis: VisionAnalysis | Dict[str, Any] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.analysis = analysis
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def analyze(
        self, selfie_image: bytes | str, quiz_season: ColorSeason, quiz_confidence: int
    ) -> VisionAnalysis:
        self.calls.append({"quiz_season": quiz_season, "quiz_confidence": quiz_confidence})
        if self.error is not None:
            raise self.error
        if self.analysis is None:
            raise VisionAnalysisError("no_mock_analysis")
        if isinstance(self.analysis, VisionAnalysis):
            return self.analysis
        return VisionAnalysis.model_validate(self.analysis)


__all__ = ["VisionAnalysisError", "VisionProvider", "GeminiVisionProvider", "MockVisionProvider"]
