"""Wardrobe gap-analysis requests to the Gemini reasoning model."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from logic.closet_snapshot import ClosetSnapshot
from logic.validation import StylingProfile
from tools.observability import instrument_operation

LOGGER = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class GapAnalysisError(RuntimeError):
    """Raised when the reasoning service does not return a usable report."""


def build_gap_analysis_prompt(snapshot: ClosetSnapshot, profile: StylingProfile | None = None) -> str:
    """Render the snapshot and user profile into the gap-analysis request."""

    profile = profile or StylingProfile()
    return f"""
Analyze this wardrobe for "Gaps" based on the user's profile and wardrobe architecture principles.

USER PROFILE:
- Gender: {profile.gender or 'Not specified'}
- Lifestyle: {json.dumps(profile.lifestyle)}

CLOSET SNAPSHOT:
- Total Items: {snapshot.total_items}
- Categories: {json.dumps(snapshot.category_counts)}
- Colors: {json.dumps(snapshot.color_distribution)}
- Occasions: {json.dumps(snapshot.occasion_density)}
- Seasons: {json.dumps(snapshot.season_distribution)}

TASK:
Perform a 4-point diagnostic:
1. Basics & Essentials Gap: identify missing "connectors" (neutrals, plain tees, etc).
2. Lifestyle & Occasion Gap: compare the lifestyle mix against the occasion density.
3. Color Theory Gap: identify "color islands" or a lack of neutral anchors.
4. The "Power Unlock" Piece: recommend ONE item that would unlock the most new combinations.

Format the output as a JSON object:
{{
  "basicsGap": {{ "status": "good|warning|critical", "message": "...", "missingItems": [] }},
  "lifestyleGap": {{ "status": "good|warning|critical", "message": "...", "mismatchScore": 0 }},
  "colorGap": {{ "status": "good|warning|critical", "message": "..." }},
  "powerUnlock": {{ "item": "...", "reason": "...", "unlockCount": 0 }}
}}
""".strip()


class GapAnalysisClient:
    """Sends a closet snapshot to Gemini and returns the decoded JSON report."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gemini-2.5-flash",
        timeout_seconds: float = 30.0,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds

    @instrument_operation("request_gap_analysis")
    def analyze(self, snapshot: ClosetSnapshot, profile: StylingProfile | None = None) -> Dict[str, Any]:
        if not self.api_key:
            raise GapAnalysisError("missing_api_key")

        prompt = build_gap_analysis_prompt(snapshot, profile)
        genai.configure(api_key=self.api_key)
        model = genai.GenerativeModel(self.model)
        try:
            response = model.generate_content(prompt, request_options={"timeout": self.timeout_seconds})
            text = response.text
        except google_exceptions.GoogleAPIError as exc:
            LOGGER.error("Gap analysis request failed", exc_info=exc)
            raise GapAnalysisError("request_error") from exc
        except ValueError as exc:
            # response.text raises when the candidate was blocked or empty
            LOGGER.error("Gap analysis returned no text", exc_info=exc)
            raise GapAnalysisError("empty_response") from exc

        match = _JSON_OBJECT.search(text or "")
        try:
            report = json.loads(match.group(0) if match else text)
        except (TypeError, ValueError) as exc:
            LOGGER.error("Gap analysis reply was not JSON", extra={"length": len(text or "")})
            raise GapAnalysisError("unparseable_reply") from exc
        if not isinstance(report, dict):
            raise GapAnalysisError("unexpected_report_shape")
        return report


__all__ = ["GapAnalysisError", "GapAnalysisClient", "build_gap_analysis_prompt"]
