"""Two-source color season resolution.

The quiz result is computed up front (``QUIZ_DONE``). ``analyze`` asks the
vision provider for a second opinion:

* provider failure of any kind: the quiz season is confirmed with a
  synthesized neutral-confidence analysis and the profile is finalized;
* seasons agree, or the provider flags agreement: finalized with the vision
  season;
* otherwise ``CONFLICT``: both candidates are exposed and the caller picks one
  through ``resolve_conflict``.

Finalizing copies the chosen season's palette into a new :class:`ColorProfile`
and replaces whatever profile the store held.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from closet_app.logging_config import get_logger, log_event
from logic.quiz_scoring import QuizResult, score_quiz
from logic.validation import VisionAnalysis
from models.color_profile import ColorProfile
from models.quiz import QuizAnswers
from models.seasons import ColorSeason, SeasonPalette, get_season_palette, parse_season
from tools.observability import instrument_operation
from tools.style_store import StyleStore
from tools.vision_provider import VisionProvider

LOGGER = get_logger(__name__)

FALLBACK_CONFIDENCE = 0.5
FALLBACK_REASONING = "Image analysis was unavailable, so your quiz result has been confirmed."


class ResolutionState(str, Enum):
    QUIZ_DONE = "quiz_done"
    CONFLICT = "conflict"
    FINALIZED = "finalized"


class ResolutionStateError(RuntimeError):
    """Raised when a resolver operation is called in the wrong state."""


@dataclass(frozen=True)
class SeasonOption:
    season: ColorSeason
    palette: SeasonPalette


@dataclass(frozen=True)
class SeasonConflict:
    """Quiz and vision disagree; the user arbitrates between the two."""

    quiz: SeasonOption
    vision: SeasonOption
    vision_reasoning: str

    @property
    def candidates(self) -> Tuple[ColorSeason, ColorSeason]:
        return self.quiz.season, self.vision.season


def fallback_analysis(quiz_result: QuizResult) -> VisionAnalysis:
    """Synthesize a neutral analysis that confirms the quiz season."""

    if quiz_result.brightness > 0:
        contrast = "high"
    elif quiz_result.brightness < 0:
        contrast = "low"
    else:
        contrast = "medium"
    return VisionAnalysis(
        skin_undertone="warm" if quiz_result.warmth > 0 else "cool",
        skin_undertone_confidence=FALLBACK_CONFIDENCE,
        contrast_level=contrast,
        hair_tone="neutral",
        eye_color="unknown",
        recommended_season=quiz_result.season,
        confidence=FALLBACK_CONFIDENCE,
        reasoning=FALLBACK_REASONING,
        agrees_with_quiz=True,
    )


class ColorProfileResolver:
    """State machine for one color analysis run."""

    def __init__(
        self,
        store: StyleStore,
        vision_provider: VisionProvider,
        quiz_result: QuizResult,
        quiz_answers: Optional[Mapping[str, Any]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.vision_provider = vision_provider
        self.quiz_result = quiz_result
        self.quiz_answers: Dict[str, Any] = dict(quiz_answers or {})
        self._clock = clock
        self._state = ResolutionState.QUIZ_DONE
        self._analysis: Optional[VisionAnalysis] = None
        self._vision_fallback = False
        self._conflict: Optional[SeasonConflict] = None
        self._profile: Optional[ColorProfile] = None

    @classmethod
    def from_answers(
        cls,
        answers: QuizAnswers | Mapping[str, Any],
        store: StyleStore,
        vision_provider: VisionProvider,
        clock: Callable[[], float] = time.time,
    ) -> "ColorProfileResolver":
        """Score the quiz and return a resolver in ``QUIZ_DONE``."""

        if not isinstance(answers, QuizAnswers):
            answers = QuizAnswers.from_mapping(answers)
        return cls(store, vision_provider, score_quiz(answers), answers.as_dict(), clock=clock)

    @property
    def state(self) -> ResolutionState:
        return self._state

    @property
    def conflict(self) -> Optional[SeasonConflict]:
        return self._conflict

    @property
    def profile(self) -> Optional[ColorProfile]:
        return self._profile

    @property
    def analysis(self) -> Optional[VisionAnalysis]:
        return self._analysis

    def _request_analysis(self, selfie_image: bytes | str | None) -> VisionAnalysis:
        quiz = self.quiz_result
        if not selfie_image:
            log_event(LOGGER, logging.WARNING, "vision_skipped", reason="missing_image")
            self._vision_fallback = True
            return fallback_analysis(quiz)
        try:
            result = self.vision_provider.analyze(selfie_image, quiz.season, quiz.confidence)
            if not isinstance(result, VisionAnalysis):
                result = VisionAnalysis.model_validate(result)
            return result
        except Exception as exc:  # any provider failure degrades to the quiz season
            log_event(
                LOGGER,
                logging.WARNING,
                "vision_degraded",
                reason=type(exc).__name__,
                detail=str(exc),
                quiz_season=quiz.season.value,
            )
            self._vision_fallback = True
            return fallback_analysis(quiz)

    @instrument_operation("analyze_color_profile")
    def analyze(self, selfie_image: bytes | str | None) -> ResolutionState:
        """Consult the vision provider and move to ``FINALIZED`` or ``CONFLICT``."""

        if self._state is not ResolutionState.QUIZ_DONE:
            raise ResolutionStateError(f"analyze() requires quiz_done, resolver is {self._state.value}")

        analysis = self._request_analysis(selfie_image)
        self._analysis = analysis
        quiz_season = self.quiz_result.season

        if analysis.recommended_season == quiz_season or analysis.agrees_with_quiz:
            self._finalize(analysis.recommended_season)
            return self._state

        self._conflict = SeasonConflict(
            quiz=SeasonOption(quiz_season, get_season_palette(quiz_season)),
            vision=SeasonOption(analysis.recommended_season, get_season_palette(analysis.recommended_season)),
            vision_reasoning=analysis.reasoning,
        )
        self._state = ResolutionState.CONFLICT
        log_event(
            LOGGER,
            logging.INFO,
            "season_conflict",
            quiz_season=quiz_season.value,
            vision_season=analysis.recommended_season.value,
        )
        return self._state

    @instrument_operation("resolve_color_conflict")
    def resolve_conflict(self, chosen_season: ColorSeason | str) -> ColorProfile:
        """Finalize with the season the user picked from the two candidates."""

        if self._state is not ResolutionState.CONFLICT or self._conflict is None:
            raise ResolutionStateError(
                f"resolve_conflict() requires conflict, resolver is {self._state.value}"
            )
        season = parse_season(chosen_season)
        if season not in self._conflict.candidates:
            raise ValueError(
                f"Season '{season.value}' is not one of the conflicting candidates "
                f"{[candidate.value for candidate in self._conflict.candidates]}"
            )
        return self._finalize(season)

    def _finalize(self, season: ColorSeason) -> ColorProfile:
        palette = get_season_palette(season)
        analysis = self._analysis or fallback_analysis(self.quiz_result)
        now = self._clock()
        profile = ColorProfile(
            quiz_season=self.quiz_result.season,
            quiz_confidence=self.quiz_result.confidence,
            quiz_answers=dict(self.quiz_answers),
            quiz_warmth=self.quiz_result.warmth,
            quiz_brightness=self.quiz_result.brightness,
            skin_undertone=analysis.skin_undertone,
            skin_undertone_confidence=analysis.skin_undertone_confidence,
            contrast_level=analysis.contrast_level,
            hair_tone=analysis.hair_tone,
            eye_color=analysis.eye_color,
            vision_season=None if self._vision_fallback else analysis.recommended_season,
            vision_confidence=None if self._vision_fallback else analysis.confidence,
            vision_fallback=self._vision_fallback,
            recommended_season=season,
            reasoning=analysis.reasoning,
            confidence=analysis.confidence,
            agrees_with_quiz=season == self.quiz_result.season,
            best_colors=list(palette.best),
            neutral_colors=list(palette.neutrals),
            avoid_colors=list(palette.avoid),
            created_at=now,
            updated_at=now,
        )
        self._profile = self.store.replace_color_profile(profile)
        self._state = ResolutionState.FINALIZED
        log_event(
            LOGGER,
            logging.INFO,
            "color_profile_finalized",
            season=season.value,
            vision_fallback=self._vision_fallback,
        )
        return self._profile


__all__ = [
    "ResolutionState",
    "ResolutionStateError",
    "SeasonOption",
    "SeasonConflict",
    "ColorProfileResolver",
    "fallback_analysis",
]
