"""Deterministic color-season classification from quiz answers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

from models.quiz import QUIZ_QUESTIONS, QuizAnswers
from models.seasons import ColorSeason

MAX_OPTION_WEIGHT = 2


@dataclass(frozen=True)
class QuizResult:
    season: ColorSeason
    confidence: int
    warmth: int
    brightness: int


def _classify(warmth: int, brightness: int) -> ColorSeason:
    if warmth > 0 and brightness > 0:
        return ColorSeason.WARM_SPRING
    if warmth < 0 and brightness < 0:
        return ColorSeason.COOL_SUMMER
    if warmth > 0 and brightness < 0:
        return ColorSeason.WARM_AUTUMN
    if warmth < 0 and brightness > 0:
        return ColorSeason.COOL_WINTER
    # An axis summed to zero: fall back to the stronger axis. This branch can
    # never produce WARM_AUTUMN.
    if abs(warmth) > abs(brightness):
        return ColorSeason.WARM_SPRING if warmth > 0 else ColorSeason.COOL_SUMMER
    return ColorSeason.COOL_WINTER if brightness > 0 else ColorSeason.COOL_SUMMER


def _confidence(warmth: int, brightness: int, question_count: int) -> int:
    if question_count <= 0:
        return 0
    max_possible = MAX_OPTION_WEIGHT * question_count
    ratio = (abs(warmth) + abs(brightness)) / max_possible
    # round half up
    return min(100, int(math.floor(ratio * 100 + 0.5)))


def score_quiz(answers: QuizAnswers | Mapping[str, Any]) -> QuizResult:
    """Sum per-answer axis contributions and classify by quadrant.

    Unknown or missing answers contribute nothing. Confidence divides by the
    questions that count toward it: every question except sun reaction and
    favourite colors, which count only when answered with a known option. The
    function is pure: the same answers always produce the same result.
    """

    if not isinstance(answers, QuizAnswers):
        answers = QuizAnswers.from_mapping(answers)

    warmth = 0
    brightness = 0
    counted = 0
    for question in QUIZ_QUESTIONS:
        answer = getattr(answers, question.key)
        delta_warmth, delta_brightness = question.contribution(answer)
        warmth += delta_warmth
        brightness += delta_brightness
        if question.counts_toward_confidence(answer):
            counted += 1

    return QuizResult(
        season=_classify(warmth, brightness),
        confidence=_confidence(warmth, brightness, counted),
        warmth=warmth,
        brightness=brightness,
    )


__all__ = ["QuizResult", "score_quiz"]
