"""Personal color quiz catalog.

Each question offers a fixed set of options. Every option carries a signed
contribution to two independent axes: *warmth* (warm positive, cool negative)
and *brightness* (bright/high contrast positive, muted/low contrast negative).
Options such as "both" or "unsure" contribute nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class QuizOption:
    value: str
    label: str
    warmth: int = 0
    brightness: int = 0


@dataclass(frozen=True)
class QuizQuestion:
    key: str
    legacy_id: str
    prompt: str
    options: Tuple[QuizOption, ...]
    # False when an unrecognised answer is left out of the confidence denominator
    always_counted: bool = True

    def option_for(self, answer: str | None) -> Optional[QuizOption]:
        if answer is None:
            return None
        wanted = str(answer).strip().lower()
        for option in self.options:
            if option.value == wanted:
                return option
        return None

    def contribution(self, answer: str | None) -> Tuple[int, int]:
        """Return ``(warmth, brightness)`` for an answer, zero when unknown."""

        option = self.option_for(answer)
        return (option.warmth, option.brightness) if option else (0, 0)

    def counts_toward_confidence(self, answer: str | None) -> bool:
        return self.always_counted or self.option_for(answer) is not None


QUIZ_QUESTIONS: Tuple[QuizQuestion, ...] = (
    QuizQuestion(
        key="veins",
        legacy_id="q1_veins",
        prompt="Look at your wrist veins in natural light. What color are they?",
        options=(
            QuizOption("green", "Green/olive", warmth=2),
            QuizOption("blue", "Blue/purple", warmth=-2),
            QuizOption("both", "Both/hard to tell"),
        ),
    ),
    QuizQuestion(
        key="jewelry",
        legacy_id="q2_jewelry",
        prompt="Which metal jewelry looks best on you?",
        options=(
            QuizOption("gold", "Gold/rose gold/copper", warmth=2),
            QuizOption("silver", "Silver/white gold/platinum", warmth=-2),
            QuizOption("both", "Both equally"),
        ),
    ),
    QuizQuestion(
        key="white",
        legacy_id="q3_white",
        prompt="Which white shade looks better on you?",
        options=(
            QuizOption("ivory", "Ivory/cream/off-white", warmth=1),
            QuizOption("pure", "Pure white/bright white", warmth=-1),
            QuizOption("unsure", "Not sure"),
        ),
    ),
    QuizQuestion(
        key="sun",
        legacy_id="q4_sun",
        prompt="How does your skin react to sun exposure?",
        options=(
            QuizOption("tan", "Tan easily to golden/bronze", warmth=1, brightness=1),
            QuizOption("burn_tan", "Burn first then may tan"),
            QuizOption("burn", "Burn easily, rarely tan", warmth=-1, brightness=-1),
        ),
        always_counted=False,
    ),
    QuizQuestion(
        key="hair",
        legacy_id="q5_hair",
        prompt="What is your natural hair color?",
        options=(
            QuizOption("golden", "Golden blonde/auburn/warm brown with gold tones", warmth=2),
            QuizOption("ash", "Ash blonde/brown (no gold)", warmth=-2),
            QuizOption("black", "Black/very dark brown", brightness=1),
            QuizOption("medium", "Medium brown"),
        ),
    ),
    QuizQuestion(
        key="eyes",
        legacy_id="q6_eyes",
        prompt="What is your eye color?",
        options=(
            QuizOption("warm_brown", "Warm brown/amber/hazel with gold/warm blue", warmth=1),
            QuizOption("cool_blue", "Gray/blue-gray/cool blue/soft brown", warmth=-1),
            QuizOption("dark", "Dark brown/black", brightness=1),
            QuizOption("green", "Green/hazel"),
        ),
    ),
    QuizQuestion(
        key="contrast",
        legacy_id="q7_contrast",
        prompt="What is the contrast between your skin, hair, and eyes?",
        options=(
            QuizOption("high", "High contrast (very different tones)", brightness=2),
            QuizOption("low", "Low contrast (similar tones)", brightness=-2),
            QuizOption("medium", "Medium contrast"),
        ),
    ),
    QuizQuestion(
        key="colors",
        legacy_id="q8_colors",
        prompt="Which colors make you glow?",
        options=(
            QuizOption("warm_bright", "Warm bright: coral/peach/turquoise", warmth=2, brightness=2),
            QuizOption("cool_soft", "Cool soft: lavender/dusty rose/mauve", warmth=-2, brightness=-2),
            QuizOption("warm_rich", "Warm rich: rust/olive/mustard", warmth=2, brightness=-2),
            QuizOption("cool_bright", "Cool bright: royal blue/magenta/emerald", warmth=-2, brightness=2),
        ),
        always_counted=False,
    ),
)


@dataclass(frozen=True)
class QuizAnswers:
    """One answer per quiz question; ``None`` means unanswered."""

    veins: str | None = None
    jewelry: str | None = None
    white: str | None = None
    sun: str | None = None
    hair: str | None = None
    eyes: str | None = None
    contrast: str | None = None
    colors: str | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "QuizAnswers":
        """Accept short keys (``veins``) or legacy ids (``q1_veins``)."""

        values: Dict[str, str | None] = {}
        for question in QUIZ_QUESTIONS:
            value = raw.get(question.key, raw.get(question.legacy_id))
            values[question.key] = None if value is None else str(value)
        return cls(**values)

    def as_dict(self) -> Dict[str, str | None]:
        return {field.name: getattr(self, field.name) for field in fields(self)}


def question_catalog() -> List[Dict[str, Any]]:
    """Return the quiz as plain dictionaries for rendering."""

    return [
        {
            "id": question.legacy_id,
            "key": question.key,
            "question": question.prompt,
            "options": [{"value": option.value, "label": option.label} for option in question.options],
        }
        for question in QUIZ_QUESTIONS
    ]


__all__ = ["QuizOption", "QuizQuestion", "QUIZ_QUESTIONS", "QuizAnswers", "question_catalog"]
