"""Finalized personal color profile."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from models.seasons import ColorSeason, parse_season


@dataclass
class ColorProfile:
    """The single color profile kept for the user.

    Quiz fields are always present. Vision fields are filled from the image
    analysis, or synthesized from the quiz when that analysis was unavailable
    (``vision_fallback``). Palette lists are copied from the season table at
    finalize time.
    """

    quiz_season: ColorSeason
    quiz_confidence: int
    recommended_season: ColorSeason
    quiz_answers: Dict[str, Optional[str]] = field(default_factory=dict)
    quiz_warmth: int = 0
    quiz_brightness: int = 0
    skin_undertone: Optional[str] = None
    skin_undertone_confidence: Optional[float] = None
    contrast_level: Optional[str] = None
    hair_tone: Optional[str] = None
    eye_color: Optional[str] = None
    vision_season: Optional[ColorSeason] = None
    vision_confidence: Optional[float] = None
    vision_fallback: bool = False
    reasoning: str = ""
    confidence: float = 0.0
    agrees_with_quiz: bool = True
    best_colors: List[str] = field(default_factory=list)
    neutral_colors: List[str] = field(default_factory=list)
    avoid_colors: List[str] = field(default_factory=list)
    created_at: float = 0.0
    updated_at: float = 0.0

    def __post_init__(self) -> None:
        self.quiz_season = parse_season(self.quiz_season)
        self.recommended_season = parse_season(self.recommended_season)
        if self.vision_season is not None:
            self.vision_season = parse_season(self.vision_season)
        self.best_colors = list(self.best_colors)
        self.neutral_colors = list(self.neutral_colors)
        self.avoid_colors = list(self.avoid_colors)

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["quiz_season"] = self.quiz_season.value
        payload["recommended_season"] = self.recommended_season.value
        payload["vision_season"] = self.vision_season.value if self.vision_season else None
        return payload

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ColorProfile":
        return cls(**payload)


__all__ = ["ColorProfile"]
