"""Pydantic schemas for validating collaborator payloads."""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from models.seasons import ColorSeason

DEFAULT_LIFESTYLE = {"work": 40, "casual": 40, "athletic": 10, "social": 10}


class VisionAnalysis(BaseModel):
    """Contract for the selfie color analysis returned by the vision service."""

    model_config = ConfigDict(populate_by_name=True)

    skin_undertone: Literal["warm", "cool"] = Field(alias="skinUndertone")
    skin_undertone_confidence: float = Field(alias="skinUndertoneConfidence", ge=0.0, le=1.0)
    contrast_level: Literal["high", "medium", "low"] = Field(alias="contrastLevel")
    hair_tone: Literal["warm", "cool", "neutral"] = Field("neutral", alias="hairTone")
    eye_color: str = Field("", alias="eyeColor")
    recommended_season: ColorSeason = Field(alias="recommendedSeason")
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str = ""
    agrees_with_quiz: bool = Field(False, alias="agreesWithQuiz")

    @field_validator("skin_undertone", "contrast_level", "hair_tone", "recommended_season", mode="before")
    @classmethod
    def _lowercase(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value


class StylingProfile(BaseModel):
    """Minimal user profile sent alongside a closet snapshot for gap analysis."""

    gender: Optional[str] = None
    lifestyle: Dict[str, int] = Field(default_factory=lambda: dict(DEFAULT_LIFESTYLE))

    @field_validator("lifestyle")
    @classmethod
    def _validate_mix(cls, lifestyle: Dict[str, int]) -> Dict[str, int]:
        for key, share in lifestyle.items():
            if not 0 <= share <= 100:
                raise ValueError(f"lifestyle share for '{key}' must be between 0 and 100")
        return lifestyle or dict(DEFAULT_LIFESTYLE)


def describe_validation_error(exc: ValidationError) -> list[Dict[str, Any]]:
    """Flatten pydantic errors into log-friendly dictionaries."""

    return [
        {"loc": ".".join(str(part) for part in error.get("loc", ())), "msg": error.get("msg")}
        for error in exc.errors()
    ]


__all__ = [
    "DEFAULT_LIFESTYLE",
    "VisionAnalysis",
    "StylingProfile",
    "describe_validation_error",
]
