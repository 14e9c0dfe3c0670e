"""Closet Colors engine bootstrap."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from closet_app.config import ClosetConfig
from closet_app.logging_config import configure_logging, correlation_context, get_logger, log_event
from logic.closet_snapshot import ClosetSnapshot, build_closet_snapshot
from logic.color_profile_resolver import ColorProfileResolver
from logic.palette_matching import items_in_palette
from logic.validation import StylingProfile
from memory.preference_learner import PreferenceLearner
from models.clothing_item import ClothingItem, from_raw_metadata
from models.color_profile import ColorProfile
from models.outfit_rating import OutfitRating, OutfitSnapshot, RatingDirection
from models.quiz import QuizAnswers
from models.seasons import season_display_name
from tools.gap_analysis import GapAnalysisClient
from tools.style_store import SQLiteStyleStore, StyleStore
from tools.vision_provider import GeminiVisionProvider, VisionProvider

LOGGER = get_logger(__name__)


class ClosetColorApp:
    """Wires together the store, the external clients and the engine components."""

    def __init__(
        self,
        config: ClosetConfig | None = None,
        store: StyleStore | None = None,
        vision_provider: VisionProvider | None = None,
        gap_client: GapAnalysisClient | None = None,
    ) -> None:
        self.config = config or ClosetConfig.from_env()
        configure_logging()

        self.store = store or SQLiteStyleStore(self.config.database_path)
        self.vision_provider = vision_provider or GeminiVisionProvider(
            api_key=self.config.api_key,
            model=self.config.vision_model,
            timeout_seconds=self.config.vision_timeout_seconds,
        )
        self.gap_client = gap_client or GapAnalysisClient(
            api_key=self.config.api_key,
            model=self.config.reasoning_model,
            timeout_seconds=self.config.reasoning_timeout_seconds,
        )
        self.preference_learner = PreferenceLearner(self.store)
        log_event(
            LOGGER,
            logging.INFO,
            "app_initialised",
            environment=self.config.environment or "local",
            vision_model=self.config.vision_model,
        )

    # Closet

    def add_item(self, item_data: Dict[str, Any]) -> ClothingItem:
        return self.store.create_item(from_raw_metadata(item_data))

    def list_items(self) -> List[ClothingItem]:
        return self.store.list_items()

    # Color profile

    def start_color_analysis(self, answers: QuizAnswers | Mapping[str, Any]) -> ColorProfileResolver:
        """Score the quiz and hand back a resolver ready for ``analyze``."""

        return ColorProfileResolver.from_answers(answers, self.store, self.vision_provider)

    def color_profile(self) -> Optional[ColorProfile]:
        return self.store.get_color_profile()

    def reset_color_profile(self) -> bool:
        return self.store.delete_color_profile()

    def palette_items(self, items: Iterable[ClothingItem] | None = None) -> List[ClothingItem]:
        """Items with at least one color close to the user's best colors."""

        profile = self.color_profile()
        if profile is None:
            return []
        closet = list(items) if items is not None else self.store.list_items()
        return items_in_palette(closet, profile.best_colors)

    def color_context(self) -> str:
        """Describe the finalized profile for recommendation prompts."""

        profile = self.color_profile()
        if profile is None:
            return ""
        return "\n".join(
            [
                "USER'S PERSONAL COLOR ANALYSIS",
                f"Season: {season_display_name(profile.recommended_season)}",
                f"Skin Undertone: {profile.skin_undertone or 'unknown'}",
                f"Contrast Level: {profile.contrast_level or 'unknown'}",
                f"BEST COLORS (prioritize these in outfit suggestions): {', '.join(profile.best_colors) or 'N/A'}",
                f"COLORS TO AVOID: {', '.join(profile.avoid_colors) or 'N/A'}",
            ]
        )

    # Feedback

    def record_outfit_rating(
        self,
        outfit_id: str,
        item_ids: Iterable[int],
        direction: RatingDirection | str,
        name: str = "",
        description: str = "",
        styling_tips: Iterable[str] | None = None,
    ) -> OutfitRating:
        rating = OutfitRating(
            outfit_id=outfit_id,
            direction=RatingDirection(direction),
            outfit=OutfitSnapshot(
                item_ids=list(item_ids),
                name=name,
                description=description,
                styling_tips=list(styling_tips or []),
            ),
        )
        with correlation_context():
            return self.preference_learner.record_rating(rating)

    def retract_outfit_rating(self, rating_id: int) -> bool:
        with correlation_context():
            return self.preference_learner.retract_rating(rating_id)

    # Gap analysis

    def closet_snapshot(self) -> ClosetSnapshot:
        return build_closet_snapshot(self.store.list_items())

    def request_gap_analysis(self, profile: StylingProfile | Mapping[str, Any] | None = None) -> Dict[str, Any]:
        styling_profile = (
            profile if isinstance(profile, StylingProfile) else StylingProfile.model_validate(dict(profile or {}))
        )
        with correlation_context():
            return self.gap_client.analyze(self.closet_snapshot(), styling_profile)


__all__ = ["ClosetColorApp"]
