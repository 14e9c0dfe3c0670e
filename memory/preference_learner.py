"""Preference learning from outfit like/dislike feedback."""

from __future__ import annotations

import itertools
import threading
from typing import Dict, Iterable, List, Optional, Tuple

from closet_app.logging_config import get_logger
from models.clothing_item import ClothingItem, normalize_color
from models.outfit_rating import (
    OutfitRating,
    PreferenceStatistics,
    RatingContribution,
    RatingDirection,
)
from tools.observability import instrument_operation
from tools.style_store import StyleStore

LOGGER = get_logger(__name__)


def combo_key(first: str, second: str) -> str:
    """Canonical key for an unordered category pair."""

    low, high = sorted((first, second))
    return f"{low}+{high}"


def _ranked(counter: Dict, limit: int, positive: bool) -> List[Tuple[object, int]]:
    entries = [(key, value) for key, value in counter.items() if (value > 0 if positive else value < 0)]
    entries.sort(key=lambda kv: (-kv[1] if positive else kv[1], str(kv[0])))
    return entries[:limit]


class PreferenceLearner:
    """Accumulates signed counters over colors, items and category pairs.

    A rating and its counter delta are written by the store in one
    transaction (``apply_rating`` / ``retract_rating``), so learners on other
    threads or processes sharing the database cannot double-apply or
    double-retract. The in-process lock additionally queues callers that
    share this learner.
    """

    def __init__(self, store: StyleStore) -> None:
        self.store = store
        self._lock = threading.Lock()

    @staticmethod
    def contribution_for(item_ids: Iterable[int], items: Iterable[ClothingItem]) -> RatingContribution:
        """Resolve the counter keys an outfit touches against the current closet."""

        referenced: List[int] = []
        for item_id in item_ids:
            if int(item_id) not in referenced:
                referenced.append(int(item_id))

        closet = {item.item_id: item for item in items if item.item_id is not None}
        colors: List[str] = []
        categories = set()
        for item_id in referenced:
            item = closet.get(item_id)
            if item is None:
                continue
            colors.extend(normalize_color(color) for color in item.colors)
            if item.category:
                categories.add(item.category)

        combos = [combo_key(a, b) for a, b in itertools.combinations(sorted(categories), 2)]
        return RatingContribution(item_ids=referenced, colors=colors, combos=combos)

    @instrument_operation("record_outfit_rating")
    def record_rating(
        self, rating: OutfitRating, items: Optional[Iterable[ClothingItem]] = None
    ) -> OutfitRating:
        """Log the rating and add its weight (+1 up, -1 down) to every touched counter."""

        closet = list(items) if items is not None else self.store.list_items()
        rating.contribution = self.contribution_for(rating.outfit.item_ids, closet)
        with self._lock:
            stored = self.store.apply_rating(rating)
        LOGGER.info(
            "Recorded outfit rating",
            extra={
                "outfit_id": stored.outfit_id,
                "direction": stored.direction.value,
                "item_count": len(stored.contribution.item_ids),
            },
        )
        return stored

    @instrument_operation("retract_outfit_rating")
    def retract_rating(self, rating_id: int) -> bool:
        """Delete a rating and subtract exactly what it contributed."""

        with self._lock:
            retracted = self.store.retract_rating(rating_id)
        if retracted is None:
            return False
        LOGGER.info("Retracted outfit rating", extra={"rating_id": rating_id})
        return True

    def statistics(self) -> PreferenceStatistics:
        return self.store.get_preference_stats()

    def list_ratings(self, direction: RatingDirection | str | None = None) -> List[OutfitRating]:
        return self.store.list_ratings(direction)

    def summarize(self, limit: int = 5) -> Dict[str, List[Tuple[object, int]]]:
        """Strongest likes and dislikes, for recommendation prompts."""

        stats = self.statistics()
        return {
            "liked_colors": _ranked(stats.color_stats, limit, positive=True),
            "disliked_colors": _ranked(stats.color_stats, limit, positive=False),
            "liked_items": _ranked(stats.item_stats, limit, positive=True),
            "disliked_items": _ranked(stats.item_stats, limit, positive=False),
            "liked_combos": _ranked(stats.combo_stats, limit, positive=True),
            "disliked_combos": _ranked(stats.combo_stats, limit, positive=False),
        }


__all__ = ["PreferenceLearner", "combo_key"]
