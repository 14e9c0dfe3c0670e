"""Closet aggregation used as input to wardrobe gap analysis."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable

from models.clothing_item import ClothingItem, normalize_color


@dataclass
class ClosetSnapshot:
    """Count summaries of the closet. Derived on demand, never stored."""

    total_items: int = 0
    category_counts: Dict[str, int] = field(default_factory=dict)
    color_distribution: Dict[str, int] = field(default_factory=dict)
    occasion_density: Dict[str, int] = field(default_factory=dict)
    season_distribution: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


def _count(counter: Dict[str, int], key: str) -> None:
    counter[key] = counter.get(key, 0) + 1


def build_closet_snapshot(items: Iterable[ClothingItem]) -> ClosetSnapshot:
    """Single pass over the closet producing category, color, occasion and season counts."""

    snapshot = ClosetSnapshot()
    for item in items:
        snapshot.total_items += 1
        _count(snapshot.category_counts, item.category)
        for color in item.colors:
            _count(snapshot.color_distribution, normalize_color(color))
        for occasion in item.occasions:
            _count(snapshot.occasion_density, occasion)
        for season in item.seasons:
            _count(snapshot.season_distribution, season)
    return snapshot


__all__ = ["ClosetSnapshot", "build_closet_snapshot"]
