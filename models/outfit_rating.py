"""Outfit feedback records and the learned preference counters."""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class RatingDirection(str, Enum):
    UP = "up"
    DOWN = "down"

    @property
    def weight(self) -> int:
        return 1 if self is RatingDirection.UP else -1


@dataclass
class OutfitSnapshot:
    """The outfit exactly as it was proposed when the user rated it."""

    item_ids: List[int] = field(default_factory=list)
    name: str = ""
    description: str = ""
    styling_tips: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.item_ids = [int(item_id) for item_id in self.item_ids]
        self.styling_tips = [str(tip) for tip in self.styling_tips]


@dataclass
class RatingContribution:
    """Counter keys touched by one rating.

    ``colors`` keeps one entry per (item, color) so a color shared by two rated
    items counts twice.
    """

    item_ids: List[int] = field(default_factory=list)
    colors: List[str] = field(default_factory=list)
    combos: List[str] = field(default_factory=list)


@dataclass
class OutfitRating:
    outfit_id: str
    direction: RatingDirection
    outfit: OutfitSnapshot
    contribution: RatingContribution = field(default_factory=RatingContribution)
    timestamp: float = field(default_factory=time.time)
    rating_id: Optional[int] = None

    def __post_init__(self) -> None:
        self.direction = RatingDirection(self.direction)
        if isinstance(self.outfit, dict):
            self.outfit = OutfitSnapshot(**self.outfit)
        if isinstance(self.contribution, dict):
            self.contribution = RatingContribution(**self.contribution)

    @property
    def weight(self) -> int:
        return self.direction.weight


def _bump(counter: Dict[Any, int], key: Any, delta: int) -> None:
    counter[key] = counter.get(key, 0) + delta


@dataclass
class PreferenceStatistics:
    """Cumulative signed counters learned from outfit feedback.

    Positive entries mean the user tends to like outfits containing the key,
    negative entries mean they tend to reject them. Counters are unbounded.
    """

    color_stats: Dict[str, int] = field(default_factory=dict)
    item_stats: Dict[int, int] = field(default_factory=dict)
    combo_stats: Dict[str, int] = field(default_factory=dict)
    updated_at: float = 0.0
    version: int = 0

    def apply(self, contribution: RatingContribution, weight: int) -> None:
        for item_id in contribution.item_ids:
            _bump(self.item_stats, int(item_id), weight)
        for color in contribution.colors:
            _bump(self.color_stats, color, weight)
        for combo in contribution.combos:
            _bump(self.combo_stats, combo, weight)

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["item_stats"] = {str(key): value for key, value in self.item_stats.items()}
        return payload

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "PreferenceStatistics":
        return cls(
            color_stats={str(k): int(v) for k, v in (payload.get("color_stats") or {}).items()},
            item_stats={int(k): int(v) for k, v in (payload.get("item_stats") or {}).items()},
            combo_stats={str(k): int(v) for k, v in (payload.get("combo_stats") or {}).items()},
            updated_at=float(payload.get("updated_at") or 0.0),
            version=int(payload.get("version") or 0),
        )


__all__ = [
    "RatingDirection",
    "OutfitSnapshot",
    "RatingContribution",
    "OutfitRating",
    "PreferenceStatistics",
]
