"""Clothing item data model and helpers."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def _dedupe(values: Iterable[Any]) -> List[str]:
    """Strip values and drop blanks and repeats while keeping order."""

    cleaned = []
    seen = set()
    for value in values:
        key = str(value).strip()
        if key and key not in seen:
            cleaned.append(key)
            seen.add(key)
    return cleaned


def normalize_color(value: str) -> str:
    """Case-normalise a color value for counting and statistics."""

    return str(value).strip().lower()


@dataclass
class ClothingItem:
    """Represents one item in the user's closet."""

    item_id: Optional[int] = None
    category: str = ""
    colors: List[str] = field(default_factory=list)
    occasions: List[str] = field(default_factory=list)
    seasons: List[str] = field(default_factory=list)
    brand: Optional[str] = None
    size: Optional[str] = None
    created_at: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        if self.item_id is not None:
            self.item_id = int(self.item_id)
        self.category = str(self.category or "").strip()
        self.colors = _dedupe(_ensure_list(self.colors))
        self.occasions = _dedupe(_ensure_list(self.occasions))
        self.seasons = _dedupe(_ensure_list(self.seasons))


def from_raw_metadata(metadata: Dict[str, Any]) -> ClothingItem:
    """Build a :class:`ClothingItem` from loose form or tagger metadata."""

    if not metadata.get("category"):
        raise ValueError("Missing required field for ClothingItem: category")

    raw_id = metadata.get("item_id", metadata.get("id"))
    return ClothingItem(
        item_id=int(raw_id) if raw_id is not None else None,
        category=str(metadata["category"]),
        colors=_ensure_list(metadata.get("colors")),
        occasions=_ensure_list(metadata.get("occasions", metadata.get("suggestedOccasions"))),
        seasons=_ensure_list(metadata.get("seasons", metadata.get("suggestedSeasons"))),
        brand=metadata.get("brand"),
        size=metadata.get("size"),
        created_at=float(metadata.get("created_at") or time.time()),
    )


__all__ = ["ClothingItem", "from_raw_metadata", "normalize_color"]
