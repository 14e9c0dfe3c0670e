"""Loose RGB color matching against a season palette.

Two colors match when their Euclidean distance in RGB space is below
``MATCH_THRESHOLD``. The threshold was picked by eye as a "loose" match and is
not calibrated against a perceptual color space such as CIELAB, so matches can
feel uneven across hues (RGB distance over-weights green differences and
under-weights dark tones).
"""
from __future__ import annotations

import logging
import math
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from models.clothing_item import ClothingItem

logger = logging.getLogger(__name__)

MATCH_THRESHOLD = 60.0

_HEX_COLOR = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)

RGB = Tuple[int, int, int]


def parse_hex_color(value: str) -> Optional[RGB]:
    """Return ``(r, g, b)`` for ``#RRGGBB``/``RRGGBB`` strings, else ``None``."""

    if not isinstance(value, str):
        return None
    match = _HEX_COLOR.match(value.strip())
    if not match:
        return None
    return tuple(int(part, 16) for part in match.groups())  # type: ignore[return-value]


def color_distance(first: RGB, second: RGB) -> float:
    return math.sqrt(sum((a - b) ** 2 for a, b in zip(first, second)))


def _parse_all(colors: Iterable[str]) -> List[RGB]:
    return [rgb for rgb in (parse_hex_color(color) for color in colors) if rgb is not None]


def matches(item_colors: Sequence[str], palette_colors: Sequence[str]) -> bool:
    """Return True when any item color lies within the threshold of a palette color.

    Unparseable entries on either side are ignored; an empty side never matches.
    """

    palette = _parse_all(palette_colors)
    if not palette:
        return False
    for item_rgb in _parse_all(item_colors):
        for palette_rgb in palette:
            if color_distance(item_rgb, palette_rgb) < MATCH_THRESHOLD:
                return True
    return False


def items_in_palette(items: Iterable[ClothingItem], palette_colors: Sequence[str]) -> List[ClothingItem]:
    """Filter a closet down to the items with at least one in-palette color."""

    selected = [item for item in items if matches(item.colors, palette_colors)]
    logger.debug("palette filter kept %d items", len(selected))
    return selected


__all__ = [
    "MATCH_THRESHOLD",
    "parse_hex_color",
    "color_distance",
    "matches",
    "items_in_palette",
]
