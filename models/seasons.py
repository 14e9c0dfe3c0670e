"""Color seasons and their static palettes."""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple

_HEX_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


class ColorSeason(str, Enum):
    """The four color seasons, named after their warmth/brightness quadrant."""

    WARM_SPRING = "warm_spring"  # warm + bright
    COOL_SUMMER = "cool_summer"  # cool + muted
    WARM_AUTUMN = "warm_autumn"  # warm + muted
    COOL_WINTER = "cool_winter"  # cool + bright


@dataclass(frozen=True)
class SeasonPalette:
    """Best/neutral/avoid colors and styling guidance for one season."""

    season: ColorSeason
    display_name: str
    description: str
    best: Tuple[str, ...]
    neutrals: Tuple[str, ...]
    avoid: Tuple[str, ...]
    tips: Tuple[str, ...]
    styling_advice: str


_PALETTES = {
    ColorSeason.WARM_SPRING: SeasonPalette(
        season=ColorSeason.WARM_SPRING,
        display_name="Warm Spring",
        description=(
            "You shine in warm, bright colors! Your coloring is fresh, vibrant, and "
            "energetic. Think of a garden in full bloom."
        ),
        best=(
            "#FFB347",  # peach
            "#FF6B6B",  # coral
            "#FFA07A",  # salmon
            "#FFD700",  # gold
            "#98D8C8",  # aqua
            "#87CEEB",  # warm blue
            "#DDA0DD",  # warm lavender
            "#F4A460",  # camel
            "#CD853F",  # tan
            "#D2691E",  # warm brown
            "#FF69B4",  # warm pink
            "#32CD32",  # bright green
        ),
        neutrals=("#FFFAF0", "#F5DEB3", "#DEB887", "#D2B48C", "#BC8F8F", "#8B7355"),
        avoid=("#000000", "#FFFFFF", "#4B0082", "#483D8B"),
        tips=(
            "Your best neutrals are cream, camel, and warm brown - not black and white",
            "You shine in warm, bright colors - don't be afraid of coral and peach!",
            "Gold jewelry is your secret weapon",
            "If wearing cool colors, balance with warm accessories",
        ),
        styling_advice=(
            "You have warm undertones with bright, clear coloring. Your natural warmth "
            "radiates like spring sunshine! Focus on colors that are clear and warm."
        ),
    ),
    ColorSeason.COOL_SUMMER: SeasonPalette(
        season=ColorSeason.COOL_SUMMER,
        display_name="Cool Summer",
        description=(
            "Your secret weapon is soft, muted colors. You look elegant and ethereal "
            "in pastels and dusty tones."
        ),
        best=(
            "#B0C4DE",  # light blue
            "#D8BFD8",  # lavender
            "#DDA0DD",  # plum
            "#FFB6C1",  # soft pink
            "#FFC0CB",  # dusty rose
            "#E6E6FA",  # pale lavender
            "#778899",  # slate
            "#708090",  # slate gray
            "#4682B4",  # soft blue
            "#87CEEB",  # sky blue
            "#98D8C8",  # soft teal
            "#C5B4E3",  # soft purple
        ),
        neutrals=("#F5F5F5", "#DCDCDC", "#C0C0C0", "#A9A9A9", "#2F4F4F"),
        avoid=("#FF4500", "#FF8C00", "#FFD700", "#8B4513"),
        tips=(
            "Your secret weapon is soft, muted colors - not bright or bold",
            "Gray is your best neutral, not black or brown",
            "You look ethereal in soft pastels and dusty colors",
            "Silver jewelry enhances your cool coloring",
        ),
        styling_advice=(
            "You have cool undertones with soft, muted coloring. Your gentle elegance "
            "is like a summer breeze."
        ),
    ),
    ColorSeason.WARM_AUTUMN: SeasonPalette(
        season=ColorSeason.WARM_AUTUMN,
        display_name="Warm Autumn",
        description=(
            "You are the queen of earthy, rich colors. Your warm undertones glow in "
            "rust, olive, and golden hues."
        ),
        best=(
            "#8B4513",  # saddle brown
            "#A0522D",  # sienna
            "#CD853F",  # peru
            "#D2691E",  # chocolate
            "#B8860B",  # goldenrod
            "#DAA520",  # mustard
            "#6B8E23",  # olive
            "#556B2F",  # dark olive
            "#8FBC8F",  # sage
            "#BC8F8F",  # rosy brown
            "#CD5C5C",  # rust
            "#FF6347",  # rust orange
        ),
        neutrals=("#FFF8DC", "#FAEBD7", "#F5DEB3", "#DEB887", "#D2B48C", "#8B7355"),
        avoid=("#000000", "#FFFFFF", "#FF1493", "#00FFFF"),
        tips=(
            "You're the queen of earthy, rich colors - embrace rust and olive!",
            "Brown is your black - it's more harmonious with your warmth",
            "Gold jewelry makes you glow",
            "You can wear all the warm autumnal colors others can't",
        ),
        styling_advice=(
            "You have warm undertones with rich, earthy coloring. Your depth and warmth "
            "evoke autumn leaves."
        ),
    ),
    ColorSeason.COOL_WINTER: SeasonPalette(
        season=ColorSeason.COOL_WINTER,
        display_name="Cool Winter",
        description=(
            "You are one of the few who can wear true black and pure white! Your high "
            "contrast demands bold, clear colors."
        ),
        best=(
            "#000000",  # black
            "#FFFFFF",  # white
            "#000080",  # navy
            "#4169E1",  # royal blue
            "#0000FF",  # true blue
            "#8B008B",  # magenta
            "#9400D3",  # violet
            "#FF1493",  # deep pink
            "#DC143C",  # crimson
            "#008B8B",  # teal
            "#2E8B57",  # emerald
            "#4B0082",  # indigo
        ),
        neutrals=("#FFFFFF", "#000000", "#2F4F4F", "#708090", "#000080"),
        avoid=("#FF8C00", "#FFD700", "#F0E68C", "#D2B48C"),
        tips=(
            "You're one of the few who can wear true black and pure white!",
            "Bold, clear colors are your friends - don't shy away from brightness",
            "Silver jewelry enhances your cool, dramatic coloring",
            "High contrast is your signature - embrace it",
        ),
        styling_advice=(
            "You have cool undertones with bright, high-contrast coloring. Your striking "
            "clarity is like winter snow."
        ),
    ),
}


def _validate_palettes(palettes: Mapping[ColorSeason, SeasonPalette]) -> None:
    missing = set(ColorSeason) - set(palettes)
    if missing:
        raise ValueError(f"Season palettes missing for {sorted(s.value for s in missing)}")
    for season, palette in palettes.items():
        if palette.season is not season:
            raise ValueError(f"Palette keyed under {season.value} describes {palette.season.value}")
        if len(palette.best) != 12 or not 5 <= len(palette.neutrals) <= 6 or len(palette.avoid) != 4:
            raise ValueError(f"Palette for {season.value} has unexpected color counts")
        for color in palette.best + palette.neutrals + palette.avoid:
            if not _HEX_PATTERN.match(color):
                raise ValueError(f"Invalid hex color {color!r} in {season.value} palette")


_validate_palettes(_PALETTES)

SEASON_PALETTES: Mapping[ColorSeason, SeasonPalette] = MappingProxyType(_PALETTES)


def parse_season(value: ColorSeason | str) -> ColorSeason:
    """Coerce a season value or name into :class:`ColorSeason`.

    Raises a :class:`ValueError` for anything outside the four seasons.
    """

    if isinstance(value, ColorSeason):
        return value
    key = str(value).strip().lower().replace(" ", "_").replace("-", "_")
    try:
        return ColorSeason(key)
    except ValueError:
        raise ValueError(
            f"Unsupported color season '{value}'. Allowed: {[s.value for s in ColorSeason]}"
        ) from None


def get_season_palette(season: ColorSeason | str) -> SeasonPalette:
    """Return the static palette for ``season``."""

    return SEASON_PALETTES[parse_season(season)]


def season_display_name(season: ColorSeason | str) -> str:
    return get_season_palette(season).display_name


def season_description(season: ColorSeason | str) -> str:
    return get_season_palette(season).description


__all__ = [
    "ColorSeason",
    "SeasonPalette",
    "SEASON_PALETTES",
    "parse_season",
    "get_season_palette",
    "season_display_name",
    "season_description",
]
