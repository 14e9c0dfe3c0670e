"""Model package exports."""

from models.clothing_item import ClothingItem, from_raw_metadata
from models.color_profile import ColorProfile
from models.outfit_rating import OutfitRating, OutfitSnapshot, PreferenceStatistics, RatingDirection
from models.seasons import SEASON_PALETTES, ColorSeason, SeasonPalette, get_season_palette

__all__ = [
    "ClothingItem",
    "from_raw_metadata",
    "ColorProfile",
    "OutfitRating",
    "OutfitSnapshot",
    "PreferenceStatistics",
    "RatingDirection",
    "SEASON_PALETTES",
    "ColorSeason",
    "SeasonPalette",
    "get_season_palette",
]
