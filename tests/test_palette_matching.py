"""Season palette table and palette matching tests."""

from __future__ import annotations

import dataclasses
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.palette_matching import MATCH_THRESHOLD, color_distance, items_in_palette, matches, parse_hex_color
from models.clothing_item import ClothingItem
from models.seasons import (
    SEASON_PALETTES,
    ColorSeason,
    get_season_palette,
    parse_season,
    season_display_name,
)


def test_every_season_has_a_complete_palette() -> None:
    assert set(SEASON_PALETTES) == set(ColorSeason)
    for season, palette in SEASON_PALETTES.items():
        assert palette.season is season
        assert len(palette.best) == 12
        assert 5 <= len(palette.neutrals) <= 6
        assert len(palette.avoid) == 4
        assert palette.tips and palette.description
        for color in palette.best + palette.neutrals + palette.avoid:
            assert parse_hex_color(color) is not None


def test_styling_advice_carries_the_full_season_description() -> None:
    advice = {season: palette.styling_advice for season, palette in SEASON_PALETTES.items()}
    assert advice[ColorSeason.WARM_SPRING].endswith(
        "Your natural warmth radiates like spring sunshine! Focus on colors that are clear and warm."
    )
    assert advice[ColorSeason.COOL_SUMMER].endswith("Your gentle elegance is like a summer breeze.")
    assert advice[ColorSeason.WARM_AUTUMN].endswith("Your depth and warmth evoke autumn leaves.")
    assert advice[ColorSeason.COOL_WINTER].endswith("Your striking clarity is like winter snow.")


def test_palette_table_is_immutable() -> None:
    with pytest.raises(TypeError):
        SEASON_PALETTES[ColorSeason.WARM_SPRING] = SEASON_PALETTES[ColorSeason.COOL_WINTER]  # type: ignore[index]
    with pytest.raises(dataclasses.FrozenInstanceError):
        SEASON_PALETTES[ColorSeason.WARM_SPRING].best = ()  # type: ignore[misc]


def test_parse_season_accepts_names_and_rejects_unknown() -> None:
    assert parse_season("Warm Autumn") is ColorSeason.WARM_AUTUMN
    assert parse_season("cool-winter") is ColorSeason.COOL_WINTER
    assert get_season_palette("cool_summer").display_name == "Cool Summer"
    assert season_display_name(ColorSeason.WARM_SPRING) == "Warm Spring"
    with pytest.raises(ValueError):
        parse_season("monsoon")


def test_every_palette_color_matches_itself() -> None:
    for palette in SEASON_PALETTES.values():
        for color in palette.best + palette.neutrals + palette.avoid:
            assert matches([color], [color])


def test_parse_hex_color_variants() -> None:
    assert parse_hex_color("#FF8000") == (255, 128, 0)
    assert parse_hex_color("ff8000") == (255, 128, 0)
    assert parse_hex_color(" #ff8000 ") == (255, 128, 0)
    assert parse_hex_color("navy") is None
    assert parse_hex_color("#FFF") is None
    assert parse_hex_color("#GGGGGG") is None


def test_threshold_is_strict() -> None:
    assert color_distance((0, 0, 0), (59, 0, 0)) < MATCH_THRESHOLD
    assert matches(["#000000"], ["#3B0000"])  # distance 59
    assert not matches(["#000000"], ["#3C0000"])  # distance 60


def test_unparseable_colors_are_skipped() -> None:
    assert not matches(["navy", "#GGGGGG"], ["#000080"])
    assert matches(["navy", "#000081"], ["#000080"])
    assert not matches(["#000080"], ["navy"])


def test_empty_inputs_never_match() -> None:
    assert not matches([], ["#000000"])
    assert not matches(["#000000"], [])
    assert not matches([], [])


def test_items_in_palette_filters_closet() -> None:
    winter = get_season_palette(ColorSeason.COOL_WINTER)
    navy_coat = ClothingItem(item_id=1, category="outerwear", colors=["#000088"])
    mustard_top = ClothingItem(item_id=2, category="top", colors=["#DAA520"])
    untagged = ClothingItem(item_id=3, category="shoes", colors=["brown"])

    kept = items_in_palette([navy_coat, mustard_top, untagged], winter.best)
    assert kept == [navy_coat]
