"""Outfit feedback learning tests."""

from __future__ import annotations

import sys
import threading
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from memory.preference_learner import PreferenceLearner, combo_key
from models.clothing_item import ClothingItem
from models.outfit_rating import OutfitRating, OutfitSnapshot, RatingDirection
from tools.style_store import SQLiteStyleStore, StorageError


@pytest.fixture()
def store(tmp_path: Path) -> SQLiteStyleStore:
    store = SQLiteStyleStore(tmp_path / "closet.db")
    store.create_item(ClothingItem(item_id=7, category="top", colors=["Navy", "#FFFFFF"]))
    store.create_item(ClothingItem(item_id=8, category="bottom", colors=["navy"]))
    store.create_item(ClothingItem(item_id=9, category="shoes", colors=["#8B4513"]))
    store.create_item(ClothingItem(item_id=10, category="top", colors=["#FF0000"]))
    return store


@pytest.fixture()
def learner(store: SQLiteStyleStore) -> PreferenceLearner:
    return PreferenceLearner(store)


def _rating(outfit_id: str, item_ids: list, direction: str = "up") -> OutfitRating:
    return OutfitRating(outfit_id=outfit_id, direction=direction, outfit=OutfitSnapshot(item_ids=item_ids))


def test_combo_key_is_order_independent() -> None:
    assert combo_key("top", "bottom") == combo_key("bottom", "top") == "bottom+top"


def test_repeated_likes_accumulate(learner: PreferenceLearner) -> None:
    for index in range(3):
        learner.record_rating(_rating(f"o-{index}", [7]))

    assert learner.statistics().item_stats[7] == 3


def test_like_counts_colors_per_item_and_category_pairs(learner: PreferenceLearner) -> None:
    learner.record_rating(_rating("o-1", [7, 8, 9]))

    stats = learner.statistics()
    assert stats.item_stats == {7: 1, 8: 1, 9: 1}
    assert stats.color_stats == {"navy": 2, "#ffffff": 1, "#8b4513": 1}
    assert stats.combo_stats == {"bottom+shoes": 1, "bottom+top": 1, "shoes+top": 1}


def test_dislike_subtracts(learner: PreferenceLearner) -> None:
    learner.record_rating(_rating("o-1", [7, 8], "up"))
    learner.record_rating(_rating("o-2", [8, 9], "down"))

    stats = learner.statistics()
    assert stats.item_stats == {7: 1, 8: 0, 9: -1}
    assert stats.color_stats["navy"] == 1
    assert stats.combo_stats == {"bottom+top": 1, "bottom+shoes": -1}


def test_unknown_items_only_touch_item_counters(learner: PreferenceLearner) -> None:
    stored = learner.record_rating(_rating("o-1", [7, 404]))

    stats = learner.statistics()
    assert stats.item_stats == {7: 1, 404: 1}
    assert stats.color_stats == {"navy": 1, "#ffffff": 1}
    assert stats.combo_stats == {}
    assert stored.contribution.item_ids == [7, 404]


def test_same_category_twice_forms_no_combo(learner: PreferenceLearner) -> None:
    learner.record_rating(_rating("o-1", [7, 10]))
    assert learner.statistics().combo_stats == {}


def test_duplicate_item_ids_count_once(learner: PreferenceLearner) -> None:
    learner.record_rating(_rating("o-1", [9, 9]))
    stats = learner.statistics()
    assert stats.item_stats == {9: 1}
    assert stats.color_stats == {"#8b4513": 1}


def test_ratings_are_logged_with_their_snapshot(learner: PreferenceLearner) -> None:
    learner.record_rating(
        OutfitRating(
            outfit_id="o-1",
            direction=RatingDirection.UP,
            outfit=OutfitSnapshot(item_ids=[7, 8], name="Office", styling_tips=["Roll the sleeves"]),
        )
    )
    learner.record_rating(_rating("o-2", [9], "down"))

    liked = learner.list_ratings("up")
    assert [rating.outfit_id for rating in liked] == ["o-1"]
    assert liked[0].outfit.name == "Office"
    assert [rating.outfit_id for rating in learner.list_ratings(RatingDirection.DOWN)] == ["o-2"]
    assert len(learner.list_ratings()) == 2


def test_retraction_subtracts_exactly_what_was_added(learner: PreferenceLearner, store: SQLiteStyleStore) -> None:
    learner.record_rating(_rating("o-1", [7, 8]))
    disliked = learner.record_rating(_rating("o-2", [8, 9], "down"))
    before = learner.statistics()

    # the closet changing after the rating must not skew the retraction
    store.create_item(ClothingItem(item_id=9, category="boots", colors=["#000000"]))
    assert learner.retract_rating(disliked.rating_id) is True

    after = learner.statistics()
    assert after.item_stats == {7: 1, 8: 1, 9: 0}
    assert after.color_stats["#8b4513"] == 0
    assert "#000000" not in after.color_stats
    assert after.combo_stats["bottom+shoes"] == 0
    assert after.version == before.version + 1
    assert [rating.outfit_id for rating in learner.list_ratings()] == ["o-1"]


def test_retracting_an_unknown_rating_is_a_no_op(learner: PreferenceLearner) -> None:
    assert learner.retract_rating(12345) is False
    assert learner.statistics().version == 0


def test_concurrent_ratings_are_all_counted(learner: PreferenceLearner) -> None:
    def worker(offset: int) -> None:
        for index in range(10):
            learner.record_rating(_rating(f"o-{offset}-{index}", [7]))

    threads = [threading.Thread(target=worker, args=(offset,)) for offset in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert learner.statistics().item_stats[7] == 40
    assert len(learner.list_ratings()) == 40


def test_summarize_ranks_likes_and_dislikes(learner: PreferenceLearner) -> None:
    learner.record_rating(_rating("o-1", [7, 8]))
    learner.record_rating(_rating("o-2", [8]))
    learner.record_rating(_rating("o-3", [9], "down"))

    summary = learner.summarize(limit=2)

    assert summary["liked_items"] == [(8, 2), (7, 1)]
    assert summary["disliked_items"] == [(9, -1)]
    assert summary["liked_colors"] == [("navy", 3), ("#ffffff", 1)]
    assert summary["disliked_colors"] == [("#8b4513", -1)]
    assert summary["liked_combos"] == [("bottom+top", 1)]
    assert summary["disliked_combos"] == []


class _StatsWriteFailsOnce(SQLiteStyleStore):
    """Store whose next statistics write fails mid-transaction."""

    def __init__(self, *args, **kwargs) -> None:
        self.failures_left = 1
        super().__init__(*args, **kwargs)

    def _write_stats(self, conn, mutate):
        if self.failures_left:
            self.failures_left -= 1
            raise StorageError("disk I/O error")
        return super()._write_stats(conn, mutate)


def test_failed_statistics_write_does_not_log_the_rating(tmp_path: Path) -> None:
    flaky = _StatsWriteFailsOnce(tmp_path / "flaky.db")
    flaky.create_item(ClothingItem(item_id=7, category="top", colors=["navy"]))
    learner = PreferenceLearner(flaky)

    with pytest.raises(StorageError):
        learner.record_rating(_rating("o-1", [7]))

    assert learner.list_ratings() == []
    assert learner.statistics().item_stats == {}
    assert learner.statistics().version == 0

    stored = learner.record_rating(_rating("o-2", [7]))
    assert learner.retract_rating(stored.rating_id) is True
    assert learner.statistics().item_stats == {7: 0}
    assert learner.statistics().color_stats == {"navy": 0}


def test_second_learner_cannot_retract_the_same_rating(store: SQLiteStyleStore) -> None:
    first_tab = PreferenceLearner(store)
    second_tab = PreferenceLearner(SQLiteStyleStore(store.database_path))
    liked = first_tab.record_rating(_rating("o-1", [7]))

    assert second_tab.retract_rating(liked.rating_id) is True
    assert first_tab.retract_rating(liked.rating_id) is False

    stats = first_tab.statistics()
    assert stats.item_stats == {7: 0}
    assert stats.version == 2


def test_racing_retractions_subtract_once(store: SQLiteStyleStore) -> None:
    """Learners on separate connections race to retract one rating."""

    liked = PreferenceLearner(store).record_rating(_rating("o-1", [7, 8]))
    tabs = [PreferenceLearner(SQLiteStyleStore(store.database_path, timeout_seconds=30.0)) for _ in range(6)]
    barrier = threading.Barrier(len(tabs))
    results: list = []

    def worker(tab: PreferenceLearner) -> None:
        barrier.wait()
        results.append(tab.retract_rating(liked.rating_id))

    threads = [threading.Thread(target=worker, args=(tab,)) for tab in tabs]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(results) == [False] * 5 + [True]
    stats = PreferenceLearner(store).statistics()
    assert stats.item_stats == {7: 0, 8: 0}
    assert stats.combo_stats == {"bottom+top": 0}
    assert stats.version == 2
