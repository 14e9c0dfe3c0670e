"""Persistence interface and SQLite implementation for the color engine.

The color profile and the preference statistics are single-row aggregates.
Both are written in one transaction each: the profile with a single
``INSERT OR REPLACE`` and the statistics with a read-modify-write under
``BEGIN IMMEDIATE`` so concurrent writers queue instead of losing updates.
A rating log entry and its statistics delta always commit or roll back
together (``apply_rating`` / ``retract_rating``).
"""
from __future__ import annotations

import contextlib
import json
import sqlite3
import time
from dataclasses import asdict
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from models.clothing_item import ClothingItem
from models.color_profile import ColorProfile
from models.outfit_rating import OutfitRating, PreferenceStatistics, RatingDirection

_SINGLETON_SLOT = 1


class StorageError(RuntimeError):
    """Raised when the underlying store cannot complete an operation."""


class StyleStore:
    """Persistence interface for closet items, the color profile and feedback."""

    def create_item(self, item: ClothingItem) -> ClothingItem:
        raise NotImplementedError

    def get_item(self, item_id: int) -> Optional[ClothingItem]:
        raise NotImplementedError

    def list_items(self) -> List[ClothingItem]:
        raise NotImplementedError

    def delete_item(self, item_id: int) -> bool:
        raise NotImplementedError

    def get_color_profile(self) -> Optional[ColorProfile]:
        raise NotImplementedError

    def replace_color_profile(self, profile: ColorProfile) -> ColorProfile:
        raise NotImplementedError

    def delete_color_profile(self) -> bool:
        raise NotImplementedError

    def get_preference_stats(self) -> PreferenceStatistics:
        raise NotImplementedError

    def update_preference_stats(
        self, mutate: Callable[[PreferenceStatistics], None]
    ) -> PreferenceStatistics:
        raise NotImplementedError

    def append_rating(self, rating: OutfitRating) -> OutfitRating:
        raise NotImplementedError

    def apply_rating(self, rating: OutfitRating) -> OutfitRating:
        raise NotImplementedError

    def retract_rating(self, rating_id: int) -> Optional[OutfitRating]:
        raise NotImplementedError

    def get_rating(self, rating_id: int) -> Optional[OutfitRating]:
        raise NotImplementedError

    def list_ratings(self, direction: RatingDirection | str | None = None) -> List[OutfitRating]:
        raise NotImplementedError

    def delete_rating(self, rating_id: int) -> bool:
        raise NotImplementedError


class SQLiteStyleStore(StyleStore):
    """Local SQLite-backed store."""

    def __init__(self, database_path: str | Path = "data/closet.db", timeout_seconds: float = 5.0) -> None:
        self.database_path = Path(database_path)
        self.timeout_seconds = timeout_seconds
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    @contextlib.contextmanager
    def _connect(self, immediate: bool = False) -> Iterator[sqlite3.Connection]:
        """Yield a connection inside one transaction, committed on success."""

        try:
            conn = sqlite3.connect(self.database_path, timeout=self.timeout_seconds, isolation_level=None)
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open closet database {self.database_path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
            yield conn
            conn.execute("COMMIT")
        except sqlite3.Error as exc:
            self._rollback(conn)
            raise StorageError(f"Closet database operation failed: {exc}") from exc
        except BaseException:
            self._rollback(conn)
            raise
        finally:
            conn.close()

    @staticmethod
    def _rollback(conn: sqlite3.Connection) -> None:
        # the original error is what the caller needs to see
        with contextlib.suppress(sqlite3.Error):
            if conn.in_transaction:
                conn.execute("ROLLBACK")

    def _ensure_tables(self) -> None:
        with self._connect(immediate=True) as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS clothing_items (
                    item_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    category TEXT NOT NULL,
                    colors TEXT,
                    occasions TEXT,
                    seasons TEXT,
                    brand TEXT,
                    size TEXT,
                    created_at REAL
                );
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS color_profile (
                    slot INTEGER PRIMARY KEY CHECK (slot = 1),
                    payload TEXT NOT NULL,
                    updated_at REAL
                );
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS preference_stats (
                    slot INTEGER PRIMARY KEY CHECK (slot = 1),
                    payload TEXT NOT NULL,
                    version INTEGER NOT NULL,
                    updated_at REAL
                );
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS outfit_ratings (
                    rating_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    outfit_id TEXT NOT NULL,
                    direction TEXT NOT NULL,
                    outfit TEXT NOT NULL,
                    contribution TEXT NOT NULL,
                    timestamp REAL NOT NULL
                );
                """
            )

    @staticmethod
    def _serialise_list(values: Optional[List[object]]) -> str:
        return json.dumps(values or [])

    @staticmethod
    def _deserialise_list(raw: str) -> List[object]:
        return json.loads(raw) if raw else []

    # Items

    def create_item(self, item: ClothingItem) -> ClothingItem:
        values = (
            item.category,
            self._serialise_list(item.colors),
            self._serialise_list(item.occasions),
            self._serialise_list(item.seasons),
            item.brand,
            item.size,
            item.created_at,
        )
        with self._connect() as conn:
            if item.item_id is None:
                cursor = conn.execute(
                    """
                    INSERT INTO clothing_items (category, colors, occasions, seasons, brand, size, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    values,
                )
                item.item_id = int(cursor.lastrowid)
            else:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO clothing_items (
                        item_id, category, colors, occasions, seasons, brand, size, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (item.item_id, *values),
                )
        return item

    def _row_to_item(self, row: sqlite3.Row) -> ClothingItem:
        return ClothingItem(
            item_id=row["item_id"],
            category=row["category"],
            colors=self._deserialise_list(row["colors"]),
            occasions=self._deserialise_list(row["occasions"]),
            seasons=self._deserialise_list(row["seasons"]),
            brand=row["brand"],
            size=row["size"],
            created_at=row["created_at"],
        )

    def get_item(self, item_id: int) -> Optional[ClothingItem]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM clothing_items WHERE item_id = ?", (item_id,)).fetchone()
            return self._row_to_item(row) if row else None

    def list_items(self) -> List[ClothingItem]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM clothing_items ORDER BY item_id").fetchall()
            return [self._row_to_item(row) for row in rows]

    def delete_item(self, item_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM clothing_items WHERE item_id = ?", (item_id,))
            return cursor.rowcount > 0

    # Color profile

    def get_color_profile(self) -> Optional[ColorProfile]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT payload FROM color_profile WHERE slot = ?", (_SINGLETON_SLOT,)
            ).fetchone()
        return ColorProfile.from_dict(json.loads(row["payload"])) if row else None

    def replace_color_profile(self, profile: ColorProfile) -> ColorProfile:
        with self._connect() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO color_profile (slot, payload, updated_at) VALUES (?, ?, ?)",
                (_SINGLETON_SLOT, json.dumps(profile.to_dict()), profile.updated_at),
            )
        return profile

    def delete_color_profile(self) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM color_profile WHERE slot = ?", (_SINGLETON_SLOT,))
            return cursor.rowcount > 0

    # Preference statistics

    @staticmethod
    def _read_stats(conn: sqlite3.Connection) -> PreferenceStatistics:
        row = conn.execute(
            "SELECT payload, version FROM preference_stats WHERE slot = ?", (_SINGLETON_SLOT,)
        ).fetchone()
        if not row:
            return PreferenceStatistics()
        stats = PreferenceStatistics.from_dict(json.loads(row["payload"]))
        stats.version = int(row["version"])
        return stats

    def get_preference_stats(self) -> PreferenceStatistics:
        with self._connect() as conn:
            return self._read_stats(conn)

    def _write_stats(
        self, conn: sqlite3.Connection, mutate: Callable[[PreferenceStatistics], None]
    ) -> PreferenceStatistics:
        """Read-modify-write the statistics row on an open ``BEGIN IMMEDIATE`` connection."""

        stats = self._read_stats(conn)
        mutate(stats)
        stats.version += 1
        stats.updated_at = time.time()
        conn.execute(
            """
            INSERT OR REPLACE INTO preference_stats (slot, payload, version, updated_at)
            VALUES (?, ?, ?, ?)
            """,
            (_SINGLETON_SLOT, json.dumps(stats.to_dict()), stats.version, stats.updated_at),
        )
        return stats

    def update_preference_stats(
        self, mutate: Callable[[PreferenceStatistics], None]
    ) -> PreferenceStatistics:
        """Apply ``mutate`` to the current statistics and persist them atomically."""

        with self._connect(immediate=True) as conn:
            return self._write_stats(conn, mutate)

    # Ratings

    @staticmethod
    def _insert_rating(conn: sqlite3.Connection, rating: OutfitRating) -> int:
        cursor = conn.execute(
            """
            INSERT INTO outfit_ratings (outfit_id, direction, outfit, contribution, timestamp)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                rating.outfit_id,
                rating.direction.value,
                json.dumps(asdict(rating.outfit)),
                json.dumps(asdict(rating.contribution)),
                rating.timestamp,
            ),
        )
        return int(cursor.lastrowid)

    def append_rating(self, rating: OutfitRating) -> OutfitRating:
        with self._connect() as conn:
            rating.rating_id = self._insert_rating(conn, rating)
        return rating

    def apply_rating(self, rating: OutfitRating) -> OutfitRating:
        """Log ``rating`` and add its contribution to the statistics in one transaction."""

        with self._connect(immediate=True) as conn:
            rating_id = self._insert_rating(conn, rating)
            self._write_stats(conn, lambda stats: stats.apply(rating.contribution, rating.weight))
        rating.rating_id = rating_id
        return rating

    def retract_rating(self, rating_id: int) -> Optional[OutfitRating]:
        """Delete a rating and subtract its contribution in one transaction.

        Returns ``None`` when no rating was deleted, in which case the
        statistics are left untouched.
        """

        with self._connect(immediate=True) as conn:
            row = conn.execute("SELECT * FROM outfit_ratings WHERE rating_id = ?", (rating_id,)).fetchone()
            if row is None:
                return None
            cursor = conn.execute("DELETE FROM outfit_ratings WHERE rating_id = ?", (rating_id,))
            if cursor.rowcount != 1:
                return None
            rating = self._row_to_rating(row)
            self._write_stats(conn, lambda stats: stats.apply(rating.contribution, -rating.weight))
        return rating

    @staticmethod
    def _row_to_rating(row: sqlite3.Row) -> OutfitRating:
        return OutfitRating(
            rating_id=row["rating_id"],
            outfit_id=row["outfit_id"],
            direction=row["direction"],
            outfit=json.loads(row["outfit"]),
            contribution=json.loads(row["contribution"]),
            timestamp=row["timestamp"],
        )

    def get_rating(self, rating_id: int) -> Optional[OutfitRating]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM outfit_ratings WHERE rating_id = ?", (rating_id,)).fetchone()
            return self._row_to_rating(row) if row else None

    def list_ratings(self, direction: RatingDirection | str | None = None) -> List[OutfitRating]:
        with self._connect() as conn:
            if direction is None:
                rows = conn.execute("SELECT * FROM outfit_ratings ORDER BY rating_id").fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM outfit_ratings WHERE direction = ? ORDER BY rating_id",
                    (RatingDirection(direction).value,),
                ).fetchall()
            return [self._row_to_rating(row) for row in rows]

    def delete_rating(self, rating_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM outfit_ratings WHERE rating_id = ?", (rating_id,))
            return cursor.rowcount > 0


__all__ = ["StorageError", "StyleStore", "SQLiteStyleStore"]
