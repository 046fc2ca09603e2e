"""
Combination storage.

A combination records the outcome of one ordered pair. (A, B) and (B, A) are
different keys; each may be recorded at most once and is never updated.
"""

import logging
import sqlite3
from dataclasses import dataclass

from .database import (
    CraftDatabase,
    DuplicateCombinationError,
    MissingEntryError,
    StoreError,
)

logger = logging.getLogger(__name__)


@dataclass
class Combination:
    """A recorded combination row."""

    id: int
    first_item: str
    second_item: str
    result_item: str
    created_at: str | None = None

    @classmethod
    def from_row(cls, row) -> "Combination":
        """Create Combination from database row."""
        return cls(
            id=row["id"],
            first_item=row["first_item"],
            second_item=row["second_item"],
            result_item=row["result_item"],
            created_at=row["created_at"],
        )


@dataclass
class Recipe:
    """An ordered pair that produces a given item, with display emojis."""

    first_name: str
    first_emoji: str
    second_name: str
    second_emoji: str


def combination_exists(db: CraftDatabase, first: str, second: str) -> bool:
    """Check whether the ordered pair (first, second) has been explored.

    Raises:
        StoreError: If the lookup fails.
    """
    try:
        result = db.execute_one(
            """
            SELECT COUNT(*) as cnt FROM combinations
            WHERE first_item = ? AND second_item = ?
            """,
            (first, second),
        )
    except sqlite3.Error as e:
        raise StoreError(f"Failed to check combination ({first}, {second}): {e}") from e

    return bool(result and result["cnt"] > 0)


def insert_combination(db: CraftDatabase, first: str, second: str, result: str) -> int:
    """Record the outcome of an ordered pair.

    The result item must already exist (upsert it first).

    Returns:
        Row ID of the new combination

    Raises:
        DuplicateCombinationError: If (first, second) is already recorded.
        MissingEntryError: If any of the three items is unknown.
        StoreError: On any other database failure.
    """
    logger.debug(f"Inserting combination: {first}, {second}, {result}")
    try:
        return db.execute_insert(
            """
            INSERT INTO combinations (first_item, second_item, result_item)
            VALUES (?, ?, ?)
            """,
            (first, second, result),
        )
    except sqlite3.IntegrityError as e:
        message = str(e)
        if "UNIQUE" in message:
            raise DuplicateCombinationError(first, second) from e
        if "FOREIGN KEY" in message:
            raise MissingEntryError(
                f"Combination ({first}, {second}) -> {result} references an unknown item"
            ) from e
        raise StoreError(f"Failed to insert combination: {e}") from e
    except sqlite3.Error as e:
        raise StoreError(f"Failed to insert combination: {e}") from e


def get_combination(db: CraftDatabase, first: str, second: str) -> Combination | None:
    """Fetch the recorded outcome of an ordered pair, if any."""
    try:
        row = db.execute_one(
            """
            SELECT id, first_item, second_item, result_item, created_at
            FROM combinations
            WHERE first_item = ? AND second_item = ?
            """,
            (first, second),
        )
    except sqlite3.Error as e:
        raise StoreError(f"Failed to read combination ({first}, {second}): {e}") from e

    return Combination.from_row(row) if row else None


def get_recipes_for(db: CraftDatabase, result: str) -> list[Recipe]:
    """List every recorded ordered pair that produced result."""
    try:
        rows = db.execute(
            """
            SELECT
                A.name AS first_name,
                A.emoji AS first_emoji,
                B.name AS second_name,
                B.emoji AS second_emoji
            FROM combinations
            JOIN items A ON combinations.first_item = A.name
            JOIN items B ON combinations.second_item = B.name
            WHERE combinations.result_item = ?
            ORDER BY combinations.id
            """,
            (result,),
        )
    except sqlite3.Error as e:
        raise StoreError(f"Failed to read recipes for {result!r}: {e}") from e

    return [
        Recipe(
            first_name=row["first_name"],
            first_emoji=row["first_emoji"],
            second_name=row["second_name"],
            second_emoji=row["second_emoji"],
        )
        for row in rows
    ]


def count_combinations(db: CraftDatabase) -> int:
    """Total number of recorded combinations."""
    try:
        result = db.execute_one("SELECT COUNT(*) as cnt FROM combinations")
    except sqlite3.Error as e:
        raise StoreError(f"Failed to count combinations: {e}") from e

    return result["cnt"] if result else 0
