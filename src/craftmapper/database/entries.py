"""
Item (entry) storage.

Items are keyed by name. The name never changes once written; later upserts
only refresh the emoji and the first-discovery flag.
"""

import logging
import sqlite3
from dataclasses import dataclass

from .database import CraftDatabase, StoreError

logger = logging.getLogger(__name__)

# Matches the cap used by the search page of the original browser
DEFAULT_SEARCH_LIMIT = 1000


@dataclass
class Entry:
    """A discovered element of the crafting universe."""

    name: str
    emoji: str
    is_new: bool
    created_at: str | None = None

    @classmethod
    def from_row(cls, row) -> "Entry":
        """Create Entry from database row."""
        return cls(
            name=row["name"],
            emoji=row["emoji"],
            is_new=bool(row["is_new"]),
            created_at=row["created_at"],
        )


def load_all_entries(db: CraftDatabase) -> dict[str, str]:
    """Load every item as a name -> emoji mapping.

    Raises:
        StoreError: If the items table cannot be scanned.
    """
    try:
        rows = db.execute("SELECT name, emoji FROM items ORDER BY rowid")
    except sqlite3.Error as e:
        raise StoreError(f"Failed to load items: {e}") from e

    return {row["name"]: row["emoji"] for row in rows}


def upsert_entry(db: CraftDatabase, name: str, emoji: str, is_new: bool) -> None:
    """Insert an item, or refresh emoji/is_new if the name is already known.

    Raises:
        StoreError: If the write fails.
    """
    logger.debug(f"Inserting or updating item: {name}, {emoji}, {is_new}")
    try:
        db.execute_insert(
            """
            INSERT INTO items (name, emoji, is_new)
            VALUES (?, ?, ?)
            ON CONFLICT(name) DO UPDATE SET
                emoji = excluded.emoji,
                is_new = excluded.is_new
            """,
            (name, emoji, bool(is_new)),
        )
    except sqlite3.Error as e:
        raise StoreError(f"Failed to upsert item {name!r}: {e}") from e


def get_entry(db: CraftDatabase, name: str) -> Entry | None:
    """Fetch a single item by exact name."""
    try:
        row = db.execute_one(
            "SELECT name, emoji, is_new, created_at FROM items WHERE name = ?",
            (name,),
        )
    except sqlite3.Error as e:
        raise StoreError(f"Failed to read item {name!r}: {e}") from e

    return Entry.from_row(row) if row else None


def search_entries(
    db: CraftDatabase,
    query: str,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> tuple[list[Entry], bool]:
    """Find items whose name contains query.

    Args:
        db: Store to search
        query: Substring to match (SQL LIKE, case-insensitive for ASCII)
        limit: Maximum number of items returned

    Returns:
        (items, limited) where limited is True if the result hit the limit
    """
    try:
        rows = db.execute(
            """
            SELECT name, emoji, is_new, created_at
            FROM items
            WHERE name LIKE ?
            ORDER BY name
            LIMIT ?
            """,
            (f"%{query}%", limit),
        )
    except sqlite3.Error as e:
        raise StoreError(f"Failed to search items: {e}") from e

    entries = [Entry.from_row(row) for row in rows]
    return entries, len(entries) == limit


def list_entries(db: CraftDatabase) -> list[Entry]:
    """Return every item in insertion order."""
    try:
        rows = db.execute(
            "SELECT name, emoji, is_new, created_at FROM items ORDER BY rowid"
        )
    except sqlite3.Error as e:
        raise StoreError(f"Failed to read items: {e}") from e

    return [Entry.from_row(row) for row in rows]


def count_entries(db: CraftDatabase) -> int:
    """Total number of known items."""
    try:
        result = db.execute_one("SELECT COUNT(*) as cnt FROM items")
    except sqlite3.Error as e:
        raise StoreError(f"Failed to count items: {e}") from e

    return result["cnt"] if result else 0
