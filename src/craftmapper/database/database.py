"""
Core database connection and schema management for the craft store.

The store holds two tables:
- items: every known entry (name, emoji, is_new)
- combinations: one recorded outcome per ordered pair of items

Location: ./items.db by default (see craftmapper.config)
"""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0.0"

DEFAULT_DB_PATH = Path("items.db")

SCHEMA = """
-- Schema metadata
CREATE TABLE IF NOT EXISTS schema_info (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

-- Known entries
CREATE TABLE IF NOT EXISTS items (
    name TEXT PRIMARY KEY,
    emoji TEXT NOT NULL,
    is_new BOOLEAN NOT NULL,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

-- Explored ordered pairs
CREATE TABLE IF NOT EXISTS combinations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    first_item TEXT NOT NULL,
    second_item TEXT NOT NULL,
    result_item TEXT NOT NULL,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    UNIQUE(first_item, second_item),
    FOREIGN KEY (first_item) REFERENCES items(name),
    FOREIGN KEY (second_item) REFERENCES items(name),
    FOREIGN KEY (result_item) REFERENCES items(name)
);

CREATE INDEX IF NOT EXISTS idx_combinations_result ON combinations(result_item);
"""

# Primordial entries inserted the first time a store is created
SEED_ITEMS: tuple[tuple[str, str], ...] = (
    ("Water", "💧"),
    ("Fire", "🔥"),
    ("Wind", "🌬️"),
    ("Earth", "🌍"),
)


class StoreError(Exception):
    """Raised when the craft store cannot be read or written."""

    pass


class StoreInitializationError(StoreError):
    """Raised when a fresh store cannot be created."""

    pass


class DuplicateCombinationError(StoreError):
    """Raised when an ordered pair already has a recorded outcome."""

    def __init__(self, first: str, second: str):
        self.first = first
        self.second = second
        super().__init__(f"Combination already recorded: ({first!r}, {second!r})")


class MissingEntryError(StoreError):
    """Raised when a combination references an item that does not exist."""

    pass


class CraftDatabase:
    """SQLite store for discovered items and combinations."""

    def __init__(self, db_path: Path | str | None = None, read_only: bool = False):
        """Open the store, creating and seeding it on first use.

        Args:
            db_path: Path to the SQLite file. Defaults to ./items.db.
            read_only: Open an existing store without creating or writing
                anything. Connections are opened with mode=ro.

        Raises:
            StoreInitializationError: If a fresh store cannot be created.
            StoreError: If read_only is set and the file does not exist.
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_DB_PATH
        self.read_only = read_only
        if read_only:
            if not self.db_path.is_file():
                raise StoreError(f"Store not found: {self.db_path}")
            self.created = False
        else:
            self.created = self.bootstrap()

    def bootstrap(self) -> bool:
        """Create schema and seed entries if the backing file is missing.

        Returns:
            True if the store was created by this call.
        """
        is_fresh = not self.db_path.exists()
        logger.debug(f"Database exists: {not is_fresh} ({self.db_path})")

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with self.connection() as conn:
                conn.executescript(SCHEMA)
                conn.execute(
                    "INSERT OR REPLACE INTO schema_info (key, value) VALUES (?, ?)",
                    ("schema_version", SCHEMA_VERSION),
                )
                if is_fresh:
                    conn.executemany(
                        "INSERT INTO items (name, emoji, is_new) VALUES (?, ?, ?)",
                        [(name, emoji, False) for name, emoji in SEED_ITEMS],
                    )
        except (sqlite3.Error, OSError) as e:
            raise StoreInitializationError(
                f"Failed to initialize store at {self.db_path}: {e}"
            ) from e

        if is_fresh:
            logger.info(f"Created store with {len(SEED_ITEMS)} seed items: {self.db_path}")
        return is_fresh

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections.

        Yields:
            sqlite3.Connection with row_factory set to sqlite3.Row
        """
        if self.read_only:
            uri = f"{self.db_path.resolve().as_uri()}?mode=ro"
            conn = sqlite3.connect(uri, timeout=10.0, uri=True)
        else:
            conn = sqlite3.connect(self.db_path, timeout=10.0)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def execute(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        """Execute SQL and return all results."""
        with self.connection() as conn:
            cursor = conn.execute(sql, params)
            return cursor.fetchall()

    def execute_one(self, sql: str, params: tuple = ()) -> sqlite3.Row | None:
        """Execute SQL and return first result."""
        with self.connection() as conn:
            cursor = conn.execute(sql, params)
            return cursor.fetchone()

    def execute_insert(self, sql: str, params: tuple = ()) -> int:
        """Execute INSERT and return last row ID."""
        with self.connection() as conn:
            cursor = conn.execute(sql, params)
            return cursor.lastrowid or 0

    def get_schema_version(self) -> str:
        """Get current schema version."""
        result = self.execute_one(
            "SELECT value FROM schema_info WHERE key = ?", ("schema_version",)
        )
        return result["value"] if result else "unknown"

    def get_stats(self) -> dict:
        """Get database statistics for diagnostics."""
        stats = {
            "schema_version": self.get_schema_version(),
            "database_path": str(self.db_path),
            "database_exists": self.db_path.exists(),
        }

        if not self.db_path.exists():
            return stats

        try:
            for table in ("items", "combinations"):
                result = self.execute_one(f"SELECT COUNT(*) as cnt FROM {table}")
                stats[f"{table}_count"] = result["cnt"] if result else 0

            result = self.execute_one(
                "SELECT COUNT(*) as cnt FROM items WHERE is_new = 1"
            )
            stats["new_items_count"] = result["cnt"] if result else 0

            stats["database_size_bytes"] = self.db_path.stat().st_size

        except sqlite3.OperationalError as e:
            stats["error"] = str(e)

        return stats
