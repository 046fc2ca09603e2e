"""
Craft store module

Provides a single SQLite database for exploration data:
- items: known entries (name -> emoji, first-discovery flag)
- combinations: one outcome per explored ordered pair

Readers (search, export) only ever query these tables; the explorer is the
only writer.
"""

from .combinations import (
    Combination,
    Recipe,
    combination_exists,
    count_combinations,
    get_combination,
    get_recipes_for,
    insert_combination,
)
from .database import (
    DEFAULT_DB_PATH,
    SCHEMA_VERSION,
    SEED_ITEMS,
    CraftDatabase,
    DuplicateCombinationError,
    MissingEntryError,
    StoreError,
    StoreInitializationError,
)
from .entries import (
    Entry,
    count_entries,
    get_entry,
    list_entries,
    load_all_entries,
    search_entries,
    upsert_entry,
)

__all__ = [
    # Database
    "CraftDatabase",
    "DEFAULT_DB_PATH",
    "SCHEMA_VERSION",
    "SEED_ITEMS",
    # Errors
    "StoreError",
    "StoreInitializationError",
    "DuplicateCombinationError",
    "MissingEntryError",
    # Items
    "Entry",
    "load_all_entries",
    "upsert_entry",
    "get_entry",
    "search_entries",
    "list_entries",
    "count_entries",
    # Combinations
    "Combination",
    "Recipe",
    "combination_exists",
    "insert_combination",
    "get_combination",
    "get_recipes_for",
    "count_combinations",
]
