"""
In-memory working set of known items.

Mirrors the items table as name -> emoji so that pair selection does not
scan the store on every attempt. The store stays authoritative: the cache is
rebuilt from it at startup and only ever grows afterwards.
"""

import logging
import random

from .database import CraftDatabase, load_all_entries

logger = logging.getLogger(__name__)


class InsufficientPopulationError(Exception):
    """Raised when fewer than two items are available to sample a pair."""

    pass


class WorkingSetCache:
    """Name -> emoji mirror of the store with indexed random pair sampling."""

    def __init__(self, rng: random.Random | None = None):
        """
        Args:
            rng: Random source for sampling. Defaults to a fresh random.Random().
        """
        self._emojis: dict[str, str] = {}
        # Parallel list of keys; only appended to since nothing is ever removed
        self._names: list[str] = []
        self._rng = rng or random.Random()

    def hydrate(self, db: CraftDatabase) -> int:
        """Load every item from the store.

        Returns:
            Number of items in the cache afterwards

        Raises:
            StoreError: If the store cannot be scanned.
        """
        for name, emoji in load_all_entries(db).items():
            self.observe(name, emoji)
        logger.info(f"Local cache initialized with {len(self)} items from database")
        return len(self)

    def observe(self, name: str, emoji: str) -> None:
        """Insert or overwrite a single item."""
        if name not in self._emojis:
            self._names.append(name)
        self._emojis[name] = emoji

    def sample_two_distinct(self) -> tuple[str, str]:
        """Pick two different names uniformly at random.

        Raises:
            InsufficientPopulationError: If fewer than two items are known.
        """
        if len(self._names) < 2:
            raise InsufficientPopulationError(
                f"Not enough items to combine (have {len(self._names)}, need 2)"
            )
        count = len(self._names)
        first = self._rng.randrange(count)
        # Draw from the remaining count - 1 slots, skipping over first
        second = self._rng.randrange(count - 1)
        if second >= first:
            second += 1
        return self._names[first], self._names[second]

    def get(self, name: str) -> str | None:
        """Emoji for name, or None if unknown."""
        return self._emojis.get(name)

    def names(self) -> list[str]:
        """Snapshot of all known names."""
        return list(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._emojis
