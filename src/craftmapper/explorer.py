"""
Exploration loop.

Draws random ordered pairs from the working set, skips pairs the store has
already recorded, asks the combine endpoint about the rest and persists each
outcome:

    select pair -> combination_exists? -> combine -> upsert_entry
                -> cache.observe -> insert_combination

The loop is strictly sequential. It stops when either budget is reached
(EXHAUSTED) or when it can no longer draw or check a pair (ABORTED). Failures
of the combine endpoint and store write errors propagate to the caller after
the final counts are logged.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from .combine_client import CombineClient, CombineError
from .database import (
    CraftDatabase,
    StoreError,
    combination_exists,
    insert_combination,
    upsert_entry,
)
from .selector import select_candidate
from .working_set import InsufficientPopulationError, WorkingSetCache

logger = logging.getLogger(__name__)

DEFAULT_PACING_INTERVAL = 0.05  # seconds between attempts


class ExplorationState(str, Enum):
    """State of an exploration run."""

    RUNNING = "RUNNING"
    EXHAUSTED = "EXHAUSTED"  # A budget was reached
    ABORTED = "ABORTED"  # No pair could be drawn or checked


@dataclass
class Discovery:
    """One newly recorded combination."""

    first: str
    second: str
    result: str
    emoji: str
    is_new: bool


@dataclass
class ExplorationResult:
    """Outcome of Explorer.explore()."""

    state: ExplorationState
    successes: int
    attempts: int
    reason: str | None = None


class Explorer:
    """Sequential random explorer over the combination space."""

    def __init__(
        self,
        db: CraftDatabase,
        cache: WorkingSetCache,
        client: CombineClient,
        pacing_interval: float = DEFAULT_PACING_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        on_discovery: Callable[[Discovery], None] | None = None,
    ):
        self.db = db
        self.cache = cache
        self.client = client
        self.pacing_interval = pacing_interval
        self._sleep = sleep
        self._on_discovery = on_discovery

    def explore(self, max_successes: int, max_attempts: int) -> ExplorationResult:
        """Run until max_successes new combinations or max_attempts draws.

        Returns:
            ExplorationResult with the terminal state and final counters

        Raises:
            CombineError: If the combine endpoint fails for a pair.
            StoreError: If writing a discovery fails (including
                DuplicateCombinationError).
            KeyboardInterrupt: Re-raised after the counts so far are logged.
        """
        successes = 0
        attempts = 0
        state = ExplorationState.RUNNING
        reason = None

        try:
            while state is ExplorationState.RUNNING:
                if successes >= max_successes or attempts >= max_attempts:
                    state = ExplorationState.EXHAUSTED
                    break

                try:
                    first, second = select_candidate(self.cache)
                except InsufficientPopulationError as e:
                    logger.error(f"Error getting random items: {e}")
                    state, reason = ExplorationState.ABORTED, str(e)
                    break

                try:
                    exists = combination_exists(self.db, first, second)
                except StoreError as e:
                    logger.error(f"Error checking if combination exists: {e}")
                    state, reason = ExplorationState.ABORTED, str(e)
                    break

                if not exists:
                    discovery = self._combine(first, second)
                    successes += 1
                    if self._on_discovery:
                        self._on_discovery(discovery)
                else:
                    logger.debug(f"Skipping explored pair: ({first}, {second})")

                attempts += 1
                self._sleep(self.pacing_interval)
        except (CombineError, StoreError) as e:
            logger.error(
                f"Exploration failed: {e}. "
                f"Total created: {successes}, Total attempts: {attempts}"
            )
            raise
        except KeyboardInterrupt:
            logger.warning(
                f"Exploration interrupted. "
                f"Total created: {successes}, Total attempts: {attempts}"
            )
            raise

        logger.info(
            f"Finished creating combinations ({state.value}). "
            f"Total created: {successes}, Total attempts: {attempts}"
        )
        return ExplorationResult(
            state=state, successes=successes, attempts=attempts, reason=reason
        )

    def _combine(self, first: str, second: str) -> Discovery:
        """Call the endpoint for one unseen pair and persist the outcome."""
        response = self.client.combine(first, second)

        # Item first so the combination row never references a missing item
        upsert_entry(self.db, response.result, response.emoji, response.is_new)
        self.cache.observe(response.result, response.emoji)
        insert_combination(self.db, first, second, response.result)

        logger.debug(f"{first} + {second} = {response.emoji} {response.result}")
        return Discovery(
            first=first,
            second=second,
            result=response.result,
            emoji=response.emoji,
            is_new=response.is_new,
        )
