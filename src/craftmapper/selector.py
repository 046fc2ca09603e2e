"""Candidate pair selection for exploration."""

from .working_set import WorkingSetCache


def select_candidate(cache: WorkingSetCache) -> tuple[str, str]:
    """Draw an ordered pair of distinct items uniformly at random.

    No history is kept here; already explored pairs are filtered by the
    explorer's store lookup.

    Raises:
        InsufficientPopulationError: If the cache holds fewer than two items.
    """
    return cache.sample_two_distinct()
