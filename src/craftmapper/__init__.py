"""craftmapper - incremental explorer for the Infinite Craft combination space

Repeatedly asks the combine endpoint what two known items produce and records
every item and ordered-pair outcome in SQLite, so exploration resumes where
the previous run stopped.

Usage:
    from craftmapper import CombineClient, CraftDatabase, Explorer, WorkingSetCache

    db = CraftDatabase("items.db")
    cache = WorkingSetCache()
    cache.hydrate(db)

    with CombineClient() as client:
        result = Explorer(db, cache, client).explore(max_successes=100, max_attempts=500)
    print(result.state, result.successes, result.attempts)
"""

from .combine_client import (
    ClientError,
    CombineClient,
    CombineError,
    CombineResult,
    InvalidResponseError,
    RateLimitedError,
    ServerError,
    TransportError,
)
from .database import CraftDatabase, DuplicateCombinationError, StoreError
from .explorer import Discovery, ExplorationResult, ExplorationState, Explorer
from .working_set import InsufficientPopulationError, WorkingSetCache

__all__ = [
    "CraftDatabase",
    "StoreError",
    "DuplicateCombinationError",
    "WorkingSetCache",
    "InsufficientPopulationError",
    "CombineClient",
    "CombineResult",
    "CombineError",
    "RateLimitedError",
    "ClientError",
    "ServerError",
    "InvalidResponseError",
    "TransportError",
    "Explorer",
    "ExplorationResult",
    "ExplorationState",
    "Discovery",
]

__version__ = "0.1.0"
