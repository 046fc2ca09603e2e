"""Shared pytest fixtures for craftmapper tests.

Every test gets its own SQLite file under tmp_path; HTTP is served by
FakeSession and sleeps are recorded instead of slept.
"""

from pathlib import Path

import pytest

from craftmapper.combine_client import CombineClient
from craftmapper.database import CraftDatabase
from craftmapper.working_set import WorkingSetCache
from tests.helpers import FakeSession, ScriptedRandom

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path for a not-yet-created store."""
    return tmp_path / "items.db"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep user environment and cwd config files out of tests."""
    for var in (
        "CRAFTMAPPER_CONFIG_PATH",
        "CRAFTMAPPER_DB_PATH",
        "CRAFTMAPPER_API_URL",
        "CRAFTMAPPER_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def store(db_path: Path) -> CraftDatabase:
    """Freshly created store holding the four seed items."""
    return CraftDatabase(db_path)


@pytest.fixture
def cache(store: CraftDatabase) -> WorkingSetCache:
    """Working set hydrated from the seed store with a seeded random source."""
    working_set = WorkingSetCache(rng=ScriptedRandom(seed=1234))
    working_set.hydrate(store)
    return working_set


# =============================================================================
# Upstream Fixtures
# =============================================================================


@pytest.fixture
def sleeps() -> list[float]:
    """Collects every duration passed to an injected sleep function."""
    return []


@pytest.fixture
def make_client(sleeps: list[float]):
    """Factory for a CombineClient over a FakeSession."""

    def _make(session: FakeSession, **kwargs) -> CombineClient:
        kwargs.setdefault("sleep", sleeps.append)
        return CombineClient(session=session, **kwargs)

    return _make
