"""
Test Configuration and Fixtures

This module provides:
- Test environment setup (log directory) before application modules are imported
- SQLite database per test (sqlite+aiosqlite in tmp_path)
- In-memory cache store standing in for Kvrocks
- Concert repository wired to both

Architecture:
- Unit tests (test/**/unit/, marked `unit`): no database, collaborators are mocks/fakes
- Integration tests (test/**/integration/): real SQLite database, fresh per test
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# loguru_io_config reads TEST_LOG_DIR at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)
    os.environ.setdefault('DEPLOY_ENV', 'test')


_early_setup_test_environment()

from collections.abc import AsyncGenerator  # noqa: E402
import time  # noqa: E402
from typing import Optional  # noqa: E402

import pytest  # noqa: E402

from src.platform.database.execution_strategy import ExecutionStrategy  # noqa: E402
from src.platform.database.orm_db_setting import Database  # noqa: E402
from src.service.concert.app.interface.i_cache_store import ICacheStore  # noqa: E402
from src.service.concert.driven_adapter.generator.uuid7_ticket_number_generator import (  # noqa: E402
    Uuid7TicketNumberGenerator,
)
from src.service.concert.driven_adapter.repo.concert_repo_impl import ConcertRepoImpl  # noqa: E402


# =============================================================================
# Fakes
# =============================================================================
class InMemoryCacheStore(ICacheStore):
    """Dict-backed cache store with absolute expiration, records every call"""

    def __init__(self) -> None:
        self.entries: dict[str, tuple[str, float]] = {}
        self.ttls: dict[str, int] = {}
        self.get_calls = 0
        self.removed: list[str] = []

    async def get_string(self, key: str) -> Optional[str]:
        self.get_calls += 1
        entry = self.entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if time.monotonic() >= expires_at:
            del self.entries[key]
            return None
        return value

    async def set_string(self, key: str, value: str, *, ttl_seconds: int) -> None:
        self.entries[key] = (value, time.monotonic() + ttl_seconds)
        self.ttls[key] = ttl_seconds

    async def remove(self, key: str) -> None:
        self.removed.append(key)
        self.entries.pop(key, None)


# =============================================================================
# Fixtures
# =============================================================================
@pytest.fixture
def cache_store() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f'sqlite+aiosqlite:///{tmp_path / "concerts.db"}'


@pytest.fixture
async def database(database_url: str) -> AsyncGenerator[Database, None]:
    db = Database(database_url=database_url)
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
def execution_strategy() -> ExecutionStrategy:
    return ExecutionStrategy(max_attempts=3, base_delay=0, max_delay=0)


@pytest.fixture
async def concert_repo(
    database: Database,
    cache_store: InMemoryCacheStore,
    execution_strategy: ExecutionStrategy,
) -> AsyncGenerator[ConcertRepoImpl, None]:
    async with ConcertRepoImpl(
        session=database.open_session(),
        cache_store=cache_store,
        ticket_number_generator=Uuid7TicketNumberGenerator(),
        execution_strategy=execution_strategy,
    ) as repo:
        yield repo
