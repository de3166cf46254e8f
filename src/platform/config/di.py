"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.execution_strategy import ExecutionStrategy
from src.platform.database.orm_db_setting import Database
from src.platform.state.kvrocks_client import kvrocks_client
from src.service.concert.driven_adapter.cache.redis_cache_store import RedisCacheStore
from src.service.concert.driven_adapter.generator.uuid7_ticket_number_generator import (
    Uuid7TicketNumberGenerator,
)
from src.service.concert.driven_adapter.repo.concert_repo_impl import ConcertRepoImpl


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (AsyncEngineManager per event loop)
    database = providers.Singleton(
        Database, database_url=config_service.provided.DATABASE_URL_ASYNC
    )

    # Retry policy for transactional units of work
    execution_strategy = providers.Singleton(
        ExecutionStrategy,
        max_attempts=config_service.provided.DB_RETRY_MAX_ATTEMPTS,
        base_delay=config_service.provided.DB_RETRY_BASE_DELAY,
        max_delay=config_service.provided.DB_RETRY_MAX_DELAY,
    )

    # Kvrocks cache (client must be initialized during startup)
    cache_store = providers.Factory(
        RedisCacheStore,
        client=providers.Factory(kvrocks_client.get_client),
        key_prefix=config_service.provided.CACHE_KEY_PREFIX,
    )

    ticket_number_generator = providers.Singleton(Uuid7TicketNumberGenerator)

    # Repository owns its session: one instance per unit of work, caller closes it
    concert_repo = providers.Factory(
        ConcertRepoImpl,
        session=database.provided.open_session.call(),
        cache_store=cache_store,
        ticket_number_generator=ticket_number_generator,
        execution_strategy=execution_strategy,
        cache_ttl_seconds=config_service.provided.UPCOMING_CONCERTS_CACHE_TTL_SECONDS,
    )


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
