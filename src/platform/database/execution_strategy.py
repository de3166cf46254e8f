"""
Execution Strategy - retries a transactional unit of work on transient failure

The unit of work is an async callable with no arguments. It must open its
own transaction and re-read every piece of state it depends on, because a
retried attempt starts from scratch after the failed one was rolled back.

Transient failures:
- OperationalError / InterfaceError (connection dropped, server restarting)
- DBAPIError with connection_invalidated
- SQLSTATE 40001 (serialization failure) / 40P01 (deadlock detected)

Anything else, DomainError included, is raised on the first occurrence.
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


_T = TypeVar('_T')

TRANSIENT_SQLSTATES = frozenset({'40001', '40P01'})


def _sqlstate_of(error: DBAPIError) -> Optional[str]:
    orig = error.orig
    # asyncpg exposes `sqlstate`, psycopg exposes `pgcode`
    return getattr(orig, 'sqlstate', None) or getattr(orig, 'pgcode', None)


def is_transient_error(error: BaseException) -> bool:
    if isinstance(error, (OperationalError, InterfaceError)):
        return True
    if isinstance(error, DBAPIError):
        return error.connection_invalidated or _sqlstate_of(error) in TRANSIENT_SQLSTATES
    return False


class ExecutionStrategy:
    def __init__(
        self,
        *,
        max_attempts: Optional[int] = None,
        base_delay: Optional[float] = None,
        max_delay: Optional[float] = None,
    ) -> None:
        self.max_attempts = (
            max_attempts if max_attempts is not None else settings.DB_RETRY_MAX_ATTEMPTS
        )
        self.base_delay = base_delay if base_delay is not None else settings.DB_RETRY_BASE_DELAY
        self.max_delay = max_delay if max_delay is not None else settings.DB_RETRY_MAX_DELAY
        if self.max_attempts < 1:
            raise ValueError('max_attempts must be at least 1')

    def backoff_delay(self, attempt: int) -> float:
        return min(self.max_delay, self.base_delay * (2 ** (attempt - 1)))

    async def execute(self, unit_of_work: Callable[[], Awaitable[_T]]) -> _T:
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await unit_of_work()
            except Exception as e:
                if not is_transient_error(e):
                    raise
                if attempt == self.max_attempts:
                    Logger.base.error(
                        f'❌ [DB] Unit of work failed after {self.max_attempts} attempts: {e}'
                    )
                    raise
                delay = self.backoff_delay(attempt)
                Logger.base.warning(
                    f'⏳ [DB] Transient failure, attempt {attempt}/{self.max_attempts}, '
                    f'retry in {delay:.2f}s | {type(e).__name__}: {e}'
                )
                await asyncio.sleep(delay)

        # Unreachable: the last attempt either returns or raises
        raise RuntimeError('Execution strategy exhausted without result')
