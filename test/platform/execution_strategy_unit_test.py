from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError

from src.platform.database.execution_strategy import ExecutionStrategy, is_transient_error
from src.platform.exception.exceptions import DomainError


class _PgError(Exception):
    def __init__(self, sqlstate: str) -> None:
        super().__init__(f'sqlstate {sqlstate}')
        self.sqlstate = sqlstate


def _operational_error() -> OperationalError:
    return OperationalError('SELECT 1', {}, Exception('server closed the connection'))


@pytest.mark.unit
class TestIsTransientError:
    def test_operational_error_is_transient(self):
        assert is_transient_error(_operational_error())

    @pytest.mark.parametrize('sqlstate', ['40001', '40P01'])
    def test_serialization_and_deadlock_sqlstates_are_transient(self, sqlstate: str):
        assert is_transient_error(DBAPIError('UPDATE x', {}, _PgError(sqlstate)))

    def test_invalidated_connection_is_transient(self):
        error = DBAPIError('SELECT 1', {}, Exception('gone'), connection_invalidated=True)
        assert is_transient_error(error)

    def test_unique_violation_is_not_transient(self):
        assert not is_transient_error(IntegrityError('INSERT', {}, _PgError('23505')))

    def test_domain_error_is_not_transient(self):
        assert not is_transient_error(DomainError('nope'))


@pytest.mark.unit
class TestExecutionStrategy:
    @pytest.fixture
    def strategy(self) -> ExecutionStrategy:
        return ExecutionStrategy(max_attempts=3, base_delay=0, max_delay=0)

    @pytest.mark.asyncio
    async def test_returns_result_of_first_successful_attempt(self, strategy: ExecutionStrategy):
        unit_of_work = AsyncMock(return_value='done')

        assert await strategy.execute(unit_of_work) == 'done'
        assert unit_of_work.await_count == 1

    @pytest.mark.asyncio
    async def test_retries_transient_failure_until_success(self, strategy: ExecutionStrategy):
        unit_of_work = AsyncMock(side_effect=[_operational_error(), _operational_error(), 42])

        assert await strategy.execute(unit_of_work) == 42
        assert unit_of_work.await_count == 3

    @pytest.mark.asyncio
    async def test_raises_last_error_when_attempts_exhausted(self, strategy: ExecutionStrategy):
        errors = [_operational_error() for _ in range(3)]
        unit_of_work = AsyncMock(side_effect=errors)

        with pytest.raises(OperationalError) as exc_info:
            await strategy.execute(unit_of_work)

        assert exc_info.value is errors[-1]
        assert unit_of_work.await_count == 3

    @pytest.mark.asyncio
    async def test_domain_error_is_raised_without_retry(self, strategy: ExecutionStrategy):
        unit_of_work = AsyncMock(side_effect=DomainError('Unable to delete sold tickets'))

        with pytest.raises(DomainError):
            await strategy.execute(unit_of_work)

        assert unit_of_work.await_count == 1

    def test_backoff_doubles_and_is_capped(self):
        strategy = ExecutionStrategy(max_attempts=6, base_delay=0.1, max_delay=0.5)

        assert strategy.backoff_delay(1) == pytest.approx(0.1)
        assert strategy.backoff_delay(2) == pytest.approx(0.2)
        assert strategy.backoff_delay(3) == pytest.approx(0.4)
        assert strategy.backoff_delay(4) == pytest.approx(0.5)

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            ExecutionStrategy(max_attempts=0)

    def test_defaults_come_from_settings(self):
        from src.platform.config.core_setting import settings

        strategy = ExecutionStrategy()

        assert strategy.max_attempts == settings.DB_RETRY_MAX_ATTEMPTS
        assert strategy.base_delay == settings.DB_RETRY_BASE_DELAY
        assert strategy.max_delay == settings.DB_RETRY_MAX_DELAY
