from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Collection, List, Optional

from sqlalchemy import delete as sql_delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.platform.config.core_setting import settings
from src.platform.database.execution_strategy import ExecutionStrategy
from src.platform.database.orm_db_setting import create_db_and_tables
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.concert.app.dto import CreateResult, DeleteResult, PagedResult, UpdateResult
from src.service.concert.app.interface.i_cache_store import ICacheStore
from src.service.concert.app.interface.i_concert_repo import IConcertRepo
from src.service.concert.app.interface.i_ticket_number_generator import ITicketNumberGenerator
from src.service.concert.domain.entity.concert_entity import Concert
from src.service.concert.domain.entity.ticket_entity import Ticket
from src.service.concert.domain.entity.user_entity import User
from src.service.concert.domain.ticket_number_error import InsufficientUnsoldTicketNumbersError
from src.service.concert.driven_adapter.cache.cache_keys import CacheKeys
from src.service.concert.driven_adapter.cache.concert_cache_codec import (
    deserialize_concerts,
    serialize_concerts,
)
from src.service.concert.driven_adapter.cache.read_through_cache import ReadThroughCache
from src.service.concert.driven_adapter.model.concert_model import ConcertModel
from src.service.concert.driven_adapter.model.ticket_model import TicketModel
from src.service.concert.driven_adapter.model.ticket_number_model import TicketNumberModel
from src.service.concert.driven_adapter.model.user_model import UserModel


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes are taken as UTC (SQLite drops the offset on the way back)"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _require_non_negative(**values: int) -> None:
    for name, value in values.items():
        if value < 0:
            raise ValueError(f'{name} must be >= 0, got {value}')


class ConcertRepoImpl(IConcertRepo):
    """
    SQLAlchemy repository for concerts, tickets, ticket numbers and users

    Owns one AsyncSession for its whole lifetime and releases it in close().
    Reads roll the session back when done so every call starts from a clean,
    idle session; writes run in their own `session.begin()` transaction.
    """

    def __init__(
        self,
        *,
        session: AsyncSession,
        cache_store: ICacheStore,
        ticket_number_generator: ITicketNumberGenerator,
        execution_strategy: Optional[ExecutionStrategy] = None,
        cache_ttl_seconds: Optional[int] = None,
    ) -> None:
        self.session = session
        self.cache = ReadThroughCache(cache_store)
        self.ticket_number_generator = ticket_number_generator
        self.execution_strategy = execution_strategy or ExecutionStrategy()
        self.cache_ttl_seconds = (
            cache_ttl_seconds
            if cache_ttl_seconds is not None
            else settings.UPCOMING_CONCERTS_CACHE_TTL_SECONDS
        )
        self._closed = False

    async def __aenter__(self) -> 'ConcertRepoImpl':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @asynccontextmanager
    async def _read_only(self) -> AsyncIterator[AsyncSession]:
        try:
            yield self.session
        finally:
            await self.session.rollback()

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        # Leftover autobegun transaction would make begin() raise
        if self.session.in_transaction():
            await self.session.rollback()
        async with self.session.begin():
            yield self.session

    # ============================ Mapping ============================

    @staticmethod
    def _concert_to_entity(model: ConcertModel) -> Concert:
        return Concert(
            id=model.id,
            title=model.title,
            artist=model.artist,
            genre=model.genre,
            location=model.location,
            description=model.description,
            price=model.price,
            start_time=_to_utc(model.start_time),  # type: ignore[arg-type]
            is_visible=model.is_visible,
            number_of_tickets_for_sale=model.number_of_tickets_for_sale,
            created_by=model.created_by,
            updated_by=model.updated_by,
            created_on=_to_utc(model.created_on),
            updated_on=_to_utc(model.updated_on),
        )

    @staticmethod
    def _apply_concert(model: ConcertModel, concert: Concert) -> None:
        model.title = concert.title
        model.artist = concert.artist
        model.genre = concert.genre
        model.location = concert.location
        model.description = concert.description
        model.price = concert.price
        model.start_time = _to_utc(concert.start_time)  # type: ignore[assignment]
        model.is_visible = concert.is_visible
        model.number_of_tickets_for_sale = concert.number_of_tickets_for_sale
        model.updated_by = concert.updated_by

    @classmethod
    def _ticket_to_entity(cls, model: TicketModel, *, with_concert: bool = False) -> Ticket:
        return Ticket(
            id=model.id,
            concert_id=model.concert_id,
            user_id=model.user_id,
            concert=cls._concert_to_entity(model.concert) if with_concert else None,
        )

    @staticmethod
    def _user_to_entity(model: UserModel) -> User:
        return User(id=model.id, display_name=model.display_name)

    # ============================ Lifecycle ============================

    @Logger.io
    async def initialize(self) -> None:
        await create_db_and_tables(self.session.bind)  # type: ignore[arg-type]

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self.session.close()

    # ============================ Concerts ============================

    @Logger.io
    async def create_concert(self, *, concert: Concert) -> CreateResult:
        async with self._transaction() as session:
            model = ConcertModel(created_by=concert.created_by)
            self._apply_concert(model, concert)
            session.add(model)
            await session.flush()
            new_id = model.id
            created_on, updated_on = model.created_on, model.updated_on

        concert.id = new_id
        concert.created_on = _to_utc(created_on)
        concert.updated_on = _to_utc(updated_on)
        await self.cache.invalidate(CacheKeys.UPCOMING_CONCERTS)
        return CreateResult.success_result(new_id=new_id)

    @Logger.io
    async def update_concert(self, *, concert: Concert) -> UpdateResult:
        if concert.id is None:
            raise NotFoundError('Concert has no id')

        async with self._transaction() as session:
            model = await session.get(ConcertModel, concert.id, populate_existing=True)
            if model is None:
                raise NotFoundError(f'Concert {concert.id} not found')
            self._apply_concert(model, concert)

        await self.cache.invalidate(CacheKeys.UPCOMING_CONCERTS)
        return UpdateResult.success_result()

    @Logger.io
    async def delete_concert(self, *, concert_id: int) -> DeleteResult:
        async with self._transaction() as session:
            model = await session.get(ConcertModel, concert_id, populate_existing=True)
            if model is not None:
                await session.delete(model)

        if model is not None:
            await self.cache.invalidate(CacheKeys.UPCOMING_CONCERTS)
        return DeleteResult.success_result()

    @Logger.io
    async def get_concert_by_id(self, *, concert_id: int) -> Optional[Concert]:
        async with self._read_only() as session:
            result = await session.execute(select(ConcertModel).where(ConcertModel.id == concert_id))
            model = result.scalar_one_or_none()
            return self._concert_to_entity(model) if model else None

    @Logger.io
    async def get_concerts_by_id(self, *, concert_ids: Collection[int]) -> List[Concert]:
        if not concert_ids:
            return []
        async with self._read_only() as session:
            result = await session.execute(
                select(ConcertModel).where(ConcertModel.id.in_(list(concert_ids)))
            )
            return [self._concert_to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def get_upcoming_concerts(self, *, count: int) -> List[Concert]:
        _require_non_negative(count=count)

        async def query_upcoming() -> List[Concert]:
            async with self._read_only() as session:
                result = await session.execute(
                    select(ConcertModel)
                    .where(
                        ConcertModel.start_time > datetime.now(timezone.utc),
                        ConcertModel.is_visible.is_(True),
                    )
                    .order_by(ConcertModel.start_time)
                    .limit(count)
                )
                return [self._concert_to_entity(model) for model in result.scalars().all()]

        concerts = await self.cache.get_or_compute(
            key=CacheKeys.UPCOMING_CONCERTS,
            ttl_seconds=self.cache_ttl_seconds,
            compute=query_upcoming,
            serialize=serialize_concerts,
            deserialize=deserialize_concerts,
        )
        return concerts[:count]

    # ============================ Users ============================

    @Logger.io
    async def create_or_update_user(self, *, user: User) -> UpdateResult:
        async with self._transaction() as session:
            model = await session.get(UserModel, user.id, populate_existing=True)
            if model is None:
                model = UserModel(id=user.id)
                session.add(model)
            model.display_name = user.display_name
        return UpdateResult.success_result()

    @Logger.io
    async def get_user_by_id(self, *, user_id: str) -> Optional[User]:
        async with self._read_only() as session:
            result = await session.execute(select(UserModel).where(UserModel.id == user_id))
            model = result.scalar_one_or_none()
            return self._user_to_entity(model) if model else None

    # ============================ Tickets ============================

    @Logger.io
    async def get_count_for_all_tickets(self, *, user_id: str) -> int:
        async with self._read_only() as session:
            result = await session.execute(
                select(func.count(TicketModel.id)).where(TicketModel.user_id == user_id)
            )
            return result.scalar_one()

    @Logger.io
    async def get_all_tickets(self, *, user_id: str, skip: int, take: int) -> PagedResult[Ticket]:
        _require_non_negative(skip=skip, take=take)

        async with self._read_only() as session:
            result = await session.execute(
                select(TicketModel)
                .options(selectinload(TicketModel.concert))
                .where(TicketModel.user_id == user_id)
                .order_by(TicketModel.id.desc())
                .offset(skip)
                .limit(take)
            )
            page = [
                self._ticket_to_entity(model, with_concert=True)
                for model in result.scalars().all()
            ]
            count_result = await session.execute(
                select(func.count(TicketModel.id)).where(TicketModel.user_id == user_id)
            )
            return PagedResult(page_of_data=page, total_count=count_result.scalar_one())

    @Logger.io
    async def get_ticket_by_id(self, *, ticket_id: int) -> Optional[Ticket]:
        async with self._read_only() as session:
            result = await session.execute(select(TicketModel).where(TicketModel.id == ticket_id))
            model = result.scalar_one_or_none()
            return self._ticket_to_entity(model) if model else None

    # ============================ Ticket numbers ============================

    @Logger.io
    async def create_or_update_ticket_numbers(
        self, *, concert_id: int, number_of_tickets: int
    ) -> UpdateResult:
        _require_non_negative(number_of_tickets=number_of_tickets)

        async def reconcile() -> None:
            # Every attempt re-reads the pool, nothing is carried over from a failed one
            async with self._transaction() as session:
                existing = (
                    await session.execute(
                        select(func.count(TicketNumberModel.id)).where(
                            TicketNumberModel.concert_id == concert_id
                        )
                    )
                ).scalar_one()

                if existing > number_of_tickets:
                    excess = existing - number_of_tickets
                    unsold_ids = (
                        (
                            await session.execute(
                                select(TicketNumberModel.id)
                                .where(
                                    TicketNumberModel.concert_id == concert_id,
                                    TicketNumberModel.ticket_id.is_(None),
                                )
                                .order_by(TicketNumberModel.id.desc())
                                .limit(excess)
                            )
                        )
                        .scalars()
                        .all()
                    )
                    if len(unsold_ids) < excess:
                        raise InsufficientUnsoldTicketNumbersError(
                            concert_id=concert_id,
                            requested=number_of_tickets,
                            unsold=len(unsold_ids),
                        )
                    await session.execute(
                        sql_delete(TicketNumberModel).where(TicketNumberModel.id.in_(unsold_ids))
                    )
                    Logger.base.info(
                        f'🗑️ [TICKET_NUMBER] concert={concert_id} removed {excess} unsold numbers'
                    )
                elif existing < number_of_tickets:
                    deficit = number_of_tickets - existing
                    session.add_all(
                        [
                            TicketNumberModel(
                                concert_id=concert_id,
                                number=self.ticket_number_generator.generate(),
                            )
                            for _ in range(deficit)
                        ]
                    )
                    Logger.base.info(
                        f'🎫 [TICKET_NUMBER] concert={concert_id} added {deficit} numbers'
                    )

        await self.execution_strategy.execute(reconcile)
        return UpdateResult.success_result()
