from abc import ABC, abstractmethod
from typing import Collection, List, Optional

from src.service.concert.app.dto import CreateResult, DeleteResult, PagedResult, UpdateResult
from src.service.concert.domain.entity.concert_entity import Concert
from src.service.concert.domain.entity.ticket_entity import Ticket
from src.service.concert.domain.entity.user_entity import User


class IConcertRepo(ABC):
    """Concert, ticket, ticket-number and user persistence"""

    @abstractmethod
    async def initialize(self) -> None:
        pass

    @abstractmethod
    async def create_concert(self, *, concert: Concert) -> CreateResult:
        pass

    @abstractmethod
    async def update_concert(self, *, concert: Concert) -> UpdateResult:
        pass

    @abstractmethod
    async def delete_concert(self, *, concert_id: int) -> DeleteResult:
        """Succeeds whether or not the concert exists"""
        pass

    @abstractmethod
    async def get_concert_by_id(self, *, concert_id: int) -> Optional[Concert]:
        pass

    @abstractmethod
    async def get_concerts_by_id(self, *, concert_ids: Collection[int]) -> List[Concert]:
        """Unknown ids are silently omitted"""
        pass

    @abstractmethod
    async def get_upcoming_concerts(self, *, count: int) -> List[Concert]:
        """Visible concerts starting in the future, soonest first, served from cache"""
        pass

    @abstractmethod
    async def create_or_update_user(self, *, user: User) -> UpdateResult:
        pass

    @abstractmethod
    async def get_count_for_all_tickets(self, *, user_id: str) -> int:
        pass

    @abstractmethod
    async def get_all_tickets(self, *, user_id: str, skip: int, take: int) -> PagedResult[Ticket]:
        pass

    @abstractmethod
    async def get_ticket_by_id(self, *, ticket_id: int) -> Optional[Ticket]:
        pass

    @abstractmethod
    async def get_user_by_id(self, *, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def create_or_update_ticket_numbers(
        self, *, concert_id: int, number_of_tickets: int
    ) -> UpdateResult:
        """Resize the concert's ticket-number pool to exactly `number_of_tickets`"""
        pass

    @abstractmethod
    async def close(self) -> None:
        pass
