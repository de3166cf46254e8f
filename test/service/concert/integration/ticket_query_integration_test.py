"""Integration tests for ticket queries: count, paging, lookup by id (SQLite)"""

from datetime import datetime, timedelta, timezone

import pytest

from src.service.concert.domain.entity.concert_entity import Concert
from src.service.concert.domain.entity.user_entity import User
from src.service.concert.driven_adapter.model.ticket_model import TicketModel
from src.service.concert.driven_adapter.repo.concert_repo_impl import ConcertRepoImpl


async def _seed_tickets(
    repo: ConcertRepoImpl, *, user_id: str, count: int
) -> tuple[int, list[int]]:
    await repo.create_or_update_user(user=User(id=user_id, display_name=user_id.title()))
    concert = Concert(
        title=f'{user_id} night',
        artist='The Relays',
        start_time=datetime.now(timezone.utc) + timedelta(days=1),
    )
    await repo.create_concert(concert=concert)

    async with repo.session.begin():
        tickets = [TicketModel(concert_id=concert.id, user_id=user_id) for _ in range(count)]
        repo.session.add_all(tickets)
        await repo.session.flush()
        ticket_ids = [ticket.id for ticket in tickets]
    return concert.id, ticket_ids


class TestTicketCount:
    @pytest.mark.asyncio
    async def test_counts_only_the_users_tickets(self, concert_repo):
        await _seed_tickets(concert_repo, user_id='alice', count=3)
        await _seed_tickets(concert_repo, user_id='bob', count=2)

        assert await concert_repo.get_count_for_all_tickets(user_id='alice') == 3
        assert await concert_repo.get_count_for_all_tickets(user_id='bob') == 2
        assert await concert_repo.get_count_for_all_tickets(user_id='nobody') == 0


class TestGetAllTickets:
    @pytest.mark.asyncio
    async def test_page_is_ordered_by_descending_id_with_total(self, concert_repo):
        _, ticket_ids = await _seed_tickets(concert_repo, user_id='alice', count=5)
        await _seed_tickets(concert_repo, user_id='bob', count=4)

        page = await concert_repo.get_all_tickets(user_id='alice', skip=0, take=2)

        assert [t.id for t in page.page_of_data] == sorted(ticket_ids, reverse=True)[:2]
        assert page.total_count == 5

    @pytest.mark.asyncio
    async def test_skip_moves_the_window(self, concert_repo):
        _, ticket_ids = await _seed_tickets(concert_repo, user_id='alice', count=5)

        page = await concert_repo.get_all_tickets(user_id='alice', skip=3, take=10)

        assert [t.id for t in page.page_of_data] == sorted(ticket_ids, reverse=True)[3:]
        assert page.total_count == 5

    @pytest.mark.asyncio
    async def test_tickets_carry_their_concert(self, concert_repo):
        concert_id, _ = await _seed_tickets(concert_repo, user_id='alice', count=1)

        page = await concert_repo.get_all_tickets(user_id='alice', skip=0, take=1)

        [ticket] = page.page_of_data
        assert ticket.user_id == 'alice'
        assert ticket.concert is not None
        assert ticket.concert.id == concert_id
        assert ticket.concert.title == 'alice night'

    @pytest.mark.asyncio
    async def test_take_zero_returns_empty_page_with_total(self, concert_repo):
        await _seed_tickets(concert_repo, user_id='alice', count=2)

        page = await concert_repo.get_all_tickets(user_id='alice', skip=0, take=0)

        assert page.page_of_data == []
        assert page.total_count == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(('skip', 'take'), [(-1, 5), (0, -1)])
    async def test_negative_paging_arguments_are_rejected(self, concert_repo, skip, take):
        with pytest.raises(ValueError):
            await concert_repo.get_all_tickets(user_id='alice', skip=skip, take=take)


class TestGetTicketById:
    @pytest.mark.asyncio
    async def test_returns_ticket_without_concert(self, concert_repo):
        concert_id, [ticket_id] = await _seed_tickets(concert_repo, user_id='alice', count=1)

        ticket = await concert_repo.get_ticket_by_id(ticket_id=ticket_id)

        assert ticket.id == ticket_id
        assert ticket.concert_id == concert_id
        assert ticket.user_id == 'alice'
        assert ticket.concert is None

    @pytest.mark.asyncio
    async def test_unknown_ticket_returns_none(self, concert_repo):
        assert await concert_repo.get_ticket_by_id(ticket_id=4242) is None
