from uuid_utils import uuid7

from src.service.concert.app.interface.i_ticket_number_generator import ITicketNumberGenerator


class Uuid7TicketNumberGenerator(ITicketNumberGenerator):
    """Time-ordered ticket numbers, 32 upper-case hex characters"""

    def generate(self) -> str:
        return uuid7().hex.upper()
