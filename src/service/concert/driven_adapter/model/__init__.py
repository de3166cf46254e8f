"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.concert.driven_adapter.model.concert_model import ConcertModel
from src.service.concert.driven_adapter.model.ticket_model import TicketModel
from src.service.concert.driven_adapter.model.ticket_number_model import TicketNumberModel
from src.service.concert.driven_adapter.model.user_model import UserModel

__all__ = [
    'ConcertModel',
    'TicketModel',
    'TicketNumberModel',
    'UserModel',
]
