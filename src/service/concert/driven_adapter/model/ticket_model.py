from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.platform.database.orm_db_setting import Base

if TYPE_CHECKING:
    from src.service.concert.driven_adapter.model.concert_model import ConcertModel


class TicketModel(Base):
    __tablename__ = 'ticket'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    concert_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('concert.id', ondelete='CASCADE'), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey('user.id'), nullable=False, index=True
    )

    # Loaded explicitly with selectinload, lazy loads are not allowed under asyncio
    concert: Mapped['ConcertModel'] = relationship(
        'ConcertModel', foreign_keys=[concert_id], lazy='raise'
    )
