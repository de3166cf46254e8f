from typing import Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class TicketNumberModel(Base):
    __tablename__ = 'ticket_number'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    concert_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('concert.id', ondelete='CASCADE'), nullable=False, index=True
    )
    number: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    # NULL until the number is assigned to a purchased ticket
    ticket_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey('ticket.id'), nullable=True, index=True
    )
