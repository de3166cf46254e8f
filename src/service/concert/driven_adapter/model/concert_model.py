from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConcertModel(Base):
    __tablename__ = 'concert'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    artist: Mapped[str] = mapped_column(String(255), nullable=False)
    genre: Mapped[str] = mapped_column(String(100), default='', nullable=False)
    location: Mapped[str] = mapped_column(String(255), default='', nullable=False)
    description: Mapped[str] = mapped_column(Text, default='', nullable=False)
    price: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    is_visible: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    number_of_tickets_for_sale: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    updated_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    # Python-side defaults, populated on flush without a refresh
    created_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    def __repr__(self):
        return f'<ConcertModel(id={self.id}, title={self.title}, start_time={self.start_time})>'
