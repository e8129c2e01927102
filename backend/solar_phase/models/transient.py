"""Transient ORM model: expiring key-value rows for cached API data."""

from datetime import datetime, timezone

from sqlalchemy import Text, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class TransientModel(Base):
    __tablename__ = "transients"

    key: Mapped[str] = mapped_column(Text, primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_transient_expires", "expires_at"),
    )
