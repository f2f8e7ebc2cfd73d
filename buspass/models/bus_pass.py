"""
Bus Pass Backend - BusPass SQLAlchemy Model
=============================================

What:  ORM model representing the `bus_passes` table.
Who:   Written by BusPassService on submission; read back by GET /bus-pass/{id}.

Table Design:
    - UUID primary key assigned by the application on insert.
    - Every rider field is nullable: the form is stored as submitted and an
      absent field is stored as NULL. No format validation happens here.
    - photo: opaque filename reference handed back by the photo storage.
    - price: the value submitted with the form (or the server-computed one
      when ENFORCE_SERVER_PRICE is on). It is not re-verified against the
      location table, and (source, destination) need not exist there.
    - Records are created once and never updated or deleted.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import Date, DateTime, Float, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from buspass.database import Base


class BusPass(Base):
    """A submitted bus-pass application."""

    __tablename__ = "bus_passes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    valid_till: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    photo: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Filename reference returned by the photo storage",
    )

    pass_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    route: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    college_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    source: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    destination: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        comment="When the application was submitted (UTC)",
    )

    def __repr__(self) -> str:
        return f"<BusPass(id={self.id}, name='{self.name}', route='{self.source}->{self.destination}')>"
