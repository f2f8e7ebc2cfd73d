"""
Bus Pass Backend - Location SQLAlchemy Model
==============================================

What:  ORM model for the `locations` table: one directed fare edge per row.
Who:   Queried by LocationService for listing and price resolution;
       wiped and refilled by the startup seeding.

Table Design:
    - Integer surrogate key: rows are reference data, replaced wholesale
      on every start, so ids carry no meaning beyond insertion order.
    - (source, destination) is directed: (A, B) and (B, A) are separate rows.
    - No unique constraint on the pair; the seed table is expected to be free
      of duplicates and the first match (lowest id) wins on lookup.
"""

from sqlalchemy import Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from buspass.database import Base


class Location(Base):
    """A directed (source, destination, distance) edge of the fare table."""

    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    source: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        comment="Boarding point name, matched exactly (case-sensitive)",
    )

    destination: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        comment="Alighting point name, matched exactly (case-sensitive)",
    )

    distance: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="Route distance; price = distance * fare tariff",
    )

    # Price lookups filter on source then destination
    __table_args__ = (
        Index("idx_locations_source_destination", "source", "destination"),
    )

    def __repr__(self) -> str:
        return (
            f"<Location(source='{self.source}', destination='{self.destination}', "
            f"distance={self.distance})>"
        )
