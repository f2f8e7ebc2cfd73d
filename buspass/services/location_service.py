"""
Bus Pass Backend - Location Service
=====================================

What:  Reads and replaces the location table; resolves fares.
Who:   Called by the locations router, by BusPassService when server-side
       pricing is enforced, and by the startup bootstrap.

Operations:
    - list_locations(): the whole table, unfiltered, in insertion order
    - get_price():      distance * tariff for an exact (source, destination) match
    - seed_locations(): delete every row, insert the seed edges
    - bootstrap_locations(): one-shot seeding at process start

Errors:
    No match                → InvalidRouteError (400)
    Any store exception     → DatabaseError (500) carrying the operation message
                              and the underlying error text
"""

import logging
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from buspass.config import settings
from buspass.database import async_session_factory
from buspass.exceptions import DatabaseError, InvalidRouteError
from buspass.models.location import Location
from buspass.schemas.location import LocationEdge, PriceResponse
from buspass.seed_data import get_seed_locations

logger = logging.getLogger(__name__)


def compute_price(distance: float, tariff: Optional[float] = None) -> float:
    """Fixed linear tariff: price = distance * tariff (default settings.fare_tariff)."""
    if tariff is None:
        tariff = settings.fare_tariff
    return distance * tariff


class LocationService:
    """
    Business logic for the location table.

    Stateless: every method receives the session to run against.
    """

    async def list_locations(self, db: AsyncSession) -> List[LocationEdge]:
        """
        Return every edge of the location table.

        The client derives its source list and the per-source destination
        lists from this response by filtering.
        """
        try:
            result = await db.execute(select(Location).order_by(Location.id))
            return [LocationEdge.model_validate(row) for row in result.scalars().all()]
        except Exception as e:
            logger.error("Error fetching locations: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch locations",
                error=str(e),
                context={"error_type": type(e).__name__},
            )

    async def find_edge(
        self,
        db: AsyncSession,
        source: Optional[str],
        destination: Optional[str],
    ) -> Optional[Location]:
        """
        Find the edge matching source and destination exactly.

        Comparison is case-sensitive with no trimming. When duplicates exist,
        the earliest inserted edge wins.
        """
        if not source or not destination:
            return None
        result = await db.execute(
            select(Location)
            .where(Location.source == source, Location.destination == destination)
            .order_by(Location.id)
            .limit(1)
        )
        return result.scalars().first()

    async def get_price(
        self,
        db: AsyncSession,
        source: Optional[str],
        destination: Optional[str],
    ) -> PriceResponse:
        """
        Resolve the fare for a (source, destination) pair.

        Example:
            get_price(db, "Uppal", "Warangal")  → PriceResponse(price=1000.0)
            get_price(db, "Warangal", "Uppal")  → InvalidRouteError (no reverse edge)

        Raises:
            InvalidRouteError: no edge matches the pair (→ 400)
            DatabaseError: the lookup failed (→ 500)
        """
        try:
            edge = await self.find_edge(db, source, destination)
        except Exception as e:
            logger.error("Error calculating price: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to calculate price",
                error=str(e),
                context={"source": source, "destination": destination},
            )

        if edge is None:
            logger.info("No fare edge for %r -> %r", source, destination)
            raise InvalidRouteError(source=source, destination=destination)

        return PriceResponse(price=compute_price(edge.distance))

    async def seed_locations(
        self,
        db: AsyncSession,
        edges: Iterable[LocationEdge],
    ) -> int:
        """
        Replace the location table with the given edges.

        Deletes every existing row, then inserts the edges in order, inside the
        caller's transaction. Running it repeatedly leaves exactly `edges`
        in the table. Returns the number of inserted edges.
        """
        rows: Sequence[LocationEdge] = list(edges)
        await db.execute(delete(Location))
        db.add_all(
            Location(source=e.source, destination=e.destination, distance=e.distance)
            for e in rows
        )
        await db.flush()
        return len(rows)


async def bootstrap_locations() -> int:
    """
    Seed the location table once at process start.

    When:  Called from the application lifespan before serving requests.
    How:   Loads the configured seed table and replaces the table contents in
           a single committed transaction.

    Returns the number of seeded edges, or 0 when seeding failed. Failures are
    logged and never prevent startup; requests then see whatever the table
    holds.
    """
    try:
        edges = get_seed_locations(settings.locations_seed_file)
        async with async_session_factory() as session:
            async with session.begin():
                count = await location_service.seed_locations(session, edges)
        logger.info("Locations seeded successfully (%d edges)", count)
        return count
    except Exception as e:
        logger.error("Error seeding locations: %s", str(e), exc_info=True)
        return 0


# ── Singleton Instance ────────────────────────────────────────────────────
location_service = LocationService()
