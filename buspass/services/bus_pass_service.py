"""
Bus Pass Backend - Bus Pass Service
=====================================

What:  Creates and reads bus pass records.
Who:   Called by the bus pass router.

Creation Flow (POST /bus-pass):
    ┌──────────┐    ┌──────────────┐    ┌──────────────┐    ┌──────────┐
    │  Form    │───▶│ Store photo  │───▶│ Coerce date  │───▶│ Insert   │
    │  (Route) │    │ (optional)   │    │ and price    │    │ (DB)     │
    └──────────┘    └──────────────┘    └──────────────┘    └──────────┘

    The record is committed here. On any failure after the photo was stored,
    including the commit, the photo is removed again.

Field handling:
    Text fields are stored verbatim; an absent field is stored as NULL.
    validTill and price arrive as strings and are cast the way the store
    would cast them. A value that cannot be cast fails the insert (500),
    there is no format validation beyond that.

Price trust:
    By default the price submitted by the client is stored as-is. With
    settings.enforce_server_price the price is recomputed from the location
    table and an unknown route is rejected.
"""

import logging
import math
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from buspass.config import settings
from buspass.exceptions import BusPassError, DatabaseError, NotFoundError
from buspass.models.bus_pass import BusPass
from buspass.schemas.bus_pass import BusPassCreateResponse, BusPassForm, BusPassResponse
from buspass.services.location_service import location_service
from buspass.services.photo_storage import photo_storage

logger = logging.getLogger(__name__)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or value.strip() == "":
        return None
    return value


def coerce_date(value: Optional[str]) -> Optional[date]:
    """
    Cast a submitted validTill string to a date.

    Accepts ISO dates ("2025-06-30") and ISO datetimes
    ("2025-06-30T00:00:00.000Z"); the time part is dropped.

    Raises:
        ValueError: the value is not an ISO date or datetime
    """
    value = _blank_to_none(value)
    if value is None:
        return None
    value = value.strip()
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValueError(f"Cast to date failed for value \"{value}\" at path \"validTill\"")


def coerce_price(value: Optional[str]) -> Optional[float]:
    """
    Cast a submitted price string to a number.

    Raises:
        ValueError: the value is not a finite number
    """
    value = _blank_to_none(value)
    if value is None:
        return None
    try:
        price = float(value)
    except ValueError:
        price = math.nan
    if not math.isfinite(price):
        raise ValueError(f"Cast to Number failed for value \"{value}\" at path \"price\"")
    return price


class BusPassService:
    """Business logic for bus pass applications."""

    async def create_bus_pass(
        self,
        db: AsyncSession,
        form: BusPassForm,
        photo_filename: Optional[str] = None,
        photo_content: Optional[bytes] = None,
    ) -> BusPassCreateResponse:
        """
        Persist a submitted application.

        Args:
            db: Async database session (injected by FastAPI)
            form: Text fields of the submission, as submitted
            photo_filename: Original filename of the uploaded photo, if any
            photo_content: Raw photo bytes, if any

        Returns:
            BusPassCreateResponse with the stored record

        Raises:
            ValidationError: the photo was rejected (→ 400)
            InvalidRouteError: server pricing is enforced and the route is unknown (→ 400)
            FileStorageError: the photo could not be written (→ 500)
            DatabaseError: the record could not be persisted (→ 500)
        """
        photo_ref: Optional[str] = None

        try:
            if photo_filename and photo_content is not None:
                photo_ref = await photo_storage.store(photo_content, photo_filename)

            if settings.enforce_server_price:
                quote = await location_service.get_price(db, form.source, form.destination)
                price = quote.price
            else:
                price = coerce_price(form.price)

            bus_pass = BusPass(
                name=form.name,
                email=form.email,
                valid_till=coerce_date(form.valid_till),
                photo=photo_ref,
                pass_type=form.pass_type,
                route=form.route,
                college_name=form.college_name,
                source=form.source,
                destination=form.destination,
                price=price,
            )
            db.add(bus_pass)
            await db.flush()
            # Committed here so a failed commit still removes the photo
            await db.commit()
            logger.info("Bus pass created: %s (photo=%s)", bus_pass.id, photo_ref)

            return BusPassCreateResponse(
                message="Bus pass created successfully",
                bus_pass=BusPassResponse.model_validate(bus_pass),
            )

        except Exception as e:
            if photo_ref:
                await photo_storage.delete(photo_ref)
            if isinstance(e, BusPassError):
                raise
            logger.error("Error creating bus pass: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to create bus pass",
                error=str(e),
                context={"error_type": type(e).__name__},
            )

    async def get_bus_pass(self, db: AsyncSession, pass_id: UUID) -> BusPassResponse:
        """
        Retrieve a stored pass by id.

        Raises:
            NotFoundError: no pass with this id (→ 404)
            DatabaseError: the query failed (→ 500)
        """
        try:
            bus_pass = await db.get(BusPass, pass_id)
        except Exception as e:
            logger.error("Database error fetching bus pass %s: %s", pass_id, str(e))
            raise DatabaseError(
                message="Failed to fetch bus pass",
                error=str(e),
                context={"pass_id": str(pass_id)},
            )

        if bus_pass is None:
            raise NotFoundError(resource="bus pass", resource_id=str(pass_id))

        return BusPassResponse.model_validate(bus_pass)


# ── Singleton Instance ────────────────────────────────────────────────────
bus_pass_service = BusPassService()
