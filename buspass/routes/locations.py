"""
Bus Pass Backend - Location & Price Route Handlers
====================================================

What:  GET /api/locations (full fare table) and GET /api/price (fare lookup).
How:   Extracts query parameters, delegates to LocationService, returns JSON.
Who:   Called by the pass form: once on load for the location table, then
       each time the rider picks a (source, destination) pair.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from buspass.database import get_db_session
from buspass.schemas.common import FaultResponse, InvalidRouteResponse
from buspass.schemas.location import LocationEdge, PriceResponse
from buspass.services.location_service import location_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Locations"])


@router.get(
    "/locations",
    response_model=List[LocationEdge],
    responses={
        500: {"description": "Store failure", "model": FaultResponse},
    },
    summary="List the fare table",
    description=(
        "Returns every directed (source, destination, distance) edge. Clients "
        "derive the destinations for a source by filtering this list."
    ),
)
async def list_locations(
    db: AsyncSession = Depends(get_db_session),
) -> List[LocationEdge]:
    return await location_service.list_locations(db)


@router.get(
    "/price",
    response_model=PriceResponse,
    responses={
        400: {"description": "No edge for this pair", "model": InvalidRouteResponse},
        500: {"description": "Store failure", "model": FaultResponse},
    },
    summary="Compute the fare for a route",
    description="Price is distance * 10 for the edge matching source and destination exactly.",
)
async def get_price(
    source: Optional[str] = Query(default=None, description="Boarding point (case-sensitive)"),
    destination: Optional[str] = Query(default=None, description="Alighting point (case-sensitive)"),
    db: AsyncSession = Depends(get_db_session),
) -> PriceResponse:
    """
    Example:
        GET /api/price?source=Uppal&destination=Warangal  → {"price": 1000.0}
        GET /api/price?source=Warangal&destination=Uppal  → 400
    """
    return await location_service.get_price(db, source, destination)
