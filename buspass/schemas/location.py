"""
Bus Pass Backend - Location & Price Schemas
=============================================

What:  Pydantic models for the location table and price lookups.
Who:   LocationEdge is returned by GET /api/locations and also validates the
       optional JSON seed file; PriceResponse is returned by GET /api/price.
"""

from pydantic import BaseModel, Field


class LocationEdge(BaseModel):
    """
    A directed fare edge.

    Example:
        {"source": "Uppal", "destination": "Warangal", "distance": 100}
    """
    source: str = Field(min_length=1, description="Boarding point (exact match)")
    destination: str = Field(min_length=1, description="Alighting point (exact match)")
    distance: float = Field(gt=0, description="Route distance")

    model_config = {"from_attributes": True, "frozen": True}


class PriceResponse(BaseModel):
    """Fare for one (source, destination) pair: distance * tariff."""
    price: float = Field(description="Computed fare")
