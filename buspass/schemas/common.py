"""
Bus Pass Backend - Shared Response Schemas
============================================

What:  Error and health response shapes used across routers (OpenAPI docs).
"""

from typing import Optional

from pydantic import BaseModel, Field


class InvalidRouteResponse(BaseModel):
    """400 body of GET /api/price when no edge matches."""
    error: str = Field(description="Always 'Invalid source or destination'")


class FaultResponse(BaseModel):
    """
    500 body for backend/storage faults.

    Example:
        {"message": "Failed to create bus pass", "error": "disk I/O error"}
    """
    message: str = Field(description="Operation that failed")
    error: str = Field(description="Underlying error text")


class ErrorResponse(BaseModel):
    """Body for validation (400), not-found (404) and rate-limit (429) errors."""
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    locations: int = Field(description="Number of edges currently in the location table")
    uptime_seconds: float = Field(description="Seconds since service started")
