"""ORM models. Importing this package registers every table on Base.metadata."""

from buspass.models.bus_pass import BusPass
from buspass.models.location import Location

__all__ = ["BusPass", "Location"]
