"""
Bus Pass Backend - Location Seed Table
========================================

What:  The fare edges loaded into the `locations` table at every start.
How:   SEED_LOCATIONS is an immutable tuple of LocationEdge values. A JSON
       file named by LOCATIONS_SEED_FILE can replace it without a code change.

Edges are directed: ("Uppal", "Warangal") exists, ("Warangal", "Uppal") does
not. The table must not contain duplicate (source, destination) pairs.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import TypeAdapter

from buspass.schemas.location import LocationEdge

logger = logging.getLogger(__name__)


def _edge(source: str, destination: str, distance: float) -> LocationEdge:
    return LocationEdge(source=source, destination=destination, distance=distance)


SEED_LOCATIONS: Tuple[LocationEdge, ...] = (
    _edge("Moulali", "Ghatkesar", 50),
    _edge("Tarnaka", "Uppal", 10),
    _edge("Uppal", "Narapally", 15),
    _edge("Miyapur", "Korremula", 35),
    _edge("Secunderabad", "Uppal", 20),
    _edge("Narapally", "Secunderabad", 40),
    _edge("Uppal", "Moulali", 10),
    _edge("Malkajgiri", "Medipally", 15),
    _edge("Lb Nagar", "Narapally", 35),
    _edge("RTC X Roads", "Secunderabad", 20),
    _edge("Tarnaka", "Malkajgiri", 12),
    _edge("Tarnaka", "Narapply", 25),
    _edge("Tarnaka", "Lb Nagar", 18),
    _edge("Tarnaka", "Korremula", 28),
    _edge("Uppal", "Tank-Bund", 30),
    _edge("Uppal", "Warangal", 100),
    _edge("Uppal", "Secunderabad", 35),
    _edge("Uppal", "RTC Colony", 25),
    _edge("Miyapur", "Uppal", 30),
    _edge("Miyapur", "Moulali", 40),
    _edge("Miyapur", "HiTechCity", 10),
    _edge("Miyapur", "Malkajgiri", 40),
    _edge("Secunderabad", "Ramanthapur", 29),
    _edge("Secunderabad", "ECIL", 20),
    _edge("Secunderabad", "Tarnaka", 8),
    _edge("Secunderabad", "Raidurgam", 32),
    _edge("Secunderabad", "Korremula", 40),
    _edge("Narapally", "Ecil", 25),
    _edge("Narapally", "Uppal", 10),
    _edge("Narapally", "Habsiguda", 15),
    _edge("Narapally", "RTC Colony", 23),
)

_edges_adapter = TypeAdapter(List[LocationEdge])


def load_seed_file(path: str) -> Tuple[LocationEdge, ...]:
    """
    Read a seed table from a JSON file.

    Format: [{"source": "A", "destination": "B", "distance": 12}, ...]

    Raises:
        OSError: the file cannot be read
        pydantic.ValidationError: an entry is malformed (empty name, distance <= 0)
    """
    raw = Path(path).read_text(encoding="utf-8")
    edges = tuple(_edges_adapter.validate_json(raw))
    logger.info("Loaded %d location edges from %s", len(edges), path)
    return edges


def get_seed_locations(seed_file: Optional[str] = None) -> Tuple[LocationEdge, ...]:
    """Return the configured seed table: the JSON file if given, else SEED_LOCATIONS."""
    if seed_file:
        return load_seed_file(seed_file)
    return SEED_LOCATIONS
