"""
Simulated survivor pings scattered around a city center.
"""

from typing import List, Optional

import numpy as np

from ..models.entity import Entity, EntityType

DEFAULT_SURVIVOR_COUNT = 10
DEFAULT_SPREAD_METERS = 3000.0
METERS_PER_DEGREE_LAT = 111320.0


def simulate_survivors(center_lat: float, center_lon: float,
                       count: int = DEFAULT_SURVIVOR_COUNT,
                       spread_meters: float = DEFAULT_SPREAD_METERS,
                       seed: Optional[int] = None) -> List[Entity]:
    """
    Generate survivors uniformly within a square of side spread_meters.

    Args:
        center_lat: Center latitude
        center_lon: Center longitude
        count: Number of survivors
        spread_meters: Side length of the square around the center
        seed: Random seed for reproducible scenarios

    Returns:
        Survivors named "SOS ping #1" .. "SOS ping #count"
    """
    rng = np.random.default_rng(seed)
    offsets = rng.random((count, 2)) - 0.5

    lat_span = spread_meters / METERS_PER_DEGREE_LAT
    lon_span = spread_meters / (METERS_PER_DEGREE_LAT * np.cos(np.radians(center_lat)))

    return [
        Entity(lat=float(center_lat + d_lat * lat_span),
               lon=float(center_lon + d_lon * lon_span),
               entity_type=EntityType.SURVIVOR,
               name=f"SOS ping #{i + 1}")
        for i, (d_lat, d_lon) in enumerate(offsets)
    ]
