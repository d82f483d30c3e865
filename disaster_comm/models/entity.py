"""
Entity models for the disaster communication network.
Defines the entity types (Hospital, Police, Rescuer, Survivor), the
geolocated Entity itself and the requester point of the current actor.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple
import math


EARTH_RADIUS_M = 6371000.0  # Mean Earth radius in meters


class EntityType(Enum):
    """Types of geolocated entities."""
    HOSPITAL = "Hospital"
    POLICE = "Police"
    RESCUER = "Rescuer"
    SURVIVOR = "Survivor"
    USER = "User"  # Reserved for the synthetic requester node

    @classmethod
    def parse(cls, text) -> Optional['EntityType']:
        """
        Resolve a type name case-insensitively.

        Accepts the enum itself, the value ("Hospital") or the plural used
        by messaging recipients ("Hospitals"). Returns None when unknown.
        """
        if isinstance(text, cls):
            return text
        if not text:
            return None
        key = str(text).strip().lower()
        for member in cls:
            value = member.value.lower()
            if key == value or key == value + "s":
                return member
        return None


# Types an entity registry may hold
ENTITY_TYPES = (
    EntityType.HOSPITAL,
    EntityType.POLICE,
    EntityType.RESCUER,
    EntityType.SURVIVOR,
)


@dataclass
class Entity:
    """A geolocated point of a fixed type."""
    lat: float
    lon: float
    entity_type: EntityType
    name: str = ""
    id: int = -1  # Registry index, assigned on append

    @property
    def pos(self) -> Tuple[float, float]:
        """Return position as (lat, lon) tuple."""
        return (self.lat, self.lon)

    @property
    def display_name(self) -> str:
        """Name, falling back to the type name for unnamed entities."""
        return self.name or self.entity_type.value

    def distance_to(self, other: 'Entity') -> float:
        """Haversine distance to another entity in meters."""
        return haversine_distance(self.lat, self.lon, other.lat, other.lon)


@dataclass
class RequesterPoint:
    """Location of the current actor."""
    lat: float
    lon: float

    def __post_init__(self):
        validate_coordinates(self.lat, self.lon)

    @property
    def pos(self) -> Tuple[float, float]:
        return (self.lat, self.lon)

    def to_entity(self, index: int) -> Entity:
        """Synthetic USER node appended to a graph snapshot."""
        return Entity(lat=self.lat, lon=self.lon,
                      entity_type=EntityType.USER, name="You", id=index)


def validate_coordinates(lat: float, lon: float) -> None:
    """Raise ValueError for coordinates outside the valid range."""
    if not (-90.0 <= lat <= 90.0):
        raise ValueError(f"Latitude out of range: {lat}")
    if not (-180.0 <= lon <= 180.0):
        raise ValueError(f"Longitude out of range: {lon}")


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two points in meters.
    Uses the Haversine formula on a spherical Earth.
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c
