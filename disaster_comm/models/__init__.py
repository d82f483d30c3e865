"""
Models package for the disaster communication network.
"""

from .entity import (
    Entity, EntityType, RequesterPoint, ENTITY_TYPES, EARTH_RADIUS_M,
    haversine_distance, validate_coordinates
)
from .registry import EntityRegistry, RegistryStats
from .roles import Role, DEFAULT_ROLE, nearest_targets, visible_types

__all__ = [
    'Entity', 'EntityType', 'RequesterPoint', 'ENTITY_TYPES', 'EARTH_RADIUS_M',
    'haversine_distance', 'validate_coordinates',
    'EntityRegistry', 'RegistryStats',
    'Role', 'DEFAULT_ROLE', 'nearest_targets', 'visible_types'
]
