"""
Conversion of Overpass API elements into registry entities.

The fetching itself belongs to the city loader outside the core; this
module only turns the JSON elements it returns into Entity objects.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
import logging

from ..models.entity import Entity, EntityType

logger = logging.getLogger(__name__)

# Cap per entity type to keep graph construction responsive
MAX_PER_TYPE = 250

AMENITY_TYPES: Dict[str, EntityType] = {
    'hospital': EntityType.HOSPITAL,
    'clinic': EntityType.HOSPITAL,
    'police': EntityType.POLICE,
    'fire_station': EntityType.RESCUER,
}

EMERGENCY_TYPES: Dict[str, EntityType] = {
    'ambulance_station': EntityType.RESCUER,
}


def element_position(element: Mapping[str, Any]) -> Optional[Tuple[float, float]]:
    """Position of a node, or the center of a way / relation."""
    kind = element.get('type')
    if kind == 'node':
        lat, lon = element.get('lat'), element.get('lon')
    elif kind in ('way', 'relation') and element.get('center'):
        center = element['center']
        lat, lon = center.get('lat'), center.get('lon')
    else:
        return None
    if lat is None or lon is None:
        return None
    return (float(lat), float(lon))


def classify_element(tags: Mapping[str, Any]) -> Optional[EntityType]:
    """Entity type for an element's tags, None if not an emergency service."""
    amenity = tags.get('amenity')
    if amenity in AMENITY_TYPES:
        return AMENITY_TYPES[amenity]
    emergency = tags.get('emergency')
    if emergency in EMERGENCY_TYPES:
        return EMERGENCY_TYPES[emergency]
    return None


def entities_from_overpass(elements: Iterable[Mapping[str, Any]],
                           cap: int = MAX_PER_TYPE) -> List[Entity]:
    """
    Convert Overpass elements to entities.

    Args:
        elements: The 'elements' list of an Overpass JSON response
        cap: Maximum number of entities kept per type

    Returns:
        Entities in response order.
    """
    entities: List[Entity] = []
    counts: Dict[EntityType, int] = {}
    skipped = 0

    for element in elements:
        tags = element.get('tags') or {}
        entity_type = classify_element(tags)
        position = element_position(element)
        if entity_type is None or position is None:
            skipped += 1
            continue
        if counts.get(entity_type, 0) >= cap:
            continue

        counts[entity_type] = counts.get(entity_type, 0) + 1
        entities.append(Entity(lat=position[0], lon=position[1],
                               entity_type=entity_type,
                               name=tags.get('name') or ""))

    if skipped:
        logger.warning("Skipped %d Overpass elements without a usable type or position", skipped)
    return entities
