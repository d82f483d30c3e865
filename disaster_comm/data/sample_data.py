"""
Built-in demo city: a small Chennai snapshot for the CLI.
Positions are approximate and only meant for demonstrations.
"""

from typing import List, Tuple

from ..models.entity import Entity, EntityType
from .survivors import simulate_survivors

CHENNAI_CENTER: Tuple[float, float] = (13.0827, 80.2707)

SAMPLE_SERVICES: List[Tuple[float, float, EntityType, str]] = [
    (13.0732, 80.2609, EntityType.HOSPITAL, "Government General Hospital"),
    (13.0569, 80.2425, EntityType.HOSPITAL, "Apollo Hospital Greams Road"),
    (13.0108, 80.2365, EntityType.HOSPITAL, "Adyar Cancer Institute"),
    (13.1067, 80.2871, EntityType.HOSPITAL, "Stanley Medical College Hospital"),
    (13.0836, 80.2755, EntityType.POLICE, "Esplanade Police Station"),
    (13.0604, 80.2496, EntityType.POLICE, "Nungambakkam Police Station"),
    (13.0418, 80.2341, EntityType.POLICE, "T. Nagar Police Station"),
    (13.0878, 80.2785, EntityType.RESCUER, "Esplanade Fire Station"),
    (13.0481, 80.2214, EntityType.RESCUER, "Ashok Nagar Fire Station"),
    (13.1143, 80.2329, EntityType.RESCUER, "Kolathur Ambulance Station"),
]


def sample_city(survivor_seed: int = 7) -> Tuple[List[Entity], Tuple[float, float]]:
    """
    Entities of the demo city and its center.

    Survivors are simulated around the center with a fixed seed so repeated
    runs produce the same scenario.
    """
    entities = [
        Entity(lat=lat, lon=lon, entity_type=entity_type, name=name)
        for lat, lon, entity_type, name in SAMPLE_SERVICES
    ]
    entities.extend(simulate_survivors(*CHENNAI_CENTER, seed=survivor_seed))
    return entities, CHENNAI_CENTER
