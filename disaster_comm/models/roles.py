"""
Actor roles and the two role policies built on them.

- Nearest-target policy: which entity types a "nearest by role" query
  considers.
- Visibility policy: which entity types the active role sees and can reach
  with a "Visible" broadcast. A role never sees its own type.
"""

from enum import Enum
from typing import FrozenSet, Optional

from .entity import EntityType


class Role(Enum):
    """Roles an actor can take."""
    HOSPITAL = "Hospital"
    POLICE = "Police"
    RESCUER = "Rescuer"
    SURVIVOR = "Survivor"

    @classmethod
    def parse(cls, text) -> Optional['Role']:
        """Resolve a role name case-insensitively, None if unrecognized."""
        if isinstance(text, cls):
            return text
        if not text:
            return None
        key = str(text).strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        return None


DEFAULT_ROLE = Role.SURVIVOR

NEAREST_TARGETS = {
    Role.SURVIVOR: frozenset({EntityType.HOSPITAL, EntityType.POLICE, EntityType.RESCUER}),
    Role.RESCUER: frozenset({EntityType.SURVIVOR}),
    Role.POLICE: frozenset({EntityType.SURVIVOR}),
    Role.HOSPITAL: frozenset({EntityType.SURVIVOR}),
}

VISIBLE_TYPES = {
    Role.HOSPITAL: frozenset({EntityType.RESCUER, EntityType.SURVIVOR}),
    Role.POLICE: frozenset({EntityType.HOSPITAL, EntityType.RESCUER, EntityType.SURVIVOR}),
    Role.RESCUER: frozenset({EntityType.HOSPITAL, EntityType.SURVIVOR}),
    Role.SURVIVOR: frozenset({EntityType.HOSPITAL, EntityType.POLICE, EntityType.RESCUER}),
}


def nearest_targets(role) -> Optional[FrozenSet[EntityType]]:
    """Target types for a nearest-by-role query, None for an unknown role."""
    resolved = Role.parse(role)
    if resolved is None:
        return None
    return NEAREST_TARGETS[resolved]


def visible_types(role) -> FrozenSet[EntityType]:
    """Entity types visible to a role; unknown roles see what a Survivor sees."""
    resolved = Role.parse(role) or DEFAULT_ROLE
    return VISIBLE_TYPES[resolved]
