"""Entity model — dataclass for plants, herbivores and predators."""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class EntityKind(str, Enum):
    """The three organism kinds the engine knows how to update."""

    PLANT = "plant"
    HERBIVORE = "herbivore"
    PREDATOR = "predator"


# Starting energy when no explicit value is given. Any unrecognised kind
# gets the non-plant, non-herbivore default.
DEFAULT_ENERGY: dict[str, float] = {
    EntityKind.PLANT: 1.0,
    EntityKind.HERBIVORE: 60.0,
    EntityKind.PREDATOR: 70.0,
}
FALLBACK_ENERGY = 70.0

# Hue seed ranges as (start, span); plants carry no hue.
HUE_RANGES: dict[str, tuple[float, float]] = {
    EntityKind.HERBIVORE: (120.0, 40.0),
    EntityKind.PREDATOR: (0.0, 30.0),
}

# Plants never grow past this energy.
PLANT_MAX_ENERGY = 1.0


def parse_kind(kind: Union[EntityKind, str]) -> Union[EntityKind, str]:
    """Resolve a kind string to an EntityKind.

    Unknown strings are returned unchanged: the engine accepts them
    silently and the resulting entity simply has no behaviour.
    """
    if isinstance(kind, EntityKind):
        return kind
    try:
        return EntityKind(kind)
    except ValueError:
        return kind


def default_energy(kind: Union[EntityKind, str]) -> float:
    return DEFAULT_ENERGY.get(kind, FALLBACK_ENERGY)


def random_hue(kind: Union[EntityKind, str], rng: random.Random) -> Optional[float]:
    """Draw a colour seed appropriate to the kind, or None for plants."""
    hue_range = HUE_RANGES.get(kind)
    if hue_range is None:
        return None
    start, span = hue_range
    return start + rng.random() * span


@dataclass(eq=False)
class Entity:
    """Represents a single organism in the simulation.

    Entities are owned by the EntityManager and mutated only by the engine
    during a tick. Identity is the ``id``; two entities are never equal
    unless they are the same object.
    """

    # Identity
    id: int
    kind: Union[EntityKind, str]

    # Physical properties
    x: float
    y: float
    energy: float
    vx: float = 0.0
    vy: float = 0.0

    # Lifecycle
    age: int = 0  # in ticks, reserved

    # Colour seed, inherited with mutation at reproduction
    hue: Optional[float] = None

    def is_alive(self) -> bool:
        """Check if the entity survives the end-of-tick sweep.

        Returns:
            bool: True if energy is strictly positive.
        """
        return self.energy > 0

    def mark_eaten(self) -> None:
        """Flag the entity for removal at the end of the current tick."""
        self.energy = -1.0

    def distance_to(self, other: Entity) -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return (dx * dx + dy * dy) ** 0.5


def kind_name(kind: Union[EntityKind, str]) -> str:
    """Plain string form of a kind, for logs and dict keys."""
    if isinstance(kind, EntityKind):
        return kind.value
    return str(kind)
