"""Entity manager — population ownership, id assignment and proximity queries."""

from __future__ import annotations

import random
from typing import Iterable, Optional, Union

import structlog

from alife.core.entity import (
    Entity,
    EntityKind,
    default_energy,
    kind_name,
    parse_kind,
    random_hue,
)
from alife.core.world_physics import WORLD, WorldBounds, wrap_coordinate

logger = structlog.get_logger()


class EntityManager:
    """Owns every entity in the simulation, in population order.

    Population order is significant: the engine updates entities in this
    order and later entities observe earlier ones already moved. New
    entities are always appended.

    Ids start at 1, increase by one per spawn and are never reused until
    clear() starts a new epoch.
    """

    def __init__(self, rng: random.Random, bounds: WorldBounds = WORLD) -> None:
        """Initialize the entity manager.

        Args:
            rng: Random source for positions and hues.
            bounds: World size used for random placement and wrapping.
        """
        self._entities: list[Entity] = []
        self._next_id = 1
        self.rng = rng
        self.bounds = bounds

    def create(
        self,
        kind: Union[EntityKind, str],
        x: Optional[float] = None,
        y: Optional[float] = None,
        energy: Optional[float] = None,
        hue: Optional[float] = None,
    ) -> Entity:
        """Build a new entity and assign it the next id, without adding it.

        Args:
            kind: Entity kind; unknown strings are kept verbatim.
            x: Initial x position, random if None. Wrapped into bounds.
            y: Initial y position, random if None. Wrapped into bounds.
            energy: Starting energy, the kind's default if None.
            hue: Colour seed, drawn from the kind's range if None.

        Returns:
            The newly created entity.

        Note:
            Offspring are created mid-tick and appended only after the
            update pass, so creation and insertion are separate steps.
        """
        kind = parse_kind(kind)
        if x is None:
            x = self.rng.random() * self.bounds.width
        if y is None:
            y = self.rng.random() * self.bounds.height
        if energy is None:
            energy = default_energy(kind)
        if hue is None:
            hue = random_hue(kind, self.rng)

        entity = Entity(
            id=self._next_id,
            kind=kind,
            x=wrap_coordinate(x, self.bounds.width),
            y=wrap_coordinate(y, self.bounds.height),
            energy=energy,
            hue=hue,
        )
        self._next_id += 1
        return entity

    def spawn(
        self,
        kind: Union[EntityKind, str],
        x: Optional[float] = None,
        y: Optional[float] = None,
        energy: Optional[float] = None,
        hue: Optional[float] = None,
    ) -> Entity:
        """Create an entity and append it to the population.

        Takes the same arguments as create().
        """
        entity = self.create(kind, x=x, y=y, energy=energy, hue=hue)
        self._entities.append(entity)

        logger.debug(
            "entity_spawned",
            entity_id=entity.id,
            kind=kind_name(entity.kind),
            x=round(entity.x, 1),
            y=round(entity.y, 1),
            energy=entity.energy,
        )
        return entity

    def extend(self, entities: Iterable[Entity]) -> None:
        """Append already-created entities (offspring) in order."""
        self._entities.extend(entities)

    def nearest(self, entity: Entity, kind: Union[EntityKind, str], vision: float) -> Optional[Entity]:
        """Find the closest entity of a kind strictly within vision.

        Args:
            entity: The observer.
            kind: Kind to look for.
            vision: Search radius; a candidate at exactly this distance is not seen.

        Returns:
            The nearest match, or None.

        Note:
            Linear scan over the whole population. Entities already marked
            eaten this tick are still candidates until the sweep.
        """
        best: Optional[Entity] = None
        best_distance = vision
        for other in self._entities:
            if other.kind != kind:
                continue
            distance = entity.distance_to(other)
            if distance < best_distance:
                best_distance = distance
                best = other
        return best

    def sweep_dead(self) -> int:
        """Remove every entity with energy <= 0.

        Returns:
            Number of entities removed.
        """
        before = len(self._entities)
        self._entities = [e for e in self._entities if e.is_alive()]
        return before - len(self._entities)

    def count(self, kind: Optional[Union[EntityKind, str]] = None) -> int:
        """Count entities, optionally only those of one kind."""
        if kind is None:
            return len(self._entities)
        return sum(1 for e in self._entities if e.kind == kind)

    def all(self) -> list[Entity]:
        """Get the live population list in update order.

        Returns:
            The internal list; callers iterating during a tick must not
            add or remove entries.
        """
        return self._entities

    def snapshot(self) -> tuple[Entity, ...]:
        return tuple(self._entities)

    @property
    def next_id(self) -> int:
        return self._next_id

    def clear(self) -> None:
        """Remove all entities and restart id assignment at 1."""
        self._entities = []
        self._next_id = 1
        logger.debug("entity_manager_cleared")
