"""World physics — bounds, velocity integration, friction and steering.

This module provides movement primitives for mobile entities:
- Velocity integration and friction decay
- Toroidal wrap at the world edges
- Steering helpers (seek, flee, wander) used by the behaviour table
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass

from alife.core.entity import Entity


@dataclass(frozen=True)
class WorldBounds:
    """Fixed rectangular world size in conceptual units (not pixels)."""

    width: float
    height: float


WORLD = WorldBounds(width=1200, height=800)


def wrap_coordinate(value: float, size: float) -> float:
    """Wrap a coordinate into [0, size).

    Note:
        A tiny negative value can round to exactly ``size`` under float
        modulo, which would break the half-open interval; that case folds
        back to 0.
    """
    wrapped = value % size
    if wrapped >= size:
        return 0.0
    return wrapped


class WorldPhysics:
    """Movement rules for the simulation world.

    Handles:
    - Applying velocity to position
    - Friction (velocity decay)
    - Toroidal boundary wrap
    - Seek / flee / wander steering
    """

    def __init__(
        self,
        bounds: WorldBounds = WORLD,
        friction_coefficient: float = 0.92,
        wander_jitter: float = 0.5,
    ) -> None:
        """Initialize world physics.

        Args:
            bounds: World size; positions wrap at these edges.
            friction_coefficient: Velocity multiplier applied each tick (0.0-1.0).
                Values closer to 1.0 mean less friction.
            wander_jitter: Width of the uniform random kick added to each
                velocity component while wandering.
        """
        self.bounds = bounds
        self.friction_coefficient = friction_coefficient
        self.wander_jitter = wander_jitter

    def wrap(self, entity: Entity) -> None:
        """Wrap an entity's position to the opposite edge (Pac-Man style)."""
        entity.x = wrap_coordinate(entity.x, self.bounds.width)
        entity.y = wrap_coordinate(entity.y, self.bounds.height)

    def apply_friction(self, entity: Entity) -> None:
        entity.vx *= self.friction_coefficient
        entity.vy *= self.friction_coefficient

    def integrate(self, entity: Entity) -> None:
        """Advance one tick of motion: move, decay velocity, then wrap.

        Args:
            entity: The entity to move.

        Note:
            Order matters: velocity is applied before friction, so an
            entity that just set its velocity moves the full amount this tick.
        """
        entity.x += entity.vx
        entity.y += entity.vy
        self.apply_friction(entity)
        self.wrap(entity)

    def seek(self, entity: Entity, target: Entity, speed: float) -> None:
        """Point the entity's velocity straight at the target.

        Within one unit of the target the velocity is left unchanged.
        Distances are measured directly, not across the wrapped edges.
        """
        dx = target.x - entity.x
        dy = target.y - entity.y
        distance = math.sqrt(dx * dx + dy * dy)
        if distance < 1:
            return
        entity.vx = (dx / distance) * speed
        entity.vy = (dy / distance) * speed

    def flee(self, entity: Entity, threat: Entity, speed: float) -> None:
        """Point the entity's velocity straight away from the threat."""
        dx = entity.x - threat.x
        dy = entity.y - threat.y
        distance = math.sqrt(dx * dx + dy * dy)
        if distance > 0:
            entity.vx = (dx / distance) * speed
            entity.vy = (dy / distance) * speed

    def wander(self, entity: Entity, max_speed: float, rng: random.Random) -> None:
        """Random-walk the velocity, clamping its magnitude to max_speed.

        Args:
            entity: The entity to perturb.
            max_speed: Upper bound on the resulting speed.
            rng: Random source for the perturbation.
        """
        entity.vx += (rng.random() - 0.5) * self.wander_jitter
        entity.vy += (rng.random() - 0.5) * self.wander_jitter
        magnitude = math.sqrt(entity.vx * entity.vx + entity.vy * entity.vy)
        if magnitude > max_speed and magnitude > 0:
            entity.vx = (entity.vx / magnitude) * max_speed
            entity.vy = (entity.vy / magnitude) * max_speed
