"""Per-kind update rules, dispatched through BEHAVIORS.

Each behaviour mutates one entity for one tick and returns an offspring
(not yet added to the population) or None. Movement integration is done
by the engine afterwards for every kind except plants.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Optional

from alife.config import SimulationConfig
from alife.core.entity import PLANT_MAX_ENERGY, Entity, EntityKind
from alife.core.entity_manager import EntityManager
from alife.core.world_physics import WorldPhysics

PLANT_GROWTH_PER_TICK = 0.01

# Herbivores eat within 10 units, predators catch prey within 12.
HERBIVORE_EAT_RADIUS = 10.0
PREDATOR_CATCH_RADIUS = 12.0

# Herbivores notice predators at a fraction of their food vision and
# outrun their cruising speed when fleeing.
THREAT_VISION_FACTOR = 0.8
FLEE_SPEED_FACTOR = 1.3

HERBIVORE_WANDER_FACTOR = 0.6
PREDATOR_WANDER_FACTOR = 0.5

BIRTH_JITTER = 30.0  # offspring land within +/-15 units of the parent
HUE_MUTATION = 10.0  # offspring hue within +/-5 of the parent


@dataclass
class TickContext:
    """Everything a behaviour needs besides the entity itself."""

    config: SimulationConfig
    manager: EntityManager
    physics: WorldPhysics
    rng: random.Random


Behavior = Callable[[Entity, TickContext], Optional[Entity]]


def update_plant(entity: Entity, ctx: TickContext) -> Optional[Entity]:
    """Grow toward full energy. Plants never move and never starve."""
    entity.energy = min(entity.energy + PLANT_GROWTH_PER_TICK, PLANT_MAX_ENERGY)
    return None


def _forage(
    entity: Entity,
    ctx: TickContext,
    food_kind: EntityKind,
    vision: float,
    speed: float,
    reach: float,
    meal_energy: float,
    wander_speed: float,
) -> None:
    food = ctx.manager.nearest(entity, food_kind, vision)
    if food is None:
        ctx.physics.wander(entity, wander_speed, ctx.rng)
        return

    ctx.physics.seek(entity, food, speed)
    if entity.distance_to(food) < reach:
        entity.energy += meal_energy
        food.mark_eaten()


def _reproduce(entity: Entity, ctx: TickContext, birth_energy: float) -> Optional[Entity]:
    """Split energy with an offspring once the parent is over the threshold.

    The parent keeps half its energy; the child starts with half of what
    the parent kept.
    """
    if entity.energy <= birth_energy:
        return None

    entity.energy *= 0.5
    hue = entity.hue
    if hue is not None:
        hue += (ctx.rng.random() - 0.5) * HUE_MUTATION
    x = entity.x + (ctx.rng.random() - 0.5) * BIRTH_JITTER
    y = entity.y + (ctx.rng.random() - 0.5) * BIRTH_JITTER
    return ctx.manager.create(
        entity.kind,
        x=x,
        y=y,
        energy=entity.energy * 0.5,
        hue=hue,
    )


def update_herbivore(entity: Entity, ctx: TickContext) -> Optional[Entity]:
    """Seek plants, flee predators, pay metabolism, maybe give birth.

    Fleeing is evaluated after foraging and overrides the feeding velocity
    for this tick; a meal taken this tick still counts.
    """
    config = ctx.config
    _forage(
        entity,
        ctx,
        food_kind=EntityKind.PLANT,
        vision=config.herbivore_vision,
        speed=config.herbivore_speed,
        reach=HERBIVORE_EAT_RADIUS,
        meal_energy=config.plant_energy,
        wander_speed=config.herbivore_speed * HERBIVORE_WANDER_FACTOR,
    )

    threat = ctx.manager.nearest(
        entity, EntityKind.PREDATOR, config.herbivore_vision * THREAT_VISION_FACTOR
    )
    if threat is not None:
        ctx.physics.flee(entity, threat, config.herbivore_speed * FLEE_SPEED_FACTOR)

    entity.energy -= config.herbivore_energy_decay
    return _reproduce(entity, ctx, config.herbivore_birth_energy)


def update_predator(entity: Entity, ctx: TickContext) -> Optional[Entity]:
    """Hunt herbivores, pay metabolism, maybe give birth."""
    config = ctx.config
    _forage(
        entity,
        ctx,
        food_kind=EntityKind.HERBIVORE,
        vision=config.predator_vision,
        speed=config.predator_speed,
        reach=PREDATOR_CATCH_RADIUS,
        meal_energy=config.prey_energy,
        wander_speed=config.predator_speed * PREDATOR_WANDER_FACTOR,
    )

    entity.energy -= config.predator_energy_decay
    return _reproduce(entity, ctx, config.predator_birth_energy)


BEHAVIORS: dict[str, Behavior] = {
    EntityKind.PLANT: update_plant,
    EntityKind.HERBIVORE: update_herbivore,
    EntityKind.PREDATOR: update_predator,
}

# Kinds whose position is fixed for life.
STATIONARY_KINDS = frozenset({EntityKind.PLANT})
