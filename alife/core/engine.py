"""Core simulation engine — world state and the per-tick update rule.

This module provides the SimulationEngine class, the single owner and
mutator of all simulation state. A presentation layer (or the headless
runner in alife.main) drives it by calling update() at a fixed cadence
and reads entities(), stats() and stats_history() between calls.
"""

from __future__ import annotations

import random
from typing import Optional, Union

import structlog

from alife.config import SimulationConfig
from alife.core.behaviors import BEHAVIORS, STATIONARY_KINDS, TickContext
from alife.core.entity import Entity, EntityKind, kind_name
from alife.core.entity_manager import EntityManager
from alife.core.telemetry import PopulationStats, StatsHistory, count_population
from alife.core.world_physics import WorldBounds, WorldPhysics

logger = structlog.get_logger()

# Seed population laid down by init()
INITIAL_PLANTS = 60
INITIAL_HERBIVORES = 25
INITIAL_PREDATORS = 8

# Population floor: restock herbivores when they die out, and predators
# once there are enough herbivores to feed them.
REPLENISH_HERBIVORES = 10
REPLENISH_PREDATORS = 3
PREDATOR_REPLENISH_MIN_HERBIVORES = 15


class SimulationEngine:
    """Predator/prey/plant world advanced in whole ticks.

    Coordinates:
    - Plant spawning
    - Per-entity behaviour (dispatched by kind) and movement
    - Births, deaths and the population floor
    - Statistics and the sampled history

    All randomness flows through the injected ``rng`` so a seeded
    ``random.Random`` reproduces a run exactly.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        rng: Optional[random.Random] = None,
        physics: Optional[WorldPhysics] = None,
    ) -> None:
        """Initialize the engine with an empty world.

        Args:
            config: Tunable parameters; mutated in place by callers.
            rng: Random source for every stochastic decision.
            physics: Movement rules; defaults to the 1200x800 toroidal world.

        Note:
            Call init() to lay down the seed population.
        """
        self.config = config if config is not None else SimulationConfig()
        self.rng = rng if rng is not None else random.Random()
        self.physics = physics if physics is not None else WorldPhysics()
        self.entity_manager = EntityManager(rng=self.rng, bounds=self.physics.bounds)
        self.history = StatsHistory()

        self._speed = 1
        self._tick_count = 0
        self._stats = PopulationStats()

    @property
    def world(self) -> WorldBounds:
        return self.physics.bounds

    @property
    def tick_count(self) -> int:
        """Number of ticks executed since the last init()."""
        return self._tick_count

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def init(self) -> None:
        """Reset the world to a fresh seed population.

        Discards every entity and resets the id counter, tick counter,
        stats and history. Positions and hues are random; the population
        structure is always the same.
        """
        self.entity_manager.clear()
        self.history.clear()
        self._tick_count = 0

        for _ in range(INITIAL_PLANTS):
            self.entity_manager.spawn(EntityKind.PLANT)
        for _ in range(INITIAL_HERBIVORES):
            self.entity_manager.spawn(EntityKind.HERBIVORE)
        for _ in range(INITIAL_PREDATORS):
            self.entity_manager.spawn(EntityKind.PREDATOR)

        self._stats = count_population(self.entity_manager.all())
        logger.info(
            "simulation_initialized",
            plants=self._stats.plants,
            herbivores=self._stats.herbivores,
            predators=self._stats.predators,
        )

    def spawn(
        self,
        kind: Union[EntityKind, str],
        x: Optional[float] = None,
        y: Optional[float] = None,
    ) -> Entity:
        """Add one entity at (x, y), or at a random position if omitted.

        Args:
            kind: "plant", "herbivore" or "predator". Any other value is
                accepted silently and yields an inert entity.
            x: World x coordinate; wrapped into bounds.
            y: World y coordinate; wrapped into bounds.

        Returns:
            The new entity. stats() reflects it after the next tick.
        """
        return self.entity_manager.spawn(kind, x=x, y=y)

    def update(self) -> None:
        """Advance the simulation by ``speed`` whole ticks (0 = paused)."""
        for _ in range(self._speed):
            self.tick()

    def set_speed(self, speed: int) -> None:
        """Set the number of ticks run per update(). No bounds are enforced."""
        if speed != self._speed:
            logger.info("speed_changed", previous=self._speed, speed=speed)
        self._speed = speed

    def get_speed(self) -> int:
        return self._speed

    speed = property(get_speed, set_speed)

    def entities(self) -> tuple[Entity, ...]:
        """Current population in update order.

        Returns:
            An immutable tuple. The Entity objects themselves are the
            engine's live instances, not copies; read them, do not mutate them.
        """
        return self.entity_manager.snapshot()

    def stats(self) -> PopulationStats:
        """Population counts as of the end of the last tick (or init())."""
        return self._stats

    def stats_history(self) -> tuple[PopulationStats, ...]:
        """Sampled stats, oldest first, at most 300 entries."""
        return self.history.snapshot()

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def tick(self) -> None:
        """Execute one full simulation step.

        Steps:
        1. Maybe spawn a plant
        2. Update every entity in population order
        3. Append offspring
        4. Sweep entities with energy <= 0
        5. Enforce the population floor
        6. Recompute stats and sample history

        Note:
            The update pass is sequential and in place: entities later in
            the population see earlier ones at their already-moved
            positions, and entities eaten earlier in the pass still act
            until the sweep.
        """
        config = self.config
        manager = self.entity_manager

        if self.rng.random() < config.plant_spawn_rate:
            if manager.count(EntityKind.PLANT) < config.max_plants:
                manager.spawn(EntityKind.PLANT)

        ctx = TickContext(config=config, manager=manager, physics=self.physics, rng=self.rng)
        offspring: list[Entity] = []

        for entity in manager.all():
            entity.age += 1

            behavior = BEHAVIORS.get(entity.kind)
            if behavior is not None:
                child = behavior(entity, ctx)
                if child is not None:
                    offspring.append(child)

            if entity.kind in STATIONARY_KINDS:
                continue
            self.physics.integrate(entity)

        manager.extend(offspring)
        manager.sweep_dead()
        self._replenish()

        self._stats = count_population(manager.all())
        self._tick_count += 1
        self.history.record(self._tick_count, self._stats)

    def _replenish(self) -> None:
        """Restock herbivores or predators when a population has collapsed.

        Both checks use the counts from before either restock.
        """
        herbivores = self.entity_manager.count(EntityKind.HERBIVORE)
        predators = self.entity_manager.count(EntityKind.PREDATOR)

        if herbivores == 0:
            self._spawn_batch(EntityKind.HERBIVORE, REPLENISH_HERBIVORES)

        if predators == 0 and herbivores > PREDATOR_REPLENISH_MIN_HERBIVORES:
            self._spawn_batch(EntityKind.PREDATOR, REPLENISH_PREDATORS)

    def _spawn_batch(self, kind: EntityKind, count: int) -> None:
        for _ in range(count):
            self.entity_manager.spawn(kind)
        logger.info(
            "population_replenished",
            tick=self._tick_count + 1,
            kind=kind_name(kind),
            count=count,
        )
