"""Telemetry — population counts, the sampled history ring and world snapshots.

Population stats are recomputed every tick and sampled into a bounded
history for graphing. WorldSnapshot adds energy averages for log output.
"""

from __future__ import annotations

import time
from collections import deque
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Iterable

from alife.core.entity import Entity, EntityKind

if TYPE_CHECKING:
    from alife.core.engine import SimulationEngine

HISTORY_CAPACITY = 300
HISTORY_SAMPLE_INTERVAL = 2  # record on every 2nd tick


@dataclass(frozen=True)
class PopulationStats:
    """Immutable per-tick population counts."""

    plants: int = 0
    herbivores: int = 0
    predators: int = 0

    @property
    def total(self) -> int:
        return self.plants + self.herbivores + self.predators

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def count_population(entities: Iterable[Entity]) -> PopulationStats:
    """Count entities per kind. Entities of unknown kinds are not counted."""
    plants = herbivores = predators = 0
    for entity in entities:
        if entity.kind == EntityKind.PLANT:
            plants += 1
        elif entity.kind == EntityKind.HERBIVORE:
            herbivores += 1
        elif entity.kind == EntityKind.PREDATOR:
            predators += 1
    return PopulationStats(plants=plants, herbivores=herbivores, predators=predators)


class StatsHistory:
    """Sliding window of sampled population stats, oldest first.

    Only ticks whose count is a multiple of the sample interval are
    recorded; once full, each new sample evicts the oldest.
    """

    def __init__(
        self,
        capacity: int = HISTORY_CAPACITY,
        sample_interval: int = HISTORY_SAMPLE_INTERVAL,
    ) -> None:
        self.capacity = capacity
        self.sample_interval = sample_interval
        self._samples: deque[PopulationStats] = deque(maxlen=capacity)

    def record(self, tick: int, stats: PopulationStats) -> bool:
        """Store stats if this tick is a sampling tick.

        Args:
            tick: Tick count after the tick completed (1-based).
            stats: Population counts at the end of that tick.

        Returns:
            True if a sample was appended.
        """
        if tick % self.sample_interval != 0:
            return False
        self._samples.append(stats)
        return True

    def snapshot(self) -> tuple[PopulationStats, ...]:
        return tuple(self._samples)

    def clear(self) -> None:
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)


@dataclass
class WorldSnapshot:
    """Snapshot of world state at a specific tick.

    Attributes:
        tick: Simulation tick number when snapshot was taken
        plants: Number of plants
        herbivores: Number of herbivores
        predators: Number of predators
        avg_herbivore_energy: Mean herbivore energy, 0.0 if there are none
        avg_predator_energy: Mean predator energy, 0.0 if there are none
        timestamp: Unix timestamp when snapshot was collected
    """

    tick: int
    plants: int
    herbivores: int
    predators: int
    avg_herbivore_energy: float
    avg_predator_energy: float
    timestamp: float


def _mean_energy(entities: Iterable[Entity], kind: EntityKind) -> float:
    energies = [e.energy for e in entities if e.kind == kind]
    if not energies:
        return 0.0
    return sum(energies) / len(energies)


def collect_snapshot(engine: SimulationEngine) -> WorldSnapshot:
    """Collect a snapshot of the current world state.

    Args:
        engine: The SimulationEngine instance to read from

    Returns:
        WorldSnapshot with current population metrics

    Note:
        Reads only; counts come from the engine's last computed stats so
        they match what stats() reports.
    """
    entities = engine.entities()
    stats = engine.stats()

    return WorldSnapshot(
        tick=engine.tick_count,
        plants=stats.plants,
        herbivores=stats.herbivores,
        predators=stats.predators,
        avg_herbivore_energy=round(_mean_energy(entities, EntityKind.HERBIVORE), 2),
        avg_predator_energy=round(_mean_energy(entities, EntityKind.PREDATOR), 2),
        timestamp=time.time(),
    )
