"""Core simulation engine — world state, entities, physics, behaviours."""

from alife.core.engine import SimulationEngine
from alife.core.entity import Entity, EntityKind
from alife.core.telemetry import PopulationStats
from alife.core.world_physics import WORLD, WorldBounds

__all__ = ["SimulationEngine", "Entity", "EntityKind", "PopulationStats", "WORLD", "WorldBounds"]
