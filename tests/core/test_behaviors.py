"""Unit tests for the per-kind behaviour table."""

from __future__ import annotations

import random

import pytest

from alife.config import SimulationConfig
from alife.core.behaviors import (
    BEHAVIORS,
    TickContext,
    update_herbivore,
    update_plant,
    update_predator,
)
from alife.core.entity import EntityKind
from alife.core.entity_manager import EntityManager
from alife.core.world_physics import WorldPhysics


@pytest.fixture
def ctx() -> TickContext:
    """Create a behaviour context around an empty world."""
    rng = random.Random(11)
    return TickContext(
        config=SimulationConfig(),
        manager=EntityManager(rng=rng),
        physics=WorldPhysics(),
        rng=rng,
    )


def test_behavior_table_covers_all_kinds():
    """Test that every known kind has a behaviour."""
    assert BEHAVIORS[EntityKind.PLANT] is update_plant
    assert BEHAVIORS[EntityKind.HERBIVORE] is update_herbivore
    assert BEHAVIORS[EntityKind.PREDATOR] is update_predator
    assert BEHAVIORS.get("fungus") is None


def test_plant_grows_and_caps(ctx: TickContext):
    """Test plant energy growth of 0.01 per tick, capped at 1.0."""
    plant = ctx.manager.spawn(EntityKind.PLANT, energy=0.5)

    update_plant(plant, ctx)
    assert plant.energy == pytest.approx(0.51)

    plant.energy = 0.995
    update_plant(plant, ctx)
    assert plant.energy == 1.0


def test_herbivore_eats_plant_at_distance_zero(ctx: TickContext):
    """Test that a herbivore on top of a plant eats it."""
    plant = ctx.manager.spawn(EntityKind.PLANT, x=300.0, y=300.0)
    herbivore = ctx.manager.spawn(EntityKind.HERBIVORE, x=300.0, y=300.0, energy=40.0)

    update_herbivore(herbivore, ctx)

    assert plant.energy == -1.0
    assert herbivore.energy == pytest.approx(40.0 + 30.0 - 0.15)


def test_herbivore_seeks_plant_out_of_reach(ctx: TickContext):
    """Test that a visible but distant plant is approached, not eaten."""
    plant = ctx.manager.spawn(EntityKind.PLANT, x=350.0, y=300.0)
    herbivore = ctx.manager.spawn(EntityKind.HERBIVORE, x=300.0, y=300.0, energy=40.0)

    update_herbivore(herbivore, ctx)

    assert plant.energy == 1.0
    assert herbivore.vx == pytest.approx(1.8)
    assert herbivore.vy == pytest.approx(0.0)
    assert herbivore.energy == pytest.approx(39.85)


def test_herbivore_wanders_without_food(ctx: TickContext):
    """Test that with no plant in sight the herbivore wanders slowly."""
    herbivore = ctx.manager.spawn(EntityKind.HERBIVORE, x=300.0, y=300.0)

    for _ in range(50):
        update_herbivore(herbivore, ctx)
        speed = (herbivore.vx ** 2 + herbivore.vy ** 2) ** 0.5
        assert speed <= 1.8 * 0.6 + 1e-9


def test_herbivore_flee_overrides_feeding(ctx: TickContext):
    """Test that a nearby predator overrides the velocity toward food."""
    ctx.manager.spawn(EntityKind.PLANT, x=350.0, y=300.0)
    ctx.manager.spawn(EntityKind.PREDATOR, x=300.0, y=250.0)
    herbivore = ctx.manager.spawn(EntityKind.HERBIVORE, x=300.0, y=300.0)

    update_herbivore(herbivore, ctx)

    assert herbivore.vx == pytest.approx(0.0)
    assert herbivore.vy == pytest.approx(1.8 * 1.3)


def test_herbivore_ignores_predator_beyond_threat_vision(ctx: TickContext):
    """Test that threat vision is 80% of food vision."""
    ctx.manager.spawn(EntityKind.PREDATOR, x=300.0, y=200.0)  # 100 away, threat vision 96
    herbivore = ctx.manager.spawn(EntityKind.HERBIVORE, x=300.0, y=300.0)

    update_herbivore(herbivore, ctx)

    speed = (herbivore.vx ** 2 + herbivore.vy ** 2) ** 0.5
    assert speed <= 1.8 * 0.6 + 1e-9


def test_herbivore_still_eats_while_fleeing(ctx: TickContext):
    """Test that a meal taken this tick counts even when fleeing."""
    plant = ctx.manager.spawn(EntityKind.PLANT, x=300.0, y=300.0)
    ctx.manager.spawn(EntityKind.PREDATOR, x=330.0, y=300.0)
    herbivore = ctx.manager.spawn(EntityKind.HERBIVORE, x=300.0, y=300.0, energy=10.0)

    update_herbivore(herbivore, ctx)

    assert plant.energy == -1.0
    assert herbivore.energy == pytest.approx(39.85)
    assert herbivore.vx == pytest.approx(-1.8 * 1.3)


def test_herbivore_reproduces_above_threshold(ctx: TickContext):
    """Test birth energy split: parent halves, child gets half of that."""
    herbivore = ctx.manager.spawn(EntityKind.HERBIVORE, x=300.0, y=300.0, energy=100.0)
    herbivore.hue = 140.0

    child = update_herbivore(herbivore, ctx)

    assert child is not None
    assert herbivore.energy == pytest.approx((100.0 - 0.15) * 0.5)
    assert child.energy == pytest.approx((100.0 - 0.15) * 0.25)
    assert child.kind == EntityKind.HERBIVORE
    assert child.id == herbivore.id + 1
    assert abs(child.x - 300.0) <= 15.0
    assert abs(child.y - 300.0) <= 15.0
    assert 135.0 <= child.hue <= 145.0
    # Offspring are not inserted by the behaviour itself
    assert child not in ctx.manager.all()


def test_herbivore_at_threshold_does_not_reproduce(ctx: TickContext):
    """Test that energy exactly at the threshold is not enough."""
    ctx.config.herbivore_energy_decay = 0.0
    herbivore = ctx.manager.spawn(EntityKind.HERBIVORE, x=300.0, y=300.0, energy=80.0)

    child = update_herbivore(herbivore, ctx)

    assert child is None
    assert herbivore.energy == 80.0


def test_predator_catches_prey_within_twelve_units(ctx: TickContext):
    """Test that predators eat herbivores within radius 12."""
    prey = ctx.manager.spawn(EntityKind.HERBIVORE, x=311.0, y=300.0)
    predator = ctx.manager.spawn(EntityKind.PREDATOR, x=300.0, y=300.0, energy=40.0)

    update_predator(predator, ctx)

    assert prey.energy == -1.0
    assert predator.energy == pytest.approx(40.0 + 50.0 - 0.2)
    assert predator.vx == pytest.approx(2.2)


def test_predator_misses_prey_at_twelve_units(ctx: TickContext):
    """Test that the catch radius is strict."""
    prey = ctx.manager.spawn(EntityKind.HERBIVORE, x=312.0, y=300.0)
    predator = ctx.manager.spawn(EntityKind.PREDATOR, x=300.0, y=300.0, energy=40.0)

    update_predator(predator, ctx)

    assert prey.energy == 60.0
    assert predator.energy == pytest.approx(39.8)


def test_predator_ignores_plants(ctx: TickContext):
    """Test that predators do not eat plants."""
    plant = ctx.manager.spawn(EntityKind.PLANT, x=300.0, y=300.0)
    predator = ctx.manager.spawn(EntityKind.PREDATOR, x=300.0, y=300.0)

    update_predator(predator, ctx)

    assert plant.energy == 1.0


def test_predator_wanders_at_half_speed(ctx: TickContext):
    """Test that hungry predators with no prey wander at half speed."""
    predator = ctx.manager.spawn(EntityKind.PREDATOR, x=300.0, y=300.0)

    for _ in range(50):
        update_predator(predator, ctx)
        speed = (predator.vx ** 2 + predator.vy ** 2) ** 0.5
        assert speed <= 2.2 * 0.5 + 1e-9


def test_predator_reproduces(ctx: TickContext):
    """Test predator birth threshold and energy split."""
    predator = ctx.manager.spawn(EntityKind.PREDATOR, x=300.0, y=300.0, energy=120.0)

    child = update_predator(predator, ctx)

    assert child is not None
    assert child.kind == EntityKind.PREDATOR
    assert predator.energy == pytest.approx(119.8 * 0.5)
    assert child.energy == pytest.approx(119.8 * 0.25)


def test_behaviour_reads_config_changes(ctx: TickContext):
    """Test that config assignments take effect on the next call."""
    herbivore = ctx.manager.spawn(EntityKind.HERBIVORE, x=300.0, y=300.0, energy=50.0)
    ctx.config.herbivore_energy_decay = 5.0

    update_herbivore(herbivore, ctx)

    assert herbivore.energy == pytest.approx(45.0)
