"""Configuration settings for ALife — loaded from environment variables."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["debug", "info", "warning", "error", "critical"]


class SimulationConfig(BaseSettings):
    """Tunable simulation parameters.

    The engine reads these fresh on every tick, so assigning a new value
    takes effect on the next tick. Assignments are not validated; callers
    may set non-physical values (negative speeds, zero vision) and get
    degenerate but non-crashing behaviour.

    Defaults can be overridden via environment variables prefixed with ALIFE_SIM_.
    Example: ALIFE_SIM_MAX_PLANTS=200 overrides max_plants.
    """

    # Plants
    plant_spawn_rate: float = 0.03  # probability of one new plant per tick
    max_plants: int = 120

    # Movement
    herbivore_speed: float = 1.8
    predator_speed: float = 2.2

    # Perception radius in world units
    herbivore_vision: float = 120.0
    predator_vision: float = 150.0

    # Reproduction thresholds
    herbivore_birth_energy: float = 80.0
    predator_birth_energy: float = 100.0

    # Metabolism (energy lost per tick)
    herbivore_energy_decay: float = 0.15
    predator_energy_decay: float = 0.2

    # Energy gained per meal
    plant_energy: float = 30.0
    prey_energy: float = 50.0

    model_config = SettingsConfigDict(
        env_prefix="ALIFE_SIM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class Settings(BaseSettings):
    """Runner settings with env-driven overrides.

    All values can be overridden via environment variables prefixed with ALIFE_.
    Example: ALIFE_SEED=42 makes a headless run reproducible.

    Unlike SimulationConfig these are validated on load: a zero tick rate
    or an unknown log level is rejected at startup.
    """

    # Cadence
    ticks_per_second: int = Field(30, gt=0)
    speed: int = 1  # ticks executed per update() call
    max_catch_up: int = Field(5, gt=0)  # max update() calls per loop iteration after a stall

    # Reproducibility; None seeds from system entropy
    seed: Optional[int] = None

    # Stop after this many ticks; 0 = run until interrupted
    max_ticks: int = 0

    # Logging
    stats_log_interval: int = 100
    log_level: LogLevel = "info"

    model_config = SettingsConfigDict(
        env_prefix="ALIFE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _lowercase_level(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value
