"""ALife entry point — headless simulation runner.

Drives the SimulationEngine at a fixed logical cadence (30 ticks/second by
default) and reports population telemetry as structured log lines. Nothing
is drawn; this stands in for the browser animation loop.

Can be run directly via `python -m alife.main` or the `alife` console script.
"""

from __future__ import annotations

import asyncio
import random
import signal
import time
from typing import Callable, Optional

import structlog

from alife.config import Settings, SimulationConfig
from alife.core.engine import SimulationEngine
from alife.core.telemetry import collect_snapshot

logger = structlog.get_logger()


def configure_logging(level: str = "info") -> None:
    """Configure structured console logging at the given minimum level."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level=level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


class TickAccumulator:
    """Turns wall-clock time into a whole number of due logical ticks.

    Elapsed time accumulates between calls; every full tick interval in
    the accumulator is one due update. After a stall the backlog is capped
    at ``max_catch_up`` so a slow host does not spiral.
    """

    def __init__(self, ticks_per_second: int = 30, max_catch_up: int = 5) -> None:
        self.interval = 1.0 / ticks_per_second
        self.max_catch_up = max_catch_up
        self._accumulated = 0.0
        self._last: Optional[float] = None

    def advance(self, now: float) -> int:
        """Return how many updates are due at time ``now`` (seconds).

        The first call only starts the clock and returns 0.
        """
        if self._last is None:
            self._last = now
            return 0

        self._accumulated += max(0.0, now - self._last)
        self._last = now

        due = int(self._accumulated // self.interval)
        self._accumulated -= due * self.interval
        if due > self.max_catch_up:
            logger.debug("tick_backlog_dropped", due=due, kept=self.max_catch_up)
            due = self.max_catch_up
            self._accumulated = 0.0
        return due

    def time_until_next(self) -> float:
        return max(0.0, self.interval - self._accumulated)


class SimulationRunner:
    """Manages simulation lifecycle and graceful shutdown."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        config: Optional[SimulationConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the runner.

        Args:
            settings: Runner settings; loaded from the environment if None.
            config: Simulation parameters; loaded from the environment if None.
            clock: Monotonic time source in seconds.
        """
        self.settings = settings if settings is not None else Settings()
        self.engine = SimulationEngine(
            config=config,
            rng=random.Random(self.settings.seed),
        )
        self.engine.set_speed(self.settings.speed)
        self.accumulator = TickAccumulator(
            ticks_per_second=self.settings.ticks_per_second,
            max_catch_up=self.settings.max_catch_up,
        )
        self.clock = clock
        self.running = False
        self._last_logged_tick = 0

    async def run(self) -> None:
        """Main loop.

        Runs until stopped or ``max_ticks`` is reached, each iteration:
        1. Work out how many updates are due from elapsed time
        2. Run them, warning when one overruns its budget
        3. Log a stats snapshot every ``stats_log_interval`` ticks
        4. Sleep until the next tick is due
        """
        self.running = True
        logger.info(
            "runner_starting",
            ticks_per_second=self.settings.ticks_per_second,
            speed=self.engine.get_speed(),
            seed=self.settings.seed,
        )
        self.engine.init()

        while self.running:
            due = self.accumulator.advance(self.clock())

            for _ in range(due):
                self._step()
                if self._reached_limit():
                    self.stop()
                    break

            await asyncio.sleep(self.accumulator.time_until_next())

        logger.info("runner_stopped", tick=self.engine.tick_count)

    def _step(self) -> None:
        start = self.clock()
        try:
            self.engine.update()
        except Exception as exc:
            # Never let the simulation loop crash
            logger.error(
                "tick_error",
                tick=self.engine.tick_count,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return

        duration = self.clock() - start
        if duration > self.accumulator.interval:
            logger.warning(
                "tick_overrun",
                tick=self.engine.tick_count,
                duration_ms=round(duration * 1000, 2),
                budget_ms=round(self.accumulator.interval * 1000, 2),
            )

        interval = self.settings.stats_log_interval
        if interval > 0 and self.engine.tick_count - self._last_logged_tick >= interval:
            self._log_statistics()

    def _reached_limit(self) -> bool:
        limit = self.settings.max_ticks
        return limit > 0 and self.engine.tick_count >= limit

    def _log_statistics(self) -> None:
        snapshot = collect_snapshot(self.engine)
        self._last_logged_tick = snapshot.tick
        logger.info(
            "simulation_stats",
            tick=snapshot.tick,
            plants=snapshot.plants,
            herbivores=snapshot.herbivores,
            predators=snapshot.predators,
            avg_herbivore_energy=snapshot.avg_herbivore_energy,
            avg_predator_energy=snapshot.avg_predator_energy,
            history=len(self.engine.history),
        )

    def stop(self) -> None:
        """Stop the loop gracefully after the current iteration."""
        logger.info("runner_stopping", tick=self.engine.tick_count)
        self.running = False


async def main(settings: Optional[Settings] = None) -> None:
    """Main entry point."""
    runner = SimulationRunner(settings=settings)

    def handle_shutdown(sig: int) -> None:
        logger.info("shutdown_signal_received", signal=sig)
        runner.stop()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, lambda s=sig: handle_shutdown(s))
        except NotImplementedError:
            # Windows event loops have no signal handler support
            logger.debug("signal_handler_unavailable", signal=sig)

    try:
        await runner.run()
    except Exception as exc:
        logger.error("fatal_error", error=str(exc), error_type=type(exc).__name__)
        raise


def cli() -> None:
    """Console script: configure logging from settings and run until stopped."""
    settings = Settings()
    configure_logging(settings.log_level)
    try:
        asyncio.run(main(settings))
    except KeyboardInterrupt:
        logger.info("keyboard_interrupt_received")


if __name__ == "__main__":
    cli()
