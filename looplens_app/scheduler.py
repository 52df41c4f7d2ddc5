"""
Pipeline scheduler - cadence-controlled pipeline triggers.

Fires the pipeline once at startup and then on a fixed interval aligned
to local midnight (every 6 hours by default: 00:00, 06:00, 12:00, 18:00).
Triggers are fire-and-forget; the engine's run lock rejects a trigger that
arrives while the previous run is still waiting on the ledger.
"""

import asyncio
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

import structlog

from .config.defaults import ScheduleParams
from .utils.time import seconds_until_next_slot

logger = structlog.get_logger(__name__)


class SchedulerState(str, Enum):
    """Scheduler operational states."""
    STOPPED = "STOPPED"
    RUNNING = "RUNNING"


class PipelineScheduler:
    """
    Trigger source for the market creation pipeline.

    Usage:
        scheduler = PipelineScheduler(engine.run_once, settings.schedule)
        await scheduler.run_forever()   # until scheduler.stop()
    """

    def __init__(
        self,
        run: Callable[[], Awaitable[Any]],
        params: Optional[ScheduleParams] = None
    ) -> None:
        self.run = run
        self.params = params or ScheduleParams()
        self.logger = logger

        self._state = SchedulerState.STOPPED
        self._stop_event = asyncio.Event()
        self._pending: set[asyncio.Task] = set()

        # Stats
        self._triggers_fired = 0
        self._runs_completed = 0
        self._errors = 0
        self._last_status: Optional[str] = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == SchedulerState.RUNNING

    async def run_forever(self) -> None:
        """Fire triggers until stop() is called, then wait for in-flight runs."""
        if self.is_running:
            self.logger.warning("Scheduler already running")
            return

        self._stop_event.clear()
        self._state = SchedulerState.RUNNING
        self.logger.info(
            "Scheduler started",
            interval_seconds=self.params.interval_seconds,
            run_on_start=self.params.run_on_start,
            align_to_clock=self.params.align_to_clock,
        )

        try:
            if self.params.run_on_start:
                self._fire()

            while not self._stop_event.is_set():
                delay = seconds_until_next_slot(
                    self.params.interval_seconds,
                    align_to_clock=self.params.align_to_clock,
                )
                self.logger.debug("Next pipeline trigger scheduled", delay_seconds=round(delay, 1))

                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
                except asyncio.TimeoutError:
                    self._fire()

            await self.drain()
        finally:
            self._state = SchedulerState.STOPPED
            self.logger.info("Scheduler stopped")

    def stop(self) -> None:
        """Request the trigger loop to exit after the current wait."""
        self.logger.info("Stopping scheduler...")
        self._stop_event.set()

    async def drain(self) -> None:
        """Wait for every in-flight run to finish."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def _fire(self) -> None:
        self._triggers_fired += 1
        task = asyncio.create_task(self._execute(self._triggers_fired))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _execute(self, trigger: int) -> None:
        try:
            result = await self.run()
        except Exception as e:
            self._errors += 1
            self.logger.error(
                "Unexpected error in pipeline run",
                trigger=trigger,
                error_type=type(e).__name__,
                error=str(e),
                exc_info=True,
            )
            return

        self._runs_completed += 1
        status = getattr(result, "status", None)
        self._last_status = getattr(status, "value", status)

    def get_stats(self) -> dict[str, Any]:
        """Get scheduler statistics."""
        return {
            "state": self._state.value,
            "triggers_fired": self._triggers_fired,
            "runs_completed": self._runs_completed,
            "errors": self._errors,
            "in_flight": len(self._pending),
            "last_status": self._last_status,
            "interval_seconds": self.params.interval_seconds,
        }
