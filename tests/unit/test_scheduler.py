"""Unit tests for the pipeline scheduler."""

import asyncio
from types import SimpleNamespace

from looplens_app.config.defaults import ScheduleParams
from looplens_app.engine import RunStatus
from looplens_app.scheduler import PipelineScheduler, SchedulerState

FAST = ScheduleParams(interval_seconds=0.01, run_on_start=True, align_to_clock=False)


def run_until(stop_after: int, params: ScheduleParams = FAST, fail_on=()):
    """Drive a scheduler until the run function has been called stop_after times."""
    calls = []

    async def scenario():
        scheduler = None

        async def run():
            calls.append(len(calls) + 1)
            if len(calls) >= stop_after:
                scheduler.stop()
            if len(calls) in fail_on:
                raise RuntimeError("unexpected failure")
            return SimpleNamespace(status=RunStatus.COMMITTED)

        scheduler = PipelineScheduler(run, params)
        await asyncio.wait_for(scheduler.run_forever(), timeout=5)
        return scheduler

    scheduler = asyncio.run(scenario())
    return scheduler, calls


class TestPipelineScheduler:
    """Trigger cadence and bookkeeping"""

    def test_fires_on_start_then_on_interval(self):
        scheduler, calls = run_until(3)

        assert calls == [1, 2, 3]
        stats = scheduler.get_stats()
        assert stats["triggers_fired"] == 3
        assert stats["runs_completed"] == 3
        assert stats["last_status"] == "committed"
        assert stats["in_flight"] == 0

    def test_stopped_after_run_forever(self):
        scheduler, _ = run_until(1)
        assert scheduler.state == SchedulerState.STOPPED
        assert not scheduler.is_running

    def test_unexpected_errors_do_not_stop_triggers(self):
        scheduler, calls = run_until(3, fail_on=(1,))

        assert calls == [1, 2, 3]
        stats = scheduler.get_stats()
        assert stats["errors"] == 1
        assert stats["runs_completed"] == 2

    def test_without_run_on_start_first_trigger_waits(self):
        params = ScheduleParams(interval_seconds=0.05, run_on_start=False, align_to_clock=False)
        seen = []

        async def scenario():
            async def run():
                seen.append(asyncio.get_running_loop().time())
                scheduler.stop()

            scheduler = PipelineScheduler(run, params)
            started = asyncio.get_running_loop().time()
            await asyncio.wait_for(scheduler.run_forever(), timeout=5)
            return started

        started = asyncio.run(scenario())

        assert len(seen) == 1
        assert seen[0] - started >= 0.04

    def test_stop_before_next_slot(self):
        params = ScheduleParams(interval_seconds=3600, run_on_start=True, align_to_clock=False)

        async def scenario():
            async def run():
                return SimpleNamespace(status=RunStatus.NO_PROPOSALS)

            scheduler = PipelineScheduler(run, params)
            loop_task = asyncio.create_task(scheduler.run_forever())
            await asyncio.sleep(0.05)
            assert scheduler.is_running
            scheduler.stop()
            await asyncio.wait_for(loop_task, timeout=5)
            return scheduler

        scheduler = asyncio.run(scenario())

        assert scheduler.get_stats()["triggers_fired"] == 1
        assert scheduler.get_stats()["last_status"] == "no_proposals"
