"""
Timer bookkeeping on top of a shared ``schedule.Scheduler``.

The game runs on a single thread: one scheduler is drained by the engine's run
loop and every timer in the game is a job on it. Components that create timers
own a ``TimerRegistry`` so they can cancel everything they registered in one
call without touching anyone else's jobs.
"""

import itertools
import logging
from typing import Callable, Dict

import schedule

logger = logging.getLogger(__name__)

_registry_ids = itertools.count(1)


class TimerRegistry:
    """
    Tracks the one-shot (timeout) and recurring (interval) jobs a single owner
    created on a scheduler.

    Attributes:
        scheduler: the shared scheduler the jobs live on
        tag: unique tag attached to every job of this registry
    """

    def __init__(self, scheduler: schedule.Scheduler, name: str = "timers"):
        self.scheduler = scheduler
        self.tag = f"{name}-{next(_registry_ids)}"
        self._timeouts: Dict[int, schedule.Job] = {}
        self._intervals: Dict[int, schedule.Job] = {}

    def set_timeout(self, callback: Callable[[], None], delay_ms: float) -> schedule.Job:
        """
        Run ``callback`` once after ``delay_ms`` milliseconds.

        Returns:
            The scheduled job (usable with ``cancel``).
        """
        job = None

        def _fire():
            # A job cancelled earlier in the same run_pending pass must not fire
            if self._timeouts.pop(id(job), None) is None:
                return schedule.CancelJob
            callback()
            return schedule.CancelJob

        job = self.scheduler.every(_to_seconds(delay_ms)).seconds.do(_fire).tag(self.tag)
        self._timeouts[id(job)] = job
        return job

    def set_interval(self, callback: Callable[[], None], interval_ms: float) -> schedule.Job:
        """Run ``callback`` every ``interval_ms`` milliseconds until cancelled."""
        job = None

        def _fire():
            if id(job) not in self._intervals:
                return schedule.CancelJob
            callback()

        job = self.scheduler.every(_to_seconds(interval_ms)).seconds.do(_fire).tag(self.tag)
        self._intervals[id(job)] = job
        return job

    def cancel(self, job: schedule.Job) -> None:
        """Cancel a single job created by this registry. Unknown jobs are ignored."""
        tracked = self._timeouts.pop(id(job), None) or self._intervals.pop(id(job), None)
        if tracked is not None:
            self.scheduler.cancel_job(tracked)

    def clear_all(self) -> None:
        """Cancel every job this registry created."""
        counts = self.active_count()
        if counts["timeouts"] or counts["intervals"]:
            logger.debug(
                "Cancelling %s timeouts and %s intervals (%s)",
                counts["timeouts"], counts["intervals"], self.tag
            )
        self._timeouts.clear()
        self._intervals.clear()
        self.scheduler.clear(self.tag)

    def active_count(self) -> Dict[str, int]:
        return {"timeouts": len(self._timeouts), "intervals": len(self._intervals)}


def _to_seconds(milliseconds: float) -> float:
    return max(0.0, milliseconds) / 1000.0
