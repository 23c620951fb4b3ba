"""
Shared fixtures: a private scheduler, seeded randomness and a fake clock.

Timers are driven without sleeping by moving job due times into the past and
running the scheduler once (see ``fire_jobs``).
"""

import datetime
import os
import random
import sys

import pytest
import schedule

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, milliseconds: float) -> None:
        self.now += milliseconds


def make_due(scheduler: schedule.Scheduler, tag_prefix: str = None) -> int:
    """Mark jobs (optionally only those with a tag starting with ``tag_prefix``) as due."""
    past = datetime.datetime.now() - datetime.timedelta(seconds=1)
    count = 0
    for job in list(scheduler.jobs):
        if tag_prefix is None or any(str(tag).startswith(tag_prefix) for tag in job.tags):
            job.next_run = past
            count += 1
    return count


@pytest.fixture
def scheduler():
    return schedule.Scheduler()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fire_jobs(scheduler):
    """Run matching jobs now, regardless of when they were due."""
    def _fire(tag_prefix: str = None) -> int:
        count = make_due(scheduler, tag_prefix)
        scheduler.run_pending()
        return count
    return _fire
