"""Schedules for reminder tasks."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from paimeng.note.cron import parse_duration, parse_standard
from paimeng.note.parse import AlreadyPassedError, RemindTask

_EVERY = "@every"
_MIN_PERIOD = 60


@dataclass(frozen=True)
class ConstantEverySchedule:
    """Fires every ``delay``, the first time ``delay`` after ``start_at``."""

    start_at: datetime | None
    delay: timedelta

    def next(self, t: datetime) -> datetime:
        if self.start_at is not None:
            from_start = self.start_at.replace(microsecond=0) + self.delay
            if from_start > t:
                return from_start
        return t.replace(microsecond=0) + self.delay


@dataclass(frozen=True)
class StickTimeSchedule:
    """Fires once, at ``at``."""

    at: datetime

    def next(self, t: datetime) -> datetime | None:
        if t > self.at:
            return None
        return self.at


def gen_schedule(task: RemindTask, now: datetime | None = None):
    """Build the schedule for a task.

    Raises AlreadyPassedError for a one-off task whose time is past, and
    ValueError for a spec that cannot be parsed.
    """
    now = now or datetime.now()
    if task.is_once:
        if task.run_at is None or task.run_at < now:
            raise AlreadyPassedError("already passed")
        return StickTimeSchedule(task.run_at)
    if task.spec.startswith(_EVERY):
        seconds = parse_duration(task.spec[len(_EVERY):].strip())
        if seconds < _MIN_PERIOD:
            seconds = _MIN_PERIOD
        start_at = task.created_at.replace(microsecond=0) if task.created_at else None
        return ConstantEverySchedule(start_at, timedelta(seconds=int(seconds)))
    return parse_standard(task.spec)