from datetime import datetime, timedelta

import pytest

from paimeng.note.cron import CronSchedule
from paimeng.note.parse import AlreadyPassedError, RemindTask
from paimeng.note.schedule import ConstantEverySchedule, StickTimeSchedule, gen_schedule

NOW = datetime(2022, 3, 15, 10, 0, 0)


def test_stick_time_before_and_after():
    at = NOW + timedelta(hours=1)
    schedule = StickTimeSchedule(at)
    assert schedule.next(NOW) == at
    assert schedule.next(at) == at
    assert schedule.next(at + timedelta(seconds=1)) is None


def test_constant_every_from_start():
    schedule = ConstantEverySchedule(NOW, timedelta(minutes=5))
    assert schedule.next(NOW) == NOW + timedelta(minutes=5)


def test_constant_every_after_start_uses_t():
    schedule = ConstantEverySchedule(NOW, timedelta(minutes=5))
    later = NOW + timedelta(hours=2, microseconds=1234)
    assert schedule.next(later) == NOW + timedelta(hours=2, minutes=5)


def test_constant_every_without_start():
    schedule = ConstantEverySchedule(None, timedelta(seconds=60))
    assert schedule.next(NOW) == NOW + timedelta(seconds=60)


def test_gen_schedule_once_future():
    at = NOW + timedelta(days=1)
    schedule = gen_schedule(RemindTask(is_once=True, run_at=at), NOW)
    assert schedule == StickTimeSchedule(at)


def test_gen_schedule_once_passed():
    with pytest.raises(AlreadyPassedError):
        gen_schedule(RemindTask(is_once=True, run_at=NOW - timedelta(minutes=1)), NOW)


def test_gen_schedule_every_has_minimum_minute():
    schedule = gen_schedule(RemindTask(spec="@every 30s"), NOW)
    assert schedule.delay == timedelta(minutes=1)


def test_gen_schedule_every_truncates_fraction():
    created = NOW.replace(microsecond=500)
    schedule = gen_schedule(RemindTask(spec="@every 90.5s", created_at=created), NOW)
    assert schedule.delay == timedelta(seconds=90)
    assert schedule.start_at == NOW


def test_gen_schedule_cron():
    schedule = gen_schedule(RemindTask(spec="30 18 * * *"), NOW)
    assert isinstance(schedule, CronSchedule)
    nxt = schedule.next(NOW)
    assert (nxt.hour, nxt.minute) == (18, 30)


def test_gen_schedule_bad_spec():
    with pytest.raises(ValueError):
        gen_schedule(RemindTask(spec="not a spec"), NOW)