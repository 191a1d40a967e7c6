"""Reminder tasks and parsing of the times users write for them."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta

from paimeng.note.cron import format_duration, parse_standard

_INT = re.compile(r"[+-]?[0-9]+")
_INT64_MAX = 2**63 - 1
_INT64_MIN = -(2**63)

_CLOCK = r"([0-9]{1,2})[点:]([0-9]{0,2})分?"
_WEEK = r"(?:周|星期|礼拜)([1-7一二三四五六日天])"
_PATTERNS = [
    re.compile(r"(?:今天)?" + _CLOCK),
    re.compile(r"([1-9][0-9]{0,5})分钟后"),
    re.compile(r"每([1-9][0-9]{0,5})分钟"),
    re.compile(r"每([0-9]{0,4})(?:小时|钟头|个小时|个钟头)"),
    re.compile(r"每天" + _CLOCK),
    re.compile(r"(明天|后天|大后天)" + _CLOCK),
    re.compile(r"([1-9][0-9]{0,2})天后" + _CLOCK),
    re.compile(r"每个?" + _WEEK + _CLOCK),
    re.compile(_WEEK + _CLOCK),
    re.compile(r"每个?月([1-9][0-9]?)[号|日]" + _CLOCK),
    re.compile(r"每[个|年]([1-9][0-9]?)月([1-9][0-9]?)[号|日]" + _CLOCK),
    re.compile(r"([1-9][0-9]?)月([1-9][0-9]?)[号|日]" + _CLOCK),
]

_DAYS_AFTER = {"明天": 1, "后天": 2, "大后天": 3}
_WEEK_DAYS = {"一": 1, "二": 2, "三": 3, "四": 4, "五": 5, "六": 6, "七": 0, "日": 0, "天": 0}


class AlreadyPassedError(ValueError):
    """The requested time lies in the past."""


class NoMatchError(ValueError):
    """The text is not a recognised time expression."""


@dataclass
class RemindTask:
    """A reminder set by a user, for themselves or for a group."""

    id: int = 0
    user_id: int = 0
    group_id: int = 0
    content: str = ""
    is_once: bool = False
    spec: str = ""
    run_at: datetime | None = None
    cron_id: int = 0
    created_at: datetime | None = None

    def parse_spec_time(self, spec: str, is_once: bool, now: datetime | None = None) -> None:
        """Fill the task from a cron expression."""
        now = now or datetime.now()
        self.is_once = is_once
        self.spec = spec
        schedule = parse_standard(spec)
        if is_once:
            self.run_at = schedule.next(now)
            if self.run_at is None or self.run_at < now:
                raise AlreadyPassedError("already passed")

    def parse_cn_time(self, text: str, now: datetime | None = None) -> None:
        """Fill the task from a Chinese time expression such as "每天23点"."""
        now = now or datetime.now()
        for index, pattern in enumerate(_PATTERNS):
            match = pattern.fullmatch(text)
            if match:
                break
        else:
            raise NoMatchError("no regex matched")
        g = [match.group(0), *match.groups()]
        n = must_parse_int
        if index == 0:
            self.is_once = True
            self.run_at = _date(now.year, now.month, now.day, n(g[1]), n(g[2]))
        elif index == 1:
            self.is_once = True
            self.run_at = now + timedelta(minutes=n(g[1]))
        elif index == 2:
            self.is_once = False
            self.spec = "@every " + format_duration(n(g[1]) * 60)
        elif index == 3:
            self.is_once = False
            hours = n(g[1])
            if hours <= 0:
                hours = 1
            self.spec = "@every " + format_duration(hours * 3600)
        elif index == 4:
            self.is_once = False
            self.spec = f"{n(g[2])} {n(g[1])} * * *"
        elif index in (5, 6):
            self.is_once = True
            days = _DAYS_AFTER[g[1]] if index == 5 else n(g[1])
            after = now + timedelta(days=days)
            self.run_at = _date(after.year, after.month, after.day, n(g[2]), n(g[3]))
        elif index == 7:
            self.is_once = False
            self.spec = f"{n(g[3])} {n(g[2])} * * {parse_week_day(g[1])}"
        elif index == 8:
            self.is_once = True
            today = (now.weekday() + 1) % 7
            after = now + timedelta(days=(parse_week_day(g[1]) - today + 7) % 7)
            self.run_at = _date(after.year, after.month, after.day, n(g[2]), n(g[3]))
        elif index == 9:
            self.is_once = False
            self.spec = f"{n(g[3])} {n(g[2])} {n(g[1])} * *"
        elif index == 10:
            self.is_once = False
            self.spec = f"{n(g[4])} {n(g[3])} {n(g[2])} {n(g[1])} *"
        else:
            self.is_once = True
            run_at = _date(now.year, n(g[1]), n(g[2]), n(g[3]), n(g[4]))
            if run_at < now:
                run_at = _date(run_at.year + 1, run_at.month, run_at.day, run_at.hour, run_at.minute)
            self.run_at = run_at
        if self.is_once and self.run_at < now:
            raise AlreadyPassedError("already passed")


def _date(year: int, month: int, day: int, hour: int, minute: int) -> datetime:
    """Build a local time, carrying out-of-range fields over to larger units."""
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return datetime(year, month, 1) + timedelta(days=day - 1, hours=hour, minutes=minute)


def must_parse_int(s: str) -> int:
    """Parse a decimal integer, giving 0 for an empty or malformed string."""
    if not _INT.fullmatch(s):
        return 0
    return max(_INT64_MIN, min(_INT64_MAX, int(s)))


def parse_week_day(s: str) -> int:
    """Day of the week, Sunday being 0, from a digit or a Chinese numeral."""
    if s in _WEEK_DAYS:
        return _WEEK_DAYS[s]
    i = must_parse_int(s)
    if i < 0 or i >= 7:
        return 0
    return i