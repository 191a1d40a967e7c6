"""Standard five-field cron expressions and duration strings."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from decimal import Decimal
from zoneinfo import ZoneInfo

_MONTHS = {name: i for i, name in enumerate(
    ["jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"], start=1
)}
_DOWS = {name: i for i, name in enumerate(["sun", "mon", "tue", "wed", "thu", "fri", "sat"])}

_FIELDS = (
    (0, 59, None),
    (0, 23, None),
    (1, 31, None),
    (1, 12, _MONTHS),
    (0, 6, _DOWS),
)

_DESCRIPTORS = {
    "@yearly": "0 0 1 1 *",
    "@annually": "0 0 1 1 *",
    "@monthly": "0 0 1 * *",
    "@weekly": "0 0 * * 0",
    "@daily": "0 0 * * *",
    "@midnight": "0 0 * * *",
    "@hourly": "0 * * * *",
}

_UNIT_NS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60_000_000_000,
    "h": 3_600_000_000_000,
}
_DURATION = re.compile(r"[-+]?(?:(?:\d+\.?\d*|\.\d+)(?:ns|us|µs|μs|ms|s|m|h))+")
_DURATION_PART = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_INT = re.compile(r"[+-]?\d+")


def parse_duration(text: str) -> float:
    """Parse a duration such as "1h30m" or "1.5s" into seconds."""
    if text in ("0", "+0", "-0"):
        return 0.0
    if not _DURATION.fullmatch(text):
        raise ValueError(f"invalid duration {text!r}")
    total = sum(
        Decimal(number) * _UNIT_NS[unit] for number, unit in _DURATION_PART.findall(text)
    )
    nanoseconds = int(total)
    if text.startswith("-"):
        nanoseconds = -nanoseconds
    return nanoseconds / 1e9


def _fraction(value: int, precision: int) -> str:
    whole, frac = divmod(value, 10**precision)
    digits = f"{frac:0{precision}d}".rstrip("0")
    return f"{whole}.{digits}" if digits else str(whole)


def format_duration(seconds: float) -> str:
    """Format seconds the way durations are conventionally shown, e.g. "1h0m0s"."""
    nanoseconds = round(seconds * 1_000_000_000)
    if nanoseconds == 0:
        return "0s"
    sign = "-" if nanoseconds < 0 else ""
    u = abs(nanoseconds)
    if u < 1_000:
        return f"{sign}{u}ns"
    if u < 1_000_000:
        return f"{sign}{_fraction(u, 3)}µs"
    if u < 1_000_000_000:
        return f"{sign}{_fraction(u, 6)}ms"
    whole_seconds, frac = divmod(u, 1_000_000_000)
    text = _fraction((whole_seconds % 60) * 1_000_000_000 + frac, 9) + "s"
    minutes = whole_seconds // 60
    if minutes:
        text = f"{minutes % 60}m{text}"
        hours = minutes // 60
        if hours:
            text = f"{hours}h{text}"
    return sign + text


def _parse_number(text: str, names: dict[str, int] | None) -> int:
    if names and text.lower() in names:
        return names[text.lower()]
    if not _INT.fullmatch(text):
        raise ValueError(f"failed to parse int from {text!r}")
    value = int(text)
    if value < 0:
        raise ValueError(f"negative number ({value}) not allowed: {text!r}")
    return value


def _parse_range(expr: str, low: int, high: int, names) -> tuple[set[int], bool]:
    range_and_step = expr.split("/")
    low_and_high = range_and_step[0].split("-")
    single = len(low_and_high) == 1
    star = False
    if low_and_high[0] in ("*", "?"):
        start, end, star = low, high, True
    else:
        start = _parse_number(low_and_high[0], names)
        if len(low_and_high) == 1:
            end = start
        elif len(low_and_high) == 2:
            end = _parse_number(low_and_high[1], names)
        else:
            raise ValueError(f"too many hyphens: {expr!r}")
    if len(range_and_step) == 1:
        step = 1
    elif len(range_and_step) == 2:
        step = _parse_number(range_and_step[1], None)
        if single:
            end = high
        if step > 1:
            star = False
    else:
        raise ValueError(f"too many slashes: {expr!r}")
    if start < low:
        raise ValueError(f"beginning of range ({start}) below minimum ({low}): {expr!r}")
    if end > high:
        raise ValueError(f"end of range ({end}) above maximum ({high}): {expr!r}")
    if start > end:
        raise ValueError(f"beginning of range ({start}) beyond end of range ({end}): {expr!r}")
    if step == 0:
        raise ValueError(f"step of range should be a positive number: {expr!r}")
    return set(range(start, end + 1, step)), star


def _parse_field(expr: str, low: int, high: int, names) -> tuple[frozenset[int], bool]:
    values: set[int] = set()
    star = False
    for part in expr.split(","):
        part_values, part_star = _parse_range(part, low, high, names)
        values |= part_values
        star = star or part_star
    return frozenset(values), star


@dataclass(frozen=True)
class _ConstantDelaySchedule:
    delay: int

    def next(self, t: datetime) -> datetime:
        return t.replace(microsecond=0) + timedelta(seconds=self.delay)


@dataclass(frozen=True)
class CronSchedule:
    """A schedule firing at every minute that matches all of its fields."""

    minutes: frozenset[int]
    hours: frozenset[int]
    days_of_month: frozenset[int]
    months: frozenset[int]
    days_of_week: frozenset[int]
    dom_star: bool = False
    dow_star: bool = False
    location: tzinfo | None = None

    def _day_matches(self, t: datetime) -> bool:
        dom = t.day in self.days_of_month
        dow = (t.weekday() + 1) % 7 in self.days_of_week
        if self.dom_star or self.dow_star:
            return dom and dow
        return dom or dow

    def next(self, t: datetime) -> datetime | None:
        """The first activation strictly after ``t``, or None within five years."""
        original_tz = t.tzinfo
        if self.location is not None:
            t = t.astimezone(self.location)
        t = t.replace(microsecond=0) + timedelta(seconds=1)
        if t.second:
            t = t.replace(second=0) + timedelta(minutes=1)
        year_limit = t.year + 5
        while t.year <= year_limit:
            if t.month not in self.months:
                year, month = (t.year + 1, 1) if t.month == 12 else (t.year, t.month + 1)
                t = t.replace(year=year, month=month, day=1, hour=0, minute=0)
            elif not self._day_matches(t):
                t = t.replace(hour=0, minute=0) + timedelta(days=1)
            elif t.hour not in self.hours:
                t = t.replace(minute=0) + timedelta(hours=1)
            elif t.minute not in self.minutes:
                t += timedelta(minutes=1)
            else:
                break
        else:
            return None
        if self.location is not None:
            if original_tz is None:
                return t.astimezone().replace(tzinfo=None)
            return t.astimezone(original_tz)
        return t


def parse_standard(spec: str):
    """Parse a five-field cron expression, a descriptor such as "@daily",
    or "@every <duration>"; an optional "TZ=" or "CRON_TZ=" prefix sets the zone.
    """
    if not spec:
        raise ValueError("empty spec string")
    location = None
    if spec.startswith("TZ=") or spec.startswith("CRON_TZ="):
        head, _, rest = spec.partition(" ")
        try:
            location = ZoneInfo(head.split("=", 1)[1])
        except (KeyError, ValueError) as exc:
            raise ValueError(f"provided bad location {head!r}") from exc
        spec = rest.strip()
    if spec.startswith("@"):
        if spec.startswith("@every "):
            seconds = parse_duration(spec[len("@every "):])
            delay = max(int(seconds), 1) if seconds >= 1 else 1
            return _ConstantDelaySchedule(delay)
        if spec not in _DESCRIPTORS:
            raise ValueError(f"unrecognized descriptor: {spec!r}")
        spec = _DESCRIPTORS[spec]
    fields = spec.split()
    if len(fields) != 5:
        raise ValueError(f"expected exactly 5 fields, found {len(fields)}: {spec!r}")
    parsed = [_parse_field(expr, *bounds) for expr, bounds in zip(fields, _FIELDS)]
    (minutes, _), (hours, _), (dom, dom_star), (months, _), (dow, dow_star) = parsed
    return CronSchedule(minutes, hours, dom, months, dow, dom_star, dow_star, location)