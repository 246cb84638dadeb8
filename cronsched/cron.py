"""Cron pattern parsing and occurrence search, with seconds required."""

from __future__ import annotations

import bisect
import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterator

from cronsched.errors import ErrorKind, JobSchedulerError

YEAR_LIMIT = 5000

_MONTH_NAMES = {
    name: number
    for number, name in enumerate(
        ["JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC"],
        start=1,
    )
}
_DOW_NAMES = {
    name: number
    for number, name in enumerate(["SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT"])
}
_NICKNAMES = {
    "@yearly": "0 0 0 1 1 *",
    "@annually": "0 0 0 1 1 *",
    "@monthly": "0 0 0 1 * *",
    "@weekly": "0 0 0 * * 0",
    "@daily": "0 0 0 * * *",
    "@midnight": "0 0 0 * * *",
    "@hourly": "0 0 * * * *",
}
_ONE_SECOND = timedelta(seconds=1)
_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class Cron:
    """A parsed cron pattern: seconds, minutes, hours, day of month, month, day of week.

    Day of month and day of week must both match for a day to be selected.
    """

    pattern: str
    seconds: tuple[int, ...]
    minutes: tuple[int, ...]
    hours: tuple[int, ...]
    months: frozenset[int]
    days: frozenset[int]
    last_day_of_month: bool
    nearest_weekdays: frozenset[int]
    weekdays: frozenset[int]
    nth_weekdays: frozenset[tuple[int, int]]
    last_weekdays: frozenset[int]

    def __str__(self) -> str:
        return self.pattern

    def matches(self, moment: datetime) -> bool:
        """Whether the wall-clock time of ``moment`` is selected by the pattern."""
        return (
            moment.second in self.seconds
            and moment.minute in self.minutes
            and moment.hour in self.hours
            and moment.month in self.months
            and self._day_matches(moment.date())
        )

    def iter_from(self, start: datetime) -> Iterator[datetime]:
        """Yield occurrences at or after ``start``, in order."""
        return self._search(start, inclusive=True)

    def iter_after(self, start: datetime) -> Iterator[datetime]:
        """Yield occurrences strictly after ``start``, in order."""
        return self._search(start, inclusive=False)

    def _search(self, start: datetime, inclusive: bool) -> Iterator[datetime]:
        tz = start.tzinfo
        wall = start.replace(tzinfo=None)
        if not inclusive or wall.microsecond:
            wall = wall.replace(microsecond=0) + _ONE_SECOND
        while True:
            found = self._next_wall(wall)
            if found is None:
                return
            if tz is None:
                yield found
            else:
                aware = found.replace(tzinfo=tz)
                if _exists(aware):
                    yield aware
            wall = found + _ONE_SECOND

    def _next_wall(self, t: datetime) -> datetime | None:
        while t.year <= YEAR_LIMIT:
            if t.month not in self.months:
                if t.month == 12:
                    t = datetime(t.year + 1, 1, 1)
                else:
                    t = datetime(t.year, t.month + 1, 1)
                continue
            if not self._day_matches(t.date()):
                t = datetime(t.year, t.month, t.day) + _ONE_DAY
                continue
            hour = _next_in(self.hours, t.hour)
            if hour is None:
                t = datetime(t.year, t.month, t.day) + _ONE_DAY
                continue
            if hour != t.hour:
                t = t.replace(hour=hour, minute=0, second=0)
            minute = _next_in(self.minutes, t.minute)
            if minute is None:
                t = t.replace(minute=0, second=0) + timedelta(hours=1)
                continue
            if minute != t.minute:
                t = t.replace(minute=minute, second=0)
            second = _next_in(self.seconds, t.second)
            if second is None:
                t = t.replace(second=0) + timedelta(minutes=1)
                continue
            return t.replace(second=second)
        return None

    def _day_matches(self, day: date) -> bool:
        return self._dom_matches(day) and self._dow_matches(day)

    def _dom_matches(self, day: date) -> bool:
        if day.day in self.days:
            return True
        last = calendar.monthrange(day.year, day.month)[1]
        if self.last_day_of_month and day.day == last:
            return True
        return any(
            _nearest_weekday(day.year, day.month, target, last) == day.day
            for target in self.nearest_weekdays
        )

    def _dow_matches(self, day: date) -> bool:
        dow = (day.weekday() + 1) % 7
        if dow in self.weekdays:
            return True
        if (dow, (day.day - 1) // 7 + 1) in self.nth_weekdays:
            return True
        if dow in self.last_weekdays:
            last = calendar.monthrange(day.year, day.month)[1]
            return day.day + 7 > last
        return False


def parse_cron(pattern: str) -> Cron:
    """Parse a six-field cron pattern (or a nickname such as ``@daily``)."""
    try:
        return _parse(pattern)
    except ValueError as exc:
        raise JobSchedulerError(ErrorKind.PARSE_SCHEDULE) from exc


def _parse(pattern: str) -> Cron:
    text = _NICKNAMES.get(pattern.strip().lower(), pattern)
    fields = text.split()
    if len(fields) != 6:
        raise ValueError(f"expected 6 fields, got {len(fields)}")
    sec, minute, hour, dom, month, dow = fields
    days, last_day, nearest = _parse_dom(dom)
    weekdays, nth, last_weekdays = _parse_dow(dow)
    return Cron(
        pattern=pattern,
        seconds=tuple(sorted(_parse_field(sec, 0, 59, {}))),
        minutes=tuple(sorted(_parse_field(minute, 0, 59, {}))),
        hours=tuple(sorted(_parse_field(hour, 0, 23, {}))),
        months=frozenset(_parse_field(month, 1, 12, _MONTH_NAMES)),
        days=frozenset(days),
        last_day_of_month=last_day,
        nearest_weekdays=frozenset(nearest),
        weekdays=frozenset(weekdays),
        nth_weekdays=frozenset(nth),
        last_weekdays=frozenset(last_weekdays),
    )


def _parse_field(text: str, lo: int, hi: int, names: dict[str, int]) -> set[int]:
    values: set[int] = set()
    for part in text.split(","):
        values |= _parse_part(part, lo, hi, names)
    return values


def _parse_part(part: str, lo: int, hi: int, names: dict[str, int]) -> set[int]:
    if not part:
        raise ValueError("empty field part")
    base, has_step, step_text = part.partition("/")
    step = 1
    if has_step:
        step = _value(step_text, {})
        if step < 1:
            raise ValueError("step must be positive")
    if base == "*":
        start, end = lo, hi
    elif "-" in base:
        first, last = base.split("-", 1)
        start, end = _value(first, names), _value(last, names)
        if start > end:
            raise ValueError(f"reversed range {base!r}")
    else:
        start = _value(base, names)
        end = hi if has_step else start
    if start < lo or end > hi:
        raise ValueError(f"{part!r} outside {lo}-{hi}")
    return set(range(start, end + 1, step))


def _value(token: str, names: dict[str, int]) -> int:
    upper = token.upper()
    if upper in names:
        return names[upper]
    if token.isdigit():
        return int(token)
    raise ValueError(f"invalid value {token!r}")


def _parse_dom(text: str) -> tuple[set[int], bool, set[int]]:
    if text in ("*", "?"):
        return set(range(1, 32)), False, set()
    days: set[int] = set()
    last = False
    nearest: set[int] = set()
    for part in text.split(","):
        upper = part.upper()
        if upper == "L":
            last = True
        elif len(upper) > 1 and upper.endswith("W"):
            target = _value(upper[:-1], {})
            if not 1 <= target <= 31:
                raise ValueError(f"{part!r} outside 1-31")
            nearest.add(target)
        else:
            days |= _parse_part(part, 1, 31, {})
    return days, last, nearest


def _parse_dow(text: str) -> tuple[set[int], set[tuple[int, int]], set[int]]:
    if text in ("*", "?"):
        return set(range(7)), set(), set()
    weekdays: set[int] = set()
    nth: set[tuple[int, int]] = set()
    last: set[int] = set()
    for part in text.split(","):
        if "#" in part:
            day_text, n_text = part.split("#", 1)
            n = _value(n_text, {})
            if not 1 <= n <= 5:
                raise ValueError(f"{part!r}: occurrence must be 1-5")
            nth.add((_weekday(day_text), n))
        elif len(part) > 1 and part.upper().endswith("L"):
            last.add(_weekday(part[:-1]))
        else:
            weekdays |= {v % 7 for v in _parse_part(part, 0, 7, _DOW_NAMES)}
    return weekdays, nth, last


def _weekday(token: str) -> int:
    value = _value(token, _DOW_NAMES)
    if value > 7:
        raise ValueError(f"{token!r} outside 0-7")
    return value % 7


def _nearest_weekday(year: int, month: int, target: int, last: int) -> int | None:
    if target > last:
        return None
    weekday = calendar.weekday(year, month, target)
    if weekday == 5:
        return target + 2 if target == 1 else target - 1
    if weekday == 6:
        return target - 2 if target == last else target + 1
    return target


def _next_in(values: tuple[int, ...], current: int) -> int | None:
    index = bisect.bisect_left(values, current)
    return values[index] if index < len(values) else None


def _exists(aware: datetime) -> bool:
    back = aware.astimezone(timezone.utc).astimezone(aware.tzinfo)
    return back.replace(tzinfo=None) == aware.replace(tzinfo=None)