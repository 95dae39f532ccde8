"""Shared helpers: durations, timestamps, validators and small string utilities."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta, timezone

__all__ = [
    "ClickError",
    "format_duration",
    "time_since",
    "keyval_string",
    "uppercase_first",
    "parse_duration",
    "parse_timestamp",
    "valid_u32",
    "valid_duration",
    "valid_date",
    "mapped_val",
]

_U32_MAX = 2**32 - 1

_SECONDS_PER_UNIT: dict[str, float] = {}
for _names, _seconds in (
    (("nanos", "nsec", "ns"), 1e-9),
    (("usec", "us"), 1e-6),
    (("millis", "msec", "ms"), 1e-3),
    (("seconds", "second", "secs", "sec", "s"), 1),
    (("minutes", "minute", "min", "mins", "m"), 60),
    (("hours", "hour", "hr", "hrs", "h"), 3600),
    (("days", "day", "d"), 86_400),
    (("weeks", "week", "w"), 604_800),
    (("months", "month", "M"), 2_630_016),
    (("years", "year", "y"), 31_557_600),
):
    for _name in _names:
        _SECONDS_PER_UNIT[_name] = _seconds

_DURATION_TERM = re.compile(r"\s*(\d+)\s*([A-Za-z]+)\s*")
_DURATION_FULL = re.compile(r"(?:\s*\d+\s*[A-Za-z]+)+\s*")

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(\.\d+)?"
    r"([Zz]|[+-]\d{2}:\d{2})"
)


class ClickError(Exception):
    """Raised when a command cannot do what was asked of it."""


def _trunc_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return quotient if value >= 0 else -quotient


def _whole_seconds(delta: timedelta) -> int:
    micros = (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
    return _trunc_div(micros, 1_000_000)


def format_duration(delta: timedelta) -> str:
    """Render a duration in the compact form used in listings, e.g. '3d 4h'."""
    secs = _whole_seconds(delta)
    minutes = _trunc_div(secs, 60)
    hours = _trunc_div(secs, 3600)
    days = _trunc_div(secs, 86_400)
    if days > 365:
        years = days // 365
        return f"{years}y {days - years * 365}d"
    if days > 0:
        return f"{days}d {hours - 24 * days}h"
    if hours > 0:
        return f"{hours}h {minutes - 60 * hours}m"
    if minutes > 0:
        return f"{minutes}m {secs - 60 * minutes}s"
    return f"{secs}s"


def time_since(date: datetime, now: datetime | None = None) -> timedelta:
    """Time elapsed from ``date`` until ``now`` (the current UTC time by default)."""
    if now is None:
        now = datetime.now(timezone.utc)
    return now - date


def keyval_string(keyvals: Mapping[str, str] | None) -> str:
    """One ``key=value`` line per entry, ordered by key."""
    if not keyvals:
        return ""
    return "".join(f"{key}={keyvals[key]}\n" for key in sorted(keyvals))


def uppercase_first(s: str) -> str:
    """Uppercase the first character of ``s``, leaving the rest untouched."""
    return s[:1].upper() + s[1:]


def parse_duration(text: str) -> timedelta:
    """Parse a human duration such as '5s', '3m5s' or '1h 2min 5sec'."""
    if not text or not text.strip():
        raise ValueError("value was empty")
    if not _DURATION_FULL.fullmatch(text):
        raise ValueError(f"invalid duration: {text!r}")
    total = timedelta()
    for match in _DURATION_TERM.finditer(text):
        number, unit = int(match.group(1)), match.group(2)
        try:
            per_unit = _SECONDS_PER_UNIT[unit]
        except KeyError:
            raise ValueError(f"unknown time unit {unit!r}") from None
        if per_unit >= 1:
            total += timedelta(seconds=number * int(per_unit))
        else:
            total += timedelta(microseconds=(number * round(per_unit * 1e9)) // 1000)
    return total


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """Parse an RFC 3339 timestamp into an aware datetime; ``None`` passes through."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
    match = _RFC3339.fullmatch(value)
    if match is None:
        raise ValueError(f"invalid RFC 3339 timestamp: {value!r}")
    year, month, day, hour, minute, second = (int(match.group(i)) for i in range(1, 7))
    fraction = match.group(7)
    micros = int((fraction[1:] + "000000")[:6]) if fraction else 0
    offset = match.group(8)
    if offset in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = -1 if offset[0] == "-" else 1
        off_h, off_m = int(offset[1:3]), int(offset[4:6])
        if off_h > 23 or off_m > 59:
            raise ValueError(f"invalid offset in timestamp: {value!r}")
        tz = timezone(sign * timedelta(hours=off_h, minutes=off_m))
    return datetime(year, month, day, hour, minute, second, micros, tzinfo=tz)


def valid_u32(s: str) -> int:
    """Validate and return an unsigned 32-bit integer given as text."""
    if s == "":
        raise ValueError("cannot parse integer from empty string")
    digits = s[1:] if s.startswith("+") else s
    if not digits or not all("0" <= c <= "9" for c in digits):
        raise ValueError("invalid digit found in string")
    value = int(digits)
    if value > _U32_MAX:
        raise ValueError("number too large to fit in target type")
    return value


def valid_duration(s: str) -> timedelta:
    """Validate a human duration, returning it parsed."""
    return parse_duration(s)


def valid_date(s: str) -> datetime:
    """Validate an RFC 3339 date, returning it parsed."""
    parsed = parse_timestamp(s)
    assert parsed is not None
    return parsed


def mapped_val(key: str, mapping: Iterable[tuple[str, str]]) -> str | None:
    """Value of the first pair whose key equals ``key``, or ``None``."""
    return next((val for map_key, val in mapping if map_key == key), None)