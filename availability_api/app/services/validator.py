"""
Conversion of untyped request input into ``TimeSlot`` values.

The validator parses the RFC3339 ``start`` timestamp and the
``duration`` expression, and enforces that the slot starts in the
future and lasts a positive amount of time.  Each failure raises its
own ``InvalidTimeSlotError`` subclass.  Validation is a pure function
of its input and the current time; nothing here logs.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from fractions import Fraction
from typing import Callable

from availability_api.app.core.exceptions import (
    BadDurationError,
    BadTimestampError,
    NonPositiveDurationError,
    PastOrMissingStartError,
)
from availability_api.app.schemas.time_slot import TimeSlot, TimeSlotJSON


_RFC3339_RE = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"[Tt](?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})",
    re.ASCII,
)

# Nanoseconds per unit, following Go's time.ParseDuration.
_DURATION_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC Greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_DURATION_PART_RE = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)", re.ASCII)

# Largest magnitude a Go time.Duration (int64 nanoseconds) can hold.
_MAX_DURATION_NS = (1 << 63) - 1


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC3339 timestamp into an aware ``datetime``.

    Fractional seconds beyond microsecond precision are truncated.
    Raises ``ValueError`` for anything that is not a complete RFC3339
    timestamp with an explicit offset.
    """
    match = _RFC3339_RE.fullmatch(value)
    if match is None:
        raise ValueError(f"not an RFC3339 timestamp: {value!r}")
    fraction = (match.group("fraction") or "")[:6].ljust(6, "0")
    offset = match.group("offset")
    if offset in ("Z", "z"):
        tzinfo = timezone.utc
    else:
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        if hours > 23 or minutes > 59:
            raise ValueError(f"invalid UTC offset: {offset!r}")
        delta = timedelta(hours=hours, minutes=minutes)
        tzinfo = timezone(-delta if offset[0] == "-" else delta)
    return datetime(
        int(match.group("year")),
        int(match.group("month")),
        int(match.group("day")),
        int(match.group("hour")),
        int(match.group("minute")),
        int(match.group("second")),
        int(fraction),
        tzinfo=tzinfo,
    )


def parse_duration(value: str) -> timedelta:
    """Parse a duration expression such as ``"1h30m"`` or ``"-1.5s"``.

    The grammar is an optional sign followed by one or more decimal
    numbers, each with a unit suffix (ns, us, µs, ms, s, m, h).  A bare
    ``"0"`` is accepted.  The total is computed exactly in nanoseconds,
    must fit a signed 64-bit nanosecond count, and is truncated to
    microseconds.
    """
    text = value
    negative = False
    if text[:1] in ("-", "+"):
        negative = text[0] == "-"
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration: {value!r}")

    total = Fraction(0)
    pos = 0
    while pos < len(text):
        part = _DURATION_PART_RE.match(text, pos)
        if part is None:
            raise ValueError(f"invalid duration: {value!r}")
        total += Fraction(part.group(1)) * _DURATION_UNITS[part.group(2)]
        pos = part.end()

    nanoseconds = int(total)
    if nanoseconds > _MAX_DURATION_NS + (1 if negative else 0):
        raise ValueError(f"duration out of range: {value!r}")
    microseconds = nanoseconds // 1000
    return timedelta(microseconds=-microseconds if negative else microseconds)


class TimeSlotValidator(ABC):
    """Capability interface: turn a ``TimeSlotJSON`` into a ``TimeSlot``."""

    @abstractmethod
    def to_time_slot(self, raw: TimeSlotJSON) -> TimeSlot:
        """Return a valid slot or raise an ``InvalidTimeSlotError``."""


class JSONValidator(TimeSlotValidator):
    """Validator for JSON request payloads.

    ``clock`` returns the current aware time and exists so that tests
    can pin "now".
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def to_time_slot(self, raw: TimeSlotJSON) -> TimeSlot:
        """Validate ``raw`` in order: timestamp, future start, duration, positivity.

        The first failing check determines the error raised.
        """
        try:
            start = parse_rfc3339(raw.start)
        except ValueError as exc:
            raise BadTimestampError() from exc
        if start <= self._clock():
            raise PastOrMissingStartError()
        try:
            duration = parse_duration(raw.duration)
        except ValueError as exc:
            raise BadDurationError() from exc
        if duration <= timedelta(0):
            raise NonPositiveDurationError()
        try:
            start + duration
        except OverflowError as exc:
            # The slot would end past the largest representable datetime.
            raise BadDurationError() from exc
        return TimeSlot(start=start, duration=duration)
