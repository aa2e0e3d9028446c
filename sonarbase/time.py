"""Timestamps with microsecond resolution."""

from __future__ import annotations

import math
import re
import time as _time
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import NamedTuple, Optional, Union

__all__ = ["Resolution", "Time", "Timeval", "USEC_PER_SEC"]

USEC_PER_SEC = 1_000_000
DEFAULT_FORMAT = "%Y%m%d-%H:%M:%S"

_INT_PREFIX = re.compile(r"[+-]?\d+")


class Resolution(IntEnum):
    """Precision of the sub-second part of a time string."""

    SECONDS = 1
    MILLISECONDS = 1000
    MICROSECONDS = 1_000_000


class Timeval(NamedTuple):
    """Seconds and the remaining microseconds of a time value."""

    seconds: int
    microseconds: int


def _trunc_divmod(a: int, b: int) -> tuple[int, int]:
    """Integer division rounding toward zero, remainder taking the sign of ``a``."""
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return q, a - q * b


def _round_half_away(x: float) -> int:
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def _scan_int(text: str) -> int:
    match = _INT_PREFIX.match(text.lstrip())
    return int(match.group()) if match else 0


@dataclass(frozen=True, order=True)
class Time:
    """A point in time, or a duration, counted in microseconds."""

    microseconds: int = 0

    @classmethod
    def now(cls) -> "Time":
        """Return the current wall-clock time."""
        return cls(_time.time_ns() // 1000)

    @classmethod
    def from_microseconds(cls, value: int) -> "Time":
        """Build a time from a number of microseconds."""
        return cls(int(value))

    @classmethod
    def from_milliseconds(cls, value: int) -> "Time":
        """Build a time from a number of milliseconds."""
        return cls(int(value) * 1000)

    @classmethod
    def from_seconds(
        cls, value: Union[int, float], microseconds: Optional[int] = None
    ) -> "Time":
        """Build a time from seconds.

        A float is split into whole seconds and a rounded microsecond part;
        an integer may come with an extra number of microseconds.
        """
        if isinstance(value, float):
            if microseconds is not None:
                raise TypeError("microseconds can only be given with whole seconds")
            seconds = int(value)
            return cls(seconds * USEC_PER_SEC + _round_half_away((value - seconds) * USEC_PER_SEC))
        return cls(int(value) * USEC_PER_SEC + int(microseconds or 0))

    @classmethod
    def from_time_values(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int,
        minute: int,
        seconds: int,
        millis: int,
        micros: int,
    ) -> "Time":
        """Build a time from calendar values in local time."""
        epoch = int(_time.mktime((year, month, day, hour, minute, seconds, 0, 0, -1)))
        return cls(epoch * USEC_PER_SEC + millis * 1000 + micros)

    @classmethod
    def from_string(
        cls,
        string_time: str,
        resolution: Resolution = Resolution.MICROSECONDS,
        main_format: str = DEFAULT_FORMAT,
    ) -> "Time":
        """Parse a string as produced by :meth:`to_string`.

        Raises ValueError if the sub-second field does not fit the
        resolution or the main part does not match ``main_format``.
        """
        resolution = Resolution(resolution)
        main_time = string_time
        usecs = 0
        if resolution > Resolution.SECONDS:
            pos = string_time.rfind(":")
            usecs_string = string_time[pos + 1:]
            length = len(usecs_string)
            if length not in (3, 6) or (length == 3 and resolution > Resolution.MILLISECONDS):
                raise ValueError(
                    "Time.from_string failed - resolution does not match provided time string"
                )
            if resolution == Resolution.MILLISECONDS:
                usecs = _scan_int(usecs_string[:3]) * 1000
            else:
                usecs = _scan_int(usecs_string[:6])
            if pos >= 0:
                main_time = string_time[:pos]

        try:
            parsed = datetime.strptime(main_time, main_format)
        except ValueError as exc:
            raise ValueError(
                f"Time.from_string failed - time string '{main_time}' "
                f"did not match the given format '{main_format}'"
            ) from exc
        epoch = int(_time.mktime(parsed.timetuple()))
        return cls(epoch * USEC_PER_SEC + usecs)

    def to_string(
        self,
        resolution: Resolution = Resolution.MICROSECONDS,
        main_format: str = DEFAULT_FORMAT,
    ) -> str:
        """Format the time in local time, with a sub-second field if asked."""
        resolution = Resolution(resolution)
        tv = self.to_timeval()
        formatted = _time.strftime(main_format, _time.localtime(tv.seconds))
        if resolution == Resolution.SECONDS:
            return formatted
        if resolution == Resolution.MILLISECONDS:
            return f"{formatted}:{int(tv.microseconds / 1000.0):03d}"
        return f"{formatted}:{tv.microseconds:06d}"

    def to_seconds(self) -> float:
        """Return the time as fractional seconds."""
        return self.microseconds / USEC_PER_SEC

    def to_milliseconds(self) -> int:
        """Return the time in whole milliseconds, dropping the rest."""
        return _trunc_divmod(self.microseconds, 1000)[0]

    def to_microseconds(self) -> int:
        """Return the time in microseconds."""
        return self.microseconds

    def to_timeval(self) -> Timeval:
        """Split the time into seconds and remaining microseconds."""
        return Timeval(*_trunc_divmod(self.microseconds, USEC_PER_SEC))

    def is_null(self) -> bool:
        """Return True if the time is zero."""
        return self.microseconds == 0

    def __add__(self, other: "Time") -> "Time":
        if not isinstance(other, Time):
            return NotImplemented
        return Time(self.microseconds + other.microseconds)

    def __sub__(self, other: "Time") -> "Time":
        if not isinstance(other, Time):
            return NotImplemented
        return Time(self.microseconds - other.microseconds)

    def __truediv__(self, divider: int) -> "Time":
        if not isinstance(divider, int):
            return NotImplemented
        return Time(_trunc_divmod(self.microseconds, divider)[0])

    def __mul__(self, factor: Union[int, float]) -> "Time":
        if not isinstance(factor, (int, float)):
            return NotImplemented
        return Time(int(self.microseconds * factor))

    def __str__(self) -> str:
        whole = _trunc_divmod(self.microseconds, USEC_PER_SEC)[0]
        magnitude = abs(self.microseconds)
        return f"{whole}.{(magnitude // 1000) % 1000:03d}.{magnitude % 1000:03d}"