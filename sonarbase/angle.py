"""Angles kept in the canonical interval (-pi, pi] and circle segments."""

from __future__ import annotations

import math
import warnings
from typing import Optional, Sequence, Union

import numpy as np

__all__ = ["Angle", "AngleSegment"]

_TWO_PI = 2.0 * math.pi


def _canonical(rad: float) -> float:
    if rad > math.pi or rad <= -math.pi:
        side = math.copysign(math.pi, rad)
        rad = -side + _TWO_PI * math.modf((rad - side) / _TWO_PI)[0]
    return rad


class Angle:
    """An angle whose value in radians always lies in (-pi, pi].

    A default-constructed angle is unknown (NaN).
    """

    __slots__ = ("rad",)

    def __init__(self, rad: float = math.nan) -> None:
        self.rad = _canonical(float(rad))

    @staticmethod
    def rad2deg(rad: float) -> float:
        """Convert radians to degrees."""
        return rad / math.pi * 180.0

    @staticmethod
    def deg2rad(deg: float) -> float:
        """Convert degrees to radians."""
        return deg / 180.0 * math.pi

    @staticmethod
    def normalize_rad(rad: float) -> float:
        """Return ``rad`` mapped into (-pi, pi]."""
        return Angle(rad).rad

    @classmethod
    def from_rad(cls, rad: float) -> "Angle":
        """Build an angle from radians."""
        return cls(rad)

    @classmethod
    def from_deg(cls, deg: float) -> "Angle":
        """Build an angle from degrees."""
        return cls(deg / 180.0 * math.pi)

    @classmethod
    def unknown(cls) -> "Angle":
        """Return an angle with an unknown (NaN) value."""
        return cls()

    @property
    def deg(self) -> float:
        """Canonical value in degrees."""
        return self.rad / math.pi * 180.0

    def is_approx(self, other: "Angle", prec: float = 1e-5) -> bool:
        """Return True if the two angles differ by less than ``prec`` radians."""
        return abs(Angle(other.rad - self.rad).rad) < prec

    def _in_range(self, left_limit: "Angle", right_limit: "Angle") -> bool:
        if (right_limit - left_limit).rad < 0:
            return not right_limit._in_range_raw(left_limit, self)
        return (self - left_limit).rad >= 0 and (right_limit - self).rad >= 0

    def _in_range_raw(self, right_limit: "Angle", angle: "Angle") -> bool:
        return angle._in_range(self, right_limit)

    def is_in_range(self, left_limit: "Angle", right_limit: "Angle") -> bool:
        """Return True if the angle lies between the two limits.

        Deprecated: equal limits cannot tell a tiny interval from a full
        circle. Use :class:`AngleSegment` instead.
        """
        warnings.warn(
            "Angle.is_in_range is deprecated, use AngleSegment instead",
            DeprecationWarning,
            stacklevel=2,
        )
        return self._in_range(left_limit, right_limit)

    def flipped(self) -> "Angle":
        """Return the opposite angle, leaving this one unchanged."""
        return Angle(self.rad).flip()

    def flip(self) -> "Angle":
        """Turn this angle by pi in place and return it."""
        if self.rad < 0:
            self.rad += math.pi
        else:
            self.rad -= math.pi
        return self

    @staticmethod
    def vector_to_vector(
        a: Sequence[float],
        b: Sequence[float],
        positive: Optional[Sequence[float]] = None,
    ) -> "Angle":
        """Angle of the rotation that makes ``a`` colinear with ``b``.

        Without ``positive`` the result is unsigned. With it, the sign follows
        the rotation direction about ``positive`` (a unit vector).
        """
        va = np.asarray(a, dtype=np.float64)
        vb = np.asarray(b, dtype=np.float64)
        with np.errstate(invalid="ignore", divide="ignore"):
            cos = np.float64(np.dot(va, vb)) / (np.linalg.norm(va) * np.linalg.norm(vb))
            value = float(np.arccos(cos))
        if positive is None:
            return Angle.from_rad(value)
        is_positive = float(np.dot(np.cross(va, vb), np.asarray(positive, dtype=np.float64))) > 0
        return Angle.from_rad(value if is_positive else -value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Angle):
            return NotImplemented
        return self.rad == other.rad

    def __lt__(self, other: "Angle") -> bool:
        if not isinstance(other, Angle):
            return NotImplemented
        return self.rad < other.rad

    def __gt__(self, other: "Angle") -> bool:
        if not isinstance(other, Angle):
            return NotImplemented
        return self.rad > other.rad

    __hash__ = None  # type: ignore[assignment]

    def __iadd__(self, other: "Angle") -> "Angle":
        self.rad = _canonical(self.rad + other.rad)
        return self

    def __isub__(self, other: "Angle") -> "Angle":
        self.rad = _canonical(self.rad - other.rad)
        return self

    def __add__(self, other: "Angle") -> "Angle":
        if not isinstance(other, Angle):
            return NotImplemented
        return Angle(self.rad + other.rad)

    def __sub__(self, other: "Angle") -> "Angle":
        if not isinstance(other, Angle):
            return NotImplemented
        return Angle(self.rad - other.rad)

    def __mul__(self, other: Union["Angle", float]) -> "Angle":
        if isinstance(other, Angle):
            return Angle(self.rad * other.rad)
        if isinstance(other, (int, float)):
            return Angle(self.rad * other)
        return NotImplemented

    def __rmul__(self, other: float) -> "Angle":
        if isinstance(other, (int, float)):
            return Angle(other * self.rad)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Angle(rad={self.rad!r})"

    def __str__(self) -> str:
        return f"{self.rad:g}[{self.deg:3.1f}deg]"


class AngleSegment:
    """A segment of the circle starting at an angle and spanning a width."""

    __slots__ = ("width", "start_rad", "end_rad")

    def __init__(self, start: Optional[Angle] = None, width: float = 0.0) -> None:
        self.width = float(width)
        self.start_rad = 0.0 if start is None else start.rad
        self.end_rad = self.start_rad + self.width
        if self.width < 0:
            raise ValueError("Error got segment with negative width")

    def is_inside(self, other: Union[Angle, "AngleSegment"]) -> bool:
        """Return True if an angle, or a whole segment, lies inside this one."""
        if isinstance(other, AngleSegment):
            other_start = other.start_rad
            if other_start < self.start_rad:
                other_start += _TWO_PI
            return other_start + other.width <= self.end_rad
        angle_rad = other.rad
        if angle_rad < self.start_rad:
            angle_rad += _TWO_PI
        return angle_rad <= self.end_rad

    def split(self, angle: Angle) -> list["AngleSegment"]:
        """Splitting a segment is not supported; always returns an empty list."""
        return []

    def get_intersections(self, other: "AngleSegment") -> list["AngleSegment"]:
        """Return one segment for each part shared by this and ``other``."""
        if self.width >= _TWO_PI:
            return [other]
        if other.width >= _TWO_PI:
            return [self]

        start_a, width_a = self.start_rad, self.width
        start_b, width_b = other.start_rad, other.width
        if start_a > start_b:
            start_a, start_b = start_b, start_a
            width_a, width_b = width_b, width_a
        end_a = start_a + width_a
        end_b = start_b + width_b

        if end_a < start_b:
            if end_b > math.pi and start_a < end_b - _TWO_PI:
                # The start of A lies inside the wrapped part of B: drop the
                # part of B before the wrap and swap the roles of A and B.
                new_width_a = width_b - (math.pi - start_b)
                start_b, width_b = start_a, width_a
                start_a, width_a = -math.pi, new_width_a
                end_a = start_a + width_a
                end_b = start_b + width_b
            else:
                return []

        result = []
        new_start = start_b
        new_width = min(end_a, end_b) - new_start
        if new_width > 1e-10:
            result.append(AngleSegment(Angle.from_rad(new_start), new_width))

        new_start = end_b - _TWO_PI
        if new_start > start_a:
            new_width = new_start - start_a
            if new_width > 1e-10:
                result.append(AngleSegment(Angle.from_rad(start_a), new_width))
        return result

    @property
    def start(self) -> Angle:
        """Start angle of the segment."""
        return Angle.from_rad(self.start_rad)

    @property
    def end(self) -> Angle:
        """End angle of the segment, normalised; prefer start plus width."""
        return Angle.from_rad(self.end_rad)

    def __repr__(self) -> str:
        return f"AngleSegment(start_rad={self.start_rad!r}, width={self.width!r})"

    def __str__(self) -> str:
        return (
            f" Segment start {Angle.rad2deg(self.start_rad):g}"
            f" end  {Angle.rad2deg(self.end_rad):g}"
            f" width {Angle.rad2deg(self.width):g}"
        )