"""A single beam of sonar echoes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace

from sonarbase.angle import Angle
from sonarbase.time import Time

__all__ = ["SonarBeam"]


@dataclass
class SonarBeam:
    """Echo intensities received along one sonar beam.

    ``bearing`` is the beam direction (zero at the front), the beam widths
    are in radians and ``sampling_interval`` is the time per bin in seconds.
    """

    time: Time = field(default_factory=Time)
    bearing: Angle = field(default_factory=Angle)
    sampling_interval: float = math.nan
    speed_of_sound: float = math.nan
    beamwidth_horizontal: float = math.nan
    beamwidth_vertical: float = math.nan
    beam: bytearray = field(default_factory=bytearray)

    def __post_init__(self) -> None:
        self.beam = bytearray(self.beam)

    def spatial_resolution(self) -> float:
        """Length in metres covered by one bin.

        The sampling interval counts the way to the target and back.
        """
        return self.sampling_interval * 0.5 * self.speed_of_sound

    def copy(self) -> "SonarBeam":
        """Return an independent copy of this beam."""
        return replace(self, bearing=Angle(self.bearing.rad), beam=bytearray(self.beam))

    def swap(self, other: "SonarBeam") -> None:
        """Exchange the whole content of this beam with ``other``."""
        for f in fields(self):
            mine = getattr(self, f.name)
            setattr(self, f.name, getattr(other, f.name))
            setattr(other, f.name, mine)