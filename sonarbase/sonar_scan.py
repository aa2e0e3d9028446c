"""A complete sonar scan: a grid of echo intensities over beams and bins."""

from __future__ import annotations

import math
from typing import Optional, Union

from sonarbase.angle import Angle
from sonarbase.sonar_beam import SonarBeam
from sonarbase.time import Time

__all__ = ["SonarScan"]


def _round_half_away(x: float) -> int:
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def _resized(data: bytearray, size: int) -> bytearray:
    """Return ``data`` cut or zero-extended to ``size`` bytes."""
    if len(data) >= size:
        return bytearray(data[:size])
    return bytearray(data) + bytearray(size - len(data))


class SonarScan:
    """Echo data of several beams sharing one geometry.

    With ``memory_layout_column`` set, one beam is stored per column
    (``data[bin * number_of_beams + beam]``); otherwise one beam per row
    (``data[beam * number_of_bins + bin]``). Beams are stored left to right,
    so the end bearing is usually smaller than the start bearing, and
    ``angular_resolution`` must be positive.
    """

    def __init__(
        self,
        number_of_beams: int = 0,
        number_of_bins: int = 0,
        start_bearing: Optional[Angle] = None,
        angular_resolution: Optional[Angle] = None,
        memory_layout_column: bool = True,
    ) -> None:
        self.time = Time()
        self.data = bytearray()
        self.time_beams: list[Time] = []
        self.number_of_beams = 0
        self.number_of_bins = 0
        self.start_bearing = Angle()
        self.angular_resolution = Angle()
        self.sampling_interval = 0.0
        self.speed_of_sound = 0.0
        self.beamwidth_horizontal = Angle.from_rad(0.0)
        self.beamwidth_vertical = Angle.from_rad(0.0)
        self.memory_layout_column = memory_layout_column
        self.polar_coordinates = True
        self.reinit(
            number_of_beams,
            number_of_bins,
            start_bearing if start_bearing is not None else Angle(),
            angular_resolution if angular_resolution is not None else Angle(),
            memory_layout_column,
            0,
        )

    def copy(self, copy_data: bool = True) -> "SonarScan":
        """Return a new scan with the same geometry.

        Without ``copy_data`` the bin values and per-beam times are not copied.
        """
        other = SonarScan(
            self.number_of_beams,
            self.number_of_bins,
            Angle(self.start_bearing.rad),
            Angle(self.angular_resolution.rad),
            self.memory_layout_column,
        )
        other.time = self.time
        other.beamwidth_vertical = Angle(self.beamwidth_vertical.rad)
        other.beamwidth_horizontal = Angle(self.beamwidth_horizontal.rad)
        other.sampling_interval = self.sampling_interval
        other.speed_of_sound = self.speed_of_sound
        other.polar_coordinates = self.polar_coordinates
        if copy_data:
            other.data = bytearray(self.data)
            other.time_beams = list(self.time_beams)
        return other

    def reinit(
        self,
        number_of_beams: int,
        number_of_bins: int,
        start_bearing: Angle,
        angular_resolution: Angle,
        memory_layout_column: bool = True,
        val: int = -1,
    ) -> None:
        """Set the geometry, resizing the data if the size changed.

        A negative ``val`` leaves the bin values as they are.
        """
        if number_of_beams != self.number_of_beams or number_of_bins != self.number_of_bins:
            self.number_of_beams = number_of_beams
            self.number_of_bins = number_of_bins
            self.data = _resized(self.data, number_of_beams * number_of_bins)
        self.start_bearing = start_bearing
        self.angular_resolution = angular_resolution
        self.memory_layout_column = memory_layout_column
        self.speed_of_sound = 0.0
        self.beamwidth_horizontal = Angle.from_rad(0.0)
        self.beamwidth_vertical = Angle.from_rad(0.0)
        self.reset(val)

    def reset(self, val: int = 0) -> None:
        """Clear the time stamps and fill the data with ``val`` unless it is negative."""
        self.time = Time()
        if self.data and val >= 0:
            self.data[:] = bytes([val % 256]) * len(self.data)
        self.time_beams.clear()

    def beam_index_for_bearing(self, bearing: Angle, range_check: bool = True) -> int:
        """Index of the beam that covers ``bearing``.

        With ``range_check`` returns -1 when no beam of the scan covers it.
        """
        ratio = (self.start_bearing - bearing).rad / self.angular_resolution.rad
        if not math.isfinite(ratio):
            if range_check:
                return -1
            raise ValueError("bearing index is undefined for this scan geometry")
        index = _round_half_away(ratio)
        if range_check and (index < 0 or index >= self.number_of_beams):
            return -1
        return index

    def has_sonar_beam(self, beam_or_bearing: Union[SonarBeam, Angle]) -> bool:
        """Return True if data was already added for the given beam or bearing."""
        bearing = (
            beam_or_bearing.bearing
            if isinstance(beam_or_bearing, SonarBeam)
            else beam_or_bearing
        )
        index = self.beam_index_for_bearing(bearing)
        if index < 0:
            return False
        # Without per-beam times all data is assumed to be set at once.
        if not self.time_beams:
            return True
        if index >= len(self.time_beams):
            return False
        return self.time_beams[index].microseconds != 0

    def add_sonar_beam(self, sonar_beam: SonarBeam, resize: bool = True) -> None:
        """Store a beam at the position given by its bearing.

        The scan must use one beam per row. If the bearing lies past the last
        beam, the scan grows when ``resize`` is set; the start bearing stays.
        """
        if self.memory_layout_column:
            raise RuntimeError(
                "add_sonar_beam: memory layout is not supported, call toggle_memory_layout()"
            )
        if self.number_of_bins < len(sonar_beam.beam):
            raise ValueError("add_sonar_beam: cannot add sonar beam: too many bins")
        index = self.beam_index_for_bearing(sonar_beam.bearing, False)
        if index < 0:
            raise ValueError("add_sonar_beam: negative index")
        if index >= self.number_of_beams:
            if not resize:
                raise ValueError("add_sonar_beam: bearing is out of range")
            self.number_of_beams = index + 1
            self.data = _resized(self.data, self.number_of_beams * self.number_of_bins)
        if len(self.time_beams) != self.number_of_beams:
            extra = self.number_of_beams - len(self.time_beams)
            if extra > 0:
                self.time_beams.extend(Time() for _ in range(extra))
            else:
                del self.time_beams[self.number_of_beams:]

        self.time_beams[index] = sonar_beam.time
        self.sampling_interval = sonar_beam.sampling_interval
        self.beamwidth_vertical = Angle.from_rad(sonar_beam.beamwidth_vertical)
        self.beamwidth_horizontal = Angle.from_rad(sonar_beam.beamwidth_horizontal)
        self.speed_of_sound = sonar_beam.speed_of_sound
        offset = index * self.number_of_bins
        self.data[offset:offset + len(sonar_beam.beam)] = sonar_beam.beam

    def get_sonar_beam(self, bearing: Angle) -> SonarBeam:
        """Return the beam stored for ``bearing``.

        The scan must use one beam per row and hold a beam for the bearing.
        """
        if self.memory_layout_column:
            raise RuntimeError("get_sonar_beam: wrong memory layout")
        index = self.beam_index_for_bearing(bearing)
        if index < 0:
            raise ValueError("get_sonar_beam: no data for the given bearing")
        offset = self.number_of_bins * index
        beam_time = self.time_beams[index] if len(self.time_beams) > index else self.time
        return SonarBeam(
            time=beam_time,
            bearing=Angle(bearing.rad),
            sampling_interval=self.sampling_interval,
            speed_of_sound=self.speed_of_sound,
            beamwidth_horizontal=self.beamwidth_horizontal.rad,
            beamwidth_vertical=self.beamwidth_vertical.rad,
            beam=bytearray(self.data[offset:offset + self.number_of_bins]),
        )

    def toggle_memory_layout(self) -> None:
        """Switch between one beam per column and one beam per row."""
        beams, bins = self.number_of_beams, self.number_of_bins
        if len(self.data) != beams * bins:
            raise ValueError("data size does not match the number of beams and bins")
        if self.memory_layout_column:
            self.data = bytearray(b"".join(self.data[row::beams] for row in range(beams)))
        else:
            self.data = bytearray(b"".join(self.data[col::bins] for col in range(bins)))
        self.memory_layout_column = not self.memory_layout_column

    def swap(self, other: "SonarScan") -> None:
        """Exchange the whole content of this scan with ``other``."""
        self.__dict__, other.__dict__ = other.__dict__, self.__dict__

    def number_of_bytes(self) -> int:
        """Size of the data in bytes."""
        return len(self.data)

    def bin_count(self) -> int:
        """Total number of bins over all beams."""
        return self.number_of_beams * self.number_of_bins

    def end_bearing(self) -> Angle:
        """Bearing of the last beam."""
        return self.start_bearing - self.angular_resolution * (self.number_of_beams - 1)

    def spatial_resolution(self) -> float:
        """Length in metres covered by one bin.

        The sampling interval counts the way to the target and back.
        """
        return self.sampling_interval * 0.5 * self.speed_of_sound

    def set_data(self, data: Union[bytes, bytearray, list[int]]) -> None:
        """Replace the bin values."""
        self.data = bytearray(data)

    def __repr__(self) -> str:
        return (
            f"SonarScan(number_of_beams={self.number_of_beams}, "
            f"number_of_bins={self.number_of_bins}, "
            f"memory_layout_column={self.memory_layout_column})"
        )