"""Sonar samples for both scanning and multibeam devices."""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

from sonarbase.angle import Angle
from sonarbase.sonar_beam import SonarBeam
from sonarbase.sonar_scan import SonarScan
from sonarbase.time import Time

__all__ = ["Sonar"]

_SPEED_OF_SOUND_IN_WATER = 1497.0


def _to_byte(value: float) -> int:
    """Truncate a scaled bin value into the 0..255 range of a byte."""
    if math.isnan(value):
        return 0
    return int(min(max(value, 0.0), 255.0))


def _scaled_bytes(bins: Sequence[float], gain: float) -> bytearray:
    """Normalise bins above 1, scale them by 255 * gain and truncate to bytes."""
    raw = list(bins)
    if not raw:
        raise ValueError("the sonar holds no bins to convert")
    highest = max(raw)
    if highest > 1:
        raw = [value / highest for value in raw]
    factor = 255 * gain
    return bytearray(_to_byte(value * factor) for value in raw)


class Sonar:
    """Echo data of one or several sonar beams.

    Bins are stored beam-first: the data of beam ``n`` occupies
    ``bins[n * bin_count:(n + 1) * bin_count]``. Bin values are normalised,
    1.0 meaning the received signal equals the transmitted one.
    ``timestamps`` is empty unless each beam has its own acquisition time.
    """

    def __init__(
        self,
        time: Optional[Time] = None,
        bin_duration: Optional[Time] = None,
        bin_count: int = 0,
        beam_width: Optional[Angle] = None,
        beam_height: Optional[Angle] = None,
        beam_count: int = 0,
        per_beam_timestamps: Optional[bool] = None,
    ) -> None:
        self.time = time if time is not None else Time()
        self.timestamps: list[Time] = []
        self.bin_duration = bin_duration if bin_duration is not None else Time()
        self.beam_width = beam_width if beam_width is not None else Angle()
        self.beam_height = beam_height if beam_height is not None else Angle()
        self.bearings: list[Angle] = []
        self.speed_of_sound = _SPEED_OF_SOUND_IN_WATER
        self.bin_count = int(bin_count)
        self.beam_count = 0
        self.bins: list[float] = []
        if beam_count or per_beam_timestamps is not None:
            self.resize(bin_count, beam_count, bool(per_beam_timestamps))

    @staticmethod
    def speed_of_sound_in_water() -> float:
        """Default speed of sound in water, in m/s."""
        return _SPEED_OF_SOUND_IN_WATER

    def resize(self, bin_count: int, beam_count: int, per_beam_timestamps: bool) -> None:
        """Set the bin and beam counts, filling new entries with unknown values."""
        if per_beam_timestamps:
            self.timestamps = self.timestamps[:beam_count] + [
                Time() for _ in range(beam_count - len(self.timestamps))
            ]
        else:
            self.timestamps = []
        self.bearings = self.bearings[:beam_count] + [
            Angle.unknown() for _ in range(beam_count - len(self.bearings))
        ]
        total = beam_count * bin_count
        self.bins = self.bins[:total] + [math.nan] * (total - len(self.bins))
        self.bin_count = int(bin_count)
        self.beam_count = int(beam_count)

    @classmethod
    def from_single_beam(
        cls,
        time: Time,
        bin_duration: Time,
        beam_width: Angle,
        beam_height: Angle,
        bins: Sequence[float],
        bearing: Optional[Angle] = None,
        speed_of_sound: float = _SPEED_OF_SOUND_IN_WATER,
    ) -> "Sonar":
        """Build a sample that holds a single beam."""
        sample = cls(time, bin_duration, len(bins), beam_width, beam_height)
        sample.speed_of_sound = speed_of_sound
        sample.push_beam(bins, bearing if bearing is not None else Angle())
        return sample

    def bin_relative_start_time(self, bin_idx: int) -> Time:
        """Start of a bin relative to the acquisition time of its beam."""
        return self.bin_duration * bin_idx

    def beam_acquisition_start_time(self, beam: int) -> Time:
        """Acquisition start of a beam."""
        if not self.timestamps:
            return self.time
        return self.timestamps[beam]

    def bin_time(self, bin_idx: int, beam: int) -> Time:
        """Absolute start time of a bin."""
        return self.beam_acquisition_start_time(beam) + self.bin_relative_start_time(bin_idx)

    def bin_start_distance(self, bin_idx: int) -> float:
        """Distance of the start of a bin from the emission point, in metres."""
        return self.bin_relative_start_time(bin_idx).to_seconds() * self.speed_of_sound

    def set_regular_beam_bearings(self, start: Angle, interval: Angle) -> None:
        """Give the beams regularly spaced bearings from ``start``."""
        angle = Angle(start.rad)
        bearings = []
        for _ in range(self.beam_count):
            bearings.append(Angle(angle.rad))
            angle += interval
        self.bearings = bearings

    def push_beam(
        self,
        bins: Sequence[float],
        bearing: Optional[Angle] = None,
        beam_time: Optional[Time] = None,
    ) -> None:
        """Append the data of one beam, with its bearing and time if given.

        Raises ValueError when no time is given but the sample uses
        per-beam timestamps.
        """
        if beam_time is None:
            if self.timestamps:
                raise ValueError(
                    "cannot push a beam without a time: the structure uses per-beam timestamps"
                )
            self.push_beam_bins(bins)
        else:
            self.push_beam_bins(bins)
            self.timestamps.append(beam_time)
        if bearing is not None:
            self.bearings.append(bearing)

    def push_beam_bins(self, beam_bins: Iterable[float]) -> None:
        """Append the bins of one beam and count it."""
        values = [float(v) for v in beam_bins]
        if len(values) != self.bin_count:
            raise ValueError("push_beam: the provided beam does not match the expected bin_count")
        self.bins.extend(values)
        self.beam_count += 1

    def set_beam(
        self,
        beam: int,
        bins: Sequence[float],
        bearing: Optional[Angle] = None,
        beam_time: Optional[Time] = None,
    ) -> None:
        """Replace the data of one beam, with its bearing and time if given.

        Raises ValueError when no time is given but the sample uses
        per-beam timestamps.
        """
        if beam_time is None:
            if self.timestamps:
                raise ValueError(
                    "cannot set a beam without a time: the structure uses per-beam timestamps"
                )
            self.set_beam_bins(beam, bins)
        else:
            self.set_beam_bins(beam, bins)
            self.timestamps[beam] = beam_time
        if bearing is not None:
            self.bearings[beam] = bearing

    def _beam_slice(self, beam: int) -> slice:
        start = beam * self.bin_count
        if beam < 0 or start + self.bin_count > len(self.bins):
            raise IndexError(f"beam {beam} is out of range")
        return slice(start, start + self.bin_count)

    def set_beam_bins(self, beam: int, beam_bins: Iterable[float]) -> None:
        """Replace the bins of one beam."""
        values = [float(v) for v in beam_bins]
        if len(values) != self.bin_count:
            raise ValueError("set_beam: the provided beam does not match the expected bin_count")
        self.bins[self._beam_slice(beam)] = values

    def beam_bearing(self, beam: int) -> Angle:
        """Bearing of the centre of a beam; zero is the front of the device."""
        return self.bearings[beam]

    def beam_bins(self, beam: int) -> list[float]:
        """Copy of the bins of a beam."""
        return self.bins[self._beam_slice(beam)]

    def get_beam(self, beam: int) -> "Sonar":
        """Return a sample holding only the given beam."""
        return Sonar.from_single_beam(
            self.beam_acquisition_start_time(beam),
            self.bin_duration,
            self.beam_width,
            self.beam_height,
            self.beam_bins(beam),
            self.beam_bearing(beam),
            self.speed_of_sound,
        )

    def validate(self) -> None:
        """Raise ValueError if the counts and the stored data disagree."""
        if self.bin_count * self.beam_count != len(self.bins):
            raise ValueError(
                "the number of elements in 'bins' does not match the bin and beam counts"
            )
        if self.timestamps and len(self.timestamps) != self.beam_count:
            raise ValueError(
                "the number of elements in 'timestamps' does not match the beam count"
            )
        if len(self.bearings) != self.beam_count:
            raise ValueError(
                "the number of elements in 'bearings' does not match the beam count"
            )

    @classmethod
    def from_sonar_scan(cls, old: SonarScan, gain: float = 1.0) -> "Sonar":
        """Build a sample from a byte-valued sonar scan."""
        if not old.polar_coordinates:
            raise ValueError(
                "there's no such thing as a non-polar sonar device, fix your driver"
            )
        sample = cls(
            old.time,
            Time.from_seconds(float(old.spatial_resolution() / old.speed_of_sound)),
            old.number_of_bins,
            Angle(old.beamwidth_horizontal.rad),
            Angle(old.beamwidth_vertical.rad),
        )
        sample.timestamps = list(old.time_beams)
        sample.speed_of_sound = old.speed_of_sound
        sample.beam_count = old.number_of_beams

        scan = old.copy()
        if old.memory_layout_column:
            scan.toggle_memory_layout()
        total = sample.bin_count * sample.beam_count
        sample.bins = [value * 1.0 / 255 * gain for value in scan.data[:total]]
        sample.set_regular_beam_bearings(old.start_bearing, old.angular_resolution)
        sample.validate()
        return sample

    @classmethod
    def from_sonar_beam(cls, old: SonarBeam, gain: float = 1.0) -> "Sonar":
        """Build a single-beam sample from a byte-valued sonar beam."""
        sample = cls(
            old.time,
            Time.from_seconds(float(old.sampling_interval / 2.0)),
            len(old.beam),
            Angle.from_rad(old.beamwidth_horizontal),
            Angle.from_rad(old.beamwidth_vertical),
        )
        sample.speed_of_sound = old.speed_of_sound
        sample.push_beam([value * 1.0 / 255 * gain for value in old.beam], old.bearing)
        return sample

    def to_sonar_beam(self, gain: float = 1.0) -> SonarBeam:
        """Convert the first beam to byte values, normalising if any bin exceeds 1."""
        bearing = self.bearings[0]
        return SonarBeam(
            time=self.time,
            bearing=Angle(bearing.rad),
            sampling_interval=self.bin_duration.to_seconds() * 2.0,
            speed_of_sound=self.speed_of_sound,
            beamwidth_horizontal=self.beam_width.rad,
            beamwidth_vertical=self.beam_height.rad,
            beam=_scaled_bytes(self.bins, gain),
        )

    def to_sonar_scan(self, gain: float = 1.0) -> SonarScan:
        """Convert to a byte-valued scan, one beam per row."""
        start = self.bearings[0]
        scan = SonarScan()
        scan.time = self.time
        scan.time_beams = list(self.timestamps)
        scan.speed_of_sound = self.speed_of_sound
        scan.number_of_bins = self.bin_count
        scan.number_of_beams = self.beam_count
        scan.beamwidth_horizontal = Angle(self.beam_width.rad)
        scan.beamwidth_vertical = Angle(self.beam_height.rad)
        scan.start_bearing = Angle(start.rad)
        scan.angular_resolution = Angle.from_rad(self.beam_width.rad / self.beam_count)
        scan.memory_layout_column = False
        scan.polar_coordinates = True
        scan.data = _scaled_bytes(self.bins, gain)
        return scan

    def __repr__(self) -> str:
        return (
            f"Sonar(bin_count={self.bin_count}, beam_count={self.beam_count}, "
            f"speed_of_sound={self.speed_of_sound})"
        )