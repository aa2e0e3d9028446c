import math

import pytest

from sonarbase.angle import Angle
from sonarbase.sonar_beam import SonarBeam
from sonarbase.time import Time


def make_beam():
    return SonarBeam(
        time=Time.from_seconds(10),
        bearing=Angle.from_deg(30),
        sampling_interval=0.002,
        speed_of_sound=1500.0,
        beamwidth_horizontal=0.1,
        beamwidth_vertical=0.5,
        beam=[1, 2, 3, 255],
    )


def test_defaults_are_unset():
    beam = SonarBeam()
    assert math.isnan(beam.sampling_interval)
    assert math.isnan(beam.speed_of_sound)
    assert math.isnan(beam.beamwidth_horizontal)
    assert math.isnan(beam.beamwidth_vertical)
    assert math.isnan(beam.bearing.rad)
    assert beam.time.is_null()
    assert beam.beam == bytearray()


def test_beam_values_stored_as_bytes():
    beam = make_beam()
    assert list(beam.beam) == [1, 2, 3, 255]


def test_beam_rejects_out_of_range_values():
    with pytest.raises(ValueError):
        SonarBeam(beam=[256])


def test_spatial_resolution():
    assert make_beam().spatial_resolution() == pytest.approx(1.5)


def test_spatial_resolution_unset_is_nan():
    assert str(float(SonarBeam().spatial_resolution())) == "nan"


def test_copy_is_equal_but_independent():
    original = make_beam()
    clone = original.copy()
    assert clone == original
    clone.beam[0] = 99
    clone.bearing.flip()
    assert original.beam[0] == 1
    assert original.bearing.is_approx(Angle.from_deg(30))
    assert clone != original


def test_swap_exchanges_content():
    first = make_beam()
    second = SonarBeam(
        time=Time.from_seconds(20),
        bearing=Angle.from_deg(-45),
        sampling_interval=0.004,
        speed_of_sound=1400.0,
        beamwidth_horizontal=0.2,
        beamwidth_vertical=0.6,
        beam=[9, 8],
    )
    first_copy = first.copy()
    second_copy = second.copy()
    first.swap(second)
    assert first == second_copy
    assert second == first_copy
    assert list(first.beam) == [9, 8]
    assert second.time == Time.from_seconds(10)