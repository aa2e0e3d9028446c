import time

import pytest

from sonarbase.time import Resolution, Time


@pytest.fixture
def sample():
    return Time.from_time_values(2021, 6, 15, 12, 30, 45, 123, 456)


def test_default_is_null():
    assert Time().is_null()
    assert not Time.from_microseconds(1).is_null()


def test_from_seconds_float_round_trip():
    assert Time.from_seconds(2.25).to_seconds() == 2.25


def test_from_seconds_int_with_microseconds():
    t = Time.from_seconds(3, 250)
    assert t - Time.from_seconds(3) == Time.from_microseconds(250)


def test_from_milliseconds_round_trip():
    assert Time.from_milliseconds(5).to_milliseconds() == 5
    assert Time.from_seconds(7).to_seconds() == 7


def test_addition_and_subtraction_invert():
    a = Time.from_microseconds(123456789)
    b = Time.from_seconds(42)
    assert (a + b) - b == a
    assert a < a + b
    assert a + b > a
    assert a <= a and a >= a


def test_multiplication_consistent_with_addition():
    t = Time.from_microseconds(987654)
    assert t * 2 == t + t


def test_division_truncates_toward_zero():
    assert Time.from_microseconds(-7) / 2 == Time.from_microseconds(-3)
    assert Time.from_microseconds(7) / 2 == Time.from_microseconds(3)


@pytest.mark.parametrize("us", [0, 1, 999_999, 1_000_000, 5_432_100, -1, -2_500_000])
def test_timeval_recombines(us):
    tv = Time.from_microseconds(us).to_timeval()
    assert tv.seconds * 1_000_000 + tv.microseconds == us
    assert abs(tv.microseconds) < 1_000_000
    if us < 0:
        assert tv.microseconds <= 0


def test_str_format():
    assert str(Time.from_microseconds(1_002_003)) == "1.002.003"


def test_to_string_microseconds_round_trip(sample):
    text = sample.to_string()
    assert text.endswith(":123456")
    assert Time.from_string(text) == sample


def test_to_string_milliseconds_round_trip(sample):
    text = sample.to_string(Resolution.MILLISECONDS)
    assert text.endswith(":123")
    parsed = Time.from_string(text, Resolution.MILLISECONDS)
    assert parsed == sample - Time.from_microseconds(456)


def test_to_string_seconds_is_prefix(sample):
    seconds_text = sample.to_string(Resolution.SECONDS)
    assert sample.to_string().startswith(seconds_text + ":")
    assert seconds_text == time.strftime("%Y%m%d-%H:%M:%S", time.localtime(sample.to_timeval().seconds))


def test_from_string_matches_time_values():
    parsed = Time.from_string("20210615-12:30:45:123456")
    assert parsed == Time.from_time_values(2021, 6, 15, 12, 30, 45, 123, 456)


def test_from_string_seconds_resolution():
    parsed = Time.from_string("20210615-12:30:45", Resolution.SECONDS)
    assert parsed == Time.from_time_values(2021, 6, 15, 12, 30, 45, 0, 0)


def test_from_string_custom_format():
    parsed = Time.from_string("2021-06-15 12:30:45", Resolution.SECONDS, "%Y-%m-%d %H:%M:%S")
    assert parsed == Time.from_time_values(2021, 6, 15, 12, 30, 45, 0, 0)


@pytest.mark.parametrize(
    "text, resolution",
    [
        ("20210615-12:30:45:12", Resolution.MICROSECONDS),
        ("20210615-12:30:45:123", Resolution.MICROSECONDS),
        ("20210615-12:30:45:1234", Resolution.MILLISECONDS),
    ],
)
def test_from_string_rejects_bad_subsecond_field(text, resolution):
    with pytest.raises(ValueError):
        Time.from_string(text, resolution)


def test_from_string_rejects_mismatching_format():
    with pytest.raises(ValueError):
        Time.from_string("garbage:123456")


def test_invalid_resolution_rejected(sample):
    with pytest.raises(ValueError):
        sample.to_string(7)


def test_now_is_current():
    before = time.time()
    now = Time.now()
    after = time.time()
    assert before - 1.0 <= now.to_seconds() <= after + 1.0