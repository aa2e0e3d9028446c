import pytest

from sonarbase.frame import (
    Frame,
    FrameMode,
    FramePair,
    FrameSize,
    FrameStatus,
    channel_count_for_mode,
    to_frame_mode,
)
from sonarbase.time import Time


def test_default_frame_is_empty():
    frame = Frame()
    assert frame.number_of_bytes() == 0
    assert frame.frame_mode == FrameMode.UNDEFINED
    assert frame.frame_status == FrameStatus.EMPTY
    assert frame.pixel_size == 0
    assert frame.pixel_count() == 0


def test_grayscale_frame_sizes():
    frame = Frame(4, 3)
    assert frame.width() == 4
    assert frame.height() == 3
    assert frame.pixel_size == 1
    assert frame.row_size() == 4
    assert frame.number_of_bytes() == frame.pixel_count() * frame.pixel_size


def test_rgb_frame_invariants():
    frame = Frame(5, 2, 16, FrameMode.RGB)
    assert frame.channel_count() == 3
    assert frame.row_size() == frame.pixel_size * frame.width()
    assert frame.number_of_bytes() == frame.row_size() * frame.height()


def test_init_fills_with_value():
    frame = Frame(3, 3, 8, FrameMode.GRAYSCALE, 7)
    assert set(frame.image) == {7}


def test_zero_depth_rejected():
    with pytest.raises(ValueError):
        Frame(2, 2, 0)


def test_compressed_frame_accepts_any_size():
    frame = Frame(10, 10, 8, FrameMode.JPEG, 0, 57)
    assert frame.is_compressed()
    assert frame.number_of_bytes() == 57
    with pytest.raises(RuntimeError):
        frame.row_size()


def test_set_image_checks_size():
    frame = Frame(2, 2)
    with pytest.raises(ValueError):
        frame.set_image(b"\x01\x02\x03")
    frame.set_image(b"\x01\x02\x03\x04")
    assert frame.image == bytearray(b"\x01\x02\x03\x04")


def test_validate_image_size():
    frame = Frame(2, 3, 8, FrameMode.RGB)
    frame.validate_image_size(frame.pixel_count() * frame.pixel_size)
    with pytest.raises(ValueError):
        frame.validate_image_size(1)


def test_attributes_set_get_delete():
    frame = Frame(1, 1)
    frame.set_attribute("gain", 12)
    frame.set_attribute("gain", 42)
    assert len(frame.attributes) == 1
    assert frame.has_attribute("gain")
    assert frame.get_attribute("gain", int) == 42
    assert frame.get_attribute("gain") == "42"
    assert frame.delete_attribute("gain") is True
    assert frame.delete_attribute("gain") is False
    assert frame.has_attribute("gain") is False


def test_missing_attribute_gives_default():
    frame = Frame(1, 1)
    assert frame.get_attribute("nothing", int) == 0
    assert frame.get_attribute("nothing") == ""


def test_float_attribute_round_trip():
    frame = Frame(1, 1)
    frame.set_attribute("exposure", 0.25)
    assert frame.get_attribute("exposure", float) == 0.25


def test_hdr_flag():
    frame = Frame(1, 1)
    assert frame.is_hdr() is False
    frame.set_hdr(True)
    assert frame.is_hdr() is True
    assert frame.get_attribute("hdr") == "1"


@pytest.mark.parametrize(
    "name, mode",
    [
        ("MODE_RGB", FrameMode.RGB),
        ("MODE_UYVY", FrameMode.UYVY),
        ("COMPRESSED_MODES", FrameMode.COMPRESSED_MODES),
        ("MODE_PNG", FrameMode.PNG),
        ("MODE_BAYER_GBRG", FrameMode.BAYER_GBRG),
        ("something", FrameMode.UNDEFINED),
    ],
)
def test_to_frame_mode(name, mode):
    assert to_frame_mode(name) == mode


@pytest.mark.parametrize(
    "mode, channels",
    [
        (FrameMode.UNDEFINED, 0),
        (FrameMode.GRAYSCALE, 1),
        (FrameMode.RGB, 3),
        (FrameMode.BGR, 3),
        (FrameMode.RGB32, 4),
        (FrameMode.BAYER_GRBG, 1),
        (FrameMode.JPEG, 1),
    ],
)
def test_channel_count_for_mode(mode, channels):
    assert channel_count_for_mode(mode) == channels


def test_channel_count_unknown_mode_raises():
    with pytest.raises(ValueError):
        channel_count_for_mode(FrameMode.COMPRESSED_MODES)


def test_mode_predicates():
    assert Frame(1, 1, 8, FrameMode.BAYER_RGGB).is_bayer()
    assert Frame(1, 1, 8, FrameMode.RGB).is_rgb()
    assert Frame(1, 1).is_grayscale()
    assert not Frame(1, 1).is_compressed()


def test_set_frame_mode_updates_sizes():
    frame = Frame(4, 1)
    frame.set_frame_mode(FrameMode.RGB32)
    assert frame.pixel_size == channel_count_for_mode(FrameMode.RGB32)
    assert frame.row_size() == frame.pixel_size * 4


def test_swap():
    a = Frame(2, 2, 8, FrameMode.GRAYSCALE, 1)
    b = Frame(3, 1, 8, FrameMode.RGB, 2)
    a.swap(b)
    assert a.frame_mode == FrameMode.RGB
    assert set(a.image) == {2}
    assert b.size == FrameSize(2, 2)
    assert set(b.image) == {1}


def test_init_from_copies_image_and_metadata():
    source = Frame(2, 2)
    source.set_image(b"\x0a\x0b\x0c\x0d")
    source.set_attribute("name", "left")
    source.time = Time.from_seconds(5)
    source.frame_status = FrameStatus.VALID
    target = Frame()
    target.init_from(source)
    assert target.image == source.image
    assert target.get_attribute("name") == "left"
    assert target.time == source.time
    assert target.frame_status == FrameStatus.VALID


def test_init_from_without_image_keeps_size():
    source = Frame(3, 2, 8, FrameMode.RGB)
    target = Frame()
    target.init_from(source, False)
    assert target.number_of_bytes() == source.number_of_bytes()
    assert target.frame_mode == FrameMode.RGB


def test_reset_negative_keeps_image():
    frame = Frame(2, 1, 8, FrameMode.GRAYSCALE, 9)
    frame.set_attribute("a", 1)
    frame.frame_status = FrameStatus.VALID
    frame.reset(-1)
    assert set(frame.image) == {9}
    assert frame.attributes == []
    assert frame.frame_status == FrameStatus.EMPTY


def test_at_writes_pixel():
    frame = Frame(3, 2, 8, FrameMode.RGB)
    view = frame.at(1, 1)
    view[:] = b"\x01\x02\x03"
    view.release()
    offset = frame.row_size() + frame.pixel_size
    assert frame.image[offset:offset + 3] == bytearray(b"\x01\x02\x03")


def test_at_out_of_range():
    frame = Frame(3, 2)
    with pytest.raises(IndexError):
        frame.at(3, 0)
    with pytest.raises(IndexError):
        frame.at(0, 2)


def test_frame_pair_defaults():
    pair = FramePair()
    assert pair.id == 0
    assert pair.time.is_null()
    assert pair.first.number_of_bytes() == 0
    assert pair.first is not pair.second