"""Image frames: raw or compressed pixel data with metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Optional, Union

from sonarbase.time import Time

__all__ = [
    "FrameSize",
    "FrameMode",
    "FrameStatus",
    "FrameAttribute",
    "Frame",
    "FramePair",
    "channel_count_for_mode",
    "to_frame_mode",
]


@dataclass
class FrameSize:
    """Width and height of an image, in pixels."""

    width: int = 0
    height: int = 0


class FrameMode(IntEnum):
    """Colour space or encoding of a frame."""

    UNDEFINED = 0
    GRAYSCALE = 1
    RGB = 2
    UYVY = 3
    BGR = 4
    RGB32 = 5
    RAW_MODES = 128
    BAYER = 128
    BAYER_RGGB = 129
    BAYER_GRBG = 130
    BAYER_BGGR = 131
    BAYER_GBRG = 132
    # Compressed images have no relation between pixel and byte counts.
    COMPRESSED_MODES = 256
    PJPG = 257
    JPEG = 258
    PNG = 259


class FrameStatus(IntEnum):
    """Validity of the frame content."""

    EMPTY = 0
    VALID = 1
    INVALID = 2


@dataclass
class FrameAttribute:
    """A named piece of metadata, stored as text."""

    name: str = ""
    data: str = ""


_BAYER_MODES = frozenset(
    {
        FrameMode.BAYER,
        FrameMode.BAYER_RGGB,
        FrameMode.BAYER_GRBG,
        FrameMode.BAYER_BGGR,
        FrameMode.BAYER_GBRG,
    }
)

_CHANNELS = {
    FrameMode.UNDEFINED: 0,
    FrameMode.BAYER: 1,
    FrameMode.BAYER_RGGB: 1,
    FrameMode.BAYER_BGGR: 1,
    FrameMode.BAYER_GBRG: 1,
    FrameMode.BAYER_GRBG: 1,
    FrameMode.GRAYSCALE: 1,
    FrameMode.UYVY: 1,
    FrameMode.RGB: 3,
    FrameMode.BGR: 3,
    FrameMode.RGB32: 4,
    FrameMode.PJPG: 1,
    FrameMode.JPEG: 1,
    FrameMode.PNG: 1,
}

_MODE_NAMES = {
    "MODE_UNDEFINED": FrameMode.UNDEFINED,
    "MODE_GRAYSCALE": FrameMode.GRAYSCALE,
    "MODE_RGB": FrameMode.RGB,
    "MODE_BGR": FrameMode.BGR,
    "MODE_UYVY": FrameMode.UYVY,
    "RAW_MODES": FrameMode.RAW_MODES,
    "MODE_BAYER": FrameMode.BAYER,
    "MODE_BAYER_RGGB": FrameMode.BAYER_RGGB,
    "MODE_BAYER_GRBG": FrameMode.BAYER_GRBG,
    "MODE_BAYER_BGGR": FrameMode.BAYER_BGGR,
    "MODE_BAYER_GBRG": FrameMode.BAYER_GBRG,
    "MODE_RGB32": FrameMode.RGB32,
    "COMPRESSED_MODES": FrameMode.COMPRESSED_MODES,
    "MODE_PJPG": FrameMode.PJPG,
    "MODE_JPEG": FrameMode.JPEG,
    "MODE_PNG": FrameMode.PNG,
}


def channel_count_for_mode(mode: Union[FrameMode, int]) -> int:
    """Number of channels per pixel for a frame mode.

    Raises ValueError for a mode without a channel count.
    """
    try:
        return _CHANNELS[FrameMode(mode)]
    except (KeyError, ValueError):
        raise ValueError(f"unknown frame mode: {mode!r}") from None


def to_frame_mode(name: str) -> FrameMode:
    """Map a mode name such as ``"MODE_RGB"`` to its mode; unknown names give UNDEFINED."""
    return _MODE_NAMES.get(name, FrameMode.UNDEFINED)


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        return format(value, "g")
    return str(value)


def _parse_value(text: str, kind: type) -> Any:
    tokens = text.split()
    if not tokens:
        return kind()
    token = tokens[0]
    try:
        if kind is bool:
            return int(token) != 0
        return kind(token)
    except ValueError:
        return kind()


def _resized(data: bytearray, size: int) -> bytearray:
    if len(data) >= size:
        return bytearray(data[:size])
    return bytearray(data) + bytearray(size - len(data))


class Frame:
    """A single image frame.

    Without a width and height the frame is empty with an undefined mode;
    otherwise it is initialised as by :meth:`init`.
    """

    def __init__(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        depth: int = 8,
        mode: FrameMode = FrameMode.GRAYSCALE,
        val: int = 0,
        size_in_bytes: int = 0,
    ) -> None:
        self.time = Time()
        self.received_time = Time()
        self.image = bytearray()
        self.attributes: list[FrameAttribute] = []
        self.size = FrameSize()
        self.data_depth = 0
        self.pixel_size = 0
        self._row_size = 0
        self.frame_mode = FrameMode.UNDEFINED
        self.frame_status = FrameStatus.EMPTY
        if width is None and height is None:
            self.set_data_depth(0)
            self.reset()
        else:
            self.init(width or 0, height or 0, depth, mode, val, size_in_bytes)

    def init(
        self,
        width: int,
        height: int,
        depth: int = 8,
        mode: FrameMode = FrameMode.GRAYSCALE,
        val: int = 0,
        size_in_bytes: int = 0,
    ) -> None:
        """Set the geometry and mode, size the image and fill it with ``val``.

        ``val`` is taken modulo 256. Raises ValueError for a zero depth on a
        non-empty frame or an image size that does not fit the geometry.
        """
        mode = FrameMode(mode)
        if (
            self.size.height != height
            or self.size.width != width
            or self.frame_mode != mode
            or self.data_depth != depth
            or (size_in_bytes != 0 and size_in_bytes != len(self.image))
        ):
            if depth == 0 and (height != 0 or width != 0):
                raise ValueError("Frame.init: cannot initialize frame with depth = 0")
            self.frame_mode = mode
            self.size = FrameSize(width, height)
            self.set_data_depth(depth)
        if not size_in_bytes:
            size_in_bytes = self.pixel_size * self.pixel_count()
        self.validate_image_size(size_in_bytes)
        self.image = _resized(self.image, size_in_bytes)
        self.reset(val % 256)

    def init_from(self, other: "Frame", copy_image: bool = True) -> None:
        """Take over the geometry and metadata of ``other``, and its image if asked."""
        self.init(
            other.width(),
            other.height(),
            other.data_depth,
            other.frame_mode,
            -1,
            other.number_of_bytes(),
        )
        if copy_image:
            self.set_image(other.image)
        self.copy_image_independent_attributes(other)

    def copy_image_independent_attributes(self, other: "Frame") -> None:
        """Copy attributes, times and status of ``other``, overwriting equal names."""
        for attribute in other.attributes:
            self.set_attribute(attribute.name, attribute.data)
        self.time = other.time
        self.received_time = other.received_time
        self.frame_status = other.frame_status

    def reset(self, val: int = 0) -> None:
        """Clear time, status and attributes; fill the image unless ``val`` is negative."""
        self.time = Time()
        if self.image and val >= 0:
            self.image = bytearray([val % 256]) * len(self.image)
        self.frame_status = FrameStatus.EMPTY
        self.attributes.clear()

    def swap(self, other: "Frame") -> None:
        """Exchange the whole content of this frame with ``other``."""
        self.__dict__, other.__dict__ = other.__dict__, self.__dict__

    def is_hdr(self) -> bool:
        """Return True if the ``hdr`` attribute is set and true."""
        return self.has_attribute("hdr") and self.get_attribute("hdr", bool)

    def set_hdr(self, value: bool) -> None:
        """Mark the frame as HDR (the attribute is always set to true)."""
        self.set_attribute("hdr", True)

    def is_compressed(self) -> bool:
        """Return True for compressed modes."""
        return self.frame_mode >= FrameMode.COMPRESSED_MODES

    def is_grayscale(self) -> bool:
        """Return True for grayscale frames."""
        return self.frame_mode == FrameMode.GRAYSCALE

    def is_rgb(self) -> bool:
        """Return True for RGB frames."""
        return self.frame_mode == FrameMode.RGB

    def is_bayer(self) -> bool:
        """Return True for any Bayer pattern mode."""
        return self.frame_mode in _BAYER_MODES

    def channel_count(self) -> int:
        """Number of channels per pixel of this frame."""
        return channel_count_for_mode(self.frame_mode)

    def row_size(self) -> int:
        """Size of one row in bytes; raises RuntimeError for compressed frames."""
        if self.is_compressed():
            raise RuntimeError("Frame.row_size: there is no row size for a compressed image")
        return self._row_size

    def number_of_bytes(self) -> int:
        """Total size of the image in bytes."""
        return len(self.image)

    def pixel_count(self) -> int:
        """Number of pixels, width times height."""
        return self.size.width * self.size.height

    def _update_sizes(self) -> None:
        component_size = (self.data_depth + 7) // 8
        self.pixel_size = channel_count_for_mode(self.frame_mode) * component_size
        self._row_size = 0 if self.is_compressed() else self.pixel_size * self.width()

    def set_data_depth(self, value: int) -> None:
        """Set the effective bits per channel and update pixel and row sizes."""
        self.data_depth = value
        self._update_sizes()

    def set_frame_mode(self, mode: FrameMode) -> None:
        """Set the mode and update pixel and row sizes."""
        self.frame_mode = FrameMode(mode)
        self._update_sizes()

    def width(self) -> int:
        """Image width in pixels."""
        return self.size.width

    def height(self) -> int:
        """Image height in pixels."""
        return self.size.height

    def validate_image_size(self, size: int) -> None:
        """Raise ValueError if ``size`` bytes do not fit an uncompressed frame."""
        expected = self.pixel_size * self.pixel_count()
        if not self.is_compressed() and size != expected:
            raise ValueError(
                f"Frame: image size mismatch (getting {size} bytes "
                f"but expecting {expected} bytes)"
            )

    def set_image(self, data: Union[bytes, bytearray, list[int]]) -> None:
        """Replace the image bytes after checking their size."""
        new_image = bytearray(data)
        self.validate_image_size(len(new_image))
        self.image = new_image

    def has_attribute(self, name: str) -> bool:
        """Return True if an attribute of that name exists."""
        return any(attribute.name == name for attribute in self.attributes)

    def get_attribute(self, name: str, kind: type = str) -> Any:
        """Read an attribute converted to ``kind``; missing or unreadable gives ``kind()``."""
        for attribute in self.attributes:
            if attribute.name == name:
                return _parse_value(attribute.data, kind)
        return kind()

    def set_attribute(self, name: str, value: Any) -> None:
        """Store ``value`` as text under ``name``, replacing an existing entry."""
        text = _format_value(value)
        for attribute in self.attributes:
            if attribute.name == name:
                attribute.data = text
                return
        self.attributes.append(FrameAttribute(name, text))

    def delete_attribute(self, name: str) -> bool:
        """Remove the attribute of that name; return True if one was removed."""
        for index, attribute in enumerate(self.attributes):
            if attribute.name == name:
                del self.attributes[index]
                return True
        return False

    def at(self, column: int, row: int) -> memoryview:
        """Writable view of the bytes of one pixel.

        Raises IndexError outside the image.
        """
        if not (0 <= column < self.size.width and 0 <= row < self.size.height):
            raise IndexError("out of index")
        offset = row * self.row_size() + column * self.pixel_size
        return memoryview(self.image)[offset:offset + self.pixel_size]

    def __repr__(self) -> str:
        return (
            f"Frame(width={self.size.width}, height={self.size.height}, "
            f"depth={self.data_depth}, mode={self.frame_mode.name})"
        )


@dataclass
class FramePair:
    """Two frames taken together, such as a stereo pair."""

    time: Time = field(default_factory=Time)
    first: Frame = field(default_factory=Frame)
    second: Frame = field(default_factory=Frame)
    id: int = 0