# reduced_color/core_types.py
from __future__ import annotations

"""
Core type aliases, the ColorSample value object, and channel packing helpers.

Canonical packing is 32-bit ARGB: alpha<<24 | red<<16 | green<<8 | blue.
It is the only packing exposed; RGB input is promoted to alpha=255 before
anything is packed.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from .errors import ChannelRangeError

# Basic aliases

RGBTuple = Tuple[int, int, int]
RGBATuple = Tuple[int, int, int, int]
ARGBTuple = Tuple[int, int, int, int]
HexStr = str

U8Rows = NDArray[np.uint8]  # (N, C) pixel rows, C in (3, 4)
U8Image = NDArray[np.uint8]  # (H, W, 4)
PackedRows = NDArray[np.uint32]  # (N,) packed ARGB
Arena = NDArray[np.int64]  # (N, 5) columns R, G, B, A, COUNT

MAX_PACKED = 0xFFFFFFFF


# Small helpers


def check_channel(value: int, name: str = "channel") -> int:
    """Return value as int, or raise ChannelRangeError if outside [0, 255]."""
    v = int(value)
    if v < 0 or v > 255:
        raise ChannelRangeError(f"{name} out of range [0, 255]: {value}")
    return v


def clamp_channel(value: int) -> int:
    """Clamp an integer to [0, 255]."""
    return 0 if value < 0 else 255 if value > 255 else int(value)


def pack_argb(alpha: int, red: int, green: int, blue: int) -> int:
    """Pack four channels into a 32-bit ARGB integer."""
    return (
        check_channel(alpha, "alpha") << 24
        | check_channel(red, "red") << 16
        | check_channel(green, "green") << 8
        | check_channel(blue, "blue")
    )


def unpack_argb(value: int) -> ARGBTuple:
    """Unpack a 32-bit ARGB integer into (alpha, red, green, blue)."""
    v = int(value)
    if v < 0 or v > MAX_PACKED:
        raise ChannelRangeError(f"packed value out of range [0, 2^32): {value}")
    return ((v >> 24) & 0xFF, (v >> 16) & 0xFF, (v >> 8) & 0xFF, v & 0xFF)


def pack_rows(rgba_rows: U8Rows) -> PackedRows:
    """Vectorised pack of (N, 4) RGBA uint8 rows into (N,) uint32 ARGB."""
    rows = rgba_rows.astype(np.uint32, copy=False)
    return (
        (rows[:, 3] << np.uint32(24))
        | (rows[:, 0] << np.uint32(16))
        | (rows[:, 1] << np.uint32(8))
        | rows[:, 2]
    ).astype(np.uint32, copy=False)


def unpack_rows(packed: PackedRows) -> U8Rows:
    """Vectorised unpack of (N,) uint32 ARGB into (N, 4) RGBA uint8 rows."""
    p = np.asarray(packed, dtype=np.uint32).reshape(-1)
    out = np.empty((p.shape[0], 4), dtype=np.uint8)
    out[:, 0] = (p >> np.uint32(16)) & np.uint32(0xFF)
    out[:, 1] = (p >> np.uint32(8)) & np.uint32(0xFF)
    out[:, 2] = p & np.uint32(0xFF)
    out[:, 3] = (p >> np.uint32(24)) & np.uint32(0xFF)
    return out


def rgb_to_hex(rgb: Sequence[int]) -> HexStr:
    """RGB(A) sequence to lowercase hex string '#rrggbb'."""
    return f"#{int(rgb[0]):02x}{int(rgb[1]):02x}{int(rgb[2]):02x}"


# Value objects


@dataclass(frozen=True)
class ColorSample:
    """
    One colour plus its usage count.

    Identity (eq / hash) is the channel tuple only; count is carried along but
    never compared, so histogram dedup and palette lookups ignore it.
    """

    red: int
    green: int
    blue: int
    alpha: int = 255
    count: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue", "alpha"):
            object.__setattr__(self, name, check_channel(getattr(self, name), name))
        if int(self.count) < 0:
            raise ChannelRangeError(f"count must be non-negative: {self.count}")
        object.__setattr__(self, "count", int(self.count))

    @property
    def rgb(self) -> RGBTuple:
        return (self.red, self.green, self.blue)

    @property
    def rgba(self) -> RGBATuple:
        return (self.red, self.green, self.blue, self.alpha)

    def to_argb(self) -> int:
        return pack_argb(self.alpha, self.red, self.green, self.blue)

    @classmethod
    def from_argb(cls, value: int, count: int = 0) -> "ColorSample":
        a, r, g, b = unpack_argb(value)
        return cls(r, g, b, a, count)

    def distance2(self, other: "ColorSample") -> int:
        """Squared Euclidean distance over (r, g, b). Alpha is ignored."""
        dr = self.red - other.red
        dg = self.green - other.green
        db = self.blue - other.blue
        return dr * dr + dg * dg + db * db

    def with_count(self, count: int) -> "ColorSample":
        return ColorSample(self.red, self.green, self.blue, self.alpha, count)


Palette = List[ColorSample]


__all__ = [
    "RGBTuple",
    "RGBATuple",
    "ARGBTuple",
    "HexStr",
    "U8Rows",
    "U8Image",
    "PackedRows",
    "Arena",
    "MAX_PACKED",
    "check_channel",
    "clamp_channel",
    "pack_argb",
    "unpack_argb",
    "pack_rows",
    "unpack_rows",
    "rgb_to_hex",
    "ColorSample",
    "Palette",
]
