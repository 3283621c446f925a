# reduced_color/pixels.py
from __future__ import annotations

"""
Pixel-buffer validation and normalisation.

Every public entry point funnels its input through as_pixel_rows(), so the
core only ever sees (N, C) uint8 rows. Buffers may be flat (bytes, bytearray,
1-D arrays, int sequences), (N, C) or (H, W, C).
"""

from typing import Any

import numpy as np

from .core_types import U8Rows
from .errors import ChannelRangeError, ChannelStrideError, EmptyBufferError

VALID_CHANNELS = (3, 4)


def _as_array(pixels: Any) -> np.ndarray:
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        return np.frombuffer(pixels, dtype=np.uint8)
    return np.asarray(pixels)


def as_pixel_rows(pixels: Any, channels: int = 4) -> U8Rows:
    """
    Validate a pixel buffer and return it as (N, channels) uint8 rows.

    Raises:
      ChannelStrideError: bad stride, or a flat length not divisible by it.
      EmptyBufferError  : no pixels.
      ChannelRangeError : non-integer data or values outside [0, 255].
    """
    if channels not in VALID_CHANNELS:
        raise ChannelStrideError(f"channels must be 3 or 4, got {channels}")

    arr = _as_array(pixels)
    if arr.size == 0:
        raise EmptyBufferError("pixel buffer is empty")

    if arr.ndim == 1:
        if arr.shape[0] % channels != 0:
            raise ChannelStrideError(
                f"buffer length {arr.shape[0]} is not a multiple of {channels}"
            )
        arr = arr.reshape(-1, channels)
    elif arr.ndim in (2, 3):
        if arr.shape[-1] != channels:
            raise ChannelStrideError(
                f"last axis has {arr.shape[-1]} channels, expected {channels}"
            )
        arr = arr.reshape(-1, channels)
    else:
        raise ChannelStrideError(f"unsupported buffer rank {arr.ndim}")

    if arr.dtype == np.uint8:
        return arr
    if arr.dtype.kind not in ("u", "i"):
        raise ChannelRangeError(f"integer channel values required, got {arr.dtype}")
    lo = int(arr.min())
    hi = int(arr.max())
    if lo < 0 or hi > 255:
        raise ChannelRangeError(f"channel values outside [0, 255]: min={lo} max={hi}")
    return arr.astype(np.uint8)


def to_rgba_rows(rows: U8Rows) -> U8Rows:
    """Promote (N, 3) rows to (N, 4) with opaque alpha; (N, 4) passes through."""
    if rows.shape[1] == 4:
        return rows
    out = np.full((rows.shape[0], 4), 255, dtype=np.uint8)
    out[:, :3] = rows
    return out


def restore_layout(rgba_rows: U8Rows, like: Any, channels: int = 4) -> np.ndarray:
    """
    Shape RGBA result rows back into the caller's layout.

    Flat inputs (bytes, sequences, 1-D arrays) come back as a flat uint8 array;
    2-D and 3-D arrays keep their shape. For channels == 3 alpha is dropped.
    """
    rows = rgba_rows[:, :channels]
    arr = _as_array(like)
    if arr.ndim in (2, 3):
        return np.ascontiguousarray(rows.reshape(arr.shape))
    return np.ascontiguousarray(rows.reshape(-1))


__all__ = ["VALID_CHANNELS", "as_pixel_rows", "to_rgba_rows", "restore_layout"]
