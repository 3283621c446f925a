# reduced_color/errors.py
"""
Exception types for precondition violations.

Degenerate but valid inputs (one colour, fewer colours than k_max, k_max <= 1)
are not errors and never raise.
"""
from __future__ import annotations


class QuantizeError(ValueError):
    """Base class for every error raised by reduced_color."""


class EmptyBufferError(QuantizeError):
    """The pixel buffer holds no pixels."""


class ChannelStrideError(QuantizeError):
    """Buffer length or last axis does not match the channel stride."""


class ChannelRangeError(QuantizeError):
    """A channel or packed value is outside its valid range."""


class EmptyPaletteError(QuantizeError):
    """A mapper was handed a palette with no entries."""


class PaletteSizeError(QuantizeError):
    """Requested palette size is negative."""


class ImageShapeError(QuantizeError):
    """Width does not evenly divide the pixel count."""


class DiffusionStateError(QuantizeError, RuntimeError):
    """Error-diffusion engine driven out of order."""


__all__ = [
    "QuantizeError",
    "EmptyBufferError",
    "ChannelStrideError",
    "ChannelRangeError",
    "EmptyPaletteError",
    "PaletteSizeError",
    "ImageShapeError",
    "DiffusionStateError",
]
