# reduced_color/__init__.py
"""
reduced_color package.

Purpose:
  Median-cut colour reduction with optional error-diffusion dithering.
  See reduce_colors.py for the CLI.

Public API:
  build_palette   : histogram + median cut -> palette sorted by usage.
  map_to_palette  : nearest-colour remap of a pixel buffer.
  dither_and_map  : remap with three-row error diffusion.
  build_histogram : distinct colours with occurrence counts.
  ColorSample     : colour value type; pack_argb / unpack_argb are the
                    canonical 32-bit ARGB packing.
  ErrorDiffusion  : per-channel diffusion engine.
  errors          : QuantizeError and its subclasses.

Quick start:
  from reduced_color import build_palette, map_to_palette
  palette = build_palette(rgba_bytes, 16)
  out = map_to_palette(rgba_bytes, palette)
"""

__version__ = "0.1.0"

from . import constants
from . import core_types
from . import errors
from . import utils

from .core_types import ColorSample, Palette, pack_argb, unpack_argb
from .diffusion import DiffusionState, ErrorDiffusion, dither_and_map
from .errors import (
    ChannelRangeError,
    ChannelStrideError,
    DiffusionStateError,
    EmptyBufferError,
    EmptyPaletteError,
    ImageShapeError,
    PaletteSizeError,
    QuantizeError,
)
from .histogram import build_histogram
from .nearest import find_closest_color, find_closest_index, map_to_palette
from .palette import build_palette

__all__ = [
    "__version__",
    "constants",
    "core_types",
    "errors",
    "utils",
    "ColorSample",
    "Palette",
    "pack_argb",
    "unpack_argb",
    "build_histogram",
    "build_palette",
    "find_closest_index",
    "find_closest_color",
    "map_to_palette",
    "DiffusionState",
    "ErrorDiffusion",
    "dither_and_map",
    "QuantizeError",
    "EmptyBufferError",
    "ChannelStrideError",
    "ChannelRangeError",
    "EmptyPaletteError",
    "PaletteSizeError",
    "ImageShapeError",
    "DiffusionStateError",
]
