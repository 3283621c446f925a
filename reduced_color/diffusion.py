# reduced_color/diffusion.py
from __future__ import annotations

"""
Error diffusion over three rolling scanline accumulators.

- One ErrorDiffusion engine per channel; residuals are integers scaled by the
  kernel weights and recombined as error >> ERROR_SHIFT.
- Kernel is 5 wide and 3 rows deep, centred on the current column:
    row 1 (current) :           .   *   8   4
    row 2 (next)    :   2   4   8   4   2
    row 3 (after)   :   1   2   4   2   1
- Each row carries DIFFUSION_MARGIN spare columns per side, so writes at
  column offsets -2..+2 never need bounds checks.

Calling order per image: adjust -> propagate for every pixel in raster order,
advance_row between scanlines. Out-of-order calls raise DiffusionStateError.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .constants import (
    DIFFUSION_KERNEL,
    DIFFUSION_MARGIN,
    DITHER_CACHE_MAX_ENTRIES,
    ERROR_SHIFT,
)
from .core_types import Palette, RGBTuple, check_channel, clamp_channel
from .errors import DiffusionStateError, EmptyPaletteError, ImageShapeError
from .palette import palette_to_rows
from .pixels import as_pixel_rows, restore_layout, to_rgba_rows
from .utils import debug_log, key_value_pairs_to_string


def _kernel_rows() -> np.ndarray:
    """DIFFUSION_KERNEL laid out as (3, 2*margin + 1) weights, column 0 = offset -margin."""
    span = 2 * DIFFUSION_MARGIN + 1
    k = np.zeros((3, span), dtype=np.int64)
    for row, dx, w in DIFFUSION_KERNEL:
        k[row, dx + DIFFUSION_MARGIN] += w
    return k


_KERNEL = _kernel_rows()


class DiffusionState(Enum):
    IDLE = "idle"
    ROW_ACTIVE = "row-active"
    ROW_ADVANCING = "row-advancing"


class ErrorDiffusion:
    """Per-channel error accumulator for one image of a fixed width."""

    def __init__(self, width: Optional[int] = None) -> None:
        self.state = DiffusionState.IDLE
        self.width = 0
        self._cursor = DIFFUSION_MARGIN
        self._pending = False
        self._rows: List[np.ndarray] = []
        if width is not None:
            self.begin(width)

    def begin(self, width: int) -> None:
        """Allocate three zeroed rows for a new image and park the cursor."""
        if int(width) <= 0:
            raise ImageShapeError(f"width must be positive, got {width}")
        self.width = int(width)
        size = self.width + 2 * DIFFUSION_MARGIN
        self._rows = [np.zeros(size, dtype=np.int64) for _ in range(3)]
        self._cursor = DIFFUSION_MARGIN
        self._pending = False
        self.state = DiffusionState.ROW_ACTIVE

    @property
    def column(self) -> int:
        """Current image column (0-based)."""
        return self._cursor - DIFFUSION_MARGIN

    @property
    def error_rows(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Copies of the three accumulators (current, next, after next)."""
        return tuple(r.copy() for r in self._rows)  # type: ignore[return-value]

    def _require_active(self) -> None:
        if self.state is not DiffusionState.ROW_ACTIVE:
            raise DiffusionStateError(f"engine is {self.state.value}, call begin() first")

    def adjust(self, value: int) -> int:
        """Original channel value plus accumulated error, clamped to [0, 255]."""
        self._require_active()
        if self.column >= self.width:
            raise DiffusionStateError("scanline is full; call advance_row()")
        v = check_channel(value)
        stored = int(self._rows[0][self._cursor])
        self._pending = True
        return clamp_channel(v + (stored >> ERROR_SHIFT))

    def propagate(self, original: int, chosen: int) -> None:
        """Spread original - chosen over the kernel and step to the next column."""
        self._require_active()
        if not self._pending:
            raise DiffusionStateError("propagate() without a matching adjust()")
        residual = int(original) - int(chosen)
        lo = self._cursor - DIFFUSION_MARGIN
        hi = self._cursor + DIFFUSION_MARGIN + 1
        if residual:
            for row, weights in zip(self._rows, _KERNEL):
                row[lo:hi] += residual * weights
        self._cursor += 1
        self._pending = False

    def advance_row(self) -> None:
        """Rotate rows (2 -> 1, 3 -> 2, old 1 -> cleared 3) and rewind the cursor."""
        self._require_active()
        if self._pending:
            raise DiffusionStateError("advance_row() with an unpropagated adjust()")
        self.state = DiffusionState.ROW_ADVANCING
        first, second, third = self._rows
        first.fill(0)
        self._rows = [second, third, first]
        self._cursor = DIFFUSION_MARGIN
        self.state = DiffusionState.ROW_ACTIVE


def dither_and_map(
    pixels: Any,
    palette: Palette,
    width: int,
    channels: int = 4,
    *,
    debug: bool = False,
) -> np.ndarray:
    """
    Map pixels to the palette with error diffusion on R, G and B.

    Each pixel's adjusted colour picks the nearest palette entry (first on
    ties); the source-minus-chosen residual is pushed to later pixels.
    Output takes the entry's alpha and comes back in the caller's layout.
    """
    if len(palette) == 0:
        raise EmptyPaletteError("palette is empty")
    rows = to_rgba_rows(as_pixel_rows(pixels, channels))
    n = int(rows.shape[0])
    shape = np.shape(pixels)
    if len(shape) == 3 and width != shape[1]:
        raise ImageShapeError(f"width {width} does not match image width {shape[1]}")
    if width <= 0 or n % width != 0:
        raise ImageShapeError(f"{n} pixels do not form rows of width {width}")
    height = n // width

    pal_rows = palette_to_rows(palette)
    pal_rgb = pal_rows[:, :3].astype(np.int64)
    pal_list = pal_rgb.tolist()
    engines = [ErrorDiffusion(width) for _ in range(3)]
    src = rows[:, :3].tolist()
    out = np.empty_like(rows)

    cache: Dict[RGBTuple, int] = {}
    cache_hits = 0

    for y in range(height):
        if y:
            for engine in engines:
                engine.advance_row()
        base = y * width
        for x in range(width):
            i = base + x
            r, g, b = src[i]
            adjusted = (engines[0].adjust(r), engines[1].adjust(g), engines[2].adjust(b))

            j = cache.get(adjusted)
            if j is None:
                diff = pal_rgb - np.array(adjusted, dtype=np.int64)
                j = int(np.argmin(np.sum(diff * diff, axis=1)))
                if len(cache) >= DITHER_CACHE_MAX_ENTRIES:
                    cache.clear()
                cache[adjusted] = j
            else:
                cache_hits += 1

            chosen = pal_list[j]
            for engine, v, c in zip(engines, src[i], chosen):
                engine.propagate(v, c)
            out[i] = pal_rows[j]

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Dither size", f"{width}x{height}"),
                    ("Palette", len(palette)),
                    ("Cache hits", cache_hits),
                ]
            )
        )
    return restore_layout(out, pixels, channels)


__all__ = ["DiffusionState", "ErrorDiffusion", "dither_and_map"]
