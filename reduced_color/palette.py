# reduced_color/palette.py
from __future__ import annotations

"""
Palette extraction.

Exports:
  build_palette(pixels, k_max=DEFAULT_K_MAX, channels=4) -> list[ColorSample]
    Histogram -> median-cut boxes -> one weighted-average colour per box,
    sorted by descending usage.
  find_representative_colors(samples, k_max)
  average_color(box, arena)
  sort_by_usage(palette)
  palette_to_rows(palette)
"""

from typing import Any, List

import numpy as np

from .constants import COL_ALPHA, COL_BLUE, COL_COUNT, COL_GREEN, COL_RED, DEFAULT_K_MAX
from .core_types import Arena, ColorSample, Palette, U8Rows, clamp_channel
from .errors import EmptyBufferError, PaletteSizeError
from .histogram import build_histogram
from .partition import ColorBox, arena_box, find_box_to_split, samples_to_arena
from .utils import debug_log, key_value_pairs_to_string


def _round_half_up(total: int, n: int) -> int:
    return clamp_channel((2 * total + n) // (2 * n))


def average_color(box: ColorBox, arena: Arena) -> ColorSample:
    """Count-weighted mean of the box's rows, each channel rounded half up."""
    seg = arena[box.lower : box.upper]
    weights = seg[:, COL_COUNT]
    n = int(weights.sum())
    if n <= 0:
        raise EmptyBufferError("cannot average an empty colour box")
    sums = [
        int((seg[:, col] * weights).sum())
        for col in (COL_RED, COL_GREEN, COL_BLUE, COL_ALPHA)
    ]
    r, g, b, a = (_round_half_up(s, n) for s in sums)
    return ColorSample(r, g, b, a, n)


def average_colors(boxes: List[ColorBox], arena: Arena) -> Palette:
    return [average_color(b, arena) for b in boxes]


def find_representative_colors(
    samples: List[ColorSample], k_max: int, *, debug: bool = False
) -> Palette:
    """
    Reduce a histogram to at most max(k_max, 1) colours (unsorted).

    Few-colour inputs are returned as-is; k_max <= 1 collapses everything into
    one averaged entry without splitting.
    """
    if k_max < 0:
        raise PaletteSizeError(f"k_max must be >= 0, got {k_max}")
    if not samples:
        raise EmptyBufferError("histogram is empty")

    if len(samples) <= k_max:
        if debug:
            debug_log(f"median cut: {len(samples)} colours <= k_max={k_max}, no split")
        return list(samples)

    arena = samples_to_arena(samples)
    boxes = [arena_box(arena)]
    if k_max <= 1:
        return average_colors(boxes, arena)

    while len(boxes) < k_max:
        box = find_box_to_split(boxes)
        if box is None:
            break
        new_box = box.split(arena)
        if new_box is not None:
            boxes.append(new_box)

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Histogram colours", len(samples)),
                    ("k_max", k_max),
                    ("Boxes", len(boxes)),
                    ("Max level", max(b.level for b in boxes)),
                ]
            )
        )
    return average_colors(boxes, arena)


def sort_by_usage(palette: Palette) -> Palette:
    """Stable sort by descending count."""
    return sorted(palette, key=lambda c: -c.count)


def build_palette(
    pixels: Any,
    k_max: int = DEFAULT_K_MAX,
    channels: int = 4,
    *,
    debug: bool = False,
) -> Palette:
    """
    Median-cut palette for a pixel buffer, most used colour first.

    Entry counts sum to the pixel total.
    """
    if k_max < 0:
        raise PaletteSizeError(f"k_max must be >= 0, got {k_max}")
    histogram = build_histogram(pixels, channels)
    return sort_by_usage(find_representative_colors(histogram, k_max, debug=debug))


def palette_to_rows(palette: Palette) -> U8Rows:
    """Palette as (P, 4) RGBA uint8 rows, in palette order."""
    return np.array([c.rgba for c in palette], dtype=np.uint8).reshape(-1, 4)


__all__ = [
    "average_color",
    "average_colors",
    "find_representative_colors",
    "sort_by_usage",
    "build_palette",
    "palette_to_rows",
]
