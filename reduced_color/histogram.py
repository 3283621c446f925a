# reduced_color/histogram.py
from __future__ import annotations

"""
Histogram builder: distinct RGBA colours and their occurrence counts.

The dedup key is the full RGBA tuple (alpha included). RGB buffers are promoted
to alpha=255 first, so for them this is the same as keying on RGB alone.
Output order is first occurrence in raster order.
"""

from typing import Any, List, Tuple

import numpy as np

from .core_types import ColorSample, PackedRows, U8Rows, pack_rows, unpack_rows
from .pixels import as_pixel_rows, to_rgba_rows


def unique_packed_counts(rgba_rows: U8Rows) -> Tuple[PackedRows, np.ndarray]:
    """Return (unique packed ARGB keys, counts) ordered by first occurrence."""
    packed = pack_rows(rgba_rows)
    keys, first_idx, counts = np.unique(packed, return_index=True, return_counts=True)
    order = np.argsort(first_idx, kind="stable")
    return keys[order], counts[order].astype(np.int64, copy=False)


def build_histogram(pixels: Any, channels: int = 4) -> List[ColorSample]:
    """
    Scan a pixel buffer and return one ColorSample per distinct colour.

    Sum of the returned counts equals the pixel count.
    """
    rows = to_rgba_rows(as_pixel_rows(pixels, channels))
    keys, counts = unique_packed_counts(rows)
    rgba = unpack_rows(keys)
    return [
        ColorSample(int(r), int(g), int(b), int(a), int(n))
        for (r, g, b, a), n in zip(rgba.tolist(), counts.tolist())
    ]


def histogram_total(samples: List[ColorSample]) -> int:
    return sum(s.count for s in samples)


__all__ = ["unique_packed_counts", "build_histogram", "histogram_total"]
