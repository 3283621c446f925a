# reduced_color/nearest.py
from __future__ import annotations

"""
Nearest-colour mapping by squared Euclidean RGB distance.

Alpha never takes part in the distance. Ties go to the earliest palette entry,
so palette order (as produced by build_palette) is observable here.
"""

from typing import Any, Tuple

import numpy as np

from .constants import NEAREST_CHUNK_ROWS
from .core_types import ColorSample, Palette, pack_rows, unpack_rows
from .errors import EmptyPaletteError
from .palette import palette_to_rows
from .pixels import as_pixel_rows, restore_layout, to_rgba_rows
from .utils import debug_log, key_value_pairs_to_string, split_rows_into_chunks


def _require_palette(palette: Palette) -> None:
    if len(palette) == 0:
        raise EmptyPaletteError("palette is empty")


def find_closest_index(sample: ColorSample, palette: Palette) -> int:
    """Index of the first palette entry with minimum RGB distance to sample."""
    _require_palette(palette)
    best_idx = 0
    best_d = palette[0].distance2(sample)
    for i in range(1, len(palette)):
        d = palette[i].distance2(sample)
        if d < best_d:
            best_d = d
            best_idx = i
    return best_idx


def find_closest_color(sample: ColorSample, palette: Palette) -> ColorSample:
    return palette[find_closest_index(sample, palette)]


def nearest_palette_indices(rgb_rows: np.ndarray, pal_rgb: np.ndarray) -> np.ndarray:
    """For each (r, g, b) row, index of the nearest palette row (first on ties)."""
    if pal_rgb.shape[0] == 0:
        raise EmptyPaletteError("palette is empty")
    src = np.asarray(rgb_rows, dtype=np.int64)[:, :3]
    pal = np.asarray(pal_rgb, dtype=np.int64)[:, :3]
    out = np.empty(src.shape[0], dtype=np.int32)
    for start, end in split_rows_into_chunks(src.shape[0], NEAREST_CHUNK_ROWS):
        diff = pal[None, :, :] - src[start:end, None, :]
        dist2 = np.sum(diff * diff, axis=2)
        out[start:end] = np.argmin(dist2, axis=1)
    return out


def map_to_palette(
    pixels: Any, palette: Palette, channels: int = 4, *, debug: bool = False
) -> np.ndarray:
    """
    Replace every pixel by its nearest palette entry.

    Distinct colours are matched once and scattered back. Output pixels take
    all channels of the chosen entry (alpha included) and come back in the
    caller's layout as a new uint8 buffer.
    """
    _require_palette(palette)
    rows = to_rgba_rows(as_pixel_rows(pixels, channels))
    pal_rows = palette_to_rows(palette)

    keys, inverse = np.unique(pack_rows(rows), return_inverse=True)
    uniq = unpack_rows(keys)
    idx = nearest_palette_indices(uniq, pal_rows)
    mapped = pal_rows[idx][inverse.reshape(-1)]

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Pixels", int(rows.shape[0])),
                    ("Unique", int(uniq.shape[0])),
                    ("Palette", len(palette)),
                ]
            )
        )
    return restore_layout(mapped, pixels, channels)


def palette_distance_report(
    pixels: Any, palette: Palette, channels: int = 4
) -> Tuple[float, int]:
    """(mean, max) squared RGB error between pixels and their nearest entries."""
    _require_palette(palette)
    rows = to_rgba_rows(as_pixel_rows(pixels, channels))
    pal_rows = palette_to_rows(palette)
    keys, counts = np.unique(pack_rows(rows), return_counts=True)
    uniq = unpack_rows(keys).astype(np.int64)
    idx = nearest_palette_indices(uniq, pal_rows)
    diff = pal_rows[idx, :3].astype(np.int64) - uniq[:, :3]
    d2 = np.sum(diff * diff, axis=1)
    mean = float(np.average(d2, weights=counts))
    return mean, int(d2.max())


__all__ = [
    "find_closest_index",
    "find_closest_color",
    "nearest_palette_indices",
    "map_to_palette",
    "palette_distance_report",
]
