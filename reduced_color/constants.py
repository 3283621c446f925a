# reduced_color/constants.py
"""
Fixed algorithm constants and tunables used across the project.

- Median-cut defaults (DEFAULT_K_MAX)
- Error diffusion kernel and recombination shift
- Mapper chunking
- CLI / swatch output settings
"""
from __future__ import annotations

from typing import FrozenSet, Tuple

# =========================
# Median cut
# =========================

# Palette size used when the caller does not ask for one.
DEFAULT_K_MAX = 256

# Arena column order. Boxes sort their own row range by one of the first three.
COL_RED = 0
COL_GREEN = 1
COL_BLUE = 2
COL_ALPHA = 3
COL_COUNT = 4

# =========================
# Error diffusion
# =========================

# Spare columns on each side of an error row so the kernel never bounds-checks.
DIFFUSION_MARGIN = 2

# Accumulated error is recombined as error >> ERROR_SHIFT (divide by 32).
ERROR_SHIFT = 5

# (row, column offset, weight). Row 0 is the current scanline.
DIFFUSION_KERNEL: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 8),
    (0, 2, 4),
    (1, -2, 2),
    (1, -1, 4),
    (1, 0, 8),
    (1, 1, 4),
    (1, 2, 2),
    (2, -2, 1),
    (2, -1, 2),
    (2, 0, 4),
    (2, 1, 2),
    (2, 2, 1),
)

# Sum of the kernel weights (42, Stucki).
KERNEL_WEIGHT_TOTAL = sum(w for _row, _dx, w in DIFFUSION_KERNEL)

# Bound for the adjusted-colour -> palette index cache used while dithering.
DITHER_CACHE_MAX_ENTRIES = 300_000

# =========================
# Nearest-colour mapping
# =========================

# Rows per distance block. Bounds the (rows x palette) int64 scratch matrix.
NEAREST_CHUNK_ROWS = 65_536

# =========================
# CLI / output
# =========================

# Height in pixels of the palette strip appended under the image.
SWATCH_HEIGHT = 64

# Suffix for written images; inputs carrying it are skipped in folder mode.
OUTPUT_SUFFIX = "_reduced"

IMAGE_EXTS: FrozenSet[str] = frozenset({".png", ".jpg", ".jpeg", ".webp", ".bmp"})

__all__ = [
    "DEFAULT_K_MAX",
    "COL_RED",
    "COL_GREEN",
    "COL_BLUE",
    "COL_ALPHA",
    "COL_COUNT",
    "DIFFUSION_MARGIN",
    "ERROR_SHIFT",
    "DIFFUSION_KERNEL",
    "KERNEL_WEIGHT_TOTAL",
    "DITHER_CACHE_MAX_ENTRIES",
    "NEAREST_CHUNK_ROWS",
    "SWATCH_HEIGHT",
    "OUTPUT_SUFFIX",
    "IMAGE_EXTS",
]
