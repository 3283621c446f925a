# reduced_color/image_io.py
from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .constants import SWATCH_HEIGHT
from .core_types import Palette, U8Image
from .errors import EmptyPaletteError, ImageShapeError

"""
Image I/O helpers (RGBA, uint8) and palette swatch composition.

The quantization core never opens files; these helpers sit at the boundary.
"""


def load_image_rgba(path: Path) -> U8Image:
    """Load any Pillow-readable image as an (H, W, 4) uint8 array."""
    with Image.open(path) as im0:
        im = ImageOps.exif_transpose(im0).convert("RGBA")
    return np.array(im, dtype=np.uint8)


def save_image_rgba(path: Path, rgba: U8Image) -> Path:
    """Write an (H, W, 4) array as PNG. Returns the path actually written."""
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    arr = np.ascontiguousarray(rgba, dtype=np.uint8)
    if arr.ndim != 3 or arr.shape[2] != 4:
        raise ImageShapeError(f"expected (H, W, 4) RGBA, got {arr.shape}")
    Image.fromarray(arr).save(path)
    return path


def palette_swatch(
    palette: Palette, width: int, height: int = SWATCH_HEIGHT
) -> U8Image:
    """
    Horizontal strip with one opaque block per palette entry, in palette order.

    Each entry gets width // len(palette) columns; leftover columns on the
    right stay transparent black. Entries past the width are dropped.
    """
    if len(palette) == 0:
        raise EmptyPaletteError("palette is empty")
    strip = np.zeros((height, width, 4), dtype=np.uint8)
    block = max(1, width // len(palette))
    for i, colour in enumerate(palette):
        x0 = i * block
        if x0 >= width:
            break
        strip[:, x0 : x0 + block, :3] = colour.rgb
        strip[:, x0 : x0 + block, 3] = 255
    return strip


def append_swatch(rgba: U8Image, palette: Palette, height: int = SWATCH_HEIGHT) -> U8Image:
    """Stack the image above its palette swatch."""
    return np.vstack([rgba, palette_swatch(palette, rgba.shape[1], height)])


def is_image_file(path: Path) -> bool:
    try:
        with Image.open(path) as im:
            im.seek(0)
            im.load()
        return True
    except (UnidentifiedImageError, OSError):
        return False


__all__ = [
    "load_image_rgba",
    "save_image_rgba",
    "palette_swatch",
    "append_swatch",
    "is_image_file",
]
