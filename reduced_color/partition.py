# reduced_color/partition.py
from __future__ import annotations

"""
Median-cut colour box partitioner.

The histogram is copied into a single int64 arena (N, 5) with columns
R, G, B, A, COUNT. A ColorBox owns the half-open row range [lower, upper) of
that arena. Splitting a box sorts its own rows in place by the widest RGB
channel, then cuts at the weighted median. Box ranges are only meaningful
against the current arena ordering, so a split always runs
sort -> median -> trim, in that order, to completion.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional

import numpy as np

from .constants import COL_ALPHA, COL_BLUE, COL_COUNT, COL_GREEN, COL_RED
from .core_types import Arena, ColorSample


class ColorDimension(IntEnum):
    """Splittable channel; the value is the arena column."""

    RED = COL_RED
    GREEN = COL_GREEN
    BLUE = COL_BLUE


def samples_to_arena(samples: List[ColorSample]) -> Arena:
    """Copy samples into a fresh (N, 5) int64 arena."""
    arena = np.empty((len(samples), 5), dtype=np.int64)
    for i, s in enumerate(samples):
        arena[i, COL_RED] = s.red
        arena[i, COL_GREEN] = s.green
        arena[i, COL_BLUE] = s.blue
        arena[i, COL_ALPHA] = s.alpha
        arena[i, COL_COUNT] = s.count
    return arena


@dataclass
class ColorBox:
    """A contiguous arena range plus cached bounds and weighted mass."""

    lower: int
    upper: int
    level: int = 0
    count: int = 0
    min_red: int = 255
    max_red: int = 0
    min_green: int = 255
    max_green: int = 0
    min_blue: int = 255
    max_blue: int = 0

    def color_count(self) -> int:
        return self.upper - self.lower

    def trim(self, arena: Arena) -> None:
        """Recompute cached bounds and mass from the rows currently in range."""
        seg = arena[self.lower : self.upper]
        if seg.shape[0] == 0:
            self.count = 0
            self.min_red = self.min_green = self.min_blue = 255
            self.max_red = self.max_green = self.max_blue = 0
            return
        lo = seg[:, COL_RED : COL_BLUE + 1].min(axis=0)
        hi = seg[:, COL_RED : COL_BLUE + 1].max(axis=0)
        self.min_red, self.min_green, self.min_blue = (int(v) for v in lo)
        self.max_red, self.max_green, self.max_blue = (int(v) for v in hi)
        self.count = int(seg[:, COL_COUNT].sum())

    def longest_dimension(self) -> ColorDimension:
        """
        Channel with the largest max-min spread.
        Ties prefer blue, then green, then red.
        """
        spread_r = self.max_red - self.min_red
        spread_g = self.max_green - self.min_green
        spread_b = self.max_blue - self.min_blue
        if spread_b >= spread_r and spread_b >= spread_g:
            return ColorDimension.BLUE
        if spread_g >= spread_r and spread_g >= spread_b:
            return ColorDimension.GREEN
        return ColorDimension.RED

    def sort_by(self, arena: Arena, dim: ColorDimension) -> None:
        """Stable in-place sort of this box's rows by one channel, ascending."""
        seg = arena[self.lower : self.upper]
        order = np.argsort(seg[:, int(dim)], kind="stable")
        arena[self.lower : self.upper] = seg[order]

    def find_median(self, arena: Arena) -> int:
        """
        First index whose running count reaches count // 2.

        The last row is never chosen so both halves stay non-empty; when no
        index qualifies the median falls back to lower.
        """
        half = self.count // 2
        cum = np.cumsum(arena[self.lower : self.upper - 1, COL_COUNT])
        idx = int(np.searchsorted(cum, half, side="left"))
        if idx >= cum.shape[0]:
            return self.lower
        return self.lower + idx

    def split(self, arena: Arena) -> Optional["ColorBox"]:
        """
        Split at the weighted median along the widest channel.

        This box keeps [lower, median + 1), the returned box gets
        [median + 1, upper); both move one level deeper and are re-trimmed.
        """
        if self.color_count() < 2:
            return None
        dim = self.longest_dimension()
        self.sort_by(arena, dim)
        median = self.find_median(arena)

        next_level = self.level + 1
        new_box = ColorBox(median + 1, self.upper, next_level)
        self.upper = median + 1
        self.level = next_level
        self.trim(arena)
        new_box.trim(arena)
        return new_box


def arena_box(arena: Arena) -> ColorBox:
    """Level-0 box spanning the whole arena, already trimmed."""
    box = ColorBox(0, int(arena.shape[0]), 0)
    box.trim(arena)
    return box


def find_box_to_split(boxes: List[ColorBox]) -> Optional[ColorBox]:
    """First splittable box (>= 2 colours) with the smallest level, or None."""
    chosen: Optional[ColorBox] = None
    for b in boxes:
        if b.color_count() >= 2 and (chosen is None or b.level < chosen.level):
            chosen = b
    return chosen


__all__ = [
    "ColorDimension",
    "ColorBox",
    "samples_to_arena",
    "arena_box",
    "find_box_to_split",
]
