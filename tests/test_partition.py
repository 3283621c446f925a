from __future__ import annotations

import numpy as np

from reduced_color.constants import COL_COUNT, COL_RED
from reduced_color.core_types import ColorSample
from reduced_color.histogram import build_histogram
from reduced_color.partition import (
    ColorBox,
    ColorDimension,
    arena_box,
    find_box_to_split,
    samples_to_arena,
)


def _box(rs, gs, bs) -> ColorBox:
    return ColorBox(
        0,
        2,
        min_red=rs[0],
        max_red=rs[1],
        min_green=gs[0],
        max_green=gs[1],
        min_blue=bs[0],
        max_blue=bs[1],
    )


def test_longest_dimension_tie_breaks_blue_then_green() -> None:
    assert _box((0, 10), (0, 10), (0, 10)).longest_dimension() is ColorDimension.BLUE
    assert _box((0, 10), (0, 10), (0, 5)).longest_dimension() is ColorDimension.GREEN
    assert _box((0, 10), (0, 5), (0, 5)).longest_dimension() is ColorDimension.RED
    assert _box((0, 5), (0, 5), (3, 9)).longest_dimension() is ColorDimension.BLUE


def test_blue_spread_uses_min() -> None:
    # blue spans 100..200; a max-max spread would lose to red's 50.
    arena = samples_to_arena(
        [ColorSample(0, 0, 100, count=1), ColorSample(50, 0, 200, count=1)]
    )
    box = arena_box(arena)
    assert (box.min_blue, box.max_blue) == (100, 200)
    assert box.longest_dimension() is ColorDimension.BLUE


def test_trim_matches_range(random_rgb: np.ndarray) -> None:
    arena = samples_to_arena(build_histogram(random_rgb, channels=3))
    box = arena_box(arena)
    assert box.count == 32 * 32
    assert box.min_red == int(arena[:, 0].min())
    assert box.max_green == int(arena[:, 1].max())


def test_weighted_median_split() -> None:
    samples = [
        ColorSample(0, 0, 0, count=1),
        ColorSample(10, 0, 0, count=1),
        ColorSample(20, 0, 0, count=10),
        ColorSample(30, 0, 0, count=1),
    ]
    arena = samples_to_arena(samples)
    box = arena_box(arena)
    new_box = box.split(arena)

    assert new_box is not None
    assert (box.lower, box.upper, box.level, box.count) == (0, 3, 1, 12)
    assert (new_box.lower, new_box.upper, new_box.level, new_box.count) == (3, 4, 1, 1)
    assert (box.min_red, box.max_red) == (0, 20)
    assert (new_box.min_red, new_box.max_red) == (30, 30)


def test_split_sorts_range_before_cutting() -> None:
    samples = [
        ColorSample(200, 0, 0, count=1),
        ColorSample(0, 0, 0, count=1),
        ColorSample(100, 0, 0, count=1),
        ColorSample(50, 0, 0, count=1),
    ]
    arena = samples_to_arena(samples)
    box = arena_box(arena)
    new_box = box.split(arena)

    assert arena[:, COL_RED].tolist() == [0, 50, 100, 200]
    assert new_box is not None
    # half = 2; cumulative 1, 2 -> median index 1
    assert (box.lower, box.upper) == (0, 2)
    assert (new_box.lower, new_box.upper) == (2, 4)
    assert (box.min_red, box.max_red) == (0, 50)
    assert (new_box.min_red, new_box.max_red) == (100, 200)


def test_median_never_empties_the_upper_half() -> None:
    samples = [ColorSample(0, 0, 0, count=1), ColorSample(255, 0, 0, count=100)]
    arena = samples_to_arena(samples)
    box = arena_box(arena)
    new_box = box.split(arena)

    assert new_box is not None
    assert box.color_count() == 1
    assert new_box.color_count() == 1
    assert int(arena[box.lower, COL_COUNT]) + int(arena[new_box.lower, COL_COUNT]) == 101


def test_single_colour_box_is_terminal() -> None:
    arena = samples_to_arena([ColorSample(1, 2, 3, count=4)])
    box = arena_box(arena)
    assert box.split(arena) is None
    assert find_box_to_split([box]) is None


def test_find_box_prefers_lowest_level_then_first() -> None:
    a = ColorBox(0, 1, level=0)  # terminal, ignored
    b = ColorBox(1, 5, level=2)
    c = ColorBox(5, 9, level=1)
    d = ColorBox(9, 12, level=1)
    assert find_box_to_split([a, b, c, d]) is c
    assert find_box_to_split([a]) is None
