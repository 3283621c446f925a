from __future__ import annotations

from collections import Counter

import numpy as np
import pytest

from reduced_color.core_types import ColorSample
from reduced_color.errors import EmptyBufferError, PaletteSizeError
from reduced_color.histogram import build_histogram
from reduced_color.palette import (
    average_color,
    build_palette,
    find_representative_colors,
    palette_to_rows,
    sort_by_usage,
)
from reduced_color.partition import ColorDimension, arena_box, samples_to_arena


def test_two_by_two_scenario(four_pixel_rgb: np.ndarray) -> None:
    # R, G and B spreads are all 255, so the first cut is along blue.
    arena = samples_to_arena(build_histogram(four_pixel_rgb, channels=3))
    assert arena_box(arena).longest_dimension() is ColorDimension.BLUE

    palette = build_palette(four_pixel_rgb, 2, channels=3)

    assert len(palette) == 2
    assert palette[0].rgba == (255, 0, 0, 255)
    assert palette[0].count == 2
    # green and blue share a box: (0+0)/2, (255+0)/2 -> 128, (0+255)/2 -> 128
    assert palette[1].rgba == (0, 128, 128, 255)
    assert palette[1].count == 2
    assert sum(c.count for c in palette) == 4


def test_uniform_image_gives_one_entry() -> None:
    img = np.full((10, 10, 3), 42, dtype=np.uint8)
    palette = build_palette(img, 8, channels=3)
    assert len(palette) == 1
    assert palette[0].rgb == (42, 42, 42)
    assert palette[0].count == 100


def test_few_colours_returns_histogram_sorted() -> None:
    colours = [(1, 1, 1)] * 3 + [(2, 2, 2)] * 5 + [(3, 3, 3)] + [(4, 4, 4)] * 2
    img = np.array(colours, dtype=np.uint8)
    palette = build_palette(img, 8, channels=3)

    assert Counter({c.rgb: c.count for c in palette}) == Counter(colours)
    assert [c.count for c in palette] == [5, 3, 2, 1]


def test_exactly_k_max_colours_are_not_split() -> None:
    img = np.array([[0, 0, 0], [255, 255, 255]], dtype=np.uint8)
    palette = build_palette(img, 2, channels=3)
    assert sorted(c.rgb for c in palette) == [(0, 0, 0), (255, 255, 255)]


@pytest.mark.parametrize("k_max", [2, 5, 16, 64])
def test_many_colours_fill_k_max(random_rgb: np.ndarray, k_max: int) -> None:
    palette = build_palette(random_rgb, k_max, channels=3)
    assert len(palette) == k_max
    assert sum(c.count for c in palette) == 32 * 32
    counts = [c.count for c in palette]
    assert counts == sorted(counts, reverse=True)


@pytest.mark.parametrize("k_max", [0, 1])
def test_k_max_below_two_collapses_to_average(k_max: int) -> None:
    img = np.array([[0, 0, 0], [255, 255, 255]], dtype=np.uint8)
    palette = build_palette(img, k_max, channels=3)
    assert len(palette) == 1
    assert palette[0].rgb == (128, 128, 128)
    assert palette[0].count == 2


def test_negative_k_max_is_rejected() -> None:
    with pytest.raises(PaletteSizeError):
        build_palette(bytes(4), -1)
    with pytest.raises(PaletteSizeError):
        find_representative_colors([ColorSample(0, 0, 0, count=1)], -3)


def test_empty_inputs_are_rejected() -> None:
    with pytest.raises(EmptyBufferError):
        build_palette(b"", 4)
    with pytest.raises(EmptyBufferError):
        find_representative_colors([], 4)


def test_average_is_weighted_and_rounds_half_up() -> None:
    arena = samples_to_arena(
        [ColorSample(0, 0, 0, 0, count=1), ColorSample(1, 3, 10, 255, count=1)]
    )
    avg = average_color(arena_box(arena), arena)
    # 0.5 -> 1, 1.5 -> 2, 5.0 -> 5, 127.5 -> 128
    assert avg.rgba == (1, 2, 5, 128)
    assert avg.count == 2

    arena = samples_to_arena(
        [ColorSample(0, 0, 0, count=3), ColorSample(100, 0, 0, count=1)]
    )
    assert average_color(arena_box(arena), arena).red == 25


def test_sort_by_usage_is_stable() -> None:
    a = ColorSample(1, 0, 0, count=2)
    b = ColorSample(2, 0, 0, count=5)
    c = ColorSample(3, 0, 0, count=2)
    assert sort_by_usage([a, b, c]) == [b, a, c]


def test_palette_to_rows() -> None:
    rows = palette_to_rows([ColorSample(1, 2, 3, 4), ColorSample(5, 6, 7)])
    assert rows.dtype == np.uint8
    assert rows.tolist() == [[1, 2, 3, 4], [5, 6, 7, 255]]
