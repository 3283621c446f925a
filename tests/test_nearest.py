from __future__ import annotations

import numpy as np
import pytest

from reduced_color import nearest
from reduced_color.core_types import ColorSample
from reduced_color.errors import EmptyPaletteError
from reduced_color.nearest import (
    find_closest_color,
    find_closest_index,
    map_to_palette,
    nearest_palette_indices,
    palette_distance_report,
)
from reduced_color.palette import build_palette, palette_to_rows


def test_ties_go_to_first_entry() -> None:
    palette = [ColorSample(0, 0, 0), ColorSample(2, 0, 0)]
    assert find_closest_index(ColorSample(1, 0, 0), palette) == 0
    assert find_closest_index(ColorSample(2, 0, 0), palette) == 1


def test_alpha_does_not_affect_distance() -> None:
    palette = [ColorSample(10, 10, 10, 0), ColorSample(200, 200, 200, 255)]
    assert find_closest_color(ColorSample(12, 12, 12, 255), palette) is palette[0]


def test_empty_palette_is_rejected() -> None:
    with pytest.raises(EmptyPaletteError):
        find_closest_index(ColorSample(0, 0, 0), [])
    with pytest.raises(EmptyPaletteError):
        map_to_palette(bytes(4), [])
    with pytest.raises(EmptyPaletteError):
        nearest_palette_indices(np.zeros((1, 3)), np.zeros((0, 3)))


def test_mapping_picks_minimum_distance(random_rgb: np.ndarray) -> None:
    palette = build_palette(random_rgb, 12, channels=3)
    out = map_to_palette(random_rgb, palette, channels=3)
    assert out.shape == random_rgb.shape

    src = random_rgb.reshape(-1, 3).astype(np.int64)
    got = out.reshape(-1, 3).astype(np.int64)
    pal = palette_to_rows(palette)[:, :3].astype(np.int64)
    assigned = np.sum((got - src) ** 2, axis=1)
    best = np.min(np.sum((pal[None, :, :] - src[:, None, :]) ** 2, axis=2), axis=1)
    np.testing.assert_array_equal(assigned, best)


def test_mapping_is_idempotent(random_rgb: np.ndarray) -> None:
    palette = build_palette(random_rgb, 8, channels=3)
    once = map_to_palette(random_rgb, palette, channels=3)
    twice = map_to_palette(once, palette, channels=3)
    np.testing.assert_array_equal(once, twice)


def test_mapping_matches_scalar_lookup(random_rgb: np.ndarray) -> None:
    palette = build_palette(random_rgb, 6, channels=3)
    out = map_to_palette(random_rgb, palette, channels=3).reshape(-1, 3)
    for src, dst in list(zip(random_rgb.reshape(-1, 3).tolist(), out.tolist()))[:100]:
        expected = find_closest_color(ColorSample(*src), palette)
        assert tuple(dst) == expected.rgb


def test_mapping_takes_palette_alpha_and_keeps_flat_layout() -> None:
    palette = [ColorSample(0, 0, 0, 255), ColorSample(250, 250, 250, 10)]
    pixels = bytes([240, 240, 240, 200, 5, 5, 5, 0])
    out = map_to_palette(pixels, palette)
    assert out.shape == (8,)
    assert out.tolist() == [250, 250, 250, 10, 0, 0, 0, 255]


def test_chunked_lookup_matches_single_block(
    monkeypatch: pytest.MonkeyPatch, rng: np.random.Generator
) -> None:
    src = rng.integers(0, 256, size=(50, 3))
    pal = rng.integers(0, 256, size=(7, 3))
    whole = nearest_palette_indices(src, pal)
    monkeypatch.setattr(nearest, "NEAREST_CHUNK_ROWS", 3)
    np.testing.assert_array_equal(nearest_palette_indices(src, pal), whole)


def test_distance_report() -> None:
    img = np.array([[0, 0, 0], [10, 0, 0], [10, 0, 0]], dtype=np.uint8)
    exact = [ColorSample(0, 0, 0), ColorSample(10, 0, 0)]
    assert palette_distance_report(img, exact, channels=3) == (0.0, 0)

    mean, worst = palette_distance_report(img, [ColorSample(0, 0, 0)], channels=3)
    assert worst == 100
    assert mean == pytest.approx(200 / 3)
