from __future__ import annotations

import numpy as np
import pytest


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1337)


@pytest.fixture
def random_rgb(rng: np.random.Generator) -> np.ndarray:
    """32x32 RGB image with (almost surely) far more than 16 distinct colours."""
    return rng.integers(0, 256, size=(32, 32, 3), dtype=np.uint8)


@pytest.fixture
def four_pixel_rgb() -> np.ndarray:
    """2x2 image: red, red / green, blue."""
    return np.array(
        [[[255, 0, 0], [255, 0, 0]], [[0, 255, 0], [0, 0, 255]]], dtype=np.uint8
    )
