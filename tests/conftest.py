"""
Pytest configuration and shared fixtures for retro_paint tests.
"""

import numpy as np
import pytest

from retro_paint import PixelBuffer, default_palette


class ChangeCounter:
    """Zero-argument listener that counts change notifications."""

    def __init__(self):
        self.count = 0

    def __call__(self):
        self.count += 1


@pytest.fixture
def counter():
    return ChangeCounter()


@pytest.fixture
def solid_buffer():
    """4x4 buffer with every cell at index 2."""
    grid = np.full((4, 4), 2, dtype=np.uint8)
    return PixelBuffer.from_grid(default_palette(), grid)


@pytest.fixture
def bordered_buffer():
    """
    5x5 buffer: one-pixel border of index 1 around a 3x3 interior of index 0.
    """
    grid = np.ones((5, 5), dtype=np.uint8)
    grid[1:4, 1:4] = 0
    return PixelBuffer.from_grid(default_palette(), grid)
