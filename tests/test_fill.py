"""
Unit tests for the span-filling flood fill.
"""

from collections import deque

import numpy as np
import pytest

from retro_paint import PixelBuffer, SpanFill, default_palette, flood_fill


def _reference_fill(grid, x, y, index):
    """Plain 4-way BFS fill used as an oracle."""
    out = grid.copy()
    height, width = out.shape
    if not (0 <= x < width and 0 <= y < height):
        return out
    allowed = out[y, x]
    if allowed == index:
        return out
    queue = deque([(x, y)])
    out[y, x] = index
    while queue:
        cx, cy = queue.popleft()
        for nx, ny in ((cx + 1, cy), (cx - 1, cy), (cx, cy + 1), (cx, cy - 1)):
            if 0 <= nx < width and 0 <= ny < height and out[ny, nx] == allowed:
                out[ny, nx] = index
                queue.append((nx, ny))
    return out


def _buffer(grid):
    return PixelBuffer.from_grid(default_palette(), np.asarray(grid, dtype=np.uint8))


class TestCoverage:
    """Fills reach every matching 4-connected cell."""

    @pytest.mark.parametrize("x, y", [(1, 1), (0, 0), (3, 3), (3, 0), (0, 3), (2, 1)])
    def test_solid_buffer_fills_completely(self, solid_buffer, x, y):
        flood_fill(solid_buffer, x, y, 5)
        assert np.all(solid_buffer.pixels == 5)

    def test_single_row(self):
        buf = _buffer([[0, 0, 0, 0, 0]])
        flood_fill(buf, 4, 0, 3)
        assert buf.pixels.tolist() == [[3, 3, 3, 3, 3]]

    def test_single_column(self):
        buf = _buffer([[0], [0], [0], [0]])
        flood_fill(buf, 0, 2, 3)
        assert buf.pixels.tolist() == [[3], [3], [3], [3]]

    def test_u_shape_reaches_both_arms(self):
        grid = [
            [0, 1, 1, 1, 0],
            [0, 1, 1, 1, 0],
            [0, 1, 1, 1, 0],
            [0, 0, 0, 0, 0],
        ]
        buf = _buffer(grid)
        flood_fill(buf, 4, 0, 7)
        expected = np.asarray(grid, dtype=np.uint8)
        expected[expected == 0] = 7
        assert np.array_equal(buf.pixels, expected)

    def test_large_region_without_recursion(self):
        buf = PixelBuffer(200, 200)
        flood_fill(buf, 100, 100, 9)
        assert np.all(buf.pixels == 9)

    @pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
    def test_matches_reference_on_random_grids(self, seed):
        """Random two-colour mazes: span fill equals a plain BFS fill."""
        rng = np.random.default_rng(seed)
        grid = (rng.random((23, 31)) < 0.35).astype(np.uint8)
        for _ in range(6):
            x = int(rng.integers(0, 31))
            y = int(rng.integers(0, 23))
            buf = _buffer(grid)
            flood_fill(buf, x, y, 4)
            assert np.array_equal(buf.pixels, _reference_fill(grid, x, y, 4))


class TestContainment:
    """Fills never leak across other colours or diagonals."""

    def test_bordered_interior(self, bordered_buffer):
        flood_fill(bordered_buffer, 2, 2, 9)
        pixels = bordered_buffer.pixels
        assert np.all(pixels[1:4, 1:4] == 9)
        assert int(np.count_nonzero(pixels == 9)) == 9
        assert int(np.count_nonzero(pixels == 1)) == 16

    def test_diagonal_is_not_connected(self):
        buf = _buffer([[0, 1], [1, 0]])
        flood_fill(buf, 0, 0, 5)
        assert buf.pixels.tolist() == [[5, 1], [1, 0]]

    def test_only_start_colour_replaced(self):
        grid = [
            [2, 2, 3, 2],
            [2, 3, 3, 2],
            [2, 2, 2, 2],
        ]
        buf = _buffer(grid)
        flood_fill(buf, 2, 0, 8)
        assert buf.pixels.tolist() == [
            [2, 2, 8, 2],
            [2, 8, 8, 2],
            [2, 2, 2, 2],
        ]


class TestNoOps:
    """Boundary behaviour that leaves the buffer untouched."""

    @pytest.mark.parametrize("x, y", [(-1, 0), (4, 0), (0, -1), (0, 4), (-5, -5)])
    def test_out_of_range_start(self, solid_buffer, counter, x, y):
        before = solid_buffer.pixels.copy()
        solid_buffer.subscribe(counter)
        assert flood_fill(solid_buffer, x, y, 5) == 0
        assert np.array_equal(solid_buffer.pixels, before)
        assert counter.count == 0

    def test_same_colour_fill_leaves_buffer_unchanged(self, solid_buffer):
        before = solid_buffer.pixels.copy()
        flood_fill(solid_buffer, 1, 1, 2)
        assert np.array_equal(solid_buffer.pixels, before)

    def test_empty_buffer(self):
        assert flood_fill(PixelBuffer(0, 0), 0, 0, 3) == 0

    def test_rejects_non_byte_index(self, solid_buffer):
        with pytest.raises(ValueError):
            flood_fill(solid_buffer, 0, 0, 256)


class TestProgress:
    """Notifications, step-wise driving and cancellation."""

    def test_one_notification_per_span(self, bordered_buffer, counter):
        bordered_buffer.subscribe(counter)
        spans = flood_fill(bordered_buffer, 2, 2, 9)
        assert spans > 0
        assert counter.count == spans

    def test_buffer_fill_method_delegates(self, solid_buffer):
        spans = solid_buffer.fill(0, 0, 6)
        assert spans > 0
        assert np.all(solid_buffer.pixels == 6)

    def test_step_by_step_matches_run(self, bordered_buffer):
        expected = bordered_buffer.copy()
        flood_fill(expected, 2, 2, 9)

        job = SpanFill(bordered_buffer, 2, 2, 9)
        assert not job.done
        steps = 0
        while job.step():
            steps += 1
        assert job.done
        assert job.step() is False
        assert steps == job.steps
        assert np.array_equal(bordered_buffer.pixels, expected.pixels)

    def test_cancel_before_start_changes_nothing(self, solid_buffer):
        before = solid_buffer.pixels.copy()
        spans = flood_fill(solid_buffer, 1, 1, 5, should_cancel=lambda: True)
        assert spans == 0
        assert np.array_equal(solid_buffer.pixels, before)

    def test_cancel_midway_leaves_partial_fill(self):
        buf = PixelBuffer(10, 10)
        calls = {"n": 0}

        def stop_after_two():
            calls["n"] += 1
            return calls["n"] > 2

        spans = buf.fill(5, 5, 3, should_cancel=stop_after_two)
        painted = int(np.count_nonzero(buf.pixels == 3))
        assert spans == 2
        assert 0 < painted < 100
        assert set(np.unique(buf.pixels).tolist()) == {0, 3}

    def test_cancel_method_empties_stack(self, solid_buffer):
        job = SpanFill(solid_buffer, 0, 0, 1)
        job.cancel()
        assert job.done
        assert job.run() == 0
