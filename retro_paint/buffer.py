# retro_paint/buffer.py
from __future__ import annotations

"""
Palettised pixel buffer.

A width x height grid of uint8 palette indices (row-major, grid[y, x]) plus
the 256-entry Palette it indexes into. Every mutation raises a change
notification to subscribed zero-argument listeners.

Out-of-range reads return index 0 and out-of-range writes are ignored.
"""

from typing import Callable, List, Optional, Union

import numpy as np

from .constants import DEFAULT_INDEX, PALETTE_SIZE
from .core_types import (
    ChangeListener,
    IndexGrid,
    PaletteEntry,
    RGBTuple,
    assert_index_grid,
    check_palette_index,
)
from .fill import flood_fill
from .palette_data import Palette, default_palette


def _check_size(width: int, height: int) -> None:
    if width < 0 or height < 0:
        raise ValueError(f"buffer size must be non-negative, got {width}x{height}")


class PixelBuffer:
    """256-colour indexed pixel grid with an owned palette."""

    def __init__(self, width: int, height: int) -> None:
        _check_size(width, height)
        self._palette: Palette = default_palette()
        self._pixels: IndexGrid = np.zeros((height, width), dtype=np.uint8)
        self._listeners: List[ChangeListener] = []

    @classmethod
    def from_grid(cls, palette: Palette, grid: np.ndarray) -> "PixelBuffer":
        """
        Wrap an existing index grid (H, W) and palette.

        Raises ValueError unless the palette has exactly 256 entries, if the grid
        is not integer-typed, or if any grid value is outside 0..255.
        """
        if palette is None or len(palette) != PALETTE_SIZE:
            raise ValueError(f"palette must have exactly {PALETTE_SIZE} entries")
        arr = np.asarray(grid)
        if arr.ndim != 2:
            raise ValueError(f"grid must be 2D (H, W), got shape {arr.shape}")
        if arr.dtype != np.uint8:
            if not np.issubdtype(arr.dtype, np.integer):
                raise ValueError(f"grid must hold integer indices, got dtype {arr.dtype}")
            if arr.size and (int(arr.min()) < 0 or int(arr.max()) >= PALETTE_SIZE):
                raise ValueError("grid values must be palette indices 0..255")
            arr = arr.astype(np.uint8)
        buf = cls.__new__(cls)
        buf._palette = palette if isinstance(palette, Palette) else Palette(palette)
        buf._pixels = assert_index_grid(np.ascontiguousarray(arr))
        buf._listeners = []
        return buf

    # Dimensions / views

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def palette(self) -> Palette:
        return self._palette

    @property
    def pixels(self) -> IndexGrid:
        """Read-only (H, W) view of the index grid."""
        view = self._pixels.view()
        view.flags.writeable = False
        return view

    def copy(self) -> "PixelBuffer":
        """Independent copy of grid and palette. Listeners are not copied."""
        return PixelBuffer.from_grid(self._palette.copy(), self._pixels.copy())

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"

    # Change notification

    def subscribe(self, listener: ChangeListener) -> ChangeListener:
        self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: ChangeListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    # Structure

    def resize(self, new_width: int, new_height: int, preserve: bool = False) -> None:
        """
        Replace the grid with a new_width x new_height one.

        With preserve, the overlapping top-left rectangle is copied row by row;
        everything else is index 0.
        """
        _check_size(new_width, new_height)
        grid = np.zeros((new_height, new_width), dtype=np.uint8)
        if preserve:
            min_w = min(self.width, new_width)
            min_h = min(self.height, new_height)
            for y in range(min_h):
                grid[y, :min_w] = self._pixels[y, :min_w]
        self._pixels = grid
        self._notify()

    # Palette access

    def read_palette(self, index: int) -> PaletteEntry:
        """Entry at index. IndexError outside 0..255, negatives included."""
        return self._palette.entry(index)

    def write_palette(
        self, index: int, color: Union[PaletteEntry, int, RGBTuple]
    ) -> None:
        self._palette.set_entry(index, color)
        self._notify()

    # Pixel access

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self._pixels.shape[1] and 0 <= y < self._pixels.shape[0]

    def get_pixel(self, x: int, y: int) -> int:
        if not self.is_inside(x, y):
            return DEFAULT_INDEX
        return int(self._pixels[y, x])

    def set_pixel(self, x: int, y: int, index: int) -> None:
        i = check_palette_index(index)
        if not self.is_inside(x, y):
            return
        self._pixels[y, x] = i
        self._notify()

    def pixel_equals(self, x: int, y: int, index: int) -> bool:
        return self.is_inside(x, y) and int(self._pixels[y, x]) == index

    def clear(self, index: int = DEFAULT_INDEX) -> None:
        self._pixels.fill(check_palette_index(index))
        self._notify()

    def fill(
        self,
        x: int,
        y: int,
        index: int,
        *,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> int:
        """Flood fill from (x, y). Returns the number of spans processed."""
        return flood_fill(self, x, y, index, should_cancel=should_cancel)


__all__ = ["PixelBuffer"]
