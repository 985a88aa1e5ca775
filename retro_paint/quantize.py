# retro_paint/quantize.py
from __future__ import annotations

"""
Packed RGB raster <-> PixelBuffer conversion.

Exports:
  from_raster(raster, width, height, *, palette=None) -> PixelBuffer
  to_raster(buffer) -> PackedRaster
"""

from typing import Optional

import numpy as np

from .buffer import PixelBuffer
from .constants import OPAQUE_ALPHA
from .core_types import PackedRaster
from .palette_data import Palette, default_palette, nearest_indices


def from_raster(
    raster: np.ndarray,
    width: int,
    height: int,
    *,
    palette: Optional[Palette] = None,
) -> PixelBuffer:
    """
    Quantise packed 0xAARRGGBB samples to the nearest palette index each.

    raster may be flat (width*height, row-major) or shaped (height, width).
    Alpha is ignored. Uses a fresh default palette unless one is given.
    """
    arr = np.asarray(raster)
    if arr.size != width * height:
        raise ValueError(
            f"raster has {arr.size} samples, expected {width}x{height}={width * height}"
        )
    if arr.dtype != np.uint32:
        arr = arr.astype(np.int64).astype(np.uint32)
    pal = default_palette() if palette is None else palette
    grid = nearest_indices(arr.reshape(height, width), pal)
    return PixelBuffer.from_grid(pal, grid)


def to_raster(buffer: PixelBuffer) -> PackedRaster:
    """Expand every index through the buffer's palette; alpha is always 0xFF."""
    lut = buffer.palette.packed() | np.uint32(OPAQUE_ALPHA)
    return lut[buffer.pixels]


__all__ = ["from_raster", "to_raster"]
