"""
retro_paint package.

Purpose:
  256-colour palettised pixel buffers with nearest-colour quantisation and
  span-filling flood fill. See retro_paint.cli for the command-line tool.

Public API:
  PaletteEntry   : immutable RGB entry; `color` is the opaque 0xFFRRGGBB word.
  Palette        : fixed 256-entry mutable palette table.
  default_palette: fresh copy of the VGA mode 13h palette.
  nearest_index  : closest palette index by squared RGB distance (lowest index on ties).
  PixelBuffer    : index grid + palette with change notification.
  flood_fill     : explicit-stack span fill; SpanFill for step-by-step driving.
  from_raster    : packed 0xAARRGGBB raster -> PixelBuffer.
  to_raster      : PixelBuffer -> packed opaque raster.

Quick start:
  from retro_paint import from_raster, to_raster
  buf = from_raster(raster, width, height)
  buf.fill(10, 10, 14)
  out = to_raster(buf)
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import constants
from . import core_types
from . import palette_data
from . import buffer
from . import fill
from . import quantize

from .core_types import PaletteEntry
from .palette_data import (
    VGA_PALETTE,
    Palette,
    default_palette,
    nearest_index,
    nearest_indices,
    squared_distance,
)
from .buffer import PixelBuffer
from .fill import Span, SpanFill, flood_fill
from .quantize import from_raster, to_raster

__all__ = [
    "__version__",
    "constants",
    "core_types",
    "palette_data",
    "buffer",
    "fill",
    "quantize",
    "PaletteEntry",
    "VGA_PALETTE",
    "Palette",
    "default_palette",
    "nearest_index",
    "nearest_indices",
    "squared_distance",
    "PixelBuffer",
    "Span",
    "SpanFill",
    "flood_fill",
    "from_raster",
    "to_raster",
]
