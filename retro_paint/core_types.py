# retro_paint/core_types.py
from __future__ import annotations

"""
Core type aliases, the palette entry value object, and lightweight helpers.
"""

from dataclasses import dataclass
from typing import Callable, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .constants import OPAQUE_ALPHA, PALETTE_SIZE

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str

IndexGrid = NDArray[np.uint8]  # (H, W) palette indices
PackedRaster = NDArray[np.uint32]  # (H, W) 0xAARRGGBB
U8Image = NDArray[np.uint8]  # (H, W, 3) or (H, W, 4)

ChangeListener = Callable[[], None]

# Value objects


@dataclass(frozen=True)
class PaletteEntry:
    """One palette slot. Alpha is not stored; `color` is always opaque."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for name in ("r", "g", "b"):
            v = getattr(self, name)
            if not 0 <= int(v) <= 255:
                raise ValueError(f"channel {name}={v} outside 0..255")
            object.__setattr__(self, name, int(v))

    @classmethod
    def from_packed(cls, color: int) -> "PaletteEntry":
        """Build from 0xXXRRGGBB; the XX byte is ignored."""
        return cls(*unpack_color(color))

    @classmethod
    def from_hex(cls, hex_str: str) -> "PaletteEntry":
        return cls(*hex_to_rgb(hex_str))

    @property
    def color(self) -> int:
        return pack_rgb(self.r, self.g, self.b)

    @property
    def rgb(self) -> RGBTuple:
        return (self.r, self.g, self.b)

    @property
    def hex(self) -> HexStr:
        return rgb_to_hex(self.rgb)

    def distance_squared(self, other: "PaletteEntry") -> int:
        """Squared Euclidean distance in the RGB cube (no channel weighting)."""
        dr = self.r - other.r
        dg = self.g - other.g
        db = self.b - other.b
        return dr * dr + dg * dg + db * db


# Small helpers


def pack_rgb(r: int, g: int, b: int) -> int:
    """(r, g, b) -> 0xFFRRGGBB."""
    return (
        OPAQUE_ALPHA
        | ((int(r) & 0xFF) << 16)
        | ((int(g) & 0xFF) << 8)
        | (int(b) & 0xFF)
    )


def unpack_color(color: int) -> RGBTuple:
    """0xXXRRGGBB -> (r, g, b). Alpha is dropped."""
    c = int(color)
    return ((c >> 16) & 0xFF, (c >> 8) & 0xFF, c & 0xFF)


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse '#rgb' or '#rrggbb' (case-insensitive, '#' optional) into an RGB tuple."""
    s = hex_str.strip().lower()
    if s.startswith("#"):
        s = s[1:]
    if len(s) == 3:
        s = "".join(ch * 2 for ch in s)
    if len(s) != 6:
        raise ValueError("hex must be '#rrggbb' or '#rgb'")
    return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))


def coerce_entry(value: Union["PaletteEntry", int, RGBTuple]) -> PaletteEntry:
    """Accept an entry, a packed 0xXXRRGGBB int, or an (r, g, b) sequence."""
    if isinstance(value, PaletteEntry):
        return value
    if isinstance(value, (int, np.integer)):
        return PaletteEntry.from_packed(int(value))
    if len(value) < 3:
        raise ValueError("sequence too small for RGB")
    return PaletteEntry(int(value[0]), int(value[1]), int(value[2]))


def check_palette_index(index: int) -> int:
    """Return index as int, or raise ValueError if it is not a byte-sized index."""
    i = int(index)
    if not 0 <= i < PALETTE_SIZE:
        raise ValueError(f"palette index {index} outside 0..{PALETTE_SIZE - 1}")
    return i


def assert_index_grid(grid: np.ndarray) -> IndexGrid:
    """Validate a uint8 (H,W) index grid and return it typed as IndexGrid."""
    if grid.dtype != np.uint8 or grid.ndim != 2:
        raise TypeError("expected uint8 (H,W) index grid")
    return grid  # type: ignore[return-value]


def assert_packed_raster(raster: np.ndarray) -> PackedRaster:
    """Validate a uint32 (H,W) packed raster and return it typed as PackedRaster."""
    if raster.dtype != np.uint32 or raster.ndim != 2:
        raise TypeError("expected uint32 (H,W) packed raster")
    return raster  # type: ignore[return-value]


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "IndexGrid",
    "PackedRaster",
    "U8Image",
    "ChangeListener",
    # value objects
    "PaletteEntry",
    # helpers
    "pack_rgb",
    "unpack_color",
    "rgb_to_hex",
    "hex_to_rgb",
    "coerce_entry",
    "check_palette_index",
    "assert_index_grid",
    "assert_packed_raster",
]
