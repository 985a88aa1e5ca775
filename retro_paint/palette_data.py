# retro_paint/palette_data.py
from __future__ import annotations

"""
Palette definitions, the Palette container, and nearest-colour search.

Exports:
  VGA_PALETTE: list[int]  # 256 packed 0xRRGGBB values, VGA mode 13h order
  Palette(entries)        # fixed 256-slot mutable table of PaletteEntry
  default_palette() -> Palette
  squared_distance(a, b) -> int
  nearest_index(color, palette) -> int
  nearest_indices(colors, palette) -> uint8 array
"""

from typing import Iterable, Iterator, List, Sequence, Union

import numpy as np

from .constants import NEAREST_CHUNK, PALETTE_SIZE, RGB_MASK
from .core_types import PaletteEntry, RGBTuple, coerce_entry


# Default VGA "mode 13h" palette: 16 EGA colours, 16 greys, 9 hue rings, 8 black.
VGA_PALETTE: List[int] = [
    0x000000, 0x0002aa, 0x14aa00, 0x00aaaa, 0xaa0003, 0xaa00aa, 0xaa5500, 0xaaaaaa,
    0x555555, 0x5555ff, 0x55ff55, 0x55ffff, 0xff5555, 0xfd55ff, 0xffff55, 0xffffff,
    0x000000, 0x101010, 0x202020, 0x353535, 0x454545, 0x555555, 0x656565, 0x757575,
    0x8a8a8a, 0x9a9a9a, 0xaaaaaa, 0xbababa, 0xcacaca, 0xdfdfdf, 0xefefef, 0xffffff,
    0x0004ff, 0x4104ff, 0x8203ff, 0xbe02ff, 0xfd00ff, 0xfe00be, 0xff0082, 0xff0041,
    0xff0008, 0xff4105, 0xff8200, 0xffbe00, 0xffff00, 0xbeff00, 0x82ff00, 0x41ff01,
    0x24ff00, 0x22ff42, 0x1dff82, 0x12ffbe, 0x00ffff, 0x00beff, 0x0182ff, 0x0041ff,
    0x8282ff, 0x9e82ff, 0xbe82ff, 0xdf82ff, 0xfd82ff, 0xfe82df, 0xff82be, 0xff829e,
    0xff8282, 0xff9e82, 0xffbe82, 0xffdf82, 0xffff82, 0xdfff82, 0xbeff82, 0x9eff82,
    0x82ff82, 0x82ff9e, 0x82ffbe, 0x82ffdf, 0x82ffff, 0x82dfff, 0x82beff, 0x829eff,
    0xbabaff, 0xcabaff, 0xdfbaff, 0xefbaff, 0xfebaff, 0xfebaef, 0xffbadf, 0xffbaca,
    0xffbaba, 0xffcaba, 0xffdfba, 0xffefba, 0xffffba, 0xefffba, 0xdfffba, 0xcaffbb,
    0xbaffba, 0xbaffca, 0xbaffdf, 0xbaffef, 0xbaffff, 0xbaefff, 0xbadfff, 0xbacaff,
    0x010171, 0x1c0171, 0x390171, 0x550071, 0x710071, 0x710055, 0x710039, 0x71001c,
    0x710001, 0x711c01, 0x713900, 0x715500, 0x717100, 0x557100, 0x397100, 0x1c7100,
    0x097100, 0x09711c, 0x067139, 0x037155, 0x007171, 0x005571, 0x003971, 0x001c71,
    0x393971, 0x453971, 0x553971, 0x613971, 0x713971, 0x713961, 0x713955, 0x713945,
    0x713939, 0x714539, 0x715539, 0x716139, 0x717139, 0x617139, 0x557139, 0x45713a,
    0x397139, 0x397145, 0x397155, 0x397161, 0x397171, 0x396171, 0x395571, 0x394572,
    0x515171, 0x595171, 0x615171, 0x695171, 0x715171, 0x715169, 0x715161, 0x715159,
    0x715151, 0x715951, 0x716151, 0x716951, 0x717151, 0x697151, 0x617151, 0x597151,
    0x517151, 0x51715a, 0x517161, 0x517169, 0x517171, 0x516971, 0x516171, 0x515971,
    0x000042, 0x110041, 0x200041, 0x310041, 0x410041, 0x410032, 0x410020, 0x410010,
    0x410000, 0x411000, 0x412000, 0x413100, 0x414100, 0x314100, 0x204100, 0x104100,
    0x034100, 0x034110, 0x024120, 0x014131, 0x004141, 0x003141, 0x002041, 0x001041,
    0x202041, 0x282041, 0x312041, 0x392041, 0x412041, 0x412039, 0x412031, 0x412028,
    0x412020, 0x412820, 0x413120, 0x413921, 0x414120, 0x394120, 0x314120, 0x284120,
    0x204120, 0x204128, 0x204131, 0x204139, 0x204141, 0x203941, 0x203141, 0x202841,
    0x2d2d41, 0x312d41, 0x352d41, 0x3d2d41, 0x412d41, 0x412d3d, 0x412d35, 0x412d31,
    0x412d2d, 0x41312d, 0x41352d, 0x413d2d, 0x41412d, 0x3d412d, 0x35412d, 0x31412d,
    0x2d412d, 0x2d4131, 0x2d4135, 0x2d413d, 0x2d4141, 0x2d3d41, 0x2d3541, 0x2d3141,
    0x000000, 0x000000, 0x000000, 0x000000, 0x000000, 0x000000, 0x000000, 0x000000,
]


def _slot(index: int) -> int:
    # no negative indexing: -1 must not alias entry 255
    i = int(index)
    if not 0 <= i < PALETTE_SIZE:
        raise IndexError(f"palette index {index} outside 0..{PALETTE_SIZE - 1}")
    return i


class Palette:
    """
    Ordered table of exactly 256 PaletteEntry values.

    Entries may be overwritten in place (palette cycling); the size never changes.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[Union[PaletteEntry, int, RGBTuple]]) -> None:
        items = [coerce_entry(e) for e in entries]
        if len(items) != PALETTE_SIZE:
            raise ValueError(
                f"palette must have exactly {PALETTE_SIZE} entries, got {len(items)}"
            )
        self._entries: List[PaletteEntry] = items

    @classmethod
    def from_colors(cls, colors: Iterable[int]) -> "Palette":
        """Build from packed 0xXXRRGGBB ints (alpha ignored)."""
        return cls(PaletteEntry.from_packed(int(c)) for c in colors)

    @classmethod
    def from_hex(cls, hex_list: Sequence[str]) -> "Palette":
        return cls(PaletteEntry.from_hex(hx) for hx in hex_list)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PaletteEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> PaletteEntry:
        return self._entries[_slot(index)]

    def __setitem__(self, index: int, entry: Union[PaletteEntry, int, RGBTuple]) -> None:
        self._entries[_slot(index)] = coerce_entry(entry)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Palette):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"Palette({len(self._entries)} entries)"

    def entry(self, index: int) -> PaletteEntry:
        return self._entries[_slot(index)]

    def set_entry(self, index: int, entry: Union[PaletteEntry, int, RGBTuple]) -> None:
        self._entries[_slot(index)] = coerce_entry(entry)

    def copy(self) -> "Palette":
        return Palette(self._entries)

    def packed(self) -> np.ndarray:
        """uint32 [256] of opaque 0xFFRRGGBB words."""
        return np.array([e.color for e in self._entries], dtype=np.uint32)

    def rgb_array(self) -> np.ndarray:
        """uint8 [256, 3] channel rows."""
        return np.array([e.rgb for e in self._entries], dtype=np.uint8)


def default_palette() -> Palette:
    """Fresh, independently mutable copy of the VGA palette."""
    return Palette.from_colors(VGA_PALETTE)


def squared_distance(a: PaletteEntry, b: PaletteEntry) -> int:
    """Sum of squared channel deltas; no perceptual weighting."""
    return a.distance_squared(b)


def nearest_index(color: Union[PaletteEntry, int], palette: Palette) -> int:
    """
    Linear scan for the closest palette entry.

    Ties keep the lowest index: only a strictly smaller distance replaces the best.
    """
    probe = coerce_entry(color)
    best_index = 0
    best_distance = None
    for index, entry in enumerate(palette):
        d = entry.distance_squared(probe)
        if best_distance is None or d < best_distance:
            best_distance = d
            best_index = index
    return best_index


def nearest_indices(colors: np.ndarray, palette: Palette) -> np.ndarray:
    """
    Vectorised nearest_index over an array of packed 0xXXRRGGBB colours.

    Works on unique colours only. np.argmin returns the first minimum, which
    gives the same lowest-index tie-break as nearest_index.
    Returns uint8 indices with the input's shape.
    """
    flat = np.asarray(colors).astype(np.uint32, copy=False).reshape(-1) & np.uint32(RGB_MASK)
    if flat.size == 0:
        return np.zeros(np.shape(colors), dtype=np.uint8)

    uniq, inverse = np.unique(flat, return_inverse=True)
    src = np.stack(
        [(uniq >> 16) & 0xFF, (uniq >> 8) & 0xFF, uniq & 0xFF], axis=1
    ).astype(np.int32)
    pal = palette.rgb_array().astype(np.int32)

    best = np.empty(uniq.shape[0], dtype=np.uint8)
    for start in range(0, src.shape[0], NEAREST_CHUNK):
        block = src[start : start + NEAREST_CHUNK]
        diff = block[:, None, :] - pal[None, :, :]
        d2 = np.sum(diff * diff, axis=2)
        best[start : start + block.shape[0]] = np.argmin(d2, axis=1)

    return best[inverse.reshape(-1)].reshape(np.shape(colors))


__all__ = [
    "VGA_PALETTE",
    "Palette",
    "default_palette",
    "squared_distance",
    "nearest_index",
    "nearest_indices",
]
