# retro_paint/constants.py
"""
Fixed sizes and tunables used across the project.

- Palette geometry (PALETTE_SIZE, OPAQUE_ALPHA, RGB_MASK)
- Buffer defaults (DEFAULT_INDEX, DEFAULT_FILL_INDEX)
- CLI defaults (OUTPUT_SUFFIX, IMAGE_EXTENSIONS)
- Quantiser block size (NEAREST_CHUNK)
"""
from __future__ import annotations

from typing import FrozenSet

# =========================
# Palette
# =========================
PALETTE_SIZE: int = 256
OPAQUE_ALPHA: int = 0xFF000000
RGB_MASK: int = 0x00FFFFFF

# ACT palette files: 256 RGB triples, optionally followed by count + transparency
ACT_PALETTE_BYTES: int = PALETTE_SIZE * 3
ACT_PALETTE_BYTES_EXTENDED: int = ACT_PALETTE_BYTES + 4

# =========================
# Buffer
# =========================
DEFAULT_INDEX: int = 0
DEFAULT_FILL_INDEX: int = 14  # yellow in the VGA table

# =========================
# Quantiser
# =========================
# Unique colours per distance block (block x 256 x 3 int32 scratch)
NEAREST_CHUNK: int = 4_096

# =========================
# CLI
# =========================
OUTPUT_SUFFIX: str = "_retro"
IMAGE_EXTENSIONS: FrozenSet[str] = frozenset(
    {".png", ".bmp", ".gif", ".jpg", ".jpeg", ".webp", ".tga", ".pcx"}
)

__all__ = [
    "PALETTE_SIZE",
    "OPAQUE_ALPHA",
    "RGB_MASK",
    "ACT_PALETTE_BYTES",
    "ACT_PALETTE_BYTES_EXTENDED",
    "DEFAULT_INDEX",
    "DEFAULT_FILL_INDEX",
    "NEAREST_CHUNK",
    "OUTPUT_SUFFIX",
    "IMAGE_EXTENSIONS",
]
