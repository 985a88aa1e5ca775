from __future__ import annotations

import io
from pathlib import Path

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .constants import (
    ACT_PALETTE_BYTES,
    ACT_PALETTE_BYTES_EXTENDED,
    IMAGE_EXTENSIONS,
    OPAQUE_ALPHA,
)
from .core_types import PackedRaster, U8Image, assert_packed_raster
from .palette_data import Palette

"""
Image file adapters: Pillow images <-> packed 0xAARRGGBB rasters, ACT palettes.

The core never imports this module; it only sees packed rasters.
"""

try:
    from PIL import ImageCms  # ICC conversion if profile present
except Exception:  # pragma: no cover
    ImageCms = None  # type: ignore[assignment]


def rgb_array_to_packed(rgb: U8Image) -> PackedRaster:
    """uint8 (H,W,3|4) -> uint32 (H,W) 0xAARRGGBB. Missing alpha becomes 0xFF."""
    arr = np.asarray(rgb, dtype=np.uint8)
    if arr.ndim != 3 or arr.shape[-1] not in (3, 4):
        raise TypeError("expected uint8 (H,W,3/4) image")
    r = arr[..., 0].astype(np.uint32)
    g = arr[..., 1].astype(np.uint32)
    b = arr[..., 2].astype(np.uint32)
    if arr.shape[-1] == 4:
        a = arr[..., 3].astype(np.uint32)
    else:
        a = np.full(arr.shape[:2], 0xFF, dtype=np.uint32)
    return (a << 24) | (r << 16) | (g << 8) | b


def packed_to_rgba_array(raster: PackedRaster) -> U8Image:
    """uint32 (H,W) -> uint8 (H,W,4) RGBA, alpha forced to 255."""
    assert_packed_raster(raster)
    H, W = raster.shape
    out = np.empty((H, W, 4), dtype=np.uint8)
    out[..., 0] = (raster >> 16) & 0xFF
    out[..., 1] = (raster >> 8) & 0xFF
    out[..., 2] = raster & 0xFF
    out[..., 3] = 255
    return out


def _convert_to_srgb_rgba(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    icc_bytes = im.info.get("icc_profile")

    if icc_bytes and ImageCms is not None:
        try:
            src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
            dst_prof = ImageCms.createProfile("sRGB")
            im2 = ImageCms.profileToProfile(
                im,
                src_prof,
                dst_prof,
                renderingIntent=ImageCms.Intent.PERCEPTUAL,
                outputMode="RGBA",
            )
            if im2 is None:
                return im.convert("RGBA")
            return im2
        except (ImageCms.PyCMSError, OSError, ValueError):
            return im.convert("RGBA")

    return im.convert("RGBA")


def load_image_packed(path: Path) -> PackedRaster:
    """Decode any Pillow-readable file into a uint32 (H,W) packed raster."""
    with Image.open(path) as im0:
        im = _convert_to_srgb_rgba(im0)
    return rgb_array_to_packed(np.array(im, dtype=np.uint8))


def save_packed_png(path: Path, raster: PackedRaster) -> Path:
    """Write a packed raster as an opaque RGBA PNG. Returns the path written."""
    path = Path(path)
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    opaque = np.asarray(raster, dtype=np.uint32) | np.uint32(OPAQUE_ALPHA)
    Image.fromarray(packed_to_rgba_array(opaque)).save(path)
    return path


def read_act_palette(path: Path) -> Palette:
    """
    Load an Adobe ACT palette: 256 RGB triples (768 bytes), optionally followed
    by a 4-byte colour count / transparent index block, which is ignored.
    """
    data = Path(path).read_bytes()
    if len(data) not in (ACT_PALETTE_BYTES, ACT_PALETTE_BYTES_EXTENDED):
        raise ValueError(
            f"ACT palette must be {ACT_PALETTE_BYTES} or {ACT_PALETTE_BYTES_EXTENDED} bytes, got {len(data)}"
        )
    return Palette(
        (data[i], data[i + 1], data[i + 2]) for i in range(0, ACT_PALETTE_BYTES, 3)
    )


def is_image_file(path: Path) -> bool:
    """
    True for a regular file with a known image suffix whose header Pillow
    accepts. verify() only parses the file; nothing is decoded.
    """
    path = Path(path)
    if not path.is_file() or path.suffix.lower() not in IMAGE_EXTENSIONS:
        return False
    try:
        with Image.open(path) as im:
            im.verify()
    except (UnidentifiedImageError, OSError, SyntaxError):
        return False
    return True


__all__ = [
    "rgb_array_to_packed",
    "packed_to_rgba_array",
    "load_image_packed",
    "save_packed_png",
    "read_act_palette",
    "is_image_file",
]
