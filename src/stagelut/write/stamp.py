from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from stagelut.color.lut3d import DEFAULT_LUT_SIZE, Lut3D

from .strip_image import table_to_strip


logger = logging.getLogger(__name__)


def stamp_neutral_lut(pixels: np.ndarray, size: int = DEFAULT_LUT_SIZE, darken: float = 1.4) -> np.ndarray:
    """Darken an RGBA8 screenshot and paste a neutral LUT strip into its top-left corner.

    The engine brightens the frame after the LUT; dividing by ``darken``
    undoes that so the strip's gradient steps line up with on-screen colors.
    Channel values are truncated after division.
    """

    arr = np.asarray(pixels)
    if arr.ndim != 3 or arr.shape[2] != 4 or arr.dtype != np.uint8:
        raise ValueError(f"expected an HxWx4 uint8 image, got {arr.shape} {arr.dtype}")
    if arr.shape[0] < size or arr.shape[1] < size * size:
        raise ValueError(f"image {arr.shape[1]}x{arr.shape[0]} is too small for a {size * size}x{size} strip")

    out = arr.copy()
    out[..., :3] = np.floor(arr[..., :3].astype(np.float64) / darken).astype(np.uint8)

    # Exactly the quantized evenly spaced identity; correction reads an unedited strip as Lut3D.identity.
    strip = table_to_strip(Lut3D.identity(size))
    out[:size, : size * size, :3] = strip[..., :3]
    out[:size, : size * size, 3] = 255
    return out


def stamp_screenshot(src: Path, dst: Path, size: int = DEFAULT_LUT_SIZE, darken: float = 1.4) -> Path:
    try:
        from PIL import Image
    except Exception as exc:  # pragma: no cover - dependency is required
        raise RuntimeError("Pillow is required for screenshots. Install with: pip install Pillow") from exc

    with Image.open(src) as img:
        pixels = np.asarray(img.convert("RGBA"))

    stamped = stamp_neutral_lut(pixels, size=size, darken=darken)
    dst.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(stamped).save(dst)
    logger.info("stamped neutral %d^3 LUT into %s", size, dst)
    return dst
