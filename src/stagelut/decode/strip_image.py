from __future__ import annotations

from pathlib import Path

import numpy as np

from stagelut.color.lut3d import DEFAULT_LUT_SIZE, Lut3D

from .base import LutDecodeError


def strip_to_table(pixels: np.ndarray, size: int = DEFAULT_LUT_SIZE) -> np.ndarray:
    """Unwrap the top-left ``size`` x ``size * size`` block of an image into a LUT table.

    Pixel ``(r + b * size, g)`` holds ``table[r, g, b]``. 8-bit input is
    scaled by 1/255; float input is taken as-is.
    """

    arr = np.asarray(pixels)
    if arr.ndim != 3 or arr.shape[2] < 3:
        raise LutDecodeError(f"expected an HxWxC RGB image, got {arr.shape}")

    height, width = arr.shape[:2]
    if height < size or width < size * size:
        raise LutDecodeError(
            f"image is {width}x{height}; a {size}^3 LUT strip needs at least {size * size}x{size}"
        )

    block = arr[:size, : size * size, :3]
    if np.issubdtype(block.dtype, np.integer):
        block = block.astype(np.float64) / 255.0
    else:
        block = block.astype(np.float64)

    # (g, b, r, c) -> (r, g, b, c)
    return block.reshape((size, size, size, 3)).transpose((2, 0, 1, 3))


def read_strip_image(path: Path, size: int = DEFAULT_LUT_SIZE) -> Lut3D:
    try:
        from PIL import Image
    except Exception as exc:  # pragma: no cover - dependency is required
        raise RuntimeError("Pillow is required for image LUTs. Install with: pip install Pillow") from exc

    try:
        with Image.open(path) as img:
            pixels = np.asarray(img.convert("RGB"))
    except (OSError, ValueError) as exc:
        raise LutDecodeError(f"could not read image {path}: {exc}") from exc

    return Lut3D(table=strip_to_table(pixels, size=size), title=path.stem)
