from __future__ import annotations

from pathlib import Path

import numpy as np

from stagelut.color.lut3d import Lut3D

from .base import to_uint8


def table_to_strip(lut: Lut3D) -> np.ndarray:
    """Lay a LUT out as an RGBA8 image, ``size`` high and ``size * size`` wide."""

    n = lut.size
    # (r, g, b, c) -> (g, b, r, c)
    rgb = to_uint8(lut.table).transpose((1, 2, 0, 3)).reshape((n, n * n, 3))
    alpha = np.full((n, n * n, 1), 255, dtype=np.uint8)
    return np.concatenate([rgb, alpha], axis=-1)


def write_strip_image(path: Path, lut: Lut3D) -> None:
    try:
        from PIL import Image
    except Exception as exc:  # pragma: no cover - dependency is required
        raise RuntimeError("Pillow is required for image LUTs. Install with: pip install Pillow") from exc

    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(table_to_strip(lut)).save(path)
