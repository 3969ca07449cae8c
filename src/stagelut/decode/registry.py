from __future__ import annotations

from pathlib import Path

from stagelut.color.lut3d import DEFAULT_LUT_SIZE, Lut3D, LutShapeError

from .base import UnsupportedFormatError
from .cube import load_cube
from .nutexb import read_nutexb
from .strip_image import read_strip_image


IMAGE_EXTENSIONS = {".png", ".bmp", ".tga", ".tif", ".tiff", ".jpg", ".jpeg", ".webp"}


def read_lut(path: Path, size: int = DEFAULT_LUT_SIZE) -> Lut3D:
    ext = path.suffix.lower()
    if ext == ".nutexb":
        lut = read_nutexb(path).lut
    elif ext == ".cube":
        lut = load_cube(path)
    elif ext in IMAGE_EXTENSIONS:
        lut = read_strip_image(path, size=size)
    else:
        raise UnsupportedFormatError(f"unsupported LUT extension {ext} for {path}")

    if lut.size != size:
        raise LutShapeError(f"{path} holds a {lut.size}^3 LUT; expected {size}^3")
    return lut
