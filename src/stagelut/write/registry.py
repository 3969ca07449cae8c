from __future__ import annotations

from pathlib import Path

from stagelut.color.lut3d import Lut3D
from stagelut.decode.base import UnsupportedFormatError
from stagelut.decode.registry import IMAGE_EXTENSIONS

from .cube import write_cube
from .nutexb import write_nutexb
from .strip_image import write_strip_image


# Lossy formats would smear neighbouring LUT texels.
_LOSSLESS_IMAGE_EXTENSIONS = IMAGE_EXTENSIONS - {".jpg", ".jpeg", ".webp"}


def write_lut(path: Path, lut: Lut3D, footer: bytes | None = None) -> Path:
    ext = path.suffix.lower()
    if ext == ".nutexb":
        write_nutexb(path, lut, footer or b"")
    elif ext == ".cube":
        write_cube(path, lut)
    elif ext in _LOSSLESS_IMAGE_EXTENSIONS:
        write_strip_image(path, lut)
    else:
        raise UnsupportedFormatError(f"unsupported output extension {ext} for {path}")
    return path
