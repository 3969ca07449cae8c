from __future__ import annotations

from pathlib import Path

import numpy as np

from stagelut.color.lut3d import Lut3D
from stagelut.decode.nutexb import NUTEXB_LUT_SIZE, NUTEXB_PAYLOAD_SIZE, swizzled_texel_index

from .base import LutEncodeError, to_uint8


def encode_nutexb_bytes(lut: Lut3D, footer: bytes) -> bytes:
    if lut.size != NUTEXB_LUT_SIZE:
        raise LutEncodeError(f"nutexb LUTs are {NUTEXB_LUT_SIZE}^3; got {lut.size}^3")
    if not footer:
        raise LutEncodeError("a nutexb footer is required; pass a template .nutexb to copy it from")

    texels = np.full((NUTEXB_PAYLOAD_SIZE // 4, 4), 255, dtype=np.uint8)
    texels[swizzled_texel_index().reshape(-1), :3] = to_uint8(lut.table).reshape((-1, 3))
    return texels.tobytes() + bytes(footer)


def write_nutexb(path: Path, lut: Lut3D, footer: bytes) -> None:
    data = encode_nutexb_bytes(lut, footer)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        f.write(data)
