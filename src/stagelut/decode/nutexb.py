from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np

from stagelut.color.lut3d import Lut3D

from .base import LutDecodeError


NUTEXB_LUT_SIZE = 16
NUTEXB_PAYLOAD_SIZE = NUTEXB_LUT_SIZE * NUTEXB_LUT_SIZE * NUTEXB_LUT_SIZE * 4

# Address bits owned by each texel coordinate in the swizzled RGBA8 volume.
# Every 4096 bytes holds one (G, B) quadrant, split between indices 7 and 8.
_X_MASK = 0b0000_0001_0010_1100
_Y_MASK = 0b0010_0000_1101_0000
_Z_MASK = 0b0001_1110_0000_0000


@dataclass
class NutexbTexture:
    lut: Lut3D
    footer: bytes


def _deposit_bits(value: int, mask: int) -> int:
    out = 0
    bit = 0
    while mask:
        low = mask & -mask
        if (value >> bit) & 1:
            out |= low
        mask &= mask - 1
        bit += 1
    return out


def swizzled_texel_index() -> np.ndarray:
    """Texel index in the swizzled payload for each ``[r, g, b]`` grid site."""

    n = NUTEXB_LUT_SIZE
    xs = np.array([_deposit_bits(v, _X_MASK) for v in range(n)], dtype=np.intp)
    ys = np.array([_deposit_bits(v, _Y_MASK) for v in range(n)], dtype=np.intp)
    zs = np.array([_deposit_bits(v, _Z_MASK) for v in range(n)], dtype=np.intp)
    offsets = xs[:, None, None] + ys[None, :, None] + zs[None, None, :]
    return offsets // 4


def decode_nutexb_bytes(data: bytes, title: str = "") -> NutexbTexture:
    if len(data) < NUTEXB_PAYLOAD_SIZE:
        raise LutDecodeError(
            f"nutexb data is {len(data)} bytes; expected at least {NUTEXB_PAYLOAD_SIZE} bytes of texels"
        )

    rgba = np.frombuffer(data[:NUTEXB_PAYLOAD_SIZE], dtype=np.uint8).reshape((-1, 4))
    table = rgba[swizzled_texel_index()][..., :3].astype(np.float64) / 255.0
    return NutexbTexture(lut=Lut3D(table=table, title=title), footer=bytes(data[NUTEXB_PAYLOAD_SIZE:]))


def read_nutexb(path: Path) -> NutexbTexture:
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise LutDecodeError(f"could not read {path}: {exc}") from exc
    return decode_nutexb_bytes(data, title=path.stem)
