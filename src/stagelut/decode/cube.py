from __future__ import annotations

from pathlib import Path

import numpy as np

from stagelut.color.lut3d import Lut3D

from .base import LutDecodeError


def parse_cube(text: str, source: str = "<cube>") -> Lut3D:
    size = None
    title = ""
    domain_min = np.array([0.0, 0.0, 0.0], dtype=np.float64)
    domain_max = np.array([1.0, 1.0, 1.0], dtype=np.float64)
    values: list[list[float]] = []

    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split()
        head = parts[0].upper()
        try:
            if head == "TITLE":
                title = line[len(parts[0]) :].strip().strip('"')
                continue
            if head == "LUT_3D_SIZE":
                size = int(parts[1])
                continue
            if head == "LUT_1D_SIZE":
                raise LutDecodeError(f"1D LUTs are not supported: {source}")
            if head == "DOMAIN_MIN":
                domain_min = np.array([float(v) for v in parts[1:4]], dtype=np.float64)
                continue
            if head == "DOMAIN_MAX":
                domain_max = np.array([float(v) for v in parts[1:4]], dtype=np.float64)
                continue

            if len(parts) >= 3:
                values.append([float(parts[0]), float(parts[1]), float(parts[2])])
        except (IndexError, ValueError) as exc:
            raise LutDecodeError(f"malformed line in {source}: {line!r}") from exc

    if size is None:
        raise LutDecodeError(f"missing LUT_3D_SIZE in {source}")
    if not (np.allclose(domain_min, 0.0) and np.allclose(domain_max, 1.0)):
        raise LutDecodeError(
            f"only unit-cube domains are supported in {source}: "
            f"DOMAIN_MIN={domain_min.tolist()} DOMAIN_MAX={domain_max.tolist()}"
        )

    arr = np.asarray(values, dtype=np.float64).reshape((-1, 3))
    expected = size * size * size
    if arr.shape[0] != expected:
        raise LutDecodeError(f"invalid LUT size in {source}: expected {expected} rows, got {arr.shape[0]}")

    table = arr.reshape((size, size, size, 3), order="F")
    return Lut3D(table=table, title=title)


def load_cube(path: Path) -> Lut3D:
    with path.open("r", encoding="utf-8") as f:
        return parse_cube(f.read(), source=str(path))
