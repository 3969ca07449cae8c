from __future__ import annotations

from pathlib import Path

import numpy as np

from stagelut.color.lut3d import Lut3D


def format_cube(lut: Lut3D) -> str:
    lines = []
    if lut.title:
        lines.append(f'TITLE "{lut.title}"')
    lines.append(f"LUT_3D_SIZE {lut.size}")
    rows = np.asarray(lut.table).reshape((-1, 3), order="F")
    lines.extend(f"{r:.6f} {g:.6f} {b:.6f}" for r, g, b in rows)
    return "\n".join(lines) + "\n"


def write_cube(path: Path, lut: Lut3D) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_cube(lut), encoding="utf-8")
