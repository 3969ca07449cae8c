from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator

import numpy as np


DEFAULT_LUT_SIZE = 16


class LutShapeError(ValueError):
    pass


def grid_points(size: int) -> Iterator[tuple[tuple[int, int, int], tuple[float, float, float]]]:
    """Yield every ``((i, j, k), (r, g, b))`` site of a size^3 grid, red fastest.

    Each call returns a fresh generator, so the sequence can be walked again.
    """

    scale = float(size - 1)
    for k in range(size):
        for j in range(size):
            for i in range(size):
                yield (i, j, k), (i / scale, j / scale, k / scale)


def grid_coordinates(size: int) -> tuple[np.ndarray, np.ndarray]:
    """Return grid_points(size) as ``(indices, points)`` arrays of shape (size^3, 3)."""

    sites = list(grid_points(size))
    indices = np.array([idx for idx, _ in sites], dtype=np.intp).reshape((-1, 3))
    points = np.array([p for _, p in sites], dtype=np.float64).reshape((-1, 3))
    return indices, points


@dataclass(frozen=True, eq=False)
class Lut3D:
    """Immutable 3D LUT indexed ``table[r, g, b]`` over the unit cube."""

    table: np.ndarray
    title: str = ""

    def __post_init__(self) -> None:
        table = np.array(self.table, dtype=np.float64, copy=True)
        if table.ndim != 4 or table.shape[3] != 3 or len(set(table.shape[:3])) != 1:
            raise LutShapeError(f"expected an (N, N, N, 3) table, got {table.shape}")
        if table.shape[0] < 2:
            raise LutShapeError(f"LUT size must be at least 2, got {table.shape[0]}")
        if not np.isfinite(table).all():
            raise LutShapeError("LUT table contains non-finite values")
        table.flags.writeable = False
        object.__setattr__(self, "table", table)

    @property
    def size(self) -> int:
        return int(self.table.shape[0])

    @classmethod
    def identity(cls, size: int = DEFAULT_LUT_SIZE) -> "Lut3D":
        return cls.from_function(lambda p: p, size=size, title="identity")

    @classmethod
    def from_function(
        cls,
        fn: Callable[[np.ndarray], np.ndarray],
        size: int = DEFAULT_LUT_SIZE,
        title: str = "",
    ) -> "Lut3D":
        indices, points = grid_coordinates(size)
        table = np.zeros((size, size, size, 3), dtype=np.float64)
        table[indices[:, 0], indices[:, 1], indices[:, 2]] = np.asarray(fn(points), dtype=np.float64)
        return cls(table=table, title=title)

    def with_table(self, table: np.ndarray) -> "Lut3D":
        return Lut3D(table=table, title=self.title)

    def grid_points(self) -> Iterator[tuple[tuple[int, int, int], tuple[float, float, float]]]:
        return grid_points(self.size)

    def sample(self, points: np.ndarray) -> np.ndarray:
        """Trilinear lookup at ``(..., 3)`` points.

        Points are clamped to [0, 1] before interpolation; grid nodes return
        their stored values exactly.
        """

        x = np.asarray(points, dtype=np.float64)
        if x.shape[-1] != 3:
            raise LutShapeError(f"expected (..., 3) sample points, got {x.shape}")

        t = np.clip(x, 0.0, 1.0) * (self.size - 1)
        # Snap i / (N - 1) * (N - 1) rounding noise back onto the node.
        nearest = np.rint(t)
        t = np.where(np.abs(t - nearest) < 1e-9, nearest, t)

        # t == size - 1 lands on the last cell with f == 1.
        i0 = np.clip(np.floor(t).astype(np.intp), 0, self.size - 2)
        i1 = i0 + 1
        f = t - i0

        r0, g0, b0 = i0[..., 0], i0[..., 1], i0[..., 2]
        r1, g1, b1 = i1[..., 0], i1[..., 1], i1[..., 2]
        fr, fg, fb = f[..., 0:1], f[..., 1:2], f[..., 2:3]

        c000 = self.table[r0, g0, b0]
        c100 = self.table[r1, g0, b0]
        c010 = self.table[r0, g1, b0]
        c110 = self.table[r1, g1, b0]
        c001 = self.table[r0, g0, b1]
        c101 = self.table[r1, g0, b1]
        c011 = self.table[r0, g1, b1]
        c111 = self.table[r1, g1, b1]

        c00 = c000 * (1 - fr) + c100 * fr
        c10 = c010 * (1 - fr) + c110 * fr
        c01 = c001 * (1 - fr) + c101 * fr
        c11 = c011 * (1 - fr) + c111 * fr

        c0 = c00 * (1 - fg) + c10 * fg
        c1 = c01 * (1 - fg) + c11 * fg

        return c0 * (1 - fb) + c1 * fb


def require_same_size(a: Lut3D, b: Lut3D, what: str = "LUTs") -> None:
    if a.size != b.size:
        raise LutShapeError(f"{what} have different grid sizes: {a.size} vs {b.size}")
