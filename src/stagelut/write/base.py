from __future__ import annotations

import numpy as np


class LutEncodeError(RuntimeError):
    pass


def to_uint8(values: np.ndarray) -> np.ndarray:
    """Quantize [0, 1] floats to 8 bits, round-to-nearest, clipping out-of-range values."""

    arr = np.asarray(values, dtype=np.float64)
    arr = np.nan_to_num(arr, nan=0.0, posinf=1.0, neginf=0.0)
    return np.rint(np.clip(arr, 0.0, 1.0) * 255.0).astype(np.uint8)
