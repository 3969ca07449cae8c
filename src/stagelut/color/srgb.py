from __future__ import annotations

import numpy as np


# IEC 61966-2-1 transfer curve.
_SRGB = {
    "linear_cut": 0.0031308,
    "display_cut": 0.04045,
    "slope": 12.92,
    "gamma": 2.4,
    "offset": 0.055,
}


def to_display(linear: np.ndarray) -> np.ndarray:
    """Encode linear RGB with the sRGB transfer curve.

    Values are extrapolated, not clipped: anything below the cut (negatives
    included) stays on the linear segment and values above 1 continue on the
    power segment.
    """

    params = _SRGB
    x = np.asarray(linear, dtype=np.float64)
    high = (1.0 + params["offset"]) * np.power(np.maximum(x, params["linear_cut"]), 1.0 / params["gamma"]) - params["offset"]
    low = params["slope"] * x
    return np.where(x <= params["linear_cut"], low, high)


def to_linear(display: np.ndarray) -> np.ndarray:
    """Inverse of to_display, with the same extrapolation policy."""

    params = _SRGB
    y = np.asarray(display, dtype=np.float64)
    base = (np.maximum(y, params["display_cut"]) + params["offset"]) / (1.0 + params["offset"])
    high = np.power(base, params["gamma"])
    low = y / params["slope"]
    return np.where(y <= params["display_cut"], low, high)
