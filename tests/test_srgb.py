from __future__ import annotations

import numpy as np

from stagelut.color.srgb import to_display, to_linear


def test_srgb_linear_inverse_on_8bit_levels() -> None:
    v = np.arange(256, dtype=np.float64) / 255.0
    assert np.allclose(to_display(to_linear(v)), v, atol=1e-12)
    assert np.allclose(to_linear(to_display(v)), v, atol=1e-12)


def test_srgb_reference_values() -> None:
    assert np.isclose(to_linear(np.array(0.5)), 0.21404114, atol=1e-5)
    assert np.isclose(to_display(np.array(0.18)), 0.46135613, atol=1e-4)
    assert to_display(np.array(0.0)) == 0.0
    assert np.isclose(to_display(np.array(1.0)), 1.0)


def test_srgb_extrapolates_outside_unit_range() -> None:
    v = np.array([-0.25, -0.01, 1.2, 2.5])
    display = to_display(v)
    assert np.isclose(display[0], -0.25 * 12.92)
    assert display[2] > 1.0
    assert np.all(np.isfinite(display))
    assert np.allclose(to_linear(display), v, atol=1e-12)


def test_srgb_is_per_channel_and_monotonic() -> None:
    v = np.linspace(-0.1, 1.5, 4096)
    rgb = np.stack([v, v[::-1], np.full_like(v, 0.5)], axis=-1)
    out = to_display(rgb)
    assert np.allclose(out[:, 0], to_display(v))
    assert np.allclose(out[:, 2], to_display(np.array(0.5)))
    assert np.all(np.diff(to_display(v)) > 0.0)
    assert np.all(np.diff(to_linear(v)) > 0.0)
