from __future__ import annotations

import numpy as np
import pytest

from stagelut.color.lut3d import Lut3D


@pytest.fixture
def identity_lut() -> Lut3D:
    return Lut3D.identity(16)


@pytest.fixture
def random_lut() -> Lut3D:
    rng = np.random.default_rng(1234)
    return Lut3D(table=rng.uniform(0.0, 1.0, size=(16, 16, 16, 3)))
