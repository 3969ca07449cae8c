from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import numpy as np

from stagelut.config import PipelineConfig


class PipelineInvertibilityError(RuntimeError):
    def __init__(self, message: str, coordinate: tuple[int, int, int] | None = None, stage: str | None = None) -> None:
        super().__init__(message)
        self.coordinate = coordinate
        self.stage = stage


class PipelineModel(Protocol):
    """Per-channel color functions the engine applies around the LUT lookup.

    ``forward_post(y, x)`` must be invertible in ``y`` for every fixed ``x``
    that occurs; ``inverse_post(z, x)`` is that inverse for the same ``x``.
    """

    name: str

    def forward_pre(self, x: np.ndarray) -> np.ndarray:
        ...

    def inverse_pre(self, p: np.ndarray) -> np.ndarray:
        ...

    def forward_post(self, y: np.ndarray, x: np.ndarray) -> np.ndarray:
        ...

    def inverse_post(self, z: np.ndarray, x: np.ndarray) -> np.ndarray:
        ...

    def post_clamped(self, y: np.ndarray, x: np.ndarray) -> np.ndarray:
        """Per-channel mask of inputs that forward_post clamps, where g_x has no inverse."""
        ...

    def validate(self) -> None:
        ...


@dataclass(frozen=True)
class StagePipeline:
    """Stage post-processing measured from in-engine captures.

    Pre-LUT the linear color is compressed into the LUT's input range. Post-LUT
    the output is mixed back toward the pre-LUT color, brightened, and raised
    to a display gamma. Below black the post stage clamps, so ``g_x`` is only
    bijective for non-negative bases; ``forward_post`` and ``inverse_post``
    both clamp at zero there.
    """

    pre_scale: float = 0.9375
    pre_offset: float = 0.03125
    post_mix: float = 0.99961
    post_exposure: float = 1.3703
    post_gamma: float = 2.2
    name: str = "stage"

    def validate(self) -> None:
        if self.pre_scale == 0.0:
            raise PipelineInvertibilityError("pre_scale is zero; f is not invertible", stage="pre")
        if self.post_mix == 0.0:
            raise PipelineInvertibilityError("post_mix is zero; g_x ignores the LUT output", stage="post")
        if self.post_exposure <= 0.0:
            raise PipelineInvertibilityError("post_exposure must be positive", stage="post")
        if self.post_gamma <= 0.0:
            raise PipelineInvertibilityError("post_gamma must be positive", stage="post")

    def forward_pre(self, x: np.ndarray) -> np.ndarray:
        return np.asarray(x, dtype=np.float64) * self.pre_scale + self.pre_offset

    def inverse_pre(self, p: np.ndarray) -> np.ndarray:
        return (np.asarray(p, dtype=np.float64) - self.pre_offset) / self.pre_scale

    def forward_post(self, y: np.ndarray, x: np.ndarray) -> np.ndarray:
        y = np.asarray(y, dtype=np.float64)
        x = np.asarray(x, dtype=np.float64)
        base = ((y - x) * self.post_mix + x) * self.post_exposure
        return np.power(np.maximum(base, 0.0), self.post_gamma)

    def inverse_post(self, z: np.ndarray, x: np.ndarray) -> np.ndarray:
        z = np.asarray(z, dtype=np.float64)
        x = np.asarray(x, dtype=np.float64)
        base = np.power(np.maximum(z, 0.0), 1.0 / self.post_gamma) / self.post_exposure
        return (base - x) / self.post_mix + x

    def post_clamped(self, y: np.ndarray, x: np.ndarray) -> np.ndarray:
        y = np.asarray(y, dtype=np.float64)
        x = np.asarray(x, dtype=np.float64)
        return ((y - x) * self.post_mix + x) * self.post_exposure < 0.0


@dataclass(frozen=True)
class IdentityPipeline:
    name: str = "identity"

    def validate(self) -> None:
        return None

    def forward_pre(self, x: np.ndarray) -> np.ndarray:
        return np.asarray(x, dtype=np.float64)

    def inverse_pre(self, p: np.ndarray) -> np.ndarray:
        return np.asarray(p, dtype=np.float64)

    def forward_post(self, y: np.ndarray, x: np.ndarray) -> np.ndarray:
        return np.asarray(y, dtype=np.float64)

    def inverse_post(self, z: np.ndarray, x: np.ndarray) -> np.ndarray:
        return np.asarray(z, dtype=np.float64)

    def post_clamped(self, y: np.ndarray, x: np.ndarray) -> np.ndarray:
        return np.zeros(np.shape(y), dtype=bool)


def build_pipeline(cfg: PipelineConfig) -> PipelineModel:
    kind = cfg.kind.lower()
    if kind == "stage":
        model: PipelineModel = StagePipeline(
            pre_scale=float(cfg.pre_scale),
            pre_offset=float(cfg.pre_offset),
            post_mix=float(cfg.post_mix),
            post_exposure=float(cfg.post_exposure),
            post_gamma=float(cfg.post_gamma),
        )
    elif kind == "identity":
        model = IdentityPipeline()
    else:
        raise ValueError(f"unknown pipeline kind: {cfg.kind!r} (expected 'stage' or 'identity')")

    model.validate()
    return model
