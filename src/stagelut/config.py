from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass
class PipelineConfig:
    kind: str = "stage"
    pre_scale: float = 0.9375
    pre_offset: float = 0.03125
    post_mix: float = 0.99961
    post_exposure: float = 1.3703
    post_gamma: float = 2.2


@dataclass
class CorrectionConfig:
    raw: bool = False
    max_workers: int = 1
    verify_tolerance: float = 1e-4


@dataclass
class IOConfig:
    stamp_darken: float = 1.4
    nutexb_template: Path | None = None


@dataclass
class AppConfig:
    lut_size: int = 16
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    correction: CorrectionConfig = field(default_factory=CorrectionConfig)
    io: IOConfig = field(default_factory=IOConfig)
    log_level: str = "INFO"
    log_file: Path | None = None


def _expand_path(value: str | None, base: Path) -> Path | None:
    if value in (None, ""):
        return None
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = (base / path).resolve()
    return path


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"config section '{key}' must be a mapping")
    return value


def load_config(path: str | Path) -> AppConfig:
    try:
        import yaml  # type: ignore
    except Exception as exc:
        raise RuntimeError("PyYAML is required for config loading. Install with: pip install PyYAML") from exc

    cfg_path = Path(path).expanduser().resolve()
    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    base = cfg_path.parent
    pipeline_raw = _section(raw, "pipeline")
    correction_raw = _section(raw, "correction")
    io_raw = _section(raw, "io")

    defaults = PipelineConfig()
    pipeline = PipelineConfig(
        kind=str(pipeline_raw.get("kind", defaults.kind)),
        pre_scale=float(pipeline_raw.get("pre_scale", defaults.pre_scale)),
        pre_offset=float(pipeline_raw.get("pre_offset", defaults.pre_offset)),
        post_mix=float(pipeline_raw.get("post_mix", defaults.post_mix)),
        post_exposure=float(pipeline_raw.get("post_exposure", defaults.post_exposure)),
        post_gamma=float(pipeline_raw.get("post_gamma", defaults.post_gamma)),
    )

    correction = CorrectionConfig(
        raw=bool(correction_raw.get("raw", False)),
        max_workers=max(1, int(correction_raw.get("max_workers", 1))),
        verify_tolerance=float(correction_raw.get("verify_tolerance", 1e-4)),
    )

    io = IOConfig(
        stamp_darken=float(io_raw.get("stamp_darken", 1.4)),
        nutexb_template=_expand_path(io_raw.get("nutexb_template"), base),
    )

    lut_size = int(raw.get("lut_size", 16))
    if lut_size < 2:
        raise ValueError(f"lut_size must be at least 2, got {lut_size}")
    if io.stamp_darken <= 0.0:
        raise ValueError("io.stamp_darken must be positive")

    return AppConfig(
        lut_size=lut_size,
        pipeline=pipeline,
        correction=correction,
        io=io,
        log_level=str(raw.get("log_level", "INFO")),
        log_file=_expand_path(raw.get("log_file"), base),
    )
