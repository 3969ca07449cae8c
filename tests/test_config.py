from __future__ import annotations

from pathlib import Path

import pytest

from stagelut.config import AppConfig, load_config


def test_load_config_reads_sections(tmp_path: Path) -> None:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(
        """
lut_size: 16
pipeline:
  kind: stage
  post_gamma: 2.4
correction:
  raw: true
  max_workers: 4
io:
  stamp_darken: 1.25
  nutexb_template: ./templates/color_grading_lut.nutexb
log_level: DEBUG
log_file: ./logs/stagelut.log
""",
        encoding="utf-8",
    )

    cfg = load_config(cfg_file)
    assert cfg.pipeline.post_gamma == 2.4
    assert cfg.pipeline.post_mix == 0.99961
    assert cfg.correction.raw is True
    assert cfg.correction.max_workers == 4
    assert cfg.io.stamp_darken == 1.25
    assert cfg.io.nutexb_template == (tmp_path / "templates" / "color_grading_lut.nutexb").resolve()
    assert cfg.log_level == "DEBUG"
    assert cfg.log_file == (tmp_path / "logs" / "stagelut.log").resolve()


def test_empty_config_uses_defaults(tmp_path: Path) -> None:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("", encoding="utf-8")

    cfg = load_config(cfg_file)
    assert cfg == AppConfig()


def test_config_rejects_tiny_lut(tmp_path: Path) -> None:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("lut_size: 1\n", encoding="utf-8")

    with pytest.raises(ValueError, match="lut_size"):
        load_config(cfg_file)


def test_config_rejects_non_mapping_section(tmp_path: Path) -> None:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("pipeline: stage\n", encoding="utf-8")

    with pytest.raises(ValueError, match="pipeline"):
        load_config(cfg_file)
