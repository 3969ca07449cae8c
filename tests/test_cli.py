from __future__ import annotations

import json
from pathlib import Path

import numpy as np
from PIL import Image
import pytest

from stagelut.cli import main
from stagelut.color.lut3d import Lut3D
from stagelut.decode import read_lut, read_nutexb
from stagelut.write import encode_nutexb_bytes, write_lut


FOOTER = b"footer-bytes" * 8


@pytest.fixture
def stage_nutexb(tmp_path: Path) -> Path:
    stage = Lut3D.from_function(lambda p: 0.5 * p, size=16)
    path = tmp_path / "stage.nutexb"
    path.write_bytes(encode_nutexb_bytes(stage, FOOTER))
    return path


def test_stamp_command_writes_lut_png(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    src = tmp_path / "shot.png"
    Image.fromarray(np.zeros((64, 256, 3), dtype=np.uint8)).save(src)

    assert main(["stamp", str(src)]) == 0
    out = Path(capsys.readouterr().out.strip())
    assert out.name == "shot.lut.png"
    assert np.allclose(read_lut(out).table, Lut3D.identity(16).table)


def test_build_command_corrects_into_nutexb(
    tmp_path: Path,
    stage_nutexb: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    edited = write_lut(tmp_path / "edited.png", Lut3D.identity(16))
    out = tmp_path / "out.nutexb"

    rc = main(["build", str(edited), "--stage", str(stage_nutexb), "--out", str(out), "--json"])
    assert rc == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["mode"] == "corrected"
    assert payload["pipeline"] == "stage"
    assert payload["evaluated_points"] == 4096

    texture = read_nutexb(out)
    assert texture.footer == FOOTER
    stage = read_nutexb(stage_nutexb).lut
    assert np.allclose(texture.lut.table, stage.table, atol=1.0 / 255.0 + 1e-9)


def test_build_command_raw_mode_copies_edit(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rng = np.random.default_rng(3)
    edited_lut = Lut3D(table=rng.integers(0, 256, size=(16, 16, 16, 3)) / 255.0)
    edited = write_lut(tmp_path / "edited.png", edited_lut)
    out = tmp_path / "out.cube"

    assert main(["build", str(edited), "--raw", "--out", str(out)]) == 0
    assert "Mode: raw" in capsys.readouterr().out
    assert np.allclose(read_lut(out).table, edited_lut.table, atol=1e-6)


def test_build_command_uses_config(tmp_path: Path, stage_nutexb: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = tmp_path / "config.yaml"
    cfg.write_text("pipeline:\n  kind: identity\ncorrection:\n  max_workers: 2\n", encoding="utf-8")
    edited = write_lut(tmp_path / "edited.png", Lut3D.identity(16))
    out = tmp_path / "out.png"

    rc = main(["build", str(edited), "--stage", str(stage_nutexb), "--out", str(out), "--json", "--config", str(cfg)])
    assert rc == 0
    assert json.loads(capsys.readouterr().out)["pipeline"] == "identity"
    assert out.exists()


def test_build_command_requires_stage_without_raw(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    edited = write_lut(tmp_path / "edited.png", Lut3D.identity(16))
    assert main(["build", str(edited)]) == 1
    assert "--stage is required" in capsys.readouterr().err


def test_build_command_fails_without_nutexb_footer(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    edited = write_lut(tmp_path / "edited.png", Lut3D.identity(16))
    stage = write_lut(tmp_path / "stage.png", Lut3D.identity(16))

    rc = main(["build", str(edited), "--stage", str(stage), "--out", str(tmp_path / "out.nutexb")])
    assert rc == 1
    assert "footer" in capsys.readouterr().err


def test_decode_command_writes_strip_png(stage_nutexb: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["decode", str(stage_nutexb)]) == 0
    out = Path(capsys.readouterr().out.strip())
    assert out.suffix == ".png"
    with Image.open(out) as img:
        assert img.size == (256, 16)
