from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from stagelut.color.lut3d import Lut3D
from stagelut.decode import LutDecodeError, decode_nutexb_bytes, read_nutexb
from stagelut.decode.nutexb import NUTEXB_PAYLOAD_SIZE, swizzled_texel_index
from stagelut.write import LutEncodeError, encode_nutexb_bytes, write_nutexb


FOOTER = b"\x00" * 64 + b" XNT\x01\x00\x02\x00"


def test_swizzle_is_a_permutation() -> None:
    index = swizzled_texel_index()
    assert index.shape == (16, 16, 16)
    assert np.array_equal(np.sort(index.reshape(-1)), np.arange(16**3))


def test_swizzle_primaries(identity_lut: Lut3D) -> None:
    data = encode_nutexb_bytes(identity_lut, FOOTER)

    assert data[0:4] == bytes([0, 0, 0, 255])
    assert data[300:304] == bytes([255, 0, 0, 255])
    assert data[8400:8404] == bytes([0, 255, 0, 255])
    assert data[7680:7684] == bytes([0, 0, 255, 255])
    assert data[16380:16384] == bytes([255, 255, 255, 255])


def test_swizzle_first_row(identity_lut: Lut3D) -> None:
    data = encode_nutexb_bytes(identity_lut, FOOTER)

    # Red steps of the first row land in four runs of four texels.
    for step, offset in enumerate([0, 4, 8, 12, 32, 36, 40, 44, 256, 260, 264, 268, 288, 292, 296, 300]):
        assert data[offset : offset + 4] == bytes([step * 17, 0, 0, 255])


def test_footer_is_appended_and_preserved(random_lut: Lut3D) -> None:
    data = encode_nutexb_bytes(random_lut, FOOTER)
    assert len(data) == NUTEXB_PAYLOAD_SIZE + len(FOOTER)
    assert data.endswith(FOOTER)

    texture = decode_nutexb_bytes(data)
    assert texture.footer == FOOTER
    assert np.allclose(texture.lut.table, random_lut.table, atol=0.5 / 255.0 + 1e-12)


def test_write_and_read_nutexb_file(tmp_path: Path, identity_lut: Lut3D) -> None:
    out = tmp_path / "color_grading_lut.nutexb"
    write_nutexb(out, identity_lut, FOOTER)

    texture = read_nutexb(out)
    assert texture.lut.title == "color_grading_lut"
    assert np.allclose(texture.lut.table * 255.0, np.rint(identity_lut.table * 255.0), atol=1e-9)


def test_truncated_nutexb_is_rejected() -> None:
    with pytest.raises(LutDecodeError):
        decode_nutexb_bytes(b"\x00" * 100)


def test_missing_footer_is_rejected(identity_lut: Lut3D) -> None:
    with pytest.raises(LutEncodeError, match="footer"):
        encode_nutexb_bytes(identity_lut, b"")


def test_wrong_size_is_rejected() -> None:
    with pytest.raises(LutEncodeError):
        encode_nutexb_bytes(Lut3D.identity(8), FOOTER)
