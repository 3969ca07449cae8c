from .base import LutDecodeError, UnsupportedFormatError
from .cube import load_cube, parse_cube
from .nutexb import NutexbTexture, decode_nutexb_bytes, read_nutexb
from .registry import read_lut
from .strip_image import read_strip_image, strip_to_table

__all__ = [
    "LutDecodeError",
    "UnsupportedFormatError",
    "load_cube",
    "parse_cube",
    "NutexbTexture",
    "decode_nutexb_bytes",
    "read_nutexb",
    "read_lut",
    "read_strip_image",
    "strip_to_table",
]
