from .base import LutEncodeError, to_uint8
from .cube import format_cube, write_cube
from .nutexb import encode_nutexb_bytes, write_nutexb
from .registry import write_lut
from .stamp import stamp_neutral_lut, stamp_screenshot
from .strip_image import table_to_strip, write_strip_image

__all__ = [
    "LutEncodeError",
    "to_uint8",
    "format_cube",
    "write_cube",
    "encode_nutexb_bytes",
    "write_nutexb",
    "write_lut",
    "stamp_neutral_lut",
    "stamp_screenshot",
    "table_to_strip",
    "write_strip_image",
]
