from __future__ import annotations


class LutDecodeError(RuntimeError):
    pass


class UnsupportedFormatError(LutDecodeError):
    pass
