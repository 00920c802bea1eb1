"""
Little-endian binary writer for the lossless encodings.

Every field is written at its natural fixed width with no padding.
"""

import struct
from typing import BinaryIO


ENCODING_VERSION = 1

_INT8 = struct.Struct("<b")
_UINT8 = struct.Struct("<B")
_UINT32 = struct.Struct("<I")
_INT32 = struct.Struct("<i")
_FLOAT64 = struct.Struct("<d")


class Encoder:
    """
    Thin wrapper around a binary stream.

    Parameters
    ----------
    stream : BinaryIO
        Writable binary stream, e.g. an open file or io.BytesIO.
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream

    def write_int8(self, value: int) -> None:
        self.stream.write(_INT8.pack(value))

    def write_bool(self, value: bool) -> None:
        self.stream.write(_UINT8.pack(1 if value else 0))

    def write_uint32(self, value: int) -> None:
        self.stream.write(_UINT32.pack(value))

    def write_int32(self, value: int) -> None:
        self.stream.write(_INT32.pack(value))

    def write_float64(self, value: float) -> None:
        self.stream.write(_FLOAT64.pack(float(value)))
