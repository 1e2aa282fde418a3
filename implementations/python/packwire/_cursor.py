"""Read cursor: an immutable byte region plus the current offset."""

from __future__ import annotations

import struct
from typing import Union

from ._errors import TruncatedInput

BytesLike = Union[bytes, bytearray, memoryview]

_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")
_U64 = struct.Struct(">Q")
_I8 = struct.Struct(">b")
_I16 = struct.Struct(">h")
_I32 = struct.Struct(">i")
_I64 = struct.Struct(">q")
_F32 = struct.Struct(">f")
_F64 = struct.Struct(">d")


class ReadCursor:
    """Fixed-width big-endian reads that advance `offset`.

    Every read checks the remaining length first so a short input raises
    TruncatedInput instead of a struct.error.
    """

    __slots__ = ("data", "offset")

    def __init__(self, data: BytesLike, offset: int = 0) -> None:
        self.data = memoryview(data).cast("B") if not isinstance(data, bytes) else data
        self.offset = offset

    def _need(self, n: int, what: str) -> None:
        if self.offset + n > len(self.data):
            raise TruncatedInput(
                "truncated {}: need {} bytes at offset {}, have {}".format(
                    what, n, self.offset, len(self.data) - self.offset))

    def _unpack(self, st: struct.Struct, what: str):
        self._need(st.size, what)
        v = st.unpack_from(self.data, self.offset)[0]
        self.offset += st.size
        return v

    def seek(self, offset: int) -> None:
        self.offset = offset

    def u8(self) -> int:
        self._need(1, "u8")
        v = self.data[self.offset]
        self.offset += 1
        return v

    def u16(self) -> int:
        return self._unpack(_U16, "u16")

    def u32(self) -> int:
        return self._unpack(_U32, "u32")

    def u64(self) -> int:
        return self._unpack(_U64, "u64")

    def i8(self) -> int:
        return self._unpack(_I8, "i8")

    def i16(self) -> int:
        return self._unpack(_I16, "i16")

    def i32(self) -> int:
        return self._unpack(_I32, "i32")

    def i64(self) -> int:
        return self._unpack(_I64, "i64")

    def f32(self) -> float:
        return self._unpack(_F32, "f32")

    def f64(self) -> float:
        return self._unpack(_F64, "f64")

    def take(self, n: int) -> bytes:
        """Copy out the next n bytes."""
        self._need(n, "payload")
        start = self.offset
        self.offset += n
        return bytes(self.data[start:self.offset])
