"""Growable output buffer for the encoder.

The backing bytearray is never resized in place.  Growth allocates a
fresh region and copies the written prefix, so a memoryview handed out
by finish() keeps pointing at valid (if stale) memory instead of
blocking the resize with a BufferError.
"""

from __future__ import annotations

import logging
import struct

from ._constants import INITIAL_BUFFER_SIZE

logger = logging.getLogger(__name__)

_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")
_U64 = struct.Struct(">Q")
_I8 = struct.Struct(">b")
_I16 = struct.Struct(">h")
_I32 = struct.Struct(">i")
_I64 = struct.Struct(">q")
_F32 = struct.Struct(">f")
_F64 = struct.Struct(">d")


class OutputBuffer:
    """A bytearray plus a write offset."""

    __slots__ = ("_data", "offset")

    def __init__(self, size: int = INITIAL_BUFFER_SIZE) -> None:
        self._data = bytearray(max(size, 1))
        self.offset = 0

    @property
    def capacity(self) -> int:
        return len(self._data)

    # ── Sizing ────────────────────────────────────────────────

    def ensure_capacity(self, n: int) -> None:
        need = self.offset + n
        if need > len(self._data):
            new_size = max(len(self._data) * 2, need)
            logger.debug("growing output buffer %d -> %d bytes", len(self._data), new_size)
            grown = bytearray(new_size)
            grown[:self.offset] = self._data[:self.offset]
            self._data = grown

    def reserve(self, n: int) -> None:
        """Make room for at least n more bytes in one allocation."""
        self.ensure_capacity(n)

    def resize(self, new_size: int) -> None:
        """Replace the backing region.  Written bytes past new_size are dropped."""
        new_size = max(new_size, 1)
        keep = min(self.offset, new_size)
        fresh = bytearray(new_size)
        fresh[:keep] = self._data[:keep]
        self._data = fresh
        self.offset = keep

    def reset(self) -> None:
        self.offset = 0

    # ── Primitive writes ──────────────────────────────────────

    def u8(self, v: int) -> None:
        self.ensure_capacity(1)
        self._data[self.offset] = v
        self.offset += 1

    def tag_u8(self, tag: int, v: int) -> None:
        self.ensure_capacity(2)
        self._data[self.offset] = tag
        self._data[self.offset + 1] = v
        self.offset += 2

    def _pack(self, st: struct.Struct, v) -> None:
        self.ensure_capacity(st.size)
        st.pack_into(self._data, self.offset, v)
        self.offset += st.size

    def u16(self, v: int) -> None:
        self._pack(_U16, v)

    def u32(self, v: int) -> None:
        self._pack(_U32, v)

    def u64(self, v: int) -> None:
        self._pack(_U64, v)

    def i8(self, v: int) -> None:
        self._pack(_I8, v)

    def i16(self, v: int) -> None:
        self._pack(_I16, v)

    def i32(self, v: int) -> None:
        self._pack(_I32, v)

    def i64(self, v: int) -> None:
        self._pack(_I64, v)

    def f32(self, v: float) -> None:
        self._pack(_F32, v)

    def f64(self, v: float) -> None:
        self._pack(_F64, v)

    def write_bytes(self, b) -> None:
        n = len(b)
        self.ensure_capacity(n)
        self._data[self.offset:self.offset + n] = b
        self.offset += n

    # ── Results ───────────────────────────────────────────────

    def finish(self) -> memoryview:
        """Read-only view of the written range; aliases the buffer."""
        return memoryview(self._data)[:self.offset].toreadonly()

    def getvalue(self) -> bytes:
        return bytes(self._data[:self.offset])
