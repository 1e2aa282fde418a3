"""MessagePack encoder.

Every value is written as a tag byte followed by its payload, always
choosing the smallest tag that can hold the value:

    int      fixint / uint8..64 / negfixint / int8..64
    float    float64
    str      fixstr / str8..32   (length in UTF-8 bytes)
    bytes    bin8..32
    list     fixarray / array16..32
    mapping  fixmap / map16..32
    ext      fixext1..16 / ext8..32

An Encoder owns one OutputBuffer and reuses it across calls.  If an
extension's encode function calls back into the same Encoder, the nested
call gets a fresh buffer so the outer write in progress is untouched.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Iterable, Optional, Tuple

from ._buffer import OutputBuffer
from ._classify import Kind, classify, is_skipped_entry
from ._constants import (
    FIXCONTAINER_LIMIT,
    FIXEXT_TAGS,
    FIXSTR_LIMIT,
    INITIAL_BUFFER_SIZE,
    INT8_MIN,
    INT16_MIN,
    INT32_MIN,
    INT64_MIN,
    MAX_DEPTH,
    MAX_LENGTH,
    TAG_ARRAY16,
    TAG_ARRAY32,
    TAG_BIN8,
    TAG_BIN16,
    TAG_BIN32,
    TAG_EXT8,
    TAG_EXT16,
    TAG_EXT32,
    TAG_FALSE,
    TAG_FIXARRAY,
    TAG_FIXMAP,
    TAG_FIXSTR,
    TAG_FLOAT64,
    TAG_INT8,
    TAG_INT16,
    TAG_INT32,
    TAG_INT64,
    TAG_MAP16,
    TAG_MAP32,
    TAG_NIL,
    TAG_STR8,
    TAG_STR16,
    TAG_STR32,
    TAG_TRUE,
    TAG_UINT8,
    TAG_UINT16,
    TAG_UINT32,
    TAG_UINT64,
    U8_CAP,
    U16_CAP,
    U32_CAP,
    U64_CAP,
)
from ._errors import (
    DepthLimitExceeded,
    EncodingLimitExceeded,
    InvalidUTF8,
    MalformedExtensionPayload,
)
from ._extensions import ExtensionRegistry, default_registry


# ── Stateless writers ─────────────────────────────────────────
# These take the target buffer explicitly; nothing here touches
# encoder state.

def write_int(buf: OutputBuffer, n: int) -> None:
    """Write n using the narrowest integer encoding.

    Python ints are arbitrary-precision, so anything outside
    [-2^63, 2^64 - 1] is rejected rather than silently truncated.
    """
    if n >= 0:
        if n < 0x80:
            buf.u8(n)
        elif n < U8_CAP:
            buf.tag_u8(TAG_UINT8, n)
        elif n < U16_CAP:
            buf.u8(TAG_UINT16)
            buf.u16(n)
        elif n < U32_CAP:
            buf.u8(TAG_UINT32)
            buf.u32(n)
        elif n < U64_CAP:
            buf.u8(TAG_UINT64)
            buf.u64(n)
        else:
            raise EncodingLimitExceeded("integer {} is >= 2^64".format(n))
    elif n >= -32:
        # negative fixint: the two's-complement byte is the tag itself
        buf.u8(n & 0xFF)
    elif n >= INT8_MIN:
        buf.u8(TAG_INT8)
        buf.i8(n)
    elif n >= INT16_MIN:
        buf.u8(TAG_INT16)
        buf.i16(n)
    elif n >= INT32_MIN:
        buf.u8(TAG_INT32)
        buf.i32(n)
    elif n >= INT64_MIN:
        buf.u8(TAG_INT64)
        buf.i64(n)
    else:
        raise EncodingLimitExceeded("integer {} is < -2^63".format(n))


def write_float(buf: OutputBuffer, x: float) -> None:
    buf.u8(TAG_FLOAT64)
    buf.f64(x)


def _write_length(buf: OutputBuffer, n: int, tag8: Optional[int],
                  tag16: int, tag32: int, what: str) -> None:
    if tag8 is not None and n < U8_CAP:
        buf.tag_u8(tag8, n)
    elif n < U16_CAP:
        buf.u8(tag16)
        buf.u16(n)
    elif n <= MAX_LENGTH:
        buf.u8(tag32)
        buf.u32(n)
    else:
        raise EncodingLimitExceeded(
            "{} length {} exceeds the 2^32-1 limit".format(what, n))


def write_str(buf: OutputBuffer, s: str) -> None:
    try:
        raw = s.encode("utf-8")
    except UnicodeEncodeError:
        # lone surrogates have no UTF-8 form
        raise InvalidUTF8("string is not encodable as UTF-8") from None
    n = len(raw)
    if n < FIXSTR_LIMIT:
        buf.u8(TAG_FIXSTR | n)
    else:
        _write_length(buf, n, TAG_STR8, TAG_STR16, TAG_STR32, "string")
    buf.write_bytes(raw)


def write_bin(buf: OutputBuffer, b) -> None:
    if isinstance(b, memoryview):
        b = b.cast("B") if b.format != "B" else b
    _write_length(buf, len(b), TAG_BIN8, TAG_BIN16, TAG_BIN32, "binary")
    buf.write_bytes(b)


def write_array_header(buf: OutputBuffer, n: int) -> None:
    if n < FIXCONTAINER_LIMIT:
        buf.u8(TAG_FIXARRAY | n)
    else:
        _write_length(buf, n, None, TAG_ARRAY16, TAG_ARRAY32, "array")


def write_map_header(buf: OutputBuffer, n: int) -> None:
    if n < FIXCONTAINER_LIMIT:
        buf.u8(TAG_FIXMAP | n)
    else:
        _write_length(buf, n, None, TAG_MAP16, TAG_MAP32, "map")


def write_ext(buf: OutputBuffer, type_id: int, data) -> None:
    n = len(data)
    fixed = FIXEXT_TAGS.get(n)
    if fixed is not None:
        buf.u8(fixed)
    elif n < U8_CAP:
        buf.tag_u8(TAG_EXT8, n)
    elif n < U16_CAP:
        buf.u8(TAG_EXT16)
        buf.u16(n)
    elif n <= MAX_LENGTH:
        buf.u8(TAG_EXT32)
        buf.u32(n)
    else:
        raise EncodingLimitExceeded("ext length {} exceeds the 2^32-1 limit".format(n))
    buf.i8(type_id)
    buf.write_bytes(data)


def _map_entries(value: Any) -> Iterable[Tuple[Any, Any]]:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return [(f.name, getattr(value, f.name)) for f in dataclasses.fields(value)]
    return value.items()


# ── Encoder ───────────────────────────────────────────────────

class Encoder:
    """Reusable MessagePack encoder bound to an extension registry."""

    def __init__(self, registry: Optional[ExtensionRegistry] = None,
                 buffer_size: int = INITIAL_BUFFER_SIZE) -> None:
        self.registry = registry if registry is not None else default_registry
        self._buffer = OutputBuffer(buffer_size)
        self._active = 0

    def resize_buffer(self, new_size: int) -> None:
        """Replace the backing buffer, e.g. to release a large one."""
        self._buffer = OutputBuffer(new_size)

    def encode_view(self, value: Any, reserve: int = 0) -> memoryview:
        """Encode value and return a view into this encoder's buffer.

        The view is only valid until the next call on this encoder.
        Callers that keep the result must copy it.
        """
        if self._active:
            buf = OutputBuffer(max(reserve, INITIAL_BUFFER_SIZE))
        else:
            buf = self._buffer
            buf.reset()
            if reserve > buf.capacity:
                buf.resize(reserve)

        self._active += 1
        try:
            self._write(buf, value)
        finally:
            self._active -= 1
        return buf.finish()

    def encode(self, value: Any, reserve: int = 0) -> bytes:
        """Encode value and return an owned bytes copy."""
        return bytes(self.encode_view(value, reserve))

    # ── Recursive walk ────────────────────────────────────────

    def _write(self, buf: OutputBuffer, value: Any, depth: int = 0) -> None:
        kind, ext = classify(value, self.registry)

        if kind is Kind.ARRAY or kind is Kind.MAP:
            # Also stops self-referencing containers.
            if depth + 1 > MAX_DEPTH:
                raise DepthLimitExceeded(
                    "containers nested deeper than {}".format(MAX_DEPTH))

        if kind is Kind.NIL:
            buf.u8(TAG_NIL)
        elif kind is Kind.BOOL:
            buf.u8(TAG_TRUE if value else TAG_FALSE)
        elif kind is Kind.INT:
            write_int(buf, value)
        elif kind is Kind.FLOAT:
            write_float(buf, value)
        elif kind is Kind.STR:
            write_str(buf, value)
        elif kind is Kind.BIN:
            write_bin(buf, value)
        elif kind is Kind.ARRAY:
            write_array_header(buf, len(value))
            for item in value:
                self._write(buf, item, depth + 1)
        elif kind is Kind.MAP:
            entries = [(k, v) for k, v in _map_entries(value)
                       if not is_skipped_entry(k, v)]
            write_map_header(buf, len(entries))
            for k, v in entries:
                self._write(buf, k, depth + 1)
                self._write(buf, v, depth + 1)
        elif kind is Kind.EXT:
            payload = ext.encode(value)
            if not isinstance(payload, (bytes, bytearray, memoryview)):
                raise MalformedExtensionPayload(
                    "extension {} encoder returned {}, expected bytes".format(
                        ext.type_id, type(payload).__name__))
            write_ext(buf, ext.type_id, payload)
        elif kind is Kind.RAW_EXT:
            write_ext(buf, value.type, value.data)
