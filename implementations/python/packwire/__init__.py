"""packwire: MessagePack encoder/decoder.

Convert Python values to the MessagePack wire format and back.

Quick start:
    >>> from packwire import encode, decode
    >>> encode({"a": 1, "b": [True, None]}).hex()
    '82a16101a16292c3c0'
    >>> decode(bytes.fromhex("82a16101a16292c3c0"))
    {'a': 1, 'b': [True, None]}

Maps whose keys are all primitive (str, int, float, bool, bytes, None)
decode to dict.  A map with a composite key, such as a list or another
map, decodes to a PairMap so the key survives unchanged:
    >>> decode(encode(PairMap([([1, 2], "pair")])))
    PairMap([([1, 2], 'pair')])

Custom types travel as extensions:
    >>> class Color:
    ...     def __init__(self, r, g, b):
    ...         self.r, self.g, self.b = r, g, b
    >>> _ = register_extension(15, Color, lambda c: bytes([c.r, c.g, c.b]),
    ...                        lambda b: Color(*b))
    >>> encode(Color(1, 2, 3)).hex()
    'c7030f010203'
    >>> decode(bytes.fromhex("c7030f010203")).g
    2
    >>> _ = unregister_extension(15)

datetime.datetime values use the built-in timestamp extension (-1).
"""

from __future__ import annotations

from typing import Any, Optional, Tuple

from ._constants import TIMESTAMP_EXT_ID
from ._decoder import (
    DecodeOptions,
    Decoder,
    MapMode,
    copy_bytes,
    raise_invalid_utf8,
    raise_unknown_ext,
)
from ._encoder import Encoder
from ._errors import (
    ERR_EXT_ID,
    ERR_EXT_PAYLOAD,
    ERR_LIMIT,
    ERR_LIMIT_DEPTH,
    ERR_TRUNCATED,
    ERR_TYPE,
    ERR_UNKNOWN_EXT,
    ERR_UTF8,
    ERR_WIDE_INT,
    DepthLimitExceeded,
    EncodingLimitExceeded,
    InvalidExtensionId,
    InvalidUTF8,
    MalformedExtensionPayload,
    PackError,
    TruncatedInput,
    UnknownExtensionType,
    UnsupportedType,
    UnsupportedWideInteger,
)
from ._extensions import ExtensionRegistry, ExtensionType, Matcher, default_registry
from ._timestamp import decode_timestamp, encode_timestamp
from ._types import UNDEFINED, PairMap, UnknownExt

__version__ = "1.0.0"

__all__ = [
    # Public API functions
    "encode",
    "encode_view",
    "resize_encoding_buffer",
    "decode",
    "decode_from",
    "register_extension",
    "unregister_extension",
    # Classes
    "Encoder",
    "Decoder",
    "DecodeOptions",
    "MapMode",
    "ExtensionRegistry",
    "ExtensionType",
    "PairMap",
    "UnknownExt",
    "UNDEFINED",
    # Handlers
    "copy_bytes",
    "raise_invalid_utf8",
    "raise_unknown_ext",
    # Timestamp codec
    "encode_timestamp",
    "decode_timestamp",
    "TIMESTAMP_EXT_ID",
    # Exceptions
    "PackError",
    "EncodingLimitExceeded",
    "UnsupportedType",
    "InvalidUTF8",
    "UnknownExtensionType",
    "MalformedExtensionPayload",
    "UnsupportedWideInteger",
    "TruncatedInput",
    "InvalidExtensionId",
    "DepthLimitExceeded",
    # Error codes
    "ERR_LIMIT",
    "ERR_TYPE",
    "ERR_UTF8",
    "ERR_UNKNOWN_EXT",
    "ERR_EXT_PAYLOAD",
    "ERR_WIDE_INT",
    "ERR_TRUNCATED",
    "ERR_EXT_ID",
    "ERR_LIMIT_DEPTH",
]

_encoder = Encoder()


# ── Encoding ──────────────────────────────────────────────────

def encode(value: Any, reserve: int = 0) -> bytes:
    """Encode value to MessagePack bytes.

    `reserve`, if larger than the current encoding buffer, pre-sizes the
    buffer so it does not have to grow while encoding.
    """
    return _encoder.encode(value, reserve)


def encode_view(value: Any, reserve: int = 0) -> memoryview:
    """Like encode(), but return a view of the shared encoding buffer.

    No copy is made.  The view is overwritten by the next encode() or
    encode_view() call, so copy it (bytes(view)) if it must outlive that.
    """
    return _encoder.encode_view(value, reserve)


def resize_encoding_buffer(new_size: int) -> None:
    """Replace the shared encoding buffer with one of new_size bytes.

    Use it to pre-size for a known workload, or to release a buffer
    that grew large.
    """
    _encoder.resize_buffer(new_size)


# ── Decoding ──────────────────────────────────────────────────

def decode(data, options: Optional[DecodeOptions] = None) -> Any:
    """Decode the first MessagePack value in data.

    Trailing bytes after that value are ignored.
    """
    return Decoder(options).decode(data)


def decode_from(data, offset: int = 0,
                options: Optional[DecodeOptions] = None) -> Tuple[Any, int]:
    """Decode one value at offset; return (value, offset just past it)."""
    return Decoder(options).decode_from(data, offset)


# ── Extensions ────────────────────────────────────────────────

def register_extension(type_id: int, matcher: Matcher, encode, decode) -> ExtensionType:
    """Register an extension type on the shared registry.

    `matcher` is a class (its instances are encoded with this extension)
    or a predicate taking a value.  `encode` turns a matching value into
    the payload bytes; `decode` turns payload bytes back into a value.
    Do not add MessagePack headers in either: the codec writes them.

    Ids must lie in [-128, 127].  Negative ids are reserved by the
    MessagePack spec but accepted.
    """
    return default_registry.register(type_id, matcher, encode, decode)


def unregister_extension(type_id: int) -> Optional[ExtensionType]:
    return default_registry.unregister(type_id)
