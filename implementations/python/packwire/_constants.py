"""MessagePack tag bytes, width boundaries, and codec defaults.

Tag values follow the MessagePack format spec byte-for-byte.  Ranged
tags (fixint, fixmap, fixarray, fixstr) are given as their base value;
the inline count or value is OR-ed into the low bits.
"""

from __future__ import annotations

# ── Single-byte tags ─────────────────────────────────────────
TAG_NIL: int = 0xC0
TAG_NEVER_USED: int = 0xC1   # reserved; decodes to UNDEFINED
TAG_FALSE: int = 0xC2
TAG_TRUE: int = 0xC3

TAG_BIN8: int = 0xC4
TAG_BIN16: int = 0xC5
TAG_BIN32: int = 0xC6

TAG_EXT8: int = 0xC7
TAG_EXT16: int = 0xC8
TAG_EXT32: int = 0xC9

TAG_FLOAT32: int = 0xCA
TAG_FLOAT64: int = 0xCB

TAG_UINT8: int = 0xCC
TAG_UINT16: int = 0xCD
TAG_UINT32: int = 0xCE
TAG_UINT64: int = 0xCF

TAG_INT8: int = 0xD0
TAG_INT16: int = 0xD1
TAG_INT32: int = 0xD2
TAG_INT64: int = 0xD3

TAG_FIXEXT1: int = 0xD4
TAG_FIXEXT2: int = 0xD5
TAG_FIXEXT4: int = 0xD6
TAG_FIXEXT8: int = 0xD7
TAG_FIXEXT16: int = 0xD8

TAG_STR8: int = 0xD9
TAG_STR16: int = 0xDA
TAG_STR32: int = 0xDB

TAG_ARRAY16: int = 0xDC
TAG_ARRAY32: int = 0xDD

TAG_MAP16: int = 0xDE
TAG_MAP32: int = 0xDF

# ── Ranged tags (base | inline value) ────────────────────────
TAG_FIXMAP: int = 0x80      # 0x80-0x8f, 4-bit count
TAG_FIXARRAY: int = 0x90    # 0x90-0x9f, 4-bit count
TAG_FIXSTR: int = 0xA0      # 0xa0-0xbf, 5-bit length
TAG_NEGFIXINT: int = 0xE0   # 0xe0-0xff, -32..-1

# Fixed-size extension payload length -> tag.  Everything else goes
# through ext8/16/32.
FIXEXT_TAGS = {
    1: TAG_FIXEXT1,
    2: TAG_FIXEXT2,
    4: TAG_FIXEXT4,
    8: TAG_FIXEXT8,
    16: TAG_FIXEXT16,
}

# ── Width boundaries ─────────────────────────────────────────
FIXSTR_LIMIT: int = 32
FIXCONTAINER_LIMIT: int = 16
U8_CAP: int = 1 << 8
U16_CAP: int = 1 << 16
U32_CAP: int = 1 << 32
U64_CAP: int = 1 << 64

# Largest length any str/bin/array/map/ext prefix can carry.
MAX_LENGTH: int = U32_CAP - 1

INT8_MIN: int = -(2**7)
INT16_MIN: int = -(2**15)
INT32_MIN: int = -(2**31)
INT64_MIN: int = -(2**63)
UINT64_MAX: int = U64_CAP - 1

# Integers beyond this magnitude are not exact in an IEEE-754 double.
# Only consulted when a decoder is configured with allow_wide_ints=False.
SAFE_INT_MAX: int = 2**53 - 1

# ── Extension ids ────────────────────────────────────────────
EXT_ID_MIN: int = -128
EXT_ID_MAX: int = 127
TIMESTAMP_EXT_ID: int = -1

# ── Defaults ─────────────────────────────────────────────────
INITIAL_BUFFER_SIZE: int = 128

# ── Nesting limit ────────────────────────────────────────────
# Containers (arrays and maps) nested deeper than this raise
# DepthLimitExceeded on encode and decode.  Kept well below the
# interpreter's recursion limit.
MAX_DEPTH: int = 128
