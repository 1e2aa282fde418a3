"""Leading-byte dispatch table.

DISPATCH[b] is the Category of any value whose first byte is b.  The
table is built once at import and covers all 256 bytes, so the decoder
never meets an unclassified tag.
"""

from __future__ import annotations

import enum
from typing import Tuple

from ._constants import (
    TAG_ARRAY16, TAG_ARRAY32, TAG_BIN8, TAG_BIN16, TAG_BIN32,
    TAG_EXT8, TAG_EXT16, TAG_EXT32, TAG_FALSE, TAG_FIXEXT1, TAG_FIXEXT2,
    TAG_FIXEXT4, TAG_FIXEXT8, TAG_FIXEXT16, TAG_FLOAT32, TAG_FLOAT64,
    TAG_INT8, TAG_INT16, TAG_INT32, TAG_INT64, TAG_MAP16, TAG_MAP32,
    TAG_NEVER_USED, TAG_NIL, TAG_STR8, TAG_STR16, TAG_STR32, TAG_TRUE,
    TAG_UINT8, TAG_UINT16, TAG_UINT32, TAG_UINT64,
)


class Category(enum.IntEnum):
    POS_FIXINT = 0
    FIXMAP = 1
    FIXARRAY = 2
    FIXSTR = 3
    NIL = 4
    NEVER_USED = 5
    FALSE = 6
    TRUE = 7
    BIN8 = 8
    BIN16 = 9
    BIN32 = 10
    EXT8 = 11
    EXT16 = 12
    EXT32 = 13
    FLOAT32 = 14
    FLOAT64 = 15
    UINT8 = 16
    UINT16 = 17
    UINT32 = 18
    UINT64 = 19
    INT8 = 20
    INT16 = 21
    INT32 = 22
    INT64 = 23
    FIXEXT1 = 24
    FIXEXT2 = 25
    FIXEXT4 = 26
    FIXEXT8 = 27
    FIXEXT16 = 28
    STR8 = 29
    STR16 = 30
    STR32 = 31
    ARRAY16 = 32
    ARRAY32 = 33
    MAP16 = 34
    MAP32 = 35
    NEG_FIXINT = 36


_SINGLE = {
    TAG_NIL: Category.NIL,
    TAG_NEVER_USED: Category.NEVER_USED,
    TAG_FALSE: Category.FALSE,
    TAG_TRUE: Category.TRUE,
    TAG_BIN8: Category.BIN8,
    TAG_BIN16: Category.BIN16,
    TAG_BIN32: Category.BIN32,
    TAG_EXT8: Category.EXT8,
    TAG_EXT16: Category.EXT16,
    TAG_EXT32: Category.EXT32,
    TAG_FLOAT32: Category.FLOAT32,
    TAG_FLOAT64: Category.FLOAT64,
    TAG_UINT8: Category.UINT8,
    TAG_UINT16: Category.UINT16,
    TAG_UINT32: Category.UINT32,
    TAG_UINT64: Category.UINT64,
    TAG_INT8: Category.INT8,
    TAG_INT16: Category.INT16,
    TAG_INT32: Category.INT32,
    TAG_INT64: Category.INT64,
    TAG_FIXEXT1: Category.FIXEXT1,
    TAG_FIXEXT2: Category.FIXEXT2,
    TAG_FIXEXT4: Category.FIXEXT4,
    TAG_FIXEXT8: Category.FIXEXT8,
    TAG_FIXEXT16: Category.FIXEXT16,
    TAG_STR8: Category.STR8,
    TAG_STR16: Category.STR16,
    TAG_STR32: Category.STR32,
    TAG_ARRAY16: Category.ARRAY16,
    TAG_ARRAY32: Category.ARRAY32,
    TAG_MAP16: Category.MAP16,
    TAG_MAP32: Category.MAP32,
}


def _build_table() -> Tuple[Category, ...]:
    table = []
    for b in range(256):
        if b < 0x80:
            table.append(Category.POS_FIXINT)
        elif b < 0x90:
            table.append(Category.FIXMAP)
        elif b < 0xA0:
            table.append(Category.FIXARRAY)
        elif b < 0xC0:
            table.append(Category.FIXSTR)
        elif b < 0xE0:
            table.append(_SINGLE[b])
        else:
            table.append(Category.NEG_FIXINT)
    return tuple(table)


DISPATCH: Tuple[Category, ...] = _build_table()
