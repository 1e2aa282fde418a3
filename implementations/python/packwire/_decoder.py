"""MessagePack decoder.

Decoding reads one leading byte, looks its Category up in DISPATCH, and
runs that category's read sequence.  Containers recurse.  All cursor
state lives in a ReadCursor built per top-level call, so an extension
decode function may call decode() again without disturbing the outer
read.

Maps are the one place with a choice to make.  Python dicts need
hashable keys, but MessagePack map keys can be anything, including
arrays and other maps.  See _read_map for how that is resolved.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Union

from ._constants import MAX_DEPTH, SAFE_INT_MAX
from ._cursor import BytesLike, ReadCursor
from ._dispatch import DISPATCH, Category
from ._errors import (
    DepthLimitExceeded,
    InvalidUTF8,
    UnknownExtensionType,
    UnsupportedWideInteger,
)
from ._extensions import ExtensionRegistry, default_registry
from ._types import UNDEFINED, PairMap, UnknownExt

logger = logging.getLogger(__name__)


class MapMode(str, enum.Enum):
    """How MessagePack maps are rebuilt.

    SPECULATIVE  dict when every key is primitive, else PairMap
    PRIMITIVE    always dict; composite keys become str(key) (lossy)
    ARBITRARY    always PairMap
    """

    SPECULATIVE = "speculative"
    PRIMITIVE = "primitive"
    ARBITRARY = "arbitrary"


# Keys a dict can hold without changing their meaning.
_PRIMITIVE_KEY_TYPES = (bool, int, float, str, bytes)


def is_primitive_key(key: Any) -> bool:
    return key is None or key is UNDEFINED or isinstance(key, _PRIMITIVE_KEY_TYPES)


# ── Handlers ──────────────────────────────────────────────────

def copy_bytes(raw: bytes) -> bytes:
    """Default invalid-UTF-8 handler: hand back the raw bytes."""
    return bytes(raw)


def raise_invalid_utf8(raw: bytes) -> Any:
    """Strict invalid-UTF-8 handler."""
    raise InvalidUTF8("invalid UTF-8 in string payload ({} bytes)".format(len(raw)))


def raise_unknown_ext(type_id: int, data: bytes) -> Any:
    """Strict unknown-extension handler."""
    raise UnknownExtensionType("no decoder registered for extension type {}".format(type_id))


@dataclass(frozen=True)
class DecodeOptions:
    """Decoder configuration.

    nil_value            what 0xc0 decodes to
    bad_utf8_handler     called with the raw bytes of a str that is not
                         valid UTF-8; returns a substitute or raises
    unknown_ext_handler  called with (type_id, data) for an extension
                         with no registered decoder
    map_mode             see MapMode
    allow_wide_ints      when False, uint64/int64 values beyond 2^53-1
                         in magnitude raise UnsupportedWideInteger
    """

    nil_value: Any = None
    bad_utf8_handler: Callable[[bytes], Any] = copy_bytes
    unknown_ext_handler: Callable[[int, bytes], Any] = UnknownExt
    map_mode: Union[MapMode, str] = MapMode.SPECULATIVE
    allow_wide_ints: bool = True

    def __post_init__(self) -> None:
        # Accept the plain string names too ("primitive", ...).
        object.__setattr__(self, "map_mode", MapMode(self.map_mode))

    def replace(self, **changes: Any) -> "DecodeOptions":
        return dataclasses.replace(self, **changes)


DEFAULT_OPTIONS = DecodeOptions()


# ── Decoder ───────────────────────────────────────────────────

# Values decoded during a speculative map pass, keyed by start offset:
# offset -> (value, end offset).
_Seen = Dict[int, Tuple[Any, int]]


class Decoder:
    """MessagePack decoder bound to options and an extension registry."""

    def __init__(self, options: Optional[DecodeOptions] = None,
                 registry: Optional[ExtensionRegistry] = None) -> None:
        self.options = options if options is not None else DEFAULT_OPTIONS
        self.registry = registry if registry is not None else default_registry

    def decode(self, data: BytesLike) -> Any:
        """Decode the first value in data.  Trailing bytes are ignored."""
        return self._read(ReadCursor(data), 0)

    def decode_from(self, data: BytesLike, offset: int = 0) -> Tuple[Any, int]:
        """Decode one value starting at offset; return (value, end_offset)."""
        cur = ReadCursor(data, offset)
        value = self._read(cur, 0)
        return value, cur.offset

    # ── Recursive read ────────────────────────────────────────

    def _read(self, cur: ReadCursor, depth: int) -> Any:
        b = cur.u8()
        cat = DISPATCH[b]

        if cat is Category.POS_FIXINT:
            return b
        if cat is Category.FIXSTR:
            return self._read_str(cur, b & 0x1F)
        if cat is Category.FIXMAP:
            return self._read_map(cur, b & 0x0F, depth)
        if cat is Category.FIXARRAY:
            return self._read_array(cur, b & 0x0F, depth)
        if cat is Category.NEG_FIXINT:
            return b - 0x100
        if cat is Category.NIL:
            return self.options.nil_value
        if cat is Category.NEVER_USED:
            return UNDEFINED
        if cat is Category.FALSE:
            return False
        if cat is Category.TRUE:
            return True

        if cat is Category.UINT8:
            return cur.u8()
        if cat is Category.UINT16:
            return cur.u16()
        if cat is Category.UINT32:
            return cur.u32()
        if cat is Category.UINT64:
            return self._check_wide(cur.u64())
        if cat is Category.INT8:
            return cur.i8()
        if cat is Category.INT16:
            return cur.i16()
        if cat is Category.INT32:
            return cur.i32()
        if cat is Category.INT64:
            return self._check_wide(cur.i64())
        if cat is Category.FLOAT32:
            return cur.f32()
        if cat is Category.FLOAT64:
            return cur.f64()

        if cat is Category.STR8:
            return self._read_str(cur, cur.u8())
        if cat is Category.STR16:
            return self._read_str(cur, cur.u16())
        if cat is Category.STR32:
            return self._read_str(cur, cur.u32())
        if cat is Category.BIN8:
            return cur.take(cur.u8())
        if cat is Category.BIN16:
            return cur.take(cur.u16())
        if cat is Category.BIN32:
            return cur.take(cur.u32())

        if cat is Category.ARRAY16:
            return self._read_array(cur, cur.u16(), depth)
        if cat is Category.ARRAY32:
            return self._read_array(cur, cur.u32(), depth)
        if cat is Category.MAP16:
            return self._read_map(cur, cur.u16(), depth)
        if cat is Category.MAP32:
            return self._read_map(cur, cur.u32(), depth)

        if cat is Category.FIXEXT1:
            return self._read_ext(cur, 1)
        if cat is Category.FIXEXT2:
            return self._read_ext(cur, 2)
        if cat is Category.FIXEXT4:
            return self._read_ext(cur, 4)
        if cat is Category.FIXEXT8:
            return self._read_ext(cur, 8)
        if cat is Category.FIXEXT16:
            return self._read_ext(cur, 16)
        if cat is Category.EXT8:
            return self._read_ext(cur, cur.u8())
        if cat is Category.EXT16:
            return self._read_ext(cur, cur.u16())
        # DISPATCH is exhaustive, so only EXT32 is left.
        return self._read_ext(cur, cur.u32())

    def _check_wide(self, n: int) -> int:
        if not self.options.allow_wide_ints and abs(n) > SAFE_INT_MAX:
            raise UnsupportedWideInteger(
                "64-bit integer {} exceeds 2^53-1 and wide ints are disabled".format(n))
        return n

    def _enter(self, depth: int) -> int:
        if depth + 1 > MAX_DEPTH:
            raise DepthLimitExceeded("containers nested deeper than {}".format(MAX_DEPTH))
        return depth + 1

    def _read_str(self, cur: ReadCursor, n: int) -> Any:
        raw = cur.take(n)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            return self.options.bad_utf8_handler(raw)

    def _read_array(self, cur: ReadCursor, n: int, depth: int) -> list:
        depth = self._enter(depth)
        return [self._read(cur, depth) for _ in range(n)]

    def _read_ext(self, cur: ReadCursor, n: int) -> Any:
        type_id = cur.i8()
        data = cur.take(n)
        decode_fn = self.registry.decoder_for(type_id)
        if decode_fn is not None:
            return decode_fn(data)
        return self.options.unknown_ext_handler(type_id, data)

    # ── Maps ──────────────────────────────────────────────────
    #
    # SPECULATIVE runs in two phases.  Phase one assumes every key is
    # primitive and fills a dict; it returns None, without committing
    # anything, the moment a key turns up that a dict can't hold as-is.
    # Phase two then rewinds to the first key and reads the whole map
    # again into a PairMap.  Each map restarts at most once; nested maps
    # make their own independent choice.
    #
    # Phase one records every key and value it decoded by start offset,
    # and phase two takes those results instead of decoding them again.
    # Without that, a composite key that itself holds an ambiguous map
    # would be decoded twice per nesting level.

    def _read_map(self, cur: ReadCursor, n: int, depth: int) -> Any:
        depth = self._enter(depth)
        mode = self.options.map_mode
        if mode is MapMode.ARBITRARY:
            return self._read_pair_map(cur, n, depth, None)
        if mode is MapMode.PRIMITIVE:
            return self._read_coerced_map(cur, n, depth)

        start = cur.offset
        seen: _Seen = {}
        result = self._try_primitive_map(cur, n, depth, seen)
        if result is not None:
            return result
        logger.debug("map at offset %d needs a PairMap; re-reading", start)
        cur.seek(start)
        return self._read_pair_map(cur, n, depth, seen)

    def _read_recorded(self, cur: ReadCursor, depth: int, seen: _Seen) -> Any:
        start = cur.offset
        value = self._read(cur, depth)
        seen[start] = (value, cur.offset)
        return value

    def _read_or_reuse(self, cur: ReadCursor, depth: int, seen: Optional[_Seen]) -> Any:
        hit = seen.get(cur.offset) if seen else None
        if hit is None:
            return self._read(cur, depth)
        value, end = hit
        cur.seek(end)
        return value

    def _try_primitive_map(self, cur: ReadCursor, n: int, depth: int,
                           seen: _Seen) -> Optional[Dict[Any, Any]]:
        out: Dict[Any, Any] = {}
        # 1, 1.0 and True are one dict key; each entry remembers the key
        # object that claimed it so a mixed-type collision can bail out.
        claimed: Dict[Any, Any] = {}
        for _ in range(n):
            key = self._read_recorded(cur, depth, seen)
            if not is_primitive_key(key):
                return None
            if type(claimed.setdefault(key, key)) is not type(key):
                return None
            out[key] = self._read_recorded(cur, depth, seen)
        return out

    def _read_coerced_map(self, cur: ReadCursor, n: int, depth: int) -> Dict[Any, Any]:
        out: Dict[Any, Any] = {}
        for _ in range(n):
            key = self._read(cur, depth)
            if not is_primitive_key(key):
                key = str(key)
            out[key] = self._read(cur, depth)
        return out

    def _read_pair_map(self, cur: ReadCursor, n: int, depth: int,
                       seen: Optional[_Seen]) -> PairMap:
        out = PairMap()
        for _ in range(n):
            key = self._read_or_reuse(cur, depth, seen)
            out[key] = self._read_or_reuse(cur, depth, seen)
        return out
