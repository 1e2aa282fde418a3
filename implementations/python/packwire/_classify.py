"""Value classification: pick the wire category for a Python value.

The encoder never probes runtime types itself.  It calls classify() and
switches over the closed Kind enum it returns.
"""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Mapping
from typing import Any, Optional, Tuple

from ._errors import UnsupportedType
from ._extensions import ExtensionRegistry, ExtensionType
from ._types import UNDEFINED, UnknownExt


class Kind(enum.IntEnum):
    NIL = 0
    BOOL = 1
    INT = 2
    FLOAT = 3
    STR = 4
    BIN = 5
    ARRAY = 6
    MAP = 7
    EXT = 8       # registered extension; record returned alongside
    RAW_EXT = 9   # UnknownExt written back verbatim


_BYTES_TYPES = (bytes, bytearray, memoryview)
_ARRAY_TYPES = (list, tuple)


def classify(value: Any, registry: ExtensionRegistry) -> Tuple[Kind, Optional[ExtensionType]]:
    """Return the Kind for value, plus its ExtensionType when Kind.EXT.

    Order matters:
      - bool before int, because isinstance(True, int) is True and True
        must encode as 0xc3, not as the integer 1.
      - scalars before the registry, so a matcher can't hijack ints or
        strings.
      - the registry before bytes/list/dict, so a registered subclass of
        a container is encoded through its extension.
    """
    if value is None or value is UNDEFINED:
        return Kind.NIL, None

    if isinstance(value, bool):
        return Kind.BOOL, None

    if isinstance(value, int):
        return Kind.INT, None

    if isinstance(value, float):
        return Kind.FLOAT, None

    if isinstance(value, str):
        return Kind.STR, None

    ext = registry.find_encoder(value)
    if ext is not None:
        return Kind.EXT, ext

    if isinstance(value, UnknownExt):
        return Kind.RAW_EXT, None

    if isinstance(value, _BYTES_TYPES):
        return Kind.BIN, None

    if isinstance(value, _ARRAY_TYPES):
        return Kind.ARRAY, None

    if isinstance(value, Mapping):
        return Kind.MAP, None

    # Dataclass instances are object-like: encode their fields as a map.
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return Kind.MAP, None

    raise UnsupportedType("cannot encode value of type {}".format(type(value).__name__))


def is_skipped_entry(key: Any, value: Any) -> bool:
    """True for map entries the encoder leaves out.

    Absent values and callables have no wire form inside a map; the
    entry is dropped instead of failing the encode.
    """
    return value is UNDEFINED or callable(value) or callable(key)
