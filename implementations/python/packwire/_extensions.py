"""Extension type registry.

An extension is registered as a capability record: a signed type id, a
matcher deciding which values it encodes, and the encode/decode pair.
The matcher is either a class (instances of it match) or a predicate.
One registry serves both directions; the encoder asks it for the record
matching a value, the decoder for the decode function of a type id.

Negative ids are reserved by the MessagePack spec (-1 is the timestamp),
but registering one is allowed in case an application needs to.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

from ._constants import EXT_ID_MAX, EXT_ID_MIN
from ._errors import InvalidExtensionId

logger = logging.getLogger(__name__)

Matcher = Union[type, Callable[[Any], bool]]
EncodeFn = Callable[[Any], bytes]
DecodeFn = Callable[[bytes], Any]


@dataclass(frozen=True)
class ExtensionType:
    type_id: int
    matcher: Matcher
    encode: EncodeFn
    decode: DecodeFn

    def matches(self, value: Any) -> bool:
        if isinstance(self.matcher, type):
            return isinstance(value, self.matcher)
        return bool(self.matcher(value))


class ExtensionRegistry:
    """Mutable set of ExtensionType records keyed by type id.

    Registering an id again replaces the earlier record.  Encode-side
    lookups try the most recently registered record first, so a later,
    narrower matcher wins over an earlier, broader one.
    """

    def __init__(self) -> None:
        self._by_id: Dict[int, ExtensionType] = {}

    def register(self, type_id: int, matcher: Matcher,
                 encode: EncodeFn, decode: DecodeFn) -> ExtensionType:
        if isinstance(type_id, bool) or not isinstance(type_id, int):
            raise InvalidExtensionId("extension id must be an int, got {}".format(
                type(type_id).__name__))
        if type_id < EXT_ID_MIN or type_id > EXT_ID_MAX:
            raise InvalidExtensionId(
                "extension id {} outside [{}, {}]".format(type_id, EXT_ID_MIN, EXT_ID_MAX))

        record = ExtensionType(type_id, matcher, encode, decode)
        if self._by_id.pop(type_id, None) is not None:
            logger.debug("replacing extension %d", type_id)
        else:
            logger.debug("registering extension %d", type_id)
        # Re-insert so dict order tracks registration recency.
        self._by_id[type_id] = record
        return record

    def unregister(self, type_id: int) -> Optional[ExtensionType]:
        return self._by_id.pop(type_id, None)

    def find_encoder(self, value: Any) -> Optional[ExtensionType]:
        for record in reversed(self._by_id.values()):
            if record.matches(value):
                return record
        return None

    def decoder_for(self, type_id: int) -> Optional[DecodeFn]:
        record = self._by_id.get(type_id)
        return record.decode if record is not None else None

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def copy(self) -> "ExtensionRegistry":
        clone = ExtensionRegistry()
        clone._by_id = dict(self._by_id)
        return clone


# Shared by the module-level encode()/decode() and by any Encoder or
# Decoder constructed without an explicit registry.
default_registry = ExtensionRegistry()
