"""Host-side value types with no direct Python builtin.

    UNDEFINED   the absent marker; 0xc1 decodes to it and map entries
                holding it are skipped on encode
    UnknownExt  opaque (type, data) pair for extensions with no decoder
    PairMap     ordered key/value container whose keys may be unhashable
"""

from __future__ import annotations

from collections.abc import ItemsView, Mapping, ValuesView
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Tuple


class _Undefined:
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Undefined, ())


UNDEFINED = _Undefined()


@dataclass(frozen=True)
class UnknownExt:
    """An extension value passed through opaquely.

    Encoding an UnknownExt writes it back with the same type and data.
    """

    type: int
    data: bytes


class PairMap(Mapping):
    """Insertion-ordered mapping that accepts any key, hashable or not.

    Lookups compare keys with ==, so they are linear in the number of
    entries.  Two PairMaps are equal when they hold equal pairs in the
    same order.  The decoder produces one when a map has a composite key
    (a list, a dict, an extension value) that a dict could not hold
    faithfully.
    """

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Iterable[Tuple[Any, Any]] = ()) -> None:
        self._pairs: List[Tuple[Any, Any]] = []
        for k, v in pairs:
            self[k] = v

    def _index(self, key: Any) -> int:
        for i, (k, _) in enumerate(self._pairs):
            if k is key or (type(k) is type(key) and k == key):
                return i
        return -1

    def __getitem__(self, key: Any) -> Any:
        i = self._index(key)
        if i < 0:
            raise KeyError(key)
        return self._pairs[i][1]

    def __setitem__(self, key: Any, value: Any) -> None:
        i = self._index(key)
        if i < 0:
            self._pairs.append((key, value))
        else:
            self._pairs[i] = (key, value)

    def __delitem__(self, key: Any) -> None:
        i = self._index(key)
        if i < 0:
            raise KeyError(key)
        del self._pairs[i]

    def __contains__(self, key: object) -> bool:
        return self._index(key) >= 0

    def __iter__(self) -> Iterator[Any]:
        return (k for k, _ in self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def items(self) -> ItemsView:
        return _PairItemsView(self)

    def values(self) -> ValuesView:
        return _PairValuesView(self)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PairMap):
            return self._pairs == other._pairs
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return "PairMap({!r})".format(self._pairs)


# The stock views look every key up again with __getitem__, which is a
# linear scan here; these walk the stored pairs directly.

class _PairItemsView(ItemsView):
    def __iter__(self):
        return iter(list(self._mapping._pairs))


class _PairValuesView(ValuesView):
    def __iter__(self):
        return (v for _, v in list(self._mapping._pairs))
