"""JSON bridge for the command-line interface.

JSON has no bytes, no non-string keys and no extension values, so the
CLI spells those as single-key tagged objects:

    bytes                {"$bin": "<base64>"}
    PairMap / dict with  {"$pairs": [[key, value], ...]}
      non-str keys
    UnknownExt           {"$ext": [type, "<base64>"]}
    datetime             {"$timestamp": "<ISO 8601>"}
    UNDEFINED            {"$undefined": true}
    other decoded types  {"$repr": "<repr>"}   (output only)

to_json_value() applies the tags; from_json_value() reverses them, so
`packwire decode | packwire encode` reproduces anything packwire
itself encoded.
"""

from __future__ import annotations

import base64
import datetime
import json
from typing import Any

from ._errors import ERR_TYPE, PackError
from ._types import UNDEFINED, PairMap, UnknownExt


def _b64(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")


def _unb64(s: Any) -> bytes:
    if not isinstance(s, str):
        raise PackError(ERR_TYPE, "base64 payload must be a string")
    return base64.b64decode(s.encode("ascii"), validate=True)


# ── Python value → JSON-safe value ────────────────────────────

def to_json_value(x: Any) -> Any:
    if x is UNDEFINED:
        return {"$undefined": True}

    if x is None or isinstance(x, (bool, int, float, str)):
        return x

    if isinstance(x, (bytes, bytearray, memoryview)):
        return {"$bin": _b64(bytes(x))}

    if isinstance(x, list):
        return [to_json_value(v) for v in x]

    if isinstance(x, PairMap) or (isinstance(x, dict) and
                                  not all(isinstance(k, str) for k in x)):
        return {"$pairs": [[to_json_value(k), to_json_value(v)] for k, v in x.items()]}

    if isinstance(x, dict):
        return {k: to_json_value(v) for k, v in x.items()}

    if isinstance(x, UnknownExt):
        return {"$ext": [x.type, _b64(x.data)]}

    if isinstance(x, datetime.datetime):
        return {"$timestamp": x.isoformat()}

    # Registered extensions may decode to anything; fall back to repr.
    return {"$repr": repr(x)}


# ── JSON value → Python value ─────────────────────────────────

def from_json_value(x: Any) -> Any:
    if isinstance(x, list):
        return [from_json_value(v) for v in x]

    if not isinstance(x, dict):
        return x

    if len(x) == 1:
        (tag, body), = x.items()
        if tag == "$bin":
            return _unb64(body)
        if tag == "$pairs":
            return PairMap((from_json_value(k), from_json_value(v)) for k, v in body)
        if tag == "$ext":
            type_id, data = body
            return UnknownExt(int(type_id), _unb64(data))
        if tag == "$timestamp":
            dt = datetime.datetime.fromisoformat(body)
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=datetime.timezone.utc)
            return dt
        if tag == "$undefined":
            return UNDEFINED

    return {k: from_json_value(v) for k, v in x.items()}


def loads(text: str) -> Any:
    return from_json_value(json.loads(text))


def dumps(value: Any, indent: Any = None) -> str:
    return json.dumps(to_json_value(value), ensure_ascii=False, indent=indent)
