"""Timestamp extension (type -1) for datetime.datetime values.

Payload layouts, all big-endian:

    4 bytes   u32 seconds                         (decode only)
    8 bytes   u64 = nanoseconds << 34 | seconds   (0 <= seconds < 2^34)
    12 bytes  u32 nanoseconds, i64 seconds        (everything else)

Seconds are floored and nanoseconds are always non-negative, so a
pre-epoch instant like -34.2s is stored as -35s + 800_000_000ns.
The encoder never emits the 4-byte form.

Naive datetimes are taken to be UTC.  Decoding returns an aware UTC
datetime; nanoseconds below microsecond precision are floored.
"""

from __future__ import annotations

import datetime
import struct

from ._constants import TIMESTAMP_EXT_ID
from ._errors import MalformedExtensionPayload
from ._extensions import ExtensionRegistry, default_registry

EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)

_TS32 = struct.Struct(">I")
_TS64 = struct.Struct(">Q")
_TS96 = struct.Struct(">Iq")

_SECONDS_34BIT = 1 << 34


def split_datetime(dt: datetime.datetime):
    """Return (seconds, nanoseconds) since the epoch, seconds floored."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    # timedelta normalizes to days (signed) + seconds/microseconds
    # (non-negative), which is exactly the floored split.
    delta = dt - EPOCH
    seconds = delta.days * 86400 + delta.seconds
    return seconds, delta.microseconds * 1000


def encode_timestamp(dt: datetime.datetime) -> bytes:
    seconds, nanos = split_datetime(dt)
    if 0 <= seconds < _SECONDS_34BIT:
        return _TS64.pack((nanos << 34) | seconds)
    return _TS96.pack(nanos, seconds)


def decode_timestamp(data: bytes) -> datetime.datetime:
    n = len(data)
    if n == 4:
        seconds, nanos = _TS32.unpack(data)[0], 0
    elif n == 8:
        packed = _TS64.unpack(data)[0]
        nanos = packed >> 34
        seconds = packed & (_SECONDS_34BIT - 1)
    elif n == 12:
        nanos, seconds = _TS96.unpack(data)
    else:
        raise MalformedExtensionPayload(
            "timestamp payload must be 4, 8 or 12 bytes, got {}".format(n))

    if nanos > 999_999_999:
        raise MalformedExtensionPayload("timestamp nanoseconds {} out of range".format(nanos))
    try:
        return EPOCH + datetime.timedelta(seconds=seconds, microseconds=nanos // 1000)
    except OverflowError:
        raise MalformedExtensionPayload(
            "timestamp {}s is outside the datetime range".format(seconds)) from None


def register_timestamp(registry: ExtensionRegistry) -> None:
    registry.register(TIMESTAMP_EXT_ID, datetime.datetime,
                      encode_timestamp, decode_timestamp)


register_timestamp(default_registry)
