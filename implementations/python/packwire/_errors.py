"""packwire error codes and exception classes.

Every failure surfaces as a PackError whose `.code` is one of the ERR_*
strings below.  The named subclasses exist so callers can catch one
failure mode without comparing codes; each one pins its code.
"""

from __future__ import annotations

# ── Error codes ──────────────────────────────────────────────
# Grep-friendly: the CLI prints these verbatim.

ERR_LIMIT: str = "ERR_LIMIT"                # length or integer out of wire range
ERR_TYPE: str = "ERR_TYPE"                  # value has no wire representation
ERR_UTF8: str = "ERR_UTF8"                  # invalid UTF-8 in a str payload
ERR_UNKNOWN_EXT: str = "ERR_UNKNOWN_EXT"    # no decoder for extension type
ERR_EXT_PAYLOAD: str = "ERR_EXT_PAYLOAD"    # extension payload malformed
ERR_WIDE_INT: str = "ERR_WIDE_INT"          # 64-bit int refused by options
ERR_TRUNCATED: str = "ERR_TRUNCATED"        # input ends inside a value
ERR_EXT_ID: str = "ERR_EXT_ID"              # extension id outside [-128, 127]
ERR_LIMIT_DEPTH: str = "ERR_LIMIT_DEPTH"    # containers nested beyond MAX_DEPTH


class PackError(Exception):
    """Exception for packwire encode/decode errors.

    The `.code` attribute is one of the ERR_* strings above.
    """

    def __init__(self, code: str, msg: str = "") -> None:
        super().__init__(msg or code)
        self.code = code


class _CodedError(PackError):
    code_value: str = ""

    def __init__(self, msg: str = "") -> None:
        super().__init__(self.code_value, msg)


class EncodingLimitExceeded(_CodedError):
    code_value = ERR_LIMIT


class UnsupportedType(_CodedError):
    code_value = ERR_TYPE


class InvalidUTF8(_CodedError):
    code_value = ERR_UTF8


class UnknownExtensionType(_CodedError):
    code_value = ERR_UNKNOWN_EXT


class MalformedExtensionPayload(_CodedError):
    code_value = ERR_EXT_PAYLOAD


class UnsupportedWideInteger(_CodedError):
    code_value = ERR_WIDE_INT


class TruncatedInput(_CodedError):
    code_value = ERR_TRUNCATED


class InvalidExtensionId(_CodedError, ValueError):
    code_value = ERR_EXT_ID


class DepthLimitExceeded(_CodedError):
    code_value = ERR_LIMIT_DEPTH
