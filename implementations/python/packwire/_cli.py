"""packwire command-line interface.

Usage:
    echo '{"a": 1}' | packwire encode [--format hex|base64|raw]
    printf '81a16101' | packwire decode --format hex
    packwire decode --input file.msgpack [--map-mode arbitrary] [--strict]
    packwire version
"""

from __future__ import annotations

import argparse
import base64
import binascii
import json
import logging
import sys
from typing import List, Optional

from . import (
    DecodeOptions,
    MapMode,
    PackError,
    __version__,
    decode,
    encode,
    raise_invalid_utf8,
    raise_unknown_ext,
)
from ._json_adapter import dumps, loads

_FORMATS = ("hex", "base64", "raw")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="packwire",
        description="packwire: convert between JSON and MessagePack",
    )
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    # ── encode ──
    enc_p = sub.add_parser("encode", help="JSON in, MessagePack out")
    enc_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read JSON from FILE instead of stdin")
    enc_p.add_argument("--format", "-f", choices=_FORMATS, default="hex",
                       help="Output encoding (default: hex)")

    # ── decode ──
    dec_p = sub.add_parser("decode", help="MessagePack in, JSON out")
    dec_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read MessagePack from FILE instead of stdin")
    dec_p.add_argument("--format", "-f", choices=_FORMATS, default="raw",
                       help="Input encoding (default: raw)")
    dec_p.add_argument("--map-mode", choices=[m.value for m in MapMode],
                       default=MapMode.SPECULATIVE.value,
                       help="How maps are rebuilt (default: speculative)")
    dec_p.add_argument("--strict", action="store_true",
                       help="Fail on invalid UTF-8 and unknown extensions")
    dec_p.add_argument("--indent", type=int, default=None,
                       help="Pretty-print JSON with this indent")

    # ── version ──
    sub.add_parser("version", help="Print version and exit")

    return parser


def _read_input(filepath: Optional[str]) -> bytes:
    """Read bytes from a file or stdin."""
    if filepath:
        with open(filepath, "rb") as f:
            return f.read()
    if sys.stdin.isatty():
        print("packwire: reading from stdin (Ctrl-D to end)...", file=sys.stderr)
    return sys.stdin.buffer.read()


def _cmd_encode(args: argparse.Namespace) -> None:
    raw = _read_input(args.input)
    packed = encode(loads(raw.decode("utf-8")))

    if args.format == "raw":
        sys.stdout.buffer.write(packed)
        sys.stdout.buffer.flush()
    elif args.format == "base64":
        print(base64.b64encode(packed).decode("ascii"))
    else:
        print(packed.hex())


def _cmd_decode(args: argparse.Namespace) -> None:
    raw = _read_input(args.input)
    if args.format == "hex":
        raw = bytes.fromhex(raw.decode("ascii").strip())
    elif args.format == "base64":
        raw = base64.b64decode(raw.strip(), validate=True)

    options = DecodeOptions(map_mode=args.map_mode)
    if args.strict:
        options = options.replace(bad_utf8_handler=raise_invalid_utf8,
                                  unknown_ext_handler=raise_unknown_ext)
    print(dumps(decode(raw, options), indent=args.indent))


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "version":
        print(f"packwire {__version__}")
        return

    try:
        if args.command == "encode":
            _cmd_encode(args)
        elif args.command == "decode":
            _cmd_decode(args)
    except PackError as e:
        print(f"packwire: error [{e.code}]: {e}", file=sys.stderr)
        sys.exit(2)
    except json.JSONDecodeError as e:
        print(f"packwire: JSON parse error: {e}", file=sys.stderr)
        sys.exit(2)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        print(f"packwire: bad input: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
