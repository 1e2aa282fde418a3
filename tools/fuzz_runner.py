#!/usr/bin/env python3
# tools/fuzz_runner.py
#
# Randomized round-trip fuzzing for packwire.
#
# Generates three fuzz categories:
#   A) random value trees -> encode -> decode, compared for equality
#   B) random and truncated byte strings -> decode, which must either
#      return a value or raise PackError
#   C) decode/re-encode stability: encode(decode(b)) == b for b = encode(v)
#
# Any failure prints a minimal repro payload and exits non-zero.
# PACKWIRE_SEED and PACKWIRE_ROUNDS override the defaults.

import os, sys, json, base64, random, datetime
from typing import Any, Dict

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(ROOT, "implementations", "python"))

from packwire import PackError, PairMap, UnknownExt, decode, decode_from, encode

SEED = int(os.environ.get("PACKWIRE_SEED", "4242"))
ROUNDS = int(os.environ.get("PACKWIRE_ROUNDS", "5000"))

random.seed(SEED)

UTC = datetime.timezone.utc


def b64(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")


def failure(label: str, ctx: Dict[str, Any]) -> None:
    print("FAIL:", label)
    print("CTX:", json.dumps(ctx, ensure_ascii=False, default=repr)[:4000])
    raise SystemExit(1)


# --- generators ---

def rand_text(nmax: int) -> str:
    n = random.randint(0, nmax)
    # mostly ASCII, some BMP, the odd astral code point; no surrogates
    out = []
    for _ in range(n):
        r = random.random()
        if r < 0.8:
            out.append(chr(random.randint(0x20, 0x7E)))
        elif r < 0.95:
            out.append(chr(random.randint(0xA0, 0xD7FF)))
        else:
            out.append(chr(random.randint(0x10000, 0x10FFFF)))
    return "".join(out)


def rand_int() -> int:
    bits = random.choice([4, 7, 8, 15, 16, 31, 32, 53, 63, 64])
    n = random.getrandbits(bits)
    if random.random() < 0.5 and bits < 64:
        n = -n
    return n


def rand_timestamp() -> datetime.datetime:
    seconds = random.randint(-(2**35), 2**35)
    micros = random.randint(0, 999_999)
    return datetime.datetime(1970, 1, 1, tzinfo=UTC) + datetime.timedelta(
        seconds=seconds, microseconds=micros)


def rand_scalar() -> Any:
    r = random.random()
    if r < 0.10:
        return None
    if r < 0.20:
        return random.random() < 0.5
    if r < 0.45:
        return rand_int()
    if r < 0.55:
        return random.uniform(-1e12, 1e12)
    if r < 0.80:
        return rand_text(40)
    if r < 0.90:
        return bytes(random.getrandbits(8) for _ in range(random.randint(0, 300)))
    if r < 0.95:
        return rand_timestamp()
    return UnknownExt(random.randint(0, 127),
                      bytes(random.getrandbits(8) for _ in range(random.randint(0, 20))))


def rand_tree() -> Any:
    def gen(depth: int):
        if depth > 4 or random.random() < 0.4:
            return rand_scalar()
        r = random.random()
        if r < 0.45:
            d = {}
            for _ in range(random.randint(0, 18)):
                key = rand_text(8) if random.random() < 0.7 else rand_int()
                d[key] = gen(depth + 1)
            return d
        if r < 0.55:
            # composite keys force the PairMap path
            pm = PairMap([([rand_int()], gen(depth + 1))])
            for _ in range(random.randint(0, 4)):
                key = [rand_int()] if random.random() < 0.5 else rand_text(6)
                pm[key] = gen(depth + 1)
            return pm
        return [gen(depth + 1) for _ in range(random.randint(0, 18))]
    return gen(0)


def rand_garbage(valid: bytes) -> bytes:
    if valid and random.random() < 0.6:
        return valid[:random.randint(0, len(valid) - 1)]
    return bytes(random.getrandbits(8) for _ in range(random.randint(0, 64)))


def main() -> int:
    for i in range(ROUNDS):
        tree = rand_tree()
        packed = encode(tree)
        r = random.random()

        # A) round trip
        if r < 0.50:
            out, end = decode_from(packed)
            if out != tree:
                failure("A round trip", {"round": i, "value": tree, "input_b64": b64(packed)})
            if end != len(packed):
                failure("A end offset", {"round": i, "end": end, "len": len(packed)})
            continue

        # B) garbage never escapes as a non-PackError
        if r < 0.80:
            raw = rand_garbage(packed)
            try:
                decode(raw)
            except PackError:
                pass
            except Exception as e:
                failure("B decode crash", {"round": i, "error": repr(e), "input_b64": b64(raw)})
            continue

        # C) re-encode stability
        again = encode(decode(packed))
        if again != packed:
            failure("C re-encode", {"round": i, "first_b64": b64(packed), "second_b64": b64(again)})

    print(f"OK: fuzz rounds={ROUNDS} seed={SEED} (no failures)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
