"""Tests for the byte-level building blocks: OutputBuffer, ReadCursor
and the leading-byte dispatch table."""

from __future__ import annotations

import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from packwire import PackError, TruncatedInput
from packwire._buffer import OutputBuffer
from packwire._cursor import ReadCursor
from packwire._dispatch import DISPATCH, Category


class TestOutputBuffer(unittest.TestCase):
    def test_growth_doubles_or_fits(self):
        buf = OutputBuffer(4)
        buf.write_bytes(b"abcd")
        self.assertEqual(buf.capacity, 4)
        buf.write_bytes(b"ef")          # need 6, double to 8
        self.assertEqual(buf.capacity, 8)
        buf.write_bytes(b"x" * 30)      # need 36 > 16
        self.assertEqual(buf.capacity, 36)
        self.assertEqual(buf.getvalue(), b"abcdef" + b"x" * 30)

    def test_growth_from_four_to_twenty(self):
        buf = OutputBuffer(4)
        buf.write_bytes(b"x" * 10)
        self.assertEqual(buf.capacity, 10)
        buf.write_bytes(b"y" * 3)
        self.assertEqual(buf.capacity, 20)

    def test_big_endian_writes(self):
        buf = OutputBuffer()
        buf.u16(0x0102)
        buf.u32(0x03040506)
        buf.i8(-1)
        buf.i16(-2)
        self.assertEqual(buf.getvalue(), b"\x01\x02\x03\x04\x05\x06\xff\xff\xfe")

    def test_64_bit_and_float_writes(self):
        buf = OutputBuffer(1)
        buf.u64(2**64 - 1)
        buf.i64(-(2**63))
        buf.f64(1.5)
        buf.f32(1.5)
        self.assertEqual(buf.getvalue(),
                         b"\xff" * 8 + b"\x80" + b"\x00" * 7
                         + bytes.fromhex("3ff8000000000000") + bytes.fromhex("3fc00000"))

    def test_tag_u8(self):
        buf = OutputBuffer(1)
        buf.tag_u8(0xCC, 0xFF)
        self.assertEqual(buf.getvalue(), b"\xcc\xff")

    def test_finish_is_readonly_view_of_written_range(self):
        buf = OutputBuffer(64)
        buf.write_bytes(b"hello")
        view = buf.finish()
        self.assertEqual(bytes(view), b"hello")
        self.assertTrue(view.readonly)

    def test_growth_with_outstanding_view(self):
        buf = OutputBuffer(2)
        buf.write_bytes(b"ab")
        view = buf.finish()
        buf.write_bytes(b"cdef")
        self.assertEqual(bytes(view), b"ab")
        self.assertEqual(buf.getvalue(), b"abcdef")

    def test_reset_rewrites_from_start(self):
        buf = OutputBuffer(8)
        buf.write_bytes(b"abc")
        buf.reset()
        buf.u8(0x7A)
        self.assertEqual(buf.getvalue(), b"z")

    def test_reserve(self):
        buf = OutputBuffer(4)
        buf.reserve(100)
        self.assertGreaterEqual(buf.capacity, 100)
        self.assertEqual(buf.offset, 0)

    def test_resize_keeps_prefix(self):
        buf = OutputBuffer(4)
        buf.write_bytes(b"abcdef")
        buf.resize(3)
        self.assertEqual(buf.capacity, 3)
        self.assertEqual(buf.getvalue(), b"abc")
        buf.resize(100)
        self.assertEqual(buf.getvalue(), b"abc")


class TestReadCursor(unittest.TestCase):
    def test_sequential_reads(self):
        cur = ReadCursor(b"\x01\x00\x02\xff\xff\xff\xfe")
        self.assertEqual(cur.u8(), 1)
        self.assertEqual(cur.u16(), 2)
        self.assertEqual(cur.i32(), -2)
        self.assertEqual(cur.offset, 7)

    def test_64_bit_reads(self):
        cur = ReadCursor(b"\xff" * 8 + b"\x80" + b"\x00" * 7)
        self.assertEqual(cur.u64(), 2**64 - 1)
        self.assertEqual(cur.i64(), -(2**63))

    def test_take_copies(self):
        data = bytearray(b"abcdef")
        cur = ReadCursor(data, 2)
        chunk = cur.take(3)
        data[2] = 0x5A
        self.assertEqual(chunk, b"cde")
        self.assertIsInstance(chunk, bytes)
        self.assertEqual(cur.offset, 5)

    def test_seek(self):
        cur = ReadCursor(b"\x01\x02\x03")
        cur.u8()
        cur.u8()
        cur.seek(0)
        self.assertEqual(cur.u8(), 1)

    def test_truncation(self):
        cur = ReadCursor(b"\x01")
        with self.assertRaises(TruncatedInput):
            cur.u16()
        self.assertEqual(cur.offset, 0)
        with self.assertRaises(PackError):
            cur.take(2)

    def test_empty(self):
        with self.assertRaises(TruncatedInput):
            ReadCursor(b"").u8()


class TestDispatch(unittest.TestCase):
    def test_covers_every_byte(self):
        self.assertEqual(len(DISPATCH), 256)
        for cat in DISPATCH:
            self.assertIsInstance(cat, Category)

    def test_ranges(self):
        self.assertIs(DISPATCH[0x00], Category.POS_FIXINT)
        self.assertIs(DISPATCH[0x7F], Category.POS_FIXINT)
        self.assertIs(DISPATCH[0x80], Category.FIXMAP)
        self.assertIs(DISPATCH[0x8F], Category.FIXMAP)
        self.assertIs(DISPATCH[0x90], Category.FIXARRAY)
        self.assertIs(DISPATCH[0x9F], Category.FIXARRAY)
        self.assertIs(DISPATCH[0xA0], Category.FIXSTR)
        self.assertIs(DISPATCH[0xBF], Category.FIXSTR)
        self.assertIs(DISPATCH[0xE0], Category.NEG_FIXINT)
        self.assertIs(DISPATCH[0xFF], Category.NEG_FIXINT)

    def test_single_tags(self):
        cases = {
            0xC0: Category.NIL, 0xC1: Category.NEVER_USED,
            0xC2: Category.FALSE, 0xC3: Category.TRUE,
            0xC4: Category.BIN8, 0xC7: Category.EXT8,
            0xCA: Category.FLOAT32, 0xCB: Category.FLOAT64,
            0xCF: Category.UINT64, 0xD3: Category.INT64,
            0xD4: Category.FIXEXT1, 0xD8: Category.FIXEXT16,
            0xD9: Category.STR8, 0xDB: Category.STR32,
            0xDC: Category.ARRAY16, 0xDF: Category.MAP32,
        }
        for b, cat in cases.items():
            with self.subTest(b=hex(b)):
                self.assertIs(DISPATCH[b], cat)

    def test_every_category_reachable(self):
        self.assertEqual(set(DISPATCH), set(Category))


if __name__ == "__main__":
    unittest.main()
