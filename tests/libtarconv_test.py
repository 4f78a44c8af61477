import unittest

from libtarformat import GNU_FORMAT, USTAR_FORMAT
from libtarconv import (
    nts,
    nti,
    itn,
    parse_octal,
    HeaderError,
    InvalidHeaderError,
)


class String_test(unittest.TestCase):

    def test_nts(self):
        self.assertEqual(nts(b"root\0\0\0\0"), "root")
        self.assertEqual(nts(b"full"), "full")
        self.assertEqual(nts(memoryview(b"a\0b")), "a")


class Octal_test(unittest.TestCase):

    def test_parse(self):
        self.assertEqual(parse_octal(b"0000644\0"), 0o644)
        self.assertEqual(parse_octal(b"000400\0 "), 0o400)
        self.assertEqual(parse_octal(b"  1617 \0"), 0o1617)
        self.assertEqual(parse_octal(memoryview(b"17\0\0")), 0o17)

    def test_empty(self):
        self.assertEqual(parse_octal(b"\0" * 8), 0)
        self.assertEqual(parse_octal(b"\x00" * 7 + b" "), 0)
        self.assertEqual(parse_octal(b" " * 8), 0)

    def test_leading_nul(self):
        self.assertEqual(parse_octal(b"\x001557 \x00\x00"), 0o1557)
        self.assertEqual(parse_octal(b"\x00\x00 644 \x00"), 0o644)
        self.assertEqual(parse_octal(b" 17\x00 99"), 0o17)

    def test_invalid(self):
        for field in (b"0o17\0", b"1_7\0", b"89\0", b"+17\0", b"12 34\0", b"\xff\xff"):
            with self.subTest(field=field):
                with self.assertRaises(InvalidHeaderError):
                    parse_octal(field)

    def test_invalid_is_header_error(self):
        self.assertTrue(issubclass(InvalidHeaderError, HeaderError))


class Number_test(unittest.TestCase):

    def test_itn_octal(self):
        self.assertEqual(itn(0o644), b"0000644\0")
        self.assertEqual(itn(0o17, 12), b"00000000017\0")

    def test_itn_overflow(self):
        with self.assertRaises(ValueError):
            itn(8 ** 7, 8, USTAR_FORMAT)
        with self.assertRaises(ValueError):
            itn(-1, 8, USTAR_FORMAT)

    def test_gnu_base256(self):
        self.assertEqual(itn(-1, 8, GNU_FORMAT), b"\xff" * 8)
        self.assertEqual(itn(8 ** 7, 8, GNU_FORMAT), b"\x80\0\0\0\0\x20\0\0")

        for n in (8 ** 11, 256 ** 11 - 1, -1, -12345678):
            with self.subTest(n=n):
                self.assertEqual(nti(itn(n, 12, GNU_FORMAT)), n)

    def test_nti_empty(self):
        with self.assertRaises(InvalidHeaderError):
            nti(b"")

    def test_nti_octal(self):
        self.assertEqual(nti(b"0000644\0"), 0o644)
        with self.assertRaises(InvalidHeaderError):
            nti(b"abc\0")


if __name__ == "__main__":
    unittest.main()
