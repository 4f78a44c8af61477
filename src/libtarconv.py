#!/usr/bin/env python3
# coding=utf-8
# date 2026-10-16 10:12:40

"""
tar header 字段的编码/解码，以及 header 相关的异常。
"""

import os
import re
import sys

from libtarformat import (
    NUL,
    GNU_FORMAT,
    USTAR_FORMAT,
)


#---------------------------------------------------------
# initialization
#---------------------------------------------------------
if os.name == "nt":
    ENCODING = "utf-8"
else:
    ENCODING = sys.getfilesystemencoding()


_OCTAL = re.compile(rb"[0-7]+")


#---------------------------------------------------------
# Exception
#---------------------------------------------------------
class TarError(Exception):
    """Base exception."""
    pass
class HeaderError(TarError):
    """Base exception for header errors."""
    pass
class EmptyHeaderError(HeaderError):
    """Exception for empty headers."""
    pass
class TruncatedHeaderError(HeaderError):
    """Exception for truncated headers."""
    pass
class InvalidHeaderError(HeaderError):
    """Exception for invalid headers."""
    pass


#---------------------------------------------------------
# Some useful functions
#---------------------------------------------------------

def nts(s, encoding=ENCODING, errors="surrogateescape"):
    """Convert a null-terminated bytes object to a string.
    """
    s = bytes(s)
    p = s.find(NUL)
    if p != -1:
        s = s[:p]
    return s.decode(encoding, errors)

def parse_octal(s):
    """Convert an ASCII octal field to a python number.

       Unused fields are filled with NULs and fields may be padded
       with spaces or NULs on either side, so both are trimmed from
       the ends and the value stops at the next NUL. An empty field is 0.
    """
    s = bytes(s).strip(b" \0")
    p = s.find(NUL)
    if p != -1:
        s = s[:p]
    s = s.strip(b" ")
    if not s:
        return 0

    # int() 还接受 "0o"、"+"、"_" 这些写法，这里只认纯八进制数字
    if _OCTAL.fullmatch(s) is None:
        raise InvalidHeaderError("invalid header")
    return int(s, 8)

def nti(s):
    """Convert a number field to a python number.
    """
    # There are two possible encodings for a number field, see
    # itn() below.
    if len(s) == 0:
        raise InvalidHeaderError("empty number field")
    if s[0] in (0o200, 0o377):
        n = 0
        for i in range(len(s) - 1):
            n <<= 8
            n += s[i + 1]
        if s[0] == 0o377:
            n = -(256 ** (len(s) - 1) - n)
    else:
        n = parse_octal(s)
    return n

def itn(n, digits=8, format=USTAR_FORMAT):
    """Convert a python number to a number field.
    """
    # POSIX 1003.1-1988 requires numbers to be encoded as a string of
    # octal digits followed by a null-byte, this allows values up to
    # (8**(digits-1))-1. GNU tar allows storing numbers greater than
    # that if necessary. A leading 0o200 or 0o377 byte indicate this
    # particular encoding, the following digits-1 bytes are a big-endian
    # base-256 representation. This allows values up to (256**(digits-1))-1.
    # A 0o200 byte indicates a positive number, a 0o377 byte a negative
    # number.
    n = int(n)
    if 0 <= n < 8 ** (digits - 1):
        s = bytes("%0*o" % (digits - 1, n), "ascii") + NUL
    elif int(format) & GNU_FORMAT and -256 ** (digits - 1) <= n < 256 ** (digits - 1):
        if n >= 0:
            s = bytearray([0o200])
        else:
            s = bytearray([0o377])
            n = 256 ** digits + n

        for i in range(digits - 1):
            s.insert(1, n & 0o377)
            n >>= 8
        s = bytes(s)
    else:
        raise ValueError("overflow in number field")

    return s
