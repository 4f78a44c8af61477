#!/usr/bin/env python3
# coding=utf-8
# date 2026-10-16 09:30:05

"""
tar 的几种 header 格式：V7, USTAR, PAX, GNU, STAR。
它们共用同一个 512 字节的 header block，只是字段排布不同。
"""

#---------------------------------------------------------
# tar constants
#---------------------------------------------------------
NUL = b"\0"                     # the null character
BLOCKSIZE = 512                 # length of processing blocks

LENGTH_NAME = 100               # maximum length of a filename
LENGTH_LINK = 100               # maximum length of a linkname
LENGTH_PREFIX = 155             # maximum length of the prefix field

# Magics used to identify the formats.
GNU_MAGIC, GNU_VERSION = b"ustar ", b" \0"
USTAR_MAGIC, USTAR_VERSION = b"ustar\0", b"00"
STAR_TRAILER = b"tar\0"

#---------------------------------------------------------
# format bits
#---------------------------------------------------------
UNKNOWN_FORMAT = 1 << 0         # not a valid header
V7_FORMAT = 1 << 1              # Unix V7, before standardization
USTAR_FORMAT = 1 << 2           # POSIX.1-1988 (ustar) format
PAX_FORMAT = 1 << 3             # POSIX.1-2001 (pax) format
GNU_FORMAT = 1 << 4             # GNU tar format
STAR_FORMAT = 1 << 5            # Schily's tar format
_MAX_FORMAT = 1 << 6

FORMAT_NAMES = {
    V7_FORMAT: "V7",
    USTAR_FORMAT: "USTAR",
    PAX_FORMAT: "PAX",
    GNU_FORMAT: "GNU",
    STAR_FORMAT: "STAR",
}


class Format:
    """A set of tar formats a header may belong to.

       USTAR and PAX headers are byte for byte identical, so a single
       block can only be narrowed down to (USTAR | PAX). The in place
       operations let a reader narrow or widen the candidates as it
       learns more about the stream.
    """

    __slots__ = ("value",)

    def __init__(self, value=0):
        self.value = int(value)

    def has(self, other) -> bool:
        return self.value & int(other) != 0

    def may_be(self, other):
        self.value |= int(other)

    def may_only_be(self, other):
        self.value &= int(other)

    def must_not_be(self, other):
        self.value &= ~int(other)

    def names(self) -> list[str]:
        names = []
        bit = 1
        while bit < _MAX_FORMAT:
            if self.has(bit) and bit in FORMAT_NAMES:
                names.append(FORMAT_NAMES[bit])
            bit <<= 1
        return names

    def is_single(self) -> bool:
        """Exactly one concrete format, the sentinel bit not set."""
        return self.value in FORMAT_NAMES

    def __int__(self):
        return self.value

    def __index__(self):
        return self.value

    def __or__(self, other):
        return Format(self.value | int(other))

    __ror__ = __or__

    def __and__(self, other):
        return Format(self.value & int(other))

    __rand__ = __and__

    def __eq__(self, other):
        if isinstance(other, (Format, int)):
            return self.value == int(other)
        return NotImplemented

    # 可变对象，不能做 dict key
    __hash__ = None

    def __str__(self):
        names = self.names()
        if len(names) == 0:
            return "<unknown>"
        elif len(names) == 1:
            return names[0]
        else:
            return "(" + " | ".join(names) + ")"

    def __repr__(self):
        return "<%s %s>" % (self.__class__.__name__, self)


def block_padding(offset: int) -> int:
    """Return the number of bytes needed to pad offset up to the
       next block edge, 0 <= n < BLOCKSIZE.
    """
    if offset < 0:
        raise ValueError("offset must not be negative")
    return -offset & (BLOCKSIZE - 1)
