#!/usr/bin/env python3
# coding=utf-8
# date 2026-10-16 11:02:18

"""
The 512 byte tar header block and the format specific views over it.

A view never copies: every field is a memoryview window into the
bytearray owned by the Block, so a write through one view shows up in
the Block and in every other view of it.
"""

import struct

from libtarformat import (
    NUL,
    BLOCKSIZE,
    LENGTH_NAME,
    LENGTH_LINK,
    LENGTH_PREFIX,
    Format,
    UNKNOWN_FORMAT,
    V7_FORMAT,
    USTAR_FORMAT,
    PAX_FORMAT,
    GNU_FORMAT,
    STAR_FORMAT,
    GNU_MAGIC,
    GNU_VERSION,
    USTAR_MAGIC,
    USTAR_VERSION,
    STAR_TRAILER,
)
from libtarconv import (
    nts,
    itn,
    parse_octal,
    EmptyHeaderError,
    TruncatedHeaderError,
    InvalidHeaderError,
)
from protocols import Readable
from logs import logger


ZERO_BLOCK = bytes(BLOCKSIZE)

SPARSE_ENTRY_SIZE = 24          # offset(12) + length(12)


class Field:
    """A fixed byte range of a header.

       Reading the attribute returns a memoryview window into the
       header's buffer. Assigning bytes copies them into the window and
       fills the rest with NUL.
    """

    __slots__ = ("offset", "size", "name")

    def __init__(self, offset, size):
        self.offset = offset
        self.size = size
        self.name = None

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, header, owner=None):
        if header is None:
            return self
        return header.buf[self.offset:self.offset + self.size]

    def __set__(self, header, data):
        data = bytes(data)
        if len(data) > self.size:
            raise ValueError(f"{self.name}: {len(data)} bytes does not fit in {self.size}")
        header.buf[self.offset:self.offset + self.size] = data + (self.size - len(data)) * NUL

    def __repr__(self):
        return f"<Field {self.name} [{self.offset}:{self.offset + self.size}]>"


class HeaderV7:
    """Fields common to every format."""

    __slots__ = ("buf",)

    name = Field(0, LENGTH_NAME)
    mode = Field(100, 8)
    uid = Field(108, 8)
    gid = Field(116, 8)
    size = Field(124, 12)
    mtime = Field(136, 12)
    chksum = Field(148, 8)
    typeflag = Field(156, 1)
    linkname = Field(157, LENGTH_LINK)

    def __init__(self, buf):
        self.buf = memoryview(buf)
        if len(self.buf) != BLOCKSIZE:
            raise ValueError(f"header must be {BLOCKSIZE} bytes")


class _HeaderMagic(HeaderV7):

    __slots__ = ()

    magic = Field(257, 6)
    version = Field(263, 2)
    uname = Field(265, 32)
    gname = Field(297, 32)
    devmajor = Field(329, 8)
    devminor = Field(337, 8)


class HeaderUSTAR(_HeaderMagic):
    """POSIX.1-1988 header, also the on-block layout of PAX."""

    __slots__ = ()

    prefix = Field(345, LENGTH_PREFIX)


class HeaderSTAR(_HeaderMagic):

    __slots__ = ()

    prefix = Field(345, 131)
    atime = Field(476, 12)
    ctime = Field(488, 12)
    trailer = Field(508, 4)


class HeaderGNU(_HeaderMagic):
    """GNU header, the old sparse format keeps up to 4 entries
       inside the block itself.
    """

    __slots__ = ()

    atime = Field(345, 12)
    ctime = Field(357, 12)
    sparse_area = Field(386, SPARSE_ENTRY_SIZE * 4 + 1)
    realsize = Field(483, 12)

    def sparse(self):
        return SparseArray(self.sparse_area)


class SparseElem:

    __slots__ = ("buf",)

    offset = Field(0, 12)
    length = Field(12, 12)

    def __init__(self, buf):
        self.buf = memoryview(buf)


class SparseArray:
    """(offset, length) entries packed one after another, followed by
       the isextended byte.
    """

    __slots__ = ("buf",)

    def __init__(self, buf):
        self.buf = memoryview(buf)

    def max_entries(self) -> int:
        return len(self.buf) // SPARSE_ENTRY_SIZE

    def entry(self, i: int) -> SparseElem:
        if not 0 <= i < self.max_entries():
            raise IndexError(f"sparse entry {i} out of range")
        start = i * SPARSE_ENTRY_SIZE
        return SparseElem(self.buf[start:start + SPARSE_ENTRY_SIZE])

    def is_extended(self):
        start = SPARSE_ENTRY_SIZE * self.max_entries()
        return self.buf[start:start + 1]

    def __len__(self):
        return self.max_entries()

    def __iter__(self):
        for i in range(self.max_entries()):
            yield self.entry(i)


class Block:
    """A tar header block."""

    __slots__ = ("buf",)

    def __init__(self, data=None):
        if data is None:
            self.buf = bytearray(BLOCKSIZE)
        else:
            if len(data) != BLOCKSIZE:
                raise ValueError(f"block must be {BLOCKSIZE} bytes")
            self.buf = bytearray(data)

    @classmethod
    def frombuf(cls, buf):
        """Construct a Block from a 512 byte bytes object.
        """
        if len(buf) == 0:
            raise EmptyHeaderError("empty header")
        if len(buf) != BLOCKSIZE:
            raise TruncatedHeaderError("truncated header")
        return cls(buf)

    # 转换成不同格式的视图，都指向同一块内存
    def v7(self) -> HeaderV7:
        return HeaderV7(self.buf)

    def ustar(self) -> HeaderUSTAR:
        return HeaderUSTAR(self.buf)

    def star(self) -> HeaderSTAR:
        return HeaderSTAR(self.buf)

    def gnu(self) -> HeaderGNU:
        return HeaderGNU(self.buf)

    def sparse(self) -> SparseArray:
        """The whole block as a GNU sparse extension block."""
        return SparseArray(self.buf)

    def get_format(self) -> Format:
        """Check that the block is a valid header based on the checksum,
           then guess the format from the magic values.
           If the checksum fails, the unknown format is returned.
        """
        try:
            value = parse_octal(self.v7().chksum)
        except InvalidHeaderError:
            logger.debug(f"checksum field is not octal: {bytes(self.v7().chksum)!r}")
            return Format(UNKNOWN_FORMAT)

        unsigned, signed = self.compute_checksum()
        if value != unsigned and value != signed:
            logger.debug(f"bad checksum: {value} not in ({unsigned}, {signed})")
            return Format(UNKNOWN_FORMAT)

        magic = bytes(self.ustar().magic)
        version = bytes(self.ustar().version)
        trailer = bytes(self.star().trailer)
        if magic == USTAR_MAGIC and trailer == STAR_TRAILER:
            return Format(STAR_FORMAT)
        elif magic == USTAR_MAGIC:
            # USTAR 和 PAX 在 header 上完全一样，要看前面有没有 pax 扩展头
            return Format(USTAR_FORMAT | PAX_FORMAT)
        elif magic == GNU_MAGIC and version == GNU_VERSION:
            return Format(GNU_FORMAT)
        else:
            return Format(V7_FORMAT)

    def set_format(self, format):
        """Write the magic values of format, which must be exactly one
           format, and then update the checksum.
        """
        format = Format(format)
        if not format.is_single():
            raise ValueError("invalid format")

        if format.has(V7_FORMAT):
            pass
        elif format.has(GNU_FORMAT):
            gnu = self.gnu()
            gnu.magic = GNU_MAGIC
            gnu.version = GNU_VERSION
        elif format.has(STAR_FORMAT):
            star = self.star()
            star.magic = USTAR_MAGIC
            star.version = USTAR_VERSION
            star.trailer = STAR_TRAILER
        else:
            ustar = self.ustar()
            ustar.magic = USTAR_MAGIC
            ustar.version = USTAR_VERSION

        # The checksum field is terminated by a NUL and then a space.
        # Possible values are 256..128776, always fits 6 octal digits.
        chksum, _ = self.compute_checksum()
        self.v7().chksum = itn(chksum, 7) + b" "
        logger.debug(f"set format {format}, chksum {chksum:o}")

    def compute_checksum(self):
        """Calculate the checksum of the block by summing up all
           bytes except for the chksum field which is treated as if
           it was filled with spaces. POSIX sums unsigned bytes, but
           some tars (Sun and NeXT) sum signed bytes, so both are
           returned as (unsigned, signed).
        """
        unsigned_chksum = 256 + sum(struct.unpack_from("148B8x356B", self.buf))
        signed_chksum = 256 + sum(struct.unpack_from("148b8x356b", self.buf))
        return unsigned_chksum, signed_chksum

    def reset(self):
        """Clear the block to all zeros, in place."""
        self.buf[:] = ZERO_BLOCK

    def is_zero(self) -> bool:
        return self.buf == ZERO_BLOCK

    def __bytes__(self):
        return bytes(self.buf)

    def __len__(self):
        return len(self.buf)

    def __repr__(self):
        return f"<{self.__class__.__name__} {nts(self.v7().name)!r} {self.get_format()} at {id(self):#x}>"


def read_block(fileobj: Readable) -> Block:
    """Read exactly one block from fileobj.
    """
    buf = b""
    while len(buf) < BLOCKSIZE:
        data = fileobj.read(BLOCKSIZE - len(buf))
        if data == b"":
            break
        buf += data

    return Block.frombuf(buf)
