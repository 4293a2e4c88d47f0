# Licensed under the GPLv3 - see LICENSE
"""Constants of the classic format: signature, section tags and types.

All integers in a file are stored big-endian.  The numeric types are
described by `CDFType`, which links each type tag to the `~numpy.dtype`
used to decode its values and to the default fill value of the format.
"""
import enum

import numpy as np

from ..base.base import FormatError


__all__ = ['MAGIC', 'VERSIONS', 'STREAMING', 'ABSENT', 'TAG_MASK',
           'NC_DIMENSION', 'NC_VARIABLE', 'NC_ATTRIBUTE', 'CDFType']


MAGIC = b'CDF'
"""File signature, followed by a single version byte."""
VERSIONS = {1: 'classic', 2: '64bit-offset'}
"""Supported version bytes, with the corresponding format names."""
STREAMING = 0xffffffff
"""Record count used for files whose length is not known."""

TAG_MASK = 0xff
"""Tags and type codes are 8-bit codes stored in 32-bit fields."""

ABSENT = 0x00000000
NC_DIMENSION = 0x0000000a
NC_VARIABLE = 0x0000000b
NC_ATTRIBUTE = 0x0000000c

# Bit patterns of the default fill values, as the integers they encode.
_FILL_PATTERNS = {
    1: 0x81,
    2: 0x00,
    3: 0x8001,
    4: 0x80000001,
    5: 0x7cf00000,
    6: 0x479e000000000000}

_DTYPES = {
    1: np.dtype('i1'),
    2: np.dtype('S1'),
    3: np.dtype('>i2'),
    4: np.dtype('>i4'),
    5: np.dtype('>f4'),
    6: np.dtype('>f8')}


class CDFType(enum.IntEnum):
    """Type of attribute and variable values, as encoded in a type tag."""

    BYTE = 1
    CHAR = 2
    SHORT = 3
    INT = 4
    FLOAT = 5
    DOUBLE = 6

    @classmethod
    def fromcode(cls, code):
        """Get the type for a tag read from a file.

        Only the lowest byte of the 32-bit field is used.

        Raises
        ------
        FormatError
            If the tag does not correspond to a known type.
        """
        try:
            return cls(code & TAG_MASK)
        except ValueError:
            raise FormatError(f"unknown type tag {code}") from None

    @property
    def dtype(self):
        """Big-endian `~numpy.dtype` of values of this type."""
        return _DTYPES[self.value]

    @property
    def itemsize(self):
        """Number of bytes used by each value."""
        return self.dtype.itemsize

    @property
    def fill_value(self):
        """Default value of unwritten data, as a scalar of ``dtype``.

        For char, this is the single byte ``b'\\x00'``.
        """
        pattern = _FILL_PATTERNS[self.value]
        raw = pattern.to_bytes(self.itemsize, 'big')
        if self is CDFType.CHAR:
            # numpy would strip the NUL of an 'S1' scalar.
            return raw
        return np.frombuffer(raw, dtype=self.dtype)[0]
