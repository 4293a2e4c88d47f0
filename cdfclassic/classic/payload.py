# Licensed under the GPLv3 - see LICENSE
"""
Definitions for variable data blocks.

Defines a `LazyDataView` class that holds the raw bytes of a variable's
data block, decoding values only when they are asked for.
"""
import operator

import numpy as np

from .constants import CDFType
from .primitives import read_block_at


__all__ = ['LazyDataView']


class LazyDataView:
    """Read-only view of a block of big-endian encoded values.

    Iterating over the view gives the values in order, decoding each as it
    is reached; every iteration starts afresh at the start of the block.
    A trailing partial value, if present, is ignored.

    Parameters
    ----------
    block : bytes
        The encoded values.
    type : `~cdfclassic.classic.constants.CDFType` or int
        Type of the values.

    Notes
    -----
    For char data, elements are single bytes (`bytes` of length 1), and
    ``str(view)`` gives the text.  On initialisation, char data are checked
    to be valid UTF-8.
    """

    def __init__(self, block, type):
        self._block = bytes(block)
        self.type = CDFType(type)
        if self.type is CDFType.CHAR:
            self._block.decode('utf-8')

    @classmethod
    def fromfile(cls, fh, type, offset, nbytes):
        """Capture the data block at ``offset``, leaving the file pointer.

        Parameters
        ----------
        fh : filehandle
            From which data is read.
        type : `~cdfclassic.classic.constants.CDFType`
            Type of the values.
        offset : int
            Absolute position of the block in the file.
        nbytes : int
            Size of the block.
        """
        return cls(read_block_at(fh, offset, nbytes), type)

    @property
    def dtype(self):
        """Numeric type of the decoded values."""
        return self.type.dtype

    @property
    def nbytes(self):
        """Size of the data block in bytes."""
        return len(self._block)

    def __len__(self):
        """Number of complete values in the block."""
        return len(self._block) // self.dtype.itemsize

    def _decode(self, index):
        if self.type is CDFType.CHAR:
            return self._block[index:index+1]
        return np.frombuffer(self._block, dtype=self.dtype, count=1,
                             offset=index * self.dtype.itemsize)[0]

    def __iter__(self):
        for index in range(len(self)):
            yield self._decode(index)

    def __getitem__(self, item):
        try:
            item = operator.index(item)
        except TypeError:
            raise TypeError(f"{type(self).__name__} can only be indexed "
                            "with integers.") from None
        n = len(self)
        if item < 0:
            item += n
        if not (0 <= item < n):
            raise IndexError(f"{type(self).__name__} index out of range.")
        return self._decode(item)

    def __array__(self, dtype=None, copy=None):
        """Interface to arrays.

        Without a ``dtype`` or ``copy``, the array is a read-only view
        of the block.
        """
        data = np.frombuffer(self._block, dtype=self.dtype, count=len(self))
        if not copy and (dtype is None or dtype == self.dtype):
            return data
        else:
            return data.astype(self.dtype if dtype is None else dtype,
                               copy=True)

    def is_fill(self, value):
        """Whether ``value`` equals the default fill value of the type."""
        fill_value = self.type.fill_value
        if self.type in (CDFType.FLOAT, CDFType.DOUBLE):
            # Compare bit patterns, so that this works for nan as well.
            return (np.asarray(value, dtype=self.dtype).tobytes()
                    == np.asarray(fill_value, dtype=self.dtype).tobytes())
        return value == fill_value

    def __str__(self):
        if self.type is CDFType.CHAR:
            return self._block.decode('utf-8').rstrip('\x00')
        return str(np.asarray(self))

    def __repr__(self):
        return (f"<{self.__class__.__name__} type={self.type.name.lower()} "
                f"length={len(self)}>")

    def __eq__(self, other):
        return (type(self) is type(other)
                and self.type is other.type
                and self._block == other._block)

    def __hash__(self):
        return hash((self.type, self._block))
