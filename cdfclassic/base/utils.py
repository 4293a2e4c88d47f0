# Licensed under the GPLv3 - see LICENSE
from contextlib import contextmanager
from operator import index


__all__ = ['ALIGNMENT', 'padded_nbytes', 'temporary_offset']


ALIGNMENT = 4
"""All fields in a header start on a 4-byte boundary."""


def padded_nbytes(nbytes, alignment=ALIGNMENT):
    """Round a number of bytes up to the next multiple of ``alignment``.

    Examples
    --------
    >>> padded_nbytes(9)
    12
    >>> padded_nbytes(8)
    8
    """
    nbytes = index(nbytes)
    if nbytes < 0:
        raise ValueError(f"number of bytes cannot be negative; got {nbytes}.")
    return -(-nbytes // alignment) * alignment


@contextmanager
def temporary_offset(fh, offset=None, whence=0):
    """Context manager for temporarily seeking to another file position.

    To be used as part of a ``with`` statement::

        with temporary_offset(fh, offset) [as fh]:
            with-block

    On exiting the ``with-block``, the file pointer is moved back to its
    original position, also if an exception was raised.  Parameters are as
    for :meth:`io.IOBase.seek`.
    """
    oldpos = fh.tell()
    try:
        if offset is not None:
            fh.seek(offset, whence)
        yield fh
    finally:
        fh.seek(oldpos)
