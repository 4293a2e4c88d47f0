# Licensed under the GPLv3 - see LICENSE
"""Readers for the primitive fields of the classic format.

All functions act on a readable binary file handle and only advance its
file pointer, except for `read_block_at`, which returns it to where it was.
Scalars are big-endian; byte blocks are stored padded to a multiple of four
bytes, of which only the requested number is returned.
"""
import struct

import numpy as np

from ..base.utils import padded_nbytes, temporary_offset


__all__ = ['read_exact', 'read_u8', 'read_i16', 'read_i32', 'read_u32',
           'read_u64', 'read_f32', 'read_f64', 'read_offset',
           'read_padded', 'read_name', 'read_array', 'read_block_at']


def read_exact(fh, nbytes):
    """Read exactly ``nbytes`` bytes.

    Raises
    ------
    EOFError
        If the file ends before all bytes could be read.
    """
    s = fh.read(nbytes)
    if len(s) < nbytes:
        raise EOFError(f"could not read {nbytes} bytes; "
                       f"file ended after {len(s)}.")
    return s


def make_reader(fmt, doc):
    """Construct a function that reads a single scalar from a file.

    Parameters
    ----------
    fmt : str
        `struct` format of the scalar, including byte order.
    doc : str
        Docstring of the reader.

    Returns
    -------
    reader : function
        To be used as ``reader(fh)``.
    """
    s = struct.Struct(fmt)

    def reader(fh):
        return s.unpack(read_exact(fh, s.size))[0]

    reader.__doc__ = doc
    return reader


read_u8 = make_reader('>B', "Read an unsigned 8-bit integer.")
read_i16 = make_reader('>h', "Read a big-endian signed 16-bit integer.")
read_i32 = make_reader('>i', "Read a big-endian signed 32-bit integer.")
read_u32 = make_reader('>I', "Read a big-endian unsigned 32-bit integer.")
read_u64 = make_reader('>Q', "Read a big-endian unsigned 64-bit integer.")
read_f32 = make_reader('>f', "Read a big-endian 32-bit float.")
read_f64 = make_reader('>d', "Read a big-endian 64-bit float.")


def read_offset(fh, version):
    """Read a file offset, which is 32 bits for version 1, else 64 bits."""
    return read_u32(fh) if version == 1 else read_u64(fh)


def read_padded(fh, nbytes):
    """Read ``nbytes`` bytes, skipping padding up to a 4-byte boundary."""
    return read_exact(fh, padded_nbytes(nbytes))[:nbytes]


def read_name(fh):
    """Read a length-prefixed, padded UTF-8 string.

    Raises
    ------
    UnicodeDecodeError
        If the bytes are not valid UTF-8.
    """
    return read_padded(fh, read_u32(fh)).decode('utf-8')


def read_array(fh, dtype, count, padding='array'):
    """Read ``count`` values with the given dtype.

    Parameters
    ----------
    fh : filehandle
        To read from.
    dtype : `~numpy.dtype`
        Type of the values, including byte order.
    count : int
        Number of values.
    padding : {'array', 'element'}, optional
        Whether the array as a whole is padded to a 4-byte boundary
        (default) or every value is.

    Returns
    -------
    values : `~numpy.ndarray`
        Read-only array of the values.
    """
    dtype = np.dtype(dtype)
    if padding == 'array':
        s = read_padded(fh, count * dtype.itemsize)
        return np.frombuffer(s, dtype=dtype)

    if padding != 'element':
        raise ValueError(f"padding should be 'array' or 'element'; "
                         f"got {padding!r}.")
    stride = padded_nbytes(dtype.itemsize)
    s = read_exact(fh, count * stride)
    values = (np.frombuffer(s, dtype=dtype)
              .reshape(count, stride // dtype.itemsize)[:, 0])
    values = np.ascontiguousarray(values)
    values.flags.writeable = False
    return values


def read_block_at(fh, offset, nbytes):
    """Read a block of bytes at an absolute offset.

    The file pointer is returned to its original position afterwards, also
    if reading fails.
    """
    with temporary_offset(fh, offset):
        return read_exact(fh, nbytes)

