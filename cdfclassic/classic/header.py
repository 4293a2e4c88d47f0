# Licensed under the GPLv3 - see LICENSE
"""
Definitions for classic format headers.

The header of a classic file describes its dimensions, the global
attributes, and the variables, each with their own attributes and the
location of their data.  It is laid out as::

    magic  version  numrecs  dim_list  gatt_list  var_list

where each list starts with a tag saying whether it is present, followed
by the number of elements and the elements themselves.  Absent lists have
a zero tag and a zero count.

Reading happens in one pass over the header.  Since the data of variables
are not necessarily stored in the order of the variables, the data block
of each variable is captured as soon as its description has been read,
after which reading of the header continues where it was.
"""
import warnings
from collections import namedtuple

import numpy as np
import astropy.units as u
from astropy.utils import lazyproperty

from ..base.base import FormatError
from .constants import (MAGIC, VERSIONS, STREAMING, ABSENT, TAG_MASK,
                        NC_DIMENSION, NC_ATTRIBUTE, NC_VARIABLE, CDFType)
from .primitives import (read_exact, read_u8, read_u32, read_offset,
                         read_padded, read_name, read_array)
from .payload import LazyDataView


__all__ = ['Dimension', 'Attribute', 'Variable', 'CDFHeader',
           'read_section', 'read_dimension_list', 'read_attribute_list',
           'read_variable_list']


SHORT_PADDINGS = ('array', 'element')
"""Possible padding policies for short attributes."""


def _check_short_padding(short_padding):
    if short_padding not in SHORT_PADDINGS:
        raise ValueError(f"short_padding should be one of {SHORT_PADDINGS}; "
                         f"got {short_padding!r}.")


def read_section(fh, marker, read_list, **kwargs):
    """Read a tagged list, returning an empty tuple if it is absent.

    Parameters
    ----------
    fh : filehandle
        To read from, positioned at the tag.
    marker : int
        Tag indicating the list is present.
    read_list : callable
        Used as ``read_list(fh, **kwargs)`` to read the number of elements
        and the elements themselves.
    **kwargs
        Passed on to ``read_list``.

    Notes
    -----
    Only the lowest byte of the 32-bit tag field is the tag.  If it is not
    ``marker``, the list is taken to be absent, and the 4-byte count
    following the tag is skipped.  A warning is given if either the tag
    field or the count is not zero.
    """
    tag = read_u32(fh)
    if tag & TAG_MASK == marker:
        return read_list(fh, **kwargs)

    count = read_u32(fh)
    if tag != ABSENT:
        warnings.warn(f"unexpected tag {tag:#x} where {marker:#x} or "
                      f"absent expected; treating list as absent.")
    if count != 0:
        warnings.warn(f"absent list has non-zero count {count}; ignoring it.")
    return ()


class Dimension(namedtuple('Dimension', ['name', 'length'])):
    """Named dimension.

    Parameters
    ----------
    name : str
        Name of the dimension.
    length : int
        Its length, with 0 indicating the unlimited (record) dimension.
    """
    __slots__ = ()

    @classmethod
    def fromfile(cls, fh):
        """Read a dimension name and length from a file."""
        name = read_name(fh)
        return cls(name, read_u32(fh))

    @property
    def is_unlimited(self):
        """Whether this is the record dimension."""
        return self.length == 0


def read_dimension_list(fh):
    """Read the number of dimensions and the dimensions, in file order."""
    count = read_u32(fh)
    return tuple(Dimension.fromfile(fh) for _ in range(count))


class Attribute:
    """Named array of values describing the file or a variable.

    Parameters
    ----------
    name : str
        Name of the attribute.
    type : `~cdfclassic.classic.constants.CDFType` or int
        Type of the values.
    values : str or array_like
        For char attributes, the text, otherwise the values.  These are
        stored as a read-only array with the big-endian dtype of the type.
    """

    def __init__(self, name, type, values):
        self._name = name
        self._type = CDFType(type)
        if self._type is CDFType.CHAR:
            if isinstance(values, bytes):
                values = values.decode('utf-8')
            self._values = str(values)
        else:
            values = np.array(values, dtype=self._type.dtype, ndmin=1)
            values.flags.writeable = False
            self._values = values

    @classmethod
    def fromfile(cls, fh, short_padding='array'):
        """Read an attribute from a file.

        Parameters
        ----------
        fh : filehandle
            To read from.
        short_padding : {'array', 'element'}, optional
            Whether arrays of short values are padded as a whole to a 4-byte
            boundary (default, as the format prescribes) or whether each
            value is padded.

        Raises
        ------
        FormatError
            If the type tag is not known.
        """
        name = read_name(fh)
        type_ = CDFType.fromcode(read_u32(fh))
        count = read_u32(fh)
        if type_ is CDFType.CHAR:
            values = read_padded(fh, count).decode('utf-8')
        elif type_ is CDFType.SHORT:
            values = read_array(fh, type_.dtype, count, padding=short_padding)
        else:
            values = read_array(fh, type_.dtype, count)
        return cls(name, type_, values)

    @property
    def name(self):
        """Name of the attribute."""
        return self._name

    @property
    def type(self):
        """Type of the values."""
        return self._type

    @property
    def values(self):
        """Text for char attributes, otherwise a read-only array."""
        return self._values

    @property
    def value(self):
        """Text for char attributes, a scalar for single-element ones."""
        if self._type is not CDFType.CHAR and len(self._values) == 1:
            return self._values[0]
        return self._values

    def __len__(self):
        return len(self._values)

    def __str__(self):
        if self._type is CDFType.CHAR:
            return self._values
        return ', '.join(str(value) for value in self._values)

    def __repr__(self):
        return (f"{self.__class__.__name__}({self._name!r}, "
                f"{self._type.name.lower()}, {self._values!r})")

    def __eq__(self, other):
        return (type(self) is type(other)
                and self._name == other._name
                and self._type is other._type
                and np.all(self._values == other._values))

    __hash__ = None


def read_attribute_list(fh, short_padding='array'):
    """Read the number of attributes and the attributes, in file order."""
    count = read_u32(fh)
    return tuple(Attribute.fromfile(fh, short_padding=short_padding)
                 for _ in range(count))


class Variable:
    """Description of a variable, with a view of its data.

    Parameters
    ----------
    name : str
        Name of the variable.
    dim_refs : tuple of int
        Indices into the dimension table, from outermost to innermost.
    attributes : tuple of `~cdfclassic.classic.header.Attribute`
        Attributes of the variable.
    type : `~cdfclassic.classic.constants.CDFType` or int
        Type of the data.
    vsize : int
        Declared size of the data block in bytes.
    data_offset : int
        Absolute position of the data block in the file.
    data : `~cdfclassic.classic.payload.LazyDataView`
        View of the data block.
    dimensions : tuple of `~cdfclassic.classic.header.Dimension`, optional
        The dimension table of the file.  Used to resolve ``dim_refs``.
    record_count : int, optional
        Number of records in the file.  Used to infer ``shape``.

    Notes
    -----
    For variables using the record dimension, ``data`` holds only the block
    of ``vsize`` bytes at ``data_offset``, i.e., the first record; the
    records of different variables are interleaved in the file, and their
    reconstruction is not attempted.
    """

    def __init__(self, name, dim_refs, attributes, type, vsize, data_offset,
                 data, dimensions=(), record_count=0):
        self._name = name
        self._dim_refs = tuple(int(ref) for ref in dim_refs)
        self._attributes = tuple(attributes)
        self._type = CDFType(type)
        self._vsize = vsize
        self._data_offset = data_offset
        self._data = data
        self._dimension_table = tuple(dimensions)
        self._record_count = record_count

    @classmethod
    def fromfile(cls, fh, version, dimensions=(), record_count=0,
                 short_padding='array'):
        """Read a variable description from a file and capture its data.

        The description holds the name, the dimension references, a
        reserved 4-byte field, the attribute list, the type, the size
        and the offset of the data.  The data block is read from its
        offset in the file, after which the file pointer is returned to
        the end of the description.

        Parameters
        ----------
        fh : filehandle
            To read from.
        version : int
            Format version, which determines the size of the data offset:
            4 bytes for version 1, 8 bytes for version 2.
        dimensions : tuple of `~cdfclassic.classic.header.Dimension`
            The dimension table of the file.
        record_count : int
            Number of records in the file.
        short_padding : {'array', 'element'}, optional
            Padding of short attributes; see
            `~cdfclassic.classic.header.Attribute.fromfile`.

        Raises
        ------
        FormatError
            If the type tag is not known.
        EOFError
            If the file ends before the description or the data block.
        """
        name = read_name(fh)
        ndims = read_u32(fh)
        dim_refs = tuple(read_u32(fh) for _ in range(ndims))
        # The attribute list is always preceded by a reserved 4-byte field.
        read_u32(fh)
        attributes = read_attribute_list(fh, short_padding=short_padding)
        type_ = CDFType.fromcode(read_u32(fh))
        vsize = read_u32(fh)
        data_offset = read_offset(fh, version)
        data = LazyDataView.fromfile(fh, type_, data_offset, vsize)
        return cls(name, dim_refs, attributes, type_, vsize, data_offset,
                   data, dimensions=dimensions, record_count=record_count)

    @property
    def name(self):
        """Name of the variable."""
        return self._name

    @property
    def dim_refs(self):
        """Indices of the dimensions, from outermost to innermost."""
        return self._dim_refs

    @property
    def attributes(self):
        """Attributes of the variable, in file order."""
        return self._attributes

    @property
    def type(self):
        """Type of the data."""
        return self._type

    @property
    def dtype(self):
        """Numeric type of the data."""
        return self._type.dtype

    @property
    def vsize(self):
        """Declared size of the data block in bytes."""
        return self._vsize

    @property
    def data_offset(self):
        """Absolute position of the data block in the file."""
        return self._data_offset

    @property
    def data(self):
        """View of the data block."""
        return self._data

    @lazyproperty
    def attrs(self):
        """Attributes, keyed by name."""
        return {attr.name: attr for attr in self._attributes}

    @lazyproperty
    def dimensions(self):
        """The dimensions of the variable."""
        return tuple(self._dimension_table[ref] for ref in self._dim_refs)

    @property
    def is_record(self):
        """Whether the variable uses the record dimension."""
        return any(dim.is_unlimited for dim in self.dimensions)

    @lazyproperty
    def shape(self):
        """Shape of the variable.

        The length of the record dimension is the number of records,
        or `None` if this is unknown.
        """
        record_count = (None if self._record_count == STREAMING
                        else self._record_count)
        return tuple(record_count if dim.is_unlimited else dim.length
                     for dim in self.dimensions)

    @lazyproperty
    def unit(self):
        """Unit given by the 'units' attribute, `None` if not present.

        Strings not understood by `astropy.units` give an
        `~astropy.units.UnrecognizedUnit`.
        """
        units = self.attrs.get('units')
        if units is None:
            return None
        return u.Unit(str(units), parse_strict='silent')

    @property
    def fill_value(self):
        """Value of unwritten data.

        Given by the '_FillValue' attribute if present, otherwise the
        default for the type.
        """
        fill_value = self.attrs.get('_FillValue')
        if fill_value is None:
            return self._type.fill_value
        return fill_value.value

    def __repr__(self):
        dims = ', '.join(dim.name for dim in self.dimensions)
        return (f"<{self.__class__.__name__} {self._type.name.lower()} "
                f"{self._name}({dims})>")


def read_variable_list(fh, version, dimensions=(), record_count=0,
                       short_padding='array'):
    """Read the number of variables and the variables, in file order."""
    count = read_u32(fh)
    return tuple(Variable.fromfile(fh, version, dimensions=dimensions,
                                   record_count=record_count,
                                   short_padding=short_padding)
                 for _ in range(count))


class CDFHeader:
    """Header of a classic format file.

    Gives access to the dimensions, global attributes, and variables.
    Variables can also be found by name, i.e., ``header['time']``.

    Parameters
    ----------
    version : int
        Format version, 1 or 2.
    record_count : int
        Number of records; ``0xffffffff`` indicates streaming.
    dimensions : tuple of `~cdfclassic.classic.header.Dimension`
        In file order.
    attributes : tuple of `~cdfclassic.classic.header.Attribute`
        Global attributes, in file order.
    variables : tuple of `~cdfclassic.classic.header.Variable`
        In file order.
    verify : bool, optional
        Whether to do basic verification of integrity.  Default: `True`.
    """

    def __init__(self, version, record_count, dimensions=(), attributes=(),
                 variables=(), verify=True):
        self._version = version
        self._record_count = record_count
        self._dimensions = tuple(dimensions)
        self._attributes = tuple(attributes)
        self._variables = tuple(variables)
        if verify:
            self.verify()

    def verify(self):
        """Check the integrity of the header.

        Raises
        ------
        FormatError
            If the version is not supported, more than one dimension is
            unlimited, a variable refers to a dimension that does not exist,
            or uses the record dimension other than as its outermost one.
        """
        if self._version not in VERSIONS:
            raise FormatError(f"unsupported version {self._version}.")

        unlimited = [dim.name for dim in self._dimensions if dim.is_unlimited]
        if len(unlimited) > 1:
            raise FormatError(f"only one dimension can be unlimited; "
                              f"found {unlimited}.")

        ndims = len(self._dimensions)
        for var in self._variables:
            bad = [ref for ref in var.dim_refs if ref >= ndims]
            if bad:
                raise FormatError(f"variable {var.name!r} refers to "
                                  f"dimension(s) {bad}, but there are only "
                                  f"{ndims} dimensions.")
            if any(self._dimensions[ref].is_unlimited
                   for ref in var.dim_refs[1:]):
                raise FormatError(f"variable {var.name!r} uses the record "
                                  f"dimension other than as the outermost.")
            if var.vsize % 4:
                warnings.warn(f"variable {var.name!r} has size {var.vsize}, "
                              f"which is not a multiple of 4.")

    @classmethod
    def fromfile(cls, fh, verify=True, short_padding='array'):
        """Read a header from a file, starting at the current position.

        The magic bytes, version and number of records are read first,
        followed by the dimension, global attribute and variable lists.
        Any failure aborts the reading.

        Parameters
        ----------
        fh : filehandle
            To read from.  Needs to be seekable, since data blocks of
            variables are captured while reading.
        verify : bool, optional
            Whether to do basic verification of integrity.  Default: `True`.
        short_padding : {'array', 'element'}, optional
            Padding of short attributes; see
            `~cdfclassic.classic.header.Attribute.fromfile`.

        Raises
        ------
        FormatError
            If the magic bytes or the version are wrong, a type tag is
            unknown, or verification fails.
        EOFError
            If the file ends prematurely.
        UnicodeDecodeError
            If a name or char value is not valid UTF-8.
        """
        _check_short_padding(short_padding)
        magic = read_exact(fh, len(MAGIC))
        if magic != MAGIC:
            raise FormatError(f"incorrect magic number {magic!r}; "
                              f"expected {MAGIC!r}.")
        version = read_u8(fh)
        if version not in VERSIONS:
            raise FormatError(f"unsupported version {version}; "
                              f"should be one of {set(VERSIONS)}.")
        record_count = read_u32(fh)
        dimensions = read_section(fh, NC_DIMENSION, read_dimension_list)
        attributes = read_section(fh, NC_ATTRIBUTE, read_attribute_list,
                                  short_padding=short_padding)
        variables = read_section(fh, NC_VARIABLE, read_variable_list,
                                 version=version, dimensions=dimensions,
                                 record_count=record_count,
                                 short_padding=short_padding)
        return cls(version, record_count, dimensions, attributes, variables,
                   verify=verify)

    @property
    def version(self):
        """Format version, 1 or 2."""
        return self._version

    @property
    def format(self):
        """Format name: 'classic' or '64bit-offset'."""
        return VERSIONS.get(self._version)

    @property
    def record_count(self):
        """Number of records; ``0xffffffff`` if streaming."""
        return self._record_count

    @property
    def is_streaming(self):
        """Whether the number of records is unknown."""
        return self._record_count == STREAMING

    @property
    def dimensions(self):
        """Dimensions, in file order."""
        return self._dimensions

    @property
    def attributes(self):
        """Global attributes, in file order."""
        return self._attributes

    @property
    def variables(self):
        """Variables, in file order."""
        return self._variables

    @lazyproperty
    def attrs(self):
        """Global attributes, keyed by name."""
        return {attr.name: attr for attr in self._attributes}

    @property
    def record_dimension(self):
        """The unlimited dimension, `None` if there is none."""
        for dim in self._dimensions:
            if dim.is_unlimited:
                return dim
        return None

    def keys(self):
        """Names of the variables."""
        return [var.name for var in self._variables]

    def __getitem__(self, item):
        for var in self._variables:
            if var.name == item:
                return var
        raise KeyError(f"{self.__class__.__name__} does not contain "
                       f"variable {item!r}")

    def __contains__(self, item):
        return any(var.name == item for var in self._variables)

    def __repr__(self):
        dims = ', '.join(f"{dim.name}={dim.length}"
                         for dim in self._dimensions)
        return (f"<{self.__class__.__name__} {self.format} "
                f"record_count={self._record_count} dimensions=({dims}) "
                f"variables={self.keys()}>")
