# Licensed under the GPLv3 - see LICENSE
"""Lazily evaluated information on files.

A file reader gets an ``info`` attribute by assigning an instance of a
`~cdfclassic.base.file_info.FileReaderInfo` subclass to it.  On access, this
reads the header of the file and derives the items listed in ``attr_names``,
without ever raising: exceptions are stored in ``info.errors`` and warnings
in ``info.warnings``.
"""
import copy
import operator
import warnings


__all__ = ['info_item', 'InfoBase', 'FileReaderInfo', 'NoInfo']


class info_item:
    """Item of file information, evaluated on first access.

    The value replaces the descriptor on the instance.  If evaluation fails,
    the exception is stored in the instance's ``errors`` dict and ``default``
    is used instead, as it is when any of ``needs`` is `None`.

    Can be used as a decorator, with or without arguments.

    Parameters
    ----------
    fget : callable, optional
        Calculates the value from the info instance.  If not given, and
        ``needs`` is, the value is the attribute of the same name on the
        item given by ``needs`` (e.g., ``header.version``).
    needs : str or tuple of str
        Items that should not be `None` for the value to be calculated.
    default : optional
        Value used if it cannot be calculated.  Default: `None`.
    doc : str, optional
        Docstring.  By default, taken from ``fget``.
    copy : bool
        Whether to store a copy of the value, e.g., for a `dict` default.
    """

    def __init__(self, fget=None, *, needs=(), default=None, doc=None,
                 copy=False):
        self.needs = (needs,) if isinstance(needs, str) else tuple(needs)
        self.default = default
        self.copy = copy
        self.fget = None
        self.name = None
        self.__doc__ = doc
        if fget is not None:
            self(fget)

    def __call__(self, fget):
        if self.fget is not None:
            raise TypeError(f"info_item {self.name!r} already has a "
                            f"function and cannot be called.")
        self.fget = fget
        self.name = fget.__name__
        if self.__doc__ is None:
            self.__doc__ = fget.__doc__
        return self

    def __set_name__(self, owner, name):
        self.name = name
        if self.fget is None and self.needs:
            source = self.needs[-1]
            self.fget = operator.attrgetter(f"{source}.{name}")
            if self.__doc__ is None:
                self.__doc__ = f"{name} of the {source.lstrip('_')}."

    def __get__(self, instance, owner=None):
        if instance is None:
            return self

        value = self.default
        if self.fget is not None and all(
                getattr(instance, need, None) is not None
                for need in self.needs):
            try:
                result = self.fget(instance)
            except Exception as exc:
                instance.errors[self.name] = exc
            else:
                if result is not None:
                    value = result

        if self.copy:
            value = copy.copy(value)
        instance.__dict__[self.name] = value
        return value

    def __str__(self):
        doc = (self.__doc__ or '').split('\n')[0]
        return f"{self.name}: {doc}"

    def __repr__(self):
        return f"<{self.__class__.__name__} {self}>"


class InfoBase:
    """Descriptor providing information on a file reader.

    As a class attribute of a reader, accessing it on a reader instance
    gives an instance bound to that reader, which is stored on the reader.
    The bound instance evaluates all ``attr_names`` immediately, unless the
    reader's file is closed.  It is `True` if the file is of the right
    format.

    Parameters
    ----------
    parent : file reader, optional
        The reader the information is about.  `None` for the descriptor.
    """

    attr_names = ()
    """Items listed by ``repr`` and returned by calling the instance."""

    def __init__(self, parent=None):
        self._parent = parent
        if parent is not None and not parent.closed:
            for attr in self.attr_names:
                getattr(self, attr)

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        if 'info' not in instance.__dict__:
            instance.__dict__['info'] = self.__class__(parent=instance)
        return instance.__dict__['info']

    def __delete__(self, instance):
        # Being a data descriptor ensures __get__ is always used.
        instance.__dict__.pop('info', None)

    def __bool__(self):
        return self.format is not None

    def __call__(self):
        """The items in ``attr_names`` that are not `None` or empty."""
        return {attr: value for attr, value in
                ((attr, getattr(self, attr)) for attr in self.attr_names)
                if value is not None and value != {}}

    def __repr__(self):
        if self._parent is None:
            return '\n'.join([f"{self.__class__.__name__} (unbound) with "
                              "items:"]
                             + [f"  {getattr(self.__class__, attr)}"
                                for attr in self.attr_names])

        name = self._parent.__class__.__name__.replace('Reader', '')
        lines = [f"{name} information:"]
        lines += [f"{attr} = {value}" for attr, value in self().items()]
        if not self:
            lines.append('Not parsable. Wrong format?')
        return '\n'.join(lines)


class FileReaderInfo(InfoBase):
    """Information on a file, derived from its header.

    The header is read without verification; ``readable`` tells whether
    it also passes verification.  Subclasses add items specific to their
    format.
    """
    attr_names = ('format', 'readable', 'checks', 'errors', 'warnings')

    checks = info_item(default={}, copy=True,
                       doc='Checks done for readability.')
    errors = info_item(default={}, copy=True,
                       doc='Exceptions raised while getting items.')
    warnings = info_item(default={}, copy=True,
                         doc='Warnings given while getting items.')

    def _record_warnings(self, name, func, *args, **kwargs):
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter('always')
            result = func(*args, **kwargs)
        if w:
            self.warnings[name] = '; '.join(str(wi.message) for wi in w)
        return result

    @info_item
    def header(self):
        """Header of the file, read from its start."""
        with self._parent.temporary_offset(0) as fh:
            return self._record_warnings('header', fh.read_header,
                                         verify=False)

    @info_item(needs='header')
    def format(self):
        """Name of the file format."""
        return self.header.format

    @info_item(needs='header', default=False)
    def verified(self):
        """Whether the header passed verification."""
        self._record_warnings('verified', self.header.verify)
        return True

    @info_item(needs='header', default=False)
    def readable(self):
        """Whether the header could be read and verified."""
        self.checks['verified'] = self.verified
        return all(self.checks.values())


class NoInfo:
    """Stand-in for information on a file that could not be opened.

    Evaluates as `False`.

    Parameters
    ----------
    info : str
        Explanation, shown by ``repr``.
    """
    def __init__(self, info=None):
        self.info = info

    def __bool__(self):
        return False

    def __repr__(self):
        return f"No Info: {self.info}"
