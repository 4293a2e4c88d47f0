# Licensed under the GPLv3 - see LICENSE
"""Wrapper of binary files, and helpers to create ``open`` and ``info``.

A format's file reader subclasses `~cdfclassic.base.base.FileBase`, adding
a ``read_header`` method and an ``info`` descriptor.  The format module then
defines its ``open`` and ``info`` functions with::

    open = FileOpener.create(globals())
    info = FileInfo.create(globals())
"""
import inspect
import io

from .utils import temporary_offset


__all__ = ['FormatError', 'FileBase', 'FileOpener', 'FileInfo']


class FormatError(ValueError):
    """Error in the structure of a file."""
    pass


class FileBase:
    """Wrapper of a readable and seekable binary file.

    Attributes not found on the wrapper, such as ``read``, ``seek`` or
    ``closed``, are looked up on the wrapped file ``fh_raw``.

    Parameters
    ----------
    fh_raw : filehandle
        The binary file.
    """
    fh_raw = None

    def __init__(self, fh_raw):
        self.fh_raw = fh_raw

    def __getattr__(self, attr):
        if not attr.startswith('_'):
            try:
                return getattr(self.fh_raw, attr)
            except AttributeError:
                pass
        return self.__getattribute__(attr)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self.fh_raw.close()

    def temporary_offset(self, offset=None, whence=0):
        """Context manager that moves the file pointer back on exit.

        Parameters are as for :meth:`io.IOBase.seek`; without ``offset``,
        the file pointer is not moved on entry.
        """
        return temporary_offset(self, offset, whence)

    def __repr__(self):
        return f"{self.__class__.__name__}(fh_raw={self.fh_raw})"


class FileOpener:
    """Opener of files of a given format.

    Parameters
    ----------
    fmt : str
        Name of the format, used in messages.
    reader_class : class
        File reader, initialized with a binary filehandle.
    """

    modes = ('r', 'rb', 'br')
    """Modes accepted for opening; all give binary reading."""

    def __init__(self, fmt, reader_class):
        self.fmt = fmt
        self.reader_class = reader_class

    def __call__(self, name, mode='rb'):
        """Open a file for reading.

        Parameters
        ----------
        name : str or filehandle
            File name or binary filehandle.  A filehandle is wrapped as is.
        mode : {'rb'}, optional
            Only reading is supported.

        Returns
        -------
        fh : file reader
            Wrapper of the binary file, with methods to read the header.
        """
        if mode not in self.modes:
            raise ValueError(f"invalid mode: {mode} ({self.fmt} files can "
                             f"only be opened for reading, with 'rb').")
        fh = name if hasattr(name, 'read') else io.open(name, 'rb')
        try:
            return self.reader_class(fh)
        except Exception:
            if fh is not name:
                fh.close()
            raise

    @classmethod
    def create(cls, ns, doc=''):
        """Create the ``open`` function of a format module.

        The module should define a single ``<fmt>FileReader`` class.

        Parameters
        ----------
        ns : dict
            The module namespace, i.e., ``globals()``.
        doc : str, optional
            Notes added to the docstring.
        """
        readers = [key for key in ns if key.endswith('FileReader')]
        if len(readers) != 1:
            raise ValueError(f"namespace should contain one FileReader; "
                             f"found {readers}.")
        fmt = readers[0][:-len('FileReader')]
        opener = cls(fmt, ns[readers[0]])

        def open(name, mode='rb'):
            return opener(name, mode)

        open.__doc__ = inspect.cleandoc(cls.__call__.__doc__).replace(
            'Open a file', f'Open a {fmt} file')
        if doc:
            open.__doc__ += '\n\n' + inspect.cleandoc(doc)
        open.__module__ = ns.get('__name__')
        return open


class FileInfo:
    """Collector of information on files of a given format.

    Parameters
    ----------
    opener : callable
        The ``open`` function of the format.
    """

    def __init__(self, opener):
        self.open = opener

    def __call__(self, name):
        """Collect information on a file.

        Parameters
        ----------
        name : str or filehandle
            The file to inspect.

        Returns
        -------
        info : `~cdfclassic.base.file_info.FileReaderInfo` or `Exception`
            Information on the file, which evaluates as `False` if the file
            is not of the right format, or the exception raised if the file
            could not be opened at all.
        """
        try:
            with self.open(name, 'rb') as fh:
                return fh.info
        except Exception as exc:
            return exc

    @classmethod
    def create(cls, ns):
        """Create the ``info`` function of a format module.

        Parameters
        ----------
        ns : dict
            The module namespace, which should contain ``open``.
        """
        file_info = cls(ns['open'])

        def info(name):
            return file_info(name)

        info.__doc__ = cls.__call__.__doc__
        info.__module__ = ns.get('__name__')
        return info
