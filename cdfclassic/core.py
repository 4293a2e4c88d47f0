# Licensed under the GPLv3 - see LICENSE
"""Routines to read classic format files and obtain information on them."""
# We do not import the format module on top, to keep import time minimal.

__all__ = ['file_info', 'open', 'decode']


def file_info(name):
    """Get information from a classic format file.

    Parameters
    ----------
    name : str or filehandle
        Raw file for which to obtain information.

    Returns
    -------
    info
        The information on the file.  This will be an instance of either
        `~cdfclassic.classic.base.CDFFileReaderInfo`, or, if the file
        could not be opened, of `~cdfclassic.base.file_info.NoInfo`.
        In either case, the result evaluates as `False` if the file is
        not in the classic format.
    """
    from . import classic
    from .base.file_info import NoInfo

    info = classic.info(name)
    if isinstance(info, Exception):
        return NoInfo(f"{name} could not be opened: {info!r}.")
    return info


def decode(fh, verify=True, short_padding='array'):
    """Decode the header of an open classic format file.

    Parameters
    ----------
    fh : filehandle
        Readable and seekable binary file, positioned at the start of the
        header (normally, the start of the file).  It is not closed.
    verify : bool, optional
        Whether to do basic checks of integrity, such as that variables
        only refer to existing dimensions.  Default: `True`.
    short_padding : {'array', 'element'}, optional
        Whether arrays of short attribute values are padded as a whole to
        a 4-byte boundary (default, as the format prescribes), or whether
        each value is.

    Returns
    -------
    header : `~cdfclassic.classic.CDFHeader`
        With the dimensions, attributes and variables, including views
        of the variables' data.

    Raises
    ------
    FormatError
        If the file is not a valid classic format file.
    EOFError
        If the file ends prematurely.
    UnicodeDecodeError
        If a name or char value is not valid UTF-8.
    """
    from .classic import CDFFileReader

    return CDFFileReader(fh).read_header(verify=verify,
                                         short_padding=short_padding)


def open(name, verify=True, short_padding='array'):
    """Open a classic format file and decode its header.

    Since the data of all variables are captured while decoding, the file
    is closed before returning.

    Parameters
    ----------
    name : str or filehandle
        File name or filehandle.  A filehandle is not closed.
    verify : bool, optional
        Whether to do basic checks of integrity.  Default: `True`.
    short_padding : {'array', 'element'}, optional
        Padding policy for short attributes; see `~cdfclassic.decode`.

    Returns
    -------
    header : `~cdfclassic.classic.CDFHeader`
    """
    from . import classic

    fh = classic.open(name, 'rb')
    try:
        return fh.read_header(verify=verify, short_padding=short_padding)
    finally:
        if fh.fh_raw is not name:
            fh.close()
