# Licensed under the GPLv3 - see LICENSE
from ..base.base import FileBase, FileOpener, FileInfo
from ..base.file_info import FileReaderInfo, info_item
from .header import CDFHeader


__all__ = ['CDFFileReaderInfo', 'CDFFileReader', 'open', 'info']


class CDFFileReaderInfo(FileReaderInfo):
    """Standardized information on classic file readers.

    Examples
    --------
    The most common use is simply to print information::

        >>> from cdfclassic.data import SAMPLE_CDF
        >>> from cdfclassic import classic
        >>> fh = classic.open(SAMPLE_CDF, 'rb')
        >>> fh.info
        CDFFile information:
        format = classic
        version = 1
        record_count = 0
        dimensions = {'longitude': 10}
        variables = ['longitude']
        readable = True
        checks = {'verified': True}
        >>> fh.close()
    """
    attr_names = ('format', 'version', 'record_count', 'dimensions',
                  'variables', 'record_dimension', 'readable',
                  'checks', 'errors', 'warnings')

    version = info_item(needs='header', doc='Format version.')
    record_count = info_item(needs='header', doc=(
        'Number of records; 4294967295 if streaming.'))

    @info_item(needs='header')
    def dimensions(self):
        """Lengths of the dimensions, keyed by name."""
        return {dim.name: dim.length for dim in self.header.dimensions}

    @info_item(needs='header')
    def variables(self):
        """Names of the variables."""
        return self.header.keys()

    @info_item(needs='header')
    def record_dimension(self):
        """Name of the unlimited dimension, if any."""
        dim = self.header.record_dimension
        return None if dim is None else dim.name


class CDFFileReader(FileBase):
    """Simple reader for classic format files.

    Wraps a binary filehandle, providing a method to read the header,
    which includes views of the data of all variables.

    Parameters
    ----------
    fh_raw : filehandle
        Filehandle of the raw binary data file.  It should be seekable.
    """
    info = CDFFileReaderInfo()

    def read_header(self, verify=True, short_padding='array'):
        """Read the header, starting at the current file position.

        Parameters
        ----------
        verify : bool, optional
            Whether to do basic checks of integrity.  Default: `True`.
        short_padding : {'array', 'element'}, optional
            Whether arrays of short attribute values are padded as a whole
            to a 4-byte boundary (default) or whether each value is.

        Returns
        -------
        header : `~cdfclassic.classic.CDFHeader`
        """
        return CDFHeader.fromfile(self.fh_raw, verify=verify,
                                  short_padding=short_padding)


open = FileOpener.create(globals(), doc="""
    Notes
    -----
    The header is read with ``fh.read_header()``; it holds the data of all
    variables, so the file can be closed afterwards.
    """)


info = FileInfo.create(globals())
