# Licensed under the GPLv3 - see LICENSE
"""Base implementations shared by the file readers.

The `~cdfclassic.base.base` module defines a wrapper around binary file
handles, `~cdfclassic.base.base.FileBase`, to which format readers add
methods such as ``read_header``, as well as the
`~cdfclassic.base.base.FileOpener` and `~cdfclassic.base.base.FileInfo`
helpers used to create the ``open`` and ``info`` functions of a format.
Each file reader has an ``info`` property, defined in
`~cdfclassic.base.file_info`, that provides standardized information.

Finally, `~cdfclassic.base.utils` contains some general utility routines
for aligned reads and for temporarily moving the file pointer.
"""
