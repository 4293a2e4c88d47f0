# Licensed under the GPLv3 - see LICENSE
"""Classic (CDF version 1) and 64-bit offset (version 2) format reader.

The format consists of a header describing dimensions, global attributes
and variables, followed by the data of the variables.  All values are
stored big-endian, and all fields are aligned on 4-byte boundaries.
"""
from .base import open, info, CDFFileReader  # noqa
from .header import Dimension, Attribute, Variable, CDFHeader  # noqa
from .payload import LazyDataView  # noqa
from .constants import CDFType  # noqa
