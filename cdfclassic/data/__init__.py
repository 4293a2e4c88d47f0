# Licensed under the GPLv3 - see LICENSE
"""Sample files in the classic format."""

# Use private names to avoid inclusion in the sphinx documentation.
from os import path as _path


def _full_path(name, dirname=_path.dirname(_path.abspath(__file__))):
    return _path.join(dirname, name)


SAMPLE_CDF = _full_path('sample1.nc')
"""Classic (version 1) sample, with one dimension and one variable.

The dimension is ``longitude`` of length 10, there is a global attribute
``Conventions = "CF-1.6"``, and the float variable ``longitude`` (with
``units = "degrees_east"``) holds -24.95, -24.85, ..., -24.05.
"""

SAMPLE_CDF_64BIT = _full_path('sample2.nc')
"""64-bit offset (version 2) sample, with a record variable.

Dimensions are ``time`` (unlimited, 2 records) and ``latitude`` (3).
Global attributes are ``title`` and ``history``.  The short variable
``temp(time, latitude)`` comes first in the header, but its data are
stored after those of the float variable ``latitude(latitude)``.
``temp`` has attributes ``units = "K"``, ``valid_range = -100, 100``,
and ``_FillValue = -999``.  Its first record is 280, 285, 290, the
second 281, 286, -999; ``latitude`` holds 10, 20, 30.
"""
