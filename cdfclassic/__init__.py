# Licensed under the GPLv3 - see LICENSE
"""Reader for the classic self-describing scientific data format."""

from .core import file_info, open, decode  # noqa
from .base.base import FormatError  # noqa
from .version import version as __version__  # noqa

# Define minima for the documentation, but do not bother to explicitly check.
__minimum_python_version__ = '3.10'
__minimum_astropy_version__ = '5.1'
__minimum_numpy_version__ = '1.24'
