# Licensed under the GPLv3 - see LICENSE
import io

import pytest
import numpy as np
from numpy.testing import assert_array_equal
import astropy.units as u

from ... import classic
from ...base.base import FormatError
from ...data import SAMPLE_CDF as SAMPLE_FILE, SAMPLE_CDF_64BIT
from . import builder as b


class TestClassic:
    def setup_class(cls):
        with open(SAMPLE_FILE, 'rb') as fh:
            cls.sample_bytes = fh.read()
        cls.longitude = np.array([-24.95, -24.85, -24.75, -24.65, -24.55,
                                  -24.45, -24.35, -24.25, -24.15, -24.05],
                                 dtype='f4')

    def test_header(self):
        with open(SAMPLE_FILE, 'rb') as fh:
            header = classic.CDFHeader.fromfile(fh)
            assert fh.tell() == 160
        assert header.version == 1
        assert header.record_count == 0
        assert header.dimensions == (('longitude', 10),)
        assert str(header.attributes[0]) == 'CF-1.6'
        assert header.attributes[0].name == 'Conventions'
        var = header.variables[0]
        assert var.name == 'longitude'
        assert var.dim_refs == (0,)
        assert var.attributes[0].name == 'units'
        assert var.type is classic.CDFType.FLOAT
        assert var.vsize == 40
        assert var.data_offset == 160
        assert var.shape == (10,)
        assert not var.is_record
        assert 'longitude' in repr(header)

    def test_data(self):
        with classic.open(SAMPLE_FILE, 'rb') as fh:
            header = fh.read_header()
        # Data were captured, so are available after closing.
        data = header['longitude'].data
        assert_array_equal(list(data), self.longitude)
        assert_array_equal(list(data), list(data))
        assert data[0] == np.float32(-24.95)
        assert data[2] == np.float32(-24.75)

    def test_file_reader(self):
        with classic.open(SAMPLE_FILE, 'rb') as fh:
            assert isinstance(fh, classic.CDFFileReader)
            assert 'CDFFileReader' in repr(fh)
            fh.seek(20)
            with fh.temporary_offset(0):
                header = fh.read_header()
            assert fh.tell() == 20
        assert fh.closed
        assert header.dimensions[0].name == 'longitude'

    def test_open_filehandle(self):
        with open(SAMPLE_FILE, 'rb') as raw:
            fh = classic.open(raw)
            assert fh.fh_raw is raw
            header = fh.read_header()
        assert header['longitude'].vsize == 40

    def test_open_bad_mode(self):
        with pytest.raises(ValueError, match='invalid mode'):
            classic.open(SAMPLE_FILE, 'wb')

    def test_info(self):
        with classic.open(SAMPLE_FILE, 'rb') as fh:
            info = fh.info
        assert info
        assert info.format == 'classic'
        assert info.version == 1
        assert info.record_count == 0
        assert info.dimensions == {'longitude': 10}
        assert info.variables == ['longitude']
        assert info.record_dimension is None
        assert info.readable is True
        assert info.checks == {'verified': True}
        assert info.errors == {}
        assert info.warnings == {}
        info_dict = info()
        assert 'errors' not in info_dict
        assert info_dict['format'] == 'classic'
        assert 'CDFFile information' in repr(info)

    def test_info_function(self):
        info = classic.info(SAMPLE_FILE)
        assert info.format == 'classic'
        assert info.readable

    def test_info_not_cdf(self, tmpdir):
        filename = str(tmpdir.join('not_cdf.nc'))
        with open(filename, 'wb') as fw:
            fw.write(b'\x89HDF\r\n\x1a\n' + b'\0' * 100)
        info = classic.info(filename)
        assert not info
        assert info.format is None
        assert isinstance(info.errors['header'], FormatError)
        assert 'Not parsable' in repr(info)

    def test_info_unverifiable(self, tmpdir):
        raw = b.header(1, 0, dims=[b.dim('a', 0), b.dim('b', 0)])
        filename = str(tmpdir.join('two_unlimited.nc'))
        with open(filename, 'wb') as fw:
            fw.write(raw)
        info = classic.info(filename)
        assert info
        assert info.dimensions == {'a': 0, 'b': 0}
        assert info.readable is False
        assert isinstance(info.errors['verified'], FormatError)

    def test_info_warnings(self):
        raw = b'CDF\x01' + b.u32(0) + b.u32(0, 2) + b.u32(0, 0, 0, 0)
        with classic.open(io.BytesIO(raw)) as fh:
            info = fh.info
        assert info.readable
        assert 'non-zero count' in info.warnings['header']

    @pytest.mark.parametrize('remove', [1, 4, 39, 40, 41, 100])
    def test_missing_end(self, remove, tmpdir):
        filename = str(tmpdir.join('truncated.nc'))
        with open(filename, 'wb') as fw:
            fw.write(self.sample_bytes[:-remove])

        with classic.open(filename, 'rb') as fh:
            with pytest.raises(EOFError):
                fh.read_header()

    def test_extra_junk(self, tmpdir):
        filename = str(tmpdir.join('extra.nc'))
        with open(filename, 'wb') as fw:
            fw.write(self.sample_bytes + b'\xff' * 13)

        with classic.open(filename, 'rb') as fh:
            header = fh.read_header()
        assert_array_equal(list(header['longitude'].data), self.longitude)


class Test64BitOffset:
    def setup_class(cls):
        with classic.open(SAMPLE_CDF_64BIT, 'rb') as fh:
            cls.header = fh.read_header()

    def test_header(self):
        header = self.header
        assert header.version == 2
        assert header.format == '64bit-offset'
        assert header.record_count == 2
        assert [dim.name for dim in header.dimensions] == ['time',
                                                           'latitude']
        assert header.record_dimension.name == 'time'
        assert header.attrs['title'].values == 'Sample file'
        assert str(header.attrs['history']) == 'created by hand'
        assert header.keys() == ['temp', 'latitude']

    def test_record_variable(self):
        temp = self.header['temp']
        assert temp.is_record
        assert temp.shape == (2, 3)
        assert temp.type is classic.CDFType.SHORT
        assert temp.unit == u.K
        assert_array_equal(temp.attrs['valid_range'].values, [-100, 100])
        assert temp.fill_value == -999
        # Only the first record is captured, including its padding.
        assert temp.data_offset == 344
        assert_array_equal(list(temp.data), [280, 285, 290, 0])

    def test_out_of_order_data(self):
        latitude = self.header['latitude']
        assert latitude.data_offset == 332
        assert latitude.data_offset < self.header['temp'].data_offset
        assert_array_equal(list(latitude.data), [10., 20., 30.])
        assert str(latitude.attrs['units']) == 'degrees_north'
