# Licensed under the GPLv3 - see LICENSE
import io

import pytest
import numpy as np
from numpy.testing import assert_array_equal

from ..constants import CDFType
from ..payload import LazyDataView


class TestLazyDataView:
    def setup_class(cls):
        cls.values = np.array([-24.95, -24.85, -24.75, -24.65], dtype='f4')
        cls.block = cls.values.astype('>f4').tobytes()
        cls.view = LazyDataView(cls.block, CDFType.FLOAT)

    def test_basics(self):
        assert len(self.view) == 4
        assert self.view.nbytes == 16
        assert self.view.dtype == np.dtype('>f4')
        assert self.view.type is CDFType.FLOAT
        assert 'float' in repr(self.view)

    def test_iteration(self):
        assert_array_equal(list(self.view), self.values)

    def test_restartable(self):
        first = list(self.view)
        second = list(self.view)
        assert_array_equal(first, second)
        # Independent cursors.
        it1 = iter(self.view)
        it2 = iter(self.view)
        assert next(it1) == self.values[0]
        assert next(it1) == self.values[1]
        assert next(it2) == self.values[0]

    def test_getitem(self):
        assert self.view[0] == self.values[0]
        assert self.view[-1] == self.values[-1]
        with pytest.raises(IndexError):
            self.view[4]
        with pytest.raises(IndexError):
            self.view[-5]
        with pytest.raises(TypeError):
            self.view[1:2]

    def test_array(self):
        data = np.asarray(self.view)
        assert_array_equal(data, self.values)
        assert not data.flags.writeable
        copy = np.array(self.view, dtype='f8')
        assert copy.dtype == np.dtype('f8')
        assert_array_equal(copy, self.values.astype('f8'))

    def test_trailing_partial_element(self):
        view = LazyDataView(self.block + b'\x01\x02', CDFType.FLOAT)
        assert len(view) == 4
        assert_array_equal(list(view), self.values)

    def test_too_short_block(self):
        view = LazyDataView(b'\x00\x01\x02', CDFType.DOUBLE)
        assert len(view) == 0
        assert list(view) == []

    @pytest.mark.parametrize('type_, values', [
        (CDFType.BYTE, [-128, 0, 127]),
        (CDFType.SHORT, [-32768, 1, 32767]),
        (CDFType.INT, [-2**31, 1, 2**31-1]),
        (CDFType.DOUBLE, [-1.5, 0., 1e300])])
    def test_types(self, type_, values):
        block = np.array(values, type_.dtype).tobytes()
        view = LazyDataView(block, type_)
        assert list(view) == values

    def test_char(self):
        view = LazyDataView(b'abc\x00', CDFType.CHAR)
        assert len(view) == 4
        assert list(view) == [b'a', b'b', b'c', b'\x00']
        assert str(view) == 'abc'

    def test_char_not_utf8(self):
        with pytest.raises(UnicodeDecodeError):
            LazyDataView(b'\xff\xfe', CDFType.CHAR)

    def test_fill(self):
        fill = np.frombuffer(bytes.fromhex('7cf00000'), '>f4')[0]
        view = LazyDataView(bytes.fromhex('7cf00000 3f800000'),
                            CDFType.FLOAT)
        assert view.is_fill(view[0])
        assert view.is_fill(fill)
        assert not view.is_fill(view[1])
        short_view = LazyDataView(bytes.fromhex('8001 0001'), CDFType.SHORT)
        assert short_view.is_fill(short_view[0])
        assert not short_view.is_fill(short_view[1])

    def test_fromfile(self):
        fh = io.BytesIO(b'header..' + self.block)
        fh.seek(4)
        view = LazyDataView.fromfile(fh, CDFType.FLOAT, 8, 16)
        assert fh.tell() == 4
        assert view == self.view

    def test_str(self):
        assert str(LazyDataView(np.array([1, 2], '>i4').tobytes(),
                                CDFType.INT)) == '[1 2]'
