# Licensed under the GPLv3 - see LICENSE
import pytest
import astropy.units as u

from ..timing import (TimeBase, TIME_BASE_US, rescale, parse_time,
                      format_seconds, format_clock)


class TestTimeBase:
    def test_basics(self):
        tb = TimeBase(1, 25)
        assert tb.num == 1 and tb.den == 25
        assert tb == (1, 25)
        assert str(tb) == '1/25'
        assert tb.tick == 0.04 * u.s
        assert TimeBase(*tb) is not tb
        assert TimeBase(*tb) == tb
        assert TIME_BASE_US == (1, 1000000)

    @pytest.mark.parametrize('num,den', [(0, 1), (1, 0), (-1, 25), (1, -25)])
    def test_not_positive(self, num, den):
        with pytest.raises(ValueError, match='strictly positive'):
            TimeBase(num, den)

    def test_not_integer(self):
        with pytest.raises(TypeError):
            TimeBase(1.5, 25)


class TestRescale:
    def test_exact(self):
        assert rescale(2, TimeBase(1, 25), TIME_BASE_US) == 80000
        assert rescale(80000, TIME_BASE_US, TimeBase(1, 25)) == 2
        assert rescale(-3, TimeBase(1, 25), TimeBase(1, 50)) == -6

    def test_rounding(self):
        # 1024 / 44100 s = 23219.95... us
        assert rescale(1024, TimeBase(1, 44100), TIME_BASE_US) == 23220
        assert rescale(-1024, TimeBase(1, 44100), TIME_BASE_US) == -23220
        # And back, where 23220 us = 1024.002 ticks.
        assert rescale(23220, TIME_BASE_US, TimeBase(1, 44100)) == 1024
        # Halfway cases go away from zero.
        assert rescale(1, TimeBase(1, 2), TimeBase(1, 1)) == 1
        assert rescale(-1, TimeBase(1, 2), TimeBase(1, 1)) == -1
        assert rescale(3, TimeBase(1, 2), TimeBase(1, 1)) == 2
        assert rescale(1, TimeBase(1, 4), TimeBase(1, 1)) == 0

    def test_large(self):
        # Python integers do not overflow.
        ticks = 2**62
        assert rescale(ticks, TimeBase(1, 90000), TimeBase(1, 90000)) == ticks
        assert (rescale(ticks, TimeBase(1, 1), TIME_BASE_US)
                == ticks * 1000000)


class TestParseTime:
    @pytest.mark.parametrize('string,expected', [
        ('0', 0),
        ('1.5', 1500000),
        ('-2.25', -2250000),
        ('1:02:03.5', 3723500000),
        ('00:00:01.000000', 1000000),
        ('0:00:00.040000', 40000),
        ('02:03', 123000000),
        ('100:00:00', 360000000000),
        ('1.1234567', 1123456),
        ('3s', 3000000),
        ('40ms', 40000),
        ('1.5ms', 1500),
        ('250us', 250),
        (' 7 ', 7000000)])
    def test_valid(self, string, expected):
        assert parse_time(string) == expected

    @pytest.mark.parametrize('string', [
        '', '-', 'abc', '1.2.3', '1:60:00', '0:00:61', '12h', '1e3'])
    def test_invalid(self, string):
        with pytest.raises(ValueError, match='invalid time specification'):
            parse_time(string)


class TestFormat:
    @pytest.mark.parametrize('microseconds,expected', [
        (0, '0.000000'),
        (23220, '0.023220'),
        (-40000, '-0.040000'),
        (3723500000, '3723.500000')])
    def test_format_seconds(self, microseconds, expected):
        assert format_seconds(microseconds) == expected
        assert parse_time(expected) == microseconds

    @pytest.mark.parametrize('microseconds,expected', [
        (0, '0:00:00.000000'),
        (500000, '0:00:00.500000'),
        (3723250000, '1:02:03.250000'),
        (-1500000, '-0:00:01.500000'),
        (360000000000, '100:00:00.000000')])
    def test_format_clock(self, microseconds, expected):
        assert format_clock(microseconds) == expected
        assert parse_time(expected) == microseconds
