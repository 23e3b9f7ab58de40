# Licensed under the GPLv3 - see LICENSE
"""Time bases and conversions between ticks and human-readable times.

Timestamps are stored as integer ticks of a stream's rational time base.
In text, they are represented as seconds or as clock times, which are
interpreted at microsecond resolution, i.e., in ticks of `TIME_BASE_US`.
"""
import operator
import re
from collections import namedtuple

import astropy.units as u


__all__ = ['TimeBase', 'TIME_BASE_US', 'rescale', 'parse_time',
           'format_seconds', 'format_clock']


class TimeBase(namedtuple('TimeBase', ['num', 'den'])):
    """Rational time base, giving the duration of a tick in seconds.

    Parameters
    ----------
    num, den : int
        Numerator and denominator.  Both should be strictly positive.

    Raises
    ------
    ValueError
        If either part is not positive.
    """
    __slots__ = ()

    def __new__(cls, num, den):
        num = operator.index(num)
        den = operator.index(den)
        if num <= 0 or den <= 0:
            raise ValueError(f"invalid time base {num}/{den}: "
                             "both parts should be strictly positive.")
        return super().__new__(cls, num, den)

    @property
    def tick(self):
        """Duration of a single tick."""
        return (self.num / self.den) * u.s

    def __str__(self):
        return f"{self.num}/{self.den}"


TIME_BASE_US = TimeBase(1, 1000000)
"""Time base of human-readable times, i.e., microseconds."""


def rescale(value, from_time_base, to_time_base):
    """Convert ticks from one time base to another.

    Uses exact integer arithmetic, rounding to the nearest integer, with
    halfway cases rounded away from zero.

    Parameters
    ----------
    value : int
        Number of ticks in ``from_time_base``.
    from_time_base, to_time_base : `~mediatext.base.timing.TimeBase`
        Time bases to convert from and to.

    Returns
    -------
    ticks : int
        Number of ticks in ``to_time_base``.
    """
    numerator = value * from_time_base.num * to_time_base.den
    denominator = from_time_base.den * to_time_base.num
    ticks, remainder = divmod(abs(numerator), denominator)
    if 2 * remainder >= denominator:
        ticks += 1
    return ticks if numerator >= 0 else -ticks


_TIME_RE = re.compile(r"""
    (?P<sign>-)?
    (?:(?:(?P<hours>\d+):)?(?P<minutes>\d{1,2}):(?P<clock_seconds>\d{1,2})
       |(?P<seconds>\d+))
    (?:\.(?P<fraction>\d*))?
    (?P<unit>ms|us|s)?
    $""", re.VERBOSE)


def parse_time(string):
    """Parse a human-readable time interval.

    Recognized are ``[-][HH:]MM:SS[.m...]`` and ``[-]S+[.m...][s|ms|us]``,
    where hours can have any number of digits, while minutes and seconds
    are below 60 for the clock form.  Fractional digits beyond
    microsecond resolution are ignored.

    Parameters
    ----------
    string : str
        The time to parse.

    Returns
    -------
    microseconds : int
        The time interval in microseconds.

    Raises
    ------
    ValueError
        If the string cannot be interpreted.

    Examples
    --------
    >>> from mediatext.base.timing import parse_time
    >>> parse_time('1:02:03.5')
    3723500000
    >>> parse_time('-2.25')
    -2250000
    >>> parse_time('40ms')
    40000
    """
    match = _TIME_RE.match(string.strip())
    if match is None:
        raise ValueError(f"invalid time specification '{string}'.")

    if match['seconds'] is not None:
        seconds = int(match['seconds'])
    else:
        minutes = int(match['minutes'])
        seconds = int(match['clock_seconds'])
        if minutes > 59 or seconds > 59:
            raise ValueError(f"invalid time specification '{string}': "
                             "minutes and seconds should be below 60.")
        seconds += (int(match['hours'] or 0) * 60 + minutes) * 60

    microseconds = int((match['fraction'] or '')[:6].ljust(6, '0'))
    unit = match['unit']
    if unit == 'ms':
        value = seconds * 1000 + microseconds // 1000
    elif unit == 'us':
        value = seconds
    else:
        value = seconds * 1000000 + microseconds

    return -value if match['sign'] else value


def format_seconds(microseconds):
    """Format a time as signed decimal seconds with six fractional digits.

    >>> format_seconds(-40000)
    '-0.040000'
    """
    sign = '-' if microseconds < 0 else ''
    seconds, fraction = divmod(abs(microseconds), 1000000)
    return f"{sign}{seconds}.{fraction:06d}"


def format_clock(microseconds):
    """Format a time as ``H:MM:SS.ffffff``.

    >>> format_clock(3723500000)
    '1:02:03.500000'
    """
    sign = '-' if microseconds < 0 else ''
    minutes, fraction = divmod(abs(microseconds), 60000000)
    hours, minutes = divmod(minutes, 60)
    seconds, fraction = divmod(fraction, 1000000)
    return f"{sign}{hours}:{minutes:02d}:{seconds:02d}.{fraction:06d}"
