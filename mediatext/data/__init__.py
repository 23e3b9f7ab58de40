# Licensed under the GPLv3 - see LICENSE
"""Sample files with media packets written in different text formats."""

# Use private names to avoid inclusion in the sphinx documentation.
from os import path as _path


def _full_path(name, dirname=_path.dirname(_path.abspath(__file__))):
    return _path.join(dirname, name)


SAMPLE_FFPROBE = _full_path('sample.ffprobe')
"""ffprobe sample.  2 streams, 6 packets.

Stream 0 is h264 video with time base 1/25 and 8 bytes of extradata;
stream 1 is aac audio with time base 1/44100.  The packets are
interleaved, with the third and fifth video packets in decoding order
(dts 1 and 2) having pts 2 and 1, respectively.  The fifth packet has
70 bytes of data, spread over two lines; the last packet has no
timestamps and empty data.
"""

SAMPLE_FFTEXTDATA = _full_path('sample.fftd')
"""fftextdata sample.  4 records, at 0, 0.5, 1, and 3723.25 s.

Payloads are 0102, bytes 0 through 9, deadbeef, and b'mediatext'.
"""
