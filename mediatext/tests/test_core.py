# Licensed under the GPLv3 - see LICENSE
import pytest

from .. import open as mediatext_open, file_info
from ..base.timing import TIME_BASE_US, rescale
from ..data import SAMPLE_FFPROBE, SAMPLE_FFTEXTDATA


@pytest.mark.parametrize(
    ('sample', 'fmt', 'nb_packets'),
    ((SAMPLE_FFPROBE, 'ffprobe', 6),
     (SAMPLE_FFTEXTDATA, 'fftextdata', 4)))
def test_open(sample, fmt, nb_packets):
    info = file_info(sample)
    assert info.format == fmt
    with mediatext_open(sample) as fh:
        assert fh.info.format == fmt
        assert fh.read_header() == info.header0
        assert len(list(fh)) == nb_packets

    with mediatext_open(sample, 'rb', format=fmt) as fh:
        assert len(list(fh)) == nb_packets


def test_open_with_args():
    with mediatext_open(SAMPLE_FFTEXTDATA, codec_name='aac') as fh:
        assert fh.header0.streams[0].codec_name == 'aac'


def test_open_wrong_args():
    with pytest.raises(TypeError) as exc:  # extraneous argument
        mediatext_open(SAMPLE_FFPROBE, codec_name='h264')
    assert "unexpected" in str(exc.value)

    with pytest.raises(TypeError) as exc:
        mediatext_open(SAMPLE_FFTEXTDATA, life=42)
    assert "unexpected" in str(exc.value)


def test_open_unknown_format(tmpdir):
    name = str(tmpdir.join('hello.txt'))
    with open(name, 'wb') as fw:
        fw.write(b'hello world\n')
    with pytest.raises(ValueError, match='could not be auto-determined'):
        mediatext_open(name)

    with pytest.raises(ValueError, match='could not be auto-determined'):
        mediatext_open(SAMPLE_FFPROBE, format=('fftextdata',))


def test_open_write_checks():
    # Cannot have multiple formats for writing.
    with pytest.raises(ValueError, match='multiple formats'):
        mediatext_open('a.a', 'wb')
    with pytest.raises(ValueError, match='multiple formats'):
        mediatext_open('a.a', 'wb', format=('ffprobe', 'fftextdata'))


def test_convert_ffprobe_to_fftextdata(tmpdir):
    name = str(tmpdir.join('converted.fftd'))
    with mediatext_open(SAMPLE_FFPROBE) as fh:
        header = fh.read_header()
        packets = [packet for packet in fh if packet.pts is not None]

    with mediatext_open(name, 'wb', format='fftextdata') as fw:
        fw.write_header(header)
        for packet in packets:
            fw.write_packet(packet)

    with mediatext_open(name) as fh:
        assert fh.info.format == 'fftextdata'
        converted = list(fh)

    assert len(converted) == len(packets) == 5
    for packet, packet_us in zip(packets, converted):
        time_base = header.streams[packet.stream_index].time_base
        assert packet_us.pts == rescale(packet.pts, time_base, TIME_BASE_US)
        assert packet_us.payload == packet.payload
        assert packet_us.stream_index == 0


def test_convert_fftextdata_to_ffprobe(tmpdir):
    name = str(tmpdir.join('converted.ffprobe'))
    with mediatext_open(SAMPLE_FFTEXTDATA, codec_name='subrip') as fh:
        header = fh.read_header()
        packets = list(fh)

    with mediatext_open(name, 'wb', format='ffprobe') as fw:
        fw.write_header(header)
        for packet in packets:
            fw.write_packet(packet)

    with mediatext_open(name) as fh:
        header2 = fh.read_header()
        assert header2 == header
        assert header2.streams[0].codec_type == 'subtitle'
        assert list(fh) == packets
