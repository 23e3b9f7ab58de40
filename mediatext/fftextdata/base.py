# Licensed under the GPLv3 - see LICENSE
import warnings
from contextlib import contextmanager

from ..base.base import FileBase, FileOpener, FileInfo, InvalidDataError
from ..base.codecs import codec_from_name
from ..base.container import ContainerDescriptor, Packet, FLAG_KEY_FRAME
from ..base.encoding import decode_base64, encode_base64
from ..base.timing import (
    TimeBase, TIME_BASE_US, rescale, parse_time, format_clock)
from .file_info import FFTextDataFileReaderInfo


__all__ = ['FFTextDataFileReader', 'FFTextDataFileWriter', 'open', 'info']


_SPACES = (b' ', b'\t', b'\r', b'\n')
_END = (b'', b'\0')


class FFTextDataFileReader(FileBase):
    """Simple reader for fftextdata files.

    Each record in the file consists of a time, followed by base64 encoded
    data terminated by a semicolon, with all parts separated by whitespace.
    All records are interpreted as key-frame packets of a single stream.

    Parameters
    ----------
    fh_raw : filehandle
        Filehandle of the raw binary data file.
    codec_name : str, optional
        Name of the codec of the data.  Default: 'bin_data'.
    """
    info = FFTextDataFileReaderInfo()

    def __init__(self, fh_raw, codec_name='bin_data'):
        codec = codec_from_name(codec_name)
        if codec is None:
            raise ValueError(f"impossible to find a codec with name "
                             f"'{codec_name}'.")
        super().__init__(fh_raw)
        self.codec_name = codec_name
        self.header0 = ContainerDescriptor(format_name='fftextdata',
                                           mutable=False)
        self.header0.add_stream(codec=codec, time_base=TIME_BASE_US)
        self.packet_nb = 0

    def read_header(self):
        """Get the container description.

        Since the file does not contain a header, this is the same for
        every file: a single stream, using the codec passed in on opening,
        with microsecond time resolution.

        Returns
        -------
        header : `~mediatext.base.container.ContainerDescriptor`
        """
        return self.header0

    def _skip_spaces(self):
        while True:
            char = self.fh_raw.read(1)
            if char not in _SPACES:
                return char

    def read_word(self):
        """Read a whitespace-delimited word.

        Returns
        -------
        word : bytes
            Empty if the end of the file or a NUL byte was reached.
        """
        word = bytearray()
        char = self._skip_spaces()
        while char not in _END:
            if char in _SPACES:
                self.fh_raw.seek(-1, 1)
                break
            word += char
            char = self.fh_raw.read(1)

        return bytes(word)

    def read_data(self):
        """Read a data token, up to a semicolon.

        Any whitespace within the data is skipped.

        Returns
        -------
        token : bytes or None
            `None` if the end of the file was reached before any data.
        """
        token = bytearray()
        char = self._skip_spaces()
        if char in _END:
            return None

        while char not in _END and char != b';':
            if char not in _SPACES:
                token += char
            char = self.fh_raw.read(1)

        return bytes(token)

    def read_packet(self):
        """Read the next record.

        Returns
        -------
        packet : `~mediatext.base.container.Packet`
            With pts in microseconds and the key-frame flag set.

        Raises
        ------
        EOFError
            If no further records are present.
        """
        offset = self.fh_raw.tell()
        word = self.read_word()
        if not word:
            raise EOFError('reached end of file.')

        try:
            pts = parse_time(word.decode('ascii'))
        except (UnicodeDecodeError, ValueError):
            raise InvalidDataError(
                f"invalid time specification {word!r} for data packet "
                f"#{self.packet_nb}.") from None

        token = self.read_data()
        if token is None:
            warnings.warn(f"incomplete packet #{self.packet_nb} with no data "
                          "at the end of the data stream.")
            raise EOFError('reached end of file.')

        try:
            payload = decode_base64(token)
        except InvalidDataError as exc:
            raise InvalidDataError(
                f"{exc} for data packet #{self.packet_nb}.") from None

        self.packet_nb += 1
        return Packet(0, pts=pts, flags=FLAG_KEY_FRAME, payload=payload,
                      pos=offset)

    def __iter__(self):
        while True:
            try:
                yield self.read_packet()
            except EOFError:
                return

    @contextmanager
    def temporary_offset(self, offset=None, whence=0):
        """Context manager for temporarily seeking to another file position.

        On exit, the packet counter is restored as well as the position.
        """
        packet_nb = self.packet_nb
        try:
            with super().temporary_offset(offset, whence) as fh:
                yield fh
        finally:
            self.packet_nb = packet_nb


class FFTextDataFileWriter(FileBase):
    """Simple writer for fftextdata files.

    Each packet is written as a record with its presentation time and
    its payload encoded in base64.

    Parameters
    ----------
    fh_raw : filehandle
        Filehandle of the raw binary data file.
    time_base : `~mediatext.base.timing.TimeBase` or tuple, optional
        Time base of the packets' timestamps, used if no header is written.
        Default: microseconds.
    """
    header0 = None

    def __init__(self, fh_raw, time_base=TIME_BASE_US):
        super().__init__(fh_raw)
        self.time_base = TimeBase(*time_base)

    def write_header(self, header):
        """Set the container description.

        Nothing is written, but the time bases of the streams are used
        to interpret the timestamps of packets.

        Parameters
        ----------
        header : `~mediatext.base.container.ContainerDescriptor`
        """
        self.header0 = header

    def write_packet(self, packet):
        """Write a record for a packet.

        Parameters
        ----------
        packet : `~mediatext.base.container.Packet`
            Should have its pts set.
        """
        if packet.pts is None:
            raise ValueError('cannot write a packet without pts.')

        if self.header0 is None:
            time_base = self.time_base
        else:
            time_base = self.header0.streams[packet.stream_index].time_base

        microseconds = rescale(packet.pts, time_base, TIME_BASE_US)
        record = '{0}\n{1}\n;\n'.format(format_clock(microseconds),
                                        encode_base64(packet.payload))
        self.fh_raw.write(record.encode('ascii'))


open = FileOpener.create(globals(), doc="""
--- For reading a file : `~mediatext.fftextdata.base.FFTextDataFileReader`

codec_name : str, optional
    Name of the codec of the data.  Default: 'bin_data'.

--- For writing a file : `~mediatext.fftextdata.base.FFTextDataFileWriter`

time_base : `~mediatext.base.timing.TimeBase` or tuple, optional
    Time base of the packets' timestamps.  Default: microseconds.

Returns
-------
Filehandle
    :class:`~mediatext.fftextdata.base.FFTextDataFileReader` or
    :class:`~mediatext.fftextdata.base.FFTextDataFileWriter`.
""")


info = FileInfo.create(globals())
