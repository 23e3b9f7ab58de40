# Licensed under the GPLv3 - see LICENSE
from contextlib import contextmanager

from ..base.base import FileBase, FileOpener, FileInfo, LINE_BUFFER_SIZE
from ..base.encoding import encode_hex
from ..base.timing import TIME_BASE_US, rescale, format_seconds
from .session import DecoderSession
from .file_info import FFProbeFileReaderInfo


__all__ = ['FFProbeFileReader', 'FFProbeFileWriter', 'open', 'info']


class FFProbeFileReader(FileBase):
    """Simple reader for ffprobe files.

    Wraps a binary filehandle, providing methods to help interpret the data,
    such as `read_header` and `read_packet`.  Iterating over the reader
    yields all (remaining) packets.

    Parameters
    ----------
    fh_raw : filehandle
        Filehandle of the raw binary data file.
    max_line_nbytes : int, optional
        Maximum length of lines, including the terminating newline.
        Longer lines raise `~mediatext.base.base.LineTooLongError`.
        Default: 4095.
    """
    info = FFProbeFileReaderInfo()

    def __init__(self, fh_raw, max_line_nbytes=LINE_BUFFER_SIZE - 1):
        super().__init__(fh_raw)
        self.max_line_nbytes = max_line_nbytes
        self._session = None

    @property
    def header0(self):
        """Container description; `None` if the header was not yet read."""
        return None if self._session is None else self._session.container

    @property
    def noheader(self):
        """Whether the file started without a FORMAT section."""
        return self._session is not None and self._session.noheader

    def read_header(self):
        """Read the container header and the stream sections after it.

        Decoding is restarted from the current position in the file.

        Returns
        -------
        header : `~mediatext.base.container.ContainerDescriptor`
            Also stored as ``header0``.
        """
        self._session = DecoderSession(self,
                                       max_line_nbytes=self.max_line_nbytes)
        return self._session.read_header()

    def read_packet(self):
        """Read the next packet.

        Any FORMAT and STREAM sections encountered before the packet are
        used to update ``header0``.  If the header was not yet read, it is
        read first.

        Returns
        -------
        packet : `~mediatext.base.container.Packet`

        Raises
        ------
        EOFError
            If no further packets are present.
        """
        if self._session is None:
            self.read_header()

        while True:
            section, packet = self._session.read_section()
            if section == 'PACKET' and packet is not None:
                return packet

    def __iter__(self):
        while True:
            try:
                yield self.read_packet()
            except EOFError:
                return

    @contextmanager
    def temporary_offset(self, offset=None, whence=0):
        """Context manager for temporarily seeking to another file position.

        On exit, the decoding state is restored as well as the position.
        """
        session = self._session
        try:
            with super().temporary_offset(offset, whence) as fh:
                yield fh
        finally:
            self._session = session


class FFProbeFileWriter(FileBase):
    """Simple writer for ffprobe files.

    Adds `write_header` and `write_packet` methods to the basic binary file
    wrapper.  The header should be written before any packets.
    """
    header0 = None

    def _write_lines(self, lines):
        self.fh_raw.write(''.join(line + '\n' for line in lines)
                          .encode('ascii'))

    @staticmethod
    def _data_lines(key, data):
        return [key + '='] + encode_hex(data) + ['']

    def write_header(self, header):
        """Write the container header and a section for each stream.

        Parameters
        ----------
        header : `~mediatext.base.container.ContainerDescriptor`
            Also stored as ``header0``, to be used for writing packets.
        """
        lines = ['[FORMAT]',
                 f'nb_streams={header.nb_streams}',
                 'format_name=ffprobe',
                 '[/FORMAT]']
        for index, stream in enumerate(header.streams):
            lines += ['[STREAM]', f'index={index}']
            if stream.codec is not None:
                lines.append(f'codec_name={stream.codec_name}')
            lines.append(f'time_base={stream.time_base}')
            if stream.extradata:
                lines += self._data_lines('extradata', stream.extradata)
            lines.append('[/STREAM]')

        self._write_lines(lines)
        self.header0 = header

    def write_packet(self, packet):
        """Write a packet section.

        Timestamps are written both in ticks and in seconds.

        Parameters
        ----------
        packet : `~mediatext.base.container.Packet`
        """
        if self.header0 is None:
            raise ValueError('the header should be written before packets.')

        stream = self.header0.streams[packet.stream_index]
        lines = ['[PACKET]',
                 'codec_type={0}'.format(stream.codec_type or 'unknown'),
                 f'stream_index={packet.stream_index}']
        for key, ticks in (('pts', packet.pts),
                           ('dts', packet.dts),
                           ('duration', packet.duration or None)):
            if ticks is None:
                lines.append(f'{key}=N/A')
            else:
                microseconds = rescale(ticks, stream.time_base, TIME_BASE_US)
                lines += [f'{key}_time={format_seconds(microseconds)}',
                          f'{key}={ticks}']

        lines.append('flags={0}'.format('K' if packet.is_key_frame else '_'))
        lines += self._data_lines('data', packet.payload)
        lines.append('[/PACKET]')
        self._write_lines(lines)


open = FileOpener.create(globals(), doc="""
--- For reading a file : `~mediatext.ffprobe.base.FFProbeFileReader`

max_line_nbytes : int, optional
    Maximum length of lines, including the terminating newline.
    Default: 4095.

--- For writing a file : `~mediatext.ffprobe.base.FFProbeFileWriter`

Returns
-------
Filehandle
    :class:`~mediatext.ffprobe.base.FFProbeFileReader` or
    :class:`~mediatext.ffprobe.base.FFProbeFileWriter`.
""")


info = FileInfo.create(globals())
