# Licensed under the GPLv3 - see LICENSE
"""Section-oriented decoding of ffprobe-like text.

The text consists of sections, each starting with a line ``[NAME]`` for
one of FORMAT, STREAM or PACKET, followed by ``key=value`` lines, and
ending with any line starting with ``[/``.  Binary data are embedded as
blocks of hexadecimal lines following a ``data=`` or ``extradata=`` line,
ending with a blank line.  For instance::

    [FORMAT]
    nb_streams=1
    [/FORMAT]
    [STREAM]
    index=0
    codec_name=bin_data
    time_base=1/1000
    [/STREAM]
    [PACKET]
    stream_index=0
    pts=5
    flags=K
    data=
    0102

    [/PACKET]

Unrecognized keys are ignored.
"""
import re
import warnings

from ..base.base import (
    InvalidDataError, UnterminatedSectionError, LINE_BUFFER_SIZE)
from ..base.container import (
    ContainerDescriptor, Packet, MAX_NB_STREAMS, NOPTS_VALUE, FLAG_KEY_FRAME)
from ..base.encoding import decode_hex_line
from ..base.timing import TimeBase, TIME_BASE_US, rescale, parse_time


__all__ = ['SECTION_NAMES', 'PROBE_SCORE_MAX', 'probe', 'DecoderSession']


SECTION_NAMES = ('FORMAT', 'STREAM', 'PACKET')
"""Names of the sections that are recognized."""

PROBE_SCORE_MAX = 100
"""Score of a certain match in `~mediatext.ffprobe.session.probe`."""

_SECTION_STARTS = {f'[{name}]\n'.encode('ascii'): name
                   for name in SECTION_NAMES}
_PROBE_KEYS = (b'\nnb_streams=', b'\nformat_name=', b'\nfilename=')
_INT_RE = re.compile(r'\s*([-+]?\d+)')
_TIME_BASE_RE = re.compile(r'\s*([-+]?\d+)/\s*([-+]?\d+)')
_TIMESTAMPS = {'pts': False, 'dts': False, 'duration': True}
"""Timestamp keys, with whether they are durations."""


def probe(buf):
    """Score how likely it is that the buffer starts an ffprobe file.

    Parameters
    ----------
    buf : bytes
        Start of the file.

    Returns
    -------
    score : int
        0 if the buffer does not start with ``[FORMAT]``, otherwise
        ``PROBE_SCORE_MAX`` if at least two typical header keys are
        present, and half that if not.
    """
    if not buf.startswith(b'[FORMAT]\n'):
        return 0
    score = sum(key in buf for key in _PROBE_KEYS)
    return PROBE_SCORE_MAX if score >= 2 else PROBE_SCORE_MAX // 2


def _scan_int(value):
    """Interpret the start of value as a decimal integer (None if not)."""
    match = _INT_RE.match(value)
    return None if match is None else int(match.group(1))


class DecoderSession:
    """State of decoding a single ffprobe file.

    Tracks in which section the reader is, accumulates binary data, and
    counts packet sections.  Decoded container and stream information is
    stored on the ``container``.

    Parameters
    ----------
    fh : `~mediatext.base.base.FileBase`
        File to read from.  Needs ``read_line``, ``tell`` and ``seek``.
    container : `~mediatext.base.container.ContainerDescriptor`, optional
        Container to store the header and stream information in.
        By default, a new one is created.
    max_line_nbytes : int, optional
        Maximum line length, including terminator.  Default: 4095.
    """

    def __init__(self, fh, container=None,
                 max_line_nbytes=LINE_BUFFER_SIZE - 1):
        self.fh = fh
        self.container = (ContainerDescriptor() if container is None
                          else container)
        self.max_line_nbytes = max_line_nbytes
        self.section = None
        self.section_offset = None
        self.data = bytearray()
        self.packet_nb = 0
        self.noheader = False

    def read_section_start(self):
        """Read a line and check whether it starts a section.

        Returns
        -------
        section : str or None
            Name of the section started, or `None` if the line does not
            start a section.  If a section is started, it is also stored
            in ``section``.

        Raises
        ------
        EOFError
            If the end of the file is reached.
        """
        self.section_offset = self.fh.tell()
        line = self.fh.read_line(self.max_line_nbytes)
        if not line:
            raise EOFError('reached end of file while looking for section.')

        section = _SECTION_STARTS.get(line)
        if section is not None:
            self.section = section
        return section

    def read_section_line(self):
        """Read a content line of the current section.

        Any line starting with ``[/`` ends the section; the name of the
        section it closes is not checked.  Bytes that are not valid UTF-8
        are kept as surrogate escapes, so that values of keys that are not
        interpreted can contain anything.

        Returns
        -------
        line : str or None
            The line, without its terminating newline, or `None` if the
            section was closed.

        Raises
        ------
        UnterminatedSectionError
            If the end of the file is reached inside the section.
        """
        line = self.fh.read_line(self.max_line_nbytes)
        if not line:
            raise UnterminatedSectionError(
                f"unterminated {self.section} section, aborting.")

        if line.startswith(b'[/'):
            self.section = None
            return None

        line = line.decode('utf-8', errors='surrogateescape')
        return line[:-1] if line.endswith('\n') else line

    def read_data(self):
        """Read a block of hexadecimal data into the ``data`` buffer.

        The block ends with a blank line, or when the section is closed;
        in the latter case, the file is positioned back on the closing
        line, so that it is seen by the caller.

        Returns
        -------
        data : bytearray
            The ``data`` buffer.
        """
        if self.data:
            raise InvalidDataError(
                f"more than one data block in {self.section} section "
                f"(packet number {self.packet_nb}).")

        while True:
            offset = self.fh.tell()
            line = self.read_section_line()
            if line is None:
                self.fh.seek(offset)
                break
            if not line:
                break

            try:
                self.data += decode_hex_line(line)
            except InvalidDataError as exc:
                raise InvalidDataError(
                    f"{exc} in packet number {self.packet_nb} data."
                ) from None

        return self.data

    def read_format(self):
        """Read the FORMAT section.

        Creates streams up to the declared number, and records the
        format name.  The container is immutable afterwards.

        Returns
        -------
        container : `~mediatext.base.container.ContainerDescriptor`
        """
        container = self.container
        for line in iter(self.read_section_line, None):
            key, sep, value = line.partition('=')
            if not sep:
                continue

            if key == 'nb_streams':
                nb_streams = _scan_int(value)
                if nb_streams is None:
                    continue
                if not 0 <= nb_streams <= MAX_NB_STREAMS:
                    raise InvalidDataError(
                        f"invalid streams number '{nb_streams}', "
                        f"maximum allowed is {MAX_NB_STREAMS}.")
                container.declare_streams(nb_streams)

            elif key == 'format_name' and container.mutable:
                container.format_name = value

        container.mutable = False
        return container

    def get_stream(self, index):
        """Get the stream with the given index.

        If ``index`` equals the number of streams, a new stream is added.
        """
        container = self.container
        if index == container.nb_streams:
            container.add_stream()
        if not 0 <= index < container.nb_streams:
            raise InvalidDataError(f"invalid stream index: {index}.")
        return container.streams[index]

    def read_stream(self):
        """Read a STREAM section.

        The first line should give the stream index.

        Returns
        -------
        stream : `~mediatext.base.container.StreamDescriptor`
        """
        self.data.clear()
        stream = None
        for line in iter(self.read_section_line, None):
            key, sep, value = line.partition('=')
            if stream is None:
                index = _scan_int(value) if key == 'index' and sep else None
                if index is None:
                    raise InvalidDataError("stream without index.")
                stream = self.get_stream(index)

            elif line == 'extradata=':
                if self.read_data():
                    stream.extradata = self.data

            elif not sep:
                continue

            elif key == 'codec_name':
                stream.set_codec_name(value)

            elif key == 'time_base':
                match = _TIME_BASE_RE.match(value)
                if match is None:
                    continue
                num, den = (int(part) for part in match.groups())
                try:
                    stream.time_base = TimeBase(num, den)
                except ValueError:
                    raise InvalidDataError(
                        f"invalid time base {num}/{den}.") from None

        if stream is None:
            raise InvalidDataError("stream without index.")

        return stream

    def parse_timestamp(self, key, value, is_duration):
        """Parse a human-readable timestamp.

        Parameters
        ----------
        key : str
            Name of the timestamp, for error messages.
        value : str
            Time, or 'N/A' for no time.
        is_duration : bool
            Whether the timestamp is a duration, for which 'N/A' means 0.

        Returns
        -------
        microseconds : int or None
            `None` for 'N/A' if not a duration.
        """
        value = value.strip()
        if value == 'N/A':
            return 0 if is_duration else None

        try:
            return parse_time(value)
        except ValueError:
            raise InvalidDataError(
                f"invalid {key} time specification '{value}' for "
                f"packet #{self.packet_nb} data.") from None

    def read_packet(self):
        """Read a PACKET section.

        Returns
        -------
        packet : `~mediatext.base.container.Packet` or None
            `None` if the section did not contain any data, or if the
            stream index was out of range (in which case a warning is
            given).
        """
        offset = self.section_offset
        self.data.clear()
        stream_index = None
        flags = 0
        has_data = False
        ticks = {'pts': NOPTS_VALUE, 'dts': NOPTS_VALUE, 'duration': 0}
        times = {}
        for line in iter(self.read_section_line, None):
            key, sep, value = line.partition('=')
            if line == 'data=':
                self.read_data()
                has_data = True

            elif not sep:
                continue

            elif key == 'stream_index':
                index = _scan_int(value)
                if index is not None:
                    stream_index = index

            elif key in _TIMESTAMPS:
                tick = _scan_int(value)
                if tick is not None:
                    ticks[key] = tick

            elif (key.endswith('_time') and key[:-5] in _TIMESTAMPS
                  and value.strip()):
                key = key[:-5]
                times[key] = self.parse_timestamp(key, value,
                                                  _TIMESTAMPS[key])

            elif key == 'flags' and value:
                flags = FLAG_KEY_FRAME if value[0] == 'K' else 0

        if stream_index is None:
            raise InvalidDataError(
                "no stream index was specified for packet "
                f"#{self.packet_nb}, aborting.")

        if not has_data:
            return None

        if not 0 <= stream_index < self.container.nb_streams:
            warnings.warn(f"invalid stream number {stream_index} specified "
                          f"in packet number {self.packet_nb}; skipping it.")
            return None

        for key, tick in ticks.items():
            if tick == NOPTS_VALUE:
                ticks[key] = 0 if _TIMESTAMPS[key] else None

        time_base = self.container.streams[stream_index].time_base
        for key, microseconds in times.items():
            ticks[key] = (microseconds if microseconds is None
                          else rescale(microseconds, TIME_BASE_US, time_base))

        return Packet(stream_index, flags=flags, payload=self.data,
                      pos=offset, **ticks)

    def read_section(self):
        """Read the next section.

        Lines that do not start a section are skipped.

        Returns
        -------
        section : str
            Name of the section read.
        result : object
            Result of reading the section: the container for FORMAT,
            a `~mediatext.base.container.StreamDescriptor` for STREAM, and
            a `~mediatext.base.container.Packet` or `None` for PACKET.

        Raises
        ------
        EOFError
            If the end of the file is reached before a section starts.
        """
        while self.section is None:
            self.read_section_start()

        section = self.section
        if section == 'FORMAT':
            return section, self.read_format()
        elif section == 'STREAM':
            return section, self.read_stream()

        try:
            return section, self.read_packet()
        finally:
            self.packet_nb += 1

    def read_header(self):
        """Read the container header and the stream sections following it.

        If the file does not start with a FORMAT section, the container is
        left empty and ``noheader`` is set; any streams then have to be
        defined by STREAM sections between packets.

        Returns
        -------
        container : `~mediatext.base.container.ContainerDescriptor`
        """
        if self.read_section_start() != 'FORMAT':
            self.noheader = True
            return self.container

        container = self.read_format()
        nb_stream_sections = 0
        try:
            while self.read_section_start() == 'STREAM':
                self.read_stream()
                nb_stream_sections += 1
        except EOFError:
            pass

        if nb_stream_sections != container.nb_streams:
            raise InvalidDataError(
                f"number of declared streams is {container.nb_streams}, "
                f"but {nb_stream_sections} streams were specified in "
                "STREAM sections.")

        return container
