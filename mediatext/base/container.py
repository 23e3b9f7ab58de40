# Licensed under the GPLv3 - see LICENSE
"""In-memory description of a multiplexed media stream.

A `~mediatext.base.container.ContainerDescriptor` holds the streams,
each described by a `~mediatext.base.container.StreamDescriptor`, while
the data come as a sequence of `~mediatext.base.container.Packet`.
"""
import warnings

import numpy as np
import astropy.units as u

from .base import InvalidDataError
from .codecs import codec_from_name
from .timing import TimeBase, rescale


__all__ = ['MAX_NB_STREAMS', 'NOPTS_VALUE', 'FLAG_KEY_FRAME',
           'DEFAULT_TIME_BASE',
           'ContainerDescriptor', 'StreamDescriptor', 'Packet']


MAX_NB_STREAMS = 32
"""Maximum number of streams a container header can declare."""
NOPTS_VALUE = -2**63
"""Integer used for an unset timestamp in raw text values."""
FLAG_KEY_FRAME = 1
"""Packet flag for a key frame."""
DEFAULT_TIME_BASE = TimeBase(1, 90000)
"""Time base of newly created streams."""
_TIME_BASE_NS = TimeBase(1, 1000000000)


class StreamDescriptor:
    """Description of a single stream.

    Parameters
    ----------
    index : int
        Index of the stream in the container.
    codec : `~mediatext.base.codecs.CodecDescriptor` or str, optional
        The codec of the stream, or its name.  If a name is not recognized,
        a warning is given and the codec is left unset.
    time_base : `~mediatext.base.timing.TimeBase` or tuple, optional
        Duration of a tick.  Default: 1/90000.
    extradata : bytes, optional
        Codec-specific data.  Can only be set once.
    """

    def __init__(self, index, codec=None, time_base=DEFAULT_TIME_BASE,
                 extradata=None):
        self.index = index
        self.codec = None
        if isinstance(codec, str):
            self.set_codec_name(codec)
        else:
            self.codec = codec
        self.time_base = time_base
        self._extradata = None
        if extradata is not None:
            self.extradata = extradata

    @property
    def time_base(self):
        """Duration of a tick."""
        return self._time_base

    @time_base.setter
    def time_base(self, time_base):
        self._time_base = TimeBase(*time_base)

    @property
    def codec_name(self):
        """Name of the codec (`None` if not set)."""
        return None if self.codec is None else self.codec.name

    @property
    def codec_type(self):
        """Media type of the codec (`None` if not set)."""
        return None if self.codec is None else self.codec.type

    def set_codec_name(self, name):
        """Look up the codec by name and set it if found.

        A warning is given if the name is not recognized; the codec is
        left unchanged in that case.

        Returns
        -------
        codec : `~mediatext.base.codecs.CodecDescriptor` or `None`
        """
        codec = codec_from_name(name)
        if codec is None:
            warnings.warn(f"cannot recognize codec name '{name}' "
                          f"for stream {self.index}.")
        else:
            self.codec = codec
        return codec

    @property
    def extradata(self):
        """Codec-specific data (`None` if not set)."""
        return self._extradata

    @extradata.setter
    def extradata(self, extradata):
        if self._extradata is not None:
            raise InvalidDataError(
                f"extradata for stream {self.index} was already set.")
        self._extradata = bytes(extradata)

    def time(self, ticks):
        """Convert ticks to time (`None` for unset ticks)."""
        if ticks is None:
            return None
        return (ticks * self.time_base.tick).to(u.s)

    def ticks(self, time):
        """Convert time to the nearest integer number of ticks.

        The time is first rounded to integer nanoseconds; the conversion
        to ticks is exact, with halfway cases rounded away from zero.
        """
        nanoseconds = int(np.around(time.to_value(u.ns)))
        return rescale(nanoseconds, _TIME_BASE_NS, self.time_base)

    def __eq__(self, other):
        if not isinstance(other, StreamDescriptor):
            return NotImplemented
        return (self.index == other.index
                and self.codec == other.codec
                and self.time_base == other.time_base
                and self.extradata == other.extradata)

    def __repr__(self):
        return ("{0}(index={1}, codec={2!r}, time_base={3}{4})"
                .format(self.__class__.__name__, self.index, self.codec_name,
                        self.time_base, '' if self.extradata is None else
                        ', extradata=<{0} bytes>'.format(
                            len(self.extradata))))


class ContainerDescriptor:
    """Description of a container, with its streams.

    Parameters
    ----------
    nb_streams : int, optional
        Number of streams to create initially.  Default: 0.
    format_name : str, optional
        Free-form label of the format the container was read from.
    mutable : bool, optional
        Whether ``format_name`` can be changed after initialisation.
        Streams can always be added.  Default: `True`.
    """

    def __init__(self, nb_streams=0, format_name=None, mutable=True):
        self.mutable = True
        self.streams = []
        self.format_name = format_name
        self.declare_streams(nb_streams)
        self.mutable = mutable

    @property
    def nb_streams(self):
        """Number of streams in the container."""
        return len(self.streams)

    @property
    def format_name(self):
        """Label of the format the container was read from."""
        return self._format_name

    @format_name.setter
    def format_name(self, format_name):
        if not self.mutable:
            raise TypeError("immutable {0} does not support assignment."
                            .format(type(self).__name__))
        self._format_name = format_name

    def add_stream(self, **kwargs):
        """Append a new stream.

        Parameters
        ----------
        **kwargs
            Passed on to `~mediatext.base.container.StreamDescriptor`.

        Returns
        -------
        stream : `~mediatext.base.container.StreamDescriptor`
        """
        stream = StreamDescriptor(self.nb_streams, **kwargs)
        self.streams.append(stream)
        return stream

    def declare_streams(self, nb_streams):
        """Ensure there are at least ``nb_streams`` streams.

        Raises
        ------
        ValueError
            If ``nb_streams`` is negative or beyond ``MAX_NB_STREAMS``.
        """
        if not 0 <= nb_streams <= MAX_NB_STREAMS:
            raise ValueError(f"invalid number of streams {nb_streams}; "
                             f"maximum allowed is {MAX_NB_STREAMS}.")
        while self.nb_streams < nb_streams:
            self.add_stream()

    def __eq__(self, other):
        if not isinstance(other, ContainerDescriptor):
            return NotImplemented
        return self.streams == other.streams

    def __repr__(self):
        return "<{0} format_name={1!r}, streams=[{2}]>".format(
            self.__class__.__name__, self.format_name,
            ''.join('\n  ' + repr(stream) for stream in self.streams))


class Packet:
    """A timestamped piece of data belonging to one stream.

    Parameters
    ----------
    stream_index : int
        Index of the stream the packet belongs to.
    pts, dts : int or None, optional
        Presentation and decoding timestamps, in ticks of the stream's time
        base.  `None` if unset (default).
    duration : int, optional
        Duration in ticks.  Zero if unknown (default).
    flags : int, optional
        Combination of packet flags such as ``FLAG_KEY_FRAME``.
    payload : bytes, optional
        The data.
    pos : int, optional
        Offset in the file the packet was read from.
    """

    def __init__(self, stream_index, pts=None, dts=None, duration=0,
                 flags=0, payload=b'', pos=None):
        self.stream_index = stream_index
        self.pts = pts
        self.dts = dts
        self.duration = duration
        self.flags = flags
        self.payload = bytes(payload)
        self.pos = pos

    @property
    def is_key_frame(self):
        """Whether the packet can be decoded without earlier packets."""
        return bool(self.flags & FLAG_KEY_FRAME)

    @property
    def nbytes(self):
        """Size of the payload in bytes."""
        return len(self.payload)

    @property
    def data(self):
        """Payload as a read-only array of unsigned bytes."""
        return np.frombuffer(self.payload, dtype='u1')

    def __eq__(self, other):
        if not isinstance(other, Packet):
            return NotImplemented
        return (self.stream_index == other.stream_index
                and self.pts == other.pts
                and self.dts == other.dts
                and self.duration == other.duration
                and self.flags == other.flags
                and self.payload == other.payload)

    def __repr__(self):
        return ("{0}(stream_index={1}, pts={2}, dts={3}, duration={4}, "
                "flags={5}, nbytes={6})".format(
                    self.__class__.__name__, self.stream_index, self.pts,
                    self.dts, self.duration, self.flags, self.nbytes))
