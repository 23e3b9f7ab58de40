# Licensed under the GPLv3 - see LICENSE
"""Registry of codec descriptors.

Streams refer to codecs by name in text files; in memory, they hold a
`~mediatext.base.codecs.CodecDescriptor`, which also gives the media type.
Further codecs can be added with `~mediatext.base.codecs.register_codec`.
"""
from collections import namedtuple


__all__ = ['MEDIA_TYPES', 'CodecDescriptor', 'register_codec',
           'codec_from_name', 'codec_from_id']


MEDIA_TYPES = ('video', 'audio', 'data', 'subtitle', 'attachment')
"""Media types codecs can have."""

CodecDescriptor = namedtuple('CodecDescriptor',
                             ['id', 'type', 'name', 'long_name'])
CodecDescriptor.__doc__ = """Description of a codec.

Parameters
----------
id : int
    Unique identifier of the codec.
type : str
    Media type, one of `~mediatext.base.codecs.MEDIA_TYPES`.
name : str
    Unique short name, as used in text files.
long_name : str
    Descriptive name.
"""

_by_name = {}
_by_id = {}


def register_codec(codec):
    """Add a codec to the registry.

    Parameters
    ----------
    codec : `~mediatext.base.codecs.CodecDescriptor`
        Its ``name`` and ``id`` should not yet be in use.
    """
    if codec.type not in MEDIA_TYPES:
        raise ValueError(f"media type '{codec.type}' is not one of "
                         f"{MEDIA_TYPES}.")
    if codec.name in _by_name or codec.id in _by_id:
        raise ValueError(f"codec with name '{codec.name}' or id {codec.id} "
                         "is already registered.")
    _by_name[codec.name] = codec
    _by_id[codec.id] = codec


def codec_from_name(name):
    """Look up a codec by name; `None` if not known."""
    return _by_name.get(name)


def codec_from_id(codec_id):
    """Look up a codec by identifier; `None` if not known."""
    return _by_id.get(codec_id)


for _codec in (
        CodecDescriptor(1, 'video', 'mpeg1video', 'MPEG-1 video'),
        CodecDescriptor(2, 'video', 'mpeg2video', 'MPEG-2 video'),
        CodecDescriptor(7, 'video', 'mjpeg', 'Motion JPEG'),
        CodecDescriptor(12, 'video', 'mpeg4', 'MPEG-4 part 2'),
        CodecDescriptor(13, 'video', 'rawvideo', 'raw video'),
        CodecDescriptor(27, 'video', 'h264', 'H.264 / AVC / MPEG-4 part 10'),
        CodecDescriptor(61, 'video', 'png', 'PNG image'),
        CodecDescriptor(139, 'video', 'vp8', 'On2 VP8'),
        CodecDescriptor(167, 'video', 'vp9', 'Google VP9'),
        CodecDescriptor(173, 'video', 'hevc', 'H.265 / HEVC'),
        CodecDescriptor(226, 'video', 'av1', 'Alliance for Open Media AV1'),
        CodecDescriptor(65536, 'audio', 'pcm_s16le',
                        'PCM signed 16-bit little-endian'),
        CodecDescriptor(65557, 'audio', 'pcm_f32le',
                        'PCM 32-bit floating point little-endian'),
        CodecDescriptor(86016, 'audio', 'mp2', 'MP2 (MPEG audio layer 2)'),
        CodecDescriptor(86017, 'audio', 'mp3', 'MP3 (MPEG audio layer 3)'),
        CodecDescriptor(86018, 'audio', 'aac', 'AAC (Advanced Audio Coding)'),
        CodecDescriptor(86019, 'audio', 'ac3', 'ATSC A/52A (AC-3)'),
        CodecDescriptor(86021, 'audio', 'vorbis', 'Vorbis'),
        CodecDescriptor(86028, 'audio', 'flac', 'FLAC'),
        CodecDescriptor(86076, 'audio', 'opus', 'Opus'),
        CodecDescriptor(94208, 'subtitle', 'dvd_subtitle', 'DVD subtitles'),
        CodecDescriptor(94210, 'subtitle', 'text', 'raw UTF-8 text'),
        CodecDescriptor(94212, 'subtitle', 'mov_text', '3GPP Timed Text'),
        CodecDescriptor(94213, 'subtitle', 'ass', 'ASS (Advanced SSA)'),
        CodecDescriptor(94225, 'subtitle', 'subrip', 'SubRip subtitle'),
        CodecDescriptor(94226, 'subtitle', 'webvtt', 'WebVTT subtitle'),
        CodecDescriptor(98304, 'attachment', 'ttf', 'TrueType font'),
        CodecDescriptor(98313, 'data', 'bin_data', 'binary data'),
        CodecDescriptor(98314, 'data', 'timed_id3', 'timed ID3 metadata'),
        CodecDescriptor(98315, 'data', 'scte_35', 'SCTE 35 message queue'),
):
    register_codec(_codec)

del _codec
