# Licensed under the GPLv3 - see LICENSE
"""ffprobe-like text format reader/writer.

Files consist of a FORMAT section describing the container, STREAM
sections describing each stream, and PACKET sections with the timestamps
and hexadecimal payload of each packet.
"""
from .base import open, info, FFProbeFileReader, FFProbeFileWriter  # noqa
from .session import DecoderSession, probe  # noqa
