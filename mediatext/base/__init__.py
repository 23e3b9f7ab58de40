# Licensed under the GPLv3 - see LICENSE
"""Base implementations shared between all formats.

Files are considered as describing a container with a number of streams,
followed by a sequence of timestamped packets.  The in-memory description
of these is in `~mediatext.base.container`, with codecs looked up in the
`~mediatext.base.codecs` registry.  Conversions between time in ticks of a
stream's time base and human-readable time strings are done with the help
of `~mediatext.base.timing`, and binary payloads are embedded in text using
the codecs in `~mediatext.base.encoding`.

The `~mediatext.base.base` module defines base methods for file readers and
writers, as well as for the ``open`` and ``info`` functions each format
provides.  Each file reader has an ``info`` property, defined in
`~mediatext.base.file_info`, that provides standardized information.
"""
