# Licensed under the GPLv3 - see LICENSE
"""Timestamped base64 data (fftextdata) format reader/writer.

Files consist of records with a time, like ``0:00:01.000000``, followed
by base64 encoded data, terminated by a semicolon.  The codec of the data
is not stored in the file, but passed in when opening.
"""
from .base import (open, info,  # noqa
                   FFTextDataFileReader, FFTextDataFileWriter)
