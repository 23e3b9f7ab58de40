# Licensed under the GPLv3 - see LICENSE
"""Encoders and decoders for binary data embedded in text.

Payloads and extradata are written as hexadecimal lines in the ffprobe
format, and as base64 tokens in the fftextdata format.
"""
import base64
import binascii

import numpy as np

from .base import InvalidDataError


__all__ = ['HEX_LINE_NBYTES', 'decode_hex_line', 'encode_hex',
           'decode_base64', 'encode_base64']


HEX_LINE_NBYTES = 64
"""Number of bytes written per line of hexadecimal data."""

_HEX_VALUES = np.full(256, -1, dtype=np.int16)
_HEX_VALUES[np.frombuffer(b'0123456789', dtype='u1')] = np.arange(10)
_HEX_VALUES[np.frombuffer(b'abcdef', dtype='u1')] = np.arange(10, 16)
_HEX_VALUES[np.frombuffer(b'ABCDEF', dtype='u1')] = np.arange(10, 16)
"""Value of each hexadecimal digit; -1 for other characters."""


def decode_hex_line(line):
    """Decode a line of hexadecimal digits into bytes.

    Groups of digits can be separated by whitespace; each group should
    have an even number of digits.

    Parameters
    ----------
    line : str or bytes
        Line to decode.

    Returns
    -------
    data : bytes
        Decoded data.

    Raises
    ------
    InvalidDataError
        If the line contains a character that is not a hexadecimal digit,
        or a group with an odd number of digits.
    """
    if isinstance(line, str):
        line = line.encode('ascii', errors='replace')

    decoded = []
    for group in line.split():
        values = _HEX_VALUES[np.frombuffer(group, dtype='u1')]
        invalid = np.nonzero(values < 0)[0]
        if invalid.size:
            raise InvalidDataError(
                "invalid character '{0}'".format(chr(group[invalid[0]])))
        if values.size % 2:
            raise InvalidDataError(
                "could not parse value '{0}'".format(group.decode('ascii')))
        decoded.append((values[::2] << 4) | values[1::2])

    if not decoded:
        return b''

    return np.concatenate(decoded).astype('u1').tobytes()


def encode_hex(data, line_nbytes=HEX_LINE_NBYTES):
    """Encode bytes as lines of hexadecimal digits.

    Parameters
    ----------
    data : bytes-like
        Data to encode.
    line_nbytes : int, optional
        Number of bytes per line.  Default: 64.

    Returns
    -------
    lines : list of str
        Lower-case hexadecimal digits, two per byte, without separators.
        Empty for empty data.
    """
    data = bytes(data)
    return [data[start:start+line_nbytes].hex()
            for start in range(0, len(data), line_nbytes)]


def decode_base64(token):
    """Decode a base64 token.

    Padding at the end may be omitted.

    Parameters
    ----------
    token : str or bytes
        Base64 encoded data, without whitespace.

    Returns
    -------
    data : bytes
        Decoded data, with a length of ``len(token) * 3 // 4``, less one
        for each padding character.

    Raises
    ------
    InvalidDataError
        If the token contains invalid characters or has an impossible length.
    """
    if isinstance(token, str):
        token = token.encode('ascii', errors='replace')

    if len(token) % 4 == 1:
        raise InvalidDataError(f"invalid base64 data length {len(token)}")

    token += b'=' * (-len(token) % 4)
    try:
        return base64.b64decode(token, validate=True)
    except binascii.Error as exc:
        raise InvalidDataError(f"invalid base64 data ({exc})") from None


def encode_base64(data):
    """Encode bytes as a base64 string, including padding."""
    return base64.b64encode(bytes(data)).decode('ascii')
