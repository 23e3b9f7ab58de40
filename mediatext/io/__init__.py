# Licensed under the GPLv3 - see LICENSE
"""Text media general I/O routines and entry point.

Contains general ``open`` and ``file_info`` functions that can iterate
over possible formats to determine which is the right one, including
possible formats discovered via entry point 'mediatext.io'.

Any 'mediatext.io' entry points are treated as possible formats if they
point to a module (e.g., 'ffprobe = mediatext.ffprobe').  Any entries that
have object names (e.g., 'fancy_open = mypackage.io:open') are just
added to the name space.

Attributes
----------
FORMATS : list
    Available text media formats.

"""
import sys

import entrypoints


__all__ = ['open', 'file_info']


__self__ = sys.modules[__name__]
"""Link to our own module, for convenience below."""

# We only load entries on demand, to keep import time minimal.
_entries = {}
"""Entry points found."""
_bad_entries = set()
"""Any entry points that failed to load. These will not be retried."""


def __getattr__(attr):
    """Get a missing attribute from a possible entry point.

    Looks for the attribute among the (possibly updated) entry points,
    and, if found, tries loading the entry.  If that fails, the entry
    is added to _bad_entries to ensure it does not recur.
    """
    if attr.startswith('_') or attr in _bad_entries:
        raise AttributeError(f"module {__name__!r} has no attribute {attr!r}")

    FORMATS = globals().setdefault('FORMATS', [])
    if attr not in _entries:
        if not _entries:
            # Our own formats are added explicitly, to give them priority
            # in auto-detection, and so they work in a source checkout
            # without installed entry points.
            _entries.update({
                fmt: entrypoints.EntryPoint(fmt, 'mediatext.'+fmt, '')
                for fmt in ('ffprobe', 'fftextdata')
            })

        _entries.update(entrypoints.get_group_named('mediatext.io'))
        FORMATS.extend([name for name, entry in _entries.items()
                        if not (entry.object_name or name in FORMATS)])
        if attr == 'FORMATS':
            return FORMATS

    entry = _entries.get(attr, None)
    if entry is None:
        raise AttributeError(f"module {__name__!r} has no attribute {attr!r}")

    try:
        value = entry.load()
    except Exception:
        _entries.pop(attr)
        _bad_entries.add(attr)
        if attr in FORMATS:
            FORMATS.remove(attr)
        raise AttributeError(f"{entry} was not loadable. Now removed")

    # Update so we do not have to go through __getattr__ again.
    globals()[attr] = value
    return value


def __dir__():
    # Force update of entries, creates 'FORMATS' if it doesn't exist.
    hasattr(__self__, 'absolutely_no_way_this_exists')
    return sorted(set(globals()).union(_entries).difference(_bad_entries))


def file_info(name, format=None, **kwargs):
    """Get format and other information from a text media file.

    Parameters
    ----------
    name : str or filehandle
        Raw file for which to obtain information.
    format : str, tuple of str, optional
        Formats to try.  If not given, try all formats.
    **kwargs
        Any arguments that might help to interpret the file, such as
        ``codec_name`` for fftextdata.

    Returns
    -------
    info
        The information on the file.  Depending on how much information could
        be gathered, this will be an instance of either
        `~mediatext.base.file_info.FileReaderInfo` or
        `~mediatext.base.file_info.NoInfo`.

    Notes
    -----
    The keyword arguments are classified in ``used_kwargs``, for arguments
    the reader for the format accepts, and ``irrelevant_kwargs``, for
    all others.
    """
    from mediatext.base.file_info import NoInfo

    # If we're looking at one file but multiple formats, cycle through formats.
    if format is None:
        format = tuple(__self__.FORMATS)

    if isinstance(format, tuple):
        no_info = set()
        for format_ in format:
            info = file_info(name, format_, **kwargs)
            if info:
                return info

            if isinstance(info, NoInfo):
                no_info.add(format_)

        return NoInfo(f"{name} does not seem formatted as any of {set(format)}"
                      + (f" ({no_info} could not be opened)."
                         if no_info else "."))

    module = getattr(__self__, format)
    if hasattr(module, 'info'):
        return module.info(name, **kwargs)

    # Try just opening and getting info.
    try:
        with module.open(name, 'rb', **kwargs) as fh:
            return fh.info
    except Exception as exc:
        return NoInfo(f"mediatext.io.{format} has no 'info' and opening "
                      f"raised {exc!r}.")


def open(name, mode='rb', format=None, **kwargs):
    """Open a text media file for reading or writing.

    One gets a wrapped filehandle that adds methods to read or write
    the container header and packets.

    Parameters
    ----------
    name : str or filehandle
        File name or filehandle.
    mode : {'rb', 'wb'}, optional
        Whether to open for reading or writing.  Default: 'rb'.
    format : str or tuple of str
        The format the file is in. For reading, if a tuple of possible formats,
        all will be tried in turn. By default, all supported formats are tried.
        For writing, an explicit format must be passed in.
    **kwargs
        Additional arguments for the reader or writer.  When reading with
        the format auto-detected, arguments that are not used by the
        reader of the detected format raise an exception.
    """
    if format is None or isinstance(format, tuple):
        if 'w' in mode:
            raise ValueError("cannot specify multiple formats for writing.")

        info = file_info(name, format, **kwargs)
        if not info:
            raise ValueError("format of file could not be auto-determined")

        format = info.format

        if getattr(info, 'irrelevant_kwargs', False):
            raise TypeError(f"open() got unexpected keyword arguments "
                            f"{info.irrelevant_kwargs}")

        kwargs = getattr(info, 'used_kwargs', kwargs)

    module = getattr(__self__, format)
    return module.open(name, mode=mode, **kwargs)
