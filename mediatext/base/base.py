# Licensed under the GPLv3 - see LICENSE
"""Common classes for reading and writing text media files.

The main `~mediatext.base.base.FileBase` class wraps a binary filehandle,
to which format-specific readers add ``read_header`` and ``read_packet``
methods, and writers ``write_header`` and ``write_packet``.  Since all
formats are line- or word-oriented text, the base also provides a bounded
line reader.

The `~mediatext.base.base.FileOpener` and `~mediatext.base.base.FileInfo`
classes are to help create the ``open`` and ``info`` functions that are
expected to exist for each format.
"""
import io
import functools
import inspect
import textwrap
from contextlib import contextmanager

from .file_info import NoInfo


__all__ = ['InvalidDataError', 'UnterminatedSectionError',
           'LineTooLongError', 'LINE_BUFFER_SIZE',
           'FileBase', 'FileInfo', 'FileOpener']


LINE_BUFFER_SIZE = 4096
"""Size of the line buffer; lines (with terminator) must be shorter."""


class InvalidDataError(ValueError):
    """Malformed content in a text media file."""
    pass


class UnterminatedSectionError(InvalidDataError):
    """File ended before the current section was closed."""
    pass


class LineTooLongError(InvalidDataError):
    """Line longer than the maximum supported by the reader."""
    pass


class FileBase:
    """File wrapper, used to add packet methods to a binary file.

    The underlying file is stored in ``fh_raw`` and all attributes that do not
    exist on the class itself are looked up on it.

    Parameters
    ----------
    fh_raw : filehandle
        Filehandle of the raw binary file.

    Notes
    -----
    A subclass for reading should define ``read_header`` and ``read_packet``
    methods, and also set an ``info`` property.  Often the standard one will
    suffice, i.e., ``info = FileReaderInfo()``.

    A subclass for writing should define a ``write_packet`` method.
    """
    fh_raw = None

    def __init__(self, fh_raw):
        self.fh_raw = fh_raw

    def __getattr__(self, attr):
        """Try to get things on the current open file if it is not on self."""
        if not attr.startswith('_'):
            try:
                return getattr(self.fh_raw, attr)
            except AttributeError:
                pass
        #  __getattribute__ to raise appropriate error.
        return self.__getattribute__(attr)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self.fh_raw.close()

    @contextmanager
    def temporary_offset(self, offset=None, whence=0):
        """Context manager for temporarily seeking to another file position.

        To be used as part of a ``with`` statement::

            with fh.temporary_offset() [as fh]:
                with-block

        On exiting the ``with-block``, the file pointer is moved back to its
        original position.  As a convenience, one can pass on the offset
        to seek to when entering the context manager.  Parameters are as
        for :meth:`io.IOBase.seek`.
        """
        oldpos = self.tell()
        try:
            if offset is not None:
                self.seek(offset, whence)
            yield self
        finally:
            self.seek(oldpos)

    def read_line(self, max_nbytes=LINE_BUFFER_SIZE - 1):
        """Read a single newline-terminated line.

        Parameters
        ----------
        max_nbytes : int, optional
            Maximum length of the line, including its terminator.
            Default: ``LINE_BUFFER_SIZE - 1``.

        Returns
        -------
        line : bytes
            Includes the newline if present; empty at the end of the file.

        Raises
        ------
        LineTooLongError
            If the line is longer than ``max_nbytes``.  The file pointer is
            left beyond the bytes that were read.
        """
        line = self.fh_raw.readline(max_nbytes + 1)
        if len(line) > max_nbytes:
            raise LineTooLongError(
                f"line at offset {self.tell() - len(line)} is longer than "
                f"the maximum supported length of {max_nbytes} bytes.")
        return line

    def __repr__(self):
        return "{0}(fh_raw={1})".format(self.__class__.__name__, self.fh_raw)


class FileInfo:
    """File information collector.

    The instance can be used as a function on a file name to get
    information from that file, by opening it and retrieving ``info``.

    Parameters
    ----------
    opener : callable
        The function to use to open files.
    reader_class : `~mediatext.base.base.FileBase` subclass, optional
        Used to decide which keyword arguments are relevant for opening.
        If not given, all arguments are passed on.

    Notes
    -----
    The class is perhaps most easily used via the class method
    `~mediatext.base.base.FileInfo.create`.
    """

    def __init__(self, opener, reader_class=None):
        self.open = opener
        self.reader_class = reader_class

    def _get_info(self, name, mode, **kwargs):
        """Open a file in the given mode and retrieve info."""
        try:
            with self.open(name, mode=mode, **kwargs) as fh:
                return fh.info
        except Exception as exc:
            return exc

    def is_ok(self, info):
        """Whether the item returned by _get_info has valid information."""
        return not isinstance(info, Exception) and info

    def split_kwargs(self, kwargs):
        """Split keyword arguments in those used and not used by the reader."""
        if self.reader_class is None:
            return dict(kwargs), {}

        accepted = set(inspect.signature(self.reader_class).parameters)
        used = {key: value for key, value in kwargs.items()
                if key in accepted}
        irrelevant = {key: value for key, value in kwargs.items()
                      if key not in used}
        return used, irrelevant

    def __call__(self, name, **kwargs):
        """Collect text media file information.

        First open the file without any extra arguments and check whether it
        is of the correct format.  If so, and arguments relevant for the
        reader were given, re-open with those.

        Parameters
        ----------
        name : str or filehandle
            File name or filehandle.
        **kwargs
            Any arguments the reader needs to interpret the file.

        Returns
        -------
        info
            :class:`~mediatext.base.file_info.FileReaderInfo`, or
            :class:`~mediatext.base.file_info.NoInfo` if the file could
            not be opened at all.  Stored on the information are the
            keyword arguments that were used (``used_kwargs``) and those
            that could not be used (``irrelevant_kwargs``).
        """
        # NOTE: getting info should never fail or even emit warnings.
        # Hence, warnings or errors should not be suppressed here, but
        # rather in the info implementations.
        info = self._get_info(name, 'rb')
        if isinstance(info, Exception):
            return NoInfo(f"opening {name} raised {info!r}.")

        if not info:
            return info

        used_kwargs, irrelevant_kwargs = self.split_kwargs(kwargs)
        if used_kwargs:
            kwargs_info = self._get_info(name, 'rb', **used_kwargs)
            if isinstance(kwargs_info, Exception):
                # Keep the basic information, but record the problem.
                info.errors['used_kwargs'] = kwargs_info
            else:
                info = kwargs_info

        info.used_kwargs = used_kwargs
        info.irrelevant_kwargs = irrelevant_kwargs
        return info

    def wrapped(self, module=None, doc=None):
        """Wrap as a function named info, replacing docstring and module."""

        @functools.wraps(self.__call__)
        def info(*args, **kwargs):
            return self(*args, **kwargs)

        if doc:
            info.__doc__ = doc

        # This ensures the function becomes visible to sphinx.
        if module:
            info.__module__ = module

        return info

    @classmethod
    def create(cls, ns):
        """Create an info getter for the given namespace.

        This assumes that the namespace contains an ``open`` function, as
        well as a file reader with a name ending in ``FileReader``.  These
        are used to create an instance of the info class that is wrapped in
        a function with ``__module__`` set to the calling module (inferred
        from the namespace).

        Parameters
        ----------
        ns : dict
            Namespace to look in.  Generally, pass in ``globals()`` at the
            call site.
        """
        module = ns.get('__name__', None)
        for key in ns:
            if key.endswith('FileReader'):
                fmt = key.replace('FileReader', '')
                break
        else:  # pragma: no cover
            raise ValueError('namespace does not contain a FileReader, '
                             'so fmt cannot be guessed.')

        info = cls(ns['open'], ns[fmt + 'FileReader'])
        doc = textwrap.dedent(info.__call__.__doc__)
        if info.__call__.__doc__ is FileInfo.__call__.__doc__:
            doc = doc.replace('Collect text media file information.',
                              f'Collect {fmt} file information.')
        return info.wrapped(module=module, doc=doc)


class FileOpener:
    """File opener for a text media format.

    Each instance can be used as a function to open a file.  It is
    probably best used inside a wrapper, so that the documentation can
    reflect the docstring of ``__call__`` rather than of this class.

    Parameters
    ----------
    fmt : str
        Name of the format.
    classes : dict
        With the file reader and writer classes keyed by mode,
        i.e., 'rb' and 'wb'.
    """

    def __init__(self, fmt, classes):
        self.fmt = fmt
        self.classes = classes

    def normalize_mode(self, mode):
        if mode in self.classes:
            return mode
        if mode[::-1] in self.classes:
            return mode[::-1]
        if mode in {'r', 'w'} and mode + 'b' in self.classes:
            return mode + 'b'

        raise ValueError(f'invalid mode: {mode} '
                         f'({self.fmt} supports {set(self.classes)}).')

    def is_fh(self, name):
        """Whether name is a filehandle."""
        return hasattr(name, 'read') or hasattr(name, 'write')

    def get_fh(self, name, mode):
        """Ensure name is a filehandle, opening it if necessary."""
        if self.is_fh(name):
            return name

        if not isinstance(name, str):
            raise ValueError(f"name '{name}' not understood.")

        return io.open(name, mode.replace('w', 'w+'))

    def __call__(self, name, mode='rb', **kwargs):
        """
        Open a text media file for reading or writing.

        One gets a wrapped filehandle that adds methods to read or write
        the header and packets.

        Parameters
        ----------
        name : str or filehandle
            File name or filehandle.
        mode : {'rb', 'wb'}, optional
            Whether to open for reading or writing.  Default: 'rb'.
        **kwargs
            Additional arguments for the file reader or writer.
        """
        mode = self.normalize_mode(mode)
        fh = self.get_fh(name, mode)
        try:
            return self.classes[mode](fh, **kwargs)
        except Exception:
            if fh is not name:
                fh.close()
            raise

    def wrapped(self, module=None, doc=None):
        """Wrap as a function named open, replacing docstring and module."""

        @functools.wraps(self.__call__)
        def open(*args, **kwargs):
            return self(*args, **kwargs)

        if doc:
            open.__doc__ = doc

        # This ensures the function becomes visible to sphinx.
        if module:
            open.__module__ = module

        return open

    @classmethod
    def create(cls, ns, doc=None):
        """Create a standard opener for the given namespace.

        This assumes that the namespace contains a file reader and writer
        with standard names, ``<fmt>FileReader`` and ``<fmt>FileWriter``,
        where ``fmt`` is the name of the format (which is inferred by
        looking for a ``*FileReader`` entry).

        The opener is instantiated using the format and the above classes,
        and then a wrapping function is created with ``__module__`` set to
        the ``__name__`` of the namespace, and with the documentation of
        its ``__call__`` method extended with ``doc``.

        Parameters
        ----------
        ns : dict
            Namespace to look in.  Generally, pass in ``globals()`` at the
            call site.
        doc : str, optional
            Extra documentation to add to that of the opener's ``__call__``
            method.
        """
        module = ns.get('__name__', None)
        for key in ns:
            if key.endswith('FileReader'):
                fmt = key.replace('FileReader', '')
                break
        else:  # noqa
            raise ValueError('namespace does not contain a FileReader, '
                             'so fmt cannot be guessed.')

        classes = {mode: ns[fmt + cls_type] for (mode, cls_type) in {
            'rb': 'FileReader',
            'wb': 'FileWriter'}.items()}
        opener = cls(fmt.lower(), classes)
        doc = textwrap.dedent(opener.__call__.__doc__) + (doc or '')
        if opener.__call__.__doc__ is FileOpener.__call__.__doc__:
            doc = doc.replace('Open a text media file for reading or writing.',
                              f'Open {fmt} file for reading or writing.')
        return opener.wrapped(module=module, doc=doc)
