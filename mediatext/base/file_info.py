# Licensed under the GPLv3 - see LICENSE
"""Provide a base class for "info" properties.

Loosely based on `~astropy.utils.data_info.DataInfo`.
"""
import copy
import operator
import warnings

from astropy import units as u


__all__ = ['info_item', 'InfoBase', 'FileReaderInfo', 'NoInfo']


class info_item:
    """Like a lazy property, evaluated only once.

    Can be used as a decorator.

    It replaces itself with the evaluation of the function, i.e.,
    it is not a data descriptor.

    Any errors encountered during the evaluation are stored in the
    instances ``errors`` dict.

    Parameters
    ----------
    attr : str or callable, optional
        If a string, assumes we will get that attribute from ``needs``.
        If a callable, it will be called with the instance as its
        argument to calculate the value (i.e., it will behave like a
        property). If ``attr`` is not given, it is set after the fact
        by applying the instance to a function (i.e., using it as a
        decorator), or by defining it as an attribute of a class.
    needs : str or tuple of str
        The attributes that need to be present (i.e., not `None`) to get
        or calculate ``attr``.  If ``attr`` is a string, this should be
        where the attribute should be gotten from (e.g., 'header0' or
        '_parent'); if not given, the attribute is simply set to
        ``default``.
    default : value, optional
        The value to return if the needs are not met.  Default: `None`.
    doc : str, optional
        Docstring of the descriptor.  If not given will be taken from
        ``attr`` if a function, otherwise constructed.
    copy : bool
        Whether the copy the value if it is retrieved.  This is needed
        for `dict` defaults, which should not be shared between instances.
    """
    _fget = None

    def __init__(self, attr=None, *, needs=(), default=None, doc=None,
                 copy=False):
        needs = tuple(needs) if isinstance(needs, (tuple, list)) else (needs,)
        self.needs = needs
        self.default = default
        self.copy = copy
        # attr is a callable if info_item is used as a bare decorator,
        # and a string if the item links to an attribute with a different
        # name, e.g., number_of_streams = info_item('nb_streams', ...).
        self._init_wrapup(attr, doc)

    def _init_wrapup(self, attr, doc=None):
        # Finish initialization, or update from __set_name__ or __call__
        if callable(attr):
            self._fget = attr
            self.name = attr.__name__
            doc = attr.__doc__
        elif attr is not None:
            self.name = attr
            if self._fget is None and self.needs:
                full_attr = '.'.join(self.needs+(attr,))
                self._fget = operator.attrgetter(full_attr)
                doc = "Link to " + full_attr.replace('_parent', 'parent')
        if doc and self.__doc__ is self.__class__.__doc__:
            self.__doc__ = doc

    def __set_name__(self, owner, name):
        # Called when assigned as a class attribute; the name is where
        # the result gets stored on the instance.
        self._init_wrapup(name)

    def __call__(self, func):
        """For use as a decorator when not yet fully initialized."""
        # We get here for, e.g., @info_item(needs='header0').
        if hasattr(self, 'name'):
            raise TypeError(f"assigned {self.__class__.__name__!r}"
                            f"is not callable")
        self._init_wrapup(func)
        return self

    def __get__(self, instance, cls=None):
        if instance is None:
            return self

        if self._fget and all(getattr(instance, need, None) is not None
                              for need in self.needs):
            try:
                value = self._fget(instance)
            except Exception as exc:
                instance.errors[self.name] = exc
                value = self.default
            else:
                if value is None:
                    value = self.default

        else:
            value = self.default

        if self.copy:
            value = copy.copy(value)

        setattr(instance, self.name, value)
        return value

    def __str__(self):
        short_doc = self.__doc__.split('\n')[0]
        return f"{self.name}: {short_doc}"

    def __repr__(self):
        name = self.__class__.__name__
        extra = {a: getattr(self, a) for a in
                 ('needs', 'default', 'copy')}
        extra = ', '.join([f"{a}={v}" for a, v in extra.items()
                           if v or a == 'default' and v is not None])
        if extra:
            extra = f"\n{' '*len(name)}  {extra}"
        return f"<{name} {str(self)}{extra}>"


class InfoBase:
    """Container providing a standardized interface to file information.

    In order to ensure that information is always returned, all access
    to the parent should be via `~mediatext.base.file_info.info_item`,
    which ensures that any errors are stored in ``self.errors``.
    Warnings are captured and stored in ``self.warnings``.

    The instance evaluates as `True` if the underlying file is of the right
    format, and can thus, at least in principle, be read (though the
    file may be corrupt further on; see ``errors``).

    Parameters
    ----------
    parent : instance, optional
        Instance of the file reader the ``info`` instance is attached to.
        `None` if it is the class version.
    """

    attr_names = ()
    """Attributes that the container provides."""

    _parent = None
    closed = info_item(needs='_parent', doc='Whether parent is closed')

    def __init__(self, parent=None):
        if parent is not None:
            self._parent = parent
            if not self.closed:
                for attr in self.attr_names:
                    getattr(self, attr)

    def _up_to_date(self):
        """Determine whether the information we have stored is up to date."""
        if not hasattr(self, '_parent_attrs'):
            # Set it on the class since it cannot change.
            cls = self.__class__
            cls._parent_attrs = tuple(
                attr for attr in dir(cls)
                if not attr.startswith('_')
                and getattr(getattr(cls, attr), 'needs', ()) == ('_parent',))

        return all(getattr(self, attr) == getattr(self._parent, attr, None)
                   for attr in self._parent_attrs)

    def __get__(self, instance, owner_cls):
        if instance is None:
            # Unbound descriptor, nothing to do.
            return self

        # Check if we have a stored and up to date copy.
        info = instance.__dict__.get('info')
        if info is None or not info._up_to_date():
            # We cannot change "self", as this was created on the class.
            info = instance.__dict__['info'] = self.__class__(parent=instance)

        return info

    def __delete__(self, instance):
        # Defining __delete__ makes this a data descriptor, so __get__ is
        # called even if "info" is present in instance.__dict__.
        instance.__dict__.pop('info', None)

    def __bool__(self):
        return self.format is not None

    def __call__(self):
        """Create a dict with file information.

        This includes information about checks done, possible missing
        information, as well as possible warnings and errors.
        """
        info = {}
        for attr in self.attr_names:
            value = getattr(self, attr)
            if not (value is None or (isinstance(value, dict)
                                      and value == {})):
                info[attr] = value

        return info

    def __repr__(self):
        # Use the repr for display of file information.
        if self._parent is None:
            return '\n'.join(
                [f"{self.__class__.__name__} (unbound) with attributes:"]
                + [f"  {getattr(self.__class__, attr)}"
                   for attr in self.attr_names])

        if self.closed:
            return "File closed. Not parsable."

        result = [self._parent.__class__.__name__.replace('Reader', '')
                  + ' information:']
        for attr in self.attr_names:
            value = getattr(self, attr)
            if isinstance(value, dict):
                prefix = f"\n{attr}: "
                spaces = ' ' * (len(attr)+2)
                if attr == 'missing':
                    for msg in sorted(set(self.missing.values())):
                        keys = sorted(set(key for key in self.missing
                                          if self.missing[key] == msg))
                        result.append(f"{prefix} {', '.join(keys)}: {msg}")
                        prefix = spaces
                else:
                    for key, val in value.items():
                        str_val = str(val) or repr(val)
                        result.append(f"{prefix} {key}: {str_val}")
                        prefix = spaces

            elif value is not None:
                if isinstance(value, u.Quantity):
                    value = value.to(u.s)
                elif isinstance(value, tuple):
                    value = ', '.join(str(v) for v in value)
                result.append(f"{attr} = {value}")

        if not self:
            result.append('\nNot parsable. Wrong format?')

        return '\n'.join(result)


class FileReaderInfo(InfoBase):
    """Standardized information on file readers.

    The ``info`` descriptor has a number of standard attributes, which are
    determined from the container header (``info.header0``), the first
    packet (``info.packet0``), and from scanning the whole file.

    Examples
    --------
    The most common use is simply to print information::

        >>> from mediatext.data import SAMPLE_FFPROBE
        >>> from mediatext import ffprobe
        >>> fh = ffprobe.open(SAMPLE_FFPROBE, 'rb')
        >>> fh.info
        FFProbeFile information:
        format = ffprobe
        probe_score = 100
        number_of_streams = 2
        codec_names = h264, aac
        time_bases = 1/25, 1/44100
        number_of_packets = 6
        start_time = 0.0 s
        readable = True
        <BLANKLINE>
        checks:  decodable: True
                 complete: True
        >>> fh.close()
    """
    attr_names = ('format', 'number_of_streams', 'codec_names', 'time_bases',
                  'number_of_packets', 'start_time', 'readable',
                  'missing', 'checks', 'errors', 'warnings')
    """Attributes that the container provides."""

    number_of_streams = info_item('nb_streams', needs='header0', doc=(
        'Number of streams in the container.'))

    missing = info_item(default={}, copy=True,
                        doc='dict of missing attributes.')
    checks = info_item(default={}, copy=True,
                       doc='dict of checks for readability.')
    errors = info_item(default={}, copy=True,
                       doc='dict of attributes that raised errors.')
    warnings = info_item(default={}, copy=True,
                         doc='dict of attributes that gave warnings.')

    @info_item
    def header0(self):
        """Container description at the start of the file."""
        # Here, we do not even know whether the file is open or whether we
        # have the right format. We thus filter out all warnings.
        with self._parent.temporary_offset(0) as fh:
            with warnings.catch_warnings():
                warnings.simplefilter('ignore')
                return fh.read_header()

    @info_item(needs='header0')
    def packet0(self):
        """First packet in the file."""
        with self._parent.temporary_offset(0) as fh:
            with warnings.catch_warnings():
                warnings.simplefilter('ignore')
                fh.read_header()
                try:
                    return fh.read_packet()
                except EOFError:
                    self.missing['packet0'] = 'file contains no packets.'
                    return None

    @info_item(needs='header0')
    def format(self):
        """The file format."""
        return self._parent.__class__.__name__.split('File')[0].lower()

    @info_item(needs='header0')
    def codec_names(self):
        """Names of the codecs of all streams (`None` if unresolved)."""
        return tuple(stream.codec_name for stream in self.header0.streams)

    @info_item(needs='header0')
    def time_bases(self):
        """Time bases of all streams."""
        return tuple(stream.time_base for stream in self.header0.streams)

    @info_item(needs='header0')
    def number_of_packets(self):
        """Total number of packets, found by reading the whole file."""
        with self._parent.temporary_offset(0) as fh:
            with warnings.catch_warnings(record=True) as w:
                warnings.simplefilter('always')
                fh.read_header()
                number_of_packets = sum(1 for packet in fh)

        if w:
            self.warnings['number_of_packets'] = str(w[0].message)

        return number_of_packets

    @info_item(needs='packet0')
    def start_time(self):
        """Presentation time of the first packet."""
        stream = self.header0.streams[self.packet0.stream_index]
        return stream.time(self.packet0.pts)

    @info_item(needs='header0', default=False)
    def readable(self):
        """Whether the first packet and the whole file could be decoded."""
        self.checks['decodable'] = (self.packet0 is not None
                                    or 'packet0' in self.missing)
        self.checks['complete'] = self.number_of_packets is not None
        return all(bool(v) for v in self.checks.values())


class NoInfo:
    """Info class for cases where no useful information was returned.

    Any instance evaluates as `False`, to indicate a file for which
    the information is given is not readable.

    Parameters
    ----------
    info : str
        Information that will be displayed using ``repr``.
    """
    def __init__(self, info=None):
        self.info = info

    def __bool__(self):
        return False

    def __repr__(self):
        return f"No Info: {self.info}"
