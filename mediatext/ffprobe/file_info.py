# Licensed under the GPLv3 - see LICENSE
"""The FFProbeFileReaderInfo property.

Includes how well the start of the file matches the ffprobe format.
"""
from ..base.file_info import FileReaderInfo, info_item
from .session import probe


__all__ = ['FFProbeFileReaderInfo']


class FFProbeFileReaderInfo(FileReaderInfo):
    attr_names = (('format', 'probe_score')
                  + FileReaderInfo.attr_names[1:])

    probe_nbytes = 2048
    """Number of bytes at the start of the file used for probing."""

    @info_item
    def probe_score(self):
        """Likelihood the file is in ffprobe format (0 to 100)."""
        with self._parent.temporary_offset(0) as fh:
            return probe(fh.read(self.probe_nbytes))

    @info_item(needs='header0')
    def format(self):
        """The file format (only set if the probe succeeded)."""
        if self.probe_score:
            return 'ffprobe'
        return None
