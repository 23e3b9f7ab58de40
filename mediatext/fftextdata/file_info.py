# Licensed under the GPLv3 - see LICENSE
"""The FFTextDataFileReaderInfo property.

Since fftextdata files have no header, the format can only be recognized
by successfully reading the first record.
"""
from ..base.file_info import FileReaderInfo, info_item


__all__ = ['FFTextDataFileReaderInfo']


class FFTextDataFileReaderInfo(FileReaderInfo):
    @info_item(needs='packet0')
    def format(self):
        """The file format (only set if the first record could be read)."""
        return 'fftextdata'
