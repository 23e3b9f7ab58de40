# Licensed under the GPLv3 - see LICENSE
"""Test things that are not already tested with the formats."""
import io

import pytest

from ... import ffprobe, fftextdata
from ..file_info import FileReaderInfo, NoInfo, info_item


def test_str_repr():
    # Check names are interpreted correctly for all types of info_item
    # Directly assigned
    assert str(FileReaderInfo.errors).startswith('errors: ')
    # From header0
    assert str(FileReaderInfo.number_of_streams).startswith(
        'number_of_streams: ')
    # From function
    assert str(FileReaderInfo.header0).startswith('header0: ')
    # From function with needs (i.e., via __call__)
    assert str(FileReaderInfo.readable).startswith('readable: ')
    assert repr(FileReaderInfo.errors).startswith('<info_item errors')
    assert repr(FileReaderInfo()).startswith('FileReaderInfo (unbound)')
    assert repr(ffprobe.base.FFProbeFileReader.info).startswith(
        'FFProbeFileReaderInfo (unbound)')
    assert repr(fftextdata.base.FFTextDataFileReader.info).startswith(
        'FFTextDataFileReaderInfo (unbound)')

    with pytest.raises(TypeError, match="assigned 'info_item'"):
        FileReaderInfo.readable('a')


def test_info_item_link():
    class Parent:
        answer = 42

    class LinkInfo(FileReaderInfo):
        answer = info_item(needs='_parent')

    info = LinkInfo(Parent())
    assert info.answer == 42
    assert 'Link to parent.answer' in LinkInfo.answer.__doc__


def test_closed_file():
    fh = ffprobe.open(io.BytesIO(b'[FORMAT]\nnb_streams=0\n[/FORMAT]\n'))
    fh.close()
    info = fh.info
    assert not info
    assert 'File closed' in repr(info)


def test_no_info():
    info = NoInfo('some reason')
    assert not info
    assert repr(info) == 'No Info: some reason'


def test_dict_items_not_shared():
    fh1 = ffprobe.open(io.BytesIO(b''))
    fh2 = ffprobe.open(io.BytesIO(b'[FORMAT]\nnb_streams=0\n[/FORMAT]\n'))
    info1 = fh1.info
    info2 = fh2.info
    assert info1.checks is not info2.checks
    assert info1.errors is not info2.errors
    assert 'header0' in info1.errors
    assert 'header0' not in info2.errors
    assert FileReaderInfo.errors.default == {}
    assert 'copy=True' in repr(FileReaderInfo.errors)
