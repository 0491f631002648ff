import errno
from pathlib import Path

import pytest

from arwen.errors import LibCError
from arwen.filebuffer import FileBuffer, SimpleBufferLocator


@pytest.fixture
def sample(tmp_path):
    path = tmp_path / "sample.txt"
    path.write_text("hello world\nsecond line\n", encoding="utf-8")
    return path


def test_from_file_reads_contents(sample):
    buffer = FileBuffer.from_file(sample)
    assert buffer.contents == "hello world\nsecond line\n"
    assert buffer.path == sample
    assert len(buffer) == len("hello world\nsecond line\n")


def test_from_file_filter_applies_transform(sample):
    buffer = FileBuffer.from_file_filter(sample, str.upper)
    assert buffer.contents == "HELLO WORLD\nSECOND LINE\n"


def test_filter_can_shorten(sample):
    buffer = FileBuffer.from_file_filter(sample, lambda text: text[:5])
    assert buffer.contents == "hello"
    assert len(buffer) == 5


def test_missing_file_raises_enoent(tmp_path):
    with pytest.raises(LibCError) as info:
        FileBuffer.from_file(tmp_path / "absent.txt")
    assert info.value.err_no == errno.ENOENT
    assert info.value.code == "ENOENT"


def test_directory_raises_eisdir(tmp_path):
    with pytest.raises(LibCError) as info:
        FileBuffer.from_file(tmp_path)
    assert info.value.err_no == errno.EISDIR


def test_locator_returns_path(sample):
    assert SimpleBufferLocator().locate(str(sample)) == sample


def test_check_existence_rejects_directory(tmp_path):
    with pytest.raises(LibCError) as info:
        SimpleBufferLocator.check_existence(tmp_path)
    assert info.value.code == "EISDIR"


def test_custom_locator(tmp_path, sample):
    class DirectoryLocator:
        def __init__(self, base: Path):
            self.base = base

        def locate(self, file_name):
            return self.base / file_name

    buffer = FileBuffer.from_file("sample.txt", DirectoryLocator(tmp_path))
    assert buffer.path == sample
    assert buffer.contents.startswith("hello world")


def test_empty_file(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_bytes(b"")
    buffer = FileBuffer.from_file(path)
    assert buffer.contents == ""
    assert len(buffer) == 0


def test_invalid_utf8_raises(tmp_path):
    path = tmp_path / "bad.bin"
    path.write_bytes(b"\xff\xfe\xfa")
    with pytest.raises(LibCError) as info:
        FileBuffer.from_file(path)
    assert info.value.err_no == errno.EILSEQ