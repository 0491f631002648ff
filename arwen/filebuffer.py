"""Loading whole files into memory, with pluggable lookup of file names."""

from __future__ import annotations

import errno
import os
import stat
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from arwen.errors import LibCError


class BufferLocator(Protocol):
    """Anything that turns a requested file name into a path to open."""

    def locate(self, file_name: str | os.PathLike[str]) -> Path: ...


class SimpleBufferLocator:
    """Locates files by name alone, after checking that they can be read."""

    def locate(self, file_name: str | os.PathLike[str]) -> Path:
        """Return ``file_name`` as a path once it is known to be a readable file."""
        self.check_existence(file_name)
        return Path(file_name)

    @staticmethod
    def check_existence(file_name: str | os.PathLike[str]) -> None:
        """Raise ``LibCError`` unless ``file_name`` can be opened and is not a directory."""
        try:
            fd = os.open(file_name, os.O_RDONLY)
        except OSError as exc:
            raise LibCError.from_os_error(exc) from exc
        try:
            info = os.fstat(fd)
        except OSError as exc:
            raise LibCError.from_os_error(exc) from exc
        finally:
            os.close(fd)
        if stat.S_ISDIR(info.st_mode):
            raise LibCError(errno.EISDIR)


def _unchanged(text: str) -> str:
    return text


@dataclass(frozen=True)
class FileBuffer:
    """The full text of a file together with the path it was read from."""

    path: Path
    contents: str

    @classmethod
    def from_file(
        cls,
        file_name: str | os.PathLike[str],
        locator: BufferLocator | None = None,
    ) -> FileBuffer:
        """Read a file unchanged."""
        return cls.from_file_filter(file_name, _unchanged, locator)

    @classmethod
    def from_file_filter(
        cls,
        file_name: str | os.PathLike[str],
        transform: Callable[[str], str],
        locator: BufferLocator | None = None,
    ) -> FileBuffer:
        """Read a file and pass its text through ``transform`` before keeping it."""
        if locator is None:
            locator = SimpleBufferLocator()
        full_path = Path(locator.locate(file_name))
        try:
            fd = os.open(full_path, os.O_RDONLY)
        except OSError as exc:
            raise LibCError.from_os_error(exc) from exc
        try:
            info = os.fstat(fd)
            if stat.S_ISDIR(info.st_mode):
                raise LibCError(errno.EISDIR)
            with os.fdopen(fd, "rb", closefd=False) as handle:
                data = handle.read()
        except OSError as exc:
            raise LibCError.from_os_error(exc) from exc
        finally:
            os.close(fd)
        if len(data) < info.st_size:
            raise LibCError(errno.EIO)
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise LibCError(errno.EILSEQ) from exc
        return cls(full_path, transform(text))

    def __len__(self) -> int:
        return len(self.contents)