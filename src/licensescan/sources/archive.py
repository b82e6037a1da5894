# archive.py
# SPDX-License-Identifier: MIT
"""Read-only file collections the license scanner walks.

A collection only has to enumerate its entries; each entry knows its
slash-separated path, its size and how to open a fresh binary stream. Zip
archives, directory trees and in-memory mappings are provided.
"""

from __future__ import annotations

import functools
import io
import zipfile
import zlib
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import IO, BinaryIO, Callable, Protocol, runtime_checkable

from ..core.log import get_logger

__all__ = [
    "LicenseScanError",
    "ArchiveReadError",
    "EntryReadError",
    "ArchiveEntry",
    "FileCollection",
    "ZipArchive",
    "DirectoryArchive",
    "MappingArchive",
    "open_archive",
    "zip_contents",
]

log = get_logger(__name__)


class LicenseScanError(RuntimeError):
    """Base class for errors that abort a license scan."""


class ArchiveReadError(LicenseScanError):
    """The file collection itself could not be opened or enumerated."""


class EntryReadError(LicenseScanError):
    """A single entry's content could not be read."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"cannot read {path!r}: {reason}")
        self.path = path
        self.reason = reason


_ENTRY_ERRORS = (OSError, zipfile.BadZipFile, zlib.error, RuntimeError, EOFError)


@dataclass(slots=True, frozen=True)
class ArchiveEntry:
    """A single file (or directory marker) inside a collection.

    Attributes:
        path (str): Slash-separated path as stored in the collection.
        size (int | None): Uncompressed size when known up front.
        is_dir (bool): True for explicit directory entries.
        open_stream (Callable[[], IO[bytes]] | None): Opener for a fresh
            binary stream; callers close the stream.
    """

    path: str
    size: int | None = None
    is_dir: bool = False
    open_stream: Callable[[], IO[bytes]] | None = None

    def read(self, limit: int | None = None) -> bytes:
        """Return the full content of the entry.

        Raises:
            EntryReadError: If the entry cannot be opened, is truncated or
                corrupt, or holds more than ``limit`` bytes.
        """
        if self.is_dir or self.open_stream is None:
            raise EntryReadError(self.path, "not a regular file")
        if limit is not None and self.size is not None and self.size > limit:
            raise EntryReadError(self.path, f"size {self.size} exceeds maximum {limit}")
        try:
            with self.open_stream() as fh:
                data = fh.read() if limit is None else fh.read(limit + 1)
        except LicenseScanError:
            raise
        except _ENTRY_ERRORS as exc:
            raise EntryReadError(self.path, str(exc) or type(exc).__name__) from exc
        if limit is not None and len(data) > limit:
            raise EntryReadError(self.path, f"content exceeds maximum {limit} bytes")
        return data


@runtime_checkable
class FileCollection(Protocol):
    """Anything that can enumerate :class:`ArchiveEntry` objects."""

    def iter_entries(self) -> Iterable[ArchiveEntry]:
        """Yield every entry; order is not significant."""
        ...


class ZipArchive:
    """File collection backed by :class:`zipfile.ZipFile`.

    Accepts a path, raw bytes, a binary file object, or an already open
    ``ZipFile`` (which is then left open on :meth:`close`).
    """

    def __init__(self, source: str | Path | bytes | bytearray | BinaryIO | zipfile.ZipFile):
        self._owns = not isinstance(source, zipfile.ZipFile)
        if isinstance(source, zipfile.ZipFile):
            self.zipf = source
            return
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(bytes(source))
        try:
            self.zipf = zipfile.ZipFile(source)
        except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as exc:
            raise ArchiveReadError(f"cannot open zip archive: {exc}") from exc

    def iter_entries(self) -> Iterator[ArchiveEntry]:
        try:
            infos = self.zipf.infolist()
        except (OSError, ValueError) as exc:
            raise ArchiveReadError(f"cannot list zip archive: {exc}") from exc
        for info in infos:
            name = info.filename
            if not name or name.startswith("__MACOSX/"):
                continue
            yield ArchiveEntry(
                path=name,
                size=info.file_size,
                is_dir=info.is_dir(),
                open_stream=functools.partial(self.zipf.open, info),
            )

    def close(self) -> None:
        if self._owns:
            self.zipf.close()

    def __enter__(self) -> ZipArchive:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class DirectoryArchive:
    """File collection over a local directory tree."""

    def __init__(self, root: str | Path):
        self.root = Path(root).expanduser()
        if not self.root.is_dir():
            raise ArchiveReadError(f"not a directory: {self.root}")

    def iter_entries(self) -> Iterator[ArchiveEntry]:
        try:
            paths = sorted(self.root.rglob("*"))
        except OSError as exc:
            raise ArchiveReadError(f"cannot walk {self.root}: {exc}") from exc
        for path in paths:
            if not path.is_file():
                continue
            try:
                size = path.stat().st_size
            except OSError:
                size = None
            yield ArchiveEntry(
                path=path.relative_to(self.root).as_posix(),
                size=size,
                open_stream=functools.partial(path.open, "rb"),
            )


class MappingArchive:
    """In-memory collection of ``path -> content``; ``str`` content is UTF-8 encoded."""

    def __init__(self, contents: Mapping[str, bytes | str]):
        self._contents = {
            path: data.encode("utf-8") if isinstance(data, str) else bytes(data)
            for path, data in contents.items()
        }

    def iter_entries(self) -> Iterator[ArchiveEntry]:
        for path, data in self._contents.items():
            yield ArchiveEntry(
                path=path,
                size=len(data),
                open_stream=functools.partial(io.BytesIO, data),
            )


def open_archive(location: str | Path) -> ZipArchive | DirectoryArchive:
    """Open a directory or a zip file as a file collection."""
    path = Path(location).expanduser()
    if path.is_dir():
        return DirectoryArchive(path)
    return ZipArchive(path)


def zip_contents(contents: Mapping[str, bytes | str]) -> bytes:
    """Build an in-memory zip archive holding ``contents``."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for path, data in contents.items():
            zf.writestr(path, data)
    return buf.getvalue()
