# detect.py
# SPDX-License-Identifier: MIT
"""Find and classify license files in a module's file tree.

Detection walks a :class:`~licensescan.sources.archive.FileCollection`:

1. Entries outside the configured path prefix, directories, files whose
   base name is not a recognized license file name, and files inside
   vendored dependencies are skipped without being read.
2. Every remaining candidate is read in full and classified by a
   :class:`~licensescan.core.matcher.TextMatcher`.
3. Each candidate yields one :class:`~licensescan.core.types.License`, even
   when nothing in it was recognized.

Any archive or entry read failure aborts the scan; no partial results are
returned.
"""

from __future__ import annotations

import functools
import posixpath
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from ..sources.archive import (
    DirectoryArchive,
    FileCollection,
    LicenseScanError,
    ZipArchive,
)
from .concurrency import Cancelled, Executor, ExecutorConfig
from .config import ScanConfig
from .log import get_logger
from .matcher import TextMatcher
from .types import License, Metadata

__all__ = [
    "LICENSE_FILE_NAMES",
    "ScanCancelled",
    "Detector",
    "detect",
    "detect_in_zip",
    "detect_in_tree",
    "is_license_file_name",
    "is_vendored",
    "strip_prefix",
]

log = get_logger(__name__)

_LICENSE_STEMS = (
    "LICENSE",
    "COPYING",
    "UNLICENSE",
    "LICENSE-MIT",
    "LICENSE-APACHE",
    "LICENSE-2.0",
    "LICENSE-APACHE-2.0",
    "MIT-LICENSE",
    "MIT_LICENSE",
)
_LICENSE_EXTENSIONS = ("", ".MD", ".MARKDOWN", ".TXT", ".RST", ".MIT", ".CODE", ".DOCS")


def _spellings(stem: str) -> set[str]:
    return {stem, stem.replace("LICENSE", "LICENCE")}


# Upper-cased base names recognized as license files.
LICENSE_FILE_NAMES: frozenset[str] = frozenset(
    spelling + ext
    for stem in _LICENSE_STEMS
    for spelling in _spellings(stem)
    for ext in _LICENSE_EXTENSIONS
)


class ScanCancelled(LicenseScanError):
    """The caller's cancel event was set before the scan finished."""


def is_license_file_name(path: str) -> bool:
    """Return True if the base name of ``path`` is a recognized license file name.

    The comparison is case-insensitive and exact: ``LICENSE.md`` and
    ``licence`` match, ``MYLICENSEFILE`` does not.
    """
    return posixpath.basename(path).upper() in LICENSE_FILE_NAMES


def is_vendored(rel_path: str) -> bool:
    """Return True if ``rel_path`` lies below a vendored dependency.

    A ``vendor`` directory only acts as a vendoring root when another
    directory sits between it and the file: ``vendor/pkg/LICENSE`` is
    vendored, while ``pkg/vendor/LICENSE`` (the license of a package that
    happens to be named vendor) and ``vendor/LICENSE`` are not.
    """
    dirs = rel_path.split("/")[:-1]
    return any(seg == "vendor" and i < len(dirs) - 1 for i, seg in enumerate(dirs))


def strip_prefix(path: str, prefix: str) -> str | None:
    """Return ``path`` relative to ``prefix``, or None when it lies outside it."""
    prefix = (prefix or "").strip("/")
    if not prefix:
        return path.lstrip("/")
    head = prefix + "/"
    if not path.startswith(head):
        return None
    return path[len(head):]


@dataclass(slots=True, frozen=True)
class _Candidate:
    path: str
    contents: bytes


def _classify_candidate(matcher: TextMatcher, coverage_threshold: float, cand: _Candidate) -> License:
    """Build the License record for one candidate file (picklable for process pools)."""
    coverage = matcher.classify(cand.contents)
    types: tuple[str, ...] = ()
    if coverage.matches and coverage.percent >= coverage_threshold:
        types = tuple(sorted({m.name for m in coverage.matches}))
    log.debug("%s: coverage %.2f%% types=%s", cand.path, coverage.percent, list(types))
    return License(metadata=Metadata(file_path=cand.path, types=types, coverage=coverage), contents=cand.contents)


class Detector:
    """Scan file collections for license files.

    Args:
        matcher (TextMatcher | None): Classifier to use; defaults to one
            backed by the bundled corpus.
        config (ScanConfig | None): Scan options.
    """

    def __init__(self, matcher: TextMatcher | None = None, config: ScanConfig | None = None):
        self.matcher = matcher or TextMatcher()
        self.config = config or ScanConfig()
        self.config.validate()

    def iter_candidates(
        self,
        path_prefix: str,
        archive: FileCollection,
        cancel: threading.Event | None = None,
    ) -> Iterator[_Candidate]:
        """Yield the license file candidates of ``archive`` with their content.

        Raises:
            ArchiveReadError: If the collection cannot be enumerated.
            EntryReadError: If a candidate cannot be read.
            ScanCancelled: If ``cancel`` is set between two files.
        """
        for entry in archive.iter_entries():
            if cancel is not None and cancel.is_set():
                raise ScanCancelled("license scan cancelled")
            if entry.is_dir:
                continue
            rel = strip_prefix(entry.path, path_prefix)
            if not rel or not is_license_file_name(rel):
                continue
            if is_vendored(rel):
                log.debug("Skipping vendored license file %s", entry.path)
                continue
            yield _Candidate(path=rel, contents=entry.read(self.config.max_file_bytes))

    def detect(
        self,
        path_prefix: str | None,
        archive: FileCollection,
        *,
        cancel: threading.Event | None = None,
    ) -> list[License]:
        """Detect license files in ``archive``.

        Args:
            path_prefix (str | None): Prefix to strip from reported paths;
                None falls back to ``config.path_prefix``.
            archive (FileCollection): Collection to scan.
            cancel (threading.Event | None): Cooperative cancellation flag,
                checked between files.

        Returns:
            list[License]: One record per license file, in no particular
            order.
        """
        prefix = self.config.path_prefix if path_prefix is None else path_prefix
        threshold = self.config.coverage_threshold
        candidates = self.iter_candidates(prefix, archive, cancel)
        results: list[License] = []

        if self.config.max_workers <= 1:
            for cand in candidates:
                results.append(_classify_candidate(self.matcher, threshold, cand))
        else:
            executor = Executor(
                ExecutorConfig(
                    max_workers=self.config.max_workers,
                    window=self.config.effective_window(),
                    kind=self.config.executor_kind,
                )
            )
            worker = functools.partial(_classify_candidate, self.matcher, threshold)
            try:
                executor.map_unordered(candidates, worker, results.append, cancel=cancel)
            except Cancelled:
                raise ScanCancelled("license scan cancelled") from None

        classified = sum(1 for lic in results if lic.types)
        log.info(
            "Detected %d license file(s), %d classified, prefix=%r",
            len(results),
            classified,
            prefix,
        )
        return results


def detect(
    path_prefix: str,
    archive: FileCollection,
    *,
    matcher: TextMatcher | None = None,
    config: ScanConfig | None = None,
    cancel: threading.Event | None = None,
) -> list[License]:
    """Detect license files in ``archive`` with a one-off :class:`Detector`."""
    return Detector(matcher, config).detect(path_prefix, archive, cancel=cancel)


def detect_in_zip(
    zip_path: str | Path,
    path_prefix: str = "",
    *,
    matcher: TextMatcher | None = None,
    config: ScanConfig | None = None,
) -> list[License]:
    """Detect license files inside the zip archive at ``zip_path``."""
    with ZipArchive(zip_path) as archive:
        return detect(path_prefix, archive, matcher=matcher, config=config)


def detect_in_tree(
    root_dir: str | Path,
    *,
    matcher: TextMatcher | None = None,
    config: ScanConfig | None = None,
) -> list[License]:
    """Detect license files in a local directory tree rooted at ``root_dir``."""
    return detect("", DirectoryArchive(root_dir), matcher=matcher, config=config)
