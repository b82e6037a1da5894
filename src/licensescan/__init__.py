# __init__.py
# SPDX-License-Identifier: MIT
"""
Top-level package exports for :mod:`licensescan`.

licensescan finds license files in a module's file tree, classifies their
text against a corpus of reference licenses and reports how much of each
file is covered by recognized license text.

Public surface
--------------
The symbols listed in :data:`PRIMARY_API` are the supported entry points:

- :func:`detect` / :class:`Detector` scan a file collection
  (:class:`ZipArchive`, :class:`DirectoryArchive`, :class:`MappingArchive`)
  and return :class:`License` records.
- :class:`TextMatcher` classifies a single text and returns a
  :class:`Coverage`.
- :func:`is_module_redistributable` and friends interpret the results.

Examples:
    Scan a module zip whose files live under ``rsc.io/quote@v1.4.1/``::

        >>> from licensescan import detect_in_zip
        >>> found = detect_in_zip("quote.zip", "rsc.io/quote@v1.4.1")
        >>> [(lic.file_path, lic.types) for lic in found]
        [('LICENSE', ('BSD-3-Clause',))]

    Classify text directly::

        >>> from licensescan import TextMatcher
        >>> TextMatcher().classify(open("LICENSE", "rb").read()).percent
        100.0
"""

from __future__ import annotations

try:
    from importlib.metadata import version as _pkg_version

    __version__ = _pkg_version("licensescan")
except Exception:  # PackageNotFoundError when running from a source checkout
    __version__ = "0.0.0+unknown"

from .core.config import (
    LicenseScanConfig,
    LoggingConfig,
    MatcherConfig,
    ScanConfig,
    load_config_from_path,
)
from .core.corpus import CorpusEntry, LicenseCorpus, load_builtin_corpus
from .core.detect import (
    Detector,
    ScanCancelled,
    detect,
    detect_in_tree,
    detect_in_zip,
    is_license_file_name,
    is_vendored,
)
from .core.log import configure_logging, get_logger, temp_level
from .core.matcher import TextMatcher, classify
from .core.redistributable import (
    is_directory_redistributable,
    is_module_redistributable,
    is_redistributable,
    licenses_for_directory,
)
from .core.types import Coverage, License, LicenseType, Match, Metadata
from .sources.archive import (
    ArchiveReadError,
    DirectoryArchive,
    EntryReadError,
    FileCollection,
    LicenseScanError,
    MappingArchive,
    ZipArchive,
    open_archive,
)

PRIMARY_API = [
    "__version__",
    "LicenseScanConfig",
    "MatcherConfig",
    "ScanConfig",
    "LoggingConfig",
    "load_config_from_path",
    "Detector",
    "detect",
    "detect_in_zip",
    "detect_in_tree",
    "is_license_file_name",
    "is_vendored",
    "TextMatcher",
    "classify",
    "LicenseCorpus",
    "CorpusEntry",
    "load_builtin_corpus",
    "Coverage",
    "License",
    "LicenseType",
    "Match",
    "Metadata",
    "FileCollection",
    "ZipArchive",
    "DirectoryArchive",
    "MappingArchive",
    "open_archive",
    "LicenseScanError",
    "ArchiveReadError",
    "EntryReadError",
    "ScanCancelled",
    "is_redistributable",
    "is_module_redistributable",
    "is_directory_redistributable",
    "licenses_for_directory",
    "configure_logging",
    "get_logger",
    "temp_level",
]

__all__ = list(PRIMARY_API)
