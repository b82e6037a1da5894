# redistributable.py
# SPDX-License-Identifier: MIT
"""Decide whether detected licenses allow a documentation site to show code.

A license file applies to the directory it sits in and everything below it.
A directory is redistributable when the module root carries at least one
license and every license that applies to the directory is of a type on
the allow list.
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterable

from .types import License, Metadata

__all__ = [
    "REDISTRIBUTABLE_TYPES",
    "is_redistributable",
    "license_directory",
    "licenses_for_directory",
    "is_directory_redistributable",
    "is_module_redistributable",
]

REDISTRIBUTABLE_TYPES: frozenset[str] = frozenset({
    "AGPL-3.0",
    "Apache-2.0",
    "Artistic-2.0",
    "BSD-0-Clause",
    "BSD-2-Clause",
    "BSD-3-Clause",
    "BSL-1.0",
    "CC0-1.0",
    "EPL-2.0",
    "GPL-2.0",
    "GPL-3.0",
    "ISC",
    "LGPL-2.1",
    "LGPL-3.0",
    "MIT",
    "MIT-0",
    "MPL-2.0",
    "Unlicense",
    "Zlib",
})


def _meta(item: Metadata | License) -> Metadata:
    return item.metadata if isinstance(item, License) else item


def is_redistributable(item: Metadata | License) -> bool:
    """True when the file was classified and every type is on the allow list."""
    types = _meta(item).types
    return bool(types) and all(t in REDISTRIBUTABLE_TYPES for t in types)


def license_directory(item: Metadata | License) -> str:
    """Directory holding the license file; ``""`` for the module root."""
    directory = posixpath.dirname(_meta(item).file_path)
    return "" if directory == "." else directory


def _is_within(directory: str, ancestor: str) -> bool:
    if not ancestor:
        return True
    return directory == ancestor or directory.startswith(ancestor + "/")


def licenses_for_directory(items: Iterable[Metadata | License], directory: str) -> list[Metadata]:
    """Return the licenses that apply to ``directory``, sorted by path."""
    directory = directory.strip("/")
    applicable = [_meta(i) for i in items if _is_within(directory, license_directory(i))]
    return sorted(applicable, key=lambda m: m.file_path)


def is_directory_redistributable(items: Iterable[Metadata | License], directory: str) -> bool:
    """True if the module root is licensed and all licenses covering ``directory`` are redistributable."""
    metas = [_meta(i) for i in items]
    if not any(license_directory(m) == "" for m in metas):
        return False
    return all(is_redistributable(m) for m in licenses_for_directory(metas, directory))


def is_module_redistributable(items: Iterable[Metadata | License]) -> bool:
    """Redistributability of the module root directory."""
    return is_directory_redistributable(items, "")
