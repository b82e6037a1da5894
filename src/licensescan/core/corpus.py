# corpus.py
# SPDX-License-Identifier: MIT
"""Reference license texts the matcher aligns against.

The bundled corpus lives as plain text files under ``licensescan/corpus`` and
is loaded once per process. Entries are immutable and pre-tokenized, so one
corpus can be shared by any number of matchers and threads. Tests and callers
can build their own, smaller corpus with :meth:`LicenseCorpus.from_texts`.
"""

from __future__ import annotations

import functools
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from importlib import resources

from .log import get_logger
from .normalize import tokenize
from .types import LicenseType

__all__ = [
    "CorpusEntry",
    "LicenseCorpus",
    "BUILTIN_LICENSES",
    "load_builtin_corpus",
]

log = get_logger(__name__)

# (name, family) for every text shipped in licensescan/corpus/<name>.txt
BUILTIN_LICENSES: tuple[tuple[str, LicenseType], ...] = (
    ("Apache-2.0", LicenseType.APACHE),
    ("BSD-0-Clause", LicenseType.BSD),
    ("BSD-2-Clause", LicenseType.BSD),
    ("BSD-3-Clause", LicenseType.BSD),
    ("BSL-1.0", LicenseType.OTHER),
    ("ISC", LicenseType.BSD),
    ("MIT", LicenseType.MIT),
    ("Unlicense", LicenseType.UNLICENSE),
    ("Zlib", LicenseType.ZLIB),
)


@dataclass(slots=True, frozen=True)
class CorpusEntry:
    """One reference license text and its canonical word sequence."""

    name: str
    type: LicenseType
    text: str
    words: tuple[str, ...]

    @classmethod
    def from_text(cls, name: str, type: LicenseType, text: str) -> CorpusEntry:
        words = tuple(w.text for w in tokenize(text))
        if not words:
            raise ValueError(f"Reference text for {name!r} has no words")
        return cls(name=name, type=type, text=text, words=words)


class LicenseCorpus:
    """Immutable, ordered collection of :class:`CorpusEntry`."""

    __slots__ = ("_entries", "_by_name")

    def __init__(self, entries: Iterable[CorpusEntry]):
        ordered = tuple(entries)
        by_name: dict[str, CorpusEntry] = {}
        for entry in ordered:
            if entry.name in by_name:
                raise ValueError(f"Duplicate corpus entry {entry.name!r}")
            by_name[entry.name] = entry
        self._entries = ordered
        self._by_name = by_name

    @classmethod
    def from_texts(cls, items: Iterable[tuple[str, LicenseType, str]]) -> LicenseCorpus:
        """Build a corpus from ``(name, type, text)`` triples."""
        return cls(CorpusEntry.from_text(name, typ, text) for name, typ, text in items)

    def __iter__(self) -> Iterator[CorpusEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> CorpusEntry | None:
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return [entry.name for entry in self._entries]

    def __repr__(self) -> str:
        return f"LicenseCorpus({self.names()!r})"


@functools.lru_cache(maxsize=1)
def load_builtin_corpus() -> LicenseCorpus:
    """Load the bundled reference texts (cached for the life of the process)."""
    root = resources.files("licensescan").joinpath("corpus")
    items = []
    for name, typ in BUILTIN_LICENSES:
        text = root.joinpath(f"{name}.txt").read_text(encoding="utf-8")
        items.append((name, typ, text))
    corpus = LicenseCorpus.from_texts(items)
    log.debug("Loaded %d reference licenses", len(corpus))
    return corpus
