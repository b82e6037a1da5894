# types.py
# SPDX-License-Identifier: MIT
"""Immutable records produced by license detection.

A scan yields :class:`License` values. Each pairs the raw file bytes with a
:class:`Metadata` record, which owns exactly one :class:`Coverage`, which in
turn owns zero or more :class:`Match` entries.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

__all__ = [
    "LicenseType",
    "Match",
    "Coverage",
    "Metadata",
    "License",
]


class LicenseType(str, Enum):
    """Broad family tag attached to every corpus entry."""

    MIT = "MIT"
    BSD = "BSD"
    APACHE = "Apache"
    UNLICENSE = "Unlicense"
    ZLIB = "Zlib"
    OTHER = "Other"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: str | LicenseType | None) -> LicenseType:
        if isinstance(value, LicenseType):
            return value
        if not value:
            return cls.UNKNOWN
        lowered = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == lowered or member.name.lower() == lowered:
                return member
        return cls.UNKNOWN


@dataclass(slots=True, frozen=True)
class Match:
    """One recognized license inside a scanned text.

    Attributes:
        name (str): Corpus entry name, e.g. ``"MIT"``.
        type (LicenseType): Family tag of the corpus entry.
        percent (float): Share of the reference text found, 0-100.
        start (int): Character offset where the matched span begins.
        end (int): Character offset one past the end of the span.
    """

    name: str
    type: LicenseType
    percent: float
    start: int = 0
    end: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.value,
            "percent": round(self.percent, 4),
            "start": self.start,
            "end": self.end,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Match:
        return cls(
            name=str(data["name"]),
            type=LicenseType.parse(data.get("type")),
            percent=float(data.get("percent", 0.0)),
            start=int(data.get("start", 0)),
            end=int(data.get("end", 0)),
        )


@dataclass(slots=True, frozen=True)
class Coverage:
    """Aggregate classification of one file.

    ``percent`` is the share of the file's countable words covered by the
    union of all match spans. The zero value means nothing was recognized.
    """

    percent: float = 0.0
    matches: tuple[Match, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.matches)

    def names(self) -> list[str]:
        return [m.name for m in self.matches]

    def to_dict(self) -> dict[str, Any]:
        return {
            "percent": round(self.percent, 4),
            "matches": [m.to_dict() for m in self.matches],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Coverage:
        if not data:
            return cls()
        return cls(
            percent=float(data.get("percent", 0.0)),
            matches=tuple(Match.from_dict(m) for m in data.get("matches") or ()),
        )


@dataclass(slots=True, frozen=True)
class Metadata:
    """A detected license file.

    Attributes:
        file_path (str): Path relative to the scan root.
        types (tuple[str, ...]): Sorted, distinct license names. Empty when
            the file could not be classified with enough coverage.
        coverage (Coverage): Matcher output for the file.
    """

    file_path: str
    types: tuple[str, ...] = ()
    coverage: Coverage = field(default_factory=Coverage)

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_path": self.file_path,
            "types": list(self.types),
            "coverage": self.coverage.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Metadata:
        return cls(
            file_path=str(data["file_path"]),
            types=tuple(sorted(set(data.get("types") or ()))),
            coverage=Coverage.from_dict(data.get("coverage")),
        )


@dataclass(slots=True, frozen=True)
class License:
    """Metadata plus the raw bytes of the license file."""

    metadata: Metadata
    contents: bytes = b""

    @property
    def file_path(self) -> str:
        return self.metadata.file_path

    @property
    def types(self) -> tuple[str, ...]:
        return self.metadata.types

    def to_dict(self, *, include_contents: bool = False) -> dict[str, Any]:
        data = self.metadata.to_dict()
        if include_contents:
            data["contents"] = self.contents.decode("utf-8", errors="replace")
        return data
