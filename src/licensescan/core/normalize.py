# normalize.py
# SPDX-License-Identifier: MIT
"""Word-level normalization shared by the corpus and the matcher.

License texts are compared as sequences of canonical words so that
punctuation, quoting, markdown markup, line wrapping and list numbering do
not affect alignment. Copyright notice lines are dropped entirely: they name
the holder and year, which vary between every copy of the same license.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = ["Word", "tokenize", "is_copyright_line"]

_LINE_RE = re.compile(r"[^\n]*")
_WORD_RE = re.compile(r"[^\W_]+")
_LIST_MARKER_RE = re.compile(r"^\s*(?:\d{1,2}[.)]|\([a-z0-9]{1,4}\)|[*+\-•])\s+", re.IGNORECASE)

# Spelling variants that should align with the reference texts.
_CANONICAL = {
    "licence": "license",
    "licences": "licenses",
    "licenced": "licensed",
    "licencing": "licensing",
    "organisation": "organization",
    "organisations": "organizations",
    "authorised": "authorized",
    "https": "http",
    "copyrights": "copyright",
}

# Words that may follow "copyright" at the start of a line inside license prose.
_COPYRIGHT_PROSE = frozenset({
    "holder", "holders", "notice", "notices", "owner", "owners",
    "license", "licence", "licenses", "interest", "law", "laws",
    "statement", "and", "or", "in", "of", "to", "the", "is", "are",
})


@dataclass(slots=True, frozen=True)
class Word:
    """A canonical word and its character span in the source text."""

    text: str
    start: int
    end: int


def is_copyright_line(line: str) -> bool:
    """Return True for holder notices such as ``Copyright 2019 Google Inc``."""
    parts = line.strip().split(None, 2)
    if not parts:
        return False
    head = parts[0].lower()
    if head.startswith("©"):
        return True
    if head == "(c)":
        # "(c) You must retain ..." is a list item, not a notice
        if len(parts) == 1:
            return True
        follower = parts[1].lower()
        return follower[:1].isdigit() or follower.startswith("copyright")
    if head.rstrip(":,.") != "copyright":
        return False
    if len(parts) == 1:
        return True
    follower = parts[1].lower().strip("\"',.:;()")
    return follower not in _COPYRIGHT_PROSE


def tokenize(text: str) -> list[Word]:
    """Split ``text`` into canonical lower-case words with offsets.

    Copyright notice lines and leading list markers (``1.``, ``(a)``,
    ``*``) are skipped.
    """
    words: list[Word] = []
    for line_match in _LINE_RE.finditer(text):
        line = line_match.group(0)
        if not line or is_copyright_line(line):
            continue
        base = line_match.start()
        skip = 0
        marker = _LIST_MARKER_RE.match(line)
        if marker:
            skip = marker.end()
        for m in _WORD_RE.finditer(line, skip):
            raw = m.group(0).lower()
            words.append(Word(_CANONICAL.get(raw, raw), base + m.start(), base + m.end()))
    return words
