# matcher.py
# SPDX-License-Identifier: MIT
"""Fuzzy classification of license text against the reference corpus.

Each reference text is aligned with the input word sequence using
:class:`difflib.SequenceMatcher`. Short aligned runs are discarded as noise
and the remaining runs are grouped into clusters separated by large input
gaps; the densest cluster becomes a candidate match. A reference that is
found again to the left or right of a hit is matched again, so a file that
repeats a license reports each copy.

Candidates that cover the same stretch of text compete on
``percent * precision``; all candidates within the tie tolerance of the best
are kept. Aggregate coverage is measured on the union of kept spans, so two
licenses placed back to back add up to ~100% rather than being averaged.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from difflib import SequenceMatcher

from .config import MatcherConfig
from .corpus import CorpusEntry, LicenseCorpus, load_builtin_corpus
from .decode import decode_bytes
from .log import get_logger
from .normalize import Word, tokenize
from .types import Coverage, Match

__all__ = ["TextMatcher", "classify"]

log = get_logger(__name__)

# Spans sharing at least this fraction of the shorter span compete.
_OVERLAP_FRACTION = 0.5


@dataclass(slots=True, frozen=True)
class _Candidate:
    entry: CorpusEntry
    percent: float
    precision: float
    lo: int  # first covered input word
    hi: int  # one past the last covered input word

    @property
    def score(self) -> float:
        return self.percent * self.precision / 100.0

    def overlaps(self, other: _Candidate) -> bool:
        shared = min(self.hi, other.hi) - max(self.lo, other.lo)
        if shared <= 0:
            return False
        shorter = min(self.hi - self.lo, other.hi - other.lo)
        return shared >= shorter * _OVERLAP_FRACTION


class TextMatcher:
    """Classify text against a :class:`LicenseCorpus`.

    The matcher holds no mutable state; one instance may be shared across
    threads or pickled into worker processes.
    """

    __slots__ = ("corpus", "config")

    def __init__(self, corpus: LicenseCorpus | None = None, config: MatcherConfig | None = None):
        self.corpus = corpus if corpus is not None else load_builtin_corpus()
        self.config = config or MatcherConfig()
        self.config.validate()

    def __getstate__(self):
        return {"corpus": self.corpus, "config": self.config}

    def __setstate__(self, state) -> None:
        self.corpus = state["corpus"]
        self.config = state["config"]

    def classify(self, content: bytes | str) -> Coverage:
        """Return the coverage of ``content`` by known licenses.

        Args:
            content (bytes | str): Raw file bytes or already decoded text.

        Returns:
            Coverage: Matches ordered by position and the share of the
            text they cover. ``Coverage()`` when nothing reaches the
            match threshold.
        """
        text = decode_bytes(content).text if isinstance(content, bytes) else content
        words = tokenize(text)
        if not words:
            return Coverage()
        tokens = [w.text for w in words]

        candidates: list[_Candidate] = []
        for entry in self.corpus:
            candidates.extend(self._align(entry, tokens, 0, len(tokens)))
        kept = self._resolve(candidates)
        if not kept:
            return Coverage()

        kept.sort(key=lambda c: (c.lo, -c.score, c.entry.name))
        matches = tuple(self._to_match(c, words) for c in kept)
        percent = _union_length([(c.lo, c.hi) for c in kept]) * 100.0 / len(tokens)
        return Coverage(percent=round(min(percent, 100.0), 4), matches=matches)

    def _align(self, entry: CorpusEntry, tokens: list[str], lo: int, hi: int) -> list[_Candidate]:
        """Find every copy of ``entry`` in ``tokens[lo:hi]``.

        Alignment runs over a sliding window a little over twice the
        reference length, so each step costs the same however long the input
        is. Regions left of a hit go on a worklist; the scan resumes right
        after the hit.
        """
        cfg = self.config
        ref_len = len(entry.words)
        needed = math.ceil(ref_len * cfg.match_threshold / 100.0)
        width = 2 * ref_len + 2 * cfg.max_gap
        found: list[_Candidate] = []
        regions = [(lo, hi)]
        while regions:
            lo, hi = regions.pop()
            while hi - lo >= needed:
                stop = min(hi, lo + width)
                hit = self._best_cluster(entry, tokens, lo, stop)
                if hit is None:
                    if stop == hi:
                        break
                    lo += ref_len
                    continue
                start, end, matched = hit
                if stop < hi and end > stop - cfg.max_gap and start > lo:
                    # the copy may run past the window; realign from its start
                    if start - lo >= needed:
                        regions.append((lo, start))
                    lo = start
                    continue
                percent = matched * 100.0 / ref_len
                found.append(_Candidate(entry, percent, matched * 100.0 / (end - start), start, end))
                log.debug("%s matched %.1f%% at words [%d, %d)", entry.name, percent, start, end)
                if start - lo >= needed:
                    regions.append((lo, start))
                lo = end
        return found

    def _best_cluster(
        self, entry: CorpusEntry, tokens: list[str], lo: int, hi: int
    ) -> tuple[int, int, int] | None:
        """Return ``(start, end, matched)`` of the densest aligned cluster, or None below the threshold."""
        cfg = self.config
        ref = entry.words
        sm = SequenceMatcher(None, ref, tokens[lo:hi], autojunk=False)
        min_run = min(cfg.min_run, len(ref))
        blocks = [b for b in sm.get_matching_blocks() if b.size >= min_run]
        if not blocks:
            return None

        clusters: list[list] = [[blocks[0]]]
        for block in blocks[1:]:
            prev = clusters[-1][-1]
            if block.b - (prev.b + prev.size) > cfg.max_gap:
                clusters.append([block])
            else:
                clusters[-1].append(block)
        best = max(clusters, key=lambda c: sum(b.size for b in c))

        matched = sum(b.size for b in best)
        if matched * 100.0 / len(ref) < cfg.match_threshold:
            return None
        return lo + best[0].b, lo + best[-1].b + best[-1].size, matched

    def _resolve(self, candidates: list[_Candidate]) -> list[_Candidate]:
        """Drop candidates clearly beaten by an overlapping, better match."""
        ranked = sorted(candidates, key=lambda c: (-c.score, c.entry.name, c.lo))
        kept: list[_Candidate] = []
        for cand in ranked:
            rivals = [k for k in kept if k.overlaps(cand)]
            if rivals and cand.score < max(k.score for k in rivals) - self.config.tie_tolerance:
                continue
            kept.append(cand)
        return kept

    @staticmethod
    def _to_match(cand: _Candidate, words: list[Word]) -> Match:
        return Match(
            name=cand.entry.name,
            type=cand.entry.type,
            percent=round(cand.percent, 4),
            start=words[cand.lo].start,
            end=words[cand.hi - 1].end,
        )


def _union_length(spans: list[tuple[int, int]]) -> int:
    total = 0
    cur_lo = cur_hi = -1
    for lo, hi in sorted(spans):
        if lo > cur_hi:
            total += cur_hi - cur_lo
            cur_lo, cur_hi = lo, hi
        else:
            cur_hi = max(cur_hi, hi)
    total += cur_hi - cur_lo
    return total


def classify(content: bytes | str) -> Coverage:
    """Classify ``content`` with the bundled corpus and default settings."""
    return TextMatcher().classify(content)
