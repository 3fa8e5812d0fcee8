"""Frequency ranking of lines returned by the search provider."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from .parens import DEFAULT_SYNTAX, SyntaxTable
from .query import trim

__all__ = ["CandidateRanker", "CandidateSet"]


@dataclass(slots=True)
class CandidateSet:
    """Occurrence counts per distinct candidate, in first-seen order."""

    counts: Dict[str, int] = field(default_factory=dict)
    total: int = 0

    def add(self, candidate: str) -> None:
        self.counts[candidate] = self.counts.get(candidate, 0) + 1
        self.total += 1

    def ranked(self, threshold: float) -> List[tuple[str, int]]:
        """Candidates with ``count >= threshold * total``, most frequent first."""

        if threshold >= 1.0 or not self.total:
            return []
        minimum = threshold * self.total
        kept = [(text, count) for text, count in self.counts.items() if count >= minimum]
        # sorted() is stable, so ties stay in encounter order.
        return sorted(kept, key=lambda item: item[1], reverse=True)


class CandidateRanker:
    """Tallies raw search output into ranked completion candidates."""

    def __init__(self, syntax: SyntaxTable = DEFAULT_SYNTAX) -> None:
        self.syntax = syntax

    def tally(
        self,
        raw_lines: Sequence[str],
        *,
        multiline: bool = False,
        match: str | None = None,
        delimited: bool = False,
    ) -> CandidateSet:
        candidates = CandidateSet()
        for line in _candidate_lines(raw_lines, multiline=multiline):
            text = trim(line, match=match, delimited=delimited, syntax=self.syntax)
            if text:
                candidates.add(text)
        return candidates

    def rank(
        self,
        raw_lines: Sequence[str],
        *,
        multiline: bool = False,
        threshold: float = 0.0,
        match: str | None = None,
        delimited: bool = False,
    ) -> List[str]:
        candidates = self.tally(raw_lines, multiline=multiline, match=match, delimited=delimited)
        return [text for text, _ in candidates.ranked(threshold)]


def _candidate_lines(raw_lines: Sequence[str], *, multiline: bool) -> Iterable[str]:
    if not multiline:
        yield from raw_lines
        return
    # (match line, following line, separator) triples; only the middle counts.
    for index in range(1, len(raw_lines), 3):
        yield raw_lines[index]
