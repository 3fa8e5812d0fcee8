"""Completion state machine: query, search, rank, pick, replace, repeat."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List

from .buffer import TextBuffer
from .collaborators import (
    CandidatePicker,
    FirstCandidatePicker,
    Reindenter,
    RootResolver,
    SearchProvider,
)
from .config import CompletionConfig
from .query import Query, QueryExtractor, QueryMode
from .ranking import CandidateRanker
from .replace import BalancedReplacer
from .tools.vcs import GitError, GitGrepSearch, GitRootResolver

__all__ = [
    "NO_COMPLETIONS_MESSAGE",
    "CompletionEngine",
    "CompletionOutcome",
    "CompletionResult",
    "Session",
]

LOGGER = logging.getLogger(__name__)

NO_COMPLETIONS_MESSAGE = "No completions found."


class CompletionOutcome(str, Enum):
    """Terminal states of a completion run."""

    COMPLETED = "COMPLETED"
    EMPTY_QUERY = "EMPTY_QUERY"
    NO_CANDIDATES = "NO_CANDIDATES"
    CANCELLED = "CANCELLED"
    NOT_IN_REPOSITORY = "NOT_IN_REPOSITORY"


@dataclass(slots=True)
class CompletionResult:
    """What a completion run did to the buffer."""

    outcome: CompletionOutcome
    inserted: List[str] = field(default_factory=list)
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is CompletionOutcome.COMPLETED


@dataclass(slots=True)
class Session:
    """Per-invocation context; the repository root is resolved at most once."""

    file_path: Path | None = None
    resolver: RootResolver = field(default_factory=GitRootResolver)
    root: Path | None = None

    @property
    def repo_root(self) -> Path:
        if self.root is None:
            self.root = self.resolver.resolve(self.file_path)
            LOGGER.debug("Resolved repository root %s", self.root)
        return self.root


class CompletionEngine:
    """Drives one completion from the cursor of a :class:`TextBuffer`."""

    def __init__(
        self,
        *,
        config: CompletionConfig | None = None,
        search: SearchProvider | None = None,
        picker: CandidatePicker | None = None,
        reindenter: Reindenter | None = None,
    ) -> None:
        self.config = config or CompletionConfig()
        syntax = self.config.syntax_table()
        self.search = search or GitGrepSearch()
        self.picker = picker or FirstCandidatePicker()
        self.extractor = QueryExtractor(syntax)
        self.ranker = CandidateRanker(syntax)
        self.replacer = BalancedReplacer(
            syntax=syntax,
            reindenter=reindenter,
            autopair=self.config.enable_autopair,
        )

    def complete(
        self,
        buffer: TextBuffer,
        session: Session | None = None,
        *,
        omni: bool | None = None,
        repeat: bool | None = None,
    ) -> CompletionResult:
        """Complete at ``buffer.point`` and keep completing following lines.

        Every failure ends in a :class:`CompletionOutcome`; nothing is raised.
        """

        session = session or Session(file_path=buffer.path)
        try:
            root = session.repo_root
        except GitError as error:
            LOGGER.debug("Repository lookup failed: %s", error)
            return CompletionResult(CompletionOutcome.NOT_IN_REPOSITORY, message=str(error))

        omni_enabled = self.config.enable_omni_completion if omni is None else omni
        repeat_enabled = self.config.repeat_completion if repeat is None else repeat
        blank_line_insensitive = self.config.is_lispy(buffer.mode)
        threshold = self.config.threshold
        omni_from: int | None = None
        inserted: List[str] = []

        while True:
            query = self.extractor.extract(buffer, omni_from=omni_from)
            if query.is_empty:
                LOGGER.debug("Empty query at offset %d", buffer.point)
                return self._finish(inserted, CompletionOutcome.EMPTY_QUERY)

            candidates = self.candidates(query, root, threshold)
            if not candidates:
                if omni_enabled and query.mode is not QueryMode.NEXT_LINE:
                    next_from = self.extractor.shorten(buffer, query.anchor, buffer.point)
                    if next_from is not None:
                        LOGGER.debug("Shortening query %r at offset %d", query.text, next_from)
                        omni_from = next_from
                        continue
                return self._finish(inserted, CompletionOutcome.NO_CANDIDATES)

            choice = self.picker.pick(candidates)
            if choice is None:
                return CompletionResult(CompletionOutcome.CANCELLED, inserted=inserted)

            start = buffer.point if query.mode is QueryMode.NEXT_LINE else query.anchor
            self.replacer.apply(
                buffer,
                start,
                buffer.point,
                choice,
                blank_line_insensitive=blank_line_insensitive,
            )
            inserted.append(choice)

            if not repeat_enabled or len(inserted) > self.config.max_continuations:
                return CompletionResult(CompletionOutcome.COMPLETED, inserted=inserted)
            LOGGER.debug("Continuing completion after %r", choice)
            threshold = self.config.multiline_threshold
            omni_enabled = False
            omni_from = None

    def candidates(self, query: Query, root: Path, threshold: float) -> List[str]:
        """Search for ``query`` below ``root`` and rank the hits."""

        multiline = query.mode is QueryMode.NEXT_LINE
        try:
            raw_lines = self.search.search(query.text, context=multiline, root=root)
        except GitError as error:
            LOGGER.warning("Search for %r failed: %s", query.text, error)
            return []

        omni = query.mode is QueryMode.OMNI
        ranked = self.ranker.rank(
            raw_lines,
            multiline=multiline,
            threshold=threshold,
            match=query.text if omni else None,
            delimited=omni,
        )
        LOGGER.debug("Query %r (%s): %d candidate(s)", query.text, query.mode.value, len(ranked))
        return ranked

    @staticmethod
    def _finish(inserted: List[str], outcome: CompletionOutcome) -> CompletionResult:
        if inserted:
            return CompletionResult(CompletionOutcome.COMPLETED, inserted=inserted)
        message = NO_COMPLETIONS_MESSAGE if outcome is CompletionOutcome.NO_CANDIDATES else None
        return CompletionResult(outcome, message=message)
