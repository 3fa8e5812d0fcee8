"""Interfaces of the collaborators the completion engine drives.

Searching, picking and re-indenting are owned by the embedding application.
The engine only relies on the protocols below; simple non-interactive
implementations are provided for the CLI and for tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Protocol, Sequence

from .buffer import TextBuffer

__all__ = [
    "CandidatePicker",
    "CopyIndentReindenter",
    "FirstCandidatePicker",
    "IndexPicker",
    "NullReindenter",
    "Reindenter",
    "RootResolver",
    "SearchProvider",
]


class SearchProvider(Protocol):
    def search(self, query: str, *, context: bool, root: Path) -> List[str]:
        """Return matching lines for a literal ``query``.

        With ``context`` the result is a flat list of ``(match, following,
        separator)`` triples.
        """
        ...


class CandidatePicker(Protocol):
    def pick(self, candidates: Sequence[str]) -> str | None:
        """Return the chosen candidate, or ``None`` when the user cancels."""
        ...


class Reindenter(Protocol):
    def reindent(self, buffer: TextBuffer, start: int, end: int) -> None:
        ...


class RootResolver(Protocol):
    def resolve(self, path: Path | str | None) -> Path:
        """Return the repository root enclosing ``path``."""
        ...


class FirstCandidatePicker:
    """Always takes the best ranked candidate."""

    def pick(self, candidates: Sequence[str]) -> str | None:
        return candidates[0] if candidates else None


class IndexPicker:
    """Takes the candidate at a fixed rank; cancels when it does not exist."""

    def __init__(self, index: int) -> None:
        self.index = index

    def pick(self, candidates: Sequence[str]) -> str | None:
        if 0 <= self.index < len(candidates):
            return candidates[self.index]
        return None


class NullReindenter:
    def reindent(self, buffer: TextBuffer, start: int, end: int) -> None:
        return None


class CopyIndentReindenter:
    """Gives every line after the first one in the region the first line's indentation."""

    def reindent(self, buffer: TextBuffer, start: int, end: int) -> None:
        first_line = buffer.line_number(start)
        last_line = buffer.line_number(end)
        head = buffer.line_start(start)
        indent = buffer.substring(head, buffer.skip_whitespace(head))
        for line in range(first_line + 1, last_line + 1):
            line_start = buffer.offset_of_line(line)
            current_end = buffer.skip_whitespace(line_start)
            if buffer.substring(line_start, current_end) == indent:
                continue
            buffer.delete(line_start, current_end)
            buffer.insert(line_start, indent)
