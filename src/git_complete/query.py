"""Query extraction from the text around the cursor."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List

from .buffer import TextBuffer
from .parens import DEFAULT_SYNTAX, ParenRole, SyntaxTable

__all__ = ["Query", "QueryExtractor", "QueryMode", "trim"]

_OMNI_BREAK = re.compile(r"\W+\b")


class QueryMode(str, Enum):
    """Where the query text was taken from."""

    SAME_LINE = "SAME_LINE"
    NEXT_LINE = "NEXT_LINE"
    OMNI = "OMNI"


@dataclass(frozen=True, slots=True)
class Query:
    """Search text and the buffer offset it starts at."""

    text: str
    anchor: int
    mode: QueryMode

    @property
    def is_empty(self) -> bool:
        return not self.text


def _up_list(text: str, start: int, syntax: SyntaxTable) -> int | None:
    """Offset just past the closer ending the group that contains ``start``."""

    stack: List[str] = []
    index = start
    while index < len(text):
        char = text[index]
        if syntax.is_escape(char):
            index += 2
            continue
        token = syntax.token(char)
        if token is not None:
            if token.role is ParenRole.OPEN:
                stack.append(token.partner)
            elif stack:
                if stack[-1] != char:
                    return None
                stack.pop()
            else:
                return index + 1
        index += 1
    return None


def trim(
    text: str,
    match: str | None = None,
    delimited: bool = False,
    syntax: SyntaxTable = DEFAULT_SYNTAX,
) -> str:
    """Normalise a query or candidate line.

    Surrounding whitespace is always removed.  With ``match`` everything
    before its first occurrence is dropped, and the result is empty when it
    does not occur.  With ``delimited`` the text is cut right after the
    closer that leaves the group the match sits in; when no such closer
    exists the tail is kept.
    """

    value = text.strip()
    offset = 0
    if match is not None:
        index = value.find(match)
        if index < 0:
            return ""
        value = value[index:]
        offset = len(match)
    if delimited:
        cut = _up_list(value, offset, syntax)
        if cut is not None:
            value = value[:cut]
    return value.strip()


class QueryExtractor:
    """Builds :class:`Query` values from a buffer and a cursor offset."""

    def __init__(self, syntax: SyntaxTable = DEFAULT_SYNTAX) -> None:
        self.syntax = syntax

    def extract(
        self,
        buffer: TextBuffer,
        cursor: int | None = None,
        *,
        omni_from: int | None = None,
        previous_query: str | None = None,
    ) -> Query:
        """Return the query for ``cursor``.

        A cursor preceded only by indentation completes into a fresh line, so
        the previous line becomes the query.  ``omni_from`` forces a
        shortened query starting at that offset.

        ``previous_query`` is for callers chaining completions themselves:
        a same-line query then starts at that text instead of the line's
        first non-blank character.  The engine does not pass it.
        """

        cursor = buffer.point if cursor is None else cursor
        line_start = buffer.line_start(cursor)

        if omni_from is not None:
            raw = buffer.substring(omni_from, cursor)
            text = trim(raw, syntax=self.syntax)
            return Query(text=text, anchor=omni_from + _leading(raw), mode=QueryMode.OMNI)

        prefix = buffer.substring(line_start, cursor)
        if not prefix.strip():
            previous = buffer.previous_line_start(cursor)
            if previous is None:
                return Query(text="", anchor=cursor, mode=QueryMode.NEXT_LINE)
            raw = buffer.substring(previous, buffer.line_end(previous))
            text = trim(raw, syntax=self.syntax)
            return Query(text=text, anchor=previous + _leading(raw), mode=QueryMode.NEXT_LINE)

        text = trim(prefix, match=previous_query, syntax=self.syntax)
        anchor = line_start + (prefix.find(text) if text else _leading(prefix))
        return Query(text=text, anchor=anchor, mode=QueryMode.SAME_LINE)

    def shorten(self, buffer: TextBuffer, anchor: int, cursor: int | None = None) -> int | None:
        """Next omni anchor after ``anchor``, or ``None`` when the query cannot shrink."""

        cursor = buffer.point if cursor is None else cursor
        if anchor >= cursor:
            return None
        found = _OMNI_BREAK.search(buffer.text, anchor, cursor)
        if found is None or found.end() >= cursor:
            return None
        return found.end()


def _leading(raw: str) -> int:
    return len(raw) - len(raw.lstrip())
