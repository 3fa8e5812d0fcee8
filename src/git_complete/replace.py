"""Replace the query with a chosen candidate while keeping parens balanced."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .buffer import TextBuffer
from .collaborators import NullReindenter, Reindenter
from .parens import DEFAULT_SYNTAX, ParenDiffResult, SyntaxTable, diff, scan

__all__ = ["BalancedReplacer", "ReplacementResult"]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ReplacementResult:
    """Where the replacement landed and which balance plan was applied."""

    start: int
    end: int
    removed: str
    plan: ParenDiffResult
    cursor: int


class BalancedReplacer:
    """Swap a buffer span for new text and repair the paren balance around it."""

    def __init__(
        self,
        *,
        syntax: SyntaxTable = DEFAULT_SYNTAX,
        reindenter: Reindenter | None = None,
        autopair: bool = True,
    ) -> None:
        self.syntax = syntax
        self.reindenter = reindenter or NullReindenter()
        self.autopair = autopair

    def apply(
        self,
        buffer: TextBuffer,
        start: int,
        end: int,
        replacement: str,
        *,
        blank_line_insensitive: bool = False,
    ) -> ReplacementResult:
        """Replace ``[start, end)`` with ``replacement``.

        Closers opened by the new text are emitted on a following line
        (after a blank line unless ``blank_line_insensitive``).  Closers made
        redundant are removed from the text that follows, or compensated with
        an opener in front of the replacement when they cannot be found.  The
        cursor ends on the first non-blank column of the next line.
        """

        removed = buffer.delete(start, end)
        buffer.insert(start, replacement)
        insertion_end = start + len(replacement)
        region_end = insertion_end

        plan = diff(scan(removed, self.syntax), scan(replacement, self.syntax))
        if not plan.is_empty:
            LOGGER.debug(
                "Balance plan for %r -> %r: missing=%r extra=%r",
                removed,
                replacement,
                plan.missing_text(),
                "".join(token.closer for token in plan.extra_closes),
            )

        newline_emitted = False
        if self.autopair:
            if plan.missing_closes:
                suffix = ("\n" if blank_line_insensitive else "\n\n") + plan.missing_text()
                buffer.insert(insertion_end, suffix)
                region_end += len(suffix)
                newline_emitted = True

            for token in plan.extra_closes:
                follow = buffer.skip_whitespace(region_end, newlines=True)
                if buffer.substring(follow, follow + 1) == token.closer:
                    buffer.delete(follow, follow + 1)
                else:
                    buffer.insert(start, token.opener)
                    insertion_end += 1
                    region_end += 1

        if not newline_emitted:
            buffer.insert(insertion_end, "\n")
            region_end += 1

        next_line = buffer.line_number(insertion_end) + 1
        self.reindenter.reindent(buffer, start, region_end)
        buffer.point = buffer.skip_whitespace(buffer.offset_of_line(next_line))

        return ReplacementResult(
            start=start,
            end=insertion_end,
            removed=removed,
            plan=plan,
            cursor=buffer.point,
        )
