"""Paren scanning and diffing used to keep completions balanced.

Characters are classified by a :class:`SyntaxTable` as escape, open, close or
plain text.  Nothing beyond that single-character classification is
understood, so strings and comments of the host language are not special.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Sequence, Tuple

__all__ = [
    "DEFAULT_SYNTAX",
    "ParenDiffResult",
    "ParenRole",
    "ParenState",
    "ParenToken",
    "SyntaxTable",
    "diff",
    "scan",
]


class ParenRole(str, Enum):
    """Whether a token opens or closes a group."""

    OPEN = "OPEN"
    CLOSE = "CLOSE"


@dataclass(frozen=True, slots=True)
class ParenToken:
    """A single paren-like character together with its partner."""

    char: str
    partner: str
    role: ParenRole

    @property
    def closer(self) -> str:
        return self.partner if self.role is ParenRole.OPEN else self.char

    @property
    def opener(self) -> str:
        return self.char if self.role is ParenRole.OPEN else self.partner


@dataclass(slots=True)
class SyntaxTable:
    """Per-character classification consulted by :func:`scan`."""

    pairs: Mapping[str, str] = field(default_factory=lambda: {"(": ")", "[": "]", "{": "}"})
    escapes: str = "\\"
    _openers: Dict[str, str] = field(init=False, repr=False)
    _closers: Dict[str, str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._openers = dict(self.pairs)
        self._closers = {close: open_ for open_, close in self.pairs.items()}

    def token(self, char: str) -> ParenToken | None:
        """Return the token for ``char`` or ``None`` when it is plain text."""

        if char in self._openers:
            return ParenToken(char, self._openers[char], ParenRole.OPEN)
        if char in self._closers:
            return ParenToken(char, self._closers[char], ParenRole.CLOSE)
        return None

    def is_escape(self, char: str) -> bool:
        return char in self.escapes


DEFAULT_SYNTAX = SyntaxTable()


@dataclass(frozen=True, slots=True)
class ParenState:
    """Unbalanced parens left over after scanning a string.

    ``unmatched_opens`` runs from the outermost open to the innermost one.
    ``unmatched_closes`` keeps the order the stray closers were encountered.
    """

    unmatched_opens: Tuple[ParenToken, ...] = ()
    unmatched_closes: Tuple[ParenToken, ...] = ()

    @property
    def balanced(self) -> bool:
        return not self.unmatched_opens and not self.unmatched_closes


@dataclass(frozen=True, slots=True)
class ParenDiffResult:
    """Balance plan produced by :func:`diff`.

    ``missing_closes`` lists the closers to emit after the inserted text, in
    emission order.  ``extra_closes`` lists closers that should now be
    removed from the text following the insertion; each one that cannot be
    found is compensated by inserting its opener in front of the edit.
    """

    missing_closes: Tuple[ParenToken, ...] = ()
    extra_closes: Tuple[ParenToken, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.missing_closes and not self.extra_closes

    def missing_text(self) -> str:
        return "".join(token.closer for token in self.missing_closes)


def scan(text: str, syntax: SyntaxTable = DEFAULT_SYNTAX) -> ParenState:
    """Classify ``text`` into unmatched opens and closes.

    A closer only matches the innermost pending open.  Any other closer is
    recorded as unmatched even when an outer open would accept it.
    """

    stack: List[ParenToken] = []
    closes: List[ParenToken] = []
    chars = iter(text)
    for char in chars:
        if syntax.is_escape(char):
            next(chars, None)
            continue
        token = syntax.token(char)
        if token is None:
            continue
        if token.role is ParenRole.OPEN:
            stack.append(token)
        elif stack and stack[-1].partner == char:
            stack.pop()
        else:
            closes.append(token)
    return ParenState(unmatched_opens=tuple(stack), unmatched_closes=tuple(closes))


def _split_common(
    before: Sequence[ParenToken],
    after: Sequence[ParenToken],
) -> Tuple[Tuple[ParenToken, ...], Tuple[ParenToken, ...]]:
    index = 0
    while index < len(before) and index < len(after) and before[index].char == after[index].char:
        index += 1
    return tuple(before[index:]), tuple(after[index:])


def diff(before: ParenState, after: ParenState) -> ParenDiffResult:
    """Compare the paren state of removed text with that of inserted text."""

    deleted_opens, added_opens = _split_common(before.unmatched_opens, after.unmatched_opens)
    deleted_closes, added_closes = _split_common(before.unmatched_closes, after.unmatched_closes)

    # Opens close innermost first, so both open lists are reversed.
    missing = tuple(reversed(added_opens)) + deleted_closes
    extra = tuple(reversed(deleted_opens)) + added_closes
    return ParenDiffResult(missing_closes=missing, extra_closes=extra)
