"""Minimal editable text buffer with a cursor."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

_WHITESPACE = " \t"


@dataclass(slots=True)
class TextBuffer:
    """Text plus a cursor offset, edited in place by the completion engine.

    ``mode`` names the language profile of the text (``"python"``,
    ``"emacs-lisp"`` ...) and only matters for line-break insertion.
    """

    text: str = ""
    point: int = 0
    mode: str = ""
    path: Path | None = None

    def __post_init__(self) -> None:
        self.point = self._clamp(self.point)

    @classmethod
    def from_file(cls, path: Path | str, *, mode: str = "") -> "TextBuffer":
        file_path = Path(path)
        text = file_path.read_text(encoding="utf-8")
        return cls(text=text, point=0, mode=mode or mode_for_path(file_path), path=file_path)

    def _clamp(self, offset: int) -> int:
        return max(0, min(offset, len(self.text)))

    # ------------------------------------------------------------- positions
    def line_start(self, offset: int | None = None) -> int:
        position = self._clamp(self.point if offset is None else offset)
        return self.text.rfind("\n", 0, position) + 1

    def line_end(self, offset: int | None = None) -> int:
        position = self._clamp(self.point if offset is None else offset)
        end = self.text.find("\n", position)
        return len(self.text) if end == -1 else end

    def previous_line_start(self, offset: int | None = None) -> int | None:
        start = self.line_start(offset)
        if start == 0:
            return None
        return self.line_start(start - 1)

    def skip_whitespace(self, offset: int, *, newlines: bool = False) -> int:
        chars = _WHITESPACE + ("\n\r" if newlines else "")
        position = self._clamp(offset)
        while position < len(self.text) and self.text[position] in chars:
            position += 1
        return position

    def line_number(self, offset: int | None = None) -> int:
        """Zero-based line index of ``offset``."""

        position = self._clamp(self.point if offset is None else offset)
        return self.text.count("\n", 0, position)

    def offset_of_line(self, line: int) -> int:
        """Offset of the start of zero-based ``line``; clamps past the end."""

        position = 0
        for _ in range(max(line, 0)):
            newline = self.text.find("\n", position)
            if newline == -1:
                return len(self.text)
            position = newline + 1
        return position

    def goto_line(self, line: int, column: int | None = None) -> None:
        start = self.offset_of_line(line)
        end = self.line_end(start)
        self.point = end if column is None else min(start + max(column, 0), end)

    # ---------------------------------------------------------------- editing
    def substring(self, start: int, end: int) -> str:
        return self.text[self._clamp(start) : self._clamp(end)]

    def insert(self, offset: int, value: str) -> None:
        position = self._clamp(offset)
        self.text = self.text[:position] + value + self.text[position:]
        if self.point >= position:
            self.point += len(value)

    def delete(self, start: int, end: int) -> str:
        start, end = self._clamp(start), self._clamp(end)
        if end < start:
            start, end = end, start
        removed = self.text[start:end]
        self.text = self.text[:start] + self.text[end:]
        if self.point >= end:
            self.point -= end - start
        elif self.point > start:
            self.point = start
        return removed


_MODE_BY_SUFFIX = {
    ".el": "emacs-lisp",
    ".lisp": "lisp",
    ".lsp": "lisp",
    ".cl": "lisp",
    ".scm": "scheme",
    ".ss": "scheme",
    ".clj": "clojure",
    ".cljs": "clojure",
    ".rkt": "racket",
    ".py": "python",
    ".pl": "perl",
    ".pm": "perl",
}


def mode_for_path(path: Path) -> str:
    """Guess a mode name from the file suffix; empty when unknown."""

    return _MODE_BY_SUFFIX.get(path.suffix.lower(), "")
