"""Minimal git helpers
The helpers below locate the repository enclosing a file and run literal
``git grep`` searches over its tracked content.
"""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

LOGGER = logging.getLogger(__name__)

GROUP_SEPARATOR = "--"
_GREP_LINE = re.compile(r"^(?P<number>\d+)(?P<sign>[:-])(?P<text>.*)$", re.DOTALL)


class GitError(RuntimeError):
    """Raised when a git command fails or the repository cannot be used."""


class NotInRepositoryError(GitError):
    """Raised when no git repository encloses the requested path."""


@dataclass(slots=True)
class GrepLine:
    """One line of ``git grep -n`` output."""

    number: int
    text: str
    is_match: bool


class GitRepository:
    """Lightweight wrapper around ``git`` commands."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).resolve()
        if not (self.root / ".git").exists():
            raise NotInRepositoryError(f"Not a git repository: {self.root}")

    @classmethod
    def discover(cls, start: Path | str | None = None) -> "GitRepository":
        """Locate the nearest git repository starting from ``start``."""

        path = Path(start or Path.cwd()).resolve()
        if path.is_file():
            path = path.parent
        for candidate in (path, *path.parents):
            if (candidate / ".git").exists():
                return cls(candidate)
        raise NotInRepositoryError(f"Unable to locate a git repository from {path}")

    # ------------------------------------------------------------------ git IO
    def _run_git(self, args: Sequence[str], *, check: bool = True) -> subprocess.CompletedProcess[str]:
        command = ["git", *args]
        process = subprocess.run(
            command,
            cwd=self.root,
            capture_output=True,
            text=False,
            check=False,
        )
        stdout = process.stdout.decode("utf-8", errors="replace") if process.stdout else ""
        stderr = process.stderr.decode("utf-8", errors="replace") if process.stderr else ""
        result = subprocess.CompletedProcess(process.args, process.returncode, stdout, stderr)
        if check and result.returncode != 0:
            message = result.stderr.strip() or result.stdout.strip() or "unknown git error"
            raise GitError(f"git {' '.join(args)} failed: {message}")
        return result

    # -------------------------------------------------------------------- grep
    def grep_lines(self, query: str, *, context: bool = False) -> List[List[GrepLine]]:
        """Run a literal ``git grep`` and return the output split into hunks.

        Each hunk is a run of consecutive lines from one file.  Exit status 1
        means nothing matched and yields an empty list.
        """

        args: List[str] = ["grep", "-F", "-I", "-h", "-n", "--no-color"]
        if context:
            args.append("-A1")
        args.extend(["-e", query])

        result = self._run_git(args, check=False)
        if result.returncode == 1 and not result.stderr.strip():
            return []
        if result.returncode != 0:
            message = result.stderr.strip() or result.stdout.strip() or "unknown git error"
            raise GitError(f"git grep failed: {message}")
        return _parse_grep_output(result.stdout)

    def grep(self, query: str, *, context: bool = False) -> List[str]:
        """Return matching lines for ``query``.

        With ``context`` every match contributes a ``(match, following,
        separator)`` triple; the following line is empty at the end of a file.
        """

        hunks = self.grep_lines(query, context=context)
        lines: List[str] = []
        for hunk in hunks:
            for index, entry in enumerate(hunk):
                if not entry.is_match:
                    continue
                if not context:
                    lines.append(entry.text)
                    continue
                following = ""
                if index + 1 < len(hunk) and hunk[index + 1].number == entry.number + 1:
                    following = hunk[index + 1].text
                lines.extend([entry.text, following, GROUP_SEPARATOR])
        LOGGER.debug("git grep %r (context=%s) -> %d line(s)", query, context, len(lines))
        return lines


def _parse_grep_output(payload: str) -> List[List[GrepLine]]:
    hunks: List[List[GrepLine]] = []
    current: List[GrepLine] = []
    for raw in payload.split("\n"):
        if raw == GROUP_SEPARATOR:
            if current:
                hunks.append(current)
            current = []
            continue
        match = _GREP_LINE.match(raw)
        if match is None:
            continue
        entry = GrepLine(
            number=int(match.group("number")),
            text=match.group("text").rstrip("\r"),
            is_match=match.group("sign") == ":",
        )
        if current and entry.number != current[-1].number + 1:
            hunks.append(current)
            current = []
        current.append(entry)
    if current:
        hunks.append(current)
    return hunks


class GitRootResolver:
    """Resolves the repository root of a file through :meth:`GitRepository.discover`."""

    def resolve(self, path: Path | str | None) -> Path:
        return GitRepository.discover(path).root


class GitGrepSearch:
    """Search provider backed by ``git grep`` in the given root."""

    def search(self, query: str, *, context: bool, root: Path) -> List[str]:
        return GitRepository(root).grep(query, context=context)


__all__ = [
    "GROUP_SEPARATOR",
    "GitError",
    "GitGrepSearch",
    "GitRepository",
    "GitRootResolver",
    "GrepLine",
    "NotInRepositoryError",
]
