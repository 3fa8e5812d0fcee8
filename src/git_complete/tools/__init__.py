"""Tool integrations used by the completion engine."""

from .vcs import GitError, GitGrepSearch, GitRepository, GitRootResolver, GrepLine, NotInRepositoryError

__all__ = [
    "GitError",
    "GitGrepSearch",
    "GitRepository",
    "GitRootResolver",
    "GrepLine",
    "NotInRepositoryError",
]
