"""Git integration for reading the history of a tracked file."""

from .history import Commit, GitRepo

__all__ = [
    "Commit",
    "GitRepo",
]
