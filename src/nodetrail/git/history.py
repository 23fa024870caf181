"""Git history extraction for a single tracked file."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Tuple

from git import Repo
from git.exc import BadName, GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from ..errors import ContentNotFoundError, RepositoryError


@dataclass(slots=True, frozen=True)
class Commit:
    """Metadata about a single commit."""

    hexsha: str
    parents: Tuple[str, ...]
    author: str
    committed_at: datetime
    message: str

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    @property
    def short_sha(self) -> str:
        return self.hexsha[:8]

    @property
    def title(self) -> str:
        """First line of the commit message."""
        lines = self.message.strip().splitlines()
        return lines[0] if lines else ""


def _to_commit(commit) -> Commit:
    return Commit(
        hexsha=commit.hexsha,
        parents=tuple(parent.hexsha for parent in commit.parents),
        author=str(commit.author),
        committed_at=commit.committed_datetime,
        message=commit.message.strip(),
    )


class GitRepo:
    """Wrapper around gitpython for reading the history of one file."""

    def __init__(self, repo_path: Path):
        self.repo_path = Path(repo_path).resolve()
        try:
            self.repo = Repo(self.repo_path)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise RepositoryError(f"Not a valid git repository: {repo_path}") from e

    def head_commit(self) -> Commit:
        """Resolve HEAD to a commit."""
        try:
            return _to_commit(self.repo.head.commit)
        except ValueError as e:
            raise RepositoryError(f"Can't resolve HEAD in {self.repo_path}: {e}") from e

    def list_commits(self, file_path: str) -> List[Commit]:
        """List the non-merge commits touching ``file_path``.

        Parameters
        ----------
        file_path:
            Path of the file relative to the repository root

        Returns
        -------
        Commits ordered by committer time, newest first
        """
        head = self.head_commit()

        commits: List[Commit] = []
        try:
            for commit in self.repo.iter_commits(head.hexsha, paths=file_path, date_order=True):
                info = _to_commit(commit)
                # skip merge commits
                if info.is_merge:
                    continue
                commits.append(info)
        except GitCommandError as e:
            raise RepositoryError(f"Can't read the log of {file_path}: {e}") from e

        return commits

    def fetch_content(self, commit: Commit, file_path: str) -> bytes:
        """Retrieve the raw bytes of ``file_path`` as of ``commit``."""
        try:
            tree = self.repo.commit(commit.hexsha).tree
        except (BadName, ValueError) as e:
            raise RepositoryError(f"Can't read commit {commit.hexsha}: {e}") from e

        try:
            blob = tree / file_path
        except KeyError as e:
            raise ContentNotFoundError(
                f"File {file_path} not found in commit {commit.hexsha}"
            ) from e
        return blob.data_stream.read()
