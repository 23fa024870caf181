from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

import pytest
from git import Actor, Repo

AUTHOR = Actor("Test Author", "author@example.com")
BASE_TIME = 1_700_000_000


class RepoBuilder:
    """Creates commits with explicit, increasing committer dates."""

    def __init__(self, root: Path):
        self.root = root
        self.repo = Repo.init(root)
        self._tick = 0

    def commit(self, files: dict, message: str, parents: Sequence | None = None, head: bool = True):
        for rel_path, content in files.items():
            target = self.root / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        self.repo.index.add(list(files))

        self._tick += 1
        date = f"{BASE_TIME + self._tick * 60} +0000"
        return self.repo.index.commit(
            message,
            parent_commits=list(parents) if parents is not None else None,
            head=head,
            author=AUTHOR,
            committer=AUTHOR,
            author_date=date,
            commit_date=date,
        )


@pytest.fixture
def make_repo(tmp_path) -> Callable[[], RepoBuilder]:
    def factory() -> RepoBuilder:
        return RepoBuilder(tmp_path / "repo")

    return factory
