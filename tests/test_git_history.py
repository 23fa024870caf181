from __future__ import annotations

from datetime import timedelta

import pytest
from git import Repo
from git.exc import GitCommandError

from nodetrail.errors import ContentNotFoundError, RepositoryError
from nodetrail.git.history import GitRepo


def test_list_commits_newest_first_for_file_only(make_repo) -> None:
    builder = make_repo()
    first = builder.commit({"app.py": "x = 1\n"}, "add app")
    builder.commit({"README": "docs\n"}, "docs only")
    third = builder.commit({"app.py": "x = 2\n"}, "bump x")

    commits = GitRepo(builder.root).list_commits("app.py")

    assert [c.hexsha for c in commits] == [third.hexsha, first.hexsha]
    assert commits[0].title == "bump x"
    assert commits[0].parents
    assert commits[0].committed_at > commits[1].committed_at
    assert commits[0].committed_at.utcoffset() == timedelta(0)


def test_list_commits_wraps_log_failures(make_repo, monkeypatch) -> None:
    builder = make_repo()
    builder.commit({"app.py": "x = 1\n"}, "add app")
    git_repo = GitRepo(builder.root)

    def failing_log(*args, **kwargs):
        raise GitCommandError(["git", "rev-list"], 128, b"fatal: bad object")

    monkeypatch.setattr(git_repo.repo, "iter_commits", failing_log)

    with pytest.raises(RepositoryError, match="Can't read the log of app.py"):
        git_repo.list_commits("app.py")


def test_list_commits_skips_merges(make_repo) -> None:
    builder = make_repo()
    base = builder.commit({"app.py": "x = 1\n"}, "base")
    side = builder.commit({"app.py": "x = 2\n"}, "side", parents=[base], head=False)
    main = builder.commit({"app.py": "x = 3\n"}, "main", parents=[base])
    merge = builder.commit({"app.py": "x = 4\n"}, "merge", parents=[main, side])

    commits = GitRepo(builder.root).list_commits("app.py")
    hexshas = [c.hexsha for c in commits]

    assert merge.hexsha not in hexshas
    assert hexshas == [main.hexsha, side.hexsha, base.hexsha]
    assert not any(c.is_merge for c in commits)


def test_fetch_content_returns_bytes_at_commit(make_repo) -> None:
    builder = make_repo()
    first = builder.commit({"app.py": "x = 1\n"}, "add app")
    builder.commit({"app.py": "x = 2\n"}, "bump x")

    git_repo = GitRepo(builder.root)
    commit = git_repo.list_commits("app.py")[-1]

    assert commit.hexsha == first.hexsha
    assert git_repo.fetch_content(commit, "app.py") == b"x = 1\n"


def test_fetch_content_missing_file(make_repo) -> None:
    builder = make_repo()
    builder.commit({"README": "docs\n"}, "docs")
    builder.commit({"app.py": "x = 1\n"}, "add app")

    git_repo = GitRepo(builder.root)
    head = git_repo.head_commit()
    older = git_repo.list_commits("README")[0]

    assert git_repo.fetch_content(head, "app.py") == b"x = 1\n"
    with pytest.raises(ContentNotFoundError):
        git_repo.fetch_content(older, "app.py")


def test_not_a_repository(tmp_path) -> None:
    with pytest.raises(RepositoryError):
        GitRepo(tmp_path)


def test_missing_path(tmp_path) -> None:
    with pytest.raises(RepositoryError):
        GitRepo(tmp_path / "nope")


def test_repository_without_head(tmp_path) -> None:
    Repo.init(tmp_path / "empty")

    git_repo = GitRepo(tmp_path / "empty")

    with pytest.raises(RepositoryError):
        git_repo.list_commits("app.py")
