"""Pytest configuration and fixtures for gitviz tests."""

from pathlib import Path

import pytest
from git import Actor, Repo

from tests.helpers import basic_line, header_line

ALICE = Actor("Alice", "alice@example.com")
BOB = Actor("Bob", "bob@example.com")


@pytest.fixture
def basic_log() -> str:
    """Three commits, most recent first."""
    return "\n".join(
        [
            basic_line("c" * 40, "A", "a@example.com", "2025-01-02", "b" * 40),
            basic_line("b" * 40, "B", "b@example.com", "2025-01-01", "a" * 40),
            basic_line("a" * 40, "A", "a@example.com", "2025-01-01"),
        ]
    )


@pytest.fixture
def numstat_log() -> str:
    """Three commits with numstat lines, including a binary file."""
    return "\n".join(
        [
            header_line("c" * 40, "A", "a@example.com", "2025-01-02", "b" * 40),
            "",
            "5\t1\tsrc/a.js",
            "-\t-\tassets/logo.png",
            header_line("b" * 40, "B", "b@example.com", "2025-01-01", "a" * 40),
            "",
            "2\t0\tsrc/b.js",
            "1\t1\tREADME.md",
            header_line("a" * 40, "A", "a@example.com", "2025-01-01"),
            "",
            "10\t0\tsrc/a.js",
            "3\t0\tREADME.md",
        ]
    )


def _write(repo_path: Path, relative: str, content: str) -> str:
    target = repo_path / relative
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content)
    return str(target)


def _commit(repo: Repo, message: str, author: Actor, when: str, paths, parents=None):
    repo.index.add(paths)
    return repo.index.commit(
        message,
        author=author,
        committer=author,
        author_date=when,
        commit_date=when,
        parent_commits=parents,
    )


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """
    Create a small repository on disk.

    main:    c1 (Alice) - c2 (Bob) - c4 (Bob) - c5 merge (Alice)
    feature:                \\- c3 (Alice) ----/
    """
    repo_path = tmp_path / "demo"
    repo_path.mkdir()
    repo = Repo.init(repo_path)

    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")

    _commit(
        repo,
        "Initial commit",
        ALICE,
        "2025-01-01T12:00:00",
        [
            _write(repo_path, "README.md", "# Demo\n"),
            _write(repo_path, "src/app.py", "a\nb\nc\n"),
        ],
    )
    repo.git.branch("-M", "main")

    _commit(
        repo,
        "Extend app",
        BOB,
        "2025-01-02T12:00:00",
        [
            _write(repo_path, "src/app.py", "a\nB\nc\nd\n"),
            _write(repo_path, "src/util.py", "x\n"),
        ],
    )

    feature = repo.create_head("feature")
    feature.checkout()
    _commit(
        repo,
        "Add guide",
        ALICE,
        "2025-01-03T12:00:00",
        [_write(repo_path, "docs/guide.md", "guide\n")],
    )

    repo.heads.main.checkout()
    _commit(
        repo,
        "Update readme",
        BOB,
        "2025-01-04T12:00:00",
        [_write(repo_path, "README.md", "# Demo\nmore\n")],
    )

    _commit(
        repo,
        "Merge feature",
        ALICE,
        "2025-01-05T12:00:00",
        [_write(repo_path, "docs/guide.md", "guide\n")],
        parents=[repo.heads.main.commit, repo.heads.feature.commit],
    )

    repo.close()
    return repo_path


@pytest.fixture
def boundary_repo(tmp_path: Path, monkeypatch) -> Path:
    """
    Create a repository with commits half an hour either side of midnight.

    Dates are in git's raw "<unix> +0000" form and TZ is pinned to UTC, so
    the commits fall on 2024-12-31, 2025-01-01, 2025-01-02 and 2025-01-03.
    """
    monkeypatch.setenv("TZ", "UTC")
    repo_path = tmp_path / "boundary"
    repo_path.mkdir()
    repo = Repo.init(repo_path)

    stamps = [
        ("2024-12-31 23:30", "1735687800 +0000"),
        ("2025-01-01 00:30", "1735691400 +0000"),
        ("2025-01-02 23:30", "1735860600 +0000"),
        ("2025-01-03 00:30", "1735864200 +0000"),
    ]
    for label, when in stamps:
        _commit(repo, label, ALICE, when, [_write(repo_path, "log.txt", label + "\n")])
        if label.startswith("2024"):
            repo.git.branch("-M", "main")

    repo.close()
    return repo_path
