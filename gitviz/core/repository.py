"""
Repository module for gitviz.

This module provides the GitRepository class, which runs the read-only git
queries the engine needs and hands back their raw text. Parsing happens in
gitviz.core.parser.
"""

import os
from typing import List, Optional, Tuple

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from gitviz.core.config import StatsConfig, TimeWindow
from gitviz.core.errors import ExternalCallError, InvalidRepositoryError
from gitviz.core.parser import (
    BASIC_FORMAT,
    BRANCH_FORMAT,
    EXTENDED_FORMAT,
    FIELD_SEP,
    IDENTITY_FORMAT,
)
from gitviz.utils.logger import get_logger

logger = get_logger(__name__)


def _stderr_text(error: GitCommandError) -> str:
    # GitPython stores stderr as "\n  stderr: '...'".
    text = str(error.stderr or "").strip()
    if text.startswith("stderr: '") and text.endswith("'"):
        text = text[len("stderr: '"):-1]
    return text


class GitRepository:
    """
    Read-only accessor for a local Git repository.

    Every method issues exactly one git command. A failing command raises
    ExternalCallError carrying git's stderr; nothing is retried.
    """

    def __init__(self, repo_path: str):
        """
        Open the repository at repo_path.

        Args:
            repo_path: Path to the repository root

        Raises:
            InvalidRepositoryError: If the path does not exist or is not a repository
        """
        self.repo_path = repo_path

        if not os.path.exists(repo_path):
            raise InvalidRepositoryError(repo_path, "Repository path not found")

        logger.info(f"Opening local repository at {repo_path}")
        try:
            self.repo = Repo(repo_path)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise InvalidRepositoryError(repo_path) from e

    @property
    def name(self) -> str:
        return os.path.basename(os.path.abspath(self.repo_path))

    def _git(self, command: str, *args: str) -> str:
        """Run one git command and return its stdout."""
        logger.debug(f"git {command} {' '.join(args)}")
        try:
            return getattr(self.repo.git, command.replace("-", "_"))(*args)
        except GitCommandError as e:
            raise ExternalCallError(
                [str(part) for part in e.command], _stderr_text(e), e.status
            ) from e

    def has_commits(self) -> bool:
        """Whether HEAD resolves to a commit."""
        return self.repo.head.is_valid()

    def _log(self, pretty: str, config: StatsConfig, *extra: str) -> str:
        # git log fails on an unborn HEAD; an empty history is not an error.
        if not config.all_refs and not self.has_commits():
            return ""
        args = ["--date=short", f"--pretty=format:{pretty}", *extra]
        args.extend(config.log_filter_args())
        return self._git("log", *args)

    def log_basic(self, config: StatsConfig) -> str:
        """Raw commit log without file statistics."""
        return self._log(BASIC_FORMAT, config)

    def log_numstat(self, config: StatsConfig) -> str:
        """Raw commit log with per-file added/deleted line counts."""
        return self._log(EXTENDED_FORMAT, config, "--numstat")

    def list_branches(self) -> str:
        """Raw listing of local branch heads."""
        return self._git("for-each-ref", f"--format={BRANCH_FORMAT}", "refs/heads")

    def _count(self, *args: str) -> int:
        output = self._git("rev-list", "--count", *args).strip()
        return int(output) if output.isdigit() else 0

    def branch_commit_count(self, branch: str, window: TimeWindow) -> int:
        """Number of commits reachable from branch within window."""
        return self._count(*window.git_args(), branch, "--")

    def branch_merge_count(self, branch: str, window: TimeWindow) -> int:
        """Number of merge commits reachable from branch within window."""
        return self._count("--merges", *window.git_args(), branch, "--")

    def branch_authors(self, branch: str, window: TimeWindow) -> str:
        """Raw name/email lines for the commits reachable from branch."""
        return self._git(
            "log", f"--pretty=format:{IDENTITY_FORMAT}", *window.git_args(), branch, "--"
        )

    def branch_last_author(self, branch: str) -> Optional[Tuple[str, str]]:
        """Author name and email of the branch tip."""
        output = self._git(
            "log", "-1", f"--pretty=format:{IDENTITY_FORMAT}", branch, "--"
        ).strip()
        if not output:
            return None
        parts = output.split(FIELD_SEP)
        if len(parts) != 2:
            return None
        return parts[0], parts[1]

    def first_commit_date(self) -> Optional[str]:
        """Date (YYYY-MM-DD) of the earliest commit reachable from HEAD."""
        if not self.has_commits():
            return None
        output = self._git("log", "--reverse", "--date=short", "--pretty=format:%ad")
        lines: List[str] = output.splitlines()
        return lines[0].strip() if lines else None
