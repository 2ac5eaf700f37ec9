"""Shared builders and fakes for gitviz tests."""

from typing import Dict, List, Optional, Tuple

from gitviz.core.config import TimeWindow
from gitviz.core.parser import CommitRecord, ExtendedCommitRecord, FileDelta

SEP = "\x01"


def basic_line(commit_id, name, email, day, parents=""):
    return SEP.join([commit_id, commit_id[:7], name, email, day, parents])


def header_line(commit_id, name, email, day, parents=""):
    return "commit" + SEP + basic_line(commit_id, name, email, day, parents)


class FakeRepository:
    """Accessor stand-in that serves canned raw text and records every call."""

    def __init__(
        self,
        basic: str = "",
        numstat: str = "",
        branches: str = "",
        branch_counts: Optional[Dict[str, int]] = None,
        merge_counts: Optional[Dict[str, int]] = None,
        branch_authors: Optional[Dict[str, str]] = None,
        last_authors: Optional[Dict[str, Tuple[str, str]]] = None,
        first_date: Optional[str] = None,
    ):
        self.basic = basic
        self.numstat = numstat
        self.branches = branches
        self.branch_counts = branch_counts or {}
        self.merge_counts = merge_counts or {}
        self.authors = branch_authors or {}
        self.last_authors = last_authors or {}
        self.first_date = first_date
        self.calls: List[str] = []

    def log_basic(self, config):
        self.calls.append("log_basic")
        return self.basic

    def log_numstat(self, config):
        self.calls.append("log_numstat")
        return self.numstat

    def list_branches(self):
        self.calls.append("list_branches")
        return self.branches

    def branch_commit_count(self, branch: str, window: TimeWindow) -> int:
        self.calls.append(f"branch_commit_count:{branch}")
        return self.branch_counts.get(branch, 0)

    def branch_merge_count(self, branch: str, window: TimeWindow) -> int:
        self.calls.append(f"branch_merge_count:{branch}")
        return self.merge_counts.get(branch, 0)

    def branch_authors(self, branch: str, window: TimeWindow) -> str:
        self.calls.append(f"branch_authors:{branch}")
        return self.authors.get(branch, "")

    def branch_last_author(self, branch: str):
        self.calls.append(f"branch_last_author:{branch}")
        return self.last_authors.get(branch)

    def first_commit_date(self):
        self.calls.append("first_commit_date")
        return self.first_date


def make_commits(*specs):
    """Build commit records from (date, author) pairs, most recent first."""
    commits = []
    for index, (day, author) in enumerate(specs):
        commit_id = f"{index:040x}"
        commits.append(
            CommitRecord(
                id=commit_id,
                short_id=commit_id[:7],
                author_name=author,
                author_email=f"{author.lower()}@example.com",
                date=day,
            )
        )
    return commits


def make_extended(commit_id, author, day, *deltas):
    """Build an extended commit record from (path, additions, deletions) tuples."""
    return ExtendedCommitRecord(
        id=commit_id,
        short_id=commit_id[:7],
        author_name=author,
        author_email=f"{author.lower()}@example.com",
        date=day,
        files=tuple(FileDelta(*delta) for delta in deltas),
    )
