"""
Parsers for raw git output.

This module turns the text produced by the log and ref queries of
GitRepository into commit, file-delta and branch records. Field values are
separated by FIELD_SEP, which git emits for ``%x01`` and which cannot occur in
names, emails or dates.
"""

from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from gitviz.utils.logger import get_logger

logger = get_logger(__name__)

FIELD_SEP = "\x01"

# Prefix marking a commit header line in numstat output.
HEADER_PREFIX = "commit" + FIELD_SEP

# id, short id, author name, author email, date, parents
COMMIT_FIELDS = 6

# Pretty formats matching the parsers below.
BASIC_FORMAT = "%H%x01%h%x01%an%x01%ae%x01%ad%x01%P"
EXTENDED_FORMAT = "commit%x01" + BASIC_FORMAT
BRANCH_FORMAT = "%(refname:short)%09%(objectname:short)%09%(committerdate:short)"
IDENTITY_FORMAT = "%an%x01%ae"


@dataclass(frozen=True)
class CommitRecord:
    """One commit as reported by git log."""

    id: str
    short_id: str
    author_name: str
    author_email: str
    date: str  # YYYY-MM-DD
    parents: Tuple[str, ...] = ()


@dataclass(frozen=True)
class FileDelta:
    """Lines added and removed in one file by one commit."""

    path: str
    additions: int
    deletions: int


@dataclass(frozen=True)
class ExtendedCommitRecord(CommitRecord):
    """Commit record carrying its per-file numstat deltas."""

    files: Tuple[FileDelta, ...] = ()


@dataclass(frozen=True)
class Branch:
    """A local branch head."""

    name: str
    tip: str
    last_commit_date: str


def _split_commit_fields(line: str) -> Optional[List[str]]:
    parts = line.split(FIELD_SEP)
    if len(parts) < COMMIT_FIELDS:
        return None
    return parts


def _commit_kwargs(parts: List[str]) -> dict:
    commit_id, short_id, name, email, commit_date, parents = parts[:COMMIT_FIELDS]
    return {
        "id": commit_id,
        "short_id": short_id,
        "author_name": name,
        "author_email": email,
        "date": commit_date,
        "parents": tuple(parents.split()),
    }


def _parse_count(value: str) -> int:
    # Binary files report "-" instead of a number.
    value = value.strip()
    return int(value) if value.isdigit() else 0


def parse_basic(raw_text: str) -> List[CommitRecord]:
    """
    Parse ``git log --pretty=format:BASIC_FORMAT`` output.

    Lines with fewer than the required number of fields are skipped.

    Args:
        raw_text: Raw log text, most recent commit first

    Returns:
        List of commit records in input order
    """
    commits = []
    skipped = 0

    for line in raw_text.splitlines():
        if not line.strip():
            continue

        parts = _split_commit_fields(line)
        if parts is None:
            skipped += 1
            continue

        commits.append(CommitRecord(**_commit_kwargs(parts)))

    if skipped:
        logger.debug(f"Skipped {skipped} malformed log lines")

    return commits


def parse_extended(raw_text: str) -> List[ExtendedCommitRecord]:
    """
    Parse ``git log --numstat --pretty=format:EXTENDED_FORMAT`` output.

    Each header line is followed by zero or more ``added<TAB>deleted<TAB>path``
    lines belonging to that commit.

    Args:
        raw_text: Raw log text, most recent commit first

    Returns:
        List of extended commit records in input order
    """
    commits = []
    current = None
    files: List[FileDelta] = []
    skipped = 0

    def flush() -> None:
        if current is not None:
            commits.append(ExtendedCommitRecord(files=tuple(files), **current))

    for line in raw_text.splitlines():
        if line.startswith(HEADER_PREFIX):
            flush()
            files = []
            parts = _split_commit_fields(line[len(HEADER_PREFIX):])
            if parts is None:
                skipped += 1
                current = None
            else:
                current = _commit_kwargs(parts)
            continue

        if not line.strip():
            continue

        fields = line.split("\t", 2)
        if len(fields) != 3 or current is None:
            skipped += 1
            continue

        added, deleted, path = fields
        files.append(FileDelta(path, _parse_count(added), _parse_count(deleted)))

    flush()

    if skipped:
        logger.debug(f"Skipped {skipped} malformed numstat lines")

    return commits


def parse_branches(raw_text: str) -> List[Branch]:
    """Parse a ``git for-each-ref --format=BRANCH_FORMAT`` listing."""
    branches = []
    for line in raw_text.splitlines():
        if not line.strip():
            continue
        parts = line.split("\t")
        if len(parts) < 3:
            continue
        name, tip, last_date = parts[:3]
        branches.append(Branch(name=name, tip=tip, last_commit_date=last_date))
    return branches


def parse_author_identities(raw_text: str) -> Set[str]:
    """Collect distinct ``name <email>`` identities from IDENTITY_FORMAT lines."""
    identities = set()
    for line in raw_text.splitlines():
        if not line:
            continue
        parts = line.split(FIELD_SEP)
        if len(parts) == 2:
            identities.add(f"{parts[0]} <{parts[1]}>")
        else:
            identities.add(line)
    return identities
