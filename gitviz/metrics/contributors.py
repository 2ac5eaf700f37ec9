"""
Contributor metrics for gitviz.

Authors are identified by the (name, email) pair. Commit counts and line
statistics for the same author are always matched on that pair, never by
their position in a sorted list.
"""

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Tuple

from gitviz.core.parser import CommitRecord, ExtendedCommitRecord
from gitviz.utils.logger import get_logger

logger = get_logger(__name__)


def _ranking_key(entry: Dict[str, Any]) -> Tuple[int, str, str]:
    return (-entry["commits"], entry["name"], entry["email"])


def compute_contributors(commits: Iterable[CommitRecord]) -> List[Dict[str, Any]]:
    """
    Count commits per author.

    Args:
        commits: Commit records

    Returns:
        List of {"name", "email", "commits"} sorted by commit count
        descending, then by name ascending
    """
    counts = defaultdict(int)
    for commit in commits:
        counts[(commit.author_name, commit.author_email)] += 1

    contributors = [
        {"name": name, "email": email, "commits": count}
        for (name, email), count in counts.items()
    ]
    contributors.sort(key=_ranking_key)

    logger.info(f"Found {len(contributors)} contributors")

    return contributors


def compute_contributor_line_stats(
    commits: Iterable[ExtendedCommitRecord],
) -> List[Dict[str, Any]]:
    """
    Count commits and sum added/deleted lines per author.

    Args:
        commits: Commit records with numstat deltas

    Returns:
        List of {"name", "email", "commits", "additions", "deletions"} in the
        same order as compute_contributors
    """
    stats = {}
    for commit in commits:
        key = (commit.author_name, commit.author_email)
        entry = stats.get(key)
        if entry is None:
            entry = stats[key] = {
                "name": commit.author_name,
                "email": commit.author_email,
                "commits": 0,
                "additions": 0,
                "deletions": 0,
            }

        entry["commits"] += 1
        for delta in commit.files:
            entry["additions"] += delta.additions
            entry["deletions"] += delta.deletions

    return sorted(stats.values(), key=_ranking_key)
