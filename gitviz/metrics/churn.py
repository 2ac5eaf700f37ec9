"""
File and directory churn metrics for gitviz.

This module aggregates numstat deltas per file and per parent directory,
counting how many commits touched each path and how many lines were added
and removed.
"""

from typing import Any, Dict, Iterable, List

import pandas as pd

from gitviz.core.parser import ExtendedCommitRecord
from gitviz.utils.logger import get_logger

logger = get_logger(__name__)

STAT_COLUMNS = ["changes", "additions", "deletions"]


def parent_directory(path: str) -> str:
    """Path up to the last separator, or "." for top-level files."""
    if "/" not in path:
        return "."
    return path.rsplit("/", 1)[0]


def _deltas_frame(commits: Iterable[ExtendedCommitRecord]) -> pd.DataFrame:
    rows = [
        {
            "commit": commit.id,
            "path": delta.path,
            "additions": delta.additions,
            "deletions": delta.deletions,
        }
        for commit in commits
        for delta in commit.files
    ]
    return pd.DataFrame(rows, columns=["commit", "path", "additions", "deletions"])


def _ranked_records(df: pd.DataFrame, key: str) -> List[Dict[str, Any]]:
    """Sort by changes desc, churn desc, key asc and convert to plain dicts."""
    df = df.assign(churn=df["additions"] + df["deletions"])
    df = df.sort_values(
        ["changes", "churn", key], ascending=[False, False, True], kind="mergesort"
    )

    return [
        {
            key: str(row[key]),
            "changes": int(row["changes"]),
            "additions": int(row["additions"]),
            "deletions": int(row["deletions"]),
        }
        for _, row in df.iterrows()
    ]


def compute_file_stats(commits: Iterable[ExtendedCommitRecord]) -> List[Dict[str, Any]]:
    """
    Calculate per-file change statistics.

    A file's change count is the number of distinct commits whose numstat
    lists it, even if a malformed log repeats the same path within a commit.

    Args:
        commits: Commit records with numstat deltas

    Returns:
        List of {"path", "changes", "additions", "deletions"} sorted by
        changes descending, then additions + deletions descending
    """
    deltas = _deltas_frame(commits)
    if deltas.empty:
        return []

    grouped = deltas.groupby("path", sort=False).agg(
        changes=("commit", "nunique"),
        additions=("additions", "sum"),
        deletions=("deletions", "sum"),
    )
    file_stats = _ranked_records(grouped.reset_index(), "path")

    logger.info(f"File statistics calculated for {len(file_stats)} files")

    return file_stats


def compute_directory_stats(file_stats: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Roll file statistics up to their parent directories.

    Args:
        file_stats: Output of compute_file_stats

    Returns:
        List of {"directory", "changes", "additions", "deletions"} with the
        same ordering rule as compute_file_stats
    """
    files = pd.DataFrame(list(file_stats), columns=["path"] + STAT_COLUMNS)
    if files.empty:
        return []

    files["directory"] = files["path"].map(parent_directory)
    grouped = files.groupby("directory", sort=False)[STAT_COLUMNS].sum()

    return _ranked_records(grouped.reset_index(), "directory")
