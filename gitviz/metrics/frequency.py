"""
Commit frequency metrics for gitviz.

This module buckets commits by calendar day, week or month, and derives the
per-author daily breakdown and the average number of commits per day.

Weekly buckets use a day-of-year approximation rather than ISO-8601 weeks:
week = ceil(day_of_year / 7) within the commit's own calendar year, so the
last days of December land in week 53 and there is no Thursday anchoring.
Existing consumers rely on these keys, so they must stay as they are.
"""

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, Mapping, Optional

import numpy as np
import pandas as pd

from gitviz.core.parser import CommitRecord
from gitviz.utils.logger import get_logger

logger = get_logger(__name__)

GRANULARITIES = ("daily", "weekly", "monthly")

_ALIASES = {"day": "daily", "week": "weekly", "month": "monthly"}


def normalize_granularity(granularity: str) -> str:
    """
    Map a granularity name or alias onto one of GRANULARITIES.

    Raises:
        ValueError: If the name is unknown
    """
    value = (granularity or "").strip().lower()
    value = _ALIASES.get(value, value)
    if value not in GRANULARITIES:
        raise ValueError(f"Unknown granularity: {granularity}")
    return value


def _bucket_series(dates: pd.Series, granularity: str) -> pd.Series:
    """Bucket key of each YYYY-MM-DD date: the date, "YYYY-Www" or "YYYY-MM"."""
    if granularity == "daily":
        return dates
    if granularity == "monthly":
        return dates.str.slice(0, 7)

    parsed = pd.to_datetime(dates, format="%Y-%m-%d")
    weeks = np.ceil(parsed.dt.dayofyear / 7).astype(int)
    return parsed.dt.year.astype(str) + "-W" + weeks.astype(str).str.zfill(2)


def _count_keys(keys: pd.Series) -> Dict[str, int]:
    counts = keys.value_counts().sort_index()
    return {str(key): int(count) for key, count in counts.items()}


def compute_frequency(
    commits: Iterable[CommitRecord], granularity: str = "daily"
) -> Dict[str, int]:
    """
    Count commits per time bucket.

    Args:
        commits: Commit records
        granularity: daily, weekly or monthly

    Returns:
        Mapping of bucket key to commit count, ascending by key
    """
    granularity = normalize_granularity(granularity)
    dates = [commit.date for commit in commits]
    if not dates:
        return {}

    keys = _bucket_series(pd.Series(dates, dtype=str), granularity)
    return _count_keys(keys)


def rebucket(frequency: Mapping[str, int], granularity: str) -> Dict[str, int]:
    """
    Re-aggregate a daily frequency map at a coarser granularity.

    Args:
        frequency: Mapping of YYYY-MM-DD to commit count
        granularity: daily, weekly or monthly

    Returns:
        Mapping of bucket key to commit count, ascending by key
    """
    granularity = normalize_granularity(granularity)
    if not frequency:
        return {}

    counts = pd.Series(list(frequency.values()), index=list(frequency.keys()))
    keys = _bucket_series(pd.Series(list(frequency.keys()), dtype=str), granularity)
    totals = counts.groupby(keys.to_numpy()).sum().sort_index()
    return {str(key): int(count) for key, count in totals.items()}


def compute_commit_distribution(commits: Iterable[CommitRecord]) -> Dict[str, int]:
    """Daily commit counts (date -> count)."""
    return compute_frequency(commits, "daily")


def compute_frequency_by_author(
    commits: Iterable[CommitRecord],
) -> Dict[str, Dict[str, int]]:
    """
    Daily commit counts for each author name.

    Returns:
        Mapping of author name to {date: count}; authors and dates ascending
    """
    per_author = defaultdict(lambda: defaultdict(int))
    for commit in commits:
        per_author[commit.author_name][commit.date] += 1

    return {
        author: dict(sorted(dates.items()))
        for author, dates in sorted(per_author.items())
    }


def compute_average_per_day(
    total_commits: int, since: Optional[str], until: Optional[str]
) -> float:
    """
    Average commits per day over the inclusive window since..until.

    Args:
        total_commits: Number of commits in the window
        since: First day (YYYY-MM-DD)
        until: Last day (YYYY-MM-DD)

    Returns:
        Average rounded to two decimals; 0 for an empty or inverted window
    """
    if not total_commits or not since or not until:
        return 0

    days = (date.fromisoformat(until) - date.fromisoformat(since)).days + 1
    if days <= 0:
        return 0

    return round(total_commits / days, 2)
