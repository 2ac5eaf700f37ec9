"""
Branch metrics for gitviz.

Every function here queries the accessor once per branch per statistic, one
call at a time.
"""

from typing import Any, Dict, Iterable, List, Sequence

from tqdm import tqdm

from gitviz.core.config import TimeWindow
from gitviz.core.parser import Branch, parse_author_identities
from gitviz.utils.logger import get_logger

logger = get_logger(__name__)


def _iterate(branches: Sequence[Branch], desc: str, progress: bool) -> Iterable[Branch]:
    return tqdm(branches, desc=desc, unit="branch", disable=not progress)


def describe_branches(repo, branches: Sequence[Branch]) -> List[Dict[str, Any]]:
    """
    Describe each local branch with its tip commit's author.

    Args:
        repo: GitRepository (or any object with the same accessor methods)
        branches: Parsed branch list

    Returns:
        List of {"name", "tip", "lastCommitDate", "lastAuthor", "lastAuthorEmail"}
    """
    described = []
    for branch in branches:
        last_author = repo.branch_last_author(branch.name)
        name, email = last_author if last_author else (None, None)
        described.append(
            {
                "name": branch.name,
                "tip": branch.tip,
                "lastCommitDate": branch.last_commit_date,
                "lastAuthor": name,
                "lastAuthorEmail": email,
            }
        )
    return described


def compute_branch_commit_counts(
    repo, branches: Sequence[Branch], window: TimeWindow, progress: bool = False
) -> Dict[str, int]:
    """
    Count commits reachable from each branch inside the time window.

    Returns:
        Mapping of branch name to commit count
    """
    counts = {}
    for branch in _iterate(branches, "Counting branch commits", progress):
        counts[branch.name] = repo.branch_commit_count(branch.name, window)
    return counts


def compute_branch_stats(
    repo, branches: Sequence[Branch], window: TimeWindow, progress: bool = False
) -> List[Dict[str, Any]]:
    """
    Calculate commit, merge and author statistics per branch.

    Args:
        repo: GitRepository (or any object with the same accessor methods)
        branches: Parsed branch list
        window: Time filter applied to every query
        progress: Show a progress bar on stderr

    Returns:
        List of {"branch", "commits", "merges", "authors", "authorList"} in
        branch list order; authorList holds sorted "name <email>" identities
    """
    logger.info(f"Calculating statistics for {len(branches)} branches")

    stats = []
    for branch in _iterate(branches, "Branch statistics", progress):
        commits = repo.branch_commit_count(branch.name, window)
        merges = repo.branch_merge_count(branch.name, window)
        identities = parse_author_identities(repo.branch_authors(branch.name, window))
        author_list = sorted(identities)

        stats.append(
            {
                "branch": branch.name,
                "commits": commits,
                "merges": merges,
                "authors": len(author_list),
                "authorList": author_list,
            }
        )

    return stats
