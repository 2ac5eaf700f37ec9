"""
Section assembler for gitviz.

This module provides the SectionAssembler class, which decides which raw
extraction a set of requested sections needs, runs the aggregations and
returns the sections in canonical order.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from gitviz.core.config import StatsConfig
from gitviz.core.parser import (
    Branch,
    CommitRecord,
    parse_basic,
    parse_branches,
    parse_extended,
)
from gitviz.metrics.branches import (
    compute_branch_commit_counts,
    compute_branch_stats,
    describe_branches,
)
from gitviz.metrics.churn import compute_directory_stats, compute_file_stats
from gitviz.metrics.contributors import (
    compute_contributor_line_stats,
    compute_contributors,
)
from gitviz.metrics.frequency import (
    compute_average_per_day,
    compute_commit_distribution,
    compute_frequency,
    compute_frequency_by_author,
)
from gitviz.utils.logger import get_logger

logger = get_logger(__name__)


class SectionAssembler:
    """
    Builds the sections map for one invocation.

    At most one commit log extraction is made: the numstat variant when a
    section needs per-file deltas (its records also serve every other
    commit-based section), otherwise the plain variant, and none at all when
    only branch sections are requested.
    """

    def __init__(self, repo, config: StatsConfig, today: Optional[date] = None):
        """
        Initialize a SectionAssembler instance.

        Args:
            repo: GitRepository (or any object with the same accessor methods)
            config: Configuration for this run
            today: Reference date for the repository age, defaults to today
        """
        self.repo = repo
        self.config = config
        self.today = today or date.today()
        self._commits: Optional[List[CommitRecord]] = None
        self._branches: Optional[List[Branch]] = None
        self._collectors = {
            "contributors": self._collect_contributors,
            "contributorStats": self._collect_contributor_stats,
            "commitFrequency": self._collect_commit_frequency,
            "commitFrequencyByAuthor": self._collect_frequency_by_author,
            "commitFrequencyByBranch": self._collect_frequency_by_branch,
            "branches": self._collect_branches,
            "branchStats": self._collect_branch_stats,
            "totalCommits": self._collect_total_commits,
            "averageCommitsPerDay": self._collect_average_per_day,
            "commitDistribution": self._collect_commit_distribution,
            "fileStats": self._collect_file_stats,
            "directoryStats": self._collect_directory_stats,
        }

    @property
    def commits(self) -> List[CommitRecord]:
        """Commit records for the configured filters, extracted on first use."""
        if self._commits is None:
            if self.config.needs_extended:
                logger.info("Extracting commit log with numstat")
                self._commits = parse_extended(self.repo.log_numstat(self.config))
            else:
                logger.info("Extracting commit log")
                self._commits = parse_basic(self.repo.log_basic(self.config))
            logger.info(f"{len(self._commits)} commits in range")
        return self._commits

    @property
    def branches(self) -> List[Branch]:
        """Local branches, listed on first use."""
        if self._branches is None:
            self._branches = parse_branches(self.repo.list_branches())
        return self._branches

    def effective_window(self) -> Tuple[Optional[str], Optional[str]]:
        """
        Configured since/until with missing bounds taken from the commits.

        Returns:
            (since, until), either of which may be None
        """
        since = self.config.window.since
        until = self.config.window.until
        if (not since or not until) and self.config.needs_commits and self.commits:
            dates = sorted(commit.date for commit in self.commits)
            since = since or dates[0]
            until = until or dates[-1]
        return since, until

    def assemble(self) -> Dict[str, Any]:
        """
        Compute every requested section.

        Returns:
            Sections map ordered by the canonical section order
        """
        sections = {}
        for name in self.config.ordered_sections():
            logger.info(f"Collecting {name}")
            sections[name] = self._collectors[name](sections)
        return sections

    def build_meta(self, generated: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Describe the run: repository, effective window, age and timestamp.

        Args:
            generated: Generation time, defaults to now (UTC)

        Returns:
            Dictionary with repo, since, until, repoAgeDays and generated
        """
        generated = generated or datetime.now(timezone.utc)
        stamp = generated.isoformat(timespec="milliseconds").replace("+00:00", "Z")
        since, until = self.effective_window()

        first_date = self.repo.first_commit_date()
        if first_date:
            age_days = (self.today - date.fromisoformat(first_date)).days + 1
        else:
            age_days = 0

        return {
            "repo": self.config.repo_path,
            "since": since,
            "until": until,
            "repoAgeDays": age_days,
            "generated": stamp,
        }

    def _collect_contributors(self, sections: Dict[str, Any]) -> List[Dict[str, Any]]:
        contributors = compute_contributors(self.commits)
        if self.config.top is not None:
            contributors = contributors[: self.config.top]
        return contributors

    def _collect_contributor_stats(self, sections: Dict[str, Any]) -> List[Dict[str, Any]]:
        return compute_contributor_line_stats(self.commits)

    def _collect_commit_frequency(self, sections: Dict[str, Any]) -> Dict[str, int]:
        return compute_frequency(self.commits, self.config.granularity)

    def _collect_frequency_by_author(
        self, sections: Dict[str, Any]
    ) -> Dict[str, Dict[str, int]]:
        return compute_frequency_by_author(self.commits)

    def _collect_frequency_by_branch(self, sections: Dict[str, Any]) -> Dict[str, int]:
        return compute_branch_commit_counts(
            self.repo, self.branches, self.config.window, self.config.progress
        )

    def _collect_branches(self, sections: Dict[str, Any]) -> List[Dict[str, Any]]:
        return describe_branches(self.repo, self.branches)

    def _collect_branch_stats(self, sections: Dict[str, Any]) -> List[Dict[str, Any]]:
        return compute_branch_stats(
            self.repo, self.branches, self.config.window, self.config.progress
        )

    def _collect_total_commits(self, sections: Dict[str, Any]) -> int:
        return len(self.commits)

    def _collect_average_per_day(self, sections: Dict[str, Any]) -> float:
        since, until = self.effective_window()
        return compute_average_per_day(len(self.commits), since, until)

    def _collect_commit_distribution(self, sections: Dict[str, Any]) -> Dict[str, int]:
        return compute_commit_distribution(self.commits)

    def _collect_file_stats(self, sections: Dict[str, Any]) -> List[Dict[str, Any]]:
        return compute_file_stats(self.commits)

    def _collect_directory_stats(self, sections: Dict[str, Any]) -> List[Dict[str, Any]]:
        file_stats = sections.get("fileStats")
        if file_stats is None:
            file_stats = compute_file_stats(self.commits)
        return compute_directory_stats(file_stats)
