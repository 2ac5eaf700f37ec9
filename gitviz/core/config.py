"""Configuration for a single gitviz run."""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import FrozenSet, List, Optional, Tuple

from gitviz.metrics.frequency import normalize_granularity

# Canonical declaration order; output always follows it.
SECTION_ORDER: Tuple[str, ...] = (
    "contributors",
    "contributorStats",
    "commitFrequency",
    "commitFrequencyByAuthor",
    "commitFrequencyByBranch",
    "branches",
    "branchStats",
    "totalCommits",
    "averageCommitsPerDay",
    "commitDistribution",
    "fileStats",
    "directoryStats",
)

# Sections that can only be computed from per-file numeric deltas.
EXTENDED_SECTIONS: FrozenSet[str] = frozenset(
    {"contributorStats", "fileStats", "directoryStats"}
)

# Sections computed from the commit log (basic or extended).
COMMIT_SECTIONS: FrozenSet[str] = frozenset(
    {
        "contributors",
        "contributorStats",
        "commitFrequency",
        "commitFrequencyByAuthor",
        "totalCommits",
        "averageCommitsPerDay",
        "commitDistribution",
        "fileStats",
        "directoryStats",
    }
)

OUTPUT_FORMATS = ("json", "text")

DEFAULT_DAYS = 30


@dataclass(frozen=True)
class TimeWindow:
    """Inclusive date range; either bound may be open."""

    since: Optional[str] = None
    until: Optional[str] = None

    def __post_init__(self) -> None:
        for value in (self.since, self.until):
            if value is not None:
                date.fromisoformat(value)

    def git_args(self) -> List[str]:
        """
        Time filter arguments understood by git log and git rev-list.

        A bare date makes git fill in the current time of day, so both bounds
        are pinned to the first and last second of their day.
        """
        args = []
        if self.since:
            args.append(f"--since={self.since} 00:00:00")
        if self.until:
            args.append(f"--until={self.until} 23:59:59")
        return args


def resolve_time_window(
    since: Optional[str] = None,
    until: Optional[str] = None,
    days: Optional[int] = None,
    today: Optional[date] = None,
) -> TimeWindow:
    """
    Resolve the user-facing time options into a concrete window.

    With nothing given the window is the last DEFAULT_DAYS days ending today.
    A days value of 0 counts as not given.
    An explicit since/until always wins over days.

    Args:
        since: Inclusive start date (YYYY-MM-DD)
        until: Inclusive end date (YYYY-MM-DD)
        days: Length of the window in days
        today: Reference date, defaults to the local current date

    Returns:
        TimeWindow
    """
    today = today or date.today()
    if days is not None and days < 0:
        raise ValueError("days must not be negative")

    if not since and not until and not days:
        days = DEFAULT_DAYS

    if since and not until:
        until = today.isoformat()
    elif until and not since and days:
        end = date.fromisoformat(until)
        since = (end - timedelta(days=days - 1)).isoformat()
    elif not since and not until and days:
        since = (today - timedelta(days=days - 1)).isoformat()
        until = today.isoformat()

    return TimeWindow(since=since, until=until)


@dataclass(frozen=True)
class StatsConfig:
    """Everything one invocation of the engine needs."""

    repo_path: str = "."
    sections: FrozenSet[str] = field(default_factory=frozenset)
    granularity: str = "daily"
    top: Optional[int] = None
    window: TimeWindow = field(default_factory=TimeWindow)
    author: Optional[str] = None
    all_refs: bool = False
    include_meta: bool = False
    output_format: str = "text"
    progress: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        object.__setattr__(self, "sections", frozenset(self.sections))
        unknown = self.sections.difference(SECTION_ORDER)
        if unknown:
            raise ValueError(f"Unknown sections: {', '.join(sorted(unknown))}")
        object.__setattr__(self, "granularity", normalize_granularity(self.granularity))
        if self.top is not None and self.top < 0:
            raise ValueError("top cannot be negative")
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format: {self.output_format}")

    @property
    def needs_extended(self) -> bool:
        """Whether the per-file numstat extraction is required."""
        return bool(self.sections & EXTENDED_SECTIONS)

    @property
    def needs_commits(self) -> bool:
        """Whether any commit log extraction is required."""
        return bool(self.sections & COMMIT_SECTIONS)

    def ordered_sections(self) -> List[str]:
        """Requested sections in canonical order."""
        return [name for name in SECTION_ORDER if name in self.sections]

    def log_filter_args(self) -> List[str]:
        """Filter arguments shared by both log extractions."""
        args = []
        if self.all_refs:
            args.append("--all")
        if self.author:
            args.append(f"--author={self.author}")
        args.extend(self.window.git_args())
        return args

