"""
Command-line interface for gitviz.

This module provides the ``gitviz`` command, which turns command-line flags
into a StatsConfig, runs the SectionAssembler against a local repository and
prints the requested sections as JSON or flattened text.
"""

import argparse
import os
import sys
from typing import List, Optional

from gitviz.core.assembler import SectionAssembler
from gitviz.core.config import StatsConfig, resolve_time_window
from gitviz.core.errors import GitvizError
from gitviz.core.repository import GitRepository
from gitviz.metrics.frequency import normalize_granularity
from gitviz.output.serializer import serialize
from gitviz.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

# (flag, section) pairs for plain boolean section switches.
SECTION_FLAGS = (
    ("--contributors", "contributors"),
    ("--contributor-stats", "contributorStats"),
    ("--commit-frequency-by-author", "commitFrequencyByAuthor"),
    ("--commit-frequency-by-branch", "commitFrequencyByBranch"),
    ("--branches", "branches"),
    ("--branch-stats", "branchStats"),
    ("--total-commits", "totalCommits"),
    ("--average-commits-per-day", "averageCommitsPerDay"),
    ("--commit-distribution", "commitDistribution"),
    ("--file-stats", "fileStats"),
    ("--directory-stats", "directoryStats"),
)


def create_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="gitviz",
        description="gitviz - Git history statistics as JSON or grep-friendly text",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "repo_path",
        nargs="?",
        default=".",
        help="Path to the Git repository root",
    )

    time_group = parser.add_argument_group("time filters")
    time_group.add_argument("--since", help="Start date inclusive (YYYY-MM-DD)")
    time_group.add_argument("--until", help="End date inclusive (YYYY-MM-DD)")
    time_group.add_argument(
        "--days",
        type=int,
        help="Last N days (ignored when --since is given; default 30 without filters)",
    )

    scope_group = parser.add_argument_group("scope filters")
    scope_group.add_argument(
        "--all", dest="all_refs", action="store_true", help="Include all refs"
    )
    scope_group.add_argument("--author", help="Filter by author (git regex)")

    section_group = parser.add_argument_group("sections")
    for flag, section in SECTION_FLAGS:
        section_group.add_argument(
            flag, dest="sections", action="append_const", const=section
        )
    section_group.add_argument(
        "--top",
        type=int,
        nargs="?",
        const=10,
        help="Top N contributors (implies --contributors)",
    )
    section_group.add_argument(
        "--commit-frequency",
        nargs="?",
        const="daily",
        metavar="GRANULARITY",
        help="Commit counts per bucket: daily, weekly or monthly",
    )

    output_group = parser.add_argument_group("output")
    output_group.add_argument(
        "--format",
        dest="output_format",
        choices=["json", "text"],
        default="text",
        type=str.lower,
        help="Output format",
    )
    output_group.add_argument(
        "--json",
        dest="output_format",
        action="store_const",
        const="json",
        help="Shorthand for --format json",
    )
    output_group.add_argument(
        "--meta",
        action="store_true",
        help="Include repo, window, age and generation time",
    )
    output_group.add_argument(
        "--output", "-o", help="Write the result to this file instead of stdout"
    )
    output_group.add_argument(
        "--progress", action="store_true", help="Show progress bars on stderr"
    )

    log_group = parser.add_argument_group("logging")
    log_group.add_argument("--log-level", default="WARNING", help="Logging level")
    log_group.add_argument("--log-file", help="Also write logs to this file")

    return parser


def build_config(args: argparse.Namespace) -> StatsConfig:
    """
    Turn parsed arguments into a StatsConfig.

    Args:
        args: Parsed arguments

    Returns:
        StatsConfig
    """
    sections = set(args.sections or [])
    if args.top is not None:
        sections.add("contributors")

    granularity = "daily"
    if args.commit_frequency is not None:
        sections.add("commitFrequency")
        try:
            granularity = normalize_granularity(args.commit_frequency)
        except ValueError:
            logger.warning(
                f"Unknown granularity {args.commit_frequency!r}, using daily"
            )

    window = resolve_time_window(args.since, args.until, args.days)

    return StatsConfig(
        repo_path=args.repo_path,
        sections=frozenset(sections),
        granularity=granularity,
        top=args.top,
        window=window,
        author=args.author,
        all_refs=args.all_refs,
        include_meta=args.meta,
        output_format=args.output_format,
        progress=args.progress,
    )


def run(config: StatsConfig) -> str:
    """
    Run the engine for config and return the serialized result.

    Raises:
        GitvizError: If the repository is invalid or a git call fails
    """
    repo = GitRepository(config.repo_path)
    assembler = SectionAssembler(repo, config)

    sections = assembler.assemble()
    meta = assembler.build_meta() if config.include_meta else None

    return serialize(sections, config.output_format, meta)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the gitviz CLI.

    Args:
        argv: Arguments, defaults to sys.argv[1:]

    Returns:
        Process exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        setup_logging(args.log_level, args.log_file)
        config = build_config(args)
    except ValueError as e:
        parser.error(str(e))

    if not config.sections and not config.include_meta:
        parser.print_help()
        return 0

    try:
        output = run(config)
    except GitvizError as e:
        print(e.message, file=sys.stderr)
        return 1
    except Exception as e:
        logger.error(f"Error during gitviz analysis: {str(e)}", exc_info=True)
        return 1

    if args.output:
        output_dir = os.path.dirname(args.output)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output + "\n")
        logger.info(f"Output written to {args.output}")
    else:
        print(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
