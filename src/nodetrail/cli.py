"""Show how one syntax node of a file changed across its git history."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, NoReturn

from .ast.parser import SyntaxParser
from .config import COMPARE_POLICIES, TrackerConfig
from .errors import NodeTrailError
from .git.history import GitRepo
from .graph.matcher import TreeMatcher
from .report import format_tree, print_records
from .stats import PhaseTimings
from .temporal.tracker import NodeTracker


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on invalid arguments."""

    def error(self, message: str) -> NoReturn:
        self.print_help(sys.stderr)
        self.exit(1, f"\n{self.prog}: error: {message}\n")


def _build_tracker(config: TrackerConfig, timings: PhaseTimings) -> NodeTracker:
    matcher = TreeMatcher(
        min_height=config.min_height,
        sim_threshold=config.sim_threshold,
        max_recovery_size=config.max_recovery_size,
    )
    return NodeTracker(
        GitRepo(config.repo_path),
        SyntaxParser(),
        matcher,
        compare=config.compare,
        timings=timings,
    )


def _print_tree(config: TrackerConfig) -> None:
    """Print the newest parse tree so the user can pick a node id."""
    tracker = _build_tracker(config, PhaseTimings())
    commits = tracker.list_commits(config.file_path)
    tree = tracker.load(commits[0], config.file_path)
    print("Choose node id")
    print(format_tree(tree))


def _track(config: TrackerConfig) -> PhaseTimings:
    timings = PhaseTimings()
    tracker = _build_tracker(config, timings)
    records = tracker.track(config.file_path, config.node_id)
    print_records(records, context=config.diff_context)
    return timings


def _config_from_args(args: argparse.Namespace) -> TrackerConfig:
    return TrackerConfig(
        repo_path=args.repository_path,
        file_path=args.file_path,
        node_id=args.id,
        debug=args.debug,
        timing=args.timing,
        diff_context=args.context,
        compare=args.compare,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="nodetrail", description=__doc__)
    parser.add_argument(
        "-r",
        "--repository-path",
        type=Path,
        default=Path("."),
        help="Path to git repository (default: current directory)",
    )
    parser.add_argument("-f", "--file-path", required=True, help="Path to the file to diff")
    parser.add_argument(
        "--id",
        type=int,
        help="Node id number; omit it to print the node ids of the current file",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--timing", action="store_true", help="Print timing")
    parser.add_argument(
        "--context",
        type=int,
        default=3,
        help="Number of context lines in each diff",
    )
    parser.add_argument(
        "--compare",
        choices=COMPARE_POLICIES,
        default="isomorphic",
        help="How to decide that a node did not change between two commits",
    )
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    config = _config_from_args(args)

    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config.validate()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        if config.node_id is None:
            _print_tree(config)
            return 0
        timings = _track(config)
    except NodeTrailError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if config.timing:
        print(timings.format_table())
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
