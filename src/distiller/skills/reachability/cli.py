"""CLI subcommand registration for the /reachability skill."""

from __future__ import annotations

import argparse
from typing import Any

from distiller.models import DEFAULT_MAX_DEPTH


def add_analysis_arguments(parser: argparse.ArgumentParser) -> None:
    """Flags shared by every command that runs the reachability analysis."""
    parser.add_argument("file", help="Path to the source file to distill")
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=(
            f"Maximum call depth from the entry points (default: {DEFAULT_MAX_DEPTH}; "
            "0 keeps entry points only, negative disables the analysis)"
        ),
    )
    parser.add_argument("--workers", type=int, default=None, help="Worker threads")
    parser.add_argument(
        "--timeout", type=float, default=None, help="Stop discovery after this many seconds"
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the ``reachability`` subcommand and its sub-actions."""
    reach = subparsers.add_parser("reachability", help="Reachability analysis")
    reach_sub = reach.add_subparsers(dest="action")

    # --- reachability analyze ---
    an = reach_sub.add_parser("analyze", help="Report entry points, used symbols and assembled files")
    add_analysis_arguments(an)

    # --- reachability distill ---
    di = reach_sub.add_parser("distill", help="Distill a file into a single document")
    add_analysis_arguments(di)
    di.add_argument(
        "--no-dependency-aware",
        action="store_true",
        help="Skip the analysis and return the plain declaration tree",
    )


def run(args: argparse.Namespace) -> dict[str, Any]:
    """Dispatch to the appropriate reachability action."""
    from distiller.skills.reachability import analyze, distill

    if args.action == "analyze":
        return analyze(
            args.file,
            max_depth=args.max_depth,
            max_workers=args.workers,
            timeout=args.timeout,
        )

    if args.action == "distill":
        return distill(
            args.file,
            dependency_aware=not args.no_dependency_aware,
            max_depth=args.max_depth,
            max_workers=args.workers,
            timeout=args.timeout,
        )

    return {"error": f"Unknown reachability action: {args.action}"}
