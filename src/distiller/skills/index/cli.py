"""CLI subcommand registration for the /index skill."""

from __future__ import annotations

import argparse
from typing import Any


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="Path to the source file to analyze")
    parser.add_argument(
        "--workers", type=int, default=None, help="Worker threads for reading and indexing"
    )
    parser.add_argument(
        "--timeout", type=float, default=None, help="Stop discovery after this many seconds"
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the ``index`` subcommand and its sub-actions."""
    idx = subparsers.add_parser("index", help="Discover related files and index symbols")
    idx_sub = idx.add_subparsers(dest="action")

    # --- index discover ---
    disc = idx_sub.add_parser("discover", help="List files reachable through imports")
    _add_common(disc)

    # --- index list-symbols ---
    ls = idx_sub.add_parser("list-symbols", help="List indexed symbols")
    _add_common(ls)
    ls.add_argument(
        "--related",
        action="store_true",
        help="Include symbols from every related file, not just FILE",
    )

    # --- index get-body ---
    gb = idx_sub.add_parser("get-body", help="Get the source of a definition")
    gb.add_argument("function", help="Function name or FQN")
    _add_common(gb)


def run(args: argparse.Namespace) -> dict[str, Any]:
    """Dispatch to the appropriate index action."""
    from distiller.skills.index import discover, get_body, symbols

    if args.action == "discover":
        return discover(args.file, max_workers=args.workers, timeout=args.timeout)

    if args.action == "list-symbols":
        return symbols(
            args.file,
            related=args.related,
            max_workers=args.workers,
            timeout=args.timeout,
        )

    if args.action == "get-body":
        result = get_body(
            args.file,
            args.function,
            max_workers=args.workers,
            timeout=args.timeout,
        )
        if result is None:
            return {"error": f"Function '{args.function}' not found"}
        return result

    return {"error": f"Unknown index action: {args.action}"}
