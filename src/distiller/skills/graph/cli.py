"""CLI subcommand registration for the /graph skill."""

from __future__ import annotations

import argparse
from typing import Any

from distiller.errors import SymbolNotFoundError


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="Path to the source file to analyze")
    parser.add_argument("--workers", type=int, default=None, help="Worker threads")
    parser.add_argument("--timeout", type=float, default=None, help="Discovery deadline in seconds")


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the ``graph`` subcommand and its sub-actions."""
    grp = subparsers.add_parser("graph", help="Call graph operations")
    grp_sub = grp.add_subparsers(dest="action")

    # --- graph build ---
    bld = grp_sub.add_parser("build", help="Build call graph and report its size")
    _add_common(bld)

    # --- graph show ---
    shw = grp_sub.add_parser("show", help="Dump full call graph")
    _add_common(shw)

    # --- graph callees ---
    ce = grp_sub.add_parser("callees", help="List direct callees of a function")
    ce.add_argument("function", help="Function name or FQN")
    _add_common(ce)

    # --- graph callers ---
    cr = grp_sub.add_parser("callers", help="List direct callers of a function")
    cr.add_argument("function", help="Function name or FQN")
    _add_common(cr)


def run(args: argparse.Namespace) -> dict[str, Any]:
    """Dispatch to the appropriate graph action."""
    from distiller.skills.graph import build, callees, callers, show

    kwargs = {"max_workers": args.workers, "timeout": args.timeout}

    if args.action == "build":
        return build(args.file, **kwargs)

    if args.action == "show":
        return show(args.file, **kwargs)

    try:
        if args.action == "callees":
            return callees(args.file, args.function, **kwargs)
        if args.action == "callers":
            return callers(args.file, args.function, **kwargs)
    except SymbolNotFoundError as exc:
        return {"error": str(exc)}

    return {"error": f"Unknown graph action: {args.action}"}
