"""CLI entry point for distiller skills."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from distiller.skills.reachability import distill


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="distiller",
        description="Dependency-aware source distillation",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-v info, -vv debug)",
    )
    sub = parser.add_subparsers(dest="command")

    # --- Register skill subcommands ---
    from distiller.skills.index.cli import register as register_index
    from distiller.skills.graph.cli import register as register_graph
    from distiller.skills.reachability.cli import (
        add_analysis_arguments,
        register as register_reachability,
    )

    register_index(sub)
    register_graph(sub)
    register_reachability(sub)

    # --- Top-level distill command ---
    dist = sub.add_parser(
        "distill",
        help="Distill a file down to the code its entry points reach",
    )
    add_analysis_arguments(dist)
    dist.add_argument(
        "--no-dependency-aware",
        action="store_true",
        help="Skip the analysis and return the plain declaration tree",
    )

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 1

    # --- Dispatch ---
    if args.command == "distill":
        try:
            result = distill(
                args.file,
                dependency_aware=not args.no_dependency_aware,
                max_depth=args.max_depth,
                max_workers=args.workers,
                timeout=args.timeout,
            )
        except OSError as exc:
            print(f"distiller: cannot read {args.file}: {exc}", file=sys.stderr)
            return 2
        json.dump(result, sys.stdout, indent=2)
        print()
        return 0

    # Skill subcommands with two-level dispatch
    skill_dispatch = {
        "index": "distiller.skills.index.cli",
        "graph": "distiller.skills.graph.cli",
        "reachability": "distiller.skills.reachability.cli",
    }

    if args.command in skill_dispatch:
        if not getattr(args, "action", None):
            # Re-parse to show skill-specific help
            parser.parse_args([args.command, "--help"])
            return 1

        import importlib
        cli_mod = importlib.import_module(skill_dispatch[args.command])
        try:
            result = cli_mod.run(args)
        except OSError as exc:
            print(f"distiller: cannot read {args.file}: {exc}", file=sys.stderr)
            return 2
        json.dump(result, sys.stdout, indent=2)
        print()
        return 0

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
