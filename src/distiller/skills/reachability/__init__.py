"""Reachability skill – keep only the code reachable from a file's entry points.

Public API
----------
- analyze(file_path, *, max_depth=100, max_workers=None, timeout=None) -> dict
- distill(file_path, *, dependency_aware=True, max_depth=100, max_workers=None, timeout=None) -> dict
"""

from __future__ import annotations

from typing import Any

from distiller.models import DEFAULT_MAX_DEPTH, DistillOptions
from distiller.skills.reachability.core import (
    Analysis,
    analyze_file,
    process_with_dependency_analysis,
)


def _options(
    *,
    dependency_aware: bool = True,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_workers: int | None = None,
    timeout: float | None = None,
) -> DistillOptions:
    options = DistillOptions(dependency_aware=dependency_aware, max_depth=max_depth, timeout=timeout)
    if max_workers:
        options.max_workers = max_workers
    return options


def analyze(
    file_path: str,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_workers: int | None = None,
    timeout: float | None = None,
) -> dict[str, Any]:
    """Run the reachability analysis and report what it kept.

    Returns dict with keys: file, project_root, related_files, entry_points,
    used, used_types, node_count, edge_count, files.
    """
    options = _options(max_depth=max_depth, max_workers=max_workers, timeout=timeout)
    analysis: Analysis = analyze_file(file_path, options)
    project = analysis.assemble()
    return {
        "file": analysis.source.path,
        "project_root": analysis.project_root,
        "related_files": analysis.discovery.related_files,
        "entry_points": analysis.entry_points,
        "used": sorted(analysis.used.fqns),
        "used_types": sorted(analysis.used.types),
        "node_count": analysis.graph.node_count,
        "edge_count": analysis.graph.edge_count,
        "files": {path: f.to_dict() for path, f in project.files.items()},
    }


def distill(
    file_path: str,
    *,
    dependency_aware: bool = True,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_workers: int | None = None,
    timeout: float | None = None,
) -> dict[str, Any]:
    """Distill *file_path* into a single-document tree.

    With dependency awareness off (or a negative max_depth) the plain
    declaration tree is returned.
    """
    options = _options(
        dependency_aware=dependency_aware,
        max_depth=max_depth,
        max_workers=max_workers,
        timeout=timeout,
    )
    return process_with_dependency_analysis(file_path, options).to_dict()
