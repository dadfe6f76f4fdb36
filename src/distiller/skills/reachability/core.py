"""Dependency-aware distillation of one source file.

Pipeline:
1. Discover related files through imports (parallel reads)
2. Index symbols of every related file (parallel, then a barrier)
3. Build the cross-file call graph
4. Select entry points and mark everything reachable within max_depth
5. Assemble used definitions per file and collapse into one document

Nothing past the initial read of the analyzed file is allowed to abort the
run: failures degrade to the filtered or unfiltered tree.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from distiller.adapters import get_adapter
from distiller.errors import AssemblyError
from distiller.ir import DistilledFile, build_tree
from distiller.models import CallGraph, DistillOptions, SourceFile, SymbolIndex, UsedSet
from distiller.skills.graph.callgraph import build_call_graph
from distiller.skills.index.discovery import Discovery, discover_related_files, load_source
from distiller.skills.index.indexer import build_index
from distiller.skills.reachability.assembler import Project, assemble_project
from distiller.skills.reachability.collapser import collapse_project, filter_tree_by_usage
from distiller.skills.reachability.entrypoints import select_entry_points
from distiller.skills.reachability.traversal import mark_reachable

logger = logging.getLogger(__name__)


@dataclass
class Analysis:
    """Everything one analysis run produced, short of assembly."""

    source: SourceFile
    tree: DistilledFile
    discovery: Discovery
    index: SymbolIndex
    graph: CallGraph
    entry_points: list[str]
    used: UsedSet

    @property
    def project_root(self) -> str:
        return self.discovery.project_root

    def assemble(self) -> Project:
        return assemble_project(self.discovery.files, self.index, self.used, self.entry_points)


def analyze_source(
    source: SourceFile,
    options: DistillOptions,
    tree: DistilledFile | None = None,
) -> Analysis:
    """Run discovery, indexing, call-graph building and traversal for *source*."""
    deadline = time.monotonic() + options.timeout if options.timeout is not None else None
    tree = tree if tree is not None else build_tree(source)

    discovery = discover_related_files(source, max_workers=options.max_workers, deadline=deadline)
    index = build_index(discovery.files.values(), max_workers=options.max_workers)
    graph = build_call_graph(discovery, index)

    entry_points = select_entry_points(tree, index, source.path)
    used = mark_reachable(entry_points, graph, index, max_depth=options.max_depth, tree=tree)
    return Analysis(source, tree, discovery, index, graph, entry_points, used)


def analyze_file(file_path: str, options: DistillOptions | None = None) -> Analysis:
    """Load *file_path* and analyze it. Raises OSError if it cannot be read."""
    return analyze_source(load_source(file_path), options or DistillOptions())


def process_with_dependency_analysis(
    file_path: str,
    options: DistillOptions | None = None,
) -> DistilledFile:
    """Distill *file_path* down to the code reachable from its entry points.

    Returns the plain tree when the analysis is disabled, when the language
    has no adapter, or when the analysis fails unexpectedly. When only the
    assembly step fails, returns the tree filtered by the used set.
    """
    options = options or DistillOptions()
    source = load_source(file_path)
    tree = build_tree(source)

    if not options.enabled:
        return tree
    if get_adapter(source.language) is None:
        logger.info("Dependency analysis not available for %s (%s)", source.path, source.language)
        return tree

    logger.info("Dependency-aware analysis of %s (max depth %d)", source.path, options.max_depth)
    try:
        analysis = analyze_source(source, options, tree)
    except Exception:
        logger.exception("Dependency analysis failed for %s; returning unfiltered result", source.path)
        return tree

    try:
        project = analysis.assemble()
        return collapse_project(project, tree, analysis.project_root)
    except AssemblyError as exc:
        logger.warning("Assembly failed for %s (%s); filtering the tree instead", source.path, exc)
        return filter_tree_by_usage(tree, analysis.used)
    except Exception:
        logger.exception("Assembling %s failed; returning unfiltered result", source.path)
        return tree
