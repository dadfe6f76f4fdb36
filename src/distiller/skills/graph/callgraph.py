"""Cross-file call graph construction.

Runs after the whole related set has been indexed:

1. Tokenize each file with its language's Pygments lexer (via the adapter)
2. Match Name tokens against the global SymbolIndex
3. Resolve each hit to one definition (receiver, same file, imports, path order)
4. Record an edge from the innermost enclosing definition
5. Link every class to the definitions nested directly inside it
"""

from __future__ import annotations

import logging

from distiller.adapters import get_adapter
from distiller.models import CallGraph, SymbolIndex
from distiller.skills.index.discovery import Discovery

logger = logging.getLogger(__name__)


def build_call_graph(discovery: Discovery, index: SymbolIndex) -> CallGraph:
    """Build the call graph for every file in *discovery*."""
    graph = CallGraph()

    for path in sorted(discovery.files):
        source = discovery.files[path]
        adapter = get_adapter(source.language)
        if adapter is None:
            continue
        edges = adapter.extract_calls(source, index, discovery.imports.get(path, []))
        for caller, callee in edges:
            graph.add_edge(caller, callee)
        logger.debug("%s: %d call edges", path, len(edges))

    for definition in index:
        if definition.kind != "class":
            continue
        for member in index.children_of(definition):
            graph.add_edge(definition.fqn, member.fqn)

    logger.info(
        "Call graph: %d callers, %d edges", graph.node_count, graph.edge_count
    )
    return graph
