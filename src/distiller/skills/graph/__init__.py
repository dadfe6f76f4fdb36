"""Call graph skill – build, inspect, and query cross-file call graphs.

Public API
----------
- build(file_path, *, max_workers=None, timeout=None) -> dict
- show(file_path, *, max_workers=None, timeout=None) -> dict
- callees(file_path, function, *, max_workers=None, timeout=None) -> dict
- callers(file_path, function, *, max_workers=None, timeout=None) -> dict
"""

from __future__ import annotations

from typing import Any

from distiller.errors import SymbolNotFoundError
from distiller.models import CallGraph, SymbolIndex
from distiller.skills.graph.callgraph import build_call_graph as _build_graph
from distiller.skills.index import load as _load


def _require_graph(file_path: str, **kwargs: Any) -> tuple[CallGraph, SymbolIndex, str]:
    discovery, index = _load(file_path, **kwargs)
    return _build_graph(discovery, index), index, discovery.start


def _lookup(index: SymbolIndex, function: str) -> list[str]:
    """FQNs for *function*, given either as an FQN or a bare name."""
    if function in index:
        return [function]
    fqns = [d.fqn for d in index.by_name(function)]
    if not fqns:
        raise SymbolNotFoundError(f"Function '{function}' not found in the related files")
    return fqns


def build(
    file_path: str,
    *,
    max_workers: int | None = None,
    timeout: float | None = None,
) -> dict[str, Any]:
    """Build the call graph for *file_path* and its related files.

    Returns status dict with keys: status, file, file_count, symbol_count,
    node_count, edge_count.
    """
    discovery, index = _load(file_path, max_workers=max_workers, timeout=timeout)
    graph = _build_graph(discovery, index)
    return {
        "status": "built",
        "file": discovery.start,
        "file_count": len(discovery.files),
        "symbol_count": len(index),
        "node_count": graph.node_count,
        "edge_count": graph.edge_count,
    }


def show(
    file_path: str,
    *,
    max_workers: int | None = None,
    timeout: float | None = None,
) -> dict[str, Any]:
    """Return the full call graph as JSON.

    Returns dict with keys: graph, node_count, edge_count.
    """
    graph, _, _ = _require_graph(file_path, max_workers=max_workers, timeout=timeout)
    return {
        "graph": graph.to_dict(),
        "node_count": graph.node_count,
        "edge_count": graph.edge_count,
    }


def callees(
    file_path: str,
    function: str,
    *,
    max_workers: int | None = None,
    timeout: float | None = None,
) -> dict[str, Any]:
    """List direct callees of a function, in call order with duplicates.

    Returns dict with keys: function, callees, count.
    """
    graph, index, _ = _require_graph(file_path, max_workers=max_workers, timeout=timeout)
    callee_list: list[str] = []
    for fqn in _lookup(index, function):
        callee_list.extend(graph.callees(fqn))
    return {
        "function": function,
        "callees": callee_list,
        "count": len(callee_list),
    }


def callers(
    file_path: str,
    function: str,
    *,
    max_workers: int | None = None,
    timeout: float | None = None,
) -> dict[str, Any]:
    """List direct callers of a function (reverse lookup).

    Returns dict with keys: function, callers, count.
    """
    graph, index, _ = _require_graph(file_path, max_workers=max_workers, timeout=timeout)
    caller_set: set[str] = set()
    for fqn in _lookup(index, function):
        caller_set.update(graph.callers(fqn))
    caller_list = sorted(caller_set)
    return {
        "function": function,
        "callers": caller_list,
        "count": len(caller_list),
    }
