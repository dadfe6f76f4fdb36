"""Bounded-depth reachability over the call graph.

Each FQN remembers the smallest depth it was reached at and is expanded again
only when a shorter path to it turns up. That yields the same used set as
keying visits by ``(fqn, depth)``, without re-walking every path, and the
explicit stack keeps deep graphs clear of the recursion limit.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from distiller.adapters import get_adapter
from distiller.ir import DistilledClass, DistilledFile, DistilledFunction
from distiller.models import CallGraph, SymbolIndex, UsedSet, make_fqn

logger = logging.getLogger(__name__)


_TYPE_NAME = re.compile(r"\b([A-Z][A-Za-z0-9_]*)\b")


def tree_types(tree: DistilledFile | None) -> dict[str, set[str]]:
    """Capitalized names in each tree function's parameter and return types."""
    if tree is None:
        return {}
    found: dict[str, set[str]] = {}

    def visit(nodes) -> None:
        for node in nodes:
            if isinstance(node, DistilledFunction):
                annotations = [p.get("type") or "" for p in node.parameters]
                annotations.append(node.returns or "")
                names = set(_TYPE_NAME.findall(" ".join(annotations)))
                if names:
                    found.setdefault(make_fqn(tree.path, node.name), set()).update(names)
            elif isinstance(node, DistilledClass):
                visit(node.children)

    visit(tree.children)
    return found


def _types_of(fqn: str, index: SymbolIndex, extra: dict[str, set[str]]) -> set[str]:
    definition = index.get(fqn)
    names = set(extra.get(fqn, ()))
    if definition is None:
        return names
    adapter = get_adapter(definition.language)
    if adapter is not None:
        names |= adapter.header_types(definition)
        names = {n for n in names if n not in adapter.primitive_types}
    names.discard(definition.name)
    return names


def mark_reachable(
    entry_points: Iterable[str],
    graph: CallGraph,
    index: SymbolIndex,
    *,
    max_depth: int,
    tree: DistilledFile | None = None,
) -> UsedSet:
    """Mark everything reachable from *entry_points* within *max_depth* calls."""
    used = UsedSet()
    if max_depth < 0:
        return used

    extra = tree_types(tree)
    best: dict[str, int] = {}
    for entry in entry_points:
        stack = [(entry, 0)]
        while stack:
            fqn, depth = stack.pop()
            if depth > max_depth:
                continue
            if fqn in best and best[fqn] <= depth:
                continue
            best[fqn] = depth
            used.mark(fqn, depth)
            for name in _types_of(fqn, index, extra):
                used.mark_type(name)
            for callee in reversed(graph.callees(fqn)):
                stack.append((callee, depth + 1))

    logger.info(
        "Marked %d symbols and %d types as used (max depth %d)",
        len(used.depths),
        len(used.types),
        max_depth,
    )
    return used
