"""Entry-point selection for the analyzed file."""

from __future__ import annotations

import logging

from distiller.adapters.base import ENTRY_VISIBILITIES
from distiller.ir import DistilledClass, DistilledFile, DistilledFunction
from distiller.models import SymbolIndex, make_fqn

logger = logging.getLogger(__name__)


CONSTRUCTOR_NAMES = ("__init__", "__construct")


def _is_primary(name: str) -> bool:
    return name.lower() == "main" or name == "__init__"


def _unique(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


def select_entry_points(
    tree: DistilledFile | None,
    index: SymbolIndex,
    file_path: str,
) -> list[str]:
    """Return entry-point FQNs for *file_path*, first matching rule wins.

    1. ``main``/``__init__`` functions and class constructors in the tree
    2. every top-level public (or default-visibility) tree declaration
    3. indexed symbols named ``main``
    4. every indexed symbol of the file
    """
    if tree is not None:
        primary: list[str] = []
        for node in tree.children:
            if isinstance(node, DistilledFunction) and _is_primary(node.name):
                primary.append(make_fqn(file_path, node.name))
            elif isinstance(node, DistilledClass):
                for method in node.methods:
                    if method.name in CONSTRUCTOR_NAMES or method.name.lower() == "main":
                        primary.append(make_fqn(file_path, method.name))
        if primary:
            logger.debug("Entry points from main/constructors: %s", primary)
            return _unique(primary)

        public = [
            make_fqn(file_path, node.name)
            for node in tree.children
            if isinstance(node, (DistilledFunction, DistilledClass))
            and node.visibility in ENTRY_VISIBILITIES
        ]
        if public:
            logger.debug("Entry points from public declarations: %s", public)
            return _unique(public)

    in_file = index.in_file(file_path)
    mains = [d.fqn for d in in_file if d.name.lower() == "main"]
    if mains:
        return mains

    logger.debug("No entry-point heuristic matched %s; keeping every symbol", file_path)
    return [d.fqn for d in in_file]
