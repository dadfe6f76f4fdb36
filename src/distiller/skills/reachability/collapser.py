"""Fold an assembled project back into a single-document tree.

Also provides the whole-tree filter used when assembly fails.
"""

from __future__ import annotations

import logging
from pathlib import Path

from distiller.adapters import get_adapter
from distiller.ir import (
    DistilledClass,
    DistilledComment,
    DistilledFile,
    DistilledFunction,
    Node,
)
from distiller.models import UsedSet, make_fqn
from distiller.skills.reachability.assembler import Project

logger = logging.getLogger(__name__)


IMPLEMENTATION_FORMAT = "implementation"


def _display_path(path: str, project_root: str | None) -> str:
    if project_root:
        try:
            return Path(path).relative_to(project_root).as_posix()
        except ValueError:
            pass
    return path


def collapse_project(
    project: Project,
    tree: DistilledFile,
    project_root: str | None = None,
) -> DistilledFile:
    """One DistilledFile for the analyzed input holding every assembled file."""
    analyzed = tree.path
    order = [p for p in project.files if p == analyzed]
    order += sorted(p for p in project.files if p != analyzed)

    sections: list[str] = []
    for path in order:
        assembled = project.files[path]
        adapter = get_adapter(assembled.language)
        prefix = adapter.comment_prefix if adapter is not None else "//"
        sections.append(f"{prefix} === {_display_path(path, project_root)} ===\n{assembled.content}")

    return DistilledFile(
        path=tree.path,
        language=tree.language,
        children=[DistilledComment(text="\n\n".join(sections), format=IMPLEMENTATION_FORMAT)],
    )


def _is_used(name: str, path: str, used: UsedSet, owner: str | None = None) -> bool:
    keys = [make_fqn(path, name), name]
    if owner:
        keys.append(f"{owner}.{name}")
    return any(key in used for key in keys)


def _filter_class(cls: DistilledClass, path: str, used: UsedSet) -> DistilledClass | None:
    kept: list[Node] = []
    for child in cls.children:
        if isinstance(child, DistilledFunction):
            if _is_used(child.name, path, used, owner=cls.name):
                kept.append(child)
        elif isinstance(child, DistilledClass):
            nested = _filter_class(child, path, used)
            if nested is not None:
                kept.append(nested)
    if not kept:
        return None
    return DistilledClass(
        name=cls.name,
        visibility=cls.visibility,
        extends=list(cls.extends),
        children=kept,
        line=cls.line,
    )


def filter_tree_by_usage(tree: DistilledFile, used: UsedSet) -> DistilledFile:
    """Keep only declarations whose name is in *used*.

    Functions match by FQN or bare name, methods also by ``Class.method``.
    A class survives only while it still holds at least one method.
    Imports and comments are kept as they are.
    """
    kept: list[Node] = []
    for node in tree.children:
        if isinstance(node, DistilledFunction):
            if _is_used(node.name, tree.path, used):
                kept.append(node)
        elif isinstance(node, DistilledClass):
            filtered = _filter_class(node, tree.path, used)
            if filtered is not None:
                kept.append(filtered)
        else:
            kept.append(node)
    logger.debug("Tree filter kept %d of %d nodes in %s", len(kept), len(tree.children), tree.path)
    return DistilledFile(tree.path, tree.language, kept)
