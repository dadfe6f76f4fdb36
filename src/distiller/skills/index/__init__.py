"""Index skill – discover related files and index their symbols.

Public API
----------
- load(file_path, *, max_workers=None, timeout=None) -> (Discovery, SymbolIndex)
- discover(file_path, *, max_workers=None, timeout=None) -> dict
- symbols(file_path, *, related=False, max_workers=None, timeout=None) -> dict
- get_body(file_path, function, *, max_workers=None, timeout=None) -> dict | None
"""

from __future__ import annotations

import time
from typing import Any

from distiller.models import DistillOptions, SymbolDefinition, SymbolIndex
from distiller.skills.index.discovery import (
    Discovery,
    discover_related_files,
    load_source,
)
from distiller.skills.index.indexer import (
    FunctionBody,
    build_index,
    get_function_body,
)


def _walk(file_path: str, max_workers: int | None, timeout: float | None) -> Discovery:
    workers = max_workers or DistillOptions().max_workers
    deadline = time.monotonic() + timeout if timeout is not None else None
    start = load_source(file_path)
    return discover_related_files(start, max_workers=workers, deadline=deadline)


def load(
    file_path: str,
    *,
    max_workers: int | None = None,
    timeout: float | None = None,
) -> tuple[Discovery, SymbolIndex]:
    """Read *file_path*, discover its related files and index all of them."""
    discovery = _walk(file_path, max_workers, timeout)
    index = build_index(discovery.files.values(), max_workers=max_workers or DistillOptions().max_workers)
    return discovery, index


def _symbol_dict(definition: SymbolDefinition) -> dict[str, Any]:
    return {
        "name": definition.name,
        "fqn": definition.fqn,
        "kind": definition.kind,
        "file": definition.file_path,
        "start_line": definition.first_line,
        "line": definition.line,
        "end_line": definition.end_line,
        "start_byte": definition.start_byte,
        "end_byte": definition.end_byte,
        "visibility": definition.visibility,
    }


def discover(
    file_path: str,
    *,
    max_workers: int | None = None,
    timeout: float | None = None,
) -> dict[str, Any]:
    """List the related file set of *file_path*.

    Returns dict with keys: file, project_root, related_files, imports,
    failed, timed_out, count.
    """
    discovery = _walk(file_path, max_workers, timeout)
    return {
        "file": discovery.start,
        "project_root": discovery.project_root,
        "related_files": discovery.related_files,
        "imports": discovery.imports,
        "failed": discovery.failed,
        "timed_out": discovery.timed_out,
        "count": len(discovery.files),
    }


def symbols(
    file_path: str,
    *,
    related: bool = False,
    max_workers: int | None = None,
    timeout: float | None = None,
) -> dict[str, Any]:
    """List indexed symbols of *file_path*, or of its whole related set.

    Returns dict with keys: file, symbols, count.
    """
    discovery, index = load(file_path, max_workers=max_workers, timeout=timeout)
    if related:
        found = list(index)
    else:
        found = index.in_file(discovery.start)
    return {
        "file": discovery.start,
        "symbols": [_symbol_dict(d) for d in found],
        "count": len(found),
    }


def get_body(
    file_path: str,
    function: str,
    *,
    max_workers: int | None = None,
    timeout: float | None = None,
) -> dict[str, Any] | None:
    """Return the source of *function* (a bare name or an FQN), or None.

    A bare name is resolved the way a call from *file_path* would be.
    """
    discovery, index = load(file_path, max_workers=max_workers, timeout=timeout)
    definition = index.get(function)
    if definition is None:
        candidates = index.by_name(function)
        by_file = {c.file_path: c for c in candidates}
        definition = by_file.get(discovery.start) or next(
            (by_file[p] for p in discovery.imports.get(discovery.start, []) if p in by_file),
            candidates[0] if candidates else None,
        )
    if definition is None:
        return None
    body: FunctionBody = get_function_body(definition, discovery.files[definition.file_path])
    return {
        "function": definition.name,
        "fqn": body.fqn,
        "file": body.file,
        "start_line": body.start_line,
        "end_line": body.end_line,
        "source": body.source,
    }
