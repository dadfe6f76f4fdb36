"""Related-file discovery.

Breadth-first walk from the analyzed file through each language adapter's
import resolver. Every file is read at most once; each BFS level is read on a
bounded thread pool and merged back in worklist order, so the result does not
depend on scheduling.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from distiller.adapters import get_adapter
from distiller.lang import detect_language, find_project_root
from distiller.models import SourceFile

logger = logging.getLogger(__name__)


@dataclass
class Discovery:
    """Outcome of one discovery walk."""

    start: str
    project_root: str
    files: dict[str, SourceFile] = field(default_factory=dict)
    imports: dict[str, list[str]] = field(default_factory=dict)
    failed: list[str] = field(default_factory=list)
    timed_out: bool = False

    @property
    def related_files(self) -> list[str]:
        return list(self.files)


def load_source(path: str | Path) -> SourceFile:
    """Read a file once. Raises OSError when it cannot be read."""
    resolved = Path(path).resolve()
    return SourceFile(
        path=str(resolved),
        content=resolved.read_bytes(),
        language=detect_language(resolved),
    )


def _expired(deadline: float | None) -> bool:
    return deadline is not None and time.monotonic() >= deadline


def _resolve_imports(source: SourceFile, project_root: Path) -> list[str]:
    adapter = get_adapter(source.language)
    if adapter is None:
        logger.debug("No adapter for %s (%s); no imports followed", source.path, source.language)
        return []
    return adapter.extract_imports(source, project_root)


def _visit(path: str, project_root: Path, deadline: float | None) -> tuple[SourceFile, list[str]] | None:
    if _expired(deadline):
        return None
    source = load_source(path)
    return source, _resolve_imports(source, project_root)


def discover_related_files(
    start: SourceFile,
    *,
    project_root: str | Path | None = None,
    max_workers: int = 4,
    deadline: float | None = None,
) -> Discovery:
    """Collect *start* and every local file reachable through its imports.

    *deadline* is a ``time.monotonic()`` value; once passed, the walk stops
    and returns the files gathered so far.
    """
    root = Path(project_root).resolve() if project_root else find_project_root(start.path)
    result = Discovery(start=start.path, project_root=str(root))

    result.files[start.path] = start
    result.imports[start.path] = _resolve_imports(start, root)
    visited = {start.path}
    level = [p for p in result.imports[start.path] if p not in visited]
    visited.update(level)

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        while level:
            futures = [(path, pool.submit(_visit, path, root, deadline)) for path in level]
            next_level: list[str] = []
            for path, future in futures:
                try:
                    outcome = future.result()
                except OSError as exc:
                    logger.warning("Skipping unreadable file %s: %s", path, exc)
                    result.failed.append(path)
                    continue
                if outcome is None:
                    result.timed_out = True
                    continue
                source, imports = outcome
                result.files[path] = source
                result.imports[path] = imports
                for imported in imports:
                    if imported not in visited:
                        visited.add(imported)
                        next_level.append(imported)
            if result.timed_out:
                logger.warning(
                    "Deadline reached during discovery from %s; %d files collected",
                    start.path,
                    len(result.files),
                )
                break
            level = next_level

    logger.info("Discovered %d related files from %s", len(result.files), start.path)
    return result
