"""Symbol indexing over the related file set.

Each file is indexed independently on a bounded thread pool. The returned
SymbolIndex is complete before any caller sees it, which is what the call
graph builder relies on.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable

from distiller.adapters import get_adapter
from distiller.models import SourceFile, SymbolDefinition, SymbolIndex

logger = logging.getLogger(__name__)


@dataclass
class FunctionBody:
    """Source text of one indexed definition."""

    fqn: str
    file: str
    start_line: int
    end_line: int
    source: str


def index_file(source: SourceFile) -> list[SymbolDefinition]:
    adapter = get_adapter(source.language)
    if adapter is None:
        logger.debug("Skipping symbols of %s: unsupported language %s", source.path, source.language)
        return []
    return adapter.index_symbols(source)


def build_index(files: Iterable[SourceFile], *, max_workers: int = 4) -> SymbolIndex:
    """Index every file and merge the results into one SymbolIndex."""
    sources = list(files)
    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        per_file = list(pool.map(index_file, sources))
    index = SymbolIndex(d for definitions in per_file for d in definitions)
    logger.info("Indexed %d symbols across %d files", len(index), len(sources))
    return index


def get_function_body(definition: SymbolDefinition, source: SourceFile) -> FunctionBody:
    return FunctionBody(
        fqn=definition.fqn,
        file=definition.file_path,
        start_line=definition.first_line,
        end_line=definition.end_line,
        source=source.slice(definition.start_byte, definition.end_byte),
    )
