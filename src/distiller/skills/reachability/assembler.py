"""Reconstruct per-file source from the byte ranges of used definitions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from distiller.adapters import get_adapter
from distiller.errors import AssemblyError
from distiller.models import SourceFile, SymbolDefinition, SymbolIndex, UsedSet

logger = logging.getLogger(__name__)


SNIPPET_SEPARATOR = "\n\n"


@dataclass(frozen=True)
class CodeSnippet:
    """A byte range of one source file; bytes are copied only at assembly."""

    start_byte: int
    end_byte: int
    fqn: str
    kind: str = "function"


@dataclass
class AssembledFile:
    path: str
    language: str
    snippets: list[CodeSnippet] = field(default_factory=list)
    content: str = ""

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "language": self.language,
            "snippets": [
                {"fqn": s.fqn, "kind": s.kind, "start_byte": s.start_byte, "end_byte": s.end_byte}
                for s in self.snippets
            ],
            "content": self.content,
        }


@dataclass
class Project:
    files: dict[str, AssembledFile] = field(default_factory=dict)
    entry_points: list[str] = field(default_factory=list)


def is_retained(definition: SymbolDefinition, used: UsedSet) -> bool:
    if definition.fqn in used.depths:
        return True
    return definition.kind == "class" and definition.name in used.types


def _check_range(snippet: CodeSnippet, size: int) -> None:
    if not (0 <= snippet.start_byte < snippet.end_byte <= size):
        raise AssemblyError(
            f"Invalid byte range {snippet.start_byte}-{snippet.end_byte} "
            f"for {snippet.fqn} (file has {size} bytes)"
        )


def assemble_file(source: SourceFile, definitions: list[SymbolDefinition]) -> AssembledFile:
    """Concatenate *definitions* of *source* in byte order."""
    size = len(source.content)
    snippets: list[CodeSnippet] = []
    for definition in sorted(definitions, key=lambda d: (d.start_byte, -d.end_byte)):
        snippet = CodeSnippet(definition.start_byte, definition.end_byte, definition.fqn, definition.kind)
        _check_range(snippet, size)
        if snippets:
            previous = snippets[-1]
            if snippet.end_byte <= previous.end_byte:
                continue  # already inside the previous snippet
            if snippet.start_byte < previous.end_byte:
                snippet = CodeSnippet(previous.end_byte, snippet.end_byte, snippet.fqn, snippet.kind)
        snippets.append(snippet)

    adapter = get_adapter(source.language)
    header = adapter.file_header if adapter is not None else ""
    body = SNIPPET_SEPARATOR.join(
        source.slice(s.start_byte, s.end_byte).strip("\r\n") for s in snippets
    )
    return AssembledFile(source.path, source.language, snippets, header + body)


def assemble_project(
    files: dict[str, SourceFile],
    index: SymbolIndex,
    used: UsedSet,
    entry_points: list[str],
) -> Project:
    """Group retained definitions by file and assemble each group."""
    grouped: dict[str, list[SymbolDefinition]] = {}
    for definition in index:
        if is_retained(definition, used):
            grouped.setdefault(definition.file_path, []).append(definition)

    project = Project(entry_points=list(entry_points))
    for path in sorted(grouped):
        source = files.get(path)
        if source is None:
            raise AssemblyError(f"No source loaded for {path}")
        project.files[path] = assemble_file(source, grouped[path])
        logger.debug("Assembled %s from %d snippets", path, len(project.files[path].snippets))
    return project
