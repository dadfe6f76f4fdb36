"""Core data model shared by the index, graph and reachability skills."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import cached_property
from typing import Iterable, Iterator


DEFAULT_MAX_DEPTH = 100


def _default_workers() -> int:
    return min(8, os.cpu_count() or 1)


@dataclass
class DistillOptions:
    """Knobs for one dependency-aware analysis run."""

    dependency_aware: bool = True
    max_depth: int = DEFAULT_MAX_DEPTH
    max_workers: int = field(default_factory=_default_workers)
    timeout: float | None = None

    @property
    def enabled(self) -> bool:
        return self.dependency_aware and self.max_depth >= 0


@dataclass(frozen=True)
class Line:
    """One physical line of a source file."""

    number: int  # 1-based
    start: int  # byte offset of the first character
    end: int  # byte offset just past the last character, terminator excluded
    text: str


@dataclass(frozen=True)
class SourceFile:
    """A file loaded once per run; read-only after load."""

    path: str
    content: bytes
    language: str

    @cached_property
    def lines(self) -> list[Line]:
        lines: list[Line] = []
        offset = 0
        for number, raw in enumerate(self.content.splitlines(keepends=True), start=1):
            body = raw.rstrip(b"\r\n")
            lines.append(
                Line(
                    number=number,
                    start=offset,
                    end=offset + len(body),
                    text=body.decode("utf-8", errors="replace"),
                )
            )
            offset += len(raw)
        return lines

    @cached_property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def slice(self, start: int, end: int) -> str:
        return self.content[start:end].decode("utf-8", errors="replace")


@dataclass(frozen=True)
class SymbolDefinition:
    """A function or class definition located by a language adapter."""

    name: str
    fqn: str
    file_path: str
    start_byte: int
    end_byte: int
    line: int
    end_line: int
    language: str
    kind: str = "function"
    signature: str = ""
    visibility: str = "public"
    start_line: int = 0  # first decorator/annotation line; 0 when there is none

    @property
    def first_line(self) -> int:
        """First line of the byte range, annotations included."""
        return self.start_line or self.line

    def contains_line(self, number: int) -> bool:
        return self.first_line <= number <= self.end_line

    def encloses(self, other: SymbolDefinition) -> bool:
        return (
            self.file_path == other.file_path
            and self.start_byte <= other.start_byte
            and other.end_byte <= self.end_byte
            and self.fqn != other.fqn
        )


def make_fqn(file_path: str, name: str) -> str:
    return f"{file_path}::{name}"


def bare_name(fqn: str) -> str:
    return fqn.rsplit("::", 1)[-1]


class SymbolIndex:
    """Global symbol table over every related file.

    Lookups by name are ordered by file path and lookups by file are ordered
    by start byte, so every consumer sees the same order on every run.
    """

    def __init__(self, definitions: Iterable[SymbolDefinition] = ()) -> None:
        self._by_fqn: dict[str, SymbolDefinition] = {}
        for definition in definitions:
            # Same-named definitions in one file collide; last write wins.
            self._by_fqn[definition.fqn] = definition

        self._by_name: dict[str, list[SymbolDefinition]] = {}
        self._by_file: dict[str, list[SymbolDefinition]] = {}
        for definition in sorted(self._by_fqn.values(), key=lambda d: (d.file_path, d.start_byte)):
            self._by_name.setdefault(definition.name, []).append(definition)
            self._by_file.setdefault(definition.file_path, []).append(definition)

    def __len__(self) -> int:
        return len(self._by_fqn)

    def __contains__(self, fqn: object) -> bool:
        return fqn in self._by_fqn

    def __iter__(self) -> Iterator[SymbolDefinition]:
        for path in sorted(self._by_file):
            yield from self._by_file[path]

    def get(self, fqn: str) -> SymbolDefinition | None:
        return self._by_fqn.get(fqn)

    def by_name(self, name: str) -> list[SymbolDefinition]:
        return self._by_name.get(name, [])

    def in_file(self, path: str) -> list[SymbolDefinition]:
        return self._by_file.get(path, [])

    @property
    def names(self) -> set[str]:
        return set(self._by_name)

    @property
    def files(self) -> list[str]:
        return sorted(self._by_file)

    def enclosing(self, path: str, line: int) -> SymbolDefinition | None:
        """Innermost definition in *path* whose line span contains *line*."""
        best: SymbolDefinition | None = None
        for definition in self.in_file(path):
            if definition.first_line > line:
                break
            if definition.contains_line(line):
                best = definition
        return best

    def children_of(self, definition: SymbolDefinition) -> list[SymbolDefinition]:
        """Definitions nested directly inside *definition*."""
        nested = [d for d in self.in_file(definition.file_path) if definition.encloses(d)]
        return [d for d in nested if not any(o.encloses(d) for o in nested)]


class CallGraph:
    """Adjacency map from caller FQN to an ordered list of callee FQNs.

    Duplicate edges are kept.
    """

    def __init__(self) -> None:
        self._edges: dict[str, list[str]] = {}

    def add_edge(self, caller: str, callee: str) -> None:
        self._edges.setdefault(caller, []).append(callee)

    def callees(self, fqn: str) -> list[str]:
        return list(self._edges.get(fqn, []))

    def callers(self, fqn: str) -> list[str]:
        return sorted(caller for caller, targets in self._edges.items() if fqn in targets)

    @property
    def node_count(self) -> int:
        return len(self._edges)

    @property
    def edge_count(self) -> int:
        return sum(len(v) for v in self._edges.values())

    def to_dict(self) -> dict[str, list[str]]:
        return {caller: list(targets) for caller, targets in sorted(self._edges.items())}


class UsedSet:
    """Symbols and bare type names marked reachable; only ever grows."""

    def __init__(self) -> None:
        self.depths: dict[str, int] = {}
        self.types: set[str] = set()

    def mark(self, fqn: str, depth: int) -> None:
        if fqn not in self.depths or depth < self.depths[fqn]:
            self.depths[fqn] = depth

    def mark_type(self, name: str) -> None:
        self.types.add(name)

    @property
    def fqns(self) -> set[str]:
        return set(self.depths)

    def __contains__(self, key: object) -> bool:
        return key in self.depths or key in self.types

    def __len__(self) -> int:
        return len(self.depths) + len(self.types)
