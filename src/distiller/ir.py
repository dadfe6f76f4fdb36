"""Structural declaration tree.

The tree is what the rest of a distillation pipeline consumes: files holding
imports, classes, functions and comments. Python files are parsed with the
``ast`` module; other languages get a shallow tree derived from the symbol
index of their adapter.
"""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass, field
from typing import Any, Union

from distiller.adapters import get_adapter
from distiller.adapters.python import python_visibility
from distiller.models import SourceFile, SymbolDefinition

logger = logging.getLogger(__name__)


@dataclass
class DistilledImport:
    import_type: str
    module: str
    symbols: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "import",
            "import_type": self.import_type,
            "module": self.module,
            "symbols": list(self.symbols),
        }


@dataclass
class DistilledComment:
    text: str
    format: str = "block"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "comment", "format": self.format, "text": self.text}


@dataclass
class DistilledFunction:
    name: str
    visibility: str = "public"
    parameters: list[dict[str, Any]] = field(default_factory=list)
    returns: str | None = None
    implementation: str = ""
    line: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "function",
            "name": self.name,
            "visibility": self.visibility,
            "parameters": [dict(p) for p in self.parameters],
            "returns": self.returns,
            "implementation": self.implementation,
            "line": self.line,
        }


@dataclass
class DistilledClass:
    name: str
    visibility: str = "public"
    extends: list[str] = field(default_factory=list)
    children: list[Node] = field(default_factory=list)
    line: int = 0

    @property
    def methods(self) -> list[DistilledFunction]:
        return [c for c in self.children if isinstance(c, DistilledFunction)]

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "class",
            "name": self.name,
            "visibility": self.visibility,
            "extends": list(self.extends),
            "line": self.line,
            "children": [c.to_dict() for c in self.children],
        }


Node = Union[DistilledImport, DistilledComment, DistilledFunction, DistilledClass]


@dataclass
class DistilledFile:
    path: str
    language: str
    children: list[Node] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "file",
            "path": self.path,
            "language": self.language,
            "children": [c.to_dict() for c in self.children],
        }


def build_tree(source: SourceFile) -> DistilledFile:
    """Build the declaration tree for one file."""
    if source.language == "python":
        try:
            return _python_tree(source)
        except (SyntaxError, ValueError) as exc:
            logger.debug("ast could not parse %s (%s); using the scanned tree", source.path, exc)
    return _scanned_tree(source)


# ---------------------------------------------------------------------------
# Python via ast
# ---------------------------------------------------------------------------
def _unparse(node: ast.AST | None) -> str | None:
    return ast.unparse(node) if node is not None else None


def _parameters(args: ast.arguments) -> list[dict[str, Any]]:
    params: list[dict[str, Any]] = []
    for arg in [*args.posonlyargs, *args.args]:
        params.append({"name": arg.arg, "type": _unparse(arg.annotation)})
    if args.vararg is not None:
        params.append({"name": "*" + args.vararg.arg, "type": _unparse(args.vararg.annotation)})
    for arg in args.kwonlyargs:
        params.append({"name": arg.arg, "type": _unparse(arg.annotation)})
    if args.kwarg is not None:
        params.append({"name": "**" + args.kwarg.arg, "type": _unparse(args.kwarg.annotation)})
    return params


def _python_nodes(body: list[ast.stmt], text: str) -> list[Node]:
    nodes: list[Node] = []
    for stmt in body:
        if isinstance(stmt, ast.Import):
            nodes.append(DistilledImport("import", ", ".join(a.name for a in stmt.names)))
        elif isinstance(stmt, ast.ImportFrom):
            module = "." * stmt.level + (stmt.module or "")
            nodes.append(DistilledImport("from", module, [a.name for a in stmt.names]))
        elif isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
            nodes.append(
                DistilledFunction(
                    name=stmt.name,
                    visibility=python_visibility(stmt.name),
                    parameters=_parameters(stmt.args),
                    returns=_unparse(stmt.returns),
                    implementation=ast.get_source_segment(text, stmt) or "",
                    line=stmt.lineno,
                )
            )
        elif isinstance(stmt, ast.ClassDef):
            nodes.append(
                DistilledClass(
                    name=stmt.name,
                    visibility=python_visibility(stmt.name),
                    extends=[ast.unparse(b) for b in stmt.bases],
                    children=_python_nodes(stmt.body, text),
                    line=stmt.lineno,
                )
            )
    return nodes


def _python_tree(source: SourceFile) -> DistilledFile:
    module = ast.parse(source.text, filename=source.path)
    return DistilledFile(source.path, source.language, _python_nodes(module.body, source.text))


# ---------------------------------------------------------------------------
# Other languages via the adapter's symbol scan
# ---------------------------------------------------------------------------
def _scanned_tree(source: SourceFile) -> DistilledFile:
    tree = DistilledFile(source.path, source.language)
    adapter = get_adapter(source.language)
    if adapter is None:
        return tree

    definitions = sorted(adapter.index_symbols(source), key=lambda d: d.start_byte)
    stack: list[tuple[SymbolDefinition, Node | None]] = []
    for definition in definitions:
        while stack and not stack[-1][0].encloses(definition):
            stack.pop()
        parent = stack[-1][1] if stack else tree

        node: Node | None
        if definition.kind == "class":
            node = DistilledClass(
                name=definition.name,
                visibility=definition.visibility,
                line=definition.line,
            )
        else:
            node = DistilledFunction(
                name=definition.name,
                visibility=definition.visibility,
                implementation=source.slice(definition.start_byte, definition.end_byte),
                line=definition.line,
            )

        if isinstance(parent, (DistilledFile, DistilledClass)):
            parent.children.append(node)
        else:
            node = None  # nested inside a function body
        stack.append((definition, node))
    return tree
