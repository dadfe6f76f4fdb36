"""Java adapter: package-aware import resolution and brace-delimited methods."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from distiller.adapters.base import Header, LanguageAdapter, dedupe, siblings
from distiller.models import SourceFile

logger = logging.getLogger(__name__)


STDLIB_PREFIXES = ("java.", "javax.", "org.w3c.", "org.xml.", "org.ietf.jgss.")

MODIFIERS = frozenset({
    "public", "private", "protected", "static", "final", "abstract",
    "synchronized", "native", "default", "strictfp", "transient", "volatile",
})
_NOT_A_TYPE = frozenset({"return", "new", "else", "throw", "case", "yield"}) | MODIFIERS
_NOT_A_NAME = frozenset({"if", "for", "while", "switch", "catch", "synchronized", "try"})

_METHOD = re.compile(
    r"^\s*((?:(?:public|private|protected|static|final|abstract|synchronized|native|default|strictfp)\s+)*)"
    r"(?:<[^>]+>\s+)?([\w.$]+(?:<[^>]*>)?(?:\[\])*)\s+([A-Za-z_$][\w$]*)\s*\("
)
_CLASS = re.compile(
    r"^\s*((?:(?:public|private|protected|static|final|abstract|sealed|non-sealed)\s+)*)"
    r"(?:class|interface|enum|record|@interface)\s+([A-Za-z_$][\w$]*)"
)
_IMPORT = re.compile(r"^\s*import\s+(?:static\s+)?([\w.]+?)(\.\*)?\s*;")
_PACKAGE = re.compile(r"^\s*package\s+([\w.]+)\s*;", re.MULTILINE)


def modifier_visibility(modifiers: str, default: str) -> str:
    for word in ("public", "private", "protected", "internal"):
        if re.search(rf"\b{word}\b", modifiers):
            return word
    return default


class JavaAdapter(LanguageAdapter):
    language = "java"
    extensions = (".java",)
    annotation_prefixes = ("@",)
    stop_words = frozenset({
        "if", "else", "for", "while", "switch", "case", "return", "new",
        "this", "super", "null", "true", "false", "System", "out", "println",
        "print", "String", "Integer", "Math", "List", "Map", "Arrays",
        "Collections", "Objects", "get", "set", "put", "add", "remove",
        "size", "equals", "hashCode", "toString", "valueOf", "length",
    })
    primitive_types = frozenset({
        "String", "Integer", "Long", "Double", "Float", "Boolean", "Character",
        "Byte", "Short", "Object", "Void", "List", "Map", "Set", "Optional",
        "Collection", "Iterable", "Exception", "RuntimeException", "Override",
    })

    def match_header(self, text: str, source: SourceFile) -> Header | None:
        m = _CLASS.match(text)
        if m:
            return Header(m.group(2), "class", modifier_visibility(m.group(1), "package"))
        m = _METHOD.match(text)
        if m is None:
            return None
        modifiers, return_type, name = m.groups()
        if return_type in _NOT_A_TYPE or name in _NOT_A_NAME:
            return None
        if name == Path(source.path).stem:
            return None  # constructor
        if text.rstrip().endswith(";") and "abstract" not in modifiers:
            return None  # field initialised from a call
        return Header(name, "function", modifier_visibility(modifiers, "package"))

    def extract_imports(self, source: SourceFile, project_root: Path) -> list[str]:
        here = Path(source.path).parent
        source_root = self._source_root(source, here)
        found: list[Path] = []
        for line in source.lines:
            m = _IMPORT.match(line.text)
            if not m:
                continue
            dotted, wildcard = m.groups()
            if dotted.startswith(STDLIB_PREFIXES) or (dotted + ".").startswith(STDLIB_PREFIXES):
                continue
            found.extend(self._resolve(dotted, bool(wildcard), here, source_root))

        # Same-package types need no import.
        found.extend(siblings(source.path, self.extensions))
        return dedupe(found)

    def _source_root(self, source: SourceFile, here: Path) -> Path | None:
        m = _PACKAGE.search(source.text)
        if not m:
            return None
        parts = m.group(1).split(".")
        if tuple(here.parts[-len(parts):]) != tuple(parts):
            return None
        root = here
        for _ in parts:
            root = root.parent
        return root

    def _resolve(self, dotted: str, wildcard: bool, here: Path, source_root: Path | None) -> list[Path]:
        parts = dotted.split(".")
        if wildcard:
            if source_root is None:
                return []
            package_dir = source_root.joinpath(*parts)
            if not package_dir.is_dir():
                return []
            return sorted(p for p in package_dir.iterdir() if p.suffix == ".java")

        candidates = [here / f"{parts[-1]}.java"]
        if source_root is not None:
            candidates.append(source_root.joinpath(*parts[:-1]) / f"{parts[-1]}.java")
        for candidate in candidates:
            if candidate.is_file():
                return [candidate]
        logger.debug("Unresolved java import %s", dotted)
        return []
