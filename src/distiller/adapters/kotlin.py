"""Kotlin adapter."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from distiller.adapters.base import Header, LanguageAdapter, dedupe, siblings
from distiller.adapters.java import modifier_visibility
from distiller.models import SourceFile

logger = logging.getLogger(__name__)


STDLIB_PREFIXES = ("kotlin.", "java.", "javax.", "android.", "kotlinx.")
SEARCH_DEPTH = 3

_MODIFIER_WORDS = (
    "public|private|protected|internal|override|open|suspend|inline|abstract|"
    "final|operator|infix|tailrec|external|actual|expect"
)
_FUN = re.compile(
    r"^\s*((?:(?:" + _MODIFIER_WORDS + r")\s+)*)fun\s+(?:<[^>]+>\s*)?(?:[\w.<>]+\.)?([A-Za-z_]\w*)\s*\("
)
_CLASS = re.compile(
    r"^\s*((?:(?:public|private|protected|internal|open|abstract|data|sealed|enum|inner|final|annotation|value)\s+)*)"
    r"(?:class|interface|object)\s+([A-Za-z_]\w*)"
)
_IMPORT = re.compile(r"^\s*import\s+([\w.]+)(?:\s+as\s+\w+)?")
_EXPRESSION_BODY = re.compile(r"\)\s*(?::\s*[^={]+)?=(?!=)")


class KotlinAdapter(LanguageAdapter):
    language = "kotlin"
    extensions = (".kt", ".kts")
    annotation_prefixes = ("@",)
    stop_words = frozenset({
        "if", "else", "when", "for", "while", "return", "fun", "val", "var",
        "this", "super", "null", "true", "false", "println", "print",
        "listOf", "mapOf", "setOf", "mutableListOf", "mutableMapOf", "let",
        "apply", "also", "run", "with", "require", "check", "error", "TODO",
    })
    primitive_types = frozenset({
        "Int", "Long", "Double", "Float", "Boolean", "String", "Char", "Byte",
        "Short", "Unit", "Any", "Nothing", "List", "Map", "Set", "Array",
        "MutableList", "MutableMap", "Sequence", "Pair", "Result",
    })

    def match_header(self, text: str, source: SourceFile) -> Header | None:
        m = _FUN.match(text)
        if m:
            return Header(m.group(2), "function", modifier_visibility(m.group(1), "public"))
        m = _CLASS.match(text)
        if m and not re.match(r"^\s*companion\s+object", text):
            return Header(m.group(2), "class", modifier_visibility(m.group(1), "public"))
        return None

    def single_line(self, text: str) -> bool:
        if not _FUN.match(text):
            return False
        m = _EXPRESSION_BODY.search(text)
        return m is not None and "{" not in text[:m.start()]

    def extract_imports(self, source: SourceFile, project_root: Path) -> list[str]:
        here = Path(source.path).parent
        found: list[Path] = []
        for line in source.lines:
            m = _IMPORT.match(line.text)
            if not m:
                continue
            dotted = m.group(1)
            if dotted.startswith(STDLIB_PREFIXES):
                continue
            hit = self._resolve(dotted, here, project_root)
            if hit is not None:
                found.append(hit)
            else:
                logger.debug("Unresolved kotlin import %s", dotted)
        found.extend(siblings(source.path, self.extensions))
        return dedupe(found)

    def _resolve(self, dotted: str, here: Path, project_root: Path) -> Path | None:
        parts = dotted.split(".")
        name = f"{parts[-1]}.kt"
        candidate = here / name
        if candidate.is_file():
            return candidate
        candidate = project_root.joinpath(*parts[:-1]) / name
        if candidate.is_file():
            return candidate
        for depth in range(1, SEARCH_DEPTH + 1):
            pattern = "/".join(["*"] * depth) + "/" + name
            for match in sorted(project_root.glob(pattern)):
                if match.is_file():
                    return match
        return None
