"""PHP adapter: ``require``/``include`` paths and brace-delimited bodies."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from distiller.adapters.base import Header, LanguageAdapter, dedupe
from distiller.models import SourceFile

logger = logging.getLogger(__name__)


_MODIFIERS = r"(?:(?:public|private|protected|static|abstract|final)\s+)*"
_FUNCTION = re.compile(r"^\s*(" + _MODIFIERS + r")function\s+&?([A-Za-z_]\w*)\s*\(")
_CLASS = re.compile(
    r"^\s*(?:(?:abstract|final|readonly)\s+)*(?:class|interface|trait|enum)\s+([A-Za-z_]\w*)"
)
_INCLUDE = re.compile(
    r"\b(?:require|require_once|include|include_once)\s*\(?\s*"
    r"(?:(__DIR__|dirname\(__FILE__\))\s*\.\s*)?['\"]([^'\"]+)['\"]"
)


class PhpAdapter(LanguageAdapter):
    language = "php"
    extensions = (".php",)
    file_header = "<?php\n\n"
    stop_words = frozenset({
        "if", "else", "elseif", "while", "for", "foreach", "switch", "case",
        "return", "function", "class", "new", "echo", "print", "isset",
        "empty", "unset", "array", "list", "count", "strlen", "explode",
        "implode", "true", "false", "null", "this", "self", "parent",
    })
    primitive_types = frozenset({"Closure", "Exception", "Throwable", "Traversable"})

    def match_header(self, text: str, source: SourceFile) -> Header | None:
        m = _FUNCTION.match(text)
        if m:
            modifiers = m.group(1)
            visibility = "public"
            for word in ("private", "protected"):
                if word in modifiers:
                    visibility = word
            return Header(m.group(2), "function", visibility)
        m = _CLASS.match(text)
        if m:
            return Header(m.group(1), "class")
        return None

    def extract_imports(self, source: SourceFile, project_root: Path) -> list[str]:
        found: list[Path] = []
        here = Path(source.path).parent
        for line in source.lines:
            for anchor, target in _INCLUDE.findall(line.text):
                candidate = here / target.lstrip("/") if anchor else here / target
                if candidate.is_file():
                    found.append(candidate)
                else:
                    logger.debug("Unresolved php include '%s' in %s", target, source.path)
        return dedupe(found)
