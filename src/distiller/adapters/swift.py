"""Swift adapter.

A Swift module sees every declaration in its directory, so every sibling
``.swift`` file counts as imported.
"""

from __future__ import annotations

import re
from pathlib import Path

from distiller.adapters.base import Header, LanguageAdapter, dedupe, siblings
from distiller.models import SourceFile


_MODIFIERS = (
    r"((?:(?:public|private|fileprivate|internal|open|static|class|final|override|"
    r"mutating|nonmutating|@\w+)\s+)*)"
)
_FUNC = re.compile(r"^\s*" + _MODIFIERS + r"func\s+([A-Za-z_]\w*)")
_TYPE = re.compile(r"^\s*" + _MODIFIERS + r"(?:class|struct|enum|protocol|actor)\s+([A-Za-z_]\w*)")


def swift_visibility(modifiers: str) -> str:
    for word in ("open", "public"):
        if re.search(rf"\b{word}\b", modifiers):
            return "public"
    if re.search(r"\b(?:private|fileprivate)\b", modifiers):
        return "private"
    return "internal"


class SwiftAdapter(LanguageAdapter):
    language = "swift"
    extensions = (".swift",)
    quote_chars = ('"',)
    annotation_prefixes = ("@",)
    stop_words = frozenset({
        "if", "else", "guard", "switch", "case", "for", "while", "repeat",
        "return", "func", "let", "var", "self", "Self", "super", "nil",
        "true", "false", "print", "init", "deinit", "map", "filter",
        "reduce", "forEach", "append", "count",
    })
    primitive_types = frozenset({
        "Int", "Double", "Float", "Bool", "String", "Character", "Void",
        "Any", "AnyObject", "Array", "Dictionary", "Set", "Optional", "Error",
        "Data", "Date", "URL",
    })

    def match_header(self, text: str, source: SourceFile) -> Header | None:
        m = _FUNC.match(text)
        if m:
            return Header(m.group(2), "function", swift_visibility(m.group(1)))
        m = _TYPE.match(text)
        if m and m.group(2) != "func":
            return Header(m.group(2), "class", swift_visibility(m.group(1)))
        return None

    def extract_imports(self, source: SourceFile, project_root: Path) -> list[str]:
        return dedupe(siblings(source.path, self.extensions))
