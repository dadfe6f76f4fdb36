"""C and C++ adapters: quoted ``#include`` resolution and brace-delimited bodies."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from distiller.adapters.base import Header, LanguageAdapter, dedupe, first_existing
from distiller.models import SourceFile

logger = logging.getLogger(__name__)


HEADER_EXTENSIONS = (".h", ".hpp", ".hxx", ".h++", ".hh")
SOURCE_EXTENSIONS = (".cpp", ".cc", ".cxx", ".c++", ".c")

KEYWORDS = frozenset({
    "if", "else", "for", "while", "do", "switch", "case", "return", "sizeof",
    "delete", "new", "throw", "catch", "try", "goto", "break", "continue",
    "typedef", "using", "namespace", "template", "operator", "static_assert",
    "defined", "alignof", "decltype",
})

_FUNCTION = re.compile(
    r"^\s*((?:(?:static|inline|virtual|extern|constexpr|explicit|friend)\s+)*)"
    r"(?:[\w:<>,]+[\s*&]+)+((?:[A-Za-z_]\w*::)*~?[A-Za-z_]\w*)\s*\("
)
_CLASS = re.compile(
    r"^\s*(?:template\s*<[^>]*>\s*)?(?:typedef\s+)?(class|struct|union|enum(?:\s+class)?)\s+"
    r"(?:\w+\s+)?([A-Za-z_]\w*)\s*(?:final\s*)?(?::[^;{]*)?\{?\s*$"
)
_INCLUDE = re.compile(r'^\s*#\s*include\s+"([^"]+)"')


class CppAdapter(LanguageAdapter):
    language = "cpp"
    extensions = HEADER_EXTENSIONS + SOURCE_EXTENSIONS
    annotation_prefixes = ("template",)
    stop_words = KEYWORDS | frozenset({
        "std", "cout", "cin", "cerr", "endl", "printf", "fprintf", "sprintf",
        "snprintf", "scanf", "malloc", "calloc", "realloc", "free", "memcpy",
        "memset", "strlen", "strcpy", "strcmp", "exit", "abort", "assert",
        "this", "nullptr", "NULL", "true", "false", "main",
    })
    primitive_types = frozenset({
        "NULL", "FILE", "size_t", "String", "TRUE", "FALSE", "EOF",
    })

    def match_header(self, text: str, source: SourceFile) -> Header | None:
        stripped = text.strip()
        if not stripped or stripped.startswith(("#", "//", "/*", "*")):
            return None
        m = _CLASS.match(text)
        if m:
            return Header(m.group(2), "class")
        m = _FUNCTION.match(text)
        if m is None or stripped.endswith(";"):
            return None
        qualified = m.group(2)
        parts = qualified.split("::")
        name = parts[-1]
        if name in KEYWORDS or name.startswith("~"):
            return None
        if len(parts) > 1 and parts[-2] == name:
            return None  # constructor
        prefix = text[:m.start(2)].split()
        if prefix and prefix[-1].rstrip("*&") in ("return", "else", "new", "delete", "throw"):
            return None
        visibility = "private" if "static" in m.group(1) and len(parts) == 1 else "public"
        return Header(name, "function", visibility)

    def extract_imports(self, source: SourceFile, project_root: Path) -> list[str]:
        here = Path(source.path).parent
        found: list[Path] = []
        for line in source.lines:
            m = _INCLUDE.match(line.text)
            if not m:
                continue
            target = m.group(1)
            hit = first_existing([here / target, project_root / target, project_root / "include" / target])
            if hit is None:
                logger.debug("Unresolved include \"%s\" in %s", target, source.path)
                continue
            found.append(hit)
            if hit.suffix in HEADER_EXTENSIONS:
                impl = self.implementation_file(hit)
                if impl is not None:
                    found.append(impl)
        return [p for p in dedupe(found) if p != source.path]

    @staticmethod
    def implementation_file(header: Path) -> Path | None:
        return first_existing([header.with_suffix(ext) for ext in SOURCE_EXTENSIONS])


class CAdapter(CppAdapter):
    language = "c"
    primitive_types = frozenset({"NULL", "FILE", "TRUE", "FALSE", "EOF"})
