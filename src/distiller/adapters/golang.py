"""Go adapter: module-aware import resolution and brace-delimited bodies."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from distiller.adapters.base import Header, LanguageAdapter, dedupe, siblings
from distiller.models import SourceFile

logger = logging.getLogger(__name__)


STDLIB_PACKAGES = frozenset({
    "fmt", "os", "io", "bufio", "bytes", "strings", "strconv", "errors",
    "time", "sync", "context", "sort", "math", "regexp", "unicode", "log",
    "flag", "path", "runtime", "reflect", "testing", "encoding", "net",
    "crypto", "hash", "container", "embed", "html", "image", "mime", "text",
})

_FUNC = re.compile(r"^func\s+(?:\(([^)]*)\)\s*)?([A-Za-z_]\w*)\s*[\[(]")
_TYPE = re.compile(r"^type\s+([A-Za-z_]\w*)(?:\[[^\]]*\])?\s+(?:struct|interface)\b")
_SINGLE_IMPORT = re.compile(r'^\s*import\s+(?:[\w.]+\s+)?"([^"]+)"')
_BLOCK_ENTRY = re.compile(r'^\s*(?:[\w.]+\s+)?"([^"]+)"')
_MODULE = re.compile(r"^module\s+(\S+)", re.MULTILINE)


def go_visibility(name: str) -> str:
    return "public" if name[:1].isupper() else "private"


def read_module_path(project_root: Path) -> str | None:
    go_mod = project_root / "go.mod"
    try:
        m = _MODULE.search(go_mod.read_text(errors="replace"))
    except OSError:
        return None
    return m.group(1) if m else None


def _package_files(directory: Path) -> list[Path]:
    if not directory.is_dir():
        return []
    return sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.suffix == ".go" and not p.name.endswith("_test.go")
    )


class GoAdapter(LanguageAdapter):
    language = "go"
    extensions = (".go",)
    quote_chars = ('"', "'", "`")
    multiline_quotes = ("`",)
    stop_words = frozenset({
        "if", "else", "for", "range", "switch", "case", "return", "func",
        "go", "defer", "select", "make", "new", "len", "cap", "append",
        "copy", "delete", "panic", "recover", "nil", "true", "false",
        "string", "int", "error", "print", "println",
    })
    primitive_types = frozenset({"Context", "Duration", "Time", "Reader", "Writer"})

    def match_header(self, text: str, source: SourceFile) -> Header | None:
        m = _FUNC.match(text)
        if m:
            name = m.group(2)
            return Header(name, "function", go_visibility(name))
        m = _TYPE.match(text)
        if m:
            name = m.group(1)
            return Header(name, "class", go_visibility(name))
        return None

    def extract_imports(self, source: SourceFile, project_root: Path) -> list[str]:
        module = read_module_path(project_root)
        here = Path(source.path).parent
        found: list[Path] = []

        in_block = False
        for line in source.lines:
            text = line.text.split("//", 1)[0]
            stripped = text.strip()
            if in_block:
                if stripped.startswith(")"):
                    in_block = False
                    continue
                m = _BLOCK_ENTRY.match(text)
                if m:
                    found.extend(self._resolve(m.group(1), here, project_root, module))
                continue
            if re.match(r"^import\s*\($", stripped):
                in_block = True
                continue
            m = _SINGLE_IMPORT.match(text)
            if m:
                found.extend(self._resolve(m.group(1), here, project_root, module))

        # Files of the same package see each other without imports.
        found.extend(p for p in siblings(source.path, self.extensions)
                     if not p.name.endswith("_test.go"))
        return dedupe(found)

    def _resolve(
        self,
        import_path: str,
        here: Path,
        project_root: Path,
        module: str | None,
    ) -> list[Path]:
        if import_path.startswith(("./", "../")):
            return _package_files(here / import_path)
        if module and (import_path == module or import_path.startswith(module + "/")):
            rest = import_path[len(module):].lstrip("/")
            return _package_files(project_root / rest)
        if self.is_stdlib(import_path):
            return []
        logger.debug("Skipping external go import %s", import_path)
        return []

    @staticmethod
    def is_stdlib(import_path: str) -> bool:
        first = import_path.split("/")[0]
        return first in STDLIB_PACKAGES or "." not in first
