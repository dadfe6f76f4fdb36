"""JavaScript and TypeScript adapters."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from distiller.adapters.base import Header, LanguageAdapter, dedupe, first_existing
from distiller.models import SourceFile

logger = logging.getLogger(__name__)


NODE_BUILTINS = frozenset({
    "fs", "path", "os", "http", "https", "url", "util", "events", "stream",
    "crypto", "child_process", "cluster", "net", "dns", "zlib", "buffer",
    "assert", "readline", "querystring", "tty", "vm", "worker_threads",
})

RESOLVE_EXTENSIONS = (".js", ".ts", ".jsx", ".tsx", ".mjs", ".cjs")

_FUNCTION = re.compile(
    r"^\s*(export\s+)?(?:default\s+)?(?:async\s+)?function\s*\*?\s*([A-Za-z_$][\w$]*)\s*[<(]"
)
_BOUND = re.compile(
    r"^\s*(export\s+)?(?:const|let|var)\s+([A-Za-z_$][\w$]*)\s*(?::[^=]+)?=\s*"
    r"(?:async\s+)?(?:function\b|\([^)]*\)\s*(?::[^=]+)?=>|[A-Za-z_$][\w$]*\s*=>)"
)
_CLASS = re.compile(
    r"^\s*(export\s+)?(?:default\s+)?(?:declare\s+)?(?:abstract\s+)?"
    r"(?:class|interface|enum)\s+([A-Za-z_$][\w$]*)"
)
_METHOD = re.compile(
    r"^\s+((?:(?:public|private|protected|static|async|readonly|override|get|set)\s+)*)"
    r"\*?([A-Za-z_$#][\w$]*)\s*(?:<[^>]*>)?\s*\([^)]*\)\s*(?::\s*[^{=]+)?\{"
)
_METHOD_REJECT = frozenset({
    "if", "for", "while", "switch", "catch", "function", "return", "with",
    "constructor", "super",
})

_SPECIFIERS = (
    re.compile(r"\bimport\s+[^'\"]*?\bfrom\s*['\"]([^'\"]+)['\"]"),
    re.compile(r"^\s*import\s*['\"]([^'\"]+)['\"]"),
    re.compile(r"\bexport\s+[^'\"]*?\bfrom\s*['\"]([^'\"]+)['\"]"),
    re.compile(r"\brequire\s*\(\s*['\"]([^'\"]+)['\"]\s*\)"),
    re.compile(r"\bimport\s*\(\s*['\"]([^'\"]+)['\"]\s*\)"),
)


class JavaScriptAdapter(LanguageAdapter):
    language = "javascript"
    extensions = RESOLVE_EXTENSIONS
    quote_chars = ('"', "'", "`")
    multiline_quotes = ("`",)
    annotation_prefixes = ("@",)
    stop_words = frozenset({
        "if", "else", "for", "while", "switch", "case", "return", "function",
        "new", "typeof", "instanceof", "await", "async", "console", "log",
        "require", "import", "export", "this", "super", "null", "undefined",
        "true", "false", "setTimeout", "setInterval", "parseInt", "JSON",
        "Object", "Array", "Promise", "String", "Number", "Math",
    })
    primitive_types = frozenset({
        "Promise", "Array", "Record", "Partial", "Readonly", "Map", "Set",
        "Date", "Error", "Object", "String", "Number", "Boolean", "Function",
    })

    def match_header(self, text: str, source: SourceFile) -> Header | None:
        for pattern in (_FUNCTION, _BOUND):
            m = pattern.match(text)
            if m:
                return Header(m.group(2), "function", "public" if m.group(1) else "private")
        m = _CLASS.match(text)
        if m:
            return Header(m.group(2), "class", "public" if m.group(1) else "private")
        m = _METHOD.match(text)
        if m and m.group(2) not in _METHOD_REJECT:
            modifiers = m.group(1)
            private = "private" in modifiers or m.group(2).startswith("#")
            return Header(m.group(2).lstrip("#"), "function", "private" if private else "public")
        return None

    def single_line(self, text: str) -> bool:
        # Arrow function whose body is a bare expression.
        if "=>" not in text or not _BOUND.match(text):
            return False
        body = text.split("=>", 1)[1].strip()
        return bool(body) and not body.startswith("{")

    def extract_imports(self, source: SourceFile, project_root: Path) -> list[str]:
        here = Path(source.path).parent
        found: list[Path] = []
        for line in source.lines:
            for pattern in _SPECIFIERS:
                for spec in pattern.findall(line.text):
                    hit = self._resolve(spec, here)
                    if hit is not None:
                        found.append(hit)
        return dedupe(found)

    def _resolve(self, spec: str, here: Path) -> Path | None:
        if not spec.startswith((".", "/")):
            if spec.split("/")[0].removeprefix("node:") not in NODE_BUILTINS:
                logger.debug("Skipping package import %s", spec)
            return None
        target = here / spec
        candidates = [target]
        candidates += [target.parent / (target.name + ext) for ext in RESOLVE_EXTENSIONS]
        candidates += [target / "index.js", target / "index.ts"]
        hit = first_existing(candidates)
        if hit is None:
            logger.debug("Unresolved import %s from %s", spec, here)
        return hit


class TypeScriptAdapter(JavaScriptAdapter):
    language = "typescript"
    stop_words = JavaScriptAdapter.stop_words | frozenset({"keyof", "readonly", "as", "is"})
    primitive_types = JavaScriptAdapter.primitive_types | frozenset({
        "Pick", "Omit", "Required", "ReturnType", "Awaited", "Exclude", "Extract",
    })
