"""Ruby adapter: ``require``/``require_relative`` and ``end``-terminated bodies."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from distiller.adapters.base import Header, LanguageAdapter, dedupe, first_existing
from distiller.models import SourceFile

logger = logging.getLogger(__name__)


STDLIB = frozenset({
    "json", "yaml", "csv", "set", "date", "time", "fileutils", "pathname",
    "securerandom", "digest", "net/http", "uri", "open-uri", "logger",
    "benchmark", "optparse", "ostruct", "erb", "socket", "tempfile",
    "timeout", "English", "forwardable", "singleton", "observer", "pp",
    "stringio", "strscan", "zlib", "base64", "openssl", "bigdecimal",
})

_DEF = re.compile(r"^\s*def\s+(?:self\.)?([A-Za-z_]\w*[?!=]?)")
_CLASS = re.compile(r"^\s*(?:class|module)\s+((?:[A-Z]\w*::)*[A-Z]\w*)")
_REQUIRE = re.compile(r"^\s*(require_relative|require)\s*\(?\s*['\"]([^'\"]+)['\"]")


class RubyAdapter(LanguageAdapter):
    language = "ruby"
    extensions = (".rb",)
    strategy = "keyword"
    comment_prefix = "#"
    stop_words = frozenset({
        "if", "unless", "else", "elsif", "end", "while", "until", "for", "do",
        "return", "yield", "puts", "print", "p", "require", "require_relative",
        "include", "extend", "attr_accessor", "attr_reader", "attr_writer",
        "new", "self", "nil", "true", "false", "raise", "each", "map",
        "select", "reject", "private", "protected", "public", "lambda", "proc",
    })
    primitive_types = frozenset({
        "String", "Integer", "Float", "Array", "Hash", "Symbol", "NilClass",
        "Object", "TrueClass", "FalseClass",
    })

    def match_header(self, text: str, source: SourceFile) -> Header | None:
        m = _DEF.match(text)
        if m:
            return Header(m.group(1))
        m = _CLASS.match(text)
        if m and not text.lstrip().startswith("class <<"):
            return Header(m.group(1).split("::")[-1], "class")
        return None

    def single_line(self, text: str) -> bool:
        stripped = text.split("#", 1)[0].strip()
        if re.search(r";\s*end$", stripped):
            return True
        # endless method: def name(args) = expr
        return bool(re.match(r"def\s+[\w.?!]+(?:\([^)]*\))?\s*=[^=~>]", stripped))

    def extract_imports(self, source: SourceFile, project_root: Path) -> list[str]:
        found: list[Path] = []
        here = Path(source.path).parent
        for line in source.lines:
            m = _REQUIRE.match(line.text)
            if not m:
                continue
            kind, target = m.groups()
            if kind == "require_relative":
                bases = [here]
            else:
                if target in STDLIB or target.split("/")[0] in STDLIB:
                    continue
                bases = [here, project_root / "lib", project_root]
            hit = None
            for base in bases:
                hit = first_existing([base / f"{target}.rb", base / target])
                if hit is not None:
                    break
            if hit is None:
                logger.debug("Unresolved ruby %s '%s' in %s", kind, target, source.path)
                continue
            found.append(hit)
        return dedupe(found)
