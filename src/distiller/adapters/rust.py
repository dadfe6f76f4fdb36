"""Rust adapter: ``mod`` and ``use`` resolution within a crate."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from distiller.adapters.base import Header, LanguageAdapter, dedupe, first_existing
from distiller.models import SourceFile

logger = logging.getLogger(__name__)


STDLIB_CRATES = frozenset({"std", "core", "alloc", "proc_macro"})

_VIS = r"(pub(?:\([^)]*\))?\s+)?"
_FN = re.compile(
    r"^\s*" + _VIS + r"(?:(?:const|async|unsafe|extern(?:\s+\"[^\"]*\")?)\s+)*fn\s+([A-Za-z_]\w*)"
)
_TYPE = re.compile(r"^\s*" + _VIS + r"(?:struct|enum|trait|union)\s+([A-Za-z_]\w*)")
_MOD = re.compile(r"^\s*(?:pub(?:\([^)]*\))?\s+)?mod\s+([A-Za-z_]\w*)\s*;")
_USE = re.compile(r"^\s*(?:pub(?:\([^)]*\))?\s+)?use\s+([\w:]+)")


def _module_file(directory: Path, name: str) -> Path | None:
    return first_existing([directory / f"{name}.rs", directory / name / "mod.rs"])


class RustAdapter(LanguageAdapter):
    language = "rust"
    extensions = (".rs",)
    quote_chars = ('"',)
    multiline_quotes = ('"',)
    # '{', '"', '\'' and '\u{7f}'; bare lifetimes such as 'a never match.
    char_literal = re.compile(r"'(?:\\u\{[0-9A-Fa-f]{1,6}\}|\\.|[^'\\])'")
    annotation_prefixes = ("#[",)
    stop_words = frozenset({
        "if", "else", "match", "for", "while", "loop", "return", "fn", "let",
        "mut", "self", "Self", "super", "crate", "impl", "struct", "enum",
        "trait", "use", "mod", "pub", "true", "false", "Some", "None", "Ok",
        "Err", "println", "print", "format", "vec", "panic", "assert",
        "unwrap", "expect", "clone", "into", "new",
    })
    primitive_types = frozenset({
        "Self", "String", "Vec", "Option", "Result", "Box", "Rc", "Arc",
        "HashMap", "HashSet", "BTreeMap", "Cow", "RefCell", "Cell",
    })

    def match_header(self, text: str, source: SourceFile) -> Header | None:
        m = _FN.match(text)
        if m:
            return Header(m.group(2), "function", "public" if m.group(1) else "private")
        m = _TYPE.match(text)
        if m:
            return Header(m.group(2), "class", "public" if m.group(1) else "private")
        return None

    def extract_imports(self, source: SourceFile, project_root: Path) -> list[str]:
        here = Path(source.path).parent
        crate_src = self._crate_src(here, project_root)
        found: list[Path] = []
        for line in source.lines:
            m = _MOD.match(line.text)
            if m:
                hit = _module_file(here, m.group(1))
                if hit is not None:
                    found.append(hit)
                continue
            m = _USE.match(line.text)
            if not m:
                continue
            segments = [s for s in m.group(1).split("::") if s]
            if not segments or segments[0] in STDLIB_CRATES:
                continue
            base = here
            if segments[0] == "crate":
                base, segments = crate_src, segments[1:]
            elif segments[0] == "super":
                base, segments = here.parent, segments[1:]
            elif segments[0] == "self":
                segments = segments[1:]
            if not segments:
                continue
            hit = _module_file(base, segments[0])
            if hit is not None:
                found.append(hit)
            else:
                logger.debug("Unresolved rust use %s", m.group(1))
        return dedupe(found)

    @staticmethod
    def _crate_src(here: Path, project_root: Path) -> Path:
        for directory in (here, *here.parents):
            if (directory / "Cargo.toml").is_file():
                return directory / "src"
            if directory == project_root:
                break
        return project_root / "src" if (project_root / "src").is_dir() else here

