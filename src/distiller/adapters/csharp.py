"""C# adapter: ``using`` directives and brace-delimited methods."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from distiller.adapters.base import Header, LanguageAdapter, dedupe, siblings
from distiller.adapters.java import modifier_visibility
from distiller.models import SourceFile

logger = logging.getLogger(__name__)


STDLIB_ROOTS = ("System", "Microsoft", "Windows")

_MODIFIER_WORDS = (
    "public|private|protected|internal|static|virtual|override|abstract|async|"
    "sealed|extern|unsafe|new|partial|readonly"
)
MODIFIERS = frozenset(_MODIFIER_WORDS.split("|"))
_NOT_A_TYPE = frozenset({"return", "else", "throw", "case", "await", "yield", "using"}) | MODIFIERS
_NOT_A_NAME = frozenset({"if", "for", "foreach", "while", "switch", "catch", "lock", "using", "nameof"})

_METHOD = re.compile(
    r"^\s*((?:(?:" + _MODIFIER_WORDS + r")\s+)*)"
    r"([\w.]+(?:<[^>]*>)?(?:\[\])?\??)\s+([A-Za-z_]\w*)\s*(?:<[^>]*>)?\s*\("
)
_CLASS = re.compile(
    r"^\s*((?:(?:" + _MODIFIER_WORDS + r")\s+)*)(?:class|interface|struct|enum|record)\s+([A-Za-z_]\w*)"
)
_USING = re.compile(r"^\s*using\s+(?:static\s+)?(?:\w+\s*=\s*)?([\w.]+)\s*;")


class CSharpAdapter(LanguageAdapter):
    language = "csharp"
    extensions = (".cs",)
    verbatim_string = re.compile(r'(?:\$@|@\$?)"')
    annotation_prefixes = ("[",)
    stop_words = frozenset({
        "if", "else", "for", "foreach", "while", "switch", "case", "return",
        "new", "this", "base", "null", "true", "false", "var", "await",
        "Console", "WriteLine", "Write", "ToString", "Equals", "GetHashCode",
        "Add", "Remove", "Contains", "Count", "String", "Math", "Task",
        "nameof", "typeof",
    })
    primitive_types = frozenset({
        "String", "Int32", "Int64", "Boolean", "Double", "Decimal", "Object",
        "Task", "List", "Dictionary", "IEnumerable", "IList", "Action", "Func",
        "Exception", "CancellationToken", "DateTime", "TimeSpan", "Guid",
    })

    def match_header(self, text: str, source: SourceFile) -> Header | None:
        m = _CLASS.match(text)
        if m:
            return Header(m.group(2), "class", modifier_visibility(m.group(1), "internal"))
        m = _METHOD.match(text)
        if m is None:
            return None
        modifiers, return_type, name = m.groups()
        if return_type in _NOT_A_TYPE or name in _NOT_A_NAME:
            return None
        if name == Path(source.path).stem:
            return None  # constructor
        if text.rstrip().endswith(";") and "abstract" not in modifiers:
            return None
        return Header(name, "function", modifier_visibility(modifiers, "private"))

    def extract_imports(self, source: SourceFile, project_root: Path) -> list[str]:
        here = Path(source.path).parent
        found: list[Path] = []
        for line in source.lines:
            m = _USING.match(line.text)
            if not m:
                continue
            dotted = m.group(1)
            if dotted.split(".")[0] in STDLIB_ROOTS:
                continue
            candidate = here / f"{dotted.split('.')[-1]}.cs"
            if candidate.is_file():
                found.append(candidate)
            else:
                logger.debug("Unresolved using %s in %s", dotted, source.path)

        # Types in the same namespace are visible without a using directive.
        found.extend(siblings(source.path, self.extensions))
        return dedupe(found)
