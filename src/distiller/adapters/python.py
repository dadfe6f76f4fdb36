"""Python adapter: ``import``/``from`` resolution and indentation-based bodies."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from distiller.adapters.base import Header, LanguageAdapter, dedupe, first_existing
from distiller.models import SourceFile

logger = logging.getLogger(__name__)


STDLIB_MODULES = frozenset({
    "os", "sys", "re", "json", "time", "datetime", "typing", "collections",
    "itertools", "functools", "pathlib", "urllib", "http", "math", "random",
    "string", "io", "csv", "xml", "sqlite3", "threading", "multiprocessing",
    "subprocess", "logging", "unittest", "argparse", "configparser", "email",
    "html", "abc",
})

_DEF = re.compile(r"^(\s*)(?:async\s+)?def\s+([A-Za-z_]\w*)\s*\(")
_CLASS = re.compile(r"^(\s*)class\s+([A-Za-z_]\w*)\s*[(:]")
_IMPORT = re.compile(r"^\s*import\s+(.+)$")
_FROM = re.compile(r"^\s*from\s+(\.*)([\w.]*)\s+import\s+(.+)$")


def _continues(text: str) -> bool:
    """True while a ``from ... import`` statement runs onto the next line."""
    return text.count("(") > text.count(")") or text.rstrip().endswith("\\")


def python_visibility(name: str) -> str:
    if name.startswith("__") and name.endswith("__"):
        return "public"
    return "private" if name.startswith("_") else "public"


class PythonAdapter(LanguageAdapter):
    language = "python"
    extensions = (".py",)
    strategy = "indent"
    comment_prefix = "#"
    annotation_prefixes = ("@",)
    stop_words = frozenset({
        "if", "elif", "else", "for", "while", "return", "import", "from", "def",
        "class", "try", "except", "finally", "with", "as", "pass", "break",
        "continue", "raise", "yield", "lambda", "and", "or", "not", "in", "is",
        "None", "True", "False", "self", "cls", "print", "len", "range", "str",
        "int", "float", "list", "dict", "set", "tuple", "open", "super",
        "isinstance", "sorted", "enumerate", "zip", "map", "filter",
    })
    primitive_types = frozenset({
        "None", "Any", "Optional", "Union", "List", "Dict", "Set", "Tuple",
        "Callable", "Iterable", "Iterator", "Sequence", "Mapping", "Type",
        "True", "False",
    })

    def match_header(self, text: str, source: SourceFile) -> Header | None:
        m = _DEF.match(text)
        if m:
            return Header(m.group(2), "function", python_visibility(m.group(2)))
        m = _CLASS.match(text)
        if m:
            return Header(m.group(2), "class", python_visibility(m.group(2)))
        return None

    def extract_imports(self, source: SourceFile, project_root: Path) -> list[str]:
        found: list[Path] = []
        lines = source.lines
        i = 0
        while i < len(lines):
            text = lines[i].text.split("#", 1)[0]
            i += 1
            m = _FROM.match(text)
            if m:
                while _continues(text) and i < len(lines):
                    text = text.rstrip().rstrip("\\") + " " + lines[i].text.split("#", 1)[0].strip()
                    i += 1
                dots, module, names = _FROM.match(text).groups()
                names = [n.split(" as ")[0].strip(" ()\\") for n in names.split(",")]
                found.extend(self._resolve(dots, module, [n for n in names if n], source.path, project_root))
                continue
            m = _IMPORT.match(text)
            if m:
                for part in m.group(1).split(","):
                    module = part.split(" as ")[0].strip()
                    if module:
                        found.extend(self._resolve("", module, [], source.path, project_root))
        return dedupe(found)

    def _resolve(
        self,
        dots: str,
        module: str,
        names: list[str],
        current: str,
        project_root: Path,
    ) -> list[Path]:
        if not dots and module.split(".")[0] in STDLIB_MODULES:
            return []

        here = Path(current).parent
        if dots:
            base = here
            for _ in range(len(dots) - 1):
                base = base.parent
            bases = [base]
        else:
            bases = [here]
            root = project_root.resolve()
            for parent in here.parents:
                if root != parent and root not in parent.parents:
                    break
                bases.append(parent)

        rel = Path(*module.split(".")) if module else Path()
        for base in bases:
            target = base / rel
            hits: list[Path] = []
            if module:
                hit = first_existing([target.with_suffix(".py"), target / "__init__.py"])
                if hit is not None:
                    hits.append(hit)
            elif (target / "__init__.py").is_file():
                hits.append(target / "__init__.py")
            for name in names:
                sub = target / f"{name}.py"
                if name != "*" and sub.is_file():
                    hits.append(sub)
            if hits:
                return hits
        logger.debug("Unresolved python import %s%s in %s", dots, module, current)
        return []
