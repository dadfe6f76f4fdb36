"""Language adapter interface and the shared end-of-definition estimators.

An adapter knows three things about its language:

1. which files a source file pulls in (``extract_imports``),
2. where definitions start and end (``index_symbols``),
3. which known symbols a definition refers to (``extract_calls``).

Definition ends are estimated textually, by one of three strategies:
brace balance, indentation, or a closing keyword.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from pygments.token import Token

from distiller.lang import make_lexer
from distiller.models import Line, SourceFile, SymbolDefinition, SymbolIndex, make_fqn

logger = logging.getLogger(__name__)


MEMBER_OPERATORS = ("?.", "::", "->", ".")

_CAPITALIZED = re.compile(r"\b([A-Z][A-Za-z0-9_]*)\b")
_STRING_LITERAL = re.compile(r"\"(?:\\.|[^\"\\])*\"|'(?:\\.|[^'\\])*'")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

ENTRY_VISIBILITIES = frozenset({"public", "package", "internal"})


@dataclass(frozen=True)
class Header:
    """A recognised definition header on one line."""

    name: str
    kind: str = "function"
    visibility: str = "public"


def indent_width(text: str, tab: int = 4) -> int:
    width = 0
    for ch in text:
        if ch == " ":
            width += 1
        elif ch == "\t":
            width += tab
        else:
            break
    return width


def snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def dedupe(paths: list[Path]) -> list[str]:
    """Resolve, drop duplicates, keep first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for p in paths:
        key = str(p.resolve())
        if key not in seen:
            seen.add(key)
            result.append(key)
    return result


def first_existing(candidates: list[Path]) -> Path | None:
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def siblings(path: str, extensions: tuple[str, ...]) -> list[Path]:
    """Every other file in *path*'s directory with one of *extensions*."""
    me = Path(path)
    try:
        entries = sorted(me.parent.iterdir())
    except OSError as exc:
        logger.warning("Cannot list %s: %s", me.parent, exc)
        return []
    return [
        p for p in entries
        if p.is_file() and p.suffix in extensions and p.name != me.name
    ]


class LanguageAdapter:
    """Base class for per-language heuristics.

    Subclasses set the class attributes and implement ``match_header`` and
    ``extract_imports``; everything else has a working default.
    """

    language: str = ""
    extensions: tuple[str, ...] = ()
    strategy: str = "brace"  # "brace", "indent" or "keyword"
    comment_prefix: str = "//"
    file_header: str = ""
    quote_chars: tuple[str, ...] = ('"', "'")
    multiline_quotes: tuple[str, ...] = ()
    # Consumed whole by brace_end before quote_chars are considered.
    char_literal: re.Pattern[str] | None = None
    # Opener of a string without backslash escapes, closed by '"' ('""' escapes).
    verbatim_string: re.Pattern[str] | None = None
    annotation_prefixes: tuple[str, ...] = ()
    stop_words: frozenset[str] = frozenset()
    primitive_types: frozenset[str] = frozenset()

    # ------------------------------------------------------------------
    # Imports
    # ------------------------------------------------------------------
    def extract_imports(self, source: SourceFile, project_root: Path) -> list[str]:
        """Absolute paths of local files *source* references."""
        return []

    # ------------------------------------------------------------------
    # Symbols
    # ------------------------------------------------------------------
    def match_header(self, text: str, source: SourceFile) -> Header | None:
        raise NotImplementedError

    def single_line(self, text: str) -> bool:
        """True when the header on *text* is a complete one-line definition."""
        return False

    def index_symbols(self, source: SourceFile) -> list[SymbolDefinition]:
        lines = source.lines
        definitions: list[SymbolDefinition] = []
        for i, line in enumerate(lines):
            header = self.match_header(line.text, source)
            if header is None:
                continue
            end_index = max(i, self.estimate_end(lines, i, source))
            first = self._annotation_start(lines, i)
            start = lines[first].start
            end = lines[end_index].end
            while end > start and source.content[end - 1:end] in (b" ", b"\t", b"\r", b"\n"):
                end -= 1
            if end <= start:
                continue
            definitions.append(
                SymbolDefinition(
                    name=header.name,
                    fqn=make_fqn(source.path, header.name),
                    file_path=source.path,
                    start_byte=start,
                    end_byte=end,
                    line=line.number,
                    end_line=lines[end_index].number,
                    language=self.language,
                    kind=header.kind,
                    signature=self.signature(lines, i),
                    visibility=header.visibility,
                    start_line=lines[first].number if first < i else 0,
                )
            )
            logger.debug(
                "%s: %s %s at bytes %d-%d", source.path, header.kind, header.name, start, end
            )
        return definitions

    def signature(self, lines: list[Line], index: int) -> str:
        """Header text up to the body opener, spanning at most a few lines."""
        parts: list[str] = []
        for line in lines[index:index + 6]:
            text = line.text
            cut = text.find("{")
            if cut >= 0:
                parts.append(text[:cut])
                break
            parts.append(text)
            if self.strategy == "indent" and text.rstrip().endswith(":"):
                break
            if self.strategy != "brace":
                break
        return " ".join(p.strip() for p in parts).strip()

    def _annotation_start(self, lines: list[Line], index: int) -> int:
        if not self.annotation_prefixes:
            return index
        first = index
        while first > 0 and lines[first - 1].text.lstrip().startswith(self.annotation_prefixes):
            first -= 1
        return first

    # ------------------------------------------------------------------
    # End estimators
    # ------------------------------------------------------------------
    def estimate_end(self, lines: list[Line], index: int, source: SourceFile) -> int:
        """Index of the last line belonging to the definition starting at *index*."""
        if self.single_line(lines[index].text):
            return index
        if self.strategy == "indent":
            return indent_end(lines, index)
        if self.strategy == "keyword":
            return keyword_end(lines, index)
        return self.brace_end(lines, index, source)

    def brace_end(self, lines: list[Line], index: int, source: SourceFile) -> int:
        depth = 0
        found_open = False
        quote: str | None = None
        verbatim = False
        in_block_comment = False

        for j in range(index, len(lines)):
            text = lines[j].text
            if j > index and not found_open and quote is None and not in_block_comment:
                if self.match_header(text, source) is not None:
                    # Body-less declaration followed by the next definition.
                    return j - 1
            k = 0
            while k < len(text):
                ch = text[k]
                if in_block_comment:
                    if text.startswith("*/", k):
                        in_block_comment = False
                        k += 2
                        continue
                    k += 1
                    continue
                if quote is not None:
                    if verbatim:
                        if text.startswith(quote * 2, k):
                            k += 2
                            continue
                    elif ch == "\\":
                        k += 2
                        continue
                    if ch == quote:
                        quote = None
                        verbatim = False
                    k += 1
                    continue
                if text.startswith("//", k):
                    break
                if text.startswith("/*", k):
                    in_block_comment = True
                    k += 2
                    continue
                if self.char_literal is not None:
                    m = self.char_literal.match(text, k)
                    if m:
                        k = m.end()
                        continue
                if self.verbatim_string is not None:
                    m = self.verbatim_string.match(text, k)
                    if m:
                        quote, verbatim = '"', True
                        k = m.end()
                        continue
                if ch in self.quote_chars:
                    quote = ch
                elif ch == "{":
                    depth += 1
                    found_open = True
                elif ch == "}":
                    depth -= 1
                    if found_open and depth <= 0:
                        return j
                elif ch == ";" and not found_open:
                    return j
                k += 1
            if quote is not None and not verbatim and quote not in self.multiline_quotes:
                quote = None
        return len(lines) - 1

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------
    def extract_calls(
        self,
        source: SourceFile,
        index: SymbolIndex,
        imports: list[str] | None = None,
    ) -> list[tuple[str, str]]:
        """Edges ``(caller fqn, callee fqn)`` found in *source*, in text order."""
        lexer = make_lexer(self.language)
        if lexer is None:
            return []

        names = index.names
        header_names = {(d.line, d.name) for d in index.in_file(source.path)}
        tokens = _significant_tokens(lexer, source.text)
        imports = imports or []

        edges: list[tuple[str, str]] = []
        for pos, (ttype, value, line) in enumerate(tokens):
            if ttype not in Token.Name or value not in names:
                continue
            if value in self.stop_words or (line, value) in header_names:
                continue
            if pos + 1 < len(tokens) and _is_member_operator(tokens[pos + 1][1]):
                continue  # receiver, not a callee

            receiver = None
            if pos >= 2 and _is_member_operator(tokens[pos - 1][1]):
                prev_type, prev_value, _ = tokens[pos - 2]
                if prev_type in Token.Name:
                    receiver = prev_value

            caller = index.enclosing(source.path, line)
            if caller is None:
                continue
            target = self.resolve(value, receiver, source.path, index, imports)
            if target is not None:
                edges.append((caller.fqn, target.fqn))
        return edges

    def resolve(
        self,
        name: str,
        receiver: str | None,
        caller_path: str,
        index: SymbolIndex,
        imports: list[str],
    ) -> SymbolDefinition | None:
        """Pick one definition for *name*: receiver file, same file, imports, path order."""
        candidates = index.by_name(name)
        if not candidates:
            return None
        by_file = {c.file_path: c for c in candidates}

        if receiver:
            for path in self.receiver_files(receiver, index):
                if path in by_file:
                    return by_file[path]
        if caller_path in by_file:
            return by_file[caller_path]
        for path in imports:
            if path in by_file:
                return by_file[path]
        return candidates[0]

    def receiver_files(self, receiver: str, index: SymbolIndex) -> list[str]:
        """Files that declare the type or module named *receiver*."""
        files = [d.file_path for d in index.by_name(receiver) if d.kind == "class"]
        stems = {receiver.lower(), snake_case(receiver)}
        files.extend(p for p in index.files if Path(p).stem.lower() in stems)
        return files

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------
    def header_types(self, definition: SymbolDefinition) -> set[str]:
        """Non-primitive type names mentioned in a definition's header."""
        text = _STRING_LITERAL.sub("", definition.signature)
        found = set(_CAPITALIZED.findall(text))
        found.discard(definition.name)
        return {t for t in found if t not in self.primitive_types and t not in self.stop_words}


def indent_end(lines: list[Line], index: int) -> int:
    """End of an indentation-delimited block (Python family)."""
    base = indent_width(lines[index].text)

    # Follow a multi-line header to its closing bracket.
    header_end = index
    depth = 0
    for j in range(index, len(lines)):
        text = _STRING_LITERAL.sub("", lines[j].text).split("#", 1)[0]
        depth += sum(text.count(c) for c in "([{") - sum(text.count(c) for c in ")]}")
        header_end = j
        if depth <= 0:
            break

    last = header_end
    open_triple: str | None = None
    for j in range(header_end + 1, len(lines)):
        text = lines[j].text
        stripped = text.strip()
        if open_triple is not None:
            if open_triple in stripped:
                open_triple = None
            last = j
            continue
        if not stripped or stripped.startswith("#"):
            continue
        if indent_width(text) <= base:
            break
        last = j
        open_triple = _unclosed_triple_quote(stripped)
    return last


def keyword_end(lines: list[Line], index: int) -> int:
    """End of a block closed by an ``end`` keyword (Ruby family)."""
    base = indent_width(lines[index].text, tab=2)
    last = index
    for j in range(index + 1, len(lines)):
        stripped = lines[j].text.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if indent_width(lines[j].text, tab=2) <= base:
            if re.match(r"end\b", stripped):
                return j
            if re.match(r"(?:def|class|module)\b", stripped):
                return last
        last = j
    return len(lines) - 1


def _unclosed_triple_quote(text: str) -> str | None:
    for delim in ('"""', "'''"):
        if text.count(delim) % 2 == 1:
            return delim
    return None


def _is_member_operator(value: str) -> bool:
    return value.strip() in MEMBER_OPERATORS


def _significant_tokens(lexer, text: str) -> list[tuple[object, str, int]]:
    """Tokens with their 1-based line, dropping whitespace and comments."""
    tokens: list[tuple[object, str, int]] = []
    line = 1
    for ttype, value in lexer.get_tokens(text):
        if ttype in Token.Name.Decorator:
            # "@pkg.deco" arrives as one token.
            for i, part in enumerate(value.strip().lstrip("@").split(".")):
                if i:
                    tokens.append((Token.Operator, ".", line))
                if part:
                    tokens.append((Token.Name, part, line))
        elif ttype not in Token.Comment and value.strip():
            tokens.append((ttype, value, line))
        line += value.count("\n")
    return tokens
