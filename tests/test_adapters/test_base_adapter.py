"""Tests for the shared adapter helpers and end-of-definition estimators."""

import textwrap

from distiller.adapters import get_adapter
from distiller.adapters.base import (
    dedupe,
    first_existing,
    indent_end,
    indent_width,
    keyword_end,
    siblings,
    snake_case,
)
from distiller.models import SourceFile


def _source(path, text, language):
    return SourceFile(path, textwrap.dedent(text).encode("utf-8"), language)


def _spans(source):
    adapter = get_adapter(source.language)
    return {d.name: (d.line, d.end_line) for d in adapter.index_symbols(source)}


def _bodies(source):
    adapter = get_adapter(source.language)
    return {d.name: source.slice(d.start_byte, d.end_byte) for d in adapter.index_symbols(source)}


class TestHelpers:
    def test_indent_width(self):
        assert indent_width("    x") == 4
        assert indent_width("\t  x") == 6
        assert indent_width("\tx", tab=2) == 2
        assert indent_width("x") == 0

    def test_snake_case(self):
        assert snake_case("HttpClient") == "http_client"
        assert snake_case("parseURL") == "parse_url"
        assert snake_case("util") == "util"

    def test_dedupe_keeps_first_seen_order(self, tmp_path):
        a = tmp_path / "a.py"
        b = tmp_path / "b.py"
        assert dedupe([b, a, tmp_path / "." / "b.py"]) == [str(b.resolve()), str(a.resolve())]

    def test_first_existing_skips_directories(self, tmp_path):
        (tmp_path / "pkg").mkdir()
        (tmp_path / "pkg.py").write_text("")
        assert first_existing([tmp_path / "pkg", tmp_path / "pkg.py"]) == tmp_path / "pkg.py"
        assert first_existing([tmp_path / "nope.py"]) is None

    def test_siblings_excludes_self_and_other_extensions(self, tmp_path):
        for name in ("a.go", "b.go", "c.txt", "d.go"):
            (tmp_path / name).write_text("")
        (tmp_path / "sub.go").mkdir()
        found = siblings(str(tmp_path / "b.go"), (".go",))
        assert [p.name for p in found] == ["a.go", "d.go"]


class TestIndentEnd:
    def test_body_ends_before_dedent(self):
        source = _source("/p/m.py", """\
            def first():
                x = 1

                # a comment
                return x
            # dedented comment
            def second():
                pass
        """, "python")
        assert indent_end(source.lines, 0) == 4
        assert indent_end(source.lines, 6) == 7

    def test_multiline_header(self):
        source = _source("/p/m.py", """\
            def long(
                a,
                b=")",
            ):
                return a + b
            x = 1
        """, "python")
        assert indent_end(source.lines, 0) == 4

    def test_triple_quoted_string_at_column_zero(self):
        source = _source("/p/m.py", '''\
            def documented():
                """Summary.

            text at column zero
                """
                return 1
            after = 2
        ''', "python")
        assert indent_end(source.lines, 0) == 5


class TestKeywordEnd:
    def test_end_at_header_indent(self):
        source = _source("/p/g.rb", """\
            class Greeter
              def greet(name)
                if name
                  "hi"
                end
              end
            end
        """, "ruby")
        assert keyword_end(source.lines, 1) == 5
        assert keyword_end(source.lines, 0) == 6

    def test_missing_end_stops_before_next_def(self):
        source = _source("/p/g.rb", """\
            def a
              1
            def b
              2
            end
        """, "ruby")
        assert keyword_end(source.lines, 0) == 1


class TestBraceEnd:
    def test_braces_in_strings_and_comments_are_ignored(self):
        source = _source("/p/main.go", """\
            package main

            func main() {
            \ts := "}"
            \t// }
            \t/* { */
            \thelper(s)
            }

            func helper(s string) {
            \tprintln(s)
            }
        """, "go")
        assert _spans(source) == {"main": (3, 8), "helper": (10, 12)}

    def test_bodyless_declaration_before_next_header(self):
        source = _source("/p/asm.go", """\
            func asmAdd(a, b int) int

            func next() {
            }
        """, "go")
        bodies = _bodies(source)
        assert bodies["asmAdd"] == "func asmAdd(a, b int) int"
        assert bodies["next"] == "func next() {\n}"

    def test_semicolon_ends_abstract_method(self):
        source = _source("/p/Shape.java", """\
            public abstract class Shape {
                public abstract double area();

                public String describe() {
                    return "shape";
                }
            }
        """, "java")
        assert _spans(source) == {"Shape": (1, 7), "area": (2, 2), "describe": (4, 6)}

    def test_unclosed_body_runs_to_eof(self):
        source = _source("/p/broken.go", """\
            func broken() {
            \tx := 1
            \t_ = x
        """, "go")
        assert _bodies(source)["broken"] == "func broken() {\n\tx := 1\n\t_ = x"

    def test_go_raw_string_spans_lines(self):
        source = _source("/p/raw.go", """\
            func query() string {
            \treturn `
            }
            `
            }

            func after() {
            }
        """, "go")
        assert _spans(source)["query"] == (1, 5)


class TestIndexSymbols:
    def test_end_byte_excludes_trailing_whitespace(self):
        source = _source("/p/m.py", "def f():\n    return 1   \n\n\n", "python")
        adapter = get_adapter("python")
        (definition,) = adapter.index_symbols(source)
        assert source.slice(definition.start_byte, definition.end_byte) == "def f():\n    return 1"
        assert 0 <= definition.start_byte < definition.end_byte <= len(source.content)

    def test_definitions_carry_language_and_fqn(self):
        source = _source("/p/m.py", "def f():\n    pass\n", "python")
        (definition,) = get_adapter("python").index_symbols(source)
        assert definition.fqn == "/p/m.py::f"
        assert definition.language == "python"
        assert definition.signature == "def f():"
