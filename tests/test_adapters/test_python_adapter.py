"""Tests for the Python adapter."""

from distiller.adapters import get_adapter
from distiller.adapters.python import python_visibility


def _imports(source, project):
    return get_adapter("python").extract_imports(source, project)


class TestPythonImports:
    def test_from_import_resolves_module_file(self, project, write, load):
        helper = write("b.py", "def helper():\n    pass\n")
        source = load("a.py", "from b import helper\n")
        assert _imports(source, project) == [str(helper)]

    def test_stdlib_and_unknown_modules_are_skipped(self, project, load):
        source = load("a.py", """\
            import os, json
            from typing import Any
            import requests
            # import b
        """)
        assert _imports(source, project) == []

    def test_package_and_submodule(self, project, write, load):
        init = write("pkg/__init__.py", "")
        util = write("pkg/util.py", "")
        source = load("main.py", """\
            import pkg
            from pkg import util
        """)
        assert _imports(source, project) == [str(init), str(util)]

    def test_continued_from_imports(self, project, write, load):
        init = write("pkg/__init__.py", "")
        mod_a = write("pkg/mod_a.py", "")
        mod_b = write("pkg/mod_b.py", "")
        mod_c = write("pkg/mod_c.py", "")
        extra = write("extra.py", "")
        source = load("main.py", """\
            from pkg import (
                mod_a,  # first
                mod_b as b,
            )
            from pkg import \\
                mod_c
            import extra
        """)
        assert _imports(source, project) == [
            str(init), str(mod_a), str(mod_b), str(mod_c), str(extra),
        ]

    def test_relative_imports(self, project, write, load):
        shared = write("pkg/shared.py", "")
        sibling = write("pkg/sub/sibling.py", "")
        source = load("pkg/sub/mod.py", """\
            from . import sibling
            from ..shared import thing
        """)
        assert _imports(source, project) == [str(sibling), str(shared)]

    def test_absolute_import_searches_up_to_root(self, project, write, load):
        tools = write("lib/tools.py", "")
        source = load("app/main.py", "import lib.tools as t\n")
        assert _imports(source, project) == [str(tools)]

    def test_duplicates_are_removed(self, project, write, load):
        helper = write("b.py", "")
        source = load("a.py", """\
            from b import one
            from b import two
            import b
        """)
        assert _imports(source, project) == [str(helper)]


class TestPythonSymbols:
    def test_functions_classes_and_methods(self, load):
        source = load("svc.py", """\
            import functools


            @functools.lru_cache()
            def cached(x):
                return x


            class Service:
                def __init__(self):
                    self.ready = True

                def _hidden(self):
                    if self.ready:
                        return 1

                    # trailing comment
                    return 2

                async def fetch(self):
                    pass
        """)
        defs = {d.name: d for d in get_adapter("python").index_symbols(source)}
        assert set(defs) == {"cached", "Service", "__init__", "_hidden", "fetch"}
        assert defs["Service"].kind == "class"
        assert defs["cached"].kind == "function"
        assert (defs["_hidden"].line, defs["_hidden"].end_line) == (13, 18)
        assert defs["Service"].end_line == 21
        assert defs["_hidden"].visibility == "private"
        assert defs["__init__"].visibility == "public"

    def test_decorator_is_part_of_the_range(self, load):
        source = load("deco.py", """\
            @decorate
            @other(1)
            def f():
                pass
        """)
        (definition,) = get_adapter("python").index_symbols(source)
        assert definition.start_byte == 0
        assert definition.line == 3
        assert (definition.start_line, definition.first_line) == (1, 1)
        assert definition.contains_line(1)
        assert source.slice(definition.start_byte, definition.end_byte).startswith("@decorate")

    def test_visibility(self):
        assert python_visibility("run") == "public"
        assert python_visibility("_run") == "private"
        assert python_visibility("__run") == "private"
        assert python_visibility("__call__") == "public"
