"""Tests for the index skill API and indexer."""

import pytest

from distiller.models import SourceFile
from distiller.skills.index import discover, get_body, load as load_project, symbols
from distiller.skills.index.indexer import build_index, index_file


class TestIndexer:
    def test_unsupported_language_has_no_symbols(self):
        assert index_file(SourceFile("/p/notes.txt", b"def f():\n", "unknown")) == []

    def test_build_index_is_independent_of_workers(self, chain_project):
        discovery, _ = load_project(str(chain_project / "app.py"))
        one = build_index(discovery.files.values(), max_workers=1)
        many = build_index(discovery.files.values(), max_workers=4)
        assert [d.fqn for d in one] == [d.fqn for d in many]
        assert len(one) == 5


class TestDiscover:
    def test_discover(self, python_project):
        result = discover(str(python_project / "a.py"))
        assert result["count"] == 2
        assert result["related_files"] == [
            str(python_project / "a.py"),
            str(python_project / "b.py"),
        ]
        assert result["failed"] == []
        assert result["timed_out"] is False

    def test_missing_file_raises(self, project):
        with pytest.raises(OSError):
            discover(str(project / "missing.py"))


class TestSymbols:
    def test_file_only(self, python_project):
        result = symbols(str(python_project / "a.py"))
        assert [s["name"] for s in result["symbols"]] == ["main"]
        assert result["count"] == 1

    def test_related(self, python_project):
        result = symbols(str(python_project / "a.py"), related=True)
        assert [s["name"] for s in result["symbols"]] == ["main", "helper", "dead_code"]
        helper = result["symbols"][1]
        assert helper["fqn"] == f"{python_project / 'b.py'}::helper"
        assert (helper["line"], helper["end_line"]) == (1, 2)


class TestGetBody:
    def test_bare_name_resolves_through_imports(self, python_project):
        result = get_body(str(python_project / "a.py"), "helper")
        assert result["source"] == "def helper():\n    return 1"
        assert result["file"] == str(python_project / "b.py")
        assert (result["start_line"], result["end_line"]) == (1, 2)

    def test_fqn(self, python_project):
        fqn = f"{python_project / 'b.py'}::dead_code"
        result = get_body(str(python_project / "a.py"), fqn)
        assert result["fqn"] == fqn
        assert result["source"] == "def dead_code():\n    return 2"

    def test_same_file_wins(self, project, write):
        write("a.py", """\
            from b import run


            def run():
                pass


            def main():
                run()
        """)
        write("b.py", "def run():\n    return 'b'\n")
        result = get_body(str(project / "a.py"), "run")
        assert result["file"] == str(project / "a.py")

    def test_unknown(self, python_project):
        assert get_body(str(python_project / "a.py"), "nope") is None
