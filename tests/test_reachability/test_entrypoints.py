"""Tests for entry-point selection."""

from distiller.ir import DistilledClass, DistilledFile, DistilledFunction, DistilledImport
from distiller.models import SymbolDefinition, SymbolIndex, make_fqn
from distiller.skills.reachability.entrypoints import select_entry_points

PATH = "/p/app.py"


def _fn(name, visibility="public"):
    return DistilledFunction(name=name, visibility=visibility)


def _defn(name, path=PATH, start=0):
    return SymbolDefinition(
        name=name,
        fqn=make_fqn(path, name),
        file_path=path,
        start_byte=start,
        end_byte=start + 5,
        line=1,
        end_line=1,
        language="python",
    )


class TestSelectEntryPoints:
    def test_main_wins_over_public(self):
        tree = DistilledFile(PATH, "python", [_fn("run"), _fn("main")])
        assert select_entry_points(tree, SymbolIndex(), PATH) == [f"{PATH}::main"]

    def test_main_is_case_insensitive(self):
        tree = DistilledFile(PATH, "go", [_fn("Main")])
        assert select_entry_points(tree, SymbolIndex(), PATH) == [f"{PATH}::Main"]

    def test_class_constructors_and_main_methods(self):
        tree = DistilledFile(PATH, "php", [
            DistilledClass("Service", children=[_fn("__construct"), _fn("handle")]),
            DistilledClass("App", children=[_fn("main"), _fn("run")]),
        ])
        assert select_entry_points(tree, SymbolIndex(), PATH) == [
            f"{PATH}::__construct",
            f"{PATH}::main",
        ]

    def test_duplicates_are_removed(self):
        tree = DistilledFile(PATH, "python", [
            _fn("main"),
            DistilledClass("App", children=[_fn("main")]),
        ])
        assert select_entry_points(tree, SymbolIndex(), PATH) == [f"{PATH}::main"]

    def test_public_top_level_declarations(self):
        tree = DistilledFile(PATH, "java", [
            DistilledImport("import", "x"),
            _fn("run"),
            _fn("_hidden", "private"),
            DistilledClass("Service", visibility="package"),
            DistilledClass("Local", visibility="internal"),
            DistilledClass("Guarded", visibility="protected"),
        ])
        assert select_entry_points(tree, SymbolIndex(), PATH) == [
            f"{PATH}::run",
            f"{PATH}::Service",
            f"{PATH}::Local",
        ]

    def test_indexed_main_when_tree_has_nothing(self):
        index = SymbolIndex([_defn("helper"), _defn("main", start=10), _defn("main", path="/p/other.py")])
        tree = DistilledFile(PATH, "python", [_fn("_private", "private")])
        assert select_entry_points(tree, index, PATH) == [f"{PATH}::main"]

    def test_full_keep_fallback(self):
        index = SymbolIndex([_defn("_b", start=10), _defn("_a"), _defn("other", path="/p/other.py")])
        assert select_entry_points(None, index, PATH) == [f"{PATH}::_a", f"{PATH}::_b"]

    def test_nothing_at_all(self):
        assert select_entry_points(None, SymbolIndex(), PATH) == []
