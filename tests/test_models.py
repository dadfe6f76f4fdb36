"""Tests for the shared data model."""

from distiller.models import (
    CallGraph,
    DistillOptions,
    SourceFile,
    SymbolDefinition,
    SymbolIndex,
    UsedSet,
    bare_name,
    make_fqn,
)


def _defn(name, path="/p/a.py", start=0, end=10, line=1, end_line=1, kind="function"):
    return SymbolDefinition(
        name=name,
        fqn=make_fqn(path, name),
        file_path=path,
        start_byte=start,
        end_byte=end,
        line=line,
        end_line=end_line,
        language="python",
        kind=kind,
    )


class TestDistillOptions:
    def test_defaults(self):
        options = DistillOptions()
        assert options.dependency_aware is True
        assert options.max_depth == 100
        assert 1 <= options.max_workers <= 8
        assert options.timeout is None
        assert options.enabled

    def test_negative_depth_disables(self):
        assert not DistillOptions(max_depth=-1).enabled

    def test_zero_depth_is_enabled(self):
        assert DistillOptions(max_depth=0).enabled

    def test_flag_disables(self):
        assert not DistillOptions(dependency_aware=False).enabled


class TestSourceFile:
    def test_line_table_excludes_terminators(self):
        source = SourceFile("/p/a.py", b"ab\r\ncd\n\nef", "python")
        table = [(l.number, l.start, l.end, l.text) for l in source.lines]
        assert table == [
            (1, 0, 2, "ab"),
            (2, 4, 6, "cd"),
            (3, 7, 7, ""),
            (4, 8, 10, "ef"),
        ]

    def test_offsets_are_bytes(self):
        source = SourceFile("/p/a.py", "é = 1\nx\n".encode("utf-8"), "python")
        first, second = source.lines
        assert first.end == 6
        assert second.start == 7
        assert source.slice(second.start, second.end) == "x"

    def test_text_decodes_invalid_bytes(self):
        source = SourceFile("/p/a.py", b"x = '\xff'\n", "python")
        assert source.text.startswith("x = '")


class TestFqn:
    def test_make_and_split(self):
        fqn = make_fqn("/p/a.py", "main")
        assert fqn == "/p/a.py::main"
        assert bare_name(fqn) == "main"


class TestSymbolIndex:
    def test_last_write_wins(self):
        first = _defn("dup", start=0, end=5)
        second = _defn("dup", start=20, end=30)
        index = SymbolIndex([first, second])
        assert len(index) == 1
        assert index.get("/p/a.py::dup") is second

    def test_by_name_is_ordered_by_path(self):
        later = _defn("run", path="/p/b.py")
        earlier = _defn("run", path="/p/a.py")
        index = SymbolIndex([later, earlier])
        assert [d.file_path for d in index.by_name("run")] == ["/p/a.py", "/p/b.py"]
        assert index.by_name("missing") == []

    def test_in_file_is_ordered_by_start(self):
        b = _defn("b", start=50, end=60)
        a = _defn("a", start=0, end=10)
        index = SymbolIndex([b, a])
        assert [d.name for d in index.in_file("/p/a.py")] == ["a", "b"]
        assert [d.name for d in index] == ["a", "b"]

    def test_membership_names_files(self):
        index = SymbolIndex([_defn("a"), _defn("b", path="/p/z.py")])
        assert "/p/a.py::a" in index
        assert "a" not in index
        assert index.names == {"a", "b"}
        assert index.files == ["/p/a.py", "/p/z.py"]

    def test_enclosing_picks_innermost(self):
        cls = _defn("C", start=0, end=200, line=1, end_line=10, kind="class")
        method = _defn("m", start=10, end=50, line=2, end_line=4)
        index = SymbolIndex([cls, method])
        assert index.enclosing("/p/a.py", 3) is method
        assert index.enclosing("/p/a.py", 6) is cls
        assert index.enclosing("/p/a.py", 11) is None
        assert index.enclosing("/p/other.py", 3) is None

    def test_children_of_returns_direct_members(self):
        cls = _defn("C", start=0, end=100, kind="class")
        m1 = _defn("m1", start=10, end=30)
        inner = _defn("inner", start=15, end=20)
        m2 = _defn("m2", start=40, end=60)
        outside = _defn("f", start=120, end=140)
        index = SymbolIndex([cls, m1, inner, m2, outside])
        assert index.children_of(cls) == [m1, m2]
        assert index.children_of(m1) == [inner]
        assert index.children_of(outside) == []


class TestCallGraph:
    def test_edges_keep_duplicates_and_order(self):
        graph = CallGraph()
        graph.add_edge("a", "c")
        graph.add_edge("a", "b")
        graph.add_edge("a", "c")
        graph.add_edge("d", "c")
        assert graph.callees("a") == ["c", "b", "c"]
        assert graph.callers("c") == ["a", "d"]
        assert graph.node_count == 2
        assert graph.edge_count == 4

    def test_callees_returns_a_copy(self):
        graph = CallGraph()
        graph.add_edge("a", "b")
        graph.callees("a").append("x")
        assert graph.callees("a") == ["b"]
        assert graph.callees("unknown") == []

    def test_to_dict_sorted(self):
        graph = CallGraph()
        graph.add_edge("z", "a")
        graph.add_edge("b", "a")
        assert list(graph.to_dict()) == ["b", "z"]


class TestUsedSet:
    def test_mark_keeps_minimum_depth(self):
        used = UsedSet()
        used.mark("x", 3)
        used.mark("x", 1)
        used.mark("x", 5)
        assert used.depths == {"x": 1}

    def test_membership_covers_types(self):
        used = UsedSet()
        used.mark("/p/a.py::f", 0)
        used.mark_type("Config")
        assert "/p/a.py::f" in used
        assert "Config" in used
        assert "Other" not in used
        assert len(used) == 2
        assert used.fqns == {"/p/a.py::f"}
