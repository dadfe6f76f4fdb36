"""Tests for folding assembled files into one document and for the tree filter."""

from distiller.ir import (
    DistilledClass,
    DistilledComment,
    DistilledFile,
    DistilledFunction,
    DistilledImport,
)
from distiller.models import UsedSet
from distiller.skills.reachability.assembler import AssembledFile, Project
from distiller.skills.reachability.collapser import collapse_project, filter_tree_by_usage


def _project(*files):
    return Project(files={f.path: f for f in files})


class TestCollapseProject:
    def test_analyzed_file_comes_first(self):
        project = _project(
            AssembledFile("/root/b.py", "python", content="def b():\n    pass"),
            AssembledFile("/root/z.py", "python", content="def main():\n    b()"),
            AssembledFile("/root/lib/util.go", "go", content="func U() {\n}"),
        )
        tree = DistilledFile("/root/z.py", "python", [DistilledFunction("main")])
        result = collapse_project(project, tree, "/root")
        assert result.path == "/root/z.py"
        assert len(result.children) == 1
        comment = result.children[0]
        assert isinstance(comment, DistilledComment)
        assert comment.format == "implementation"
        assert comment.text == (
            "# === z.py ===\ndef main():\n    b()\n\n"
            "# === b.py ===\ndef b():\n    pass\n\n"
            "// === lib/util.go ===\nfunc U() {\n}"
        )

    def test_path_outside_root_stays_absolute(self):
        project = _project(AssembledFile("/elsewhere/x.py", "python", content="x = 1"))
        tree = DistilledFile("/root/a.py", "python")
        text = collapse_project(project, tree, "/root").children[0].text
        assert text == "# === /elsewhere/x.py ===\nx = 1"


class TestFilterTreeByUsage:
    def test_keeps_only_used_declarations(self):
        tree = DistilledFile("/p/a.py", "python", [
            DistilledImport("from", "b", ["helper"]),
            DistilledComment("notes"),
            DistilledFunction("main"),
            DistilledFunction("dead"),
            DistilledFunction("helper"),
            DistilledClass("Svc", children=[DistilledFunction("run"), DistilledFunction("stop")]),
            DistilledClass("Gone", children=[DistilledFunction("never")]),
        ])
        used = UsedSet()
        used.mark("/p/a.py::main", 0)
        used.mark("helper", 1)
        used.mark("Svc.run", 1)

        result = filter_tree_by_usage(tree, used)
        kinds = [(type(n).__name__, getattr(n, "name", None)) for n in result.children]
        assert kinds == [
            ("DistilledImport", None),
            ("DistilledComment", None),
            ("DistilledFunction", "main"),
            ("DistilledFunction", "helper"),
            ("DistilledClass", "Svc"),
        ]
        assert [m.name for m in result.children[-1].methods] == ["run"]

    def test_input_tree_is_untouched(self):
        svc = DistilledClass("Svc", children=[DistilledFunction("run"), DistilledFunction("stop")])
        tree = DistilledFile("/p/a.py", "python", [svc])
        used = UsedSet()
        used.mark("/p/a.py::run", 0)
        filter_tree_by_usage(tree, used)
        assert [m.name for m in svc.methods] == ["run", "stop"]
