"""Tests for the reachability skill API."""

import json

from distiller.skills.reachability import analyze, distill


class TestAnalyze:
    def test_report(self, python_project):
        a = str(python_project / "a.py")
        b = str(python_project / "b.py")
        result = analyze(a)
        assert result["file"] == a
        assert result["project_root"] == str(python_project)
        assert result["related_files"] == [a, b]
        assert result["entry_points"] == [f"{a}::main"]
        assert result["used"] == [f"{a}::main", f"{b}::helper"]
        assert result["used_types"] == []
        assert (result["node_count"], result["edge_count"]) == (1, 1)
        assert list(result["files"]) == [a, b]
        assert result["files"][b]["content"] == "def helper():\n    return 1"

    def test_workers_override(self, python_project):
        result = analyze(str(python_project / "a.py"), max_workers=1, max_depth=0)
        assert result["used"] == [f"{python_project / 'a.py'}::main"]

    def test_serializable(self, chain_project):
        json.dumps(analyze(str(chain_project / "app.py")))


class TestDistill:
    def test_single_document(self, python_project):
        result = distill(str(python_project / "a.py"))
        assert result["kind"] == "file"
        assert [c["kind"] for c in result["children"]] == ["comment"]
        assert result["children"][0]["format"] == "implementation"
        assert "dead_code" not in result["children"][0]["text"]

    def test_plain_tree(self, python_project):
        result = distill(str(python_project / "a.py"), dependency_aware=False)
        assert [c["kind"] for c in result["children"]] == ["import", "function"]
        assert result["children"][1]["name"] == "main"
