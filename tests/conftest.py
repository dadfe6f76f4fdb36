"""Shared test fixtures for distiller tests."""

import textwrap

import pytest

from distiller.skills.index.discovery import load_source


@pytest.fixture
def project(tmp_path):
    """An empty project directory marked as a repository root."""
    root = tmp_path.resolve()
    (root / ".git").mkdir()
    return root


@pytest.fixture
def write(project):
    """Write a dedented file below the project root and return its path."""
    def _write(relpath, text):
        path = project / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(text))
        return path
    return _write


@pytest.fixture
def load(write):
    """Write a file and read it back as a SourceFile."""
    def _load(relpath, text):
        return load_source(write(relpath, text))
    return _load


@pytest.fixture
def python_project(project, write):
    """``a.main`` calls ``b.helper``; ``b.dead_code`` is never called."""
    write("a.py", """\
        from b import helper


        def main():
            return helper()
    """)
    write("b.py", """\
        def helper():
            return 1


        def dead_code():
            return 2
    """)
    return project


@pytest.fixture
def chain_project(project, write):
    """A three-hop chain ``main -> first -> second -> third`` across files."""
    write("app.py", """\
        from steps import first


        def main():
            first()
    """)
    write("steps.py", """\
        from more import second


        def first():
            second()


        def unused():
            pass
    """)
    write("more.py", """\
        def second():
            third()


        def third():
            return 3
    """)
    return project


@pytest.fixture
def cycle_project(project, write):
    """``ping`` and ``pong`` call each other from two files."""
    write("ping.py", """\
        from pong import pong


        def main():
            ping(3)


        def ping(n):
            if n:
                pong(n - 1)
    """)
    write("pong.py", """\
        from ping import ping


        def pong(n):
            if n:
                ping(n - 1)
    """)
    return project
