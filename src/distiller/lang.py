"""Language detection and Pygments lexer mapping shared across skills."""

from __future__ import annotations

from pathlib import Path

from pygments.lexers import (
    CLexer,
    CppLexer,
    CSharpLexer,
    GoLexer,
    JavaLexer,
    JavascriptLexer,
    KotlinLexer,
    PhpLexer,
    PythonLexer,
    RubyLexer,
    RustLexer,
    SwiftLexer,
    TypeScriptLexer,
)


UNKNOWN = "unknown"

EXT_MAP = {
    ".php": "php",
    ".py": "python",
    ".go": "go",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".rb": "ruby",
    ".java": "java",
    ".cs": "csharp",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".cxx": "cpp",
    ".c++": "cpp",
    ".h": "cpp",
    ".hpp": "cpp",
    ".hxx": "cpp",
    ".h++": "cpp",
    ".c": "c",
    ".rs": "rust",
    ".swift": "swift",
    ".kt": "kotlin",
    ".kts": "kotlin",
}

LEXER_MAP = {
    "php": PhpLexer,
    "python": PythonLexer,
    "go": GoLexer,
    "javascript": JavascriptLexer,
    "typescript": TypeScriptLexer,
    "ruby": RubyLexer,
    "java": JavaLexer,
    "csharp": CSharpLexer,
    "cpp": CppLexer,
    "c": CLexer,
    "rust": RustLexer,
    "swift": SwiftLexer,
    "kotlin": KotlinLexer,
}

# Checked from the file's directory upwards.
PROJECT_MARKERS = (
    "go.mod",
    "package.json",
    "pyproject.toml",
    "Cargo.toml",
    ".git",
    "setup.py",
    "pom.xml",
    "build.gradle",
    "composer.json",
    "Gemfile",
)


def detect_language(path: str | Path) -> str:
    """Map a file path to a language tag, or ``"unknown"``."""
    return EXT_MAP.get(Path(path).suffix.lower(), UNKNOWN)


def make_lexer(language: str):
    """Return a Pygments lexer for *language* that preserves newlines, or None."""
    lexer_cls = LEXER_MAP.get(language)
    if lexer_cls is None:
        return None
    if language == "php":
        # Sources may omit the opening tag in included fragments.
        return lexer_cls(stripnl=False, ensurenl=False, startinline=True)
    return lexer_cls(stripnl=False, ensurenl=False)


def find_project_root(file_path: str | Path) -> Path:
    """Walk up from *file_path* to the nearest directory holding a project marker.

    Falls back to the file's own directory.
    """
    start = Path(file_path).resolve().parent
    for directory in (start, *start.parents):
        for marker in PROJECT_MARKERS:
            if (directory / marker).exists():
                return directory
    return start
