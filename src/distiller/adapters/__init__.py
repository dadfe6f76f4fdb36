"""Language adapters – per-language import, symbol and call heuristics.

Public API
----------
- get_adapter(language, *, strict=False) -> LanguageAdapter | None
- adapter_for(path, *, strict=False) -> LanguageAdapter | None
- supported_languages() -> list[str]
"""

from __future__ import annotations

from pathlib import Path

from distiller.adapters.base import LanguageAdapter
from distiller.adapters.cpp import CAdapter, CppAdapter
from distiller.adapters.csharp import CSharpAdapter
from distiller.adapters.golang import GoAdapter
from distiller.adapters.java import JavaAdapter
from distiller.adapters.javascript import JavaScriptAdapter, TypeScriptAdapter
from distiller.adapters.kotlin import KotlinAdapter
from distiller.adapters.php import PhpAdapter
from distiller.adapters.python import PythonAdapter
from distiller.adapters.ruby import RubyAdapter
from distiller.adapters.rust import RustAdapter
from distiller.adapters.swift import SwiftAdapter
from distiller.errors import UnsupportedLanguageError
from distiller.lang import detect_language


_REGISTRY: dict[str, LanguageAdapter] = {
    adapter.language: adapter
    for adapter in (
        PhpAdapter(),
        PythonAdapter(),
        GoAdapter(),
        JavaScriptAdapter(),
        TypeScriptAdapter(),
        RubyAdapter(),
        JavaAdapter(),
        CSharpAdapter(),
        CppAdapter(),
        CAdapter(),
        RustAdapter(),
        SwiftAdapter(),
        KotlinAdapter(),
    )
}


def get_adapter(language: str, *, strict: bool = False) -> LanguageAdapter | None:
    """Return the adapter registered for *language*.

    Returns None for unknown languages unless *strict* is set, in which
    case UnsupportedLanguageError is raised.
    """
    adapter = _REGISTRY.get(language)
    if adapter is None and strict:
        raise UnsupportedLanguageError(language)
    return adapter


def adapter_for(path: str | Path, *, strict: bool = False) -> LanguageAdapter | None:
    language = detect_language(path)
    adapter = _REGISTRY.get(language)
    if adapter is None and strict:
        raise UnsupportedLanguageError(language, str(path))
    return adapter


def supported_languages() -> list[str]:
    return sorted(_REGISTRY)


__all__ = [
    "LanguageAdapter",
    "adapter_for",
    "get_adapter",
    "supported_languages",
]
