"""Shared exception classes for distiller skills."""

from __future__ import annotations


class DistillerError(Exception):
    """Base class for distiller errors."""


class UnsupportedLanguageError(DistillerError):
    """Raised when no language adapter exists for a file."""

    def __init__(self, language: str, path: str | None = None) -> None:
        self.language = language
        self.path = path
        where = f" ({path})" if path else ""
        super().__init__(f"No language adapter for '{language}'{where}")


class AssemblyError(DistillerError):
    """Raised when a code snippet does not fit inside its source file."""


class SymbolNotFoundError(DistillerError):
    """Raised when a function symbol cannot be found in the index."""
