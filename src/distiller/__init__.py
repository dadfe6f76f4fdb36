"""Dependency-aware source distillation."""

__version__ = "0.1.0"
