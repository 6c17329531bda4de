"""Shared conformance vectors and their runner."""

from .runner import (
    ConformanceCase,
    ConformanceMismatch,
    ConformanceReport,
    DEFAULT_VECTORS_PATH,
    load_vectors,
    run_conformance,
)

__all__ = [
    "ConformanceCase",
    "ConformanceMismatch",
    "ConformanceReport",
    "DEFAULT_VECTORS_PATH",
    "load_vectors",
    "run_conformance",
]
