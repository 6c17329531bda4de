"""HTTP API for the formula validator."""

from .app import create_app

__all__ = ["create_app"]
