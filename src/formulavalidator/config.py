"""Configuration management for the formula validator service."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("CORS_ALLOW_ORIGINS")
    if cors_env:
        return cors_env.split(",")
    return ["*"]


def _parse_optional_path(name: str) -> Optional[Path]:
    value = os.getenv(name)
    return Path(value) if value else None


class Settings(BaseModel):
    """Application settings.

    Engine limits and numeric semantics live in the shared grammar and are
    intentionally not configurable here.
    """

    # Server settings
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "8000"))
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"

    # CORS settings (comma-separated list of allowed origins, or * for all)
    cors_allow_origins: list[str] = _parse_cors_origins()

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_formulas: bool = os.getenv("LOG_FORMULAS", "false").lower() == "true"  # Include formula text in logs

    # Conformance vectors (None means the file shipped with the package)
    conformance_vectors_path: Optional[Path] = _parse_optional_path("CONFORMANCE_VECTORS_PATH")


settings = Settings()
