"""Pytest configuration and shared fixtures."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from formulavalidator.config import Settings
from formulavalidator.engine import FormulaEngine, SymbolTables


@pytest.fixture
def mock_settings() -> Settings:
    """Create settings with test values."""
    return Settings(
        host="127.0.0.1",
        port=8000,
        debug=False,
        cors_allow_origins=["*"],
        log_level="INFO",
        log_formulas=False,
        conformance_vectors_path=None,
    )


@pytest.fixture
def engine() -> FormulaEngine:
    """Engine with the default limits."""
    return FormulaEngine()


@pytest.fixture
def pythagoras_tables() -> SymbolTables:
    """Variables a=3, b=4 and a constant g=9.81."""
    return SymbolTables.from_inputs({"a": 3, "b": 4}, {"g": 9.81})


@pytest.fixture
def test_client() -> TestClient:
    """Test client over the API router only."""
    from formulavalidator.api.routes import router

    app = FastAPI()
    app.include_router(router, prefix="/api")

    return TestClient(app)
