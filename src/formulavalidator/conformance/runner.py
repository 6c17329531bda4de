"""Load conformance vectors and check an engine against them."""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from ..engine import FormulaEngine, FormulaRequest, outcome_to_dict
from ..engine.grammar import GRAMMAR_VERSION

logger = logging.getLogger(__name__)

DEFAULT_VECTORS_PATH = Path(__file__).parent / "vectors.json"


class ConformanceCase(BaseModel):
    """One input with its exact expected wire outcome."""

    name: str
    input: FormulaRequest
    expected: dict[str, Any]


class ConformanceMismatch(BaseModel):
    """A case whose actual outcome differs from the expected one."""

    name: str
    formula: str
    expected: dict[str, Any]
    actual: dict[str, Any]


class ConformanceReport(BaseModel):
    """Result of running a vector file."""

    grammar_version: str = GRAMMAR_VERSION
    total: int = 0
    passed: int = 0
    mismatches: list[ConformanceMismatch] = Field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.mismatches)

    @property
    def ok(self) -> bool:
        return not self.mismatches

    def summary(self) -> str:
        return f"{self.passed}/{self.total} conformance vectors passed (grammar {self.grammar_version})"


def load_vectors(path: Optional[Path] = None) -> list[ConformanceCase]:
    """
    Read a vector file.

    Args:
        path: Vector file to read. Defaults to the configured path, then to
            the file shipped with the package.

    Returns:
        Cases in file order

    Raises:
        ValueError: If the file was written for another grammar version
    """
    if path is None:
        from ..config import settings

        path = settings.conformance_vectors_path or DEFAULT_VECTORS_PATH

    with open(path, encoding="utf-8") as f:
        document = json.load(f)

    version = document.get("grammar_version")
    if version != GRAMMAR_VERSION:
        raise ValueError(
            f"Vector file {path} targets grammar {version!r}, engine implements {GRAMMAR_VERSION!r}"
        )

    cases = [ConformanceCase.model_validate(item) for item in document["vectors"]]
    logger.debug(f"Loaded {len(cases)} conformance vectors from {path}")
    return cases


def run_conformance(
    cases: Optional[list[ConformanceCase]] = None,
    engine: Optional[FormulaEngine] = None,
) -> ConformanceReport:
    """Run every case and compare the full wire outcome."""
    if cases is None:
        cases = load_vectors()
    engine = engine or FormulaEngine()

    report = ConformanceReport(total=len(cases))
    for case in cases:
        actual = outcome_to_dict(engine.validate(case.input))
        if actual == case.expected:
            report.passed += 1
            continue
        logger.warning(f"Conformance mismatch in '{case.name}'")
        report.mismatches.append(
            ConformanceMismatch(
                name=case.name,
                formula=case.input.formula,
                expected=case.expected,
                actual=actual,
            )
        )
    return report
