"""API routes for the formula validator."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from .. import __version__
from ..engine import FormulaEngine, FormulaError, FormulaRequest, grammar_document, outcome_to_dict
from ..engine.models import FormulaAnalysis

logger = logging.getLogger(__name__)

router = APIRouter()

# Global engine instance
_engine: Optional[FormulaEngine] = None


def get_engine() -> FormulaEngine:
    """Get the global engine instance."""
    global _engine
    if _engine is None:
        from ..config import settings

        _engine = FormulaEngine(log_formulas=settings.log_formulas)
    return _engine


class AnalyzeRequest(BaseModel):
    """Request model for the analyze endpoint."""

    formula: str


@router.post("/formulas/validate")
def validate_formula(request: FormulaRequest):
    """
    Validate a formula and evaluate it when valid.

    Invalid formulas are a normal outcome, not an HTTP error: the response is
    always 200 with either the valid or the invalid wire form.
    """
    outcome = get_engine().validate(request)
    return outcome_to_dict(outcome)


@router.post("/formulas/analyze", response_model=FormulaAnalysis)
def analyze_formula(request: AnalyzeRequest):
    """Token stream and referenced names for editor highlighting and completion."""
    try:
        return get_engine().analyze(request.formula)
    except FormulaError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        logger.exception(f"Formula analysis failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/grammar")
async def get_grammar():
    """Get the shared grammar document."""
    return grammar_document()


# Health check


@router.get("/health")
async def health_check():
    """Health check endpoint with diagnostics."""
    from ..config import settings

    # Gather non-secret diagnostics
    config = {
        "debug": settings.debug,
        "log_level": settings.log_level,
        "log_formulas": settings.log_formulas,
        "cors_allow_origins": settings.cors_allow_origins,
        "custom_vectors": settings.conformance_vectors_path is not None,
    }

    return {
        "status": "ok",
        "service": "formulavalidator",
        "version": __version__,
        "config": config,
    }
