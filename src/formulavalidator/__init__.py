"""formulavalidator - validate and evaluate formulas over named variables and constants.

Usage::

    from formulavalidator import validate_formula

    outcome = validate_formula("sqrt($a^2 + $b^2)", variables={"a": 3, "b": 4})
    outcome.result  # 5.0
"""

from .engine import (
    ErrorKind,
    FormulaEngine,
    FormulaRequest,
    InvalidOutcome,
    SymbolInput,
    ValidationOutcome,
    ValidOutcome,
    outcome_to_dict,
    validate_formula,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ErrorKind",
    "FormulaEngine",
    "FormulaRequest",
    "InvalidOutcome",
    "SymbolInput",
    "ValidOutcome",
    "ValidationOutcome",
    "outcome_to_dict",
    "validate_formula",
]
