"""Formula validation and evaluation engine."""

from .evaluator import ExpressionEvaluator, evaluate_expression
from .grammar import FUNCTIONS, FunctionSignature, format_number, grammar_document
from .limits import InputLimits, LimitViolation
from .models import (
    DuplicateSymbolError,
    ErrorKind,
    EvaluationError,
    FormulaAnalysis,
    FormulaError,
    FormulaRequest,
    FormulaSyntaxError,
    InvalidOutcome,
    Namespace,
    Symbol,
    SymbolInput,
    Token,
    TokenKind,
    ValidationOutcome,
    ValidOutcome,
    outcome_to_dict,
)
from .service import FormulaEngine, validate_formula
from .substitution import substitute_symbols
from .suggestions import levenshtein_distance, suggest_name
from .symbols import SymbolTable, SymbolTables
from .tokenizer import Tokenizer, tokenize
from .validator import SyntaxValidator, validate_syntax

__all__ = [
    "DuplicateSymbolError",
    "ErrorKind",
    "EvaluationError",
    "ExpressionEvaluator",
    "FUNCTIONS",
    "FormulaAnalysis",
    "FormulaEngine",
    "FormulaError",
    "FormulaRequest",
    "FormulaSyntaxError",
    "FunctionSignature",
    "InputLimits",
    "InvalidOutcome",
    "LimitViolation",
    "Namespace",
    "Symbol",
    "SymbolInput",
    "SymbolTable",
    "SymbolTables",
    "SyntaxValidator",
    "Token",
    "TokenKind",
    "Tokenizer",
    "ValidOutcome",
    "ValidationOutcome",
    "evaluate_expression",
    "format_number",
    "grammar_document",
    "levenshtein_distance",
    "outcome_to_dict",
    "substitute_symbols",
    "suggest_name",
    "tokenize",
    "validate_formula",
    "validate_syntax",
]
