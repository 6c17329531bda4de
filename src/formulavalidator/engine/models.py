"""Data models for the formula validation engine."""

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class TokenKind(str, Enum):
    """Kind of a lexical token."""

    NUMBER = "Number"
    OPERATOR = "Operator"  # + - * / % ^
    LPAREN = "LParen"
    RPAREN = "RParen"
    COMMA = "Comma"
    IDENTIFIER = "Identifier"  # function names
    VARIABLE = "Variable"  # $name
    CONSTANT = "Constant"  # #name
    MALFORMED_SYMBOL = "MalformedSymbol"  # sigil without a valid name
    UNKNOWN_CHARACTER = "UnknownCharacter"
    END_OF_INPUT = "EndOfInput"


class Namespace(str, Enum):
    """Symbol namespace."""

    VARIABLE = "variable"
    CONSTANT = "constant"


class ErrorKind(str, Enum):
    """Closed set of error kinds reported by the engine."""

    EMPTY_FORMULA = "EmptyFormula"
    UNBALANCED_PARENTHESES = "UnbalancedParentheses"
    EMPTY_PARENTHESES = "EmptyParentheses"
    LEADING_OPERATOR = "LeadingOperator"
    TRAILING_OPERATOR = "TrailingOperator"
    DOUBLE_OPERATOR = "DoubleOperator"
    INVALID_SYMBOL_SYNTAX = "InvalidSymbolSyntax"
    MISSING_OPERATOR = "MissingOperator"
    UNKNOWN_FUNCTION = "UnknownFunction"
    UNDEFINED_SYMBOL = "UndefinedSymbol"
    DUPLICATE_SYMBOL = "DuplicateSymbol"
    DIVISION_BY_ZERO = "DivisionByZero"
    DOMAIN_ERROR = "DomainError"
    INTERNAL = "Internal"


@dataclass(frozen=True)
class Token:
    """A lexical token with its span in the formula text."""

    kind: TokenKind
    lexeme: str
    start: int  # offset of the first character
    end: int  # exclusive

    @property
    def is_symbol(self) -> bool:
        return self.kind in (TokenKind.VARIABLE, TokenKind.CONSTANT)

    @property
    def bare_name(self) -> str:
        """Symbol name without its sigil."""
        return self.lexeme[1:] if self.is_symbol else self.lexeme

    def is_operator(self, symbol: Optional[str] = None) -> bool:
        if self.kind != TokenKind.OPERATOR:
            return False
        return symbol is None or self.lexeme == symbol


@dataclass(frozen=True)
class Symbol:
    """A named value supplied by the caller."""

    namespace: Namespace
    bare_name: str
    value: float


class SymbolInput(BaseModel):
    """A symbol entry as supplied on the wire."""

    model_config = ConfigDict(frozen=True)

    id: str  # bare name, no sigil
    value: float


class FormulaRequest(BaseModel):
    """Input of a single validation call."""

    model_config = ConfigDict(frozen=True)

    formula: str
    variables: list[SymbolInput] = Field(default_factory=list)
    constants: list[SymbolInput] = Field(default_factory=list)


class ValidOutcome(BaseModel):
    """Formula passed validation and evaluated to a finite number."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_valid: Literal[True] = Field(default=True, alias="isValid")
    evaluated_formula: str = Field(alias="evaluatedFormula")
    result: float


class InvalidOutcome(BaseModel):
    """Formula was rejected by validation or failed during evaluation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_valid: Literal[False] = Field(default=False, alias="isValid")
    error_kind: ErrorKind = Field(alias="errorKind")
    message: str
    suggestion: Optional[str] = None  # e.g. "$temperature"


ValidationOutcome = Union[ValidOutcome, InvalidOutcome]


def outcome_to_dict(outcome: Union[ValidOutcome, InvalidOutcome]) -> dict:
    """Wire form of an outcome; an absent suggestion is omitted."""
    return outcome.model_dump(mode="json", by_alias=True, exclude_none=True)


class TokenInfo(BaseModel):
    """Serializable view of a token."""

    kind: TokenKind
    lexeme: str
    start: int
    end: int


class FormulaAnalysis(BaseModel):
    """Token stream and referenced names, for editors and highlighters."""

    formula: str
    tokens: list[TokenInfo]
    variables: list[str] = Field(default_factory=list)  # bare names, first-appearance order
    constants: list[str] = Field(default_factory=list)
    functions: list[str] = Field(default_factory=list)


class FormulaError(Exception):
    """Base error carrying the outcome fields of a failed call."""

    def __init__(self, kind: ErrorKind, message: str, suggestion: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.suggestion = suggestion

    def to_outcome(self) -> InvalidOutcome:
        return InvalidOutcome(
            error_kind=self.kind,
            message=self.message,
            suggestion=self.suggestion,
        )


class FormulaSyntaxError(FormulaError):
    """Raised when a syntax rule fails."""


class EvaluationError(FormulaError):
    """Raised by substitution or evaluation after validation succeeded."""


class DuplicateSymbolError(FormulaError):
    """Raised when a symbol id appears twice in one namespace."""

    def __init__(self, message: str):
        super().__init__(ErrorKind.DUPLICATE_SYMBOL, message)
