"""Input limits guarding the engine against pathological formulas."""

from dataclasses import dataclass
from typing import Optional, Union

from . import grammar
from .models import ErrorKind, FormulaError, Token, TokenKind


@dataclass
class LimitViolation:
    """Represents an input limit violation."""

    constraint: str
    current_value: int
    max_value: int
    message: str


class InputLimits:
    """Validates formula text against length and nesting limits."""

    def __init__(
        self,
        max_formula_length: int = grammar.MAX_FORMULA_LENGTH,
        max_nesting_depth: int = grammar.MAX_NESTING_DEPTH,
    ):
        self.max_formula_length = max_formula_length
        self.max_nesting_depth = max_nesting_depth

    def decode(self, formula: Union[str, bytes]) -> str:
        """Return formula text, decoding UTF-8 bytes.

        Text must itself be encodable as UTF-8, so lone surrogates are
        rejected as well.

        Raises:
            FormulaError: If the bytes or the text are not valid UTF-8
        """
        try:
            if isinstance(formula, str):
                formula.encode("utf-8")
                return formula
            return bytes(formula).decode("utf-8")
        except UnicodeError:
            raise FormulaError(ErrorKind.INTERNAL, grammar.message("invalid_encoding"))

    def validate_formula_length(self, formula: str) -> Optional[LimitViolation]:
        """Check if formula length is within limits."""
        if len(formula) > self.max_formula_length:
            return LimitViolation(
                constraint="max_formula_length",
                current_value=len(formula),
                max_value=self.max_formula_length,
                message=grammar.message("too_long", limit=self.max_formula_length),
            )
        return None

    def validate_nesting_depth(self, tokens: list[Token]) -> Optional[LimitViolation]:
        """Check the deepest parenthesis nesting against the limit."""
        depth = 0
        deepest = 0
        for token in tokens:
            if token.kind == TokenKind.LPAREN:
                depth += 1
                deepest = max(deepest, depth)
            elif token.kind == TokenKind.RPAREN:
                depth -= 1
        if deepest > self.max_nesting_depth:
            return LimitViolation(
                constraint="max_nesting_depth",
                current_value=deepest,
                max_value=self.max_nesting_depth,
                message=grammar.message("too_deep", limit=self.max_nesting_depth),
            )
        return None

    def enforce(self, violation: Optional[LimitViolation]):
        """Raise an ``Internal`` error for a violation, if any."""
        if violation is not None:
            raise FormulaError(ErrorKind.INTERNAL, violation.message)
