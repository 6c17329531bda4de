"""Expression evaluator: precedence climbing over the substituted formula.

The substituted text is tokenized with the same tokenizer used for
validation, so both stages agree on what a number, an operator or a call is.
Operands are evaluated left to right while parsing; the first error raised
wins. Only parenthesized groups and calls recurse, and their depth is
capped, so chains of ``^`` or unary minus never exhaust the stack.
"""

import logging
import math
from collections.abc import Callable
from decimal import ROUND_HALF_UP, Context, Decimal

from . import grammar
from .models import ErrorKind, EvaluationError, Token, TokenKind
from .tokenizer import tokenize

logger = logging.getLogger(__name__)

# Enough precision to quantize any finite double to 15 decimals
_ROUND_CONTEXT = Context(prec=400)


def _internal(detail: str) -> EvaluationError:
    return EvaluationError(ErrorKind.INTERNAL, grammar.message("internal", detail=detail))


def _domain(key: str, **params) -> EvaluationError:
    return EvaluationError(ErrorKind.DOMAIN_ERROR, grammar.message(key, **params))


def _checked(value: float) -> float:
    """Reject infinities and NaN produced by any intermediate step."""
    if not math.isfinite(value):
        raise _domain("non_finite_result")
    return value


# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


def _power(base: float, exponent: float) -> float:
    if (base == 0 and exponent < 0) or (base < 0 and not exponent.is_integer()):
        raise _domain(
            "power_domain",
            base=grammar.format_number(base),
            exponent=grammar.format_number(exponent),
        )
    try:
        return _checked(math.pow(base, exponent))
    except OverflowError:
        raise _domain("non_finite_result")


def _binary_op(op: str, left: float, right: float) -> float:
    """Evaluate an arithmetic binary operation."""
    if op == "+":
        return _checked(left + right)
    if op == "-":
        return _checked(left - right)
    if op == "*":
        return _checked(left * right)
    if op == "/":
        if right == 0:
            raise EvaluationError(ErrorKind.DIVISION_BY_ZERO, grammar.message("division_by_zero"))
        return _checked(left / right)
    if op == "%":
        if right == 0:
            raise EvaluationError(ErrorKind.DIVISION_BY_ZERO, grammar.message("modulo_by_zero"))
        # Truncated remainder: the sign follows the dividend
        return math.fmod(left, right)
    if op == "^":
        return _power(left, right)
    raise _internal(f"unsupported operator '{op}'")


# ---------------------------------------------------------------------------
# Functions
# ---------------------------------------------------------------------------


def _builtin_sqrt(args: list[float]) -> float:
    if args[0] < 0:
        raise _domain("sqrt_domain")
    return math.sqrt(args[0])


def _builtin_log(args: list[float]) -> float:
    if args[0] <= 0:
        raise _domain("log_domain")
    return math.log(args[0])


def _builtin_exp(args: list[float]) -> float:
    try:
        return math.exp(args[0])
    except OverflowError:
        raise _domain("non_finite_result")


def _builtin_round(args: list[float]) -> float:
    """Round half away from zero on the shortest decimal form of the value."""
    digits = args[1] if len(args) > 1 else 0.0
    if not digits.is_integer() or abs(digits) > grammar.MAX_ROUND_DIGITS:
        raise _domain("round_digits")
    quantum = Decimal(1).scaleb(-int(digits))
    rounded = Decimal(repr(args[0])).quantize(quantum, rounding=ROUND_HALF_UP, context=_ROUND_CONTEXT)
    return float(rounded)


_BUILTINS: dict[str, Callable[[list[float]], float]] = {
    "sqrt": _builtin_sqrt,
    "abs": lambda args: abs(args[0]),
    "exp": _builtin_exp,
    "log": _builtin_log,
    "sin": lambda args: math.sin(args[0]),
    "cos": lambda args: math.cos(args[0]),
    "tan": lambda args: math.tan(args[0]),
    "pow": lambda args: _power(args[0], args[1]),
    "min": min,
    "max": max,
    "round": _builtin_round,
    "floor": lambda args: float(math.floor(args[0])),
    "ceil": lambda args: float(math.ceil(args[0])),
}


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class ExpressionEvaluator:
    """Parse and reduce a symbol-free formula to a double."""

    def __init__(self, expression: str, max_depth: int = grammar.MAX_NESTING_DEPTH):
        self.expression = expression
        self.tokens: list[Token] = tokenize(expression)
        self.pos = 0
        self.depth = 0
        self.max_depth = max_depth

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        if token.kind != TokenKind.END_OF_INPUT:
            self.pos += 1
        return token

    def _expect(self, kind: TokenKind) -> Token:
        token = self.current
        if token.kind != kind:
            raise self._unexpected(token)
        return self._advance()

    @staticmethod
    def _unexpected(token: Token) -> EvaluationError:
        if token.kind == TokenKind.END_OF_INPUT:
            return _internal("unexpected end of expression")
        return _internal(f"unexpected '{token.lexeme}' at position {token.start}")

    def evaluate(self) -> float:
        """
        Evaluate the whole expression.

        Returns:
            A finite double (``-0.0`` normalized to ``0.0``)

        Raises:
            EvaluationError: DivisionByZero, DomainError or Internal
        """
        try:
            value = self._parse_expression(1)
        except RecursionError:
            raise _internal("expression is nested too deeply")
        if self.current.kind != TokenKind.END_OF_INPUT:
            raise self._unexpected(self.current)
        value = _checked(value)
        return 0.0 if value == 0 else value

    def _parse_expression(self, min_precedence: int) -> float:
        left = self._parse_power()
        while True:
            token = self.current
            if not token.is_operator() or token.is_operator(grammar.POWER):
                return left
            precedence, right_associative = grammar.OPERATOR_PRECEDENCE[token.lexeme]
            if precedence < min_precedence:
                return left
            self._advance()
            next_min = precedence if right_associative else precedence + 1
            right = self._parse_expression(next_min)
            left = _binary_op(token.lexeme, left, right)

    def _parse_power(self) -> float:
        # '^' is right-associative: evaluate operands left to right, fold right to left
        operands = [self._parse_unary()]
        while self.current.is_operator(grammar.POWER):
            self._advance()
            operands.append(self._parse_unary())
        result = operands.pop()
        while operands:
            result = _power(operands.pop(), result)
        return result

    def _parse_unary(self) -> float:
        # Unary minus binds tighter than '^', so -2^2 == 4
        negate = False
        while self.current.is_operator(grammar.MINUS):
            self._advance()
            negate = not negate
        value = self._parse_primary()
        return -value if negate else value

    def _parse_primary(self) -> float:
        token = self.current
        if token.kind == TokenKind.NUMBER:
            self._advance()
            return _checked(float(token.lexeme))
        if token.kind == TokenKind.LPAREN:
            self._enter()
            self._advance()
            value = self._parse_expression(1)
            self._expect(TokenKind.RPAREN)
            self.depth -= 1
            return value
        if token.kind == TokenKind.IDENTIFIER:
            return self._parse_call()
        raise self._unexpected(token)

    def _parse_call(self) -> float:
        name_token = self._advance()
        self._enter()
        self._expect(TokenKind.LPAREN)
        args = [self._parse_expression(1)]
        while self.current.kind == TokenKind.COMMA:
            self._advance()
            args.append(self._parse_expression(1))
        self._expect(TokenKind.RPAREN)
        self.depth -= 1

        signature = grammar.FUNCTIONS.get(name_token.lexeme)
        builtin = _BUILTINS.get(name_token.lexeme)
        if signature is None or builtin is None:
            raise _internal(f"unknown function '{name_token.lexeme}'")
        if not signature.accepts(len(args)):
            raise _internal(f"wrong number of arguments for '{signature.name}'")
        return _checked(builtin(args))

    def _enter(self):
        self.depth += 1
        if self.depth > self.max_depth:
            raise EvaluationError(
                ErrorKind.INTERNAL, grammar.message("too_deep", limit=self.max_depth)
            )


def evaluate_expression(expression: str, max_depth: int = grammar.MAX_NESTING_DEPTH) -> float:
    """Evaluate a symbol-free formula; raises ``EvaluationError`` on failure."""
    return ExpressionEvaluator(expression, max_depth).evaluate()
