"""Shared formula grammar: lexical classes, operators, functions, limits and messages.

Every implementation of the validator (the embedded client as well as this
server) is driven by the data in this module. ``grammar_document()`` exports
it as plain JSON-compatible data so that other call sites can consume the
exact same tables instead of maintaining their own copies.
"""

import math
from dataclasses import dataclass
from typing import Optional

GRAMMAR_VERSION = "1.0"

# Sigils
VARIABLE_SIGIL = "$"
CONSTANT_SIGIL = "#"
SIGILS = (VARIABLE_SIGIL, CONSTANT_SIGIL)

# Lexical classes (ASCII only so every implementation classifies identically)
WHITESPACE = frozenset(" \t\r\n\f\v")
DIGITS = frozenset("0123456789")
LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
NAME_START = LETTERS | {"_"}
NAME_CHARS = NAME_START | DIGITS
EXPONENT_MARKERS = frozenset("eE")

# Operators
MINUS = "-"
POWER = "^"
BINARY_OPERATORS = ("+", "-", "*", "/", "%", "^")
# Operators that may never open an expression, a group or an argument
NON_UNARY_OPERATORS = frozenset(BINARY_OPERATORS) - {MINUS}

# precedence, right_associative
OPERATOR_PRECEDENCE: dict[str, tuple[int, bool]] = {
    "+": (1, False),
    "-": (1, False),
    "*": (2, False),
    "/": (2, False),
    "%": (2, False),
    "^": (3, True),
}
UNARY_MINUS_PRECEDENCE = 4


@dataclass(frozen=True)
class FunctionSignature:
    """A whitelisted function and the number of arguments it accepts."""

    name: str
    min_arity: int
    max_arity: Optional[int]  # None means unbounded

    def accepts(self, count: int) -> bool:
        if count < self.min_arity:
            return False
        return self.max_arity is None or count <= self.max_arity

    def describe_arity(self) -> str:
        """Human-readable arity used in error messages."""
        if self.max_arity is None:
            return f"at least {self.min_arity}"
        if self.min_arity == self.max_arity:
            return str(self.min_arity)
        return f"{self.min_arity} to {self.max_arity}"


FUNCTIONS: dict[str, FunctionSignature] = {
    sig.name: sig
    for sig in (
        FunctionSignature("sqrt", 1, 1),
        FunctionSignature("abs", 1, 1),
        FunctionSignature("exp", 1, 1),
        FunctionSignature("log", 1, 1),
        FunctionSignature("sin", 1, 1),
        FunctionSignature("cos", 1, 1),
        FunctionSignature("tan", 1, 1),
        FunctionSignature("pow", 2, 2),
        FunctionSignature("min", 2, None),
        FunctionSignature("max", 2, None),
        FunctionSignature("round", 1, 2),
        FunctionSignature("floor", 1, 1),
        FunctionSignature("ceil", 1, 1),
    )
}

# Order in which the syntax rules are checked; the first failure is reported.
RULE_ORDER = (
    "EmptyFormula",
    "UnbalancedParentheses",
    "EmptyParentheses",
    "LeadingOperator",
    "TrailingOperator",
    "DoubleOperator",
    "InvalidSymbolSyntax",
    "MissingOperator",
    "UnknownFunction",
    "UndefinedSymbol",
)

# Input limits
MAX_FORMULA_LENGTH = 4096
MAX_NESTING_DEPTH = 32

# round() digit bounds
MAX_ROUND_DIGITS = 15

# Suggestions
SUGGESTION_MIN_THRESHOLD = 2
SUGGESTION_LENGTH_DIVISOR = 3
SUGGESTION_MIN_PREFIX_LENGTH = 3

# Integral values below this magnitude are written without a fraction
INTEGER_FORMAT_LIMIT = 1e15

MESSAGES: dict[str, str] = {
    "empty_formula": "Formula is empty.",
    "unmatched_close": "Unmatched ')' at position {position}.",
    "unclosed_open": "Missing ')' for '(' at position {position}.",
    "empty_parentheses": "Empty parentheses at position {position}.",
    "leading_operator": "'{operator}' at position {position} has no left operand.",
    "trailing_operator": "'{operator}' at position {position} has no right operand.",
    "double_operator": "Unexpected '{operator}' after '{previous}' at position {position}.",
    "malformed_symbol": (
        "Invalid symbol '{lexeme}' at position {position}: "
        "'{sigil}' must be followed by a letter or underscore."
    ),
    "unknown_character": "Unexpected character '{lexeme}' at position {position}.",
    "bare_identifier": (
        "Unknown name '{lexeme}' at position {position}: "
        "use '$' for variables or '#' for constants."
    ),
    "missing_operator": "Missing operator between '{previous}' and '{lexeme}' at position {position}.",
    "misplaced_comma": "',' at position {position} is only allowed between function arguments.",
    "unknown_function": "Unknown function '{name}' at position {position}.",
    "wrong_arity": "Function '{name}' expects {expected} argument(s) but got {count}.",
    "undefined_symbol": "Undefined {namespace} '{lexeme}' at position {position}.",
    "did_you_mean": " Did you mean '{suggestion}'?",
    "duplicate_symbol": "Duplicate {namespace} id '{name}'.",
    "division_by_zero": "Division by zero.",
    "modulo_by_zero": "Modulo by zero.",
    "sqrt_domain": "sqrt is undefined for negative values.",
    "log_domain": "log is undefined for non-positive values.",
    "power_domain": "{base} cannot be raised to the power {exponent}.",
    "round_digits": (
        "round expects a whole number of digits between "
        f"-{MAX_ROUND_DIGITS} and {MAX_ROUND_DIGITS}."
    ),
    "non_finite_symbol": "Value of '{lexeme}' is not a finite number.",
    "non_finite_result": "Result is not a finite number.",
    "too_long": "Formula exceeds the maximum length of {limit} characters.",
    "too_deep": "Formula exceeds the maximum nesting depth of {limit}.",
    "invalid_encoding": "Formula text is not valid UTF-8.",
    "internal": "Formula could not be evaluated: {detail}",
}


def message(key: str, **params) -> str:
    """Render one of the shared message templates."""
    return MESSAGES[key].format(**params)


def format_number(value: float) -> str:
    """Write a double as the literal text used in evaluated formulas.

    Integral values below ``INTEGER_FORMAT_LIMIT`` are written as plain
    integers; everything else uses the shortest round-trip representation.
    """
    if value == 0:
        return "0"
    if math.isfinite(value) and value.is_integer() and abs(value) < INTEGER_FORMAT_LIMIT:
        return str(int(value))
    return repr(float(value))


def is_valid_name(name: str) -> bool:
    """True when a sigil followed by ``name`` tokenizes as one symbol."""
    return bool(name) and name[0] in NAME_START and all(ch in NAME_CHARS for ch in name)


def suggestion_threshold(name: str) -> int:
    """Largest edit distance at which a candidate is still suggested."""
    return max(SUGGESTION_MIN_THRESHOLD, math.ceil(len(name) / SUGGESTION_LENGTH_DIVISOR))


def grammar_document() -> dict:
    """Export the grammar as JSON-compatible data."""
    return {
        "version": GRAMMAR_VERSION,
        "sigils": {"variable": VARIABLE_SIGIL, "constant": CONSTANT_SIGIL},
        "whitespace": sorted(WHITESPACE),
        "name_pattern": "[A-Za-z_][A-Za-z0-9_]*",
        "number_pattern": r"(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?",
        "operators": [
            {
                "symbol": symbol,
                "precedence": precedence,
                "associativity": "right" if right else "left",
            }
            for symbol, (precedence, right) in OPERATOR_PRECEDENCE.items()
        ],
        "unary_minus_precedence": UNARY_MINUS_PRECEDENCE,
        "functions": [
            {"name": sig.name, "min_arity": sig.min_arity, "max_arity": sig.max_arity}
            for sig in FUNCTIONS.values()
        ],
        "rule_order": list(RULE_ORDER),
        "limits": {
            "max_formula_length": MAX_FORMULA_LENGTH,
            "max_nesting_depth": MAX_NESTING_DEPTH,
            "max_round_digits": MAX_ROUND_DIGITS,
        },
        "suggestions": {
            "min_threshold": SUGGESTION_MIN_THRESHOLD,
            "length_divisor": SUGGESTION_LENGTH_DIVISOR,
            "min_prefix_length": SUGGESTION_MIN_PREFIX_LENGTH,
        },
        "number_format": {
            "integer_limit": INTEGER_FORMAT_LIMIT,
            "fallback": "shortest round-trip",
        },
        "messages": dict(MESSAGES),
    }
