"""Ordered, fail-fast syntax rules over a formula token stream."""

import logging
from collections.abc import Callable
from typing import Optional

from . import grammar
from .models import ErrorKind, FormulaSyntaxError, Token, TokenKind
from .suggestions import suggest_name
from .symbols import SymbolTables

logger = logging.getLogger(__name__)

# Tokens that can end / start an operand
VALUE_END = frozenset({TokenKind.NUMBER, TokenKind.VARIABLE, TokenKind.CONSTANT, TokenKind.RPAREN})
VALUE_START = frozenset(
    {
        TokenKind.NUMBER,
        TokenKind.VARIABLE,
        TokenKind.CONSTANT,
        TokenKind.IDENTIFIER,
        TokenKind.LPAREN,
    }
)


def _is_separator(token: Optional[Token]) -> bool:
    """Binary operators and argument commas both need an operand on each side."""
    return token is not None and token.kind in (TokenKind.OPERATOR, TokenKind.COMMA)


class SyntaxValidator:
    """Check a token stream against the syntax rules in ``grammar.RULE_ORDER``.

    The first failing rule raises ``FormulaSyntaxError``; later rules are not
    evaluated. Within a rule the earliest offending token is reported.
    """

    def __init__(self, tables: Optional[SymbolTables] = None):
        self.tables = tables or SymbolTables()
        self._rules: dict[str, Callable[[str, list[Token]], None]] = {
            "EmptyFormula": self._check_empty,
            "UnbalancedParentheses": self._check_balance,
            "EmptyParentheses": self._check_empty_parentheses,
            "LeadingOperator": self._check_leading_operators,
            "TrailingOperator": self._check_trailing_operators,
            "DoubleOperator": self._check_double_operators,
            "InvalidSymbolSyntax": self._check_symbol_syntax,
            "MissingOperator": self._check_missing_operators,
            "UnknownFunction": self._check_functions,
            "UndefinedSymbol": self._check_undefined_symbols,
        }

    def validate(self, text: str, tokens: list[Token]):
        """
        Run all rules in order.

        Args:
            text: The formula text the tokens were produced from
            tokens: Token stream including the trailing ``EndOfInput``

        Raises:
            FormulaSyntaxError: For the first rule that fails
        """
        body = [t for t in tokens if t.kind != TokenKind.END_OF_INPUT]
        for rule_name in grammar.RULE_ORDER:
            try:
                self._rules[rule_name](text, body)
            except FormulaSyntaxError:
                logger.debug(f"Rule {rule_name} failed at token count {len(body)}")
                raise

    # Rule 1

    def _check_empty(self, text: str, tokens: list[Token]):
        if all(ch in grammar.WHITESPACE for ch in text):
            raise FormulaSyntaxError(ErrorKind.EMPTY_FORMULA, grammar.message("empty_formula"))

    # Rule 2

    def _check_balance(self, text: str, tokens: list[Token]):
        open_positions: list[int] = []
        for token in tokens:
            if token.kind == TokenKind.LPAREN:
                open_positions.append(token.start)
            elif token.kind == TokenKind.RPAREN:
                if not open_positions:
                    raise FormulaSyntaxError(
                        ErrorKind.UNBALANCED_PARENTHESES,
                        grammar.message("unmatched_close", position=token.start),
                    )
                open_positions.pop()
        if open_positions:
            raise FormulaSyntaxError(
                ErrorKind.UNBALANCED_PARENTHESES,
                grammar.message("unclosed_open", position=open_positions[0]),
            )

    # Rule 3

    def _check_empty_parentheses(self, text: str, tokens: list[Token]):
        for current, following in zip(tokens, tokens[1:]):
            if current.kind == TokenKind.LPAREN and following.kind == TokenKind.RPAREN:
                raise FormulaSyntaxError(
                    ErrorKind.EMPTY_PARENTHESES,
                    grammar.message("empty_parentheses", position=current.start),
                )

    # Rule 4

    def _check_leading_operators(self, text: str, tokens: list[Token]):
        previous: Optional[Token] = None
        for token in tokens:
            lacks_left = token.kind == TokenKind.COMMA or (
                token.kind == TokenKind.OPERATOR and token.lexeme in grammar.NON_UNARY_OPERATORS
            )
            if lacks_left and (
                previous is None or previous.kind in (TokenKind.LPAREN, TokenKind.COMMA)
            ):
                raise FormulaSyntaxError(
                    ErrorKind.LEADING_OPERATOR,
                    grammar.message("leading_operator", operator=token.lexeme, position=token.start),
                )
            previous = token

    # Rule 5

    def _check_trailing_operators(self, text: str, tokens: list[Token]):
        for index, token in enumerate(tokens):
            if not _is_separator(token):
                continue
            following = tokens[index + 1] if index + 1 < len(tokens) else None
            if following is None or following.kind in (TokenKind.RPAREN, TokenKind.COMMA):
                raise FormulaSyntaxError(
                    ErrorKind.TRAILING_OPERATOR,
                    grammar.message("trailing_operator", operator=token.lexeme, position=token.start),
                )

    # Rule 6

    def _check_double_operators(self, text: str, tokens: list[Token]):
        for current, following in zip(tokens, tokens[1:]):
            if (
                current.is_operator()
                and following.is_operator()
                and not following.is_operator(grammar.MINUS)
            ):
                raise FormulaSyntaxError(
                    ErrorKind.DOUBLE_OPERATOR,
                    grammar.message(
                        "double_operator",
                        operator=following.lexeme,
                        previous=current.lexeme,
                        position=following.start,
                    ),
                )

    # Rule 7

    def _check_symbol_syntax(self, text: str, tokens: list[Token]):
        for index, token in enumerate(tokens):
            if token.kind == TokenKind.MALFORMED_SYMBOL:
                detail = grammar.message(
                    "malformed_symbol",
                    lexeme=token.lexeme,
                    position=token.start,
                    sigil=token.lexeme[0],
                )
            elif token.kind == TokenKind.UNKNOWN_CHARACTER:
                detail = grammar.message(
                    "unknown_character", lexeme=token.lexeme, position=token.start
                )
            elif token.kind == TokenKind.IDENTIFIER and not self._opens_call(tokens, index):
                detail = grammar.message(
                    "bare_identifier", lexeme=token.lexeme, position=token.start
                )
            else:
                continue
            raise FormulaSyntaxError(ErrorKind.INVALID_SYMBOL_SYNTAX, detail)

    # Rule 8

    def _check_missing_operators(self, text: str, tokens: list[Token]):
        # One entry per open parenthesis: True when it opens a call's argument list
        call_stack: list[bool] = []
        previous: Optional[Token] = None
        for token in tokens:
            if previous is not None and previous.kind in VALUE_END and token.kind in VALUE_START:
                raise FormulaSyntaxError(
                    ErrorKind.MISSING_OPERATOR,
                    grammar.message(
                        "missing_operator",
                        previous=previous.lexeme,
                        lexeme=token.lexeme,
                        position=token.start,
                    ),
                )
            if token.kind == TokenKind.LPAREN:
                call_stack.append(previous is not None and previous.kind == TokenKind.IDENTIFIER)
            elif token.kind == TokenKind.RPAREN:
                call_stack.pop()
            elif token.kind == TokenKind.COMMA and not (call_stack and call_stack[-1]):
                raise FormulaSyntaxError(
                    ErrorKind.MISSING_OPERATOR,
                    grammar.message("misplaced_comma", position=token.start),
                )
            previous = token

    # Rule 9

    def _check_functions(self, text: str, tokens: list[Token]):
        for index, token in enumerate(tokens):
            if token.kind != TokenKind.IDENTIFIER:
                continue
            signature = grammar.FUNCTIONS.get(token.lexeme)
            if signature is None:
                raise FormulaSyntaxError(
                    ErrorKind.UNKNOWN_FUNCTION,
                    grammar.message("unknown_function", name=token.lexeme, position=token.start),
                )
            count = self._count_arguments(tokens, index + 1)
            if not signature.accepts(count):
                raise FormulaSyntaxError(
                    ErrorKind.UNKNOWN_FUNCTION,
                    grammar.message(
                        "wrong_arity",
                        name=signature.name,
                        expected=signature.describe_arity(),
                        count=count,
                    ),
                )

    # Rule 10

    def _check_undefined_symbols(self, text: str, tokens: list[Token]):
        for token in tokens:
            if not token.is_symbol:
                continue
            table = self.tables.for_token(token)
            if token.bare_name in table:
                continue

            detail = grammar.message(
                "undefined_symbol",
                namespace=table.namespace.value,
                lexeme=token.lexeme,
                position=token.start,
            )
            suggestion = None
            # Only names a formula could spell are worth suggesting
            candidates = [name for name in table.names() if grammar.is_valid_name(name)]
            match = suggest_name(token.bare_name, candidates)
            if match is not None:
                suggestion = f"{table.sigil}{match}"
                detail += grammar.message("did_you_mean", suggestion=suggestion)
            raise FormulaSyntaxError(ErrorKind.UNDEFINED_SYMBOL, detail, suggestion)

    # Helpers

    @staticmethod
    def _opens_call(tokens: list[Token], index: int) -> bool:
        return index + 1 < len(tokens) and tokens[index + 1].kind == TokenKind.LPAREN

    @staticmethod
    def _count_arguments(tokens: list[Token], open_index: int) -> int:
        """Count top-level arguments of the call whose '(' is at ``open_index``."""
        depth = 0
        commas = 0
        for token in tokens[open_index:]:
            if token.kind == TokenKind.LPAREN:
                depth += 1
            elif token.kind == TokenKind.RPAREN:
                depth -= 1
                if depth == 0:
                    break
            elif token.kind == TokenKind.COMMA and depth == 1:
                commas += 1
        return commas + 1


def validate_syntax(text: str, tokens: list[Token], tables: Optional[SymbolTables] = None):
    """Run the syntax rules; raises ``FormulaSyntaxError`` on the first failure."""
    SyntaxValidator(tables).validate(text, tokens)
