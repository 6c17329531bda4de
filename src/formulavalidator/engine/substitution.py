"""Replace symbol tokens with the literal text of their values."""

import logging
import math

from . import grammar
from .models import ErrorKind, EvaluationError, Token
from .symbols import SymbolTables

logger = logging.getLogger(__name__)


def substitute_symbols(text: str, tokens: list[Token], tables: SymbolTables) -> str:
    """
    Build the evaluated formula by replacing each symbol token's span.

    Replacement works on token offsets, never on text search, so a name can
    never match inside a longer one (``$a`` vs ``$ab``). All other characters,
    whitespace included, are kept as written.

    Args:
        text: Validated formula text
        tokens: Its token stream
        tables: Symbol tables every symbol token resolves against

    Returns:
        The formula with every symbol written as a number

    Raises:
        EvaluationError: If a referenced symbol's value is not finite
    """
    symbol_tokens = [t for t in tokens if t.is_symbol]
    if not symbol_tokens:
        return text

    literals = []
    for token in symbol_tokens:
        symbol = tables.lookup(token)
        if symbol is None:
            raise EvaluationError(
                ErrorKind.INTERNAL,
                grammar.message("internal", detail=f"unresolved symbol '{token.lexeme}'"),
            )
        if not math.isfinite(symbol.value):
            raise EvaluationError(
                ErrorKind.DOMAIN_ERROR,
                grammar.message("non_finite_symbol", lexeme=token.lexeme),
            )
        literals.append(grammar.format_number(symbol.value))

    resolved = text
    # Replace in reverse order to preserve positions
    for token, literal in reversed(list(zip(symbol_tokens, literals))):
        resolved = resolved[: token.start] + literal + resolved[token.end :]

    logger.debug(f"Substituted {len(symbol_tokens)} symbol(s)")
    return resolved
