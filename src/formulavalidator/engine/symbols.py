"""Immutable symbol tables built from caller-supplied variables and constants."""

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any, Optional, Union

from . import grammar
from .models import DuplicateSymbolError, Namespace, Symbol, SymbolInput, Token, TokenKind

SymbolSource = Union[Iterable[Union[SymbolInput, Mapping[str, Any]]], Mapping[str, float], None]


class SymbolTable(Mapping[str, Symbol]):
    """Read-only lookup of symbols in one namespace, keyed by bare name.

    Iteration follows the order in which the caller supplied the symbols.
    """

    __slots__ = ("namespace", "_symbols")

    def __init__(self, namespace: Namespace, symbols: Iterable[Symbol] = ()):
        entries: dict[str, Symbol] = {}
        for symbol in symbols:
            if symbol.bare_name in entries:
                raise DuplicateSymbolError(
                    grammar.message(
                        "duplicate_symbol",
                        namespace=namespace.value,
                        name=symbol.bare_name,
                    )
                )
            entries[symbol.bare_name] = symbol
        self.namespace = namespace
        self._symbols = MappingProxyType(entries)

    def __getitem__(self, name: str) -> Symbol:
        return self._symbols[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    @property
    def sigil(self) -> str:
        if self.namespace == Namespace.VARIABLE:
            return grammar.VARIABLE_SIGIL
        return grammar.CONSTANT_SIGIL

    def names(self) -> list[str]:
        """Bare names in caller order."""
        return list(self._symbols)

    @classmethod
    def from_inputs(cls, namespace: Namespace, source: SymbolSource) -> "SymbolTable":
        """Build a table from ``SymbolInput`` models, ``{id, value}`` dicts or a name->value mapping.

        Raises:
            DuplicateSymbolError: If an id appears more than once
        """
        return cls(namespace, (Symbol(namespace, name, value) for name, value in _iter_pairs(source)))


def _iter_pairs(source: SymbolSource) -> Iterator[tuple[str, float]]:
    if source is None:
        return
    if isinstance(source, Mapping):
        for name, value in source.items():
            yield str(name), float(value)
        return
    for entry in source:
        if isinstance(entry, SymbolInput):
            yield entry.id, entry.value
        else:
            parsed = SymbolInput.model_validate(entry)
            yield parsed.id, parsed.value


class SymbolTables:
    """The pair of tables supplied to one validation call."""

    __slots__ = ("variables", "constants")

    def __init__(
        self,
        variables: Optional[SymbolTable] = None,
        constants: Optional[SymbolTable] = None,
    ):
        self.variables = variables or SymbolTable(Namespace.VARIABLE)
        self.constants = constants or SymbolTable(Namespace.CONSTANT)

    def for_token(self, token: Token) -> SymbolTable:
        """Table matching the namespace of a symbol token."""
        if token.kind == TokenKind.VARIABLE:
            return self.variables
        if token.kind == TokenKind.CONSTANT:
            return self.constants
        raise ValueError(f"Token {token.lexeme!r} is not a symbol")

    def lookup(self, token: Token) -> Optional[Symbol]:
        """Exact, case-sensitive lookup; never fuzzy."""
        return self.for_token(token).get(token.bare_name)

    @classmethod
    def from_inputs(cls, variables: SymbolSource = None, constants: SymbolSource = None) -> "SymbolTables":
        """Build both tables; variables are checked for duplicates first."""
        return cls(
            SymbolTable.from_inputs(Namespace.VARIABLE, variables),
            SymbolTable.from_inputs(Namespace.CONSTANT, constants),
        )
