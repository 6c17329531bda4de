"""Tokenizer turning formula text into a position-tagged token stream."""

import logging

from . import grammar
from .models import Token, TokenKind

logger = logging.getLogger(__name__)

_SINGLE_CHAR_TOKENS = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
}
_SIGIL_KINDS = {
    grammar.VARIABLE_SIGIL: TokenKind.VARIABLE,
    grammar.CONSTANT_SIGIL: TokenKind.CONSTANT,
}


class Tokenizer:
    """Scan formula text left to right.

    Scanning never aborts: characters outside the grammar become
    ``UnknownCharacter`` tokens and sigils without a valid name become
    ``MalformedSymbol`` tokens, so the validator can report precise positions.
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        text = self.text
        while self.pos < len(text):
            char = text[self.pos]

            if char in grammar.WHITESPACE:
                self.pos += 1
            elif char in grammar.DIGITS or (char == "." and self._peek(1) in grammar.DIGITS):
                self._read_number()
            elif char in _SIGIL_KINDS:
                self._read_symbol(char)
            elif char in grammar.NAME_START:
                start = self.pos
                self._skip_name_chars()
                self._emit(TokenKind.IDENTIFIER, start)
            elif char in grammar.BINARY_OPERATORS:
                self.pos += 1
                self._emit(TokenKind.OPERATOR, self.pos - 1)
            elif char in _SINGLE_CHAR_TOKENS:
                self.pos += 1
                self._emit(_SINGLE_CHAR_TOKENS[char], self.pos - 1)
            else:
                self.pos += 1
                self._emit(TokenKind.UNKNOWN_CHARACTER, self.pos - 1)

        self.tokens.append(Token(TokenKind.END_OF_INPUT, "", len(text), len(text)))
        logger.debug(f"Tokenized {len(text)} characters into {len(self.tokens)} tokens")
        return self.tokens

    def _peek(self, offset: int) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else ""

    def _emit(self, kind: TokenKind, start: int):
        self.tokens.append(Token(kind, self.text[start : self.pos], start, self.pos))

    def _skip_digits(self):
        while self.pos < len(self.text) and self.text[self.pos] in grammar.DIGITS:
            self.pos += 1

    def _skip_name_chars(self):
        while self.pos < len(self.text) and self.text[self.pos] in grammar.NAME_CHARS:
            self.pos += 1

    def _read_number(self):
        start = self.pos
        self._skip_digits()
        if self._peek(0) == ".":
            self.pos += 1
            self._skip_digits()

        # Exponent only when at least one digit follows (with optional sign)
        if self._peek(0) in grammar.EXPONENT_MARKERS:
            offset = 2 if self._peek(1) in ("+", "-") else 1
            if self._peek(offset) in grammar.DIGITS:
                self.pos += offset
                self._skip_digits()

        self._emit(TokenKind.NUMBER, start)

    def _read_symbol(self, sigil: str):
        start = self.pos
        self.pos += 1
        if self._peek(0) in grammar.NAME_START:
            self._skip_name_chars()
            self._emit(_SIGIL_KINDS[sigil], start)
            return
        # Keep the rest of a name like "$1abc" in one malformed token
        self._skip_name_chars()
        self._emit(TokenKind.MALFORMED_SYMBOL, start)


def tokenize(text: str) -> list[Token]:
    """Tokenize formula text; the stream always ends with ``EndOfInput``."""
    return Tokenizer(text).tokenize()
