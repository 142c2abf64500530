# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for LuaCATS type expressions.

Converts the type portion of an annotation (``string | number?``,
``fun(name: peripheral.name): boolean``) into a sequence of tokens.
"""

import enum
from dataclasses import dataclass

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """All token types produced by the type-expression lexer."""

    # Keywords
    FUN = "fun"
    ASYNC = "async"

    # Symbols and operators
    PIPE = "|"
    QUESTION = "?"
    ELLIPSIS = "..."
    ARRAY = "[]"
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    LBRACE = "{"
    RBRACE = "}"
    LANGLE = "<"
    RANGLE = ">"
    COLON = ":"
    COMMA = ","

    # Literals
    STRING = "STRING"
    NUMBER = "NUMBER"

    # Identifiers (possibly dotted: peripheral.name)
    NAME = "NAME"

    # Produced only in lenient mode, for text that cannot start a token
    UNKNOWN = "UNKNOWN"

    # End of input
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A lexical token with its source location.

    Attributes:
        type: The kind of token.
        value: The raw text of the token (or decoded content for STRING tokens).
        line: 1-based line number where the token starts.
        column: 1-based column number where the token starts.
    """

    type: TokenType
    value: str
    line: int
    column: int


class LexerError(Exception):
    """Raised when the scanner encounters an invalid character or unterminated literal.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


def tokenize(source: str, *, line: int = 1) -> list[Token]:
    """Tokenize a type expression into a sequence of tokens.

    Args:
        source: The type expression text.
        line: Line number reported for tokens and errors.

    Returns:
        A list of Token objects ending with a single EOF token.

    Raises:
        LexerError: On unexpected characters or unterminated string literals.
    """
    lexer = TypeLexer(source, line=line)
    tokens: list[Token] = []
    while True:
        tok = lexer.next_token()
        tokens.append(tok)
        if tok.type == TokenType.EOF:
            return tokens


class TypeLexer:
    """Incremental scanner over a single line of annotation text.

    In lenient mode, text that cannot start a token yields an UNKNOWN token
    instead of raising, so a parser can stop at the end of a type and hand
    the remaining prose back to the caller.
    """

    def __init__(self, source: str, *, line: int = 1, lenient: bool = False) -> None:
        self._source = source
        self._pos = 0
        self._line = line
        self._lenient = lenient

    def next_token(self) -> Token:
        """Scan and return the next token; returns EOF repeatedly at end of input."""
        self._skip_whitespace()
        col = self._pos + 1
        if self._pos >= len(self._source):
            return Token(TokenType.EOF, "", self._line, col)
        try:
            return self._scan_token()
        except LexerError:
            if not self._lenient:
                raise
            self._pos = col
            return Token(TokenType.UNKNOWN, self._source[col - 1], self._line, col)

    # ------------------------------------------------------------------
    # Low-level character access helpers
    # ------------------------------------------------------------------

    def _current(self) -> str:
        """Return the character at the current position, or '' at end of input."""
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _peek(self, offset: int = 1) -> str:
        """Return the character *offset* positions ahead, or '' past end of input."""
        if self._pos + offset < len(self._source):
            return self._source[self._pos + offset]
        return ""

    def _skip_whitespace(self) -> None:
        while self._pos < len(self._source) and self._current() in " \t\r\n":
            self._pos += 1

    # ------------------------------------------------------------------
    # Token scanning dispatcher
    # ------------------------------------------------------------------

    def _scan_token(self) -> Token:
        """Dispatch to the appropriate handler based on the current character."""
        ch = self._current()
        col = self._pos + 1

        if ch == "." and self._peek() == "." and self._peek(2) == ".":
            self._pos += 3
            return Token(TokenType.ELLIPSIS, "...", self._line, col)
        if ch == "[" and self._peek() == "]":
            self._pos += 2
            return Token(TokenType.ARRAY, "[]", self._line, col)
        if ch in _SINGLE_CHAR_TOKENS:
            self._pos += 1
            return Token(_SINGLE_CHAR_TOKENS[ch], ch, self._line, col)
        if ch in "\"'`":
            return self._scan_string(col)
        if ch.isdigit() or (ch == "-" and self._peek().isdigit()):
            return self._scan_number(col)
        if ch.isalpha() or ch == "_":
            return self._scan_name_or_keyword(col)
        raise LexerError(f"Unexpected character: {ch!r}", self._line, col)

    # ------------------------------------------------------------------
    # Literal scanners
    # ------------------------------------------------------------------

    def _scan_string(self, col: int) -> Token:
        """Scan a quoted (double, single or backtick) string literal with escape sequences."""
        quote = self._current()
        self._pos += 1
        chars: list[str] = []
        while self._pos < len(self._source):
            ch = self._current()
            if ch == quote:
                self._pos += 1
                return Token(TokenType.STRING, "".join(chars), self._line, col)
            if ch == "\\":
                esc = self._peek()
                if esc not in _ESCAPES:
                    raise LexerError(f"Invalid escape sequence: '\\{esc}'", self._line, self._pos + 1)
                chars.append(_ESCAPES[esc])
                self._pos += 2
            else:
                chars.append(ch)
                self._pos += 1
        raise LexerError("Unterminated string literal", self._line, col)

    def _scan_number(self, col: int) -> Token:
        """Scan an integer or decimal literal, with an optional leading minus."""
        start = self._pos
        if self._current() == "-":
            self._pos += 1
        while self._current().isdigit():
            self._pos += 1
        if self._current() == "." and self._peek().isdigit():
            self._pos += 1
            while self._current().isdigit():
                self._pos += 1
        return Token(TokenType.NUMBER, self._source[start : self._pos], self._line, col)

    def _scan_name_or_keyword(self, col: int) -> Token:
        """Scan a possibly dotted name and map it to a keyword token type if applicable."""
        start = self._pos
        while True:
            ch = self._current()
            if ch.isalnum() or ch == "_":
                self._pos += 1
            elif ch == "." and (self._peek().isalpha() or self._peek() == "_"):
                self._pos += 1
            else:
                break
        value = self._source[start : self._pos]
        return Token(_KEYWORDS.get(value, TokenType.NAME), value, self._line, col)


# ################
# Implementation
# ################

_KEYWORDS: dict[str, TokenType] = {
    "fun": TokenType.FUN,
    "async": TokenType.ASYNC,
}

_SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "|": TokenType.PIPE,
    "?": TokenType.QUESTION,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "<": TokenType.LANGLE,
    ">": TokenType.RANGLE,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
}

_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "\\": "\\",
    '"': '"',
    "'": "'",
}
