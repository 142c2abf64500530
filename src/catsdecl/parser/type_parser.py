# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for LuaCATS type expressions.

Converts the token stream produced by the type lexer into TypeExpr models.
Annotations mix a type with trailing prose (``@param s string The string``),
so besides parsing a whole expression the parser can also parse the longest
type at the start of a line and hand back the remaining text.
"""

from catsdecl.model.types import (
    ArrayType,
    FunctionParam,
    FunctionType,
    GenericType,
    LiteralType,
    NamedType,
    OptionalType,
    TableField,
    TableType,
    TypeExpr,
    UnionType,
    VarargType,
)
from catsdecl.parser.lexer import Token, TokenType, TypeLexer

# ###############
# Public Interface
# ###############


class ParseError(Exception):
    """Raised when the parser encounters a syntactically invalid construct.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


def parse_type(text: str, *, line: int = 1) -> TypeExpr:
    """Parse *text* as exactly one type expression.

    Args:
        text: The type expression, e.g. ``string | number?``.
        line: Line number reported in errors.

    Returns:
        The parsed type expression.

    Raises:
        LexerError: If the text contains invalid characters.
        ParseError: If the text is not a single well-formed type.
    """
    parser = _TypeParser(TypeLexer(text, line=line))
    expr = parser.parse_union()
    parser.expect_end()
    return expr


def parse_type_prefix(text: str, *, line: int = 1, column: int = 1) -> tuple[TypeExpr, str]:
    """Parse the longest type expression at the start of *text*.

    Args:
        text: Annotation text starting with a type, e.g. ``string # The result``.
        line: Line number reported in errors.
        column: Column of ``text[0]`` in the source line, for error positions.

    Returns:
        A tuple of the parsed type and the remaining text, stripped.

    Raises:
        ParseError: If no type can be parsed at the start of *text*.
    """
    parser = _TypeParser(TypeLexer(text, line=line, lenient=True), column_offset=column - 1)
    expr = parser.parse_union()
    return expr, parser.remaining(text)


# ################
# Implementation
# ################


class _TypeParser:
    """Recursive-descent parser pulling tokens from a TypeLexer on demand."""

    def __init__(self, lexer: TypeLexer, column_offset: int = 0) -> None:
        self._lexer = lexer
        self._column_offset = column_offset
        self._tok = lexer.next_token()
        # Nesting depth of brackets; return lists only continue on ',' at depth 0.
        self._depth = 0

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _advance(self) -> Token:
        tok = self._tok
        if tok.type != TokenType.EOF:
            self._tok = self._lexer.next_token()
        return tok

    def _check(self, *types: TokenType) -> bool:
        return self._tok.type in types

    def _error(self, message: str) -> ParseError:
        return ParseError(message, self._tok.line, self._tok.column + self._column_offset)

    def _expect(self, *types: TokenType) -> Token:
        if self._tok.type not in types:
            expected = ", ".join(repr(t.value) for t in types)
            raise self._error(f"Expected {expected}, got {self._describe()}")
        return self._advance()

    def _describe(self) -> str:
        if self._tok.type == TokenType.EOF:
            return "end of type"
        return repr(self._tok.value)

    def expect_end(self) -> None:
        if not self._check(TokenType.EOF):
            raise self._error(f"Unexpected {self._describe()} after type")

    def remaining(self, text: str) -> str:
        """Return the part of *text* that starts at the current (unconsumed) token."""
        if self._check(TokenType.EOF):
            return ""
        return text[self._tok.column - 1 :].strip()

    # ------------------------------------------------------------------
    # Unions and postfix operators
    # ------------------------------------------------------------------

    def parse_union(self) -> TypeExpr:
        """Parse: postfix ('|' postfix)*"""
        members = [self._parse_postfix()]
        while self._check(TokenType.PIPE):
            self._advance()
            members.append(self._parse_postfix())
        if len(members) == 1:
            return members[0]
        return UnionType(members=members)

    def _parse_postfix(self) -> TypeExpr:
        """Parse: primary ('[]' | '?')*"""
        expr = self._parse_primary()
        while self._check(TokenType.ARRAY, TokenType.QUESTION):
            if self._advance().type == TokenType.ARRAY:
                expr = ArrayType(element=expr)
            else:
                expr = OptionalType(inner=expr)
        return expr

    def _parse_primary(self) -> TypeExpr:
        tok = self._tok
        if tok.type == TokenType.NAME:
            return self._parse_named()
        if tok.type == TokenType.STRING:
            self._advance()
            return LiteralType(value=tok.value)
        if tok.type == TokenType.NUMBER:
            self._advance()
            if "." in tok.value:
                return LiteralType(value=float(tok.value))
            return LiteralType(value=int(tok.value))
        if tok.type in (TokenType.FUN, TokenType.ASYNC):
            return self._parse_function()
        if tok.type == TokenType.LBRACE:
            return self._parse_table()
        if tok.type == TokenType.LPAREN:
            self._advance()
            self._depth += 1
            inner = self.parse_union()
            self._depth -= 1
            self._expect(TokenType.RPAREN)
            return inner
        raise self._error(f"Expected a type, got {self._describe()}")

    def _parse_named(self) -> TypeExpr:
        """Parse: NAME ['<' union (',' union)* '>'], mapping true/false to literals."""
        name = self._advance().value
        if name in ("true", "false"):
            return LiteralType(value=name == "true")
        if not self._check(TokenType.LANGLE):
            return NamedType(name=name)
        self._advance()
        self._depth += 1
        args = [self.parse_union()]
        while self._check(TokenType.COMMA):
            self._advance()
            args.append(self.parse_union())
        self._depth -= 1
        self._expect(TokenType.RANGLE)
        return GenericType(name=name, args=args)

    # ------------------------------------------------------------------
    # Function types
    # ------------------------------------------------------------------

    def _parse_function(self) -> FunctionType:
        """Parse: ['async'] 'fun' '(' params ')' [':' returns]"""
        is_async = False
        if self._check(TokenType.ASYNC):
            self._advance()
            is_async = True
        self._expect(TokenType.FUN)
        self._expect(TokenType.LPAREN)
        self._depth += 1
        params: list[FunctionParam] = []
        if not self._check(TokenType.RPAREN):
            params.append(self._parse_function_param())
            while self._check(TokenType.COMMA):
                self._advance()
                params.append(self._parse_function_param())
        self._depth -= 1
        self._expect(TokenType.RPAREN)
        returns: list[TypeExpr] = []
        if self._check(TokenType.COLON):
            self._advance()
            returns.append(self._parse_return_item())
            while self._depth == 0 and self._check(TokenType.COMMA):
                self._advance()
                returns.append(self._parse_return_item())
        return FunctionType(params=params, returns=returns, is_async=is_async)

    def _parse_function_param(self) -> FunctionParam:
        """Parse: (NAME | '...') ['?'] [':' union]"""
        name_tok = self._expect(TokenType.NAME, TokenType.ELLIPSIS)
        optional = False
        if self._check(TokenType.QUESTION):
            self._advance()
            optional = True
        param_type: TypeExpr | None = None
        if self._check(TokenType.COLON):
            self._advance()
            param_type = self.parse_union()
        return FunctionParam(name=name_tok.value, type=param_type, optional=optional)

    def _parse_return_item(self) -> TypeExpr:
        if self._check(TokenType.ELLIPSIS):
            self._advance()
            return VarargType()
        return self.parse_union()

    # ------------------------------------------------------------------
    # Table literal types
    # ------------------------------------------------------------------

    def _parse_table(self) -> TableType:
        """Parse: '{' [field (',' field)* [',']] '}'"""
        self._expect(TokenType.LBRACE)
        self._depth += 1
        fields: list[TableField] = []
        while not self._check(TokenType.RBRACE, TokenType.EOF):
            fields.append(self._parse_table_field())
            if not self._check(TokenType.COMMA):
                break
            self._advance()
        self._depth -= 1
        self._expect(TokenType.RBRACE)
        return TableType(fields=fields)

    def _parse_table_field(self) -> TableField:
        """Parse: '[' union ']' ':' union | NAME ['?'] ':' union"""
        if self._check(TokenType.LBRACKET):
            self._advance()
            key_type = self.parse_union()
            self._expect(TokenType.RBRACKET)
            self._expect(TokenType.COLON)
            return TableField(key_type=key_type, type=self.parse_union())
        name_tok = self._expect(TokenType.NAME)
        optional = False
        if self._check(TokenType.QUESTION):
            self._advance()
            optional = True
        self._expect(TokenType.COLON)
        return TableField(name=name_tok.value, type=self.parse_union(), optional=optional)
