# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Call-site checking against a declaration corpus.

Demonstrates what the corpus promises its consumer: given a call such as
``peripheral.wrap("top")`` with literal arguments, report the diagnostics a
language server would raise from the declared signature.
"""

from __future__ import annotations

from dataclasses import dataclass

from catsdecl.checker.assignability import is_assignable
from catsdecl.compiler.symbols import SymbolTable
from catsdecl.compiler.writer import render_type
from catsdecl.model.entities import FunctionDecl, Param
from catsdecl.model.types import LiteralType, NamedType, TypeExpr
from catsdecl.parser.lexer import Token, TokenType, TypeLexer
from catsdecl.parser.type_parser import ParseError, parse_type

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class Call:
    """A call expression reduced to its callee and the types of its arguments.

    Attributes:
        callee: Qualified function name (``shell.run`` or ``obj:method``).
        args: Argument types; literals keep their value, other expressions are ``any``.
    """

    callee: str
    args: tuple[TypeExpr, ...] = ()


@dataclass(frozen=True)
class CallDiagnostic:
    """A problem found at a call site.

    Attributes:
        message: Human-readable description of the problem.
    """

    message: str


def parse_call(text: str) -> Call:
    """Parse a Lua call expression with literal arguments.

    Strings, numbers, ``true``/``false`` and ``nil`` keep their literal
    type, table constructors are ``table``; identifiers and nested calls are
    typed ``any``.

    Raises:
        LexerError: If the text contains characters that cannot start a token.
        ParseError: If the text is not a single call expression.
    """
    return _CallParser(text).parse()


def parse_value(text: str) -> TypeExpr:
    """Parse a single Lua literal (``"top"``, ``3``, ``nil``) into its type.

    Raises:
        ParseError: If *text* is not exactly one literal expression.
    """
    parser = _CallParser(text)
    value = parser.parse_argument()
    parser.expect_end()
    return value


def check_call(call: Call, symbols: SymbolTable) -> list[CallDiagnostic]:
    """Check *call* against the declared signature of its callee.

    Reports an unknown callee, missing required arguments, surplus
    arguments for non-variadic functions, and arguments whose type does not
    fit the declared parameter type. Returns an empty list for a valid call.
    """
    function = symbols.function(call.callee)
    if function is None:
        return [CallDiagnostic(message=f"Unknown function '{call.callee}'.")]

    diagnostics: list[CallDiagnostic] = []
    params = _signature_params(function)
    variadic = params[-1] if params and params[-1].is_variadic else None
    fixed = params[:-1] if variadic is not None else params

    for index, param in enumerate(fixed):
        position = index + 1
        if index >= len(call.args):
            if not param.is_optional:
                diagnostics.append(
                    CallDiagnostic(
                        message=(
                            f"Missing required argument #{position} '{param.name}' "
                            f"in call to '{function.qualified_name}'."
                        )
                    )
                )
            continue
        arg = call.args[index]
        if param.optional and _is_nil(arg):
            continue
        if not is_assignable(arg, param.type, symbols):
            diagnostics.append(_mismatch(function.qualified_name, position, param.name, param.type, arg))

    extra = call.args[len(fixed) :]
    if variadic is not None:
        for offset, arg in enumerate(extra):
            if not is_assignable(arg, variadic.type, symbols):
                diagnostics.append(
                    _mismatch(function.qualified_name, len(fixed) + offset + 1, "...", variadic.type, arg)
                )
    elif extra:
        diagnostics.append(
            CallDiagnostic(
                message=(
                    f"Too many arguments in call to '{function.qualified_name}': "
                    f"expected at most {len(fixed)}, got {len(call.args)}."
                )
            )
        )
    return diagnostics


def check_value(value: TypeExpr, type_text: str, symbols: SymbolTable) -> bool:
    """Return True if *value* fits the type written as *type_text* (e.g. ``peripheral.side``)."""
    return is_assignable(value, parse_type(type_text), symbols)


# ################
# Implementation
# ################

_ANY = NamedType(name="any")


def _signature_params(function: FunctionDecl) -> list[Param]:
    """Line up the Lua parameter list with its ``@param`` tags.

    A parameter the tags leave out accepts anything and may be omitted.
    """
    if not function.signature:
        return list(function.params)
    documented = {param.name: param for param in function.params}
    return [documented.get(name) or Param(name=name, type=_ANY, optional=True) for name in function.signature]


def _is_nil(expr: TypeExpr) -> bool:
    return isinstance(expr, NamedType) and expr.name == "nil"


def _mismatch(callee: str, position: int, name: str, expected: TypeExpr, actual: TypeExpr) -> CallDiagnostic:
    return CallDiagnostic(
        message=(
            f"Argument #{position} '{name}' in call to '{callee}' expects "
            f"'{render_type(expected)}', got '{render_type(actual)}'."
        )
    )


class _CallParser:
    """Recursive-descent parser for ``name(arg, ...)`` call expressions."""

    def __init__(self, text: str) -> None:
        self._lexer = TypeLexer(text)
        self._tok = self._lexer.next_token()

    def _advance(self) -> Token:
        tok = self._tok
        if tok.type != TokenType.EOF:
            self._tok = self._lexer.next_token()
        return tok

    def _expect(self, token_type: TokenType) -> Token:
        if self._tok.type != token_type:
            raise ParseError(
                f"Expected {token_type.value!r}, got {self._tok.value or 'end of input'!r}",
                self._tok.line,
                self._tok.column,
            )
        return self._advance()

    def expect_end(self) -> None:
        if self._tok.type != TokenType.EOF:
            raise ParseError(f"Unexpected {self._tok.value!r}", self._tok.line, self._tok.column)

    def parse(self) -> Call:
        """Parse: NAME [':' NAME] '(' [argument (',' argument)*] ')'"""
        callee = self._expect(TokenType.NAME).value
        if self._tok.type == TokenType.COLON:
            self._advance()
            callee += ":" + self._expect(TokenType.NAME).value
        self._expect(TokenType.LPAREN)
        args: list[TypeExpr] = []
        if self._tok.type != TokenType.RPAREN:
            args.append(self.parse_argument())
            while self._tok.type == TokenType.COMMA:
                self._advance()
                args.append(self.parse_argument())
        self._expect(TokenType.RPAREN)
        self.expect_end()
        return Call(callee=callee, args=tuple(args))

    def parse_argument(self) -> TypeExpr:
        tok = self._tok
        if tok.type == TokenType.STRING:
            self._advance()
            return LiteralType(value=tok.value)
        if tok.type == TokenType.NUMBER:
            self._advance()
            return LiteralType(value=float(tok.value) if "." in tok.value else int(tok.value))
        if tok.type == TokenType.LBRACE:
            self._skip_balanced(TokenType.LBRACE, TokenType.RBRACE)
            return NamedType(name="table")
        if tok.type in (TokenType.NAME, TokenType.FUN, TokenType.ASYNC):
            self._advance()
            if tok.value in ("true", "false"):
                return LiteralType(value=tok.value == "true")
            if tok.value == "nil":
                return NamedType(name="nil")
            if self._tok.type == TokenType.LPAREN:
                self._skip_balanced(TokenType.LPAREN, TokenType.RPAREN)
            return _ANY
        raise ParseError(f"Expected an argument, got {tok.value or 'end of input'!r}", tok.line, tok.column)

    def _skip_balanced(self, opening: TokenType, closing: TokenType) -> None:
        """Consume a bracketed run of tokens, including nested brackets of the same kind."""
        depth = 0
        while True:
            tok = self._advance()
            if tok.type == opening:
                depth += 1
            elif tok.type == closing:
                depth -= 1
                if depth == 0:
                    return
            elif tok.type == TokenType.EOF:
                raise ParseError(f"Unterminated {opening.value!r}", tok.line, tok.column)
