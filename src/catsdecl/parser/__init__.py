# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexer and parser for LuaCATS type expressions."""

from catsdecl.parser.lexer import LexerError, Token, TokenType, tokenize
from catsdecl.parser.type_parser import ParseError, parse_type, parse_type_prefix

__all__ = [
    "LexerError",
    "ParseError",
    "Token",
    "TokenType",
    "parse_type",
    "parse_type_prefix",
    "tokenize",
]
