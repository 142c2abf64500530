# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compiler pipeline for LuaCATS declaration files: parsing, writing, caching, and semantic analysis."""

from catsdecl.compiler.artifact import (
    ARTIFACT_SUFFIX,
    deserialize,
    deserialize_corpus,
    read_artifact,
    serialize,
    serialize_corpus,
    write_artifact,
)
from catsdecl.compiler.build import CompilerError, compile_library, load_bundled_library, load_library
from catsdecl.compiler.parser import ParseError, parse
from catsdecl.compiler.semantic_analysis import SemanticError, analyze
from catsdecl.compiler.symbols import SymbolTable
from catsdecl.compiler.writer import render_type, write

__all__ = [
    "parse",
    "ParseError",
    "write",
    "render_type",
    "analyze",
    "SemanticError",
    "SymbolTable",
    "serialize",
    "deserialize",
    "serialize_corpus",
    "deserialize_corpus",
    "write_artifact",
    "read_artifact",
    "ARTIFACT_SUFFIX",
    "compile_library",
    "load_library",
    "load_bundled_library",
    "CompilerError",
]
