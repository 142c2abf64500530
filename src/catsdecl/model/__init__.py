# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Semantic model for LuaCATS declarations (namespaces, classes, aliases, functions)."""

from catsdecl.model.entities import (
    AliasDecl,
    AliasMember,
    ClassDecl,
    DeclarationCorpus,
    DeclarationFile,
    FieldDecl,
    FunctionDecl,
    Namespace,
    Param,
    Return,
    SeeRef,
)
from catsdecl.model.types import (
    BUILTIN_TYPES,
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
    is_nullable,
    named_references,
)

__all__ = [
    # Type expressions
    "BUILTIN_TYPES",
    "NamedType",
    "LiteralType",
    "UnionType",
    "OptionalType",
    "ArrayType",
    "GenericType",
    "FunctionParam",
    "FunctionType",
    "TableField",
    "TableType",
    "VarargType",
    "TypeExpr",
    "is_nullable",
    "named_references",
    # Declarations
    "Namespace",
    "FieldDecl",
    "ClassDecl",
    "AliasMember",
    "AliasDecl",
    "Param",
    "Return",
    "SeeRef",
    "FunctionDecl",
    "DeclarationFile",
    "DeclarationCorpus",
]
