# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type expression representations for LuaCATS declarations."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############

# Type names provided by the language server itself; never declared in a corpus.
BUILTIN_TYPES: frozenset[str] = frozenset(
    {
        "any",
        "unknown",
        "nil",
        "boolean",
        "string",
        "number",
        "integer",
        "function",
        "table",
        "thread",
        "userdata",
        "lightuserdata",
        "self",
    }
)


class NamedType(BaseModel):
    """Reference to a builtin type, an alias, or a class by name."""

    kind: Literal["named"] = "named"
    name: str


class LiteralType(BaseModel):
    """A literal constant used as a type (``"front"``, ``42``, ``true``)."""

    kind: Literal["literal"] = "literal"
    value: str | int | float | bool


class UnionType(BaseModel):
    """One of the listed alternatives (``string | number``)."""

    kind: Literal["union"] = "union"
    members: list[TypeExpr]


class OptionalType(BaseModel):
    """The ``T?`` shorthand for ``T | nil``."""

    kind: Literal["optional"] = "optional"
    inner: TypeExpr


class ArrayType(BaseModel):
    """The ``T[]`` shorthand for a sequence table."""

    kind: Literal["array"] = "array"
    element: TypeExpr


class GenericType(BaseModel):
    """A parameterized type such as ``table<string, any>``."""

    kind: Literal["generic"] = "generic"
    name: str
    args: list[TypeExpr]


class FunctionParam(BaseModel):
    """A parameter of a function type. ``name == "..."`` marks varargs."""

    name: str
    type: TypeExpr | None = None
    optional: bool = False


class FunctionType(BaseModel):
    """A function type: ``[async] fun(params): returns``."""

    kind: Literal["function"] = "function"
    params: list[FunctionParam] = _Field(default_factory=list)
    returns: list[TypeExpr] = _Field(default_factory=list)
    is_async: bool = False


class TableField(BaseModel):
    """A member of a table literal type; either a name or an index key type."""

    name: str | None = None
    key_type: TypeExpr | None = None
    type: TypeExpr
    optional: bool = False


class TableType(BaseModel):
    """A table literal type: ``{ name: T, [K]: V }``."""

    kind: Literal["table"] = "table"
    fields: list[TableField] = _Field(default_factory=list)


class VarargType(BaseModel):
    """The ``...`` placeholder in a function type's return list."""

    kind: Literal["vararg"] = "vararg"


# Any LuaCATS type expression. The `kind` discriminator keeps JSON artifacts unambiguous.
TypeExpr = Annotated[
    NamedType
    | LiteralType
    | UnionType
    | OptionalType
    | ArrayType
    | GenericType
    | FunctionType
    | TableType
    | VarargType,
    _Field(discriminator="kind"),
]


def is_nullable(expr: TypeExpr) -> bool:
    """Return True if *expr* admits ``nil`` (``nil``, ``T?``, or a union with either)."""
    if isinstance(expr, NamedType):
        return expr.name == "nil"
    if isinstance(expr, OptionalType):
        return True
    if isinstance(expr, UnionType):
        return any(is_nullable(m) for m in expr.members)
    return False


def named_references(expr: TypeExpr) -> list[str]:
    """Collect every NamedType name reachable from *expr*, in source order."""
    if isinstance(expr, NamedType):
        return [expr.name]
    if isinstance(expr, UnionType):
        return [name for m in expr.members for name in named_references(m)]
    if isinstance(expr, OptionalType):
        return named_references(expr.inner)
    if isinstance(expr, ArrayType):
        return named_references(expr.element)
    if isinstance(expr, GenericType):
        return [expr.name] + [name for a in expr.args for name in named_references(a)]
    if isinstance(expr, FunctionType):
        names = [name for p in expr.params if p.type is not None for name in named_references(p.type)]
        return names + [name for r in expr.returns for name in named_references(r)]
    if isinstance(expr, TableType):
        names: list[str] = []
        for f in expr.fields:
            if f.key_type is not None:
                names.extend(named_references(f.key_type))
            names.extend(named_references(f.type))
        return names
    return []


# Resolve forward references for models that use TypeExpr.
UnionType.model_rebuild()
OptionalType.model_rebuild()
ArrayType.model_rebuild()
GenericType.model_rebuild()
FunctionParam.model_rebuild()
FunctionType.model_rebuild()
TableField.model_rebuild()
TableType.model_rebuild()
