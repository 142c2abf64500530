# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declaration records for the catsdecl semantic model."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import Field as _Field

from catsdecl.model.types import LiteralType, TypeExpr, UnionType, is_nullable

# ###############
# Public Interface
# ###############


class Namespace(BaseModel):
    """A global API table (``shell = {}``), optionally typed by a class."""

    name: str
    class_name: str | None = None


class FieldDecl(BaseModel):
    """A class member: either a named field or an index signature (``[string]``)."""

    name: str | None = None
    key_type: TypeExpr | None = None
    type: TypeExpr
    optional: bool = False
    description: str | None = None


class ClassDecl(BaseModel):
    """A class-shaped type with fields and optional parent classes."""

    name: str
    parents: list[str] = _Field(default_factory=list)
    description: str | None = None
    fields: list[FieldDecl] = _Field(default_factory=list)


class AliasMember(BaseModel):
    """One ``--- | T`` continuation line of an alias declaration."""

    type: TypeExpr
    description: str | None = None


class AliasDecl(BaseModel):
    """A named type synonym.

    The inline type after the alias name is kept in ``base``; continuation
    lines are kept in ``members`` so that per-member documentation survives.
    """

    name: str
    base: TypeExpr | None = None
    members: list[AliasMember] = _Field(default_factory=list)
    description: str | None = None

    @property
    def type(self) -> TypeExpr:
        """Return the aliased type with continuation members merged into one union."""
        parts: list[TypeExpr] = []
        if self.base is not None:
            parts.append(self.base)
        parts.extend(m.type for m in self.members)
        if len(parts) == 1:
            return parts[0]
        return UnionType(members=parts)

    @property
    def literal_values(self) -> list[str | int | float | bool] | None:
        """Return the literal members if the alias is a closed union of literals, else None."""
        merged = self.type
        members = merged.members if isinstance(merged, UnionType) else [merged]
        values: list[str | int | float | bool] = []
        for member in members:
            if not isinstance(member, LiteralType):
                return None
            values.append(member.value)
        return values


class Param(BaseModel):
    """A documented function parameter."""

    name: str
    type: TypeExpr
    optional: bool = False
    description: str | None = None

    @property
    def is_variadic(self) -> bool:
        return self.name == "..."

    @property
    def is_optional(self) -> bool:
        """A parameter is optional when marked ``name?`` or when its type admits nil."""
        return self.optional or is_nullable(self.type)


class Return(BaseModel):
    """A documented return value; ``variadic`` means zero or more of ``type``."""

    type: TypeExpr
    name: str | None = None
    variadic: bool = False
    description: str | None = None


class SeeRef(BaseModel):
    """A ``@see`` cross-reference."""

    target: str
    description: str | None = None


class FunctionDecl(BaseModel):
    """A function signature attached to a forward declaration."""

    namespace: str | None = None
    name: str
    is_method: bool = False
    signature: list[str] = _Field(default_factory=list)
    params: list[Param] = _Field(default_factory=list)
    returns: list[Return] = _Field(default_factory=list)
    description: str | None = None
    deprecated: bool = False
    deprecation_reason: str | None = None
    nodiscard: bool = False
    is_async: bool = False
    see: list[SeeRef] = _Field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        if self.namespace is None:
            return self.name
        separator = ":" if self.is_method else "."
        return f"{self.namespace}{separator}{self.name}"


class DeclarationFile(BaseModel):
    """Top-level model representing the parsed contents of one declaration file."""

    meta: str | None = None
    namespaces: list[Namespace] = _Field(default_factory=list)
    classes: list[ClassDecl] = _Field(default_factory=list)
    aliases: list[AliasDecl] = _Field(default_factory=list)
    functions: list[FunctionDecl] = _Field(default_factory=list)
    module_return: str | None = None


class DeclarationCorpus(BaseModel):
    """All declaration files of one library root, keyed by relative path without suffix."""

    files: dict[str, DeclarationFile] = _Field(default_factory=dict)
