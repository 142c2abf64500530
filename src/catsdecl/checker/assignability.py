# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Assignability between type expressions, resolved against a symbol table.

The rules follow the language server's practical behaviour rather than a
sound type system: ``any``/``unknown`` accept and satisfy everything, tables
and classes are matched structurally only as far as "both are tables", and
literal values widen to their primitive type (``"top"`` is a ``string``).
"""

from __future__ import annotations

from catsdecl.compiler.symbols import SymbolTable
from catsdecl.model.types import (
    ArrayType,
    FunctionType,
    GenericType,
    LiteralType,
    NamedType,
    OptionalType,
    TableType,
    TypeExpr,
    UnionType,
    VarargType,
)

# ###############
# Public Interface
# ###############


def is_assignable(source: TypeExpr, target: TypeExpr, symbols: SymbolTable) -> bool:
    """Return True if a value of type *source* may be passed where *target* is expected.

    Args:
        source: The type of the value (e.g. ``LiteralType("top")``).
        target: The declared type (e.g. ``NamedType("peripheral.side")``).
        symbols: Symbol table used to expand aliases and class ancestry.
    """
    return _Assignability(symbols).check(source, target)


# ################
# Implementation
# ################

_TOP_TYPES: frozenset[str] = frozenset({"any", "unknown"})
_NIL = NamedType(name="nil")


class _Assignability:
    """Assignability checker that guards against recursive alias expansion."""

    def __init__(self, symbols: SymbolTable) -> None:
        self._symbols = symbols
        self._expanding: set[str] = set()

    def check(self, source: TypeExpr, target: TypeExpr) -> bool:
        if _is_top(source) or _is_top(target):
            return True
        if isinstance(source, VarargType) or isinstance(target, VarargType):
            return True

        # Decompose the source first: every alternative must fit.
        if isinstance(source, UnionType):
            return all(self.check(m, target) for m in source.members)
        if isinstance(source, OptionalType):
            return self.check(_NIL, target) and self.check(source.inner, target)

        # Then the target: one alternative must accept the value.
        if isinstance(target, UnionType):
            return any(self.check(source, m) for m in target.members)
        if isinstance(target, OptionalType):
            return _is_nil(source) or self.check(source, target.inner)

        alias_result = self._check_aliases(source, target)
        if alias_result is not None:
            return alias_result

        if isinstance(target, NamedType):
            return self._check_named_target(source, target.name)
        if isinstance(target, LiteralType):
            return isinstance(source, LiteralType) and _same_literal(source, target)
        if isinstance(target, ArrayType):
            if isinstance(source, ArrayType):
                return self.check(source.element, target.element)
            return self._is_table_like(source)
        if isinstance(target, (GenericType, TableType)):
            return self._is_table_like(source)
        if isinstance(target, FunctionType):
            return isinstance(source, FunctionType) or (isinstance(source, NamedType) and source.name == "function")
        return False

    def _check_aliases(self, source: TypeExpr, target: TypeExpr) -> bool | None:
        """Expand an alias on either side; None when neither side is an expandable alias."""
        for side, expr in (("target", target), ("source", source)):
            if not isinstance(expr, NamedType) or expr.name in self._expanding:
                continue
            expanded = self._symbols.expand_alias(expr.name)
            if expanded is None:
                continue
            self._expanding.add(expr.name)
            try:
                if side == "target":
                    return self.check(source, expanded)
                return self.check(expanded, target)
            finally:
                self._expanding.discard(expr.name)
        return None

    def _check_named_target(self, source: TypeExpr, name: str) -> bool:
        if isinstance(source, LiteralType):
            return name in _literal_types(source.value)
        if isinstance(source, NamedType):
            if source.name == name:
                return True
            if name == "number" and source.name == "integer":
                return True
            if name in self._symbols.class_ancestors(source.name):
                return True
            if name == "table":
                return source.name in self._symbols.classes
            return False
        if isinstance(source, FunctionType):
            return name == "function"
        if isinstance(source, (ArrayType, GenericType, TableType)):
            return name == "table" or name in self._symbols.classes
        return False

    def _is_table_like(self, source: TypeExpr) -> bool:
        if isinstance(source, (ArrayType, GenericType, TableType)):
            return True
        return isinstance(source, NamedType) and (source.name == "table" or source.name in self._symbols.classes)


def _is_top(expr: TypeExpr) -> bool:
    return isinstance(expr, NamedType) and expr.name in _TOP_TYPES


def _is_nil(expr: TypeExpr) -> bool:
    return isinstance(expr, NamedType) and expr.name == "nil"


def _literal_types(value: str | int | float | bool) -> frozenset[str]:
    """Return the primitive type names a literal value widens to."""
    if isinstance(value, bool):
        return frozenset({"boolean"})
    if isinstance(value, str):
        return frozenset({"string"})
    if isinstance(value, int):
        return frozenset({"integer", "number"})
    return frozenset({"number"})


def _same_literal(a: LiteralType, b: LiteralType) -> bool:
    return type(a.value) is type(b.value) and a.value == b.value
