# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the merged symbol table."""

import pytest

from catsdecl.compiler.build import load_bundled_library
from catsdecl.compiler.parser import parse
from catsdecl.compiler.symbols import SymbolTable
from catsdecl.model.entities import AliasDecl, ClassDecl, DeclarationCorpus
from catsdecl.model.types import LiteralType, NamedType, UnionType

# ###############
# Test Helpers
# ###############


def _symbols(*sources: str) -> SymbolTable:
    return SymbolTable.from_corpus(DeclarationCorpus(files={f"f{i}": parse(s) for i, s in enumerate(sources)}))


@pytest.fixture(scope="module")
def bundled() -> SymbolTable:
    return SymbolTable.from_corpus(load_bundled_library())


# ###############
# Indexing
# ###############


class TestIndexing:
    def test_bundled_namespaces(self, bundled: SymbolTable) -> None:
        assert set(bundled.namespaces) == {"string", "peripheral", "shell"}

    def test_bundled_functions_by_qualified_name(self, bundled: SymbolTable) -> None:
        assert "string.rep" in bundled.functions
        assert "peripheral.wrap" in bundled.functions
        assert "shell.setPath" in bundled.functions

    def test_first_declaration_wins(self) -> None:
        table = _symbols("--- @alias side string\n", "--- @alias side number\n")
        assert table.aliases["side"].base == NamedType(name="string")

    def test_kinds_are_indexed_separately(self) -> None:
        table = _symbols(
            "--- @class ns\nns = {}\n",
            "--- @alias ns string\n\n--- @class other\nns = {}\n",
        )
        assert table.namespaces["ns"].class_name == "ns"
        assert table.classes["ns"].name == "ns"
        assert table.aliases["ns"].base == NamedType(name="string")
        assert "other" in table.classes


# ###############
# Type Resolution
# ###############


class TestTypeResolution:
    def test_builtin_is_defined(self) -> None:
        assert SymbolTable().is_type_defined("string")

    def test_unknown_is_not_defined(self, bundled: SymbolTable) -> None:
        assert not bundled.is_type_defined("peripheral.diagonal")

    def test_resolve_alias(self, bundled: SymbolTable) -> None:
        resolved = bundled.resolve_type("peripheral.side")
        assert isinstance(resolved, AliasDecl)

    def test_resolve_class(self, bundled: SymbolTable) -> None:
        assert isinstance(bundled.resolve_type("peripheral.wrapped"), ClassDecl)

    def test_resolve_missing(self, bundled: SymbolTable) -> None:
        assert bundled.resolve_type("nope") is None

    def test_expand_literal_alias(self, bundled: SymbolTable) -> None:
        expanded = bundled.expand_alias("peripheral.side")
        assert isinstance(expanded, UnionType)
        assert LiteralType(value="top") in expanded.members
        assert len(expanded.members) == 6

    def test_expand_alias_with_base_and_members(self, bundled: SymbolTable) -> None:
        assert bundled.expand_alias("peripheral.name") == UnionType(
            members=[NamedType(name="string"), NamedType(name="peripheral.side")]
        )

    def test_expand_non_alias(self, bundled: SymbolTable) -> None:
        assert bundled.expand_alias("peripheral.wrapped") is None


# ###############
# Functions and Classes
# ###############


class TestLookups:
    def test_function_lookup(self, bundled: SymbolTable) -> None:
        function = bundled.function("shell.setPath")
        assert function is not None
        assert function.signature == ["path"]

    def test_method_call_falls_back_to_dot_declaration(self, bundled: SymbolTable) -> None:
        assert bundled.function("string:rep") is bundled.function("string.rep")

    def test_missing_function(self, bundled: SymbolTable) -> None:
        assert bundled.function("string.split") is None

    def test_class_ancestors_transitive(self) -> None:
        table = _symbols("--- @class a\n\n--- @class b : a\n\n--- @class c : b, d\n\n--- @class d\n")
        assert table.class_ancestors("c") == ["b", "d", "a"]

    def test_class_ancestors_cycle_terminates(self) -> None:
        table = _symbols("--- @class a : b\n\n--- @class b : a\n")
        assert table.class_ancestors("a") == ["b"]

    def test_class_ancestors_unknown_class(self) -> None:
        assert SymbolTable().class_ancestors("nope") == []
