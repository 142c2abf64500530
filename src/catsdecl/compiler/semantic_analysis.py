# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Semantic analysis for a parsed declaration corpus.

Checks the structural contract the language server relies on: names are
declared once, every type reference resolves, functions hang off declared
tables, and ``@param`` annotations agree with the Lua forward declaration.
This is distinct from validation (well-formedness rules such as optional
parameter ordering), which lives in :mod:`catsdecl.validation.checks`.
"""

from __future__ import annotations

from dataclasses import dataclass

from catsdecl.compiler.symbols import SymbolTable
from catsdecl.model.entities import DeclarationCorpus, FunctionDecl
from catsdecl.model.types import TypeExpr, named_references

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class SemanticError:
    """A structural error detected during semantic analysis.

    Attributes:
        message: Human-readable description of the error.
    """

    message: str


def analyze(corpus: DeclarationCorpus) -> list[SemanticError]:
    """Perform semantic analysis on a whole declaration corpus.

    Checks performed:
    - Alias and class names are unique across the corpus and never clash
      with each other.
    - Namespaces (global tables) are declared once.
    - Each function is declared once; overloads must be expressed with
      union types instead of repeated declarations.
    - Every named type used in a parameter, return, field, alias, class
      parent, or namespace binding resolves to a builtin type, an alias, or
      a class.
    - Functions are declared on a namespace or class that exists.
    - Every ``@param`` names a parameter of the Lua forward declaration,
      appears once, and follows the declaration's parameter order.

    Args:
        corpus: The parsed corpus to analyze.

    Returns:
        A list of :class:`SemanticError` instances. An empty list means no
        semantic errors were found.
    """
    return _SemanticAnalyzer(corpus).analyze()


# ################
# Implementation
# ################


class _SemanticAnalyzer:
    """Performs semantic analysis over all files of a corpus."""

    def __init__(self, corpus: DeclarationCorpus) -> None:
        self._corpus = corpus
        self._symbols = SymbolTable.from_corpus(corpus)

    def analyze(self) -> list[SemanticError]:
        errors: list[SemanticError] = []
        errors.extend(self._check_duplicates())
        errors.extend(self._check_type_references())
        for decl_file in self._corpus.files.values():
            for function in decl_file.functions:
                errors.extend(self._check_function_namespace(function))
                errors.extend(_check_param_signature(function))
        return errors

    # ------------------------------------------------------------------
    # Duplicate declarations
    # ------------------------------------------------------------------

    def _check_duplicates(self) -> list[SemanticError]:
        errors: list[SemanticError] = []
        alias_origin: dict[str, str] = {}
        class_origin: dict[str, str] = {}
        namespace_origin: dict[str, str] = {}
        function_origin: dict[str, str] = {}

        for key, decl_file in self._corpus.files.items():
            for alias in decl_file.aliases:
                errors.extend(_record(alias_origin, alias.name, key, "Alias"))
            for class_decl in decl_file.classes:
                errors.extend(_record(class_origin, class_decl.name, key, "Class"))
            for ns in decl_file.namespaces:
                errors.extend(_record(namespace_origin, ns.name, key, "Namespace"))
            for function in decl_file.functions:
                errors.extend(_record(function_origin, function.qualified_name, key, "Function"))

        for name in sorted(alias_origin.keys() & class_origin.keys()):
            errors.append(SemanticError(message=f"Name '{name}' is declared as both an alias and a class."))
        return errors

    # ------------------------------------------------------------------
    # Type references
    # ------------------------------------------------------------------

    def _check_type_references(self) -> list[SemanticError]:
        errors: list[SemanticError] = []
        for decl_file in self._corpus.files.values():
            for alias in decl_file.aliases:
                errors.extend(self._check_refs(f"Alias '{alias.name}'", alias.type))
            for class_decl in decl_file.classes:
                owner = f"Class '{class_decl.name}'"
                for parent in class_decl.parents:
                    if parent not in self._symbols.classes:
                        errors.append(SemanticError(message=f"{owner} extends undefined class '{parent}'."))
                for field_decl in class_decl.fields:
                    label = field_decl.name if field_decl.name is not None else "index"
                    field_owner = f"{owner} field '{label}'"
                    if field_decl.key_type is not None:
                        errors.extend(self._check_refs(field_owner, field_decl.key_type))
                    errors.extend(self._check_refs(field_owner, field_decl.type))
            for ns in decl_file.namespaces:
                if ns.class_name is not None and ns.class_name not in self._symbols.classes:
                    errors.append(
                        SemanticError(message=f"Namespace '{ns.name}' is typed by undefined class '{ns.class_name}'.")
                    )
            for function in decl_file.functions:
                owner = f"Function '{function.qualified_name}'"
                for param in function.params:
                    errors.extend(self._check_refs(f"{owner} parameter '{param.name}'", param.type))
                for index, ret in enumerate(function.returns, start=1):
                    errors.extend(self._check_refs(f"{owner} return #{index}", ret.type))
        return errors

    def _check_refs(self, owner: str, expr: TypeExpr) -> list[SemanticError]:
        errors: list[SemanticError] = []
        reported: set[str] = set()
        for name in named_references(expr):
            if name in reported or self._symbols.is_type_defined(name):
                continue
            reported.add(name)
            errors.append(SemanticError(message=f"{owner} references undefined type '{name}'."))
        return errors

    # ------------------------------------------------------------------
    # Functions
    # ------------------------------------------------------------------

    def _check_function_namespace(self, function: FunctionDecl) -> list[SemanticError]:
        ns = function.namespace
        if ns is None or ns in self._symbols.namespaces or ns in self._symbols.classes:
            return []
        return [
            SemanticError(
                message=f"Function '{function.qualified_name}' is declared on undeclared namespace '{ns}'."
            )
        ]


def _record(origins: dict[str, str], name: str, key: str, kind: str) -> list[SemanticError]:
    """Record where *name* was declared; return an error if it was already declared."""
    if name not in origins:
        origins[name] = key
        return []
    first = origins[name]
    if first == key:
        return [SemanticError(message=f"{kind} '{name}' is declared more than once in '{key}'.")]
    return [SemanticError(message=f"{kind} '{name}' is declared in both '{first}' and '{key}'.")]


def _check_param_signature(function: FunctionDecl) -> list[SemanticError]:
    """Check @param annotations against the Lua forward declaration's parameter list."""
    errors: list[SemanticError] = []
    owner = f"Function '{function.qualified_name}'"
    seen: set[str] = set()
    for param in function.params:
        if param.name in seen:
            errors.append(SemanticError(message=f"{owner} documents parameter '{param.name}' more than once."))
            continue
        seen.add(param.name)
        if param.name not in function.signature:
            errors.append(
                SemanticError(message=f"{owner} documents parameter '{param.name}' which is not in its signature.")
            )

    documented = [p.name for p in function.params if p.name in function.signature]
    expected = [name for name in function.signature if name in seen]
    if not errors and documented != expected:
        errors.append(
            SemanticError(
                message=(
                    f"{owner} documents parameters in order ({', '.join(documented)}) "
                    f"but declares them as ({', '.join(expected)})."
                )
            )
        )
    return errors
