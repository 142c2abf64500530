# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Merged symbol table over all files of a declaration corpus.

The language server indexes every file under the library root and merges
their declarations into one global table; this module does the same for
catsdecl's own lookups. When a name is declared twice the first declaration
wins; duplicates are reported by semantic analysis, not here.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from catsdecl.model.entities import AliasDecl, ClassDecl, DeclarationCorpus, FunctionDecl, Namespace
from catsdecl.model.types import BUILTIN_TYPES, TypeExpr

# ###############
# Public Interface
# ###############


@dataclass
class SymbolTable:
    """Global declarations of a corpus, indexed by name.

    Attributes:
        namespaces: Global tables by name.
        classes: Class declarations by name.
        aliases: Alias declarations by name.
        functions: Function declarations by qualified name (``shell.run``).
    """

    namespaces: dict[str, Namespace] = field(default_factory=dict)
    classes: dict[str, ClassDecl] = field(default_factory=dict)
    aliases: dict[str, AliasDecl] = field(default_factory=dict)
    functions: dict[str, FunctionDecl] = field(default_factory=dict)

    @classmethod
    def from_corpus(cls, corpus: DeclarationCorpus) -> SymbolTable:
        table = cls()
        for decl_file in corpus.files.values():
            for ns in decl_file.namespaces:
                table.namespaces.setdefault(ns.name, ns)
            for class_decl in decl_file.classes:
                table.classes.setdefault(class_decl.name, class_decl)
            for alias in decl_file.aliases:
                table.aliases.setdefault(alias.name, alias)
            for function in decl_file.functions:
                table.functions.setdefault(function.qualified_name, function)
        return table

    def is_type_defined(self, name: str) -> bool:
        """Return True if *name* is a builtin type, an alias, or a class."""
        return name in BUILTIN_TYPES or name in self.aliases or name in self.classes

    def resolve_type(self, name: str) -> AliasDecl | ClassDecl | None:
        """Return the alias or class declaring *name*; aliases take precedence."""
        if name in self.aliases:
            return self.aliases[name]
        return self.classes.get(name)

    def expand_alias(self, name: str) -> TypeExpr | None:
        """Return the aliased type for *name*, or None if it is not an alias."""
        alias = self.aliases.get(name)
        return alias.type if alias is not None else None

    def function(self, qualified_name: str) -> FunctionDecl | None:
        """Look up a function by ``namespace.name``, ``namespace:name`` or bare name."""
        found = self.functions.get(qualified_name)
        if found is None and ":" in qualified_name:
            found = self.functions.get(qualified_name.replace(":", ".", 1))
        return found

    def class_ancestors(self, name: str) -> list[str]:
        """Return all transitive parent class names of *name*, nearest first."""
        ancestors: list[str] = []
        queue = list(self.classes[name].parents) if name in self.classes else []
        while queue:
            parent = queue.pop(0)
            if parent in ancestors or parent == name:
                continue
            ancestors.append(parent)
            if parent in self.classes:
                queue.extend(self.classes[parent].parents)
        return ancestors
