# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Well-formedness checks for declaration corpora.

These checks operate on a corpus that already passed semantic analysis and
enforce the documentation conventions the language server depends on
beyond structural validity.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from catsdecl.compiler.symbols import SymbolTable
from catsdecl.model.entities import AliasDecl, DeclarationCorpus, FunctionDecl
from catsdecl.model.types import (
    ArrayType,
    FunctionType,
    GenericType,
    OptionalType,
    TableType,
    TypeExpr,
    UnionType,
)

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ValidationWarning:
    """A non-fatal convention violation detected during validation.

    The corpus remains usable, but the issue points at documentation the
    language server will present incompletely or misleadingly.

    Attributes:
        message: Human-readable description of the warning.
    """

    message: str


@dataclass(frozen=True)
class ValidationError:
    """A fatal well-formedness violation detected during validation.

    The corpus is considered invalid and should be corrected.

    Attributes:
        message: Human-readable description of the error.
    """

    message: str


@dataclass
class ValidationResult:
    """Result of running well-formedness checks.

    Attributes:
        warnings: Non-fatal issues found during validation.
        errors: Fatal errors that indicate an invalid corpus.
    """

    warnings: list[ValidationWarning] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Return True if any fatal validation errors were found."""
        return len(self.errors) > 0


def validate(corpus: DeclarationCorpus) -> ValidationResult:
    """Run all well-formedness checks on a declaration corpus.

    Checks performed:

    1. **Optional ordering** (error): once a parameter is optional (``name?``
       or a nil-admitting type), every later parameter must be optional or
       variadic.

    2. **Variadic position** (error): a ``...`` parameter must be the last
       parameter.

    3. **Literal unions** (error): an alias made only of literal members
       must have at least one member and no duplicate literals.

    4. **Duplicate union members** (warning): ``string | string``.

    5. **Deprecation rationale** (warning): ``@deprecated`` carries a
       human-readable reason.

    6. **Discarded nothing** (warning): ``@nodiscard`` on a function that
       documents no return value.

    7. **Undocumented parameters** (warning): a parameter of the Lua forward
       declaration has no ``@param``.

    8. **Variadic returns** (warning): a ``...`` return is followed by
       further returns, so the later values can never be reached.

    9. **Dangling links** (warning): a ``@see`` target or ``lua://`` link
       names a member of a declared namespace that does not exist.

    Args:
        corpus: The corpus to validate.

    Returns:
        A :class:`ValidationResult` containing any warnings and errors found.
        An empty result (no warnings, no errors) indicates a fully valid corpus.
    """
    warnings: list[ValidationWarning] = []
    errors: list[ValidationError] = []
    symbols = SymbolTable.from_corpus(corpus)

    for decl_file in corpus.files.values():
        for function in decl_file.functions:
            errors.extend(_check_optional_order(function))
            errors.extend(_check_variadic_position(function))
            warnings.extend(_check_deprecation(function))
            warnings.extend(_check_nodiscard(function))
            warnings.extend(_check_undocumented_params(function))
            warnings.extend(_check_variadic_returns(function))
        for alias in decl_file.aliases:
            errors.extend(_check_literal_alias(alias))

    warnings.extend(_check_duplicate_union_members(corpus))
    warnings.extend(_check_links(corpus, symbols))

    return ValidationResult(warnings=warnings, errors=errors)


# ################
# Implementation
# ################

_LINK_RE = re.compile(r"lua://([A-Za-z_][\w.:]*)")


def _check_optional_order(function: FunctionDecl) -> list[ValidationError]:
    """Return errors for required parameters that follow an optional one."""
    errors: list[ValidationError] = []
    first_optional: str | None = None
    for param in function.params:
        if param.is_variadic:
            continue
        if param.is_optional:
            first_optional = first_optional or param.name
        elif first_optional is not None:
            errors.append(
                ValidationError(
                    message=(
                        f"Function '{function.qualified_name}' has required parameter '{param.name}' "
                        f"after optional parameter '{first_optional}'."
                    )
                )
            )
    return errors


def _check_variadic_position(function: FunctionDecl) -> list[ValidationError]:
    for param in function.params[:-1]:
        if param.is_variadic:
            message = f"Function '{function.qualified_name}' has a variadic parameter that is not last."
            return [ValidationError(message=message)]
    return []


def _check_literal_alias(alias: AliasDecl) -> list[ValidationError]:
    """Return errors for empty or duplicated closed literal unions."""
    values = alias.literal_values
    if values is None:
        return []
    if not values:
        return [ValidationError(message=f"Alias '{alias.name}' declares no members.")]
    seen: set[tuple[type, object]] = set()
    duplicates: list[str] = []
    for value in values:
        # Keyed by type so that true and 1 stay distinct.
        key = (type(value), value)
        if key in seen and repr(value) not in duplicates:
            duplicates.append(repr(value))
        seen.add(key)
    if duplicates:
        return [ValidationError(message=f"Alias '{alias.name}' repeats literal member(s) {', '.join(duplicates)}.")]
    return []


def _check_deprecation(function: FunctionDecl) -> list[ValidationWarning]:
    if function.deprecated and not function.deprecation_reason:
        return [ValidationWarning(message=f"Function '{function.qualified_name}' is deprecated without a reason.")]
    return []


def _check_nodiscard(function: FunctionDecl) -> list[ValidationWarning]:
    if function.nodiscard and not function.returns:
        return [
            ValidationWarning(
                message=f"Function '{function.qualified_name}' is marked @nodiscard but documents no return value."
            )
        ]
    return []


def _check_undocumented_params(function: FunctionDecl) -> list[ValidationWarning]:
    documented = {p.name for p in function.params}
    return [
        ValidationWarning(message=f"Function '{function.qualified_name}' does not document parameter '{name}'.")
        for name in function.signature
        if name not in documented
    ]


def _check_variadic_returns(function: FunctionDecl) -> list[ValidationWarning]:
    for ret in function.returns[:-1]:
        if ret.variadic:
            return [
                ValidationWarning(
                    message=f"Function '{function.qualified_name}' has a variadic return followed by further returns."
                )
            ]
    return []


def _walk_types(corpus: DeclarationCorpus) -> Iterator[tuple[str, TypeExpr]]:
    """Yield (owner label, type expression) for every type written in the corpus."""
    for decl_file in corpus.files.values():
        for alias in decl_file.aliases:
            yield f"Alias '{alias.name}'", alias.type
        for class_decl in decl_file.classes:
            for field_decl in class_decl.fields:
                yield f"Class '{class_decl.name}'", field_decl.type
        for function in decl_file.functions:
            for param in function.params:
                yield f"Function '{function.qualified_name}'", param.type
            for ret in function.returns:
                yield f"Function '{function.qualified_name}'", ret.type


def _nested_unions(expr: TypeExpr) -> Iterator[UnionType]:
    if isinstance(expr, UnionType):
        yield expr
        for member in expr.members:
            yield from _nested_unions(member)
    elif isinstance(expr, OptionalType):
        yield from _nested_unions(expr.inner)
    elif isinstance(expr, ArrayType):
        yield from _nested_unions(expr.element)
    elif isinstance(expr, GenericType):
        for arg in expr.args:
            yield from _nested_unions(arg)
    elif isinstance(expr, FunctionType):
        for param in expr.params:
            if param.type is not None:
                yield from _nested_unions(param.type)
        for ret in expr.returns:
            yield from _nested_unions(ret)
    elif isinstance(expr, TableType):
        for table_field in expr.fields:
            yield from _nested_unions(table_field.type)


def _check_duplicate_union_members(corpus: DeclarationCorpus) -> list[ValidationWarning]:
    warnings: list[ValidationWarning] = []
    for owner, expr in _walk_types(corpus):
        for union in _nested_unions(expr):
            keys = [m.model_dump_json() for m in union.members]
            if len(set(keys)) != len(keys):
                warnings.append(ValidationWarning(message=f"{owner} uses a union with duplicate members."))
    return warnings


def _link_targets(corpus: DeclarationCorpus) -> Iterator[tuple[str, str]]:
    """Yield (owner label, target) for every @see tag and lua:// link."""
    for decl_file in corpus.files.values():
        for class_decl in decl_file.classes:
            for target in _LINK_RE.findall(class_decl.description or ""):
                yield f"Class '{class_decl.name}'", target
        for alias in decl_file.aliases:
            for target in _LINK_RE.findall(alias.description or ""):
                yield f"Alias '{alias.name}'", target
        for function in decl_file.functions:
            owner = f"Function '{function.qualified_name}'"
            for see in function.see:
                yield owner, see.target
            for target in _LINK_RE.findall(function.description or ""):
                yield owner, target


def _check_links(corpus: DeclarationCorpus, symbols: SymbolTable) -> list[ValidationWarning]:
    """Return warnings for links into a declared namespace that name nothing in it.

    Links into namespaces outside the corpus (``multishell.launch``) are
    external references and are not checked.
    """
    warnings: list[ValidationWarning] = []
    for owner, raw_target in _link_targets(corpus):
        target = raw_target.rstrip(".:")
        if target in symbols.namespaces or symbols.resolve_type(target) is not None:
            continue
        if symbols.function(target) is not None:
            continue
        owner_name, _, member = target.rpartition(".")
        owner_class = symbols.classes.get(owner_name)
        if owner_class is not None and any(f.name == member for f in owner_class.fields):
            continue
        namespace = re.split(r"[.:]", target)[0]
        if namespace in symbols.namespaces and ("." in target or ":" in target):
            warnings.append(ValidationWarning(message=f"{owner} links to undeclared '{target}'."))
    return warnings
