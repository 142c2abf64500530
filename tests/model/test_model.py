# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""High-level tests demonstrating how to construct the catsdecl semantic model."""

from catsdecl.model import (
    BUILTIN_TYPES,
    AliasDecl,
    AliasMember,
    ArrayType,
    ClassDecl,
    DeclarationCorpus,
    DeclarationFile,
    FieldDecl,
    FunctionDecl,
    FunctionParam,
    FunctionType,
    GenericType,
    LiteralType,
    NamedType,
    Namespace,
    OptionalType,
    Param,
    Return,
    TableField,
    TableType,
    UnionType,
    VarargType,
    is_nullable,
    named_references,
)


def test_namespace_bound_to_class() -> None:
    """A namespace table may be typed by a class."""
    ns = Namespace(name="string", class_name="stringlib")
    assert ns.name == "string"
    assert ns.class_name == "stringlib"


def test_literal_union_alias() -> None:
    """An alias of literal continuation lines is a closed literal union."""
    alias = AliasDecl(
        name="peripheral.side",
        members=[AliasMember(type=LiteralType(value=side)) for side in ("front", "back", "top")],
    )
    assert isinstance(alias.type, UnionType)
    assert alias.literal_values == ["front", "back", "top"]


def test_alias_with_single_base() -> None:
    """An alias with only an inline type is that type."""
    alias = AliasDecl(name="peripheral.name", base=NamedType(name="string"))
    assert alias.type == NamedType(name="string")
    assert alias.literal_values is None


def test_alias_merges_base_and_members() -> None:
    """The inline type comes first in the merged union."""
    alias = AliasDecl(
        name="peripheral.name",
        base=NamedType(name="string"),
        members=[AliasMember(type=NamedType(name="peripheral.side"), description="A side")],
    )
    assert alias.type == UnionType(members=[NamedType(name="string"), NamedType(name="peripheral.side")])


def test_class_with_index_field() -> None:
    """A class field is either named or an index signature."""
    wrapped = ClassDecl(
        name="peripheral.wrapped",
        fields=[
            FieldDecl(name="getDocs", type=NamedType(name="function")),
            FieldDecl(key_type=NamedType(name="string"), type=NamedType(name="any")),
        ],
    )
    assert wrapped.fields[0].name == "getDocs"
    assert wrapped.fields[1].name is None
    assert wrapped.parents == []


def test_function_qualified_names() -> None:
    """Functions qualify their name with the namespace and call style."""
    assert FunctionDecl(namespace="shell", name="run").qualified_name == "shell.run"
    assert FunctionDecl(namespace="obj", name="close", is_method=True).qualified_name == "obj:close"
    assert FunctionDecl(name="sleep").qualified_name == "sleep"


def test_param_optionality() -> None:
    """A parameter is optional when marked or when its type admits nil."""
    assert Param(name="a", type=NamedType(name="string"), optional=True).is_optional
    assert Param(name="b", type=OptionalType(inner=NamedType(name="number"))).is_optional
    assert not Param(name="c", type=NamedType(name="string")).is_optional
    assert Param(name="...", type=NamedType(name="any")).is_variadic


def test_function_signature() -> None:
    """A full function declaration with documented params and returns."""
    function = FunctionDecl(
        namespace="string",
        name="rep",
        signature=["s", "n", "sep"],
        params=[
            Param(name="s", type=UnionType(members=[NamedType(name="string"), NamedType(name="number")])),
            Param(name="n", type=NamedType(name="number")),
            Param(name="sep", type=OptionalType(inner=NamedType(name="string"))),
        ],
        returns=[Return(type=NamedType(name="string"))],
        nodiscard=True,
    )
    assert [p.name for p in function.params] == function.signature
    assert function.returns[0].variadic is False


def test_is_nullable() -> None:
    """nil, T? and unions containing either admit nil."""
    assert is_nullable(NamedType(name="nil"))
    assert is_nullable(OptionalType(inner=NamedType(name="string")))
    assert is_nullable(UnionType(members=[NamedType(name="string"), NamedType(name="nil")]))
    assert not is_nullable(ArrayType(element=NamedType(name="nil")))
    assert not is_nullable(NamedType(name="string"))


def test_named_references_walks_nested_types() -> None:
    """Every referenced name is collected in source order."""
    expr = FunctionType(
        params=[FunctionParam(name="shell", type=NamedType(name="table")), FunctionParam(name="...")],
        returns=[
            OptionalType(inner=ArrayType(element=NamedType(name="string"))),
            GenericType(name="table", args=[NamedType(name="string"), NamedType(name="peripheral.wrapped")]),
            TableType(fields=[TableField(key_type=NamedType(name="integer"), type=NamedType(name="boolean"))]),
            VarargType(),
        ],
    )
    assert named_references(expr) == ["table", "string", "table", "string", "peripheral.wrapped", "integer", "boolean"]


def test_literal_has_no_references() -> None:
    assert named_references(LiteralType(value=3)) == []


def test_builtin_types() -> None:
    """The language server's own type names are builtins."""
    assert {"string", "number", "integer", "nil", "any", "table"} <= BUILTIN_TYPES
    assert "peripheral.side" not in BUILTIN_TYPES


def test_type_expressions_validate_from_json() -> None:
    """The kind discriminator selects the type expression class."""
    decl_file = DeclarationFile.model_validate(
        {
            "aliases": [
                {
                    "name": "side",
                    "base": {
                        "kind": "union",
                        "members": [{"kind": "literal", "value": "top"}, {"kind": "named", "name": "nil"}],
                    },
                }
            ]
        }
    )
    base = decl_file.aliases[0].base
    assert isinstance(base, UnionType)
    assert base.members == [LiteralType(value="top"), NamedType(name="nil")]


def test_corpus_is_keyed_by_path() -> None:
    """A corpus maps relative paths to declaration files."""
    corpus = DeclarationCorpus(files={"cc/shell": DeclarationFile(namespaces=[Namespace(name="shell")])})
    assert corpus.files["cc/shell"].namespaces[0].name == "shell"
    assert DeclarationCorpus().files == {}
