# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Canonical LuaCATS writer for DeclarationFile models.

The output is not byte-identical to the original source, but parsing it
again yields an equal DeclarationFile. Declarations are written in a fixed
order: meta marker, aliases, classes (each followed by the namespace table
it types), untyped namespaces, functions, and the module return.
"""

import json

from catsdecl.model.entities import (
    AliasDecl,
    ClassDecl,
    DeclarationFile,
    FieldDecl,
    FunctionDecl,
    Param,
    Return,
)
from catsdecl.model.types import (
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
)

# ###############
# Public Interface
# ###############


def render_type(expr: TypeExpr) -> str:
    """Render a type expression in LuaCATS syntax."""
    if isinstance(expr, NamedType):
        return expr.name
    if isinstance(expr, LiteralType):
        return _render_literal(expr.value)
    if isinstance(expr, UnionType):
        return " | ".join(_render_operand(m) for m in expr.members)
    if isinstance(expr, OptionalType):
        return _render_operand(expr.inner, postfix=True) + "?"
    if isinstance(expr, ArrayType):
        return _render_operand(expr.element, postfix=True) + "[]"
    if isinstance(expr, GenericType):
        return f"{expr.name}<{', '.join(render_type(a) for a in expr.args)}>"
    if isinstance(expr, FunctionType):
        return _render_function(expr)
    if isinstance(expr, TableType):
        if not expr.fields:
            return "{}"
        return "{ " + ", ".join(_render_table_field(f) for f in expr.fields) + " }"
    assert isinstance(expr, VarargType)
    return "..."


def write(decl_file: DeclarationFile) -> str:
    """Render a DeclarationFile as LuaCATS source text ending with a newline."""
    blocks: list[list[str]] = []
    if decl_file.meta is not None:
        blocks.append([_tag("meta", decl_file.meta)])
    for alias in decl_file.aliases:
        blocks.append(_alias_block(alias))

    bound = {ns.class_name: ns.name for ns in decl_file.namespaces if ns.class_name is not None}
    for class_decl in decl_file.classes:
        block = _class_block(class_decl)
        if class_decl.name in bound:
            block.append(f"{bound.pop(class_decl.name)} = {{}}")
        blocks.append(block)
    for ns in decl_file.namespaces:
        # Namespaces typed by a class declared in another file, or untyped tables.
        if ns.class_name is None or ns.class_name not in {c.name for c in decl_file.classes}:
            blocks.append([f"{ns.name} = {{}}"])

    for function in decl_file.functions:
        blocks.append(_function_block(function))
    if decl_file.module_return is not None:
        blocks.append([f"return {decl_file.module_return}"])
    return "\n\n".join("\n".join(block) for block in blocks) + "\n"


# ################
# Implementation
# ################


def _render_literal(value: str | int | float | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    return repr(value)


def _render_operand(expr: TypeExpr, postfix: bool = False) -> str:
    """Render *expr* as an operand, parenthesized where it would otherwise bind wrongly."""
    text = render_type(expr)
    if isinstance(expr, FunctionType) or (postfix and isinstance(expr, UnionType)):
        return f"({text})"
    return text


def _render_function(expr: FunctionType) -> str:
    params = ", ".join(_render_function_param(p) for p in expr.params)
    text = f"fun({params})"
    if expr.is_async:
        text = "async " + text
    if expr.returns:
        text += ": " + ", ".join(_render_operand(r) for r in expr.returns)
    return text


def _render_function_param(param: FunctionParam) -> str:
    text = param.name + ("?" if param.optional else "")
    if param.type is not None:
        text += f": {render_type(param.type)}"
    return text


def _render_table_field(table_field: TableField) -> str:
    if table_field.key_type is not None:
        key = f"[{render_type(table_field.key_type)}]"
    else:
        key = f"{table_field.name}{'?' if table_field.optional else ''}"
    return f"{key}: {render_type(table_field.type)}"


def _tag(name: str, rest: str | None = None) -> str:
    if rest:
        return f"--- @{name} {rest}"
    return f"--- @{name}"


def _prose(description: str | None) -> list[str]:
    if description is None:
        return []
    return [f"--- {line}" if line else "---" for line in description.split("\n")]


def _alias_block(alias: AliasDecl) -> list[str]:
    head = alias.name
    if alias.base is not None:
        head += f" {render_type(alias.base)}"
    lines = _prose(alias.description)
    lines.append(_tag("alias", head))
    for member in alias.members:
        line = f"--- | {render_type(member.type)}"
        if member.description:
            line += f" # {member.description}"
        lines.append(line)
    return lines


def _class_block(class_decl: ClassDecl) -> list[str]:
    head = class_decl.name
    if class_decl.parents:
        head += " : " + ", ".join(class_decl.parents)
    lines = _prose(class_decl.description)
    lines.append(_tag("class", head))
    lines.extend(_field_line(f) for f in class_decl.fields)
    return lines


def _field_line(field_decl: FieldDecl) -> str:
    if field_decl.key_type is not None:
        key = f"[{render_type(field_decl.key_type)}]"
    else:
        key = f"{field_decl.name}{'?' if field_decl.optional else ''}"
    text = f"{key} {render_type(field_decl.type)}"
    if field_decl.description:
        text += f" # {field_decl.description}"
    return _tag("field", text)


def _param_line(param: Param) -> str:
    text = f"{param.name}{'?' if param.optional else ''} {render_type(param.type)}"
    if param.description:
        text += f" # {param.description}"
    return _tag("param", text)


def _return_line(ret: Return) -> str:
    text = render_type(ret.type)
    if ret.variadic:
        text += " ..."
    elif ret.name is not None:
        text += f" {ret.name}"
    if ret.description:
        text += f" # {ret.description}"
    return _tag("return", text)


def _function_block(function: FunctionDecl) -> list[str]:
    lines = _prose(function.description)
    tags: list[str] = []
    if function.deprecated:
        tags.append(_tag("deprecated", function.deprecation_reason))
    for see in function.see:
        tags.append(_tag("see", f"{see.target} {see.description}" if see.description else see.target))
    if function.is_async:
        tags.append(_tag("async"))
    if function.nodiscard:
        tags.append(_tag("nodiscard"))
    tags.extend(_param_line(p) for p in function.params)
    tags.extend(_return_line(r) for r in function.returns)
    if lines and tags:
        lines.append("---")
    lines.extend(tags)
    lines.append(f"function {function.qualified_name}({', '.join(function.signature)}) end")
    return lines
