# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Parser for LuaCATS declaration files.

A declaration file is a sequence of ``---`` comment blocks, each attached to
the Lua statement that immediately follows it::

    --- Returns its length.
    ---
    --- @nodiscard
    --- @param s string | number The string to get the length of.
    --- @return number # The length of the string.
    function string.len(s) end

Blocks followed by a blank line (or the end of the file) stand alone and
may only declare classes, aliases, or the file's ``@meta`` marker.
"""

import re
from dataclasses import dataclass, field

from catsdecl.model.entities import (
    AliasDecl,
    AliasMember,
    ClassDecl,
    DeclarationFile,
    FieldDecl,
    FunctionDecl,
    Namespace,
    Param,
    Return,
    SeeRef,
)
from catsdecl.parser.type_parser import ParseError, parse_type_prefix

# ###############
# Public Interface
# ###############


def parse(source: str) -> DeclarationFile:
    """Parse LuaCATS declaration source into a DeclarationFile model.

    Args:
        source: The full text of a declaration ``.lua`` file.

    Returns:
        A DeclarationFile holding every namespace, class, alias and function
        declared in the source.

    Raises:
        ParseError: If an annotation or Lua statement is malformed.
    """
    return _Parser(source).parse()


# ################
# Implementation
# ################

_FUNCTION_RE = re.compile(r"^(?:local\s+)?function\s+([A-Za-z_][\w.:]*)\s*\(([^)]*)\)\s*end$")
_TABLE_RE = re.compile(r"^(?:local\s+)?([A-Za-z_][\w.]*)\s*=\s*\{\s*\}$")
_RETURN_RE = re.compile(r"^return\s+([A-Za-z_][\w.]*)$")
_PARAM_NAME_RE = re.compile(r"^(\.\.\.|[A-Za-z_][\w.]*)(\?)?(?=\s|$)")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_]\w*$")
_LONG_COMMENT_RE = re.compile(r"^--\[(=*)\[")

# Tags that only make sense directly above a function declaration.
_FUNCTION_TAGS: frozenset[str] = frozenset({"param", "return", "deprecated", "nodiscard", "async", "see"})


@dataclass
class _DocLine:
    """One ``---`` line with the dashes (and one following space) removed."""

    line: int
    column: int
    text: str


@dataclass
class _Block:
    """Annotations collected from one comment block."""

    description: list[str] = field(default_factory=list)
    meta: str | None = None
    classes: list[ClassDecl] = field(default_factory=list)
    aliases: list[AliasDecl] = field(default_factory=list)
    params: list[Param] = field(default_factory=list)
    returns: list[Return] = field(default_factory=list)
    see: list[SeeRef] = field(default_factory=list)
    deprecated: bool = False
    deprecation_reason: str | None = None
    nodiscard: bool = False
    is_async: bool = False
    function_tag_line: _DocLine | None = None

    def description_text(self) -> str | None:
        lines = list(self.description)
        while lines and not lines[0]:
            lines.pop(0)
        while lines and not lines[-1]:
            lines.pop()
        return "\n".join(lines) if lines else None


class _Parser:
    """Line-oriented parser that groups doc comments and attaches them to statements."""

    def __init__(self, source: str) -> None:
        self._lines = source.splitlines()
        self._result = DeclarationFile()

    def parse(self) -> DeclarationFile:
        pending: list[_DocLine] = []
        closing: str | None = None
        opened_at = 0
        for index, raw in enumerate(self._lines):
            line_no = index + 1
            stripped = raw.strip()
            if closing is not None:
                if closing in stripped:
                    closing = None
                continue
            long_comment = _LONG_COMMENT_RE.match(stripped)
            if long_comment is not None:
                # --[[ ]] and --[==[ ]==] comments are skipped like plain comments.
                marker = f"]{long_comment.group(1)}]"
                if marker not in stripped[long_comment.end() :]:
                    closing, opened_at = marker, line_no
                continue
            if stripped.startswith("---"):
                pending.append(_doc_line(raw, line_no))
            elif not stripped or stripped.startswith("--"):
                # Blank lines detach a block; plain comments are ignored.
                if pending and not stripped:
                    self._finish_block(pending, None, line_no)
                    pending = []
            else:
                self._finish_block(pending, stripped, line_no)
                pending = []
        if closing is not None:
            raise ParseError("Unterminated block comment", opened_at, 1)
        if pending:
            self._finish_block(pending, None, len(self._lines) + 1)
        return self._result

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _finish_block(self, doc_lines: list[_DocLine], statement: str | None, line_no: int) -> None:
        """Parse *doc_lines* and attach them to *statement* (None for a standalone block)."""
        block = _parse_block(doc_lines)
        if block.meta is not None:
            self._result.meta = block.meta
        self._result.aliases.extend(block.aliases)
        self._result.classes.extend(block.classes)

        function_match = _FUNCTION_RE.match(statement) if statement is not None else None
        if block.function_tag_line is not None and function_match is None:
            tag_line = block.function_tag_line
            raise ParseError(
                "Function annotation is not followed by a function declaration",
                tag_line.line,
                tag_line.column,
            )

        description = block.description_text()
        if statement is None:
            _attach_description(block, description)
            return

        if function_match is not None:
            self._result.functions.append(_build_function(function_match, block, description))
            return

        _attach_description(block, description)
        table_match = _TABLE_RE.match(statement)
        if table_match is not None:
            class_name = block.classes[-1].name if block.classes else None
            self._result.namespaces.append(Namespace(name=table_match.group(1), class_name=class_name))
            return

        return_match = _RETURN_RE.match(statement)
        if return_match is not None:
            self._result.module_return = return_match.group(1)
            return

        raise ParseError(f"Unsupported statement {statement!r}", line_no, 1)


def _doc_line(raw: str, line_no: int) -> _DocLine:
    start = raw.index("---") + 3
    if raw[start : start + 1] == " ":
        start += 1
    return _DocLine(line=line_no, column=start + 1, text=raw[start:].rstrip())


def _attach_description(block: _Block, description: str | None) -> None:
    """Give a non-function block's prose to its class, or failing that its first alias."""
    if description is None:
        return
    if block.classes:
        block.classes[-1].description = description
    elif block.aliases:
        block.aliases[0].description = description


def _build_function(match: re.Match[str], block: _Block, description: str | None) -> FunctionDecl:
    full_name, raw_params = match.group(1), match.group(2)
    namespace: str | None = None
    is_method = False
    name = full_name
    if ":" in full_name:
        namespace, name = full_name.rsplit(":", 1)
        is_method = True
    elif "." in full_name:
        namespace, name = full_name.rsplit(".", 1)
    signature = [p.strip() for p in raw_params.split(",") if p.strip()]
    return FunctionDecl(
        namespace=namespace,
        name=name,
        is_method=is_method,
        signature=signature,
        params=block.params,
        returns=block.returns,
        description=description,
        deprecated=block.deprecated,
        deprecation_reason=block.deprecation_reason,
        nodiscard=block.nodiscard,
        is_async=block.is_async,
        see=block.see,
    )


# ------------------------------------------------------------------
# Comment blocks
# ------------------------------------------------------------------


def _parse_block(doc_lines: list[_DocLine]) -> _Block:
    block = _Block()
    in_fence = False
    open_alias: AliasDecl | None = None
    for doc in doc_lines:
        text = doc.text.lstrip()
        if text.startswith("```"):
            in_fence = not in_fence
        if in_fence or not text.startswith(("@", "|")):
            block.description.append(doc.text)
            continue
        if text.startswith("|"):
            if open_alias is None:
                block.description.append(doc.text)
                continue
            body = text[1:].lstrip()
            member_type, rest = parse_type_prefix(body, line=doc.line, column=_column(doc, body))
            open_alias.members.append(AliasMember(type=member_type, description=_description(rest)))
            continue

        tag, rest = _split_word(text[1:])
        open_alias = None
        if tag in _FUNCTION_TAGS and block.function_tag_line is None:
            block.function_tag_line = doc
        if tag == "meta":
            block.meta = rest
        elif tag == "class":
            block.classes.append(_parse_class(rest, doc))
        elif tag == "field":
            if not block.classes:
                raise ParseError("'@field' outside of a class declaration", doc.line, doc.column)
            block.classes[-1].fields.append(_parse_field(rest, doc))
        elif tag == "alias":
            open_alias = _parse_alias(rest, doc)
            block.aliases.append(open_alias)
        elif tag == "param":
            block.params.append(_parse_param(rest, doc))
        elif tag == "return":
            block.returns.append(_parse_return(rest, doc))
        elif tag == "deprecated":
            block.deprecated = True
            block.deprecation_reason = rest or None
        elif tag == "nodiscard":
            block.nodiscard = True
        elif tag == "async":
            block.is_async = True
        elif tag == "see":
            target, see_text = _split_word(rest)
            if not target:
                raise ParseError("'@see' requires a target", doc.line, doc.column)
            block.see.append(SeeRef(target=target, description=_description(see_text)))
        else:
            raise ParseError(f"Unknown annotation tag '@{tag}'", doc.line, doc.column)
    return block


def _column(doc: _DocLine, fragment: str) -> int:
    """Return the source column where *fragment* starts within *doc*."""
    if not fragment:
        return doc.column + len(doc.text)
    return doc.column + doc.text.find(fragment)


def _description(text: str) -> str | None:
    """Strip a leading ``#`` or ``--`` description marker; empty text becomes None."""
    text = text.strip()
    if text.startswith("#"):
        text = text[1:].strip()
    elif text.startswith("--"):
        text = text[2:].strip()
    return text or None


def _split_word(text: str) -> tuple[str, str]:
    parts = text.split(None, 1)
    if not parts:
        return "", ""
    return parts[0], parts[1].strip() if len(parts) > 1 else ""


def _parse_class(rest: str, doc: _DocLine) -> ClassDecl:
    """Parse: @class <Name> [: <Parent> [, <Parent>]*]"""
    head, _, parents_text = rest.partition(":")
    name = head.strip()
    if not name or len(name.split()) > 1:
        raise ParseError(f"Invalid class name {name!r}", doc.line, doc.column)
    parents: list[str] = []
    if parents_text.strip():
        parents_text = parents_text.split("#", 1)[0]
        parents = [p.strip() for p in parents_text.split(",") if p.strip()]
    return ClassDecl(name=name, parents=parents)


def _parse_field(rest: str, doc: _DocLine) -> FieldDecl:
    """Parse: @field <name>[?] <type> [desc] | @field [<keytype>] <type> [desc]"""
    if rest.startswith("["):
        inner = rest[1:]
        key_type, after_key = parse_type_prefix(inner, line=doc.line, column=_column(doc, inner))
        if not after_key.startswith("]"):
            raise ParseError("Expected ']' after field key type", doc.line, _column(doc, after_key))
        type_text = after_key[1:].strip()
        field_type, desc = parse_type_prefix(type_text, line=doc.line, column=_column(doc, type_text))
        return FieldDecl(key_type=key_type, type=field_type, description=_description(desc))

    match = _PARAM_NAME_RE.match(rest)
    if match is None:
        raise ParseError(f"Invalid field declaration {rest!r}", doc.line, doc.column)
    type_text = rest[match.end() :].strip()
    field_type, desc = parse_type_prefix(type_text, line=doc.line, column=_column(doc, type_text))
    return FieldDecl(
        name=match.group(1),
        type=field_type,
        optional=match.group(2) is not None,
        description=_description(desc),
    )


def _parse_alias(rest: str, doc: _DocLine) -> AliasDecl:
    """Parse: @alias <Name> [<type>] [desc]"""
    name, type_text = _split_word(rest)
    if not name:
        raise ParseError("'@alias' requires a name", doc.line, doc.column)
    if not type_text:
        return AliasDecl(name=name)
    base, desc = parse_type_prefix(type_text, line=doc.line, column=_column(doc, type_text))
    return AliasDecl(name=name, base=base, description=_description(desc))


def _parse_param(rest: str, doc: _DocLine) -> Param:
    """Parse: @param <name>[?] <type> [desc]"""
    match = _PARAM_NAME_RE.match(rest)
    if match is None:
        raise ParseError(f"Invalid parameter declaration {rest!r}", doc.line, doc.column)
    type_text = rest[match.end() :].strip()
    if not type_text:
        raise ParseError(f"Parameter '{match.group(1)}' has no type", doc.line, doc.column)
    param_type, desc = parse_type_prefix(type_text, line=doc.line, column=_column(doc, type_text))
    return Param(
        name=match.group(1),
        type=param_type,
        optional=match.group(2) is not None,
        description=_description(desc),
    )


def _parse_return(rest: str, doc: _DocLine) -> Return:
    """Parse: @return <type> [<name> | ...] [desc]

    The word after the type is a name unless it starts a ``#``/``--``
    description; ``...`` marks zero or more values.
    """
    if not rest:
        raise ParseError("'@return' requires a type", doc.line, doc.column)
    return_type, after = parse_type_prefix(rest, line=doc.line, column=_column(doc, rest))
    if after.startswith(("#", "--")):
        return Return(type=return_type, description=_description(after))
    word, desc = _split_word(after)
    if word == "...":
        return Return(type=return_type, variadic=True, description=_description(desc))
    if _IDENTIFIER_RE.match(word):
        return Return(type=return_type, name=word, description=_description(desc))
    return Return(type=return_type, description=_description(after))
