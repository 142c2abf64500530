# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for call-site checking against the bundled declarations."""

import pytest

from catsdecl.checker.calls import Call, check_call, check_value, parse_call, parse_value
from catsdecl.compiler.build import load_bundled_library
from catsdecl.compiler.parser import parse
from catsdecl.compiler.symbols import SymbolTable
from catsdecl.model.entities import DeclarationCorpus
from catsdecl.model.types import LiteralType, NamedType
from catsdecl.parser.lexer import LexerError
from catsdecl.parser.type_parser import ParseError

# ###############
# Test Helpers
# ###############


@pytest.fixture(scope="module")
def bundled() -> SymbolTable:
    return SymbolTable.from_corpus(load_bundled_library())


def _diagnose(text: str, symbols: SymbolTable) -> list[str]:
    return [d.message for d in check_call(parse_call(text), symbols)]


# ###############
# Parsing Calls
# ###############


class TestParseCall:
    def test_literal_arguments(self) -> None:
        call = parse_call('peripheral.wrap("top")')
        assert call == Call(callee="peripheral.wrap", args=(LiteralType(value="top"),))

    def test_no_arguments(self) -> None:
        assert parse_call("shell.exit()") == Call(callee="shell.exit")

    def test_number_and_boolean_arguments(self) -> None:
        call = parse_call("f(3, 1.5, -2, true, false, nil)")
        assert call.args == (
            LiteralType(value=3),
            LiteralType(value=1.5),
            LiteralType(value=-2),
            LiteralType(value=True),
            LiteralType(value=False),
            NamedType(name="nil"),
        )

    def test_method_call(self) -> None:
        assert parse_call("s:rep(3)").callee == "s:rep"

    def test_non_literal_arguments(self) -> None:
        call = parse_call('shell.run(os.getenv("X"), {1, {2}}, name)')
        assert call.args == (NamedType(name="any"), NamedType(name="table"), NamedType(name="any"))

    def test_unclosed_call(self) -> None:
        with pytest.raises(ParseError):
            parse_call('shell.run("ls"')

    def test_trailing_input(self) -> None:
        with pytest.raises(ParseError, match="Unexpected"):
            parse_call("shell.exit() shell.exit()")

    def test_callee_must_be_a_name(self) -> None:
        with pytest.raises(ParseError):
            parse_call("42()")

    def test_unterminated_table(self) -> None:
        with pytest.raises(ParseError, match="Unterminated"):
            parse_call("shell.run({1, 2)")

    def test_unexpected_character(self) -> None:
        with pytest.raises(LexerError):
            parse_call("shell.run($)")


class TestParseValue:
    def test_string(self) -> None:
        assert parse_value('"top"') == LiteralType(value="top")

    def test_nil(self) -> None:
        assert parse_value("nil") == NamedType(name="nil")

    def test_more_than_one_value(self) -> None:
        with pytest.raises(ParseError):
            parse_value('"a" "b"')


# ###############
# Checking Calls
# ###############


class TestCheckCall:
    def test_valid_call(self, bundled: SymbolTable) -> None:
        assert _diagnose('string.rep("a", 3)', bundled) == []

    def test_wrap_side(self, bundled: SymbolTable) -> None:
        assert _diagnose('peripheral.wrap("top")', bundled) == []

    def test_missing_required_argument(self, bundled: SymbolTable) -> None:
        assert _diagnose("shell.setPath()", bundled) == [
            "Missing required argument #1 'path' in call to 'shell.setPath'."
        ]

    def test_missing_optional_argument_is_fine(self, bundled: SymbolTable) -> None:
        assert _diagnose("shell.programs()", bundled) == []

    def test_nil_for_optional_parameter(self, bundled: SymbolTable) -> None:
        assert _diagnose('string.rep("a", 3, nil)', bundled) == []
        assert _diagnose("shell.programs(nil)", bundled) == []

    def test_nil_for_required_parameter(self, bundled: SymbolTable) -> None:
        assert _diagnose("shell.setPath(nil)", bundled) == [
            "Argument #1 'path' in call to 'shell.setPath' expects 'string', got 'nil'."
        ]

    def test_type_mismatch(self, bundled: SymbolTable) -> None:
        assert _diagnose('shell.switchTab("x")', bundled) == [
            "Argument #1 'id' in call to 'shell.switchTab' expects 'number', got '\"x\"'."
        ]

    def test_optional_type_mismatch(self, bundled: SymbolTable) -> None:
        assert _diagnose('shell.programs("yes")', bundled) == [
            "Argument #1 'include_hidden' in call to 'shell.programs' expects 'boolean?', got '\"yes\"'."
        ]

    def test_too_many_arguments(self, bundled: SymbolTable) -> None:
        assert _diagnose("shell.exit(1)", bundled) == [
            "Too many arguments in call to 'shell.exit': expected at most 0, got 1."
        ]

    def test_unknown_function(self, bundled: SymbolTable) -> None:
        assert _diagnose('string.split("a")', bundled) == ["Unknown function 'string.split'."]

    def test_variadic_accepts_any_count(self, bundled: SymbolTable) -> None:
        assert _diagnose("shell.run()", bundled) == []
        assert _diagnose('shell.run("ls", "-l", "rom")', bundled) == []

    def test_variadic_arguments_are_type_checked(self, bundled: SymbolTable) -> None:
        assert _diagnose('shell.run("ls", 3)', bundled) == [
            "Argument #2 '...' in call to 'shell.run' expects 'string', got '3'."
        ]

    def test_fixed_parameters_before_variadic(self, bundled: SymbolTable) -> None:
        assert _diagnose("shell.execute()", bundled) == [
            "Missing required argument #1 'command' in call to 'shell.execute'."
        ]
        assert _diagnose('peripheral.call("left", "getItemDetail", 1, true)', bundled) == []

    def test_non_literal_arguments_are_accepted(self, bundled: SymbolTable) -> None:
        assert _diagnose("shell.switchTab(id)", bundled) == []

    def test_method_call_uses_dot_declaration(self, bundled: SymbolTable) -> None:
        assert _diagnose('string:upper("a")', bundled) == []

    def test_union_parameter(self, bundled: SymbolTable) -> None:
        assert _diagnose("string.upper(3)", bundled) == []
        assert _diagnose("string.upper(true)", bundled) == [
            "Argument #1 's' in call to 'string.upper' expects 'string | number', got 'true'."
        ]

    def test_check_call_on_empty_symbols(self) -> None:
        diagnostics = check_call(Call(callee="shell.run"), SymbolTable())
        assert [d.message for d in diagnostics] == ["Unknown function 'shell.run'."]

    def test_undocumented_parameter_keeps_positions(self) -> None:
        source = "--- @class x\nx = {}\n\n--- @param b string\nfunction x.f(a, b) end\n"
        symbols = SymbolTable.from_corpus(DeclarationCorpus(files={"x": parse(source)}))
        assert _diagnose('x.f(1, "s")', symbols) == []
        assert _diagnose("x.f(1, 2)", symbols) == ["Argument #2 'b' in call to 'x.f' expects 'string', got '2'."]
        assert _diagnose('x.f(1, "s", 3)', symbols) == [
            "Too many arguments in call to 'x.f': expected at most 2, got 3."
        ]

    def test_undocumented_variadic_accepts_anything(self) -> None:
        source = "--- @class x\nx = {}\n\n--- @param a string\nfunction x.f(a, ...) end\n"
        symbols = SymbolTable.from_corpus(DeclarationCorpus(files={"x": parse(source)}))
        assert _diagnose('x.f("a", 1, true, nil)', symbols) == []
        assert _diagnose("x.f()", symbols) == ["Missing required argument #1 'a' in call to 'x.f'."]


# ###############
# Checking Values
# ###############


class TestCheckValue:
    def test_side_accepts_top(self, bundled: SymbolTable) -> None:
        assert check_value(parse_value('"top"'), "peripheral.side", bundled)

    def test_side_rejects_diagonal(self, bundled: SymbolTable) -> None:
        assert not check_value(parse_value('"diagonal"'), "peripheral.side", bundled)

    def test_name_accepts_network_names(self, bundled: SymbolTable) -> None:
        assert check_value(parse_value('"monitor_0"'), "peripheral.name", bundled)

    def test_nil_and_optional(self, bundled: SymbolTable) -> None:
        assert check_value(parse_value("nil"), "peripheral.side?", bundled)
        assert not check_value(parse_value("nil"), "peripheral.side", bundled)
