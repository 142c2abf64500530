# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the catsdecl command-line interface."""

import argparse
import shutil
import sys
from pathlib import Path

from catsdecl.checker.calls import check_call, parse_call
from catsdecl.compiler.artifact import serialize_corpus
from catsdecl.compiler.build import (
    BUNDLED_LIBRARY_DIR,
    CompilerError,
    compile_file,
    compile_library,
    find_sources,
    load_bundled_library,
)
from catsdecl.compiler.semantic_analysis import analyze
from catsdecl.compiler.symbols import SymbolTable
from catsdecl.compiler.writer import write
from catsdecl.model.entities import DeclarationCorpus
from catsdecl.parser.lexer import LexerError
from catsdecl.parser.type_parser import ParseError
from catsdecl.validation.checks import validate
from catsdecl.workspace.config import (
    CONFIG_FILE_NAME,
    WorkspaceConfig,
    WorkspaceConfigError,
    load_workspace_config,
    render_workspace_config,
)
from catsdecl.workspace.luarc import LUARC_FILE_NAME, builtin_conflicts, write_luarc

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the catsdecl CLI."""
    parser = argparse.ArgumentParser(
        prog="catsdecl",
        description="catsdecl: LuaCATS declaration corpus toolkit for CC: Tweaked",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Initialize a new declaration workspace",
        description=f"Write {CONFIG_FILE_NAME} and copy the bundled declaration library into the directory.",
    )
    init_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to initialize the workspace in (default: current directory)",
    )

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check the declaration library for errors",
        description="Parse, analyze and validate every declaration file of the workspace.",
    )
    check_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory containing the catsdecl workspace (default: current directory)",
    )

    # format subcommand
    format_parser = subparsers.add_parser(
        "format",
        help="Rewrite declaration files in canonical form",
        description="Rewrite every declaration file of the workspace in canonical LuaCATS layout.",
    )
    format_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory containing the catsdecl workspace (default: current directory)",
    )
    format_parser.add_argument(
        "--check",
        action="store_true",
        help="Report files that are not canonical instead of rewriting them",
    )

    # luarc subcommand
    luarc_parser = subparsers.add_parser(
        "luarc",
        help=f"Write the language-server {LUARC_FILE_NAME}",
        description=(
            f"Write {LUARC_FILE_NAME} registering the declaration library and disabling "
            "the builtin libraries it replaces."
        ),
    )
    luarc_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory containing the catsdecl workspace (default: current directory)",
    )

    # dump subcommand
    dump_parser = subparsers.add_parser(
        "dump",
        help="Export the declaration corpus as JSON",
        description="Compile the workspace library and write the merged corpus as JSON.",
    )
    dump_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory containing the catsdecl workspace (default: current directory)",
    )
    dump_parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="File to write the JSON to (default: standard output)",
    )

    # call subcommand
    call_parser = subparsers.add_parser(
        "call",
        help="Type-check a call expression against the corpus",
        description='Check a call such as \'peripheral.wrap("top")\' against the declared signature.',
    )
    call_parser.add_argument("expression", help="Lua call expression with literal arguments")
    call_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory containing the catsdecl workspace (default: current directory)",
    )
    call_parser.add_argument(
        "--bundled",
        action="store_true",
        help="Check against the bundled declaration library instead of a workspace",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################

_DEFAULT_LIBRARY_DIR = "library"
_DEFAULT_DISABLED_BUILTINS = ["string"]


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "init":
        return _cmd_init(args)
    if args.command == "check":
        return _cmd_check(args)
    if args.command == "format":
        return _cmd_format(args)
    if args.command == "luarc":
        return _cmd_luarc(args)
    if args.command == "dump":
        return _cmd_dump(args)
    if args.command == "call":
        return _cmd_call(args)
    return 0


def _load_workspace(directory_arg: str) -> tuple[Path, WorkspaceConfig] | None:
    """Resolve the workspace root and load its configuration, printing any error."""
    directory = Path(directory_arg).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return None

    config_file = directory / CONFIG_FILE_NAME
    if not config_file.exists():
        print(
            f"Error: no catsdecl workspace found at '{directory}'. Run 'catsdecl init' to initialize a workspace.",
            file=sys.stderr,
        )
        return None

    try:
        config = load_workspace_config(config_file)
    except WorkspaceConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None
    return directory, config


def _compile_workspace(directory: Path, config: WorkspaceConfig) -> DeclarationCorpus | None:
    try:
        return compile_library(directory / config.library, directory / config.build_directory)
    except CompilerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None


def _cmd_init(args: argparse.Namespace) -> int:
    """Handle the init subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    config_file = directory / CONFIG_FILE_NAME
    if config_file.exists():
        print(f"Error: workspace already exists at '{config_file}'.", file=sys.stderr)
        return 1

    library_dir = directory / _DEFAULT_LIBRARY_DIR
    library_dir.mkdir(exist_ok=True)
    for source in find_sources(BUNDLED_LIBRARY_DIR):
        target = library_dir / source.relative_to(BUNDLED_LIBRARY_DIR)
        if target.exists():
            print(f"  keeping existing '{target.relative_to(directory)}'")
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, target)

    config = WorkspaceConfig(library=_DEFAULT_LIBRARY_DIR, disable_builtins=list(_DEFAULT_DISABLED_BUILTINS))
    config_content = (
        "# catsdecl Workspace Configuration\n"
        "# This file marks the root of a LuaCATS declaration workspace.\n"
        "\n" + render_workspace_config(config)
    )
    config_file.write_text(config_content, encoding="utf-8")
    print(f"Initialized catsdecl workspace at '{config_file}'.")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    workspace = _load_workspace(args.directory)
    if workspace is None:
        return 1
    directory, config = workspace

    library_dir = directory / config.library
    if library_dir.is_dir() and not find_sources(library_dir):
        print("No declaration files found in the library.")
        return 0

    corpus = _compile_workspace(directory, config)
    if corpus is None:
        return 1
    print(f"Checking {len(corpus.files)} declaration file(s)...")

    has_errors = False
    for error in analyze(corpus):
        print(f"Error: {error.message}", file=sys.stderr)
        has_errors = True

    result = validate(corpus)
    for warning in [*result.warnings, *builtin_conflicts(config, corpus)]:
        print(f"Warning: {warning.message}")
    for error in result.errors:
        print(f"Error: {error.message}", file=sys.stderr)
        has_errors = True

    if has_errors:
        return 1

    print("No issues found.")
    return 0


def _cmd_format(args: argparse.Namespace) -> int:
    """Handle the format subcommand."""
    workspace = _load_workspace(args.directory)
    if workspace is None:
        return 1
    directory, config = workspace

    library_dir = directory / config.library
    if not library_dir.is_dir():
        print(f"Error: Library directory '{library_dir}' does not exist", file=sys.stderr)
        return 1

    changed = 0
    for source_file in find_sources(library_dir):
        try:
            decl_file = compile_file(source_file)
        except CompilerError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        canonical = write(decl_file)
        if source_file.read_text(encoding="utf-8") == canonical:
            continue
        changed += 1
        rel = source_file.relative_to(directory)
        if args.check:
            print(f"Would reformat '{rel}'")
        else:
            source_file.write_text(canonical, encoding="utf-8")
            print(f"Reformatted '{rel}'")

    if args.check and changed:
        print(f"{changed} file(s) would be reformatted.")
        return 1
    if not changed:
        print("All declaration files are canonical.")
    return 0


def _cmd_luarc(args: argparse.Namespace) -> int:
    """Handle the luarc subcommand."""
    workspace = _load_workspace(args.directory)
    if workspace is None:
        return 1
    directory, config = workspace

    corpus = _compile_workspace(directory, config)
    if corpus is None:
        return 1
    for warning in builtin_conflicts(config, corpus):
        print(f"Warning: {warning.message}")

    luarc_file = directory / LUARC_FILE_NAME
    try:
        write_luarc(luarc_file, config)
    except WorkspaceConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"Wrote '{luarc_file}'.")
    return 0


def _cmd_dump(args: argparse.Namespace) -> int:
    """Handle the dump subcommand."""
    workspace = _load_workspace(args.directory)
    if workspace is None:
        return 1
    directory, config = workspace

    corpus = _compile_workspace(directory, config)
    if corpus is None:
        return 1

    data = serialize_corpus(corpus, indent=2)
    if args.output is None:
        print(data)
        return 0

    output = Path(args.output)
    try:
        output.write_text(data + "\n", encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot write '{output}': {exc}", file=sys.stderr)
        return 1
    print(f"Wrote {len(corpus.files)} declaration file(s) to '{output}'.")
    return 0


def _cmd_call(args: argparse.Namespace) -> int:
    """Handle the call subcommand."""
    if args.bundled:
        corpus = load_bundled_library()
    else:
        workspace = _load_workspace(args.directory)
        if workspace is None:
            return 1
        directory, config = workspace
        corpus = _compile_workspace(directory, config)
        if corpus is None:
            return 1

    try:
        call = parse_call(args.expression)
    except (LexerError, ParseError) as exc:
        print(f"Error: invalid call expression: {exc}", file=sys.stderr)
        return 1

    diagnostics = check_call(call, SymbolTable.from_corpus(corpus))
    for diagnostic in diagnostics:
        print(f"Error: {diagnostic.message}", file=sys.stderr)
    if diagnostics:
        return 1

    print(f"Call to '{call.callee}' type-checks.")
    return 0
