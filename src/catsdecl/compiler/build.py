# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Incremental loading of a declaration library into a DeclarationCorpus.

Implements a CMake-style cache: an artifact is reused when it already exists
and is strictly newer than the corresponding source file. Declaration files
have no imports of their own; the language server merges every file under
the library root into one symbol table, so each file is compiled on its own
and cross-file consistency is left to semantic analysis.
"""

from __future__ import annotations

from pathlib import Path

from catsdecl.compiler.artifact import ARTIFACT_SUFFIX, read_artifact, write_artifact
from catsdecl.compiler.parser import parse
from catsdecl.model.entities import DeclarationCorpus, DeclarationFile
from catsdecl.parser.lexer import LexerError
from catsdecl.parser.type_parser import ParseError

# ###############
# Public Interface
# ###############

SOURCE_SUFFIX = ".lua"

# Declaration files shipped with the package (string, peripheral, shell).
BUNDLED_LIBRARY_DIR = Path(__file__).parent.parent / "library"


class CompilerError(Exception):
    """Raised when a declaration file cannot be read or parsed."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


def find_sources(library_dir: Path) -> list[Path]:
    """Return every declaration file under *library_dir*, sorted by path."""
    return sorted(p for p in library_dir.rglob(f"*{SOURCE_SUFFIX}") if p.is_file())


def compile_library(library_dir: Path, build_dir: Path) -> DeclarationCorpus:
    """Compile every declaration file under *library_dir*.

    For each file, the compiler:
    1. Checks whether an up-to-date artifact already exists (cache hit).
    2. Parses the source file if no valid cache is found.
    3. Writes the artifact to *build_dir* (mirroring the source layout).

    Args:
        library_dir: Root directory of the declaration library.
        build_dir: Root directory for compiled artifacts.

    Returns:
        A corpus keyed by library-relative path without suffix
        (e.g. ``"peripheral"`` or ``"cc/shell/completion"``).

    Raises:
        CompilerError: If the library directory is missing, or a file cannot
            be read or parsed.
    """
    if not library_dir.is_dir():
        raise CompilerError(f"Library directory '{library_dir}' does not exist")
    corpus = DeclarationCorpus()
    for source_file in find_sources(library_dir):
        key = _rel_key(source_file, library_dir)
        artifact = _artifact_path(key, build_dir)
        if _is_up_to_date(source_file, artifact):
            try:
                corpus.files[key] = read_artifact(artifact)
                continue
            except ValueError:
                # Artifact from another format version; fall through to recompile.
                pass
        decl_file = compile_file(source_file)
        write_artifact(decl_file, artifact)
        corpus.files[key] = decl_file
    return corpus


def load_library(library_dir: Path) -> DeclarationCorpus:
    """Parse every declaration file under *library_dir* without using a cache.

    Raises:
        CompilerError: If the library directory is missing, or a file cannot
            be read or parsed.
    """
    if not library_dir.is_dir():
        raise CompilerError(f"Library directory '{library_dir}' does not exist")
    return DeclarationCorpus(
        files={_rel_key(f, library_dir): compile_file(f) for f in find_sources(library_dir)},
    )


def load_bundled_library() -> DeclarationCorpus:
    """Load the CC: Tweaked declaration corpus shipped with the package."""
    return load_library(BUNDLED_LIBRARY_DIR)


def compile_file(source_file: Path) -> DeclarationFile:
    """Read and parse a single declaration file.

    Raises:
        CompilerError: If the file cannot be read or parsed.
    """
    try:
        source_text = source_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CompilerError(f"Cannot read source file '{source_file}': {exc}") from exc

    try:
        return parse(source_text)
    except (LexerError, ParseError) as exc:
        raise CompilerError(f"Parse error in '{source_file}': {exc}") from exc


# ################
# Implementation
# ################


def _rel_key(source_file: Path, library_dir: Path) -> str:
    """Return the canonical key for a source file (library-relative path without extension)."""
    rel = source_file.relative_to(library_dir)
    return str(rel.with_suffix("")).replace("\\", "/")


def _artifact_path(key: str, build_dir: Path) -> Path:
    """Return the artifact path for a given canonical key.

    The key segments (split on ``/``) map directly to subdirectory components
    under *build_dir* (e.g. ``"cc/completion"`` → ``build_dir/cc/completion.decl.json``).
    """
    parts = key.split("/")
    artifact_dir = build_dir
    for part in parts[:-1]:
        artifact_dir = artifact_dir / part
    return artifact_dir / (parts[-1] + ARTIFACT_SUFFIX)


def _is_up_to_date(source_file: Path, artifact: Path) -> bool:
    """Return True if *artifact* exists and is strictly newer than *source_file*."""
    if not artifact.exists():
        return False
    return artifact.stat().st_mtime > source_file.stat().st_mtime
