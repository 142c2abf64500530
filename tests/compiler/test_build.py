# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for incremental loading of a declaration library."""

from __future__ import annotations

import os
import time
from pathlib import Path

import pytest

from catsdecl.compiler.artifact import ARTIFACT_SUFFIX, read_artifact, write_artifact
from catsdecl.compiler.build import (
    BUNDLED_LIBRARY_DIR,
    CompilerError,
    compile_file,
    compile_library,
    find_sources,
    load_bundled_library,
    load_library,
)
from catsdecl.model.entities import DeclarationFile

# ###############
# Helpers
# ###############


def _write(path: Path, content: str, *, mtime_offset: float = -2.0) -> None:
    """Write *content* to *path*, creating parent directories as needed.

    Sets the file's mtime to *mtime_offset* seconds relative to now (default:
    2 seconds in the past) so that subsequently written artifacts are reliably
    newer regardless of filesystem timestamp resolution.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    t = time.time() + mtime_offset
    os.utime(path, (t, t))


def _artifact(build_dir: Path, key: str) -> Path:
    """Return the expected artifact path for a canonical key."""
    parts = key.split("/")
    artifact_dir = build_dir
    for part in parts[:-1]:
        artifact_dir = artifact_dir / part
    return artifact_dir / (parts[-1] + ARTIFACT_SUFFIX)


# ###############
# Single-file compilation
# ###############


class TestCompileFile:
    def test_compiles_declaration_file(self, tmp_path: Path) -> None:
        source = tmp_path / "shell.lua"
        _write(source, "--- @class shell\nshell = {}\n\nfunction shell.exit() end\n")
        decl_file = compile_file(source)
        assert decl_file.namespaces[0].name == "shell"
        assert decl_file.functions[0].qualified_name == "shell.exit"

    def test_parse_error_names_the_file(self, tmp_path: Path) -> None:
        source = tmp_path / "broken.lua"
        _write(source, "print('x')\n")
        with pytest.raises(CompilerError, match="Parse error in .*broken.lua.*Line 1"):
            compile_file(source)

    def test_malformed_literal_is_wrapped(self, tmp_path: Path) -> None:
        source = tmp_path / "broken.lua"
        _write(source, '--- @alias x "unterminated\n')
        with pytest.raises(CompilerError, match="Parse error"):
            compile_file(source)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(CompilerError, match="Cannot read source file"):
            compile_file(tmp_path / "missing.lua")

    def test_undecodable_file_raises(self, tmp_path: Path) -> None:
        source = tmp_path / "latin1.lua"
        source.write_bytes(b"--- caf\xe9\n")
        with pytest.raises(CompilerError, match="Cannot read source file"):
            compile_file(source)


# ###############
# Library compilation
# ###############


class TestCompileLibrary:
    def test_keys_are_relative_paths_without_suffix(self, tmp_path: Path) -> None:
        lib = tmp_path / "library"
        _write(lib / "shell.lua", "shell = {}\n")
        _write(lib / "cc" / "completion.lua", "completion = {}\n")
        corpus = compile_library(lib, tmp_path / "build")
        assert sorted(corpus.files) == ["cc/completion", "shell"]

    def test_artifacts_mirror_source_layout(self, tmp_path: Path) -> None:
        lib = tmp_path / "library"
        build = tmp_path / "build"
        _write(lib / "cc" / "completion.lua", "completion = {}\n")
        compile_library(lib, build)
        artifact = _artifact(build, "cc/completion")
        assert artifact.exists()
        assert read_artifact(artifact).namespaces[0].name == "completion"

    def test_non_lua_files_are_ignored(self, tmp_path: Path) -> None:
        lib = tmp_path / "library"
        _write(lib / "README.md", "# not a declaration\n")
        _write(lib / "shell.lua", "shell = {}\n")
        assert list(compile_library(lib, tmp_path / "build").files) == ["shell"]

    def test_missing_library_raises(self, tmp_path: Path) -> None:
        with pytest.raises(CompilerError, match="does not exist"):
            compile_library(tmp_path / "nope", tmp_path / "build")

    def test_find_sources_is_sorted(self, tmp_path: Path) -> None:
        lib = tmp_path / "library"
        for name in ("b.lua", "a.lua", "c/d.lua"):
            _write(lib / name, "")
        assert [p.relative_to(lib).as_posix() for p in find_sources(lib)] == ["a.lua", "b.lua", "c/d.lua"]


# ###############
# Cache behaviour
# ###############


class TestCache:
    def test_cache_hit_skips_recompile(self, tmp_path: Path) -> None:
        lib = tmp_path / "library"
        build = tmp_path / "build"
        _write(lib / "shell.lua", "shell = {}\n")

        compile_library(lib, build)
        artifact = _artifact(build, "shell")
        mtime_first = artifact.stat().st_mtime

        compile_library(lib, build)
        assert artifact.stat().st_mtime == mtime_first

    def test_cached_artifact_is_used(self, tmp_path: Path) -> None:
        lib = tmp_path / "library"
        build = tmp_path / "build"
        _write(lib / "shell.lua", "shell = {}\n")
        # An up-to-date artifact wins over the source, even if they disagree.
        write_artifact(DeclarationFile(meta="from-cache"), _artifact(build, "shell"))
        assert compile_library(lib, build).files["shell"].meta == "from-cache"

    def test_stale_artifact_triggers_recompile(self, tmp_path: Path) -> None:
        lib = tmp_path / "library"
        build = tmp_path / "build"
        _write(lib / "shell.lua", "shell = {}\n")
        compile_library(lib, build)

        _write(lib / "shell.lua", "--- @meta _\nshell = {}\n", mtime_offset=2.0)
        corpus = compile_library(lib, build)
        assert corpus.files["shell"].meta == "_"
        assert read_artifact(_artifact(build, "shell")).meta == "_"

    def test_unreadable_artifact_triggers_recompile(self, tmp_path: Path) -> None:
        lib = tmp_path / "library"
        build = tmp_path / "build"
        _write(lib / "shell.lua", "shell = {}\n")
        artifact = _artifact(build, "shell")
        artifact.parent.mkdir(parents=True)
        artifact.write_text('{"v": "0"}', encoding="utf-8")

        corpus = compile_library(lib, build)
        assert corpus.files["shell"].namespaces[0].name == "shell"
        assert read_artifact(artifact).namespaces[0].name == "shell"


# ###############
# Uncached loading
# ###############


class TestLoadLibrary:
    def test_load_library_writes_no_artifacts(self, tmp_path: Path) -> None:
        lib = tmp_path / "library"
        _write(lib / "shell.lua", "shell = {}\n")
        corpus = load_library(lib)
        assert list(corpus.files) == ["shell"]
        assert not any(p.name.endswith(ARTIFACT_SUFFIX) for p in tmp_path.rglob("*"))

    def test_bundled_library_contents(self) -> None:
        corpus = load_bundled_library()
        assert sorted(corpus.files) == ["peripheral", "shell", "string"]
        assert corpus.files["string"].module_return == "string"

    def test_bundled_library_dir_ships_lua_files(self) -> None:
        assert {p.name for p in find_sources(BUNDLED_LIBRARY_DIR)} == {"peripheral.lua", "shell.lua", "string.lua"}
