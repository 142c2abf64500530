# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Language-server companion configuration (``.luarc.json``).

The language server ships its own declarations for the Lua standard
library. Any namespace the corpus redeclares (``string``) must be disabled
there, or both sets of declarations end up in the merged symbol table.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from catsdecl.model.entities import DeclarationCorpus
from catsdecl.validation.checks import ValidationWarning
from catsdecl.workspace.config import WorkspaceConfig, WorkspaceConfigError

# ###############
# Public Interface
# ###############

LUARC_FILE_NAME = ".luarc.json"
LUARC_SCHEMA = "https://raw.githubusercontent.com/LuaLS/vscode-lua/master/setting/schema.json"

# Builtin libraries the language server can enable or disable by name.
LANGUAGE_SERVER_BUILTINS: frozenset[str] = frozenset(
    {
        "basic",
        "bit",
        "bit32",
        "builtin",
        "coroutine",
        "debug",
        "ffi",
        "io",
        "jit",
        "jit.profile",
        "jit.util",
        "math",
        "os",
        "package",
        "string",
        "string.buffer",
        "table",
        "table.clear",
        "table.new",
        "utf8",
    }
)


def render_luarc(config: WorkspaceConfig) -> dict[str, Any]:
    """Build the ``.luarc.json`` content for *config*.

    Every disabled builtin maps to ``"disable"`` under ``runtime.builtin`` and
    the declaration library is registered under ``workspace.library``.
    """
    return {
        "$schema": LUARC_SCHEMA,
        "runtime.version": config.runtime_version,
        "runtime.builtin": {name: "disable" for name in sorted(set(config.disable_builtins))},
        "workspace.library": [config.library],
    }


def write_luarc(path: Path, config: WorkspaceConfig) -> None:
    """Write the ``.luarc.json`` for *config* to *path*.

    Raises:
        WorkspaceConfigError: If the file cannot be written.
    """
    try:
        path.write_text(json.dumps(render_luarc(config), indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise WorkspaceConfigError(f"Cannot write '{path}': {exc}") from exc


def builtin_conflicts(config: WorkspaceConfig, corpus: DeclarationCorpus) -> list[ValidationWarning]:
    """Compare the corpus namespaces with the configured builtin disabling.

    Reports namespaces that shadow an enabled language-server builtin,
    disabled names that are not builtins at all, and disabled builtins the
    corpus never redeclares.
    """
    warnings: list[ValidationWarning] = []
    declared = {ns.name for decl_file in corpus.files.values() for ns in decl_file.namespaces}
    disabled = set(config.disable_builtins)

    for name in sorted(declared & LANGUAGE_SERVER_BUILTINS - disabled):
        warnings.append(
            ValidationWarning(
                message=(
                    f"Namespace '{name}' duplicates the language server's builtin '{name}' library; "
                    "add it to 'disable-builtins'."
                )
            )
        )
    for name in sorted(disabled - LANGUAGE_SERVER_BUILTINS):
        warnings.append(ValidationWarning(message=f"'{name}' in 'disable-builtins' is not a language-server builtin."))
    for name in sorted(disabled & LANGUAGE_SERVER_BUILTINS - declared):
        warnings.append(
            ValidationWarning(message=f"Builtin '{name}' is disabled but the corpus does not declare a replacement.")
        )
    return warnings
