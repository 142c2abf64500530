# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Workspace configuration and language-server companion files for catsdecl."""

from catsdecl.workspace.config import (
    CONFIG_FILE_NAME,
    WorkspaceConfig,
    WorkspaceConfigError,
    load_workspace_config,
    parse_workspace_config,
    render_workspace_config,
)
from catsdecl.workspace.luarc import (
    LANGUAGE_SERVER_BUILTINS,
    LUARC_FILE_NAME,
    builtin_conflicts,
    render_luarc,
    write_luarc,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "LANGUAGE_SERVER_BUILTINS",
    "LUARC_FILE_NAME",
    "WorkspaceConfig",
    "WorkspaceConfigError",
    "builtin_conflicts",
    "load_workspace_config",
    "parse_workspace_config",
    "render_luarc",
    "render_workspace_config",
    "write_luarc",
]
