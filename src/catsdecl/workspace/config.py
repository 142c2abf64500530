# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the catsdecl workspace configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".catsdecl.yaml"
DEFAULT_BUILD_DIRECTORY = ".catsdecl-build"
DEFAULT_RUNTIME_VERSION = "Lua 5.2"


class WorkspaceConfigError(Exception):
    """Raised when a workspace configuration file is invalid or cannot be loaded."""


@dataclass
class WorkspaceConfig:
    """The parsed configuration for a catsdecl workspace.

    Attributes:
        library: Relative path (from the workspace root) of the declaration library.
        build_directory: Relative path (from the workspace root) for compiled artifacts.
        runtime_version: Lua version the language server should assume.
        disable_builtins: Language-server builtin libraries replaced by the corpus.
    """

    library: str
    build_directory: str = DEFAULT_BUILD_DIRECTORY
    runtime_version: str = DEFAULT_RUNTIME_VERSION
    disable_builtins: list[str] = field(default_factory=list)


def load_workspace_config(path: Path) -> WorkspaceConfig:
    """Load and parse a catsdecl workspace configuration file.

    Args:
        path: Path to the `.catsdecl.yaml` file.

    Returns:
        A WorkspaceConfig instance populated from the file.

    Raises:
        WorkspaceConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise WorkspaceConfigError(f"Workspace config file not found: {path}") from None
    except (OSError, UnicodeDecodeError) as exc:
        raise WorkspaceConfigError(f"Cannot read workspace config file: {exc}") from exc

    return parse_workspace_config(text, source_label=str(path))


def parse_workspace_config(text: str, source_label: str = "<string>") -> WorkspaceConfig:
    """Parse workspace config YAML text into a WorkspaceConfig.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).

    Returns:
        A WorkspaceConfig instance.

    Raises:
        WorkspaceConfigError: If the YAML is invalid or required fields are missing.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise WorkspaceConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if not isinstance(data, dict):
        raise WorkspaceConfigError(f"{source_label}: workspace config must be a YAML mapping")

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise WorkspaceConfigError(f"{source_label}: unknown field(s) {', '.join(repr(k) for k in unknown)}")

    library = _require_string(data, "library", source_label)
    build_directory = _optional_string(data, "build-directory", DEFAULT_BUILD_DIRECTORY, source_label)
    runtime_version = _optional_string(data, "runtime-version", DEFAULT_RUNTIME_VERSION, source_label)

    disable_builtins: list[str] = []
    if "disable-builtins" in data:
        raw = data["disable-builtins"]
        if not isinstance(raw, list) or not all(isinstance(name, str) for name in raw):
            raise WorkspaceConfigError(f"{source_label}: 'disable-builtins' must be a list of strings")
        disable_builtins = list(raw)

    return WorkspaceConfig(
        library=library,
        build_directory=build_directory,
        runtime_version=runtime_version,
        disable_builtins=disable_builtins,
    )


def render_workspace_config(config: WorkspaceConfig) -> str:
    """Render *config* as YAML in the layout :func:`parse_workspace_config` reads."""
    data: dict[str, object] = {
        "library": config.library,
        "build-directory": config.build_directory,
        "runtime-version": config.runtime_version,
        "disable-builtins": list(config.disable_builtins),
    }
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


# ################
# Implementation
# ################

_KNOWN_KEYS: frozenset[str] = frozenset({"library", "build-directory", "runtime-version", "disable-builtins"})


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    """Extract a required string field from a mapping, raising WorkspaceConfigError if missing."""
    if key not in mapping:
        raise WorkspaceConfigError(f"{source_label}: missing required field '{key}'")
    value = mapping[key]
    if not isinstance(value, str):
        raise WorkspaceConfigError(f"{source_label}: '{key}' must be a string")
    return value


def _optional_string(mapping: dict[str, object], key: str, default: str, source_label: str) -> str:
    if key not in mapping:
        return default
    return _require_string(mapping, key, source_label)
