# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Serialization and deserialization of compiled declaration artifacts.

Artifacts are stored as compact JSON files for portability and human-readability.
The format is versioned so future schema changes can be detected.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from catsdecl.model.entities import DeclarationCorpus, DeclarationFile

# ###############
# Public Interface
# ###############

ARTIFACT_FORMAT_VERSION = "1"
ARTIFACT_SUFFIX = ".decl.json"


def serialize(decl_file: DeclarationFile) -> str:
    """Serialize a DeclarationFile to a compact JSON string."""
    return json.dumps(_envelope("file", decl_file.model_dump(mode="json")), separators=(",", ":"))


def deserialize(data: str) -> DeclarationFile:
    """Deserialize a DeclarationFile from a JSON string.

    Args:
        data: JSON string produced by :func:`serialize`.

    Returns:
        The reconstructed :class:`DeclarationFile` model.

    Raises:
        ValueError: If the artifact format version is not recognised or the
            payload does not match the model.
    """
    return _validated(DeclarationFile, _open_envelope(data, "file"))


def serialize_corpus(corpus: DeclarationCorpus, *, indent: int | None = None) -> str:
    """Serialize a whole corpus; *indent* switches to pretty-printed output."""
    payload = _envelope("corpus", corpus.model_dump(mode="json"))
    if indent is None:
        return json.dumps(payload, separators=(",", ":"))
    return json.dumps(payload, indent=indent)


def deserialize_corpus(data: str) -> DeclarationCorpus:
    """Deserialize a corpus produced by :func:`serialize_corpus`."""
    return _validated(DeclarationCorpus, _open_envelope(data, "corpus"))


def write_artifact(decl_file: DeclarationFile, path: Path) -> None:
    """Write a compiled artifact to *path*, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize(decl_file), encoding="utf-8")


def read_artifact(path: Path) -> DeclarationFile:
    """Read and deserialize a compiled artifact from *path*."""
    return deserialize(path.read_text(encoding="utf-8"))


# ################
# Implementation
# ################


def _envelope(key: str, payload: dict[str, Any]) -> dict[str, Any]:
    return {"v": ARTIFACT_FORMAT_VERSION, key: payload}


def _open_envelope(data: str, key: str) -> Any:
    try:
        obj = json.loads(data)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid artifact JSON: {exc}") from exc
    if not isinstance(obj, dict):
        raise ValueError("Artifact must be a JSON object")
    version = obj.get("v")
    if version != ARTIFACT_FORMAT_VERSION:
        raise ValueError(f"Unsupported artifact format version: {version!r}")
    if key not in obj:
        raise ValueError(f"Artifact has no {key!r} payload")
    return obj[key]


def _validated(model: type[DeclarationFile] | type[DeclarationCorpus], payload: Any) -> Any:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid artifact payload: {exc}") from exc
