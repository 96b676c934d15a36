# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Load YAML deployment documents into an :class:`EntityGraph`."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from deployml.parser.entity_graph import RELATION_TYPES, Entity, EntityGraph, EntityId

# ###############
# Public Interface
# ###############

# Assumed when a document does not declare its own relation types.
DEFAULT_RELATION_TYPES: dict[str, dict[str, Any]] = {
    "depends_on": {"extends": None},
    "hosted_on": {"extends": "depends_on"},
    "connects_to": {"extends": "depends_on"},
}


class ParseError(Exception):
    """Raised when a deployment document cannot be read or is malformed."""


def load(text: str, name: str = "") -> EntityGraph:
    """Parse YAML *text* into an entity graph.

    Mappings become entities with named children, lists become entities whose
    children are named by index (``"0"``, ``"1"``, ...), and scalars are kept in
    text form.

    Raises:
        ParseError: If the text is not valid YAML or not a mapping at the top level.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ParseError(f"Invalid YAML in deployment model '{name}': {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ParseError(f"Deployment model '{name}' must be a YAML mapping")

    if RELATION_TYPES not in data:
        data = {**data, RELATION_TYPES: DEFAULT_RELATION_TYPES}

    return EntityGraph(_build_entity((), data), name=name)


def load_file(path: Path) -> EntityGraph:
    """Read and parse the deployment document at *path*.

    The graph is named after the file stem.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ParseError(f"Cannot read deployment model '{path}': {exc}") from exc
    return load(text, name=path.stem)


# ################
# Implementation
# ################


def _build_entity(entity_id: EntityId, data: Any) -> Entity:
    if isinstance(data, dict):
        children = {str(key): _build_entity(entity_id + (str(key),), value) for key, value in data.items()}
        return Entity(id=entity_id, children=children)
    if isinstance(data, list):
        children = {str(index): _build_entity(entity_id + (str(index),), value) for index, value in enumerate(data)}
        return Entity(id=entity_id, children=children)
    return Entity(id=entity_id, value=_scalar_text(data))


def _scalar_text(value: Any) -> str | None:
    if value is None:
        return None
    # bool is checked first because it is a subclass of int.
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
