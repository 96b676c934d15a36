# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loading of deployment documents into the attributed entity graph."""

from deployml.parser.entity_graph import (
    Entity,
    EntityGraph,
    find_type_entity,
    resolve_inheritance_chain,
)
from deployml.parser.loader import ParseError, load, load_file

__all__ = [
    "Entity",
    "EntityGraph",
    "find_type_entity",
    "resolve_inheritance_chain",
    "ParseError",
    "load",
    "load_file",
]
