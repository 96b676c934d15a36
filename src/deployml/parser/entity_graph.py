# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Format-agnostic attributed entity graph.

A loaded deployment document becomes a tree of :class:`Entity` nodes. Each
entity has a stable id (the path of keys from the document root), optional
named children, and an optional scalar value. On top of this containment tree
an entity may point at another entity acting as its *type*, and type entities
point at their parent type through ``extends``. Both references are resolved
through a name index built once when the graph is created.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

COMPONENTS = "components"
RELATIONS = "relations"
COMPONENT_TYPES = "component_types"
RELATION_TYPES = "relation_types"
TYPE_NAMESPACES = (COMPONENT_TYPES, RELATION_TYPES)

EntityId = tuple[str, ...]


@dataclass(eq=False)
class Entity:
    """A node of the attributed entity graph.

    Attributes:
        id: Path of keys from the document root to this entity.
        value: Scalar value in text form, or ``None`` for mappings and nulls.
        children: Named child entities in document order.
    """

    id: EntityId
    value: str | None = None
    children: dict[str, Entity] = field(default_factory=dict)

    @property
    def name(self) -> str:
        """The last segment of the id (empty for the document root)."""
        return self.id[-1] if self.id else ""

    @property
    def is_scalar(self) -> bool:
        return not self.children

    def get_child(self, name: str) -> Entity | None:
        return self.children.get(name)

    def get_children(self) -> list[Entity]:
        return list(self.children.values())

    def get_value(self, name: str) -> str | None:
        """Return the scalar value of the child *name*, or ``None``."""
        child = self.children.get(name)
        return child.value if child is not None else None


class EntityGraph:
    """An immutable graph of entities with a type-name index.

    Args:
        root: Root entity of the loaded document.
        name: Name of the document (usually the source file stem).
    """

    def __init__(self, root: Entity, name: str = "") -> None:
        self.root = root
        self.name = name
        self._entities: dict[EntityId, Entity] = {}
        for entity in _walk(root):
            self._entities[entity.id] = entity
        self._type_index: dict[str, dict[str, Entity]] = {}
        for namespace in TYPE_NAMESPACES:
            section = root.get_child(namespace)
            types = section.get_children() if section is not None else []
            self._type_index[namespace] = {t.name: t for t in types}

    def get_entity(self, entity_id: EntityId) -> Entity | None:
        return self._entities.get(entity_id)

    def get_type(self, namespace: str, name: str) -> Entity | None:
        """Look up a type entity by name within *namespace*."""
        return self._type_index.get(namespace, {}).get(name)

    def type_names(self, namespace: str) -> list[str]:
        return list(self._type_index.get(namespace, {}))

    def __len__(self) -> int:
        return len(self._entities)


def find_type_entity(graph: EntityGraph, entity: Entity) -> Entity | None:
    """Return the type entity *entity* declares itself an instance of.

    Component instances (``components/<name>``) resolve in
    ``component_types``; relation entries (``components/<name>/relations/<i>``)
    resolve in ``relation_types``. Relation entries written in the short form
    ``- hosted_on: target`` use their single key as the type name.

    Returns ``None`` when the entity declares no type or the type is unknown;
    the caller decides whether that is an error.
    """
    namespace = _type_namespace(entity)
    if namespace is None:
        return None
    type_name = declared_type_name(entity)
    if type_name is None:
        return None
    return graph.get_type(namespace, type_name)


def declared_type_name(entity: Entity) -> str | None:
    """Return the type name an instance or relation entry declares, if any."""
    type_name = entity.get_value("type")
    if type_name:
        return type_name
    if _type_namespace(entity) == RELATION_TYPES and len(entity.children) == 1:
        return next(iter(entity.children))
    return None


def resolve_inheritance_chain(graph: EntityGraph, start_type: Entity) -> list[Entity]:
    """Return *start_type* followed by its ancestors, nearest first.

    The walk follows ``extends`` until a type declares no parent, names a
    parent that is not defined, or a type is reached a second time. An
    inheritance cycle ends the chain instead of raising.
    """
    namespace = start_type.id[0] if start_type.id else ""
    chain: list[Entity] = []
    visited: set[EntityId] = set()
    current: Entity | None = start_type
    while current is not None:
        if current.id in visited:
            logger.warning("Inheritance cycle at type '%s'; ending type chain", current.name)
            break
        visited.add(current.id)
        chain.append(current)
        parent_name = current.get_value("extends")
        if not parent_name:
            break
        current = graph.get_type(namespace, parent_name)
        if current is None:
            logger.warning("Type '%s' extends unknown type '%s'", chain[-1].name, parent_name)
    return chain


# ################
# Implementation
# ################


def _walk(entity: Entity) -> Iterator[Entity]:
    yield entity
    for child in entity.children.values():
        yield from _walk(child)


def _type_namespace(entity: Entity) -> str | None:
    """Return the type namespace an instance entity resolves its type in."""
    if not entity.id or entity.id[0] != COMPONENTS:
        return None
    if len(entity.id) == 2:
        return COMPONENT_TYPES
    if len(entity.id) == 4 and entity.id[2] == RELATIONS:
        return RELATION_TYPES
    return None
