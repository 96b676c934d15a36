# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Typed wrappers over entity graph nodes.

A :class:`ModelEntity` wraps one instance entity (a component or a relation)
and resolves its properties and operations through the type chain: values
declared on the instance win over those of its type, and nearer ancestor
types win over farther ones.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from deployml.errors import ModelError
from deployml.model.types import PROPERTY_TYPES, Attribute
from deployml.parser.entity_graph import (
    Entity,
    EntityGraph,
    EntityId,
    find_type_entity,
    resolve_inheritance_chain,
)

T = TypeVar("T")
_E = TypeVar("_E")

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class Artifact:
    """A file or reference an operation or component brings along (script, image, archive)."""

    name: str
    value: str


class BaseElement:
    """Common base of everything that wraps a single entity."""

    DESCRIPTION = Attribute("description", str)

    def __init__(self, entity: Entity, graph: EntityGraph) -> None:
        self.entity = entity
        self.graph = graph

    @property
    def id(self) -> EntityId:
        return self.entity.id

    @property
    def name(self) -> str:
        return self.entity.name

    @property
    def normalized_name(self) -> str:
        """Name usable as an identifier in generated artifacts."""
        return normalize_name(self.name)

    @property
    def description(self) -> str | None:
        return self.get(self.DESCRIPTION)

    def get(self, attribute: Attribute[T]) -> T | None:
        """Return the coerced value of the child *attribute*, or ``None`` if absent."""
        return attribute.coerce(self.entity.get_value(attribute.name), owner=self.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class Property(BaseElement):
    """A property assignment (``name: value``) or definition (``name: {type, default_value}``)."""

    TYPE = Attribute("type", str)
    DEFAULT_VALUE = "default_value"

    def __init__(self, entity: Entity, graph: EntityGraph, declared_type: str | None = None) -> None:
        super().__init__(entity, graph)
        self._declared_type = declared_type

    @property
    def type(self) -> str | None:
        """Declared type name (``string``, ``integer``, ...).

        A plain assignment takes the type of the nearest definition in the type chain.
        """
        if not self.entity.is_scalar:
            own = self.get(self.TYPE)
            if own is not None:
                return own
        return self._declared_type

    @property
    def value(self) -> str | None:
        """The assigned value, or the definition's default value."""
        if self.entity.is_scalar:
            return self.entity.value
        return self.entity.get_value(self.DEFAULT_VALUE)

    def get_typed_value(self) -> object | None:
        """Return :attr:`value` coerced to the declared type (text if none is declared)."""
        target = PROPERTY_TYPES.get(self.type or "string", str)
        return Attribute(self.name, target).coerce(self.value, owner=self.name)


class Operation(BaseElement):
    """A lifecycle operation (``create``, ``configure``, ``start``, ...)."""

    ARTIFACTS = "artifacts"

    @property
    def artifacts(self) -> list[Artifact]:
        """Artifacts implementing this operation.

        The short form ``create: ./create.sh`` yields one artifact named ``cmd``.
        """
        if self.entity.is_scalar:
            return [Artifact("cmd", self.entity.value)] if self.entity.value else []
        return collect_artifacts(self.entity.get_child(self.ARTIFACTS))

    @property
    def has_artifacts(self) -> bool:
        return len(self.artifacts) > 0


class ModelEntity(BaseElement):
    """A typed instance entity with inheritance-resolved properties and operations."""

    PROPERTIES = "properties"
    OPERATIONS = "operations"

    @property
    def type_name(self) -> str | None:
        type_entity = find_type_entity(self.graph, self.entity)
        return type_entity.name if type_entity is not None else None

    def type_chain(self) -> list[Entity]:
        """Return the instance's type followed by its ancestors, nearest first.

        Raises:
            ModelError: If the instance has no resolvable type.
        """
        type_entity = find_type_entity(self.graph, self.entity)
        if type_entity is None:
            raise ModelError(f"Instance '{self.name}' has no resolvable type", entity=self.name)
        return resolve_inheritance_chain(self.graph, type_entity)

    def get_properties(self) -> dict[str, Property]:
        declared: dict[str, str] = {}
        for source in [self.entity, *self.type_chain()]:
            for child in _section(source, self.PROPERTIES):
                type_name = None if child.is_scalar else child.get_value(Property.TYPE.name)
                if type_name and child.name not in declared:
                    declared[child.name] = type_name
        return self._flatten(self.PROPERTIES, lambda e, g: Property(e, g, declared.get(e.name)))

    def get_property(self, name: str) -> Property | None:
        return self.get_properties().get(name)

    def get_property_value(self, attribute: Attribute[T]) -> T | None:
        """Return the value of the property named by *attribute*, coerced to its type.

        Returns ``None`` if the property is not declared anywhere in the chain.

        Raises:
            TypeMismatchError: If the value cannot be coerced to ``attribute.type``.
        """
        prop = self.get_property(attribute.name)
        if prop is None:
            return None
        return attribute.coerce(prop.value, owner=self.name)

    def get_operations(self) -> dict[str, Operation]:
        return self._flatten(self.OPERATIONS, Operation)

    def get_operation(self, name: str) -> Operation | None:
        return self.get_operations().get(name)

    def _flatten(self, section: str, factory: Callable[[Entity, EntityGraph], _E]) -> dict[str, _E]:
        # Resolve the type chain first so an untyped instance always fails.
        sources = [self.entity] + self.type_chain()
        result: dict[str, _E] = {}
        for source in sources:
            for child in _section(source, section):
                if child.name not in result:
                    result[child.name] = factory(child, self.graph)
        return result


def normalize_name(name: str) -> str:
    """Lower-case *name* and replace every non-alphanumeric character with ``_``."""
    return re.sub(r"[^a-z0-9]", "_", name.lower())


def collect_artifacts(container: Entity | None) -> list[Artifact]:
    """Collect ``[{name: value}, ...]`` or ``{name: value}`` entries below *container*."""
    if container is None:
        return []
    artifacts: list[Artifact] = []
    for entry in container.get_children():
        if entry.is_scalar:
            if entry.value:
                artifacts.append(Artifact(entry.name, entry.value))
            continue
        for child in entry.get_children():
            if child.value:
                artifacts.append(Artifact(child.name, child.value))
    return artifacts


# ################
# Implementation
# ################


def _section(source: Entity, section: str) -> list[Entity]:
    container = source.get_child(section)
    return [] if container is None else container.get_children()
