# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Relation variants of the DeployML model."""

from __future__ import annotations

from enum import Enum

from deployml.errors import ModelError
from deployml.model.entities import ModelEntity
from deployml.parser.entity_graph import Entity, EntityGraph, declared_type_name

# ###############
# Public Interface
# ###############


class RelationKind(Enum):
    """Semantic kinds of relations; the value is the relation type name."""

    ROOT = "relation"
    DEPENDS_ON = "depends_on"
    HOSTED_ON = "hosted_on"
    CONNECTS_TO = "connects_to"

    @property
    def parent(self) -> RelationKind | None:
        return _RELATION_PARENTS.get(self)

    def lineage(self) -> list[RelationKind]:
        kinds: list[RelationKind] = []
        kind: RelationKind | None = self
        while kind is not None:
            kinds.append(kind)
            kind = kind.parent
        return kinds

    @classmethod
    def from_type_name(cls, type_name: str) -> RelationKind | None:
        return _KINDS_BY_TYPE_NAME.get(type_name)


class Relation(ModelEntity):
    """A directed, typed edge from a source component to a target component.

    Relation entries live below their source component
    (``components/<source>/relations/<index>``) in either the short form
    ``- hosted_on: target`` or the full form
    ``- {type: hosted_on, target: target, properties: {...}}``.
    """

    kind: RelationKind = RelationKind.ROOT

    TARGET = "target"

    @property
    def name(self) -> str:
        return declared_type_name(self.entity) or self.entity.name

    @property
    def source(self) -> str:
        return self.entity.id[1]

    @property
    def target(self) -> str:
        target = self._declared_target()
        if not target:
            raise ModelError(f"Relation '{self.name}' of '{self.source}' has no target", entity=self.source)
        return target

    def is_kind(self, kind: RelationKind) -> bool:
        return kind in self.kind.lineage()

    def _declared_target(self) -> str | None:
        target = self.entity.get_value(self.TARGET)
        if target is None and self.entity.get_value("type") is None and len(self.entity.children) == 1:
            target = next(iter(self.entity.children.values())).value
        return target

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.source!r} -> {self._declared_target()!r})"


class DependsOn(Relation):
    kind = RelationKind.DEPENDS_ON


class HostedOn(DependsOn):
    kind = RelationKind.HOSTED_ON


class ConnectsTo(DependsOn):
    kind = RelationKind.CONNECTS_TO


RELATION_CLASSES: dict[RelationKind, type[Relation]] = {
    RelationKind.ROOT: Relation,
    RelationKind.DEPENDS_ON: DependsOn,
    RelationKind.HOSTED_ON: HostedOn,
    RelationKind.CONNECTS_TO: ConnectsTo,
}


def create_relation(entity: Entity, graph: EntityGraph) -> Relation:
    """Wrap a relation entry entity in the class of its variant.

    Raises:
        ModelError: If the relation type cannot be resolved.
    """
    probe = Relation(entity, graph)
    for type_entity in probe.type_chain():
        kind = RelationKind.from_type_name(type_entity.name)
        if kind is not None:
            return RELATION_CLASSES[kind](entity, graph)
    return probe


# ################
# Implementation
# ################

_RELATION_PARENTS: dict[RelationKind, RelationKind] = {
    RelationKind.DEPENDS_ON: RelationKind.ROOT,
    RelationKind.HOSTED_ON: RelationKind.DEPENDS_ON,
    RelationKind.CONNECTS_TO: RelationKind.DEPENDS_ON,
}

_KINDS_BY_TYPE_NAME: dict[str, RelationKind] = {kind.value: kind for kind in RelationKind}
