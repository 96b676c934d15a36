# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""The topology graph: components as nodes, typed relations as edges.

Deployment topologies hold tens to a few hundred components, so the graph is a
plain adjacency list indexed by component name. Edges point from the source of
a relation (the dependent) to its target (the dependency).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from deployml.errors import ModelError, TopologyError
from deployml.model.components import Component, Compute
from deployml.model.relations import Relation, RelationKind

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class TopologyGraph:
    """Directed graph of components connected by relations."""

    def __init__(self) -> None:
        self._components: dict[str, Component] = {}
        self._relations: list[Relation] = []
        self._outgoing: dict[str, list[Relation]] = {}
        self._incoming: dict[str, list[Relation]] = {}

    def add_component(self, component: Component) -> None:
        if component.name in self._components:
            raise ModelError(f"Duplicate component '{component.name}'", entity=component.name)
        self._components[component.name] = component
        self._outgoing[component.name] = []
        self._incoming[component.name] = []

    def add_relation(self, relation: Relation) -> None:
        """Add *relation* as an edge; both endpoints must already be in the graph."""
        for endpoint in (relation.source, relation.target):
            if endpoint not in self._components:
                raise ModelError(
                    f"Relation '{relation.name}' of '{relation.source}' refers to unknown component '{endpoint}'",
                    entity=relation.source,
                )
        self._relations.append(relation)
        self._outgoing[relation.source].append(relation)
        self._incoming[relation.target].append(relation)

    def components(self) -> list[Component]:
        return list(self._components.values())

    def relations(self) -> list[Relation]:
        return list(self._relations)

    def get_component(self, name: str) -> Component | None:
        return self._components.get(name)

    def source_of(self, relation: Relation) -> Component:
        return self._components[relation.source]

    def target_of(self, relation: Relation) -> Component:
        return self._components[relation.target]

    def outgoing(self, component: Component, kind: RelationKind | None = None) -> list[Relation]:
        """Return the relations leaving *component*, optionally only those of *kind*."""
        relations = self._outgoing.get(component.name, [])
        if kind is None:
            return list(relations)
        return [r for r in relations if r.is_kind(kind)]

    def incoming(self, component: Component, kind: RelationKind | None = None) -> list[Relation]:
        """Return the relations entering *component*, optionally only those of *kind*."""
        relations = self._incoming.get(component.name, [])
        if kind is None:
            return list(relations)
        return [r for r in relations if r.is_kind(kind)]

    def __contains__(self, component: object) -> bool:
        return isinstance(component, Component) and self._components.get(component.name) is component

    def __len__(self) -> int:
        return len(self._components)


def resolve_hosting_component(graph: TopologyGraph, component: Component) -> Compute | None:
    """Follow Hosted-On edges from *component* to the Compute it runs on.

    A Compute resolves to itself. Returns ``None`` if the chain ends before a
    Compute is reached.

    Raises:
        TopologyError: If a component on the chain has more than one host, or
            the chain runs in a cycle.
    """
    visited: set[str] = set()
    current = component
    while not isinstance(current, Compute):
        if current.name in visited:
            raise TopologyError(
                f"Hosted-On cycle detected at component '{current.name}'",
                entity=current.name,
            )
        visited.add(current.name)
        hosts = graph.outgoing(current, RelationKind.HOSTED_ON)
        if not hosts:
            logger.debug("Component '%s' has no host; '%s' is not placed on a compute", current.name, component.name)
            return None
        if len(hosts) > 1:
            raise TopologyError(f"Component '{current.name}' is hosted on more than one component", entity=current.name)
        current = graph.target_of(hosts[0])
    return current


def get_target_components(graph: TopologyGraph, source: Component, kind: RelationKind) -> list[Component]:
    """Return the components *source* reaches over one outgoing edge of *kind*.

    Sub-kinds match as well (``DEPENDS_ON`` matches Hosted-On and Connects-To).
    The result has no duplicates and follows the order the edges were declared in.
    """
    return _unique(graph.target_of(r) for r in graph.outgoing(source, kind))


def get_source_components(graph: TopologyGraph, target: Component, kind: RelationKind) -> list[Component]:
    """Return the components reaching *target* over one incoming edge of *kind*."""
    return _unique(graph.source_of(r) for r in graph.incoming(target, kind))


def hosted_components(graph: TopologyGraph, host: Component) -> list[Component]:
    """Return the components hosted directly on *host*."""
    return get_source_components(graph, host, RelationKind.HOSTED_ON)


# ################
# Implementation
# ################


def _unique(components: Iterable[Component]) -> list[Component]:
    result: list[Component] = []
    seen: set[str] = set()
    for component in components:
        if component.name not in seen:
            seen.add(component.name)
            result.append(component)
    return result
