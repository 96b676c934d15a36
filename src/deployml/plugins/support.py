# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Helpers shared by the built-in plugins."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import TypeVar

from deployml.errors import ModelError
from deployml.model.components import Component
from deployml.model.entities import Artifact, Operation
from deployml.model.relations import RelationKind
from deployml.output.graph import Named, OutputGraph, merge_contributions
from deployml.topology.graph import TopologyGraph, get_target_components

N = TypeVar("N", bound=Named)

# ###############
# Public Interface
# ###############

# Operations run in this order; any others follow in declaration order.
LIFECYCLE_OPERATIONS = ("create", "configure", "start")


def ordered_operations(component: Component) -> list[Operation]:
    """Return the component's operations that have artifacts, in lifecycle order."""
    operations = component.get_operations()
    names = [n for n in LIFECYCLE_OPERATIONS if n in operations]
    names += [n for n in operations if n not in LIFECYCLE_OPERATIONS]
    return [operations[n] for n in names if operations[n].has_artifacts]


def artifact_paths(component: Component) -> list[tuple[Operation, Artifact, str]]:
    """Return ``(operation, artifact, relative path)`` per operation artifact, in lifecycle order.

    Paths are ``<component>/<operation>/<file name>``. An artifact whose file
    name is already taken within its operation is prefixed with its position.
    """
    paths: list[tuple[Operation, Artifact, str]] = []
    used: set[str] = set()
    for operation in ordered_operations(component):
        folder = f"{component.normalized_name}/{operation.name}"
        for position, artifact in enumerate(operation.artifacts, start=1):
            file_name = PurePosixPath(artifact.value).name
            path = f"{folder}/{file_name}"
            if path in used:
                path = f"{folder}/{position}_{file_name}"
            used.add(path)
            paths.append((operation, artifact, path))
    return paths


def property_values(component: Component, prefix: str = "") -> dict[str, str]:
    """Return the component's resolved property values as text, skipping unset ones."""
    properties = component.get_properties()
    return {f"{prefix}{name}": prop.value for name, prop in properties.items() if prop.value is not None}


def connected_values(graph: TopologyGraph, component: Component) -> dict[str, str]:
    """Merge the component's own property values with those of its Connects-To targets.

    Target values are prefixed with ``<target>_`` and applied in target name
    order after the component's own values; on a collision the last one wins.
    """
    targets = sorted(get_target_components(graph, component, RelationKind.CONNECTS_TO), key=lambda c: c.name)
    return merge_contributions(
        [property_values(component), *(property_values(t, prefix=f"{t.normalized_name}_") for t in targets)]
    )


def environment_variables(component: Component) -> dict[str, str]:
    """Return the component's property values as ``<COMPONENT>_<PROPERTY>`` environment variables."""
    return {k.upper(): v for k, v in property_values(component, prefix=f"{component.normalized_name}_").items()}


def add_output_node(graph: OutputGraph[N], node: N, component: Component) -> N:
    """Add *node*, generated for *component*, to *graph*.

    Raises:
        ModelError: If another node already uses the name, e.g. because two
            component names normalize to the same identifier.
    """
    if graph.get_node(node.name) is not None:
        raise ModelError(
            f"Output name '{node.name}' of component '{component.name}' is already in use", entity=component.name
        )
    return graph.add_node(node)
