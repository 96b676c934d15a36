# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Output dependency graphs shared by all plugins.

Each plugin builds one :class:`OutputGraph` per run while visiting the
topology. Nodes are generated resources (or groups of them); edges record
"A depends on B" ordering constraints and topology relations carried over to
the output side. The graph captures edges exactly as declared and does not
sort them; the plugin's serializer decides how the target format expresses
them.

Values that are not present on a resource itself (parameters and variables a
nested resource needs, environment values contributed by connected components)
are merged in from neighbours. Merging is last-applied-wins, and callers feed contributions
in a fixed order so the output is reproducible.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar

from deployml.model.relations import RelationKind

V = TypeVar("V")

# ###############
# Public Interface
# ###############


class Named(Protocol):
    @property
    def name(self) -> str: ...


N = TypeVar("N", bound=Named)


@dataclass(frozen=True)
class OutputEdge:
    """A directed edge between two output nodes, identified by name."""

    source: str
    target: str
    kind: RelationKind = RelationKind.DEPENDS_ON


class OutputGraph(Generic[N]):
    """A directed graph of output nodes keyed by their ``name``."""

    def __init__(self) -> None:
        self._nodes: dict[str, N] = {}
        self._edges: list[OutputEdge] = []

    def add_node(self, node: N) -> N:
        """Add *node*; adding a second node with the same name raises ``ValueError``."""
        if node.name in self._nodes and self._nodes[node.name] is not node:
            raise ValueError(f"Output node '{node.name}' already exists")
        self._nodes[node.name] = node
        return node

    def get_node(self, name: str) -> N | None:
        return self._nodes.get(name)

    def add_edge(self, source: N, target: N, kind: RelationKind = RelationKind.DEPENDS_ON) -> None:
        """Record an edge from *source* to *target*; repeated edges are recorded once."""
        for node in (source, target):
            if self._nodes.get(node.name) is not node:
                raise ValueError(f"Output node '{node.name}' is not part of the graph")
        edge = OutputEdge(source.name, target.name, kind)
        if edge not in self._edges:
            self._edges.append(edge)

    def add_dependency(self, dependent: N, *dependencies: N) -> None:
        """Record that *dependent* must be materialized after each of *dependencies*."""
        for dependency in dependencies:
            self.add_edge(dependent, dependency, RelationKind.DEPENDS_ON)

    def nodes(self) -> list[N]:
        return list(self._nodes.values())

    def edges(self) -> list[OutputEdge]:
        return list(self._edges)

    def successors(self, node: N, kind: RelationKind | None = None) -> list[N]:
        """Return the targets of edges leaving *node*, in declaration order."""
        return [
            self._nodes[e.target] for e in self._edges if e.source == node.name and (kind is None or e.kind is kind)
        ]

    def predecessors(self, node: N, kind: RelationKind | None = None) -> list[N]:
        """Return the sources of edges entering *node*, in declaration order."""
        return [
            self._nodes[e.source] for e in self._edges if e.target == node.name and (kind is None or e.kind is kind)
        ]

    def dependencies_of(self, node: N) -> list[N]:
        """Return the nodes *node* has a depends-on edge to."""
        return self.successors(node, RelationKind.DEPENDS_ON)

    def __contains__(self, node: object) -> bool:
        name = getattr(node, "name", None)
        return isinstance(name, str) and self._nodes.get(name) is node

    def __len__(self) -> int:
        return len(self._nodes)


def merge_contributions(contributions: Iterable[Mapping[str, V]]) -> dict[str, V]:
    """Merge key-value contributions in order; on a key collision the last one wins."""
    merged: dict[str, V] = {}
    for contribution in contributions:
        merged.update(contribution)
    return merged


def collect_from_successors(
    graph: OutputGraph[N],
    node: N,
    kind: RelationKind,
    contribution: Callable[[N], Mapping[str, V]],
) -> dict[str, V]:
    """Merge the contributions of the immediate successors of *node* over *kind* edges.

    Successors are applied in name order, so the result does not depend on the
    order in which edges were added.
    """
    neighbours = sorted(graph.successors(node, kind), key=lambda n: n.name)
    return merge_contributions(contribution(n) for n in neighbours)


@dataclass(frozen=True)
class Parameter:
    """An input parameter a generated resource needs from the operator."""

    name: str
    type: str = "string"
    default: str | None = None
    description: str | None = None


@dataclass(eq=False)
class OutputResource:
    """A generated resource descriptor.

    Attributes:
        name: Unique name within the output graph.
        type: Target-specific resource type (e.g. ``OS::Nova::Server``).
        properties: Property assignments in target-specific form.
        parameters: Input parameters this resource needs.
        variables: Template variables this resource references, by name.
        environment: Environment values this resource exposes to consumers.
        nested: Sub-resources that are materialized together with this one.
    """

    name: str
    type: str
    properties: dict[str, Any] = field(default_factory=dict)
    parameters: dict[str, Parameter] = field(default_factory=dict)
    variables: dict[str, Any] = field(default_factory=dict)
    environment: dict[str, str] = field(default_factory=dict)
    nested: list[OutputResource] = field(default_factory=list)

    def add_parameter(self, parameter: Parameter) -> None:
        self.parameters[parameter.name] = parameter

    def required_parameters(self) -> dict[str, Parameter]:
        """Own parameters merged with those of nested resources, recursively."""
        return merge_contributions([self.parameters, *(n.required_parameters() for n in self.nested)])

    def add_variable(self, name: str, value: Any) -> None:
        self.variables[name] = value

    def required_variables(self) -> dict[str, Any]:
        """Own variables merged with those of nested resources, recursively."""
        return merge_contributions([self.variables, *(n.required_variables() for n in self.nested)])

    def required_environment(self) -> dict[str, str]:
        """Own environment merged with that of nested resources, recursively."""
        return merge_contributions([self.environment, *(n.required_environment() for n in self.nested)])
