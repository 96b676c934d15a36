# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Structural checks on deployment topologies.

These checks operate on fully built models and enforce the placement rules
plugins rely on: every component ends up on a compute node, hosting chains are
acyclic and unambiguous, and every database sits on exactly one DBMS.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from deployml.model.components import Component, ComponentKind, Compute
from deployml.model.deployment import DeploymentModel
from deployml.model.relations import RelationKind
from deployml.topology.graph import TopologyGraph, get_target_components

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ValidationWarning:
    """A non-fatal issue: the model can be transformed but is probably incomplete.

    Attributes:
        message: Human-readable description of the warning.
    """

    message: str


@dataclass(frozen=True)
class ValidationError:
    """A fatal issue: plugins cannot place the model.

    Attributes:
        message: Human-readable description of the error.
    """

    message: str


@dataclass
class ValidationResult:
    """Result of running the topology checks.

    Attributes:
        warnings: Non-fatal issues found during validation.
        errors: Fatal errors that make the model untransformable.
    """

    warnings: list[ValidationWarning] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Return True if any fatal validation errors were found."""
        return len(self.errors) > 0


def validate(model: DeploymentModel) -> ValidationResult:
    """Run all topology checks on *model*.

    Checks performed:

    1. **Isolated components** (warning): a non-compute component with no
       incoming or outgoing relation.

    2. **Hosting cycles** (error): Hosted-On edges must not form a cycle.

    3. **Ambiguous hosting** (error): a component has at most one direct host.

    4. **Unplaced components** (error): the Hosted-On chain of every
       non-compute component must end at a Compute node.

    5. **Database placement** (error): every Database must be hosted,
       transitively, on exactly one DBMS.

    6. **Name collisions** (error): distinct component names must not
       normalize to the same identifier, since generated resources are named
       after it.

    Args:
        model: The deployment model to validate.

    Returns:
        A :class:`ValidationResult`; an empty result means the model is valid.
    """
    graph = model.topology
    warnings: list[ValidationWarning] = []
    errors: list[ValidationError] = []

    warnings.extend(_check_isolated_components(graph))
    cycle_errors = _check_hosting_cycles(graph)
    errors.extend(cycle_errors)
    errors.extend(_check_multiple_hosts(graph))
    errors.extend(_check_name_collisions(graph))
    # The chain walks below assume acyclic hosting.
    if not cycle_errors:
        errors.extend(_check_unplaced_components(graph))
        errors.extend(_check_database_placement(graph))

    return ValidationResult(warnings=warnings, errors=errors)


# ################
# Implementation
# ################


def _detect_cycle(graph: dict[str, list[str]]) -> list[str] | None:
    """Detect a cycle in a directed graph using DFS.

    Uses a three-colour marking scheme (white/grey/black) to distinguish
    unvisited, in-progress, and fully-explored nodes.

    Returns:
        The node names forming the cycle with the start node repeated at the
        end (e.g. ``["a", "b", "a"]``), or ``None`` if the graph is acyclic.
    """
    WHITE, GREY, BLACK = 0, 1, 2
    color: dict[str, int] = {}
    path: list[str] = []

    def _dfs(node: str) -> list[str] | None:
        color[node] = GREY
        path.append(node)
        for neighbor in graph.get(node, []):
            state = color.get(neighbor, WHITE)
            if state == GREY:
                cycle_start = path.index(neighbor)
                return path[cycle_start:] + [neighbor]
            if state == WHITE:
                result = _dfs(neighbor)
                if result is not None:
                    return result
        path.pop()
        color[node] = BLACK
        return None

    for node in graph:
        if color.get(node, WHITE) == WHITE:
            cycle = _dfs(node)
            if cycle is not None:
                return cycle
    return None


def _check_isolated_components(graph: TopologyGraph) -> list[ValidationWarning]:
    warnings: list[ValidationWarning] = []
    for component in graph.components():
        if isinstance(component, Compute):
            continue
        if not graph.outgoing(component) and not graph.incoming(component):
            warnings.append(ValidationWarning(message=f"Component '{component.name}' has no relations."))
    return warnings


def _check_hosting_cycles(graph: TopologyGraph) -> list[ValidationError]:
    hosting = {
        c.name: [t.name for t in get_target_components(graph, c, RelationKind.HOSTED_ON)] for c in graph.components()
    }
    cycle = _detect_cycle(hosting)
    if cycle is None:
        return []
    return [ValidationError(message=f"Hosted-On cycle detected: {' -> '.join(cycle)}.")]


def _check_multiple_hosts(graph: TopologyGraph) -> list[ValidationError]:
    errors: list[ValidationError] = []
    for component in graph.components():
        hosts = get_target_components(graph, component, RelationKind.HOSTED_ON)
        if len(hosts) > 1:
            names = ", ".join(f"'{h.name}'" for h in hosts)
            errors.append(
                ValidationError(message=f"Component '{component.name}' is hosted on more than one component: {names}.")
            )
    return errors


def _hosting_chain(graph: TopologyGraph, component: Component) -> list[Component]:
    """Return the hosts of *component*, nearest first, following the first Hosted-On edge."""
    chain: list[Component] = []
    current = component
    while True:
        hosts = get_target_components(graph, current, RelationKind.HOSTED_ON)
        if not hosts:
            return chain
        current = hosts[0]
        chain.append(current)


def _check_unplaced_components(graph: TopologyGraph) -> list[ValidationError]:
    errors: list[ValidationError] = []
    for component in graph.components():
        if isinstance(component, Compute):
            continue
        chain = _hosting_chain(graph, component)
        if not chain or not isinstance(chain[-1], Compute):
            errors.append(
                ValidationError(message=f"Component '{component.name}' is not hosted on a compute node.")
            )
    return errors


def _check_database_placement(graph: TopologyGraph) -> list[ValidationError]:
    errors: list[ValidationError] = []
    for component in graph.components():
        if not component.is_kind(ComponentKind.DATABASE):
            continue
        dbms_hosts = [h for h in _hosting_chain(graph, component) if h.is_kind(ComponentKind.DBMS)]
        if len(dbms_hosts) != 1:
            errors.append(
                ValidationError(
                    message=(
                        f"Database '{component.name}' must be hosted on exactly one DBMS, "
                        f"found {len(dbms_hosts)}."
                    )
                )
            )
    return errors


def _check_name_collisions(graph: TopologyGraph) -> list[ValidationError]:
    by_name: dict[str, list[str]] = {}
    for component in graph.components():
        by_name.setdefault(component.normalized_name, []).append(component.name)
    errors: list[ValidationError] = []
    for normalized, names in by_name.items():
        if len(names) > 1:
            quoted = ", ".join(f"'{n}'" for n in names)
            errors.append(ValidationError(message=f"Components {quoted} share the normalized name '{normalized}'."))
    return errors
