# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Component stacks: a compute plus everything hosted on it, built as one image."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from deployml.model.components import Component, Compute
from deployml.model.relations import ConnectsTo, DependsOn, RelationKind
from deployml.model.types import Attribute
from deployml.output.graph import OutputGraph, collect_from_successors, merge_contributions
from deployml.plugins.support import add_output_node, environment_variables
from deployml.topology.graph import TopologyGraph, resolve_hosting_component
from deployml.transformation.context import TransformationContext
from deployml.transformation.visitor import ComponentVisitor, RelationVisitor, dispatch_component

logger = logging.getLogger(__name__)

PORT = Attribute("port", int)

# ###############
# Public Interface
# ###############


@dataclass(eq=False)
class ComponentStack:
    """One container image and its deployment.

    Attributes:
        name: Stack name, derived from the compute's normalized name.
        compute: The compute the stack is built around.
        components: Stack members, hosts before the components they host.
        environment: Environment variables after propagation over Connects-To.
    """

    name: str
    compute: Compute
    components: list[Component] = field(default_factory=list)
    environment: dict[str, str] = field(default_factory=dict)

    def own_environment(self) -> dict[str, str]:
        """Environment variables contributed by the stack's own components."""
        return merge_contributions(environment_variables(c) for c in self.components)

    @property
    def ports(self) -> list[int]:
        ports = [c.get_property_value(PORT) for c in self.components]
        return sorted({p for p in ports if p is not None})


class StackBuilder(ComponentVisitor, RelationVisitor):
    """Visits the topology and groups components into :class:`ComponentStack` objects."""

    def __init__(self, context: TransformationContext) -> None:
        self.context = context
        self.topology = context.topology_graph
        self.stacks: OutputGraph[ComponentStack] = OutputGraph()
        self._by_compute: dict[str, ComponentStack] = {}

    def visit_compute(self, component: Compute) -> None:
        self.context.mark_transformed(component)
        stack = ComponentStack(name=component.normalized_name.replace("_", "-"), compute=component)
        stack.components.append(component)
        add_output_node(self.stacks, stack, component)
        self._by_compute[component.name] = stack

    def visit_component(self, component: Component) -> None:
        self.context.mark_transformed(component)
        compute = resolve_hosting_component(self.topology, component)
        if compute is None:
            logger.warning("Component '%s' is not hosted on a compute; skipping", component.name)
            return
        stack = self._stack_for(compute)
        stack.components.append(component)
        stack.components.sort(key=lambda c: _hosting_depth(self.topology, c))

    def visit_depends_on(self, relation: DependsOn) -> None:
        # Hosting is expressed by stack membership; plain dependencies need no output.
        pass

    def visit_connects_to(self, relation: ConnectsTo) -> None:
        source = self.stack_of(self.topology.source_of(relation))
        target = self.stack_of(self.topology.target_of(relation))
        if source is None or target is None or source is target:
            return
        self.stacks.add_edge(source, target, RelationKind.CONNECTS_TO)

    def stack_of(self, component: Component) -> ComponentStack | None:
        compute = resolve_hosting_component(self.topology, component)
        return None if compute is None else self._by_compute.get(compute.name)

    def propagate_environment(self) -> None:
        """Give each stack its own variables plus those of the stacks it connects to."""
        for stack in self.stacks.nodes():
            stack.environment = merge_contributions(
                [
                    stack.own_environment(),
                    collect_from_successors(
                        self.stacks, stack, RelationKind.CONNECTS_TO, ComponentStack.own_environment
                    ),
                ]
            )

    # ################
    # Implementation
    # ################

    def _stack_for(self, compute: Compute) -> ComponentStack:
        if not self.context.is_transformed(compute):
            dispatch_component(self, compute)
        return self._by_compute[compute.name]


def _hosting_depth(graph: TopologyGraph, component: Component) -> int:
    depth = 0
    current = component
    while not isinstance(current, Compute):
        hosts = graph.outgoing(current, RelationKind.HOSTED_ON)
        if not hosts:
            break
        current = graph.target_of(hosts[0])
        depth += 1
    return depth
