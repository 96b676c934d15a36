# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Builds the Heat output graph from a deployment topology.

Every Compute becomes a server with its network port, floating IP and
floating IP association. Every other component that carries operation
artifacts becomes one software config holding the concatenated scripts and
one software deployment applying that config to the server the component is
hosted on.
"""

from __future__ import annotations

import logging

from deployml.errors import TransformationError
from deployml.model.components import Component, Compute
from deployml.model.entities import Operation
from deployml.output.graph import OutputGraph, OutputResource, Parameter
from deployml.plugins.heat.template import build_template, get_param, get_resource
from deployml.plugins.support import add_output_node, connected_values, ordered_operations
from deployml.topology.graph import resolve_hosting_component
from deployml.transformation.context import TransformationContext
from deployml.transformation.visitor import ComponentVisitor, dispatch_component

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

SERVER = "OS::Nova::Server"
PORT = "OS::Neutron::Port"
FLOATING_IP = "OS::Neutron::FloatingIP"
FLOATING_IP_ASSOCIATION = "OS::Neutron::FloatingIPAssociation"
SOFTWARE_CONFIG = "OS::Heat::SoftwareConfig"
SOFTWARE_DEPLOYMENT = "OS::Heat::SoftwareDeployment"


class HeatVisitor(ComponentVisitor):
    """Component visitor producing Heat resources.

    All software-bearing variants fall through to :meth:`visit_component`.
    """

    def __init__(self, context: TransformationContext) -> None:
        self.context = context
        self.topology = context.topology_graph
        self.resources: OutputGraph[OutputResource] = OutputGraph()
        self._servers: dict[str, OutputResource] = {}

    def visit_compute(self, component: Compute) -> None:
        self.context.mark_transformed(component)
        name = component.normalized_name
        port = OutputResource(
            name=f"{name}_port",
            type=PORT,
            properties={
                "network": get_param("network"),
                "security_groups": [get_param("security_group")],
            },
        )
        port.add_parameter(Parameter("network", description="Network the servers are attached to"))
        port.add_parameter(Parameter("security_group", default="default"))

        server = OutputResource(
            name=name,
            type=SERVER,
            properties={
                "image": get_param("image"),
                "flavor": get_param("flavor"),
                "key_name": get_param("key_name"),
                "networks": [{"port": get_resource(port.name)}],
                "user_data_format": "SOFTWARE_CONFIG",
            },
            nested=[port],
        )
        server.add_parameter(Parameter("key_name", default=component.key_name, description="Name of the SSH key pair"))
        server.add_parameter(Parameter("image", default=component.machine_image))
        server.add_parameter(Parameter("flavor", default=component.instance_type))

        floating_ip = OutputResource(
            name=f"{name}_floating_ip",
            type=FLOATING_IP,
            properties={"floating_network": get_param("public_network"), "port_id": get_resource(port.name)},
        )
        floating_ip.add_parameter(Parameter("public_network", default="public"))
        association = OutputResource(
            name=f"{name}_floating_ip_association",
            type=FLOATING_IP_ASSOCIATION,
            properties={"floatingip_id": get_resource(floating_ip.name), "port_id": get_resource(port.name)},
        )

        for resource in (port, server, floating_ip, association):
            add_output_node(self.resources, resource, component)
        self.resources.add_dependency(server, port)
        self.resources.add_dependency(floating_ip, port)
        self.resources.add_dependency(association, floating_ip, port)
        self._servers[component.name] = server

    def visit_component(self, component: Component) -> None:
        self.context.mark_transformed(component)
        compute = resolve_hosting_component(self.topology, component)
        if compute is None:
            logger.warning("Component '%s' is not hosted on a compute; skipping", component.name)
            return
        operations = ordered_operations(component)
        if not operations:
            logger.info("Component '%s' has no operation artifacts; no software deployment generated", component.name)
            return

        server = self._server_for(compute)
        name = component.normalized_name
        config = OutputResource(
            name=f"{name}_config",
            type=SOFTWARE_CONFIG,
            properties={"group": "script", "config": self._script(component, operations)},
        )
        deployment = OutputResource(
            name=f"{name}_deployment",
            type=SOFTWARE_DEPLOYMENT,
            properties={
                "config": get_resource(config.name),
                "server": get_resource(server.name),
                "input_values": connected_values(self.topology, component),
            },
        )
        add_output_node(self.resources, config, component)
        add_output_node(self.resources, deployment, component)
        self.resources.add_dependency(deployment, server, config)

    def populate_template(self) -> None:
        """Write the template to ``<model>.yaml`` in the output directory."""
        template = build_template(self.resources, self.context.model.description)
        self.context.file_access.append(f"{self.context.model.name}.yaml", template.to_yaml())

    # ################
    # Implementation
    # ################

    def _server_for(self, compute: Compute) -> OutputResource:
        if not self.context.is_transformed(compute):
            dispatch_component(self, compute)
        return self._servers[compute.name]

    def _script(self, component: Component, operations: list[Operation]) -> str:
        parts: list[str] = []
        for operation in operations:
            for artifact in operation.artifacts:
                try:
                    parts.append(self.context.file_access.read_to_string(artifact.value))
                except OSError as exc:
                    raise TransformationError(
                        f"Cannot read artifact '{artifact.value}' of operation '{operation.name}' "
                        f"of component '{component.name}': {exc}"
                    ) from exc
        return "\n".join(parts)
