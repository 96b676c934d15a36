# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Builds the Azure output graph from a deployment topology.

Every Compute becomes a virtual machine owning a network interface, which in
turn owns a network security group and a public IP address. All machines share
one virtual network. The software hosted on a machine is installed by a single
custom script extension whose script holds the operation artifacts of every
hosted component, hosts before the components they host.
"""

from __future__ import annotations

import base64
import logging
import shlex

from deployml.errors import TransformationError
from deployml.model.components import Component, Compute
from deployml.model.entities import Operation
from deployml.model.relations import RelationKind
from deployml.model.types import Attribute
from deployml.output.graph import OutputGraph, OutputResource, Parameter, merge_contributions
from deployml.plugins.azure.template import (
    NETWORK_INTERFACE,
    NETWORK_SECURITY_GROUP,
    PUBLIC_IP_ADDRESS,
    VIRTUAL_MACHINE,
    VIRTUAL_MACHINE_EXTENSION,
    VIRTUAL_NETWORK,
    build_template,
    parameter,
    resource_id,
    variable,
)
from deployml.plugins.support import add_output_node, environment_variables, ordered_operations
from deployml.topology.graph import get_target_components, resolve_hosting_component
from deployml.transformation.context import TransformationContext
from deployml.transformation.visitor import ComponentVisitor, dispatch_component

logger = logging.getLogger(__name__)

PORT = Attribute("port", int)

# ###############
# Public Interface
# ###############

VIRTUAL_NETWORK_NAME = "deployml_vnet"
SUBNET_NAME = "default"
EXTENSION_NAME = "deploy"
DEFAULT_VM_SIZE = "Standard_B1s"
DEFAULT_ADMIN_USERNAME = "deployml"
IMAGE_REFERENCE = {
    "publisher": "Canonical",
    "offer": "0001-com-ubuntu-server-jammy",
    "sku": "22_04-lts-gen2",
    "version": "latest",
}
# Inbound rules start here; each further rule takes the next free slot.
FIRST_RULE_PRIORITY = 1000


class AzureVisitor(ComponentVisitor):
    """Component visitor producing Azure resources.

    All software-bearing variants fall through to :meth:`visit_component`.
    """

    def __init__(self, context: TransformationContext) -> None:
        self.context = context
        self.topology = context.topology_graph
        self.resources: OutputGraph[OutputResource] = OutputGraph()
        self._network: OutputResource | None = None
        self._machines: dict[str, OutputResource] = {}
        self._security_groups: dict[str, OutputResource] = {}
        self._extensions: dict[str, OutputResource] = {}
        self._scripts: dict[str, list[str]] = {}

    def visit_compute(self, component: Compute) -> None:
        self.context.mark_transformed(component)
        name = component.normalized_name
        network = self._virtual_network(component)

        security_group = _resource(
            f"{name}_securityGroup",
            NETWORK_SECURITY_GROUP,
            {"securityRules": [_inbound_rule("ssh", 22, FIRST_RULE_PRIORITY)]},
        )
        public_ip = _resource(f"{name}_publicIpAddress", PUBLIC_IP_ADDRESS, {"publicIPAllocationMethod": "Dynamic"})
        interface = _resource(
            f"{name}_networkInterface",
            NETWORK_INTERFACE,
            {
                "networkSecurityGroup": {"id": resource_id(security_group)},
                "ipConfigurations": [
                    {
                        "name": f"{name}_ipConfiguration",
                        "properties": {
                            "privateIPAllocationMethod": "Dynamic",
                            "publicIPAddress": {"id": resource_id(public_ip)},
                            "subnet": {"id": variable("subnet_id")},
                        },
                    }
                ],
            },
            nested=[security_group, public_ip],
        )
        interface.add_variable(
            "subnet_id", f"[resourceId('{VIRTUAL_NETWORK}/subnets', '{VIRTUAL_NETWORK_NAME}', '{SUBNET_NAME}')]"
        )

        machine = _resource(
            name,
            VIRTUAL_MACHINE,
            {
                "hardwareProfile": {"vmSize": parameter("vm_size")},
                "osProfile": {
                    "computerName": name.replace("_", "-"),
                    "adminUsername": parameter("admin_username"),
                    "linuxConfiguration": {
                        "disablePasswordAuthentication": True,
                        "ssh": {
                            "publicKeys": [{"path": variable("ssh_key_path"), "keyData": parameter("admin_public_key")}]
                        },
                    },
                },
                "storageProfile": {"imageReference": dict(IMAGE_REFERENCE)},
                "networkProfile": {"networkInterfaces": [{"id": resource_id(interface)}]},
            },
            nested=[interface],
        )
        machine.add_parameter(Parameter("vm_size", default=component.instance_type or DEFAULT_VM_SIZE))
        machine.add_parameter(Parameter("admin_username", default=DEFAULT_ADMIN_USERNAME))
        machine.add_parameter(Parameter("admin_public_key", description="SSH public key of the admin user"))
        machine.add_variable(
            "ssh_key_path", "[concat('/home/', parameters('admin_username'), '/.ssh/authorized_keys')]"
        )

        for resource in (security_group, public_ip, interface, machine):
            add_output_node(self.resources, resource, component)
        self.resources.add_dependency(interface, security_group, public_ip, network)
        self.resources.add_dependency(machine, interface)
        self._machines[component.name] = machine
        self._security_groups[component.name] = security_group

    def visit_component(self, component: Component) -> None:
        self.context.mark_transformed(component)
        for host in get_target_components(self.topology, component, RelationKind.HOSTED_ON):
            if not self.context.is_transformed(host):
                dispatch_component(self, host)

        compute = resolve_hosting_component(self.topology, component)
        if compute is None:
            logger.warning("Component '%s' is not hosted on a compute; skipping", component.name)
            return
        machine = self._machine_for(compute)
        port = component.get_property_value(PORT)
        if port is not None:
            self._open_port(compute, component, port)

        operations = ordered_operations(component)
        if not operations:
            logger.info("Component '%s' has no operation artifacts; nothing to install", component.name)
            return
        self._extension_for(compute, machine)
        self._scripts[compute.name].append(self._script(component, operations))

    def populate_template(self) -> None:
        """Finish the install scripts and write the template to ``<model>.json``."""
        for compute_name, extension in self._extensions.items():
            script = "\n".join(["#!/bin/sh", *self._scripts[compute_name]])
            extension.properties["protectedSettings"] = {"script": base64.b64encode(script.encode()).decode("ascii")}
        template = build_template(self.resources)
        self.context.file_access.write(f"{self.context.model.name}.json", template.to_json())

    # ################
    # Implementation
    # ################

    def _virtual_network(self, component: Compute) -> OutputResource:
        if self._network is None:
            network = _resource(
                VIRTUAL_NETWORK_NAME,
                VIRTUAL_NETWORK,
                {
                    "addressSpace": {"addressPrefixes": ["10.0.0.0/16"]},
                    "subnets": [{"name": SUBNET_NAME, "properties": {"addressPrefix": "10.0.0.0/24"}}],
                },
            )
            self._network = add_output_node(self.resources, network, component)
        return self._network

    def _machine_for(self, compute: Compute) -> OutputResource:
        if not self.context.is_transformed(compute):
            dispatch_component(self, compute)
        return self._machines[compute.name]

    def _extension_for(self, compute: Compute, machine: OutputResource) -> OutputResource:
        extension = self._extensions.get(compute.name)
        if extension is None:
            extension = _resource(
                f"{machine.name}/{EXTENSION_NAME}",
                VIRTUAL_MACHINE_EXTENSION,
                {
                    "publisher": "Microsoft.Azure.Extensions",
                    "type": "CustomScript",
                    "typeHandlerVersion": "2.1",
                    "autoUpgradeMinorVersion": True,
                },
            )
            add_output_node(self.resources, extension, compute)
            self.resources.add_dependency(extension, machine)
            self._extensions[compute.name] = extension
            self._scripts[compute.name] = []
        return extension

    def _open_port(self, compute: Compute, component: Component, port: int) -> None:
        rules = self._security_groups[compute.name].properties["securityRules"]
        priority = FIRST_RULE_PRIORITY + 10 * len(rules)
        rules.append(_inbound_rule(f"{component.normalized_name}_{port}", port, priority))

    def _script(self, component: Component, operations: list[Operation]) -> str:
        connected = get_target_components(self.topology, component, RelationKind.CONNECTS_TO)
        targets = sorted(connected, key=lambda c: c.name)
        environment = merge_contributions(
            [environment_variables(component), *(environment_variables(t) for t in targets)]
        )
        lines = [f"# {component.name}"]
        lines += [f"export {key}={shlex.quote(value)}" for key, value in environment.items()]
        for operation in operations:
            for artifact in operation.artifacts:
                try:
                    lines.append(self.context.file_access.read_to_string(artifact.value))
                except OSError as exc:
                    raise TransformationError(
                        f"Cannot read artifact '{artifact.value}' of operation '{operation.name}' "
                        f"of component '{component.name}': {exc}"
                    ) from exc
        return "\n".join(lines)


def _resource(
    name: str, resource_type: str, properties: dict, nested: list[OutputResource] | None = None
) -> OutputResource:
    resource = OutputResource(name=name, type=resource_type, properties=properties, nested=nested or [])
    resource.add_parameter(Parameter("location", default="[resourceGroup().location]"))
    return resource


def _inbound_rule(name: str, port: int, priority: int) -> dict:
    return {
        "name": name,
        "properties": {
            "priority": priority,
            "protocol": "Tcp",
            "access": "Allow",
            "direction": "Inbound",
            "sourceAddressPrefix": "*",
            "sourcePortRange": "*",
            "destinationAddressPrefix": "*",
            "destinationPortRange": str(port),
        },
    }
