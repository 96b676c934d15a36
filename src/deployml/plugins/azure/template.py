# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Azure Resource Manager (ARM) template model and serialization."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from deployml.output.graph import OutputGraph, OutputResource, merge_contributions

# ###############
# Public Interface
# ###############

TEMPLATE_SCHEMA = "https://schema.management.azure.com/schemas/2019-04-01/deploymentTemplate.json#"
CONTENT_VERSION = "1.0.0.0"

VIRTUAL_NETWORK = "Microsoft.Network/virtualNetworks"
NETWORK_SECURITY_GROUP = "Microsoft.Network/networkSecurityGroups"
PUBLIC_IP_ADDRESS = "Microsoft.Network/publicIPAddresses"
NETWORK_INTERFACE = "Microsoft.Network/networkInterfaces"
VIRTUAL_MACHINE = "Microsoft.Compute/virtualMachines"
VIRTUAL_MACHINE_EXTENSION = "Microsoft.Compute/virtualMachines/extensions"

API_VERSIONS = {
    VIRTUAL_NETWORK: "2019-04-01",
    NETWORK_SECURITY_GROUP: "2019-04-01",
    PUBLIC_IP_ADDRESS: "2019-04-01",
    NETWORK_INTERFACE: "2019-04-01",
    VIRTUAL_MACHINE: "2019-03-01",
    VIRTUAL_MACHINE_EXTENSION: "2019-03-01",
}


class ArmParameter(BaseModel):
    """A template input parameter."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = "string"
    default_value: str | None = Field(default=None, alias="defaultValue")
    metadata: dict[str, str] | None = None


class ArmResource(BaseModel):
    """A template resource."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    api_version: str = Field(alias="apiVersion")
    name: str
    location: str | None = None
    depends_on: list[str] | None = Field(default=None, alias="dependsOn")
    properties: dict[str, Any] = Field(default_factory=dict)


class ArmTemplate(BaseModel):
    """A complete deployment template."""

    model_config = ConfigDict(populate_by_name=True)

    schema_: str = Field(default=TEMPLATE_SCHEMA, alias="$schema")
    content_version: str = Field(default=CONTENT_VERSION, alias="contentVersion")
    parameters: dict[str, ArmParameter] = Field(default_factory=dict)
    variables: dict[str, Any] = Field(default_factory=dict)
    resources: list[ArmResource] = Field(default_factory=list)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


def parameter(name: str) -> str:
    """Template expression referencing an input parameter."""
    return f"[parameters('{name}')]"


def variable(name: str) -> str:
    """Template expression referencing a template variable."""
    return f"[variables('{name}')]"


def resource_id(resource: OutputResource) -> str:
    """Template expression for the id of *resource*; child names like ``vm/deploy`` become separate segments."""
    segments = ", ".join(f"'{segment}'" for segment in resource.name.split("/"))
    return f"[resourceId('{resource.type}', {segments})]"


def build_template(graph: OutputGraph[OutputResource]) -> ArmTemplate:
    """Build a template from an output graph.

    Resources keep the order they were added in and every resource is placed
    in the ``location`` parameter. Parameters and variables are the merged
    required parameters and variables of all resources.
    """
    resources: list[ArmResource] = []
    for node in graph.nodes():
        depends_on = [resource_id(d) for d in graph.dependencies_of(node)]
        resources.append(
            ArmResource(
                type=node.type,
                api_version=API_VERSIONS[node.type],
                name=node.name,
                location=parameter("location"),
                depends_on=depends_on or None,
                properties=node.properties,
            )
        )
    required = merge_contributions(n.required_parameters() for n in graph.nodes())
    parameters = {
        name: ArmParameter(
            type=p.type,
            default_value=p.default,
            metadata={"description": p.description} if p.description else None,
        )
        for name, p in sorted(required.items())
    }
    variables = merge_contributions(n.required_variables() for n in graph.nodes())
    return ArmTemplate(parameters=parameters, variables=dict(sorted(variables.items())), resources=resources)
