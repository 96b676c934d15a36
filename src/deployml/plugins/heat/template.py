# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Heat Orchestration Template (HOT) model and serialization."""

from __future__ import annotations

from typing import Any

import yaml
from pydantic import BaseModel, Field

from deployml.output.graph import OutputGraph, OutputResource, merge_contributions

# ###############
# Public Interface
# ###############

HEAT_TEMPLATE_VERSION = "2018-08-31"


class HeatParameter(BaseModel):
    """A template input parameter."""

    type: str = "string"
    default: str | None = None
    description: str | None = None


class HeatResource(BaseModel):
    """A template resource."""

    type: str
    depends_on: list[str] | None = None
    properties: dict[str, Any] = Field(default_factory=dict)


class HeatTemplate(BaseModel):
    """A complete Heat template."""

    heat_template_version: str = HEAT_TEMPLATE_VERSION
    description: str | None = None
    parameters: dict[str, HeatParameter] = Field(default_factory=dict)
    resources: dict[str, HeatResource] = Field(default_factory=dict)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.model_dump(exclude_none=True), default_flow_style=False, sort_keys=False)


def get_param(name: str) -> dict[str, str]:
    """Intrinsic function referencing a template parameter."""
    return {"get_param": name}


def get_resource(name: str) -> dict[str, str]:
    """Intrinsic function referencing another resource."""
    return {"get_resource": name}


def build_template(graph: OutputGraph[OutputResource], description: str | None = None) -> HeatTemplate:
    """Build a template from an output graph.

    Resources keep the order they were added in. Each resource's
    ``depends_on`` lists its depends-on edges; parameters are the merged
    required parameters of all resources.
    """
    resources: dict[str, HeatResource] = {}
    for node in graph.nodes():
        depends_on = [d.name for d in graph.dependencies_of(node)]
        resources[node.name] = HeatResource(type=node.type, depends_on=depends_on or None, properties=node.properties)
    required = merge_contributions(n.required_parameters() for n in graph.nodes())
    parameters = {
        name: HeatParameter(type=p.type, default=p.default, description=p.description)
        for name, p in sorted(required.items())
    }
    return HeatTemplate(description=description, parameters=parameters, resources=resources)
