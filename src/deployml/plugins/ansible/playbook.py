# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Builds an Ansible playbook with one play per software component.

Plays are emitted in dependency order: the targets of a component's
Hosted-On and Connects-To relations are visited before the component itself.
A component is marked as transformed before its dependencies are visited, so
a Connects-To cycle ends at the component that started it instead of
recursing forever.
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Any

import yaml

from deployml.model.components import Component, Compute
from deployml.model.relations import RelationKind
from deployml.plugins.support import artifact_paths, connected_values
from deployml.topology.graph import get_target_components, resolve_hosting_component
from deployml.transformation.context import TransformationContext
from deployml.transformation.visitor import ComponentVisitor, dispatch_component

logger = logging.getLogger(__name__)

REMOTE_ROOT = "/tmp/deployml"

# ###############
# Public Interface
# ###############


class PlaybookBuilder(ComponentVisitor):
    """Component visitor collecting plays and inventory hosts."""

    def __init__(self, context: TransformationContext) -> None:
        self.context = context
        self.topology = context.topology_graph
        self.plays: list[dict[str, Any]] = []
        self.hosts: list[Compute] = []

    def visit_compute(self, component: Compute) -> None:
        self.context.mark_transformed(component)
        self.hosts.append(component)

    def visit_component(self, component: Component) -> None:
        self.context.mark_transformed(component)
        for dependency in get_target_components(self.topology, component, RelationKind.DEPENDS_ON):
            if not self.context.is_transformed(dependency):
                dispatch_component(self, dependency)

        compute = resolve_hosting_component(self.topology, component)
        if compute is None:
            logger.warning("Component '%s' is not hosted on a compute; skipping", component.name)
            return
        tasks = self._tasks(component)
        if not tasks:
            logger.debug("Component '%s' has no operation artifacts; no play generated", component.name)
            return
        self.plays.append(
            {
                "name": f"Deploy {component.name}",
                "hosts": compute.name,
                "become": True,
                "vars": connected_values(self.topology, component),
                "tasks": tasks,
            }
        )

    def render_playbook(self) -> str:
        return yaml.safe_dump(self.plays, default_flow_style=False, sort_keys=False)

    def render_inventory(self) -> str:
        lines = ["[all]"]
        for host in self.hosts:
            line = host.name
            if host.private_key:
                line += f" ansible_ssh_private_key_file={host.private_key}"
            lines.append(line)
        return "\n".join(lines) + "\n"

    # ################
    # Implementation
    # ################

    def _tasks(self, component: Component) -> list[dict[str, Any]]:
        tasks: list[dict[str, Any]] = []
        for operation, artifact, relative in artifact_paths(component):
            local = f"files/{relative}"
            remote = f"{REMOTE_ROOT}/{relative}"
            self.context.file_access.copy(artifact.value, local)
            tasks.append(
                {
                    "name": f"Copy {PurePosixPath(artifact.value).name} of {component.name}",
                    "copy": {"src": local, "dest": remote, "mode": "0755"},
                }
            )
            tasks.append({"name": f"Run {operation.name} of {component.name}", "shell": remote})
        return tasks
