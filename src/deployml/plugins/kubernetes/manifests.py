# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Renders component stacks as Dockerfiles and Kubernetes manifests."""

from __future__ import annotations

import json
from typing import Any

import yaml

from deployml.plugins.kubernetes.stack import ComponentStack
from deployml.plugins.support import artifact_paths

DEFAULT_BASE_IMAGE = "ubuntu:22.04"
INSTALL_ROOT = "/opt/deployml"

# ###############
# Public Interface
# ###############


def artifact_layout(stack: ComponentStack) -> list[tuple[str, str, str]]:
    """Return ``(operation, source path, path relative to the Dockerfile)`` per operation artifact."""
    layout: list[tuple[str, str, str]] = []
    for component in stack.components:
        for operation, artifact, relative in artifact_paths(component):
            layout.append((operation.name, artifact.value, relative))
    return layout


def render_dockerfile(stack: ComponentStack, base_image: str = DEFAULT_BASE_IMAGE) -> str:
    """Render the image build for *stack*.

    Artifacts of every operation but ``start`` run at build time, hosts
    first. The last ``start`` artifact becomes the container command.
    """
    lines = [f"FROM {base_image}", ""]
    lines += [f"ENV {key}={json.dumps(value)}" for key, value in stack.environment.items()]
    start_command: str | None = None
    for operation, _, relative in artifact_layout(stack):
        installed = f"{INSTALL_ROOT}/{relative}"
        lines.append(f"COPY {relative} {installed}")
        if operation == "start":
            start_command = installed
        else:
            lines.append(f"RUN sh {installed}")
    lines += [f"EXPOSE {port}" for port in stack.ports]
    command = ["sh", start_command] if start_command else ["sleep", "infinity"]
    lines.append(f"CMD {json.dumps(command)}")
    return "\n".join(lines) + "\n"


def deployment_manifest(stack: ComponentStack) -> dict[str, Any]:
    container: dict[str, Any] = {"name": stack.name, "image": f"{stack.name}:latest"}
    if stack.ports:
        container["ports"] = [{"containerPort": port} for port in stack.ports]
    if stack.environment:
        container["env"] = [{"name": key, "value": value} for key, value in stack.environment.items()]
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": stack.name, "labels": {"app": stack.name}},
        "spec": {
            "replicas": 1,
            "selector": {"matchLabels": {"app": stack.name}},
            "template": {"metadata": {"labels": {"app": stack.name}}, "spec": {"containers": [container]}},
        },
    }


def service_manifest(stack: ComponentStack) -> dict[str, Any]:
    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {"name": stack.name},
        "spec": {
            "selector": {"app": stack.name},
            "ports": [{"name": f"port-{port}", "port": port, "targetPort": port} for port in stack.ports],
        },
    }


def to_yaml(manifest: dict[str, Any]) -> str:
    return yaml.safe_dump(manifest, default_flow_style=False, sort_keys=False)
