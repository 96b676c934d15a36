# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging

from deployml.errors import TransformationError
from deployml.plugins.kubernetes.manifests import (
    DEFAULT_BASE_IMAGE,
    artifact_layout,
    deployment_manifest,
    render_dockerfile,
    service_manifest,
    to_yaml,
)
from deployml.plugins.kubernetes.stack import ComponentStack, StackBuilder
from deployml.transformation.lifecycle import Lifecycle
from deployml.transformation.visitor import visit_topology

logger = logging.getLogger(__name__)


class KubernetesLifecycle(Lifecycle):
    """Generates one image build and deployment per component stack."""

    def transform(self) -> None:
        logger.info("Begin transformation to Kubernetes...")
        builder = StackBuilder(self.context)
        visit_topology(self.context.topology_graph, self.context, component_visitor=builder, relation_visitor=builder)
        builder.propagate_environment()
        base_image = self.context.settings.get("base_image") or DEFAULT_BASE_IMAGE
        for stack in builder.stacks.nodes():
            try:
                self._write_stack(stack, base_image)
            except OSError as exc:
                raise TransformationError(f"Cannot write output for stack '{stack.name}': {exc}") from exc
        logger.info("Transformation to Kubernetes successful")

    def _write_stack(self, stack: ComponentStack, base_image: str) -> None:
        files = self.context.file_access
        for _, source, relative in artifact_layout(stack):
            files.copy(source, f"{stack.name}/{relative}")
        files.write(f"{stack.name}/Dockerfile", render_dockerfile(stack, base_image))
        files.write(f"{stack.name}-deployment.yaml", to_yaml(deployment_manifest(stack)))
        if stack.ports:
            files.write(f"{stack.name}-service.yaml", to_yaml(service_manifest(stack)))
        logger.debug("Wrote stack '%s' with %d component(s)", stack.name, len(stack.components))
