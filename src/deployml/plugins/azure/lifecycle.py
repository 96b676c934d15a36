# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging

from deployml.errors import TransformationError
from deployml.plugins.azure.visitor import AzureVisitor
from deployml.transformation.lifecycle import Lifecycle
from deployml.transformation.visitor import visit_topology

logger = logging.getLogger(__name__)


class AzureLifecycle(Lifecycle):
    """Generates an Azure Resource Manager template."""

    def transform(self) -> None:
        logger.info("Begin transformation to Azure...")
        visitor = AzureVisitor(self.context)
        visit_topology(self.context.topology_graph, self.context, component_visitor=visitor)
        try:
            visitor.populate_template()
        except OSError as exc:
            raise TransformationError(f"Cannot write Azure template: {exc}") from exc
        logger.info("Transformation to Azure successful")
