# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging

from deployml.errors import TransformationError
from deployml.plugins.heat.visitor import HeatVisitor
from deployml.transformation.lifecycle import Lifecycle
from deployml.transformation.visitor import visit_topology

logger = logging.getLogger(__name__)


class HeatLifecycle(Lifecycle):
    """Generates an OpenStack Heat template."""

    def transform(self) -> None:
        logger.info("Begin transformation to Heat...")
        visitor = HeatVisitor(self.context)
        visit_topology(self.context.topology_graph, self.context, component_visitor=visitor)
        try:
            visitor.populate_template()
        except OSError as exc:
            raise TransformationError(f"Cannot write Heat template: {exc}") from exc
        logger.info("Transformation to Heat successful")
