# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging

from deployml.errors import TransformationError
from deployml.plugins.ansible.playbook import PlaybookBuilder
from deployml.transformation.lifecycle import Lifecycle
from deployml.transformation.visitor import visit_topology

logger = logging.getLogger(__name__)

PLAYBOOK = "deployment.yml"
INVENTORY = "inventory.ini"


class AnsibleLifecycle(Lifecycle):
    """Generates an Ansible playbook and inventory."""

    def transform(self) -> None:
        logger.info("Begin transformation to Ansible...")
        builder = PlaybookBuilder(self.context)
        try:
            visit_topology(self.context.topology_graph, self.context, component_visitor=builder)
            self.context.file_access.write(PLAYBOOK, builder.render_playbook())
            self.context.file_access.write(INVENTORY, builder.render_inventory())
        except OSError as exc:
            raise TransformationError(f"Cannot write Ansible output: {exc}") from exc
        logger.info("Transformation to Ansible successful")
