# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Ansible target: a playbook and an inventory."""

from deployml.plugins.ansible.lifecycle import AnsibleLifecycle
from deployml.plugins.registry import Plugin

PLUGIN = Plugin(name="ansible", description="Ansible playbook and inventory", lifecycle_factory=AnsibleLifecycle)

__all__ = ["PLUGIN", "AnsibleLifecycle"]
