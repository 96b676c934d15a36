# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""OpenStack Heat target."""

from deployml.plugins.heat.lifecycle import HeatLifecycle
from deployml.plugins.registry import Plugin

PLUGIN = Plugin(name="heat", description="OpenStack Heat orchestration template", lifecycle_factory=HeatLifecycle)

__all__ = ["PLUGIN", "HeatLifecycle"]
