# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Azure Resource Manager target."""

from deployml.plugins.azure.lifecycle import AzureLifecycle
from deployml.plugins.registry import Plugin

PLUGIN = Plugin(name="azure", description="Azure Resource Manager template", lifecycle_factory=AzureLifecycle)

__all__ = ["PLUGIN", "AzureLifecycle"]
