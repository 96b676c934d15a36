# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Target plugins. The built-in plugins are registered on import."""

from deployml.plugins.registry import Plugin, available_plugins, get_plugin, register_plugin

from deployml.plugins import ansible, azure, heat, kubernetes

for _module in (ansible, azure, heat, kubernetes):
    register_plugin(_module.PLUGIN)

__all__ = ["Plugin", "available_plugins", "get_plugin", "register_plugin"]
