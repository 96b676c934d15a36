# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Registry mapping plugin names to lifecycle factories."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from deployml.transformation.context import TransformationContext
from deployml.transformation.lifecycle import Lifecycle

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class Plugin:
    """A target technology DeployML can generate artifacts for.

    Attributes:
        name: Short name used on the command line and in configuration.
        description: One-line human-readable description.
        lifecycle_factory: Creates the plugin's lifecycle for a run.
    """

    name: str
    description: str
    lifecycle_factory: Callable[[TransformationContext], Lifecycle]

    def get_lifecycle(self, context: TransformationContext) -> Lifecycle:
        return self.lifecycle_factory(context)


def register_plugin(plugin: Plugin) -> None:
    """Register *plugin*; registering a second plugin under the same name raises ``ValueError``."""
    existing = _PLUGINS.get(plugin.name)
    if existing is not None and existing != plugin:
        raise ValueError(f"A plugin named '{plugin.name}' is already registered")
    _PLUGINS[plugin.name] = plugin


def get_plugin(name: str) -> Plugin:
    """Return the plugin registered as *name*.

    Raises:
        KeyError: If no such plugin is registered; the message lists the available names.
    """
    try:
        return _PLUGINS[name]
    except KeyError:
        available = ", ".join(sorted(_PLUGINS)) or "none"
        raise KeyError(f"Unknown plugin '{name}' (available: {available})") from None


def available_plugins() -> list[Plugin]:
    return [_PLUGINS[name] for name in sorted(_PLUGINS)]


# ################
# Implementation
# ################

_PLUGINS: dict[str, Plugin] = {}
