# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Topology graph and its traversal algorithms."""

from deployml.topology.graph import (
    TopologyGraph,
    get_source_components,
    get_target_components,
    hosted_components,
    resolve_hosting_component,
)

__all__ = [
    "TopologyGraph",
    "get_source_components",
    "get_target_components",
    "hosted_components",
    "resolve_hosting_component",
]
