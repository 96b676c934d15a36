# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Transformation context, plugin lifecycle, and visitor dispatch."""

from deployml.transformation.context import PluginFileAccess, TransformationContext
from deployml.transformation.lifecycle import Lifecycle, LifecycleOrderError, LifecycleRunner, LifecycleState
from deployml.transformation.visitor import (
    ComponentVisitor,
    RelationVisitor,
    UnsupportedVariantError,
    dispatch_component,
    dispatch_relation,
    visit_topology,
)

__all__ = [
    "PluginFileAccess",
    "TransformationContext",
    "Lifecycle",
    "LifecycleOrderError",
    "LifecycleRunner",
    "LifecycleState",
    "ComponentVisitor",
    "RelationVisitor",
    "UnsupportedVariantError",
    "dispatch_component",
    "dispatch_relation",
    "visit_topology",
]
