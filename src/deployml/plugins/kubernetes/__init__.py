# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Kubernetes target: Dockerfiles plus Deployment and Service manifests."""

from deployml.plugins.kubernetes.lifecycle import KubernetesLifecycle
from deployml.plugins.registry import Plugin

PLUGIN = Plugin(
    name="kubernetes",
    description="Docker images with Kubernetes Deployment and Service manifests",
    lifecycle_factory=KubernetesLifecycle,
)

__all__ = ["PLUGIN", "KubernetesLifecycle"]
