# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Output dependency graphs and derived-value propagation."""

from deployml.output.graph import (
    OutputEdge,
    OutputGraph,
    OutputResource,
    Parameter,
    collect_from_successors,
    merge_contributions,
)

__all__ = [
    "OutputEdge",
    "OutputGraph",
    "OutputResource",
    "Parameter",
    "collect_from_successors",
    "merge_contributions",
]
