# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Error types shared by the model, topology, and transformation layers."""

from __future__ import annotations

# ###############
# Public Interface
# ###############


class DeploymlError(Exception):
    """Base class of all errors raised by DeployML."""


class ModelError(DeploymlError):
    """Raised when the deployment model violates an integrity rule.

    Covers unresolvable type references, dangling relation targets, broken
    hosting chains, and typed property coercion failures.

    Attributes:
        entity: Human-readable description of the offending entity, if known.
    """

    def __init__(self, message: str, entity: str | None = None) -> None:
        super().__init__(message)
        self.entity = entity


class TypeMismatchError(ModelError):
    """Raised when a property value cannot be coerced to the requested type."""


class TopologyError(ModelError):
    """Raised when the topology graph is structurally malformed (e.g. a Hosted-On cycle)."""


class EnvironmentCheckError(DeploymlError):
    """Raised when a plugin prerequisite (tool, credential) is not available."""


class TransformationError(DeploymlError):
    """The single error type surfaced to the caller of a transformation run.

    Attributes:
        phase: Name of the lifecycle phase that failed, if known.
    """

    def __init__(self, message: str, phase: str | None = None) -> None:
        super().__init__(message)
        self.phase = phase
