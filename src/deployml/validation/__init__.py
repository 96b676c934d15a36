# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Structural checks for deployment topologies."""

from deployml.validation.checks import ValidationError, ValidationResult, ValidationWarning, validate

__all__ = [
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "validate",
]
