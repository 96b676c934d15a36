# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""DeployML: one deployment model, many infrastructure-as-code targets."""

__version__ = "0.1.0"
