# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""The optional ``.deployml.yaml`` configuration file."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".deployml.yaml"
DEFAULT_OUTPUT_DIRECTORY = "deployml-output"


class ConfigError(Exception):
    """Raised when the configuration file cannot be read or is invalid."""


class PluginSettings(BaseModel):
    """Settings of one plugin."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    required_tools: list[str] = Field(alias="required-tools", default_factory=list)
    base_image: str | None = Field(alias="base-image", default=None)


class DeploymlConfig(BaseModel):
    """Top-level configuration.

    Attributes:
        output_directory: Where generated artifacts go, relative to the model file.
        targets: Plugins to run when none are given on the command line; ``None``
            runs every registered plugin.
        plugins: Per-plugin settings keyed by plugin name.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    output_directory: str = Field(alias="output-directory", default=DEFAULT_OUTPUT_DIRECTORY)
    targets: list[str] | None = None
    plugins: dict[str, PluginSettings] = Field(default_factory=dict)

    def plugin_settings(self) -> dict[str, dict[str, Any]]:
        """Return the plugin settings as plain mappings keyed by field name."""
        return {name: settings.model_dump(exclude_none=True) for name, settings in self.plugins.items()}


def load_config(path: Path) -> DeploymlConfig:
    """Load and validate a configuration file.

    An empty file yields the defaults.

    Args:
        path: Path to the configuration file.

    Returns:
        A validated DeploymlConfig instance.

    Raises:
        ConfigError: If the file cannot be read, contains invalid YAML, or does
            not conform to the expected schema.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration '{path}': {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in configuration '{path}': {exc}") from exc

    if data is None:
        data = {}

    try:
        return DeploymlConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration '{path}': {exc}") from exc


def find_config(model_path: Path) -> DeploymlConfig:
    """Load the configuration next to *model_path*, or the defaults if there is none."""
    candidate = model_path.parent / CONFIG_FILE_NAME
    if candidate.exists():
        return load_config(candidate)
    return DeploymlConfig()
