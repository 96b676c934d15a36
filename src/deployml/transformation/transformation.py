# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Transformation runs: one model, one plugin, one fresh context each."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from deployml.model.deployment import DeploymentModel
from deployml.plugins.registry import Plugin
from deployml.transformation.context import PluginFileAccess, TransformationContext
from deployml.transformation.lifecycle import LifecycleOrderError, LifecycleRunner

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class TransformationState(Enum):
    READY = "ready"
    TRANSFORMING = "transforming"
    DONE = "done"
    ERROR = "error"


class Transformation:
    """A single run of one plugin over one deployment model.

    Attributes:
        state: Current :class:`TransformationState`.
        error: The terminal error of a failed run, if any.
    """

    def __init__(
        self,
        model: DeploymentModel,
        plugin: Plugin,
        source_directory: Path,
        target_directory: Path,
        settings: Mapping[str, Any] | None = None,
    ) -> None:
        self.model = model
        self.plugin = plugin
        self.source_directory = source_directory
        self.target_directory = target_directory
        self.settings = settings or {}
        self.state = TransformationState.READY
        self.error: Exception | None = None

    def start(self) -> None:
        """Run the plugin's lifecycle to completion.

        Raises:
            TransformationError: If any phase fails.
            LifecycleOrderError: If the run was already started.
        """
        if self.state is not TransformationState.READY:
            raise LifecycleOrderError(f"Transformation to '{self.plugin.name}' was already started")
        self.state = TransformationState.TRANSFORMING
        context = TransformationContext(
            self.model,
            PluginFileAccess(self.source_directory, self.target_directory),
            self.settings,
        )
        runner = LifecycleRunner(self.plugin.get_lifecycle(context))
        logger.info("Transforming '%s' with plugin '%s'", self.model.name, self.plugin.name)
        try:
            runner.run()
        except Exception as exc:
            self.state = TransformationState.ERROR
            self.error = exc
            raise
        self.state = TransformationState.DONE


def transform_model(
    model: DeploymentModel,
    plugins: list[Plugin],
    source_directory: Path,
    output_directory: Path,
    settings: Mapping[str, Mapping[str, Any]] | None = None,
) -> list[Transformation]:
    """Run every plugin in *plugins* over *model*, each into ``output_directory/<plugin>``.

    Runs are independent and sequential; the first failing run stops the batch.

    Args:
        model: The deployment model to transform.
        plugins: Plugins to run, in order.
        source_directory: Directory the model's artifact paths are relative to.
        output_directory: Root of the generated artifacts.
        settings: Per-plugin settings keyed by plugin name.

    Returns:
        The completed :class:`Transformation` objects.

    Raises:
        TransformationError: If a run fails.
    """
    settings = settings or {}
    done: list[Transformation] = []
    for plugin in plugins:
        transformation = Transformation(
            model,
            plugin,
            source_directory,
            output_directory / plugin.name,
            settings.get(plugin.name),
        )
        transformation.start()
        done.append(transformation)
    return done
