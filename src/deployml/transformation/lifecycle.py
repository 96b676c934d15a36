# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""The plugin lifecycle and the runner that enforces its phase order.

Every plugin runs the same five phases, in this order and each exactly once
per run::

    check_environment -> check_model -> prepare -> transform -> cleanup

:class:`LifecycleRunner` is the only place the order is enforced; the phase
implementations in :class:`Lifecycle` subclasses do not re-check it.
"""

from __future__ import annotations

import logging
import shutil
from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import Enum

from deployml.errors import DeploymlError, EnvironmentCheckError, ModelError, TransformationError
from deployml.transformation.context import TransformationContext
from deployml.validation.checks import validate

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class LifecycleState(Enum):
    """States of one lifecycle run; each phase moves to the next state."""

    IDLE = "idle"
    ENVIRONMENT_CHECKED = "environment-checked"
    MODEL_CHECKED = "model-checked"
    PREPARED = "prepared"
    TRANSFORMED = "transformed"
    CLEANED_UP = "cleaned-up"


class LifecycleOrderError(RuntimeError):
    """Raised when lifecycle phases are driven out of order."""


class Lifecycle(ABC):
    """Base class of plugin lifecycles.

    The defaults cover what most plugins need: checking for required command
    line tools, running the topology checks, and opening and closing the
    context's file access. Plugins implement :meth:`transform`.

    Attributes:
        required_tools: Executables that must be on ``PATH``; extended by the
            ``required-tools`` plugin setting.
    """

    required_tools: tuple[str, ...] = ()

    def __init__(self, context: TransformationContext) -> None:
        self.context = context

    def check_environment(self) -> None:
        tools = [*self.required_tools, *self.context.settings.get("required_tools", [])]
        missing = [tool for tool in tools if shutil.which(tool) is None]
        if missing:
            raise EnvironmentCheckError(f"Required tool(s) not found on PATH: {', '.join(missing)}")

    def check_model(self) -> None:
        result = validate(self.context.model)
        for warning in result.warnings:
            logger.warning(warning.message)
        if result.has_errors:
            error_lines = "\n".join(f"  {e.message}" for e in result.errors)
            raise ModelError(f"Deployment model '{self.context.model.name}' is invalid:\n{error_lines}")

    def prepare(self) -> None:
        self.context.file_access.open()

    @abstractmethod
    def transform(self) -> None:
        """Visit the topology and write the plugin's artifacts."""

    def cleanup(self) -> None:
        self.context.file_access.close()


class LifecycleRunner:
    """Drives one :class:`Lifecycle` through its phases in order.

    Data errors raised by a phase (any :class:`~deployml.errors.DeploymlError`
    or ``OSError``) are wrapped in a single
    :class:`~deployml.errors.TransformationError`. Programming errors (phase
    order violations, unsupported visitor variants) propagate unchanged. Once a
    phase has failed, only :meth:`cleanup` may still be called.
    """

    def __init__(self, lifecycle: Lifecycle) -> None:
        self.lifecycle = lifecycle
        self.state = LifecycleState.IDLE
        self._failed = False
        self._prepare_entered = False

    def check_environment(self) -> None:
        self._run_phase("check_environment", LifecycleState.IDLE, LifecycleState.ENVIRONMENT_CHECKED)

    def check_model(self) -> None:
        self._run_phase("check_model", LifecycleState.ENVIRONMENT_CHECKED, LifecycleState.MODEL_CHECKED)

    def prepare(self) -> None:
        self._run_phase("prepare", LifecycleState.MODEL_CHECKED, LifecycleState.PREPARED)

    def transform(self) -> None:
        self._run_phase("transform", LifecycleState.PREPARED, LifecycleState.TRANSFORMED)

    def cleanup(self) -> None:
        if self.state is LifecycleState.CLEANED_UP:
            raise LifecycleOrderError("Phase 'cleanup' already ran")
        if not self._prepare_entered:
            raise LifecycleOrderError(f"Cannot run 'cleanup' in state '{self.state.value}': 'prepare' never ran")
        try:
            self._call("cleanup", self.lifecycle.cleanup)
        finally:
            self.state = LifecycleState.CLEANED_UP

    def run(self) -> None:
        """Run all phases; ``cleanup`` runs on every exit path once ``prepare`` was entered."""
        self.check_environment()
        self.check_model()
        try:
            self.prepare()
            self.transform()
        finally:
            if self._prepare_entered:
                self.cleanup()

    def _run_phase(self, phase: str, expected: LifecycleState, reached: LifecycleState) -> None:
        if self._failed:
            raise LifecycleOrderError(f"Cannot run '{phase}': an earlier phase failed")
        if self.state is not expected:
            raise LifecycleOrderError(
                f"Cannot run '{phase}' in state '{self.state.value}'; expected state '{expected.value}'"
            )
        if reached is LifecycleState.PREPARED:
            self._prepare_entered = True
        try:
            self._call(phase, getattr(self.lifecycle, phase))
        except Exception:
            self._failed = True
            raise
        self.state = reached

    def _call(self, phase: str, method: Callable[[], None]) -> None:
        logger.debug("Running phase '%s' of %s", phase, type(self.lifecycle).__name__)
        try:
            method()
        except TransformationError as exc:
            if exc.phase is None:
                exc.phase = phase
            raise
        except (DeploymlError, OSError) as exc:
            raise TransformationError(f"Phase '{phase}' failed: {exc}", phase=phase) from exc
