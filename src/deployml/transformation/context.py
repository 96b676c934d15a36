# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Per-run state handed to plugins: model, topology, file access, settings."""

from __future__ import annotations

import shutil
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from deployml.model.deployment import DeploymentModel
from deployml.model.entities import BaseElement
from deployml.parser.entity_graph import EntityId
from deployml.topology.graph import TopologyGraph

# ###############
# Public Interface
# ###############


class PluginFileAccess:
    """Reads source artifacts and writes output files by relative path.

    Reads resolve against *source_directory* (where the model and its
    artifacts live); writes resolve against *target_directory*. Writing is
    only possible between :meth:`open` and :meth:`close`.
    """

    def __init__(self, source_directory: Path, target_directory: Path) -> None:
        self.source_directory = source_directory
        self.target_directory = target_directory
        self._open = False
        self._closed = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        """Create the target directory and allow writes."""
        if self._closed:
            raise RuntimeError("File access was already closed")
        self.target_directory.mkdir(parents=True, exist_ok=True)
        self._open = True

    def close(self) -> None:
        self._open = False
        self._closed = True

    def read_to_string(self, relative_path: str) -> str:
        """Return the text of a source file.

        Raises:
            OSError: If the file cannot be read.
        """
        return _resolve(self.source_directory, relative_path).read_text(encoding="utf-8")

    def write(self, relative_path: str, content: str) -> Path:
        """Write *content* to an output file, replacing it; parent directories are created."""
        target = self._target(relative_path)
        target.write_text(content, encoding="utf-8")
        return target

    def append(self, relative_path: str, content: str) -> Path:
        """Append *content* to an output file; parent directories are created."""
        target = self._target(relative_path)
        with target.open("a", encoding="utf-8") as handle:
            handle.write(content)
        return target

    def copy(self, source_path: str, relative_target: str) -> Path:
        """Copy a source file into the output tree."""
        source = _resolve(self.source_directory, source_path)
        target = self._target(relative_target)
        shutil.copyfile(source, target)
        return target

    def _target(self, relative_path: str) -> Path:
        if not self._open:
            raise RuntimeError("File access is not open; output can only be written between prepare and cleanup")
        target = _resolve(self.target_directory, relative_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        return target


class TransformationContext:
    """Everything one transformation run needs.

    A context belongs to exactly one run. The set of transformed entities is
    run-local state, so independent runs over the same model do not interfere.

    Attributes:
        model: The deployment model being transformed.
        file_access: Source/target file access for this run.
        settings: Plugin-specific settings from the configuration.
    """

    def __init__(
        self,
        model: DeploymentModel,
        file_access: PluginFileAccess,
        settings: Mapping[str, Any] | None = None,
    ) -> None:
        self.model = model
        self.file_access = file_access
        self.settings: Mapping[str, Any] = settings or {}
        self._transformed: set[EntityId] = set()

    @property
    def topology_graph(self) -> TopologyGraph:
        return self.model.topology

    @property
    def target_directory(self) -> Path:
        return self.file_access.target_directory

    def is_transformed(self, element: BaseElement) -> bool:
        return element.id in self._transformed

    def mark_transformed(self, element: BaseElement) -> None:
        self._transformed.add(element.id)


# ################
# Implementation
# ################


def _resolve(root: Path, relative_path: str) -> Path:
    """Resolve *relative_path* below *root*, rejecting paths that escape it."""
    resolved_root = root.resolve()
    path = (resolved_root / relative_path.lstrip("/")).resolve()
    if path != resolved_root and resolved_root not in path.parents:
        raise PermissionError(f"Path '{relative_path}' escapes '{root}'")
    return path
