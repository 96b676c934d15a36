# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""The deployment model: typed components and relations plus their topology graph."""

from __future__ import annotations

import logging
from pathlib import Path

from deployml.model.components import Component, create_component
from deployml.model.relations import Relation, create_relation
from deployml.parser.entity_graph import COMPONENTS, EntityGraph
from deployml.parser.loader import load, load_file
from deployml.topology.graph import TopologyGraph

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class DeploymentModel:
    """A fully resolved deployment model.

    Building the model wraps every instance below ``components`` in its variant
    class, wraps every relation entry, and adds both to a fresh
    :class:`TopologyGraph`.

    Raises:
        ModelError: If an instance has no resolvable type or a relation refers
            to an undeclared component.
    """

    def __init__(self, name: str, graph: EntityGraph) -> None:
        self.name = name
        self.graph = graph
        self.components: dict[str, Component] = {}
        self.relations: list[Relation] = []
        self.topology = TopologyGraph()

        section = graph.root.get_child(COMPONENTS)
        for entity in section.get_children() if section is not None else []:
            component = create_component(entity, graph)
            self.components[component.name] = component
            self.topology.add_component(component)

        for component in self.components.values():
            for entity in component.relation_entities:
                relation = create_relation(entity, graph)
                self.relations.append(relation)
                self.topology.add_relation(relation)

        logger.debug(
            "Loaded deployment model '%s' with %d component(s) and %d relation(s)",
            name,
            len(self.components),
            len(self.relations),
        )

    @classmethod
    def of(cls, path: Path) -> DeploymentModel:
        """Load the model from the YAML document at *path*; the model is named after the file stem."""
        return cls(path.stem, load_file(path))

    @classmethod
    def from_text(cls, text: str, name: str = "deployment") -> DeploymentModel:
        return cls(name, load(text, name=name))

    @property
    def description(self) -> str | None:
        return self.graph.root.get_value("description")

    def get_component(self, name: str) -> Component | None:
        return self.components.get(name)
