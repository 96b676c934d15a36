# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Double dispatch of components and relations to plugin visitors.

Dispatch goes through explicit tables from kind to handler method name. Every
specialised handler falls back to the handler of its parent kind, so a plugin
implements only the handlers it cares about and can route many variants to a
single one (e.g. override ``visit_software_component`` to handle DBMS, web
servers and Tomcat alike). The root handlers raise
:class:`UnsupportedVariantError`: reaching them means the plugin was handed a
variant it has no handler for.
"""

from __future__ import annotations

import logging
from typing import Protocol

from deployml.model.components import (
    Component,
    ComponentKind,
    Compute,
    Database,
    Dbms,
    MysqlDatabase,
    MysqlDbms,
    SoftwareComponent,
    Tomcat,
    WebApplication,
    WebServer,
)
from deployml.model.relations import ConnectsTo, DependsOn, HostedOn, Relation, RelationKind
from deployml.topology.graph import TopologyGraph

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class UnsupportedVariantError(NotImplementedError):
    """Raised when a visitor is invoked for a variant it does not handle."""


class ComponentVisitor:
    """Base class of component visitors; one handler per :class:`ComponentKind`."""

    def visit_component(self, component: Component) -> None:
        raise UnsupportedVariantError(
            f"{type(self).__name__} does not handle component '{component.name}' of kind {component.kind.name}"
        )

    def visit_compute(self, component: Compute) -> None:
        self.visit_component(component)

    def visit_software_component(self, component: SoftwareComponent) -> None:
        self.visit_component(component)

    def visit_dbms(self, component: Dbms) -> None:
        self.visit_software_component(component)

    def visit_mysql_dbms(self, component: MysqlDbms) -> None:
        self.visit_dbms(component)

    def visit_database(self, component: Database) -> None:
        self.visit_component(component)

    def visit_mysql_database(self, component: MysqlDatabase) -> None:
        self.visit_database(component)

    def visit_web_server(self, component: WebServer) -> None:
        self.visit_software_component(component)

    def visit_tomcat(self, component: Tomcat) -> None:
        self.visit_web_server(component)

    def visit_web_application(self, component: WebApplication) -> None:
        self.visit_component(component)


class RelationVisitor:
    """Base class of relation visitors; one handler per :class:`RelationKind`."""

    def visit_relation(self, relation: Relation) -> None:
        raise UnsupportedVariantError(
            f"{type(self).__name__} does not handle relation '{relation.name}' of kind {relation.kind.name}"
        )

    def visit_depends_on(self, relation: DependsOn) -> None:
        self.visit_relation(relation)

    def visit_hosted_on(self, relation: HostedOn) -> None:
        self.visit_depends_on(relation)

    def visit_connects_to(self, relation: ConnectsTo) -> None:
        self.visit_depends_on(relation)


COMPONENT_HANDLERS: dict[ComponentKind, str] = {
    ComponentKind.ROOT: "visit_component",
    ComponentKind.COMPUTE: "visit_compute",
    ComponentKind.SOFTWARE_COMPONENT: "visit_software_component",
    ComponentKind.DBMS: "visit_dbms",
    ComponentKind.MYSQL_DBMS: "visit_mysql_dbms",
    ComponentKind.DATABASE: "visit_database",
    ComponentKind.MYSQL_DATABASE: "visit_mysql_database",
    ComponentKind.WEB_SERVER: "visit_web_server",
    ComponentKind.TOMCAT: "visit_tomcat",
    ComponentKind.WEB_APPLICATION: "visit_web_application",
}

RELATION_HANDLERS: dict[RelationKind, str] = {
    RelationKind.ROOT: "visit_relation",
    RelationKind.DEPENDS_ON: "visit_depends_on",
    RelationKind.HOSTED_ON: "visit_hosted_on",
    RelationKind.CONNECTS_TO: "visit_connects_to",
}


def dispatch_component(visitor: ComponentVisitor, component: Component) -> None:
    """Invoke the handler of *visitor* that matches the kind of *component*."""
    getattr(visitor, COMPONENT_HANDLERS[component.kind])(component)


def dispatch_relation(visitor: RelationVisitor, relation: Relation) -> None:
    """Invoke the handler of *visitor* that matches the kind of *relation*."""
    getattr(visitor, RELATION_HANDLERS[relation.kind])(relation)


class TransformedState(Protocol):
    """The per-run transformed-entity bookkeeping (implemented by the transformation context)."""

    def is_transformed(self, element: Component | Relation) -> bool: ...

    def mark_transformed(self, element: Component | Relation) -> None: ...


def visit_topology(
    graph: TopologyGraph,
    state: TransformedState,
    component_visitor: ComponentVisitor | None = None,
    relation_visitor: RelationVisitor | None = None,
) -> None:
    """Walk *graph* and dispatch every component, then every relation, exactly once.

    Elements already marked as transformed in *state* (for example a compute
    the plugin processed early while handling a component hosted on it) are
    skipped. After dispatch the element is marked, whether or not the handler
    marked it itself.
    """
    if component_visitor is not None:
        for component in graph.components():
            if state.is_transformed(component):
                logger.debug("Component '%s' already transformed; skipping", component.name)
                continue
            dispatch_component(component_visitor, component)
            state.mark_transformed(component)
    if relation_visitor is not None:
        for relation in graph.relations():
            if state.is_transformed(relation):
                continue
            dispatch_relation(relation_visitor, relation)
            state.mark_transformed(relation)


# ################
# Implementation
# ################


def _check_handler_tables() -> None:
    missing = [k.name for k in ComponentKind if k not in COMPONENT_HANDLERS]
    missing += [k.name for k in RelationKind if k not in RELATION_HANDLERS]
    if missing:
        raise RuntimeError(f"Visitor dispatch tables are missing handlers for: {', '.join(missing)}")


_check_handler_tables()
