# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Component variants of the DeployML model.

The set of variants is closed and tagged by :class:`ComponentKind`. Each kind
names its parent kind, which is used both for ``is_kind`` checks and for the
visitor's fallback dispatch. Variant accessors are plain property lookups;
they add no storage of their own.
"""

from __future__ import annotations

from enum import Enum

from deployml.model.entities import Artifact, ModelEntity, collect_artifacts
from deployml.model.types import Attribute
from deployml.parser.entity_graph import Entity, EntityGraph

# ###############
# Public Interface
# ###############


class ComponentKind(Enum):
    """Semantic kinds of components; the value is the component type name."""

    ROOT = "base"
    COMPUTE = "compute"
    SOFTWARE_COMPONENT = "software_component"
    DBMS = "dbms"
    MYSQL_DBMS = "mysql_dbms"
    DATABASE = "database"
    MYSQL_DATABASE = "mysql_database"
    WEB_SERVER = "web_server"
    TOMCAT = "tomcat"
    WEB_APPLICATION = "web_application"

    @property
    def parent(self) -> ComponentKind | None:
        return _COMPONENT_PARENTS.get(self)

    def lineage(self) -> list[ComponentKind]:
        """Return this kind followed by its ancestor kinds up to ``ROOT``."""
        kinds: list[ComponentKind] = []
        kind: ComponentKind | None = self
        while kind is not None:
            kinds.append(kind)
            kind = kind.parent
        return kinds

    @classmethod
    def from_type_name(cls, type_name: str) -> ComponentKind | None:
        return _KINDS_BY_TYPE_NAME.get(type_name)


class Component(ModelEntity):
    """A node of the deployment topology."""

    kind: ComponentKind = ComponentKind.ROOT

    ARTIFACTS = "artifacts"
    RELATIONS = "relations"

    @property
    def artifacts(self) -> list[Artifact]:
        """Component-level artifacts (deployment archives, container images, ...)."""
        return collect_artifacts(self.entity.get_child(self.ARTIFACTS))

    @property
    def relation_entities(self) -> list[Entity]:
        relations = self.entity.get_child(self.RELATIONS)
        return relations.get_children() if relations is not None else []

    def is_kind(self, kind: ComponentKind) -> bool:
        return kind in self.kind.lineage()


class Compute(Component):
    kind = ComponentKind.COMPUTE

    OS_FAMILY = Attribute("os_family", str)
    MACHINE_IMAGE = Attribute("machine_image", str)
    INSTANCE_TYPE = Attribute("instance_type", str)
    KEY_NAME = Attribute("key_name", str)
    PUBLIC_KEY = Attribute("public_key", str)
    PRIVATE_KEY = Attribute("private_key", str)

    @property
    def os_family(self) -> str | None:
        return self.get_property_value(self.OS_FAMILY)

    @property
    def machine_image(self) -> str | None:
        return self.get_property_value(self.MACHINE_IMAGE)

    @property
    def instance_type(self) -> str | None:
        return self.get_property_value(self.INSTANCE_TYPE)

    @property
    def key_name(self) -> str | None:
        return self.get_property_value(self.KEY_NAME)

    @property
    def public_key(self) -> str | None:
        return self.get_property_value(self.PUBLIC_KEY)

    @property
    def private_key(self) -> str | None:
        return self.get_property_value(self.PRIVATE_KEY)


class SoftwareComponent(Component):
    kind = ComponentKind.SOFTWARE_COMPONENT


class Dbms(SoftwareComponent):
    kind = ComponentKind.DBMS

    PORT = Attribute("port", int)
    ROOT_PASSWORD = Attribute("root_password", str)

    @property
    def port(self) -> int | None:
        return self.get_property_value(self.PORT)

    @property
    def root_password(self) -> str | None:
        return self.get_property_value(self.ROOT_PASSWORD)


class MysqlDbms(Dbms):
    kind = ComponentKind.MYSQL_DBMS

    VERSION = Attribute("version", str)

    @property
    def version(self) -> str | None:
        return self.get_property_value(self.VERSION)


class Database(Component):
    kind = ComponentKind.DATABASE

    SCHEMA_NAME = Attribute("schema_name", str)
    USER = Attribute("user", str)
    PASSWORD = Attribute("password", str)

    @property
    def schema_name(self) -> str | None:
        return self.get_property_value(self.SCHEMA_NAME)

    @property
    def user(self) -> str | None:
        return self.get_property_value(self.USER)

    @property
    def password(self) -> str | None:
        return self.get_property_value(self.PASSWORD)


class MysqlDatabase(Database):
    kind = ComponentKind.MYSQL_DATABASE


class WebServer(SoftwareComponent):
    kind = ComponentKind.WEB_SERVER

    PORT = Attribute("port", int)

    @property
    def port(self) -> int | None:
        return self.get_property_value(self.PORT)


class Tomcat(WebServer):
    kind = ComponentKind.TOMCAT


class WebApplication(Component):
    kind = ComponentKind.WEB_APPLICATION


COMPONENT_CLASSES: dict[ComponentKind, type[Component]] = {
    ComponentKind.ROOT: Component,
    ComponentKind.COMPUTE: Compute,
    ComponentKind.SOFTWARE_COMPONENT: SoftwareComponent,
    ComponentKind.DBMS: Dbms,
    ComponentKind.MYSQL_DBMS: MysqlDbms,
    ComponentKind.DATABASE: Database,
    ComponentKind.MYSQL_DATABASE: MysqlDatabase,
    ComponentKind.WEB_SERVER: WebServer,
    ComponentKind.TOMCAT: Tomcat,
    ComponentKind.WEB_APPLICATION: WebApplication,
}


def create_component(entity: Entity, graph: EntityGraph) -> Component:
    """Wrap a component instance entity in the class of its variant.

    The variant is the kind of the nearest type in the instance's type chain
    whose name is a known component kind; unknown chains yield a plain
    :class:`Component`.

    Raises:
        ModelError: If the instance has no resolvable type.
    """
    probe = Component(entity, graph)
    for type_entity in probe.type_chain():
        kind = ComponentKind.from_type_name(type_entity.name)
        if kind is not None:
            return COMPONENT_CLASSES[kind](entity, graph)
    return probe


# ################
# Implementation
# ################

_COMPONENT_PARENTS: dict[ComponentKind, ComponentKind] = {
    ComponentKind.COMPUTE: ComponentKind.ROOT,
    ComponentKind.SOFTWARE_COMPONENT: ComponentKind.ROOT,
    ComponentKind.DBMS: ComponentKind.SOFTWARE_COMPONENT,
    ComponentKind.MYSQL_DBMS: ComponentKind.DBMS,
    ComponentKind.DATABASE: ComponentKind.ROOT,
    ComponentKind.MYSQL_DATABASE: ComponentKind.DATABASE,
    ComponentKind.WEB_SERVER: ComponentKind.SOFTWARE_COMPONENT,
    ComponentKind.TOMCAT: ComponentKind.WEB_SERVER,
    ComponentKind.WEB_APPLICATION: ComponentKind.ROOT,
}

_KINDS_BY_TYPE_NAME: dict[str, ComponentKind] = {kind.value: kind for kind in ComponentKind}
