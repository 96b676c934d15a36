# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Typed deployment model (components, relations, properties, operations).

:class:`~deployml.model.deployment.DeploymentModel` lives in its own module
because it builds on the topology package, which in turn imports this one.
"""

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
    create_component,
)
from deployml.model.entities import Artifact, ModelEntity, Operation, Property
from deployml.model.relations import (
    ConnectsTo,
    DependsOn,
    HostedOn,
    Relation,
    RelationKind,
    create_relation,
)
from deployml.model.types import Attribute

__all__ = [
    # Attributes and entities
    "Attribute",
    "Artifact",
    "ModelEntity",
    "Operation",
    "Property",
    # Components
    "Component",
    "ComponentKind",
    "Compute",
    "Database",
    "Dbms",
    "MysqlDatabase",
    "MysqlDbms",
    "SoftwareComponent",
    "Tomcat",
    "WebApplication",
    "WebServer",
    "create_component",
    # Relations
    "ConnectsTo",
    "DependsOn",
    "HostedOn",
    "Relation",
    "RelationKind",
    "create_relation",
]
