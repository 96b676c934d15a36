# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the topology graph and hosting resolution."""

from pathlib import Path

import pytest

from deployml.errors import ModelError, TopologyError
from deployml.model.components import Compute
from deployml.model.deployment import DeploymentModel
from deployml.model.relations import RelationKind
from deployml.topology.graph import (
    get_source_components,
    get_target_components,
    hosted_components,
    resolve_hosting_component,
)

DATA = Path(__file__).parent.parent / "data"

TYPES = """
component_types:
  compute:
    extends: null
  software_component:
    extends: null
"""

# ###############
# Test Helpers
# ###############


def _model(components: str) -> DeploymentModel:
    return DeploymentModel.from_text("components:\n" + components + TYPES)


def _names(components: list) -> list[str]:
    return [c.name for c in components]


@pytest.fixture
def webshop() -> DeploymentModel:
    return DeploymentModel.of(DATA / "webshop.yaml")


# ###############
# Graph structure
# ###############


class TestTopologyGraph:
    def test_components_in_document_order(self, webshop: DeploymentModel) -> None:
        assert _names(webshop.topology.components()) == [
            "app_server",
            "db_server",
            "tomcat",
            "webshop",
            "mysql",
            "shop_db",
        ]

    def test_outgoing_and_incoming_by_kind(self, webshop: DeploymentModel) -> None:
        graph = webshop.topology
        webshop_app = graph.get_component("webshop")
        assert webshop_app is not None
        assert len(graph.outgoing(webshop_app)) == 2
        assert len(graph.outgoing(webshop_app, RelationKind.CONNECTS_TO)) == 1
        shop_db = graph.get_component("shop_db")
        assert shop_db is not None
        assert [graph.source_of(r).name for r in graph.incoming(shop_db)] == ["webshop"]

    def test_depends_on_matches_sub_kinds(self, webshop: DeploymentModel) -> None:
        graph = webshop.topology
        webshop_app = graph.get_component("webshop")
        assert webshop_app is not None
        assert _names(get_target_components(graph, webshop_app, RelationKind.DEPENDS_ON)) == ["tomcat", "shop_db"]
        assert _names(get_target_components(graph, webshop_app, RelationKind.HOSTED_ON)) == ["tomcat"]

    def test_target_components_are_deduplicated(self) -> None:
        model = _model(
            "  vm:\n    type: compute\n"
            "  app:\n    type: software_component\n    relations:\n"
            "      - hosted_on: vm\n      - connects_to: vm\n"
        )
        app = model.components["app"]
        assert _names(get_target_components(model.topology, app, RelationKind.DEPENDS_ON)) == ["vm"]

    def test_source_and_hosted_components(self, webshop: DeploymentModel) -> None:
        graph = webshop.topology
        mysql = graph.get_component("mysql")
        assert mysql is not None
        assert _names(hosted_components(graph, mysql)) == ["shop_db"]
        db_server = graph.get_component("db_server")
        assert db_server is not None
        assert _names(get_source_components(graph, db_server, RelationKind.HOSTED_ON)) == ["mysql"]

    def test_duplicate_component_raises(self, webshop: DeploymentModel) -> None:
        with pytest.raises(ModelError):
            webshop.topology.add_component(webshop.components["mysql"])


# ###############
# Hosting resolution
# ###############


class TestResolveHostingComponent:
    def test_transitive_chain_reaches_compute(self, webshop: DeploymentModel) -> None:
        compute = resolve_hosting_component(webshop.topology, webshop.components["shop_db"])
        assert isinstance(compute, Compute)
        assert compute.name == "db_server"

    def test_compute_resolves_to_itself(self, webshop: DeploymentModel) -> None:
        server = webshop.components["app_server"]
        assert resolve_hosting_component(webshop.topology, server) is server

    def test_unhosted_component_resolves_to_none(self) -> None:
        model = _model("  app:\n    type: software_component\n")
        assert resolve_hosting_component(model.topology, model.components["app"]) is None

    def test_cycle_raises_topology_error(self) -> None:
        model = _model(
            "  a:\n    type: software_component\n    relations:\n      - hosted_on: b\n"
            "  b:\n    type: software_component\n    relations:\n      - hosted_on: a\n"
        )
        with pytest.raises(TopologyError, match="cycle"):
            resolve_hosting_component(model.topology, model.components["a"])

    def test_two_hosts_raise_topology_error(self) -> None:
        model = _model(
            "  vm1:\n    type: compute\n"
            "  vm2:\n    type: compute\n"
            "  app:\n    type: software_component\n    relations:\n"
            "      - hosted_on: vm1\n      - hosted_on: vm2\n"
        )
        with pytest.raises(TopologyError, match="more than one"):
            resolve_hosting_component(model.topology, model.components["app"])
