# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the model entity layer: inheritance, typed values, variants."""

from pathlib import Path

import pytest

from deployml.errors import ModelError, TypeMismatchError
from deployml.model.components import ComponentKind, Compute, MysqlDatabase, MysqlDbms
from deployml.model.deployment import DeploymentModel
from deployml.model.entities import normalize_name
from deployml.model.relations import ConnectsTo, HostedOn, RelationKind
from deployml.model.types import Attribute

DATA = Path(__file__).parent.parent / "data"

TYPES = """
component_types:
  base:
    extends: null
  compute:
    extends: base
  software_component:
    extends: base
    properties:
      port:
        type: integer
        default_value: 80
      owner:
        type: string
        default_value: root
  dbms:
    extends: software_component
    properties:
      port:
        type: integer
        default_value: 5432
  custom_dbms:
    extends: dbms
"""

# ###############
# Test Helpers
# ###############


def _model(components: str) -> DeploymentModel:
    return DeploymentModel.from_text("components:\n" + components + TYPES)


@pytest.fixture
def lamp() -> DeploymentModel:
    return DeploymentModel.of(DATA / "lamp.yaml")


# ###############
# Properties and operations
# ###############


class TestPropertyResolution:
    def test_instance_value_wins_over_type_default(self) -> None:
        model = _model("  db:\n    type: dbms\n    properties:\n      port: 1234\n")
        assert model.components["db"].get_property_value(Attribute("port", int)) == 1234

    def test_nearest_type_wins_over_ancestor(self) -> None:
        model = _model("  db:\n    type: dbms\n")
        assert model.components["db"].get_property_value(Attribute("port", int)) == 5432

    def test_inherited_property_from_ancestor(self) -> None:
        model = _model("  db:\n    type: custom_dbms\n")
        assert model.components["db"].get_property("owner").value == "root"

    def test_properties_keep_instance_then_chain_order(self) -> None:
        model = _model("  db:\n    type: dbms\n    properties:\n      extra: x\n")
        assert list(model.components["db"].get_properties()) == ["extra", "port", "owner"]

    def test_missing_property_is_none(self) -> None:
        model = _model("  db:\n    type: dbms\n")
        assert model.components["db"].get_property_value(Attribute("nothing", str)) is None

    def test_typed_value_is_coerced(self, lamp: DeploymentModel) -> None:
        mysql = lamp.components["mysql"]
        assert isinstance(mysql, MysqlDbms)
        assert mysql.port == 3306
        assert mysql.get_property("port").get_typed_value() == 3306
        assert mysql.version == "8.0"

    def test_assigned_value_takes_type_declared_in_chain(self) -> None:
        model = _model("  db:\n    type: custom_dbms\n    properties:\n      port: 1234\n      extra: 7\n")
        db = model.components["db"]
        assert db.get_property("port").type == "integer"
        assert db.get_property("port").get_typed_value() == 1234
        assert db.get_property("extra").type is None
        assert db.get_property("extra").get_typed_value() == "7"

    def test_uncoercible_value_raises_type_mismatch(self) -> None:
        model = _model("  db:\n    type: dbms\n    properties:\n      port: not-a-number\n")
        with pytest.raises(TypeMismatchError, match="not a valid int"):
            model.components["db"].get_property_value(Attribute("port", int))

    def test_boolean_coercion_from_text(self) -> None:
        model = _model("  db:\n    type: dbms\n    properties:\n      managed: true\n")
        assert model.components["db"].get_property_value(Attribute("managed", bool)) is True


class TestOperations:
    def test_short_form_operation_has_one_artifact(self, lamp: DeploymentModel) -> None:
        create = lamp.components["mysql"].get_operation("create")
        assert create is not None
        assert [(a.name, a.value) for a in create.artifacts] == [("cmd", "scripts/mysql/create.sh")]

    def test_artifact_list_form(self, lamp: DeploymentModel) -> None:
        configure = lamp.components["shop_db"].get_operation("configure")
        assert configure is not None
        assert configure.has_artifacts
        assert configure.artifacts[0].value == "scripts/db/configure.sh"

    def test_operations_inherited_from_type(self, lamp: DeploymentModel) -> None:
        assert list(lamp.components["mysql"].get_operations()) == ["create", "configure", "start"]


# ###############
# Variants and relations
# ###############


class TestVariants:
    def test_kinds_follow_type_chain(self, lamp: DeploymentModel) -> None:
        assert isinstance(lamp.components["server"], Compute)
        assert isinstance(lamp.components["shop_db"], MysqlDatabase)
        assert lamp.components["mysql"].is_kind(ComponentKind.SOFTWARE_COMPONENT)
        assert not lamp.components["mysql"].is_kind(ComponentKind.DATABASE)

    def test_unknown_type_name_falls_back_to_nearest_known_kind(self) -> None:
        model = _model("  db:\n    type: custom_dbms\n")
        assert model.components["db"].kind is ComponentKind.DBMS

    def test_compute_accessors(self, lamp: DeploymentModel) -> None:
        server = lamp.components["server"]
        assert isinstance(server, Compute)
        assert server.machine_image == "ubuntu-22.04"
        assert server.os_family == "linux"
        assert server.private_key is None

    def test_missing_type_raises_model_error(self) -> None:
        with pytest.raises(ModelError, match="no resolvable type"):
            _model("  db:\n    type: ghost\n")

    def test_relation_short_and_full_forms(self) -> None:
        model = _model(
            "  vm:\n    type: compute\n"
            "  db:\n    type: dbms\n    relations:\n"
            "      - hosted_on: vm\n"
            "      - type: connects_to\n        target: vm\n"
        )
        hosted, connects = model.relations
        assert isinstance(hosted, HostedOn)
        assert isinstance(connects, ConnectsTo)
        assert (hosted.source, hosted.target) == ("db", "vm")
        assert connects.target == "vm"
        assert hosted.is_kind(RelationKind.DEPENDS_ON)
        assert not hosted.is_kind(RelationKind.CONNECTS_TO)

    def test_dangling_relation_target_raises(self) -> None:
        with pytest.raises(ModelError):
            _model("  db:\n    type: dbms\n    relations:\n      - hosted_on: nowhere\n")

    def test_model_name_and_description(self, lamp: DeploymentModel) -> None:
        assert lamp.name == "lamp"
        assert lamp.description == "MySQL database on a single virtual machine"


@pytest.mark.parametrize(
    ("name", "expected"),
    [("Shop DB", "shop_db"), ("app-server", "app_server"), ("web.01", "web_01")],
)
def test_normalize_name(name: str, expected: str) -> None:
    assert normalize_name(name) == expected
