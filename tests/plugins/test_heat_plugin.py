# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""End-to-end tests for the Heat plugin."""

import shutil
from pathlib import Path
from typing import Any

import pytest
import yaml

from deployml.errors import ModelError, TransformationError
from deployml.model.deployment import DeploymentModel
from deployml.plugins import Plugin, get_plugin
from deployml.plugins.heat import HeatLifecycle
from deployml.plugins.heat.visitor import FLOATING_IP, SERVER, SOFTWARE_CONFIG, SOFTWARE_DEPLOYMENT, HeatVisitor
from deployml.transformation.context import PluginFileAccess, TransformationContext
from deployml.transformation.transformation import Transformation, TransformationState, transform_model
from deployml.transformation.visitor import visit_topology

DATA = Path(__file__).parent.parent / "data"

# ###############
# Test Helpers
# ###############


class CountingHeatLifecycle(HeatLifecycle):
    cleanups = 0

    def cleanup(self) -> None:
        type(self).cleanups += 1
        super().cleanup()


def _transform(model_file: str, out: Path) -> dict[str, Any]:
    model = DeploymentModel.of(DATA / model_file)
    transform_model(model, [get_plugin("heat")], DATA, out)
    return yaml.safe_load((out / "heat" / f"{model.name}.yaml").read_text())


def _of_type(template: dict[str, Any], resource_type: str) -> list[str]:
    return [name for name, r in template["resources"].items() if r["type"] == resource_type]


# ###############
# Generated template
# ###############


class TestHeatTemplate:
    def test_one_deployment_and_config_per_software_component(self, tmp_path: Path) -> None:
        template = _transform("lamp.yaml", tmp_path)
        assert _of_type(template, SERVER) == ["server"]
        assert _of_type(template, SOFTWARE_DEPLOYMENT) == ["mysql_deployment", "shop_db_deployment"]
        assert _of_type(template, SOFTWARE_CONFIG) == ["mysql_config", "shop_db_config"]

    def test_deployments_depend_on_server_and_config(self, tmp_path: Path) -> None:
        resources = _transform("lamp.yaml", tmp_path)["resources"]
        assert resources["mysql_deployment"]["depends_on"] == ["server", "mysql_config"]
        assert resources["shop_db_deployment"]["depends_on"] == ["server", "shop_db_config"]
        assert resources["shop_db_deployment"]["properties"]["server"] == {"get_resource": "server"}

    def test_compute_resources_and_dependencies(self, tmp_path: Path) -> None:
        resources = _transform("lamp.yaml", tmp_path)["resources"]
        assert resources["server"]["depends_on"] == ["server_port"]
        assert resources["server_floating_ip_association"]["depends_on"] == ["server_floating_ip", "server_port"]
        assert resources["server"]["properties"]["networks"] == [{"port": {"get_resource": "server_port"}}]

    def test_floating_ip_is_bound_to_the_port(self, tmp_path: Path) -> None:
        template = _transform("lamp.yaml", tmp_path)
        assert _of_type(template, FLOATING_IP) == ["server_floating_ip"]
        floating_ip = template["resources"]["server_floating_ip"]
        assert floating_ip["depends_on"] == ["server_port"]
        assert floating_ip["properties"]["port_id"] == {"get_resource": "server_port"}

    def test_script_concatenates_operations_in_lifecycle_order(self, tmp_path: Path) -> None:
        script = _transform("lamp.yaml", tmp_path)["resources"]["mysql_config"]["properties"]["config"]
        create = script.index("apt-get install -y mysql-server")
        configure = script.index("max_connections")
        start = script.index("service mysql start")
        assert create < configure < start

    def test_parameters_are_merged_from_all_resources(self, tmp_path: Path) -> None:
        parameters = _transform("lamp.yaml", tmp_path)["parameters"]
        assert {"key_name", "image", "flavor", "network", "security_group"} <= set(parameters)
        assert parameters["key_name"]["default"] == "deploy-key"
        assert parameters["flavor"]["default"] == "m1.small"

    def test_input_values_hold_component_properties(self, tmp_path: Path) -> None:
        resources = _transform("lamp.yaml", tmp_path)["resources"]
        assert resources["shop_db_deployment"]["properties"]["input_values"] == {
            "schema_name": "shop",
            "user": "shop",
            "password": "shop-secret",
        }

    def test_connects_to_targets_contribute_input_values(self, tmp_path: Path) -> None:
        resources = _transform("webshop.yaml", tmp_path)["resources"]
        values = resources["webshop_deployment"]["properties"]["input_values"]
        assert values["context_path"] == "/shop"
        assert values["shop_db_schema_name"] == "shop"
        assert resources["webshop_deployment"]["depends_on"] == ["app_server", "webshop_config"]
        assert resources["shop_db_deployment"]["depends_on"] == ["db_server", "shop_db_config"]

    def test_description_is_carried_over(self, tmp_path: Path) -> None:
        template = _transform("lamp.yaml", tmp_path)
        assert template["description"] == "MySQL database on a single virtual machine"
        assert template["heat_template_version"] == "2018-08-31"


# ###############
# Failures
# ###############


def test_missing_artifact_fails_and_cleans_up_once(tmp_path: Path) -> None:
    source = tmp_path / "model"
    source.mkdir()
    shutil.copy(DATA / "lamp.yaml", source / "lamp.yaml")
    CountingHeatLifecycle.cleanups = 0
    plugin = Plugin(name="heat", description="counting", lifecycle_factory=CountingHeatLifecycle)
    transformation = Transformation(DeploymentModel.of(source / "lamp.yaml"), plugin, source, tmp_path / "out")

    with pytest.raises(TransformationError, match="scripts/mysql/create.sh") as exc_info:
        transformation.start()

    assert exc_info.value.phase == "transform"
    assert transformation.state is TransformationState.ERROR
    assert transformation.error is exc_info.value
    assert CountingHeatLifecycle.cleanups == 1
    assert not (tmp_path / "out" / "lamp.yaml").exists()


COLLIDING_COMPUTES = """
components:
  vm-1:
    type: compute
  vm_1:
    type: compute
component_types:
  compute:
    extends: null
"""


def test_colliding_component_names_fail_the_model_check(tmp_path: Path) -> None:
    model = DeploymentModel.from_text(COLLIDING_COMPUTES)
    with pytest.raises(TransformationError, match="normalized name 'vm_1'") as exc_info:
        transform_model(model, [get_plugin("heat")], tmp_path, tmp_path / "out")
    assert exc_info.value.phase == "check_model"


def test_visitor_rejects_colliding_resource_names(tmp_path: Path) -> None:
    model = DeploymentModel.from_text(COLLIDING_COMPUTES)
    visitor = HeatVisitor(TransformationContext(model, PluginFileAccess(tmp_path, tmp_path / "out")))
    with pytest.raises(ModelError, match="Output name 'vm_1_port' of component 'vm_1'"):
        visit_topology(model.topology, visitor.context, component_visitor=visitor)
