# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the structural topology checks."""

from pathlib import Path

from deployml.model.deployment import DeploymentModel
from deployml.validation.checks import ValidationResult, validate

DATA = Path(__file__).parent.parent / "data"

TYPES = """
component_types:
  compute:
    extends: null
  software_component:
    extends: null
  dbms:
    extends: software_component
  database:
    extends: null
"""

# ###############
# Test Helpers
# ###############


def _validate(components: str) -> ValidationResult:
    return validate(DeploymentModel.from_text("components:\n" + components + TYPES))


def _messages(result: ValidationResult) -> list[str]:
    return [e.message for e in result.errors]


# ###############
# Checks
# ###############


def test_example_models_are_valid() -> None:
    for name in ("lamp.yaml", "webshop.yaml"):
        result = validate(DeploymentModel.of(DATA / name))
        assert not result.has_errors
        assert result.warnings == []


def test_isolated_component_warns() -> None:
    result = _validate("  vm:\n    type: compute\n  loner:\n    type: software_component\n")
    assert [w.message for w in result.warnings] == ["Component 'loner' has no relations."]


def test_isolated_compute_does_not_warn() -> None:
    result = _validate("  vm:\n    type: compute\n")
    assert result.warnings == []
    assert not result.has_errors


def test_hosting_cycle_is_an_error() -> None:
    result = _validate(
        "  a:\n    type: software_component\n    relations:\n      - hosted_on: b\n"
        "  b:\n    type: software_component\n    relations:\n      - hosted_on: a\n"
    )
    assert _messages(result) == ["Hosted-On cycle detected: a -> b -> a."]


def test_multiple_hosts_is_an_error() -> None:
    result = _validate(
        "  vm1:\n    type: compute\n  vm2:\n    type: compute\n"
        "  app:\n    type: software_component\n    relations:\n      - hosted_on: vm1\n      - hosted_on: vm2\n"
    )
    assert any("more than one component" in m for m in _messages(result))


def test_unplaced_component_is_an_error() -> None:
    result = _validate(
        "  app:\n    type: software_component\n    relations:\n      - hosted_on: helper\n"
        "  helper:\n    type: software_component\n"
    )
    assert "Component 'app' is not hosted on a compute node." in _messages(result)
    assert "Component 'helper' is not hosted on a compute node." in _messages(result)


def test_database_without_dbms_is_an_error() -> None:
    result = _validate(
        "  vm:\n    type: compute\n  db:\n    type: database\n    relations:\n      - hosted_on: vm\n"
    )
    assert any("'db'" in m and "DBMS" in m for m in _messages(result))


def test_database_on_dbms_is_valid() -> None:
    result = _validate(
        "  vm:\n    type: compute\n"
        "  pg:\n    type: dbms\n    relations:\n      - hosted_on: vm\n"
        "  db:\n    type: database\n    relations:\n      - hosted_on: pg\n"
    )
    assert not result.has_errors


def test_colliding_normalized_names_are_an_error() -> None:
    result = _validate("  vm-1:\n    type: compute\n  vm_1:\n    type: compute\n")
    assert _messages(result) == ["Components 'vm-1', 'vm_1' share the normalized name 'vm_1'."]
