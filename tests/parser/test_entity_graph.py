# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for loading documents into the attributed entity graph."""

import logging
from pathlib import Path

import pytest

from deployml.parser.entity_graph import (
    COMPONENT_TYPES,
    RELATION_TYPES,
    find_type_entity,
    resolve_inheritance_chain,
)
from deployml.parser.loader import DEFAULT_RELATION_TYPES, ParseError, load, load_file

DATA = Path(__file__).parent.parent / "data"

# ###############
# Test Helpers
# ###############


def _chain_names(text: str, start: str) -> list[str]:
    graph = load(text)
    start_type = graph.get_type(COMPONENT_TYPES, start)
    assert start_type is not None
    return [t.name for t in resolve_inheritance_chain(graph, start_type)]


# ###############
# Loading
# ###############


class TestLoad:
    def test_entity_ids_follow_document_paths(self) -> None:
        graph = load("components:\n  db:\n    type: database\n")
        entity = graph.get_entity(("components", "db", "type"))
        assert entity is not None
        assert entity.value == "database"
        assert entity.name == "type"

    def test_list_items_are_named_by_index(self) -> None:
        graph = load("components:\n  a:\n    relations:\n      - hosted_on: b\n      - connects_to: c\n")
        relations = graph.get_entity(("components", "a", "relations"))
        assert relations is not None
        assert [c.name for c in relations.get_children()] == ["0", "1"]
        assert relations.get_children()[1].get_value("connects_to") == "c"

    def test_scalars_are_stored_as_text(self) -> None:
        graph = load("flags:\n  enabled: true\n  disabled: false\n  port: 3306\n  ratio: 0.5\n  missing: null\n")
        flags = graph.get_entity(("flags",))
        assert flags is not None
        assert flags.get_value("enabled") == "true"
        assert flags.get_value("disabled") == "false"
        assert flags.get_value("port") == "3306"
        assert flags.get_value("ratio") == "0.5"
        assert flags.get_value("missing") is None

    def test_empty_document_gives_default_relation_types(self) -> None:
        graph = load("")
        assert graph.type_names(RELATION_TYPES) == list(DEFAULT_RELATION_TYPES)

    def test_declared_relation_types_replace_defaults(self) -> None:
        graph = load("relation_types:\n  uses:\n    extends: null\n")
        assert graph.type_names(RELATION_TYPES) == ["uses"]

    def test_invalid_yaml_raises_parse_error(self) -> None:
        with pytest.raises(ParseError, match="Invalid YAML"):
            load("components: [unclosed", name="broken")

    def test_non_mapping_document_raises_parse_error(self) -> None:
        with pytest.raises(ParseError, match="must be a YAML mapping"):
            load("- just\n- a list\n")

    def test_load_file_names_graph_after_stem(self) -> None:
        graph = load_file(DATA / "lamp.yaml")
        assert graph.name == "lamp"
        assert "mysql_dbms" in graph.type_names(COMPONENT_TYPES)

    def test_load_file_missing_raises_parse_error(self, tmp_path: Path) -> None:
        with pytest.raises(ParseError, match="Cannot read"):
            load_file(tmp_path / "absent.yaml")


# ###############
# Type resolution
# ###############


class TestTypeResolution:
    def test_component_instance_resolves_in_component_types(self) -> None:
        graph = load("components:\n  db:\n    type: database\ncomponent_types:\n  database:\n    extends: null\n")
        instance = graph.get_entity(("components", "db"))
        assert instance is not None
        type_entity = find_type_entity(graph, instance)
        assert type_entity is not None
        assert type_entity.id == (COMPONENT_TYPES, "database")

    def test_short_form_relation_uses_its_key_as_type(self) -> None:
        graph = load("components:\n  a:\n    relations:\n      - hosted_on: b\n")
        entry = graph.get_entity(("components", "a", "relations", "0"))
        assert entry is not None
        type_entity = find_type_entity(graph, entry)
        assert type_entity is not None
        assert type_entity.id == (RELATION_TYPES, "hosted_on")

    def test_unknown_type_resolves_to_none(self) -> None:
        graph = load("components:\n  db:\n    type: nowhere\n")
        instance = graph.get_entity(("components", "db"))
        assert instance is not None
        assert find_type_entity(graph, instance) is None

    def test_non_instance_entities_have_no_type(self) -> None:
        graph = load("components:\n  db:\n    type: database\n    properties:\n      type: x\n")
        properties = graph.get_entity(("components", "db", "properties"))
        assert properties is not None
        assert find_type_entity(graph, properties) is None

    def test_type_entities_have_no_type(self) -> None:
        graph = load("component_types:\n  dbms:\n    extends: base\n  base:\n    extends: null\n")
        dbms = graph.get_entity((COMPONENT_TYPES, "dbms"))
        assert dbms is not None
        assert find_type_entity(graph, dbms) is None


class TestInheritanceChain:
    def test_chain_is_nearest_first(self) -> None:
        text = "component_types:\n  a:\n    extends: b\n  b:\n    extends: c\n  c:\n    extends: null\n"
        assert _chain_names(text, "a") == ["a", "b", "c"]

    def test_chain_stops_at_empty_extends(self) -> None:
        assert _chain_names("component_types:\n  a:\n    extends: ''\n", "a") == ["a"]

    def test_chain_stops_at_unknown_parent(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            names = _chain_names("component_types:\n  a:\n    extends: ghost\n", "a")
        assert names == ["a"]
        assert "unknown type 'ghost'" in caplog.text

    def test_cycle_terminates_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        text = "component_types:\n  a:\n    extends: b\n  b:\n    extends: a\n"
        with caplog.at_level(logging.WARNING):
            names = _chain_names(text, "a")
        assert names == ["a", "b"]
        assert "Inheritance cycle" in caplog.text

    def test_self_extension_terminates(self) -> None:
        assert _chain_names("component_types:\n  a:\n    extends: a\n", "a") == ["a"]
