# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for output dependency graphs and value merging."""

import pytest

from deployml.model.relations import RelationKind
from deployml.output.graph import (
    OutputEdge,
    OutputGraph,
    OutputResource,
    Parameter,
    collect_from_successors,
    merge_contributions,
)

# ###############
# Test Helpers
# ###############


def _resource(name: str, **environment: str) -> OutputResource:
    return OutputResource(name=name, type="test", environment=dict(environment))


# ###############
# Graph
# ###############


class TestOutputGraph:
    def test_dependencies_are_recorded_as_declared(self) -> None:
        graph: OutputGraph[OutputResource] = OutputGraph()
        server, port, config = (graph.add_node(_resource(n)) for n in ("server", "port", "config"))
        graph.add_dependency(server, port, config)
        assert graph.dependencies_of(server) == [port, config]
        assert graph.predecessors(port) == [server]

    def test_duplicate_edges_are_recorded_once(self) -> None:
        graph: OutputGraph[OutputResource] = OutputGraph()
        a, b = graph.add_node(_resource("a")), graph.add_node(_resource("b"))
        graph.add_dependency(a, b)
        graph.add_dependency(a, b)
        assert graph.edges() == [OutputEdge("a", "b", RelationKind.DEPENDS_ON)]

    def test_edges_filter_by_kind(self) -> None:
        graph: OutputGraph[OutputResource] = OutputGraph()
        a, b, c = (graph.add_node(_resource(n)) for n in "abc")
        graph.add_edge(a, b, RelationKind.CONNECTS_TO)
        graph.add_dependency(a, c)
        assert graph.successors(a, RelationKind.CONNECTS_TO) == [b]
        assert graph.successors(a) == [b, c]

    def test_duplicate_node_name_raises(self) -> None:
        graph: OutputGraph[OutputResource] = OutputGraph()
        graph.add_node(_resource("a"))
        with pytest.raises(ValueError, match="already exists"):
            graph.add_node(_resource("a"))

    def test_edge_to_foreign_node_raises(self) -> None:
        graph: OutputGraph[OutputResource] = OutputGraph()
        a = graph.add_node(_resource("a"))
        with pytest.raises(ValueError, match="not part of the graph"):
            graph.add_dependency(a, _resource("b"))


# ###############
# Merging
# ###############


class TestMerging:
    def test_last_contribution_wins(self) -> None:
        assert merge_contributions([{"a": "1", "b": "1"}, {"b": "2"}, {"c": "3"}]) == {"a": "1", "b": "2", "c": "3"}

    def test_collect_from_successors_is_order_independent(self) -> None:
        results = []
        for order in (("x", "y"), ("y", "x")):
            graph: OutputGraph[OutputResource] = OutputGraph()
            consumer = graph.add_node(_resource("consumer"))
            x = graph.add_node(_resource("x", SHARED="from-x", X="1"))
            y = graph.add_node(_resource("y", SHARED="from-y", Y="2"))
            by_name = {"x": x, "y": y}
            for name in order:
                graph.add_edge(consumer, by_name[name], RelationKind.CONNECTS_TO)
            results.append(
                collect_from_successors(graph, consumer, RelationKind.CONNECTS_TO, lambda n: n.environment)
            )
        assert results[0] == results[1] == {"SHARED": "from-y", "X": "1", "Y": "2"}

    def test_nested_parameters_apply_after_own(self) -> None:
        inner = OutputResource(name="inner", type="t", parameters={"image": Parameter("image", default="inner")})
        outer = OutputResource(
            name="outer",
            type="t",
            parameters={"image": Parameter("image", default="outer"), "flavor": Parameter("flavor")},
            nested=[inner],
        )
        required = outer.required_parameters()
        assert list(required) == ["image", "flavor"]
        assert required["image"].default == "inner"

    def test_nested_environment_is_collected_recursively(self) -> None:
        leaf = _resource("leaf", LEAF="1")
        middle = OutputResource(name="middle", type="t", nested=[leaf])
        top = OutputResource(name="top", type="t", environment={"TOP": "1"}, nested=[middle])
        assert top.required_environment() == {"TOP": "1", "LEAF": "1"}

    def test_nested_variables_are_collected_recursively(self) -> None:
        group = OutputResource(name="group", type="t")
        group.add_variable("rules", "ssh")
        interface = OutputResource(name="nic", type="t", variables={"subnet_id": "inner"}, nested=[group])
        machine = OutputResource(
            name="vm", type="t", variables={"subnet_id": "outer", "key_path": "/k"}, nested=[interface]
        )
        assert machine.required_variables() == {"subnet_id": "inner", "key_path": "/k", "rules": "ssh"}
