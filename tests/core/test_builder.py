"""Tests for Graph Builder - builds TopicGraph from node records."""

import pytest

from flowdoc.graph.builder import GraphBuilder, TopicGraph, get_children, has_children
from flowdoc.graph.collation import is_collated
from flowdoc.graph.diagnostics import ErrorKind, WarningKind
from tests.core.graph_test_helpers import (
    build_graph,
    children_string,
    make_error,
    make_node,
    roots_string,
    warning_kinds,
)


class TestGraphBuilder:
    """Tests for GraphBuilder class."""

    def test_empty_input_builds_empty_graph(self):
        graph = build_graph()

        assert isinstance(graph, TopicGraph)
        assert graph.nodes_by_id == {}
        assert graph.roots == []
        assert graph.warnings == []
        assert graph.errors == []

    def test_records_of_other_topics_are_ignored(self):
        graph = build_graph(
            make_node("A"),
            make_node("B", topic="refunds"),
        )

        assert list(graph.nodes_by_id) == ["A"]
        assert graph.find_by_id("B") is None

    def test_builder_collects_records_incrementally(self):
        builder = GraphBuilder("checkout")
        builder.add_record(make_node("A"))
        builder.add_records([make_node("B", dependency="A")])

        graph = builder.build()

        assert roots_string(graph) == "A"
        assert children_string(graph, "A") == "B"

    def test_auto_link_can_be_disabled(self):
        builder = GraphBuilder("checkout", auto_link_numeric=False)
        builder.add_records([make_node("S-1"), make_node("S-2")])

        graph = builder.build()

        assert roots_string(graph) == "S-1, S-2"
        assert graph.children_by_parent == {}


class TestDuplicateIds:
    def test_first_record_wins(self):
        graph = build_graph(
            make_node("X", "first", line=3),
            make_node("X", "second", source_path="src/other.ts", line=20),
        )

        assert graph.find_by_id("X").step == "first"
        assert graph.node_count() == 1

    def test_one_warning_points_at_second_record(self):
        graph = build_graph(
            make_node("X", "first", line=3),
            make_node("X", "second", source_path="src/other.ts", line=20),
        )

        duplicates = graph.warnings_of_kind(WarningKind.DUPLICATE_ID)
        assert len(duplicates) == 1
        assert duplicates[0].node_id == "X"
        assert duplicates[0].source_file == "src/other.ts"
        assert duplicates[0].source_line == 20
        assert "Keeping first occurrence" in duplicates[0].message

    def test_each_extra_copy_warns(self):
        graph = build_graph(make_node("X"), make_node("X"), make_node("X"))

        assert warning_kinds(graph) == [WarningKind.DUPLICATE_ID, WarningKind.DUPLICATE_ID]


class TestDependencyEdges:
    def test_local_dependency_creates_edge(self, linear_graph):
        assert roots_string(linear_graph) == "REG-1"
        assert children_string(linear_graph, "REG-1") == "REG-2"
        assert children_string(linear_graph, "REG-2") == "REG-3"
        assert linear_graph.warnings == []

    def test_missing_dependency_warns_and_keeps_root(self):
        graph = build_graph(make_node("ORPHAN", dependency="GHOST"))

        assert warning_kinds(graph) == [WarningKind.MISSING_DEPENDENCY]
        assert graph.warnings[0].node_id == "ORPHAN"
        assert "GHOST" in graph.warnings[0].message
        assert graph.roots == ["ORPHAN"]

    def test_recognized_cross_repo_dependency_is_silent_root(self):
        graph = build_graph(
            make_node("ENTRY", dependency="other@NODE-1"),
            external_repos={"other"},
        )

        assert graph.warnings == []
        assert graph.roots == ["ENTRY"]

    def test_unrecognized_cross_repo_dependency_warns_but_same_roots(self):
        known = build_graph(make_node("ENTRY", dependency="other@NODE-1"), external_repos={"other"})
        unknown = build_graph(make_node("ENTRY", dependency="other@NODE-1"))

        assert unknown.roots == known.roots == ["ENTRY"]
        assert warning_kinds(unknown) == [WarningKind.MISSING_DEPENDENCY]

    @pytest.mark.parametrize("dependency", ["@NODE", "repo@"])
    def test_malformed_cross_repo_dependency_warns(self, dependency):
        graph = build_graph(make_node("ENTRY", dependency=dependency), external_repos={"repo"})

        assert warning_kinds(graph) == [WarningKind.MISSING_DEPENDENCY]
        assert graph.roots == ["ENTRY"]

    def test_local_id_containing_separator_resolves_locally(self):
        graph = build_graph(
            make_node("mail@SEND"),
            make_node("AFTER", dependency="mail@SEND"),
        )

        assert children_string(graph, "mail@SEND") == "AFTER"
        assert graph.warnings == []

    def test_input_records_are_not_modified(self):
        records = [make_node("S-1"), make_node("S-2")]

        build_graph(*records)

        assert records[1].dependency is None
        assert records[1].inferred is False


class TestChildrenEdges:
    def test_explicit_children_create_edges(self):
        graph = build_graph(
            make_node("HUB", children=["SPOKE-B", "SPOKE-A"]),
            make_node("SPOKE-A"),
            make_node("SPOKE-B"),
        )

        assert children_string(graph, "HUB") == "SPOKE-A, SPOKE-B"

    def test_children_already_implied_by_dependency_are_not_duplicated(self):
        graph = build_graph(
            make_node("A", children=["B"]),
            make_node("B", dependency="A"),
        )

        assert get_children(graph, "A") == ["B"]
        assert graph.warnings == []

    def test_repeated_child_reference_is_added_once(self):
        graph = build_graph(make_node("A", children=["B", "B"]), make_node("B"))

        assert get_children(graph, "A") == ["B"]

    def test_unknown_local_child_warns_and_is_dropped(self):
        graph = build_graph(make_node("A", children=["NOPE"]))

        assert warning_kinds(graph) == [WarningKind.MISSING_DEPENDENCY]
        assert "NOPE" in graph.warnings[0].message
        assert get_children(graph, "A") == []

    def test_cross_repo_child_kept_without_warning_when_known(self):
        graph = build_graph(
            make_node("PAY", children=["billing@INV-1"]),
            external_repos={"billing"},
        )

        assert get_children(graph, "PAY") == ["billing@INV-1"]
        assert graph.warnings == []

    def test_cross_repo_child_kept_with_warning_when_unknown(self):
        graph = build_graph(make_node("PAY", children=["billing@INV-1"]))

        assert get_children(graph, "PAY") == ["billing@INV-1"]
        assert warning_kinds(graph) == [WarningKind.MISSING_DEPENDENCY]
        assert "unknown repository" in graph.warnings[0].message

    def test_malformed_child_reference_warns_and_is_dropped(self):
        graph = build_graph(make_node("PAY", children=["billing@"]))

        assert warning_kinds(graph) == [WarningKind.MISSING_DEPENDENCY]
        assert get_children(graph, "PAY") == []

    def test_cross_repo_parents_never_become_keys(self):
        graph = build_graph(
            make_node("LOCAL", dependency="billing@INV-1", children=["billing@INV-2"]),
            external_repos={"billing"},
        )

        assert set(graph.children_by_parent) <= set(graph.nodes_by_id)


class TestNumericAutoLink:
    def test_leading_zeros_are_insignificant(self):
        graph = build_graph(make_node("S-001"), make_node("S-2"), make_node("S-03"))

        assert graph.roots == ["S-001"]
        assert "S-2" in get_children(graph, "S-001")
        assert "S-03" in get_children(graph, "S-2")

    def test_inferred_dependency_is_on_graph_copy(self):
        graph = build_graph(make_node("S-001"), make_node("S-2"))

        node = graph.find_by_id("S-2")
        assert node.dependency == "S-001"
        assert node.inferred is True
        assert node.has_explicit_dependency is False

    def test_explicit_dependency_takes_precedence(self):
        graph = build_graph(
            make_node("S-001"),
            make_node("S-2"),
            make_node("S-03", dependency="S-001"),
        )

        assert "S-03" not in get_children(graph, "S-2")
        assert get_children(graph, "S-001") == ["S-03", "S-2"]
        assert graph.find_by_id("S-03").inferred is False


class TestCycles:
    def test_cycle_through_children_is_reported(self):
        graph = build_graph(
            make_node("A", children=["B"]),
            make_node("B", children=["A"]),
        )

        assert graph.has_cycles()
        assert graph.node_count() == 2

    def test_pure_dependency_loop_is_reported(self):
        graph = build_graph(
            make_node("A", dependency="B"),
            make_node("B", dependency="A"),
        )

        assert graph.roots == []
        assert warning_kinds(graph) == [WarningKind.CYCLE_DETECTED]

    def test_self_dependency_is_a_cycle(self):
        graph = build_graph(make_node("LOOP", dependency="LOOP"))

        assert get_children(graph, "LOOP") == ["LOOP"]
        assert graph.has_cycles()

    def test_each_cycle_node_reported_once(self):
        graph = build_graph(
            make_node("A", children=["B", "C"]),
            make_node("B", children=["A"]),
            make_node("C", children=["A"]),
        )

        cycle_nodes = [w.node_id for w in graph.warnings_of_kind(WarningKind.CYCLE_DETECTED)]
        assert cycle_nodes == ["A"]

    def test_long_chain_does_not_exhaust_stack(self):
        records = [make_node("N0")]
        records += [make_node(f"N{i}", dependency=f"N{i - 1}") for i in range(1, 5000)]
        records.append(make_node("TAIL", dependency="N4999", children=["N0"]))

        graph = build_graph(*records)

        assert graph.has_cycles()


class TestDeterminism:
    def test_building_twice_gives_identical_graphs(self):
        records = [
            make_node("S-1"),
            make_node("S-2"),
            make_node("HUB", children=["S-2", "billing@X"]),
            make_node("S-3", dependency="HUB"),
            make_node("LOOSE", dependency="GHOST"),
        ]

        first = build_graph(*records)
        second = build_graph(*records)

        assert first.nodes_by_id == second.nodes_by_id
        assert first.roots == second.roots
        assert first.children_by_parent == second.children_by_parent

    def test_roots_and_children_are_collated(self):
        graph = build_graph(
            make_node("gamma"),
            make_node("Beta", children=["zeta", "Alpha", "eta"]),
            make_node("alpha"),
            make_node("Alpha"),
            make_node("zeta"),
            make_node("eta"),
        )

        assert is_collated(graph.roots)
        assert graph.roots[:3] == ["alpha", "Alpha", "Beta"]
        for child_ids in graph.children_by_parent.values():
            assert is_collated(child_ids)


class TestParserErrors:
    def test_only_errors_of_the_topic_are_attached(self):
        mine = make_error(topic="checkout")
        other = make_error(topic="refunds")
        untopical = make_error(ErrorKind.MISSING_TOPIC, topic=None)

        graph = build_graph(make_node("A"), parser_errors=[mine, other, untopical])

        assert graph.errors == [mine]
        assert graph.has_problems()


class TestChildQueries:
    def test_get_children_unknown_id_is_empty(self, linear_graph):
        assert get_children(linear_graph, "NOPE") == []
        assert has_children(linear_graph, "NOPE") is False

    def test_has_children(self, linear_graph):
        assert has_children(linear_graph, "REG-1") is True
        assert has_children(linear_graph, "REG-3") is False

    def test_get_children_returns_a_copy(self, linear_graph):
        children = get_children(linear_graph, "REG-1")
        children.append("EXTRA")

        assert get_children(linear_graph, "REG-1") == ["REG-2"]
        assert linear_graph.children_by_parent["REG-1"] == ["REG-2"]
