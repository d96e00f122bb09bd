"""Tests for the level computation engine."""

import polars as pl
import pytest

from go_levels.ontology import (
    OntologyGraph,
    StructuralError,
    UnreachableNodeError,
    build_ontology_graph,
    compute_levels,
    reverse_graph,
    terminal_nodes,
    topological_sort,
)


def _graph(edges, root="R"):
    """Parent -> child graph from (parent, child) pairs."""
    graph = OntologyGraph(ontology="BP", root=root)
    graph.add_node(root)
    for parent, child in edges:
        graph.add_edge(parent, child)
    return graph


@pytest.fixture
def toy_dag():
    """R -> A, R -> B, A -> C, R -> C."""
    return _graph([("R", "A"), ("R", "B"), ("A", "C"), ("R", "C")])


def _as_dict(df: pl.DataFrame) -> dict:
    return {
        row["id"]: (row["shortest_path"], row["longest_path"], row["terminal_node"])
        for row in df.iter_rows(named=True)
    }


def test_toy_dag_levels(toy_dag):
    """C is one edge from R directly and two edges via A."""
    result = _as_dict(compute_levels(reverse_graph(toy_dag)))

    assert result["R"] == (0, 0, False)
    assert result["A"] == (1, 1, False)
    assert result["B"] == (1, 1, True)
    assert result["C"] == (1, 2, True)


def test_output_schema(toy_dag):
    df = compute_levels(reverse_graph(toy_dag))

    assert df.columns == ["id", "shortest_path", "longest_path", "terminal_node"]
    assert df.schema["shortest_path"] == pl.Int64
    assert df.schema["longest_path"] == pl.Int64
    assert df.schema["terminal_node"] == pl.Boolean
    assert df["id"].to_list() == sorted(df["id"].to_list())


def test_shortest_never_exceeds_longest(toy_source):
    for ontology, root in [("BP", "GO:0008150"), ("CC", "GO:0005575"), ("MF", "GO:0003674")]:
        df = compute_levels(reverse_graph(build_ontology_graph(toy_source, ontology, root)))

        assert (df["shortest_path"] <= df["longest_path"]).all()
        root_row = df.filter(pl.col("id") == root)
        assert root_row["shortest_path"][0] == 0
        assert root_row["longest_path"][0] == 0


def test_terminal_matches_original_out_degree(toy_source):
    """terminal_node is True exactly for nodes with no children in the original graph."""
    graph = build_ontology_graph(toy_source, "BP", "GO:0008150")
    df = compute_levels(reverse_graph(graph))

    for row in df.iter_rows(named=True):
        assert row["terminal_node"] == (graph.out_degree(row["id"]) == 0)


def test_cached_terminal_set_equals_derived(toy_dag):
    """Terminal flags cached before reversal agree with those derived after."""
    rev = reverse_graph(toy_dag)

    assert terminal_nodes(toy_dag) == terminal_nodes(rev) == {"B", "C"}
    assert compute_levels(rev, terminal=terminal_nodes(toy_dag)).equals(compute_levels(rev))


def test_longer_diamond():
    """R -> A -> B -> D and R -> D: shortest 1, longest 3."""
    graph = _graph([("R", "A"), ("A", "B"), ("B", "D"), ("R", "D")])
    result = _as_dict(compute_levels(reverse_graph(graph)))

    assert result["D"] == (1, 3, True)
    assert result["B"] == (2, 2, False)


def test_idempotent(toy_dag):
    rev = reverse_graph(toy_dag)

    assert compute_levels(rev).equals(compute_levels(rev))


def test_requires_reversed_graph(toy_dag):
    with pytest.raises(ValueError, match="reversed"):
        compute_levels(toy_dag)


def test_unreachable_node_raises():
    """X has no path to R: it is a second sink in the reversed graph."""
    graph = _graph([("R", "A"), ("X", "Y")])

    with pytest.raises(UnreachableNodeError) as exc_info:
        compute_levels(reverse_graph(graph))

    assert exc_info.value.node_ids == ["X", "Y"]
    assert isinstance(exc_info.value, StructuralError)


def test_cycle_raises_structural_error():
    graph = _graph([("R", "A"), ("A", "B"), ("B", "A")])

    with pytest.raises(StructuralError, match="acyclic"):
        compute_levels(reverse_graph(graph))


def test_root_with_parent_raises():
    graph = _graph([("R", "A"), ("A", "R")])

    with pytest.raises(StructuralError):
        compute_levels(reverse_graph(graph))


def test_topological_sort_respects_edges(toy_dag):
    order = topological_sort(toy_dag)
    position = {node: i for i, node in enumerate(order)}

    assert len(order) == toy_dag.node_count
    for source, target in toy_dag.edges():
        assert position[source] < position[target]
