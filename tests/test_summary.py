"""Tests for merging per-ontology level tables."""

import polars as pl
import pytest
from unittest.mock import patch

from go_levels.ontology import (
    StructuralError,
    TermLookupError,
    build_summary_table,
)


def _levels(ids, shortest, longest, terminal):
    return pl.DataFrame(
        {
            "id": ids,
            "shortest_path": shortest,
            "longest_path": longest,
            "terminal_node": terminal,
        },
        schema={
            "id": pl.Utf8,
            "shortest_path": pl.Int64,
            "longest_path": pl.Int64,
            "terminal_node": pl.Boolean,
        },
    )


@pytest.fixture
def level_tables():
    return {
        "BP": _levels(["GO:0008150", "GO:0000001"], [0, 1], [0, 1], [False, True]),
        "CC": _levels(["GO:0005575", "GO:0005001", "GO:0005002"], [0, 1, 2], [0, 1, 2], [False, False, True]),
        "MF": _levels(["GO:0003674"], [0], [0], [True]),
    }


@pytest.fixture
def term_ontology():
    return {
        "GO:0008150": "BP",
        "GO:0000001": "BP",
        "GO:0005575": "CC",
        "GO:0005001": "CC",
        "GO:0005002": "CC",
        "GO:0003674": "MF",
        "GO:0099999": "MF",
    }


def test_row_count_is_sum_of_ontologies(level_tables, term_ontology):
    summary = build_summary_table(level_tables, term_ontology)

    assert summary.height == sum(df.height for df in level_tables.values())
    assert summary["id"].n_unique() == summary.height


def test_columns_and_ontology_dtype(level_tables, term_ontology):
    summary = build_summary_table(level_tables, term_ontology)

    assert summary.columns == ["id", "shortest_path", "longest_path", "terminal_node", "ontology"]
    assert summary.schema["ontology"] == pl.Categorical


def test_ontology_looked_up_by_id(level_tables, term_ontology):
    summary = build_summary_table(level_tables, term_ontology)
    by_id = dict(zip(summary["id"].to_list(), summary["ontology"].cast(pl.Utf8).to_list()))

    assert by_id["GO:0000001"] == "BP"
    assert by_id["GO:0005002"] == "CC"
    assert by_id["GO:0003674"] == "MF"


def test_lookup_overrides_originating_graph_and_warns(level_tables, term_ontology):
    """A term filed under the wrong graph keeps its looked-up ontology."""
    term_ontology["GO:0000001"] = "MF"

    with patch("go_levels.ontology.summary.logger") as mock_logger:
        summary = build_summary_table(level_tables, term_ontology)

    row = summary.filter(pl.col("id") == "GO:0000001")
    assert row["ontology"].cast(pl.Utf8)[0] == "MF"
    mock_logger.warning.assert_called_once()
    assert mock_logger.warning.call_args.kwargs["mismatch_count"] == 1


def test_unresolved_id_raises_lookup_error(level_tables, term_ontology):
    del term_ontology["GO:0005001"]

    with pytest.raises(LookupError) as exc_info:
        build_summary_table(level_tables, term_ontology)

    assert isinstance(exc_info.value, TermLookupError)
    assert exc_info.value.term_ids == ["GO:0005001"]


def test_duplicate_id_across_ontologies_raises(level_tables, term_ontology):
    level_tables["MF"] = _levels(["GO:0003674", "GO:0000001"], [0, 1], [0, 1], [False, True])

    with pytest.raises(StructuralError, match="more than once"):
        build_summary_table(level_tables, term_ontology)
