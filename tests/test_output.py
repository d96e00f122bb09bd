"""Unit tests for output writing and depth filtering."""

import polars as pl
import pytest
import yaml

from go_levels.output import (
    depth_filter_expr,
    filter_by_depth,
    query_terms_by_depth,
    read_levels_table,
    write_levels_output,
)
from go_levels.ontology import LEVELS_TABLE_NAME
from go_levels.persistence import PipelineStore


@pytest.fixture
def levels_df() -> pl.DataFrame:
    """Level table for a handful of terms across all three ontologies."""
    return pl.DataFrame(
        {
            "id": ["GO:0008150", "GO:0000001", "GO:0000003", "GO:0000004", "GO:0005575", "GO:0005002", "GO:0003002"],
            "shortest_path": [0, 1, 1, 2, 0, 2, 2],
            "longest_path": [0, 1, 2, 3, 0, 2, 2],
            "terminal_node": [False, False, False, True, False, True, True],
            "ontology": ["BP", "BP", "BP", "BP", "CC", "CC", "MF"],
        },
        schema_overrides={"ontology": pl.Categorical},
    )


@pytest.fixture
def enrichment_df() -> pl.DataFrame:
    """Enrichment results keyed by GO id, including one unknown term."""
    return pl.DataFrame({
        "id": ["GO:0000004", "GO:0000001", "GO:0005002", "GO:0003002", "GO:9999999"],
        "pvalue": [0.001, 0.02, 0.03, 0.04, 0.05],
    })


# ============================================================================
# Writer Tests
# ============================================================================

def test_write_levels_output_creates_files(tmp_path, levels_df):
    paths = write_levels_output(levels_df, tmp_path / "out", go_release="2024-01-17")

    assert paths["tsv"].exists()
    assert paths["parquet"].exists()
    assert paths["provenance"].exists()
    assert paths["tsv"].name == "go_term_levels.tsv"


def test_written_files_sorted_and_equal(tmp_path, levels_df):
    paths = write_levels_output(levels_df, tmp_path)

    from_tsv = read_levels_table(paths["tsv"])
    from_parquet = read_levels_table(paths["parquet"])

    assert from_tsv["id"].to_list() == sorted(levels_df["id"].to_list())
    assert from_tsv["id"].to_list() == from_parquet["id"].to_list()
    assert from_tsv["terminal_node"].to_list() == from_parquet["terminal_node"].to_list()
    assert from_tsv["longest_path"].to_list() == from_parquet["longest_path"].to_list()
    assert from_tsv.schema["ontology"] == pl.Categorical


def test_provenance_sidecar_statistics(tmp_path, levels_df):
    paths = write_levels_output(levels_df, tmp_path, go_release="2024-01-17")

    with open(paths["provenance"]) as f:
        provenance = yaml.safe_load(f)

    assert provenance["go_release"] == "2024-01-17"
    assert provenance["statistics"]["total_terms"] == 7
    assert provenance["statistics"]["terminal_terms"] == 3
    assert provenance["statistics"]["bp_count"] == 4
    assert provenance["statistics"]["cc_count"] == 2
    assert provenance["statistics"]["mf_count"] == 1
    assert provenance["column_names"] == ["id", "shortest_path", "longest_path", "terminal_node", "ontology"]


# ============================================================================
# Depth Filter Tests
# ============================================================================

def test_depth_filter_expr_bounds_inclusive(levels_df):
    shortest = levels_df.filter(depth_filter_expr(min_shortest_path=1, max_shortest_path=1))
    longest = levels_df.filter(depth_filter_expr(min_longest_path=2, max_longest_path=2))

    assert shortest["id"].to_list() == ["GO:0000001", "GO:0000003"]
    assert longest["id"].to_list() == ["GO:0000003", "GO:0005002", "GO:0003002"]


def test_depth_filter_expr_without_bounds_keeps_all(levels_df):
    assert levels_df.filter(depth_filter_expr()).height == levels_df.height


def test_depth_filter_expr_terminal_and_ontology(levels_df):
    result = levels_df.filter(depth_filter_expr(terminal_only=True, ontology="CC"))

    assert result["id"].to_list() == ["GO:0005002"]


def test_filter_min_shortest(enrichment_df, levels_df):
    result = filter_by_depth(enrichment_df, levels_df, min_shortest_path=2)

    assert result["id"].to_list() == ["GO:0000004", "GO:0005002", "GO:0003002"]
    assert "pvalue" in result.columns
    assert "longest_path" in result.columns


def test_filter_preserves_input_order_and_drops_unknown(enrichment_df, levels_df):
    result = filter_by_depth(enrichment_df, levels_df)

    assert result["id"].to_list() == ["GO:0000004", "GO:0000001", "GO:0005002", "GO:0003002"]


def test_filter_terminal_and_ontology(enrichment_df, levels_df):
    result = filter_by_depth(enrichment_df, levels_df, terminal_only=True, ontology="CC")

    assert result["id"].to_list() == ["GO:0005002"]


def test_filter_longest_bounds(enrichment_df, levels_df):
    result = filter_by_depth(enrichment_df, levels_df, min_longest_path=2, max_longest_path=2)

    assert result["id"].to_list() == ["GO:0005002", "GO:0003002"]


def test_filter_rejects_bad_arguments(enrichment_df, levels_df):
    with pytest.raises(ValueError, match="id"):
        filter_by_depth(enrichment_df.rename({"id": "term"}), levels_df)
    with pytest.raises(ValueError, match=">= 0"):
        filter_by_depth(enrichment_df, levels_df, min_shortest_path=-1)
    with pytest.raises(ValueError, match="ontology"):
        filter_by_depth(enrichment_df, levels_df, ontology="XX")


def test_query_terms_by_depth(tmp_path, levels_df):
    with PipelineStore(tmp_path / "test.duckdb") as store:
        store.save_dataframe(levels_df, LEVELS_TABLE_NAME)

        deep = query_terms_by_depth(store, min_shortest_path=2)
        bp_leaves = query_terms_by_depth(store, terminal_only=True, ontology="BP")
        everything = query_terms_by_depth(store)

    assert deep["id"].to_list() == ["GO:0000004", "GO:0003002", "GO:0005002"]
    assert bp_leaves["id"].to_list() == ["GO:0000004"]
    assert everything.height == levels_df.height
