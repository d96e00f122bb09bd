"""Merge per-ontology level tables into one table keyed by GO term id."""

import polars as pl
import structlog

from go_levels.ontology.errors import StructuralError, TermLookupError
from go_levels.ontology.models import LEVEL_COLUMNS, SUMMARY_COLUMNS

logger = structlog.get_logger()


def build_summary_table(
    level_tables: dict[str, pl.DataFrame],
    term_ontology: dict[str, str],
) -> pl.DataFrame:
    """Concatenate per-ontology level tables and attach the ontology column.

    The ``ontology`` value of each row is looked up from ``term_ontology``
    by term id rather than taken from the table the row came from. Rows
    whose looked-up ontology differs from their originating table are
    logged as a warning and keep the looked-up value.

    Args:
        level_tables: Ontology code -> output of ``compute_levels``
        term_ontology: GO accession -> "BP" / "CC" / "MF"

    Returns:
        DataFrame with columns id, shortest_path, longest_path,
        terminal_node, ontology (Categorical); one row per term

    Raises:
        TermLookupError: If any id has no ontology in ``term_ontology``
        StructuralError: If an id appears more than once
    """
    logger.info(
        "build_summary_start",
        ontologies=list(level_tables),
        row_counts={ont: df.height for ont, df in level_tables.items()},
    )

    combined = pl.concat(
        [
            df.select(LEVEL_COLUMNS).with_columns(pl.lit(ont).alias("_graph_ontology"))
            for ont, df in level_tables.items()
        ],
        how="vertical",
    )

    duplicates = combined.filter(pl.col("id").is_duplicated())["id"].unique().to_list()
    if duplicates:
        raise StructuralError(
            f"{len(duplicates)} term id(s) appear more than once: {sorted(duplicates)[:10]}"
        )

    lookup = pl.DataFrame(
        {
            "id": list(term_ontology.keys()),
            "ontology": list(term_ontology.values()),
        },
        schema={"id": pl.Utf8, "ontology": pl.Utf8},
    )
    combined = combined.join(lookup, on="id", how="left")

    missing = combined.filter(pl.col("ontology").is_null())["id"].to_list()
    if missing:
        raise TermLookupError(missing)

    mismatched = combined.filter(pl.col("ontology") != pl.col("_graph_ontology"))
    if mismatched.height > 0:
        logger.warning(
            "build_summary_ontology_mismatch",
            mismatch_count=mismatched.height,
            examples=mismatched.select(["id", "_graph_ontology", "ontology"]).head(10).to_dicts(),
        )

    summary = combined.select(SUMMARY_COLUMNS).with_columns(
        pl.col("ontology").cast(pl.Categorical)
    )

    logger.info(
        "build_summary_complete",
        row_count=summary.height,
        terminal_count=int(summary["terminal_node"].sum()),
    )

    return summary
