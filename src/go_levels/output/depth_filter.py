"""Filter per-term statistics by GO term depth."""

import polars as pl
import structlog

from go_levels.ontology.models import LEVELS_TABLE_NAME, ONTOLOGY_ORDER
from go_levels.persistence import PipelineStore

logger = structlog.get_logger()


def _check_bounds(**bounds: int | None) -> None:
    for name, value in bounds.items():
        if value is not None and value < 0:
            raise ValueError(f"{name} must be >= 0, got {value}")


def _check_ontology(ontology: str | None) -> None:
    if ontology is not None and ontology not in ONTOLOGY_ORDER:
        raise ValueError(f"ontology must be one of {list(ONTOLOGY_ORDER)}, got {ontology!r}")


def depth_filter_expr(
    min_shortest_path: int | None = None,
    max_shortest_path: int | None = None,
    min_longest_path: int | None = None,
    max_longest_path: int | None = None,
    terminal_only: bool = False,
    ontology: str | None = None,
) -> pl.Expr:
    """Build a polars predicate over the level table columns.

    Bounds are inclusive; a None bound is not applied.
    """
    expr = pl.lit(True)
    if min_shortest_path is not None:
        expr = expr & (pl.col("shortest_path") >= min_shortest_path)
    if max_shortest_path is not None:
        expr = expr & (pl.col("shortest_path") <= max_shortest_path)
    if min_longest_path is not None:
        expr = expr & (pl.col("longest_path") >= min_longest_path)
    if max_longest_path is not None:
        expr = expr & (pl.col("longest_path") <= max_longest_path)
    if terminal_only:
        expr = expr & pl.col("terminal_node")
    if ontology is not None:
        expr = expr & (pl.col("ontology").cast(pl.Utf8) == ontology)
    return expr


def filter_by_depth(
    stats: pl.DataFrame,
    levels: pl.DataFrame,
    min_shortest_path: int | None = None,
    max_shortest_path: int | None = None,
    min_longest_path: int | None = None,
    max_longest_path: int | None = None,
    terminal_only: bool = False,
    ontology: str | None = None,
) -> pl.DataFrame:
    """Keep per-term statistics whose GO term lies within the depth bounds.

    Typical use is an enrichment result (term id, p-value, ...) narrowed to
    specific terms, e.g. ``min_shortest_path=3`` or ``terminal_only=True``.

    Args:
        stats: Per-term table with an ``id`` column (other columns kept)
        levels: Level table from the pipeline
        min_shortest_path/max_shortest_path: Inclusive shortest_path bounds
        min_longest_path/max_longest_path: Inclusive longest_path bounds
        terminal_only: Keep only terminal terms
        ontology: Keep only "BP", "CC" or "MF" terms

    Returns:
        ``stats`` rows inner-joined with their level columns, in the original
        ``stats`` order. Terms absent from ``levels`` are dropped.

    Raises:
        ValueError: If ``stats`` has no id column, a bound is negative or the
            ontology code is unknown
    """
    if "id" not in stats.columns:
        raise ValueError("stats must have an 'id' column")
    _check_bounds(
        min_shortest_path=min_shortest_path,
        max_shortest_path=max_shortest_path,
        min_longest_path=min_longest_path,
        max_longest_path=max_longest_path,
    )
    _check_ontology(ontology)

    level_cols = levels.select(["id", "shortest_path", "longest_path", "terminal_node", "ontology"])
    overlap = [c for c in level_cols.columns if c != "id" and c in stats.columns]
    if overlap:
        stats = stats.drop(overlap)

    joined = stats.with_row_index("_row").join(level_cols, on="id", how="inner")
    unmatched = stats.height - joined.height

    result = (
        joined.filter(
            depth_filter_expr(
                min_shortest_path,
                max_shortest_path,
                min_longest_path,
                max_longest_path,
                terminal_only,
                ontology,
            )
        )
        .sort("_row")
        .drop("_row")
    )

    logger.info(
        "filter_by_depth_complete",
        input_rows=stats.height,
        unmatched_terms=unmatched,
        kept_rows=result.height,
    )

    return result


def query_terms_by_depth(
    store: PipelineStore,
    min_shortest_path: int | None = None,
    max_shortest_path: int | None = None,
    min_longest_path: int | None = None,
    max_longest_path: int | None = None,
    terminal_only: bool = False,
    ontology: str | None = None,
) -> pl.DataFrame:
    """Query GO terms within depth bounds from the persisted level table.

    Returns:
        DataFrame with id, shortest_path, longest_path, terminal_node,
        ontology sorted by id
    """
    _check_bounds(
        min_shortest_path=min_shortest_path,
        max_shortest_path=max_shortest_path,
        min_longest_path=min_longest_path,
        max_longest_path=max_longest_path,
    )
    _check_ontology(ontology)

    clauses = []
    params = []
    for column, op, value in [
        ("shortest_path", ">=", min_shortest_path),
        ("shortest_path", "<=", max_shortest_path),
        ("longest_path", ">=", min_longest_path),
        ("longest_path", "<=", max_longest_path),
        ("ontology", "=", ontology),
    ]:
        if value is not None:
            clauses.append(f"{column} {op} ?")
            params.append(value)
    if terminal_only:
        clauses.append("terminal_node")

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

    logger.info("levels_query_by_depth", filters=len(clauses))

    df = store.execute_query(
        f"""
        SELECT id, shortest_path, longest_path, terminal_node, ontology
        FROM {LEVELS_TABLE_NAME}
        {where}
        ORDER BY id
        """,
        params=params or None,
    )

    logger.info("levels_query_complete", result_count=df.height)

    return df
