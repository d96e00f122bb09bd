"""Load GO level tables to DuckDB with provenance and snapshot-keyed caching."""

import hashlib
import json
from pathlib import Path

import polars as pl
import structlog

from go_levels.config.schema import OntologySettings
from go_levels.ontology.fetch import load_ontology_source
from go_levels.ontology.models import LEVELS_CACHE_PREFIX, LEVELS_TABLE_NAME
from go_levels.ontology.transform import process_go_levels
from go_levels.persistence import PipelineStore, ProvenanceTracker

logger = structlog.get_logger()


def levels_cache_key(
    source_path: Path,
    version: str | None,
    settings: OntologySettings | None = None,
) -> str:
    """SHA-256 over the snapshot bytes, its version and the graph settings.

    Two runs over the same snapshot with the same roots, placeholder and
    relation types share a key; any change to the file or settings gives a
    new one.
    """
    settings = settings or OntologySettings()
    digest = hashlib.sha256()

    with open(source_path, "rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            digest.update(chunk)

    digest.update(
        json.dumps(
            {"version": version, "settings": settings.model_dump()},
            sort_keys=True,
        ).encode()
    )
    return digest.hexdigest()


def cache_table_name(key: str) -> str:
    return f"{LEVELS_CACHE_PREFIX}{key[:16]}"


def compute_or_load_levels(
    store: PipelineStore,
    source_path: Path,
    settings: OntologySettings | None = None,
    version: str | None = None,
    force: bool = False,
) -> tuple[pl.DataFrame, bool]:
    """Return the level table for a snapshot, computing it only when needed.

    Args:
        store: PipelineStore holding cached level tables
        source_path: OBO file or GO.db edge table
        settings: Roots, placeholder and relation types
        version: Snapshot version used when the file carries none
        force: Recompute even if a cached table exists

    Returns:
        (summary table, True if it came from the cache)
    """
    settings = settings or OntologySettings()
    source_path = Path(source_path)
    key = levels_cache_key(source_path, version, settings)
    table_name = cache_table_name(key)

    if not force and store.has_checkpoint(table_name):
        df = store.load_dataframe(table_name)
        if df is not None:
            logger.info("levels_cache_hit", table=table_name, row_count=df.height)
            return df.with_columns(pl.col("ontology").cast(pl.Categorical)), True

    logger.info("levels_cache_miss", table=table_name, source=str(source_path))

    source = load_ontology_source(
        source_path,
        settings.relations,
        version=version,
        placeholder=settings.placeholder_root,
    )
    df = process_go_levels(source, settings.roots, settings.placeholder_root)

    store.save_dataframe(
        df,
        table_name,
        description=f"GO levels for {source_path.name} (version {source.version})",
    )
    prune_level_cache(store, keep=table_name)
    return df, False


def prune_level_cache(store: PipelineStore, keep: str) -> list[str]:
    """Drop cached level tables other than ``keep``.

    Each snapshot or settings change writes a new cache table; only the
    most recent one is kept.

    Returns:
        Names of the dropped tables
    """
    stale = [
        checkpoint["table_name"]
        for checkpoint in store.list_checkpoints()
        if checkpoint["table_name"].startswith(LEVELS_CACHE_PREFIX)
        and checkpoint["table_name"] != keep
    ]
    for table_name in stale:
        store.delete_checkpoint(table_name)

    if stale:
        logger.info("levels_cache_pruned", dropped=stale, kept=keep)

    return stale


def load_to_duckdb(
    df: pl.DataFrame,
    store: PipelineStore,
    provenance: ProvenanceTracker,
    description: str = "",
) -> None:
    """Save the merged level table to DuckDB with provenance.

    Creates or replaces the go_term_levels table (idempotent) and records
    per-ontology summary statistics as a provenance step.
    """
    logger.info("levels_load_start", row_count=df.height)

    per_ontology = (
        df.group_by(pl.col("ontology").cast(pl.Utf8))
        .agg(
            pl.len().alias("term_count"),
            pl.col("terminal_node").sum().alias("terminal_count"),
            pl.col("shortest_path").max().alias("max_shortest_path"),
            pl.col("longest_path").max().alias("max_longest_path"),
        )
        .sort("ontology")
    )
    stats = {row.pop("ontology"): row for row in per_ontology.to_dicts()}

    store.save_dataframe(
        df=df,
        table_name=LEVELS_TABLE_NAME,
        description=description or "Shortest/longest root distance and terminal flag per GO term",
        replace=True,
    )

    provenance.record_step("load_go_term_levels", {
        "row_count": df.height,
        "terminal_count": int(df["terminal_node"].sum()),
        "per_ontology": stats,
    })

    logger.info("levels_load_complete", row_count=df.height, per_ontology=stats)
