"""Dual-format TSV+Parquet writer with provenance sidecar."""

from datetime import datetime, timezone
from pathlib import Path

import polars as pl
import yaml


def write_levels_output(
    df: pl.DataFrame | pl.LazyFrame,
    output_dir: Path,
    filename_base: str = "go_term_levels",
    go_release: str | None = None,
) -> dict:
    """
    Write the GO level table to TSV and Parquet with a YAML provenance sidecar.

    Both files hold identical data so downstream enrichment tools can join
    on ``id`` with whichever format they read.

    Args:
        df: Level table with columns id, shortest_path, longest_path,
            terminal_node, ontology
        output_dir: Directory to write output files (created if needed)
        filename_base: Base filename without extension
        go_release: GO snapshot version recorded in the sidecar

    Returns:
        {"tsv": Path, "parquet": Path, "provenance": Path}

    Notes:
        - Rows sorted by id for deterministic output
        - TSV has a header and writes booleans as true/false
        - Sidecar statistics: total terms, per-ontology and terminal counts
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    if isinstance(df, pl.LazyFrame):
        df = df.collect()

    df = df.sort("id")

    tsv_path = output_dir / f"{filename_base}.tsv"
    parquet_path = output_dir / f"{filename_base}.parquet"
    provenance_path = output_dir / f"{filename_base}.provenance.yaml"

    df.write_csv(tsv_path, separator="\t", include_header=True)
    df.write_parquet(parquet_path, compression="snappy", use_pyarrow=True)

    ontology_counts = {}
    if "ontology" in df.columns:
        counts = (
            df.group_by(pl.col("ontology").cast(pl.Utf8))
            .agg(pl.len())
            .sort("ontology")
        )
        ontology_counts = {row["ontology"]: row["len"] for row in counts.to_dicts()}

    provenance = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "go_release": go_release,
        "output_files": [tsv_path.name, parquet_path.name],
        "statistics": {
            "total_terms": df.height,
            "terminal_terms": int(df["terminal_node"].sum()) if "terminal_node" in df.columns else 0,
            "bp_count": ontology_counts.get("BP", 0),
            "cc_count": ontology_counts.get("CC", 0),
            "mf_count": ontology_counts.get("MF", 0),
        },
        "column_count": len(df.columns),
        "column_names": df.columns,
    }

    with open(provenance_path, "w") as f:
        yaml.dump(provenance, f, default_flow_style=False, sort_keys=False)

    return {
        "tsv": tsv_path,
        "parquet": parquet_path,
        "provenance": provenance_path,
    }


def read_levels_table(path: Path) -> pl.DataFrame:
    """Read a level table written by :func:`write_levels_output`.

    Accepts the .parquet or .tsv file; the ontology column is returned
    as Categorical in both cases.
    """
    path = Path(path)
    if path.suffix == ".parquet":
        df = pl.read_parquet(path)
    else:
        df = pl.read_csv(
            path,
            separator="\t",
            schema_overrides={
                "id": pl.Utf8,
                "shortest_path": pl.Int64,
                "longest_path": pl.Int64,
                "terminal_node": pl.Boolean,
                "ontology": pl.Utf8,
            },
        )
    return df.with_columns(pl.col("ontology").cast(pl.Categorical))
