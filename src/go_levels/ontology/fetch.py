"""Download and parse Gene Ontology snapshots."""

from pathlib import Path
from typing import Iterable

import httpx
import obonet
import polars as pl
import structlog
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from go_levels.config.schema import GO_BASIC_OBO_URL
from go_levels.ontology.errors import DataSourceError
from go_levels.ontology.models import NAMESPACE_TO_ONTOLOGY, OntologySource

logger = structlog.get_logger()

DEFAULT_RELATIONS = ("is_a", "part_of")

# Required columns of a GO.db style edge export
EDGE_TABLE_COLUMNS = ["child", "parent", "ontology"]


@retry(
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=4, max=60),
    retry=retry_if_exception_type(
        (httpx.HTTPStatusError, httpx.ConnectError, httpx.TimeoutException)
    ),
)
def download_go_obo(
    output_path: Path,
    url: str = GO_BASIC_OBO_URL,
    force: bool = False,
) -> Path:
    """Download a GO OBO release with retry and streaming.

    Args:
        output_path: Where to save the OBO file
        url: OBO download URL (default: go-basic.obo)
        force: If True, re-download even if file exists

    Returns:
        Path to the downloaded OBO file

    Raises:
        httpx.HTTPStatusError: On HTTP errors (after retries)
        httpx.ConnectError: On connection errors (after retries)
        httpx.TimeoutException: On timeout (after retries)
    """
    output_path = Path(output_path)

    if output_path.exists() and not force:
        logger.info(
            "go_obo_exists",
            path=str(output_path),
            size_mb=round(output_path.stat().st_size / 1024 / 1024, 2),
        )
        return output_path

    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = output_path.with_suffix(output_path.suffix + ".tmp")

    logger.info("go_obo_download_start", url=url)

    with httpx.stream("GET", url, timeout=120.0, follow_redirects=True) as response:
        response.raise_for_status()

        with open(temp_path, "wb") as f:
            for chunk in response.iter_bytes(chunk_size=8192):
                f.write(chunk)

    temp_path.replace(output_path)

    logger.info(
        "go_obo_download_complete",
        path=str(output_path),
        size_mb=round(output_path.stat().st_size / 1024 / 1024, 2),
    )

    return output_path


def parse_obo(
    obo_path: Path,
    relations: Iterable[str] = DEFAULT_RELATIONS,
) -> OntologySource:
    """Parse a GO OBO file into hierarchy edges and term ontologies.

    The file is read with obonet, which yields child -> parent edges keyed
    by relation type (``is_a`` or the ``relationship:`` typedef). Obsolete
    terms are skipped and only edges whose relation is listed in
    ``relations`` are kept.

    Args:
        obo_path: Path to go.obo / go-basic.obo
        relations: Relation types kept as hierarchy edges

    Returns:
        OntologySource with edges (child, parent, relation), term -> ontology
        mapping and the ``data-version`` header as version

    Raises:
        DataSourceError: If the file is unreadable, malformed or has no terms
    """
    obo_path = Path(obo_path)
    relations = set(relations)

    logger.info("parse_obo_start", path=str(obo_path), relations=sorted(relations))

    try:
        graph = obonet.read_obo(str(obo_path), ignore_obsolete=True)
    except (OSError, UnicodeDecodeError, ValueError, IndexError, KeyError) as e:
        raise DataSourceError(f"Cannot parse GO OBO file {obo_path}: {e}") from e

    term_ontology: dict[str, str] = {}
    skipped = 0
    for term_id, data in graph.nodes(data=True):
        # Parents referenced by an edge but never defined carry no data
        if not data or data.get("is_obsolete") == "true":
            continue
        ontology = NAMESPACE_TO_ONTOLOGY.get(data.get("namespace", ""))
        if ontology is None:
            skipped += 1
            continue
        term_ontology[term_id] = ontology

    if not term_ontology:
        raise DataSourceError(f"No GO terms found in {obo_path}")

    edges = [
        (child, parent, relation)
        for child, parent, relation in graph.edges(keys=True)
        if relation in relations and child in term_ontology
    ]

    version = graph.graph.get("data-version")

    if skipped:
        logger.warning("parse_obo_unknown_namespace", skipped_terms=skipped)

    logger.info(
        "parse_obo_complete",
        term_count=len(term_ontology),
        edge_count=len(edges),
        version=version,
    )

    return OntologySource(
        edges=edges,
        term_ontology=term_ontology,
        version=version,
        path=obo_path,
    )


def parse_edge_table(
    tsv_path: Path,
    relations: Iterable[str] = DEFAULT_RELATIONS,
    placeholder: str = "all",
) -> OntologySource:
    """Parse a GO.db style tab-separated edge export.

    Expected columns: ``child``, ``parent``, ``ontology`` and optionally
    ``relation`` (defaults to is_a). The ontology column applies to the
    child; parents that never appear as a child inherit the ontology of
    their edge. The universal placeholder root may appear as a parent but is
    never given an ontology.

    Raises:
        DataSourceError: If the file is unreadable, lacks required columns,
            contains unknown ontology codes or assigns a term to two ontologies
    """
    tsv_path = Path(tsv_path)
    relations = set(relations)

    logger.info("parse_edge_table_start", path=str(tsv_path))

    try:
        df = pl.read_csv(tsv_path, separator="\t", infer_schema_length=0)
    except (OSError, pl.exceptions.PolarsError) as e:
        raise DataSourceError(f"Cannot read GO edge table {tsv_path}: {e}") from e

    missing = [c for c in EDGE_TABLE_COLUMNS if c not in df.columns]
    if missing:
        raise DataSourceError(f"GO edge table {tsv_path} is missing columns: {missing}")

    if "relation" not in df.columns:
        df = df.with_columns(pl.lit("is_a").alias("relation"))

    df = df.with_columns(pl.col("ontology").str.to_uppercase()).drop_nulls(
        ["child", "parent", "ontology"]
    )

    unknown = sorted(set(df["ontology"].unique().to_list()) - set(NAMESPACE_TO_ONTOLOGY.values()))
    if unknown:
        raise DataSourceError(f"Unknown ontology codes in {tsv_path}: {unknown}")

    conflicts = (
        df.group_by("child")
        .agg(pl.col("ontology").n_unique().alias("n"))
        .filter(pl.col("n") > 1)
    )
    if conflicts.height > 0:
        raise DataSourceError(
            f"Terms assigned to more than one ontology in {tsv_path}: "
            f"{sorted(conflicts['child'].to_list())[:10]}"
        )

    if df.height == 0:
        raise DataSourceError(f"No edges found in {tsv_path}")

    term_ontology = dict(zip(df["child"].to_list(), df["ontology"].to_list()))
    for parent, ontology in zip(df["parent"].to_list(), df["ontology"].to_list()):
        if parent != placeholder:
            term_ontology.setdefault(parent, ontology)

    kept = df.filter(pl.col("relation").is_in(sorted(relations)))
    edges = list(zip(kept["child"].to_list(), kept["parent"].to_list(), kept["relation"].to_list()))

    logger.info(
        "parse_edge_table_complete",
        term_count=len(term_ontology),
        edge_count=len(edges),
        dropped_relations=df.height - kept.height,
    )

    return OntologySource(edges=edges, term_ontology=term_ontology, path=tsv_path)


def load_ontology_source(
    path: Path,
    relations: Iterable[str] = DEFAULT_RELATIONS,
    version: str | None = None,
    placeholder: str = "all",
) -> OntologySource:
    """Read an ontology snapshot, choosing the parser from the file suffix.

    ``.obo`` files go through :func:`parse_obo`; anything else is read as a
    tab-separated edge table. ``version`` fills in the snapshot version when
    the file does not carry one. ``placeholder`` names the universal root
    that edge tables may list as a parent.
    """
    path = Path(path)
    if not path.exists():
        raise DataSourceError(f"Ontology source not found: {path}")

    if path.suffix == ".obo":
        source = parse_obo(path, relations)
    else:
        source = parse_edge_table(path, relations, placeholder=placeholder)

    if source.version is None:
        source.version = version
    return source
