"""End-to-end level computation: graph -> reversal -> levels -> summary."""

import polars as pl
import structlog

from go_levels.config.schema import DEFAULT_ROOTS
from go_levels.ontology.graph import build_ontology_graph, reverse_graph
from go_levels.ontology.levels import compute_levels, terminal_nodes
from go_levels.ontology.models import ONTOLOGY_ORDER, OntologySource
from go_levels.ontology.summary import build_summary_table

logger = structlog.get_logger()


def compute_ontology_levels(
    source: OntologySource,
    ontology: str,
    root: str,
    placeholder: str = "all",
) -> pl.DataFrame:
    """Level table for a single ontology.

    Terminal flags are taken from the parent -> child graph before it is
    reversed, so only the reversed graph is alive during the traversal.
    """
    graph = build_ontology_graph(source, ontology, root, placeholder)
    terminal = terminal_nodes(graph)
    reversed_graph = reverse_graph(graph)
    del graph

    return compute_levels(reversed_graph, terminal=terminal)


def process_go_levels(
    source: OntologySource,
    roots: dict[str, str] | None = None,
    placeholder: str = "all",
) -> pl.DataFrame:
    """Compute the merged BP/CC/MF level table for a GO snapshot.

    Any error in one ontology aborts the run; there is no partial table.

    Args:
        source: Parsed GO snapshot
        roots: Root id per ontology (defaults to the GO root terms)
        placeholder: Universal root placeholder removed from each graph

    Returns:
        Summary table with id, shortest_path, longest_path, terminal_node, ontology
    """
    roots = roots or DEFAULT_ROOTS

    logger.info(
        "process_go_levels_start",
        version=source.version,
        term_count=len(source.term_ontology),
        edge_count=len(source.edges),
    )

    level_tables = {
        ontology: compute_ontology_levels(source, ontology, roots[ontology], placeholder)
        for ontology in ONTOLOGY_ORDER
    }

    summary = build_summary_table(level_tables, source.term_ontology)

    logger.info("process_go_levels_complete", row_count=summary.height)

    return summary
