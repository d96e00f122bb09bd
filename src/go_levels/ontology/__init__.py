"""GO ontology graphs and per-term level computation."""

from go_levels.ontology.errors import (
    OntologyError,
    DataSourceError,
    StructuralError,
    UnreachableNodeError,
    TermLookupError,
)
from go_levels.ontology.models import (
    LevelRecord,
    OntologyGraph,
    OntologySource,
    LEVELS_TABLE_NAME,
    ONTOLOGY_ORDER,
)
from go_levels.ontology.fetch import (
    download_go_obo,
    load_ontology_source,
    parse_edge_table,
    parse_obo,
)
from go_levels.ontology.graph import build_ontology_graph, reverse_graph
from go_levels.ontology.levels import compute_levels, terminal_nodes, topological_sort
from go_levels.ontology.summary import build_summary_table
from go_levels.ontology.transform import compute_ontology_levels, process_go_levels
from go_levels.ontology.load import (
    compute_or_load_levels,
    levels_cache_key,
    load_to_duckdb,
    prune_level_cache,
)

__all__ = [
    "OntologyError",
    "DataSourceError",
    "StructuralError",
    "UnreachableNodeError",
    "TermLookupError",
    "LevelRecord",
    "OntologyGraph",
    "OntologySource",
    "LEVELS_TABLE_NAME",
    "ONTOLOGY_ORDER",
    "download_go_obo",
    "load_ontology_source",
    "parse_edge_table",
    "parse_obo",
    "build_ontology_graph",
    "reverse_graph",
    "compute_levels",
    "terminal_nodes",
    "topological_sort",
    "build_summary_table",
    "compute_ontology_levels",
    "process_go_levels",
    "compute_or_load_levels",
    "levels_cache_key",
    "load_to_duckdb",
    "prune_level_cache",
]
