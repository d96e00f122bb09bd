"""Data models for GO ontology graphs and per-term level records."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Literal

from pydantic import BaseModel, Field, model_validator

# Table name for DuckDB storage of the merged level table
LEVELS_TABLE_NAME = "go_term_levels"

# Prefix for content-addressed cached level tables
LEVELS_CACHE_PREFIX = "go_levels_"

# Processing order of the three ontologies
ONTOLOGY_ORDER = ("BP", "CC", "MF")

NAMESPACE_TO_ONTOLOGY = {
    "biological_process": "BP",
    "cellular_component": "CC",
    "molecular_function": "MF",
}

LEVEL_COLUMNS = ["id", "shortest_path", "longest_path", "terminal_node"]
SUMMARY_COLUMNS = LEVEL_COLUMNS + ["ontology"]


@dataclass
class OntologySource:
    """Parsed GO snapshot: hierarchy edges plus term -> ontology mapping.

    Attributes:
        edges: (child, parent, relation) triples, e.g. ("GO:0005634", "GO:0043231", "is_a")
        term_ontology: GO accession -> "BP" / "CC" / "MF"
        version: Snapshot version (OBO data-version header), None if unknown
        path: File the snapshot was read from, if any
    """

    edges: list[tuple[str, str, str]]
    term_ontology: dict[str, str]
    version: str | None = None
    path: Path | None = None

    def terms_in(self, ontology: str) -> set[str]:
        return {term for term, ont in self.term_ontology.items() if ont == ontology}


@dataclass
class OntologyGraph:
    """Directed graph for one ontology as explicit adjacency lists.

    ``successors`` holds out edges and ``predecessors`` holds in edges, so
    neighbour lookups in either direction are O(1). A freshly built graph
    points parent -> child; ``reversed`` is True once the edges point
    child -> parent. ``relations`` keeps the relation labels of each edge
    keyed by (source, target) in the current orientation.
    """

    ontology: str
    root: str
    successors: dict[str, set[str]] = field(default_factory=dict)
    predecessors: dict[str, set[str]] = field(default_factory=dict)
    relations: dict[tuple[str, str], set[str]] = field(default_factory=dict)
    reversed: bool = False

    def add_node(self, node: str) -> None:
        self.successors.setdefault(node, set())
        self.predecessors.setdefault(node, set())

    def add_edge(self, source: str, target: str, relation: str = "is_a") -> None:
        self.add_node(source)
        self.add_node(target)
        self.successors[source].add(target)
        self.predecessors[target].add(source)
        self.relations.setdefault((source, target), set()).add(relation)

    @property
    def nodes(self) -> set[str]:
        return set(self.successors)

    @property
    def node_count(self) -> int:
        return len(self.successors)

    @property
    def edge_count(self) -> int:
        return sum(len(targets) for targets in self.successors.values())

    def edges(self) -> Iterator[tuple[str, str]]:
        """Yield (source, target) pairs in the current orientation."""
        for source, targets in self.successors.items():
            for target in targets:
                yield source, target

    def edge_set(self) -> set[tuple[str, str]]:
        return set(self.edges())

    def out_degree(self, node: str) -> int:
        return len(self.successors[node])

    def in_degree(self, node: str) -> int:
        return len(self.predecessors[node])


class LevelRecord(BaseModel):
    """Root distance summary for a single GO term.

    Attributes:
        id: GO accession (e.g., GO:0005634)
        shortest_path: Fewest edges from the ontology root (root itself = 0)
        longest_path: Most edges from the ontology root, >= shortest_path
        terminal_node: True if the term has no child terms
        ontology: "BP", "CC" or "MF"
    """

    id: str
    shortest_path: int = Field(..., ge=0)
    longest_path: int = Field(..., ge=0)
    terminal_node: bool
    ontology: Literal["BP", "CC", "MF"]

    @model_validator(mode="after")
    def check_path_order(self) -> "LevelRecord":
        if self.shortest_path > self.longest_path:
            raise ValueError(
                f"shortest_path ({self.shortest_path}) exceeds longest_path ({self.longest_path}) for {self.id}"
            )
        return self
