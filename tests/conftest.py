"""Shared fixtures: a toy GO snapshot in OBO and GO.db edge-table form.

Hierarchy (parent -> child):

    BP  GO:0008150 -> GO:0000001 (A), GO:0000002 (B), GO:0000003 (C)
        GO:0000001 -> GO:0000003
        GO:0000003 -> GO:0000004 (D, part_of)
    CC  GO:0005575 -> GO:0005001 -> GO:0005002
    MF  GO:0003674 -> GO:0003001 -> GO:0003002 (also "regulates", not a hierarchy edge)
"""

import polars as pl
import pytest

from go_levels.ontology.models import OntologySource

TOY_OBO = """format-version: 1.2
data-version: releases/2024-01-17
ontology: go

[Term]
id: GO:0008150
name: biological_process
namespace: biological_process

[Term]
id: GO:0000001
name: term A
namespace: biological_process
is_a: GO:0008150 ! biological_process

[Term]
id: GO:0000002
name: term B
namespace: biological_process
is_a: GO:0008150 ! biological_process

[Term]
id: GO:0000003
name: term C
namespace: biological_process
def: "A term: with colons." [GOC:test]
is_a: GO:0000001 ! term A
is_a: GO:0008150 ! biological_process

[Term]
id: GO:0000004
name: term D
namespace: biological_process
relationship: part_of GO:0000003 ! term C

[Term]
id: GO:0000099
name: obsolete term
namespace: biological_process
is_obsolete: true

[Term]
id: GO:0005575
name: cellular_component
namespace: cellular_component

[Term]
id: GO:0005001
name: term E
namespace: cellular_component
is_a: GO:0005575 ! cellular_component

[Term]
id: GO:0005002
name: term F
namespace: cellular_component
is_a: GO:0005001 ! term E

[Term]
id: GO:0003674
name: molecular_function
namespace: molecular_function

[Term]
id: GO:0003001
name: term G
namespace: molecular_function
is_a: GO:0003674 ! molecular_function

[Term]
id: GO:0003002
name: term H
namespace: molecular_function
is_a: GO:0003001 ! term G
relationship: regulates GO:0003001 ! term G

[Typedef]
id: part_of
name: part of
is_transitive: true
"""

# Expected (shortest_path, longest_path, terminal_node) per term
TOY_EXPECTED = {
    "GO:0008150": (0, 0, False),
    "GO:0000001": (1, 1, False),
    "GO:0000002": (1, 1, True),
    "GO:0000003": (1, 2, False),
    "GO:0000004": (2, 3, True),
    "GO:0005575": (0, 0, False),
    "GO:0005001": (1, 1, False),
    "GO:0005002": (2, 2, True),
    "GO:0003674": (0, 0, False),
    "GO:0003001": (1, 1, False),
    "GO:0003002": (2, 2, True),
}

TOY_ONTOLOGY = {
    "GO:0008150": "BP",
    "GO:0000001": "BP",
    "GO:0000002": "BP",
    "GO:0000003": "BP",
    "GO:0000004": "BP",
    "GO:0005575": "CC",
    "GO:0005001": "CC",
    "GO:0005002": "CC",
    "GO:0003674": "MF",
    "GO:0003001": "MF",
    "GO:0003002": "MF",
}

TOY_EDGES = [
    ("GO:0008150", "all", "is_a"),
    ("GO:0000001", "GO:0008150", "is_a"),
    ("GO:0000002", "GO:0008150", "is_a"),
    ("GO:0000003", "GO:0000001", "is_a"),
    ("GO:0000003", "GO:0008150", "is_a"),
    ("GO:0000004", "GO:0000003", "part_of"),
    ("GO:0005575", "all", "is_a"),
    ("GO:0005001", "GO:0005575", "is_a"),
    ("GO:0005002", "GO:0005001", "is_a"),
    ("GO:0003674", "all", "is_a"),
    ("GO:0003001", "GO:0003674", "is_a"),
    ("GO:0003002", "GO:0003001", "is_a"),
]


@pytest.fixture
def toy_obo(tmp_path):
    """Toy GO snapshot written as an OBO file."""
    path = tmp_path / "toy.obo"
    path.write_text(TOY_OBO)
    return path


@pytest.fixture
def toy_edge_table(tmp_path):
    """Toy GO snapshot as a GO.db edge export including the 'all' placeholder."""
    path = tmp_path / "toy_edges.tsv"
    pl.DataFrame({
        "child": [c for c, _, _ in TOY_EDGES],
        "parent": [p for _, p, _ in TOY_EDGES],
        "relation": [r for _, _, r in TOY_EDGES],
        "ontology": [TOY_ONTOLOGY[c] for c, _, _ in TOY_EDGES],
    }).write_csv(path, separator="\t")
    return path


@pytest.fixture
def toy_source():
    """Toy GO snapshot as an in-memory OntologySource (placeholder edges included)."""
    return OntologySource(
        edges=list(TOY_EDGES),
        term_ontology=dict(TOY_ONTOLOGY),
        version="toy",
    )


@pytest.fixture
def test_config(tmp_path):
    """Minimal config YAML pointing all paths into tmp_path."""
    config_path = tmp_path / "test_config.yaml"
    config_path.write_text(f"""
data_dir: {tmp_path / "data"}
cache_dir: {tmp_path / "cache"}
duckdb_path: {tmp_path / "test.duckdb"}
output_dir: {tmp_path / "output"}
versions:
  go_release: "2024-01-17"
ontology:
  placeholder_root: all
  relations:
    - is_a
    - part_of
""")
    return config_path
