"""Build per-ontology GO graphs and their transposes."""

from collections import deque

import structlog

from go_levels.ontology.errors import DataSourceError, StructuralError
from go_levels.ontology.models import OntologyGraph, OntologySource

logger = structlog.get_logger()


def reachable_from(graph: OntologyGraph, start: str) -> set[str]:
    """Return every node reachable from ``start`` along out edges (start included)."""
    seen = {start}
    queue = deque([start])
    while queue:
        node = queue.popleft()
        for nxt in graph.successors[node]:
            if nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    return seen


def build_ontology_graph(
    source: OntologySource,
    ontology: str,
    root: str,
    placeholder: str = "all",
) -> OntologyGraph:
    """Build the parent -> child graph for one ontology.

    Only terms the snapshot assigns to ``ontology`` become nodes. The
    universal placeholder root is removed together with its edges, as are
    edges crossing into another ontology.

    Args:
        source: Parsed GO snapshot
        ontology: "BP", "CC" or "MF"
        root: Root term id of the ontology (e.g. GO:0008150)
        placeholder: Id of the universal root placeholder to remove

    Returns:
        OntologyGraph with edges pointing from parent to child

    Raises:
        DataSourceError: If the snapshot has no terms for ``ontology`` or lacks ``root``
        StructuralError: If a remaining node has no path from ``root``
    """
    logger.info("build_graph_start", ontology=ontology, root=root)

    members = source.terms_in(ontology)
    members.discard(placeholder)

    if not members:
        raise DataSourceError(f"No {ontology} terms in ontology source")
    if root not in members:
        raise DataSourceError(f"{ontology} root {root} not found in ontology source")

    graph = OntologyGraph(ontology=ontology, root=root)
    for term in members:
        graph.add_node(term)

    placeholder_edges = 0
    cross_edges = 0
    for child, parent, relation in source.edges:
        if child not in members:
            continue
        if parent == placeholder:
            placeholder_edges += 1
            continue
        if parent not in members:
            cross_edges += 1
            continue
        graph.add_edge(parent, child, relation)

    unreachable = graph.nodes - reachable_from(graph, root)
    if unreachable:
        preview = sorted(unreachable)[:10]
        raise StructuralError(
            f"{len(unreachable)} {ontology} node(s) lost their path to {root} "
            f"after removing '{placeholder}': {preview}"
        )

    logger.info(
        "build_graph_complete",
        ontology=ontology,
        node_count=graph.node_count,
        edge_count=graph.edge_count,
        placeholder_edges_removed=placeholder_edges,
        cross_ontology_edges_dropped=cross_edges,
    )

    return graph


def reverse_graph(graph: OntologyGraph) -> OntologyGraph:
    """Return a new graph with every edge inverted.

    Node set, root and relation labels are preserved; the input is not
    modified. Reversing twice gives back the original edge set.
    """
    return OntologyGraph(
        ontology=graph.ontology,
        root=graph.root,
        successors={node: set(nbrs) for node, nbrs in graph.predecessors.items()},
        predecessors={node: set(nbrs) for node, nbrs in graph.successors.items()},
        relations={(target, source): set(labels) for (source, target), labels in graph.relations.items()},
        reversed=not graph.reversed,
    )
