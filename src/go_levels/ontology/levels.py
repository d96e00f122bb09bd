"""Shortest/longest root distance and terminal-node detection per GO term."""

from collections import deque

import polars as pl
import structlog

from go_levels.ontology.errors import StructuralError, UnreachableNodeError
from go_levels.ontology.models import OntologyGraph

logger = structlog.get_logger()


def terminal_nodes(graph: OntologyGraph) -> set[str]:
    """Terms without children.

    On a parent -> child graph these are the nodes with out-degree zero;
    on a reversed graph they are the nodes with in-degree zero.
    """
    adjacency = graph.predecessors if graph.reversed else graph.successors
    return {node for node, nbrs in adjacency.items() if not nbrs}


def topological_sort(graph: OntologyGraph) -> list[str]:
    """Kahn's algorithm over the current edge orientation.

    Raises:
        StructuralError: If the graph contains a cycle
    """
    in_degree = {node: len(preds) for node, preds in graph.predecessors.items()}
    queue = deque(sorted(node for node, deg in in_degree.items() if deg == 0))
    order = []

    while queue:
        node = queue.popleft()
        order.append(node)
        for nxt in graph.successors[node]:
            in_degree[nxt] -= 1
            if in_degree[nxt] == 0:
                queue.append(nxt)

    if len(order) != graph.node_count:
        cyclic = sorted(node for node, deg in in_degree.items() if deg > 0)
        raise StructuralError(
            f"{graph.ontology} graph is not acyclic; {len(cyclic)} node(s) on or behind a cycle: {cyclic[:10]}"
        )
    return order


def compute_levels(
    graph: OntologyGraph,
    terminal: set[str] | None = None,
) -> pl.DataFrame:
    """Compute root distances for every node of a reversed ontology graph.

    In the reversed graph edges point child -> parent, so the root is the
    only sink. Nodes are visited in reverse topological order (root first);
    each node takes min/max over its parents of the parent's distance + 1.

    Args:
        graph: Reversed ontology graph (``graph.reversed`` must be True)
        terminal: Terminal node ids cached from the original graph. When
            omitted they are derived from in-degree zero in ``graph``.

    Returns:
        DataFrame sorted by id with columns id, shortest_path, longest_path,
        terminal_node

    Raises:
        ValueError: If ``graph`` is not reversed
        StructuralError: If the graph has a cycle or the root has parents
        UnreachableNodeError: If any node has no path to the root
    """
    if not graph.reversed:
        raise ValueError("compute_levels expects the reversed (child -> parent) graph")

    root = graph.root
    if root not in graph.successors:
        raise StructuralError(f"{graph.ontology} root {root} is not in the graph")
    if graph.successors[root]:
        raise StructuralError(
            f"{graph.ontology} root {root} has parent(s): {sorted(graph.successors[root])}"
        )

    logger.info("compute_levels_start", ontology=graph.ontology, node_count=graph.node_count)

    order = topological_sort(graph)

    shortest = {root: 0}
    longest = {root: 0}
    unreachable = []

    for node in reversed(order):
        if node == root:
            continue
        parents = [p for p in graph.successors[node] if p in shortest]
        if not parents:
            unreachable.append(node)
            continue
        shortest[node] = min(shortest[p] for p in parents) + 1
        longest[node] = max(longest[p] for p in parents) + 1

    if unreachable:
        raise UnreachableNodeError(graph.ontology, unreachable)

    if terminal is None:
        terminal = terminal_nodes(graph)

    ids = sorted(shortest)
    df = pl.DataFrame(
        {
            "id": ids,
            "shortest_path": [shortest[i] for i in ids],
            "longest_path": [longest[i] for i in ids],
            "terminal_node": [i in terminal for i in ids],
        },
        schema={
            "id": pl.Utf8,
            "shortest_path": pl.Int64,
            "longest_path": pl.Int64,
            "terminal_node": pl.Boolean,
        },
    )

    logger.info(
        "compute_levels_complete",
        ontology=graph.ontology,
        node_count=df.height,
        terminal_count=int(df["terminal_node"].sum()),
        max_shortest_path=df["shortest_path"].max(),
        max_longest_path=df["longest_path"].max(),
    )

    return df
