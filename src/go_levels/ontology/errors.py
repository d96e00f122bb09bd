"""Errors raised while building ontology graphs and level tables.

All of them abort the run: downstream consumers expect a complete
three-ontology table, so there is no partial result.
"""


class OntologyError(Exception):
    """Base class for ontology level computation errors."""


class DataSourceError(OntologyError):
    """Ontology snapshot is missing, unreadable or malformed."""


class StructuralError(OntologyError):
    """Graph violates a structural invariant (cycle, disconnected node, duplicate id)."""


class UnreachableNodeError(StructuralError):
    """One or more nodes have no directed path to the ontology root."""

    def __init__(self, ontology: str, node_ids: list[str]):
        self.ontology = ontology
        self.node_ids = sorted(node_ids)
        preview = ", ".join(self.node_ids[:10])
        more = f" (+{len(self.node_ids) - 10} more)" if len(self.node_ids) > 10 else ""
        super().__init__(
            f"{len(self.node_ids)} {ontology} node(s) unreachable from root: {preview}{more}"
        )


class TermLookupError(OntologyError, LookupError):
    """Term id has no resolvable ontology membership."""

    def __init__(self, term_ids: list[str]):
        self.term_ids = sorted(term_ids)
        preview = ", ".join(self.term_ids[:10])
        more = f" (+{len(self.term_ids) - 10} more)" if len(self.term_ids) > 10 else ""
        super().__init__(f"No ontology found for {len(self.term_ids)} term(s): {preview}{more}")
