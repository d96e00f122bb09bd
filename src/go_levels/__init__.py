"""go-levels: shortest/longest root distance and leaf flags for Gene Ontology terms."""

__version__ = "0.1.0"
