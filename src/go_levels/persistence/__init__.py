"""Persistence layer for level tables, checkpoints and provenance tracking."""

from go_levels.persistence.duckdb_store import PipelineStore
from go_levels.persistence.provenance import ProvenanceTracker

__all__ = ["PipelineStore", "ProvenanceTracker"]
