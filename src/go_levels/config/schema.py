"""Pydantic models for pipeline configuration."""

import hashlib
import json
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

ONTOLOGIES = ("BP", "CC", "MF")

DEFAULT_ROOTS = {
    "BP": "GO:0008150",
    "CC": "GO:0005575",
    "MF": "GO:0003674",
}

GO_BASIC_OBO_URL = "http://purl.obolibrary.org/obo/go/go-basic.obo"

# Archived go-basic.obo for a dated release
GO_RELEASE_OBO_URL = "http://release.geneontology.org/{go_release}/ontology/go-basic.obo"


class GOSourceVersions(BaseModel):
    """Version information for the Gene Ontology snapshot."""

    go_release: str = Field(
        ...,
        min_length=1,
        description="GO release label (e.g. 2024-01-17), part of the level cache key",
    )
    obo_url: str | None = Field(
        default=None,
        description="Download URL for the GO OBO file; default: the archived go_release file",
    )

    def resolved_obo_url(self) -> str:
        """URL the configured release is downloaded from.

        An explicit ``obo_url`` wins; otherwise the dated archive of
        ``go_release`` is used so the file matches the cache key.
        """
        if self.obo_url:
            return self.obo_url
        return GO_RELEASE_OBO_URL.format(go_release=self.go_release)


class OntologySettings(BaseModel):
    """How the per-ontology graphs are assembled from the snapshot."""

    roots: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_ROOTS),
        description="Root term id per ontology (BP, CC, MF)",
    )
    placeholder_root: str = Field(
        default="all",
        description="Universal root placeholder removed before level computation",
    )
    relations: list[str] = Field(
        default_factory=lambda: ["is_a", "part_of"],
        description="Relation types kept as hierarchy edges",
    )

    @field_validator("roots")
    @classmethod
    def check_roots(cls, v: dict[str, str]) -> dict[str, str]:
        """Require exactly one root for each of BP, CC and MF."""
        if set(v) != set(ONTOLOGIES):
            raise ValueError(
                f"roots must define exactly {list(ONTOLOGIES)}, got {sorted(v)}"
            )
        return v

    @field_validator("relations")
    @classmethod
    def check_relations(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("relations must not be empty")
        return v


class PipelineConfig(BaseModel):
    """Main pipeline configuration."""

    data_dir: Path = Field(
        ...,
        description="Directory for downloaded ontology snapshots",
    )
    cache_dir: Path = Field(
        ...,
        description="Directory for intermediate files",
    )
    duckdb_path: Path = Field(
        ...,
        description="Path to DuckDB database file",
    )
    output_dir: Path = Field(
        default=Path("data/output"),
        description="Directory for the persisted level table",
    )
    versions: GOSourceVersions = Field(
        ...,
        description="GO snapshot version information",
    )
    ontology: OntologySettings = Field(
        default_factory=OntologySettings,
        description="Ontology graph settings",
    )

    @field_validator("data_dir", "cache_dir")
    @classmethod
    def create_directory(cls, v: Path) -> Path:
        """Create directory if it doesn't exist."""
        v.mkdir(parents=True, exist_ok=True)
        return v

    def default_obo_path(self) -> Path:
        """Location of the downloaded OBO file for the configured release."""
        return self.data_dir / f"go-basic.{self.versions.go_release}.obo"

    def config_hash(self) -> str:
        """
        Compute SHA-256 hash of the configuration.

        Returns a deterministic hash based on all config values,
        useful for tracking config changes across runs.
        """
        config_dict = self.model_dump(mode="python")
        config_json = json.dumps(
            config_dict,
            sort_keys=True,
            default=str,
        )
        return hashlib.sha256(config_json.encode()).hexdigest()
