"""Compute command: build the GO term level table.

Runs the full pipeline:
- Obtains the GO snapshot (download or --source file)
- Computes shortest/longest root distance and terminal flags per ontology
- Saves the merged table to DuckDB with provenance
- Writes TSV + Parquet output
"""

import logging
import sys
from pathlib import Path

import click

from go_levels.config.loader import load_config_with_overrides
from go_levels.ontology import (
    LEVELS_TABLE_NAME,
    OntologyError,
    compute_or_load_levels,
    download_go_obo,
    load_to_duckdb,
)
from go_levels.output import write_levels_output
from go_levels.persistence import PipelineStore, ProvenanceTracker

logger = logging.getLogger(__name__)


@click.command('compute')
@click.option(
    '--source',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help='GO snapshot to use (.obo or GO.db edge TSV); skips the download'
)
@click.option(
    '--output-dir',
    type=click.Path(path_type=Path),
    default=None,
    help='Output directory (default: output_dir from config)'
)
@click.option(
    '--force',
    is_flag=True,
    help='Re-download and recompute even if a cached level table exists'
)
@click.pass_context
def compute(ctx, source, output_dir, force):
    """Compute root distances and terminal flags for all GO terms.

    Pipeline steps:
    1. Obtain the GO snapshot (download go-basic.obo unless --source)
    2. Compute or load the cached level table for that snapshot
    3. Save go_term_levels to DuckDB with provenance
    4. Write TSV and Parquet outputs

    Examples:

        # Download the configured release and compute
        go-levels compute

        # Use a local GO.db edge export
        go-levels compute --source data/go_edges.tsv

        # Ignore cached results
        go-levels compute --force
    """
    config_path = ctx.obj['config_path']

    click.echo(click.style("=== GO Term Levels ===", bold=True))
    click.echo()

    store = None
    try:
        click.echo("Loading configuration...")
        overrides = {}
        if output_dir is not None:
            overrides["output_dir"] = output_dir
        config = load_config_with_overrides(config_path, overrides)
        click.echo(click.style(f"  Config loaded: {config_path}", fg='green'))
        click.echo(f"  GO Release: {config.versions.go_release}")
        click.echo()

        store = PipelineStore.from_config(config)
        provenance = ProvenanceTracker.from_config(config)

        # Step 1: snapshot
        click.echo(click.style("Step 1: Obtaining GO snapshot...", bold=True))
        if source is None:
            source = download_go_obo(
                config.default_obo_path(),
                url=config.versions.resolved_obo_url(),
                force=force,
            )
        click.echo(click.style(f"  Source: {source}", fg='green'))
        click.echo()
        provenance.record_step('obtain_go_snapshot', {'source': str(source)})

        # Step 2: levels
        click.echo(click.style("Step 2: Computing term levels...", bold=True))
        try:
            levels_df, cache_hit = compute_or_load_levels(
                store,
                source,
                settings=config.ontology,
                version=config.versions.go_release,
                force=force,
            )
        except OntologyError as e:
            click.echo(click.style(f"  Error computing levels: {e}", fg='red'), err=True)
            logger.exception("Level computation failed")
            sys.exit(1)

        if cache_hit:
            click.echo(click.style("  Using cached level table for this snapshot", fg='yellow'))
        click.echo(click.style(f"  {levels_df.height} terms", fg='green'))
        click.echo()
        provenance.record_step('compute_levels', {
            'row_count': levels_df.height,
            'cache_hit': cache_hit,
        })

        # Step 3: DuckDB
        click.echo(click.style("Step 3: Saving to DuckDB...", bold=True))
        load_to_duckdb(levels_df, store, provenance)
        click.echo(click.style(f"  Table: {LEVELS_TABLE_NAME}", fg='green'))
        click.echo()

        # Step 4: files
        click.echo(click.style("Step 4: Writing output files...", bold=True))
        output_paths = write_levels_output(
            levels_df,
            output_dir=config.output_dir,
            go_release=config.versions.go_release,
        )
        click.echo(click.style(f"  TSV:        {output_paths['tsv']}", fg='green'))
        click.echo(click.style(f"  Parquet:    {output_paths['parquet']}", fg='green'))
        click.echo(click.style(f"  Provenance: {output_paths['provenance']}", fg='green'))
        click.echo()
        provenance.record_step('write_levels_output', {
            'tsv_path': str(output_paths['tsv']),
            'parquet_path': str(output_paths['parquet']),
        })

        provenance.save_to_store(store)
        sidecar = provenance.save_sidecar(output_paths['tsv'])

        click.echo(click.style("=== Summary ===", bold=True))
        for ontology in ("BP", "CC", "MF"):
            subset = levels_df.filter(levels_df['ontology'].cast(str) == ontology)
            click.echo(
                f"  {ontology}: {subset.height} terms, "
                f"{int(subset['terminal_node'].sum())} terminal, "
                f"max depth {subset['longest_path'].max()}"
            )
        click.echo(f"Provenance: {sidecar}")
        click.echo()
        click.echo(click.style("Level computation complete!", fg='green', bold=True))

    except Exception as e:
        click.echo(click.style(f"Compute command failed: {e}", fg='red'), err=True)
        logger.exception("Compute command failed")
        sys.exit(1)
    finally:
        if store is not None:
            store.close()
