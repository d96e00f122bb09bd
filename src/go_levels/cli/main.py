"""Main CLI entry point for go-levels.

Provides the command group with global options and subcommands.
"""

import logging
from pathlib import Path

import click

from go_levels import __version__
from go_levels.config.loader import load_config
from go_levels.cli.compute_cmd import compute
from go_levels.cli.filter_cmd import filter_cmd


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@click.group()
@click.option(
    '--config',
    type=click.Path(exists=True, path_type=Path),
    default='config/default.yaml',
    help='Path to pipeline configuration YAML file'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Enable verbose logging (DEBUG level)'
)
@click.pass_context
def cli(ctx, config, verbose):
    """go-levels: root distances and leaf flags for Gene Ontology terms.

    Computes shortest and longest path from the BP, CC and MF roots for
    every GO term and filters enrichment results by term depth.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.debug("Verbose logging enabled")


@cli.command()
@click.pass_context
def info(ctx):
    """Display pipeline information and configuration summary."""
    config_path = ctx.obj['config_path']

    click.echo(f"go-levels v{__version__}")
    click.echo(f"Config: {config_path}")
    click.echo()

    try:
        config = load_config(config_path)

        click.echo(f"Config Hash: {config.config_hash()[:16]}...")
        click.echo()

        click.echo(click.style("GO Snapshot:", bold=True))
        click.echo(f"  Release: {config.versions.go_release}")
        click.echo(f"  OBO URL: {config.versions.resolved_obo_url()}")
        click.echo()

        click.echo(click.style("Ontology Graphs:", bold=True))
        for ontology, root in config.ontology.roots.items():
            click.echo(f"  {ontology} root: {root}")
        click.echo(f"  Placeholder root: {config.ontology.placeholder_root}")
        click.echo(f"  Relations: {', '.join(config.ontology.relations)}")
        click.echo()

        click.echo(click.style("Paths:", bold=True))
        click.echo(f"  Data Directory: {config.data_dir}")
        click.echo(f"  Cache Directory: {config.cache_dir}")
        click.echo(f"  Output Directory: {config.output_dir}")
        click.echo(f"  DuckDB Path: {config.duckdb_path}")

    except Exception as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        ctx.exit(1)


cli.add_command(compute)
cli.add_command(filter_cmd)


if __name__ == '__main__':
    cli()
