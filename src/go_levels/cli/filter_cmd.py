"""Filter command: narrow per-term statistics by GO term depth."""

import logging
import sys
from pathlib import Path

import click
import polars as pl

from go_levels.config.loader import load_config
from go_levels.ontology import LEVELS_TABLE_NAME, ONTOLOGY_ORDER
from go_levels.output import filter_by_depth, read_levels_table
from go_levels.persistence import PipelineStore

logger = logging.getLogger(__name__)


@click.command('filter')
@click.argument(
    'stats_tsv',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    '--levels',
    'levels_path',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help='Level table file (.parquet or .tsv); default: go_term_levels in DuckDB'
)
@click.option('--min-shortest', type=click.IntRange(min=0), default=None,
              help='Minimum shortest path from the root')
@click.option('--max-shortest', type=click.IntRange(min=0), default=None,
              help='Maximum shortest path from the root')
@click.option('--min-longest', type=click.IntRange(min=0), default=None,
              help='Minimum longest path from the root')
@click.option('--max-longest', type=click.IntRange(min=0), default=None,
              help='Maximum longest path from the root')
@click.option('--terminal-only', is_flag=True, help='Keep only terminal (leaf) terms')
@click.option(
    '--ontology',
    type=click.Choice(list(ONTOLOGY_ORDER)),
    default=None,
    help='Keep only terms of one ontology'
)
@click.option(
    '--output',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Output TSV (default: <stats>.depth_filtered.tsv)'
)
@click.pass_context
def filter_cmd(ctx, stats_tsv, levels_path, min_shortest, max_shortest,
               min_longest, max_longest, terminal_only, ontology, output):
    """Filter a per-term statistics table (e.g. enrichment results) by depth.

    STATS_TSV must be tab separated with an 'id' column holding GO
    accessions. Matching rows are written with their level columns added.

    Examples:

        # Terms at least three edges below the root
        go-levels filter enrichment.tsv --min-shortest 3

        # Leaf BP terms only, levels read from a file
        go-levels filter enrichment.tsv --terminal-only --ontology BP \\
            --levels data/output/go_term_levels.parquet
    """
    config_path = ctx.obj['config_path']

    store = None
    try:
        if levels_path is not None:
            levels_df = read_levels_table(levels_path)
        else:
            config = load_config(config_path)
            store = PipelineStore.from_config(config)
            if not store.has_checkpoint(LEVELS_TABLE_NAME):
                click.echo(click.style(
                    f"Error: {LEVELS_TABLE_NAME} table not found. Run 'go-levels compute' first.",
                    fg='red'
                ), err=True)
                sys.exit(1)
            levels_df = store.load_dataframe(LEVELS_TABLE_NAME)

        stats_df = pl.read_csv(stats_tsv, separator="\t", schema_overrides={"id": pl.Utf8})

        result = filter_by_depth(
            stats_df,
            levels_df,
            min_shortest_path=min_shortest,
            max_shortest_path=max_shortest,
            min_longest_path=min_longest,
            max_longest_path=max_longest,
            terminal_only=terminal_only,
            ontology=ontology,
        )

        if output is None:
            output = stats_tsv.with_name(f"{stats_tsv.stem}.depth_filtered.tsv")
        output.parent.mkdir(parents=True, exist_ok=True)
        result.write_csv(output, separator="\t", include_header=True)

        click.echo(f"Input rows: {stats_df.height}")
        click.echo(f"Kept rows:  {result.height}")
        click.echo(click.style(f"Output: {output}", fg='green'))

    except Exception as e:
        click.echo(click.style(f"Filter command failed: {e}", fg='red'), err=True)
        logger.exception("Filter command failed")
        sys.exit(1)
    finally:
        if store is not None:
            store.close()
