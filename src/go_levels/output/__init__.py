"""Output generation: level table files and depth-based filtering."""

from go_levels.output.depth_filter import (
    depth_filter_expr,
    filter_by_depth,
    query_terms_by_depth,
)
from go_levels.output.writers import read_levels_table, write_levels_output

__all__ = [
    "depth_filter_expr",
    "filter_by_depth",
    "query_terms_by_depth",
    "read_levels_table",
    "write_levels_output",
]
