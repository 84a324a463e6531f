"""
kmfilter: streaming filters for k-mer abundance matrices.

This package selects potentially differential k-mers from a matrix of
per-sample abundances and converts matrix rows to FASTA records.
"""

__version__ = "0.1.0"

# Core classes and functions for easier access
from .fasta import matrix_to_fasta
from .matrix_filter import (
    MatrixRowFilter,
    RowVerdict,
    RunStatistics,
    filter_matrix,
    parse_abundance,
    run_filter,
    split_row,
)
from .parameter_config import FilterConfig
from .utils import open_file_transparently, open_matrix, open_output

__all__ = [
    "FilterConfig",
    "MatrixRowFilter",
    "RowVerdict",
    "RunStatistics",
    "filter_matrix",
    "parse_abundance",
    "run_filter",
    "split_row",
    "matrix_to_fasta",
    "open_file_transparently",
    "open_matrix",
    "open_output",
    "__version__",
]
