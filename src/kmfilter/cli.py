#!/usr/bin/env python
"""
kmfilter command-line interface.

Two commands share one Typer application:

``filter``
    Select k-mers that are potentially differential (absent in enough samples
    and present with enough abundance in enough others).
``fasta``
    Write the k-mers of a matrix as a FASTA file.

Each command is also installed as a standalone script (``km-basic-filter``
and ``km-fasta``).
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from .exceptions import KmFilterException
from .fasta import matrix_to_fasta
from .logging_config import setup_logging
from .matrix_filter import run_filter
from .parameter_config import (
    DEFAULT_MIN_ABUNDANCE,
    DEFAULT_MIN_NONZERO,
    DEFAULT_MIN_ZEROS,
    FastaArgs,
    FilterConfig,
)
from .utils import open_matrix, open_output

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

MatrixArgument = Annotated[
    str,
    typer.Argument(
        metavar="MATRIX",
        help="k-mer matrix (k-mers are rows, samples are columns), or '-' for stdin.",
        show_default=False,
    ),
]


def filter_command(
    matrix: MatrixArgument,
    min_abundance: Annotated[
        int,
        typer.Option(
            "--min-abundance",
            "-a",
            help="Min abundance to define a k-mer as present in a sample.",
        ),
    ] = DEFAULT_MIN_ABUNDANCE,
    min_zeros: Annotated[
        int,
        typer.Option(
            "--min-zeros",
            "-n",
            help="Min number of samples for which a k-mer should be absent.",
        ),
    ] = DEFAULT_MIN_ZEROS,
    min_zero_frac: Annotated[
        Optional[float],
        typer.Option(
            "--min-zero-frac",
            "-f",
            help="Fraction of samples for which a k-mer should be absent (overrides -n).",
        ),
    ] = None,
    min_nonzero: Annotated[
        int,
        typer.Option(
            "--min-nonzero",
            "-N",
            help="Min number of samples for which a k-mer should be present.",
        ),
    ] = DEFAULT_MIN_NONZERO,
    min_nz_frac: Annotated[
        Optional[float],
        typer.Option(
            "--min-nz-frac",
            "-F",
            help="Fraction of samples for which a k-mer should be present (overrides -N).",
        ),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output", "-o", help="Output filtered matrix to FILE [stdout].", dir_okay=False
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Report progress every 2^20 k-mers."),
    ] = False,
    log_json: Annotated[
        bool, typer.Option("--log-json", help="Emit diagnostics as JSON lines.")
    ] = False,
):
    """
    Filter a matrix by selecting k-mers that are potentially differential.
    """
    setup_logging(enable_json=log_json)

    try:
        config = FilterConfig(
            min_abundance=min_abundance,
            min_zeros=min_zeros,
            min_zero_frac=min_zero_frac,
            min_nonzero=min_nonzero,
            min_nz_frac=min_nz_frac,
        )
    except ValueError as ve:  # pydantic ValidationError is a ValueError
        logger.critical(f"Configuration error: {ve}")
        raise typer.Exit(code=1)

    try:
        with open_matrix(matrix) as source, open_output(output) as sink:
            run_filter(source, sink, config, verbose=verbose)
    except KmFilterException as e:
        logger.critical(f"[error] {e}")
        raise typer.Exit(code=1)
    except OSError as e:
        logger.critical(f"I/O error while filtering {matrix}: {e}", exc_info=True)
        raise typer.Exit(code=1)


def fasta_command(
    matrix: MatrixArgument,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output", "-o", help="Output FASTA file of k-mers to FILE [stdout].", dir_okay=False
        ),
    ] = None,
):
    """
    Output the k-mers of a k-mer matrix in a FASTA file.
    """
    setup_logging()

    try:
        args = FastaArgs(matrix=matrix, output=output)
        with open_matrix(args.matrix) as source, open_output(args.output) as sink:
            matrix_to_fasta(source, sink)
    except ValueError as ve:
        logger.critical(f"Configuration error: {ve}")
        raise typer.Exit(code=1)
    except KmFilterException as e:
        logger.critical(f"[error] {e}")
        raise typer.Exit(code=1)
    except OSError as e:
        logger.critical(f"I/O error while converting {matrix}: {e}", exc_info=True)
        raise typer.Exit(code=1)


app = typer.Typer(
    add_completion=False,
    pretty_exceptions_show_locals=False,
    context_settings=CONTEXT_SETTINGS,
    help="Tools for filtering k-mer abundance matrices.",
)
app.command(name="filter")(filter_command)
app.command(name="fasta")(fasta_command)

# Single-command applications behind the km-basic-filter and km-fasta scripts.
basic_filter_app = typer.Typer(
    add_completion=False,
    pretty_exceptions_show_locals=False,
    context_settings=CONTEXT_SETTINGS,
)
basic_filter_app.command()(filter_command)

fasta_app = typer.Typer(
    add_completion=False,
    pretty_exceptions_show_locals=False,
    context_settings=CONTEXT_SETTINGS,
)
fasta_app.command()(fasta_command)


if __name__ == "__main__":
    app()
