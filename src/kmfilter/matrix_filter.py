"""
Streaming filter for k-mer abundance matrices.

Rows are k-mers and columns are samples. A row is kept when the k-mer is
absent (count == 0) in enough samples and present (count >= min_abundance)
in enough others. Lines are examined one at a time and kept lines are
forwarded exactly as read, so the output is a verbatim subset of the input.
"""

import dataclasses
import logging
import re
import time
from typing import Iterable, List, Optional, TextIO, Tuple

from .genomic_types import Abundance, LineSource, LineStream, RawLine
from .logging_config import PerformanceLogger
from .parameter_config import PROGRESS_INTERVAL, FilterConfig

logger = logging.getLogger(__name__)

# Optional sign followed by leading decimal digits; anything after is ignored.
_LEADING_INTEGER = re.compile(r"[+-]?[0-9]+", re.ASCII)

# Fields are separated by spaces, tabs and newlines only.
ROW_DELIMITERS = " \t\n"
_ROW_DELIMITER_RUN = re.compile(r"[ \t\n]+")


def split_row(line: RawLine) -> List[str]:
    """
    Splits a raw matrix line into tokens.

    Only space, tab and newline separate fields; any other character,
    including "\\r" and non-ASCII whitespace, belongs to its token. A line
    with no tokens yields an empty list.

    Example:
        >>> split_row("kmerA\\t0  12\\n")
        ['kmerA', '0', '12']
    """
    stripped = line.strip(ROW_DELIMITERS)
    return _ROW_DELIMITER_RUN.split(stripped) if stripped else []


def parse_abundance(token: str) -> Abundance:
    """
    Parses an abundance token permissively.

    The longest signed base-10 prefix of the token is used, so ``"12"`` is
    12, ``"7x"`` is 7 and ``"1.9"`` is 1. A token without a numeric prefix
    (``"NA"``, ``"-"``, ``""``) is 0: malformed counts are treated as absent
    samples rather than rejected.

    Example:
        >>> parse_abundance("15"), parse_abundance("-3"), parse_abundance("NA")
        (15, -3, 0)
    """
    match = _LEADING_INTEGER.match(token)
    return int(match.group()) if match else 0


@dataclasses.dataclass(frozen=True, slots=True)
class RowVerdict:
    """Zero and present sample counts for a single row."""

    n_zeros: int = 0
    n_present: int = 0

    @classmethod
    def tally(cls, values: Iterable[Abundance], min_abundance: int) -> "RowVerdict":
        """
        Counts zero-valued and present samples.

        Values strictly between 0 and ``min_abundance`` (and negative values)
        fall in neither bucket.
        """
        n_zeros = n_present = 0
        for value in values:
            if value == 0:
                n_zeros += 1
            elif value >= min_abundance:
                n_present += 1
        return cls(n_zeros=n_zeros, n_present=n_present)


@dataclasses.dataclass
class RunStatistics:
    """Counters accumulated over one pass through a matrix."""

    n_samples: int = 0
    n_kmers: int = 0
    n_retained: int = 0

    def report(self) -> None:
        logger.info("%d\tsamples", self.n_samples)
        logger.info("%d\ttotal k-mers", self.n_kmers)
        logger.info("%d\tretained k-mers", self.n_retained)


class MatrixRowFilter:
    """
    Evaluates matrix rows against a FilterConfig, one line at a time.

    The sample count is taken from the first non-empty row. Later rows are
    not required to have the same width: a mismatch is logged once and the
    row is evaluated against the first row's sample count anyway.

    Example:
        >>> engine = MatrixRowFilter(FilterConfig(min_zeros=2, min_nonzero=2))
        >>> list(engine.filter_lines(["kmerA 0 0 0 12 15\\n", "kmerB 3 2 1 4 2\\n"]))
        ['kmerA 0 0 0 12 15\\n']
        >>> engine.stats
        RunStatistics(n_samples=5, n_kmers=2, n_retained=1)
    """

    def __init__(
        self,
        config: FilterConfig,
        verbose: bool = False,
        progress_interval: int = PROGRESS_INTERVAL,
    ) -> None:
        if progress_interval <= 0:
            raise ValueError("progress_interval must be positive.")
        self.config = config
        self.verbose = verbose
        self.progress_interval = progress_interval
        self.stats = RunStatistics()
        self._width_mismatch_reported = False

    def accepts(self, verdict: RowVerdict) -> bool:
        """True when a row has enough absent and enough present samples."""
        n_samples = self.stats.n_samples
        enough_absent = verdict.n_zeros >= self.config.absence_threshold(n_samples)
        enough_present = verdict.n_present >= self.config.presence_threshold(
            n_samples
        )
        return enough_absent and enough_present

    def process_line(self, line: RawLine) -> bool:
        """
        Examines one raw line and updates the run statistics.

        Returns:
            True if the line should be forwarded. Blank lines return False
            and leave the statistics untouched.
        """
        tokens = split_row(line)
        if not tokens:
            return False

        self.stats.n_kmers += 1
        width = len(tokens) - 1
        if self.stats.n_kmers == 1:
            self.stats.n_samples = width
            logger.debug("Inferred %d samples from k-mer %s", width, tokens[0])
        elif width != self.stats.n_samples and not self._width_mismatch_reported:
            self._width_mismatch_reported = True
            logger.warning(
                "k-mer %s (row %d) has %d values but %d samples were inferred "
                "from the first row; thresholds still use %d samples",
                tokens[0],
                self.stats.n_kmers,
                width,
                self.stats.n_samples,
                self.stats.n_samples,
            )

        verdict = RowVerdict.tally(
            (parse_abundance(token) for token in tokens[1:]),
            self.config.min_abundance,
        )
        retained = self.accepts(verdict)
        if retained:
            self.stats.n_retained += 1

        if self.verbose and self.stats.n_kmers % self.progress_interval == 0:
            logger.info(
                "%d k-mers processed, %d retrieved",
                self.stats.n_kmers,
                self.stats.n_retained,
            )
        return retained

    def filter_lines(self, lines: LineSource) -> LineStream:
        """Lazily yields the lines that pass, unmodified and in input order."""
        for line in lines:
            if self.process_line(line):
                yield line


def filter_matrix(
    lines: LineSource, config: FilterConfig, verbose: bool = False
) -> Tuple[LineStream, RunStatistics]:
    """
    Filters matrix lines.

    Returns the lazy stream of retained lines together with the statistics
    object it updates; the statistics are final once the stream is exhausted.
    """
    engine = MatrixRowFilter(config, verbose=verbose)
    return engine.filter_lines(lines), engine.stats


def run_filter(
    source: TextIO,
    sink: TextIO,
    config: FilterConfig,
    verbose: bool = False,
    perf_logger: Optional[PerformanceLogger] = None,
) -> RunStatistics:
    """
    Streams ``source`` through the filter into ``sink`` and logs the summary.

    Write errors propagate; rows already written stay written.
    """
    logger.debug("Filtering with %s", config.describe())
    start = time.perf_counter()

    retained, stats = filter_matrix(source, config, verbose=verbose)
    for line in retained:
        sink.write(line)

    stats.report()
    (perf_logger or PerformanceLogger()).log_throughput(
        "matrix filter", stats.n_kmers, time.perf_counter() - start
    )
    return stats
