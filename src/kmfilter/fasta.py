"""
Conversion of k-mer matrix rows to FASTA records.

Each non-empty row contributes its first token as a sequence; the record
name is the 1-based index among the records written.
"""

import logging
from typing import Iterator, TextIO

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from .genomic_types import KmerString, LineSource
from .matrix_filter import split_row

logger = logging.getLogger(__name__)

# Nucleotides accepted in a k-mer, either case.
VALID_NUCLEOTIDES: frozenset[str] = frozenset("ACGTacgt")
EMPTY_LINES = ("", "\n")


def is_valid_kmer(kmer: KmerString) -> bool:
    """True for a non-empty k-mer made only of A, C, G and T (any case)."""
    return bool(kmer) and all(base in VALID_NUCLEOTIDES for base in kmer)


def iter_kmer_records(lines: LineSource) -> Iterator[SeqRecord]:
    """
    Yields one SeqRecord per valid k-mer row.

    Empty lines are skipped silently. A line holding only spaces or tabs,
    or a k-mer containing other characters, is logged as a warning with its
    line number and skipped without using up an index.
    """
    kmer_count = 0
    for line_num, line in enumerate(lines, start=1):
        if line in EMPTY_LINES:
            continue

        tokens = split_row(line)
        if not tokens:
            logger.warning("invalid k-mer at line %d", line_num)
            continue

        kmer = tokens[0]
        if not is_valid_kmer(kmer):
            logger.warning("invalid k-mer at line %d: %s", line_num, kmer)
            continue

        kmer_count += 1
        yield SeqRecord(Seq(kmer), id=str(kmer_count), description="")


def matrix_to_fasta(lines: LineSource, handle: TextIO) -> int:
    """
    Writes the k-mers of a matrix to ``handle`` as unwrapped FASTA.

    Returns:
        The number of records written.
    """
    written = SeqIO.write(iter_kmer_records(lines), handle, "fasta-2line")
    logger.info("%d k-mers written.", written)
    return written
