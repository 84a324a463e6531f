"""
Type definitions for the kmfilter package.

Common aliases used by the filter engine and the FASTA converter.
"""

from typing import Iterable, Iterator

# Type aliases for clarity
KmerString = str  # The first token of a matrix row, passed through untouched.
Abundance = int  # One sample's count for a k-mer, parsed permissively.
RawLine = str  # An input line exactly as read, trailing newline included.
LineSource = Iterable[RawLine]  # Anything yielding raw matrix lines.
LineStream = Iterator[RawLine]  # Lazily produced raw lines.
