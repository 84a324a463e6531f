"""
Run configuration for the matrix filter and the FASTA converter.

Values arrive from the command line and are validated once by pydantic; the
resulting models are frozen and shared read-only for the whole run.
"""

import pathlib
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_MIN_ABUNDANCE = 10
DEFAULT_MIN_ZEROS = 10
DEFAULT_MIN_NONZERO = 10

ZERO_FRACTION_RANGE = (0.01, 0.99)
NONZERO_FRACTION_RANGE = (0.01, 0.95)

# Number of examined rows between two progress reports in verbose mode.
PROGRESS_INTERVAL = 1 << 20


class FilterConfig(BaseModel):
    """
    Thresholds deciding whether a k-mer row is potentially differential.

    Each of the two sample-count conditions is expressed either as an absolute
    number of samples or as a fraction of the inferred sample count. A
    fraction, when given, overrides the absolute value.

    Example:
        >>> config = FilterConfig(min_zeros=2, min_nonzero=2)
        >>> config.absence_threshold(5)
        2
        >>> FilterConfig(min_zero_frac=0.5).absence_threshold(5)
        2.5
    """

    model_config = ConfigDict(frozen=True)

    min_abundance: int = Field(
        DEFAULT_MIN_ABUNDANCE,
        description="Minimum abundance for a k-mer to be present in a sample.",
        ge=0,
    )
    min_zeros: int = Field(
        DEFAULT_MIN_ZEROS,
        description="Minimum number of samples in which a k-mer must be absent.",
    )
    min_zero_frac: Optional[float] = Field(
        None,
        description="Fraction of samples in which a k-mer must be absent (overrides min_zeros).",
    )
    min_nonzero: int = Field(
        DEFAULT_MIN_NONZERO,
        description="Minimum number of samples in which a k-mer must be present.",
    )
    min_nz_frac: Optional[float] = Field(
        None,
        description="Fraction of samples in which a k-mer must be present (overrides min_nonzero).",
    )

    @field_validator("min_zero_frac")
    @classmethod
    def check_zero_fraction(cls, value: Optional[float]) -> Optional[float]:
        low, high = ZERO_FRACTION_RANGE
        if value is not None and not low <= value <= high:
            raise ValueError(f"min_zero_frac must be in the [{low},{high}] interval.")
        return value

    @field_validator("min_nz_frac")
    @classmethod
    def check_nonzero_fraction(cls, value: Optional[float]) -> Optional[float]:
        low, high = NONZERO_FRACTION_RANGE
        if value is not None and not low <= value <= high:
            raise ValueError(f"min_nz_frac must be in the [{low},{high}] interval.")
        return value

    @property
    def uses_zero_fraction(self) -> bool:
        return self.min_zero_frac is not None

    @property
    def uses_nonzero_fraction(self) -> bool:
        return self.min_nz_frac is not None

    def absence_threshold(self, n_samples: int) -> float:
        """Number of zero-valued samples a row needs, for `n_samples` columns."""
        if self.uses_zero_fraction:
            return self.min_zero_frac * n_samples
        return self.min_zeros

    def presence_threshold(self, n_samples: int) -> float:
        """Number of samples at or above `min_abundance` a row needs."""
        if self.uses_nonzero_fraction:
            return self.min_nz_frac * n_samples
        return self.min_nonzero

    def describe(self) -> str:
        absent = (
            f"{self.min_zero_frac:g} of samples"
            if self.uses_zero_fraction
            else f"{self.min_zeros} samples"
        )
        present = (
            f"{self.min_nz_frac:g} of samples"
            if self.uses_nonzero_fraction
            else f"{self.min_nonzero} samples"
        )
        return (
            f"absent (==0) in >= {absent}, present (>={self.min_abundance}) "
            f"in >= {present}"
        )


class FastaArgs(BaseModel):
    """Paths for a matrix to FASTA conversion. ``-`` and None mean standard streams."""

    model_config = ConfigDict(frozen=True)

    matrix: str = Field(..., description="Input k-mer matrix, or '-' for stdin.")
    output: Optional[pathlib.Path] = Field(
        None, description="Output FASTA file; stdout when omitted."
    )
