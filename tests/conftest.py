import gzip
import logging
import pathlib
from typing import List

import pytest

from kmfilter.logging_config import PACKAGE_LOGGER

MATRIX_LINES = [
    "kmerA 0 0 0 12 15\n",
    "kmerB 3 2 1 4 2\n",
]


@pytest.fixture(autouse=True)
def reset_package_logger():
    """
    Drops handlers installed by setup_logging so that a stream captured by
    one CliRunner invocation is not reused by the next test.
    """
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def matrix_lines() -> List[str]:
    """The two-row, five-sample matrix used throughout the filter tests."""
    return list(MATRIX_LINES)


@pytest.fixture
def matrix_file(tmp_path: pathlib.Path, matrix_lines: List[str]) -> pathlib.Path:
    file_path = tmp_path / "counts.mat"
    file_path.write_text("".join(matrix_lines))
    return file_path


@pytest.fixture
def gzipped_matrix_file(
    tmp_path: pathlib.Path, matrix_lines: List[str]
) -> pathlib.Path:
    file_path = tmp_path / "counts.mat.gz"
    with gzip.open(file_path, "wt") as f:
        f.write("".join(matrix_lines))
    return file_path
