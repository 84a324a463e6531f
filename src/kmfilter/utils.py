#!/usr/bin/env python

import contextlib
import gzip
import io
import logging
import mimetypes
import pathlib
import sys
from typing import Iterator, Optional, TextIO, Union

from .exceptions import InvalidInputFileError, OutputWriteError

logger = logging.getLogger(__name__)

STDIO_PATH = "-"

# Undecodable bytes round-trip through surrogate escapes, so k-mer tokens stay
# opaque and retained rows are written back byte for byte.
MATRIX_ENCODING = "utf-8"
MATRIX_ERRORS = "surrogateescape"
# Only "\n" ends a row; "\r" stays part of the line and is never translated.
MATRIX_INPUT_NEWLINE = "\n"
MATRIX_OUTPUT_NEWLINE = ""


def open_file_transparently(
    file_path: Union[str, pathlib.Path],
    mode: str = "rt",
    newline: Optional[str] = None,
    encoding: Optional[str] = None,
    errors: Optional[str] = None,
) -> TextIO:
    """Opens a file, transparently handling gzip compression.

    Infers compression from file extension. Defaults to text read mode.

    Args:
        file_path: Path to the file.
        mode: File open mode (e.g., "rt", "wt"). Defaults to "rt".
        newline: Passed to the underlying text wrapper; "" and "\\n" keep
            line endings untranslated.
        encoding: Text encoding; the locale default when None.
        errors: Codec error handler, e.g. "surrogateescape".

    Returns:
        A text file object.

    Raises:
        FileNotFoundError: If the file is opened for reading and does not exist.
        IOError: If an I/O error occurs during opening.
        TypeError: If file_path is not a str or pathlib.Path.
    """
    if not isinstance(file_path, (str, pathlib.Path)):
        raise TypeError(
            f"file_path must be a string or pathlib.Path, not {type(file_path)}"
        )

    file_path = pathlib.Path(file_path)

    if "r" in mode and not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    _, compression = mimetypes.guess_type(str(file_path))
    text_options = {"newline": newline, "encoding": encoding, "errors": errors}

    try:
        if compression == "gzip":
            return gzip.open(file_path, mode=mode, **text_options)  # type: ignore # text mode yields TextIO
        return open(file_path, mode=mode, **text_options)
    except (IOError, OSError) as e:
        raise IOError(f"Error opening file {file_path} with mode '{mode}': {e}") from e


def _reconfigure_stream(stream: TextIO, **options) -> TextIO:
    """Applies matrix text options to a standard stream when it supports it."""
    if isinstance(stream, io.TextIOWrapper):
        stream.reconfigure(**options)
    return stream


@contextlib.contextmanager
def open_matrix(source: Union[str, pathlib.Path]) -> Iterator[TextIO]:
    """Yields a readable text handle for a k-mer matrix; ``-`` is stdin.

    Rows end at "\\n" only and undecodable bytes are preserved as surrogate
    escapes. Standard input is never closed on exit.

    Raises:
        InvalidInputFileError: If the matrix file is missing or unreadable.
    """
    if str(source) == STDIO_PATH:
        logger.debug("Reading matrix from standard input.")
        yield _reconfigure_stream(
            sys.stdin, errors=MATRIX_ERRORS, newline=MATRIX_INPUT_NEWLINE
        )
        return

    try:
        handle = open_file_transparently(
            source,
            mode="rt",
            newline=MATRIX_INPUT_NEWLINE,
            encoding=MATRIX_ENCODING,
            errors=MATRIX_ERRORS,
        )
    except (FileNotFoundError, IOError) as e:
        raise InvalidInputFileError(
            f'cannot open file "{source}"', details={"reason": str(e)}
        ) from e
    with handle:
        yield handle


@contextlib.contextmanager
def open_output(target: Optional[Union[str, pathlib.Path]]) -> Iterator[TextIO]:
    """Yields a writable text handle; None or ``-`` is stdout.

    Surrogate-escaped input bytes are written back unchanged. Standard output
    is flushed but never closed on exit.

    Raises:
        OutputWriteError: If the output file cannot be created.
    """
    if target is None or str(target) == STDIO_PATH:
        stdout = _reconfigure_stream(sys.stdout, errors=MATRIX_ERRORS)
        try:
            yield stdout
        finally:
            stdout.flush()
        return

    try:
        handle = open_file_transparently(
            target,
            mode="wt",
            newline=MATRIX_OUTPUT_NEWLINE,
            encoding=MATRIX_ENCODING,
            errors=MATRIX_ERRORS,
        )
    except IOError as e:
        raise OutputWriteError(
            f'cannot open output file "{target}"', details={"reason": str(e)}
        ) from e
    with handle:
        yield handle
