"""
Command-line tests for the filter and fasta commands.
"""

import pathlib

import pytest
from typer.testing import CliRunner

from kmfilter.cli import app, basic_filter_app, fasta_app

runner = CliRunner()


def test_filter_to_output_file(matrix_file: pathlib.Path, tmp_path: pathlib.Path):
    out = tmp_path / "filtered.mat"
    result = runner.invoke(
        app, ["filter", "-a", "10", "-n", "2", "-N", "2", "-o", str(out), str(matrix_file)]
    )
    assert result.exit_code == 0, result.output
    assert out.read_text() == "kmerA 0 0 0 12 15\n"
    assert "5\tsamples" in result.output
    assert "2\ttotal k-mers" in result.output
    assert "1\tretained k-mers" in result.output


def test_filter_fraction_options(matrix_file: pathlib.Path, tmp_path: pathlib.Path):
    out = tmp_path / "filtered.mat"
    result = runner.invoke(
        app, ["filter", "-f", "0.5", "-F", "0.2", "-o", str(out), str(matrix_file)]
    )
    assert result.exit_code == 0, result.output
    assert out.read_text() == "kmerA 0 0 0 12 15\n"


def test_filter_reads_stdin(matrix_lines, tmp_path: pathlib.Path):
    out = tmp_path / "filtered.mat"
    result = runner.invoke(
        app,
        ["filter", "--min-zeros", "2", "--min-nonzero", "2", "-o", str(out), "-"],
        input="".join(matrix_lines),
    )
    assert result.exit_code == 0, result.output
    assert out.read_text() == "kmerA 0 0 0 12 15\n"


def test_filter_writes_stdout_by_default(matrix_file: pathlib.Path):
    result = runner.invoke(app, ["filter", "-n", "2", "-N", "2", str(matrix_file)])
    assert result.exit_code == 0, result.output
    assert "kmerA 0 0 0 12 15\n" in result.stdout
    assert "kmerB" not in result.stdout


def test_filter_gzipped_input(gzipped_matrix_file: pathlib.Path, tmp_path: pathlib.Path):
    out = tmp_path / "filtered.mat"
    result = runner.invoke(
        app, ["filter", "-n", "2", "-N", "2", "-o", str(out), str(gzipped_matrix_file)]
    )
    assert result.exit_code == 0, result.output
    assert out.read_text() == "kmerA 0 0 0 12 15\n"


@pytest.mark.parametrize(
    "option, value, message",
    [
        ("-f", "0.995", "min_zero_frac must be in the [0.01,0.99] interval"),
        ("-f", "0", "min_zero_frac must be in the [0.01,0.99] interval"),
        ("-F", "0.96", "min_nz_frac must be in the [0.01,0.95] interval"),
    ],
)
def test_filter_rejects_bad_fractions(
    matrix_file: pathlib.Path, tmp_path: pathlib.Path, option: str, value: str, message: str
):
    out = tmp_path / "filtered.mat"
    result = runner.invoke(app, ["filter", option, value, "-o", str(out), str(matrix_file)])
    assert result.exit_code == 1
    assert message in result.output
    assert not out.exists()


def test_filter_missing_input_leaves_no_output(tmp_path: pathlib.Path):
    out = tmp_path / "filtered.mat"
    result = runner.invoke(
        app, ["filter", "-o", str(out), str(tmp_path / "missing.mat")]
    )
    assert result.exit_code == 1
    assert "cannot open file" in result.output
    assert not out.exists()


def test_filter_unwritable_output(matrix_file: pathlib.Path, tmp_path: pathlib.Path):
    out = tmp_path / "no_such_dir" / "filtered.mat"
    result = runner.invoke(app, ["filter", "-o", str(out), str(matrix_file)])
    assert result.exit_code == 1
    assert "cannot open output file" in result.output


def test_filter_help_lists_options():
    result = runner.invoke(app, ["filter", "-h"])
    assert result.exit_code == 0
    assert "min-zero-frac" in result.output
    assert "min-nz-frac" in result.output


def test_basic_filter_script(matrix_file: pathlib.Path, tmp_path: pathlib.Path):
    out = tmp_path / "filtered.mat"
    result = runner.invoke(
        basic_filter_app, ["-n", "2", "-N", "2", "-o", str(out), str(matrix_file)]
    )
    assert result.exit_code == 0, result.output
    assert out.read_text() == "kmerA 0 0 0 12 15\n"


def test_filter_json_logs(matrix_file: pathlib.Path, tmp_path: pathlib.Path):
    out = tmp_path / "filtered.mat"
    result = runner.invoke(
        app, ["filter", "--log-json", "-o", str(out), str(matrix_file)]
    )
    assert result.exit_code == 0, result.output
    assert '"message": "2\\ttotal k-mers"' in result.output


# --- fasta command ---


def test_fasta_command(tmp_path: pathlib.Path):
    matrix = tmp_path / "kmers.mat"
    matrix.write_text("ACGT 0 12\n\nACNT 1 1\nttga 5 0\n")
    out = tmp_path / "kmers.fa"
    result = runner.invoke(app, ["fasta", "-o", str(out), str(matrix)])
    assert result.exit_code == 0, result.output
    assert out.read_text() == ">1\nACGT\n>2\nttga\n"
    assert "invalid k-mer at line 3: ACNT" in result.output
    assert "2 k-mers written." in result.output


def test_fasta_script_missing_input(tmp_path: pathlib.Path):
    result = runner.invoke(fasta_app, [str(tmp_path / "missing.mat")])
    assert result.exit_code == 1
    assert "cannot open file" in result.output


def test_filter_passes_undecodable_kmer_bytes(tmp_path: pathlib.Path):
    matrix = tmp_path / "latin1.mat"
    matrix.write_bytes(b"k\xe9merA 0 20\nkmerB 5 20\n")
    out = tmp_path / "filtered.mat"
    result = runner.invoke(
        app, ["filter", "-n", "1", "-N", "1", "-o", str(out), str(matrix)]
    )
    assert result.exit_code == 0, result.output
    assert out.read_bytes() == b"k\xe9merA 0 20\n"
    assert "1\tretained k-mers" in result.output


def test_filter_carriage_return_does_not_split_rows(tmp_path: pathlib.Path):
    matrix = tmp_path / "cr.mat"
    matrix.write_bytes(b"kmerA 0 0\r0 20 20\n")
    out = tmp_path / "filtered.mat"
    result = runner.invoke(
        app, ["filter", "-n", "2", "-N", "2", "-o", str(out), str(matrix)]
    )
    assert result.exit_code == 0, result.output
    assert out.read_bytes() == b"kmerA 0 0\r0 20 20\n"
    assert "4\tsamples" in result.output
    assert "1\ttotal k-mers" in result.output
    assert "1\tretained k-mers" in result.output
