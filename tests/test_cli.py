"""Tests for the command-line interface."""

from click.testing import CliRunner
from l5.cli import main


def test_check_program_file(tmp_path):
    """Test checking a program file."""
    path = tmp_path / "prog.l5"
    path.write_text("(L5 (define (x : number) 5)\n    (+ x 1))\n")
    result = CliRunner().invoke(main, [str(path)])
    assert result.exit_code == 0
    assert result.output.strip() == "number"


def test_check_expression():
    """Test checking an expression given on the command line."""
    result = CliRunner().invoke(main, ["-e", "(lambda ((x : number)) : boolean (> x 0))"])
    assert result.exit_code == 0
    assert "(number -> boolean)" in result.output


def test_type_error_exit_code():
    """Test that a failed check exits with status 1."""
    result = CliRunner().invoke(main, ["-e", '(if #t 1 "a")'])
    assert result.exit_code == 1
    assert "Error: Incompatible types: number and string" in result.output


def test_parse_error_exit_code():
    """Test that malformed input exits with status 1."""
    result = CliRunner().invoke(main, ["-e", "(if"])
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_verbose_shows_trace():
    """Test the derivation trace in verbose mode."""
    result = CliRunner().invoke(main, ["-v", "-e", "(+ 1 2)"])
    assert result.exit_code == 0
    assert "Type Derivation Trace:" in result.output
    assert "AppExp: (+ 1 2)" in result.output


def test_trace_is_reset_after_run():
    """Test that one verbose run does not leak into the next."""
    runner = CliRunner()
    runner.invoke(main, ["-v", "-e", "(+ 1 2)"])
    result = runner.invoke(main, ["-e", "(+ 1 2)"])
    assert "Type Derivation Trace:" not in result.output


def test_version():
    """Test --version."""
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "l5 version 0.1.0" in result.output


def test_missing_file():
    """Test that a missing file is a usage error."""
    result = CliRunner().invoke(main, ["does-not-exist.l5"])
    assert result.exit_code == 2
