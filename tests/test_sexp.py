"""Tests for the S-expression reader."""

import pytest
from l5.errors import ParseError
from l5.sexp import Dotted, Symbol, read_sexp, read_sexps, write_sexp


def test_read_atoms():
    """Test reading atoms."""
    assert read_sexp("42") == 42
    assert read_sexp("-3") == -3
    assert read_sexp("1.5") == 1.5
    assert read_sexp("#t") is True
    assert read_sexp("#f") is False
    assert read_sexp("foo") == Symbol("foo")
    assert read_sexp("string=?") == Symbol("string=?")


def test_operators_are_symbols():
    """Test that operator names read as symbols, not numbers."""
    assert read_sexp("-") == Symbol("-")
    assert read_sexp("+") == Symbol("+")
    assert read_sexp("->") == Symbol("->")


def test_read_strings():
    """Test reading string literals with escapes."""
    assert read_sexp('"hello"') == "hello"
    assert read_sexp(r'"a\nb"') == "a\nb"
    assert read_sexp(r'"say \"hi\""') == 'say "hi"'


def test_read_lists():
    """Test reading parenthesized and bracketed lists."""
    assert read_sexp("(a 1 #t)") == [Symbol("a"), 1, True]
    assert read_sexp("()") == []
    assert read_sexp("[number -> number]") == [Symbol("number"), Symbol("->"), Symbol("number")]
    assert read_sexp("(f (g x))") == [Symbol("f"), [Symbol("g"), Symbol("x")]]


def test_read_dotted_pairs():
    """Test reading improper lists."""
    assert read_sexp("(1 . 2)") == Dotted((1,), 2)
    assert read_sexp("(1 2 . 3)") == Dotted((1, 2), 3)


def test_read_quote():
    """Test the quote reader macro."""
    assert read_sexp("'x") == [Symbol("quote"), Symbol("x")]
    assert read_sexp("'(1 2)") == [Symbol("quote"), [1, 2]]


def test_comments_and_whitespace():
    """Test that comments and whitespace are skipped."""
    source = """
    ; a comment
    1 ; another
    (a   b)
    """
    assert read_sexps(source) == [1, [Symbol("a"), Symbol("b")]]
    assert read_sexps("") == []


def test_incomplete_input():
    """Test that unbalanced input is reported as incomplete."""
    with pytest.raises(ParseError) as exc_info:
        read_sexp("(a (b c)")
    assert exc_info.value.incomplete


def test_parse_errors():
    """Test malformed input."""
    with pytest.raises(ParseError) as exc_info:
        read_sexp(")")
    assert not exc_info.value.incomplete

    with pytest.raises(ParseError):
        read_sexp("( . 1)")

    with pytest.raises(ParseError) as exc_info:
        read_sexp("1 2")
    assert "exactly one" in str(exc_info.value)


def test_write_sexp():
    """Test rendering reader output."""
    assert write_sexp([Symbol("if"), True, 1, "a"]) == '(if #t 1 "a")'
    assert write_sexp(Dotted((1,), 2)) == "(1 . 2)"
