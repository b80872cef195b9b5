"""Tests for results, hints and the derivation trace."""

import pytest
from l5.errors import ErrorKind, Failure, Ok, TypeCheckError, bind, is_failure, map_results
from l5.error_reporting import *
from l5.typechecker import l5_program_typeof, l5_typeof


@pytest.fixture
def trace():
    enable_trace()
    try:
        yield get_trace()
    finally:
        disable_trace()
        clear_trace()


def test_results():
    """Test the Ok and Failure helpers."""
    failure = Failure("boom", ErrorKind.TYPE_MISMATCH)
    assert Ok(1).unwrap() == 1
    assert is_failure(failure)
    assert not is_failure(Ok(1))
    assert bind(Ok(1), lambda x: Ok(x + 1)) == Ok(2)
    assert bind(failure, lambda x: Ok(x + 1)) is failure

    with pytest.raises(TypeCheckError) as excinfo:
        failure.unwrap()
    assert excinfo.value.failure is failure


def test_map_results():
    """Test mapping that stops at the first failure."""
    def half(n):
        if n % 2:
            return Failure(f"odd: {n}", ErrorKind.TYPE_MISMATCH)
        return Ok(n // 2)

    assert map_results(half, [2, 4]) == Ok([1, 2])
    assert map_results(half, [2, 3, 5]).message == "odd: 3"


def test_edit_distance():
    """Test Levenshtein distance."""
    assert edit_distance("kitten", "sitting") == 3
    assert edit_distance("", "abc") == 3
    assert edit_distance("same", "same") == 0


def test_suggest_similar_names():
    """Test picking close names."""
    assert suggest_similar_names("lenght", ["length", "list", "lent"]) == ["length", "lent"]
    assert suggest_similar_names("x", ["x"]) == []
    assert suggest_similar_names("abc", ["xyzw"]) == []


def test_unbound_variable_hint():
    """Test the hint for a misspelled name."""
    result = l5_program_typeof("(L5 (define (foo : number) 1) (+ fop 1))")
    assert result.kind == ErrorKind.UNBOUND_VARIABLE
    text = format_failure(result).plain
    assert text.startswith("Error: Unbound variable: fop")
    assert "Did you mean: 'foo'?" in text


def test_hints_by_kind():
    """Test that each kind of failure gets its own hint."""
    letrec = l5_typeof("(letrec (((x : number) 5)) x)")
    assert "use let" in generate_suggestion(letrec)[0]

    arity = l5_typeof("(+ 1)")
    assert "number of arguments" in generate_suggestion(arity)[0]

    assert generate_suggestion(l5_typeof("(list 1)"))
    assert generate_suggestion(l5_program_typeof("(L5)"))
    defines_only = l5_program_typeof("(L5 (define (x : number) 1))")
    assert "not a define" in generate_suggestion(defines_only)[0]
    assert generate_suggestion(Failure("boom", ErrorKind.TYPE_MISMATCH)) == []


def test_trace_disabled_by_default():
    """Test that nothing is recorded unless tracing is on."""
    l5_typeof("(+ 1 2)")
    assert get_trace().steps == []
    assert get_trace().format().plain == ""


def test_trace_records_steps(trace):
    """Test the derivation trace of a check."""
    assert l5_typeof("(cons 1 2)") == Ok("(Pair number number)")
    descriptions = [step.description for step in trace.steps]
    assert "bind T_1" in descriptions
    assert "bind T_2" in descriptions
    assert "NumExp: 1" in descriptions
    assert descriptions[-1] == "AppExp: (cons 1 2)"

    text = trace.format().plain
    assert "Type Derivation Trace:" in text
    assert "Step 1:" in text


def test_failure_includes_trace(trace):
    """Test that a failure is shown with the steps that led to it."""
    result = l5_typeof("(if #t 1 #f)")
    text = format_failure(result).plain
    assert "Incompatible types: number and boolean" in text
    assert "Type Derivation Trace:" in text
