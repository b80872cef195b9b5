"""Tests for unification."""

from l5.errors import ErrorKind, Failure, Ok
from l5.syntax import VarRef
from l5.texp import *
from l5.unify import check_equal_type, occurs


EXP = VarRef("x")


def test_atomic_types():
    """Test unifying atomic types."""
    assert check_equal_type(NumTExp(), NumTExp(), EXP) == Ok(True)
    result = check_equal_type(NumTExp(), BoolTExp(), EXP)
    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.TYPE_MISMATCH
    assert result.message == "Incompatible types: number and boolean in x"


def test_binds_variable():
    """Test that an unbound variable is bound to the other side."""
    t = TVar("T")
    assert check_equal_type(t, NumTExp(), EXP) == Ok(True)
    assert t.contents == NumTExp()

    u = TVar("U")
    assert check_equal_type(StrTExp(), u, EXP) == Ok(True)
    assert u.contents == StrTExp()


def test_rebinding_is_idempotent():
    """Test unifying a bound variable again."""
    t = TVar("T")
    check_equal_type(t, NumTExp(), EXP)
    assert check_equal_type(t, NumTExp(), EXP) == Ok(True)
    assert check_equal_type(NumTExp(), t, EXP) == Ok(True)

    result = check_equal_type(t, BoolTExp(), EXP)
    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.TYPE_MISMATCH
    assert t.contents == NumTExp()


def test_two_variables_bind_first():
    """Test that the first operand's variable is the one bound."""
    t1, t2 = TVar("T1"), TVar("T2")
    assert check_equal_type(t1, t2, EXP) == Ok(True)
    assert t1.contents is t2
    assert t2.contents is None


def test_same_variable():
    """Test that a variable does not unify with itself."""
    t = TVar("T")
    result = check_equal_type(t, t, EXP)
    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.OCCURS_CHECK
    assert result.message == "Occurs check failed: T in T"
    assert t.contents is None

    u = TVar("U")
    u.set_contents(t)
    result = check_equal_type(u, t, EXP)
    assert result.kind == ErrorKind.OCCURS_CHECK


def test_occurs_check_direct():
    """Test that a variable cannot be bound to a type containing it."""
    t = TVar("T")
    result = check_equal_type(t, PairTExp(t, NumTExp()), EXP)
    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.OCCURS_CHECK
    assert result.message == "Occurs check failed: T in (Pair T number)"
    assert t.contents is None

    result = check_equal_type(ProcTExp((t,), NumTExp()), t, EXP)
    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.OCCURS_CHECK


def test_occurs_check_through_variables():
    """Test that the occurs check follows bound variables."""
    t1, t2 = TVar("T1"), TVar("T2")
    t2.set_contents(ProcTExp((NumTExp(),), PairTExp(BoolTExp(), t1)))
    result = check_equal_type(t1, PairTExp(t2, NumTExp()), EXP)
    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.OCCURS_CHECK
    assert t1.contents is None


def test_occurs():
    """Test the reachability search itself."""
    t, u = TVar("T"), TVar("U")
    assert occurs(t, t)
    assert not occurs(t, u)
    assert occurs(t, ProcTExp((NumTExp(), PairTExp(NumTExp(), t)), NumTExp()))
    u.set_contents(t)
    assert occurs(t, u)


def test_pairs():
    """Test unifying pair types component-wise."""
    t1, t2 = TVar("T1"), TVar("T2")
    assert check_equal_type(PairTExp(t1, t2), PairTExp(NumTExp(), BoolTExp()), EXP) == Ok(True)
    assert unparse_texp(PairTExp(t1, t2)) == "(Pair number boolean)"


def test_first_mismatch_is_reported():
    """Test that components are unified left to right."""
    result = check_equal_type(PairTExp(NumTExp(), BoolTExp()), PairTExp(StrTExp(), NumTExp()), EXP)
    assert result.message == "Incompatible types: number and string in x"

    result = check_equal_type(ProcTExp((NumTExp(),), BoolTExp()), ProcTExp((StrTExp(),), NumTExp()), EXP)
    assert result.message == "Incompatible types: number and string in x"

    # parameters before the return type
    result = check_equal_type(ProcTExp((NumTExp(),), BoolTExp()), ProcTExp((NumTExp(),), NumTExp()), EXP)
    assert result.message == "Incompatible types: boolean and number in x"


def test_procedures():
    """Test unifying procedure types."""
    t = TVar("T")
    proc = ProcTExp((NumTExp(), t), BoolTExp())
    assert check_equal_type(proc, ProcTExp((NumTExp(), StrTExp()), BoolTExp()), EXP) == Ok(True)
    assert t.contents == StrTExp()


def test_procedure_arity_mismatch():
    """Test that procedure types of different arity do not unify."""
    result = check_equal_type(ProcTExp((NumTExp(),), NumTExp()),
                              ProcTExp((NumTExp(), NumTExp()), NumTExp()), EXP)
    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.TYPE_MISMATCH


def test_shape_mismatch():
    """Test types of different shapes."""
    for te1, te2 in [(NumTExp(), PairTExp(NumTExp(), NumTExp())),
                     (PairTExp(NumTExp(), NumTExp()), ProcTExp((NumTExp(),), NumTExp())),
                     (ProcTExp((), VoidTExp()), VoidTExp())]:
        result = check_equal_type(te1, te2, EXP)
        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.TYPE_MISMATCH
