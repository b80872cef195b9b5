"""Unification of type expressions.

``check_equal_type`` decides whether two type expressions can be made equal,
binding unbound type variables along the way. Binding a variable is the only
mutation the checker performs, and it happens at most once per variable: a
variable is only bound after dereferencing shows it is still unbound, and
only after the occurs check has ruled out a cyclic type.
"""

from .errors import ErrorKind, Failure, Ok, Result
from .error_reporting import get_trace
from .syntax import Exp, unparse
from .texp import (AtomicTExp, PairTExp, ProcTExp, TExp, TVar,
                   tvar_deref, unparse_texp)


def check_equal_type(te1: TExp, te2: TExp, exp: Exp) -> Result[bool]:
    """Unify ``te1`` with ``te2``.

    ``exp`` is the expression being checked; it only appears in messages.
    Components are unified left to right and the first failure is reported.
    An unbound variable never unifies with itself: that is an occurs check
    failure like any other cycle.
    """
    te1 = tvar_deref(te1)
    te2 = tvar_deref(te2)

    if isinstance(te1, TVar):
        return bind_tvar(te1, te2)
    if isinstance(te2, TVar):
        return bind_tvar(te2, te1)

    if isinstance(te1, AtomicTExp) and isinstance(te2, AtomicTExp):
        if te1.tag == te2.tag:
            return Ok(True)
        return type_mismatch(te1, te2, exp)

    if isinstance(te1, PairTExp) and isinstance(te2, PairTExp):
        result = check_equal_type(te1.left, te2.left, exp)
        if isinstance(result, Failure):
            return result
        return check_equal_type(te1.right, te2.right, exp)

    if isinstance(te1, ProcTExp) and isinstance(te2, ProcTExp):
        if len(te1.param_tes) != len(te2.param_tes):
            return type_mismatch(te1, te2, exp)
        for param1, param2 in zip(te1.param_tes, te2.param_tes):
            result = check_equal_type(param1, param2, exp)
            if isinstance(result, Failure):
                return result
        return check_equal_type(te1.return_te, te2.return_te, exp)

    return type_mismatch(te1, te2, exp)


def bind_tvar(tvar: TVar, te: TExp) -> Result[bool]:
    """Bind an unbound variable, unless that would make a cyclic type."""
    if occurs(tvar, te):
        return Failure(f"Occurs check failed: {tvar.var} in {unparse_texp(te)}",
                       ErrorKind.OCCURS_CHECK)
    tvar.set_contents(te)
    get_trace().add_step(f"bind {tvar.var}", unparse_texp(te))
    return Ok(True)


def occurs(tvar: TVar, te: TExp) -> bool:
    """Is ``tvar`` reachable from ``te``, including through bound variables?"""
    pending = [te]
    while pending:
        t = pending.pop()
        if isinstance(t, TVar):
            if t is tvar:
                return True
            if t.contents is not None:
                pending.append(t.contents)
        elif isinstance(t, PairTExp):
            pending.extend((t.left, t.right))
        elif isinstance(t, ProcTExp):
            pending.extend(t.param_tes)
            pending.append(t.return_te)
    return False


def type_mismatch(te1: TExp, te2: TExp, exp: Exp) -> Failure:
    return Failure(f"Incompatible types: {unparse_texp(te1)} and {unparse_texp(te2)} in {unparse(exp)}",
                   ErrorKind.TYPE_MISMATCH)
