"""Type signatures of the primitive operators.

Signatures that mention type variables are rebuilt on every use with fresh
variables, so two uses of ``cons`` never share (and so never constrain)
each other's variables.
"""

from typing import Callable, Dict

from .errors import ErrorKind, Failure, Ok, Result
from .texp import BoolTExp, NumTExp, PairTExp, ProcTExp, TExp, TVarGen, VoidTExp


def num_op(gen: TVarGen) -> TExp:
    return ProcTExp((NumTExp(), NumTExp()), NumTExp())


def num_comparison(gen: TVarGen) -> TExp:
    return ProcTExp((NumTExp(), NumTExp()), BoolTExp())


def bool_op(gen: TVarGen) -> TExp:
    return ProcTExp((BoolTExp(), BoolTExp()), BoolTExp())


def not_op(gen: TVarGen) -> TExp:
    return ProcTExp((BoolTExp(),), BoolTExp())


def type_predicate(gen: TVarGen) -> TExp:
    return ProcTExp((gen.fresh(),), BoolTExp())


def equality(gen: TVarGen) -> TExp:
    return ProcTExp((gen.fresh(), gen.fresh()), BoolTExp())


def display(gen: TVarGen) -> TExp:
    return ProcTExp((gen.fresh(),), VoidTExp())


def newline(gen: TVarGen) -> TExp:
    return ProcTExp((), VoidTExp())


def cons(gen: TVarGen) -> TExp:
    t1, t2 = gen.fresh(), gen.fresh()
    return ProcTExp((t1, t2), PairTExp(t1, t2))


def car(gen: TVarGen) -> TExp:
    t1, t2 = gen.fresh(), gen.fresh()
    return ProcTExp((PairTExp(t1, t2),), t1)


def cdr(gen: TVarGen) -> TExp:
    t1, t2 = gen.fresh(), gen.fresh()
    return ProcTExp((PairTExp(t1, t2),), t2)


PRIMITIVE_SIGNATURES: Dict[str, Callable[[TVarGen], TExp]] = {
    "+": num_op,
    "-": num_op,
    "*": num_op,
    "/": num_op,
    ">": num_comparison,
    "<": num_comparison,
    "=": num_comparison,
    "and": bool_op,
    "or": bool_op,
    "not": not_op,
    "number?": type_predicate,
    "boolean?": type_predicate,
    "string?": type_predicate,
    "list?": type_predicate,
    "pair?": type_predicate,
    "symbol?": type_predicate,
    "eq?": equality,
    "string=?": equality,
    "display": display,
    "newline": newline,
    "cons": cons,
    "car": car,
    "cdr": cdr,
}


def prim_signature(op: str, gen: TVarGen) -> Result[TExp]:
    """Elaborate the signature of ``op``, drawing variables from ``gen``."""
    builder = PRIMITIVE_SIGNATURES.get(op)
    if builder is None:
        return Failure(f"Primitive not yet implemented: {op}", ErrorKind.UNKNOWN_PRIMITIVE)
    return Ok(builder(gen))
