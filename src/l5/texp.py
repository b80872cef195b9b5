"""Type expressions for L5.

A type expression is one of:

* an atomic type: ``number``, ``boolean``, ``string``, ``void`` or
  ``literal`` (the opaque type of quoted data);
* a type variable, a mutable cell that unification binds at most once;
* a pair type ``(Pair left right)``;
* a procedure type ``(t1 * ... * tn -> t)``, written ``(Empty -> t)``
  when it takes no arguments.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from .errors import ParseError
from .sexp import Symbol, read_sexp, write_sexp


class TExp:
    """Base class for type expressions."""
    pass


class AtomicTExp(TExp):
    """Atomic types compare by tag only."""
    tag: str = ""
    name: str = ""

    def __eq__(self, other: object) -> bool:
        return isinstance(other, AtomicTExp) and self.tag == other.tag

    def __hash__(self) -> int:
        return hash(self.tag)

    def __repr__(self) -> str:
        return self.tag + "()"


class NumTExp(AtomicTExp):
    tag = "NumTExp"
    name = "number"


class BoolTExp(AtomicTExp):
    tag = "BoolTExp"
    name = "boolean"


class StrTExp(AtomicTExp):
    tag = "StrTExp"
    name = "string"


class VoidTExp(AtomicTExp):
    tag = "VoidTExp"
    name = "void"


class LiteralTExp(AtomicTExp):
    tag = "LiteralTExp"
    name = "literal"


ATOMIC_NAMES = {cls.name: cls for cls in (NumTExp, BoolTExp, StrTExp, VoidTExp, LiteralTExp)}


@dataclass(eq=False)
class TVar(TExp):
    """A single-assignment type variable cell.

    Two variables are the same variable only if they are the same object;
    the name is for display.
    """
    var: str
    contents: Optional[TExp] = None

    def is_non_empty(self) -> bool:
        return self.contents is not None

    def set_contents(self, te: TExp) -> None:
        if self.contents is not None:
            raise ValueError(f"Type variable {self.var} is already bound")
        self.contents = te

    def __repr__(self) -> str:
        if self.contents is None:
            return f"TVar({self.var})"
        return f"TVar({self.var} := {self.contents!r})"


@dataclass(frozen=True)
class PairTExp(TExp):
    """Type of a cons cell."""
    left: TExp
    right: TExp


@dataclass(frozen=True)
class ProcTExp(TExp):
    """Procedure type; the arity is ``len(param_tes)``."""
    param_tes: Tuple[TExp, ...]
    return_te: TExp

    def __post_init__(self):
        object.__setattr__(self, "param_tes", tuple(self.param_tes))


class TVarGen:
    """Hands out fresh, deterministically named type variables.

    One generator belongs to one type checking run, so two runs never share
    variable cells and their variable names are reproducible.
    """

    def __init__(self, prefix: str = "T"):
        self.prefix = prefix
        self.count = 0

    def fresh(self) -> TVar:
        self.count += 1
        return TVar(f"{self.prefix}_{self.count}")


def is_atomic_texp(te: TExp) -> bool:
    return isinstance(te, AtomicTExp)


def tvar_is_non_empty(te: TExp) -> bool:
    return isinstance(te, TVar) and te.is_non_empty()


def tvar_deref(te: TExp) -> TExp:
    """Follow bound variables to an unbound variable or a non-variable type."""
    while isinstance(te, TVar) and te.contents is not None:
        te = te.contents
    return te


# Parsing concrete type syntax

def parse_texp(texp: Any) -> TExp:
    """Parse a type annotation.

    ``texp`` is either source text or reader output. Every occurrence of a
    type variable name is a new, unbound variable; occurrences are only tied
    together by unification.
    """
    if isinstance(texp, str):
        texp = read_sexp(texp)
    return _parse(texp)


def _parse(texp: Any) -> TExp:
    if isinstance(texp, Symbol):
        if texp.name in ATOMIC_NAMES:
            return ATOMIC_NAMES[texp.name]()
        if texp.name in ("->", "*", "Empty", "Pair"):
            raise ParseError(f"Unexpected '{texp.name}' in type expression")
        return TVar(texp.name)
    if isinstance(texp, list):
        if Symbol("->") in texp:
            return _parse_proc(texp)
        if len(texp) == 3 and texp[0] == Symbol("Pair"):
            return PairTExp(_parse(texp[1]), _parse(texp[2]))
    raise ParseError(f"Bad type expression: {write_sexp(texp)}")


def _parse_proc(texp: List[Any]) -> ProcTExp:
    arrow = texp.index(Symbol("->"))
    if arrow != len(texp) - 2:
        raise ParseError(f"Procedure type must end with '-> type': {write_sexp(texp)}")
    params = texp[:arrow]
    return_te = _parse(texp[-1])
    if params in ([], [Symbol("Empty")]):
        return ProcTExp((), return_te)
    if len(params) % 2 == 0 or any(params[i] != Symbol("*") for i in range(1, len(params), 2)):
        raise ParseError(f"Parameter types must be separated by '*': {write_sexp(texp)}")
    return ProcTExp(tuple(_parse(p) for p in params[::2]), return_te)


# Rendering

def unparse_texp(te: TExp) -> str:
    """Render a type expression in concrete syntax.

    Bound variables render as what they are bound to.
    """
    te = tvar_deref(te)
    if isinstance(te, AtomicTExp):
        return te.name
    if isinstance(te, TVar):
        return te.var
    if isinstance(te, PairTExp):
        return f"(Pair {unparse_texp(te.left)} {unparse_texp(te.right)})"
    if isinstance(te, ProcTExp):
        if not te.param_tes:
            params = "Empty"
        else:
            params = " * ".join(unparse_texp(p) for p in te.param_tes)
        return f"({params} -> {unparse_texp(te.return_te)})"
    raise TypeError(f"Not a type expression: {te!r}")
