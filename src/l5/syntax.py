"""Abstract syntax for L5, plus the pretty-printer used in diagnostics."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple, Union

from .texp import TExp, unparse_texp


# Quoted data

@dataclass(frozen=True)
class SymbolSExp:
    """A quoted symbol."""
    val: str


@dataclass(frozen=True)
class EmptySExp:
    """The empty list ``'()``."""
    pass


@dataclass(frozen=True)
class CompoundSExp:
    """A cons cell of quoted data."""
    val1: "SExpValue"
    val2: "SExpValue"


SExpValue = Union[int, float, bool, str, SymbolSExp, EmptySExp, CompoundSExp]


# Expressions

class Exp:
    """Base class for expressions."""
    pass


@dataclass(frozen=True)
class NumExp(Exp):
    val: Union[int, float]


@dataclass(frozen=True)
class BoolExp(Exp):
    val: bool


@dataclass(frozen=True)
class StrExp(Exp):
    val: str


@dataclass(frozen=True)
class PrimOp(Exp):
    """Reference to a primitive operator."""
    op: str


@dataclass(frozen=True)
class VarRef(Exp):
    var: str


@dataclass(frozen=True)
class VarDecl:
    """A declared name with its (possibly generated) type."""
    var: str
    texp: TExp


@dataclass(frozen=True)
class IfExp(Exp):
    test: Exp
    then: Exp
    alt: Exp


@dataclass(frozen=True)
class ProcExp(Exp):
    """Lambda abstraction with declared parameter and return types."""
    args: Tuple[VarDecl, ...]
    body: Tuple[Exp, ...]
    return_te: TExp


@dataclass(frozen=True)
class AppExp(Exp):
    rator: Exp
    rands: Tuple[Exp, ...]


@dataclass(frozen=True)
class Binding:
    var: VarDecl
    val: Exp


@dataclass(frozen=True)
class LetExp(Exp):
    bindings: Tuple[Binding, ...]
    body: Tuple[Exp, ...]


@dataclass(frozen=True)
class LetrecExp(Exp):
    bindings: Tuple[Binding, ...]
    body: Tuple[Exp, ...]


@dataclass(frozen=True)
class SetExp(Exp):
    var: VarRef
    val: Exp


@dataclass(frozen=True)
class LitExp(Exp):
    """Quoted literal data."""
    val: SExpValue


@dataclass(frozen=True)
class DefineExp(Exp):
    var: VarDecl
    val: Exp


@dataclass(frozen=True)
class Program(Exp):
    exps: Tuple[Exp, ...]


# Pretty-printing

def unparse_sexp_value(val: SExpValue) -> str:
    if isinstance(val, bool):
        return "#t" if val else "#f"
    if isinstance(val, (int, float)):
        return str(val)
    if isinstance(val, str):
        return '"' + val.replace('\\', '\\\\').replace('"', '\\"') + '"'
    if isinstance(val, SymbolSExp):
        return val.val
    if isinstance(val, EmptySExp):
        return "()"
    items = []
    while isinstance(val, CompoundSExp):
        items.append(unparse_sexp_value(val.val1))
        val = val.val2
    if isinstance(val, EmptySExp):
        return "(" + " ".join(items) + ")"
    return "(" + " ".join(items) + " . " + unparse_sexp_value(val) + ")"


def _unparse_decl(decl: VarDecl) -> str:
    return f"({decl.var} : {unparse_texp(decl.texp)})"


def _unparse_bindings(bindings: Tuple[Binding, ...]) -> str:
    return "(" + " ".join(f"({_unparse_decl(b.var)} {unparse(b.val)})" for b in bindings) + ")"


def _unparse_body(body: Tuple[Exp, ...]) -> str:
    return " ".join(unparse(e) for e in body)


def unparse(exp: Exp) -> str:
    """Render an expression back to concrete L5 syntax."""
    if isinstance(exp, BoolExp):
        return "#t" if exp.val else "#f"
    if isinstance(exp, NumExp):
        return str(exp.val)
    if isinstance(exp, StrExp):
        return unparse_sexp_value(exp.val)
    if isinstance(exp, PrimOp):
        return exp.op
    if isinstance(exp, VarRef):
        return exp.var
    if isinstance(exp, IfExp):
        return f"(if {unparse(exp.test)} {unparse(exp.then)} {unparse(exp.alt)})"
    if isinstance(exp, ProcExp):
        params = " ".join(_unparse_decl(a) for a in exp.args)
        return f"(lambda ({params}) : {unparse_texp(exp.return_te)} {_unparse_body(exp.body)})"
    if isinstance(exp, AppExp):
        return "(" + " ".join(unparse(e) for e in (exp.rator,) + exp.rands) + ")"
    if isinstance(exp, LetExp):
        return f"(let {_unparse_bindings(exp.bindings)} {_unparse_body(exp.body)})"
    if isinstance(exp, LetrecExp):
        return f"(letrec {_unparse_bindings(exp.bindings)} {_unparse_body(exp.body)})"
    if isinstance(exp, SetExp):
        return f"(set! {exp.var.var} {unparse(exp.val)})"
    if isinstance(exp, LitExp):
        return f"(quote {unparse_sexp_value(exp.val)})"
    if isinstance(exp, DefineExp):
        return f"(define {_unparse_decl(exp.var)} {unparse(exp.val)})"
    if isinstance(exp, Program):
        return "(" + " ".join(["L5"] + [unparse(e) for e in exp.exps]) + ")"
    return repr(exp)
