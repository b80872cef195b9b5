"""Type checker for fully annotated L5 programs.

Every expression form has one typing rule. Rules return ``Ok(texp)`` or the
first ``Failure`` met while checking the form and its subexpressions; there
is no error recovery. Equality of types is delegated to
``unify.check_equal_type``.
"""

from __future__ import annotations
from typing import Optional, Sequence, Tuple

from .errors import ErrorKind, Failure, Ok, ParseError, Result, bind, map_results
from .error_reporting import get_trace
from .parser import parse_l5, parse_l5_exp
from .primitives import prim_signature
from .syntax import *
from .tenv import TEnv, apply_tenv, extend_tenv, make_empty_tenv
from .texp import (BoolTExp, LiteralTExp, NumTExp, PairTExp, ProcTExp, StrTExp,
                   TExp, TVarGen, VoidTExp, tvar_deref, unparse_texp)
from .unify import check_equal_type


def typeof_lit(val: SExpValue, in_pair: bool = False) -> TExp:
    """Type of quoted data.

    Numbers and booleans only get their own type inside a pair; a quoted
    atom on its own is always ``literal``, so ``'5`` is ``literal`` while
    ``'(5 . 6)`` is ``(Pair number number)``.
    """
    if isinstance(val, CompoundSExp):
        return PairTExp(typeof_lit(val.val1, True), typeof_lit(val.val2, True))
    if isinstance(val, EmptySExp):
        return VoidTExp()
    if in_pair:
        if isinstance(val, bool):
            return BoolTExp()
        if isinstance(val, (int, float)):
            return NumTExp()
    return LiteralTExp()


class TypeChecker:
    """One type checking run.

    The checker owns the generator that primitive signatures draw fresh type
    variables from; use a new checker (and generator) for each independent
    check.
    """

    def __init__(self, gen: Optional[TVarGen] = None):
        self.gen = gen if gen is not None else TVarGen()

    def typeof_exp(self, exp: Exp, tenv: TEnv) -> Result[TExp]:
        """Compute the type of an expression."""
        result = self._dispatch(exp, tenv)
        trace = get_trace()
        if trace.enabled and isinstance(result, Ok):
            trace.add_step(f"{type(exp).__name__}: {unparse(exp)}", unparse_texp(result.value))
        return result

    def _dispatch(self, exp: Exp, tenv: TEnv) -> Result[TExp]:
        if isinstance(exp, NumExp):
            return Ok(NumTExp())
        if isinstance(exp, BoolExp):
            return Ok(BoolTExp())
        if isinstance(exp, StrExp):
            return Ok(StrTExp())
        if isinstance(exp, PrimOp):
            return prim_signature(exp.op, self.gen)
        if isinstance(exp, VarRef):
            return apply_tenv(tenv, exp.var)
        if isinstance(exp, IfExp):
            return self.typeof_if(exp, tenv)
        if isinstance(exp, ProcExp):
            return self.typeof_proc(exp, tenv)
        if isinstance(exp, AppExp):
            return self.typeof_app(exp, tenv)
        if isinstance(exp, LetExp):
            return self.typeof_let(exp, tenv)
        if isinstance(exp, LetrecExp):
            return self.typeof_letrec(exp, tenv)
        if isinstance(exp, DefineExp):
            return self.typeof_define(exp, tenv)
        if isinstance(exp, Program):
            return self.typeof_program(exp, tenv)
        if isinstance(exp, LitExp):
            return Ok(typeof_lit(exp.val))
        return Failure(f"Unsupported form: {unparse(exp)}", ErrorKind.UNSUPPORTED_FORM)

    def typeof_exps(self, exps: Sequence[Exp], tenv: TEnv) -> Result[TExp]:
        """Check a body; its type is the type of the last expression."""
        if not exps:
            return Failure("Unexpected empty list of expressions", ErrorKind.UNSUPPORTED_FORM)
        result = None
        for exp in exps:
            result = self.typeof_exp(exp, tenv)
            if isinstance(result, Failure):
                return result
        return result

    # Typing rule:
    #   if type<test>(tenv) = boolean
    #      type<then>(tenv) = t1
    #      type<else>(tenv) = t1
    # then type<(if test then else)>(tenv) = t1
    def typeof_if(self, exp: IfExp, tenv: TEnv) -> Result[TExp]:
        result = map_results(lambda part: self.typeof_exp(part, tenv), (exp.test, exp.then, exp.alt))
        if isinstance(result, Failure):
            return result
        test_te, then_te, alt_te = result.value

        result = check_equal_type(test_te, BoolTExp(), exp)
        if isinstance(result, Failure):
            return result
        return bind(check_equal_type(then_te, alt_te, exp), lambda _: Ok(then_te))

    # Typing rule:
    # If   type<body>(extend-tenv(x1=t1,...,xn=tn; tenv)) = t
    # then type<lambda (x1:t1,...,xn:tn) : t exp)>(tenv) = (t1 * ... * tn -> t)
    def typeof_proc(self, proc: ProcExp, tenv: TEnv) -> Result[TExp]:
        arg_tes = tuple(arg.texp for arg in proc.args)
        ext_tenv = extend_tenv([arg.var for arg in proc.args], arg_tes, tenv)
        result = self.typeof_exps(proc.body, ext_tenv)
        if isinstance(result, Failure):
            return result
        return bind(check_equal_type(result.value, proc.return_te, proc),
                    lambda _: Ok(ProcTExp(arg_tes, proc.return_te)))

    # Typing rule:
    # If   type<rator>(tenv) = (t1*..*tn -> t)
    #      type<randi>(tenv) = ti for each i
    # then type<(rator rand1...randn)>(tenv) = t
    def typeof_app(self, app: AppExp, tenv: TEnv) -> Result[TExp]:
        result = self.typeof_exp(app.rator, tenv)
        if isinstance(result, Failure):
            return result
        rator_te = tvar_deref(result.value)
        if not isinstance(rator_te, ProcTExp):
            return Failure(f"Application of non-procedure: {unparse_texp(rator_te)} in {unparse(app)}",
                           ErrorKind.TYPE_MISMATCH)
        if len(app.rands) != len(rator_te.param_tes):
            return Failure(f"Wrong parameter numbers passed to proc: {unparse(app)}",
                           ErrorKind.ARITY_MISMATCH)
        for rand, param_te in zip(app.rands, rator_te.param_tes):
            result = self.typeof_exp(rand, tenv)
            if isinstance(result, Failure):
                return result
            result = check_equal_type(result.value, param_te, app)
            if isinstance(result, Failure):
                return result
        return Ok(rator_te.return_te)

    # Typing rule:
    # If   type<vali>(tenv) = ti for each i
    #      type<body>(extend-tenv(var1=t1,..,varn=tn; tenv)) = t
    # then type<let ((var1 val1) .. (varn valn)) body>(tenv) = t
    def typeof_let(self, exp: LetExp, tenv: TEnv) -> Result[TExp]:
        for binding in exp.bindings:
            result = self.typeof_exp(binding.val, tenv)
            if isinstance(result, Failure):
                return result
            result = check_equal_type(binding.var.texp, result.value, exp)
            if isinstance(result, Failure):
                return result
        ext_tenv = extend_tenv([b.var.var for b in exp.bindings],
                               [b.var.texp for b in exp.bindings], tenv)
        return self.typeof_exps(exp.body, ext_tenv)

    # Typing rule:
    #   (letrec((p1 (lambda (x11 ... x1n1) body1)) ...) body)
    #   tenv-body = extend-tenv(p1=(t11*..*t1n1->t1)....; tenv)
    #   tenvi = extend-tenv(xi1=ti1,..,xini=tini; tenv-body)
    # If   type<bodyi>(tenvi) = ti for each i
    #      type<body>(tenv-body) = t
    # then type<(letrec((p1 (lambda (x11 ... x1n1) body1)) ...) body)>(tenv) = t
    def typeof_letrec(self, exp: LetrecExp, tenv: TEnv) -> Result[TExp]:
        procs = [b.val for b in exp.bindings]
        if not all(isinstance(proc, ProcExp) for proc in procs):
            return Failure(f"letrec - only support binding of procedures - {unparse(exp)}",
                           ErrorKind.ARITY_MISMATCH)
        proc_tes = [ProcTExp(tuple(arg.texp for arg in proc.args), proc.return_te) for proc in procs]
        tenv_body = extend_tenv([b.var.var for b in exp.bindings], proc_tes, tenv)
        for proc in procs:
            tenv_i = extend_tenv([arg.var for arg in proc.args],
                                 [arg.texp for arg in proc.args], tenv_body)
            result = self.typeof_exps(proc.body, tenv_i)
            if isinstance(result, Failure):
                return result
            result = check_equal_type(result.value, proc.return_te, exp)
            if isinstance(result, Failure):
                return result
        return self.typeof_exps(exp.body, tenv_body)

    # Typing rule:
    #   if type<val>(tenv) = texp
    #   then type<(define (var : texp) val)>(tenv) = void
    def typeof_define(self, exp: DefineExp, tenv: TEnv) -> Result[TExp]:
        result = self.typeof_exp(exp.val, tenv)
        if isinstance(result, Failure):
            return result
        return bind(check_equal_type(exp.var.texp, result.value, exp), lambda _: Ok(VoidTExp()))

    def typeof_program(self, program: Program, tenv: TEnv) -> Result[TExp]:
        """Check the forms of a program in order.

        Each define extends the environment seen by the forms after it; the
        program's type is the type of its last form that is not a define.
        """
        current_tenv = tenv
        last_result: Result[TExp] = Failure("No expressions in program", ErrorKind.EMPTY_PROGRAM)

        for exp in program.exps:
            result = self.typeof_top_level(exp, current_tenv)
            if isinstance(result, Failure):
                return result
            current_tenv, te = result.value
            if te is not None:
                last_result = Ok(te)

        return last_result

    def typeof_top_level(self, exp: Exp, tenv: TEnv) -> Result[Tuple[TEnv, Optional[TExp]]]:
        """Check one top-level form.

        Returns the environment for the following forms together with the
        form's type, which is ``None`` for a define.
        """
        if isinstance(exp, DefineExp):
            result = self.typeof_define(exp, tenv)
            if isinstance(result, Failure):
                return result
            return Ok((extend_tenv([exp.var.var], [exp.var.texp], tenv), None))
        return bind(self.typeof_exp(exp, tenv), lambda te: Ok((tenv, te)))


def typeof_exp(exp: Exp, tenv: TEnv, gen: Optional[TVarGen] = None) -> Result[TExp]:
    """Compute the type of an expression under ``tenv``."""
    return TypeChecker(gen).typeof_exp(exp, tenv)


def typeof_program(program: Program, tenv: TEnv, gen: Optional[TVarGen] = None) -> Result[TExp]:
    """Compute the type of a program under ``tenv``."""
    return TypeChecker(gen).typeof_program(program, tenv)


def l5_typeof(source: str) -> Result[str]:
    """Type of a single L5 expression given as source text."""
    gen = TVarGen()
    try:
        exp = parse_l5_exp(source, gen)
    except ParseError as e:
        return Failure(str(e), ErrorKind.PARSE_ERROR)
    return bind(typeof_exp(exp, make_empty_tenv(), gen), lambda te: Ok(unparse_texp(te)))


def l5_program_typeof(source: str) -> Result[str]:
    """Type of an L5 program ``(L5 ...)`` given as source text."""
    gen = TVarGen()
    try:
        program = parse_l5(source, gen)
    except ParseError as e:
        return Failure(str(e), ErrorKind.PARSE_ERROR)
    return bind(typeof_program(program, make_empty_tenv(), gen), lambda te: Ok(unparse_texp(te)))
