"""Parser for L5 using recursive descent over reader output."""

from typing import Any, List, Optional, Tuple

from .errors import ParseError
from .sexp import Dotted, Symbol, read_sexp, write_sexp
from .syntax import *
from .texp import TVarGen, parse_texp


PRIMITIVE_OPS = frozenset([
    "+", "-", "*", "/", ">", "<", "=", "not", "and", "or",
    "eq?", "string=?", "cons", "car", "cdr", "list",
    "pair?", "list?", "number?", "boolean?", "symbol?", "string?",
    "display", "newline",
])

SPECIAL_FORMS = frozenset(["if", "lambda", "let", "letrec", "define", "set!", "quote", "L5"])

COLON = Symbol(":")


class Parser:
    """Turns reader output into L5 syntax.

    Declarations without a type annotation get a fresh variable from
    ``gen``, so the generator owns every variable of one checking run.
    """

    def __init__(self, gen: Optional[TVarGen] = None):
        self.gen = gen if gen is not None else TVarGen()

    # Programs

    def parse_program(self, sexp: Any) -> Program:
        """Parse ``(L5 <form> ...)``."""
        if not (isinstance(sexp, list) and sexp and sexp[0] == Symbol("L5")):
            raise ParseError(f"Program must be of the form (L5 <form> ...): {write_sexp(sexp)}")
        return Program(tuple(self.parse_form(form) for form in sexp[1:]))

    def parse_form(self, sexp: Any) -> Exp:
        """Parse a top-level form: a define or an expression."""
        if self.is_tagged(sexp, "define"):
            return self.parse_define(sexp)
        return self.parse_exp(sexp)

    # Expressions

    def parse_exp(self, sexp: Any) -> Exp:
        """Parse an expression."""
        # bool is a subclass of int
        if isinstance(sexp, bool):
            return BoolExp(sexp)
        if isinstance(sexp, (int, float)):
            return NumExp(sexp)
        if isinstance(sexp, str):
            return StrExp(sexp)
        if isinstance(sexp, Symbol):
            return self.parse_atom(sexp)
        if isinstance(sexp, list):
            return self.parse_compound(sexp)
        raise ParseError(f"Unexpected syntax: {write_sexp(sexp)}")

    def parse_atom(self, sym: Symbol) -> Exp:
        if sym.name in PRIMITIVE_OPS:
            return PrimOp(sym.name)
        if sym.name in SPECIAL_FORMS:
            raise ParseError(f"Keyword '{sym.name}' used as a variable")
        return VarRef(sym.name)

    def parse_compound(self, sexp: List[Any]) -> Exp:
        if not sexp:
            raise ParseError("Empty combination: ()")
        head = sexp[0]
        if isinstance(head, Symbol):
            if head.name == "if":
                return self.parse_if(sexp)
            if head.name == "lambda":
                return self.parse_proc(sexp)
            if head.name == "let":
                return LetExp(*self.parse_let_parts(sexp))
            if head.name == "letrec":
                return LetrecExp(*self.parse_let_parts(sexp))
            if head.name == "set!":
                return self.parse_set(sexp)
            if head.name == "quote":
                return self.parse_quote(sexp)
            if head.name == "define":
                raise ParseError(f"define is only allowed at the top level of a program: {write_sexp(sexp)}")
            if head.name == "L5":
                raise ParseError("Nested program")
        return AppExp(self.parse_exp(head), tuple(self.parse_exp(rand) for rand in sexp[1:]))

    def parse_if(self, sexp: List[Any]) -> IfExp:
        if len(sexp) != 4:
            raise ParseError(f"Expected (if <test> <then> <else>): {write_sexp(sexp)}")
        return IfExp(self.parse_exp(sexp[1]), self.parse_exp(sexp[2]), self.parse_exp(sexp[3]))

    def parse_proc(self, sexp: List[Any]) -> ProcExp:
        """Parse ``(lambda (<decl> ...) [: <texp>] <body> ...)``."""
        if len(sexp) < 3 or not isinstance(sexp[1], list):
            raise ParseError(f"Expected (lambda (<params>) <body> ...): {write_sexp(sexp)}")
        args = tuple(self.parse_decl(param) for param in sexp[1])
        if sexp[2] == COLON:
            if len(sexp) < 4:
                raise ParseError(f"Missing return type after ':': {write_sexp(sexp)}")
            return_te = parse_texp(sexp[3])
            body = sexp[4:]
        else:
            return_te = self.gen.fresh()
            body = sexp[2:]
        return ProcExp(args, self.parse_body(body, sexp), return_te)

    def parse_let_parts(self, sexp: List[Any]) -> Tuple[Tuple[Binding, ...], Tuple[Exp, ...]]:
        """Parse the bindings and body shared by let and letrec."""
        keyword = sexp[0].name
        if len(sexp) < 3 or not isinstance(sexp[1], list):
            raise ParseError(f"Expected ({keyword} (<bindings>) <body> ...): {write_sexp(sexp)}")
        bindings = []
        for binding in sexp[1]:
            if not (isinstance(binding, list) and len(binding) == 2):
                raise ParseError(f"Bad {keyword} binding: {write_sexp(binding)}")
            bindings.append(Binding(self.parse_decl(binding[0]), self.parse_exp(binding[1])))
        return tuple(bindings), self.parse_body(sexp[2:], sexp)

    def parse_set(self, sexp: List[Any]) -> SetExp:
        if len(sexp) != 3 or not isinstance(sexp[1], Symbol):
            raise ParseError(f"Expected (set! <var> <value>): {write_sexp(sexp)}")
        return SetExp(VarRef(sexp[1].name), self.parse_exp(sexp[2]))

    def parse_quote(self, sexp: List[Any]) -> LitExp:
        if len(sexp) != 2:
            raise ParseError(f"Expected (quote <datum>): {write_sexp(sexp)}")
        return LitExp(self.parse_sexp_value(sexp[1]))

    def parse_define(self, sexp: List[Any]) -> DefineExp:
        """Parse ``(define <decl> <value>)``."""
        if len(sexp) != 3:
            raise ParseError(f"Expected (define <var> <value>): {write_sexp(sexp)}")
        return DefineExp(self.parse_decl(sexp[1]), self.parse_exp(sexp[2]))

    def parse_body(self, body: List[Any], form: List[Any]) -> Tuple[Exp, ...]:
        if not body:
            raise ParseError(f"Empty body: {write_sexp(form)}")
        return tuple(self.parse_exp(exp) for exp in body)

    # Declarations and data

    def parse_decl(self, sexp: Any) -> VarDecl:
        """Parse ``x`` or ``(x : <texp>)``."""
        if isinstance(sexp, Symbol):
            return VarDecl(self.check_name(sexp), self.gen.fresh())
        if isinstance(sexp, list) and len(sexp) == 3 and isinstance(sexp[0], Symbol) and sexp[1] == COLON:
            return VarDecl(self.check_name(sexp[0]), parse_texp(sexp[2]))
        raise ParseError(f"Bad declaration: {write_sexp(sexp)}")

    def check_name(self, sym: Symbol) -> str:
        if sym.name in SPECIAL_FORMS or sym.name in PRIMITIVE_OPS or sym == COLON:
            raise ParseError(f"Cannot bind reserved name '{sym.name}'")
        return sym.name

    def parse_sexp_value(self, sexp: Any) -> SExpValue:
        """Convert quoted reader output into literal data."""
        if isinstance(sexp, (bool, int, float, str)):
            return sexp
        if isinstance(sexp, Symbol):
            return SymbolSExp(sexp.name)
        if isinstance(sexp, list):
            return self.make_list(sexp, EmptySExp())
        if isinstance(sexp, Dotted):
            return self.make_list(list(sexp.items), self.parse_sexp_value(sexp.tail))
        raise ParseError(f"Cannot quote: {write_sexp(sexp)}")

    def make_list(self, items: List[Any], tail: SExpValue) -> SExpValue:
        result = tail
        for item in reversed(items):
            result = CompoundSExp(self.parse_sexp_value(item), result)
        return result

    @staticmethod
    def is_tagged(sexp: Any, tag: str) -> bool:
        return isinstance(sexp, list) and bool(sexp) and sexp[0] == Symbol(tag)


def parse_l5_exp(source: str, gen: Optional[TVarGen] = None) -> Exp:
    """Parse a single L5 expression from source text."""
    return Parser(gen).parse_exp(read_sexp(source))


def parse_l5(source: str, gen: Optional[TVarGen] = None) -> Program:
    """Parse an L5 program ``(L5 <form> ...)`` from source text."""
    return Parser(gen).parse_program(read_sexp(source))
