"""S-expression reader for L5 source text.

The grammar is handled by lark; the transformer below turns the parse tree
into plain Python data that the L5 parser walks:

    (a b c)     -> [a, b, c]          ([a b c] reads the same)
    (a b . c)   -> Dotted((a, b), c)
    foo         -> Symbol("foo")
    42, 1.5     -> int, float
    #t, #f      -> bool
    "text"      -> str
    'x          -> [Symbol("quote"), x]
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, Tuple

from lark import Lark, Transformer
from lark.exceptions import (LarkError, UnexpectedEOF, UnexpectedInput,
                             UnexpectedToken, VisitError)

from .errors import ParseError


GRAMMAR = r"""
start: _datum*

_datum: combination
      | quoted
      | NUMBER
      | BOOLEAN
      | STRING
      | SYMBOL

combination: "(" _datum* tail? ")"
           | "[" _datum* "]"
tail: _DOT _datum
quoted: "'" _datum

_DOT.3: /\.(?=[\s()\[\]';]|$)/
NUMBER.2: /[+-]?(\d+\.\d*|\.\d+|\d+)(?=[\s()\[\]';]|$)/
BOOLEAN.2: /#(true|false|t|f)(?=[\s()\[\]';]|$)/
STRING: /"(\\.|[^"\\])*"/
SYMBOL: /[^\s()\[\]'";#][^\s()\[\]'";]*/

COMMENT: /;[^\n]*/
%import common.WS
%ignore WS
%ignore COMMENT
"""


@dataclass(frozen=True)
class Symbol:
    """An identifier read from source."""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Dotted:
    """An improper list ``(a b . c)``."""
    items: Tuple[Any, ...]
    tail: Any


@dataclass(frozen=True)
class _Tail:
    datum: Any


ESCAPES = {'n': '\n', 'r': '\r', 't': '\t', '"': '"', '\\': '\\'}


def unescape(body: str) -> str:
    """Resolve backslash escapes inside a string literal."""
    value = []
    chars = iter(body)
    for char in chars:
        if char == '\\':
            escaped = next(chars, '\\')
            value.append(ESCAPES.get(escaped, escaped))
        else:
            value.append(char)
    return "".join(value)


class SExpBuilder(Transformer):
    """Builds Python data out of the lark parse tree."""

    def start(self, items):
        return [*items]

    def combination(self, items):
        if items and isinstance(items[-1], _Tail):
            head = items[:-1]
            if not head:
                raise ParseError("Dotted pair without a head: ( . x)")
            return Dotted(tuple(head), items[-1].datum)
        return [*items]

    def tail(self, items):
        return _Tail(items[0])

    def quoted(self, items):
        return [Symbol("quote"), items[0]]

    def NUMBER(self, token):
        text = str(token)
        if '.' in text:
            return float(text)
        return int(text)

    def BOOLEAN(self, token):
        return str(token) in ("#t", "#true")

    def STRING(self, token):
        return unescape(str(token)[1:-1])

    def SYMBOL(self, token):
        return Symbol(str(token))


_parser = Lark(GRAMMAR, parser="lalr")


def read_sexps(source: str) -> List[Any]:
    """Read every top-level datum in ``source``."""
    try:
        tree = _parser.parse(source)
    except UnexpectedEOF as e:
        raise ParseError("Unexpected end of input", incomplete=True) from e
    except UnexpectedToken as e:
        if e.token.type == "$END":
            raise ParseError("Unexpected end of input", incomplete=True) from e
        raise ParseError(f"Unexpected '{e.token}'", e.line, e.column) from e
    except UnexpectedInput as e:
        raise ParseError("Unexpected character", e.line, e.column) from e
    except LarkError as e:
        raise ParseError(str(e)) from e
    try:
        return SExpBuilder().transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, ParseError):
            raise e.orig_exc from e
        raise


def read_sexp(source: str) -> Any:
    """Read exactly one datum from ``source``."""
    data = read_sexps(source)
    if len(data) != 1:
        raise ParseError(f"Expected exactly one expression, found {len(data)}")
    return data[0]


def write_sexp(datum: Any) -> str:
    """Render reader output back to concrete syntax."""
    if isinstance(datum, bool):
        return "#t" if datum else "#f"
    if isinstance(datum, str):
        return '"' + datum.replace('\\', '\\\\').replace('"', '\\"') + '"'
    if isinstance(datum, list):
        return "(" + " ".join(write_sexp(d) for d in datum) + ")"
    if isinstance(datum, Dotted):
        items = " ".join(write_sexp(d) for d in datum.items)
        return f"({items} . {write_sexp(datum.tail)})"
    return str(datum)
