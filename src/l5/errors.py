"""Results and error types for the L5 type checker.

The checker itself never raises to report a type error: every rule returns
either ``Ok(value)`` or a ``Failure`` carrying a message and an
``ErrorKind``. Exceptions are only used at the edges (the reader and parser
raise ``ParseError``; ``Failure.unwrap`` raises ``TypeCheckError``).
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Generic, Iterable, List, Optional, Tuple, TypeVar, Union


T = TypeVar("T")
U = TypeVar("U")


class ErrorKind(Enum):
    """Categories of type checking failures."""
    PARSE_ERROR = auto()
    UNBOUND_VARIABLE = auto()
    UNKNOWN_PRIMITIVE = auto()
    ARITY_MISMATCH = auto()
    TYPE_MISMATCH = auto()
    OCCURS_CHECK = auto()
    UNSUPPORTED_FORM = auto()
    EMPTY_PROGRAM = auto()


class L5Error(Exception):
    """Base class for all L5 errors."""
    pass


class ParseError(L5Error):
    """Malformed source text or syntax.

    ``incomplete`` is set when the text ended in the middle of a datum, which
    the REPL uses to keep reading lines.
    """
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None,
                 incomplete: bool = False):
        if line is not None:
            message = f"Parse error at {line}:{column}: {message}"
        super().__init__(message)
        self.line = line
        self.column = column
        self.incomplete = incomplete


class TypeCheckError(L5Error):
    """Raised by ``Failure.unwrap``."""
    def __init__(self, failure: Failure):
        super().__init__(failure.message)
        self.failure = failure


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome."""
    value: T

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """Failed outcome.

    ``name`` and ``similar_names`` are only filled in for unbound variables,
    where they feed the "did you mean" hint.
    """
    message: str
    kind: ErrorKind
    name: Optional[str] = None
    similar_names: Tuple[str, ...] = ()

    def unwrap(self):
        raise TypeCheckError(self)


Result = Union[Ok[T], Failure]


def is_failure(result: Result) -> bool:
    return isinstance(result, Failure)


def bind(result: Result[T], f: Callable[[T], Result[U]]) -> Result[U]:
    """Apply ``f`` to the value of ``result`` unless it already failed."""
    if isinstance(result, Failure):
        return result
    return f(result.value)


def map_results(f: Callable[[T], Result[U]], items: Iterable[T]) -> Result[List[U]]:
    """Apply ``f`` left to right, stopping at the first failure."""
    values = []
    for item in items:
        result = f(item)
        if isinstance(result, Failure):
            return result
        values.append(result.value)
    return Ok(values)
