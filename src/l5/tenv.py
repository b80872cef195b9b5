"""Type environments.

An environment is a chain of frames ending in the empty environment.
Extending never touches an existing frame: it makes a new frame pointing at
the old environment, so an outer environment can be shared safely by every
inner scope built on top of it.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .errors import ErrorKind, Failure, Ok, Result
from .error_reporting import suggest_similar_names
from .texp import TExp


class TEnv:
    """Base class for type environments."""
    pass


@dataclass(frozen=True)
class EmptyTEnv(TEnv):
    pass


@dataclass(frozen=True)
class ExtendTEnv(TEnv):
    vars: Tuple[str, ...]
    texps: Tuple[TExp, ...]
    tenv: TEnv


def make_empty_tenv() -> TEnv:
    return EmptyTEnv()


def extend_tenv(names: Sequence[str], texps: Sequence[TExp], tenv: TEnv) -> TEnv:
    if len(names) != len(texps):
        raise ValueError("extend_tenv: names and types differ in length")
    return ExtendTEnv(tuple(names), tuple(texps), tenv)


def apply_tenv(tenv: TEnv, name: str) -> Result[TExp]:
    """Look ``name`` up, innermost frame first."""
    frame = tenv
    while isinstance(frame, ExtendTEnv):
        if name in frame.vars:
            return Ok(frame.texps[frame.vars.index(name)])
        frame = frame.tenv
    return Failure(f"Unbound variable: {name}", ErrorKind.UNBOUND_VARIABLE,
                   name=name, similar_names=tuple(suggest_similar_names(name, tenv_names(tenv))))


def tenv_names(tenv: TEnv) -> List[str]:
    """Every visible name, innermost first, without shadowed duplicates."""
    names: List[str] = []
    frame = tenv
    while isinstance(frame, ExtendTEnv):
        for name in frame.vars:
            if name not in names:
                names.append(name)
        frame = frame.tenv
    return names
