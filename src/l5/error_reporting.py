"""Diagnostics for the L5 type checker.

This module provides:
- A type derivation trace, filled in by the checker in verbose mode
- Hints for common mistakes, chosen by error kind
- Rendering of failures and traces as rich text
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional

from rich.text import Text

from .errors import ErrorKind, Failure


@dataclass
class TypeDerivation:
    """A step in type derivation for verbose output."""
    description: str
    result: Optional[str]


class TypeDerivationTrace:
    """Accumulates type derivation steps for verbose output."""

    def __init__(self):
        self.steps: List[TypeDerivation] = []
        self.enabled = False

    def add_step(self, description: str, result: Optional[str] = None):
        """Add a derivation step."""
        if self.enabled:
            self.steps.append(TypeDerivation(description=description, result=result))

    def format(self) -> Text:
        """Format the trace for display."""
        text = Text()
        if not self.steps:
            return text

        text.append("\nType Derivation Trace:", style="bold")
        for i, step in enumerate(self.steps, 1):
            text.append(f"\nStep {i}: ", style="dim")
            text.append(step.description)
            if step.result:
                text.append("\n  result: ", style="dim")
                text.append(step.result, style="cyan")
        return text


# Global trace instance
_trace = TypeDerivationTrace()


def get_trace() -> TypeDerivationTrace:
    """Get the global type derivation trace."""
    return _trace


def enable_trace():
    """Enable type derivation tracing."""
    _trace.enabled = True


def disable_trace():
    """Disable type derivation tracing."""
    _trace.enabled = False


def clear_trace():
    """Clear the type derivation trace."""
    _trace.steps = []


def suggest_similar_names(name: str, available_names: List[str], max_suggestions: int = 3) -> List[str]:
    """Find similar names using edit distance."""
    suggestions = []

    for available in available_names:
        if available == name:
            continue
        distance = edit_distance(name, available)
        if distance <= 2:  # Max edit distance of 2
            suggestions.append((distance, available))

    suggestions.sort(key=lambda x: x[0])
    return [name for _, name in suggestions[:max_suggestions]]


def edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        return edit_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def generate_suggestion(failure: Failure) -> List[str]:
    """Generate helpful hints for a failure."""
    suggestions = []

    if failure.kind == ErrorKind.UNBOUND_VARIABLE:
        if failure.similar_names:
            names = ", ".join(f"'{name}'" for name in failure.similar_names)
            suggestions.append(f"Did you mean: {names}?")
        suggestions.append("Top-level names must be defined with 'define' before they are used")

    elif failure.kind == ErrorKind.ARITY_MISMATCH:
        if "letrec" in failure.message:
            suggestions.append("letrec can only bind lambda expressions; use let for other values")
        else:
            suggestions.append("Check the number of arguments against the procedure's declared type")

    elif failure.kind == ErrorKind.OCCURS_CHECK:
        suggestions.append("A type cannot contain itself; check the annotations involving this variable")

    elif failure.kind == ErrorKind.UNKNOWN_PRIMITIVE:
        suggestions.append("This primitive has no type signature in the checker")

    elif failure.kind == ErrorKind.EMPTY_PROGRAM:
        suggestions.append("A program needs at least one form that is not a define: (L5 <define> ... <exp>)")

    return suggestions


def format_failure(failure: Failure) -> Text:
    """Format a failure with hints and, when enabled, the derivation trace."""
    text = Text()
    text.append("Error: ", style="bold red")
    text.append(failure.message)

    for suggestion in generate_suggestion(failure):
        text.append("\nHint: ", style="yellow")
        text.append(suggestion)

    text.append_text(get_trace().format())
    return text
