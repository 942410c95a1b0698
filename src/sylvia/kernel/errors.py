"""Errors raised by the term kernel."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sylvia.kernel.ast import Term


@dataclass
class OpenTermError(ValueError):
    """A term expected to be closed still refers to free variables."""

    term: Term[Any]
    free: tuple[Any, ...]

    def __str__(self) -> str:
        free = ", ".join(repr(value) for value in self.free)
        return (
            "Expression has free variables:\n"
            f"  term = {self.term}\n"
            f"  free = {free}"
        )
