"""Scope-level indices: de Bruijn numbers whose depth is bounded by their type."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass, fields
from functools import total_ordering
from typing import Any, ClassVar


@total_ordering
@dataclass(frozen=True)
class Inc[A](ABC):
    """
    One binder's worth of de Bruijn index.

    ``O()`` refers to the variable bound by the nearest enclosing abstraction;
    ``S(x)`` refers to whatever ``x`` refers to, seen from one binder further
    in. The number 3 is written ``S(S(S(x)))`` and has type
    ``Inc[Inc[Inc[A]]]``, so the type of an index bounds how far out it can
    point: an index can never escape the binders its type was built under.

    Indices are ordered like their raw integers: ``O() < S(x)`` and
    ``S(x) < S(y)`` when ``x < y``.
    """

    rank: ClassVar[int] = 0

    @staticmethod
    def pure[B](value: B) -> Inc[B]:
        return S(value)

    def _order_key(self) -> tuple[int, tuple[Any, ...]]:
        return self.rank, tuple(getattr(self, f.name) for f in fields(self))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Inc):
            return NotImplemented
        return self._order_key() < other._order_key()

    @abstractmethod
    def map[B](self, f: Callable[[A], B]) -> Inc[B]:
        """Apply ``f`` to the wrapped value, if there is one."""
        raise NotImplementedError

    @abstractmethod
    def traverse[B](self, f: Callable[[A], B | None]) -> Inc[B] | None:
        """Like :meth:`map`, but ``f`` may fail by returning ``None``."""
        raise NotImplementedError

    @abstractmethod
    def fold[R](self, f: Callable[[A], R], empty: R) -> R:
        raise NotImplementedError

    @abstractmethod
    def values(self) -> Iterator[A]:
        raise NotImplementedError

    @abstractmethod
    def join[B](self: Inc[Inc[B]]) -> Inc[B]:
        """Remove one layer of nesting, projecting the inner index outwards."""
        raise NotImplementedError

    def bind[B](self, f: Callable[[A], Inc[B]]) -> Inc[B]:
        return self.map(f).join()


@dataclass(frozen=True)
class O[A](Inc[A]):
    """Zero: the innermost bound variable."""

    def map[B](self, f: Callable[[A], B]) -> Inc[B]:
        return O()

    def traverse[B](self, f: Callable[[A], B | None]) -> Inc[B] | None:
        return O()

    def fold[R](self, f: Callable[[A], R], empty: R) -> R:
        return empty

    def values(self) -> Iterator[A]:
        return iter(())

    def join[B](self: Inc[Inc[B]]) -> Inc[B]:
        return O()


@dataclass(frozen=True)
class S[A](Inc[A]):
    """Successor: ``value`` as seen from one binder further in."""

    rank: ClassVar[int] = 1
    value: A

    def map[B](self, f: Callable[[A], B]) -> Inc[B]:
        return S(f(self.value))

    def traverse[B](self, f: Callable[[A], B | None]) -> Inc[B] | None:
        result = f(self.value)
        if result is None:
            return None
        return S(result)

    def fold[R](self, f: Callable[[A], R], empty: R) -> R:
        return f(self.value)

    def values(self) -> Iterator[A]:
        yield self.value

    def join[B](self: Inc[Inc[B]]) -> Inc[B]:
        inner = self.value
        if not isinstance(inner, Inc):
            raise TypeError(f"Cannot join a non-nested index: {self!r}")
        # S(O()) joins to O(), S(S(x)) to S(x)
        return inner


def shift_up(index: int) -> Inc[int]:
    """
    Add one layer of :class:`Inc`, decrementing the raw index inside.

    ``0`` becomes the newly bound variable and ``n`` becomes ``S(n - 1)``.
    This is the inverse of :func:`shift_down`.
    """
    if isinstance(index, bool) or not isinstance(index, int):
        raise TypeError(f"De Bruijn indices must be integers, got {index!r}")
    if index < 0:
        raise ValueError("De Bruijn indices must be non-negative")
    if index == 0:
        return O()
    return S(index - 1)


def shift_down(index: Inc[int]) -> int:
    """Remove one layer of :class:`Inc`, incrementing the raw index inside."""
    match index:
        case O():
            return 0
        case S(value):
            return value + 1
    raise TypeError(f"Unexpected index in shift_down: {index!r}")
