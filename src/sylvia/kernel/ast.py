"""Lambda terms over scope-indexed placeholders."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass, fields
from functools import total_ordering
from typing import Any, ClassVar

from sylvia.kernel.inc import Inc, O, S


@total_ordering
@dataclass(frozen=True)
class Term[A](ABC):
    """
    Base class for untyped lambda terms whose free variables have type ``A``.

    The body of an abstraction over ``A`` is a ``Term[Inc[A]]``: it sees one
    more variable than its surroundings. Terms are immutable and compare
    structurally, so every operation below builds a new term.

    Terms are ordered by constructor first (``Ref < Lam < App``) and then by
    their fields. Every operation recurses structurally, so a term nested
    deeper than the interpreter recursion limit (see
    :func:`sys.getrecursionlimit`) raises ``RecursionError``.
    """

    rank: ClassVar[int] = 0

    @staticmethod
    def pure[B](value: B) -> Term[B]:
        return Ref(value)

    def _order_key(self) -> tuple[int, tuple[Any, ...]]:
        return self.rank, tuple(getattr(self, f.name) for f in fields(self))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Term):
            return NotImplemented
        return self._order_key() < other._order_key()

    # --- Structure -------------------------------------------------------------
    @abstractmethod
    def map_leaves[B](self, f: Callable[[A], B]) -> Term[B]:
        """Apply ``f`` to every free leaf, lifting it through binders."""
        raise NotImplementedError

    @abstractmethod
    def traverse[B](self, f: Callable[[A], B | None]) -> Term[B] | None:
        """
        Map every free leaf through ``f``, left to right and outside in.

        Returns ``None`` as soon as ``f`` does; leaves bound inside the term
        are never passed to ``f``.
        """
        raise NotImplementedError

    @abstractmethod
    def fold[R](self, f: Callable[[A], R], combine: Callable[[R, R], R], empty: R) -> R:
        raise NotImplementedError

    @abstractmethod
    def join[B](self: Term[Term[B]]) -> Term[B]:
        """Flatten a term of terms by splicing each leaf term into place."""
        raise NotImplementedError

    def bind[B](self, f: Callable[[A], Term[B]]) -> Term[B]:
        return self.map_leaves(f).join()

    @abstractmethod
    def leaves(self) -> Iterator[A]:
        """Yield the free leaf values in left-to-right order."""
        raise NotImplementedError

    @abstractmethod
    def references(self) -> Iterator[Ref[Any]]:
        """Yield every ``Ref`` node, bound or free."""
        raise NotImplementedError

    @abstractmethod
    def size(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def depth(self) -> int:
        """Maximum number of nested abstractions."""
        raise NotImplementedError

    # --- Display ---------------------------------------------------------------
    def __str__(self) -> str:
        # Deferred import avoids a cycle with the printer.
        from sylvia.kernel.pretty import pretty

        return pretty(self)


@dataclass(frozen=True)
class Ref[A](Term[A]):
    """Variable reference."""

    value: A

    def map_leaves[B](self, f: Callable[[A], B]) -> Term[B]:
        return Ref(f(self.value))

    def traverse[B](self, f: Callable[[A], B | None]) -> Term[B] | None:
        result = f(self.value)
        if result is None:
            return None
        return Ref(result)

    def fold[R](self, f: Callable[[A], R], combine: Callable[[R, R], R], empty: R) -> R:
        return f(self.value)

    def join[B](self: Term[Term[B]]) -> Term[B]:
        if not isinstance(self.value, Term):
            raise TypeError(f"Cannot flatten a leaf that is not a term: {self!r}")
        return self.value

    def leaves(self) -> Iterator[A]:
        yield self.value

    def references(self) -> Iterator[Ref[Any]]:
        yield self

    def size(self) -> int:
        return 1

    def depth(self) -> int:
        return 0


@dataclass(frozen=True)
class Lam[A](Term[A]):
    """Lambda abstraction binding ``O()`` inside ``body``."""

    rank: ClassVar[int] = 1
    body: Term[Inc[A]]

    def map_leaves[B](self, f: Callable[[A], B]) -> Term[B]:
        return Lam(self.body.map_leaves(lambda i: i.map(f)))

    def traverse[B](self, f: Callable[[A], B | None]) -> Term[B] | None:
        body = self.body.traverse(lambda i: i.traverse(f))
        if body is None:
            return None
        return Lam(body)

    def fold[R](self, f: Callable[[A], R], combine: Callable[[R, R], R], empty: R) -> R:
        return self.body.fold(lambda i: i.fold(f, empty), combine, empty)

    def join[B](self: Term[Term[B]]) -> Term[B]:
        return Lam(self.body.map_leaves(distribute).join())

    def leaves(self) -> Iterator[A]:
        for index in self.body.leaves():
            yield from index.values()

    def references(self) -> Iterator[Ref[Any]]:
        return self.body.references()

    def size(self) -> int:
        return 1 + self.body.size()

    def depth(self) -> int:
        return 1 + self.body.depth()


@dataclass(frozen=True)
class App[A](Term[A]):
    """Function application."""

    rank: ClassVar[int] = 2
    func: Term[A]
    arg: Term[A]

    def map_leaves[B](self, f: Callable[[A], B]) -> Term[B]:
        return App(self.func.map_leaves(f), self.arg.map_leaves(f))

    def traverse[B](self, f: Callable[[A], B | None]) -> Term[B] | None:
        func = self.func.traverse(f)
        if func is None:
            return None
        arg = self.arg.traverse(f)
        if arg is None:
            return None
        return App(func, arg)

    def fold[R](self, f: Callable[[A], R], combine: Callable[[R, R], R], empty: R) -> R:
        return combine(
            self.func.fold(f, combine, empty), self.arg.fold(f, combine, empty)
        )

    def join[B](self: Term[Term[B]]) -> Term[B]:
        return App(self.func.join(), self.arg.join())

    def leaves(self) -> Iterator[A]:
        yield from self.func.leaves()
        yield from self.arg.leaves()

    def references(self) -> Iterator[Ref[Any]]:
        yield from self.func.references()
        yield from self.arg.references()

    def size(self) -> int:
        return 1 + self.func.size() + self.arg.size()

    def depth(self) -> int:
        return max(self.func.depth(), self.arg.depth())


def distribute[A](index: Inc[Term[A]]) -> Term[Inc[A]]:
    """
    Push an index wrapped around a term down onto the term's leaves.

    Used when flattening crosses a binder: a spliced term gets every free leaf
    moved one scope out, while the binder's own variable stays ``O()``.
    """
    match index:
        case O():
            return Ref(O())
        case S(term):
            return term.map_leaves(S)
    raise TypeError(f"Unexpected index in distribute: {index!r}")
