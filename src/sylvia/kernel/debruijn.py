"""Abstraction, substitution and closedness checks for scope-indexed terms."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from functools import partial
from typing import Any, Never, overload

from sylvia.kernel.ast import App, Lam, Ref, Term
from sylvia.kernel.errors import OpenTermError
from sylvia.kernel.inc import Inc, O, S, shift_up


# --- Closed terms ---------------------------------------------------------------


def _reject(_value: object) -> None:
    return None


def verify[A](term: Term[A]) -> Term[Never] | None:
    """
    Check that ``term`` refers to no free variables.

    Returns the same term typed as closed, or ``None`` if any free leaf
    remains. An open term is an ordinary outcome here, not an error.
    """
    return term.traverse(_reject)


def verify_or_raise[A](term: Term[A]) -> Term[Never]:
    """Like :func:`verify`, but raise :class:`OpenTermError` for open terms."""
    closed = verify(term)
    if closed is None:
        raise OpenTermError(term, tuple(term.leaves()))
    return closed


def is_closed(term: Term[object]) -> bool:
    return verify(term) is not None


# --- Abstracting ----------------------------------------------------------------


def abstract[A](match_fn: Callable[[A], Inc[A]], body: Term[A]) -> Term[A]:
    """
    Create a lambda abstraction around ``body``.

    ``match_fn`` decides, leaf by leaf, whether a free leaf becomes the new
    bound variable (``O()``) or stays a reference further out (``S(leaf)``).
    With named variables use ``abstract(match("x"), body)``; with
    raw de Bruijn integers use ``abstract(shift_up, body)``.
    """
    return Lam(body.map_leaves(match_fn))


_UNSET: Any = object()


@overload
def match[A](x: A) -> Callable[[A], Inc[A]]: ...
@overload
def match[A](x: A, y: A) -> Inc[A]: ...


def match[A](x: A, y: A = _UNSET) -> Inc[A] | Callable[[A], Inc[A]]:
    """
    Bind ``y`` if it equals ``x``; otherwise leave it one scope out.

    Called with ``x`` alone, returns the matching function for :func:`abstract`.
    """
    if y is _UNSET:
        return partial(match, x)
    return O() if x == y else S(y)


def abstract_name[A](name: A, body: Term[A]) -> Term[A]:
    return abstract(match(name), body)


def abstract_index(body: Term[int]) -> Term[int]:
    return abstract(shift_up, body)


def from_indices(body: Term[int], binders: int = 1) -> Term[int]:
    """Wrap ``body`` in ``binders`` abstractions over raw de Bruijn integers."""
    if binders < 0:
        raise ValueError("Binder count must be non-negative")
    for _ in range(binders):
        body = abstract_index(body)
    return body


def lams[A](names: Iterable[A], body: Term[A]) -> Term[A]:
    """Abstract over ``names``, outermost binder first."""
    for name in reversed(tuple(names)):
        body = abstract_name(name, body)
    return body


def mk_app[A](func: Term[A], *args: Term[A]) -> Term[A]:
    """Left-nested application ``func a0 a1 ...``."""
    result = func
    for arg in args:
        result = App(result, arg)
    return result


# --- Applying -------------------------------------------------------------------


def subst[A](x: A, index: Inc[A]) -> A:
    """
    Shift ``index`` down by one, replacing the bound variable with ``x``.

    This undoes :func:`match`: ``subst(x, match(x, y)) == y`` for every ``y``.
    """
    match index:
        case O():
            return x
        case S(value):
            return value
    raise TypeError(f"Unexpected index in subst: {index!r}")


def apply[A](argument: Term[A], body: Term[Inc[A]]) -> Term[A]:
    """Substitute ``argument`` for the innermost bound variable of ``body``."""
    return body.map_leaves(lambda i: subst(argument, i.map(Ref))).join()


def instantiate[A](lam: Term[A], argument: Term[A]) -> Term[A]:
    """Apply the abstraction ``lam`` to ``argument`` (one beta step at the head)."""
    if not isinstance(lam, Lam):
        raise TypeError(
            "Cannot instantiate a non-abstraction:\n"
            f"  term = {lam}\n"
            f"  argument = {argument}"
        )
    return apply(argument, lam.body)
