"""Pretty-printing utilities for lambda terms."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from sylvia.kernel.ast import App, Lam, Ref, Term
from sylvia.kernel.inc import Inc, O, S, shift_down

ATOM_PREC = 2
APP_PREC = 1
LAM_PREC = 0

STYLES = ("names", "indices")


@dataclass(frozen=True)
class _Free:
    """A free leaf seen while lowering indices to raw integers."""

    value: Any


def _fresh_name(env: set[str], base: str = "x") -> str:
    """Return a name not already present in ``env``."""

    candidate = base
    suffix = 0
    while candidate in env:
        suffix += 1
        candidate = f"{base}{suffix}"
    return candidate


def _maybe_paren(
    text: str, child_prec: int, parent_prec: int, *, allow_equal: bool
) -> str:
    if child_prec < parent_prec or (child_prec == parent_prec and not allow_equal):
        return f"({text})"
    return text


def _lower(index: Inc[Any], outer: Callable[[Any], int | _Free]) -> int | _Free:
    lowered = index.map(outer)
    match lowered:
        case S(_Free() as free):
            return free
    return shift_down(lowered)


def pretty(term: Term[Any], *, style: str = "names") -> str:
    """
    Return a human-friendly string for ``term``.

    ``style="names"`` invents binder names (``\\x. \\x1. x``); ``"indices"``
    prints bound references as raw de Bruijn numbers (``\\. \\. 1``) and free
    leaves as ``#value``.
    """
    if style not in STYLES:
        raise ValueError(f"Unknown pretty-printing style: {style!r}")
    render = _show_index if style == "indices" else str

    def fmt(t: Term[Any], leaf: Callable[[Any], Any], env: set[str]) -> tuple[str, int]:
        match t:
            case Ref(value):
                return render(leaf(value)), ATOM_PREC

            case App(f, a):
                func_text, func_prec = fmt(f, leaf, env)
                arg_text, arg_prec = fmt(a, leaf, env)
                func_disp = _maybe_paren(
                    func_text, func_prec, APP_PREC, allow_equal=True
                )
                arg_disp = _maybe_paren(arg_text, arg_prec, APP_PREC, allow_equal=False)
                return f"{func_disp} {arg_disp}", APP_PREC

            case Lam(body) if style == "indices":
                body_text, _ = fmt(body, lambda i: _lower(i, leaf), env)
                return f"\\. {body_text}", LAM_PREC

            case Lam(body):
                binder = _fresh_name(env)

                def name_of(i: Inc[Any]) -> str:
                    match i:
                        case O():
                            return binder
                        case S(value):
                            return leaf(value)
                    raise TypeError(f"Unexpected index under binder: {i!r}")

                body_text, _ = fmt(body, name_of, env | {binder})
                return f"\\{binder}. {body_text}", LAM_PREC

        raise TypeError(f"Cannot pretty-print unknown term: {t!r}")

    if not isinstance(term, Term):
        raise TypeError(f"Cannot pretty-print unknown term: {term!r}")
    if style == "indices":
        return fmt(term, _Free, set())[0]
    return fmt(term, str, {str(value) for value in term.leaves()})[0]


def _show_index(value: int | _Free) -> str:
    if isinstance(value, _Free):
        return f"#{value.value}"
    return str(value)
