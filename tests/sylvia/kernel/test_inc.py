import pytest

from sylvia.kernel.inc import Inc, O, S, shift_down, shift_up


def test_map_applies_to_successor_only() -> None:
    assert S(1).map(lambda n: n + 1) == S(2)
    assert O().map(lambda n: n + 1) == O()


def test_map_never_calls_function_on_zero() -> None:
    def boom(_: object) -> object:
        raise AssertionError("should not be called")

    assert O().map(boom) == O()


def test_traverse_fails_only_when_function_fails() -> None:
    assert S("a").traverse(str.upper) == S("A")
    assert S("a").traverse(lambda _: None) is None
    assert O().traverse(lambda _: None) == O()


def test_fold_and_values() -> None:
    assert O().fold(len, 0) == 0
    assert S("abc").fold(len, 0) == 3
    assert list(O().values()) == []
    assert list(S("x").values()) == ["x"]


def test_join_collapses_one_layer() -> None:
    assert S(S(7)).join() == S(7)
    assert S(O()).join() == O()
    assert O().join() == O()


def test_join_rejects_flat_index() -> None:
    with pytest.raises(TypeError, match="non-nested"):
        S(3).join()


def test_bind_and_pure() -> None:
    assert Inc.pure(4) == S(4)
    assert S(0).bind(shift_up) == O()
    assert S(3).bind(shift_up) == S(2)
    assert O().bind(shift_up) == O()


def test_indices_are_hashable_values() -> None:
    assert len({O(), O(), S(1), S(1), S(O())}) == 3


# ------------- Raw integer conversions -------------


def test_shift_up_zero_is_bound_variable() -> None:
    assert shift_up(0) == O()


def test_shift_up_positive_decrements() -> None:
    assert shift_up(1) == S(0)
    assert shift_up(5) == S(4)


@pytest.mark.parametrize("n", [0, 1, 2, 3, 10, 1000])
def test_shift_down_inverts_shift_up(n: int) -> None:
    assert shift_down(shift_up(n)) == n


@pytest.mark.parametrize("index", [O(), S(0), S(41)])
def test_shift_up_inverts_shift_down(index: Inc[int]) -> None:
    assert shift_up(shift_down(index)) == index


def test_shift_up_negative_is_contract_violation() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        shift_up(-1)


@pytest.mark.parametrize("bad", [True, 1.0, "1", None])
def test_shift_up_rejects_non_integers(bad: object) -> None:
    with pytest.raises(TypeError, match="must be integers"):
        shift_up(bad)  # type: ignore[arg-type]


def test_shift_down_rejects_non_index() -> None:
    with pytest.raises(TypeError, match="Unexpected index"):
        shift_down(3)  # type: ignore[arg-type]


# ------------- Base class and ordering -------------


def test_base_index_is_abstract() -> None:
    with pytest.raises(TypeError, match="abstract"):
        Inc()  # type: ignore[abstract]


def test_indices_order_like_raw_integers() -> None:
    assert O() < S(0)
    assert S(0) < S(1)
    assert S(O()) < S(S(O()))
    assert O() <= O()
    assert S(2) > O()
    assert sorted([S(2), O(), S(0)]) == [O(), S(0), S(2)]


@pytest.mark.parametrize("a, b", [(0, 1), (1, 4), (3, 3), (5, 2)])
def test_shift_up_preserves_order(a: int, b: int) -> None:
    assert (shift_up(a) < shift_up(b)) == (a < b)


def test_indices_do_not_order_against_other_types() -> None:
    with pytest.raises(TypeError):
        O() < 1  # type: ignore[operator]
