from number_maker.formula import Formula, digit_to_formula
from number_maker.group import Group
from number_maker.operators import ADD, CONCATENATE_DIGITS, MULTIPLY
from number_maker.pool import SolutionPool
from number_maker.settings import Options, build_settings


def _pool(**kwargs: object) -> SolutionPool:
    options = Options(digit_string="1234", symbols=["( )", "+", "×", "&"])
    for key, value in kwargs.items():
        setattr(options, key, value)
    return SolutionPool(build_settings(options))


def test_first_formula_kept_on_tie() -> None:
    pool = _pool()
    assert pool.offer(Formula(3, "1+2", ADD, (1, 2)))
    assert not pool.offer(Formula(3, "2+1", ADD, (2, 1)))
    assert pool.get(3).text == "1+2"


def test_fewer_digits_win() -> None:
    pool = _pool()
    pool.offer(Formula(4, "1+3", ADD, (1, 3)))
    assert pool.offer(digit_to_formula(4))
    assert pool.get(4).text == "4"


def test_shorter_text_wins_with_same_digits() -> None:
    pool = _pool()
    pool.offer(Formula(8, "(1+3)×2", MULTIPLY, (1, 3, 2)))
    assert pool.offer(Formula(8, "1+3+4", ADD, (1, 3, 4)))
    assert pool.get(8).text == "1+3+4"


def test_leading_zero_rejected() -> None:
    pool = _pool()
    assert not pool.offer(Formula(2, "02", CONCATENATE_DIGITS, (0, 2)))
    assert not pool.offer(Formula(3, "1+02", ADD, (1, 0, 2)))
    assert pool.offer(digit_to_formula(0))
    assert pool.offer(Formula(20, "20", CONCATENATE_DIGITS, (2, 0)))
    assert 0 in pool and 2 not in pool


def test_only_whole_values_in_range() -> None:
    pool = _pool(value_limit=100)
    assert not pool.offer(Formula(2.5, "2.5", CONCATENATE_DIGITS, (2, 5)))
    assert not pool.offer(Formula(-1, "1-2", ADD, (1, 2)))
    assert not pool.offer(Formula(1234, "1234", CONCATENATE_DIGITS, (1, 2, 3, 4)))


def test_brackets_need_parens_symbol() -> None:
    pool = _pool(symbols=["+", "×"])
    assert not pool.offer(Formula(9, "(1+2)×3", MULTIPLY, (1, 2, 3)))


def test_all_digits_counts_only_finished_groups() -> None:
    pool = _pool()
    group = Group((digit_to_formula(1), digit_to_formula(2)))
    assert pool.offer_group(group) == 0
    partial = _pool(use_all_digits=False)
    assert partial.offer_group(group) == 2
    assert partial.formula_map() == {1: "1", 2: "2"}
