import pytest
import sympy as sp

from number_maker.formula import Formula, digit_to_formula
from number_maker.operators import ADD, DIVIDE, POWER, SQUARE_ROOT
from number_maker.verify import FormulaSyntaxError, evaluate_text, verify_formula


@pytest.mark.parametrize(
    "text, expected",
    [
        ("2+3", 5),
        ("(2+3)×7", 35),
        ("7-3-2", 2),
        ("12÷3÷2", 2),
        ("2^3^2", 512),
        ("(2^3)^2", 64),
        ("-2^2", 4),
        ("-(2^2)", -4),
        ("√(3!+3)", 3),
        ("(3!)!", 720),
        ("2.5", sp.Rational(5, 2)),
        (".5", sp.Rational(1, 2)),
        ("2+3|0", 50),
        ("1|2|3", 123),
        ("-1|2", -12),
        ("2÷-4", sp.Rational(-1, 2)),
    ],
)
def test_evaluate_text(text: str, expected: object) -> None:
    assert evaluate_text(text) == expected


@pytest.mark.parametrize("text", ["2+", "2)", "(2", "2#3", ""])
def test_syntax_errors(text: str) -> None:
    with pytest.raises(FormulaSyntaxError):
        evaluate_text(text)


def test_verify_formula() -> None:
    two, three, four = (digit_to_formula(d) for d in (2, 3, 4))
    assert verify_formula(ADD.apply(two, three))
    assert verify_formula(DIVIDE.apply(two, three))
    assert verify_formula(POWER.apply(SQUARE_ROOT.apply(four), three))
    assert not verify_formula(Formula(6, "2+3", ADD, (2, 3)))
    assert not verify_formula(Formula(1, "2+", ADD, (2,)))
