from number_maker.formula import is_whole, number_text, parse_number, quantise


def test_quantise_snaps_near_integers() -> None:
    assert quantise(2.0000000001) == 2
    assert quantise(2.5) == 2.5
    assert quantise(7) == 7


def test_number_text() -> None:
    assert number_text(6.0) == "6"
    assert number_text(0.5) == "0.5"
    assert number_text(-3) == "-3"


def test_parse_number() -> None:
    assert parse_number(".5") == 0.5
    assert parse_number("04") == 4
    assert parse_number("abc") is None
    assert parse_number("inf") is None


def test_is_whole() -> None:
    assert is_whole(3)
    assert is_whole(3.0)
    assert not is_whole(3.5)
    assert not is_whole(float("nan"))
