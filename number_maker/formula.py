from __future__ import annotations

"""Formula model: a rendered expression together with its value and digits."""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

from .constants import EPSILON

if TYPE_CHECKING:  # pragma: no cover
    from .operators import Operator

Number = Union[int, float]


@dataclass(frozen=True)
class Formula:
    """An expression built from some of the input digits.

    ``operator`` is the top-level operator that produced the formula, or
    ``None`` for a bare digit. ``digits`` lists the input digits consumed, in
    the order they were combined.
    """

    value: Number
    text: str
    operator: Optional["Operator"] = None
    digits: tuple[int, ...] = ()

    @property
    def is_bare(self) -> bool:
        return self.operator is None

    @property
    def symbol(self) -> Optional[str]:
        return self.operator.symbol if self.operator is not None else None

    def __str__(self) -> str:  # pragma: no cover - display only
        return f"{self.text} = {number_text(self.value)}"


def digit_to_formula(digit: int) -> Formula:
    """Return the bare formula for a single input digit."""
    return Formula(value=digit, text=str(digit), operator=None, digits=(digit,))


def quantise(number: Number) -> Number:
    """Snap ``number`` to the nearest integer when within :data:`EPSILON`."""
    if isinstance(number, int):
        return number
    if not math.isfinite(number):
        return number
    integer = round(number)
    return integer if abs(number - integer) < EPSILON else number


def is_whole(value: Number) -> bool:
    if isinstance(value, int):
        return True
    return math.isfinite(value) and value == round(value)


def number_text(value: Number) -> str:
    """Shortest decimal spelling of ``value`` (``6.0`` spells as ``6``)."""
    if is_whole(value):
        return str(int(value))
    return repr(float(value))


def parse_number(text: str) -> Optional[Number]:
    """Parse decimal ``text`` (``"12"``, ``".5"``, ``"1.25"``); ``None`` if invalid."""
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return quantise(value)
