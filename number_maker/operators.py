from __future__ import annotations

"""Operator registry for the digit search.

Every operator knows how to compute its value from one or two formulas and how
to render the combined text, inserting brackets based on precedence. An
operator whose value rule does not apply (division by zero, negative square
root, factorial outside the lookup table, ...) simply produces no result.

The three operator kinds form a closed set; the expansion engine dispatches on
:class:`OperatorKind` to decide arity and how many results to expect.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional

from .constants import BARE_PRECEDENCE, PARENS_DESCRIPTION, PARENS_SYMBOL
from .formula import Formula, Number, number_text, parse_number, quantise


class OperatorKind(Enum):
    UNARY = "unary"
    COMMUTATIVE = "commutative"
    NONCOMMUTATIVE = "noncommutative"


@dataclass(frozen=True, eq=False)
class Operator:
    """A unary or binary operator with its value and rendering rules."""

    name: str
    symbol: str
    description: str
    precedence: int
    kind: OperatorKind
    value_fn: Callable[..., Optional[Number]]
    render_fn: Callable[..., str]

    @property
    def is_unary(self) -> bool:
        return self.kind is OperatorKind.UNARY

    def apply(self, a: Formula, b: Optional[Formula] = None) -> Optional[Formula]:
        """Apply to ``a`` (and ``b`` for binary operators); ``None`` on failure."""
        if self.is_unary:
            value = self.value_fn(a)
            if value is None:
                return None
            return Formula(value=value, text=self.render_fn(self, a), operator=self, digits=a.digits)
        if b is None:
            raise TypeError(f"binary operator {self.name!r} needs two operands")
        value = self.value_fn(a, b)
        if value is None:
            return None
        return Formula(
            value=value,
            text=self.render_fn(self, a, b),
            operator=self,
            digits=a.digits + b.digits,
        )

    def apply_all(
        self, a: Formula, b: Optional[Formula] = None, preserve_order: bool = False
    ) -> list[Formula]:
        """Return every result of applying this operator to the operand(s).

        Commutative operators yield at most one result. Noncommutative ones
        yield ``a op b`` and, unless ``preserve_order`` is set, ``b op a``.
        """
        if self.kind is OperatorKind.UNARY:
            candidates = [self.apply(a)]
        elif self.kind is OperatorKind.COMMUTATIVE:
            candidates = [self.apply(a, b)]
        elif preserve_order:
            candidates = [self.apply(a, b)]
        else:
            assert b is not None
            candidates = [self.apply(a, b), self.apply(b, a)]
        return [f for f in candidates if f is not None]

    def __repr__(self) -> str:
        return f"Operator({self.name!r}, {self.symbol!r})"


# ---------------------------------------------------------------------------
# Bracketing
# ---------------------------------------------------------------------------


def _precedence(formula: Formula) -> int:
    op = formula.operator
    return op.precedence if op is not None else BARE_PRECEDENCE


def bind_loose(op: Operator, formula: Formula) -> str:
    """Bracket ``formula`` only when it binds strictly looser than ``op``."""
    return f"({formula.text})" if _precedence(formula) < op.precedence else formula.text


def bind_tight(op: Operator, formula: Formula) -> str:
    """Bracket ``formula`` when it binds looser than or as loosely as ``op``."""
    return f"({formula.text})" if _precedence(formula) <= op.precedence else formula.text


def _infix(symbol: str, left: Callable, right: Callable) -> Callable[..., str]:
    def render(op: Operator, a: Formula, b: Formula) -> str:
        return left(op, a) + symbol + right(op, b)

    return render


# ---------------------------------------------------------------------------
# Value rules
# ---------------------------------------------------------------------------

FACTORIALS: dict[int, int] = {
    0: 1,
    3: 6,
    4: 24,
    5: 120,
    6: 720,
    7: 5040,
    8: 40320,
    9: 362880,
}


def _concatenate_values(a: Formula, b: Formula) -> Optional[Number]:
    # any two values will do, as long as they don't both carry a point
    if b.value < 0 or ("." in a.text and "." in b.text):
        return None
    return parse_number(number_text(a.value) + number_text(b.value))


def _add(a: Formula, b: Formula) -> Number:
    return a.value + b.value


def _subtract(a: Formula, b: Formula) -> Number:
    return a.value - b.value


def _multiply(a: Formula, b: Formula) -> Number:
    return a.value * b.value


def _divide(a: Formula, b: Formula) -> Optional[Number]:
    if not b.value:
        return None
    return quantise(a.value / b.value)


def _power(a: Formula, b: Formula) -> Optional[Number]:
    if a.value == 0 and b.value == 0:
        return None
    try:
        value = math.pow(a.value, b.value)
    except (OverflowError, ValueError, ZeroDivisionError):
        return None
    if not math.isfinite(value):
        return None
    return quantise(value)


def _square_root(a: Formula) -> Optional[Number]:
    if a.value < 0:
        return None
    value = quantise(math.sqrt(a.value))
    # √0 and √1 change nothing but the text
    if value == a.value:
        return None
    return value


def _factorial(a: Formula) -> Optional[Number]:
    if not isinstance(a.value, int) and a.value != round(a.value):
        return None
    return FACTORIALS.get(int(a.value))


def _negate(a: Formula) -> Optional[Number]:
    if a.operator is NEGATE:
        return None
    return -a.value


def _concatenate_digits(a: Formula, b: Formula) -> Optional[Number]:
    # & and . are arranged so that arbitrary decimals can be spelled out one
    # digit at a time; this is why texts like 04 and 00 are allowed here
    if a.value < 0 or b.value < 0 or not a.is_bare:
        return None
    if not (b.is_bare or b.symbol in ("&", ".")):
        return None
    return parse_number(a.text + b.text)


def _point(a: Formula) -> Optional[Number]:
    if not (a.is_bare or a.symbol == "&"):
        return None
    if "." in a.text:
        return None
    return parse_number("." + a.text)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

CONCATENATE_VALUES = Operator(
    name="concatenate_values",
    symbol="|",
    description="Concatenate two expressions, e.g. (2+3)|0 = 50",
    precedence=0,
    kind=OperatorKind.NONCOMMUTATIVE,
    value_fn=_concatenate_values,
    render_fn=_infix("|", bind_loose, bind_tight),
)

ADD = Operator(
    name="add",
    symbol="+",
    description="Add two expressions, e.g. 23+(4×3) = 35",
    precedence=1,
    kind=OperatorKind.COMMUTATIVE,
    value_fn=_add,
    render_fn=_infix("+", bind_loose, bind_loose),
)

SUBTRACT = Operator(
    name="subtract",
    symbol="-",
    description="Subtract an expression from another, e.g. 23-(4×3) = 11",
    precedence=1,
    kind=OperatorKind.NONCOMMUTATIVE,
    value_fn=_subtract,
    render_fn=_infix("-", bind_loose, bind_tight),
)

MULTIPLY = Operator(
    name="multiply",
    symbol="×",
    description="Multiply two expressions, e.g. 3×(4+3) = 21",
    precedence=2,
    kind=OperatorKind.COMMUTATIVE,
    value_fn=_multiply,
    render_fn=_infix("×", bind_loose, bind_loose),
)

DIVIDE = Operator(
    name="divide",
    symbol="÷",
    description="Divide an expression by another, e.g. 21÷(4+3) = 3",
    precedence=2,
    kind=OperatorKind.NONCOMMUTATIVE,
    value_fn=_divide,
    render_fn=_infix("÷", bind_loose, bind_tight),
)

POWER = Operator(
    name="power",
    symbol="^",
    description="Raise an expression to the power of another, e.g. (1+2)^(2+2) = 81",
    precedence=3,
    kind=OperatorKind.NONCOMMUTATIVE,
    value_fn=_power,
    render_fn=_infix("^", bind_tight, bind_loose),
)

SQUARE_ROOT = Operator(
    name="square_root",
    symbol="√",
    description="Take the square root of an expression, e.g. √(21+4) = 5",
    precedence=4,
    kind=OperatorKind.UNARY,
    value_fn=_square_root,
    render_fn=lambda op, a: "√" + bind_tight(op, a),
)

FACTORIAL = Operator(
    name="factorial",
    symbol="!",
    description="Take the factorial of an expression, e.g. (2+3)! = 120",
    precedence=5,
    kind=OperatorKind.UNARY,
    value_fn=_factorial,
    render_fn=lambda op, a: bind_tight(op, a) + "!",
)

NEGATE = Operator(
    name="negate",
    symbol="-",
    description="Negate an expression, e.g. -(2+3) = -5",
    precedence=6,
    kind=OperatorKind.UNARY,
    value_fn=_negate,
    render_fn=lambda op, a: "-" + bind_tight(op, a),
)

CONCATENATE_DIGITS = Operator(
    name="concatenate_digits",
    symbol="&",
    description="Concatenate two numbers, e.g. 1&23 = 123",
    precedence=7,
    kind=OperatorKind.NONCOMMUTATIVE,
    value_fn=_concatenate_digits,
    render_fn=lambda op, a, b: a.text + b.text,
)

POINT = Operator(
    name="point",
    symbol=".",
    description="Allow decimal points, e.g. 2.3, or .45 = 0.45",
    precedence=7,
    kind=OperatorKind.UNARY,
    value_fn=_point,
    render_fn=lambda op, a: "." + a.text,
)

ALL_OPERATORS: tuple[Operator, ...] = (
    ADD,
    SUBTRACT,
    MULTIPLY,
    DIVIDE,
    CONCATENATE_DIGITS,
    CONCATENATE_VALUES,
    POINT,
    FACTORIAL,
    NEGATE,
    POWER,
    SQUARE_ROOT,
)

# Symbols accepted in configuration, in display order
SYMBOLS: tuple[str, ...] = (PARENS_SYMBOL, "+", "-", "×", "÷", "&", "!", "^", "√", ".", "|")

# Keyboard-friendly spellings
SYMBOL_ALIASES: dict[str, str] = {
    "()": PARENS_SYMBOL,
    "*": "×",
    "x": "×",
    "/": "÷",
    "sqrt": "√",
}


def normalize_symbol(symbol: str) -> str:
    sym = symbol.strip()
    return SYMBOL_ALIASES.get(sym, sym)


def operators_for_symbols(symbols: Iterable[str]) -> list[Operator]:
    """Return the operators selected by ``symbols``, in catalog order.

    ``-`` selects both subtraction and negation.
    """
    wanted = {normalize_symbol(s) for s in symbols}
    return [op for op in ALL_OPERATORS if op.symbol in wanted]


def describe_symbols() -> list[tuple[str, list[str]]]:
    """Return ``(symbol, descriptions)`` pairs for every configurable symbol."""
    grouped: dict[str, list[str]] = {PARENS_SYMBOL: [PARENS_DESCRIPTION]}
    for op in ALL_OPERATORS:
        grouped.setdefault(op.symbol, []).append(op.description)
    return [(sym, grouped[sym]) for sym in SYMBOLS if sym in grouped]


__all__ = [
    "OperatorKind",
    "Operator",
    "bind_loose",
    "bind_tight",
    "FACTORIALS",
    "ADD",
    "SUBTRACT",
    "MULTIPLY",
    "DIVIDE",
    "POWER",
    "SQUARE_ROOT",
    "FACTORIAL",
    "NEGATE",
    "CONCATENATE_DIGITS",
    "CONCATENATE_VALUES",
    "POINT",
    "ALL_OPERATORS",
    "SYMBOLS",
    "SYMBOL_ALIASES",
    "normalize_symbol",
    "operators_for_symbols",
    "describe_symbols",
]
