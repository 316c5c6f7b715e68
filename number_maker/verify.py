from __future__ import annotations

"""Independent check of rendered formulas using exact arithmetic.

The search works in floating point and snaps near-integers, so every reported
solution can be re-read from its text and evaluated exactly with ``sympy``.
The grammar mirrors the renderer's bracketing rules, loosest first::

    bar     := sum ('|' sum)*
    sum     := product (('+' | '-') product)*
    product := power (('×' | '÷') power)*
    power   := prefix ('^' power)?
    prefix  := ('√' | '-') prefix | postfix
    postfix := primary '!'*
    primary := NUMBER | '(' bar ')'
"""

import math
import re
from fractions import Fraction
from typing import Optional

import sympy as sp

from .constants import EPSILON
from .formula import Formula, number_text

_TOKEN = re.compile(r"\s*(?:(\d*\.\d+|\d+)|(.))")


class FormulaSyntaxError(ValueError):
    """Raised when a formula text cannot be parsed."""


def _tokenize(text: str) -> list[str]:
    tokens: list[str] = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        match = _TOKEN.match(text, pos)
        if match is None:  # pragma: no cover - the pattern matches any character
            break
        number, symbol = match.groups()
        tokens.append(number if number is not None else symbol)
        pos = match.end()
    return tokens


def _decimal(token: str) -> sp.Rational:
    whole, _, frac = token.partition(".")
    scale = 10 ** len(frac)
    return sp.Rational(int(whole or "0") * scale + int(frac or "0"), scale)


def _concatenate(a: sp.Expr, b: sp.Expr) -> sp.Rational:
    fraction = Fraction(_spell(a) + _spell(b))
    return sp.Rational(fraction.numerator, fraction.denominator)


def _spell(value: sp.Expr) -> str:
    if value.is_integer:
        return str(int(value))
    return number_text(float(value))


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = _tokenize(text)
        self.pos = 0

    def peek(self) -> Optional[str]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def take(self) -> str:
        token = self.peek()
        if token is None:
            raise FormulaSyntaxError(f"unexpected end of {self.text!r}")
        self.pos += 1
        return token

    def expect(self, token: str) -> None:
        got = self.take()
        if got != token:
            raise FormulaSyntaxError(f"expected {token!r} in {self.text!r}, got {got!r}")

    def parse(self) -> sp.Expr:
        value = self.bar()
        if self.peek() is not None:
            raise FormulaSyntaxError(f"unexpected {self.peek()!r} in {self.text!r}")
        return value

    def bar(self) -> sp.Expr:
        value = self.sum()
        while self.peek() == "|":
            self.take()
            value = _concatenate(value, self.sum())
        return value

    def sum(self) -> sp.Expr:
        value = self.product()
        while self.peek() in ("+", "-"):
            if self.take() == "+":
                value = value + self.product()
            else:
                value = value - self.product()
        return value

    def product(self) -> sp.Expr:
        value = self.power()
        while self.peek() in ("×", "÷"):
            if self.take() == "×":
                value = value * self.power()
            else:
                divisor = self.power()
                if divisor == 0:
                    raise FormulaSyntaxError(f"division by zero in {self.text!r}")
                value = value / divisor
        return value

    def power(self) -> sp.Expr:
        base = self.prefix()
        if self.peek() == "^":
            self.take()
            return sp.Pow(base, self.power())
        return base

    def prefix(self) -> sp.Expr:
        token = self.peek()
        if token == "√":
            self.take()
            return sp.sqrt(self.prefix())
        if token == "-":
            self.take()
            return -self.prefix()
        return self.postfix()

    def postfix(self) -> sp.Expr:
        value = self.primary()
        while self.peek() == "!":
            self.take()
            value = sp.factorial(value)
        return value

    def primary(self) -> sp.Expr:
        token = self.take()
        if token == "(":
            value = self.bar()
            self.expect(")")
            return value
        if token[0].isdigit() or token[0] == ".":
            return _decimal(token)
        raise FormulaSyntaxError(f"unexpected {token!r} in {self.text!r}")


def evaluate_text(text: str) -> sp.Expr:
    """Evaluate formula ``text`` exactly, e.g. ``"√(2+2)^3"`` → ``8``."""
    return _Parser(text).parse()


def verify_formula(formula: Formula) -> bool:
    """True when the text of ``formula`` evaluates to its recorded value."""
    try:
        exact = complex(sp.N(evaluate_text(formula.text), 30))
    except (TypeError, ValueError):
        return False
    if abs(exact.imag) > EPSILON:
        return False
    value = float(formula.value)
    return math.isclose(exact.real, value, rel_tol=EPSILON, abs_tol=EPSILON)


__all__ = ["FormulaSyntaxError", "evaluate_text", "verify_formula"]
