from __future__ import annotations

"""Expansion engine: every group reachable by one operator application."""

import math
from collections import Counter
from typing import Iterable

from .formula import Formula
from .group import Group
from .operators import Operator
from .settings import Settings


def _within_limit(formulas: Iterable[Formula], settings: Settings) -> list[Formula]:
    return [
        f
        for f in formulas
        if math.isfinite(f.value) and abs(f.value) <= settings.value_limit
    ]


def apply_unary_operators(
    operators: Iterable[Operator], formula: Formula, settings: Settings
) -> list[Formula]:
    """Results of applying each unary operator to ``formula``."""
    results: list[Formula] = []
    for op in operators:
        results.extend(op.apply_all(formula))
    return _within_limit(results, settings)


def apply_binary_operators(
    operators: Iterable[Operator], a: Formula, b: Formula, settings: Settings
) -> list[Formula]:
    """Results of applying each binary operator to the pair ``(a, b)``.

    Pairs that would consume digits the input doesn't have yield nothing.
    """
    combined = Counter(a.digits) + Counter(b.digits)
    if combined - Counter(settings.digits):
        return []
    results: list[Formula] = []
    for op in operators:
        results.extend(op.apply_all(a, b, settings.preserve_order))
    return _within_limit(results, settings)


def evolve_group(group: Group, settings: Settings) -> list[Group]:
    """Return the groups produced by applying each operator once.

    Unary operators are applied to every formula in place. Binary operators
    combine every pair of formulas, or only neighbouring ones when order is
    preserved; the result takes the place of the first formula of the pair.
    """
    formulas = group.formulas
    depth = group.depth + 1
    children: list[Group] = []

    for i, formula in enumerate(formulas):
        before, after = formulas[:i], formulas[i + 1:]
        for result in apply_unary_operators(settings.unary_operators, formula, settings):
            children.append(Group(formulas=before + (result,) + after, depth=depth))

    count = len(formulas)
    for i in range(count - 1):
        prefix = formulas[:i]
        a = formulas[i]
        partners = [i + 1] if settings.preserve_order else range(i + 1, count)
        for j in partners:
            rest = formulas[i + 1:j] + formulas[j + 1:]
            for result in apply_binary_operators(settings.binary_operators, a, formulas[j], settings):
                children.append(Group(formulas=prefix + (result,) + rest, depth=depth))

    return children


__all__ = ["apply_unary_operators", "apply_binary_operators", "evolve_group"]
