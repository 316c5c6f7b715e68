from __future__ import annotations

"""Groups: the formulas of one partial solution that are not yet combined."""

from collections import Counter
from dataclasses import dataclass

from .formula import Formula, digit_to_formula
from .settings import Settings


@dataclass(frozen=True)
class Group:
    """An ordered collection of independent formulas covering all input digits.

    ``depth`` counts the operator applications that led here from the
    initial group.
    """

    formulas: tuple[Formula, ...]
    depth: int = 0

    def __len__(self) -> int:
        return len(self.formulas)


def initial_group(settings: Settings) -> Group:
    """Return the starting group: one bare formula per input digit."""
    return Group(formulas=tuple(digit_to_formula(d) for d in settings.digits), depth=0)


def group_id(group: Group, settings: Settings) -> str:
    """Canonical identity of ``group`` used for deduplication.

    Texts are sorted unless order is significant, so that groups holding the
    same formulas in a different order compare equal.
    """
    texts = [f.text for f in group.formulas]
    if not settings.preserve_order:
        texts.sort()
    return ",".join(texts)


def group_digits(group: Group) -> Counter[int]:
    """Multiset of the input digits consumed across the group."""
    counter: Counter[int] = Counter()
    for formula in group.formulas:
        counter.update(formula.digits)
    return counter


__all__ = ["Group", "initial_group", "group_id", "group_digits"]
