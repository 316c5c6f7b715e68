from __future__ import annotations

"""Solution pool: the simplest known formula for each whole number."""

import re
from typing import Iterator, Optional

from .formula import Formula, is_whole
from .group import Group
from .settings import Settings

# A numeral that starts with 0 and carries on with more digits, e.g. 02
LEADING_ZERO = re.compile(r"(?<!\d)0\d")


class SolutionPool:
    """Best formula found so far for each non-negative integer.

    A formula replaces the current entry only when it uses fewer digits, or
    the same number of digits and shorter text. Entries are never removed.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._formulas: dict[int, Formula] = {}

    def qualifies(self, formula: Formula) -> bool:
        value = formula.value
        if not is_whole(value) or value < 0:
            return False
        if abs(value) > self.settings.value_limit:
            return False
        if not self.settings.allow_parens and "(" in formula.text:
            return False
        return not LEADING_ZERO.search(formula.text)

    def offer(self, formula: Formula) -> bool:
        """Add ``formula`` if it qualifies and beats the current entry.

        Returns ``True`` when the pool changed.
        """
        if not self.qualifies(formula):
            return False
        key = int(formula.value)
        old = self._formulas.get(key)
        if old is not None and not _simpler(formula, old):
            return False
        self._formulas[key] = formula
        return True

    def offer_group(self, group: Group) -> int:
        """Offer the formulas of ``group`` that count as solutions.

        When every digit must be used only a fully combined group counts.
        Returns the number of entries added or improved.
        """
        if self.settings.use_all_digits and len(group.formulas) != 1:
            return 0
        return sum(1 for f in group.formulas if self.offer(f))

    def get(self, value: int) -> Optional[Formula]:
        return self._formulas.get(value)

    def solutions(self) -> frozenset[int]:
        return frozenset(self._formulas)

    def formula_map(self) -> dict[int, str]:
        return {value: self._formulas[value].text for value in sorted(self._formulas)}

    def __contains__(self, value: object) -> bool:
        return value in self._formulas

    def __iter__(self) -> Iterator[Formula]:
        for value in sorted(self._formulas):
            yield self._formulas[value]

    def __len__(self) -> int:
        return len(self._formulas)


def _simpler(new: Formula, old: Formula) -> bool:
    if len(new.digits) != len(old.digits):
        return len(new.digits) < len(old.digits)
    return len(new.text) < len(old.text)


__all__ = ["LEADING_ZERO", "SolutionPool"]
