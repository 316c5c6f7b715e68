"""Plain-text reporting of a run's progress and results."""
from __future__ import annotations

from typing import Mapping, Optional

import numpy as np

from .messages import Snapshot, Status
from .settings import Options

FormulaLine = tuple[int, Optional[str]]


def format_duration(ms: Optional[float]) -> str:
    """Render milliseconds as seconds with two decimals, ``--`` when unknown."""
    if not ms:
        return "--"
    return f"{ms / 1000:.2f} seconds"


def detail_lines(formula_map: Mapping[int, str], display_limit: int) -> list[FormulaLine]:
    """Every value from 0 to ``display_limit`` with its formula, if any."""
    return [(value, formula_map.get(value)) for value in range(display_limit + 1)]


def extra_lines(
    formula_map: Mapping[int, str], display_limit: int, limit: Optional[int] = None
) -> list[FormulaLine]:
    """Solved values above ``display_limit`` in ascending order, at most ``limit`` of them."""
    lines = sorted((v, f) for v, f in formula_map.items() if v > display_limit)
    return lines if limit is None else lines[:limit]


def coverage(formula_map: Mapping[int, str], display_limit: int) -> np.ndarray:
    """Boolean array whose entry ``i`` tells whether ``i`` has a formula."""
    solved = np.zeros(display_limit + 1, dtype=bool)
    values = [v for v in formula_map if 0 <= v <= display_limit]
    if values:
        solved[np.asarray(values, dtype=int)] = True
    return solved


def describe_options(options: Options) -> str:
    text = f"Making numbers with digits {' '.join(options.digit_string)}"
    text += f" and symbols {' '.join(options.symbols)}"
    if options.use_all_digits:
        text += " using all digits"
        if options.preserve_order:
            text += " in order"
    return text + f" for {options.max_duration_seconds:g} seconds"


def summary(snapshot: Snapshot, status: Status) -> list[str]:
    """Status lines describing ``snapshot``."""
    lines = [
        f"Processing time: {format_duration(snapshot.processing_time_ms)}",
        f"Queued {snapshot.queued_total:,} candidates (skipped {snapshot.cache_hit_total:,} duplicates)",
    ]
    if status is Status.RUNNING:
        lines.append(f"Currently {snapshot.queue_size:,} candidates ({snapshot.cache_size:,} cached)")
    elif status is Status.PAUSED:
        lines.append(f"Paused {snapshot.queue_size:,} candidates ({snapshot.cache_size:,} cached)")
    elif status is Status.DONE:
        lines.append("Finished")
    else:
        lines.append("Idle")
    lines.append(f"Checked {snapshot.processed_total:,} candidates")
    lines.append(f"Found {snapshot.solution_count:,} solutions")
    return lines


def render_report(
    options: Options,
    snapshot: Snapshot,
    status: Status,
    *,
    extra_limit: Optional[int] = None,
) -> str:
    """Full text report: options, summary and the formula listing."""
    lines = [describe_options(options), *summary(snapshot, status)]
    formula_map = snapshot.formula_map
    if formula_map is None:
        return "\n".join(lines)

    limit = options.display_limit
    solved = coverage(formula_map, limit)
    lines.append("")
    lines.append(f"Results for numbers from 0-{limit}:")
    for value, formula in detail_lines(formula_map, limit):
        lines.append(f"{value}: {formula}" if formula else f"{value}:")

    extra_count = len(formula_map) - int(solved.sum())
    if extra_count > 0:
        lines.append("")
        lines.append(f"Solutions for numbers > {limit}:")
        shown = extra_lines(formula_map, limit, extra_limit)
        previous = limit
        for value, formula in shown:
            if value != previous + 1:
                lines.append("...")
            lines.append(f"{value}: {formula}")
            previous = value
        if extra_count > len(shown):
            lines.append(f"and {extra_count - len(shown)} more")
        elif status is Status.DONE:
            lines.append(f"Those are all the solutions up to {options.value_limit:,}.")
        else:
            lines.append("Those are all the solutions found so far.")
    return "\n".join(lines)


__all__ = [
    "format_duration",
    "detail_lines",
    "extra_lines",
    "coverage",
    "describe_options",
    "summary",
    "render_report",
]
