"""Coverage chart of the values a run has solved."""
from __future__ import annotations

import math
import os
import tempfile
import warnings
from pathlib import Path
from typing import Mapping, Optional

import numpy as np

from .report import coverage

__all__ = ["render_coverage"]

_COLUMNS = 10
# Numbers are written into the cells only while they stay legible
_MAX_LABELLED = 200


def _select_backend() -> None:
    import matplotlib  # type: ignore

    try:
        backend = matplotlib.get_backend().lower()
    except Exception:
        backend = ""
    if backend in {"agg", "tkagg"}:
        return
    env_backend = os.environ.get("MPLBACKEND", "").lower()
    if bool(os.environ.get("DISPLAY")) or env_backend == "tkagg":
        try:
            matplotlib.use("TkAgg")
            return
        except Exception as exc:  # pragma: no cover - depends on system backend
            warnings.warn(
                f"Preferred GUI backend 'TkAgg' unavailable; falling back to 'Agg': {exc}",
                RuntimeWarning,
            )
    matplotlib.use("Agg")


def render_coverage(
    formula_map: Mapping[int, str],
    display_limit: int,
    title: Optional[str] = None,
    path: Optional[str] = None,
) -> str:
    """Draw solved (green) and unsolved (red) values 0..``display_limit`` as a grid.

    The PNG goes to ``path`` or, when omitted, to a new temp file. Returns the
    file path.
    """
    _select_backend()
    import matplotlib.pyplot as plt  # type: ignore
    from matplotlib.colors import ListedColormap  # type: ignore

    solved = coverage(formula_map, display_limit)
    rows = math.ceil(solved.size / _COLUMNS)
    # -1 pads the last row, 0 is unsolved, 1 is solved
    cells = np.full(rows * _COLUMNS, -1, dtype=int)
    cells[: solved.size] = solved.astype(int)
    grid = cells.reshape(rows, _COLUMNS)

    fig, ax = plt.subplots(figsize=(6, max(2.0, rows * 0.45)))
    cmap = ListedColormap(["white", "#e57373", "#81c784"])
    ax.imshow(grid, cmap=cmap, vmin=-1, vmax=1, aspect="auto")

    if solved.size <= _MAX_LABELLED:
        for value in range(solved.size):
            row, col = divmod(value, _COLUMNS)
            ax.text(col, row, str(value), ha="center", va="center", fontsize=8)

    ax.set_xticks([])
    ax.set_yticks(range(rows))
    ax.set_yticklabels([str(r * _COLUMNS) for r in range(rows)])
    found = int(solved.sum())
    ax.set_title(title or f"Solved {found} of {solved.size} values")

    if path is None:
        fd, path = tempfile.mkstemp(suffix=".png")
        os.close(fd)
    png_path = Path(path)
    fig.savefig(png_path, format="png")
    plt.close(fig)
    return str(png_path)
