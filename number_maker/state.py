from __future__ import annotations

"""Mutable state of one search run."""

from dataclasses import dataclass, field
from typing import Optional

from .frontier import Frontier
from .group import initial_group
from .pool import SolutionPool
from .settings import Settings


@dataclass
class RunState:
    """Everything a run needs to pick up exactly where it left off.

    ``processing_time_ms`` accumulates the time of finished running segments;
    ``current_start`` marks the start of the segment in progress, if any.
    """

    run_id: int
    frontier: Frontier
    pool: SolutionPool

    running: bool = True
    paused: bool = False

    # work done
    processing_time_ms: float = 0.0
    processed_total: int = 0
    processed_counts: list[int] = field(default_factory=list)
    heartbeats: int = 0

    # timing of the current running segment
    current_start: Optional[float] = None
    next_heartbeat: Optional[int] = None
    next_yield: Optional[int] = None

    def count_processed(self, depth: int) -> None:
        self.processed_total += 1
        while len(self.processed_counts) <= depth:
            self.processed_counts.append(0)
        self.processed_counts[depth] += 1


def build_initial_state(settings: Settings, run_id: int) -> RunState:
    """Fresh state whose frontier holds the single all-digits group."""
    frontier = Frontier(settings)
    frontier.push(initial_group(settings))
    return RunState(run_id=run_id, frontier=frontier, pool=SolutionPool(settings))


__all__ = ["RunState", "build_initial_state"]
