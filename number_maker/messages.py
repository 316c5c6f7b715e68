"""Messages exchanged between a caller and the search engine.

Commands flow in (start, pause, resume, stop); events flow out carrying a
status change, a log message, a request to clear messages, or a progress
snapshot. ``to_dict``/``from_dict`` use the camelCase wire names.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from .settings import Options


class Status(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    DONE = "done"


class StepOutcome(Enum):
    """Result of one scheduling tick of the run controller."""

    CONTINUE = "continue"
    YIELD = "yield"
    PAUSED = "paused"
    DONE = "done"
    STOPPED = "stopped"


COMMAND_KINDS = ("start", "pause", "resume", "stop")


@dataclass(frozen=True)
class Command:
    kind: str
    options: Optional[Options] = None

    def __post_init__(self) -> None:
        if self.kind not in COMMAND_KINDS:
            raise ValueError(f"unknown command {self.kind!r}")
        if self.kind == "start" and self.options is None:
            raise ValueError("start command requires options")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Command":
        kind = data.get("command")
        if not isinstance(kind, str):
            raise ValueError("command message needs a 'command' string")
        options = None
        if kind == "start":
            raw = data.get("options")
            if not isinstance(raw, Mapping):
                raise ValueError("start command requires an 'options' object")
            options = Options.from_dict(raw)
        return cls(kind=kind, options=options)


@dataclass(frozen=True)
class Snapshot:
    """Progress of a run at one moment."""

    run_id: int
    processing_time_ms: float
    queue_size: int
    cache_size: int
    queued_total: int
    cache_hit_total: int
    processed_total: int
    solution_count: int
    solutions: frozenset[int] = frozenset()
    formula_map: Optional[dict[int, str]] = None
    processed_counts: tuple[int, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "runId": self.run_id,
            "processingTimeMs": round(self.processing_time_ms, 3),
            "queueSize": self.queue_size,
            "cacheSize": self.cache_size,
            "queuedTotal": self.queued_total,
            "cacheHitTotal": self.cache_hit_total,
            "processedTotal": self.processed_total,
            "solutionCount": self.solution_count,
            "solutions": sorted(self.solutions),
            "processedCounts": list(self.processed_counts),
        }
        if self.formula_map is not None:
            out["formulaMap"] = {str(k): v for k, v in self.formula_map.items()}
        return out


@dataclass(frozen=True)
class Event:
    status: Optional[Status] = None
    message: Optional[str] = None
    clear_messages: bool = False
    snapshot: Optional[Snapshot] = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.status is not None:
            out["status"] = self.status.value
        if self.message is not None:
            out["message"] = self.message
        if self.clear_messages:
            out["clearMessages"] = True
        if self.snapshot is not None:
            out["snapshot"] = self.snapshot.to_dict()
        return out


__all__ = [
    "Status",
    "StepOutcome",
    "COMMAND_KINDS",
    "Command",
    "Snapshot",
    "Event",
]
