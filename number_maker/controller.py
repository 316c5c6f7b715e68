from __future__ import annotations

"""Run controller: start, pause, resume and stop a time-sliced search.

The controller owns one :class:`RunState` at a time and advances it in
batches through :meth:`RunController.step_batch`. The host decides how to
schedule those calls (a plain loop, a worker thread, an event loop); each call
reports whether to carry on straight away, to yield to other work first, or
that the run has paused, finished or been stopped.

Timing uses two clocks measured from the start of the current running
segment. Heartbeats emit progress snapshots and, once ``min_heartbeats`` have
passed, pause the run when it would exceed ``max_duration_seconds``. The yield
timer only asks the host to let other work run; it changes nothing.
"""

import logging
import math
import time
from typing import Callable, Optional

from .constants import GROUPS_PER_HEARTBEAT
from .expansion import evolve_group
from .messages import Command, Event, Snapshot, Status, StepOutcome
from .settings import Options, OptionsError, Settings, build_settings
from .state import RunState, build_initial_state

EventSink = Callable[[Event], None]


class RunController:
    """Single-threaded state machine driving one search run at a time."""

    def __init__(
        self,
        emit: Optional[EventSink] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        batch_size: int = GROUPS_PER_HEARTBEAT,
    ) -> None:
        self.emit: EventSink = emit if emit is not None else (lambda event: None)
        self.clock = clock
        self.batch_size = max(1, int(batch_size))
        self.settings: Optional[Settings] = None
        self.state: Optional[RunState] = None
        self.scheduled = False
        self.logger = logging.getLogger(__name__)
        self._status = Status.IDLE
        self._reported: Optional[Status] = None
        self._last_run_id = 0

    # ------------------------------------------------------------------
    # Commands
    @property
    def status(self) -> Status:
        return self._status

    def handle(self, command: Command) -> None:
        if command.kind == "start":
            assert command.options is not None
            self.start(command.options)
        elif command.kind == "pause":
            self.pause()
        elif command.kind == "resume":
            self.resume()
        elif command.kind == "stop":
            self.stop()

    def start(self, options: Options) -> bool:
        """Begin a new run, discarding any previous one.

        Returns ``False`` (and leaves the controller as it was) when the
        options are invalid; the reason is sent as a message.
        """
        self._post(Event(clear_messages=True))
        try:
            settings = build_settings(options)
        except OptionsError as exc:
            self.logger.warning("[number-maker] invalid options: %s", exc)
            self._post(Event(message=f"Invalid options: {exc}"))
            return False
        self.settings = settings
        self.state = build_initial_state(settings, self._next_run_id())
        self._status = Status.IDLE
        self._reported = None
        self._message("Starting")
        self._show_snapshot()
        self.scheduled = True
        return True

    def pause(self) -> None:
        if self.state is None or not self.state.running or self._status is Status.PAUSED:
            self.logger.info("[number-maker] pause ignored while %s", self._status.value)
            return
        self.state.paused = True

    def resume(self) -> None:
        """Clear the pause flag; reschedule when the run has actually paused."""
        if self.state is None or not self.state.running or not self.state.paused:
            self.logger.info("[number-maker] resume ignored while %s", self._status.value)
            return
        self.state.paused = False
        # a pause still waiting for the batch boundary is simply withdrawn
        if self._status is Status.PAUSED:
            self._message("Resuming")
            self.scheduled = True

    def stop(self) -> None:
        if self.state is None or not self.state.running:
            self.logger.info("[number-maker] stop ignored while %s", self._status.value)
            return
        self.state.running = False
        self.state.paused = False
        self._message("Stopping")
        # the stop itself is processed by the next step
        self.scheduled = True

    # ------------------------------------------------------------------
    # Scheduling
    def step_batch(self) -> StepOutcome:
        """Advance the run by one batch of groups and report what happened."""
        state, settings = self.state, self.settings
        if not self.scheduled or state is None or settings is None:
            return self._resting_outcome()
        if not state.running:
            return self._finish(StepOutcome.STOPPED)
        if state.paused:
            return self._pause()

        self._set_status(Status.RUNNING)
        self._start_processing()
        for _ in range(self.batch_size):
            if not state.frontier:
                break
            self._process_next_group(state, settings)
        if not state.frontier:
            return self._finish(StepOutcome.DONE)
        return self._heartbeat(state, settings)

    def run(self, options: Optional[Options] = None) -> StepOutcome:
        """Drive the run from this thread until it pauses, finishes or stops."""
        if options is not None and not self.start(options):
            return StepOutcome.STOPPED
        outcome = self._resting_outcome()
        while self.scheduled:
            outcome = self.step_batch()
        return outcome

    def _process_next_group(self, state: RunState, settings: Settings) -> None:
        group = state.frontier.pop()
        state.pool.offer_group(group)
        state.frontier.extend(evolve_group(group, settings))
        state.count_processed(group.depth)

    def _heartbeat(self, state: RunState, settings: Settings) -> StepOutcome:
        now = self._now_ms()
        start = state.current_start if state.current_start is not None else now
        elapsed = now - start

        if state.next_heartbeat is None:
            state.next_heartbeat = 1
        if start + settings.heartbeat_ms * state.next_heartbeat < now:
            state.heartbeats += 1
            self.logger.debug(
                "[number-maker] heartbeat %d: processed=%d queue=%d cache=%d solutions=%d",
                state.heartbeats,
                state.processed_total,
                len(state.frontier),
                state.frontier.cache_size,
                len(state.pool),
            )
            self._show_snapshot()
            state.next_heartbeat = math.ceil(elapsed / settings.heartbeat_ms)
            # after enough heartbeats, pause if the next one would run over time
            if settings.min_heartbeats < state.next_heartbeat:
                if state.next_heartbeat * settings.heartbeat_seconds > settings.max_duration_seconds:
                    return self._pause()

        if state.next_yield is None:
            state.next_yield = 1
        if start + settings.yield_ms * state.next_yield < now:
            state.next_yield = math.ceil(elapsed / settings.yield_ms)
            self._message("Yielding", chatty=True)
            return StepOutcome.YIELD
        return StepOutcome.CONTINUE

    def _pause(self) -> StepOutcome:
        assert self.state is not None
        self._stop_processing()
        self.state.paused = True
        self.scheduled = False
        self._message("Pausing")
        self._show_snapshot(include_formulas=True)
        self._set_status(Status.PAUSED)
        return StepOutcome.PAUSED

    def _finish(self, outcome: StepOutcome) -> StepOutcome:
        assert self.state is not None
        self._stop_processing()
        self.scheduled = False
        self.state.running = False
        if outcome is StepOutcome.DONE:
            self._message("Finished (complete)")
            self._show_snapshot(include_formulas=True)
            self._set_status(Status.DONE)
        else:
            self._message("Finished (stopped)")
            self._show_snapshot(include_formulas=True)
            self._set_status(Status.IDLE)
        return outcome

    def _resting_outcome(self) -> StepOutcome:
        if self._status is Status.DONE:
            return StepOutcome.DONE
        if self._status is Status.PAUSED:
            return StepOutcome.PAUSED
        return StepOutcome.STOPPED

    # ------------------------------------------------------------------
    # Timing
    def _now_ms(self) -> float:
        return self.clock() * 1000.0

    def _next_run_id(self) -> int:
        run_id = max(int(time.time() * 1000), self._last_run_id + 1)
        self._last_run_id = run_id
        return run_id

    def processing_time_ms(self) -> float:
        """Time spent running so far, excluding paused intervals."""
        if self.state is None:
            return 0.0
        current = self.state.current_start
        delta = self._now_ms() - current if current is not None else 0.0
        return self.state.processing_time_ms + delta

    def _start_processing(self) -> None:
        assert self.state is not None
        if self.state.current_start is None:
            self.state.current_start = self._now_ms()
            self.state.next_heartbeat = 1
            self.state.next_yield = 1

    def _stop_processing(self) -> None:
        assert self.state is not None
        self.state.processing_time_ms = self.processing_time_ms()
        self.state.current_start = None
        self.state.next_heartbeat = None
        self.state.next_yield = None

    # ------------------------------------------------------------------
    # Output
    def snapshot(self, include_formulas: bool = False) -> Optional[Snapshot]:
        state = self.state
        if state is None:
            return None
        return Snapshot(
            run_id=state.run_id,
            processing_time_ms=self.processing_time_ms(),
            queue_size=len(state.frontier),
            cache_size=state.frontier.cache_size,
            queued_total=state.frontier.queued_total,
            cache_hit_total=state.frontier.cache_hit_total,
            processed_total=state.processed_total,
            solution_count=len(state.pool),
            solutions=state.pool.solutions(),
            formula_map=state.pool.formula_map() if include_formulas else None,
            processed_counts=tuple(state.processed_counts),
        )

    def _show_snapshot(self, include_formulas: bool = False) -> None:
        snap = self.snapshot(include_formulas)
        if snap is not None:
            self._post(Event(snapshot=snap))

    def _message(self, text: str, *, chatty: bool = False) -> None:
        if chatty:
            self.logger.debug("[number-maker] %s", text)
            if self.settings is not None and self.settings.quiet:
                return
        else:
            self.logger.info("[number-maker] %s", text)
        self._post(Event(message=text))

    def _set_status(self, status: Status) -> None:
        self._status = status
        if status is self._reported:
            return
        self._reported = status
        self._post(Event(status=status))

    def _post(self, event: Event) -> None:
        self.emit(event)


__all__ = ["EventSink", "RunController"]
