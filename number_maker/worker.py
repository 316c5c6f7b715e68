"""Background worker hosting a :class:`RunController` on its own thread.

Commands and events cross the thread boundary only through queues, in order.
Between batches the worker handles every pending command, so a pause or stop
takes effect at the next batch boundary and never in the middle of expanding
a group.
"""
from __future__ import annotations

import logging
import queue
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from .controller import RunController
from .messages import Command, Event, Status
from .settings import Options

_SHUTDOWN = object()


class SolverWorker:
    """Runs searches on a single background thread.

    Events are queued for :meth:`next_event` and, when ``on_event`` is given,
    also passed to it from the worker thread.
    """

    def __init__(
        self,
        on_event: Optional[Callable[[Event], None]] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.logger = logging.getLogger(__name__)
        self._on_event = on_event
        self._commands: queue.Queue[Any] = queue.Queue()
        self._events: queue.Queue[Event] = queue.Queue()
        self.controller = RunController(self._publish, clock=clock)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="number-maker")
        self._future = self._executor.submit(self._loop)
        self._closed = False

    # ------------------------------------------------------------------
    # Command channel
    def post(self, command: Union[Command, Mapping[str, Any]]) -> None:
        if self._closed:
            raise RuntimeError("worker is closed")
        if not isinstance(command, Command):
            command = Command.from_dict(command)
        self._commands.put(command)

    def start(self, options: Options) -> None:
        self.post(Command("start", options))

    def pause(self) -> None:
        self.post(Command("pause"))

    def resume(self) -> None:
        self.post(Command("resume"))

    def stop(self) -> None:
        self.post(Command("stop"))

    # ------------------------------------------------------------------
    # Event channel
    def next_event(self, timeout: Optional[float] = None) -> Optional[Event]:
        try:
            return self._events.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain_events(self) -> list[Event]:
        events: list[Event] = []
        while True:
            try:
                events.append(self._events.get_nowait())
            except queue.Empty:
                return events

    def wait_for(self, statuses: Iterable[Status], timeout: float = 30.0) -> list[Event]:
        """Collect events until one reports a status in ``statuses``.

        Raises ``TimeoutError`` when none arrives within ``timeout`` seconds.
        """
        wanted = set(statuses)
        deadline = time.monotonic() + timeout
        seen: list[Event] = []
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TimeoutError(f"no status in {sorted(s.value for s in wanted)} within {timeout}s")
            event = self.next_event(timeout=remaining)
            if event is None:
                continue
            seen.append(event)
            if event.status in wanted:
                return seen

    def _publish(self, event: Event) -> None:
        if self._on_event is not None:
            self._on_event(event)
        self._events.put(event)

    # ------------------------------------------------------------------
    # Worker thread
    def _next_command(self) -> Any:
        """Next queued command, or ``None`` when a scheduled run should step."""
        if not self.controller.scheduled:
            return self._commands.get()
        try:
            return self._commands.get_nowait()
        except queue.Empty:
            return None

    def _loop(self) -> None:
        controller = self.controller
        while True:
            command = self._next_command()
            if command is _SHUTDOWN:
                self.logger.debug("[number-maker] worker shutting down")
                return
            try:
                if command is None:
                    controller.step_batch()
                else:
                    controller.handle(command)
            except Exception as exc:
                # keep serving commands; the failed run is no longer scheduled
                self.logger.exception("[number-maker] worker error")
                controller.scheduled = False
                self._publish(Event(message=f"Error: {exc}"))

    def close(self, timeout: Optional[float] = 10.0) -> None:
        """Abandon any run and stop the worker thread."""
        if self._closed:
            return
        self._closed = True
        if self.controller.state is not None and self.controller.state.running:
            self._commands.put(Command("stop"))
        self._commands.put(_SHUTDOWN)
        try:
            self._future.result(timeout=timeout)
        finally:
            self._executor.shutdown(wait=False)

    def __enter__(self) -> "SolverWorker":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


__all__ = ["SolverWorker"]
