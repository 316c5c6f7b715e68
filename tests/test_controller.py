from __future__ import annotations

from typing import Any

from number_maker.controller import RunController
from number_maker.messages import Event, Status, StepOutcome
from number_maker.settings import Options
from number_maker.verify import verify_formula

ARITHMETIC = ["+", "-", "×", "÷"]


class FakeClock:
    """Clock that moves forward by ``step`` seconds every time it is read."""

    def __init__(self, step: float = 0.0) -> None:
        self.now = 0.0
        self.step = step

    def __call__(self) -> float:
        now = self.now
        self.now += self.step
        return now


def _controller(clock: Any = None, **kwargs: Any) -> tuple[RunController, list[Event]]:
    events: list[Event] = []
    controller = RunController(events.append, clock=clock or FakeClock(), **kwargs)
    return controller, events


def _messages(events: list[Event]) -> list[str]:
    return [e.message for e in events if e.message is not None]


def _statuses(events: list[Event]) -> list[Status]:
    return [e.status for e in events if e.status is not None]


def test_end_to_end_123() -> None:
    controller, events = _controller()
    outcome = controller.run(Options(digit_string="123", symbols=ARITHMETIC))
    assert outcome is StepOutcome.DONE
    assert controller.status is Status.DONE

    pool = controller.state.pool
    assert {0, 1, 2, 4, 5, 6, 7} <= pool.solutions()
    assert len(pool.get(6).text) == 5
    for formula in pool:
        assert sorted(formula.digits) == [1, 2, 3]
        assert "(" not in formula.text
        assert verify_formula(formula)

    messages = _messages(events)
    assert messages[0] == "Starting"
    assert messages[-1] == "Finished (complete)"
    assert _statuses(events) == [Status.RUNNING, Status.DONE]
    final = [e.snapshot for e in events if e.snapshot is not None][-1]
    assert final.formula_map == pool.formula_map()
    assert final.queue_size == 0


def test_start_clears_messages_first() -> None:
    controller, events = _controller()
    controller.start(Options(digit_string="12", symbols=["+"]))
    assert events[0].clear_messages
    assert events[1].message == "Starting"


def test_pause_and_resume_give_the_same_pool() -> None:
    options = Options(digit_string="123", symbols=["( )"] + ARITHMETIC)
    straight, _ = _controller(batch_size=7)
    straight.run(options)

    controller, events = _controller(batch_size=7)
    controller.start(options)
    pauses = 0
    while controller.status is not Status.DONE:
        outcome = controller.step_batch()
        if outcome is StepOutcome.CONTINUE:
            controller.pause()
        elif outcome is StepOutcome.PAUSED:
            pauses += 1
            controller.resume()
    assert pauses > 1
    assert "Resuming" in _messages(events)
    assert controller.state.pool.formula_map() == straight.state.pool.formula_map()
    assert controller.state.processed_total == straight.state.processed_total


def test_duration_budget_pauses_run() -> None:
    options = Options(
        digit_string="123",
        symbols=["( )", "+", "×", "÷"],
        heartbeat_seconds=1,
        max_duration_seconds=2,
        min_heartbeats=1,
    )
    straight, _ = _controller()
    straight.run(options)

    controller, events = _controller(FakeClock(step=0.6), batch_size=1)
    assert controller.run(options) is StepOutcome.PAUSED
    assert controller.status is Status.PAUSED
    assert "Pausing" in _messages(events)
    assert controller.state.heartbeats >= 1

    for _ in range(100_000):
        if controller.status is Status.DONE:
            break
        controller.resume()
        controller.run()
    assert controller.status is Status.DONE
    assert controller.state.pool.formula_map() == straight.state.pool.formula_map()


def test_processing_time_excludes_pauses() -> None:
    clock = FakeClock()
    controller, _ = _controller(clock, batch_size=1)
    controller.start(Options(digit_string="123", symbols=ARITHMETIC))
    controller.pause()
    assert controller.step_batch() is StepOutcome.PAUSED
    assert controller.processing_time_ms() == 0

    clock.now = 100.0
    controller.resume()
    assert controller.step_batch() is StepOutcome.CONTINUE
    clock.now = 100.5
    controller.pause()
    assert controller.step_batch() is StepOutcome.PAUSED
    assert controller.processing_time_ms() == 500
    assert controller.snapshot().processing_time_ms == 500


def test_stop_finishes_run() -> None:
    controller, events = _controller(batch_size=1)
    controller.start(Options(digit_string="123", symbols=ARITHMETIC))
    controller.step_batch()
    controller.stop()
    assert controller.step_batch() is StepOutcome.STOPPED
    assert controller.status is Status.IDLE
    assert not controller.scheduled
    assert _messages(events)[-2:] == ["Stopping", "Finished (stopped)"]
    assert controller.step_batch() is StepOutcome.STOPPED


def test_stop_while_paused() -> None:
    controller, _ = _controller(batch_size=1)
    controller.start(Options(digit_string="123", symbols=ARITHMETIC))
    controller.pause()
    assert controller.step_batch() is StepOutcome.PAUSED
    controller.stop()
    assert controller.step_batch() is StepOutcome.STOPPED
    assert controller.status is Status.IDLE


def test_commands_ignored_when_idle() -> None:
    controller, events = _controller()
    controller.pause()
    controller.resume()
    controller.stop()
    assert controller.status is Status.IDLE
    assert events == []
    assert controller.step_batch() is StepOutcome.STOPPED


def test_invalid_start_leaves_previous_run() -> None:
    controller, events = _controller()
    controller.start(Options(digit_string="12", symbols=["+"]))
    state = controller.state
    assert not controller.start(Options(digit_string="12a"))
    assert controller.state is state
    assert _messages(events)[-1].startswith("Invalid options:")


def test_run_ids_increase() -> None:
    controller, _ = _controller()
    controller.start(Options(digit_string="12", symbols=["+"]))
    first = controller.state.run_id
    controller.start(Options(digit_string="12", symbols=["+"]))
    assert controller.state.run_id > first


def _yield_count(quiet: bool) -> int:
    options = Options(
        digit_string="123",
        symbols=ARITHMETIC,
        quiet=quiet,
        yield_seconds=0.001,
        heartbeat_seconds=100,
        max_duration_seconds=1000,
    )
    controller, events = _controller(FakeClock(step=0.01), batch_size=1)
    assert controller.run(options) is StepOutcome.DONE
    return _messages(events).count("Yielding")


def test_quiet_hides_yield_messages() -> None:
    assert _yield_count(quiet=False) > 0
    assert _yield_count(quiet=True) == 0


def test_resume_withdraws_pending_pause() -> None:
    controller, events = _controller(batch_size=1)
    controller.start(Options(digit_string="123", symbols=ARITHMETIC))
    assert controller.step_batch() is StepOutcome.CONTINUE
    controller.pause()
    controller.resume()
    assert controller.step_batch() is StepOutcome.CONTINUE
    assert controller.status is Status.RUNNING
    assert controller.scheduled
    assert "Resuming" not in _messages(events)
    assert controller.run() is StepOutcome.DONE


def test_malformed_symbols_rejected_then_corrected_start() -> None:
    controller, events = _controller()
    assert not controller.start(Options(digit_string="12", symbols=[1]))
    assert controller.state is None
    assert controller.status is Status.IDLE
    assert _messages(events)[-1].startswith("Invalid options:")
    assert controller.run(Options(digit_string="12", symbols=["+"])) is StepOutcome.DONE
    assert controller.state.pool.formula_map() == {3: "1+2"}
