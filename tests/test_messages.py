import pytest

from number_maker.messages import Command, Event, Snapshot, Status


def test_start_command_from_dict() -> None:
    command = Command.from_dict(
        {"command": "start", "options": {"digitString": "12", "useAllDigits": False, "symbols": ["+"]}}
    )
    assert command.kind == "start"
    assert command.options is not None
    assert command.options.digit_string == "12"
    assert command.options.use_all_digits is False


def test_simple_command_from_dict() -> None:
    assert Command.from_dict({"command": "pause"}) == Command("pause")


@pytest.mark.parametrize(
    "data",
    [{"command": "jump"}, {"command": "start"}, {}, {"command": "start", "options": "fast"}],
)
def test_bad_commands(data: dict) -> None:
    with pytest.raises(ValueError):
        Command.from_dict(data)


def test_snapshot_to_dict_uses_wire_names() -> None:
    snap = Snapshot(
        run_id=7,
        processing_time_ms=12.34567,
        queue_size=3,
        cache_size=9,
        queued_total=10,
        cache_hit_total=4,
        processed_total=7,
        solution_count=2,
        solutions=frozenset({5, 1}),
        formula_map={1: "3-2", 5: "2+3"},
        processed_counts=(1, 6),
    )
    data = snap.to_dict()
    assert data["runId"] == 7
    assert data["processingTimeMs"] == 12.346
    assert data["solutions"] == [1, 5]
    assert data["formulaMap"] == {"1": "3-2", "5": "2+3"}
    assert data["processedCounts"] == [1, 6]


def test_event_to_dict_skips_empty_fields() -> None:
    assert Event(status=Status.PAUSED).to_dict() == {"status": "paused"}
    assert Event(message="Starting", clear_messages=True).to_dict() == {
        "message": "Starting",
        "clearMessages": True,
    }
