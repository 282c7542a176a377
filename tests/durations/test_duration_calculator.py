from src.shift_tracker.shift_tracker.durations import calculator
from src.shift_tracker.shift_tracker.durations.calculator import Elapsed, SinceNow, elapsed, gap_sequence, since_now


def test_elapsed_zero():
    assert elapsed(0, 0) == Elapsed(0, 0, 0)


def test_elapsed_splits_hours_minutes_seconds():
    assert elapsed(0, 3661) == Elapsed(1, 1, 1)
    assert elapsed(10, 70) == Elapsed(0, 1, 0)


def test_elapsed_floors_each_operand_before_subtracting():
    # floor(10.9) - floor(0.2) = 10, not round(10.7) = 11
    assert elapsed(0.2, 10.9) == Elapsed(0, 0, 10)
    assert elapsed(59.99, 60.01) == Elapsed(0, 0, 1)


def test_elapsed_format():
    assert elapsed(0, 3661).format() == "1h 1m 1s"
    assert elapsed(0, 90061).format() == "25h 1m 1s"


def test_since_now_drops_seconds():
    result = since_now(1_000, now_seconds=1_000 + 2 * 3600 + 5 * 60 + 59)
    assert result == SinceNow(2, 5)
    assert result.format() == "2h 5m"


def test_since_now_defaults_to_wall_clock(monkeypatch):
    monkeypatch.setattr(calculator.time, "time", lambda: 7_200.0)
    assert since_now(0) == SinceNow(2, 0)


def test_gap_sequence_first_entry_is_sentinel():
    assert gap_sequence([100, 150, 220]) == ["—", "0h 0m 50s", "0h 1m 10s"]


def test_gap_sequence_single_and_empty():
    assert gap_sequence([]) == []
    assert gap_sequence([42]) == ["—"]


def test_gap_sequence_accepts_generator():
    assert gap_sequence(t for t in (0, 3600)) == ["—", "1h 0m 0s"]
