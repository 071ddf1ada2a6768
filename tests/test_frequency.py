from __future__ import annotations

from logtally.stream.frequency import FrequencyTable, RunCounters


def test_increment_creates_then_adds() -> None:
    table = FrequencyTable()
    assert table.increment("a") == 1
    assert table.increment("a") == 2
    assert table.get("a") == 2
    assert table.get("missing") == 0


def test_size_counts_distinct_keys() -> None:
    table = FrequencyTable()
    for key in ["a", "b", "a", "c"]:
        table.increment(key)
    assert table.size() == 3
    assert len(table) == 3
    assert table.total() == 4
    assert "b" in table


def test_snapshot_is_insertion_ordered_copy() -> None:
    table = FrequencyTable()
    table.increment("z")
    table.increment("a")
    snap = table.snapshot()
    table.increment("z")
    assert snap == [("z", 1), ("a", 1)]


def test_run_counters_start_at_zero() -> None:
    counters = RunCounters(start_time=100.0)
    assert counters.total_lines == 0
    assert counters.hitcount == 0
    assert counters.restcount == 0
    assert counters.lines_since_report == 0
    assert counters.last_time_report == 100.0


def test_lookup_of_missing_key_does_not_add_it() -> None:
    table = FrequencyTable()
    table.increment("a")
    assert table.get("b") == 0
    assert "b" not in table
    assert table.size() == 1
    assert table.snapshot() == [("a", 1)]
