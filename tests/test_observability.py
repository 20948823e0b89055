"""Tests for tock.observability — event log and timeline collector."""

import threading

from tock._errors import FilterEvaluationError
from tock.observability.collector import TimelineCollector
from tock.observability.events import (
    CommandsAppended,
    ExportSkipped,
    ExportWritten,
    FilterFailed,
    FilterRecomputed,
    StoreCleared,
    now_ns,
)
from tock.observability.log import EventLog


def _appended(count: int = 1, *, timestamp_ns: int | None = None) -> CommandsAppended:
    return CommandsAppended(
        count=count,
        store_size=count,
        timestamp_ns=timestamp_ns if timestamp_ns is not None else now_ns(),
    )


# ---------------------------------------------------------------------------
# EventLog
# ---------------------------------------------------------------------------


class TestEventLog:
    """Tests for the event log store."""

    def test_append_and_len(self) -> None:
        log = EventLog()
        assert len(log) == 0
        log.append(_appended())
        assert len(log) == 1

    def test_max_events_enforced(self) -> None:
        log = EventLog(max_events=5)
        for i in range(10):
            log.append(_appended(i))
        assert len(log) == 5
        assert log.recent(1)[0].count == 9

    def test_recent(self) -> None:
        log = EventLog()
        for i in range(5):
            log.append(_appended(i))
        recent = log.recent(3)
        assert [e.count for e in recent] == [2, 3, 4]

    def test_query_by_type_newest_first(self) -> None:
        log = EventLog()
        log.append(_appended(1))
        log.append(StoreCleared(removed=1, timestamp_ns=now_ns()))
        log.append(_appended(2))

        results = log.query(event_type=CommandsAppended)
        assert [r.count for r in results] == [2, 1]

    def test_query_since(self) -> None:
        log = EventLog()
        log.append(_appended(1, timestamp_ns=100))
        log.append(_appended(2, timestamp_ns=200))
        assert [r.count for r in log.query(since_ns=150)] == [2]

    def test_query_limit(self) -> None:
        log = EventLog()
        for i in range(10):
            log.append(_appended(i))
        assert len(log.query(limit=3)) == 3

    def test_clear(self) -> None:
        log = EventLog()
        for i in range(3):
            log.append(_appended(i))
        assert log.clear() == 3
        assert len(log) == 0

    def test_stats(self) -> None:
        log = EventLog(max_events=50)
        log.append(_appended())
        log.append(StoreCleared(removed=1, timestamp_ns=now_ns()))

        stats = log.stats()
        assert stats["total"] == 2
        assert stats["max_events"] == 50
        assert stats["by_type"] == {"CommandsAppended": 1, "StoreCleared": 1}

    def test_query_by_search(self) -> None:
        log = EventLog()
        for search in ("users", "log", "users"):
            log.append(FilterRecomputed(
                search=search, visible=1, total=2, duration_ms=0.1, timestamp_ns=now_ns(),
            ))
        log.append(_appended())
        assert len(log.query(search="users")) == 2

    def test_latest(self) -> None:
        log = EventLog()
        assert log.latest(StoreCleared) is None
        log.append(StoreCleared(removed=1, timestamp_ns=now_ns()))
        log.append(StoreCleared(removed=2, timestamp_ns=now_ns()))
        assert log.latest(StoreCleared).removed == 2

    def test_stats_totals(self) -> None:
        log = EventLog()
        log.append(ExportWritten(
            kind="raw_log", path="/a", count=1, size_bytes=10, timestamp_ns=now_ns(),
        ))
        log.append(ExportWritten(
            kind="api_calls", path="/b", count=1, size_bytes=5, timestamp_ns=now_ns(),
        ))
        log.append(FilterFailed(
            search="x", hidden_types=(), command_type="log", error="E", timestamp_ns=now_ns(),
        ))
        stats = log.stats()
        assert stats["bytes_exported"] == 15
        assert stats["filter_failures"] == 1

    def test_thread_safety(self) -> None:
        """Concurrent appends should not lose events."""
        log = EventLog(max_events=50_000)
        errors: list[Exception] = []

        def worker() -> None:
            try:
                for i in range(1000):
                    log.append(_appended(i))
            except Exception as exc:
                errors.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        assert len(log) == 10_000


# ---------------------------------------------------------------------------
# TimelineCollector
# ---------------------------------------------------------------------------


class TestTimelineCollector:
    """Tests for the timeline collector."""

    def test_default_log(self) -> None:
        assert len(TimelineCollector().log) == 0

    def test_shared_log(self) -> None:
        log = EventLog()
        TimelineCollector(log).record_clear(4)
        assert log.query(event_type=StoreCleared)[0].removed == 4

    def test_record_append(self) -> None:
        collector = TimelineCollector()
        collector.record_append(3, store_size=10)
        (event,) = collector.log.query(event_type=CommandsAppended)
        assert (event.count, event.store_size) == (3, 10)

    def test_record_recompute(self) -> None:
        collector = TimelineCollector()
        collector.record_recompute("users", visible=2, total=5, duration_ms=0.5)
        (event,) = collector.log.query(event_type=FilterRecomputed)
        assert event.search == "users"
        assert (event.visible, event.total) == (2, 5)

    def test_record_filter_failure_uses_cause(self) -> None:
        collector = TimelineCollector()
        try:
            try:
                raise KeyError("boom")
            except KeyError as inner:
                raise FilterEvaluationError("Search failed", command_type="x") from inner
        except FilterEvaluationError as exc:
            collector.record_filter_failure("q", frozenset({"b", "a"}), exc, command_type="x")

        (event,) = collector.log.query(event_type=FilterFailed)
        assert event.hidden_types == ("a", "b")
        assert event.command_type == "x"
        assert event.error.startswith("KeyError")

    def test_record_export(self) -> None:
        collector = TimelineCollector()
        collector.record_export("raw_log", "/tmp/a.json", count=4, size_bytes=120)
        (event,) = collector.log.query(event_type=ExportWritten)
        assert event.kind == "raw_log"
        assert event.size_bytes == 120

    def test_record_export_skipped(self) -> None:
        collector = TimelineCollector()
        collector.record_export_skipped("api_calls", "empty")
        (event,) = collector.log.query(event_type=ExportSkipped)
        assert (event.kind, event.reason, event.detail) == ("api_calls", "empty", "")
