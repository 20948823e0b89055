"""Event log — bounded, queryable history of timeline activity.

Holds the most recent ``TimelineEvent`` objects (oldest dropped first) so
a session can answer "what did the pipeline just do": how many commands
arrived, which searches failed, which exports were written.

Thread Safety:
    A ``threading.Lock`` guards the buffer.  In follow mode the watcher
    thread and the event loop both reach the log through the collector.

"""

import threading
from collections import Counter, deque
from collections.abc import Iterator
from typing import Any

from tock.observability.events import ExportWritten, FilterFailed, TimelineEvent


class EventLog:
    """Ring buffer of timeline events.

    Args:
        max_events: Capacity; appending beyond it discards the oldest event.

    """

    __slots__ = ("_buffer", "_capacity", "_lock")

    def __init__(self, max_events: int = 10_000) -> None:
        self._capacity = max_events
        self._buffer: deque[TimelineEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: TimelineEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def query(
        self,
        *,
        event_type: type | None = None,
        since_ns: int = 0,
        search: str | None = None,
        limit: int = 100,
    ) -> list[TimelineEvent]:
        """Matching events, newest first.

        Args:
            event_type: Keep only instances of this event class.
            since_ns: Keep only events stamped at or after this time.
            search: Keep only filter events recorded for this search text.
            limit: Return at most this many events.

        """
        results: list[TimelineEvent] = []
        for event in self._newest_first():
            if len(results) >= limit:
                break
            if event_type is not None and not isinstance(event, event_type):
                continue
            if since_ns and event.timestamp_ns < since_ns:
                continue
            if search is not None and getattr(event, "search", None) != search:
                continue
            results.append(event)
        return results

    def latest(self, event_type: type) -> TimelineEvent | None:
        """The most recent event of ``event_type``, if any."""
        found = self.query(event_type=event_type, limit=1)
        return found[0] if found else None

    def recent(self, n: int = 20) -> list[TimelineEvent]:
        """The ``n`` most recent events, oldest first."""
        with self._lock:
            items = list(self._buffer)
        return items[-n:] if n > 0 else []

    def clear(self) -> int:
        """Drop every event; returns how many were dropped."""
        with self._lock:
            count = len(self._buffer)
            self._buffer.clear()
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)

    def stats(self) -> dict[str, Any]:
        """Counts by event class plus filter-failure and export totals."""
        with self._lock:
            events = list(self._buffer)

        by_type = Counter(type(event).__name__ for event in events)
        exported = [e for e in events if isinstance(e, ExportWritten)]
        return {
            "total": len(events),
            "max_events": self._capacity,
            "by_type": dict(by_type),
            "filter_failures": sum(1 for e in events if isinstance(e, FilterFailed)),
            "bytes_exported": sum(e.size_bytes for e in exported),
        }

    def _newest_first(self) -> Iterator[TimelineEvent]:
        with self._lock:
            snapshot = list(self._buffer)
        return reversed(snapshot)
