"""Timeline observability — what the pipeline did to the event stream.

Records store mutations, filter recomputations (including the fallback to
the unfiltered view when a filter fails), and exports.

All events are frozen dataclasses with nanosecond timestamps, safe for
concurrent production from the follow-mode watcher thread.

Quick Start:
    >>> from tock.observability import TimelineCollector, EventLog
    >>> log = EventLog()
    >>> collector = TimelineCollector(log)
    >>> # Pass collector to TimelineView / TimelineExporter

"""

from tock.observability.collector import TimelineCollector
from tock.observability.events import (
    CommandsAppended,
    ExportSkipped,
    ExportWritten,
    FilterFailed,
    FilterRecomputed,
    StoreCleared,
    TimelineEvent,
    now_ns,
)
from tock.observability.log import EventLog

__all__ = [
    "CommandsAppended",
    "EventLog",
    "ExportSkipped",
    "ExportWritten",
    "FilterFailed",
    "FilterRecomputed",
    "StoreCleared",
    "TimelineCollector",
    "TimelineEvent",
    "now_ns",
]
