"""Event model for timeline observability.

Records what the pipeline did to the developer's event stream: ingestion,
filter recomputation (and its failures), and exports.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal, TypeAlias


# ---------------------------------------------------------------------------
# Store events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CommandsAppended:
    """Commands were appended to the store.

    Attributes:
        count: Number of commands appended.
        store_size: Store size after the append.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    count: int
    store_size: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class StoreCleared:
    """The store was emptied.

    Attributes:
        removed: Number of commands that were removed.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    removed: int
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Filter events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FilterRecomputed:
    """The visible sequence was recomputed.

    Attributes:
        search: Search text in effect.
        visible: Number of commands in the visible sequence.
        total: Number of commands in the store.
        duration_ms: Time spent filtering in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    search: str
    visible: int
    total: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class FilterFailed:
    """Filter evaluation raised; the unfiltered store was shown instead.

    Attributes:
        search: Search text in effect.
        hidden_types: Hidden command types in effect.
        command_type: Type of the command whose evaluation failed.
        error: ``"ExceptionType: message"`` of the underlying failure.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    search: str
    hidden_types: tuple[str, ...]
    command_type: str
    error: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Export events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ExportWritten:
    """An export file was written.

    Attributes:
        kind: Which exporter produced the file.
        path: Destination path.
        count: Number of commands exported.
        size_bytes: Size of the written content in bytes.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    kind: Literal["raw_log", "api_calls"]
    path: str
    count: int
    size_bytes: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ExportSkipped:
    """An export finished without writing a file.

    Attributes:
        kind: Which exporter was invoked.
        reason: Why nothing was written.
        detail: Extra context (e.g., the writer's failure reason).
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    kind: Literal["raw_log", "api_calls"]
    reason: Literal["empty", "cancelled", "failed"]
    detail: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

TimelineEvent: TypeAlias = (
    CommandsAppended
    | StoreCleared
    | FilterRecomputed
    | FilterFailed
    | ExportWritten
    | ExportSkipped
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
