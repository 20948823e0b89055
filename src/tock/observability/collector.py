"""Timeline collector — records pipeline activity into the event log.

Provides explicit methods for recording store, filter and export events.
``TimelineView`` and ``TimelineExporter`` accept an optional collector;
without one they only report failures to stderr.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

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


class TimelineCollector:
    """Unified event collector for the timeline pipeline.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Store events -----

    def record_append(self, count: int, *, store_size: int) -> None:
        """Record commands entering the store."""
        self._log.append(
            CommandsAppended(count=count, store_size=store_size, timestamp_ns=now_ns())
        )

    def record_clear(self, removed: int) -> None:
        """Record the store being emptied."""
        self._log.append(StoreCleared(removed=removed, timestamp_ns=now_ns()))

    # ----- Filter events -----

    def record_recompute(
        self,
        search: str,
        *,
        visible: int,
        total: int,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a visible-sequence recomputation."""
        self._log.append(
            FilterRecomputed(
                search=search,
                visible=visible,
                total=total,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_filter_failure(
        self,
        search: str,
        hidden_types: frozenset[str],
        exc: BaseException,
        *,
        command_type: str = "",
    ) -> None:
        """Record a filter evaluation failure."""
        cause = exc.__cause__ if exc.__cause__ is not None else exc
        self._log.append(
            FilterFailed(
                search=search,
                hidden_types=tuple(sorted(hidden_types)),
                command_type=command_type,
                error=f"{type(cause).__name__}: {cause}",
                timestamp_ns=now_ns(),
            )
        )

    # ----- Export events -----

    def record_export(
        self,
        kind: str,
        path: str,
        *,
        count: int = 0,
        size_bytes: int = 0,
    ) -> None:
        """Record a written export file."""
        self._log.append(
            ExportWritten(
                kind=kind,  # type: ignore[arg-type]
                path=path,
                count=count,
                size_bytes=size_bytes,
                timestamp_ns=now_ns(),
            )
        )

    def record_export_skipped(self, kind: str, reason: str, *, detail: str = "") -> None:
        """Record an export that wrote nothing."""
        self._log.append(
            ExportSkipped(
                kind=kind,  # type: ignore[arg-type]
                reason=reason,  # type: ignore[arg-type]
                detail=detail,
                timestamp_ns=now_ns(),
            )
        )
