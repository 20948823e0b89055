"""Timeline exporter — raw log and API-call report to a chosen destination.

Both exports read the command store directly, never the filtered view:
an export is of "everything" or "everything of one type".

Each export:
    1. Builds its content from a store snapshot
    2. Asks the destination chooser for a path (``None`` = cancelled, no-op)
    3. Writes through the file writer
    4. Reports a failed write through the notice presenter

No outcome touches the store or the filter state.
"""

from __future__ import annotations

import sys
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

from tock._errors import WriteFailure
from tock.export.api_report import API_RESPONSE, render_api_report
from tock.export.raw import render_raw_log
from tock.export.sinks import SaveOptions

if TYPE_CHECKING:
    from tock.config import TockConfig
    from tock.export.sinks import DestinationChooser, FileWriter, NoticePresenter
    from tock.observability.collector import TimelineCollector
    from tock.timeline.store import CommandStore

ExportKind: TypeAlias = Literal["raw_log", "api_calls"]

_JSON_FILTERS = (("JSON Files", ("json",)), ("All Files", ("*",)))
_TEXT_FILTERS = (("Text Files", ("txt",)), ("All Files", ("*",)))


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Outcome of one export.

    Attributes:
        kind: Which export ran.
        status: ``"written"``, ``"cancelled"``, ``"empty"`` or ``"failed"``.
        path: Destination path (``None`` unless one was chosen).
        count: Number of commands in the export.
        size_bytes: Size of the written content.
        error: The write failure, for ``"failed"``.

    """

    kind: ExportKind
    status: Literal["written", "cancelled", "empty", "failed"]
    path: Path | None = None
    count: int = 0
    size_bytes: int = 0
    error: WriteFailure | None = None

    @property
    def written(self) -> bool:
        return self.status == "written"


def _epoch_ms() -> int:
    return time.time_ns() // 1_000_000


class TimelineExporter:
    """Exports a command store through injected collaborators.

    Args:
        store: Command store to export.
        chooser: Asks the user where to save.
        writer: Writes the file.
        notices: Shows informational and error notices.
        config: Supplies the default export directory.
        collector: Optional observability collector.
        clock_ms: Epoch-millisecond clock used in default file names.
        verbose: Print a summary line to stderr after each write.

    """

    def __init__(
        self,
        store: CommandStore,
        chooser: DestinationChooser,
        writer: FileWriter,
        notices: NoticePresenter,
        *,
        config: TockConfig | None = None,
        collector: TimelineCollector | None = None,
        clock_ms: Callable[[], int] = _epoch_ms,
        verbose: bool = True,
    ) -> None:
        self._store = store
        self._chooser = chooser
        self._writer = writer
        self._notices = notices
        self._directory = config.export_dir if config is not None else None
        self._collector = collector
        self._clock_ms = clock_ms
        self._verbose = verbose

    async def export_raw_log(self) -> ExportResult:
        """Save every command as ``timeline-log-<epoch-ms>.json``."""
        commands = self._store.snapshot()
        options = SaveOptions(
            title="Export Timeline Log",
            default_name=f"timeline-log-{self._clock_ms()}.json",
            filters=_JSON_FILTERS,
            directory=self._directory,
        )
        return await self._save("raw_log", render_raw_log(commands), len(commands), options)

    async def export_api_calls(self) -> ExportResult:
        """Save the API-call report as ``api-calls-<epoch-ms>.txt``.

        With no API calls in the store, shows an info notice and writes nothing.
        """
        calls = self._store.of_type(API_RESPONSE)
        content = render_api_report(calls)
        if content is None:
            await self._notices.notify(
                "info", "No API Calls", "No API calls found in the timeline to export."
            )
            self._record_skipped("api_calls", "empty")
            return ExportResult(kind="api_calls", status="empty")

        options = SaveOptions(
            title="Export API Calls",
            default_name=f"api-calls-{self._clock_ms()}.txt",
            filters=_TEXT_FILTERS,
            directory=self._directory,
        )
        return await self._save("api_calls", content, len(calls), options)

    async def _save(
        self,
        kind: ExportKind,
        content: str,
        count: int,
        options: SaveOptions,
    ) -> ExportResult:
        path = await self._chooser.choose_save_destination(options)
        if path is None:
            self._record_skipped(kind, "cancelled")
            return ExportResult(kind=kind, status="cancelled", count=count)

        outcome = self._writer.write_text(path, content)
        if not outcome.ok:
            failure = WriteFailure(f"Could not write {path}: {outcome.reason}")
            print(f"  Export error: {failure}", file=sys.stderr)
            await self._notices.notify("error", "Export Failed", str(failure))
            self._record_skipped(kind, "failed", detail=outcome.reason)
            return ExportResult(kind=kind, status="failed", path=path, count=count, error=failure)

        size = len(content.encode("utf-8"))
        if self._verbose:
            print(f"  Exported {count} commands to {path}", file=sys.stderr)
        if self._collector is not None:
            self._collector.record_export(kind, str(path), count=count, size_bytes=size)
        return ExportResult(kind=kind, status="written", path=path, count=count, size_bytes=size)

    def _record_skipped(self, kind: ExportKind, reason: str, *, detail: str = "") -> None:
        if self._collector is not None:
            self._collector.record_export_skipped(kind, reason, detail=detail)
