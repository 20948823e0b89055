"""Export layer — the raw JSON log and the API-call report.

Exports always read the full command store, never the filtered view.
"""

from tock.export.api_report import pretty_body, render_api_report, select_api_calls
from tock.export.curl import request_to_curl
from tock.export.exporter import ExportResult, TimelineExporter
from tock.export.raw import render_raw_log
from tock.export.sinks import (
    ConsoleNotices,
    DestinationChooser,
    FileWriter,
    FilesystemWriter,
    FixedDestination,
    NoticePresenter,
    SaveOptions,
    WriteOutcome,
)

__all__ = [
    "ConsoleNotices",
    "DestinationChooser",
    "ExportResult",
    "FileWriter",
    "FilesystemWriter",
    "FixedDestination",
    "NoticePresenter",
    "SaveOptions",
    "TimelineExporter",
    "WriteOutcome",
    "pretty_body",
    "render_api_report",
    "render_raw_log",
    "request_to_curl",
    "select_api_calls",
]
