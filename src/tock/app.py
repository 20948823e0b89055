"""Tock application — one timeline session and the CLI entry points.

TimelineSession wires the command store, filter state, view, debounced
search input and exporter together.  The public functions (show, export_log,
follow) are the primary entry points.
"""

from __future__ import annotations

import asyncio
import sys
import time
from collections.abc import Iterable
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING

from tock._errors import CommandError
from tock.commands.builtin import default_registry
from tock.config import TockConfig
from tock.config_loader import load_config
from tock.export.exporter import TimelineExporter
from tock.export.sinks import ConsoleNotices, FilesystemWriter, FixedDestination
from tock.observability.collector import TimelineCollector
from tock.observability.log import EventLog
from tock.timeline.debounce import DebouncedQuery
from tock.timeline.filters import FilterState
from tock.timeline.store import CommandStore
from tock.timeline.view import TimelineView

if TYPE_CHECKING:
    from tock.commands.registry import CommandRegistry
    from tock.export.exporter import ExportResult
    from tock.export.sinks import DestinationChooser, FileWriter, NoticePresenter
    from tock.timeline.command import Command
    from tock.timeline.view import RenderedCommand


class TimelineSession:
    """Everything one timeline needs, wired together.

    The store and filter state are owned here and passed by reference into
    the view, the search debouncer and the exporter.  Filter state survives
    ``clear()``.

    Args:
        config: Session configuration (defaults if omitted).
        registry: Command type registry (built-in types if omitted).
        chooser: Export destination chooser.
        writer: Export file writer.
        notices: Notice presenter.

    """

    def __init__(
        self,
        config: TockConfig | None = None,
        *,
        registry: CommandRegistry | None = None,
        chooser: DestinationChooser | None = None,
        writer: FileWriter | None = None,
        notices: NoticePresenter | None = None,
    ) -> None:
        self.config = config if config is not None else TockConfig()
        self.registry = registry if registry is not None else default_registry()
        self.collector = TimelineCollector(EventLog(self.config.max_log_events))
        self.store = CommandStore()
        self.state = FilterState(
            hidden_types=self.config.hidden_types,
            reversed_=self.config.reversed,
        )
        self.view = TimelineView(self.store, self.state, self.registry, self.collector)
        self.query = DebouncedQuery(
            self.state.set_search,
            window_ms=self.config.debounce_ms,
            initial=self.state.search,
        )
        self.exporter = TimelineExporter(
            self.store,
            chooser if chooser is not None else FixedDestination(),
            writer if writer is not None else FilesystemWriter(),
            notices if notices is not None else ConsoleNotices(),
            config=self.config,
            collector=self.collector,
        )

    def append(self, command: Command) -> Command:
        """Ingestion entry point."""
        return self.store.append(command)

    def extend(self, commands: Iterable[Command]) -> tuple[Command, ...]:
        return self.store.extend(commands)

    def clear(self) -> int:
        """Empty the store; filter state is kept."""
        return self.store.clear()

    def type_search(self, text: str) -> None:
        """Feed one keystroke's worth of search text to the debouncer."""
        self.query.input(text)

    def render(self) -> tuple[RenderedCommand, ...]:
        return self.view.render()

    async def run(self) -> None:
        """Commit debounced search input as it settles, until ``close()``."""
        await self.query.run()

    def close(self) -> None:
        self.query.close()
        self.view.close()


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def format_rendered(item: RenderedCommand) -> str:
    """One timeline line: ``timestamp  title  text`` (``!`` marks important)."""
    marker = "!" if item.important else " "
    return f"{item.timestamp} {marker} {item.title:<20} {item.text}"


def _open_session(
    root: str | Path,
    hide: Iterable[str] | None,
    **overrides: object,
) -> TimelineSession:
    config = load_config(Path(root), **overrides)
    if hide:
        config = replace(config, hidden_types=config.hidden_types | frozenset(hide))
    return TimelineSession(config)


def _load_into(session: TimelineSession, log: Path) -> None:
    from tock.ingest.loader import load_commands

    session.extend(load_commands(log))


def show(
    log: str | Path,
    *,
    search: str = "",
    hide: Iterable[str] | None = None,
    reverse: bool | None = None,
    root: str | Path = ".",
) -> int:
    """Print the visible timeline of a command log file.

    Args:
        log: JSON array or NDJSON command log.
        search: Search text.
        hide: Command types to hide, on top of configured ones.
        reverse: Newest first (defaults to the configured order).
        root: Directory searched for tock.yaml / tock.toml.

    Returns:
        Number of commands printed.

    """
    session = _open_session(root, hide, reversed=reverse)
    try:
        _load_into(session, Path(log))
        session.state.set_search(search)
        rendered = session.render()
        for item in rendered:
            print(format_rendered(item))

        hidden = len(session.store) - len(session.view.visible)
        print(
            f"  {len(rendered)} shown, {hidden} filtered, {len(session.store)} total",
            file=sys.stderr,
        )
    finally:
        session.close()
    return len(rendered)


def export_log(
    log: str | Path,
    *,
    api: bool = False,
    output: str | Path | None = None,
    root: str | Path = ".",
) -> ExportResult:
    """Export a command log as the raw JSON log or the API-call report.

    Args:
        log: JSON array or NDJSON command log.
        api: Write the API-call report instead of the raw log.
        output: Destination path (defaults to the export directory).
        root: Directory searched for tock.yaml / tock.toml.

    """
    config = load_config(Path(root))
    session = TimelineSession(
        config,
        chooser=FixedDestination(Path(output) if output is not None else None),
    )
    try:
        _load_into(session, Path(log))
        if api:
            return asyncio.run(session.exporter.export_api_calls())
        return asyncio.run(session.exporter.export_raw_log())
    finally:
        session.close()


def follow(
    log: str | Path,
    *,
    search: str = "",
    hide: Iterable[str] | None = None,
    root: str | Path = ".",
) -> None:
    """Tail an NDJSON command log, printing visible commands as they arrive.

    Runs until interrupted (Ctrl+C).

    Args:
        log: NDJSON file that the monitored app appends to.
        search: Search text.
        hide: Command types to hide, on top of configured ones.
        root: Directory searched for tock.yaml / tock.toml.

    """
    path = Path(log)
    if not path.is_file():
        msg = f"Command log not found: {path}"
        raise CommandError(msg)

    session = _open_session(root, hide, reversed=False)
    session.state.set_search(search)

    print(f"  Following {path} (Ctrl+C to stop)", file=sys.stderr)
    t0 = time.perf_counter()
    try:
        asyncio.run(_follow_loop(session, path))
    except KeyboardInterrupt:
        pass
    finally:
        session.close()
        elapsed = time.perf_counter() - t0
        print(f"\n  {len(session.store)} commands received in {elapsed:.0f}s", file=sys.stderr)


async def _follow_loop(session: TimelineSession, path: Path) -> None:
    from tock.ingest.follower import LogFollower

    follower = LogFollower(path, step_ms=session.config.follow_poll_ms)
    driver = asyncio.create_task(session.run())
    follower.start()
    try:
        async for command in follower.commands():
            before = len(session.view.visible)
            stored = session.append(command)
            if session.view.fallback_active:
                fresh = (stored,)
            else:
                fresh = session.view.visible[before:]
            for item in fresh:
                rendered = session.view.render_command(item)
                if rendered is not None:
                    print(format_rendered(rendered), flush=True)
    finally:
        follower.stop()
        session.query.close()
        await driver


def list_types() -> dict[str, tuple[str, ...]]:
    """Built-in command types grouped as in the hidden-type chooser."""
    return default_registry().groups()
