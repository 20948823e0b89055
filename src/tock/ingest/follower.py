"""Log follower — streams commands appended to an NDJSON file.

Watches the log file for changes and parses each newly completed line into
a ``Command``.  A file that shrinks (rotated or truncated) is re-read from
the start.

The follower runs watchfiles in a background thread and bridges commands
to an asyncio queue; only the consuming coroutine appends them to the
store, so the store keeps a single writer.
"""

from __future__ import annotations

import asyncio
import sys
import threading
from pathlib import Path
from typing import TYPE_CHECKING

from watchfiles import watch

from tock._errors import CommandError
from tock.ingest.loader import parse_line

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from tock.timeline.command import Command


class TailReader:
    """Incremental reader for a growing text file.

    Keeps a byte offset and the trailing partial line between reads.

    """

    __slots__ = ("_offset", "_partial", "_path")

    def __init__(self, path: Path, *, from_start: bool = True) -> None:
        self._path = path
        self._partial = b""
        self._offset = 0
        if not from_start and path.is_file():
            self._offset = path.stat().st_size

    @property
    def offset(self) -> int:
        return self._offset

    def read_lines(self) -> list[str]:
        """Return the complete lines written since the previous read."""
        try:
            size = self._path.stat().st_size
        except FileNotFoundError:
            return []
        if size < self._offset:
            self._offset = 0
            self._partial = b""
        if size == self._offset:
            return []

        with self._path.open("rb") as fh:
            fh.seek(self._offset)
            chunk = fh.read()
        self._offset += len(chunk)

        data = self._partial + chunk
        *complete, self._partial = data.split(b"\n")
        return [line.decode("utf-8", errors="replace") for line in complete]


class LogFollower:
    """Follows an NDJSON command log and yields new commands.

    ``start()`` must be called from the event loop that consumes
    ``commands()``.

    Args:
        path: The log file to follow.
        step_ms: watchfiles poll step in milliseconds.
        from_start: Also yield commands already in the file.

    """

    def __init__(self, path: Path, *, step_ms: int = 100, from_start: bool = True) -> None:
        self._path = path
        self._step_ms = step_ms
        self._reader = TailReader(path, from_start=from_start)
        self._queue: asyncio.Queue[Command] = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._lineno = 0

    @property
    def is_running(self) -> bool:
        """Whether the watcher background thread is active."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start following in a background thread."""
        if self.is_running:
            return

        self._loop = asyncio.get_running_loop()
        self._stop_event.clear()
        self._read_new()
        self._thread = threading.Thread(
            target=self._watch_loop,
            name="tock-follower",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal the watcher to stop and wait for the thread to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None

    async def commands(self) -> AsyncIterator[Command]:
        """Yield commands as they are appended to the file."""
        while self.is_running or not self._queue.empty():
            try:
                command = await asyncio.wait_for(self._queue.get(), timeout=0.5)
                yield command
            except TimeoutError:
                if not self.is_running:
                    break

    def _watch_loop(self) -> None:
        """Background thread: run watchfiles and read new lines on each change."""
        for _changes in watch(
            self._path,
            stop_event=self._stop_event,
            debounce=50,
            step=self._step_ms,
        ):
            self._read_new()

    def _read_new(self) -> None:
        for line in self._reader.read_lines():
            self._lineno += 1
            try:
                command = parse_line(line, lineno=self._lineno)
            except CommandError as exc:
                print(f"  Skipped line: {exc}", file=sys.stderr)
                continue
            if command is not None and self._loop is not None:
                self._loop.call_soon_threadsafe(self._queue.put_nowait, command)
