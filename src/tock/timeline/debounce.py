"""Debounced query input — keystroke-rate input, quiescence-rate filtering.

``typed`` follows every keystroke immediately (for echo); the value handed to
``on_commit`` is coalesced.  The debouncer is a two-state machine::

    idle  --input(v)-->  pending(v, deadline)
    pending(v, d)  --input(w)-->  pending(w, now + window)
    pending(v, d)  --poll() at now >= d-->  idle   (commits v)

Time comes from an injectable ``clock`` (seconds, monotonic), so tests can
drive the machine with a virtual clock and no real waiting.  ``run()`` is the
asyncio driver used by live sessions.
"""

from __future__ import annotations

import asyncio
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

DEFAULT_WINDOW_MS = 300


@dataclass(frozen=True, slots=True)
class Pending:
    """A value waiting for the quiescence window to elapse.

    Attributes:
        value: The value that will be committed.
        typed_at: Clock time of the input that produced ``value``.
        deadline: Clock time at which ``value`` may be committed.

    """

    value: str
    typed_at: float
    deadline: float


class DebouncedQuery:
    """Coalesces search input so only the last value per window propagates.

    Args:
        on_commit: Called with the committed value (e.g. ``FilterState.set_search``).
        window_ms: Quiescence window in milliseconds.
        clock: Monotonic clock returning seconds.
        initial: Starting value of ``typed``.

    """

    __slots__ = ("_clock", "_closed", "_on_commit", "_pending", "_typed", "_wake", "_window")

    def __init__(
        self,
        on_commit: Callable[[str], None],
        *,
        window_ms: int = DEFAULT_WINDOW_MS,
        clock: Callable[[], float] = time.monotonic,
        initial: str = "",
    ) -> None:
        self._on_commit = on_commit
        self._window = window_ms / 1000
        self._clock = clock
        self._typed = initial
        self._pending: Pending | None = None
        self._wake: asyncio.Event | None = None
        self._closed = False

    @property
    def typed(self) -> str:
        """The latest raw input, updated synchronously on every keystroke."""
        return self._typed

    @property
    def pending(self) -> Pending | None:
        return self._pending

    @property
    def state(self) -> Literal["idle", "pending"]:
        return "idle" if self._pending is None else "pending"

    @property
    def window_ms(self) -> int:
        return round(self._window * 1000)

    # ----- Transitions -----

    def input(self, value: str) -> None:
        """Record a keystroke; supersedes any pending value."""
        now = self._clock()
        self._typed = value
        self._pending = Pending(value=value, typed_at=now, deadline=now + self._window)
        self._signal()

    def poll(self) -> bool:
        """Commit the pending value if its window has elapsed.

        Returns:
            True if a value was committed.

        """
        pending = self._pending
        if pending is None or self._clock() < pending.deadline:
            return False
        self._pending = None
        self._on_commit(pending.value)
        return True

    def flush(self) -> bool:
        """Commit the pending value now, regardless of the deadline."""
        pending = self._pending
        if pending is None:
            return False
        self._pending = None
        self._on_commit(pending.value)
        return True

    def cancel(self) -> None:
        """Drop the pending value without committing it."""
        self._pending = None
        self._signal()

    def reconfigure(
        self,
        *,
        window_ms: int | None = None,
        on_commit: Callable[[str], None] | None = None,
    ) -> None:
        """Rewire the debouncer without losing an in-flight value.

        With an unchanged window the pending value and its deadline are kept
        as-is.  A new window moves the deadline to ``typed_at + window``.
        """
        if on_commit is not None:
            self._on_commit = on_commit
        if window_ms is None or window_ms / 1000 == self._window:
            return
        self._window = window_ms / 1000
        pending = self._pending
        if pending is not None:
            self._pending = Pending(
                value=pending.value,
                typed_at=pending.typed_at,
                deadline=pending.typed_at + self._window,
            )
        self._signal()

    # ----- Async driver -----

    async def run(self) -> None:
        """Commit pending values as their windows elapse, until ``close()``.

        Sleeps until the current deadline; new input wakes the loop so the
        deadline is re-read.  Any value still pending at close is flushed.
        """
        self._wake = asyncio.Event()
        try:
            while not self._closed:
                self._wake.clear()
                pending = self._pending
                timeout = None if pending is None else max(0.0, pending.deadline - self._clock())
                try:
                    await asyncio.wait_for(self._wake.wait(), timeout=timeout)
                except TimeoutError:
                    self._commit_due()
        finally:
            self._wake = None
        self.flush()

    def close(self) -> None:
        """Stop ``run()``; the pending value, if any, is flushed."""
        self._closed = True
        if self._wake is None:
            self.flush()
        else:
            self._signal()

    def _commit_due(self) -> None:
        try:
            self.poll()
        except Exception as exc:
            print(f"  Search commit error: {exc}", file=sys.stderr)

    def _signal(self) -> None:
        if self._wake is not None:
            self._wake.set()
