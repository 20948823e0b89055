"""Timeline view — keeps the visible sequence in step with store and filters.

Orchestrates the recompute flow:
    1. The store appends or clears (``StoreChange``), or the ``FilterState``
       changes (search committed, type hidden, order toggled)
    2. Appends are filtered incrementally: only the new commands are
       evaluated and added to the previous result
    3. Any filter-state change re-filters the whole store snapshot
    4. ``apply_order`` produces the presented sequence
    5. Listeners receive the new visible tuple

A failing search projection never hides the event stream: the view falls
back to the entire unfiltered store for that recomputation, prints the
failure to stderr, and records a ``FilterFailed`` event.
"""

from __future__ import annotations

import sys
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from tock._errors import FilterEvaluationError
from tock.timeline.filters import apply_order, filter_commands

if TYPE_CHECKING:
    from tock.commands.registry import CommandRegistry
    from tock.observability.collector import TimelineCollector
    from tock.timeline.command import Command
    from tock.timeline.filters import FilterState
    from tock.timeline.store import CommandStore, StoreChange


@dataclass(frozen=True, slots=True)
class RenderedCommand:
    """One visible command after its type's render strategy ran.

    Attributes:
        message_id: Stable render key.
        type: Command type.
        title: Contract title for the type.
        text: Rendered display text.
        timestamp: ISO-8601 UTC receipt time.
        important: Whether the sender flagged the command.

    """

    message_id: int
    type: str
    title: str
    text: str
    timestamp: str
    important: bool = False


VisibleListener: TypeAlias = Callable[[tuple["Command", ...]], None]


class TimelineView:
    """Derived, never-persisted view of a ``CommandStore``.

    Args:
        store: The command store (read-only from the view's side).
        state: Filter state shared with the input layer.
        registry: Command type registry for search projection and rendering.
        collector: Optional observability collector.

    """

    def __init__(
        self,
        store: CommandStore,
        state: FilterState,
        registry: CommandRegistry,
        collector: TimelineCollector | None = None,
    ) -> None:
        self._store = store
        self._state = state
        self._registry = registry
        self._collector = collector
        self._filtered: tuple[Command, ...] = ()
        self._visible: tuple[Command, ...] = ()
        self._fallback = False
        self._listeners: list[VisibleListener] = []

        store.subscribe(self._on_store_change)
        state.subscribe(self._on_state_change)
        self.recompute()

    @property
    def visible(self) -> tuple[Command, ...]:
        """Filtered commands in presentation order."""
        return self._visible

    @property
    def fallback_active(self) -> bool:
        """True if the last recomputation fell back to the unfiltered store."""
        return self._fallback

    @property
    def state(self) -> FilterState:
        return self._state

    def subscribe(self, listener: VisibleListener) -> None:
        """Call ``listener`` with the new visible sequence after each recompute."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: VisibleListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def close(self) -> None:
        """Detach from the store and filter state."""
        self._store.unsubscribe(self._on_store_change)
        self._state.unsubscribe(self._on_state_change)
        self._listeners.clear()

    # ----- Recompute -----

    def recompute(self) -> tuple[Command, ...]:
        """Re-filter the whole store and return the visible sequence."""
        snapshot = self._store.snapshot()
        t0 = time.perf_counter()
        try:
            self._filtered = self._filter(snapshot)
            self._fallback = False
        except FilterEvaluationError as exc:
            self._fall_back(snapshot, exc)
        self._publish(len(snapshot), (time.perf_counter() - t0) * 1000)
        return self._visible

    def _on_store_change(self, change: StoreChange) -> None:
        if change.kind == "clear":
            self._filtered = ()
            self._fallback = False
            if self._collector is not None:
                self._collector.record_clear(change.removed)
            self._publish(0, 0.0)
            return

        if self._collector is not None:
            self._collector.record_append(len(change.commands), store_size=len(self._store))

        if self._fallback:
            # A broken filter may have been fixed by new data; start over.
            self.recompute()
            return

        t0 = time.perf_counter()
        try:
            self._filtered = self._filtered + self._filter(change.commands)
        except FilterEvaluationError as exc:
            self._fall_back(self._store.snapshot(), exc)
        self._publish(len(self._store), (time.perf_counter() - t0) * 1000)

    def _on_state_change(self, _state: FilterState) -> None:
        self.recompute()

    def _filter(self, commands: tuple[Command, ...]) -> tuple[Command, ...]:
        return filter_commands(
            commands,
            self._state.search,
            self._state.hidden_types,
            registry=self._registry,
        )

    def _fall_back(self, snapshot: tuple[Command, ...], exc: FilterEvaluationError) -> None:
        print(f"  Filter error, showing all commands: {exc}", file=sys.stderr)
        if self._collector is not None:
            self._collector.record_filter_failure(
                self._state.search,
                self._state.hidden_types,
                exc,
                command_type=exc.command_type,
            )
        self._filtered = snapshot
        self._fallback = True

    def _publish(self, total: int, duration_ms: float) -> None:
        self._visible = apply_order(self._filtered, self._state.reversed)
        if self._collector is not None and not self._fallback:
            self._collector.record_recompute(
                self._state.search,
                visible=len(self._visible),
                total=total,
                duration_ms=duration_ms,
            )
        for listener in tuple(self._listeners):
            try:
                listener(self._visible)
            except Exception as exc:
                print(f"  Timeline listener error: {exc}", file=sys.stderr)

    # ----- Rendering -----

    def render(self) -> tuple[RenderedCommand, ...]:
        """Render the visible sequence, skipping types with no contract.

        A renderer that raises is reported to stderr and that command is
        left out of this render; it stays in the store.
        """
        rendered: list[RenderedCommand] = []
        for command in self._visible:
            item = self.render_command(command)
            if item is not None:
                rendered.append(item)
        return tuple(rendered)

    def render_command(self, command: Command) -> RenderedCommand | None:
        """Render one command, or ``None`` if its type is unregistered."""
        contract = self._registry.resolve(command.type)
        if contract is None:
            return None
        try:
            text = contract.render(command)
        except Exception as exc:
            print(f"  Render error ({command.type} #{command.message_id}): {exc}", file=sys.stderr)
            return None
        return RenderedCommand(
            message_id=command.message_id,  # type: ignore[arg-type]
            type=command.type,
            title=contract.title,
            text=text,
            timestamp=command.timestamp,
            important=command.important,
        )
