"""Command store — append-only, ordered log of received commands.

The store is the single source of truth for the timeline.  It has exactly
one writer (the ingestion path) and many readers (filters, exporters,
renderers), all running on the event loop thread, so no locking is needed.

Readers take ``snapshot()`` tuples; a snapshot never changes after it is
taken, even if the store is appended to or cleared.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Literal, TypeAlias

from tock._errors import DuplicateCommandError
from tock.timeline.command import Command


@dataclass(frozen=True, slots=True)
class StoreChange:
    """A mutation of the command store, delivered to listeners.

    Attributes:
        kind: ``"append"`` or ``"clear"``.
        commands: Commands appended by this change (empty for clears).
        removed: Number of commands removed (0 for appends).

    """

    kind: Literal["append", "clear"]
    commands: tuple[Command, ...] = ()
    removed: int = 0


StoreListener: TypeAlias = Callable[[StoreChange], None]


class CommandStore:
    """Append-only command log with change notification.

    Commands without a ``message_id`` are assigned the next monotonic id.
    Ids keep increasing across ``clear()``, and an id once stored is never
    accepted again, so render keys stay unique for the lifetime of the store.

    """

    __slots__ = ("_commands", "_ids", "_listeners", "_next_id")

    def __init__(self) -> None:
        self._commands: list[Command] = []
        self._ids: set[int] = set()
        self._next_id = 1
        self._listeners: list[StoreListener] = []

    # ----- Writer API -----

    def append(self, command: Command) -> Command:
        """Append one command and return it as stored (with its id).

        Raises:
            DuplicateCommandError: If the id was ever stored before.  The store
                is left unchanged.

        """
        (stored,) = self._assign((command,))
        self._commit((stored,))
        self._notify(StoreChange(kind="append", commands=(stored,)))
        return stored

    def extend(self, commands: Iterable[Command]) -> tuple[Command, ...]:
        """Append several commands with a single notification.

        Either all commands are appended or, on a duplicate id, none are.
        """
        batch = self._assign(commands)
        if not batch:
            return ()
        self._commit(batch)
        self._notify(StoreChange(kind="append", commands=batch))
        return batch

    def clear(self) -> int:
        """Remove every command and return how many were removed."""
        removed = len(self._commands)
        self._commands = []
        self._notify(StoreChange(kind="clear", removed=removed))
        return removed

    # ----- Reader API -----

    def snapshot(self) -> tuple[Command, ...]:
        """Immutable view of the store in arrival order."""
        return tuple(self._commands)

    def of_type(self, command_type: str) -> tuple[Command, ...]:
        """All commands of one type, in arrival order."""
        return tuple(c for c in self._commands if c.type == command_type)

    def get(self, message_id: int) -> Command | None:
        """Look up a command by its message id."""
        if message_id not in self._ids:
            return None
        for command in self._commands:
            if command.message_id == message_id:
                return command
        return None

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(self.snapshot())

    # ----- Listeners -----

    def subscribe(self, listener: StoreListener) -> None:
        """Call ``listener`` after every mutation."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: StoreListener) -> None:
        """Stop notifying ``listener``."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ----- Internals -----

    def _assign(self, commands: Iterable[Command]) -> tuple[Command, ...]:
        batch = list(commands)
        explicit: set[int] = set()
        for command in batch:
            if command.message_id is None:
                continue
            if command.message_id in self._ids or command.message_id in explicit:
                msg = f"Command with messageId {command.message_id} was already stored"
                raise DuplicateCommandError(msg)
            explicit.add(command.message_id)

        next_id = max(self._next_id, max(explicit, default=0) + 1)
        assigned: list[Command] = []
        for command in batch:
            if command.message_id is None:
                command = command.with_id(next_id)
                next_id += 1
            assigned.append(command)
        return tuple(assigned)

    def _commit(self, batch: tuple[Command, ...]) -> None:
        for command in batch:
            self._commands.append(command)
            self._ids.add(command.message_id)  # type: ignore[arg-type]
            self._next_id = max(self._next_id, command.message_id + 1)  # type: ignore[operator]

    def _notify(self, change: StoreChange) -> None:
        for listener in tuple(self._listeners):
            try:
                listener(change)
            except Exception as exc:
                print(f"  Store listener error: {exc}", file=sys.stderr)
