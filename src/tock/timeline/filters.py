"""Filter engine — which commands the timeline shows, and in what order.

``filter_commands`` is a pure, stable filter over a store snapshot: a command
is kept when its type is not hidden and, if there is search text, one of the
strings in its type's search projection contains that text
(case-insensitive).  ``apply_order`` is applied afterwards and only changes
presentation.

``FilterState`` holds the user's search text, hidden types and ordering
flag.  It is passed by reference into the pipeline and mutated only through
its named operations, each of which notifies observers.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, TypeAlias, TypeVar

from tock._errors import FilterEvaluationError
from tock.commands.registry import default_search_text

if TYPE_CHECKING:
    from tock.commands.registry import CommandRegistry
    from tock.timeline.command import Command


def matches(
    command: Command,
    search: str,
    registry: CommandRegistry | None = None,
) -> bool:
    """Whether ``command`` matches ``search`` under its type's search projection.

    Empty (or whitespace-only) search text matches everything.
    """
    needle = search.strip().lower()
    if not needle:
        return True
    texts = registry.search_text(command) if registry is not None else default_search_text(command)
    return any(needle in text.lower() for text in texts)


def filter_commands(
    commands: Iterable[Command],
    search: str,
    hidden_types: frozenset[str] | set[str],
    *,
    registry: CommandRegistry | None = None,
) -> tuple[Command, ...]:
    """Return the commands to show, preserving their original order.

    Raises:
        FilterEvaluationError: If the search projection of any command
            raises.  The original exception is chained as ``__cause__``.

    """
    result: list[Command] = []
    for command in commands:
        if command.type in hidden_types:
            continue
        try:
            keep = matches(command, search, registry)
        except Exception as exc:
            msg = f"Search evaluation failed for {command.type!r} command: {exc}"
            raise FilterEvaluationError(msg, command_type=command.type) from exc
        if keep:
            result.append(command)
    return tuple(result)


T = TypeVar("T")


def apply_order(sequence: Sequence[T], reversed_: bool) -> tuple[T, ...]:
    """Presentation order: as-is, or newest first.  Never mutates ``sequence``."""
    if reversed_:
        return tuple(sequence[::-1])
    return tuple(sequence)


FilterObserver: TypeAlias = Callable[["FilterState"], None]


class FilterState:
    """Search text, hidden command types, and ordering for one timeline.

    Survives ``CommandStore.clear()``; call ``reset()`` to restore defaults.

    """

    __slots__ = ("_hidden_types", "_observers", "_reversed", "_search")

    def __init__(
        self,
        *,
        search: str = "",
        hidden_types: Iterable[str] = (),
        reversed_: bool = False,
    ) -> None:
        self._search = search
        self._hidden_types = frozenset(hidden_types)
        self._reversed = reversed_
        self._observers: list[FilterObserver] = []

    @property
    def search(self) -> str:
        return self._search

    @property
    def hidden_types(self) -> frozenset[str]:
        return self._hidden_types

    @property
    def reversed(self) -> bool:
        return self._reversed

    # ----- Search -----

    def set_search(self, text: str) -> None:
        if text != self._search:
            self._search = text
            self._changed()

    def clear_search(self) -> None:
        self.set_search("")

    # ----- Hidden types -----

    def hide_type(self, command_type: str) -> None:
        self.set_hidden_types(self._hidden_types | {command_type})

    def show_type(self, command_type: str) -> None:
        self.set_hidden_types(self._hidden_types - {command_type})

    def toggle_type(self, command_type: str) -> None:
        if command_type in self._hidden_types:
            self.show_type(command_type)
        else:
            self.hide_type(command_type)

    def set_hidden_types(self, command_types: Iterable[str]) -> None:
        hidden = frozenset(command_types)
        if hidden != self._hidden_types:
            self._hidden_types = hidden
            self._changed()

    # ----- Ordering -----

    def toggle_reverse(self) -> None:
        self._reversed = not self._reversed
        self._changed()

    def reset(self) -> None:
        """Restore defaults: no search, nothing hidden, arrival order."""
        if self._search or self._hidden_types or self._reversed:
            self._search = ""
            self._hidden_types = frozenset()
            self._reversed = False
            self._changed()

    # ----- Observers -----

    def subscribe(self, observer: FilterObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: FilterObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _changed(self) -> None:
        for observer in tuple(self._observers):
            try:
                observer(self)
            except Exception as exc:
                print(f"  Filter observer error: {exc}", file=sys.stderr)

    def __repr__(self) -> str:
        return (
            f"FilterState(search={self._search!r}, "
            f"hidden_types={sorted(self._hidden_types)!r}, reversed={self._reversed})"
        )
