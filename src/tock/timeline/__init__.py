"""Timeline layer — the command store and the views derived from it.

Commands flow store -> filter -> order -> render; exports read the store.
"""

from tock.timeline.command import Command
from tock.timeline.debounce import DebouncedQuery
from tock.timeline.filters import FilterState, apply_order, filter_commands, matches
from tock.timeline.store import CommandStore, StoreChange
from tock.timeline.view import RenderedCommand, TimelineView

__all__ = [
    "Command",
    "CommandStore",
    "DebouncedQuery",
    "FilterState",
    "RenderedCommand",
    "StoreChange",
    "TimelineView",
    "apply_order",
    "filter_commands",
    "matches",
]
