"""Command type registry — maps a command's ``type`` to its contract.

A ``CommandContract`` is what a command type must supply to appear on the
timeline: a render strategy and a searchable-text projection.  Lookup is
explicit: ``resolve()`` returns ``None`` for unregistered types, and callers
skip rendering those commands.  They stay in the store and are exported.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeAlias

from tock._errors import RegistryError

if TYPE_CHECKING:
    from tock._types import RenderFunc
    from tock.timeline.command import Command

SearchFunc: TypeAlias = Callable[["Command"], Iterable[str]]

# Payload fields every command type is searchable by.
_COMMON_PATHS: tuple[tuple[str, ...], ...] = (
    ("message",),
    ("preview",),
    ("name",),
    ("path",),
    ("triggerType",),
    ("description",),
    ("request", "url"),
    ("action", "type"),
)


def payload_get(payload: Any, *path: str) -> Any:
    """Walk nested mappings; return ``None`` where the path doesn't exist."""
    value = payload
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def default_search_text(command: Command) -> Iterator[str]:
    """The projection used for every type: its name plus common payload fields."""
    yield command.type
    for path in _COMMON_PATHS:
        value = payload_get(command.payload, *path)
        if isinstance(value, str):
            yield value


@dataclass(frozen=True, slots=True)
class CommandContract:
    """Capabilities registered for one command type.

    Attributes:
        title: Human-readable name shown in the timeline and type chooser.
        render: Renders a command of this type as display text.
        group: Type-chooser group the type is listed under.
        search: Extra searchable strings beyond the common projection.

    """

    title: str
    render: RenderFunc
    group: str = "Custom"
    search: SearchFunc | None = None

    def search_text(self, command: Command) -> Iterator[str]:
        """All strings the search box matches against for ``command``."""
        yield from default_search_text(command)
        if self.search is not None:
            yield from self.search(command)


class CommandRegistry:
    """Lookup table from command type to ``CommandContract``."""

    __slots__ = ("_contracts",)

    def __init__(self) -> None:
        self._contracts: dict[str, CommandContract] = {}

    def register(
        self,
        command_type: str,
        contract: CommandContract,
        *,
        replace: bool = False,
    ) -> None:
        """Register ``contract`` for ``command_type``.

        Raises:
            RegistryError: If the type is already registered and ``replace``
                is false.

        """
        if not command_type:
            msg = "Command type must be a non-empty string"
            raise RegistryError(msg)
        if command_type in self._contracts and not replace:
            msg = f"Command type {command_type!r} is already registered"
            raise RegistryError(msg)
        self._contracts[command_type] = contract

    def unregister(self, command_type: str) -> None:
        """Remove a registration.  Unknown types are ignored."""
        self._contracts.pop(command_type, None)

    def resolve(self, command_type: str) -> CommandContract | None:
        """Return the contract for ``command_type``, or ``None`` if unknown."""
        return self._contracts.get(command_type)

    def types(self) -> tuple[str, ...]:
        """Registered types in registration order."""
        return tuple(self._contracts)

    def groups(self) -> dict[str, tuple[str, ...]]:
        """Registered types grouped for the hidden-type chooser."""
        grouped: dict[str, list[str]] = {}
        for command_type, contract in self._contracts.items():
            grouped.setdefault(contract.group, []).append(command_type)
        return {name: tuple(items) for name, items in grouped.items()}

    def search_text(self, command: Command) -> Iterator[str]:
        """Search projection for ``command``, falling back to the default one."""
        contract = self.resolve(command.type)
        if contract is None:
            return default_search_text(command)
        return contract.search_text(command)

    def __contains__(self, command_type: object) -> bool:
        return command_type in self._contracts

    def __len__(self) -> int:
        return len(self._contracts)
