"""Command — one instrumentation event received from the monitored app.

Commands arrive in the wire form::

    {"type": "api.response", "messageId": 7, "date": "2024-05-01T10:00:00.000Z",
     "payload": {...}, "important": false, "connectionId": 1}

``Command.from_dict`` parses it; ``Command.to_dict`` restores it.  Keys the
model does not know about, and known keys whose values it cannot type, are
kept in ``extra`` so that a raw export reproduces every field as received.

A Command owns its data: ``payload`` and ``extra`` are deep-copied on
construction, and ``extra`` is read-only.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from tock._errors import CommandError

_KNOWN_KEYS = frozenset({"type", "messageId", "date", "payload", "important", "connectionId"})


@dataclass(frozen=True, slots=True)
class Command:
    """A single timeline event.

    Attributes:
        type: Discriminator selecting rendering and export treatment.
        payload: Type-specific structured data.
        date: Time of receipt (timezone-aware).
        message_id: Unique id assigned by the store; ``None`` until stored.
        important: Flagged by the sender as worth highlighting.
        connection_id: Id of the client connection that sent the command.
        extra: Wire fields not modelled above (or not typeable by them),
            preserved verbatim and emitted by ``to_dict``.

    """

    type: str
    payload: Any = None
    date: datetime = field(default_factory=lambda: datetime.now(UTC))
    message_id: int | None = None
    important: bool = False
    connection_id: int | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "payload", copy.deepcopy(self.payload))
        object.__setattr__(self, "extra", MappingProxyType(copy.deepcopy(dict(self.extra))))

    def with_id(self, message_id: int) -> Command:
        """Return a copy carrying the given message id."""
        return replace(self, message_id=message_id)

    @property
    def timestamp(self) -> str:
        """ISO-8601 UTC timestamp with millisecond precision (``...Z``)."""
        return format_timestamp(self.date)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Command:
        """Parse a command from its wire form.

        Raises:
            CommandError: If ``type`` is missing or ``date``/``messageId``
                cannot be interpreted.

        """
        if not isinstance(data, Mapping):
            msg = f"Command must be an object, got {type(data).__name__}"
            raise CommandError(msg)
        command_type = data.get("type")
        if not isinstance(command_type, str) or not command_type:
            msg = "Command is missing a 'type'"
            raise CommandError(msg)

        message_id = data.get("messageId")
        if message_id is not None and (
            isinstance(message_id, bool) or not isinstance(message_id, int)
        ):
            msg = f"messageId must be an integer, got {message_id!r}"
            raise CommandError(msg)

        extra = {k: v for k, v in data.items() if k not in _KNOWN_KEYS}
        important = data.get("important", False)
        if not isinstance(important, bool):
            extra["important"] = important
        connection_id = data.get("connectionId")
        if connection_id is not None and (
            isinstance(connection_id, bool) or not isinstance(connection_id, int)
        ):
            extra["connectionId"] = connection_id
            connection_id = None

        return cls(
            type=command_type,
            payload=data.get("payload"),
            date=parse_date(data.get("date")),
            message_id=message_id,
            important=bool(important),
            connection_id=connection_id,
            extra=extra,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form of this command."""
        result: dict[str, Any] = {
            "type": self.type,
            "messageId": self.message_id,
            "date": self.timestamp,
            "payload": copy.deepcopy(self.payload),
            "important": self.important,
        }
        if self.connection_id is not None:
            result["connectionId"] = self.connection_id
        result.update(copy.deepcopy(dict(self.extra)))
        return result


def parse_date(value: Any) -> datetime:
    """Interpret a wire ``date`` value.

    Accepts an aware or naive ``datetime`` (naive is taken as UTC), epoch
    milliseconds, or an ISO-8601 string.  A missing date means "now".
    """
    if value is None:
        return datetime.now(UTC)
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if isinstance(value, bool):
        msg = f"Invalid command date: {value!r}"
        raise CommandError(msg)
    if isinstance(value, int | float):
        try:
            return datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError) as exc:
            msg = f"Invalid command date: {value!r}"
            raise CommandError(msg) from exc
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError as exc:
            msg = f"Invalid command date: {value!r}"
            raise CommandError(msg) from exc
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
    msg = f"Invalid command date: {value!r}"
    raise CommandError(msg)


def format_timestamp(value: datetime) -> str:
    """Format as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    utc = value.astimezone(UTC)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"
