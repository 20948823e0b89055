"""Built-in contracts for the command types a monitored app sends.

Groups mirror the hidden-type chooser:

    Informational   log, image, display
    General         client.intro, benchmark.report
    Async Storage   asyncStorage.mutation
    State & Sagas   state.*, saga.task.complete
    Network         api.response

Renderers produce one line of plain text per command.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from tock.commands.registry import CommandContract, CommandRegistry, payload_get

if TYPE_CHECKING:
    from tock.timeline.command import Command

_PREVIEW_LIMIT = 80


def _preview(value: Any) -> str:
    """Compact single-line rendering of an arbitrary payload value."""
    if isinstance(value, str):
        text = value
    else:
        try:
            text = json.dumps(value, default=str, ensure_ascii=False)
        except ValueError:
            # Circular structures
            text = repr(value)
    text = " ".join(text.split())
    if len(text) > _PREVIEW_LIMIT:
        return text[: _PREVIEW_LIMIT - 3] + "..."
    return text


# ---------------------------------------------------------------------------
# Informational
# ---------------------------------------------------------------------------


def _render_log(command: Command) -> str:
    level = payload_get(command.payload, "level") or "debug"
    return f"[{level}] {_preview(payload_get(command.payload, 'message'))}"


def _search_log(command: Command) -> Iterator[str]:
    yield "console"
    message = payload_get(command.payload, "message")
    if message is not None and not isinstance(message, str):
        yield _preview(message)


def _render_image(command: Command) -> str:
    caption = payload_get(command.payload, "caption") or ""
    width = payload_get(command.payload, "width")
    height = payload_get(command.payload, "height")
    size = f" ({width}x{height})" if width and height else ""
    return f"image {caption}{size}".rstrip()


def _search_image(command: Command) -> Iterator[str]:
    for key in ("caption", "filename"):
        value = payload_get(command.payload, key)
        if isinstance(value, str):
            yield value


def _render_display(command: Command) -> str:
    name = payload_get(command.payload, "name") or "Display"
    preview = payload_get(command.payload, "preview")
    if preview is None:
        preview = _preview(payload_get(command.payload, "value"))
    return f"{name}: {preview}"


# ---------------------------------------------------------------------------
# General
# ---------------------------------------------------------------------------


def _render_client_intro(command: Command) -> str:
    name = payload_get(command.payload, "name") or "client"
    platform = payload_get(command.payload, "platform")
    return f"connected {name}" + (f" ({platform})" if platform else "")


def _render_benchmark(command: Command) -> str:
    title = payload_get(command.payload, "title") or "benchmark"
    steps = payload_get(command.payload, "steps")
    count = len(steps) if isinstance(steps, list) else 0
    return f"{title}: {count} steps"


# ---------------------------------------------------------------------------
# Async storage
# ---------------------------------------------------------------------------


def _render_async_storage(command: Command) -> str:
    action = payload_get(command.payload, "action") or "mutation"
    return f"{action} {_preview(payload_get(command.payload, 'data'))}"


def _search_async_storage(command: Command) -> Iterator[str]:
    action = payload_get(command.payload, "action")
    if isinstance(action, str):
        yield action


# ---------------------------------------------------------------------------
# State & sagas
# ---------------------------------------------------------------------------


def _render_action(command: Command) -> str:
    name = payload_get(command.payload, "name") or payload_get(
        command.payload, "action", "type"
    )
    ms = payload_get(command.payload, "ms")
    return f"action {name}" + (f" ({ms}ms)" if ms is not None else "")


def _render_values_change(command: Command) -> str:
    changes = payload_get(command.payload, "changes")
    if not isinstance(changes, list):
        return "state changed"
    paths = [str(payload_get(change, "path")) for change in changes]
    return "changed " + ", ".join(paths)


def _search_values_change(command: Command) -> Iterator[str]:
    changes = payload_get(command.payload, "changes")
    if isinstance(changes, list):
        for change in changes:
            path = payload_get(change, "path")
            if isinstance(path, str):
                yield path


def _render_values_response(command: Command) -> str:
    path = payload_get(command.payload, "path") or "(root)"
    return f"{path} = {_preview(payload_get(command.payload, 'value'))}"


def _render_keys_response(command: Command) -> str:
    path = payload_get(command.payload, "path") or "(root)"
    keys = payload_get(command.payload, "keys")
    return f"{path} keys: {_preview(keys if keys is not None else [])}"


def _render_backup(command: Command) -> str:
    return f"state backup {_preview(payload_get(command.payload, 'state'))}"


def _render_saga(command: Command) -> str:
    trigger = payload_get(command.payload, "triggerType") or "saga"
    duration = payload_get(command.payload, "duration")
    return f"saga {trigger}" + (f" ({duration}ms)" if duration is not None else "")


# ---------------------------------------------------------------------------
# Network
# ---------------------------------------------------------------------------


def _render_api_response(command: Command) -> str:
    method = str(payload_get(command.payload, "request", "method") or "GET").upper()
    url = payload_get(command.payload, "request", "url") or ""
    status = payload_get(command.payload, "response", "status")
    duration = payload_get(command.payload, "duration")
    line = f"{method} {url} -> {status}"
    if duration is not None:
        line += f" ({duration}ms)"
    return line


def _search_api_response(command: Command) -> Iterator[str]:
    yield "api"
    method = payload_get(command.payload, "request", "method")
    if isinstance(method, str):
        yield method
    status = payload_get(command.payload, "response", "status")
    if status is not None:
        yield str(status)


_BUILTINS: tuple[tuple[str, CommandContract], ...] = (
    ("log", CommandContract("Log", _render_log, "Informational", _search_log)),
    ("image", CommandContract("Image", _render_image, "Informational", _search_image)),
    ("display", CommandContract("Custom Display", _render_display, "Informational")),
    ("client.intro", CommandContract("Connection", _render_client_intro, "General")),
    ("benchmark.report", CommandContract("Benchmark", _render_benchmark, "General")),
    (
        "asyncStorage.mutation",
        CommandContract(
            "Async Storage", _render_async_storage, "Async Storage", _search_async_storage
        ),
    ),
    ("state.action.complete", CommandContract("Action", _render_action, "State & Sagas")),
    ("saga.task.complete", CommandContract("Saga", _render_saga, "State & Sagas")),
    (
        "state.values.change",
        CommandContract(
            "Subscription Changed", _render_values_change, "State & Sagas", _search_values_change
        ),
    ),
    (
        "state.keys.response",
        CommandContract("State Keys", _render_keys_response, "State & Sagas"),
    ),
    (
        "state.values.response",
        CommandContract("State Values", _render_values_response, "State & Sagas"),
    ),
    (
        "state.backup.response",
        CommandContract("State Backup", _render_backup, "State & Sagas"),
    ),
    ("api.response", CommandContract("API", _render_api_response, "Network", _search_api_response)),
)


def register_builtins(registry: CommandRegistry) -> CommandRegistry:
    """Register every built-in contract on ``registry`` and return it."""
    for command_type, contract in _BUILTINS:
        registry.register(command_type, contract)
    return registry


def default_registry() -> CommandRegistry:
    """A fresh registry populated with the built-in command types."""
    return register_builtins(CommandRegistry())
