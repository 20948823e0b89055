"""Shared test fixtures for tock."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import pytest

from tock.commands.builtin import default_registry
from tock.commands.registry import CommandRegistry
from tock.timeline.command import Command
from tock.timeline.filters import FilterState
from tock.timeline.store import CommandStore

FIXED_DATE = datetime(2024, 5, 1, 10, 0, 0, 123000, tzinfo=UTC)


def make_command(
    command_type: str = "log",
    payload: Any = None,
    *,
    message_id: int | None = None,
    date: datetime = FIXED_DATE,
    **extra: Any,
) -> Command:
    """Build a Command with a fixed date for deterministic output."""
    return Command(
        type=command_type,
        payload=payload if payload is not None else {},
        date=date,
        message_id=message_id,
        extra=extra,
    )


def make_api_command(
    *,
    method: str = "GET",
    url: str = "http://x/y",
    status: int = 200,
    duration: Any = 12,
    request_headers: dict[str, Any] | None = None,
    request_data: Any = None,
    response_headers: dict[str, Any] | None = None,
    body: Any = "{}",
    message_id: int | None = None,
) -> Command:
    """Build an ``api.response`` command."""
    request: dict[str, Any] = {"method": method, "url": url}
    if request_headers is not None:
        request["headers"] = request_headers
    if request_data is not None:
        request["data"] = request_data
    return make_command(
        "api.response",
        {
            "request": request,
            "response": {
                "status": status,
                "headers": response_headers if response_headers is not None else {},
                "body": body,
            },
            "duration": duration,
        },
        message_id=message_id,
    )


@pytest.fixture
def registry() -> CommandRegistry:
    return default_registry()


@pytest.fixture
def store() -> CommandStore:
    return CommandStore()


@pytest.fixture
def state() -> FilterState:
    return FilterState()


@pytest.fixture
def mixed_store(store: CommandStore) -> CommandStore:
    """A store with one command of several types, in a known order."""
    store.extend([
        make_command("log", {"level": "debug", "message": "app started"}),
        make_api_command(url="https://api.example.com/users"),
        make_command("state.action.complete", {"name": "LOGIN_SUCCESS", "ms": 3}),
        make_command("log", {"level": "warn", "message": "Slow render"}),
        make_command("custom.metric", {"name": "fps", "value": 58}),
    ])
    return store


class VirtualClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000

    def set_ms(self, ms: float) -> None:
        self.now = ms / 1000


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()
