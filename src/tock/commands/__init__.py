"""Command types — the capability contracts the timeline resolves by type."""

from tock.commands.builtin import default_registry, register_builtins
from tock.commands.registry import (
    CommandContract,
    CommandRegistry,
    default_search_text,
    payload_get,
)

__all__ = [
    "CommandContract",
    "CommandRegistry",
    "default_registry",
    "default_search_text",
    "payload_get",
    "register_builtins",
]
