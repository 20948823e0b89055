"""Shared type definitions for tock."""

from collections.abc import Callable
from typing import TYPE_CHECKING, Literal, TypeAlias

if TYPE_CHECKING:
    from tock.timeline.command import Command

# Severity of a user-facing notice
NoticeKind: TypeAlias = Literal["info", "warning", "error"]

# Renders one command as display text
RenderFunc: TypeAlias = Callable[["Command"], str]
