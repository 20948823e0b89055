"""Export collaborators — where exports go and how the user hears about it.

The exporter depends only on the three protocols below.  A desktop shell
would back them with a save dialog and message boxes; the CLI uses the
plain implementations in this module.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from tock._types import NoticeKind


@dataclass(frozen=True, slots=True)
class SaveOptions:
    """What the destination chooser is asked for.

    Attributes:
        title: Prompt title (e.g. "Export Timeline Log").
        default_name: Suggested file name.
        filters: Allowed extension groups, ``(("JSON Files", ("json",)), ...)``.
        directory: Suggested directory for ``default_name``.

    """

    title: str
    default_name: str
    filters: tuple[tuple[str, tuple[str, ...]], ...] = ()
    directory: Path | None = None

    @property
    def default_path(self) -> Path:
        if self.directory is None:
            return Path(self.default_name)
        return self.directory / self.default_name


@dataclass(frozen=True, slots=True)
class WriteOutcome:
    """Result of a file write: ``ok``, or the ``reason`` it failed."""

    ok: bool
    reason: str = ""


class DestinationChooser(Protocol):
    async def choose_save_destination(self, options: SaveOptions) -> Path | None:
        """Return the chosen path, or ``None`` if the user cancelled."""
        ...


class FileWriter(Protocol):
    def write_text(self, path: Path, content: str) -> WriteOutcome: ...


class NoticePresenter(Protocol):
    async def notify(self, kind: NoticeKind, title: str, message: str) -> None: ...


# ---------------------------------------------------------------------------
# Default implementations
# ---------------------------------------------------------------------------


class FixedDestination:
    """Chooses ``path`` if given, else the suggested default path."""

    __slots__ = ("_path",)

    def __init__(self, path: Path | None = None) -> None:
        self._path = path

    async def choose_save_destination(self, options: SaveOptions) -> Path | None:
        return self._path if self._path is not None else options.default_path


class FilesystemWriter:
    """Writes UTF-8 text, creating parent directories as needed."""

    def write_text(self, path: Path, content: str) -> WriteOutcome:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            return WriteOutcome(ok=False, reason=exc.strerror or str(exc))
        return WriteOutcome(ok=True)


class ConsoleNotices:
    """Prints notices to stderr as ``[KIND] title: message``."""

    async def notify(self, kind: NoticeKind, title: str, message: str) -> None:
        print(f"  [{kind.upper()}] {title}: {message}", file=sys.stderr)
