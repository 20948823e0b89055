"""Tock configuration.

TockConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path

from tock._errors import ConfigError


def _default_export_dir() -> Path:
    return Path.home() / "Downloads"


@dataclass(frozen=True, slots=True)
class TockConfig:
    """Configuration for a timeline session.

    Attributes:
        debounce_ms: Quiescence window for search input, in milliseconds.
        export_dir: Directory that default export filenames are placed in.
            Always resolved to an absolute path on construction.
        hidden_types: Command types hidden from the timeline at startup.
        reversed: Show the newest command first at startup.
        max_log_events: Capacity of the observability event log.
        follow_poll_ms: Poll step for ``tock follow`` file watching.

    """

    debounce_ms: int = 300
    export_dir: Path = field(default_factory=_default_export_dir)
    hidden_types: frozenset[str] = frozenset()
    reversed: bool = False
    max_log_events: int = 10_000
    follow_poll_ms: int = 100

    def __post_init__(self) -> None:
        if self.debounce_ms < 0:
            msg = f"debounce_ms must be >= 0, got {self.debounce_ms}"
            raise ConfigError(msg)
        if self.max_log_events <= 0:
            msg = f"max_log_events must be positive, got {self.max_log_events}"
            raise ConfigError(msg)
        if not isinstance(self.hidden_types, frozenset):
            object.__setattr__(self, "hidden_types", frozenset(self.hidden_types))
        if not self.export_dir.is_absolute():
            object.__setattr__(self, "export_dir", self.export_dir.resolve())
