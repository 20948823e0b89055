"""Tock error hierarchy.

All tock-specific errors inherit from TockError for easy catching.
"""


class TockError(Exception):
    """Base error for all tock operations."""


class ConfigError(TockError):
    """Invalid or missing configuration."""


class CommandError(TockError):
    """Malformed command data (missing type, unparseable date, bad payload)."""


class DuplicateCommandError(CommandError):
    """A command with the same message id is already in the store."""


class RegistryError(TockError):
    """Misuse of the command type registry."""


class FilterEvaluationError(TockError):
    """The search predicate raised while evaluating a command.

    Attributes:
        command_type: Type of the command being evaluated when it failed.

    """

    def __init__(self, message: str, *, command_type: str = "") -> None:
        super().__init__(message)
        self.command_type = command_type


class ExportError(TockError):
    """Error during timeline export."""


class WriteFailure(ExportError):
    """The file writer could not write the export destination."""
