"""Command log files — JSON arrays (raw exports) and NDJSON streams."""

from __future__ import annotations

import json
from pathlib import Path

from tock._errors import CommandError
from tock.timeline.command import Command


def parse_commands(text: str) -> list[Command]:
    """Parse a JSON array of commands or one command object per line.

    Raises:
        CommandError: If the text is neither, or any command is malformed.
            NDJSON errors name the offending line.

    """
    stripped = text.strip()
    if not stripped:
        return []
    if stripped.startswith("["):
        try:
            data = json.loads(stripped)
        except ValueError as exc:
            msg = f"Invalid JSON command log: {exc}"
            raise CommandError(msg) from exc
        return [Command.from_dict(item) for item in data]

    commands: list[Command] = []
    for lineno, line in enumerate(stripped.splitlines(), start=1):
        command = parse_line(line, lineno=lineno)
        if command is not None:
            commands.append(command)
    return commands


def parse_line(line: str, *, lineno: int = 0) -> Command | None:
    """Parse one NDJSON line; blank lines yield ``None``."""
    line = line.strip()
    if not line:
        return None
    try:
        data = json.loads(line)
    except ValueError as exc:
        msg = f"Line {lineno}: invalid JSON: {exc}" if lineno else f"Invalid JSON: {exc}"
        raise CommandError(msg) from exc
    try:
        return Command.from_dict(data)
    except CommandError as exc:
        if not lineno:
            raise
        msg = f"Line {lineno}: {exc}"
        raise CommandError(msg) from exc


def load_commands(path: Path) -> list[Command]:
    """Read and parse a command log file."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Cannot read command log {path}: {exc}"
        raise CommandError(msg) from exc
    return parse_commands(text)
