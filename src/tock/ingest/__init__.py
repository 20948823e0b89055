"""Ingestion — getting commands into the store from log files."""

from tock.ingest.follower import LogFollower, TailReader
from tock.ingest.loader import load_commands, parse_commands, parse_line

__all__ = [
    "LogFollower",
    "TailReader",
    "load_commands",
    "parse_commands",
    "parse_line",
]
