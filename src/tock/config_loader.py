"""Load TockConfig from tock.yaml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from tock._errors import ConfigError
from tock.config import TockConfig

_KNOWN_KEYS = frozenset({
    "debounce_ms", "export_dir", "hidden_types", "reversed",
    "max_log_events", "follow_poll_ms",
})


def load_config(root: Path, **overrides: object) -> TockConfig:
    """Load TockConfig from root, optionally merging tock.yaml.

    Looks for tock.yaml, tock.yml, or tock.toml in root. If found, loads
    and merges with overrides. Overrides take precedence; ``None``
    overrides are ignored so unset CLI flags don't mask file values.
    """
    file_config = _read_tock_config(root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    unknown = set(merged) - _KNOWN_KEYS
    if unknown:
        msg = f"Unknown config keys: {', '.join(sorted(unknown))}"
        raise ConfigError(msg)
    if "export_dir" in merged and not isinstance(merged["export_dir"], Path):
        merged["export_dir"] = Path(str(merged["export_dir"])).expanduser()
    if "hidden_types" in merged:
        merged["hidden_types"] = frozenset(merged["hidden_types"])  # type: ignore[arg-type]
    return TockConfig(**merged)  # type: ignore[arg-type]


def _read_tock_config(root: Path) -> dict[str, object]:
    """Read tock config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("tock.yaml", "tock.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "tock.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    """Parse YAML config."""
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML in {path.name}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        return {}
    return _flatten_tock_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    """Parse TOML config."""
    try:
        data = tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_tock_section(data)


def _flatten_tock_section(data: dict[str, object]) -> dict[str, object]:
    """Extract tock.* keys into top-level config."""
    result: dict[str, object] = {}
    tock = data.get("tock")
    if isinstance(tock, dict):
        for k, v in tock.items():
            result[k] = v
    for k, v in data.items():
        if k != "tock" and k in _KNOWN_KEYS:
            result[k] = v
    return result
