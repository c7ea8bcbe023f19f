from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

PLAYER_COUNTS = (0, 1, 2)


@dataclass(frozen=True, slots=True)
class SessionConfig:
    players: int | None = None  # None == ask at startup
    thinking_delay_ms: int = 500
    seed: int | None = None
    clear_screen: bool = True
    log_level: str = "WARNING"

    @property
    def thinking_delay_s(self) -> float:
        return self.thinking_delay_ms / 1000.0

    def merged(self, **overrides: Any) -> SessionConfig:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


_FIELD_TYPES: dict[str, type] = {
    "players": int,
    "thinking_delay_ms": int,
    "seed": int,
    "clear_screen": bool,
    "log_level": str,
}


def _check(key: str, value: Any) -> Any:
    want = _FIELD_TYPES[key]
    # bool is an int subclass; don't let `players = true` through.
    if isinstance(value, bool) and want is not bool:
        raise ValueError(f"config key {key!r} must be {want.__name__}, got bool")
    if not isinstance(value, want):
        raise ValueError(f"config key {key!r} must be {want.__name__}, got {type(value).__name__}")
    if key == "players" and value not in PLAYER_COUNTS:
        raise ValueError(f"players must be one of {PLAYER_COUNTS}, got {value!r}")
    if key == "thinking_delay_ms" and value < 0:
        raise ValueError(f"thinking_delay_ms must be >= 0, got {value!r}")
    if key == "log_level" and not isinstance(logging.getLevelName(value.upper()), int):
        raise ValueError(f"unknown log_level: {value!r}")
    return value


def config_from_mapping(data: dict[str, Any]) -> SessionConfig:
    """
    Build a SessionConfig from a parsed TOML document.

    Keys may sit at the top level or under a [ttt] table; the table wins on conflicts.
    """
    table = dict(data)
    nested = table.pop("ttt", {})
    if not isinstance(nested, dict):
        raise ValueError("[ttt] must be a TOML table")
    table.update(nested)

    known = {f.name for f in fields(SessionConfig)}
    unknown = sorted(set(table) - known)
    if unknown:
        raise ValueError(f"unknown config key(s): {', '.join(unknown)}")

    return SessionConfig(**{k: _check(k, v) for k, v in table.items()})


def load_config(path: Path) -> SessionConfig:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ValueError(f"cannot read config {path}: {e.strerror or e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"invalid TOML in {path}: {e}") from e
    return config_from_mapping(data)
