"""Session settings and TOML loading."""
from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

DEFAULT_CONFIG_FILE = "pomodoro.toml"
CONFIG_ENV_VAR = "POMODORO_CONFIG_FILE"

DEFAULTS = {
    "work_minutes": 25,
    "rest_minutes": 5,
    "pomodori": 1,
    "count_down": True,
}


class SessionConfigurationError(ValueError):
    """Raised when session settings are invalid or cannot be loaded."""


@dataclass(frozen=True)
class SessionSettings:
    """Durations and display options for one session."""

    work_minutes: int = DEFAULTS["work_minutes"]
    rest_minutes: int = DEFAULTS["rest_minutes"]
    pomodori: int = DEFAULTS["pomodori"]
    count_down: bool = DEFAULTS["count_down"]

    def __post_init__(self) -> None:
        for name in ("work_minutes", "rest_minutes", "pomodori"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise SessionConfigurationError(f"{name} must be an integer")
        if self.pomodori < 1:
            raise SessionConfigurationError("pomodori must be at least 1")
        if min(self.work_minutes, self.rest_minutes) <= 0:
            raise SessionConfigurationError("all durations must be positive")
        if not isinstance(self.count_down, bool):
            raise SessionConfigurationError("count_down must be a boolean")

    @property
    def work_seconds(self) -> int:
        return self.work_minutes * 60

    @property
    def rest_seconds(self) -> int:
        return self.rest_minutes * 60

    def with_overrides(self, **overrides: Any) -> "SessionSettings":
        """Return a copy with every non-None override applied."""
        values = {
            "work_minutes": self.work_minutes,
            "rest_minutes": self.rest_minutes,
            "pomodori": self.pomodori,
            "count_down": self.count_down,
        }
        for key, value in overrides.items():
            if key not in values:
                raise SessionConfigurationError(f"Unknown setting: {key}")
            if value is not None:
                values[key] = value
        return SessionSettings(**values)


def resolve_config_path(config_path: Optional[str] = None) -> Optional[Path]:
    """Pick the config file from the argument, the environment or the default name.

    Returns None when no path was requested and the default file is absent.
    """
    env_path = os.getenv(CONFIG_ENV_VAR)
    raw = config_path or env_path
    if raw is None:
        default = Path.cwd() / DEFAULT_CONFIG_FILE
        return default if default.is_file() else None
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    return path


def load_settings(config_path: Optional[str] = None) -> SessionSettings:
    path = resolve_config_path(config_path)
    if path is None:
        return SessionSettings()
    if not path.exists():
        raise SessionConfigurationError(f"Config file not found: {path}")
    if not path.is_file():
        raise SessionConfigurationError(f"Config path is not a file: {path}")

    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as error:
        raise SessionConfigurationError(f"Failed to parse config TOML: {error}") from error

    return settings_from_mapping(_section(raw, "session"))


def settings_from_mapping(raw: Mapping[str, Any]) -> SessionSettings:
    return SessionSettings(
        work_minutes=_as_int(raw.get("work_minutes", DEFAULTS["work_minutes"]), "session.work_minutes"),
        rest_minutes=_as_int(raw.get("rest_minutes", DEFAULTS["rest_minutes"]), "session.rest_minutes"),
        pomodori=_as_int(raw.get("pomodori", DEFAULTS["pomodori"]), "session.pomodori"),
        count_down=_as_bool(raw.get("count_down", DEFAULTS["count_down"]), "session.count_down"),
    )


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = raw.get(name, {})
    if not isinstance(value, Mapping):
        raise SessionConfigurationError(f"[{name}] must be a table.")
    return value


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SessionConfigurationError(f"{field} must be an integer")
    return value


def _as_bool(value: Any, field: str) -> bool:
    if not isinstance(value, bool):
        raise SessionConfigurationError(f"{field} must be a boolean")
    return value
