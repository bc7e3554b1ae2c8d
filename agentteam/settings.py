"""Manager settings stored as JSON, with resource and health checks."""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass, fields
from datetime import timedelta
from pathlib import Path
from typing import Any

from agentteam.team_config import ConfigError

_NANOS_PER_MICRO = 1_000
_NANOS_PER_SECOND = 1_000_000_000


@dataclass
class Config:
    """Settings for process control, resources, logging and monitoring."""

    max_processes: int = 1
    restart_delay: timedelta = timedelta(seconds=5)
    process_timeout: timedelta = timedelta(seconds=30)
    startup_timeout: timedelta = timedelta(seconds=10)
    shutdown_timeout: timedelta = timedelta(seconds=15)

    max_memory_mb: int = 1024
    max_cpu_percent: float = 80.0

    auth_check_interval: timedelta = timedelta(minutes=30)

    log_level: str = "info"
    log_file: str = ""

    claude_path: str = ""
    instructions_dir: str = ""

    health_check_interval: timedelta = timedelta(seconds=30)
    max_restart_attempts: int = 3

    dev_count: int = 4


_DURATION_FIELDS = frozenset(
    {
        "restart_delay",
        "process_timeout",
        "startup_timeout",
        "shutdown_timeout",
        "auth_check_interval",
        "health_check_interval",
    }
)
_INT_FIELDS = frozenset({"max_processes", "max_memory_mb", "max_restart_attempts", "dev_count"})
_FLOAT_FIELDS = frozenset({"max_cpu_percent"})


def _to_nanos(duration: timedelta) -> int:
    return (duration.days * 86400 + duration.seconds) * _NANOS_PER_SECOND + duration.microseconds * _NANOS_PER_MICRO


def _from_nanos(nanos: int) -> timedelta:
    return timedelta(microseconds=nanos // _NANOS_PER_MICRO)


def _encode(config: Config) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for item in fields(Config):
        value = getattr(config, item.name)
        if item.name in _DURATION_FIELDS:
            value = _to_nanos(value)
        elif item.name in _FLOAT_FIELDS and float(value).is_integer():
            value = int(value)
        data[item.name] = value
    return data


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _apply_json(config: Config, data: Any) -> None:
    if data is None:
        return
    if not isinstance(data, dict):
        raise ConfigError("config file must hold a JSON object")
    known = {item.name for item in fields(Config)}
    for name, value in data.items():
        if name not in known or value is None:
            continue
        if name in _DURATION_FIELDS or name in _INT_FIELDS:
            if not _is_int(value):
                raise ConfigError(f"invalid value for {name}: {value!r}")
            setattr(config, name, _from_nanos(value) if name in _DURATION_FIELDS else value)
        elif name in _FLOAT_FIELDS:
            if not (_is_int(value) or isinstance(value, float)):
                raise ConfigError(f"invalid value for {name}: {value!r}")
            setattr(config, name, float(value))
        else:
            if not isinstance(value, str):
                raise ConfigError(f"invalid value for {name}: {value!r}")
            setattr(config, name, value)


def default_config(home: str | None = None) -> Config:
    """Return the default settings rooted at ``home``."""
    home = home if home is not None else str(Path.home())
    claude_dir = os.path.join(home, ".claude")
    agents_dir = os.path.join(claude_dir, "claude-code-agents")
    return Config(
        max_processes=os.cpu_count() or 1,
        log_file=os.path.join(agents_dir, "logs", "manager.log"),
        claude_path=os.path.join(claude_dir, "local", "claude"),
        instructions_dir=os.path.join(agents_dir, "instructions"),
    )


def load_config(config_path: str, home: str | None = None) -> Config:
    """Load settings from ``config_path``; a missing file is created with the defaults."""
    config = default_config(home)
    if not os.path.exists(config_path):
        save_config(config, config_path)
        return config

    clean_path = os.path.normpath(config_path)
    if ".." in clean_path:
        raise ConfigError("config path contains directory traversal")

    try:
        with open(clean_path, encoding="utf-8") as handle:
            data = json.load(handle)
    except OSError as exc:
        raise ConfigError(f"failed to read config file: {exc}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigError(f"invalid config file: {exc}") from exc

    _apply_json(config, data)
    return config


def save_config(config: Config, config_path: str) -> None:
    """Write ``config`` as indented JSON, creating the parent directory."""
    parent = os.path.dirname(config_path)
    if parent:
        os.makedirs(parent, mode=0o750, exist_ok=True)
    text = json.dumps(_encode(config), indent=2, ensure_ascii=False)
    descriptor = os.open(config_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(descriptor, "w", encoding="utf-8") as handle:
        handle.write(text)


def _used_memory_mb() -> int:
    try:
        import resource
    except ImportError:
        return 0
    peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # Peak resident size is reported in bytes on macOS and kilobytes elsewhere.
    peak_bytes = peak if sys.platform == "darwin" else peak * 1024
    return peak_bytes // (1024 * 1024)


class ResourceMonitor:
    """Checks the process's resource use against the configured limits."""

    def __init__(self, config: Config) -> None:
        self.config = config

    def check_memory_usage(self) -> bool:
        """Whether memory use is within the limit; a limit of 0 means no limit."""
        if self.config.max_memory_mb < 0:
            raise ValueError(f"invalid max memory configuration: {self.config.max_memory_mb}")
        if self.config.max_memory_mb == 0:
            return True
        return _used_memory_mb() <= self.config.max_memory_mb

    def check_cpu_usage(self) -> bool:
        """Whether CPU use is within the limit; no sampling is done, so always true."""
        return True


class HealthChecker:
    """Basic health checks of the CLI and its authentication settings."""

    def __init__(self, config: Config) -> None:
        self.config = config

    def check_claude_health(self, claude_path: str) -> None:
        """Raise ``OSError`` if the CLI is missing."""
        os.stat(claude_path)

    def check_auth_health(self, home: str | None = None) -> None:
        """Raise ``OSError`` if the CLI settings file is missing."""
        home = home if home is not None else str(Path.home())
        os.stat(os.path.join(home, ".claude", "settings.json"))