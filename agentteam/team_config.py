"""Team configuration: the ``KEY=VALUE`` agents file, its defaults and its rendering."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path


class ConfigError(Exception):
    """Raised when a configuration file cannot be loaded."""


@dataclass
class InstructionRoleConfig:
    """Instruction file paths per role."""

    po_instruction_path: str = ""
    manager_instruction_path: str = ""
    dev_instruction_path: str = ""


@dataclass
class InstructionGlobalConfig:
    """Settings shared by all instruction lookups."""

    default_extension: str = ""
    search_paths: list[str] = field(default_factory=list)
    cache_enabled: bool = False
    cache_ttl: timedelta = timedelta(0)


@dataclass
class InstructionConfig:
    """Extended instruction configuration with per-environment overrides."""

    base: InstructionRoleConfig = field(default_factory=InstructionRoleConfig)
    environments: dict[str, InstructionRoleConfig] = field(default_factory=dict)
    global_config: InstructionGlobalConfig = field(default_factory=InstructionGlobalConfig)


@dataclass
class TeamConfig:
    """Settings for an AI team session."""

    claude_cli_path: str = ""
    instructions_dir: str = ""
    working_dir: str = ""
    config_dir: str = ""
    log_file: str = ""

    max_processes: int = 4
    max_memory_mb: int = 1024
    max_cpu_percent: float = 80.0
    log_level: str = "info"
    health_check_interval: timedelta = timedelta(seconds=30)
    max_restart_attempts: int = 3

    session_name: str = "ai-teams"
    default_layout: str = "integrated"
    auto_attach: bool = False
    pane_count: int = 6

    auth_check_interval: timedelta = timedelta(minutes=30)
    auth_backup_dir: str = ""
    ide_backup_enabled: bool = True

    startup_timeout: timedelta = timedelta(seconds=10)
    shutdown_timeout: timedelta = timedelta(seconds=15)
    restart_delay: timedelta = timedelta(seconds=5)
    process_timeout: timedelta = timedelta(seconds=30)

    send_command: str = "send-agent"
    binary_name: str = "claude-code-agents"

    dev_count: int = 4

    po_instruction_file: str = "po.md"
    manager_instruction_file: str = "manager.md"
    dev_instruction_file: str = "developer.md"

    instruction_config: InstructionConfig | None = None
    fallback_instruction_dir: str = ""
    environment: str = ""
    strict_validation: bool = False

    def set_dev_count(self, count: int) -> None:
        """Set the number of developers; non-positive counts are ignored."""
        if count > 0:
            self.dev_count = count
            self.pane_count = 2 + count

    def agent_list(self) -> list[str]:
        """Agent names: po, manager, then dev1..devN."""
        return ["po", "manager", *(f"dev{i}" for i in range(1, self.dev_count + 1))]

    def pane_agent_map(self) -> dict[str, str]:
        """Map of pane number (as text) to agent name."""
        panes = {"1": "po", "2": "manager"}
        panes.update({str(i + 2): f"dev{i}" for i in range(1, self.dev_count + 1)})
        return panes

    def pane_titles(self) -> dict[str, str]:
        """Map of pane number (as text) to pane title."""
        titles = {"1": "PO", "2": "Manager"}
        titles.update({str(i + 2): f"Dev{i}" for i in range(1, self.dev_count + 1)})
        return titles


_NANOS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_PART = re.compile(r"(\d*)(?:\.(\d*))?(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as ``30s``, ``1h30m`` or ``1.5s``."""
    text = value
    negative = False
    if text[:1] in ("+", "-") and text:
        negative = text[0] == "-"
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f'invalid duration "{value}"')

    total = 0
    pos = 0
    while pos < len(text):
        match = _DURATION_PART.match(text, pos)
        if match is None:
            raise ValueError(f'invalid duration "{value}"')
        whole, fraction, unit = match.groups()
        fraction = fraction or ""
        if not whole and not fraction:
            raise ValueError(f'invalid duration "{value}"')
        scale = _NANOS[unit]
        total += int(whole or "0") * scale
        if fraction:
            total += int(fraction) * scale // 10 ** len(fraction)
        pos = match.end()

    micros = total // 1000
    return timedelta(microseconds=-micros if negative else micros)


def _fraction(nanos: int, unit: int) -> str:
    whole, rest = divmod(nanos, unit)
    if not rest:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}." + f"{rest:0{digits}d}".rstrip("0")


def format_duration(duration: timedelta) -> str:
    """Format a duration the way the configuration file writes it, e.g. ``1h0m0s`` or ``30s``."""
    nanos = ((duration.days * 86400 + duration.seconds) * 1_000_000 + duration.microseconds) * 1000
    if nanos == 0:
        return "0s"
    sign = "-" if nanos < 0 else ""
    nanos = abs(nanos)
    if nanos < 1_000_000_000:
        if nanos < 1_000:
            return f"{sign}{nanos}ns"
        if nanos < 1_000_000:
            return f"{sign}{_fraction(nanos, 1_000)}µs"
        return f"{sign}{_fraction(nanos, 1_000_000)}ms"
    seconds, rest = divmod(nanos, 1_000_000_000)
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    text = str(secs)
    if rest:
        text += "." + f"{rest:09d}".rstrip("0")
    text += "s"
    if hours or minutes:
        text = f"{minutes}m{text}"
    if hours:
        text = f"{hours}h{text}"
    return sign + text


def default_team_config(home: str | None = None, working_dir: str | None = None) -> TeamConfig:
    """Return the default team configuration rooted at ``home``."""
    home = home if home is not None else str(Path.home())
    working_dir = working_dir if working_dir is not None else os.getcwd()
    claude_dir = os.path.join(home, ".claude")
    agents_dir = os.path.join(claude_dir, "claude-code-agents")
    return TeamConfig(
        claude_cli_path=os.path.join(claude_dir, "local", "claude"),
        instructions_dir=os.path.join(agents_dir, "instructions"),
        working_dir=working_dir,
        config_dir=agents_dir,
        log_file=os.path.join(agents_dir, "logs", "manager.log"),
        auth_backup_dir=os.path.join(agents_dir, "auth_backup"),
    )


_STRING_KEYS = {
    "CLAUDE_CLI_PATH": "claude_cli_path",
    "INSTRUCTIONS_DIR": "instructions_dir",
    "CONFIG_DIR": "config_dir",
    "LOG_FILE": "log_file",
    "LOG_LEVEL": "log_level",
    "SESSION_NAME": "session_name",
    "DEFAULT_LAYOUT": "default_layout",
    "AUTH_BACKUP_DIR": "auth_backup_dir",
    "SEND_COMMAND": "send_command",
    "BINARY_NAME": "binary_name",
    "PO_INSTRUCTION_FILE": "po_instruction_file",
    "MANAGER_INSTRUCTION_FILE": "manager_instruction_file",
    "DEV_INSTRUCTION_FILE": "dev_instruction_file",
}
_BOOL_KEYS = {
    "AUTO_ATTACH": "auto_attach",
    "IDE_BACKUP_ENABLED": "ide_backup_enabled",
}
_DURATION_KEYS = {
    "HEALTH_CHECK_INTERVAL": "health_check_interval",
    "AUTH_CHECK_INTERVAL": "auth_check_interval",
    "STARTUP_TIMEOUT": "startup_timeout",
    "SHUTDOWN_TIMEOUT": "shutdown_timeout",
    "RESTART_DELAY": "restart_delay",
    "PROCESS_TIMEOUT": "process_timeout",
}
_INTEGER = re.compile(r"[+-]?[0-9]+")


def _apply_setting(config: TeamConfig, key: str, value: str) -> None:
    if key in _STRING_KEYS:
        setattr(config, _STRING_KEYS[key], value)
    elif key in _BOOL_KEYS:
        setattr(config, _BOOL_KEYS[key], value == "true")
    elif key in _DURATION_KEYS:
        try:
            setattr(config, _DURATION_KEYS[key], parse_duration(value))
        except ValueError:
            pass
    elif key == "DEV_COUNT":
        if _INTEGER.fullmatch(value) and int(value) > 0:
            config.dev_count = int(value)
    # WORKING_DIR is deliberately ignored: the working directory is detected, not configured.


def load_team_config_from_path(
    config_path: str, home: str | None = None, working_dir: str | None = None
) -> TeamConfig:
    """Load a team configuration file over the defaults; a missing file yields the defaults."""
    config = default_team_config(home, working_dir)
    if not os.path.exists(config_path):
        return config

    clean_path = os.path.normpath(config_path)
    if ".." in clean_path:
        raise ConfigError("config path contains directory traversal")

    try:
        with open(clean_path, encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#"):
                    continue
                key, sep, value = line.partition("=")
                if not sep:
                    continue
                _apply_setting(config, key.strip(), value.strip())
    except OSError as exc:
        raise ConfigError(f"failed to read config file: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"failed to read config file: {exc}") from exc

    return config


def render_team_config(config: TeamConfig) -> str:
    """Render the configuration in the agents file format."""
    auto_attach = str(config.auto_attach).lower()
    ide_backup = str(config.ide_backup_enabled).lower()
    return f"""# AI Team Configuration File
# Generated by Claude Code Agents

# Path Configurations
CLAUDE_CLI_PATH={config.claude_cli_path}
INSTRUCTIONS_DIR={config.instructions_dir}
CONFIG_DIR={config.config_dir}
LOG_FILE={config.log_file}
AUTH_BACKUP_DIR={config.auth_backup_dir}

# System Settings
LOG_LEVEL={config.log_level}

# Tmux Settings
SESSION_NAME={config.session_name}
DEFAULT_LAYOUT={config.default_layout}
AUTO_ATTACH={auto_attach}
IDE_BACKUP_ENABLED={ide_backup}

# Commands
SEND_COMMAND={config.send_command}
BINARY_NAME={config.binary_name}

# Developer Settings
DEV_COUNT={config.dev_count}

# Role-based Instructions
PO_INSTRUCTION_FILE={config.po_instruction_file}
MANAGER_INSTRUCTION_FILE={config.manager_instruction_file}
DEV_INSTRUCTION_FILE={config.dev_instruction_file}

# Timeout Settings
HEALTH_CHECK_INTERVAL={format_duration(config.health_check_interval)}
AUTH_CHECK_INTERVAL={format_duration(config.auth_check_interval)}
STARTUP_TIMEOUT={format_duration(config.startup_timeout)}
SHUTDOWN_TIMEOUT={format_duration(config.shutdown_timeout)}
RESTART_DELAY={format_duration(config.restart_delay)}
PROCESS_TIMEOUT={format_duration(config.process_timeout)}
"""