"""Locating, loading and saving the combined team and manager configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from datetime import timedelta
from pathlib import Path

from agentteam.resolver import InstructionResolver
from agentteam.settings import Config, load_config
from agentteam.team_config import (
    ConfigError,
    InstructionConfig,
    InstructionGlobalConfig,
    InstructionRoleConfig,
    TeamConfig,
    load_team_config_from_path,
    render_team_config,
)
from agentteam.validator import InstructionValidator, ValidationProblem, ValidationResult

_HOME_CONFIG_NAME = ".claude-code-agents.conf"


def _home_or_none(home: str | None) -> str | None:
    if home is not None:
        return home
    try:
        return str(Path.home())
    except RuntimeError:
        return None


@dataclass
class ConfigPaths:
    """Locations of the configuration files and directories."""

    claude_dir: str = ""
    cloud_code_agents_dir: str = ""
    team_config_path: str = ""
    main_config_path: str = ""
    logs_dir: str = ""
    instructions_dir: str = ""
    auth_backup_dir: str = ""
    claude_cli_path: str = ""

    def ensure_directories(self) -> None:
        """Create the agents, logs, instructions and auth backup directories."""
        for directory in (
            self.cloud_code_agents_dir,
            self.logs_dir,
            self.instructions_dir,
            self.auth_backup_dir,
        ):
            try:
                os.makedirs(directory, mode=0o750, exist_ok=True)
            except OSError as exc:
                raise ConfigError(f"failed to create directory {directory}: {exc}") from exc


@dataclass
class EffectiveConfig:
    """The configuration values actually in force."""

    max_processes: int
    max_memory_mb: int
    max_cpu_percent: float
    log_level: str
    claude_cli_path: str
    instructions_dir: str
    working_dir: str
    config_dir: str
    log_file: str
    auth_backup_dir: str
    startup_timeout: timedelta
    shutdown_timeout: timedelta
    process_timeout: timedelta
    restart_delay: timedelta
    health_check_interval: timedelta
    auth_check_interval: timedelta
    max_restart_attempts: int
    session_name: str
    default_layout: str
    auto_attach: bool
    pane_count: int
    ide_backup_enabled: bool
    send_command: str
    binary_name: str
    dev_count: int
    po_instruction_file: str
    manager_instruction_file: str
    dev_instruction_file: str


@dataclass
class UnifiedConfig:
    """Paths, team configuration and manager settings together."""

    paths: ConfigPaths
    team: TeamConfig
    main: Config

    def effective_config(self) -> EffectiveConfig:
        """The effective values; the team configuration takes precedence."""
        return EffectiveConfig(**{item.name: getattr(self.team, item.name) for item in fields(EffectiveConfig)})


def get_unified_config_paths(home: str | None = None) -> ConfigPaths:
    """Standard configuration locations under ``home``; relative ones if there is no home."""
    home = _home_or_none(home)
    if home is None:
        return ConfigPaths(
            claude_dir=".claude",
            cloud_code_agents_dir=".claude-code-agents",
            team_config_path=_HOME_CONFIG_NAME,
            main_config_path="manager.json",
            logs_dir="logs",
            instructions_dir="instructions",
            auth_backup_dir="auth_backup",
        )
    claude_dir = os.path.join(home, ".claude")
    agents_dir = os.path.join(claude_dir, "claude-code-agents")
    return ConfigPaths(
        claude_dir=claude_dir,
        cloud_code_agents_dir=agents_dir,
        team_config_path=os.path.join(agents_dir, "agents.conf"),
        main_config_path=os.path.join(agents_dir, "manager.json"),
        logs_dir=os.path.join(agents_dir, "logs"),
        instructions_dir=os.path.join(agents_dir, "instructions"),
        auth_backup_dir=os.path.join(agents_dir, "auth_backup"),
        claude_cli_path=os.path.join(claude_dir, "local", "claude"),
    )


def load_unified_config(home: str | None = None, working_dir: str | None = None) -> UnifiedConfig:
    """Create the standard directories and load both configuration files."""
    paths = get_unified_config_paths(home)
    try:
        paths.ensure_directories()
    except ConfigError as exc:
        raise ConfigError(f"failed to ensure directories: {exc}") from exc
    try:
        team = load_team_config_from_path(paths.team_config_path, home, working_dir)
    except ConfigError as exc:
        raise ConfigError(f"failed to load team config: {exc}") from exc
    try:
        main = load_config(paths.main_config_path, home)
    except (ConfigError, OSError) as exc:
        raise ConfigError(f"failed to load main config: {exc}") from exc
    return UnifiedConfig(paths=paths, team=team, main=main)


def get_team_config_path(home: str | None = None) -> str:
    """The team configuration file to use: agents dir, then home, then current directory."""
    home = _home_or_none(home)
    if home is None:
        return _HOME_CONFIG_NAME
    agents_config = os.path.join(home, ".claude", "claude-code-agents", "agents.conf")
    for candidate in (agents_config, os.path.join(home, _HOME_CONFIG_NAME), _HOME_CONFIG_NAME):
        if os.path.exists(candidate):
            return candidate
    return agents_config


def load_team_config(home: str | None = None, working_dir: str | None = None) -> TeamConfig:
    """Load the team configuration from its standard location."""
    return load_team_config_from_path(get_team_config_path(home), home, working_dir)


def _write_private(path: str, text: str) -> None:
    descriptor = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(descriptor, "w", encoding="utf-8") as handle:
        handle.write(text)


class TeamConfigLoader:
    """Loads and saves one team configuration file and resolves its instruction files."""

    def __init__(self, config_path: str, home: str | None = None, working_dir: str | None = None) -> None:
        self.config_path = config_path
        self.home = home
        self.working_dir = working_dir
        self.instruction_resolver: InstructionResolver | None = None
        self.validator: InstructionValidator | None = None

    def load_team_config(self) -> TeamConfig:
        """Load the file, set up instruction resolution and normalise the result."""
        config = load_team_config_from_path(self.config_path, self.home, self.working_dir)
        self.instruction_resolver = InstructionResolver(config)
        self.validator = InstructionValidator(config.strict_validation)
        self._normalize(config)
        return config

    @staticmethod
    def _normalize(config: TeamConfig) -> None:
        if config.instruction_config is None and (
            config.po_instruction_file or config.manager_instruction_file or config.dev_instruction_file
        ):
            config.instruction_config = InstructionConfig(
                base=InstructionRoleConfig(
                    po_instruction_path=config.po_instruction_file,
                    manager_instruction_path=config.manager_instruction_file,
                    dev_instruction_path=config.dev_instruction_file,
                ),
                global_config=InstructionGlobalConfig(
                    default_extension=".md",
                    cache_enabled=True,
                    cache_ttl=timedelta(minutes=5),
                ),
            )
        if not config.fallback_instruction_dir:
            config.fallback_instruction_dir = config.instructions_dir

    def save_team_config(self, config: TeamConfig) -> None:
        """Write ``config`` to the loader's file in the agents file format."""
        parent = os.path.dirname(self.config_path)
        if parent:
            try:
                os.makedirs(parent, mode=0o750, exist_ok=True)
            except OSError as exc:
                raise ConfigError(f"failed to create config directory: {exc}") from exc
        _write_private(self.config_path, render_team_config(config))

    def resolve_instruction_path(self, role: str) -> str:
        """Resolve the instruction file of ``role``; the configuration must be loaded first."""
        if self.instruction_resolver is None:
            raise ConfigError("instruction resolver not initialized")
        return self.instruction_resolver.resolve_instruction_path(role)

    def validate_instruction_config(self) -> ValidationResult:
        """Reload the configuration and validate its instruction paths."""
        if self.validator is None:
            return ValidationResult(
                is_valid=False,
                errors=[ValidationProblem(message="validator not initialized", code="VALIDATOR_NOT_INITIALIZED")],
            )
        try:
            config = self.load_team_config()
        except ConfigError as exc:
            return ValidationResult(
                is_valid=False,
                errors=[ValidationProblem(message=str(exc), code="CONFIG_LOAD_FAILED")],
            )
        return self.validator.validate_config(config)