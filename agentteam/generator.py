"""Creation of the agents configuration file and its directory layout."""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path

from agentteam.team_config import ConfigError

logger = logging.getLogger(__name__)

_SUBDIRECTORIES = ("logs", "instructions", "auth_backup")
_NEXT_STEPS = (
    "💡 Next steps:",
    "   1. Edit the configuration file to match your environment",
    "   2. Run --show-config to verify your settings",
    "   3. Start the AI Teams system with your custom configuration",
)

_CONFIG_TEMPLATE = """# Claude Code Agents Configuration File
# This file was automatically generated during system initialization

# Path Configurations
CLAUDE_CLI_PATH=~/.claude/local/claude
INSTRUCTIONS_DIR=~/.claude/claude-code-agents/instructions
CONFIG_DIR=~/.claude/claude-code-agents
LOG_FILE=~/.claude/claude-code-agents/logs/manager.log
AUTH_BACKUP_DIR=~/.claude/claude-code-agents/auth_backup

# System Settings
LOG_LEVEL=info

# Tmux Settings
SESSION_NAME=ai-teams
DEFAULT_LAYOUT=integrated
AUTO_ATTACH=false
IDE_BACKUP_ENABLED=true

# Commands
SEND_COMMAND=send-agent
BINARY_NAME=claude-code-agents

# Developer Settings
DEV_COUNT=4

# Role-based Instructions
PO_INSTRUCTION_FILE=po.md
MANAGER_INSTRUCTION_FILE=manager.md
DEV_INSTRUCTION_FILE=developer.md

# Timeout Settings
HEALTH_CHECK_INTERVAL=30s
AUTH_CHECK_INTERVAL=30m
STARTUP_TIMEOUT=10s
SHUTDOWN_TIMEOUT=15s
RESTART_DELAY=5s
PROCESS_TIMEOUT=30s

# === Extended Instruction Configuration ===
# To enable dynamic instruction settings, edit the following configuration

# Environment Settings
# ENVIRONMENT=development
# STRICT_VALIDATION=false
# FALLBACK_INSTRUCTION_DIR=~/.claude/claude-code-agents/fallback

# Extended instruction settings (configurable in JSON format)
# For detailed configuration, refer to documentation/instruction-config.md
"""


def generate_config_template() -> str:
    """The content written to a freshly generated agents configuration file."""
    return _CONFIG_TEMPLATE


class ConfigGenerator:
    """Writes ``agents.conf`` under the user's agents directory."""

    def __init__(self, home: str | None = None) -> None:
        self.home = home
        self.target_path = ""
        self.backup_path = ""

    def _set_target_path(self) -> None:
        home = self.home if self.home is not None else str(Path.home())
        config_dir = os.path.join(home, ".claude", "claude-code-agents")
        self.target_path = os.path.join(config_dir, "agents.conf")
        self.backup_path = os.path.join(config_dir, f"agents.conf.backup.{int(time.time())}")
        logger.debug("Target path set: %s (backup %s)", self.target_path, self.backup_path)

    def _ensure_directory(self) -> None:
        directory = os.path.dirname(self.target_path)
        if not os.path.exists(directory):
            try:
                os.makedirs(directory, mode=0o750, exist_ok=True)
            except OSError as exc:
                raise ConfigError(f"failed to create directory {directory}: {exc}") from exc
            logger.info("Directory created: %s", directory)
        for name in _SUBDIRECTORIES:
            subdirectory = os.path.join(directory, name)
            if os.path.exists(subdirectory):
                continue
            try:
                os.makedirs(subdirectory, mode=0o750, exist_ok=True)
            except OSError as exc:
                logger.warning("Failed to create subdirectory %s: %s", subdirectory, exc)
            else:
                logger.info("Subdirectory created: %s", subdirectory)

    def _write_config_file(self, content: str) -> None:
        temp_path = self.target_path + ".tmp"
        try:
            descriptor = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(descriptor, "w", encoding="utf-8") as handle:
                handle.write(content)
        except OSError as exc:
            raise ConfigError(f"failed to write temporary file: {exc}") from exc
        try:
            os.replace(temp_path, self.target_path)
        except OSError as exc:
            try:
                os.remove(temp_path)
            except OSError as remove_exc:
                logger.warning("Failed to remove temporary file %s: %s", temp_path, remove_exc)
            raise ConfigError(f"failed to move temporary file to final location: {exc}") from exc
        logger.info("Config file generated successfully: %s", self.target_path)

    def _prepare(self) -> None:
        self._set_target_path()
        try:
            self._ensure_directory()
        except ConfigError as exc:
            raise ConfigError(f"failed to ensure directory: {exc}") from exc

    def _write(self, content: str) -> None:
        try:
            self._write_config_file(content)
        except ConfigError as exc:
            raise ConfigError(f"failed to write config file: {exc}") from exc

    def generate_config(self, template_content: str) -> None:
        """Write a new configuration file; raise ``ConfigError`` if one already exists."""
        self._prepare()
        if os.path.exists(self.target_path):
            raise ConfigError(
                "existing file check failed: config file already exists at "
                f"{self.target_path}. Use --force to overwrite or manually remove the existing file"
            )
        self._write(template_content)
        self._print_success(force=False)

    def force_generate_config(self, template_content: str) -> None:
        """Write the configuration file, moving any existing one to a timestamped backup."""
        self._prepare()
        if os.path.exists(self.target_path):
            try:
                os.replace(self.target_path, self.backup_path)
            except OSError as exc:
                raise ConfigError(f"failed to backup existing file: {exc}") from exc
            logger.info("Existing file backed up: %s", self.backup_path)
        self._write(template_content)
        self._print_success(force=True)

    def _print_success(self, force: bool) -> None:
        if force:
            print("🎉 Configuration file generated successfully! (Force mode)")
            print("=" + "=" * 55)
        else:
            print("🎉 Configuration file generated successfully!")
            print("=" + "=" * 45)
        print(f"📁 Location: {self.target_path}")
        print("📝 Content: AI Teams configuration template")
        print("🔧 Usage: Customize the settings as needed")
        if force and os.path.exists(self.backup_path):
            print(f"💾 Backup: {self.backup_path}")
        print()
        for line in _NEXT_STEPS:
            print(line)
        print()

    def validate_config_directory(self) -> None:
        """Raise ``ConfigError`` unless the configuration directory exists and is writable."""
        if not self.target_path:
            self._set_target_path()
        directory = os.path.dirname(self.target_path)
        if not os.path.exists(directory):
            raise ConfigError(f"config directory does not exist: {directory}")
        test_file = os.path.join(directory, ".write_test")
        try:
            with open(test_file, "w", encoding="utf-8") as handle:
                handle.write("test")
        except OSError as exc:
            raise ConfigError(f"no write permission in config directory: {directory}") from exc
        try:
            os.remove(test_file)
        except OSError as exc:
            logger.warning("Failed to remove test file %s: %s", test_file, exc)

    def config_info(self) -> tuple[str, bool]:
        """The configuration file path and whether it exists."""
        self._set_target_path()
        return self.target_path, os.path.exists(self.target_path)