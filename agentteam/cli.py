"""Command line entry point: argument parsing and the configuration commands."""

from __future__ import annotations

import enum
import logging
import os
import shutil
import sys
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from agentteam.diagnostics import (
    find_claude_executable,
    solutions_for_errors,
    solutions_for_warnings,
    validate_configuration_detailed,
    validate_environment_detailed,
)
from agentteam.generator import ConfigGenerator, generate_config_template
from agentteam.team_config import ConfigError, TeamConfig, format_duration
from agentteam.unified import ConfigPaths, get_team_config_path, load_unified_config
from agentteam.usage import show_usage

DEFAULT_SESSION_NAME = "ai-teams"
_LANGUAGES = ("ja", "en")
_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
_DELETE_HINTS = (
    "Usage: ./claude-code-agents --delete [session-name]",
    "Session list: ./claude-code-agents --list",
)
_INIT_HINT = "Usage: ./claude-code-agents --init [ja|en] [--force]"


class UsageError(ValueError):
    """Raised when the command line cannot be understood."""

    def __init__(self, message: str, hints: tuple[str, ...] = (), show_usage: bool = False) -> None:
        super().__init__(message)
        self.message = message
        self.hints = hints
        self.show_usage = show_usage


class Action(enum.Enum):
    """What the command line asks for."""

    LAUNCH = "launch"
    HELP = "help"
    LIST = "list"
    DELETE = "delete"
    DELETE_ALL = "delete-all"
    SHOW_CONFIG = "show-config"
    SESSION_CONFIG = "config"
    GENERATE_CONFIG = "generate-config"
    INIT = "init"
    DOCTOR = "doctor"


@dataclass
class ParsedArguments:
    """The outcome of parsing the command line."""

    action: Action = Action.LAUNCH
    session_name: str = ""
    reset: bool = False
    force: bool = False
    language: str = ""
    verbose: bool = False
    silent: bool = False
    debug: bool = False


def is_valid_session_name(name: str) -> bool:
    """Whether ``name`` is non-empty and made only of ASCII letters, digits, ``-`` and ``_``."""
    if not name:
        return False
    return all(
        ("a" <= char <= "z") or ("A" <= char <= "Z") or ("0" <= char <= "9") or char in "-_"
        for char in name
    )


def _next_is_value(tokens: deque[str]) -> bool:
    return bool(tokens) and not tokens[0].startswith("--")


def parse_arguments(args: list[str]) -> ParsedArguments:
    """Parse the command line; the first management command found ends parsing."""
    result = ParsedArguments()
    tokens = deque(args)
    while tokens:
        arg = tokens.popleft()
        if arg in ("--help", "-h"):
            result.action = Action.HELP
            return result
        if arg in ("--verbose", "-v"):
            result.verbose = True
        elif arg in ("--debug", "-d"):
            result.debug = True
        elif arg in ("--silent", "-s"):
            result.silent = True
        elif arg == "--list":
            result.action = Action.LIST
            return result
        elif arg == "--delete":
            if not _next_is_value(tokens):
                raise UsageError("--delete requires a session name to delete", _DELETE_HINTS)
            result.action = Action.DELETE
            result.session_name = tokens.popleft()
            return result
        elif arg == "--delete-all":
            result.action = Action.DELETE_ALL
            return result
        elif arg == "--show-config":
            result.action = Action.SHOW_CONFIG
            return result
        elif arg == "--config":
            result.action = Action.SESSION_CONFIG
            result.session_name = tokens.popleft() if _next_is_value(tokens) else DEFAULT_SESSION_NAME
            return result
        elif arg == "--generate-config":
            result.action = Action.GENERATE_CONFIG
            if tokens and tokens[0] == "--force":
                tokens.popleft()
                result.force = True
            return result
        elif arg == "--init":
            if _next_is_value(tokens):
                language = tokens.popleft()
                if language not in _LANGUAGES:
                    raise UsageError(f"Invalid language '{language}'. Use 'ja' or 'en'", (_INIT_HINT,))
                result.language = language
            if tokens and tokens[0] == "--force":
                tokens.popleft()
                result.force = True
            if not result.language:
                raise UsageError("Language parameter required", (_INIT_HINT,))
            result.action = Action.INIT
            return result
        elif arg == "--doctor":
            result.action = Action.DOCTOR
            return result
        elif arg == "--reset":
            result.reset = True
        elif arg.startswith("--"):
            raise UsageError(f"Unknown option {arg}", show_usage=True)
        elif result.session_name:
            raise UsageError("Please specify only one session name", show_usage=True)
        else:
            result.session_name = arg
    return result


def _generate_initial_config(force_overwrite: bool, home: str | None) -> str:
    print("⚙️ Generating configuration file...")
    generator = ConfigGenerator(home)
    template = generate_config_template()
    try:
        if force_overwrite:
            generator.force_generate_config(template)
        else:
            generator.generate_config(template)
    except ConfigError as exc:
        raise ConfigError(f"configuration file generation failed: {exc}") from exc
    print("  ✅ agents.conf configuration file created")
    return generator.target_path


def generate_config_command(force_overwrite: bool = False, home: str | None = None) -> str:
    """Write a fresh ``agents.conf`` and return its path; raise ``ConfigError`` on failure."""
    print("⚙️ Configuration File Generation")
    print("====================")
    if force_overwrite:
        print("⚠️ Force overwrite mode is enabled")

    target = _generate_initial_config(force_overwrite, home)

    print("✅ Configuration file generation completed")
    print(f"📝 Generated file: {target}")
    print()
    print("💡 Next steps:")
    print("  1. Review and edit the configuration file")
    print("  2. Check system health: ./claude-code-agents --doctor")
    return target


def display_session_config(session_name: str) -> None:
    """Print the configuration summary of one session."""
    print(f"🔧 Session Configuration Details: {session_name}")
    print("=====================================")
    print(f"   Session Name:         {session_name}")
    print(f"   Display Time:         {datetime.now().strftime(_TIME_FORMAT)}")


def _home(home: str | None) -> str:
    return home if home is not None else str(Path.home())


def _path_exists(path: str) -> bool:
    return bool(path) and os.path.exists(os.path.expanduser(path))


def _is_executable(path: str) -> bool:
    expanded = os.path.expanduser(path)
    return os.path.isfile(expanded) and os.access(expanded, os.X_OK)


def _mark(ok: bool) -> str:
    return "✅" if ok else "❌"


def _print_team_config(team: TeamConfig) -> None:
    rows = (
        ("Claude CLI Path:      ", team.claude_cli_path),
        ("Instructions Dir:     ", team.instructions_dir),
        ("Working Dir:          ", team.working_dir),
        ("Config Dir:           ", team.config_dir),
        ("Log File:             ", team.log_file),
        ("Auth Backup Dir:      ", team.auth_backup_dir),
        ("Max Processes:        ", team.max_processes),
        ("Max Memory (MB):      ", team.max_memory_mb),
        ("Max CPU Percent:      ", f"{team.max_cpu_percent:.1f}%"),
        ("Log Level:            ", team.log_level),
        ("Session Name:         ", team.session_name),
        ("Default Layout:       ", team.default_layout),
        ("Auto Attach:          ", str(team.auto_attach).lower()),
        ("Pane Count:           ", team.pane_count),
        ("IDE Backup Enabled:   ", str(team.ide_backup_enabled).lower()),
        ("Send Command:         ", team.send_command),
        ("Binary Name:          ", team.binary_name),
        ("Health Check Interval: ", format_duration(team.health_check_interval)),
        ("Auth Check Interval:  ", format_duration(team.auth_check_interval)),
        ("Startup Timeout:      ", format_duration(team.startup_timeout)),
        ("Shutdown Timeout:     ", format_duration(team.shutdown_timeout)),
        ("Restart Delay:        ", format_duration(team.restart_delay)),
        ("Process Timeout:      ", format_duration(team.process_timeout)),
        ("Max Restart Attempts: ", team.max_restart_attempts),
    )
    for label, value in rows:
        print(f"   {label}{value}")


def _print_paths(paths: ConfigPaths) -> None:
    rows = (
        ("Claude Dir:           ", paths.claude_dir),
        ("Cloud Code Agents Dir: ", paths.cloud_code_agents_dir),
        ("Team Config Path:     ", paths.team_config_path),
        ("Main Config Path:     ", paths.main_config_path),
        ("Logs Dir:             ", paths.logs_dir),
        ("Instructions Dir:     ", paths.instructions_dir),
        ("Auth Backup Dir:      ", paths.auth_backup_dir),
        ("Claude CLI Path:      ", paths.claude_cli_path),
    )
    for label, value in rows:
        print(f"   {label}{value}")


def _print_system_settings(team: TeamConfig) -> None:
    print(f"   Max Processes:        {team.max_processes}")
    print(f"   Max Memory Usage:     {team.max_memory_mb} MB")
    print(f"   Max CPU Usage:        {team.max_cpu_percent:.1f}%")
    print(f"   Health Check Interval: {format_duration(team.health_check_interval)}")
    print(f"   Max Restart Attempts: {team.max_restart_attempts}")
    print(f"   Process Timeout:      {format_duration(team.process_timeout)}")
    print(f"   Startup Timeout:      {format_duration(team.startup_timeout)}")
    print(f"   Shutdown Timeout:     {format_duration(team.shutdown_timeout)}")
    print(f"   Restart Delay:        {format_duration(team.restart_delay)}")


def _print_auth_settings(team: TeamConfig) -> None:
    print(f"   Auth Check Interval:  {format_duration(team.auth_check_interval)}")
    print(f"   Auth Backup Dir:      {team.auth_backup_dir}")
    print(f"   Claude CLI Path:      {team.claude_cli_path}")


def _print_validation(paths: ConfigPaths) -> None:
    print(f"   Team Config:          {paths.team_config_path} {_mark(_path_exists(paths.team_config_path))}")
    print(f"   Instructions Dir:     {paths.instructions_dir} {_mark(_path_exists(paths.instructions_dir))}")
    print(f"   Claude CLI:           {paths.claude_cli_path} {_mark(_is_executable(paths.claude_cli_path))}")


def _show_config(home: str | None = None) -> None:
    print("🔧 AI Teams System - Configuration Details")
    print("=========================================")
    try:
        unified = load_unified_config(home)
    except (ConfigError, OSError) as exc:
        print(f"⚠️ Failed to load unified configuration: {exc}")
        print("📝 Displaying basic configuration only")
        print("\n📁 Basic Configuration Information")
        print("--------------")
        config_path = get_team_config_path(home)
        print(f"   Config File Path:     {config_path}")
        if _path_exists(config_path):
            print("   Config File Status:   ✅ Exists")
        else:
            print("   Config File Status:   ❌ Not Found")
        return

    sections = (
        ("\n📁 TeamConfig - Team Settings", "---------------------------", lambda: _print_team_config(unified.team)),
        ("\n📂 Path Configuration - Path Settings", "----------------------------------", lambda: _print_paths(unified.paths)),
        ("\n🖥️ System Settings", "-----------------------------------", lambda: _print_system_settings(unified.team)),
        ("\n🔐 Authentication Settings", "--------------------------------------", lambda: _print_auth_settings(unified.team)),
        ("\n📋 Configuration File Validation", "----------------------------------------------------", lambda: _print_validation(unified.paths)),
    )
    for title, rule, show in sections:
        print(title)
        print(rule)
        show()
    print("=========================================")
    print(f"🕐 Configuration display completed at: {datetime.now().strftime(_TIME_FORMAT)}")


def _create_system_directories(force_overwrite: bool, home: str) -> None:
    print("📁 Creating directory structure...")
    agents_dir = os.path.join(home, ".claude", "claude-code-agents")
    directories = (
        (os.path.join(home, ".claude"), "Claude base directory"),
        (agents_dir, "Claude Code Agents directory"),
        (os.path.join(agents_dir, "instructions"), "Instructions directory"),
        (os.path.join(agents_dir, "auth_backup"), "Authentication backup directory"),
        (os.path.join(agents_dir, "logs"), "Log directory"),
    )
    for path, description in directories:
        print(f"  📂 {description}: {path}")
        if os.path.exists(path):
            if not force_overwrite:
                print("     ✅ Already exists (skipped)")
                continue
            print("     ⚠️ Already exists but continuing (force mode)")
        try:
            os.makedirs(path, mode=0o750, exist_ok=True)
        except OSError as exc:
            raise ConfigError(f"directory creation failed {path}: {exc}") from exc
        print("     ✅ Creation completed")


def _initialize_system(force_overwrite: bool, language: str, home: str | None = None) -> None:
    print("🚀 Claude Code Agents System Initialization")
    print("=====================================")
    if force_overwrite:
        print("⚠️ Force overwrite mode is enabled")
    home = _home(home)
    try:
        _create_system_directories(force_overwrite, home)
    except ConfigError as exc:
        raise ConfigError(f"directory creation failed: {exc}") from exc
    _generate_initial_config(force_overwrite, home)

    agents_dir = os.path.join(home, ".claude", "claude-code-agents")
    instructions_dir = os.path.join(agents_dir, "instructions")
    print()
    print("🎉 System initialization completed!")
    print("=" * 39)
    print()
    print("📂 Created directories:")
    for name in ("", "instructions", "auth_backup", "logs"):
        print(f"  • {os.path.join(agents_dir, name) if name else agents_dir}")
    print()
    print("📝 Created files:")
    print(f"  • {agents_dir}/agents.conf")
    print()
    print("💡 Next steps:")
    print(f"  1. Place instruction files ({language}):")
    for name in ("po.md", "manager.md", "developer.md"):
        print(f"     • {instructions_dir}/{name}")
    print("  2. Check system health:")
    print("     ./claude-code-agents --doctor")
    print("  3. Authenticate with Claude CLI:")
    print("     claude auth")
    print("  4. Start the system:")
    print("     ./claude-code-agents ai-teams")
    print()


def _doctor(home: str | None = None) -> int:
    print("🏥 Starting system diagnostics...")
    print("=================================")
    errors: list[str] = []
    warnings: list[str] = []
    home = _home(home)

    print("\n📁 Validating paths...")
    path_errors: list[str] = []
    claude_path = find_claude_executable(home)
    if claude_path is None:
        path_errors.append("Claude CLI executable not found")
    else:
        print(f"   ✅ Claude CLI: {claude_path}")
    for directory in (
        os.path.join(home, ".claude"),
        os.path.join(home, ".claude", "claude-code-agents"),
        os.path.join(home, ".claude", "claude-code-agents", "instructions"),
    ):
        if os.path.exists(directory):
            print(f"   ✅ Directory check: {directory}")
        else:
            path_errors.append(f"Required directory not found: {directory}")
    if path_errors:
        errors.extend(path_errors)
    else:
        print("✅ Path validation: OK")

    print("\n⚙️ Validating configuration files...")
    config_errors = validate_configuration_detailed(home)
    if config_errors:
        errors.extend(config_errors)
    else:
        print("✅ Configuration file validation: OK")

    print("\n🖥️ Checking system environment...")
    env_errors = validate_environment_detailed(home)
    if env_errors:
        errors.extend(env_errors)
    else:
        print("✅ System environment check: OK")

    print("\n🔧 Checking tmux connection...")
    if shutil.which("tmux") is None:
        errors.append("tmux is not installed")
        print("📺 tmux availability... ❌ tmux not found")
    else:
        print("📺 tmux availability... ✅ tmux available")

    print("\n=================================")
    print("🔍 Detailed Diagnosis Results")
    print("=================================")
    if not errors and not warnings:
        print("🎉 System diagnosis complete - All checks passed")
        print(f"Diagnosis completed at: {datetime.now().strftime(_TIME_FORMAT)}")
        return 0
    if errors:
        print("\n❌ Problems detected:")
        for number, error in enumerate(errors, 1):
            print(f"   {number}. {error}")
        print("\n💡 Solutions:")
        for line in solutions_for_errors(errors):
            print(line)
    if warnings:
        print("\n⚠️ Warnings:")
        for number, warning in enumerate(warnings, 1):
            print(f"   {number}. {warning}")
        print("\n💡 Recommendations:")
        for line in solutions_for_warnings(warnings):
            print(line)
    if errors:
        print("\n❌ Critical issues found. Please apply the solutions above.")
        print(f"❌ Error: {len(errors)} issues detected during system diagnosis", file=sys.stderr)
        return 1
    print("\n✅ No critical issues found, but please review the warnings.")
    return 0


def _configure_logging(parsed: ParsedArguments) -> None:
    if parsed.debug:
        level = logging.DEBUG
    elif parsed.silent:
        level = logging.ERROR
    elif parsed.verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level)
    logging.getLogger("agentteam").setLevel(level)


def main(argv: list[str] | None = None) -> int:
    """Run the command line and return the exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        parsed = parse_arguments(args)
    except UsageError as exc:
        print(f"❌ Error: {exc.message}")
        for hint in exc.hints:
            print(hint)
        if exc.show_usage:
            show_usage()
        return 1

    _configure_logging(parsed)

    try:
        if parsed.action is Action.HELP:
            show_usage()
            return 0
        if parsed.action is Action.GENERATE_CONFIG:
            generate_config_command(parsed.force)
            return 0
        if parsed.action is Action.SESSION_CONFIG:
            display_session_config(parsed.session_name)
            return 0
        if parsed.action is Action.SHOW_CONFIG:
            _show_config()
            return 0
        if parsed.action is Action.INIT:
            _initialize_system(parsed.force, parsed.language)
            return 0
        if parsed.action is Action.DOCTOR:
            return _doctor()
    except (ConfigError, OSError) as exc:
        print(f"❌ Error: {exc}", file=sys.stderr)
        return 1

    if parsed.action is Action.LAUNCH and not parsed.session_name:
        show_usage()
        return 1
    if parsed.action is Action.LAUNCH and not is_valid_session_name(parsed.session_name):
        print(f"❌ Error: Invalid session name '{parsed.session_name}'", file=sys.stderr)
        return 1
    print(
        f"❌ Error: '{parsed.action.value}' needs tmux session management, which this tool does not provide",
        file=sys.stderr,
    )
    return 1