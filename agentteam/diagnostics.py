"""Detailed health checks of the user's environment for the doctor command."""

from __future__ import annotations

import os
import platform
import shutil
import sys
from pathlib import Path

_CANDIDATE_PATHS = (
    "~/.claude/local/claude",
    "/usr/local/bin/claude",
    "/opt/homebrew/bin/claude",
)

_ERROR_SOLUTIONS = (
    ("Claude CLI executable", ("   → Please install Claude CLI",)),
    (
        "Required directory",
        (
            "   → Please create required directories",
            "      mkdir -p ~/.claude/claude-code-agents/instructions",
        ),
    ),
    ("settings.json", ("   → Please start Claude CLI and complete initial setup", "      claude")),
    ("claude.json", ("   → Please log in to Claude CLI", "      claude")),
    (
        "tmux",
        (
            "   → Please install tmux",
            "      macOS: brew install tmux",
            "      Ubuntu: sudo apt install tmux",
        ),
    ),
    ("write permission", ("   → Please check directory permissions", "      chmod 750 ~/.claude")),
    (
        "SHELL environment variable",
        ("   → Please set SHELL environment variable", "      export SHELL=/bin/bash"),
    ),
)

_WARNING_SOLUTIONS = (
    ("authentication not completed", ("   → Recommend logging in to Claude CLI", "      claude")),
    ("Authentication status check failed", ("   → Consider reinstalling Claude CLI",)),
    ("Settings file check failed", ("   → Please recreate Claude CLI settings",)),
)


def _home(home: str | None) -> str:
    return home if home is not None else str(Path.home())


def _check_file(path: str, label: str, missing: str) -> str | None:
    try:
        size = os.stat(path).st_size
    except OSError:
        return missing
    if size == 0:
        return f"{label} is empty"
    print(f"   ✅ {os.path.basename(path)}: {path} ({size} bytes)")
    return None


def validate_configuration_detailed(home: str | None = None) -> list[str]:
    """Check the CLI settings and authentication files; return the problems found."""
    try:
        home = _home(home)
    except RuntimeError:
        return ["Failed to get home directory"]
    claude_dir = os.path.join(home, ".claude")
    checks = (
        (
            os.path.join(claude_dir, "settings.json"),
            "Claude settings file (settings.json)",
            "Claude settings file (settings.json) not found",
        ),
        (
            os.path.join(claude_dir, "claude.json"),
            "Claude authentication file (claude.json)",
            "Claude authentication file (claude.json) not found",
        ),
    )
    return [problem for problem in (_check_file(*check) for check in checks) if problem]


def validate_environment_detailed(home: str | None = None) -> list[str]:
    """Check OS, write access to ``~/.claude``, dependencies and ``SHELL``; return the problems."""
    errors: list[str] = []
    print(f"   🖥️ OS: {sys.platform}")
    print(f"   🏗️ Architecture: {platform.machine()}")

    claude_dir = os.path.join(_home(home), ".claude")
    test_file = os.path.join(claude_dir, "test_write")
    try:
        descriptor = os.open(test_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(descriptor, "w", encoding="utf-8") as handle:
            handle.write("test")
    except OSError as exc:
        errors.append(f"No write permission for .claude directory: {exc}")
    else:
        try:
            os.remove(test_file)
        except OSError:
            pass
        print("   ✅ Directory write permission: OK")

    for dependency in ("tmux",):
        location = shutil.which(dependency)
        if location is None:
            errors.append(f"Dependency '{dependency}' not found")
        else:
            print(f"   ✅ Dependency {dependency}: {location}")

    shell = os.environ.get("SHELL", "")
    if not shell:
        errors.append("SHELL environment variable not set")
    else:
        print(f"   ✅ SHELL: {shell}")

    return errors


def _solutions(messages: list[str], table) -> list[str]:
    lines: list[str] = []
    for message in messages:
        for needle, advice in table:
            if needle in message:
                lines.extend(advice)
                break
    return lines


def solutions_for_errors(errors: list[str]) -> list[str]:
    """Advice lines for each recognised error, in order."""
    return _solutions(errors, _ERROR_SOLUTIONS)


def solutions_for_warnings(warnings: list[str]) -> list[str]:
    """Advice lines for each recognised warning, in order."""
    return _solutions(warnings, _WARNING_SOLUTIONS)


def find_claude_executable(home: str | None = None) -> str | None:
    """The first CLI found in the usual locations or on ``PATH``, or ``None``."""
    for candidate in _CANDIDATE_PATHS:
        if candidate.startswith("~"):
            candidate = candidate.replace("~", _home(home), 1)
        if os.path.exists(candidate):
            return candidate
    return shutil.which("claude")