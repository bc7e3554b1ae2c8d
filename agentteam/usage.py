"""Help text for the command line."""

from __future__ import annotations

import sys

_USAGE_LINES = (
    "🚀 AI Parallel Development Team - Integrated Launch System",
    "",
    "Usage:",
    "  claude-code-agents <session-name> [options]",
    "  claude-code-agents [management-commands]",
    "",
    "Arguments:",
    "  session-name     tmux session name (required)",
    "  ",
    "Options:",
    "  --reset          Delete existing session and recreate",
    "  --verbose, -v    Enable verbose logging",
    "  --debug, -d      Enable debug logging",
    "  --silent, -s     Silent mode (minimize log output)",
    "  --help           Show this help",
    "",
    "Management Commands:",
    "  --list             Show running AI team sessions",
    "  --delete [name]    Delete specified session",
    "  --delete-all       Delete all AI team sessions",
    "  --show-config      Show configuration summary",
    "  --config [session] Show detailed configuration",
    "  --generate-config  Generate configuration file template",
    "    --force          Overwrite existing files",
    "  --init [ja|en]     Initialize system (create directories and config files)",
    "    --force          Overwrite existing files during initialization",
    "",
    "  --doctor           Run system health check",
    "",
    "Examples:",
    "  claude-code-agents myproject               # Launch integrated monitoring with myproject session",
    "  claude-code-agents ai-team                 # Launch integrated monitoring with ai-team session",
    "  claude-code-agents myproject --reset       # Recreate myproject session",
    "  claude-code-agents myproject --verbose     # Launch with verbose logging",
    "  claude-code-agents myproject --silent      # Launch in silent mode",
    "  claude-code-agents --list                    # Show session list",
    "  claude-code-agents --delete myproject        # Delete myproject session",
    "  claude-code-agents --delete-all              # Delete all sessions",
    "  claude-code-agents --show-config             # Show configuration summary",
    "  claude-code-agents --config ai-team          # Show detailed configuration for ai-team session",
    "  claude-code-agents --generate-config         # Generate configuration file template",
    "  claude-code-agents --generate-config --force # Overwrite and generate configuration file",
    "  claude-code-agents --init ja                 # Initialize system with Japanese instructions",
    "  claude-code-agents --init en                 # Initialize system with English instructions",
    "  claude-code-agents --init ja --force         # Overwrite and initialize with Japanese instructions",
    "",
    "  claude-code-agents --doctor                  # Run system health check",
    "",
    "Environment Variables:",
    "  VERBOSE=true       Enable verbose logging",
    "  SILENT=true        Enable silent mode",
    "",
)


def usage_text() -> str:
    """The full help message, one line per entry, ending with a newline."""
    return "\n".join(_USAGE_LINES) + "\n"


def show_usage() -> None:
    """Print the help message to standard output, line by line."""
    out = sys.stdout
    for line in _USAGE_LINES:
        out.write(line)
        out.write("\n")
    out.flush()