"""Configuration, instruction resolution and diagnostics for a team of coding agents."""

__version__ = "0.1.0"
__all__ = [
    "cli",
    "diagnostics",
    "generator",
    "paths",
    "resolver",
    "settings",
    "team_config",
    "unified",
    "usage",
    "validator",
]