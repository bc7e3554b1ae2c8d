"""Resolution of configured file paths: environment variables, ``~`` and relative paths."""

from __future__ import annotations

import os
import re

_ENV_REFERENCE = re.compile(
    r"\$(?:\{(?P<braced>[^}]*)\}|(?P<open>\{)|(?P<special>[*#$@!?\-0-9])|(?P<name>[A-Za-z0-9_]+))"
)


class PathResolutionError(ValueError):
    """Raised when a path cannot be resolved."""


def _substitute(match: re.Match[str]) -> str:
    if match.group("open") is not None:
        # An unterminated "${" is dropped.
        return ""
    name = match.group("braced")
    if name is None:
        name = match.group("special") or match.group("name")
    if not name:
        return ""
    return os.environ.get(name, "")


class PathResolver:
    """Turns configured paths into clean absolute paths."""

    def __init__(self, base_dir: str = "") -> None:
        self.base_dir = base_dir

    def resolve_path(self, path: str) -> str:
        """Expand variables and ``~``, make absolute against the base directory, and normalise."""
        if not path:
            raise PathResolutionError("empty path")
        expanded = self.expand_environment_variables(path)
        try:
            tilde_expanded = self.resolve_tilde_path(expanded)
        except PathResolutionError as exc:
            raise PathResolutionError(f"tilde expansion failed: {exc}") from exc
        try:
            absolute = self.make_absolute_path(tilde_expanded, self.base_dir)
        except PathResolutionError as exc:
            raise PathResolutionError(f"absolute path conversion failed: {exc}") from exc
        return os.path.normpath(absolute)

    def expand_environment_variables(self, path: str) -> str:
        """Replace ``$NAME`` and ``${NAME}`` with their values; unset names become empty."""
        return _ENV_REFERENCE.sub(_substitute, path)

    def resolve_tilde_path(self, path: str) -> str:
        """Expand a leading ``~/`` to the user's home directory."""
        if not path.startswith("~/"):
            return path
        home = os.path.expanduser("~")
        if not home or home == "~":
            raise PathResolutionError("failed to get home directory")
        return os.path.normpath(os.path.join(home, path[2:]))

    def make_absolute_path(self, path: str, base_path: str) -> str:
        """Return ``path`` unchanged if absolute, otherwise joined onto ``base_path`` (or the cwd)."""
        if os.path.isabs(path):
            return path
        if not base_path:
            try:
                base_path = os.getcwd()
            except OSError as exc:
                raise PathResolutionError(f"failed to get current directory: {exc}") from exc
        return os.path.normpath(os.path.join(base_path, path))