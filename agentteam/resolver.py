"""Resolution of the instruction file to use for each role, with caching and fallbacks."""

from __future__ import annotations

import os
import threading

from agentteam.paths import PathResolver
from agentteam.team_config import TeamConfig
from agentteam.validator import InstructionValidator, ValidationResult

_DEV_ROLES = frozenset({"dev", "dev1", "dev2", "dev3", "dev4"})
_AVAILABLE_ROLES = ("po", "manager", "dev", "dev1", "dev2", "dev3", "dev4")


def _join(*parts: str) -> str:
    """Join path elements, treating later absolute elements as plain components."""
    present = [part for part in parts if part]
    if not present:
        return ""
    return os.path.normpath(os.sep.join(present))


def _pick(role: str, po: str, manager: str, dev: str) -> str:
    if role == "po":
        return po
    if role == "manager":
        return manager
    if role in _DEV_ROLES:
        return dev
    return ""


class InstructionResolver:
    """Finds the instruction file for a role, trying several configured sources in turn."""

    def __init__(self, config: TeamConfig) -> None:
        self.config = config
        self._paths = PathResolver(config.instructions_dir)
        self._validator = InstructionValidator(config.strict_validation)
        self._cache: dict[str, str] = {}
        self._lock = threading.Lock()

    def resolve_instruction_path(self, role: str) -> str:
        """Resolve the instruction file for ``role`` in the configured environment."""
        return self.resolve_instruction_path_with_env(role, self.config.environment)

    def resolve_instruction_path_with_env(self, role: str, environment: str) -> str:
        """Resolve the instruction file for ``role`` in ``environment``."""
        key = f"{role}:{environment}"
        with self._lock:
            cached = self._cache.get(key, "")
        if cached:
            return cached
        resolved = self._resolve_with_fallback(role, environment)
        with self._lock:
            self._cache[key] = resolved
        return resolved

    def _existing(self, path: str) -> str | None:
        try:
            resolved = self._paths.resolve_path(path)
        except ValueError:
            return None
        return resolved if self._validator.validate_file_exists(resolved) else None

    def _resolve_with_fallback(self, role: str, environment: str) -> str:
        # Order: environment config, base config, legacy file names, default name.
        candidates = []
        env_path = self._environment_path(role, environment)
        if env_path:
            candidates.append(env_path)
        base_path = self._base_path(role)
        if base_path:
            candidates.append(base_path)
        legacy_path = self._legacy_path(role)
        if legacy_path:
            candidates.append(_join(self.config.instructions_dir, legacy_path))

        fallback_dir = self.config.fallback_instruction_dir or self.config.instructions_dir
        default_full = _join(fallback_dir, self._default_path(role))
        candidates.append(default_full)

        for candidate in candidates:
            found = self._existing(candidate)
            if found is not None:
                return found
        # Nothing exists: hand back the default location anyway.
        return self._paths.resolve_path(default_full)

    def _environment_path(self, role: str, environment: str) -> str:
        instruction_config = self.config.instruction_config
        if instruction_config is None or not environment:
            return ""
        env = instruction_config.environments.get(environment)
        if env is None:
            return ""
        return _pick(role, env.po_instruction_path, env.manager_instruction_path, env.dev_instruction_path)

    def _base_path(self, role: str) -> str:
        instruction_config = self.config.instruction_config
        if instruction_config is None:
            return ""
        base = instruction_config.base
        return _pick(role, base.po_instruction_path, base.manager_instruction_path, base.dev_instruction_path)

    def _legacy_path(self, role: str) -> str:
        return _pick(
            role,
            self.config.po_instruction_file,
            self.config.manager_instruction_file,
            self.config.dev_instruction_file,
        )

    def _default_path(self, role: str) -> str:
        extension = ".md"
        instruction_config = self.config.instruction_config
        if instruction_config is not None and instruction_config.global_config.default_extension:
            extension = instruction_config.global_config.default_extension
        if role in _DEV_ROLES:
            return "developer" + extension
        return role + extension

    def available_roles(self) -> list[str]:
        """Roles that can be resolved by name."""
        return list(_AVAILABLE_ROLES)

    def validate_instruction_paths(self) -> ValidationResult:
        """Validate the instruction paths of the configuration."""
        return self._validator.validate_config(self.config)

    def clear_cache(self) -> None:
        """Forget all previously resolved paths."""
        with self._lock:
            self._cache.clear()