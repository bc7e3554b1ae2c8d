"""Validation of instruction file settings for each team role."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from agentteam.paths import PathResolutionError, PathResolver
from agentteam.team_config import TeamConfig

_VALIDATED_ROLES = ("po", "manager", "dev")


class InstructionErrorType(enum.Enum):
    """Kinds of instruction-related failure."""

    PATH_RESOLUTION = enum.auto()
    FILE_NOT_FOUND = enum.auto()
    FILE_NOT_READABLE = enum.auto()
    INVALID_CONFIG = enum.auto()
    VALIDATION_FAILED = enum.auto()
    ENVIRONMENT_NOT_FOUND = enum.auto()


class InstructionError(Exception):
    """An error concerning the instruction file of one role."""

    def __init__(
        self,
        error_type: InstructionErrorType,
        role: str,
        path: str,
        message: str,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(f"instruction error [{role}]: {message} (path: {path})")
        self.error_type = error_type
        self.role = role
        self.path = path
        self.message = message
        self.cause = cause
        self.__cause__ = cause


@dataclass
class ValidationProblem:
    """A validation error that makes the configuration invalid."""

    field: str = ""
    path: str = ""
    message: str = ""
    code: str = ""
    suggestion: str = ""


@dataclass
class ValidationWarning:
    """A validation finding that does not make the configuration invalid."""

    field: str = ""
    path: str = ""
    message: str = ""
    suggestion: str = ""


@dataclass
class ValidationInfo:
    """A purely informative validation finding."""

    field: str = ""
    path: str = ""
    message: str = ""


@dataclass
class ValidationResult:
    """Outcome of validating a whole configuration."""

    is_valid: bool = True
    errors: list[ValidationProblem] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)
    info: list[ValidationInfo] = field(default_factory=list)


@dataclass
class PathValidationResult:
    """Outcome of validating a single instruction path."""

    is_valid: bool = True
    exists: bool = False
    readable: bool = False
    error: Exception | None = None
    resolved_path: str = ""


def _configured_path(role: str, config: TeamConfig) -> str:
    if config.instruction_config is not None:
        base = config.instruction_config.base
        extended = {
            "po": base.po_instruction_path,
            "manager": base.manager_instruction_path,
            "dev": base.dev_instruction_path,
        }.get(role, "")
        if extended:
            return extended
    return {
        "po": config.po_instruction_file,
        "manager": config.manager_instruction_file,
        "dev": config.dev_instruction_file,
    }.get(role, "")


class InstructionValidator:
    """Checks that the configured instruction files exist and can be read."""

    def __init__(self, strict_mode: bool = False) -> None:
        self.strict_mode = strict_mode

    def validate_config(self, config: TeamConfig) -> ValidationResult:
        """Validate the instruction path of every role."""
        result = ValidationResult()
        for role in _VALIDATED_ROLES:
            if not self._validate_role(role, config, result):
                result.is_valid = False
        return result

    def _validate_role(self, role: str, config: TeamConfig, result: ValidationResult) -> bool:
        field_name = f"{role}_instruction_path"
        path = _configured_path(role, config)
        if not path:
            result.warnings.append(
                ValidationWarning(
                    field=field_name,
                    message="instruction path not configured",
                    suggestion=f"Configure instruction path for {role} role",
                )
            )
            return True

        checked = self.validate_instruction_path(role, path)
        if checked.error is not None:
            result.errors.append(
                ValidationProblem(
                    field=field_name,
                    path=checked.resolved_path,
                    message=str(checked.error),
                    code="PATH_RESOLUTION_FAILED",
                )
            )
            return False
        if not checked.exists and self.strict_mode:
            result.errors.append(
                ValidationProblem(
                    field=field_name,
                    path=checked.resolved_path,
                    message="instruction file not found",
                    code="FILE_NOT_FOUND",
                    suggestion="Create the instruction file or update the path",
                )
            )
            return False
        if not checked.exists:
            result.warnings.append(
                ValidationWarning(
                    field=field_name,
                    path=checked.resolved_path,
                    message="instruction file not found",
                    suggestion="Create the instruction file or update the path",
                )
            )
        elif not checked.readable:
            result.warnings.append(
                ValidationWarning(
                    field=field_name,
                    path=checked.resolved_path,
                    message="instruction file not readable",
                    suggestion="Check file permissions",
                )
            )
        else:
            result.info.append(
                ValidationInfo(
                    field=field_name,
                    path=checked.resolved_path,
                    message="instruction file found and accessible",
                )
            )
        return True

    def validate_instruction_path(self, role: str, path: str) -> PathValidationResult:
        """Resolve ``path`` against the current directory and check the file behind it."""
        result = PathValidationResult()
        if not path:
            return result
        try:
            resolved = PathResolver("").resolve_path(path)
        except PathResolutionError as exc:
            result.is_valid = False
            result.error = exc
            return result
        result.resolved_path = resolved
        result.exists = self.validate_file_exists(resolved)
        if result.exists:
            result.readable = self.validate_file_readable(resolved)
        return result

    def validate_file_exists(self, path: str) -> bool:
        """Whether anything exists at ``path``."""
        try:
            import os

            os.stat(path)
        except (OSError, ValueError):
            return False
        return True

    def validate_file_readable(self, path: str) -> bool:
        """Whether ``path`` can be opened and read; an empty file counts as readable."""
        try:
            with open(path, "rb") as handle:
                handle.read(1)
        except (OSError, ValueError):
            return False
        return True