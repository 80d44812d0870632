# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for the language server."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import CHECKER_EXECUTABLE, DEFAULT_MAX_PROBLEMS, MAX_PROBLEMS_KEY, SETTINGS_SECTION


class LogLevel(StrEnum):
    """Log thresholds accepted on the command line."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class LinterSettings(BaseModel):
    """Client-side settings delivered through ``workspace/didChangeConfiguration``.

    ``max_number_of_problems`` is accepted and reported but published batches
    are not truncated to it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    max_number_of_problems: int = Field(default=DEFAULT_MAX_PROBLEMS, alias=MAX_PROBLEMS_KEY)

    @field_validator("max_number_of_problems", mode="before")
    @classmethod
    def _default_when_absent(cls, value: object) -> object:
        """Treat ``None`` the same as an omitted value."""

        return DEFAULT_MAX_PROBLEMS if value is None else value

    @field_validator("max_number_of_problems", mode="after")
    @classmethod
    def _default_when_not_positive(cls, value: int) -> int:
        """Replace zero and negative limits with the default."""

        return value if value > 0 else DEFAULT_MAX_PROBLEMS

    @classmethod
    def from_client_settings(cls, raw: object) -> LinterSettings:
        """Extract the linter section from a client configuration payload.

        Args:
            raw: ``settings`` member of the notification; usually a mapping
                holding an ``ansibleLinter`` section, possibly ``None``.

        Returns:
            LinterSettings: Parsed settings, or defaults when the section is
            missing.

        Raises:
            ConfigError: If the section is present but malformed.
        """

        if not isinstance(raw, Mapping):
            return cls()
        section = raw.get(SETTINGS_SECTION)
        if section is None:
            return cls()
        if not isinstance(section, Mapping):
            raise ConfigError(f"'{SETTINGS_SECTION}' settings must be an object, got {type(section).__name__}")
        try:
            return cls.model_validate(dict(section))
        except ValidationError as exc:
            raise ConfigError(f"invalid '{SETTINGS_SECTION}' settings: {exc}") from exc


class ServerConfig(BaseModel):
    """Process-level options chosen when the server is launched."""

    model_config = ConfigDict(validate_assignment=True)

    executable: str = CHECKER_EXECUTABLE
    log_level: LogLevel = LogLevel.INFO


__all__ = ["ConfigError", "LinterSettings", "LogLevel", "ServerConfig"]
