"""Custom exceptions for configuration handling."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from postlint.exceptions import PostlintError


class ConfigError(PostlintError):
    """Base exception for all configuration-related errors."""


class ConfigValidationError(ConfigError):
    """Raised when the configuration file fails validation."""

    def __init__(self, config_path: Path, errors: Sequence[dict[str, Any]] | None = None) -> None:
        self.config_path = config_path
        self.errors = list(errors or [])
        super().__init__(f"Configuration {config_path} failed validation with {len(self.errors)} error(s).")


class ConfigParseError(ConfigError):
    """Raised when the configuration file is not valid TOML."""

    def __init__(self, config_path: Path, reason: str) -> None:
        self.config_path = config_path
        self.reason = reason
        super().__init__(f"Cannot parse {config_path}: {reason}")


class ConfigExistsError(ConfigError):
    """Raised when ``init`` would overwrite an existing configuration."""

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        super().__init__(f"Configuration already exists at {config_path} (use --force to overwrite)")
