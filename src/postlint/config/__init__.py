"""Configuration package for postlint."""

from postlint.config.exceptions import ConfigError, ConfigExistsError, ConfigParseError, ConfigValidationError
from postlint.config.settings import (
    PostlintConfig,
    Severity,
    find_postlint_config,
    load_postlint_config,
    save_postlint_config,
    site_root_for,
)

__all__ = [
    "ConfigError",
    "ConfigExistsError",
    "ConfigParseError",
    "ConfigValidationError",
    "PostlintConfig",
    "Severity",
    "find_postlint_config",
    "load_postlint_config",
    "save_postlint_config",
    "site_root_for",
]
