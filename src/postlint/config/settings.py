"""Configuration for postlint.

- Pydantic models for ``.postlint/postlint.toml``
- Loading and saving functions

Configuration priority (highest to lowest):
1. CLI flags (``--select``/``--ignore``, applied by the linter)
2. Environment variables (``POSTLINT_SECTION__KEY``)
3. Config file (``.postlint/postlint.toml``)
4. Defaults
"""

from __future__ import annotations

import logging
import os
import tomllib
from copy import deepcopy
from enum import Enum
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from postlint.config.exceptions import ConfigExistsError, ConfigParseError, ConfigValidationError

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".postlint"
CONFIG_FILE_NAME = "postlint.toml"
ENV_PREFIX = "POSTLINT_"

# Lexer names accepted by Rouge (Jekyll's default highlighter) that show up in
# technical blogs. Extend per site with ``code.extra_languages``.
DEFAULT_KNOWN_LANGUAGES = [
    "apache", "bash", "bat", "batch", "c", "c++", "clojure", "cmd", "coffeescript", "console",
    "cpp", "cs", "csharp", "css", "csv", "dart", "diff", "docker", "dockerfile", "elixir",
    "erb", "erlang", "go", "golang", "gradle", "graphql", "groovy", "haskell", "hcl", "html",
    "http", "ini", "java", "javascript", "jinja", "js", "json", "jsonc", "jsx", "kotlin",
    "kt", "latex", "less", "liquid", "lua", "make", "makefile", "markdown", "md", "mermaid",
    "nginx", "objc", "ocaml", "perl", "php", "plain", "plaintext", "powershell", "properties",
    "proto", "protobuf", "ps1", "py", "python", "python3", "r", "rb", "ruby", "rust", "sass",
    "scala", "scss", "sh", "shell", "shell-session", "sql", "svelte", "swift", "terraform", "tex",
    "text", "toml", "ts", "tsx", "txt", "typescript", "vb", "vim", "vue", "xml", "yaml", "yml",
    "zsh",
]  # fmt: skip


class Severity(str, Enum):
    """Finding severity levels."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class PathsSettings(BaseModel):
    """Where posts and assets live, relative to the site root."""

    posts_dirs: list[str] = Field(
        default_factory=lambda: ["_posts"],
        description="Directories scanned when no paths are given on the command line",
    )
    assets_dir: str = Field(
        default="assets",
        description="Directory that every referenced image must live under",
    )
    include: list[str] = Field(
        default_factory=lambda: ["*.md", "*.markdown"],
        description="Filename globs treated as posts",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Path globs (relative to the site root) skipped during discovery",
    )

    @field_validator("posts_dirs", "include")
    @classmethod
    def validate_not_empty(cls, v: list[str]) -> list[str]:
        if not v:
            msg = "At least one entry is required"
            raise ValueError(msg)
        return v


class FrontmatterSettings(BaseModel):
    """Which front matter fields are required and how they are typed."""

    required: list[str] = Field(
        default_factory=lambda: ["title", "excerpt", "last_modified_at"],
        description="Fields every post must define",
    )
    non_empty: list[str] = Field(
        default_factory=lambda: ["title", "excerpt"],
        description="Fields that must be non-empty strings when present",
    )
    list_fields: list[str] = Field(
        default_factory=lambda: ["categories", "tags"],
        description="Fields holding a string or a list of strings",
    )
    timestamp_fields: list[str] = Field(
        default_factory=lambda: ["last_modified_at"],
        description="Fields that must parse as timestamps",
    )


class CodeSettings(BaseModel):
    known_languages: list[str] = Field(default_factory=lambda: list(DEFAULT_KNOWN_LANGUAGES))
    extra_languages: list[str] = Field(
        default_factory=list,
        description="Additional fence languages accepted on top of known_languages",
    )

    def accepted(self) -> set[str]:
        return {lang.lower() for lang in (*self.known_languages, *self.extra_languages)}


class VocabularySettings(BaseModel):
    similarity: float = Field(
        default=0.9,
        ge=0.0,
        le=1.0,
        description="difflib ratio at which two tag spellings are reported as similar (0 disables)",
    )
    min_similar_length: int = Field(
        default=4,
        ge=1,
        description="Shorter terms are never compared for similarity",
    )


class RulesSettings(BaseModel):
    ignore: list[str] = Field(default_factory=list, description="Rule codes that never run")
    severity: dict[str, Severity] = Field(
        default_factory=dict,
        description="Per-rule severity overrides",
    )


class PostlintConfig(BaseSettings):
    """Root configuration for postlint.

    Supports environment variable overrides with the pattern
    ``POSTLINT_SECTION__KEY`` (e.g. ``POSTLINT_PATHS__ASSETS_DIR``).
    """

    paths: PathsSettings = Field(default_factory=PathsSettings)
    frontmatter: FrontmatterSettings = Field(default_factory=FrontmatterSettings)
    code: CodeSettings = Field(default_factory=CodeSettings)
    vocabulary: VocabularySettings = Field(default_factory=VocabularySettings)
    rules: RulesSettings = Field(default_factory=RulesSettings)

    model_config = SettingsConfigDict(
        extra="forbid",
        validate_assignment=True,
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
    )


# ============================================================================
# Configuration Loading and Saving
# ============================================================================


def find_postlint_config(start_dir: Path) -> Path | None:
    """Search upward for ``.postlint/postlint.toml``."""
    current = start_dir.expanduser().resolve()
    for candidate in (current, *current.parents):
        config_path = candidate / CONFIG_DIR_NAME / CONFIG_FILE_NAME
        if config_path.exists():
            return config_path
    return None


def site_root_for(config_path: Path) -> Path:
    """The site root is the directory holding ``.postlint/``."""
    return config_path.parent.parent


def _collect_env_override_paths() -> set[tuple[str, ...]]:
    env_paths: set[tuple[str, ...]] = set()
    for key in os.environ:
        if not key.startswith(ENV_PREFIX):
            continue
        parts = [part.lower() for part in key[len(ENV_PREFIX) :].split("__") if part]
        if parts:
            env_paths.add(tuple(parts))
    return env_paths


def _merge_config(
    base: dict[str, Any],
    override: dict[str, Any],
    env_override_paths: set[tuple[str, ...]],
    current_path: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Merge override into base, skipping keys provided via env vars."""
    merged = deepcopy(base)

    for key, value in override.items():
        path = (*current_path, str(key).lower())
        if path in env_override_paths:
            continue

        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_config(merged[key], value, env_override_paths, path)
        else:
            merged[key] = value

    return merged


def load_postlint_config(config_path: Path | None) -> PostlintConfig:
    """Load configuration from ``config_path``, or defaults when it is ``None``.

    Raises:
        OSError: If the file cannot be read.
        ConfigParseError: If the file is not valid TOML.
        ConfigValidationError: If the file contains invalid values.

    """
    if config_path is None:
        logger.debug("No configuration file found, using defaults")
        return PostlintConfig()

    logger.info("Loading config from %s", config_path)

    try:
        raw_config = config_path.read_text(encoding="utf-8")
    except OSError:
        logger.exception("Failed to read config from %s", config_path)
        raise

    try:
        file_data = tomllib.loads(raw_config)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    try:
        # Env values are already in the defaults dump; the merge keeps them on top.
        base_dict = PostlintConfig().model_dump(mode="json")
        merged = _merge_config(base_dict, file_data, _collect_env_override_paths())
        return PostlintConfig.model_validate(merged)
    except ValidationError as e:
        logger.error("Configuration validation failed for %s:", config_path)
        for error in e.errors():
            loc = " -> ".join(str(location_part) for location_part in error["loc"])
            logger.error("  %s: %s", loc, error["msg"])
        raise ConfigValidationError(config_path, e.errors()) from e


def save_postlint_config(config: PostlintConfig, site_root: Path, *, force: bool = False) -> Path:
    """Write ``config`` to ``<site_root>/.postlint/postlint.toml``.

    Raises:
        ConfigExistsError: If the file exists and ``force`` is False.

    """
    config_dir = site_root / CONFIG_DIR_NAME
    config_path = config_dir / CONFIG_FILE_NAME
    if config_path.exists() and not force:
        raise ConfigExistsError(config_path)

    config_dir.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(exclude_defaults=False, mode="json")
    config_path.write_text(tomli_w.dumps(data), encoding="utf-8")
    logger.debug("Saved config to %s", config_path)
    return config_path


__all__ = [
    "DEFAULT_KNOWN_LANGUAGES",
    "CodeSettings",
    "FrontmatterSettings",
    "PathsSettings",
    "PostlintConfig",
    "RulesSettings",
    "Severity",
    "VocabularySettings",
    "find_postlint_config",
    "load_postlint_config",
    "save_postlint_config",
    "site_root_for",
]
