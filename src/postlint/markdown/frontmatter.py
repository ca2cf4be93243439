"""Helpers for splitting YAML front matter from Markdown content."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any

import yaml
from frontmatter.default_handlers import YAMLHandler

logger = logging.getLogger(__name__)

OPENING_DELIMITER = "---"


class JekyllYAMLHandler(YAMLHandler):
    """YAML handler with Jekyll's boundaries.

    The block opens with exactly ``---`` and closes with ``---`` or ``...``.
    python-frontmatter alone also takes ``----`` rules as boundaries.
    """

    FM_BOUNDARY = re.compile(r"^(?:-{3}|\.{3})\s*$", re.MULTILINE)


_HANDLER = JekyllYAMLHandler()


@dataclass(frozen=True, slots=True)
class FrontmatterSplit:
    """Result of splitting a post into metadata and body.

    Attributes:
        metadata: Parsed mapping, empty when absent or invalid.
        body: Everything after the closing delimiter (or the whole text).
        body_start_line: 1-based line of the file on which ``body`` begins.
        has_frontmatter: Whether the text opens with a ``---`` boundary.
        error: Why the block could not be parsed, if it could not.

    """

    metadata: dict[str, Any] = field(default_factory=dict)
    body: str = ""
    body_start_line: int = 1
    has_frontmatter: bool = False
    error: str | None = None


def split_frontmatter(text: str) -> FrontmatterSplit:
    """Split ``text`` into front matter and body without ever raising.

    Uses a python-frontmatter YAML handler whose boundaries match what Jekyll
    accepts, so a post opening with a ``----`` rule has no front matter.
    """
    text = text.removeprefix("\ufeff")
    if not _HANDLER.detect(text) or text.partition("\n")[0].rstrip() != OPENING_DELIMITER:
        return FrontmatterSplit(body=text)

    try:
        raw_metadata, content = _HANDLER.split(text)
    except ValueError:
        return FrontmatterSplit(
            body=text,
            has_frontmatter=True,
            error="front matter block is not terminated by a closing '---' or '...' line",
        )

    body_start_line = text.count("\n", 0, len(text) - len(content)) + 1

    try:
        loaded = _HANDLER.load(raw_metadata)
    except yaml.YAMLError as exc:
        logger.debug("YAML error in front matter: %s", exc)
        return FrontmatterSplit(
            body=content,
            body_start_line=body_start_line,
            has_frontmatter=True,
            error=f"front matter is not valid YAML: {_one_line(exc)}",
        )

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        return FrontmatterSplit(
            body=content,
            body_start_line=body_start_line,
            has_frontmatter=True,
            error=f"front matter must be a mapping, got {type(loaded).__name__}",
        )

    return FrontmatterSplit(
        metadata=dict(loaded),
        body=content,
        body_start_line=body_start_line,
        has_frontmatter=True,
    )


def _one_line(exc: Exception) -> str:
    return " ".join(str(exc).split())


__all__ = ["FrontmatterSplit", "split_frontmatter"]
