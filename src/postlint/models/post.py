"""The Post model: one Markdown file with its front matter."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from postlint.exceptions import PostlintError
from postlint.markdown.frontmatter import split_frontmatter
from postlint.utils.datetime_utils import parse_datetime_flexible
from postlint.utils.exceptions import DateTimeError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_JEKYLL_DATE_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}-")


class PostReadError(PostlintError):
    """Raised when a post file cannot be read or decoded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")


def as_terms(value: Any) -> tuple[str, ...]:
    """Normalize a ``categories``/``tags`` value into a tuple of terms.

    A scalar string is one term; lists keep their non-blank string items.
    Anything else yields no terms (the ``field-type`` rule reports it).
    """
    if isinstance(value, str):
        return (value.strip(),) if value.strip() else ()
    if isinstance(value, list | tuple):
        return tuple(item.strip() for item in value if isinstance(item, str) and item.strip())
    return ()


@dataclass(frozen=True, slots=True)
class Post:
    """A blog post as found on disk.

    Loading never fails on malformed metadata; the problem is kept in
    ``parse_error`` so the rules can report it next to everything else.
    """

    path: Path
    metadata: dict[str, Any] = field(default_factory=dict)
    body: str = ""
    body_start_line: int = 1
    has_frontmatter: bool = False
    parse_error: str | None = None

    @classmethod
    def from_text(cls, path: Path, text: str) -> Post:
        split = split_frontmatter(text)
        return cls(
            path=path,
            metadata=split.metadata,
            body=split.body,
            body_start_line=split.body_start_line,
            has_frontmatter=split.has_frontmatter,
            parse_error=split.error,
        )

    @classmethod
    def load(cls, path: Path, *, encoding: str = "utf-8") -> Post:
        """Read and split a post file.

        Raises:
            PostReadError: If the file cannot be read or is not valid text.

        """
        try:
            text = path.read_text(encoding=encoding)
        except UnicodeDecodeError as exc:
            raise PostReadError(path, f"not valid {encoding}: {exc.reason}") from exc
        except OSError as exc:
            raise PostReadError(path, exc.strerror or str(exc)) from exc
        logger.debug("Loaded %s (%d chars)", path, len(text))
        return cls.from_text(path, text)

    @property
    def is_parsed(self) -> bool:
        """True when the post has a front matter block that parsed as a mapping."""
        return self.has_frontmatter and self.parse_error is None

    @property
    def body_located(self) -> bool:
        """False when an unterminated block leaves the body boundary unknown."""
        return not self.has_frontmatter or self.body_start_line > 1

    @property
    def title(self) -> Any:
        return self.metadata.get("title")

    @property
    def excerpt(self) -> Any:
        return self.metadata.get("excerpt")

    @property
    def image(self) -> Any:
        return self.metadata.get("image")

    @property
    def categories(self) -> tuple[str, ...]:
        return as_terms(self.metadata.get("categories"))

    @property
    def tags(self) -> tuple[str, ...]:
        return as_terms(self.metadata.get("tags"))

    @property
    def last_modified_at(self) -> datetime | None:
        raw = self.metadata.get("last_modified_at")
        if raw is None:
            return None
        try:
            return parse_datetime_flexible(raw)
        except DateTimeError:
            return None

    @property
    def slug(self) -> str:
        return _JEKYLL_DATE_PREFIX_RE.sub("", self.path.stem)

    def display_title(self) -> str:
        if isinstance(self.title, str) and self.title.strip():
            return self.title.strip()
        return self.slug


__all__ = ["Post", "PostReadError", "as_terms"]
