"""Front matter rules: presence, parseability, required fields and types."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from postlint.config.settings import Severity
from postlint.rules.base import Violation, registry
from postlint.utils.datetime_utils import parse_datetime_flexible
from postlint.utils.exceptions import DateTimeError

if TYPE_CHECKING:
    from postlint.models.post import Post
    from postlint.rules.base import LintContext

STRING_FIELDS = ("image",)


@registry.rule(
    "frontmatter-missing",
    "Post does not open with a '---' front matter block",
    Severity.ERROR,
    requires_metadata=False,
)
def check_frontmatter_missing(post: Post, context: LintContext) -> Iterator[Violation]:
    if not post.has_frontmatter:
        yield Violation("Missing front matter block", post.path, line=1)


@registry.rule(
    "frontmatter-invalid",
    "Front matter is unterminated, not YAML, or not a mapping",
    Severity.ERROR,
    requires_metadata=False,
)
def check_frontmatter_invalid(post: Post, context: LintContext) -> Iterator[Violation]:
    if post.has_frontmatter and post.parse_error is not None:
        yield Violation(f"Invalid front matter: {post.parse_error}", post.path, line=1)


@registry.rule("field-missing", "A required front matter field is absent", Severity.ERROR)
def check_field_missing(post: Post, context: LintContext) -> Iterator[Violation]:
    for name in context.config.frontmatter.required:
        if name not in post.metadata or post.metadata[name] is None:
            yield Violation(f"Missing required field '{name}'", post.path, details={"field": name})


@registry.rule("field-empty", "A text field is empty or not a string", Severity.ERROR)
def check_field_empty(post: Post, context: LintContext) -> Iterator[Violation]:
    for name in context.config.frontmatter.non_empty:
        value = post.metadata.get(name)
        if value is None:
            continue  # field-missing covers absence
        if not isinstance(value, str):
            yield Violation(
                f"Field '{name}' must be a string, got {type(value).__name__}",
                post.path,
                details={"field": name, "type": type(value).__name__},
            )
        elif not value.strip():
            yield Violation(f"Field '{name}' is empty", post.path, details={"field": name})


@registry.rule(
    "field-type",
    "Tag fields are not strings or lists of strings; image is not a string",
    Severity.ERROR,
)
def check_field_type(post: Post, context: LintContext) -> Iterator[Violation]:
    for name in context.config.frontmatter.list_fields:
        value = post.metadata.get(name)
        if value is None or isinstance(value, str):
            continue
        if not isinstance(value, list):
            yield Violation(
                f"Field '{name}' must be a string or a list of strings, got {type(value).__name__}",
                post.path,
                details={"field": name, "type": type(value).__name__},
            )
            continue
        bad = [item for item in value if not isinstance(item, str)]
        if bad:
            yield Violation(
                f"Field '{name}' contains non-string entries: {', '.join(repr(item) for item in bad)}",
                post.path,
                details={"field": name, "entries": [repr(item) for item in bad]},
            )

    for name in STRING_FIELDS:
        value = post.metadata.get(name)
        if value is not None and not isinstance(value, str):
            yield Violation(
                f"Field '{name}' must be a path string, got {type(value).__name__}",
                post.path,
                details={"field": name, "type": type(value).__name__},
            )


@registry.rule("timestamp-invalid", "A timestamp field does not parse", Severity.ERROR)
def check_timestamp_invalid(post: Post, context: LintContext) -> Iterator[Violation]:
    for name in context.config.frontmatter.timestamp_fields:
        value = post.metadata.get(name)
        if value is None:
            continue
        try:
            parse_datetime_flexible(value)
        except DateTimeError as exc:
            yield Violation(
                f"Field '{name}' is not a valid timestamp: {value!r}",
                post.path,
                details={"field": name, "error": str(exc)},
            )
