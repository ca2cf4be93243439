"""Markup rules: code fences, their languages, and Liquid delimiters."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from postlint.config.settings import Severity
from postlint.rules.base import Violation, registry

if TYPE_CHECKING:
    from postlint.markdown.scanner import CodeBlock
    from postlint.models.post import Post
    from postlint.rules.base import LintContext


def _label(block: CodeBlock) -> str:
    return "highlight block" if block.kind == "highlight" else "code fence"


@registry.rule(
    "code-language-unknown",
    "A code block declares a language outside the known set",
    Severity.ERROR,
    requires_metadata=False,
    requires_body=True,
)
def check_code_language_unknown(post: Post, context: LintContext) -> Iterator[Violation]:
    accepted = context.accepted_languages
    for block in context.scan(post).code_blocks:
        if block.language is not None and block.language not in accepted:
            yield Violation(
                f"Unknown {_label(block)} language '{block.language}'",
                post.path,
                line=block.line,
                details={"language": block.language, "info": block.info},
            )


@registry.rule(
    "code-language-missing",
    "A code fence declares no language",
    Severity.WARNING,
    requires_metadata=False,
    requires_body=True,
)
def check_code_language_missing(post: Post, context: LintContext) -> Iterator[Violation]:
    for block in context.scan(post).code_blocks:
        if block.language is None:
            yield Violation(f"{_label(block).capitalize()} has no language tag", post.path, line=block.line)


@registry.rule(
    "code-fence-unclosed",
    "A code fence or highlight block is never closed",
    Severity.ERROR,
    requires_metadata=False,
    requires_body=True,
)
def check_code_fence_unclosed(post: Post, context: LintContext) -> Iterator[Violation]:
    for block in context.scan(post).code_blocks:
        if not block.closed:
            yield Violation(f"Unclosed {_label(block)}", post.path, line=block.line)


@registry.rule(
    "liquid-in-code",
    "A code block contains '{{' or '{%' outside a raw tag, which Liquid will interpret",
    Severity.WARNING,
    requires_metadata=False,
    requires_body=True,
)
def check_liquid_in_code(post: Post, context: LintContext) -> Iterator[Violation]:
    for block in context.scan(post).code_blocks:
        if block.has_liquid:
            yield Violation(
                f"{_label(block).capitalize()} contains Liquid delimiters; wrap it in {{% raw %}}...{{% endraw %}}",
                post.path,
                line=block.line,
            )


@registry.rule(
    "liquid-unclosed",
    "A '{{' or '{%' is not closed on the same line",
    Severity.WARNING,
    requires_metadata=False,
    requires_body=True,
)
def check_liquid_unclosed(post: Post, context: LintContext) -> Iterator[Violation]:
    for issue in context.scan(post).liquid_issues:
        yield Violation("Unclosed Liquid delimiter", post.path, line=issue.line, details={"text": issue.text})
