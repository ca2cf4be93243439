"""Lint rules. Importing this package registers every built-in rule."""

from postlint.rules import code, frontmatter, images, vocabulary  # noqa: F401
from postlint.rules.base import (
    DuplicateRuleError,
    Finding,
    LintContext,
    Rule,
    RuleRegistry,
    RuleScope,
    UnknownRuleError,
    Violation,
    registry,
)

__all__ = [
    "DuplicateRuleError",
    "Finding",
    "LintContext",
    "Rule",
    "RuleRegistry",
    "RuleScope",
    "UnknownRuleError",
    "Violation",
    "registry",
]
