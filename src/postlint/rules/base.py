"""Rule model, registry and lint context.

A rule is a named check with a default severity. Post rules look at one
post at a time; corpus rules see every parsed post at once. Checks yield
``Violation`` objects and the rule stamps them with its code and the
effective severity, so check functions never deal with configuration.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from postlint.config.settings import Severity
from postlint.exceptions import PostlintError
from postlint.markdown.scanner import BodyScan, ImageRef, frontmatter_images, scan_body

if TYPE_CHECKING:
    from postlint.config.settings import PostlintConfig
    from postlint.models.post import Post

logger = logging.getLogger(__name__)


class UnknownRuleError(PostlintError):
    """Raised when a rule code (or prefix) matches no registered rule."""

    def __init__(self, code: str, available: Sequence[str]) -> None:
        self.code = code
        self.available = list(available)
        super().__init__(f"Unknown rule '{code}'. Available rules: {', '.join(self.available)}")


class DuplicateRuleError(PostlintError):
    """Raised when two rules are registered under the same code."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Rule '{code}' is already registered")


class RuleScope(str, Enum):
    POST = "post"
    CORPUS = "corpus"


@dataclass(frozen=True, slots=True)
class Violation:
    """What a check function reports; the rule turns it into a ``Finding``."""

    message: str
    path: Path
    line: int | None = None
    details: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class Finding:
    """One rule violation.

    Attributes:
        rule: Code of the rule that produced it (e.g. "field-missing")
        severity: Effective severity after configuration overrides
        message: Human-readable message
        path: Post the finding belongs to
        line: 1-based file line, when the problem has a location
        details: Optional additional details

    """

    rule: str
    severity: Severity
    message: str
    path: Path
    line: int | None = None
    details: dict[str, Any] | None = None

    def sort_key(self) -> tuple[str, int, str]:
        return (str(self.path), self.line or 0, self.rule)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule": self.rule,
            "severity": self.severity.value,
            "message": self.message,
            "path": str(self.path),
            "line": self.line,
            "details": self.details,
        }


PostCheck = Callable[["Post", "LintContext"], Iterable[Violation]]
CorpusCheck = Callable[[Sequence["Post"], "LintContext"], Iterable[Violation]]


@dataclass(frozen=True, slots=True)
class Rule:
    code: str
    summary: str
    default_severity: Severity
    scope: RuleScope
    check: Callable[..., Iterable[Violation]]
    requires_metadata: bool = True
    requires_body: bool = False

    def applies_to(self, post: Post) -> bool:
        if self.requires_metadata and not post.is_parsed:
            return False
        return not (self.requires_body and not post.body_located)

    def run(self, target: Post | Sequence[Post], context: LintContext, severity: Severity) -> list[Finding]:
        if self.scope is RuleScope.POST:
            post = target
            if not self.applies_to(post):  # type: ignore[arg-type]
                return []
            violations = self.check(post, context)
        else:
            posts = [post for post in target if self.applies_to(post)]  # type: ignore[union-attr]
            violations = self.check(posts, context)

        return [
            Finding(
                rule=self.code,
                severity=severity,
                message=v.message,
                path=v.path,
                line=v.line,
                details=v.details,
            )
            for v in violations
        ]


class RuleRegistry:
    """Registry of available rules, keyed by code."""

    def __init__(self) -> None:
        self._rules: dict[str, Rule] = {}

    def register(self, rule: Rule) -> Rule:
        if rule.code in self._rules:
            raise DuplicateRuleError(rule.code)
        self._rules[rule.code] = rule
        return rule

    def rule(
        self,
        code: str,
        summary: str,
        severity: Severity,
        *,
        scope: RuleScope = RuleScope.POST,
        requires_metadata: bool = True,
        requires_body: bool = False,
    ) -> Callable[[Callable[..., Iterable[Violation]]], Callable[..., Iterable[Violation]]]:
        """Decorator registering ``func`` as the check of a new rule."""

        def decorator(func: Callable[..., Iterable[Violation]]) -> Callable[..., Iterable[Violation]]:
            self.register(
                Rule(
                    code=code,
                    summary=summary,
                    default_severity=severity,
                    scope=scope,
                    check=func,
                    requires_metadata=requires_metadata,
                    requires_body=requires_body,
                )
            )
            return func

        return decorator

    def get(self, code: str) -> Rule:
        try:
            return self._rules[code]
        except KeyError:
            raise UnknownRuleError(code, self.codes()) from None

    def codes(self) -> list[str]:
        return sorted(self._rules)

    def list_rules(self) -> list[Rule]:
        return [self._rules[code] for code in self.codes()]

    def match(self, selector: str) -> list[Rule]:
        """Rules whose code equals ``selector`` or starts with ``selector-``."""
        if selector in self._rules:
            return [self._rules[selector]]
        matched = [rule for rule in self.list_rules() if rule.code.startswith(f"{selector}-")]
        if not matched:
            raise UnknownRuleError(selector, self.codes())
        return matched

    def select(self, select: Iterable[str] | None = None, ignore: Iterable[str] = ()) -> list[Rule]:
        """Resolve ``select``/``ignore`` selectors into the rules to run.

        Raises:
            UnknownRuleError: If any selector matches nothing.

        """
        selected = (
            {rule.code for selector in select for rule in self.match(selector)}
            if select
            else set(self._rules)
        )
        ignored = {rule.code for selector in ignore for rule in self.match(selector)}
        return [self._rules[code] for code in sorted(selected - ignored)]


@dataclass(slots=True)
class LintContext:
    """Shared state for one lint run."""

    config: PostlintConfig
    site_root: Path
    _scans: dict[Path, BodyScan] = field(default_factory=dict, repr=False)
    _languages: set[str] | None = field(default=None, repr=False)

    @property
    def assets_root(self) -> Path:
        return self.site_root / self.config.paths.assets_dir

    @property
    def accepted_languages(self) -> set[str]:
        if self._languages is None:
            self._languages = self.config.code.accepted()
        return self._languages

    def scan(self, post: Post) -> BodyScan:
        """Body scan of ``post``, computed once per run."""
        scan = self._scans.get(post.path)
        if scan is None:
            scan = scan_body(post.body, post.body_start_line)
            self._scans[post.path] = scan
        return scan

    def images(self, post: Post) -> list[ImageRef]:
        refs = frontmatter_images(post.metadata) if post.is_parsed else []
        if post.body_located:
            refs.extend(self.scan(post).images)
        return refs


registry = RuleRegistry()


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
