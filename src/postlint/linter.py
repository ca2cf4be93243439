"""Discover posts, run the rules, collect the findings."""

from __future__ import annotations

import fnmatch
import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from postlint.config.settings import PostlintConfig, Severity
from postlint.exceptions import NoPostsFoundError, PostPathNotFoundError
from postlint.models.post import Post, PostReadError
from postlint.rules import Finding, LintContext, Rule, RuleScope, registry
from postlint.rules.vocabulary import VocabularyEntry, collect_vocabulary

logger = logging.getLogger(__name__)

UNREADABLE_RULE = "post-unreadable"


def default_post_paths(config: PostlintConfig, site_root: Path) -> list[Path]:
    """Configured posts directories that exist under ``site_root``."""
    candidates = [site_root / name for name in config.paths.posts_dirs]
    existing = [path for path in candidates if path.is_dir()]
    if not existing:
        raise NoPostsFoundError([str(path) for path in candidates])
    return existing


def _relative_posix(path: Path, site_root: Path) -> str:
    try:
        return path.resolve().relative_to(site_root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def _is_post_file(path: Path, config: PostlintConfig, site_root: Path) -> bool:
    if not any(fnmatch.fnmatch(path.name, pattern) for pattern in config.paths.include):
        return False
    relative = _relative_posix(path, site_root)
    return not any(fnmatch.fnmatch(relative, pattern) for pattern in config.paths.exclude)


def discover_posts(paths: Iterable[Path], config: PostlintConfig, site_root: Path) -> list[Path]:
    """Expand files and directories into a sorted list of post files.

    Files named explicitly are always kept; directories are walked recursively
    and filtered by the ``include``/``exclude`` globs.

    Raises:
        PostPathNotFoundError: If a given path does not exist.

    """
    found: set[Path] = set()
    for path in paths:
        if not path.exists():
            raise PostPathNotFoundError(str(path))
        if path.is_file():
            found.add(path)
            continue
        found.update(
            candidate
            for candidate in path.rglob("*")
            if candidate.is_file() and _is_post_file(candidate, config, site_root)
        )
    return sorted(found)


@dataclass(slots=True)
class LintReport:
    """Everything one lint run produced."""

    posts: list[Post]
    findings: list[Finding]
    rules: list[str] = field(default_factory=list)
    list_fields: list[str] = field(default_factory=lambda: ["categories", "tags"])

    @property
    def counts(self) -> dict[Severity, int]:
        counter = Counter(finding.severity for finding in self.findings)
        return {severity: counter.get(severity, 0) for severity in Severity}

    @property
    def error_count(self) -> int:
        return self.counts[Severity.ERROR]

    @property
    def warning_count(self) -> int:
        return self.counts[Severity.WARNING]

    def failed(self, *, strict: bool = False) -> bool:
        """Errors always fail the run; warnings only in strict mode."""
        return self.error_count > 0 or (strict and self.warning_count > 0)

    def exit_code(self, *, strict: bool = False) -> int:
        return 1 if self.failed(strict=strict) else 0

    def findings_for(self, path: Path) -> list[Finding]:
        return [finding for finding in self.findings if finding.path == path]

    def by_path(self) -> dict[Path, list[Finding]]:
        grouped: dict[Path, list[Finding]] = {}
        for finding in self.findings:
            grouped.setdefault(finding.path, []).append(finding)
        return grouped

    def vocabulary(self) -> dict[str, VocabularyEntry]:
        return collect_vocabulary([post for post in self.posts if post.is_parsed], self.list_fields)

    def chronological(self) -> list[Post]:
        """Posts newest first by ``last_modified_at``; undated posts last."""
        dated = [(post.last_modified_at, post) for post in self.posts]
        with_date = sorted(
            ((dt, post) for dt, post in dated if dt is not None),
            key=lambda item: (item[0], str(item[1].path)),
            reverse=True,
        )
        without_date = sorted((post for dt, post in dated if dt is None), key=lambda post: str(post.path))
        return [post for _, post in with_date] + without_date


def _severity_overrides(config: PostlintConfig) -> dict[str, Severity]:
    for code in config.rules.severity:
        registry.get(code)
    return dict(config.rules.severity)


def _run_rule(
    rule: Rule,
    target: Post | Sequence[Post],
    context: LintContext,
    overrides: dict[str, Severity],
) -> list[Finding]:
    return rule.run(target, context, overrides.get(rule.code, rule.default_severity))


def lint_posts(
    paths: Sequence[Path] | None,
    config: PostlintConfig,
    site_root: Path,
    *,
    select: Sequence[str] | None = None,
    ignore: Sequence[str] = (),
) -> LintReport:
    """Lint the posts under ``paths`` (default: the configured posts dirs).

    Raises:
        PostPathNotFoundError: If a given path does not exist.
        NoPostsFoundError: If no post files are found.
        UnknownRuleError: If a selector or configured rule code is unknown.

    """
    search = list(paths) if paths else default_post_paths(config, site_root)
    files = discover_posts(search, config, site_root)
    if not files:
        raise NoPostsFoundError([str(path) for path in search])

    rules = registry.select(select, [*config.rules.ignore, *ignore])
    overrides = _severity_overrides(config)
    post_rules = [rule for rule in rules if rule.scope is RuleScope.POST]
    corpus_rules = [rule for rule in rules if rule.scope is RuleScope.CORPUS]
    logger.debug("Running %d rule(s) over %d file(s)", len(rules), len(files))

    context = LintContext(config=config, site_root=site_root)
    posts: list[Post] = []
    findings: list[Finding] = []

    for path in files:
        try:
            post = Post.load(path)
        except PostReadError as exc:
            logger.warning("%s", exc)
            findings.append(Finding(rule=UNREADABLE_RULE, severity=Severity.ERROR, message=exc.reason, path=path))
            continue
        posts.append(post)
        for rule in post_rules:
            findings.extend(_run_rule(rule, post, context, overrides))

    for rule in corpus_rules:
        findings.extend(_run_rule(rule, posts, context, overrides))

    findings.sort(key=Finding.sort_key)
    logger.info("Linted %d post(s), %d finding(s)", len(posts), len(findings))
    return LintReport(
        posts=posts,
        findings=findings,
        rules=[rule.code for rule in rules],
        list_fields=list(config.frontmatter.list_fields),
    )


def load_posts(paths: Sequence[Path] | None, config: PostlintConfig, site_root: Path) -> LintReport:
    """Load posts without running any rule (for catalogue commands)."""
    search = list(paths) if paths else default_post_paths(config, site_root)
    posts: list[Post] = []
    findings: list[Finding] = []
    for path in discover_posts(search, config, site_root):
        try:
            posts.append(Post.load(path))
        except PostReadError as exc:
            logger.warning("%s", exc)
            findings.append(Finding(rule=UNREADABLE_RULE, severity=Severity.ERROR, message=exc.reason, path=path))
    return LintReport(posts=posts, findings=findings, list_fields=list(config.frontmatter.list_fields))


__all__ = [
    "UNREADABLE_RULE",
    "LintReport",
    "default_post_paths",
    "discover_posts",
    "lint_posts",
    "load_posts",
]
