"""Tag and category vocabulary rules.

Categories and tags share one vocabulary. Two spellings are the same term
when they have the same key: accents dropped, casefolded, and runs of
whitespace, underscores and hyphens collapsed to one hyphen. Near misses
between different keys are found with ``difflib``.
"""

from __future__ import annotations

import difflib
import re
import unicodedata
from collections import Counter
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from itertools import combinations
from pathlib import Path
from typing import TYPE_CHECKING

from postlint.config.settings import Severity
from postlint.models.post import as_terms
from postlint.rules.base import RuleScope, Violation, registry

if TYPE_CHECKING:
    from postlint.models.post import Post
    from postlint.rules.base import LintContext

_SEPARATORS_RE = re.compile(r"[\s_\-]+")


def term_key(term: str) -> str:
    """Normalize a term for comparison.

    >>> term_key("React Hooks")
    'react-hooks'
    >>> term_key("  Café_au-lait ")
    'cafe-au-lait'
    """
    decomposed = unicodedata.normalize("NFKD", term)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _SEPARATORS_RE.sub("-", stripped.casefold().strip()).strip("-")


@dataclass(slots=True)
class VocabularyEntry:
    """Every spelling of one term across the corpus."""

    key: str
    spellings: Counter[str] = field(default_factory=Counter)
    fields: set[str] = field(default_factory=set)
    posts: dict[str, list[Path]] = field(default_factory=dict)

    @property
    def canonical(self) -> str:
        """Most used spelling; ties go to the alphabetically first."""
        return min(self.spellings, key=lambda s: (-self.spellings[s], s))

    @property
    def count(self) -> int:
        return sum(self.spellings.values())

    @property
    def has_variants(self) -> bool:
        return len(self.spellings) > 1

    def add(self, spelling: str, field_name: str, path: Path) -> None:
        self.spellings[spelling] += 1
        self.fields.add(field_name)
        self.posts.setdefault(spelling, []).append(path)


def post_terms(post: Post, list_fields: Sequence[str]) -> Iterator[tuple[str, str]]:
    """Yield ``(field, term)`` for every vocabulary term of ``post``."""
    for field_name in list_fields:
        for term in as_terms(post.metadata.get(field_name)):
            yield field_name, term


def collect_vocabulary(posts: Sequence[Post], list_fields: Sequence[str]) -> dict[str, VocabularyEntry]:
    """Group every term of every post by ``term_key``, sorted by key."""
    entries: dict[str, VocabularyEntry] = {}
    for post in posts:
        for field_name, term in post_terms(post, list_fields):
            key = term_key(term)
            if not key:
                continue
            entry = entries.setdefault(key, VocabularyEntry(key=key))
            entry.add(term, field_name, post.path)
    return dict(sorted(entries.items()))


@registry.rule(
    "vocabulary-duplicate",
    "The same term is listed twice in one post, in one field or across categories and tags",
    Severity.WARNING,
)
def check_vocabulary_duplicate(post: Post, context: LintContext) -> Iterator[Violation]:
    seen: dict[str, tuple[str, str]] = {}
    for field_name, term in post_terms(post, context.config.frontmatter.list_fields):
        key = term_key(term)
        if key not in seen:
            seen[key] = (field_name, term)
            continue
        first_field, first = seen[key]
        where = field_name if first_field == field_name else f"{field_name} and {first_field}"
        yield Violation(
            f"'{term}' repeats '{first}' in {where}",
            post.path,
            details={"field": field_name, "term": term, "first": first, "first_field": first_field},
        )


@registry.rule(
    "vocabulary-variant",
    "A term is spelled differently across posts",
    Severity.WARNING,
    scope=RuleScope.CORPUS,
)
def check_vocabulary_variant(posts: Sequence[Post], context: LintContext) -> Iterator[Violation]:
    vocabulary = collect_vocabulary(posts, context.config.frontmatter.list_fields)
    for entry in vocabulary.values():
        if not entry.has_variants:
            continue
        canonical = entry.canonical
        for spelling, paths in sorted(entry.posts.items()):
            if spelling == canonical:
                continue
            for path in dict.fromkeys(paths):
                yield Violation(
                    f"'{spelling}' is spelled '{canonical}' elsewhere",
                    path,
                    details={"term": spelling, "canonical": canonical, "spellings": dict(entry.spellings)},
                )


@registry.rule(
    "vocabulary-similar",
    "Two different terms are nearly identical",
    Severity.INFO,
    scope=RuleScope.CORPUS,
)
def check_vocabulary_similar(posts: Sequence[Post], context: LintContext) -> Iterator[Violation]:
    settings = context.config.vocabulary
    if settings.similarity <= 0:
        return
    vocabulary = collect_vocabulary(posts, context.config.frontmatter.list_fields)
    keys = [key for key in vocabulary if len(key) >= settings.min_similar_length]
    for left, right in combinations(keys, 2):
        ratio = difflib.SequenceMatcher(None, left, right).ratio()
        if ratio < settings.similarity:
            continue
        # Report against the rarer term, where the fix most likely belongs.
        rare, common = sorted((vocabulary[left], vocabulary[right]), key=lambda e: (e.count, e.key))
        for path in dict.fromkeys(p for paths in rare.posts.values() for p in paths):
            yield Violation(
                f"'{rare.canonical}' looks like '{common.canonical}'",
                path,
                details={"term": rare.canonical, "similar_to": common.canonical, "ratio": round(ratio, 3)},
            )
